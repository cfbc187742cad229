from restroom_catalog.common.scoring import max_count_for_zoom, priority_score


def test_priority_score_uses_default_ladder():
    assert priority_score("特優級") == 4
    assert priority_score("優級") == 3
    assert priority_score("良級") == 2
    assert priority_score("普級") == 1
    assert priority_score("Excellent") == 4
    assert priority_score("") == 0
    assert priority_score("普通級") == 0


def test_priority_score_honours_custom_ladder():
    assert priority_score("Gold", {"Gold": 9}) == 9
    assert priority_score("特優級", {"Gold": 9}) == 0


def test_max_count_for_zoom_never_reduces_limit():
    assert [max_count_for_zoom(level, 100) for level in range(1, 8)] == [100] * 7
