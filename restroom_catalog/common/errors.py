"""Domain errors and failure typing."""


class CatalogError(Exception):
    """Base class for catalog failures."""

    error_code = "CATALOG_ERROR"


class ConfigError(CatalogError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class DataUnavailableError(CatalogError):
    """Raised when a load collaborator cannot supply records."""

    error_code = "DATA_UNAVAILABLE"


class SourceNotFoundError(DataUnavailableError):
    """Raised when the record source does not exist."""

    error_code = "SOURCE_NOT_FOUND"


class DecodeFailedError(DataUnavailableError):
    """Raised when the record source cannot be decoded into records."""

    error_code = "DECODE_FAILED"
