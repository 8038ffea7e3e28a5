"""Configuration-related exceptions for stagesearch."""

from .base import StageSearchError


class ConfigurationError(StageSearchError):
    """Configuration or wiring errors.

    Fatal to the single operation that hit it; a bulk reindex logs it
    against the record and moves on.
    """

    error_code = "SS_CFG_001"


class UnmappableTypeError(ConfigurationError):
    """A record type has no usable type name and cannot be mapped."""

    error_code = "SS_CFG_002"


class MissingSchemaError(ConfigurationError):
    """No field mapping could be derived for the index."""

    error_code = "SS_CFG_003"


class InvalidConfigurationError(ConfigurationError):
    """Configuration value is invalid."""

    error_code = "SS_CFG_004"
