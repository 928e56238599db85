"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for enrichment failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class ProviderError(PipelineError):
    """Raised when the geocoding provider gives no usable answer."""

    error_code = "PROVIDER_ERROR"


class MissingAddressError(PipelineError):
    """Raised when a record has no address-bearing fields."""

    error_code = "MISSING_ADDRESS"


class MalformedDocumentError(PipelineError):
    """Raised when a response document has no `responses` list."""

    error_code = "MALFORMED_DOCUMENT"


class FileIOError(PipelineError):
    """Raised when reading, backing up or rewriting a data file fails."""

    error_code = "FILE_IO_ERROR"


class ValidationFailure(PipelineError):
    """Raised when the API key is absent or the startup lookup fails."""

    error_code = "VALIDATION_FAILURE"
