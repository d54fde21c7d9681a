"""Exception types raised while analyzing contracts."""


class ContractAnalysisError(Exception):
    """Base class for all contract analysis errors."""


class ExtractionError(ContractAnalysisError):
    """No JSON object could be located in the model output."""


class ParseError(ContractAnalysisError):
    """The extracted candidate is not valid JSON."""

    def __init__(self, message, candidate="", cause=None):
        super().__init__(message)
        self.candidate = candidate
        self.cause = cause


class ValidationError(ContractAnalysisError):
    """The parsed value does not have the shape of an analysis result."""


class ConfigurationError(ContractAnalysisError):
    """The server is missing settings required to call the model."""


class ModelResponseError(ContractAnalysisError):
    """The model call failed or returned something other than text."""


class ProviderError(ContractAnalysisError):
    """A model provider failure that is reported to the caller as-is."""
    status_code = 502
    public_message = "Model provider error"


class ProviderAuthError(ProviderError):
    status_code = 401
    public_message = "Unauthorized - Invalid API key"


class ProviderRateLimitError(ProviderError):
    status_code = 429
    public_message = "Rate limit exceeded - Please try again later"


class ProviderTimeoutError(ProviderError):
    status_code = 408
    public_message = "Request timeout - Please try again"


class EmptyResponseError(ModelResponseError):
    """The model answered without a usable text block."""
