"""Application-wide exceptions.

Pipeline stage failures derive from ShortenError and carry the name of the
stage that failed. Storage failures live in linkword.dao.exceptions.
"""


class LinkwordError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:linkword_error'


class ShortenError(LinkwordError):
    """Base exception for failures of the shortening pipeline."""

    error_code = 'pipeline:shorten_error'
    stage = 'failed'


class InvalidInputError(ShortenError):
    """Raised when the URL to shorten is malformed or uses an unsupported scheme."""

    error_code = 'pipeline:invalid_input_error'
    stage = 'validating'


class FetchError(ShortenError):
    """Raised when the target page was reachable but rejected the request, or could not be parsed."""

    error_code = 'pipeline:fetch_error'
    stage = 'extracting'

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GenerationError(ShortenError):
    """Raised when the keyword model call fails or returns an unusable keyword."""

    error_code = 'pipeline:generation_error'
    stage = 'generating'


class DeadlineExceededError(ShortenError):
    """Raised when the caller's deadline passed before the next stage could start."""

    error_code = 'pipeline:deadline_exceeded_error'


class ConfigurationError(LinkwordError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError, KeyError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'

    def __str__(self) -> str:
        # KeyError quotes its message; keep it readable
        return str(self.args[0]) if self.args else ''


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
