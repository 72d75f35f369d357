"""Error taxonomy for the credibility analysis pipeline."""

from typing import Optional


class InputValidationError(ValueError):
    """Input text rejected before any analysis work starts."""


class InputTooShortError(InputValidationError):
    """Raised when the trimmed input is below the minimum length."""

    def __init__(self, min_length: int):
        super().__init__(f"Text must be at least {min_length} characters long")
        self.min_length = min_length


class InputTooLongError(InputValidationError):
    """Raised when the input exceeds the maximum length."""

    def __init__(self, max_length: int):
        super().__init__(f"Text must be less than {max_length:,} characters")
        self.max_length = max_length


class ExternalServiceError(RuntimeError):
    """An external collaborator call failed or returned unusable data."""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service


class ServiceUnavailableError(ExternalServiceError):
    """The collaborator is not configured or not initialized."""


class RateLimitExceededError(ExternalServiceError):
    """The collaborator's request quota is exhausted for the current window."""

    def __init__(self, service: str, retry_after: float = 0.0):
        super().__init__(service, f"Rate limit exceeded (retry after {retry_after:.1f}s)")
        self.retry_after = retry_after


class PipelineError(RuntimeError):
    """Fatal failure of an analysis run."""

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message if stage is None else f"[{stage}] {message}")
        self.stage = stage
