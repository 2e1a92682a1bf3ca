class LifecycleError(Exception):
    """Base class for failures surfaced to the caller as typed errors."""

    status_code = 400

    def __init__(self, detail: str | dict):
        super().__init__(detail if isinstance(detail, str) else str(detail))
        self.detail = detail


class NotFound(LifecycleError):
    status_code = 404


class Forbidden(LifecycleError):
    status_code = 403


class InvalidState(LifecycleError):
    status_code = 409


class ValidationError(LifecycleError):
    status_code = 422


class RecipientNotFound(LifecycleError):
    status_code = 404


class InvalidCredentials(LifecycleError):
    status_code = 401


class TooManyAttempts(LifecycleError):
    status_code = 429

    def __init__(self, retry_after_seconds: float):
        super().__init__({"error": "too_many_attempts", "retry_after_seconds": retry_after_seconds})
        self.retry_after_seconds = retry_after_seconds


class Conflict(LifecycleError):
    status_code = 409
