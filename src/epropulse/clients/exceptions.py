"""Exceptions raised by the Content Store and Identity Provider clients."""


class StoreError(Exception):
    """Base exception for every collaborator failure."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class ConnectionError(StoreError):
    """Raised when the backend cannot be reached after all retries."""


class APIError(StoreError):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, *args, **kwargs):
        self.status_code = status_code
        super().__init__(message, *args, **kwargs)


class AuthenticationError(APIError):
    """Raised on 401/403 answers (missing, expired or invalid token)."""

    def __init__(self, message: str = "Authentication required", status_code: int = 401):
        super().__init__(message, status_code=status_code)


class RateLimitError(APIError):
    """Raised when the backend answers 429."""

    def __init__(self, message: str = "Rate limit exceeded"):
        super().__init__(message, status_code=429)


class NotFoundError(APIError):
    """Raised when the backend answers 404."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class ValidationError(StoreError):
    """Raised when returned rows do not match the expected schema."""

    def __init__(self, message: str, errors: list | None = None, *args, **kwargs):
        self.errors = errors or []
        super().__init__(message, *args, **kwargs)
