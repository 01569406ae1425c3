"""Contains exceptions raised by the issue service."""


class ServiceError(Exception):
    """Raised when an issue tracker operation fails (network, authentication, rate limit)."""

    def __init__(self, operation: str, message: str, status_code: int | None = None) -> None:
        """Initializes the exception with the failed operation and what went wrong."""
        detail = f"{operation} failed"
        if status_code is not None:
            detail += f" with HTTP {status_code}"
        super().__init__(f"{detail}: {message}")
        self.operation = operation
        self.message = message
        self.status_code = status_code
