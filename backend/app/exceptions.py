"""Domain-level exceptions so services can signal HTTP-ish failures."""


class AppBaseException(Exception):
    """Domain-level base exception so we can map to JSON responses easily."""

    status_code = 500

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail


class ValidationFailed(AppBaseException):
    """A required field is missing or malformed."""

    status_code = 400


class NotFound(AppBaseException):
    status_code = 404


class StorageError(AppBaseException):
    """Writing, reading or removing an object in the bucket failed."""
