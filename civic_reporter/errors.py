"""API errors raised by services and rendered as ``{"message": ..., **extra}``."""

from typing import Any

from fastapi import status


class ApiError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_body(self) -> dict[str, Any]:
        body = {"message": self.message}
        body.update({key: value for key, value in self.extra.items() if value is not None})
        return body


class BadRequestError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidLocationError(BadRequestError):
    def __init__(self):
        super().__init__("Invalid location JSON format")


class MissingFieldsError(BadRequestError):
    def __init__(self, missing: dict[str, bool]):
        super().__init__("Please fill all the required fields", missing=missing)


class InvalidDepartmentError(BadRequestError):
    def __init__(self, received: Any, valid: list[str]):
        super().__init__(
            f"Invalid department. Must be one of: {', '.join(valid)}",
            received=received,
        )


class SchemaValidationError(BadRequestError):
    def __init__(self, errors: list[str]):
        super().__init__("Validation error", errors=errors)

    @classmethod
    def from_pydantic(cls, errors: list[dict]) -> "SchemaValidationError":
        return cls([
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in errors
        ])


class DuplicateTitleError(BadRequestError):
    def __init__(self):
        super().__init__("Issue with this title already exists")


class NotAuthenticatedError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self):
        super().__init__("Not authenticated")


class ForbiddenError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalServerError(ApiError):
    """Unexpected failure; ``error`` detail is only set outside production."""

    def __init__(self, message: str = "Internal server error", error: str | None = None):
        super().__init__(message, error=error)
