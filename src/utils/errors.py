"""
Error taxonomy for the house map API.

Service functions raise these; ``standard_lambda_handler`` turns them into
JSON error responses using each class's ``status_code``.
"""


class HouseMapError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str, missing_fields=None):
        super().__init__(message)
        self.message = message
        self.missing_fields = missing_fields


class ValidationError(HouseMapError):
    """Missing or malformed input."""

    status_code = 400


class NotFoundError(HouseMapError):
    """The referenced house does not exist."""

    status_code = 404


class ForbiddenError(HouseMapError):
    """The caller does not own the house it is trying to modify."""

    status_code = 403


class InternalError(HouseMapError):
    """Store or unexpected failure."""

    status_code = 500
