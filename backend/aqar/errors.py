"""Domain errors raised by the repositories.

Each error carries the HTTP status it maps to; ``aqar.main`` turns them into
``{"detail": ...}`` responses.
"""


class AqarError(Exception):
    status_code = 400

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class AuthorizationError(AqarError):
    status_code = 401


class ForbiddenError(AqarError):
    status_code = 403


class NotFoundError(AqarError):
    status_code = 404


class DuplicateReviewError(AqarError):
    status_code = 409


class InvalidInputError(AqarError):
    status_code = 422


class LLMError(AqarError):
    """The model call failed or returned no usable text."""

    status_code = 502
