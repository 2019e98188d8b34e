# Domain errors, mapped to HTTP responses in app.main

from fastapi import status


class AnalyticsError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class BadRequest(AnalyticsError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"


class Unauthorized(AnalyticsError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"


class Forbidden(AnalyticsError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFound(AnalyticsError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class InternalError(AnalyticsError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"
