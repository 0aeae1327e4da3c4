# backend/blog/exceptions.py
import logging

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, AuthenticationFailed
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class BlogError(Exception):
    """
    Base class for failures of the post lifecycle / image operations.
    Each kind maps to one HTTP status in the API layer.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal error"

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class AuthError(BlogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"


class NotFoundError(BlogError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Post not found"


class ValidationError(BlogError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid post data"


class UploadError(BlogError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Image upload failed"


class DeletionError(BlogError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Image deletion failed"


class PersistenceError(BlogError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Could not store the post"


class BlobNotFound(BlogError):
    """Raised by blob stores when the key is already gone; detach treats it as success."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Blob not found"


def _sign_in_url():
    return getattr(settings, "SIGN_IN_URL", "/auth")


def api_exception_handler(exc, context):
    """
    REST_FRAMEWORK['EXCEPTION_HANDLER']: renders BlogError subclasses as
    {"detail": ...}; 401 responses also carry the sign-in redirect target.
    """
    if isinstance(exc, BlogError):
        view = context.get("view")
        logger.info("%s in %s: %s", type(exc).__name__, type(view).__name__ if view else "?", exc.detail)
        payload = {"detail": exc.detail}
        if isinstance(exc, AuthError):
            payload["redirect"] = _sign_in_url()
        return Response(payload, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        response.data["redirect"] = _sign_in_url()
    return response
