"""
Error types shared by every app, and the one place they become HTTP responses.

Services raise these; views catch ``StorefrontError`` and hand it to
``error_response``. Anything else reaching a view is wrapped in
``InternalError`` so the client never sees a raw traceback outside DEBUG.
"""
import logging

from django.conf import settings
from django.http import JsonResponse

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    status_code = 500
    code = "internal_error"
    public_message = "An error occurred"

    def __init__(self, message=None, *, details=None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message
        self.details = details


class ValidationError(StorefrontError):
    status_code = 400
    code = "validation_error"
    public_message = "Validation failed"

    def __init__(self, errors, message=None):
        super().__init__(message)
        self.errors = errors


class AuthError(StorefrontError):
    status_code = 401
    code = "authentication_failed"
    public_message = "Authentication failed"


class AuthorizationError(StorefrontError):
    status_code = 403
    code = "forbidden"
    public_message = "Access forbidden"


class NotFoundError(StorefrontError):
    status_code = 404
    code = "not_found"
    public_message = "Not found"


class ConflictError(StorefrontError):
    status_code = 400
    code = "conflict"
    public_message = "Request conflicts with current state"


class SignatureError(StorefrontError):
    status_code = 400
    code = "invalid_signature"
    public_message = "Invalid signature"


class DependencyError(StorefrontError):
    status_code = 500
    code = "dependency_unavailable"
    public_message = "An upstream service failed"


class GatewayError(DependencyError):
    code = "gateway_error"
    public_message = "Payment gateway request failed"


class StoreError(DependencyError):
    code = "store_error"
    public_message = "Database operation failed"


class InternalError(StorefrontError):
    pass


def error_response(exc):
    """
    Render any exception as the JSON body clients expect:
    ``{"success": false, "error": <message>}`` plus ``errors`` for validation
    failures and ``details`` when DEBUG is on.
    """
    if not isinstance(exc, StorefrontError):
        exc = InternalError(details=repr(exc))

    if isinstance(exc, ValidationError):
        return JsonResponse({"success": False, "error": exc.message, "errors": exc.errors}, status=exc.status_code)

    message = exc.message
    if exc.status_code >= 500 and not settings.DEBUG:
        message = exc.public_message

    body = {"success": False, "error": message, "code": exc.code}
    if settings.DEBUG and exc.details:
        body["details"] = exc.details
    return JsonResponse(body, status=exc.status_code)
