"""
Caller authentication.

Customers authenticate with a Firebase ID token; the verified uid becomes
``request.identity``. Store admins log in with a username/password and get a
short-lived HS256 JWT back, checked by ``admin_token_required``.
"""
import datetime
import logging
from dataclasses import dataclass
from functools import wraps

import jwt
from django.conf import settings
from django.http import JsonResponse
from django.utils.module_loading import import_string
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from storefront_backend.errors import AuthError, AuthorizationError
from storefront_backend.firebase_config import get_firebase_app

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallerIdentity:
    uid: str
    phone: str = None
    email: str = None
    email_verified: bool = False


class FirebaseIdentityVerifier:
    """
    Verifies Firebase ID tokens, including the revocation check, and maps the
    SDK's error types onto messages the storefront shows to the user.
    """

    def verify(self, token):
        try:
            decoded = firebase_auth.verify_id_token(token, app=get_firebase_app(), check_revoked=True)
        except firebase_auth.ExpiredIdTokenError as e:
            raise AuthError("Token expired - please login again") from e
        except firebase_auth.RevokedIdTokenError as e:
            raise AuthError("Token revoked") from e
        except firebase_auth.UserDisabledError as e:
            raise AuthError("Your account has been disabled") from e
        except firebase_auth.UserNotFoundError as e:
            raise AuthError("User not found") from e
        except (firebase_auth.InvalidIdTokenError, ValueError) as e:
            raise AuthError("Invalid token format") from e
        except firebase_exceptions.FirebaseError as e:
            logger.error(f"Firebase token verification failed: {e}")
            raise AuthError("Authentication failed") from e

        return CallerIdentity(
            uid=decoded['uid'],
            phone=decoded.get('phone_number'),
            email=decoded.get('email'),
            email_verified=decoded.get('email_verified', False),
        )


def get_identity_verifier():
    return import_string(settings.IDENTITY_VERIFIER_BACKEND)()


def _bearer_token(request):
    header = request.headers.get('Authorization')
    if not header:
        raise AuthError("Authorization header missing")
    parts = header.split(' ')
    if len(parts) != 2 or parts[0] != 'Bearer' or not parts[1]:
        raise AuthError("Invalid authorization format")
    return parts[1]


def authenticate_request(request):
    token = _bearer_token(request)
    return get_identity_verifier().verify(token)


def firebase_auth_required(view_func):
    """Reject the request with 401 unless it carries a valid Firebase ID token."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            request.identity = authenticate_request(request)
        except AuthError as e:
            logger.warning(f"Rejected request to {request.path}: {e.message}")
            return JsonResponse({'error': e.message}, status=401)
        return view_func(request, *args, **kwargs)
    return wrapper


# --- Admin tokens ---

def issue_admin_token(user):
    now = datetime.datetime.now(datetime.timezone.utc)
    payload = {
        'id': user.id,
        'username': user.get_username(),
        'role': 'admin',
        'iat': now,
        'exp': now + datetime.timedelta(hours=settings.ADMIN_TOKEN_TTL_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm='HS256')


def decode_admin_token(token):
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=['HS256'])
    except jwt.InvalidTokenError as e:
        raise AuthError("Invalid token") from e
    if payload.get('role') != 'admin':
        raise AuthorizationError("Access forbidden")
    return payload


def admin_token_required(view_func):
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.headers.get('Authorization'):
            return JsonResponse({'message': 'No token provided'}, status=401)
        try:
            request.admin = decode_admin_token(_bearer_token(request))
        except (AuthError, AuthorizationError) as e:
            return JsonResponse({'message': e.message}, status=e.status_code)
        return view_func(request, *args, **kwargs)
    return wrapper
