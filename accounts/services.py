import logging

from django.contrib.auth import authenticate
from django.db import DatabaseError

from storefront_backend.errors import AuthError, NotFoundError, StoreError, ValidationError
from .auth import issue_admin_token
from .models import Address, Customer

logger = logging.getLogger(__name__)


def get_or_create_customer(uid, phone):
    """
    Returns the customer row for a Firebase uid, inserting it on first
    contact. Runs inside the caller's transaction when there is one, so an
    order that fails to persist takes a freshly created customer with it.
    """
    try:
        customer, created = Customer.objects.get_or_create(uid=uid, defaults={'phone': phone})
    except DatabaseError as e:
        logger.error(f"Customer lookup/creation failed for uid {uid}: {e}")
        raise StoreError(details=str(e)) from e

    if created:
        logger.info(f"Created customer {customer.id} for uid {uid}.")
    return customer


def save_address(data):
    """
    Upserts the single address kept per uid. Returns ``(address, created)``.
    """
    uid = data.get('uid')
    errors = []
    for key in ('uid', 'firstName', 'pincode'):
        if not data.get(key):
            errors.append({'field': key, 'error': f"{key} is required"})
    if errors:
        raise ValidationError(errors, message="UID, First Name, and Pincode are required")

    if not Customer.objects.filter(uid=uid).exists():
        raise NotFoundError("User not found. Please register this UID first")

    values = {field: data.get(client_key) for client_key, field in Address.FIELD_MAP.items()}
    address = Address.objects.filter(uid=uid).first()
    if address:
        for field, value in values.items():
            setattr(address, field, value)
        address.save()
        logger.info(f"Updated address {address.id} for uid {uid}.")
        return address, False

    address = Address.objects.create(uid=uid, **values)
    logger.info(f"Created address {address.id} for uid {uid}.")
    return address, True


def login_admin(username, password):
    if not username or not password:
        raise AuthError("Username and password are required")

    user = authenticate(username=username, password=password)
    if user is None:
        logger.warning(f"Admin login failed for username '{username}'.")
        raise AuthError("Invalid credentials")
    if not (user.is_active and user.is_staff):
        logger.warning(f"Non-staff user '{username}' attempted admin login.")
        raise AuthError("Unauthorized access")

    logger.info(f"Admin '{username}' logged in.")
    return issue_admin_token(user)
