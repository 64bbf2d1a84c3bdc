from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email

from storefront_backend.errors import ValidationError

MIN_AMOUNT = 100  # one rupee, in paise
MAX_AMOUNT = 2**31 - 1  # largest value the amount column holds on every backend
DEFAULT_CURRENCY = 'INR'


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _non_empty_string(value):
    return isinstance(value, str) and value.strip() != ''


def validate_create_order(data):
    """
    Checks a create-order body and returns the cleaned values. Every failing
    field is reported, not just the first one.
    """
    errors = []

    amount = data.get('amount')
    if not _is_int(amount) or amount < MIN_AMOUNT:
        errors.append({'field': 'amount', 'error': 'Amount must be at least ₹1'})
    elif amount > MAX_AMOUNT:
        errors.append({'field': 'amount', 'error': f'Amount must not exceed {MAX_AMOUNT} paise'})

    receipt = data.get('receipt')
    if not _non_empty_string(receipt):
        errors.append({'field': 'receipt', 'error': 'Receipt ID is required'})

    currency = data.get('currency')
    if currency is None:
        currency = DEFAULT_CURRENCY
    elif not (isinstance(currency, str) and len(currency) == 3 and currency.isalpha()):
        errors.append({'field': 'currency', 'error': 'Currency must be 3 characters'})

    items = data.get('items')
    if not isinstance(items, list) or not items:
        errors.append({'field': 'items', 'error': 'Items must be an array with at least one item'})

    address = data.get('address')
    if not isinstance(address, list) or not address:
        errors.append({'field': 'address', 'error': 'Address must be an array with at least one entry'})
    else:
        for index, entry in enumerate(address):
            email = entry.get('email') if isinstance(entry, dict) else None
            try:
                validate_email(email)
            except DjangoValidationError:
                errors.append({'field': f'address[{index}].email', 'error': 'Must provide a valid email in address'})

    if errors:
        raise ValidationError(errors)

    return {
        'amount': amount,
        'receipt': receipt.strip(),
        'currency': currency.upper(),
        'items': items,
        'address': address,
    }


def validate_verify_payment(data):
    errors = []
    messages = {
        'order_id': 'Order ID is required',
        'payment_id': 'Payment ID is required',
        'signature': 'Signature is required',
    }
    for field, message in messages.items():
        if not _non_empty_string(data.get(field)):
            errors.append({'field': field, 'error': message})
    if errors:
        raise ValidationError(errors)
    return data['order_id'], data['payment_id'], data['signature']
