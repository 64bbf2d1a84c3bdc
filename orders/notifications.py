import logging

from django.conf import settings
from django.core.mail import send_mail
from django.utils.html import escape

logger = logging.getLogger(__name__)


def _shipping_lines(address):
    address = address or {}
    name = f"{address.get('firstName', '')} {address.get('lastName', '')}".strip()
    street = ", ".join(part for part in [address.get('houseDetails'), address.get('areaDetails')] if part)
    city = f"{address.get('city', '')}, {address.get('state', '')} - {address.get('pincode', '')}"
    return [
        ("Name", name),
        ("Address", street),
        ("City", city),
        ("Phone", address.get('phone') or ''),
    ]


def send_order_confirmation(customer_email, order_summary, address=None):
    """
    Sends the thank-you email for a paid order. Failures are logged and never
    raised: the payment is already committed when this runs.
    """
    subject = "Thank you for your order!"
    shipping = _shipping_lines(address)
    amount = order_summary['amount'] / 100

    message = (
        f"Dear customer,\n\n"
        f"Thank you for your order #{order_summary['id']}.\n"
        f"Amount paid: {amount:.2f} {order_summary['currency']}\n\n"
        f"Shipping details\n"
        + "".join(f"{label}: {value}\n" for label, value in shipping)
        + f"\nSincerely,\n{settings.STORE_NAME}"
    )
    html_message = (
        "<div class=\"order-details\"><h3>Shipping Details</h3>"
        + "".join(f"<p><strong>{label}:</strong> {escape(value)}</p>" for label, value in shipping)
        + "</div>"
    )

    try:
        send_mail(subject, message, settings.DEFAULT_FROM_EMAIL, [customer_email], html_message=html_message)
        logger.info(f"Order confirmation email sent to {customer_email} for order {order_summary['id']}")
    except Exception as e:
        logger.error(f"Failed to send order confirmation for order {order_summary['id']}: {e}")
