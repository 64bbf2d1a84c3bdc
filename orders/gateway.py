import hashlib
import hmac
import logging

import requests
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from storefront_backend.errors import GatewayError

logger = logging.getLogger(__name__)


def hmac_sha256_hex(secret, message):
    if isinstance(secret, str):
        secret = secret.encode()
    if isinstance(message, str):
        message = message.encode()
    return hmac.new(secret, message, hashlib.sha256).hexdigest()


def signatures_match(expected, supplied):
    if not isinstance(supplied, str):
        return False
    return hmac.compare_digest(expected, supplied)


class PaymentGateway:
    """
    What the order services need from a payment provider. Subclasses supply
    ``create_remote_order``; the payment signature scheme is shared.
    """
    key_secret = None

    def create_remote_order(self, amount, currency, receipt, notes=None):
        raise NotImplementedError

    def payment_signature(self, order_id, payment_id):
        return hmac_sha256_hex(self.key_secret, f"{order_id}|{payment_id}")

    def verify_payment_signature(self, order_id, payment_id, signature):
        return signatures_match(self.payment_signature(order_id, payment_id), signature)


class RazorpayGateway(PaymentGateway):
    """
    A service class for interacting with the Razorpay Orders REST API.
    """
    def __init__(self):
        self.key_id = settings.RAZORPAY_KEY_ID
        self.key_secret = settings.RAZORPAY_KEY_SECRET
        self.base_url = settings.RAZORPAY_API_BASE
        self.timeout = settings.RAZORPAY_TIMEOUT_SECONDS

        logger.debug(f"RazorpayGateway key id loaded: {bool(self.key_id)}, secret loaded: {bool(self.key_secret)}")

        if not all([self.key_id, self.key_secret, self.base_url]):
            raise ImproperlyConfigured("Razorpay settings are not configured properly.")

    def create_remote_order(self, amount, currency, receipt, notes=None):
        """
        Create a Razorpay order for ``amount`` in the smallest currency unit.
        """
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }

        logger.info(f"Creating Razorpay order for receipt {receipt}: {amount} {currency}")

        try:
            response = requests.post(
                f"{self.base_url}/v1/orders",
                auth=(self.key_id, self.key_secret),
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            order = response.json()
        except requests.exceptions.HTTPError as e:
            logger.error(f"Razorpay API Error: {e.response.status_code} - {e.response.text}")
            raise GatewayError(details=f"{e.response.status_code} {e.response.text}") from e
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Razorpay request failed for receipt {receipt}: {e}")
            raise GatewayError(details=str(e)) from e

        if not order.get('id'):
            logger.error(f"Razorpay returned an order without an id: {order}")
            raise GatewayError(details="Gateway response missing order id")

        logger.info(f"Razorpay order {order['id']} created for receipt {receipt}.")
        return order


def get_payment_gateway():
    return import_string(settings.PAYMENT_GATEWAY_BACKEND)()
