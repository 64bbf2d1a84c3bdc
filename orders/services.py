import json
import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError, IntegrityError, transaction

from accounts.services import get_or_create_customer
from storefront_backend.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    SignatureError,
    StoreError,
    ValidationError,
)
from .gateway import hmac_sha256_hex, signatures_match
from .models import Order
from .notifications import send_order_confirmation
from .schemas import MalformedPayloadError, contact_email, decode_address, encode_address, encode_items

logger = logging.getLogger(__name__)
security_logger = logging.getLogger('storefront.security')

REFUND_PROCESSED = 'refund.processed'


# --- Order creation ---

class OrderLifecycleManager:
    """
    Creates the local order row together with its Razorpay order.

    The customer upsert and the order insert share one transaction. The
    remote order cannot be cancelled, so when the insert fails the gateway
    keeps an order we have no row for; that case is logged with its id.
    """
    def __init__(self, gateway):
        self.gateway = gateway

    def create_order(self, amount, currency, receipt, items, address, identity):
        logger.info(f"Creating order for user {identity.uid}: receipt {receipt}, {amount} {currency}, {len(items)} items.")

        gateway_order = None
        try:
            with transaction.atomic():
                customer = get_or_create_customer(identity.uid, identity.phone)

                gateway_order = self.gateway.create_remote_order(
                    amount=amount,
                    currency=currency,
                    receipt=receipt,
                    notes={'userId': customer.uid},
                )

                order = Order.objects.create(
                    razorpay_order_id=gateway_order['id'],
                    user_id=customer.uid,
                    amount=amount,
                    currency=currency,
                    receipt=receipt,
                    items=encode_items(items),
                    address=encode_address(address),
                    status=Order.Status.CREATED,
                )
        except DatabaseError as e:
            if gateway_order is not None:
                logger.error(f"Order insert failed; Razorpay order {gateway_order['id']} has no local row: {e}")
            else:
                logger.error(f"Order creation failed before reaching Razorpay: {e}")
            raise StoreError(details=str(e)) from e

        logger.info(f"Order {order.id} saved with Razorpay order {order.razorpay_order_id}.")
        return gateway_order, customer, order


# --- Payment verification ---

class PaymentVerifier:
    """
    Settles an order once the client reports a Razorpay payment for it.

    Checks run in a fixed order and each one aborts the request: signature,
    existence, ownership, then the duplicate-payment guard. The order row is
    locked for the check-then-write so two concurrent verifications of the
    same order cannot both settle it.
    """
    def __init__(self, gateway, notifier=send_order_confirmation):
        self.gateway = gateway
        self.notifier = notifier

    def verify_payment(self, order_id, payment_id, signature, identity):
        if not self.gateway.verify_payment_signature(order_id, payment_id, signature):
            security_logger.warning(
                f"Invalid payment signature for order {order_id}, payment {payment_id}, user {identity.uid}"
            )
            raise SignatureError("Invalid payment signature")

        try:
            with transaction.atomic():
                order = Order.objects.select_for_update().filter(razorpay_order_id=order_id).first()
                if order is None:
                    raise NotFoundError("Order not found")

                if order.user_id != identity.uid:
                    security_logger.warning(f"User {identity.uid} tried to settle order {order_id} owned by {order.user_id}")
                    raise AuthorizationError("Unauthorized access to order")

                if order.status == Order.Status.PAID:
                    logger.warning(f"Duplicate payment attempt for order {order_id} with payment {payment_id}")
                    raise ConflictError("Payment already processed")

                address = self._read_address(order)
                order.mark_paid(payment_id, signature)
                order.save()

                email = contact_email(address)
                if email:
                    summary = order.summary()
                    transaction.on_commit(lambda: self.notifier(email, summary, address[0]))
                else:
                    logger.info(f"No email found in address of order {order.id}; skipping confirmation.")
        except IntegrityError as e:
            logger.error(f"Payment {payment_id} is already recorded against another order: {e}")
            raise ConflictError("Payment already processed") from e
        except DatabaseError as e:
            logger.error(f"Database error while verifying payment for order {order_id}: {e}")
            raise StoreError(details=str(e)) from e

        logger.info(f"Order {order.id} marked paid with payment {payment_id}.")
        return order

    def _read_address(self, order):
        # A malformed payload must not block a payment that already happened;
        # the row is flagged for review instead.
        try:
            return decode_address(order.address)
        except MalformedPayloadError as e:
            logger.error(f"Order {order.id} has a malformed address payload; flagging for review: {e}")
            order.quarantine(f"address: {e}")
            return []


# --- Webhooks ---

class WebhookReconciler:
    """
    Applies Razorpay webhook events to stored orders. Only ``refund.processed``
    changes state; other verified events are acknowledged and ignored.
    """
    def __init__(self, secret=None):
        self.secret = secret or settings.RAZORPAY_WEBHOOK_SECRET
        if not self.secret:
            raise ImproperlyConfigured("RAZORPAY_WEBHOOK_SECRET is not configured.")

    def verify(self, raw_body, supplied_signature):
        expected = hmac_sha256_hex(self.secret, raw_body)
        if not signatures_match(expected, supplied_signature):
            security_logger.warning("Invalid webhook signature")
            raise SignatureError("Invalid signature")

    def handle_event(self, raw_body, supplied_signature):
        self.verify(raw_body, supplied_signature)
        logger.info("Webhook verified")

        try:
            body = json.loads(raw_body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValidationError([{'error': 'Webhook body is not valid JSON'}], message="Invalid JSON") from e

        event = body.get('event') if isinstance(body, dict) else None
        if event != REFUND_PROCESSED:
            logger.info(f"Ignoring webhook event {event!r}")
            return "Unhandled event"

        try:
            payment_id = body['payload']['refund']['entity']['payment_id']
        except (KeyError, TypeError) as e:
            raise ValidationError([{'error': 'Refund event is missing payment_id'}]) from e
        if not isinstance(payment_id, str) or not payment_id.strip():
            raise ValidationError([{'error': 'Refund event payment_id must be a non-empty string'}])

        self.apply_refund(payment_id)
        return "Webhook handled"

    def apply_refund(self, payment_id):
        with transaction.atomic():
            order = Order.objects.select_for_update().filter(razorpay_payment_id=payment_id).first()
            if order is None:
                logger.warning(f"Order not found for refund payment ID: {payment_id}")
                return None

            if order.status != Order.Status.PAID:
                logger.info(f"Order {order.id} is '{order.status}'; ignoring refund event for {payment_id}")
                return order

            order.mark_refunded()
            order.save(update_fields=['status', 'updated_at'])

        logger.info(f"Order ID {order.id} status updated to 'refunded'")
        return order
