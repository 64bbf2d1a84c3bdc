from django.db import models
from django.utils import timezone

from storefront_backend.errors import ConflictError
from .schemas import MalformedPayloadError, decode_address, decode_items


class Order(models.Model):
    class Status(models.TextChoices):
        CREATED = 'created', 'Created'
        PAID = 'paid', 'Paid'
        REFUNDED = 'refunded', 'Refunded'

    # Allowed forward moves; anything not listed here is rejected.
    TRANSITIONS = {
        Status.CREATED: {Status.PAID},
        Status.PAID: {Status.REFUNDED},
        Status.REFUNDED: set(),
    }

    # Uid of the owning Customer, not the Customer primary key.
    user_id = models.CharField(max_length=128, db_index=True)

    razorpay_order_id = models.CharField(max_length=64, unique=True, editable=False)
    razorpay_payment_id = models.CharField(max_length=64, unique=True, null=True, blank=True)
    razorpay_signature = models.CharField(max_length=128, null=True, blank=True)

    amount = models.PositiveIntegerField(editable=False)
    currency = models.CharField(max_length=3, default='INR', editable=False)
    receipt = models.CharField(max_length=255, db_index=True, editable=False)

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.CREATED,
        db_index=True
    )

    # Versioned payloads, see orders.schemas.
    items = models.JSONField(default=dict)
    address = models.JSONField(default=dict)

    paid_at = models.DateTimeField(null=True, blank=True)

    # Set when a stored payload could not be decoded while settling a payment.
    needs_review = models.BooleanField(default=False)
    review_reason = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Order {self.id} ({self.razorpay_order_id}) for user {self.user_id} - {self.get_status_display()}"

    def _transition(self, new_status):
        if new_status not in self.TRANSITIONS[self.Status(self.status)]:
            raise ConflictError(f"Order {self.razorpay_order_id} cannot move from '{self.status}' to '{new_status}'")
        self.status = new_status

    def mark_paid(self, payment_id, signature, paid_at=None):
        if self.status == self.Status.PAID:
            raise ConflictError("Payment already processed")
        self._transition(self.Status.PAID)
        self.razorpay_payment_id = payment_id
        self.razorpay_signature = signature
        self.paid_at = paid_at or timezone.now()

    def mark_refunded(self):
        self._transition(self.Status.REFUNDED)

    def quarantine(self, reason):
        self.needs_review = True
        self.review_reason = reason

    def summary(self):
        return {
            'id': self.id,
            'amount': self.amount,
            'currency': self.currency,
            'status': self.status,
            'paid_at': self.paid_at.isoformat() if self.paid_at else None,
        }

    def to_dict(self):
        data = self.summary()
        data.update({
            'razorpay_order_id': self.razorpay_order_id,
            'razorpay_payment_id': self.razorpay_payment_id,
            'user_id': self.user_id,
            'receipt': self.receipt,
            'needs_review': self.needs_review,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        })
        try:
            data['items'] = decode_items(self.items)
            data['address'] = decode_address(self.address)
        except MalformedPayloadError:
            data['items'] = self.items
            data['address'] = self.address
        return data

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        verbose_name = "Order"
        verbose_name_plural = "Orders"
