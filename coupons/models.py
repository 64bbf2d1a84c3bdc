from django.db import models
from django.utils import timezone


class CouponQuerySet(models.QuerySet):
    def redeemable(self):
        return self.filter(is_active=True, expiry_date__gt=timezone.now())


class Coupon(models.Model):
    code = models.CharField(max_length=50, unique=True)
    discount_percentage = models.PositiveSmallIntegerField()
    is_active = models.BooleanField(default=True)
    expiry_date = models.DateTimeField()

    created_at = models.DateTimeField(auto_now_add=True)

    objects = CouponQuerySet.as_manager()

    def __str__(self):
        return f"{self.code} ({self.discount_percentage}%)"

    class Meta:
        db_table = 'coupons'
