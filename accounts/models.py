from django.db import models


class Customer(models.Model):
    # uid is the Firebase identity and the join key orders use; it never changes.
    uid = models.CharField(max_length=128, unique=True)
    phone = models.CharField(max_length=32, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Customer {self.uid} ({self.phone or 'no phone'})"

    def to_dict(self):
        return {
            'id': self.id,
            'uid': self.uid,
            'phone': self.phone,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']


class Address(models.Model):
    uid = models.CharField(max_length=128, db_index=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, null=True, blank=True)
    house_details = models.CharField(max_length=255, null=True, blank=True)
    area_details = models.CharField(max_length=255, null=True, blank=True)
    landmark = models.CharField(max_length=255, null=True, blank=True)
    city = models.CharField(max_length=100, null=True, blank=True)
    state = models.CharField(max_length=100, null=True, blank=True)
    pincode = models.CharField(max_length=12)
    phone = models.CharField(max_length=32, null=True, blank=True)
    email = models.EmailField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Request/response keys used by the storefront client.
    FIELD_MAP = {
        'firstName': 'first_name',
        'lastName': 'last_name',
        'houseDetails': 'house_details',
        'areaDetails': 'area_details',
        'landmark': 'landmark',
        'city': 'city',
        'state': 'state',
        'pincode': 'pincode',
        'phone': 'phone',
        'email': 'email',
    }

    def __str__(self):
        return f"Address {self.id} for {self.uid}"

    def to_dict(self):
        data = {'id': self.id, 'uid': self.uid}
        for client_key, field in self.FIELD_MAP.items():
            data[client_key] = getattr(self, field)
        return data

    class Meta:
        db_table = 'addresses'
        verbose_name_plural = "Addresses"
