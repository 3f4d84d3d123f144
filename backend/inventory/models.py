from django.db import models
from django.db.models import Q

from backend.core.models import SoftDeleteModel


class Vehicle(SoftDeleteModel):
    """A vehicle in the stock of exactly one store"""
    TYPE_CHOICES = [
        ('carros', 'Cars'),
        ('motos', 'Motorcycles'),
        ('caminhoes', 'Trucks'),
    ]

    STATUS_AVAILABLE = 'Available'
    STATUS_RESERVED = 'Reserved'
    STATUS_SOLD = 'Sold'
    STATUS_CHOICES = [
        (STATUS_AVAILABLE, 'Available'),
        (STATUS_RESERVED, 'Reserved'),
        (STATUS_SOLD, 'Sold'),
    ]

    store = models.ForeignKey('locations.Store', on_delete=models.PROTECT, related_name='vehicles')
    category = models.ForeignKey('catalog.Category', on_delete=models.PROTECT, related_name='vehicles')
    brand = models.ForeignKey('catalog.Brand', on_delete=models.PROTECT, related_name='vehicles')
    model = models.ForeignKey('catalog.VehicleModel', on_delete=models.PROTECT, related_name='vehicles')
    vehicle_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='carros')
    plate = models.CharField(max_length=10, unique=True)
    manufacture_year = models.PositiveIntegerField()
    model_year = models.PositiveIntegerField(db_index=True)
    mileage = models.PositiveIntegerField(default=0)
    color = models.CharField(max_length=50, blank=True)
    fuel_type = models.CharField(max_length=50, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, db_index=True)
    fipe_code = models.CharField(max_length=20, blank=True)
    fipe_value = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_AVAILABLE, db_index=True)
    home_highlight = models.BooleanField(default=False)
    brand_highlight = models.BooleanField(default=False)
    features = models.JSONField(default=list, blank=True)
    specifications = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.plate} ({self.brand_id}/{self.model_id})"

    class Meta:
        db_table = 'vehicles'
        indexes = [
            models.Index(fields=['store', 'status'], name='vehicle_store_status_idx'),
        ]


class VehiclePhoto(models.Model):
    """Photo of a vehicle; at most one photo per vehicle is the cover"""
    vehicle = models.ForeignKey(Vehicle, on_delete=models.CASCADE, related_name='photos')
    image = models.ImageField(upload_to='vehicles/')
    is_cover = models.BooleanField(default=False)
    display_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Photo {self.pk} of vehicle {self.vehicle_id}"

    @property
    def url(self):
        return self.image.url if self.image else None

    class Meta:
        db_table = 'vehicle_photos'
        ordering = ['display_order', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['vehicle'], condition=Q(is_cover=True), name='unique_cover_photo_per_vehicle'
            ),
        ]
