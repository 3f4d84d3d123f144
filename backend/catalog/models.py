from django.db import models


class Category(models.Model):
    """Vehicle categories (Sedan, SUV, ...)"""
    name = models.CharField(max_length=100, unique=True)
    icon = models.CharField(max_length=50, blank=True)
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'vehicle_types'
        verbose_name_plural = 'categories'
        ordering = ['name']


class Brand(models.Model):
    """Vehicle brands, optionally linked to their FIPE table id"""
    name = models.CharField(max_length=100, unique=True)
    brand_fipe_id = models.CharField(max_length=20, blank=True, null=True, db_index=True)
    logo = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'brands'
        ordering = ['name']


class VehicleModel(models.Model):
    """Vehicle models of a brand"""
    brand = models.ForeignKey(Brand, on_delete=models.PROTECT, related_name='models')
    name = models.CharField(max_length=200)
    model_fipe_id = models.CharField(max_length=20, blank=True, null=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.brand.name} {self.name}"

    class Meta:
        db_table = 'vehicle_models'
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(fields=['brand', 'name'], name='unique_model_name_per_brand'),
        ]
