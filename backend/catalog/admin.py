from django.contrib import admin
from .models import Category, Brand, VehicleModel


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'icon', 'active', 'created_at']
    list_filter = ['active']
    search_fields = ['name']
    ordering = ['name']


@admin.register(Brand)
class BrandAdmin(admin.ModelAdmin):
    list_display = ['name', 'brand_fipe_id', 'created_at']
    search_fields = ['name', 'brand_fipe_id']
    ordering = ['name']


@admin.register(VehicleModel)
class VehicleModelAdmin(admin.ModelAdmin):
    list_display = ['name', 'brand', 'model_fipe_id', 'created_at']
    list_filter = ['brand']
    search_fields = ['name', 'brand__name', 'model_fipe_id']
    ordering = ['brand__name', 'name']
