from django.contrib import admin
from .models import Vehicle, VehiclePhoto


class VehiclePhotoInline(admin.TabularInline):
    model = VehiclePhoto
    extra = 0
    fields = ['image', 'is_cover', 'display_order']


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ['plate', 'brand', 'model', 'model_year', 'price', 'status', 'store', 'deleted_at']
    list_filter = ['status', 'vehicle_type', 'store', 'category', 'home_highlight']
    search_fields = ['plate', 'brand__name', 'model__name']
    ordering = ['-created_at']
    inlines = [VehiclePhotoInline]

    def get_queryset(self, request):
        return Vehicle.all_objects.select_related('store', 'brand', 'model')
