from django.contrib import admin
from .models import Store


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ['name', 'cnpj', 'parent', 'phone', 'deleted_at', 'created_at']
    list_filter = ['parent', 'created_at']
    search_fields = ['name', 'cnpj']
    ordering = ['name']

    def get_queryset(self, request):
        return Store.all_objects.select_related('parent')
