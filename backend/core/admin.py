from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'email', 'name', 'role', 'store', 'is_active', 'date_joined']
    list_filter = ['role', 'is_active', 'store']
    search_fields = ['username', 'email', 'name']
    ordering = ['username']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Store access', {'fields': ('name', 'role', 'store')}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Store access', {'fields': ('email', 'name', 'role', 'store')}),
    )
