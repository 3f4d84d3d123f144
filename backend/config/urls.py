"""
URL configuration for the vehicle inventory backend.

Public storefront routes live at the API root, back-office routes under
``admin/`` and the price table proxy under ``fipe/``.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Vehicle Inventory Admin Panel"
admin.site.site_title = "Vehicle Inventory Admin Portal"
admin.site.index_title = "Multi-store vehicle inventory"

urlpatterns = [
    path('django-admin/', admin.site.urls),
    path('api/v1/', include('backend.core.urls')),
    path('api/v1/', include('backend.locations.urls')),
    path('api/v1/', include('backend.catalog.urls')),
    path('api/v1/', include('backend.inventory.urls')),
    path('api/v1/', include('backend.public.urls')),
    path('api/v1/', include('backend.pricing.urls')),
    re_path(r'^uploads/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
]
