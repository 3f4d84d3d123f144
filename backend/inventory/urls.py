from django.urls import path
from .views import (
    vehicle_list_create, vehicle_detail, vehicle_status,
    vehicle_photo_upload, vehicle_photo_cover, vehicle_photo_order, vehicle_photo_delete,
)

urlpatterns = [
    path('admin/vehicles/', vehicle_list_create, name='vehicle-list-create'),
    path('admin/vehicles/<int:pk>/', vehicle_detail, name='vehicle-detail'),
    path('admin/vehicles/<int:pk>/status/', vehicle_status, name='vehicle-status'),
    path('admin/vehicles/<int:pk>/photos/', vehicle_photo_upload, name='vehicle-photo-upload'),
    path('admin/vehicles/<int:pk>/photos/<int:photo_id>/', vehicle_photo_delete, name='vehicle-photo-delete'),
    path('admin/vehicles/<int:pk>/photos/<int:photo_id>/cover/', vehicle_photo_cover, name='vehicle-photo-cover'),
    path('admin/vehicles/<int:pk>/photos/<int:photo_id>/order/', vehicle_photo_order, name='vehicle-photo-order'),
]
