from django.urls import path
from .views import store_list_create, store_detail

urlpatterns = [
    path('admin/stores/', store_list_create, name='store-list-create'),
    path('admin/stores/<int:pk>/', store_detail, name='store-detail'),
]
