from django.urls import path
from .views import (
    category_list_create, category_detail,
    brand_list_create, brand_detail,
    model_list_create, model_detail,
)

urlpatterns = [
    path('admin/vehicle-categories/', category_list_create, name='category-list-create'),
    path('admin/vehicle-categories/<int:pk>/', category_detail, name='category-detail'),
    path('admin/brands/', brand_list_create, name='brand-list-create'),
    path('admin/brands/<int:pk>/', brand_detail, name='brand-detail'),
    path('admin/models/', model_list_create, name='model-list-create'),
    path('admin/models/<int:pk>/', model_detail, name='model-detail'),
]
