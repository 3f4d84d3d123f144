from django.urls import path
from .views import vehicle_search, vehicle_detail, category_list, brand_list, model_list, store_list

urlpatterns = [
    path('vehicles/', vehicle_search, name='public-vehicle-search'),
    path('vehicles/<int:pk>/', vehicle_detail, name='public-vehicle-detail'),
    path('vehicle-categories/', category_list, name='public-category-list'),
    path('brands/', brand_list, name='public-brand-list'),
    path('models/', model_list, name='public-model-list'),
    path('stores/', store_list, name='public-store-list'),
]
