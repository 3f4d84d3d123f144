from django.urls import path
from .views import fipe_brands, fipe_models, fipe_years, fipe_value

urlpatterns = [
    path('fipe/<str:tipo>/marcas/', fipe_brands, name='fipe-brands'),
    path('fipe/<str:tipo>/marcas/<str:marca>/modelos/', fipe_models, name='fipe-models'),
    path('fipe/<str:tipo>/marcas/<str:marca>/modelos/<str:modelo>/anos/', fipe_years, name='fipe-years'),
    path('fipe/<str:tipo>/marcas/<str:marca>/modelos/<str:modelo>/anos/<str:ano>/', fipe_value, name='fipe-value'),
]
