import django_filters
from django.db.models import Q
from .models import Vehicle


class VehicleFilter(django_filters.FilterSet):
    """Conjunctive vehicle search predicates; unset parameters impose no constraint"""

    # Free-text search over plate, brand/model names and description
    search = django_filters.CharFilter(method='filter_search', label='Search')

    # Exact matches
    category_id = django_filters.NumberFilter(field_name='category_id', lookup_expr='exact')
    store_id = django_filters.NumberFilter(field_name='store_id', lookup_expr='exact')
    brand_fipe_id = django_filters.CharFilter(field_name='brand__brand_fipe_id', lookup_expr='exact')
    model_fipe_id = django_filters.CharFilter(field_name='model__model_fipe_id', lookup_expr='exact')
    status = django_filters.ChoiceFilter(choices=Vehicle.STATUS_CHOICES)

    # Inclusive ranges
    min_price = django_filters.NumberFilter(field_name='price', lookup_expr='gte')
    max_price = django_filters.NumberFilter(field_name='price', lookup_expr='lte')
    year_min = django_filters.NumberFilter(field_name='model_year', lookup_expr='gte')
    year_max = django_filters.NumberFilter(field_name='model_year', lookup_expr='lte')

    # Highlight flags only narrow the result when set to true
    home_highlight = django_filters.BooleanFilter(method='filter_flag_if_true')
    brand_highlight = django_filters.BooleanFilter(method='filter_flag_if_true')

    class Meta:
        model = Vehicle
        fields = ['search', 'category_id', 'store_id', 'brand_fipe_id', 'model_fipe_id', 'status',
                  'min_price', 'max_price', 'year_min', 'year_max', 'home_highlight', 'brand_highlight']

    def filter_search(self, queryset, name, value):
        search = value.strip() if value else ''
        if not search:
            return queryset
        return queryset.filter(
            Q(plate__icontains=search) |
            Q(brand__name__icontains=search) |
            Q(model__name__icontains=search) |
            Q(description__icontains=search)
        )

    def filter_flag_if_true(self, queryset, name, value):
        if value:
            return queryset.filter(**{name: True})
        return queryset


class PublicVehicleFilter(VehicleFilter):
    """Storefront search: status is fixed by the caller, not a parameter"""
    status = None

    class Meta(VehicleFilter.Meta):
        fields = [f for f in VehicleFilter.Meta.fields if f != 'status']
