from django_filters import rest_framework as filters

from apps.variations.models import Combination


class CombinationFilter(filters.FilterSet):
    """Filter for stored combinations."""

    template = filters.CharFilter(field_name='template__slug')
    template_id = filters.NumberFilter(field_name='template__id')

    # Price filters
    min_price = filters.NumberFilter(field_name='price_delta', lookup_expr='gte')
    max_price = filters.NumberFilter(field_name='price_delta', lookup_expr='lte')

    # Stock filters
    in_stock = filters.BooleanFilter(method='filter_in_stock')

    # Option filter
    option = filters.NumberFilter(field_name='options__id')

    class Meta:
        model = Combination
        fields = [
            'template', 'template_id', 'is_active', 'is_composite',
            'origin', 'is_modified', 'sku'
        ]

    def filter_in_stock(self, queryset, name, value):
        if value is True:
            return queryset.filter(stock__gt=0)
        elif value is False:
            return queryset.filter(stock__lte=0)
        return queryset
