# exchanges/filters.py

import django_filters

from exchanges.models import InventoryExchange


class ExchangeFilter(django_filters.FilterSet):
    """List filters for exchanges (all optional, combined with AND)."""

    status = django_filters.ChoiceFilter(choices=InventoryExchange.STATUS_CHOICES)
    customer = django_filters.UUIDFilter(field_name="customer_id")
    processed_by = django_filters.UUIDFilter(field_name="processed_by_id")
    location = django_filters.NumberFilter(field_name="location_id")

    # inclusive date range on exchanged_at
    from_date = django_filters.DateFilter(field_name="exchanged_at", lookup_expr="date__gte")
    to_date = django_filters.DateFilter(field_name="exchanged_at", lookup_expr="date__lte")

    class Meta:
        model = InventoryExchange
        fields = ["status", "customer", "processed_by", "location", "from_date", "to_date"]
