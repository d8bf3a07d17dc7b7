import django_filters

from .models import Order


class OrderFilter(django_filters.FilterSet):
    """
    Filters for the order list.

    ``active=true`` keeps only OPEN and SENT orders, which is what the
    floor view polls for.
    """

    table = django_filters.NumberFilter(field_name="table__number")
    active = django_filters.BooleanFilter(method="filter_active")
    created_at__gte = django_filters.DateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_at__lte = django_filters.DateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "table", "server"]

    def filter_active(self, queryset, name, value):
        if value is None:
            return queryset
        if value:
            return queryset.filter(status__in=Order.ACTIVE_STATUSES)
        return queryset.exclude(status__in=Order.ACTIVE_STATUSES)
