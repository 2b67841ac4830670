import django_filters

from modules.customers.models import Customer


class CustomerFilter(django_filters.FilterSet):
    """Staff-side customer lookup: ``?name=``, ``?email=``, ``?phone=``,
    ``?active=`` and ``?has_live_orders=``."""

    name = django_filters.CharFilter(lookup_expr="icontains")
    email = django_filters.CharFilter(lookup_expr="iexact")
    phone = django_filters.CharFilter(lookup_expr="contains")
    active = django_filters.BooleanFilter(field_name="is_active")
    has_live_orders = django_filters.BooleanFilter(method="filter_has_live_orders")

    class Meta:
        model = Customer
        fields = ["name", "email", "phone", "active", "has_live_orders"]

    def filter_has_live_orders(self, queryset, name, value):
        # Live orders are the ones not yet archived or cancelled.
        if value:
            return queryset.filter(orders__isnull=False).distinct()
        return queryset.filter(orders__isnull=True)
