import django_filters

from modules.orders.models import Order, OrderItem


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    customer_email = django_filters.CharFilter(
        field_name="customer_email", lookup_expr="iexact"
    )
    start_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__gte"
    )
    end_date = django_filters.DateFilter(
        field_name="created_at", lookup_expr="date__lte"
    )

    class Meta:
        model = Order
        fields = ["status", "customer_email", "start_date", "end_date"]


class OrderItemFilter(django_filters.FilterSet):
    order = django_filters.UUIDFilter(field_name="order_id")
    product = django_filters.UUIDFilter(field_name="product_id")

    class Meta:
        model = OrderItem
        fields = ["order", "product"]
