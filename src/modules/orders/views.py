"""Order API views.

Exposes ``OrderService`` and ``OrderItemService`` via HTTP using DRF
ViewSets.  Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import DomainError
from modules.orders.dtos import AddOrderItemDTO, OrderCustomerDTO, UpdateOrderItemDTO
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderStatus,
    OrderItemNotFound,
    OrderNotFound,
)
from modules.orders.filters import OrderFilter, OrderItemFilter
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.django_repository import (
    OrderDjangoRepository,
    OrderItemDjangoRepository,
)
from modules.orders.serializers import (
    OrderItemSerializer,
    OrderListSerializer,
    OrderSerializer,
)
from modules.orders.services import OrderItemService, OrderService
from modules.orders.stock import StockLedger
from modules.products.exceptions import ProductNotFound
from modules.products.repositories.django_repository import ProductDjangoRepository


def _build_item_service() -> OrderItemService:
    return OrderItemService(
        order_repository=OrderDjangoRepository(),
        order_item_repository=OrderItemDjangoRepository(),
        stock_ledger=StockLedger(ProductDjangoRepository()),
    )


class OrderViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Order operations and the order-scoped item endpoints.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderListSerializer
    filterset_class = OrderFilter
    search_fields = ["customer_name", "customer_email"]
    ordering_fields = ["created_at", "status", "customer_name"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._items = _build_item_service()
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            order_item_service=self._items,
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_orders()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound as exc:
            return _not_found(exc)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/: new PENDING order without items."""
        try:
            dto = OrderCustomerDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _bad_request(exc)

        order = self._service.create_order(dto)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/: overwrite customer fields."""
        try:
            dto = OrderCustomerDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _bad_request(exc)

        try:
            order = self._service.update_order(pk, dto)
        except OrderNotFound as exc:
            return _not_found(exc)
        except InvalidOrderStatus as exc:
            return _invalid_state(exc)
        return Response(OrderSerializer(order).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/: restores stock of every item."""
        try:
            self._service.delete_order(pk)
        except OrderNotFound as exc:
            return _not_found(exc)
        except InvalidOrderStatus as exc:
            return _invalid_state(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Order-scoped items
    # ------------------------------------------------------------------

    @action(detail=True, methods=["get", "post"], serializer_class=OrderItemSerializer)
    def items(self, request: Request, pk: str | None = None) -> Response:
        """GET / POST /api/v1/orders/{pk}/items/"""
        if request.method == "GET":
            try:
                items = self._items.list_order_items(pk)
            except OrderNotFound as exc:
                return _not_found(exc)
            return Response(OrderItemSerializer(items, many=True).data)

        try:
            dto = AddOrderItemDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _bad_request(exc)

        try:
            item = self._items.add_item(pk, dto)
        except (OrderNotFound, ProductNotFound) as exc:
            return _not_found(exc)
        except InvalidOrderStatus as exc:
            return _invalid_state(exc)
        except InsufficientStock as exc:
            return _conflict(exc)
        return Response(OrderItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["put", "delete"],
        url_path=r"items/(?P<item_pk>[^/.]+)",
        url_name="items-detail",
        serializer_class=OrderItemSerializer,
    )
    def item_detail(
        self, request: Request, pk: str | None = None, item_pk: str | None = None
    ) -> Response:
        """PUT / DELETE /api/v1/orders/{pk}/items/{item_pk}/"""
        if request.method == "DELETE":
            try:
                self._items.remove_order_item(pk, item_pk)
            except (OrderNotFound, OrderItemNotFound) as exc:
                return _not_found(exc)
            except InvalidOrderStatus as exc:
                return _invalid_state(exc)
            return Response(status=status.HTTP_204_NO_CONTENT)

        try:
            dto = UpdateOrderItemDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _bad_request(exc)

        try:
            item = self._items.update_order_item(pk, item_pk, dto)
        except (OrderNotFound, OrderItemNotFound) as exc:
            return _not_found(exc)
        except InvalidOrderStatus as exc:
            return _invalid_state(exc)
        except InsufficientStock as exc:
            return _conflict(exc)
        return Response(OrderItemSerializer(item).data)


class OrderItemViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for line items addressed by their own id."""

    queryset = OrderItem.objects.all()
    serializer_class = OrderItemSerializer
    filterset_class = OrderItemFilter
    ordering_fields = ["created_at", "quantity", "subtotal"]
    ordering = ["created_at", "id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _build_item_service()

    def get_queryset(self):
        return self._service.list_items()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/order-items/{pk}/"""
        try:
            item = self._service.get_item(pk)
        except OrderItemNotFound as exc:
            return _not_found(exc)
        return Response(OrderItemSerializer(item).data)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/order-items/{pk}/: change quantity."""
        try:
            dto = UpdateOrderItemDTO.model_validate(request.data)
        except PydanticValidationError as exc:
            return _bad_request(exc)

        try:
            item = self._service.update_item(pk, dto)
        except OrderItemNotFound as exc:
            return _not_found(exc)
        except InvalidOrderStatus as exc:
            return _invalid_state(exc)
        except InsufficientStock as exc:
            return _conflict(exc)
        return Response(OrderItemSerializer(item).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/order-items/{pk}/"""
        try:
            self._service.remove_item(pk)
        except OrderItemNotFound as exc:
            return _not_found(exc)
        except InvalidOrderStatus as exc:
            return _invalid_state(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


def _not_found(exc: DomainError) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)


def _invalid_state(exc: InvalidOrderStatus) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


def _conflict(exc: DomainError) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)


def _bad_request(exc: PydanticValidationError) -> Response:
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    return Response({"detail": errors}, status=status.HTTP_400_BAD_REQUEST)
