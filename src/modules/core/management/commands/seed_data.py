from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from modules.orders.constants import OrderStatus
from modules.orders.dtos import AddOrderItemDTO, OrderCustomerDTO
from modules.orders.models import Order
from modules.orders.repositories.django_repository import (
    OrderDjangoRepository,
    OrderItemDjangoRepository,
)
from modules.orders.services import OrderItemService, OrderService
from modules.orders.stock import StockLedger
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

CATALOG = [
    ("Laptop Dell XPS 15", "15.6\" laptop, 32GB RAM, 1TB SSD", Decimal("1299.99"), 50),
    ("Logitech MX Master 3", "Wireless ergonomic mouse", Decimal("99.99"), 100),
    ("Mechanical Keyboard RGB", "Hot-swappable mechanical keyboard", Decimal("149.99"), 75),
    ("Samsung 27\" 4K Monitor", "27 inch UHD IPS monitor", Decimal("399.99"), 30),
    ("Sony WH-1000XM4", "Noise cancelling headphones", Decimal("349.99"), 60),
]

# (customer name, email, final status, [(catalog index, quantity), ...])
ORDERS = [
    ("John Doe", "john.doe@example.com", OrderStatus.PENDING, [(0, 1), (1, 2), (2, 1)]),
    ("Jane Smith", "jane.smith@example.com", OrderStatus.PROCESSING, [(3, 1), (4, 1)]),
]


class Command(BaseCommand):
    help = "Seed database with sample products and orders."

    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        with transaction.atomic():
            products = self._seed_products()
            orders_created = self._seed_orders(products)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for name, description, price, stock in CATALOG:
            product, _ = Product.objects.get_or_create(
                name=name,
                defaults={
                    "description": description,
                    "price": price,
                    "stock_quantity": stock,
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, products: list[Product]) -> int:
        self.stdout.write("Creating orders...")
        order_repo = OrderDjangoRepository()
        items = OrderItemService(
            order_repository=order_repo,
            order_item_repository=OrderItemDjangoRepository(),
            stock_ledger=StockLedger(ProductDjangoRepository()),
        )
        orders = OrderService(order_repository=order_repo, order_item_service=items)

        created = 0
        for name, email, final_status, lines in ORDERS:
            if Order.objects.filter(customer_email=email).exists():
                continue

            order = orders.create_order(
                OrderCustomerDTO(customer_name=name, customer_email=email)
            )
            for index, quantity in lines:
                items.add_item(
                    str(order.id),
                    AddOrderItemDTO(product_id=products[index].id, quantity=quantity),
                )
            if final_status != OrderStatus.PENDING:
                # No API moves an order forward; fixtures set it directly.
                Order.objects.filter(id=order.id).update(status=final_status)
            created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return created
