"""Stock ledger: the single check-and-adjust path for product stock.

Every order-item mutation (add, change quantity, remove, order deletion)
goes through ``StockLedger.reserve`` so stock math exists in one place.
The product row is locked with ``SELECT FOR UPDATE`` before it is read,
which serialises concurrent reservations on the same product: two
requests can never both pass the sufficiency check against the same
stale value.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import structlog
from django.db import transaction

from modules.orders.exceptions import InsufficientStock
from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class StockLedger:
    """Atomic reservation and release of product stock."""

    def __init__(self, product_repository: IProductRepository) -> None:
        self._product_repo = product_repository

    @transaction.atomic
    def reserve(self, product_id: UUID | str, delta: int) -> Product:
        """Commit ``delta`` units of stock (a negative delta releases).

        Runs inside the caller's transaction when there is one, so a later
        failure in the caller rolls the adjustment back too.

        Raises:
            ProductNotFound: the product does not exist.
            InsufficientStock: ``delta > 0`` and fewer units are available.
        """
        product = self._product_repo.get_for_update(str(product_id))
        if not product:
            raise ProductNotFound(product_id)

        log = logger.bind(product_id=str(product.id), delta=delta)

        if delta > 0 and product.stock_quantity < delta:
            log.warning("stock.insufficient", available=product.stock_quantity)
            raise InsufficientStock(product.id, delta, product.stock_quantity)

        if delta == 0:
            return product

        product.stock_quantity -= delta
        self._product_repo.save(product)

        log.info(
            "stock.reserved" if delta > 0 else "stock.released",
            remaining=product.stock_quantity,
        )
        return product

    def release(self, product_id: UUID | str, quantity: int) -> Product:
        """Give ``quantity`` units back to the product. Never fails on stock."""
        return self.reserve(product_id, -quantity)
