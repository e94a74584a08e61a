"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected repositories.

Business rules enforced here:
- Price and stock bounds (validated by the DTOs).
- PUT replaces every stored field; PATCH merges only supplied fields.
- A product referenced by any persisted order item cannot be deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction
from django.db.models import QuerySet

from modules.products.exceptions import ProductInUse, ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.orders.repositories.interfaces import IOrderItemRepository
    from modules.products.dtos import (
        CreateProductDTO,
        PatchProductDTO,
        ReplaceProductDTO,
    )
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives its repositories via constructor injection (DIP).  The
    order-item repository is only consulted by the delete guard.
    """

    def __init__(
        self,
        repository: IProductRepository,
        order_item_repository: IOrderItemRepository,
    ) -> None:
        self._repo = repository
        self._item_repo = order_item_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        product = Product(
            name=dto.name,
            description=dto.description,
            price=dto.price,
            stock_quantity=dto.stock_quantity,
        )
        product = self._repo.save(product)
        logger.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def replace_product(self, id: str, dto: ReplaceProductDTO) -> Product:
        """Overwrite every field of an existing product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._get_or_raise(id)

        product.name = dto.name
        product.description = dto.description
        product.price = dto.price
        product.stock_quantity = dto.stock_quantity

        product = self._repo.save(product)
        logger.info("product.replaced", product_id=str(id))
        return product

    @transaction.atomic
    def patch_product(self, id: str, dto: PatchProductDTO) -> Product:
        """Merge the supplied fields into an existing product.

        Fields left as ``None`` in *dto* keep their stored value.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._get_or_raise(id)
        changed = dto.apply_to(product)
        product = self._repo.save(product)
        logger.info("product.patched", product_id=str(id), fields=changed)
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Permanently delete a product that no order item references.

        Only items that still exist count: once every referencing item has
        been removed the product becomes deletable again.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductInUse: if at least one order item references it.
        """
        product = self._lock_or_raise(id)
        log = logger.bind(product_id=str(product.id))

        if self._item_repo.exists_for_product(str(product.id)):
            log.warning("product.delete_blocked")
            raise ProductInUse(product.id)

        self._repo.delete(str(product.id))
        log.info("product.deleted")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> QuerySet[Product]:
        """Return the products, optionally filtered."""
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._get_or_raise(id)
        logger.info("product.retrieved", product_id=str(id))
        return product

    def _get_or_raise(self, id: str) -> Product:
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(id)
        return product

    def _lock_or_raise(self, id: str) -> Product:
        # Takes the row lock StockLedger.reserve takes on the product.
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(id)
        return product
