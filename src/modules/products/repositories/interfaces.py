"""Product repository interface.

Extends ``IRepository[Product]``; ``get_for_update`` is the entry point
used by the stock ledger for atomic check-and-adjust.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product  # noqa: F401


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""
