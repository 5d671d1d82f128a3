"""Product repository - in-memory store for the product catalog."""

import builtins
import logging
import math
import threading
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from catalog.schemas.product import Product, ProductCreate, ProductReplace

logger = logging.getLogger(__name__)


class SortKey(str, Enum):
    """Orderings supported by ``ProductRepository.list``."""

    ID = "id"
    NAME = "name"

    @classmethod
    def parse(cls, value: str | None) -> "SortKey | None":
        """Map a query-string value to a key. Unknown values mean insertion order."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


def _is_number(value: Any) -> bool:
    # bool is an int subclass but JSON true/false is not a price
    if not isinstance(value, int | float) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


# Patchable field -> predicate the supplied value must satisfy
PATCHABLE_FIELDS = {
    "name": lambda v: isinstance(v, str),
    "description": lambda v: isinstance(v, str),
    "price": _is_number,
}


class ProductRepository:
    """Ordered, thread-safe collection of products.

    One lock guards every operation, so id assignment, in-place updates and
    deletes never interleave, and reads always see a complete snapshot.
    Callers only ever receive copies of stored records.

    Ids come from a high-water mark: each new product gets one more than the
    largest id handed out since the collection was last empty. Deleting never
    renumbers and ids are not reused until the collection is emptied, at which
    point numbering starts again at 1.
    """

    def __init__(self, products: Iterable[Product] | None = None):
        self._lock = threading.Lock()
        self._products: builtins.list[Product] = [p.model_copy() for p in products or ()]
        self._last_id = max((p.id for p in self._products), default=0)

    def list(self, sort: SortKey | None = None) -> builtins.list[Product]:
        """Return a snapshot of all products.

        ``SortKey.ID`` orders by ascending id, ``SortKey.NAME`` by name; ties
        keep insertion order. ``None`` returns insertion order.
        """
        with self._lock:
            products = [p.model_copy() for p in self._products]

        if sort is SortKey.ID:
            products.sort(key=lambda p: p.id)
        elif sort is SortKey.NAME:
            products.sort(key=lambda p: p.name)
        return products

    def count(self) -> int:
        with self._lock:
            return len(self._products)

    def create(self, data: ProductCreate) -> Product:
        """Store a new product under the next id."""
        with self._lock:
            if not self._products:
                self._last_id = 0
            self._last_id += 1
            product = Product(id=self._last_id, **data.model_dump())
            self._products.append(product)
            stored = product.model_copy()

        logger.info(f"Created product {stored.id}")
        return stored

    def get(self, product_id: int) -> Product | None:
        """Get a product by ID."""
        with self._lock:
            index = self._index_of(product_id)
            if index is None:
                return None
            return self._products[index].model_copy()

    def replace(self, product_id: int, data: ProductReplace) -> Product | None:
        """Overwrite every field of a product. The id is kept."""
        with self._lock:
            index = self._index_of(product_id)
            if index is None:
                return None
            product = Product(id=product_id, **data.model_dump())
            self._products[index] = product
            stored = product.model_copy()

        logger.info(f"Replaced product {product_id}")
        return stored

    def patch(self, product_id: int, updates: Mapping[str, Any]) -> Product | None:
        """Merge recognised fields into a product.

        Only ``name``, ``description`` and ``price`` are considered. Unknown
        keys and values of the wrong JSON type are skipped without error.
        """
        with self._lock:
            index = self._index_of(product_id)
            if index is None:
                return None

            changes = {
                field: value
                for field, value in updates.items()
                if field in PATCHABLE_FIELDS and PATCHABLE_FIELDS[field](value)
            }
            if "price" in changes:
                changes["price"] = float(changes["price"])

            product = self._products[index].model_copy(update=changes)
            self._products[index] = product
            stored = product.model_copy()

        ignored = sorted(set(updates) - set(changes))
        if ignored:
            logger.debug(f"Patch of product {product_id} ignored fields: {', '.join(ignored)}")
        return stored

    def delete(self, product_id: int) -> Product | None:
        """Remove a product and return it."""
        with self._lock:
            index = self._index_of(product_id)
            if index is None:
                return None
            removed = self._products.pop(index)

        logger.info(f"Deleted product {product_id}")
        return removed

    def clear(self) -> None:
        """Remove every product and restart numbering."""
        with self._lock:
            self._products.clear()
            self._last_id = 0

    def _index_of(self, product_id: int) -> int | None:
        # Caller must hold the lock
        for i, product in enumerate(self._products):
            if product.id == product_id:
                return i
        return None
