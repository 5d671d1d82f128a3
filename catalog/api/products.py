"""Product API endpoints.

Accessible without authentication.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from catalog.api.dependencies import get_product_repository
from catalog.api.errors import NotFoundError
from catalog.schemas.product import Product, ProductCreate, ProductReplace
from catalog.services.products import ProductRepository, SortKey


router = APIRouter(
    prefix="/products",
    tags=["products"],
)


def _found(product: Product | None) -> Product:
    if product is None:
        raise NotFoundError()
    return product


@router.get("", response_model=list[Product])
async def list_products(
    sort: str | None = Query(None, description="Order by 'id' or 'name'; insertion order otherwise"),
    repository: ProductRepository = Depends(get_product_repository),
) -> list[Product]:
    """List all products."""
    return repository.list(SortKey.parse(sort))


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    repository: ProductRepository = Depends(get_product_repository),
) -> Product:
    """Create a new product. Any id in the body is ignored."""
    return repository.create(data)


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: int,
    repository: ProductRepository = Depends(get_product_repository),
) -> Product:
    """Get a product by ID."""
    return _found(repository.get(product_id))


@router.put("/{product_id}", response_model=Product)
async def replace_product(
    product_id: int,
    data: ProductReplace,
    repository: ProductRepository = Depends(get_product_repository),
) -> Product:
    """Replace every field of a product."""
    return _found(repository.replace(product_id, data))


@router.patch("/{product_id}", response_model=Product)
async def patch_product(
    product_id: int,
    updates: dict[str, Any] = Body(...),
    repository: ProductRepository = Depends(get_product_repository),
) -> Product:
    """Partially update a product.

    Only name, description and price are applied; unknown fields and values of
    the wrong type are ignored.
    """
    return _found(repository.patch(product_id, updates))


@router.delete("/{product_id}", response_model=Product)
async def delete_product(
    product_id: int,
    repository: ProductRepository = Depends(get_product_repository),
) -> Product:
    """Delete a product and return the removed record."""
    return _found(repository.delete(product_id))
