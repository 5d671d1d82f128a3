# Catalog Pydantic Schemas
from catalog.schemas.auth import MessageResponse, TokenResponse
from catalog.schemas.product import Product, ProductCreate, ProductReplace

__all__ = [
    "MessageResponse",
    "Product",
    "ProductCreate",
    "ProductReplace",
    "TokenResponse",
]
