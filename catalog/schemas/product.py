"""Pydantic schemas for products."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class ProductBase(BaseModel):
    """Client-editable product fields.

    Fields are strict: "1.5" is rejected as a price rather than coerced, while
    integers remain valid prices. NaN and infinities are not prices either.
    Unknown keys, including a client-supplied id, are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    name: StrictStr = Field(default="", description="Product name")
    description: StrictStr = Field(default="", description="Free-form description")
    price: float = Field(
        default=0.0,
        strict=True,
        allow_inf_nan=False,
        description="Unit price, not range-checked",
    )


class ProductCreate(ProductBase):
    """Request body for creating a product."""

    pass


class ProductReplace(ProductBase):
    """Request body for a full replace. The id always comes from the path."""

    pass


class ProductId(BaseModel):
    id: int


class Product(ProductBase, ProductId):
    """A stored product. Serializes with ``id`` first."""
