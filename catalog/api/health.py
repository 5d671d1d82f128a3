"""Health check endpoint."""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from catalog.api.dependencies import get_product_repository
from catalog.services.products import ProductRepository

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    products: int


@router.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request,
    repository: ProductRepository = Depends(get_product_repository),
) -> HealthResponse:
    """Liveness probe. Reports the number of stored products."""
    return HealthResponse(
        status="healthy",
        version=request.app.state.settings.app_version,
        products=repository.count(),
    )
