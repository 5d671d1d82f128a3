"""Catalog API Router - aggregates all routes."""

from fastapi import APIRouter

from catalog.api import auth, health, products

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(products.router)
