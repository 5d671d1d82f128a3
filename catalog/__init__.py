"""Catalog API - product catalog service with JWT bearer authentication."""

__version__ = "0.1.0"
