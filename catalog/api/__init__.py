"""HTTP routes for the catalog API."""
