"""HTTP layer for the storefront (FastAPI)."""
