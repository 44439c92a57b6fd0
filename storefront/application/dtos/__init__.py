"""Application DTOs (pydantic models at the API boundary)."""
