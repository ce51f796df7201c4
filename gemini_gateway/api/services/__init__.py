"""Services backing the API endpoints."""
