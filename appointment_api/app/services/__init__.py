"""Store and helper services used by the API routes."""
