"""Route modules for API v1."""
