"""Pydantic models for request and response payloads."""
