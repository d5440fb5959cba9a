"""Pydantic models shared by the adapters, the engine and the API."""
