"""Configuration layer."""
