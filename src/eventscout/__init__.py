"""EventScout — Federated event search over a local store and an external discovery provider."""

__version__ = "0.1.0"
