"""Clients for external services."""

from .removebg import RemoveBgClient, compute_backoff

__all__ = ["RemoveBgClient", "compute_backoff"]
