"""Managed hostd endpoints."""

from .client import Host, HostdClient, HostUpdater

__all__ = [
    "Host",
    "HostdClient",
    "HostUpdater",
]
