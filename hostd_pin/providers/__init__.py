"""Provider factory and exports."""

from .base import BaseQuoteProvider
from .siacentral import SiaCentralClient


def get_provider(provider_name: str, **kwargs) -> BaseQuoteProvider:
    """Get provider by canonical name.

    Canonical names:
    - "siacentral"
    """
    if provider_name == "siacentral":
        return SiaCentralClient(**kwargs)
    raise ValueError(f"Unknown provider: {provider_name}")


__all__ = [
    "BaseQuoteProvider",
    "SiaCentralClient",
    "get_provider",
]
