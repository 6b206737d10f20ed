from __future__ import annotations

from typing import Optional

from swapchart.config import Settings, get_settings
from swapchart.providers.base import ChainProvider
from swapchart.providers.loader import get_provider

# One provider (and its HTTP connection pool) per running API process
_provider: Optional[ChainProvider] = None


def get_chain_provider() -> ChainProvider:
    global _provider
    if _provider is None:
        _provider = get_provider()
    return _provider


async def close_chain_provider() -> None:
    global _provider
    if _provider is not None:
        await _provider.aclose()
        _provider = None


def get_app_settings() -> Settings:
    return get_settings()
