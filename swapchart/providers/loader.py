from swapchart.config import get_settings
from swapchart.providers.base import ChainProvider
from swapchart.providers.jsonrpc import JsonRpcProvider


def get_provider() -> ChainProvider:
    """
    Provider loader / factory.

    Reads PROVIDER from config and returns an instance of the selected provider.
    This is the single place that knows about concrete providers.
    """
    settings = get_settings()
    provider_name = settings.provider.strip().upper()

    if provider_name == "JSONRPC":
        return JsonRpcProvider(settings.rpc_url, timeout_s=settings.rpc_timeout_seconds)

    raise ValueError(f"Unknown PROVIDER='{settings.provider}'. Expected: JSONRPC")
