from __future__ import annotations


class SwapChartError(Exception):
    """Base class for every error this package raises on purpose."""


class ValidationError(SwapChartError):
    """Missing or malformed input (user-correctable)."""


class NotFoundError(SwapChartError):
    """No trading pair exists for the token against the quote asset."""


class UpstreamError(SwapChartError):
    """JSON-RPC provider or network failure."""


class DecodeError(UpstreamError):
    """A log or call result could not be decoded."""


class ClientFetchError(SwapChartError):
    """The polling client could not get a usable payload from the API."""
