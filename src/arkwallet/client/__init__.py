"""Wallet service API client."""

from arkwallet.client.api import ROUTES, Endpoint, WalletApiClient
from arkwallet.client.errors import ApiError, HttpError, ShapeError, TransportError

__all__ = [
    "ROUTES",
    "Endpoint",
    "WalletApiClient",
    "ApiError",
    "HttpError",
    "ShapeError",
    "TransportError",
]
