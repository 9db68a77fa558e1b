"""Python client for the memo board: HTTP API wrapper, observable stores and route guard."""

from memobbs.client.api import ApiClientError, MemoApiClient
from memobbs.client.router import Navigation, Router
from memobbs.client.storage import JsonFileTokenStorage, MemoryTokenStorage
from memobbs.client.stores import AuthStore, MemoStore, Store

__all__ = [
    "ApiClientError",
    "AuthStore",
    "JsonFileTokenStorage",
    "MemoApiClient",
    "MemoStore",
    "MemoryTokenStorage",
    "Navigation",
    "Router",
    "Store",
]
