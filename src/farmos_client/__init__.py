"""
farmOS client - asynchronous API client for farmOS 1.x servers.

Authenticates with OAuth2, handles the RESTWS CSRF token and exposes the
area, asset, log, term and vocabulary resources.
"""

from .api_clients import (
    APIClientError,
    AuthenticationError,
    AuthorizationServerError,
    HTTPError,
    NetworkError,
    PaginationError,
    ResourceNotFoundError,
)
from .client import FarmOSClient, farmOS
from .config import ConfigManager, FarmOSConfig
from .models import AreaFilter, AssetFilter, LogFilter, TermFilter

__version__ = "0.1.0"

__all__ = [
    "farmOS",
    "FarmOSClient",
    "FarmOSConfig",
    "ConfigManager",
    "AreaFilter",
    "AssetFilter",
    "LogFilter",
    "TermFilter",
    "APIClientError",
    "AuthenticationError",
    "AuthorizationServerError",
    "HTTPError",
    "NetworkError",
    "PaginationError",
    "ResourceNotFoundError",
]
