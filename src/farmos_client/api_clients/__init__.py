"""API client layer for farmOS.

Token management, CSRF handling, the authenticated request pipeline and the
pagination and batching helpers used by the resource facades.
"""

from .base_client import FarmOSAPIClient, last_page_number
from .csrf_token import CSRFTokenFetcher
from .exceptions import (
    APIClientError,
    AuthenticationError,
    AuthorizationServerError,
    DNSResolutionError,
    HTTPError,
    NetworkConnectionError,
    NetworkError,
    NetworkTimeoutError,
    PaginationError,
    RateLimitError,
    ResourceNotFoundError,
    ServerError,
    SSLCertificateError,
)
from .network_error_handler import NetworkErrorHandler
from .token_manager import AccessToken, OAuth2TokenManager

__all__ = [
    # Base client
    "FarmOSAPIClient",
    "last_page_number",
    # Tokens
    "AccessToken",
    "OAuth2TokenManager",
    "CSRFTokenFetcher",
    # Errors
    "APIClientError",
    "AuthenticationError",
    "AuthorizationServerError",
    "PaginationError",
    "ResourceNotFoundError",
    "NetworkError",
    "NetworkConnectionError",
    "NetworkTimeoutError",
    "DNSResolutionError",
    "SSLCertificateError",
    "HTTPError",
    "ServerError",
    "RateLimitError",
    "NetworkErrorHandler",
]
