"""Exception hierarchy for the farmOS API clients."""

from typing import Any, Optional


class APIClientError(Exception):
    """Base exception for API client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationError(APIClientError):
    """Raised when no access token has been established or the server rejects it."""

    pass


class AuthorizationServerError(APIClientError):
    """Raised when the OAuth2 token endpoint rejects an exchange, refresh or revoke."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message, status_code)
        self.error_code = error_code


class PaginationError(APIClientError):
    """Raised when a paginated walk does not reach its final page."""

    pass


class ResourceNotFoundError(APIClientError):
    """Raised when a resource required to build a request is missing."""

    pass


class NetworkError(APIClientError):
    """Raised when the transport fails or the server answers with an error."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        user_guidance: Optional[str] = None,
    ):
        super().__init__(message, status_code)
        self.user_guidance = user_guidance or ""


class NetworkConnectionError(NetworkError):
    """Exception raised for connection-related network failures."""

    pass


class NetworkTimeoutError(NetworkError):
    """Exception raised for timeout-related network failures."""

    pass


class DNSResolutionError(NetworkError):
    """Exception raised for DNS resolution failures."""

    pass


class SSLCertificateError(NetworkError):
    """Exception raised for SSL certificate verification failures."""

    pass


class HTTPError(NetworkError):
    """Exception raised for any non-2xx response."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Any = None,
        user_guidance: Optional[str] = None,
    ):
        super().__init__(message, status_code, user_guidance)
        self.response = response


class ServerError(HTTPError):
    """Exception raised for server-side errors (5xx responses)."""

    pass


class RateLimitError(HTTPError):
    """Exception raised for rate limiting errors (429 responses)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = 429,
        response: Any = None,
        retry_after: Optional[int] = None,
        user_guidance: Optional[str] = None,
    ):
        super().__init__(message, status_code, response, user_guidance)
        self.retry_after = retry_after
