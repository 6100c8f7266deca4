"""Network Error Handler for the farmOS API client.

Classifies httpx transport and status errors into the client's exception
hierarchy and attaches troubleshooting guidance. Nothing here retries: every
failure is raised to the caller with the original httpx error chained.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import List, NoReturn, Optional, cast

import httpx

from .exceptions import (
    AuthenticationError,
    DNSResolutionError,
    HTTPError,
    NetworkConnectionError,
    NetworkError,
    NetworkTimeoutError,
    RateLimitError,
    ServerError,
    SSLCertificateError,
)

logger = logging.getLogger(__name__)


@dataclass
class UserGuidance:
    """User guidance information for network errors."""

    error_type: str
    troubleshooting_steps: List[str]
    additional_notes: List[str] = field(default_factory=list)

    def format_for_console(self) -> str:
        """Format guidance as plain text suitable for a terminal."""
        content = [f"Error Type: {self.error_type}", "", "Troubleshooting Steps:"]

        for i, step in enumerate(self.troubleshooting_steps, 1):
            content.append(f"{i}. {step}")

        if self.additional_notes:
            content.append("")
            content.append("Additional Notes:")
            for note in self.additional_notes:
                content.append(f"- {note}")

        return "\n".join(content)


class UserGuidanceProvider:
    """Provides user guidance for different network error scenarios."""

    def __init__(self):
        self._guidance_mapping = {
            NetworkConnectionError: self._get_connection_error_guidance,
            DNSResolutionError: self._get_dns_resolution_guidance,
            SSLCertificateError: self._get_ssl_certificate_guidance,
            NetworkTimeoutError: self._get_timeout_guidance,
            ServerError: self._get_server_error_guidance,
            RateLimitError: self._get_rate_limit_guidance,
        }

    def get_guidance(self, error: Exception) -> UserGuidance:
        """Get user guidance for a specific error."""
        guidance_func = self._guidance_mapping.get(
            type(error), self._get_generic_guidance
        )
        return cast(UserGuidance, guidance_func(error))

    def _get_connection_error_guidance(self, error: Exception) -> UserGuidance:
        return UserGuidance(
            error_type="Network Connection Error",
            troubleshooting_steps=[
                "Check that the farmOS server is running and reachable",
                "Verify the host URL passed to the client",
                "Check firewall and proxy settings",
            ],
        )

    def _get_dns_resolution_guidance(self, error: Exception) -> UserGuidance:
        return UserGuidance(
            error_type="DNS Resolution Error",
            troubleshooting_steps=[
                "Verify the farmOS hostname is spelled correctly",
                "Check your DNS settings or try the server's IP address",
            ],
            additional_notes=["DNS resolution issues are often temporary"],
        )

    def _get_ssl_certificate_guidance(self, error: Exception) -> UserGuidance:
        return UserGuidance(
            error_type="SSL Certificate Error",
            troubleshooting_steps=[
                "Check that the server certificate is valid and not expired",
                "Verify the hostname matches the certificate",
            ],
            additional_notes=[
                "Only disable verify_ssl for local development servers",
            ],
        )

    def _get_timeout_guidance(self, error: Exception) -> UserGuidance:
        return UserGuidance(
            error_type="Network Timeout",
            troubleshooting_steps=[
                "Check your network connection",
                "Increase the client timeout for slow servers",
            ],
        )

    def _get_server_error_guidance(self, error: Exception) -> UserGuidance:
        return UserGuidance(
            error_type="Server Error",
            troubleshooting_steps=[
                "The farmOS server failed to handle the request",
                "Check the server's watchdog log for details",
            ],
        )

    def _get_rate_limit_guidance(self, error: Exception) -> UserGuidance:
        retry_after = getattr(error, "retry_after", None)
        steps = ["Reduce the request rate"]
        if retry_after:
            steps.append(f"Wait {retry_after} seconds before sending more requests")
        return UserGuidance(error_type="Rate Limited", troubleshooting_steps=steps)

    def _get_generic_guidance(self, error: Exception) -> UserGuidance:
        return UserGuidance(
            error_type="Network Error",
            troubleshooting_steps=[
                "Check your network connection",
                "Verify the farmOS server is accessible",
            ],
        )


class NetworkErrorHandler:
    """Maps httpx failures onto the client's NetworkError hierarchy."""

    def __init__(self):
        self.guidance_provider = UserGuidanceProvider()
        self._dns_error_patterns = [
            r"name.*resolution.*failed",
            r"name.*or.*service.*not.*known",
            r"nodename.*nor.*servname.*provided",
            r"temporary.*failure.*in.*name.*resolution",
        ]
        self._ssl_error_patterns = [
            r"ssl.*certificate.*verification.*failed",
            r"certificate.*verify.*failed",
            r"ssl.*handshake.*failed",
            r"bad.*certificate",
        ]

    def classify_network_error(self, error: Exception) -> NoReturn:
        """Classify an httpx error and raise the matching client exception.

        Args:
            error: The original httpx exception

        Raises:
            NetworkError: Always; a subclass chosen from the error's kind
        """
        error_message = str(error).lower()

        if isinstance(error, httpx.HTTPStatusError):
            self._handle_http_status_error(error)
        if isinstance(error, httpx.ConnectError):
            self._handle_connect_error(error, error_message)
        if isinstance(error, httpx.TimeoutException):
            self._raise_with_guidance(
                NetworkTimeoutError(f"Request to farmOS timed out: {error}"), error
            )
        if isinstance(error, httpx.TransportError):
            self._raise_with_guidance(
                NetworkConnectionError(f"Network error: {error}"), error
            )
        self._raise_with_guidance(
            NetworkError(f"Unknown network error: {error}"), error
        )

    def raise_for_status(self, response: httpx.Response) -> None:
        """Raise a classified HTTPError when ``response`` is not 2xx."""
        if response.is_success:
            return
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self.classify_network_error(e)
        # 1xx and 3xx answers that httpx does not consider errors
        raise HTTPError(
            f"Unexpected HTTP {response.status_code} from {response.request.url}",
            status_code=response.status_code,
            response=response,
        )

    def _handle_connect_error(
        self, error: httpx.ConnectError, error_message: str
    ) -> NoReturn:
        if any(re.search(p, error_message) for p in self._dns_error_patterns):
            self._raise_with_guidance(
                DNSResolutionError(
                    "Cannot resolve farmOS server address. Check the host URL."
                ),
                error,
            )
        if any(re.search(p, error_message) for p in self._ssl_error_patterns):
            self._raise_with_guidance(
                SSLCertificateError(
                    "SSL certificate verification failed for the farmOS server."
                ),
                error,
            )
        self._raise_with_guidance(
            NetworkConnectionError(f"Connection failed: {error}"), error
        )

    def _handle_http_status_error(self, error: httpx.HTTPStatusError) -> NoReturn:
        response = error.response
        status_code = response.status_code
        error_detail = self._extract_error_detail(response)
        logger.debug(f"HTTP {status_code} from {error.request.url}: {error_detail}")

        if status_code == 401:
            raise AuthenticationError(
                f"farmOS rejected the access token: {error_detail}",
                status_code=status_code,
            ) from error

        if status_code == 429:
            retry_after: Optional[int] = None
            if "Retry-After" in response.headers:
                try:
                    retry_after = int(response.headers["Retry-After"])
                except ValueError:
                    retry_after = 60
            self._raise_with_guidance(
                RateLimitError(
                    error_detail, response=response, retry_after=retry_after
                ),
                error,
            )

        if 500 <= status_code < 600:
            self._raise_with_guidance(
                ServerError(
                    f"farmOS server error: {error_detail}",
                    status_code=status_code,
                    response=response,
                ),
                error,
            )

        raise HTTPError(
            error_detail, status_code=status_code, response=response
        ) from error

    @staticmethod
    def _extract_error_detail(response: httpx.Response) -> str:
        """Pull a human readable message out of an error response."""
        status_code = response.status_code
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError):
            text = response.text.strip()
            return text[:200] if text else f"HTTP {status_code}"
        if isinstance(data, dict):
            for key in ("error_description", "detail", "message", "error"):
                if data.get(key):
                    return str(data[key])
        if isinstance(data, list) and data:
            return str(data[0])
        return f"HTTP {status_code}"

    def _raise_with_guidance(
        self, network_error: NetworkError, cause: Exception
    ) -> NoReturn:
        guidance = self.guidance_provider.get_guidance(network_error)
        network_error.user_guidance = guidance.format_for_console()
        raise network_error from cause
