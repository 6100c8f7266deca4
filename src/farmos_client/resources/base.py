"""Shared plumbing for resource facades."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..api_clients.base_client import FarmOSAPIClient


class ResourceClient:
    """Maps resource operations onto the shared authenticated API client."""

    def __init__(self, api_client: "FarmOSAPIClient"):
        self._api = api_client
