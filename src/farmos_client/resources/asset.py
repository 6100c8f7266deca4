"""Farm asset endpoints (``/farm_asset``)."""

from typing import Any, Dict, Optional, Union

from ..api_clients.query_builder import append_param, compose, param, resource_path
from ..models import AssetFilter
from .base import ResourceClient

AssetId = Union[int, str]


class AssetClient(ResourceClient):
    """CRUD access to farm assets (plantings, animals, equipment, ...)."""

    async def get(self, asset_id: AssetId) -> Dict[str, Any]:
        """Fetch a single asset."""
        return await self._api.request(resource_path("farm_asset", asset_id))

    async def list(self, filters: Optional[AssetFilter] = None) -> Dict[str, Any]:
        """List assets, every page unless ``filters.page`` is set.

        Archived assets are excluded unless ``filters.archived`` is True.
        """
        filters = filters or AssetFilter()
        query = compose(
            param("archived", None if filters.archived else 0),
            param("type", filters.type or None),
        )("/farm_asset.json?")

        if filters.page is None:
            return await self._api.request_all(query)
        return await self._api.request(append_param(query, "page", filters.page))

    async def send(
        self, payload: Dict[str, Any], asset_id: Optional[AssetId] = None
    ) -> Dict[str, Any]:
        """Create an asset, or post an update to ``asset_id``."""
        endpoint = resource_path("farm_asset", asset_id)
        return await self._api.request(endpoint, method="POST", payload=payload)

    async def delete(self, asset_id: AssetId) -> Any:
        return await self._api.request(
            resource_path("farm_asset", asset_id), method="DELETE"
        )
