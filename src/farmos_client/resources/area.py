"""Area endpoints: taxonomy terms in the ``farm_areas`` vocabulary."""

import logging
from typing import Any, Dict, Optional, Union

from ..api_clients.exceptions import ResourceNotFoundError
from ..api_clients.query_builder import append_param, compose, param, resource_path
from ..models import AreaFilter
from .base import ResourceClient

logger = logging.getLogger(__name__)

AREA_VOCABULARY = "farm_areas"

AreaId = Union[int, str]


def area_vid(vocabularies: Dict[str, Any]) -> Any:
    """Find the vid of the farm_areas vocabulary in a vocabulary listing."""
    for vocabulary in (vocabularies or {}).get("list") or []:
        if vocabulary.get("machine_name") == AREA_VOCABULARY:
            return vocabulary.get("vid")
    raise ResourceNotFoundError(f"Vocabulary '{AREA_VOCABULARY}' not found")


class AreaClient(ResourceClient):
    """Access to areas (fields, beds, greenhouses, ...).

    The farm_areas vid is looked up before every operation and never cached,
    so each call costs one extra round trip.
    """

    async def _vid(self) -> Any:
        vid = area_vid(await self._api.request("/taxonomy_vocabulary.json"))
        logger.debug(f"Resolved {AREA_VOCABULARY} vocabulary to vid {vid}")
        return vid

    async def get(self, tid: AreaId) -> Dict[str, Any]:
        """Fetch a single area by term id."""
        vid = await self._vid()
        query = compose(param("tid", tid), param("vocabulary", vid))(
            "/taxonomy_term.json?"
        )
        return await self._api.request(query)

    async def list(self, filters: Optional[AreaFilter] = None) -> Dict[str, Any]:
        """List areas, every page unless ``filters.page`` is set."""
        filters = filters or AreaFilter()
        vid = await self._vid()
        query = compose(
            param("area_type", filters.type or None),
            param("vocabulary", vid),
        )("/taxonomy_term.json?")

        if filters.page is None:
            return await self._api.request_all(query)
        return await self._api.request(append_param(query, "page", filters.page))

    async def send(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create an area, or update it when ``payload`` carries a ``tid``."""
        vid = await self._vid()
        payload = {**payload, "vocabulary": vid}
        tid = payload.get("tid")
        if tid:
            return await self._api.request(
                f"/taxonomy_term/{tid}", method="PUT", payload=payload
            )
        return await self._api.request("/taxonomy_term", method="POST", payload=payload)

    async def delete(self, tid: AreaId) -> Any:
        # Resolved on every call, like the other area operations
        await self._vid()
        return await self._api.request(
            resource_path("taxonomy_term", tid), method="DELETE"
        )
