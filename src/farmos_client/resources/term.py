"""Taxonomy term endpoints (``/taxonomy_term``)."""

from typing import Any, Dict, Optional, Union

from ..api_clients.query_builder import append_param, compose, param, resource_path
from ..models import TermFilter
from .base import ResourceClient

TermId = Union[int, str]


class TermClient(ResourceClient):
    """Access to taxonomy terms such as crops, units and categories."""

    async def get(self, tid: TermId) -> Dict[str, Any]:
        return await self._api.request(resource_path("taxonomy_term", tid))

    async def get_bundle(self, machine_name: str) -> Dict[str, Any]:
        """Fetch every term of the vocabulary bundle ``machine_name``."""
        return await self._api.request_all(
            append_param("/taxonomy_term.json?", "bundle", machine_name)
        )

    async def list(self, filters: Optional[TermFilter] = None) -> Dict[str, Any]:
        filters = filters or TermFilter()
        query = compose(
            param("vocabulary", filters.vocabulary),
            param("name", filters.name),
        )("/taxonomy_term.json?")

        if filters.page is None:
            return await self._api.request_all(query)
        return await self._api.request(append_param(query, "page", filters.page))

    async def send(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a term, or update it when ``payload`` carries a ``tid``."""
        tid = payload.get("tid")
        if tid:
            return await self._api.request(
                f"/taxonomy_term/{tid}", method="PUT", payload=payload
            )
        return await self._api.request("/taxonomy_term", method="POST", payload=payload)

    async def delete(self, tid: TermId) -> Any:
        return await self._api.request(
            resource_path("taxonomy_term", tid), method="DELETE"
        )
