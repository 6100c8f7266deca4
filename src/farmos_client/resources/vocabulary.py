"""Taxonomy vocabulary endpoint (``/taxonomy_vocabulary.json``)."""

from typing import Any, Dict, Optional

from ..api_clients.query_builder import append_param
from .base import ResourceClient


class VocabularyClient(ResourceClient):
    """Read access to taxonomy vocabularies.

    Instances are callable, so ``client.vocabulary("farm_areas")`` works as a
    shorthand for :meth:`get`.
    """

    async def get(self, machine_name: Optional[str] = None) -> Dict[str, Any]:
        """List vocabularies, optionally only the one named ``machine_name``."""
        return await self._api.request(
            append_param("/taxonomy_vocabulary.json?", "machine_name", machine_name)
            if machine_name is not None
            else "/taxonomy_vocabulary.json"
        )

    async def __call__(self, machine_name: Optional[str] = None) -> Dict[str, Any]:
        return await self.get(machine_name)
