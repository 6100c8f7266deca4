"""Log endpoints (``/log``)."""

from typing import Any, Dict, Optional, Sequence, Union

from ..api_clients.query_builder import (
    append_param,
    array_param,
    compose,
    param,
    resource_path,
)
from ..models import LogFilter
from .base import ResourceClient

LogId = Union[int, str]


class LogClient(ResourceClient):
    """CRUD access to farm logs (activities, observations, harvests, ...)."""

    async def get(self, log_id: LogId) -> Dict[str, Any]:
        """Fetch a single log."""
        return await self._api.request(resource_path("log", log_id))

    async def get_many(self, log_ids: Sequence[LogId]) -> Dict[str, Any]:
        """Fetch several logs by id, batching the ids to bound URL length."""
        if not log_ids:
            return {"list": []}
        return await self._api.batch_request("id", list(log_ids), "/log.json?")

    async def list(self, filters: Optional[LogFilter] = None) -> Dict[str, Any]:
        """List logs matching ``filters``, every page unless a page is given."""
        filters = filters or LogFilter()
        query = compose(
            param("log_owner", filters.log_owner),
            param("done", filters.done),
            array_param("type", filters.type or None),
        )("/log.json?")

        if filters.page is None:
            return await self._api.request_all(query)
        return await self._api.request(append_param(query, "page", filters.page))

    async def send(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a log, or update it in place when ``payload`` has an ``id``.

        Updates return the server response with ``id``, ``uri`` and
        ``resource`` added so that it mirrors a create response.
        """
        log_id = payload.get("id")
        if log_id:
            response = await self._api.request(
                f"/log/{log_id}", method="PUT", payload=payload
            )
            return {
                **(response or {}),
                "id": log_id,
                "uri": f"{self._api.host}/log/{log_id}",
                "resource": "log",
            }
        return await self._api.request("/log", method="POST", payload=payload)

    async def delete(self, log_id: LogId) -> Any:
        return await self._api.request(resource_path("log", log_id), method="DELETE")
