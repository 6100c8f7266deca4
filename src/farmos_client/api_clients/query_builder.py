"""Query string helpers for farmOS RESTWS endpoints.

Endpoints are plain strings that accumulate query parameters. Every helper is
pure and returns a new string; ``None`` values leave the endpoint untouched so
optional filters can be threaded through unconditionally.
"""

from functools import partial, reduce
from typing import Any, Callable, Iterable, Optional

EndpointBuilder = Callable[[str], str]


def _format_value(value: Any) -> str:
    # farmOS expects 1/0 for boolean filters such as ``done`` and ``archived``
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def append_param(endpoint: str, name: str, value: Any) -> str:
    """Append ``name=value`` to ``endpoint`` unless ``value`` is None.

    The separator is omitted when the endpoint already ends with ``?``.
    """
    if value is None:
        return endpoint
    separator = "" if endpoint.endswith("?") else "&"
    return f"{endpoint}{separator}{name}={_format_value(value)}"


def append_array_of_params(
    endpoint: str, name: str, values: Optional[Iterable[Any]]
) -> str:
    """Append each element of ``values`` as ``name[i]=value``."""
    if values is None:
        return endpoint
    return reduce(
        lambda acc, item: append_param(acc, f"{name}[{item[0]}]", item[1]),
        enumerate(values),
        endpoint,
    )


def param(name: str, value: Any) -> EndpointBuilder:
    """Curried form of :func:`append_param` for use with :func:`compose`."""
    return partial(_append_param_to, name=name, value=value)


def array_param(name: str, values: Optional[Iterable[Any]]) -> EndpointBuilder:
    """Curried form of :func:`append_array_of_params`."""
    return partial(_append_array_to, name=name, values=values)


def _append_param_to(endpoint: str, *, name: str, value: Any) -> str:
    return append_param(endpoint, name, value)


def _append_array_to(
    endpoint: str, *, name: str, values: Optional[Iterable[Any]]
) -> str:
    return append_array_of_params(endpoint, name, values)


def compose(*builders: EndpointBuilder) -> EndpointBuilder:
    """Compose endpoint builders right to left."""

    def composed(endpoint: str) -> str:
        return reduce(lambda acc, builder: builder(acc), reversed(builders), endpoint)

    return composed


def resource_path(resource: str, resource_id: Any = None) -> str:
    """Return ``/resource/{id}.json`` or ``/resource.json`` without an id."""
    if resource_id is None:
        return f"/{resource}.json"
    return f"/{resource}/{resource_id}.json"
