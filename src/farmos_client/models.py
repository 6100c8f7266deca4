"""Filter types for farmOS list requests.

Each resource exposes one method per request shape (single id, id list,
filtered listing); these dataclasses carry the filters for the listing form.
A ``page`` of None requests every page.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class AssetFilter:
    """Filters for ``/farm_asset.json``."""

    type: Optional[str] = None
    archived: bool = False
    page: Optional[int] = None


@dataclass
class LogFilter:
    """Filters for ``/log.json``."""

    type: List[str] = field(default_factory=list)
    log_owner: Optional[int] = None
    done: Optional[bool] = None
    page: Optional[int] = None


@dataclass
class TermFilter:
    """Filters for ``/taxonomy_term.json``."""

    vocabulary: Optional[int] = None
    name: Optional[str] = None
    page: Optional[int] = None


@dataclass
class AreaFilter:
    """Filters for area terms in the ``farm_areas`` vocabulary."""

    type: Optional[str] = None
    page: Optional[int] = None
