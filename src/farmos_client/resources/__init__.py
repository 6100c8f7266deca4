"""Resource facades mapping farmOS operations onto endpoints."""

from .area import AreaClient
from .asset import AssetClient
from .log import LogClient
from .term import TermClient
from .vocabulary import VocabularyClient

__all__ = [
    "AreaClient",
    "AssetClient",
    "LogClient",
    "TermClient",
    "VocabularyClient",
]
