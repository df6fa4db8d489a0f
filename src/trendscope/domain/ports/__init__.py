from .cache import CachePort
from .random_source import RandomSource
from .search_provider import RawRecord, SearchProviderPort

__all__ = [
    "CachePort",
    "RandomSource",
    "RawRecord",
    "SearchProviderPort",
]
