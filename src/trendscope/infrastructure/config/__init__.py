from __future__ import annotations

from .load import load_config
from .schema import AppConfig, CacheConfig, EnvOverrides, RankingConfig

__all__ = ["AppConfig", "CacheConfig", "EnvOverrides", "RankingConfig", "load_config"]
