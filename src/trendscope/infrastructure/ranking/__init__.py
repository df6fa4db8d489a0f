from .aggregator import RankingAggregator
from .estimator import MetricEstimator
from .jitter import SystemRandomSource
from .normalizer import ResultNormalizer
from .platforms import classify, site_scoped_query

__all__ = [
    "MetricEstimator",
    "RankingAggregator",
    "ResultNormalizer",
    "SystemRandomSource",
    "classify",
    "site_scoped_query",
]
