from .api_client import TrendscopeApiClient

__all__ = ["TrendscopeApiClient"]
