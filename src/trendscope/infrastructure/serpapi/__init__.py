from .client import HttpxSerpApiClient

__all__ = ["HttpxSerpApiClient"]
