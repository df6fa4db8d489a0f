from __future__ import annotations


class TrendscopeError(Exception):
    """Base error for search domain/usecases."""

    code: str = "server_error"


class InputError(TrendscopeError):
    """Missing or invalid request input (empty term, bad page, bad URL)."""

    code = "invalid_input"


class ConfigError(TrendscopeError):
    """Provider credential or other required setting is missing."""

    code = "config_missing"


class UpstreamError(TrendscopeError):
    """The search provider answered with an explicit error payload."""

    code = "upstream_error"


class NetworkError(TrendscopeError):
    """Transport failure, timeout, unparsable body or non-2xx status."""

    code = "server_error"
