"""Defensive readers for untrusted provider records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def text_field(record: Mapping[str, Any], key: str) -> str:
    """Return a stripped string field; missing/None/non-scalar values read as ""."""
    value = record.get(key) if isinstance(record, Mapping) else None
    if value is None or isinstance(value, (bool, Mapping, list, tuple)):
        return ""
    return str(value).strip()


def source_description(record: Mapping[str, Any]) -> str:
    """``about_this_result.source.description`` or ""."""
    about = record.get("about_this_result") if isinstance(record, Mapping) else None
    if not isinstance(about, Mapping):
        return ""
    source = about.get("source")
    if not isinstance(source, Mapping):
        return ""
    return text_field(source, "description")


def searchable_text(record: Mapping[str, Any]) -> str:
    """Concatenated free text used for view-count mining."""
    return " ".join(
        (
            text_field(record, "title"),
            text_field(record, "snippet"),
            source_description(record),
        )
    )
