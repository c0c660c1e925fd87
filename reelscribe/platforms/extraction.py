"""
Media URL extraction from loosely-typed resolution API payloads.

The resolution API does not keep a stable response shape, so each known
shape is handled by a small pure rule ``(payload) -> Optional[str]``.
Rules are tried in ``EXTRACTION_RULES`` order and the first hit wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Optional

from ..errors import ResolutionError


URL_FIELDS = ("url", "video_url", "download_url")
NESTED_FIELDS = ("result", "data")

Rule = Callable[[Any], Optional[str]]


def from_string(payload: Any) -> Optional[str]:
    if isinstance(payload, str) and payload.startswith("http"):
        return payload
    return None


def from_url_field(payload: Any) -> Optional[str]:
    if not isinstance(payload, Mapping):
        return None
    for name in URL_FIELDS:
        value = payload.get(name)
        if isinstance(value, str) and value:
            return value
    return None


def _pick_media_candidate(media: list) -> Any:
    for candidate in media:
        if not isinstance(candidate, Mapping):
            continue
        if candidate.get("type") == "video" or candidate.get("quality") == "HD":
            return candidate
    return media[0]


def from_media_list(payload: Any) -> Optional[str]:
    if not isinstance(payload, Mapping):
        return None
    media = payload.get("media")
    if not isinstance(media, list) or not media:
        return None
    return from_url_field(_pick_media_candidate(media))


def from_nested(payload: Any) -> Optional[str]:
    # One level only: the nested value gets the string and field rules.
    if not isinstance(payload, Mapping):
        return None
    for name in NESTED_FIELDS:
        nested = payload.get(name)
        if not nested:
            continue
        url = from_string(nested) or from_url_field(nested)
        if url:
            return url
    return None


EXTRACTION_RULES: tuple[Rule, ...] = (
    from_string,
    from_url_field,
    from_media_list,
    from_nested,
)


def describe_fields(payload: Any) -> list[str]:
    if isinstance(payload, Mapping):
        return sorted(str(key) for key in payload.keys())
    return []


def extract_media_url(payload: Any, rules: tuple[Rule, ...] = EXTRACTION_RULES) -> str:
    for rule in rules:
        url = rule(payload)
        if url:
            return url
    fields = describe_fields(payload)
    raise ResolutionError(
        f"Could not extract video URL from response. Response structure: {fields}",
        fields=fields,
    )
