from __future__ import annotations

import logging
from typing import Any

import requests

from .base import BasePlatform
from .extraction import describe_fields, extract_media_url
from ..config import Settings
from ..errors import ConfigurationError, ResolutionError


logger = logging.getLogger(__name__)

ERROR_SUMMARY_LIMIT = 200


def _summarize_body(response: requests.Response) -> str:
    text = response.text or ""
    if len(text) > ERROR_SUMMARY_LIMIT:
        return text[:ERROR_SUMMARY_LIMIT] + "..."
    return text


def _parse_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class InstagramPlatform(BasePlatform):
    name = "instagram"

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"https://{self.settings.rapidapi_host}/convert"

    def matches(self, value: str) -> bool:
        return bool(value) and self.settings.source_domain in value

    def resolve(self, value: str, timeout: float | None = None) -> str:
        if not self.settings.rapidapi_key:
            raise ConfigurationError("RapidAPI key not configured", stage="resolving")

        headers = {
            "x-rapidapi-host": self.settings.rapidapi_host,
            "x-rapidapi-key": self.settings.rapidapi_key,
        }
        try:
            response = self.session.get(
                self.endpoint,
                params={"url": value},
                headers=headers,
                timeout=timeout if timeout is not None else self.settings.resolve_timeout,
            )
        except requests.RequestException as exc:
            raise ResolutionError(f"RapidAPI request failed: {exc}") from exc

        if response.status_code >= 400:
            raise ResolutionError(
                f"RapidAPI Error: {response.status_code} - {_summarize_body(response)}",
                status_code=response.status_code,
            )

        payload = _parse_body(response)
        logger.debug(
            "resolution response type=%s fields=%s",
            type(payload).__name__,
            describe_fields(payload),
        )
        return extract_media_url(payload)
