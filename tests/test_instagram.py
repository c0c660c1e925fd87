"""Tests for the Instagram resolution platform."""

from __future__ import annotations

import dataclasses
from unittest.mock import MagicMock

import pytest
import requests

from reelscribe.errors import ConfigurationError, InvalidSourceError, ResolutionError
from reelscribe.platforms.instagram import InstagramPlatform
from reelscribe.platforms.resolver import PlatformResolver


REEL_URL = "https://www.instagram.com/reel/Cabc123/"


def _response(status_code: int = 200, json_body=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if json_body is None:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = json_body
    return response


def _platform(settings, response=None, error=None) -> tuple[InstagramPlatform, MagicMock]:
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return InstagramPlatform(settings, session=session), session


class TestMatches:
    def test_instagram_url(self, settings) -> None:
        platform, _ = _platform(settings)
        assert platform.matches(REEL_URL)

    def test_other_domain(self, settings) -> None:
        platform, _ = _platform(settings)
        assert not platform.matches("https://example.com/x")

    def test_empty(self, settings) -> None:
        platform, _ = _platform(settings)
        assert not platform.matches("")


class TestResolve:
    def test_sends_single_authenticated_request(self, settings) -> None:
        platform, session = _platform(
            settings, _response(json_body={"url": "https://cdn.example/video.mp4"})
        )

        assert platform.resolve(REEL_URL) == "https://cdn.example/video.mp4"
        session.get.assert_called_once_with(
            "https://resolver.example.com/convert",
            params={"url": REEL_URL},
            headers={
                "x-rapidapi-host": "resolver.example.com",
                "x-rapidapi-key": "rapid-key",
            },
            timeout=30.0,
        )

    def test_explicit_timeout_wins(self, settings) -> None:
        platform, session = _platform(
            settings, _response(json_body={"url": "https://cdn.example/video.mp4"})
        )
        platform.resolve(REEL_URL, timeout=5.0)
        assert session.get.call_args.kwargs["timeout"] == 5.0

    def test_exhausted_budget_is_not_replaced_by_default(self, settings) -> None:
        platform, session = _platform(
            settings, _response(json_body={"url": "https://cdn.example/video.mp4"})
        )
        platform.resolve(REEL_URL, timeout=0.0)
        assert session.get.call_args.kwargs["timeout"] == 0.0

    def test_text_body_is_treated_as_string_payload(self, settings) -> None:
        platform, _ = _platform(settings, _response(text="https://cdn.example/plain.mp4"))
        assert platform.resolve(REEL_URL) == "https://cdn.example/plain.mp4"

    def test_missing_key_is_configuration_error(self, settings) -> None:
        settings = dataclasses.replace(settings, rapidapi_key="")
        platform, session = _platform(settings, _response(json_body={}))

        with pytest.raises(ConfigurationError, match="RapidAPI key not configured"):
            platform.resolve(REEL_URL)
        session.get.assert_not_called()

    def test_upstream_error_carries_status_and_bounded_body(self, settings) -> None:
        body = "x" * 5000
        platform, _ = _platform(settings, _response(status_code=429, text=body))

        with pytest.raises(ResolutionError) as excinfo:
            platform.resolve(REEL_URL)

        assert excinfo.value.status_code == 429
        assert "429" in str(excinfo.value)
        assert len(str(excinfo.value)) < 300

    def test_transport_error(self, settings) -> None:
        platform, _ = _platform(settings, error=requests.ConnectionError("refused"))
        with pytest.raises(ResolutionError, match="refused"):
            platform.resolve(REEL_URL)

    def test_unextractable_payload(self, settings) -> None:
        platform, _ = _platform(settings, _response(json_body={"status": "fail", "msg": "nope"}))
        with pytest.raises(ResolutionError) as excinfo:
            platform.resolve(REEL_URL)
        assert excinfo.value.fields == ["msg", "status"]


class TestPlatformResolver:
    def test_supports(self, settings) -> None:
        platform, _ = _platform(settings)
        resolver = PlatformResolver([platform])
        assert resolver.supports(REEL_URL)
        assert not resolver.supports("https://example.com/x")

    def test_unsupported_input(self, settings) -> None:
        platform, session = _platform(settings)
        resolver = PlatformResolver([platform])
        with pytest.raises(InvalidSourceError):
            resolver.resolve("https://example.com/x")
        session.get.assert_not_called()
