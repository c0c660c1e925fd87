"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from reelscribe.asr.providers import build_transcript
from reelscribe.config import Settings
from reelscribe.pipeline.runner import PipelineRunner
from reelscribe.platforms.base import BasePlatform
from reelscribe.platforms.resolver import PlatformResolver


REEL_URL = "https://www.instagram.com/reel/Cabc123/"
MEDIA_URL = "https://cdn.example/video.mp4"
VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42fake-video"
AUDIO_BYTES = b"ID3\x03\x00fake-audio"


class FakePlatform(BasePlatform):
    name = "fake"

    def __init__(self, media_url: str = MEDIA_URL, error: Exception | None = None) -> None:
        self.media_url = media_url
        self.error = error
        self.calls: list[str] = []

    def matches(self, value: str) -> bool:
        return "instagram.com" in value

    def resolve(self, value: str, timeout: float | None = None) -> str:
        self.calls.append(value)
        if self.error:
            raise self.error
        return self.media_url


class FakeFetcher:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, Path]] = []

    def fetch(self, url: str, destination: Path, timeout: float | None = None) -> Path:
        self.calls.append((url, destination))
        destination.write_bytes(VIDEO_BYTES)
        if self.error:
            raise self.error
        return destination


class FakeExtractor:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[Path, Path]] = []

    def extract(self, video_path: Path, audio_path: Path, timeout: float | None = None) -> Path:
        self.calls.append((video_path, audio_path))
        audio_path.write_bytes(AUDIO_BYTES)
        if self.error:
            raise self.error
        return audio_path


class FakeTranscriber:
    def __init__(self, raw: dict | None = None, error: Exception | None = None) -> None:
        self.raw = raw or {
            "text": "Hi there",
            "segments": [{"start": 0, "text": "Hi"}, {"start": 3, "text": "there"}],
        }
        self.error = error
        self.calls: list[Path] = []

    def transcribe(self, audio_path: Path, timeout: float | None = None):
        self.calls.append(audio_path)
        if self.error:
            raise self.error
        return build_transcript(self.raw)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        rapidapi_key="rapid-key",
        rapidapi_host="resolver.example.com",
        openai_api_key="openai-key",
        openai_base_url="https://api.openai.example/v1",
        asr_model="whisper-1",
        scratch_dir=tmp_path / "scratch",
        fetch_timeout=30.0,
        resolve_timeout=30.0,
        pipeline_timeout=300.0,
        audio_codec="libmp3lame",
        audio_bitrate="128k",
        source_domain="instagram.com",
    )


@pytest.fixture
def stages() -> dict:
    """Return a fresh set of fake pipeline stages."""
    return {
        "platform": FakePlatform(),
        "fetcher": FakeFetcher(),
        "extractor": FakeExtractor(),
        "transcriber": FakeTranscriber(),
    }


def build_runner(settings: Settings, stages: dict) -> PipelineRunner:
    return PipelineRunner(
        settings=settings,
        platform_resolver=PlatformResolver([stages["platform"]]),
        fetcher=stages["fetcher"],
        audio_extractor=stages["extractor"],
        transcriber=stages["transcriber"],
    )


@pytest.fixture
def runner(settings: Settings, stages: dict) -> PipelineRunner:
    return build_runner(settings, stages)
