from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from openai import OpenAI, OpenAIError

from ..errors import ConfigurationError, TranscriptionError
from ..pipeline.models import Transcript, TranscriptSegment


logger = logging.getLogger(__name__)


def format_timestamp(seconds: float) -> str:
    seconds = max(float(seconds), 0.0)
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"


def render_segments(segments: list[TranscriptSegment]) -> str:
    lines = [f"[{format_timestamp(segment.start)}] {segment.text.strip()}" for segment in segments]
    return "\n\n".join(lines)


def parse_segments(raw: dict) -> list[TranscriptSegment]:
    segments: list[TranscriptSegment] = []
    for item in raw.get("segments") or []:
        if not isinstance(item, dict):
            continue
        segments.append(
            TranscriptSegment(start=float(item.get("start") or 0.0), text=str(item.get("text") or ""))
        )
    return segments


def build_transcript(raw: dict) -> Transcript:
    """Render timed segments when present, otherwise pass ``text`` through."""
    segments = parse_segments(raw)
    if segments:
        text = render_segments(segments)
    else:
        text = raw.get("text") or ""
    if not text.strip():
        raise TranscriptionError("Speech-to-text response contained no transcript")
    return Transcript(text=text, raw=raw, segments=segments)


def _to_dict(response: Any) -> dict:
    if isinstance(response, dict):
        return response
    if hasattr(response, "model_dump"):
        return response.model_dump()
    if isinstance(response, str):
        return {"text": response}
    raise TranscriptionError(f"Unexpected speech-to-text response type: {type(response).__name__}")


class WhisperTranscriber:
    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str = "whisper-1",
        client: OpenAI | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def transcribe(self, audio_path: Path, timeout: float | None = None) -> Transcript:
        if not self.api_key:
            raise ConfigurationError("OpenAI API key not configured", stage="transcribing")

        options: dict[str, Any] = {}
        if timeout is not None:
            options["timeout"] = timeout
        try:
            with audio_path.open("rb") as audio_file:
                response = self.client.audio.transcriptions.create(
                    model=self.model,
                    file=audio_file,
                    response_format="verbose_json",
                    **options,
                )
        except OSError as exc:
            raise TranscriptionError(f"Could not read audio file: {exc}") from exc
        except OpenAIError as exc:
            raise TranscriptionError(f"Speech-to-text request failed: {exc}") from exc

        transcript = build_transcript(_to_dict(response))
        logger.info("transcribed %s (%d segments)", audio_path.name, len(transcript.segments))
        return transcript
