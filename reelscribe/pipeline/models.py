from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


GENERIC_FAILURE_MESSAGE = "Failed to transcribe"


class PipelineState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    TRANSCRIBING = "transcribing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class MediaArtifacts:
    video_path: Path
    audio_path: Path

    def paths(self) -> list[Path]:
        return [self.video_path, self.audio_path]


@dataclass
class TranscriptSegment:
    start: float
    text: str


@dataclass
class Transcript:
    text: str
    raw: dict
    segments: list[TranscriptSegment] = field(default_factory=list)


@dataclass
class PipelineResult:
    state: PipelineState
    transcript: Optional[Transcript] = None
    error: Optional[str] = None
    details: Optional[str] = None
    failed_stage: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state is PipelineState.DONE

    def as_payload(self) -> dict:
        if self.ok and self.transcript is not None:
            return {"success": True, "transcription": self.transcript.text}
        return {
            "error": self.error or GENERIC_FAILURE_MESSAGE,
            "details": self.details or "",
            "stage": self.failed_stage,
        }


@dataclass
class PipelineRun:
    """Mutable per-invocation state, advanced as each stage starts."""

    state: PipelineState = PipelineState.IDLE

    def advance(self, state: PipelineState) -> None:
        self.state = state
