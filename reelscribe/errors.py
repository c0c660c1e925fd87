"""
reelscribe.errors - Exception hierarchy for the transcription pipeline.

Every stage failure inherits from PipelineError and carries the name of the
stage that raised it, so the orchestrator can report where a run stopped.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all stage failures."""

    stage: str = "pipeline"

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class ConfigurationError(PipelineError):
    """A required credential or setting is missing."""

    stage = "configuration"


class ResolutionError(PipelineError):
    """The resolution API failed or returned no usable media URL."""

    stage = "resolving"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        fields: list[str] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.fields = fields or []


class FetchError(PipelineError):
    """Downloading the media file failed or timed out."""

    stage = "fetching"


class ExtractionError(PipelineError):
    """Audio conversion failed."""

    stage = "extracting"


class TranscriptionError(PipelineError):
    """The speech-to-text call failed or returned nothing usable."""

    stage = "transcribing"


class PipelineTimeoutError(PipelineError):
    """The overall pipeline deadline elapsed."""


class InvalidSourceError(ValueError):
    """The input URL does not belong to a supported platform."""

