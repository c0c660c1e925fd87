import logging
import uuid
from pathlib import Path
from types import TracebackType
from typing import Optional

from ..pipeline.models import MediaArtifacts


logger = logging.getLogger(__name__)


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("failed to remove scratch file %s: %s", path, exc)


class ScratchArtifacts:
    """Reserve a video/audio path pair and delete both on exit.

    Names carry a per-invocation token so concurrent runs sharing one
    scratch directory never collide.
    """

    def __init__(self, scratch_dir: Path, video_suffix: str = ".mp4", audio_suffix: str = ".mp3") -> None:
        self.scratch_dir = scratch_dir
        self.token = uuid.uuid4().hex
        self.artifacts = MediaArtifacts(
            video_path=scratch_dir / f"video_{self.token}{video_suffix}",
            audio_path=scratch_dir / f"audio_{self.token}{audio_suffix}",
        )

    def __enter__(self) -> MediaArtifacts:
        ensure_dir(self.scratch_dir)
        return self.artifacts

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        for path in self.artifacts.paths():
            remove_quietly(path)
