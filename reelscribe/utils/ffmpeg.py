from pathlib import Path
import shutil
import subprocess
from typing import Optional

import ffmpeg


def _ensure_ffmpeg() -> None:
    if not shutil.which("ffmpeg"):
        raise FileNotFoundError(
            "ffmpeg not found in PATH. Install ffmpeg and ensure it is available in PATH."
        )


def extract_audio(
    video_path: Path,
    audio_path: Path,
    codec: str = "libmp3lame",
    bitrate: str = "128k",
    timeout: Optional[float] = None,
) -> Path:
    """Drop the video stream and re-encode audio at a constant bit rate.

    Raises ``ffmpeg.Error`` on a non-zero exit and ``subprocess.TimeoutExpired``
    when the conversion outlives ``timeout``.
    """
    _ensure_ffmpeg()
    stream = (
        ffmpeg
        .input(str(video_path))
        .output(str(audio_path), vn=None, acodec=codec, ab=bitrate)
    )
    process = stream.run_async(
        pipe_stdin=True, pipe_stdout=True, pipe_stderr=True, overwrite_output=True
    )
    try:
        out, err = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        process.kill()
        process.communicate()
        raise
    if process.returncode != 0:
        raise ffmpeg.Error("ffmpeg", out, err)
    return audio_path
