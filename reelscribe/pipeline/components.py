from __future__ import annotations

import logging
import subprocess
import threading
import time
from pathlib import Path

import ffmpeg
import requests
from tqdm import tqdm

from ..errors import ExtractionError, FetchError
from ..utils.ffmpeg import extract_audio as _extract_audio
from ..utils.file import remove_quietly


logger = logging.getLogger(__name__)

STDERR_TAIL = 500


class MediaFetcher:
    """Stream a remote media file to disk under a total time budget."""

    def __init__(
        self,
        timeout: float = 30.0,
        chunk_size: int = 8192,
        show_progress: bool = False,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.show_progress = show_progress
        self.session = session or requests.Session()

    def fetch(self, url: str, destination: Path, timeout: float | None = None) -> Path:
        budget = timeout if timeout is not None else self.timeout
        started = time.monotonic()
        # The destination only appears once the whole body has been written.
        part_path = destination.with_name(destination.name + ".part")
        completed = False
        try:
            try:
                response = self.session.get(url, stream=True, timeout=budget)
            except requests.Timeout as exc:
                raise FetchError(f"Timed out connecting to media host after {budget:g}s") from exc
            except requests.RequestException as exc:
                raise FetchError(f"Media download failed: {exc}") from exc

            with response:
                if not 200 <= response.status_code < 300:
                    raise FetchError(f"Media download failed with status {response.status_code}")

                # Socket timeouts restart on every byte, so a trickling host
                # is cut off by closing the response once the budget is spent.
                expired = threading.Event()

                def _expire() -> None:
                    expired.set()
                    response.close()

                watchdog = threading.Timer(max(budget - (time.monotonic() - started), 0.0), _expire)
                watchdog.daemon = True
                watchdog.start()
                try:
                    self._stream(response, part_path, destination.name, started, budget)
                except FetchError:
                    raise
                except Exception as exc:
                    if expired.is_set():
                        raise FetchError(f"Media download timed out after {budget:g}s") from exc
                    if isinstance(exc, requests.RequestException):
                        raise FetchError(f"Media stream interrupted: {exc}") from exc
                    if isinstance(exc, OSError):
                        raise FetchError(f"Could not write media file: {exc}") from exc
                    raise
                finally:
                    watchdog.cancel()
                if expired.is_set():
                    raise FetchError(f"Media download timed out after {budget:g}s")

            part_path.replace(destination)
            completed = True
        finally:
            if not completed:
                remove_quietly(part_path)

        logger.info("downloaded %s (%d bytes)", destination.name, destination.stat().st_size)
        return destination

    def _stream(
        self,
        response: requests.Response,
        part_path: Path,
        label: str,
        started: float,
        budget: float,
    ) -> None:
        total = int(response.headers.get("content-length", 0) or 0)
        with open(part_path, "wb") as f, tqdm(
            total=total,
            unit="B",
            unit_scale=True,
            desc=f"Downloading {label}",
            disable=not self.show_progress,
        ) as progress:
            for chunk in response.iter_content(chunk_size=self.chunk_size):
                if time.monotonic() - started > budget:
                    raise FetchError(f"Media download timed out after {budget:g}s")
                if chunk:
                    f.write(chunk)
                    progress.update(len(chunk))


class AudioExtractor:
    def __init__(self, codec: str = "libmp3lame", bitrate: str = "128k") -> None:
        self.codec = codec
        self.bitrate = bitrate

    def extract(self, video_path: Path, audio_path: Path, timeout: float | None = None) -> Path:
        if not video_path.exists():
            raise ExtractionError(f"Missing video file for audio extraction: {video_path.name}")
        try:
            _extract_audio(
                video_path,
                audio_path,
                codec=self.codec,
                bitrate=self.bitrate,
                timeout=timeout,
            )
        except FileNotFoundError as exc:
            raise ExtractionError(str(exc)) from exc
        except subprocess.TimeoutExpired as exc:
            raise ExtractionError(f"ffmpeg timed out after {timeout:g}s") from exc
        except ffmpeg.Error as exc:
            stderr = (exc.stderr or b"").decode("utf-8", errors="replace").strip()
            raise ExtractionError(f"ffmpeg failed: {stderr[-STDERR_TAIL:]}") from exc

        if not audio_path.exists() or audio_path.stat().st_size == 0:
            raise ExtractionError("ffmpeg produced no audio output")
        return audio_path
