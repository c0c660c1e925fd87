from __future__ import annotations

import logging

from ..config import Settings
from ..errors import InvalidSourceError, PipelineError
from ..platforms.resolver import PlatformResolver
from ..platforms.instagram import InstagramPlatform
from ..asr.providers import WhisperTranscriber
from ..utils.deadline import Deadline
from ..utils.file import ScratchArtifacts
from .components import MediaFetcher, AudioExtractor
from .models import GENERIC_FAILURE_MESSAGE, PipelineResult, PipelineRun, PipelineState, Transcript


logger = logging.getLogger(__name__)


class PipelineRunner:
    """Resolve, fetch, extract and transcribe one source URL.

    Each call to ``run`` is an isolated invocation with its own scratch
    artifacts; both are removed before ``run`` returns, whatever happened.
    """

    def __init__(
        self,
        settings: Settings,
        platform_resolver: PlatformResolver,
        fetcher: MediaFetcher,
        audio_extractor: AudioExtractor,
        transcriber: WhisperTranscriber,
    ) -> None:
        self.settings = settings
        self.platform_resolver = platform_resolver
        self.fetcher = fetcher
        self.audio_extractor = audio_extractor
        self.transcriber = transcriber

    def validate(self, source_url: str | None) -> str:
        if not source_url or not self.platform_resolver.supports(source_url):
            raise InvalidSourceError("Invalid Instagram URL")
        return source_url

    def _stages(self, source_url: str, deadline: Deadline, invocation: PipelineRun) -> Transcript:
        with ScratchArtifacts(self.settings.scratch_dir) as artifacts:
            invocation.advance(PipelineState.RESOLVING)
            deadline.check("resolving")
            logger.info("resolving %s", source_url)
            media_url = self.platform_resolver.resolve(
                source_url, timeout=deadline.cap(self.settings.resolve_timeout)
            )

            invocation.advance(PipelineState.FETCHING)
            deadline.check("fetching")
            logger.info("fetching media to %s", artifacts.video_path.name)
            self.fetcher.fetch(
                media_url,
                artifacts.video_path,
                timeout=deadline.cap(self.settings.fetch_timeout),
            )

            invocation.advance(PipelineState.EXTRACTING)
            deadline.check("extracting")
            logger.info("extracting audio to %s", artifacts.audio_path.name)
            self.audio_extractor.extract(
                artifacts.video_path,
                artifacts.audio_path,
                timeout=deadline.cap(None),
            )

            invocation.advance(PipelineState.TRANSCRIBING)
            deadline.check("transcribing")
            logger.info("transcribing %s", artifacts.audio_path.name)
            return self.transcriber.transcribe(artifacts.audio_path, timeout=deadline.cap(None))

    def run(self, source_url: str | None) -> PipelineResult:
        source_url = self.validate(source_url)
        deadline = Deadline(self.settings.pipeline_timeout)
        invocation = PipelineRun()
        try:
            transcript = self._stages(source_url, deadline, invocation)
        except PipelineError as exc:
            logger.error("pipeline failed while %s: %s", invocation.state.value, exc)
            return PipelineResult(
                state=PipelineState.FAILED,
                error=GENERIC_FAILURE_MESSAGE,
                details=str(exc),
                failed_stage=exc.stage,
            )
        except Exception as exc:
            logger.exception("unexpected pipeline error while %s", invocation.state.value)
            return PipelineResult(
                state=PipelineState.FAILED,
                error=GENERIC_FAILURE_MESSAGE,
                details=str(exc),
                failed_stage=invocation.state.value,
            )
        logger.info("pipeline done (%d chars)", len(transcript.text))
        return PipelineResult(state=PipelineState.DONE, transcript=transcript)


class PipelineFactory:
    def __init__(self, settings: Settings, show_progress: bool = False) -> None:
        self.settings = settings
        self.show_progress = show_progress

    def create(self) -> PipelineRunner:
        platform_resolver = PlatformResolver([InstagramPlatform(self.settings)])
        return PipelineRunner(
            settings=self.settings,
            platform_resolver=platform_resolver,
            fetcher=MediaFetcher(
                timeout=self.settings.fetch_timeout,
                show_progress=self.show_progress,
            ),
            audio_extractor=AudioExtractor(
                codec=self.settings.audio_codec,
                bitrate=self.settings.audio_bitrate,
            ),
            transcriber=WhisperTranscriber(
                api_key=self.settings.openai_api_key,
                base_url=self.settings.openai_base_url,
                model=self.settings.asr_model,
            ),
        )
