import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv


load_dotenv()


DEFAULT_RAPIDAPI_HOST = "instagram-downloader-download-instagram-stories-videos4.p.rapidapi.com"


@dataclass(frozen=True)
class Settings:
    rapidapi_key: str
    rapidapi_host: str
    openai_api_key: str
    openai_base_url: str
    asr_model: str
    scratch_dir: Path
    fetch_timeout: float
    resolve_timeout: float
    pipeline_timeout: float
    audio_codec: str
    audio_bitrate: str
    source_domain: str


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


def get_settings() -> Settings:
    # Secrets are optional here; stages that need them fail at call time.
    rapidapi_key = os.getenv("RAPIDAPI_KEY", "").strip()
    rapidapi_host = os.getenv("RAPIDAPI_HOST", DEFAULT_RAPIDAPI_HOST).strip()
    openai_api_key = os.getenv("OPENAI_API_KEY", "").strip()
    openai_base_url = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    asr_model = os.getenv("ASR_MODEL", "whisper-1")
    scratch_dir = Path(os.getenv("SCRATCH_DIR", "") or tempfile.gettempdir())
    return Settings(
        rapidapi_key=rapidapi_key,
        rapidapi_host=rapidapi_host,
        openai_api_key=openai_api_key,
        openai_base_url=openai_base_url,
        asr_model=asr_model,
        scratch_dir=scratch_dir,
        fetch_timeout=_float_env("FETCH_TIMEOUT", 30.0),
        resolve_timeout=_float_env("RESOLVE_TIMEOUT", 30.0),
        pipeline_timeout=_float_env("PIPELINE_TIMEOUT", 300.0),
        audio_codec=os.getenv("AUDIO_CODEC", "libmp3lame"),
        audio_bitrate=os.getenv("AUDIO_BITRATE", "128k"),
        source_domain=os.getenv("SOURCE_DOMAIN", "instagram.com"),
    )
