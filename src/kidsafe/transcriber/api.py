"""API transcription backend via LiteLLM.

Uses litellm.transcription() to call cloud Whisper APIs (OpenAI, Groq, etc.)
with word-level timestamp granularity. No stable-ts dependency required.
"""

from __future__ import annotations

from pathlib import Path

from kidsafe.core.config import WhisperConfig
from kidsafe.core.models import WordTimestamp
from kidsafe.transcriber.words import normalize_words
from kidsafe.utils.console import console

# 25 MB limit for OpenAI/Groq Whisper API
_MAX_FILE_SIZE = 25 * 1024 * 1024


def transcribe(audio_path: Path, config: WhisperConfig) -> list[WordTimestamp]:
    """Transcribe audio via a cloud Whisper API.

    Args:
        audio_path: Path to audio file (WAV recommended).
        config: Whisper configuration with model set to a LiteLLM model string.

    Raises:
        ImportError: If litellm is not installed.
        ValueError: If file exceeds the 25 MB API limit or the response
            carries no word timestamps.
    """
    try:
        import litellm
    except ImportError:
        raise ImportError("litellm is not installed. Install with: pip install 'kid-safe-media[api]'")

    audio_path = Path(audio_path)
    file_size = audio_path.stat().st_size
    if file_size > _MAX_FILE_SIZE:
        size_mb = file_size / (1024 * 1024)
        raise ValueError(
            f"Audio file is {size_mb:.1f} MB, exceeding the 25 MB API limit. "
            "Switch to --backend local for long videos."
        )

    console.print(f"[bold]Transcribing via API:[/bold] {config.model}")

    # Drop unsupported top-level params; pass timestamp_granularities via
    # extra_body so it reaches providers that support it (e.g. Groq, OpenAI)
    litellm.drop_params = True

    call_kwargs: dict = {
        "model": config.model,
        "response_format": "verbose_json",
        "language": config.language,
        "extra_body": {"timestamp_granularities": ["word"]},
    }
    if config.api_base:
        call_kwargs["api_base"] = config.api_base

    with open(audio_path, "rb") as f:
        response = litellm.transcription(file=f, **call_kwargs)

    words = response_to_words(response)
    console.print(f"[green]Transcription complete:[/green] {len(words)} words")
    return words


def response_to_words(response) -> list[WordTimestamp]:
    """Extract word timestamps from a LiteLLM transcription response.

    Raises:
        ValueError: If the response has text but no word timestamps.
    """
    # LiteLLM returns a TranscriptionResponse; extract the inner dict
    data = response.model_dump() if hasattr(response, "model_dump") else response

    words = data.get("words") or []
    if not words and (data.get("text") or "").strip():
        raise ValueError(
            "Word-level timestamps not available from this provider; "
            "the transcript cannot be matched against a profile."
        )
    return normalize_words(words)
