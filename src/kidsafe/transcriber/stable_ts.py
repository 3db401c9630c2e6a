"""Local transcription using stable-ts with word-level timestamps.

Backends (selected automatically based on platform):
- MLX: Apple Silicon (fastest on Mac)
- Vanilla Whisper: CUDA or CPU fallback
"""

from __future__ import annotations

import gc
import platform
from pathlib import Path

from kidsafe.core.config import WhisperConfig
from kidsafe.core.models import WordTimestamp
from kidsafe.transcriber.words import normalize_words
from kidsafe.utils.console import console


def _is_apple_silicon() -> bool:
    """Check if running on Apple Silicon."""
    return platform.system() == "Darwin" and platform.machine() == "arm64"


def _select_backend(device: str) -> str:
    """Select the best transcription backend for the current platform."""
    if device in ("mps", "auto") and _is_apple_silicon():
        try:
            import mlx.core  # noqa: F401

            return "mlx"
        except ImportError:
            console.print("[yellow]MLX not installed, falling back to vanilla Whisper.[/yellow]")
    return "vanilla"


def _resolve_device(device: str, backend: str) -> str | None:
    """Resolve the compute device string for the chosen backend.

    Returns None for MLX (no device parameter needed).
    """
    if backend == "mlx":
        return None

    if device == "auto":
        try:
            import torch

            if torch.cuda.is_available():
                return "cuda"
        except ImportError:
            pass
        return "cpu"

    if device == "mps":
        console.print("[yellow]Note:[/yellow] MPS not optimal for Whisper, using CPU.")
        return "cpu"

    return device


def _load_model(config: WhisperConfig):
    """Load a Whisper model using the best available backend."""
    import stable_whisper

    backend = _select_backend(config.device)
    device = _resolve_device(config.device, backend)

    if backend == "mlx":
        console.print(f"[bold]Loading model:[/bold] {config.model} (MLX, Apple Silicon)")
        return stable_whisper.load_mlx_whisper(config.model)

    console.print(f"[bold]Loading model:[/bold] {config.model} on {device}")
    return stable_whisper.load_model(config.model, device=device)


def result_to_words(result) -> list[WordTimestamp]:
    """Flatten a stable-ts WhisperResult into time-ordered WordTimestamps."""
    raw = []
    for segment in result.segments or []:
        raw.extend(segment.words or [])
    return normalize_words(raw)


def transcribe(audio_path: Path, config: WhisperConfig) -> list[WordTimestamp]:
    """Transcribe audio with stable-ts and return word timestamps.

    Args:
        audio_path: Path to audio file (WAV, 16kHz mono recommended).
        config: Whisper configuration.

    Raises:
        ImportError: If stable-ts is not installed.
    """
    try:
        import stable_whisper  # noqa: F401
    except ImportError:
        raise ImportError("stable-ts is not installed. Install with: pip install 'kid-safe-media[transcribe]'")

    model = _load_model(config)

    console.print("[bold]Transcribing...[/bold]")
    result = model.transcribe(
        str(audio_path),
        language=config.language,
        word_timestamps=True,
        regroup=False,  # Segment layout is irrelevant, only words are used
    )

    # Unload model and free GPU memory
    del model
    gc.collect()
    _clear_gpu_cache()

    words = result_to_words(result)
    console.print(f"[green]Transcription complete:[/green] {len(words)} words")
    return words


def _clear_gpu_cache() -> None:
    """Release GPU/accelerator memory after model use."""
    try:
        import torch

        if torch.cuda.is_available():
            torch.cuda.empty_cache()
    except ImportError:
        pass

    try:
        import mlx.core as mx

        if hasattr(mx, "reset_peak_memory"):
            mx.reset_peak_memory()
        else:
            mx.metal.reset_peak_memory()
    except (ImportError, AttributeError):
        pass
