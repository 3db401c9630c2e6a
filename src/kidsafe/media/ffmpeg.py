"""Thin blocking binding to the ffmpeg and ffprobe executables.

Every operation is a single ``subprocess.run`` call. A non-zero exit is
turned into ``ExternalEngineFailure`` carrying ffmpeg's own stderr.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path

from kidsafe.core.errors import ExternalEngineFailure
from kidsafe.core.models import MediaInfo

# Keep only the tail of long ffmpeg logs in error messages
_STDERR_TAIL = 2000


def check_ffmpeg() -> bool:
    """Check if ffmpeg and ffprobe are available on the system."""
    return shutil.which("ffmpeg") is not None and shutil.which("ffprobe") is not None


def require_ffmpeg() -> None:
    if not check_ffmpeg():
        raise ExternalEngineFailure(
            "setup", "ffmpeg/ffprobe not found. Install it with: brew install ffmpeg"
        )


def _stderr_text(stderr: bytes | str | None) -> str:
    if not stderr:
        return "no error output"
    if isinstance(stderr, bytes):
        stderr = stderr.decode(errors="replace")
    return stderr.strip()[-_STDERR_TAIL:]


def run_ffmpeg(args: list[str], operation: str) -> None:
    """Run ffmpeg with ``args`` (without the leading "ffmpeg").

    Raises:
        ExternalEngineFailure: If ffmpeg is missing or exits non-zero.
    """
    cmd = ["ffmpeg", "-hide_banner", "-nostdin", "-y", *args]
    try:
        result = subprocess.run(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE)
    except FileNotFoundError as e:
        raise ExternalEngineFailure(operation, "ffmpeg not found on PATH") from e
    if result.returncode != 0:
        raise ExternalEngineFailure(
            operation,
            f"ffmpeg exited with status {result.returncode}: {_stderr_text(result.stderr)}",
        )


def probe(path: Path) -> MediaInfo:
    """Probe container duration and the first audio/video streams.

    Raises:
        ExternalEngineFailure: If ffprobe fails or returns unparsable output.
    """
    path = Path(path)
    cmd = [
        "ffprobe",
        "-v",
        "error",
        "-show_entries",
        "format=duration:stream=codec_type,sample_rate,channels",
        "-of",
        "json",
        str(path),
    ]
    try:
        result = subprocess.run(cmd, capture_output=True)
    except FileNotFoundError as e:
        raise ExternalEngineFailure("probe", "ffprobe not found on PATH") from e
    if result.returncode != 0:
        raise ExternalEngineFailure(
            "probe", f"ffprobe failed on {path}: {_stderr_text(result.stderr)}"
        )

    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ExternalEngineFailure("probe", f"unreadable ffprobe output for {path}: {e}") from e

    streams = data.get("streams") or []
    audio = next((s for s in streams if s.get("codec_type") == "audio"), None)
    has_video = any(s.get("codec_type") == "video" for s in streams)

    return MediaInfo(
        path=path,
        duration=float((data.get("format") or {}).get("duration") or 0.0),
        has_video=has_video,
        has_audio=audio is not None,
        sample_rate=int(audio["sample_rate"]) if audio and audio.get("sample_rate") else None,
        channels=int(audio["channels"]) if audio and audio.get("channels") else None,
    )


def probe_duration(path: Path) -> float:
    return probe(path).duration
