"""Transcript cache for Kid-Safe Media.

Transcription is by far the slowest step, so word timestamps are cached
under ``<cache_dir>/transcripts/`` keyed by the source file and the
settings that affect recognition. A rerun with a different profile then
skips straight to matching.
"""

from __future__ import annotations

import hashlib
from pathlib import Path


def cache_key(file_path: Path, **params: object) -> str:
    """Compute a cache key from file metadata and parameters.

    Uses resolved path, size, and mtime, no file content reading.
    Extra keyword arguments (model, language, etc.) are included in the hash.

    Returns:
        16-char hex string.
    """
    resolved = Path(file_path).resolve()
    stat = resolved.stat()
    parts = f"{resolved}|{stat.st_size}|{stat.st_mtime_ns}"
    for k, v in sorted(params.items()):
        parts += f"|{k}={v}"
    return hashlib.sha256(parts.encode()).hexdigest()[:16]


def get_cache_dir(cache_root: Path, category: str) -> Path:
    """Get or create a cache subdirectory (e.g. "transcripts")."""
    cache_dir = Path(cache_root).expanduser() / category
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir


def transcript_cache_path(cache_root: Path, video_path: Path, **params: object) -> Path:
    """Where the words JSON for ``video_path`` is (or would be) cached."""
    key = cache_key(video_path, **params)
    return get_cache_dir(cache_root, "transcripts") / f"{key}.json"
