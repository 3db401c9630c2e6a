"""Output naming and per-run scratch directories."""

from __future__ import annotations

import re
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

# "Movie (1999)" -> year token "1999"
_YEAR_RE = re.compile(r"\((\d{4})\)")
_YEAR_TOKEN_RE = re.compile(r"\s*\(\d{4}\)\s*")


def profile_tag(profile_name: str) -> str:
    """Uppercase the first character only: "pg" -> "Pg", "teenPlus" -> "TeenPlus"."""
    return profile_name[:1].upper() + profile_name[1:]


def output_filename(input_path: Path | str, profile_name: str) -> str:
    """Derive the Plex-friendly output name for a sanitized file.

    "Movie (1999).mkv" with profile "pg" -> "Movie (1999) - Kid Safe [Pg].mkv".
    Without a year token the "(year)" part is omitted.
    """
    input_path = Path(input_path)
    stem, ext = input_path.stem, input_path.suffix

    match = _YEAR_RE.search(stem)
    tag = profile_tag(profile_name)
    if match is None:
        return f"{stem.strip()} - Kid Safe [{tag}]{ext}"

    base = _YEAR_TOKEN_RE.sub(" ", stem, count=1).strip()
    return f"{base} ({match.group(1)}) - Kid Safe [{tag}]{ext}"


@contextmanager
def scratch_dir(parent: Path, prefix: str = ".kidsafe-") -> Iterator[Path]:
    """Create a scratch directory under ``parent`` and remove it on exit.

    Removal is best-effort and happens on both success and failure.
    """
    parent = Path(parent)
    parent.mkdir(parents=True, exist_ok=True)
    path = Path(tempfile.mkdtemp(prefix=prefix, dir=parent))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
