"""Rule profiles: which words to mute and which scenes to cut.

A profile is one JSON document named ``<profile>.json``. Lookup walks the
configured profiles directory first, then the profiles bundled with the
package.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from kidsafe.core.errors import ProfileLoadError

BUNDLED_PROFILES_DIR = Path(__file__).resolve().parent.parent / "profiles"


class Profile(BaseModel):
    """Immutable, validated rule profile."""

    model_config = ConfigDict(frozen=True)

    profile: str
    mute_words: tuple[str, ...]
    mute_phrases: tuple[str, ...]
    skip_scene_words: tuple[str, ...] = ()
    skip_scene_phrases: tuple[str, ...] = ()
    skip_scene_padding_seconds: float = Field(default=5.0, ge=0)
    min_confidence: float = Field(ge=0, le=1)
    padding_ms: float = Field(ge=0)

    @field_validator("skip_scene_words", "skip_scene_phrases", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return () if value is None else value

    @field_validator("mute_words", "mute_phrases", "skip_scene_words", "skip_scene_phrases")
    @classmethod
    def _no_blank_terms(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        # A blank term is a substring of every word and would cut the whole film.
        if any(not term.strip() for term in value):
            raise ValueError("terms must not be blank")
        return value

    @property
    def padding_seconds(self) -> float:
        return self.padding_ms / 1000

    @property
    def has_scene_rules(self) -> bool:
        return bool(self.skip_scene_words or self.skip_scene_phrases)


def profile_search_dirs(profiles_dir: Path | None = None) -> list[Path]:
    """Directories searched for profiles, highest priority first."""
    dirs = []
    if profiles_dir is not None:
        dirs.append(Path(profiles_dir).expanduser())
    dirs.append(BUNDLED_PROFILES_DIR)
    return dirs


def _format_validation_error(error: ValidationError) -> str:
    """Render pydantic errors as ``field: message`` pairs."""
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def load_profile(name: str, search_dirs: list[Path] | None = None) -> Profile:
    """Load and validate a profile by name.

    Args:
        name: Profile name, without the ``.json`` extension.
        search_dirs: Directories to search, first match wins. Defaults to
            the bundled profiles.

    Raises:
        ProfileLoadError: If the profile is missing, unreadable, not valid
            JSON, or fails validation.
    """
    if not name or "/" in name or "\\" in name:
        raise ProfileLoadError(name, "invalid profile name")

    dirs = search_dirs if search_dirs is not None else profile_search_dirs()
    path = next((d / f"{name}.json" for d in dirs if (d / f"{name}.json").is_file()), None)
    if path is None:
        searched = ", ".join(str(d) for d in dirs)
        raise ProfileLoadError(name, f"no {name}.json found in {searched}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ProfileLoadError(name, f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ProfileLoadError(name, f"invalid JSON in {path}: {e}") from e

    try:
        return Profile.model_validate(data)
    except ValidationError as e:
        raise ProfileLoadError(name, _format_validation_error(e)) from e


def list_profiles(search_dirs: list[Path] | None = None) -> dict[str, Path]:
    """Map each available profile name to its file. Earlier dirs shadow later ones."""
    dirs = search_dirs if search_dirs is not None else profile_search_dirs()
    found: dict[str, Path] = {}
    for d in dirs:
        if not d.is_dir():
            continue
        for path in sorted(d.glob("*.json")):
            found.setdefault(path.stem, path)
    return dict(sorted(found.items()))
