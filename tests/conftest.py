"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from kidsafe.core.profile import Profile


@pytest.fixture
def profile() -> Profile:
    return Profile(
        profile="pg",
        mute_words=["damn", "Hell"],
        mute_phrases=["son of a bitch", "oh my god"],
        skip_scene_words=["masturbat"],
        skip_scene_phrases=["have sex"],
        skip_scene_padding_seconds=5,
        min_confidence=0.5,
        padding_ms=200,
    )


@pytest.fixture
def profile_data() -> dict:
    return {
        "profile": "custom",
        "mute_words": ["darn"],
        "mute_phrases": ["oh my gosh"],
        "min_confidence": 0.6,
        "padding_ms": 100,
    }


@pytest.fixture
def profiles_dir(tmp_path: Path, profile_data: dict) -> Path:
    d = tmp_path / "profiles"
    d.mkdir()
    (d / "custom.json").write_text(json.dumps(profile_data))
    return d
