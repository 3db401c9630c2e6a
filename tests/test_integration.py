"""Integration tests requiring ffmpeg and ffprobe on PATH.

Run with: pytest -m integration
Skipped by default in CI and normal test runs.
"""

import json
import shutil
import subprocess

import pytest

from kidsafe.core.config import KidSafeConfig
from kidsafe.core.models import WordTimestamp
from kidsafe.core.pipeline import run_pipeline
from kidsafe.media.ffmpeg import probe
from kidsafe.transcriber.words import save_words

pytestmark = pytest.mark.integration

skip_no_ffmpeg = pytest.mark.skipif(
    not (shutil.which("ffmpeg") and shutil.which("ffprobe")), reason="ffmpeg not installed"
)

PROFILE = {
    "profile": "family",
    "mute_words": ["damn"],
    "mute_phrases": [],
    "skip_scene_words": ["nude"],
    "skip_scene_padding_seconds": 1,
    "min_confidence": 0.5,
    "padding_ms": 100,
}


@pytest.fixture
def movie(tmp_path):
    """Ten seconds of test pattern and tone, every frame a keyframe."""
    path = tmp_path / "Test Movie (2020).mkv"
    subprocess.run(
        [
            "ffmpeg", "-hide_banner", "-nostdin", "-y",
            "-f", "lavfi", "-i", "testsrc=duration=10:size=160x120:rate=25",
            "-f", "lavfi", "-i", "sine=frequency=440:duration=10",
            "-c:v", "mpeg4", "-g", "1", "-c:a", "pcm_s16le",
            str(path),
        ],
        check=True,
        capture_output=True,
    )
    return path


@pytest.fixture
def config(tmp_path):
    profiles = tmp_path / "profiles"
    profiles.mkdir()
    (profiles / "family.json").write_text(json.dumps(PROFILE))
    return KidSafeConfig(profiles_dir=profiles, use_cache=False)


@skip_no_ffmpeg
def test_mute_keeps_duration(tmp_path, movie, config):
    words = save_words([WordTimestamp("damn", 2.0, 2.5, 0.9)], tmp_path / "words.json")
    result = run_pipeline(movie, "family", tmp_path / "out", config, words_path=words)

    assert result.output_path.name == "Test Movie (2020) - Kid Safe [Family].mkv"
    info = probe(result.output_path)
    assert info.has_video and info.has_audio
    assert info.duration == pytest.approx(10.0, abs=0.1)


@skip_no_ffmpeg
def test_scene_cut_shortens_output(tmp_path, movie, config):
    words = save_words(
        [WordTimestamp("damn", 2.0, 2.5, 0.9), WordTimestamp("nude", 6.0, 6.5, 0.9)],
        tmp_path / "words.json",
    )
    result = run_pipeline(movie, "family", tmp_path / "out", config, words_path=words)

    assert result.removed_seconds == pytest.approx(2.5)
    assert probe(result.output_path).duration == pytest.approx(7.5, abs=0.1)
