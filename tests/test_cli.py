"""Tests for the kidsafe command line."""

import io
import json
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from kidsafe import __version__
from kidsafe.cli.app import app
from kidsafe.cli.utils import build_config, mute_table, scene_table
from kidsafe.core import pipeline
from kidsafe.core.errors import SyncMismatch
from kidsafe.core.models import MuteInterval, SanitizeResult, SceneInterval, WordTimestamp
from kidsafe.transcriber.words import load_words, save_words

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch, profiles_dir):
    monkeypatch.setenv("KIDSAFE_PROFILES_DIR", str(profiles_dir))
    monkeypatch.setenv("KIDSAFE_CACHE_DIR", str(tmp_path / "cache"))


@pytest.fixture
def movie(tmp_path):
    path = tmp_path / "Movie (2001).mkv"
    path.write_bytes(b"not really a movie")
    return path


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_profiles_lists_bundled_and_custom():
    result = runner.invoke(app, ["profiles"])
    assert result.exit_code == 0
    for name in ("custom", "pg", "toddler"):
        assert name in result.output


def test_profiles_flags_invalid(profiles_dir):
    (profiles_dir / "broken.json").write_text(json.dumps({"profile": "broken"}))
    result = runner.invoke(app, ["profiles"])
    assert result.exit_code == 0
    assert "broken" in result.output


class TestSanitize:
    def test_success(self, tmp_path, monkeypatch, movie):
        seen = {}

        def fake_run(input_path, profile, output, config, words_path=None):
            seen.update(profile=profile, output=output, reencode=config.media.reencode_cuts)
            return SanitizeResult(
                output_path=Path(output) / "Movie (2001) - Kid Safe [Pg].mkv",
                mute_intervals=[MuteInterval(1.0, 2.0, "damn")],
                scene_intervals=[SceneInterval(10.0, 20.0, 'scene word: "nude"')],
            )

        monkeypatch.setattr(pipeline, "run_pipeline", fake_run)
        result = runner.invoke(
            app, ["sanitize", "-i", str(movie), "-p", "pg", "-o", str(tmp_path / "out"), "--reencode-cuts"]
        )
        assert result.exit_code == 0, result.output
        assert seen["profile"] == "pg"
        assert seen["reencode"] is True
        assert "Muted 1 instance(s)" in result.output
        assert "skipped 1 scene(s)" in result.output

    def test_pipeline_error_exits_1(self, tmp_path, monkeypatch, movie):
        def fake_run(*args, **kwargs):
            raise SyncMismatch(100.0, 100.5, 0.1)

        monkeypatch.setattr(pipeline, "run_pipeline", fake_run)
        result = runner.invoke(app, ["sanitize", "-i", str(movie), "-p", "pg", "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert "validate" in result.output

    def test_missing_input(self, tmp_path):
        result = runner.invoke(
            app, ["sanitize", "-i", str(tmp_path / "nope.mkv"), "-p", "pg", "-o", str(tmp_path)]
        )
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_required_options(self):
        result = runner.invoke(app, ["sanitize", "-p", "pg"])
        assert result.exit_code != 0


class TestDetect:
    def test_with_words_file(self, tmp_path, movie):
        words = save_words(
            [WordTimestamp("oh", 0.0, 0.2, 0.9), WordTimestamp("darn", 0.2, 0.5, 0.9)],
            tmp_path / "words.json",
        )
        result = runner.invoke(app, ["detect", "-i", str(movie), "-p", "custom", "--words", str(words)])
        assert result.exit_code == 0, result.output
        assert "2 words, 1 to mute, 0 to cut" in result.output

    def test_save_words(self, tmp_path, movie):
        words = save_words([WordTimestamp("hi", 0.0, 0.2, 0.9)], tmp_path / "words.json")
        target = tmp_path / "copy.json"
        result = runner.invoke(
            app,
            ["detect", "-i", str(movie), "-p", "custom", "--words", str(words), "--save-words", str(target)],
        )
        assert result.exit_code == 0, result.output
        assert load_words(target)[0].word == "hi"

    def test_unknown_profile(self, tmp_path, movie):
        words = save_words([], tmp_path / "words.json")
        result = runner.invoke(app, ["detect", "-i", str(movie), "-p", "nope", "--words", str(words)])
        assert result.exit_code == 1
        assert "profile" in result.output


class TestBuildConfig:
    def test_model_goes_to_active_backend(self):
        assert build_config(model="tiny").whisper.local_model == "tiny"
        config = build_config(model="openai/whisper-1", backend="api")
        assert config.whisper.api_model == "openai/whisper-1"
        assert config.whisper.model == "openai/whisper-1"

    def test_no_cache(self):
        assert build_config(no_cache=True).use_cache is False
        assert build_config().use_cache is True

    def test_profiles_dir_from_env(self, profiles_dir):
        assert build_config().profiles_dir == profiles_dir

    def test_model_follows_backend_from_config(self, monkeypatch):
        monkeypatch.setenv("KIDSAFE_WHISPER__BACKEND", "api")
        config = build_config(model="groq/whisper-large-v3")
        assert config.whisper.api_model == "groq/whisper-large-v3"
        assert config.whisper.model == "groq/whisper-large-v3"
        assert config.whisper.local_model == "small.en"


class TestTables:
    def _render(self, table):
        console = Console(file=io.StringIO(), width=200)
        console.print(table)
        return console.file.getvalue()

    def test_scene_reason_brackets_kept(self):
        table = scene_table([SceneInterval(0.0, 5.0, 'scene word: "[nude]"')])
        assert '"[nude]"' in self._render(table)

    def test_mute_word_brackets_kept(self):
        table = mute_table([MuteInterval(1.0, 2.0, "[bold]damn")])
        assert "[bold]damn" in self._render(table)
