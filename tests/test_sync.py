"""Tests for the sync gate and output naming."""

from pathlib import Path

import pytest

from kidsafe.core.errors import SyncMismatch
from kidsafe.editing.sync import check_sync
from kidsafe.utils.paths import output_filename, profile_tag, scratch_dir


class TestCheckSync:
    def test_drift_over_tolerance_fails(self):
        with pytest.raises(SyncMismatch) as exc_info:
            check_sync(120.0, 120.25)
        assert exc_info.value.video_duration == 120.0
        assert "120.250" in str(exc_info.value)

    def test_small_drift_passes(self):
        assert check_sync(120.0, 120.05) == pytest.approx(0.05)

    def test_audio_shorter_than_video(self):
        with pytest.raises(SyncMismatch):
            check_sync(120.0, 119.8)

    def test_custom_tolerance(self):
        check_sync(120.0, 120.25, tolerance=0.5)


class TestOutputFilename:
    def test_with_year(self):
        assert output_filename(Path("Movie (1999).mkv"), "pg") == "Movie (1999) - Kid Safe [Pg].mkv"

    def test_without_year(self):
        assert output_filename(Path("Movie.mp4"), "pg") == "Movie - Kid Safe [Pg].mp4"

    def test_year_in_middle(self):
        assert (
            output_filename("The Film (2004) Remastered.mkv", "toddler")
            == "The Film Remastered (2004) - Kid Safe [Toddler].mkv"
        )

    def test_bare_number_is_not_a_year(self):
        assert output_filename("Apollo 1969.mp4", "pg") == "Apollo 1969 - Kid Safe [Pg].mp4"

    def test_directory_ignored(self, tmp_path):
        name = output_filename(tmp_path / "Movie (2020).mp4", "pg")
        assert name == "Movie (2020) - Kid Safe [Pg].mp4"

    @pytest.mark.parametrize(
        "name,tag",
        [("pg", "Pg"), ("toddler", "Toddler"), ("teenPlus", "TeenPlus"), ("", "")],
    )
    def test_profile_tag(self, name, tag):
        assert profile_tag(name) == tag


class TestScratchDir:
    def test_removed_on_success(self, tmp_path):
        with scratch_dir(tmp_path) as scratch:
            (scratch / "file.wav").write_bytes(b"x")
            assert scratch.is_dir()
        assert not scratch.exists()

    def test_removed_on_failure(self, tmp_path):
        with pytest.raises(RuntimeError):
            with scratch_dir(tmp_path) as scratch:
                (scratch / "file.wav").write_bytes(b"x")
                raise RuntimeError("boom")
        assert not scratch.exists()

    def test_created_inside_parent(self, tmp_path):
        with scratch_dir(tmp_path / "out") as scratch:
            assert scratch.parent == tmp_path / "out"
            assert scratch.name.startswith(".kidsafe-")
