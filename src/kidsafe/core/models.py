"""Shared data models for Kid-Safe Media."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class WordTimestamp:
    """A single transcribed word with timing and recognition confidence."""

    word: str
    start: float  # seconds
    end: float  # seconds
    confidence: float = 1.0


@dataclass(frozen=True)
class MuteInterval:
    """Audio span to gate to silence. ``word`` is the matched term."""

    start: float
    end: float
    word: str

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class SceneInterval:
    """Span removed from both audio and video.

    ``reason`` may hold several trigger explanations joined with "; "
    once overlapping scenes have been merged.
    """

    start: float
    end: float
    reason: str

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class Segment:
    """A span of the original timeline kept when scenes are cut."""

    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass
class MediaInfo:
    """What ffprobe reports about a media file."""

    path: Path
    duration: float
    has_video: bool = False
    has_audio: bool = False
    sample_rate: int | None = None
    channels: int | None = None


@dataclass
class SanitizeResult:
    """Output from a full sanitize run."""

    output_path: Path
    mute_intervals: list[MuteInterval] = field(default_factory=list)
    scene_intervals: list[SceneInterval] = field(default_factory=list)
    segments: list[Segment] = field(default_factory=list)
    word_count: int = 0
    duration: float = 0.0  # probed length of the input

    @property
    def removed_seconds(self) -> float:
        """Seconds of the input timeline dropped by scene cuts.

        Scene spans can be padded past either end of the media, so this is
        measured from the kept segments rather than from the scenes.
        """
        if not self.segments:
            return 0.0
        return max(0.0, self.duration - sum(s.duration for s in self.segments))
