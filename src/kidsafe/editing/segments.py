"""Plan which parts of the timeline survive a scene cut."""

from __future__ import annotations

from typing import Sequence

from kidsafe.core.errors import AllContentRemoved
from kidsafe.core.models import SceneInterval, Segment


def plan_segments(scenes: Sequence[SceneInterval], duration: float) -> list[Segment]:
    """Return the complement of ``scenes`` within ``[0, duration]``.

    ``scenes`` should already be merged and sorted. With no scenes the whole
    timeline is kept as a single segment. Zero-length gaps are not emitted.

    Raises:
        AllContentRemoved: If the scenes cover the entire timeline.
    """
    if not scenes:
        return [Segment(0.0, duration)]

    segments: list[Segment] = []
    cursor = 0.0
    for scene in scenes:
        if scene.start > cursor:
            end = min(scene.start, duration)
            if end > cursor:
                segments.append(Segment(cursor, end))
        cursor = max(cursor, scene.end)

    if cursor < duration:
        segments.append(Segment(cursor, duration))

    if not segments:
        raise AllContentRemoved(duration, len(scenes))
    return segments


def kept_duration(segments: Sequence[Segment]) -> float:
    """Expected length of the edited media."""
    return sum(s.duration for s in segments)
