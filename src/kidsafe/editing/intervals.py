"""Interval merging: coalesce overlapping spans into a disjoint, ordered set."""

from __future__ import annotations

import dataclasses
from typing import Callable, Iterable, Protocol, TypeVar

from kidsafe.core.models import MuteInterval, SceneInterval

# Mute spans merge only when they touch or overlap. Scene spans less than a
# second apart are merged to avoid a string of tiny cuts.
MUTE_MERGE_TOLERANCE = 0.0
SCENE_MERGE_TOLERANCE = 1.0


class Span(Protocol):
    start: float
    end: float


S = TypeVar("S", bound=Span)


def _keep_first(current: S, following: S) -> S:
    return dataclasses.replace(current, end=max(current.end, following.end))


def _sort_key(span: Span) -> tuple:
    # start, then end, then annotation, so the order never depends on input order
    return (span.start, span.end, tuple(str(v) for v in dataclasses.astuple(span)))


def merge_intervals(
    intervals: Iterable[S],
    tolerance: float = 0.0,
    fold: Callable[[S, S], S] = _keep_first,
) -> list[S]:
    """Merge spans into the minimal sorted set of disjoint spans.

    Args:
        intervals: Frozen dataclass spans in any order.
        tolerance: A span is folded into the open one when its start is at
            most ``tolerance`` seconds past the open span's end.
        fold: Combines the open span with the next one. Must return a span
            starting at ``current.start`` and ending at the max of both ends.
            The default keeps the open span's annotation.

    Returns:
        Sorted spans with ``out[i].end + tolerance < out[i + 1].start``.
    """
    ordered = sorted(intervals, key=_sort_key)
    if not ordered:
        return []

    merged = [ordered[0]]
    for span in ordered[1:]:
        current = merged[-1]
        if span.start <= current.end + tolerance:
            merged[-1] = fold(current, span)
        else:
            merged.append(span)
    return merged


def _join_reasons(current: SceneInterval, following: SceneInterval) -> SceneInterval:
    return SceneInterval(
        start=current.start,
        end=max(current.end, following.end),
        reason=f"{current.reason}; {following.reason}",
    )


def merge_mute_intervals(intervals: Iterable[MuteInterval]) -> list[MuteInterval]:
    """Merge overlapping mute spans, keeping the earliest matched word."""
    return merge_intervals(intervals, MUTE_MERGE_TOLERANCE)


def merge_scene_intervals(intervals: Iterable[SceneInterval]) -> list[SceneInterval]:
    """Merge scene spans closer than a second, joining their reasons with "; "."""
    return merge_intervals(intervals, SCENE_MERGE_TOLERANCE, _join_reasons)
