"""Silence envelope: a time-indexed on/off gain built from mute intervals."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Sequence

from kidsafe.core.models import MuteInterval


@dataclass(frozen=True)
class SilenceEnvelope:
    """Gain function ``g(t)``: 0 inside a muted range ``[start, end)``, 1 elsewhere.

    ``ranges`` are sorted and pairwise disjoint. The media layer renders
    them into an engine filter; an empty envelope means a straight copy.
    """

    ranges: tuple[tuple[float, float], ...] = ()

    @classmethod
    def from_intervals(cls, intervals: Sequence[MuteInterval]) -> SilenceEnvelope:
        """Build from merged mute intervals.

        Raises:
            ValueError: If the intervals overlap (they were not merged).
        """
        ranges = sorted((iv.start, iv.end) for iv in intervals if iv.end > iv.start)
        for (_, prev_end), (start, _) in zip(ranges, ranges[1:]):
            if start < prev_end:
                raise ValueError(
                    f"Mute intervals overlap at {start:.3f}s; merge them before building the envelope"
                )
        return cls(tuple(ranges))

    @property
    def is_passthrough(self) -> bool:
        return not self.ranges

    @property
    def muted_seconds(self) -> float:
        return sum(end - max(start, 0.0) for start, end in self.ranges if end > 0)

    def __call__(self, t: float) -> int:
        idx = bisect.bisect_right(self.ranges, (t, float("inf"))) - 1
        if idx >= 0:
            start, end = self.ranges[idx]
            if start <= t < end:
                return 0
        return 1
