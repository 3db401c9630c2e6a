"""Tests for interval merging."""

import random

import pytest

from kidsafe.core.models import MuteInterval, SceneInterval
from kidsafe.editing.intervals import (
    SCENE_MERGE_TOLERANCE,
    merge_intervals,
    merge_mute_intervals,
    merge_scene_intervals,
)


def _covered(intervals, t: float) -> bool:
    return any(iv.start <= t <= iv.end for iv in intervals)


def _random_mutes(rng: random.Random, n: int) -> list[MuteInterval]:
    spans = []
    for i in range(n):
        start = rng.uniform(0, 100)
        spans.append(MuteInterval(start, start + rng.uniform(0, 5), f"w{i}"))
    return spans


class TestMergeMute:
    def test_overlap_keeps_earliest_word(self):
        merged = merge_mute_intervals(
            [MuteInterval(1.0, 2.0, "a"), MuteInterval(1.5, 3.0, "b")]
        )
        assert merged == [MuteInterval(1.0, 3.0, "a")]

    def test_unsorted_input(self):
        merged = merge_mute_intervals(
            [MuteInterval(5.0, 6.0, "late"), MuteInterval(1.0, 2.0, "early")]
        )
        assert [iv.word for iv in merged] == ["early", "late"]

    def test_touching_intervals_merge(self):
        merged = merge_mute_intervals([MuteInterval(1.0, 2.0, "a"), MuteInterval(2.0, 3.0, "b")])
        assert merged == [MuteInterval(1.0, 3.0, "a")]

    def test_gap_not_merged(self):
        spans = [MuteInterval(1.0, 2.0, "a"), MuteInterval(2.01, 3.0, "b")]
        assert merge_mute_intervals(spans) == spans

    def test_contained_interval(self):
        merged = merge_mute_intervals([MuteInterval(1.0, 10.0, "a"), MuteInterval(2.0, 3.0, "b")])
        assert merged == [MuteInterval(1.0, 10.0, "a")]

    def test_empty(self):
        assert merge_mute_intervals([]) == []

    def test_tie_on_start_is_order_independent(self):
        a = MuteInterval(1.0, 2.0, "zzz")
        b = MuteInterval(1.0, 2.0, "aaa")
        assert merge_mute_intervals([a, b]) == merge_mute_intervals([b, a])

    def test_idempotent(self):
        merged = merge_mute_intervals(_random_mutes(random.Random(7), 40))
        assert merge_mute_intervals(merged) == merged

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_union_preserved_and_disjoint(self, seed):
        rng = random.Random(seed)
        spans = _random_mutes(rng, 30)
        merged = merge_mute_intervals(spans)

        for a, b in zip(merged, merged[1:]):
            assert a.end < b.start
        for span in spans:
            assert sum(m.start <= span.start and span.end <= m.end for m in merged) == 1
        for t in (rng.uniform(-1, 110) for _ in range(500)):
            assert _covered(spans, t) == _covered(merged, t)


class TestMergeScene:
    def test_overlapping_scenes(self):
        merged = merge_scene_intervals(
            [SceneInterval(10, 20, "first"), SceneInterval(15, 25, "second")]
        )
        assert merged == [SceneInterval(10, 25, "first; second")]

    def test_close_scenes_merge_within_a_second(self):
        merged = merge_scene_intervals([SceneInterval(10, 20, "a"), SceneInterval(21, 30, "b")])
        assert merged == [SceneInterval(10, 30, "a; b")]

    def test_scenes_more_than_a_second_apart(self):
        spans = [SceneInterval(10, 20, "a"), SceneInterval(21.5, 30, "b")]
        assert merge_scene_intervals(spans) == spans

    def test_reasons_joined_in_time_order(self):
        merged = merge_scene_intervals(
            [SceneInterval(12, 14, "c"), SceneInterval(10, 11, "a"), SceneInterval(11.5, 13, "b")]
        )
        assert merged == [SceneInterval(10, 14, "a; b; c")]

    def test_idempotent(self):
        merged = merge_scene_intervals(
            [SceneInterval(0, 5, "a"), SceneInterval(5.5, 8, "b"), SceneInterval(40, 50, "c")]
        )
        assert merge_scene_intervals(merged) == merged

    def test_no_pair_left_mergeable(self):
        rng = random.Random(11)
        spans = []
        for i in range(30):
            start = rng.uniform(0, 300)
            spans.append(SceneInterval(start, start + rng.uniform(0, 10), str(i)))
        merged = merge_scene_intervals(spans)
        for a, b in zip(merged, merged[1:]):
            assert a.end + SCENE_MERGE_TOLERANCE < b.start


def test_generic_merge_custom_tolerance():
    merged = merge_intervals(
        [MuteInterval(0, 1, "a"), MuteInterval(3, 4, "b")],
        tolerance=2.0,
    )
    assert merged == [MuteInterval(0, 4, "a")]
