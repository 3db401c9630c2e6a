"""Match transcript words against a profile's rules.

Two rule classes share the same sliding-window scan but differ in how a
transcript word is compared to a rule term:

- mute rules compare exactly (lowercased equality) and pad by ``padding_ms``;
- scene rules compare loosely: either string containing the other counts,
  so a stem such as "masturbat" catches its inflections. Short terms can
  over-match this way; that permissiveness is kept as-is.

Results are raw candidates, unsorted and possibly overlapping. Feed them
to ``kidsafe.editing.intervals`` to get a disjoint set.
"""

from __future__ import annotations

from typing import Callable, Sequence

from kidsafe.core.models import MuteInterval, SceneInterval, WordTimestamp
from kidsafe.core.profile import Profile

TermMatcher = Callable[[str, str], bool]


def exact_match(word: str, term: str) -> bool:
    return word == term


def fuzzy_match(word: str, term: str) -> bool:
    """True when either string contains the other. An empty word never matches."""
    if not word:
        return False
    return term in word or word in term


def _split_phrases(phrases: Sequence[str]) -> list[list[str]]:
    return [p.lower().split() for p in phrases]


def _find_phrase_windows(
    words: Sequence[WordTimestamp],
    phrase: list[str],
    min_confidence: float,
    matches: TermMatcher,
) -> list[tuple[int, int]]:
    """Return (first, last) word indices of every window matching ``phrase``.

    Every word inside a window must clear the confidence threshold.
    """
    size = len(phrase)
    windows = []
    if size == 0:
        return windows
    for i in range(len(words) - size + 1):
        for j, token in enumerate(phrase):
            w = words[i + j]
            if w.confidence < min_confidence or not matches(w.word.lower(), token):
                break
        else:
            windows.append((i, i + size - 1))
    return windows


def find_mute_candidates(words: Sequence[WordTimestamp], profile: Profile) -> list[MuteInterval]:
    """Find every word and phrase the profile wants silenced.

    Intervals are padded symmetrically by ``padding_ms``. Starts are not
    clamped at zero here; the silence gate treats negative time as empty.
    """
    padding = profile.padding_seconds
    mute_words = {w.lower() for w in profile.mute_words}
    candidates: list[MuteInterval] = []

    for w in words:
        if w.confidence < profile.min_confidence:
            continue
        lowered = w.word.lower()
        if lowered in mute_words:
            candidates.append(MuteInterval(w.start - padding, w.end + padding, lowered))

    for phrase in _split_phrases(profile.mute_phrases):
        for first, last in _find_phrase_windows(words, phrase, profile.min_confidence, exact_match):
            candidates.append(
                MuteInterval(
                    words[first].start - padding,
                    words[last].end + padding,
                    " ".join(phrase),
                )
            )

    return candidates


def find_scene_candidates(words: Sequence[WordTimestamp], profile: Profile) -> list[SceneInterval]:
    """Find spans around scene-rule hits, padded by ``skip_scene_padding_seconds``.

    A word produces at most one interval even if it hits several terms.
    Starts are clamped at zero.
    """
    if not profile.has_scene_rules:
        return []

    padding = profile.skip_scene_padding_seconds
    terms = sorted({w.lower() for w in profile.skip_scene_words})
    candidates: list[SceneInterval] = []

    for w in words:
        if w.confidence < profile.min_confidence:
            continue
        lowered = w.word.lower()
        if any(fuzzy_match(lowered, term) for term in terms):
            candidates.append(
                SceneInterval(
                    max(0.0, w.start - padding),
                    w.end + padding,
                    f'scene word: "{w.word}"',
                )
            )

    for phrase in _split_phrases(profile.skip_scene_phrases):
        for first, last in _find_phrase_windows(words, phrase, profile.min_confidence, fuzzy_match):
            candidates.append(
                SceneInterval(
                    max(0.0, words[first].start - padding),
                    words[last].end + padding,
                    f'scene phrase: "{" ".join(phrase)}"',
                )
            )

    return candidates
