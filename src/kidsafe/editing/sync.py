"""Post-edit sync gate between the final video and audio streams."""

from __future__ import annotations

from kidsafe.core.errors import SyncMismatch

SYNC_TOLERANCE = 0.1  # seconds


def check_sync(video_duration: float, audio_duration: float, tolerance: float = SYNC_TOLERANCE) -> float:
    """Fail if the edited streams drifted apart by more than ``tolerance``.

    Returns:
        The absolute drift in seconds.

    Raises:
        SyncMismatch: If ``|video - audio| > tolerance``.
    """
    drift = abs(video_duration - audio_duration)
    if drift > tolerance:
        raise SyncMismatch(video_duration, audio_duration, tolerance)
    return drift
