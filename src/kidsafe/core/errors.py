"""Fatal error taxonomy for a sanitize run.

Every error carries the pipeline ``stage`` it was raised in so the CLI can
report where a run stopped. None of these are retried or recovered from.
"""

from __future__ import annotations


class KidSafeError(Exception):
    """Base class for all fatal pipeline errors."""

    stage = "pipeline"

    def __str__(self) -> str:
        message = super().__str__()
        return f"[{self.stage}] {message}"


class InputNotFound(KidSafeError):
    stage = "input"

    def __init__(self, path: object) -> None:
        super().__init__(f"Input file not found: {path}")
        self.path = path


class ProfileLoadError(KidSafeError):
    stage = "profile"

    def __init__(self, profile_name: str, cause: str) -> None:
        super().__init__(f"Failed to load profile '{profile_name}': {cause}")
        self.profile_name = profile_name
        self.cause = cause


class NoAudioStream(KidSafeError):
    stage = "probe"

    def __init__(self, path: object) -> None:
        super().__init__(f"No audio stream found in {path}")
        self.path = path


class TranscriptionFailure(KidSafeError):
    stage = "transcribe"


class AllContentRemoved(KidSafeError):
    stage = "cut"

    def __init__(self, duration: float, scene_count: int) -> None:
        super().__init__(
            f"All content would be removed: {scene_count} scene interval(s) "
            f"cover the whole {duration:.2f}s timeline"
        )
        self.duration = duration
        self.scene_count = scene_count


class ContainerMismatch(KidSafeError):
    stage = "mux"

    def __init__(self, input_ext: str, output_ext: str) -> None:
        super().__init__(
            f"Input container ({input_ext}) must match output container ({output_ext})"
        )
        self.input_ext = input_ext
        self.output_ext = output_ext


class SyncMismatch(KidSafeError):
    stage = "validate"

    def __init__(self, video_duration: float, audio_duration: float, tolerance: float) -> None:
        super().__init__(
            f"Duration mismatch: video {video_duration:.3f}s, audio {audio_duration:.3f}s "
            f"(drift {abs(video_duration - audio_duration):.3f}s > {tolerance}s)"
        )
        self.video_duration = video_duration
        self.audio_duration = audio_duration
        self.tolerance = tolerance


class ExternalEngineFailure(KidSafeError):
    """An ffmpeg/ffprobe invocation failed; the engine's message is kept."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(message)
        self.stage = operation
        self.operation = operation
        self.message = message
