"""Pipeline orchestrator: probe, transcribe, detect, silence, cut, validate, mux."""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from kidsafe.core.config import KidSafeConfig
from kidsafe.core.errors import (
    ExternalEngineFailure,
    InputNotFound,
    NoAudioStream,
    TranscriptionFailure,
)
from kidsafe.core.events import EventCallback, PipelineEvent
from kidsafe.core.models import MuteInterval, SanitizeResult, SceneInterval, WordTimestamp
from kidsafe.core.profile import Profile, load_profile, profile_search_dirs
from kidsafe.editing.envelope import SilenceEnvelope
from kidsafe.editing.intervals import merge_mute_intervals, merge_scene_intervals
from kidsafe.editing.matcher import find_mute_candidates, find_scene_candidates
from kidsafe.editing.segments import kept_duration, plan_segments
from kidsafe.editing.sync import check_sync
from kidsafe.media import audio, ffmpeg, video
from kidsafe.transcriber.words import load_words, save_words
from kidsafe.utils.cache import transcript_cache_path
from kidsafe.utils.console import console
from kidsafe.utils.paths import output_filename, scratch_dir


def detect_intervals(
    words: list[WordTimestamp], profile: Profile
) -> tuple[list[MuteInterval], list[SceneInterval]]:
    """Match and merge both rule classes. No media is touched."""
    mute = merge_mute_intervals(find_mute_candidates(words, profile))
    scenes = merge_scene_intervals(find_scene_candidates(words, profile))
    return mute, scenes


def transcribe_audio(audio_path: Path, config: KidSafeConfig) -> list[WordTimestamp]:
    """Run the configured backend.

    Raises:
        TranscriptionFailure: Wrapping any backend error.
    """
    try:
        if config.whisper.backend == "api":
            from kidsafe.transcriber.api import transcribe
        else:
            from kidsafe.transcriber.stable_ts import transcribe
        return transcribe(audio_path, config.whisper)
    except Exception as e:
        raise TranscriptionFailure(f"{config.whisper.backend} backend failed on {audio_path}: {e}") from e


def read_words(words_path: Path) -> list[WordTimestamp]:
    try:
        return load_words(words_path)
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise TranscriptionFailure(f"Cannot read words file {words_path}: {e}") from e


def obtain_words(
    input_path: Path,
    scratch: Path,
    config: KidSafeConfig,
    words_path: Path | None = None,
) -> list[WordTimestamp]:
    """Get word timestamps from a file, the transcript cache, or a fresh transcription."""
    if words_path is not None:
        console.print(f"[dim]Using words from {escape(str(words_path))}[/dim]")
        return read_words(Path(words_path))

    cached = None
    if config.use_cache:
        cached = transcript_cache_path(
            config.cache_dir,
            input_path,
            backend=config.whisper.backend,
            model=config.whisper.model,
            language=config.whisper.language,
        )
        if cached.is_file():
            console.print("[dim]Transcript found in cache.[/dim]")
            return read_words(cached)

    console.print("[bold]Extracting speech track...[/bold]")
    speech = audio.extract_audio(
        input_path,
        scratch / "speech.wav",
        sample_rate=config.media.speech_sample_rate,
        channels=1,
    )
    words = transcribe_audio(speech, config)
    if cached is not None:
        save_words(words, cached)
    return words


def run_pipeline(
    input_path: Path | str,
    profile_name: str,
    output_dir: Path | str,
    config: KidSafeConfig,
    words_path: Path | None = None,
    on_event: EventCallback | None = None,
) -> SanitizeResult:
    """Produce a kid-safe copy of ``input_path`` in ``output_dir``.

    Args:
        input_path: Source video file.
        profile_name: Name of the rule profile to apply.
        output_dir: Directory for the final file.
        config: Full application config.
        words_path: Optional words JSON to use instead of transcribing.
        on_event: Optional callback for streaming progress events.

    Returns:
        What was muted, cut and written.

    Raises:
        KidSafeError: Any fatal condition. Scratch files are removed first.
    """

    def emit(stage: str, progress: float, message: str, data: dict | None = None) -> None:
        if on_event:
            on_event(PipelineEvent(stage=stage, progress=progress, message=message, data=data))

    input_path = Path(input_path).resolve()
    output_dir = Path(output_dir).resolve()
    if not input_path.is_file():
        raise InputNotFound(input_path)

    profile = load_profile(profile_name, profile_search_dirs(config.profiles_dir))
    scene_rules = len(profile.skip_scene_words) + len(profile.skip_scene_phrases)
    console.print(
        f"[bold]Profile:[/bold] {profile.profile} ({len(profile.mute_words)} words, "
        f"{len(profile.mute_phrases)} phrases, {scene_rules} scene rules)"
    )
    ffmpeg.require_ffmpeg()

    with scratch_dir(output_dir) as scratch:
        # Step 1: Probe
        emit("probe", 0.0, f"Probing {input_path.name}")
        info = ffmpeg.probe(input_path)
        if not info.has_audio:
            raise NoAudioStream(input_path)
        if not info.has_video:
            raise ExternalEngineFailure("probe", f"No video stream found in {input_path}")
        console.print(
            f"[green]Probed:[/green] {info.duration:.2f}s, "
            f"{info.sample_rate or '?'}Hz, {info.channels or '?'} channel(s)"
        )
        emit("probe", 1.0, "Probe complete", data={"duration": info.duration})

        # Step 2: Words
        emit("transcribe", 0.0, "Transcribing...")
        words = obtain_words(input_path, scratch, config, words_path)
        emit("transcribe", 1.0, f"{len(words)} words", data={"words": len(words)})

        # Step 3: Detect
        emit("detect", 0.0, "Matching profile rules...")
        mute_intervals, scene_intervals = detect_intervals(words, profile)
        console.print(
            f"[green]Detected:[/green] {len(mute_intervals)} mute interval(s), "
            f"{len(scene_intervals)} scene(s) to cut"
        )
        emit(
            "detect",
            1.0,
            "Detection complete",
            data={"mute": len(mute_intervals), "scenes": len(scene_intervals)},
        )
        segments = plan_segments(scene_intervals, info.duration)

        # Step 4: Silence the full-fidelity track
        emit("silence", 0.0, "Silencing audio...")
        console.print("[bold]Extracting audio track...[/bold]")
        full_audio = audio.extract_audio(input_path, scratch / "audio.wav")
        envelope = SilenceEnvelope.from_intervals(mute_intervals)
        sanitized = audio.silence_audio(full_audio, envelope, scratch / "sanitized.wav")
        emit("silence", 1.0, f"Muted {envelope.muted_seconds:.2f}s")

        # Step 5: Cut scenes from both streams
        video_to_mux = input_path
        audio_to_mux = sanitized
        if scene_intervals:
            emit("cut", 0.0, f"Cutting {len(scene_intervals)} scene(s)...")
            console.print(f"[bold]Cutting {len(scene_intervals)} scene(s)...[/bold]")
            video_to_mux = video.cut_video(
                input_path,
                segments,
                scratch / f"cut_video{input_path.suffix}",
                scratch,
                reencode=config.media.reencode_cuts,
            )
            audio_to_mux = audio.cut_audio(sanitized, segments, scratch / "cut_audio.wav")
            emit("cut", 1.0, f"Kept {len(segments)} segment(s), {kept_duration(segments):.2f}s")
        else:
            console.print("[dim]No scenes to cut, skipping.[/dim]")

        # Step 6: Validate sync
        emit("validate", 0.0, "Checking audio/video sync...")
        video_duration = ffmpeg.probe_duration(video_to_mux)
        audio_duration = ffmpeg.probe_duration(audio_to_mux)
        drift = check_sync(video_duration, audio_duration, config.media.sync_tolerance)
        emit("validate", 1.0, f"Drift {drift:.3f}s")

        # Step 7: Mux
        output_path = output_dir / output_filename(input_path, profile_name)
        emit("mux", 0.0, f"Writing {output_path.name}")
        video.mux(
            video_to_mux,
            audio_to_mux,
            output_path,
            audio_codec=config.media.audio_codec,
            audio_bitrate=config.media.audio_bitrate,
            copy_subtitles=not scene_intervals,
        )
        emit("mux", 1.0, "Done", data={"output": str(output_path)})

    console.print(f"\n[bold green]Done![/bold green] Output: {escape(str(output_path))}")
    return SanitizeResult(
        output_path=output_path,
        mute_intervals=mute_intervals,
        scene_intervals=scene_intervals,
        segments=segments,
        word_count=len(words),
        duration=info.duration,
    )
