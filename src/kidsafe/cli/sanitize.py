"""kidsafe sanitize / detect commands."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape

from kidsafe.cli.utils import build_config, mute_table, scene_table
from kidsafe.core.errors import KidSafeError
from kidsafe.utils.console import console

ModelOpt = Annotated[
    Optional[str],
    typer.Option("--model", "-m", help="Whisper model for the active backend (e.g. small.en)."),
]
BackendOpt = Annotated[
    Optional[str],
    typer.Option(help="Transcription backend: local or api."),
]
LanguageOpt = Annotated[
    Optional[str],
    typer.Option("--language", "-l", help="Spoken language code (e.g. en)."),
]
DeviceOpt = Annotated[
    Optional[str],
    typer.Option(help="Compute device: cpu, cuda, mps, or auto."),
]
WordsOpt = Annotated[
    Optional[Path],
    typer.Option("--words", help="Words JSON to use instead of transcribing."),
]
NoCacheOpt = Annotated[
    bool,
    typer.Option("--no-cache", help="Ignore and do not write the transcript cache."),
]


def sanitize(
    input_path: Annotated[
        Path,
        typer.Option("--input", "-i", help="Input video file (.mp4 or .mkv)."),
    ],
    profile: Annotated[
        str,
        typer.Option("--profile", "-p", help="Profile name (see 'kidsafe profiles')."),
    ],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output directory for the kid-safe file."),
    ],
    words: WordsOpt = None,
    model: ModelOpt = None,
    backend: BackendOpt = None,
    language: LanguageOpt = None,
    device: DeviceOpt = None,
    reencode_cuts: Annotated[
        bool,
        typer.Option("--reencode-cuts", help="Re-encode video at cuts for frame accuracy."),
    ] = False,
    no_cache: NoCacheOpt = False,
) -> None:
    """Mute profanity and cut flagged scenes, writing a Plex-ready copy."""
    from kidsafe.core.pipeline import run_pipeline

    config = build_config(
        model=model,
        backend=backend,
        language=language,
        device=device,
        reencode_cuts=reencode_cuts or None,
        no_cache=no_cache,
    )

    console.print(f"[bold]Input:[/bold] {escape(str(input_path))}")
    console.print(f"[bold]Output:[/bold] {escape(str(output))}")

    try:
        result = run_pipeline(input_path, profile, output, config, words_path=words)
    except KidSafeError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print()
    if result.mute_intervals:
        console.print(mute_table(result.mute_intervals))
    if result.scene_intervals:
        console.print(scene_table(result.scene_intervals))
    summary = f"Muted {len(result.mute_intervals)} instance(s)"
    if result.scene_intervals:
        summary += (
            f", skipped {len(result.scene_intervals)} scene(s) "
            f"({result.removed_seconds:.2f}s total)"
        )
    console.print(f"\n[bold]{summary}[/bold]")


def detect(
    input_path: Annotated[
        Path,
        typer.Option("--input", "-i", help="Input video file."),
    ],
    profile: Annotated[
        str,
        typer.Option("--profile", "-p", help="Profile name (see 'kidsafe profiles')."),
    ],
    words: WordsOpt = None,
    save_words_to: Annotated[
        Optional[Path],
        typer.Option("--save-words", help="Also write the transcript words to this JSON file."),
    ] = None,
    model: ModelOpt = None,
    backend: BackendOpt = None,
    language: LanguageOpt = None,
    device: DeviceOpt = None,
    no_cache: NoCacheOpt = False,
) -> None:
    """Dry run: show what would be muted and cut, without editing anything."""
    from kidsafe.core.errors import InputNotFound
    from kidsafe.core.pipeline import detect_intervals, obtain_words
    from kidsafe.core.profile import load_profile, profile_search_dirs
    from kidsafe.media.ffmpeg import require_ffmpeg
    from kidsafe.transcriber.words import save_words
    from kidsafe.utils.paths import scratch_dir

    config = build_config(
        model=model, backend=backend, language=language, device=device, no_cache=no_cache
    )

    try:
        if not input_path.is_file():
            raise InputNotFound(input_path)
        rules = load_profile(profile, profile_search_dirs(config.profiles_dir))
        if words is None:
            require_ffmpeg()
        with scratch_dir(Path(tempfile.gettempdir())) as scratch:
            transcript = obtain_words(input_path.resolve(), scratch, config, words)
    except KidSafeError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if save_words_to is not None:
        save_words(transcript, save_words_to)
        console.print(f"[green]Saved:[/green] {escape(str(save_words_to))}")

    mute, scenes = detect_intervals(transcript, rules)
    console.print(mute_table(mute))
    console.print(scene_table(scenes))
    console.print(f"\n[bold]{len(transcript)} words, {len(mute)} to mute, {len(scenes)} to cut[/bold]")
