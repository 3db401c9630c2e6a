"""Shared CLI utilities."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from kidsafe.core.config import KidSafeConfig, load_config
from kidsafe.core.models import MuteInterval, SceneInterval


def build_config(
    model: str | None = None,
    backend: str | None = None,
    language: str | None = None,
    device: str | None = None,
    reencode_cuts: bool | None = None,
    no_cache: bool = False,
) -> KidSafeConfig:
    """Load config with CLI flags layered on top. Unset flags keep file/env values.

    ``model`` goes to the model key of the backend that ends up active, which
    may come from a config file or env var rather than ``backend``.
    """
    overrides: dict[str, object] = {
        "whisper.language": language,
        "whisper.device": device,
        "whisper.backend": backend,
        "media.reencode_cuts": reencode_cuts,
    }
    if no_cache:
        overrides["use_cache"] = False
    config = load_config(**overrides)
    if model is None:
        return config

    model_key = "whisper.api_model" if config.whisper.backend == "api" else "whisper.local_model"
    overrides[model_key] = model
    return load_config(**overrides)


def mute_table(intervals: list[MuteInterval]) -> Table:
    table = Table(title=f"Muted ({len(intervals)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Word/phrase", style="bold")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    for i, iv in enumerate(intervals, 1):
        table.add_row(str(i), escape(iv.word), f"{iv.start:.2f}s", f"{iv.end:.2f}s")
    return table


def scene_table(intervals: list[SceneInterval]) -> Table:
    table = Table(title=f"Skipped scenes ({len(intervals)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Length", justify="right")
    table.add_column("Reason", max_width=60)
    for i, iv in enumerate(intervals, 1):
        table.add_row(
            str(i), f"{iv.start:.2f}s", f"{iv.end:.2f}s", f"{iv.duration:.2f}s", escape(iv.reason)
        )
    return table
