"""kidsafe profiles command: list available rule profiles."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from kidsafe.cli.utils import build_config
from kidsafe.core.errors import ProfileLoadError
from kidsafe.core.profile import list_profiles, load_profile, profile_search_dirs
from kidsafe.utils.console import console


def profiles() -> None:
    """List the profiles that can be passed to --profile."""
    config = build_config()
    dirs = profile_search_dirs(config.profiles_dir)
    available = list_profiles(dirs)

    table = Table(title=f"Profiles ({len(available)})")
    table.add_column("Name", style="bold cyan")
    table.add_column("Mute words", justify="right")
    table.add_column("Mute phrases", justify="right")
    table.add_column("Scene rules", justify="right")
    table.add_column("Padding", justify="right")
    table.add_column("Min conf.", justify="right")
    table.add_column("Source", style="dim")

    for name, path in available.items():
        try:
            profile = load_profile(name, dirs)
        except ProfileLoadError as e:
            table.add_row(name, "-", "-", "-", "-", "-", f"[red]invalid: {escape(e.cause)}[/red]")
            continue
        scene_rules = len(profile.skip_scene_words) + len(profile.skip_scene_phrases)
        table.add_row(
            name,
            str(len(profile.mute_words)),
            str(len(profile.mute_phrases)),
            str(scene_rules),
            f"{profile.padding_ms:g}ms",
            f"{profile.min_confidence:g}",
            str(path.parent),
        )

    console.print(table)
