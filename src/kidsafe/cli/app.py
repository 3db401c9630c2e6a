"""Kid-Safe Media CLI entry point."""

from typing import Annotated, Optional

import typer
from dotenv import load_dotenv

from kidsafe import __version__
from kidsafe.cli.profiles import profiles
from kidsafe.cli.sanitize import detect, sanitize

app = typer.Typer(
    name="kidsafe",
    help="Kid-Safe Media: mute profanity and cut scenes using word-level timestamps.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"kidsafe {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Kid-Safe Media: mute profanity and cut scenes using word-level timestamps."""
    # Load .env file for API keys (GROQ_API_KEY, OPENAI_API_KEY, etc.)
    # Does not override existing env vars; shell exports take precedence
    load_dotenv(override=False)


app.command("sanitize")(sanitize)
app.command("detect")(detect)
app.command("profiles")(profiles)
