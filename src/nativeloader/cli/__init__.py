"""CLI module for nativeloader.

Diagnostic commands for checking how bundled native libraries resolve,
extract and load on the current host.
"""

import typer
from rich.console import Console

from nativeloader.cli.commands import extract_resource, load_resource, show_platform

app = typer.Typer(
    name="nativeloader",
    help="nativeloader - extract and load bundled native libraries",
    add_completion=False,
)
console = Console()


@app.command()
def info() -> None:
    """Show the host OS family and shared library naming."""
    show_platform(console=console)


@app.command()
def extract(
    path: str = typer.Argument(..., help="Resource path, e.g. /mypkg/native/libfoo.so"),
    anchor: str = typer.Option(
        None, "--anchor", "-a", help="Package to resolve PATH against"
    ),
    keep: bool = typer.Option(
        False, "--keep", "-k", help="Leave the extracted file on disk"
    ),
) -> None:
    """Extract a bundled resource to a temporary file."""
    extract_resource(path=path, anchor=anchor, keep=keep, console=console)


@app.command()
def load(
    path: str = typer.Argument(..., help="Resource path of the shared library"),
    anchor: str = typer.Option(
        None, "--anchor", "-a", help="Package to resolve PATH against"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log every extraction step"
    ),
) -> None:
    """Extract a bundled shared library and load it into this process."""
    load_resource(path=path, anchor=anchor, verbose=verbose, console=console)


if __name__ == "__main__":
    app()
