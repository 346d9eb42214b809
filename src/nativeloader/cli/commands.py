"""Implementation of the diagnostic CLI commands.

Each command prints through a Rich console and maps library errors to
process exit codes: 1 for a broken or missing artifact, 2 for a library
the host loader rejected.
"""

import logging
import platform
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from nativeloader.cleanup import CleanupRegistry
from nativeloader.config import load_config
from nativeloader.exceptions import NativeLoaderError
from nativeloader.loader import Loaded, NativeLibraryLoader
from nativeloader.platform_probe import (
    detect_os_family,
    shared_library_name,
    shared_library_suffix,
)
from nativeloader.resources import materialize_resource
from nativeloader.utils.logging import setup_logging

EXIT_EXTRACTION_FAILED = 1
EXIT_LOAD_FAILED = 2


def show_platform(console: Optional[Console] = None) -> None:
    """Print how bundled libraries are named on this host."""
    if console is None:
        console = Console()

    table = Table(
        title="Native library platform", show_header=True, header_style="bold"
    )
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("OS family", detect_os_family().value)
    table.add_row("Machine", platform.machine() or "unknown")
    table.add_row("Library suffix", shared_library_suffix())
    table.add_row("Name for 'foo'", shared_library_name("foo"))

    console.print(table)


def extract_resource(
    path: str,
    anchor: Optional[str] = None,
    keep: bool = False,
    console: Optional[Console] = None,
) -> None:
    """Materialize a bundled resource and report where it landed.

    Args:
        path: Resource path.
        anchor: Package to resolve *path* against.
        keep: Leave the extracted file on disk.
        console: Rich console instance for output.
    """
    if console is None:
        console = Console()

    registry = CleanupRegistry()
    try:
        extracted = materialize_resource(
            path, anchor=anchor, registry=registry, config=load_config()
        )
    except (NativeLoaderError, ValueError) as e:
        console.print(f"[red]✗[/red] {e}")
        registry.drain()
        raise typer.Exit(code=EXIT_EXTRACTION_FAILED) from e

    size = extracted.stat().st_size
    console.print(f"[green]✓[/green] Extracted [bold]{path}[/bold] → {extracted}")
    console.print(f"  [dim]{size} bytes[/dim]")

    if not keep:
        registry.drain()
        console.print("  [dim]removed (use --keep to leave it on disk)[/dim]")


def load_resource(
    path: str,
    anchor: Optional[str] = None,
    verbose: bool = False,
    console: Optional[Console] = None,
) -> None:
    """Extract and load a bundled library, reporting the outcome.

    Args:
        path: Resource path of the library.
        anchor: Package to resolve *path* against.
        verbose: Log every extraction step.
        console: Rich console instance for output.
    """
    if console is None:
        console = Console()

    setup_logging(level=logging.DEBUG if verbose else logging.WARNING)

    with CleanupRegistry() as registry:
        loader = NativeLibraryLoader(
            config=load_config(verbose=verbose or None), registry=registry
        )
        try:
            result = loader.load(path, anchor=anchor)
        except (NativeLoaderError, ValueError) as e:
            console.print(f"[red]✗[/red] {e}")
            raise typer.Exit(code=EXIT_EXTRACTION_FAILED) from e

    if isinstance(result, Loaded):
        console.print(f"[green]✓[/green] Loaded [bold]{path}[/bold]")
        return

    console.print(f"[yellow]⚠[/yellow] Could not load [bold]{path}[/bold]")
    console.print(f"  [dim]{result.reason}[/dim]")
    raise typer.Exit(code=EXIT_LOAD_FAILED)
