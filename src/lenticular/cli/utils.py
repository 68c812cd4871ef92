"""Shared CLI utilities — Rich console, logging, error handling, lens options."""

from __future__ import annotations

import functools
import logging
import traceback
from typing import Any, Callable

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

console = Console()

# Set by the --verbose flag on the top-level CLI group.
verbose: bool = False


def configure_logging(debug: bool) -> None:
    """Route ``lenticular`` log records through Rich."""
    logger = logging.getLogger("lenticular")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=console, show_path=False))
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


def error_handler(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator wrapping CLI commands with standard error handling.

    Catches LenticularError and ValueError (exit 1) and unexpected
    exceptions (exit 2). With --verbose, unexpected errors include the
    full traceback.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        from lenticular.core.exceptions import LenticularError

        try:
            return func(*args, **kwargs)
        except (SystemExit, click.ClickException, click.Abort):
            raise
        except LenticularError as e:
            console.print(f"[red]Error:[/red] {e}")
            for name, value in e.parameters.items():
                console.print(f"  [dim]{name} = {value}[/dim]")
            raise SystemExit(1)
        except (ValueError, FileNotFoundError) as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)
        except Exception as e:
            if verbose:
                console.print(f"[red]Internal error:[/red] {e}")
                console.print(traceback.format_exc())
            else:
                console.print(
                    f"[red]Internal error:[/red] {type(e).__name__}: {e}\n"
                    "[dim]Use --verbose for the full traceback.[/dim]"
                )
            raise SystemExit(2)

    return wrapper


def make_progress() -> Progress:
    """Create a Rich progress bar for CLI operations."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    )


def lens_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach --lpi/--preset/--lens-height options to a command."""
    func = click.option(
        "--lens-height", type=float, default=None,
        help="Lens slab thickness in mm (default: preset or 2.0).",
    )(func)
    func = click.option(
        "--preset", default=None,
        help="Built-in lens preset name (see `lenticular presets`).",
    )(func)
    func = click.option(
        "--lpi", type=float, default=None,
        help="Lenticules per inch (default: 40).",
    )(func)
    return func


def resolve_lens(lpi: float | None, preset: str | None, lens_height: float | None):
    """Build LensParameters from CLI options; --lpi overrides the preset's LPI."""
    from lenticular.core.models import DEFAULT_LPI, LensParameters, get_preset

    if preset is not None:
        try:
            lens = get_preset(preset)
        except KeyError as e:
            raise click.BadParameter(str(e.args[0]), param_hint="--preset") from None
        if lpi is not None:
            lens = lens.with_lpi(lpi)
    else:
        lens = LensParameters.from_lpi(lpi if lpi is not None else DEFAULT_LPI)
    if lens_height is not None:
        lens = lens.with_height(lens_height)
    return lens
