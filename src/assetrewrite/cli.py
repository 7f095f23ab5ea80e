"""Typer-based CLI for assetrewrite."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from . import __version__
from .config import Settings, get_settings, load_asset_map
from .errors import AssetRewriteError
from .output import configure_logging, console, display_summary
from .pipeline import rewrite_tree
from .rewriter import AssetRewriter

logger = logging.getLogger(__name__)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"assetrewrite {__version__}")
        raise typer.Exit


app = typer.Typer(
    name="assetrewrite",
    help="Rewrite asset references to their fingerprinted names",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """Rewrite asset references to their fingerprinted names."""


AssetMapOption = Annotated[
    Path,
    typer.Option("--asset-map", "-m", help="JSON file mapping original paths to fingerprinted paths"),
]
PrependOption = Annotated[
    str | None,
    typer.Option("--prepend", "-p", help="Base URL for rewritten references (default: ASSETREWRITE_PREPEND)"),
]
IgnoreOption = Annotated[
    list[str] | None,
    typer.Option("--ignore", "-x", help="Project path to leave untouched (repeatable)"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show per-file details and debug logging")]


def build_rewriter(
    asset_map_path: Path,
    prepend: str | None = None,
    extensions: list[str] | None = None,
    ignore: list[str] | None = None,
    workers: int | None = None,
) -> tuple[AssetRewriter, Settings]:
    """Resolve settings and build the rewriter for one run.

    CLI values win over environment settings. A prepend stored in the asset
    map manifest is used only when neither supplies one.
    """
    settings = get_settings().with_overrides(
        prepend=prepend,
        extensions=tuple(extensions) if extensions else None,
        ignore=tuple(ignore) if ignore else None,
        workers=workers,
    )
    asset_map, manifest_prepend = load_asset_map(asset_map_path)
    if not settings.prepend and manifest_prepend:
        settings = settings.with_overrides(prepend=manifest_prepend)

    rewriter = AssetRewriter(
        asset_map,
        prepend=settings.prepend,
        ignore=settings.ignore,
        replace_extensions=settings.extensions,
    )
    logger.debug("Loaded %d asset(s) from %s", len(rewriter.index), asset_map_path)
    return rewriter, settings


@app.command()
def run(
    input_dir: Annotated[Path, typer.Argument(help="Directory to read files from")],
    output_dir: Annotated[Path, typer.Argument(help="Directory to write rewritten files to")],
    asset_map: AssetMapOption,
    prepend: PrependOption = None,
    extensions: Annotated[
        list[str] | None,
        typer.Option("--ext", "-e", help="File extension to rewrite (repeatable, default: html, css)"),
    ] = None,
    ignore: IgnoreOption = None,
    workers: Annotated[int | None, typer.Option("--workers", "-w", help="Worker threads (0 = one per CPU)")] = None,
    verbose: VerboseOption = False,
) -> None:
    """
    Rewrite every eligible file in a directory tree.

    Files are mirrored from INPUT_DIR into OUTPUT_DIR. Files with an eligible
    extension have their asset references rewritten, everything else is
    copied unchanged.
    """
    configure_logging(verbose)
    try:
        rewriter, settings = build_rewriter(asset_map, prepend, extensions, ignore, workers)
        with console.status("[cyan]Rewriting asset references...[/cyan]", spinner="dots"):
            summary = rewrite_tree(input_dir, output_dir, rewriter, workers=settings.workers or None)
    except (AssetRewriteError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(code=130) from None

    display_summary(summary, verbose=verbose)


@app.command("file")
def rewrite_single_file(
    path: Annotated[Path, typer.Argument(help="File to rewrite")],
    asset_map: AssetMapOption,
    relative_to: Annotated[
        str | None,
        typer.Option("--as", help="Project-relative path of the file (default: PATH as given)"),
    ] = None,
    prepend: PrependOption = None,
    ignore: IgnoreOption = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write to a file instead of stdout")] = None,
    verbose: VerboseOption = False,
) -> None:
    """
    Rewrite a single file and print the result.

    The file is rewritten whatever its extension, but the ignore list still
    applies.
    """
    configure_logging(verbose)
    if not path.is_file():
        console.print(f"[red]Error: File not found: {path}[/red]")
        raise typer.Exit(code=1)

    project_path = relative_to or path.as_posix()
    try:
        rewriter, _ = build_rewriter(asset_map, prepend, ignore=ignore)
        text = path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        console.print(f"[red]Error: {path} is not valid UTF-8[/red]")
        raise typer.Exit(code=1) from e
    except (AssetRewriteError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    if rewriter.is_ignored(project_path):
        rewritten = text
        logger.info("%s is ignored, leaving it unchanged", project_path)
    else:
        rewritten = rewriter.rewrite_file(text, project_path)

    if output:
        try:
            output.write_bytes(rewritten.encode("utf-8"))
        except OSError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1) from e
        console.print(f"[green]✓ Rewritten file saved to {output.resolve()}[/green]")
    else:
        typer.echo(rewritten, nl=False)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
