"""
Main CLI entry point for the Content Transfer Assistant.

This module provides the command-line interface using Click with Rich
formatting and progress display.
"""

import asyncio
import mimetypes
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.progress import BarColumn, DownloadColumn, Progress, TextColumn, TimeRemainingColumn

from content_transfer import __version__
from content_transfer.core.error_handler import ErrorHandler
from content_transfer.core.exceptions import ConfigurationError
from content_transfer.models.config import TransferSettings
from content_transfer.models.content import BINARY_CONTENT_TYPE, LobContent
from content_transfer.models.transfer import TransferProgress
from content_transfer.runtime.monitor import ProgressMonitor
from content_transfer.settings.folders import FolderMemory
from content_transfer.settings.preferences import PreferenceStore
from content_transfer.transfer.base import TransferResult
from content_transfer.transfer.classifier import classify
from content_transfer.transfer.orchestrator import ContentTransferOrchestrator
from content_transfer.utils.helpers import format_bytes, format_duration
from content_transfer.utils.logging import get_logger, setup_logging

console = Console()

EXIT_FAILED = 1
EXIT_CANCELLED = 130


def _folder_memory(ctx: click.Context) -> FolderMemory:
    settings: TransferSettings = ctx.obj['settings']
    return FolderMemory(PreferenceStore(settings.preferences_file))


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False),
              help='Settings file (YAML or TOML)')
@click.pass_context
def main(ctx: click.Context, version: bool, verbose: bool, config: Optional[str]):
    """
    Content Transfer Assistant

    Load LOB content values from files and save them back to files.
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    if version:
        console.print(f"Content Transfer Assistant version {__version__}")
        sys.exit(0)

    try:
        settings = TransferSettings.load(config)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(2)

    ctx.obj['settings'] = settings
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_file=settings.log_file,
    )

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@main.group()
def folder():
    """Show or change the remembered dialog folder."""
    pass


@folder.command('show')
@click.pass_context
def folder_show(ctx: click.Context):
    """Print the folder file choosers open in."""
    console.print(_folder_memory(ctx).get())


@folder.command('set')
@click.argument('path')
@click.pass_context
def folder_set(ctx: click.Context, path: str):
    """Remember PATH as the folder file choosers open in."""
    memory = _folder_memory(ctx)
    memory.set(path)
    console.print(f"[green]Dialog folder set to: {memory.get()}[/green]")


async def _copy_content(
    orchestrator: ContentTransferOrchestrator,
    value: LobContent,
    source: Path,
    destination: Path,
    monitor: ProgressMonitor
) -> TransferResult:
    result = await orchestrator.import_from_file(value, source, monitor)
    if not result.success:
        return result
    return await orchestrator.export_to_file(value, destination, monitor)


@main.command()
@click.argument('source', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('destination', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--content-type', '-t', help='MIME type of the content (guessed from SOURCE when omitted)')
@click.pass_context
def copy(ctx: click.Context, source: Path, destination: Path, content_type: Optional[str]):
    """Load SOURCE into a content value and save it to DESTINATION."""
    settings: TransferSettings = ctx.obj['settings']
    logger = get_logger("cli")

    content_type = content_type or mimetypes.guess_type(source.name)[0] or BINARY_CONTENT_TYPE
    value = LobContent(content_type=content_type, display_name=source.name,
                       buffer_size=settings.buffer_size)
    orchestrator = ContentTransferOrchestrator(settings)

    if ctx.obj.get('verbose', False):
        console.print(f"[dim]Content type: {content_type} ({classify(value).value})[/dim]")

    monitor = ProgressMonitor(f"copy {source.name}")
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        DownloadColumn(),
        TimeRemainingColumn(),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task(f"Copying {source.name}", total=None)

        def on_progress(snapshot: TransferProgress) -> None:
            progress.update(
                task_id,
                description=snapshot.task_name or "",
                total=snapshot.total_units or None,
                completed=snapshot.transferred_units,
            )

        monitor.add_callback(on_progress)
        try:
            result = asyncio.run(_copy_content(orchestrator, value, source, destination, monitor))
        except KeyboardInterrupt:
            console.print("[yellow]Copy cancelled[/yellow]")
            sys.exit(EXIT_CANCELLED)

    if result.cancelled:
        console.print("[yellow]Copy cancelled[/yellow]")
        sys.exit(EXIT_CANCELLED)

    if not result.success:
        report = ErrorHandler(logger).build_report(result, value.display_name)
        console.print(f"[red]{report.title}[/red]: {report.message}")
        if report.cause:
            console.print(f"[dim]{report.cause}[/dim]")
        sys.exit(EXIT_FAILED)

    _folder_memory(ctx).remember_choice(destination)
    elapsed = result.progress.elapsed_time or 0.0
    console.print(
        f"[green]Saved {format_bytes(destination.stat().st_size)} to {destination}[/green] "
        f"[dim]in {format_duration(elapsed)}[/dim]"
    )


if __name__ == '__main__':
    main()
