"""pinme CLI - Main commands."""
import asyncio
import logging
from pathlib import Path
from typing import Optional, List

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pinme import setup_logging
from pinme.client import PinmeClient
from pinme.core.config import PinmeConfig
from pinme.core.exceptions import PinmeException
from pinme.core.history import HistoryStats, HistoryStore, UploadRecord
from pinme.core.remove import parse_removal_input
from pinme.core.upload import format_size

app = typer.Typer(
    name="pinme",
    help="A command-line tool for uploading files to IPFS",
    add_completion=False,
    no_args_is_help=True
)
console = Console()

SUPPORTED_FORMATS = [
    "IPFS hash: bafybeig...",
    "Full URL: https://bafybeig....pinme.dev",
    "Subname: 3abt6ztu",
    "Subname URL: https://3abt6ztu.pinit.eth.limo",
]


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def load_config() -> PinmeConfig:
    try:
        return PinmeConfig.from_env()
    except PinmeException as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)


def report_error(error: PinmeException) -> None:
    console.print(f"[red]Error: {error}[/red]")
    hint = getattr(error, 'hint', None)
    if hint:
        console.print(f"[yellow]{hint}[/yellow]")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Show debug logs"),
):
    """A command-line tool for uploading files to IPFS."""
    # Variables already in the environment win over .env
    load_dotenv(Path.cwd() / ".env")
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)]
        )
        setup_logging(logging.DEBUG)


@app.command()
def upload(
    path: Optional[str] = typer.Argument(None, help="File or directory to upload"),
):
    """Upload a file or directory to IPFS."""
    if not path:
        path = typer.prompt("path to upload")

    absolute_path = Path(path).expanduser().resolve()
    if not absolute_path.exists():
        console.print(f"[red]path {path} does not exist[/red]")
        raise typer.Exit(1)

    config = load_config()

    async def do_upload():
        async with PinmeClient(config) as pinme:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True
            ) as progress:
                progress.add_task(f"Uploading {absolute_path} to glitter ipfs...", total=None)
                outcome = await pinme.upload(absolute_path)

            console.print(f"[green]Successfully uploaded {absolute_path} to glitter ipfs[/green]")
            console.print(f"[bold]IPFS CID:[/bold] {outcome.content_hash}")
            if config.preview_url:
                console.print("[cyan]URL:[/cyan]")
                console.print(f"[cyan]{pinme.preview_url(outcome.content_hash)}[/cyan]")
            if outcome.short_alias:
                console.print(f"[bold]ENS URL:[/bold] {pinme.alias_url(outcome.short_alias)}")

    console.print(f"[blue]uploading {absolute_path} to ipfs...[/blue]")
    try:
        run_async(do_upload())
    except PinmeException as e:
        report_error(e)
        raise typer.Exit(1)


@app.command()
def rm(
    target: Optional[str] = typer.Argument(None, help="IPFS hash, subname, or URL to remove"),
):
    """Remove a file from IPFS network."""
    if not target:
        console.print("[yellow]Warning: This action will permanently remove the content from IPFS network[/yellow]")
        console.print("[yellow]Make sure you have the correct IPFS hash[/yellow]")
        if not typer.confirm("Do you want to continue?", default=False):
            console.print("[yellow]Operation cancelled[/yellow]")
            raise typer.Exit()
        target = typer.prompt("Enter IPFS hash, subname, or URL to remove")

    parsed = parse_removal_input(target)
    if parsed is None:
        console.print(f"[red]Invalid input format: {target}[/red]")
        console.print("[yellow]Supported formats:[/yellow]")
        for line in SUPPORTED_FORMATS:
            console.print(f"[yellow]  - {line}[/yellow]")
        raise typer.Exit(1)

    config = load_config()

    async def do_rm():
        async with PinmeClient(config) as pinme:
            await pinme.remove(target)

    try:
        run_async(do_rm())
    except PinmeException as e:
        console.print("[red]Removal failed[/red]")
        report_error(e)
        raise typer.Exit(1)

    console.print("[green]Removal successful![/green]")
    console.print(f"[cyan]Content {parsed.kind.value}: {parsed.value} has been removed from IPFS network[/cyan]")


def print_history(records: List[UploadRecord], stats: HistoryStats) -> None:
    table = Table(title="Upload History")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="green")
    table.add_column("Type", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Files", justify="right")
    table.add_column("IPFS CID")
    table.add_column("ENS URL")
    table.add_column("Date", style="dim")

    for index, record in enumerate(records, start=1):
        table.add_row(
            str(index),
            record.display_name,
            "Directory" if record.is_directory else "File",
            format_size(record.size_bytes),
            str(record.file_count),
            record.content_hash,
            PinmeClient.alias_url(record.short_alias) if record.short_alias else "-",
            record.human_date,
        )

    console.print(table)
    console.print(f"[bold]Total Uploads: {stats.total_uploads}[/bold]")
    console.print(f"[bold]Total Files: {stats.total_files}[/bold]")
    console.print(f"[bold]Total Size: {format_size(stats.total_size)}[/bold]")


@app.command("list")
def list_history(
    limit: int = typer.Option(10, "--limit", "-l", min=1, help="Limit the number of records to show"),
    clear: bool = typer.Option(False, "--clear", "-c", help="Clear all upload history"),
):
    """Show upload history."""
    store = HistoryStore.from_config(load_config())

    if clear:
        if not store.clear():
            console.print("[red]Error clearing upload history[/red]")
            raise typer.Exit(1)
        console.print("[green]Upload history cleared successfully.[/green]")
        return

    records = store.list(limit)
    if not records:
        console.print("[yellow]No upload history found.[/yellow]")
        return

    print_history(records, HistoryStats.from_records(records))


app.command("ls", help="Alias for 'list' command.")(list_history)


@app.command("help")
def help_command(
    ctx: typer.Context,
    command: Optional[str] = typer.Argument(None, help="Command to describe"),
):
    """Show help for a specific command."""
    group_ctx = ctx.parent
    group = group_ctx.command

    if command:
        cmd = group.get_command(group_ctx, command)
        if cmd is None:
            console.print(f"Unknown command: {command}")
        else:
            with typer.Context(cmd, info_name=command, parent=group_ctx) as cmd_ctx:
                help_text = cmd.get_help(cmd_ctx)
            if help_text:
                typer.echo(help_text)
            return

    help_text = group.get_help(group_ctx)
    if help_text:
        typer.echo(help_text)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
