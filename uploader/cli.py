"""
Command-line interface for the bulk episode uploader.

Opens a persistent Chromium profile (log in to the host once, by hand),
then publishes each file as its own episode.
"""
import logging
from pathlib import Path

import click
from playwright.sync_api import sync_playwright
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from uploader.browser import TabOpener
from uploader.constants import (
    DEFAULT_PROFILE_DIR,
    DEFAULT_TARGET_URL,
    DESCRIPTION_MODES,
    DESCRIPTION_RICH_TEXT,
    TABS_NEW,
    TAB_POLICIES,
    Timings,
)
from uploader.items import load_items
from uploader.workflow import FAILED, PUBLISHED, BatchReport, UploadWorkflow

console = Console()

STATUS_STYLES = {PUBLISHED: "green", FAILED: "red"}


def _summary_table(report: BatchReport) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("File", style="cyan")
    table.add_column("Result")
    table.add_column("Step")
    table.add_column("Detail", style="dim")
    for result in report.results:
        style = STATUS_STYLES.get(result.status, "yellow")
        table.add_row(
            result.name,
            f"[{style}]{result.status}[/{style}]",
            result.failed_step.value if result.failed_step else "",
            result.error or "",
        )
    return table


def _alert(item, step, error) -> None:
    console.print(Panel.fit(
        f"[bold red]Automation failed for {item.name}[/bold red]\n\n"
        f"Step: {step.value}\n"
        f"Error: {error}\n\n"
        "Stopping bulk upload. The failed tab has been left open.",
        border_style="red",
    ))


@click.group()
@click.version_option(version="1.0.0")
@click.option('--verbose', '-v', is_flag=True, help='Log every workflow step')
def cli(verbose):
    """
    Voicenote bulk uploader

    Publishes approved voice notes as podcast episodes, one after another.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option('--url', default=DEFAULT_TARGET_URL, show_default=True, help='New-episode page')
@click.option('--tabs', 'tab_policy', type=click.Choice(TAB_POLICIES), default=TABS_NEW,
              show_default=True, help='Reuse the first tab or open one per file')
@click.option('--description', 'description_mode', type=click.Choice(DESCRIPTION_MODES),
              default=DESCRIPTION_RICH_TEXT, show_default=True,
              help='Which description editor the page shows')
@click.option('--headless', is_flag=True, help='Run the browser without a window')
@click.option('--profile', type=click.Path(file_okay=False, path_type=Path),
              default=DEFAULT_PROFILE_DIR, show_default=True,
              help='Browser profile directory (keeps the host login)')
def run(files, url, tab_policy, description_mode, headless, profile):
    """
    Upload FILES as episodes, in order.

    Directories expand to the audio files inside them.
    """
    items = load_items(files)
    if not items:
        console.print("[yellow]No audio files to upload.[/yellow]")
        return

    console.print(f"\n[bold]Uploading {len(items)} file(s)[/bold] to {url}\n")
    profile = profile.expanduser()
    profile.mkdir(parents=True, exist_ok=True)

    with sync_playwright() as playwright:
        context = playwright.chromium.launch_persistent_context(str(profile), headless=headless)
        try:
            start_page = context.pages[0] if context.pages else context.new_page()
            timings = Timings()
            tabs = TabOpener(context, start_page, url, policy=tab_policy,
                             settle=timings.page_settle, before_close=timings.before_close)
            workflow = UploadWorkflow(tabs, description_mode=description_mode,
                                      timings=timings, notify=_alert)
            report = workflow.run(items)

            console.print(_summary_table(report))
            if not report.ok and not headless:
                click.pause("Press any key to close the browser...")
        finally:
            context.close()

    if not report.ok:
        raise SystemExit(1)
    console.print(f"\n[green]✓[/green] Published {len(report.published)} episode(s)")
