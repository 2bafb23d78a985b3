"""Command line interface for the extraction service."""

import asyncio
import json
import sys
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from .config import settings
from .core.exceptions import RetrievalError
from .core.http_client import PageFetcher
from .extraction import (
    EXTRACT_MODES,
    ExtractionFacade,
    MemoRequest,
    PageRequest,
    validate_locator,
)
from .utils.logging_config import setup_logging


console = Console()


def _read_text(path: Optional[str]) -> str:
    if path is None or path == '-':
        return sys.stdin.read()
    with open(path, encoding='utf-8') as handle:
        return handle.read()


def _print_envelope(title: str, envelope: dict, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(envelope, indent=2, ensure_ascii=False))
        return

    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in envelope.items():
        preview = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
        if preview and len(preview) > 400:
            preview = preview[:400] + '...'
        table.add_row(key, str(preview))
    console.print(table)


@click.group()
@click.version_option(version="1.0.0")
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def cli(verbose: bool):
    """Pitch Fund extraction tools."""
    setup_logging(level="DEBUG" if verbose else "WARNING")


@cli.command()
@click.option('--url', required=True, help='Episode page URL')
@click.option('--extract', 'mode', default='all', type=click.Choice(sorted(EXTRACT_MODES)), help='Fields to extract')
@click.option('--html', 'html_path', default=None, help='Read markup from a file instead of fetching the URL')
@click.option('--json', 'as_json', is_flag=True, help='Print the raw JSON envelope')
def episode(url: str, mode: str, html_path: Optional[str], as_json: bool):
    """Extract episode metadata from a show page."""
    error = validate_locator(url, settings.episode_source_domain)
    if error:
        console.print(f"[red]❌ {error}[/red]")
        sys.exit(2)

    if html_path:
        markup = _read_text(html_path)
    else:
        async def _fetch() -> str:
            async with PageFetcher() as fetcher:
                return await fetcher.fetch_text(url)

        try:
            markup = asyncio.run(_fetch())
        except RetrievalError as e:
            console.print(f"[red]❌ {e}[/red]")
            sys.exit(1)

    envelope = ExtractionFacade().extract(PageRequest.for_mode(url, mode, markup))
    _print_envelope("Episode Extraction", envelope, as_json)
    if not envelope['success']:
        sys.exit(1)


@cli.command('quick-paste')
@click.argument('path', required=False)
@click.option('--json', 'as_json', is_flag=True, help='Print the raw JSON envelope')
def quick_paste(path: Optional[str], as_json: bool):
    """Parse a pasted investment memo (file path or stdin)."""
    result = ExtractionFacade().extract(MemoRequest(text=_read_text(path)))
    if as_json:
        click.echo(json.dumps(result, indent=2, ensure_ascii=False))
        return

    _print_envelope("Parsed Fields", result['extractedData'], as_json=False)
    if result['failedToParse']:
        console.print(f"[yellow]Needs manual entry:[/yellow] {', '.join(result['failedToParse'])}")


@cli.command()
@click.argument('path', required=False)
def diligence(path: Optional[str]):
    """Parse a pasted founder diligence page (file path or stdin)."""
    result = ExtractionFacade().extract_diligence(_read_text(path))
    click.echo(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == '__main__':
    cli()
