"""Click-based CLI for edgar-access.

Thin wrapper around library modules. Every command builds an EdgarClient
from config, delegates to an endpoint or the transport core, and prints.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

console = Console(stderr=True)

# Exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run an async coroutine from synchronous Click code."""
    return asyncio.run(coro)


def _load_config(ctx: click.Context):
    """Load config lazily, caching on first call."""
    if "config" not in ctx.obj:
        from edgar_access.core import ConfigError, load_config

        try:
            ctx.obj["config"] = load_config(config_path=ctx.obj.get("config_path"))
        except ConfigError as exc:
            console.print(f"[red]Configuration error:[/red] {exc}")
            raise SystemExit(EXIT_CONFIG) from exc
        _configure_logging(ctx.obj["config"].logging, ctx.obj.get("verbose", False))
    return ctx.obj["config"]


def _configure_logging(logging_config, verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging_config.level
    logging.basicConfig(
        level=level,
        format=logging_config.format,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _run_with_client(ctx: click.Context, operation):
    """Open an EdgarClient, run `operation(client)`, and map errors to exit codes.

    NotFoundError is a normal empty result. Rate limiting, unexpected statuses
    and network failures are reported as worth retrying later.
    """
    from edgar_access.core import EdgarAccessError, FetchError, NotFoundError
    from edgar_access.transport import EdgarClient

    config = _load_config(ctx)

    async def _run():
        async with EdgarClient(config.edgar) as client:
            return await operation(client)

    try:
        return _run_async(_run())
    except NotFoundError as exc:
        console.print(f"[yellow]No data found:[/yellow] {exc}")
        raise SystemExit(EXIT_OK) from exc
    except FetchError as exc:
        console.print(f"[red]Request failed:[/red] {exc}")
        if exc.user_retryable:
            console.print("[yellow]SEC EDGAR may be busy. Try again later.[/yellow]")
        raise SystemExit(EXIT_FAILURE) from exc
    except EdgarAccessError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(EXIT_FAILURE) from exc


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2))


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    envvar="EDGAR_ACCESS_CONFIG",
    default=None,
    help="Path to edgar-access.yml config file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.version_option(package_name="edgar-access")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """EDGAR Access: rate-limited client for SEC EDGAR."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# fetch
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("url")
@click.option("--binary", "-b", is_flag=True, default=False, help="Fetch raw bytes.")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write the body to a file instead of stdout.",
)
@click.pass_context
def fetch(ctx: click.Context, url: str, binary: bool, output: str | None) -> None:
    """Fetch an absolute EDGAR URL through the rate limiter."""

    async def _op(client):
        if binary:
            return await client.fetch_bytes(url)
        return await client.fetch_text(url)

    body = _run_with_client(ctx, _op)

    if output:
        path = Path(output)
        data = body if isinstance(body, bytes) else body.encode("utf-8")
        path.write_bytes(data)
        console.print(f"[green]✓[/green] Wrote {len(data)} bytes to {path}")
    elif isinstance(body, bytes):
        click.echo(body, nl=False)
    else:
        click.echo(body)


# ---------------------------------------------------------------------------
# cik
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("ticker")
@click.pass_context
def cik(ctx: click.Context, ticker: str) -> None:
    """Resolve a stock TICKER to its SEC CIK."""
    from edgar_access.endpoints import CompanyEndpoints

    async def _op(client):
        return await CompanyEndpoints(client).company_cik(ticker)

    result = _run_with_client(ctx, _op)
    click.echo(f"{result:010d}")


# ---------------------------------------------------------------------------
# submissions
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("cik_value", metavar="CIK", type=click.IntRange(min=0))
@click.option("--form", "-f", "forms", multiple=True, help="Only these form types (amendments included). Repeatable.")
@click.option("--limit", "-n", type=int, default=10, show_default=True, help="Recent filings to list.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the raw JSON.")
@click.pass_context
def submissions(ctx: click.Context, cik_value: int, forms: tuple[str, ...], limit: int, as_json: bool) -> None:
    """List recent filings for a company CIK."""
    from edgar_access.endpoints import FilingEndpoints
    from edgar_access.endpoints.filings import expand_form_types, recent_records

    async def _op(client):
        return await FilingEndpoints(client).submissions(cik_value)

    data = _run_with_client(ctx, _op)
    if as_json:
        _echo_json(data)
        return

    records = recent_records(data)
    if forms:
        wanted = expand_form_types(forms)
        records = [r for r in records if r.form in wanted]

    table = Table(title=f"{data.get('name', cik_value)} (CIK {cik_value:010d})")
    table.add_column("Filed")
    table.add_column("Form")
    table.add_column("Accession")
    table.add_column("Primary document")
    for record in records[:limit]:
        table.add_row(
            record.filing_date.isoformat(),
            record.form,
            record.accession_number,
            record.primary_document or "",
        )
    Console().print(table)


# ---------------------------------------------------------------------------
# index
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--daily", is_flag=True, default=False, help="Daily index instead of full index.")
@click.option("--year", "-y", type=int, default=None, help="Year (1994 or later).")
@click.option("--quarter", "-q", type=click.IntRange(1, 4), default=None, help="Quarter 1-4.")
@click.pass_context
def index(ctx: click.Context, daily: bool, year: int | None, quarter: int | None) -> None:
    """List an EDGAR index directory."""
    from edgar_access.core import IndexType
    from edgar_access.endpoints import IndexEndpoints

    index_type = IndexType.DAILY if daily else IndexType.FULL

    async def _op(client):
        return await IndexEndpoints(client).index_listing(index_type, year, quarter)

    listing = _run_with_client(ctx, _op)
    items = listing.get("directory", {}).get("item", [])
    for item in items:
        click.echo(f"{item.get('type', ''):<5} {item.get('name', '')}")


# ---------------------------------------------------------------------------
# feed
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("kind", type=click.Choice(["current", "company"], case_sensitive=False))
@click.option("--cik", "cik_value", default=None, help="Company CIK (required for 'company').")
@click.option("--count", type=int, default=40, show_default=True, help="Entries to request.")
@click.pass_context
def feed(ctx: click.Context, kind: str, cik_value: str | None, count: int) -> None:
    """Print the raw Atom feed of current or company filings."""
    from edgar_access.endpoints import FeedEndpoints

    if kind == "company" and not cik_value:
        raise click.UsageError("--cik is required for the company feed")

    async def _op(client):
        feeds = FeedEndpoints(client)
        if kind == "company":
            return await feeds.company_feed(cik_value, count=count)
        return await feeds.current_feed(count=count)

    click.echo(_run_with_client(ctx, _op))


if __name__ == "__main__":
    cli()
