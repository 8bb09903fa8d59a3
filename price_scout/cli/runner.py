# price_scout/cli/runner.py

"""Headless CLI commands: reuse the async services and print results."""

import json
import logging
import mimetypes
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from price_scout.config.settings import Settings
from price_scout.models.errors import PriceScoutError
from price_scout.models.market import AggregateResult, MarketSummary
from price_scout.services.listing_extractor import ListingExtractor
from price_scout.services.price_orchestrator import PriceOrchestrator
from price_scout.storage.template_store import TemplateStore

logger = logging.getLogger("price_scout.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def format_price(value: float, currency: str) -> str:
    """Render a price the way the marketplace shows it."""
    if currency == "USD":
        return f"${value:,.2f}"
    if currency == "JPY":
        return f"¥{value:,.0f}"
    return f"{value:,} {currency}"


def _dump_json(data: Any) -> None:
    """Write *data* to stdout as pretty, non-ASCII-escaped JSON."""
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _error_payload(exc: PriceScoutError) -> dict[str, str]:
    return {"error": exc.code, "message": str(exc)}


def _print_summary_table(result: AggregateResult) -> None:
    """Render a Rich table with one row per marketplace."""
    labels = {s["id"]: s["label"] for s in Settings.AVAILABLE_SOURCES}
    table = Table(
        title=f"相場: {escape(result.product_name)}",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="magenta")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Avg", justify="right", style="green")
    table.add_column("Count", justify="right")
    table.add_column("Note", style="yellow", overflow="fold")

    for source_id, summary in result.summaries.items():
        table.add_row(
            labels.get(source_id, source_id),
            format_price(summary.min, summary.currency),
            format_price(summary.max, summary.currency),
            format_price(summary.avg, summary.currency),
            f"{summary.count}件",
            escape(summary.note or ""),
        )

    Console().print(table)


def _count_placeholders(summaries: Mapping[str, MarketSummary]) -> int:
    return sum(1 for s in summaries.values() if s.note)


def _emit_result(result: AggregateResult, output_format: str) -> None:
    placeholders = _count_placeholders(result.summaries)
    total = len(result.summaries)
    if placeholders:
        _err.print(
            f"[yellow]{placeholders} of {total} sources "
            f"show placeholder data[/yellow]"
        )
    else:
        _err.print(f"[green]✓ {total} sources summarised[/green]")

    if output_format == "table":
        _print_summary_table(result)
    else:
        _dump_json(result.to_dict())


async def cli_price(query: str, output_format: str) -> int:
    """Aggregate marketplace prices for a text query."""
    orchestrator = PriceOrchestrator()
    _err.print(f"[bold]Searching:[/bold] {escape(query)}")
    try:
        result = await orchestrator.aggregate(query)
    except PriceScoutError as exc:
        logger.error("Price lookup failed: %s", exc)
        _dump_json(_error_payload(exc))
        return 1

    _emit_result(result, output_format)
    return 0


async def cli_appraise(image_path: str, output_format: str) -> int:
    """Identify an item from a photo and aggregate its prices."""
    path = Path(image_path)
    if not path.is_file():
        _err.print(f"[red]Image not found: {escape(str(path))}[/red]")
        return 1

    mime_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    orchestrator = PriceOrchestrator()
    _err.print(f"[bold]Analysing image:[/bold] {escape(path.name)}")
    try:
        identification, result = await orchestrator.appraise_image(
            path.read_bytes(), mime_type
        )
    except PriceScoutError as exc:
        logger.error("Appraisal failed: %s", exc)
        _dump_json(_error_payload(exc))
        return 1

    _err.print(
        f"[dim]Identified: {escape(identification.product_name)} "
        f"(query: {escape(identification.search_query)})[/dim]"
    )
    _emit_result(result, output_format)
    return 0


async def cli_template(
    urls: list[str],
    save_category: str | None = None,
) -> int:
    """Build a listing template from reference URLs."""
    extractor = ListingExtractor()
    try:
        built = await extractor.build_template(urls)
    except PriceScoutError as exc:
        logger.error("Template build failed: %s", exc)
        _err.print(f"[red]{escape(str(exc))}[/red]")
        _dump_json(_error_payload(exc))
        return 1

    _err.print(
        f"[green]✓ Learned from {len(built.results)} listing(s)[/green]"
    )
    _dump_json(built.to_dict())

    if save_category is not None:
        try:
            record = TemplateStore().create(
                save_category,
                built.template.title_pattern,
                built.template.description_pattern,
            )
        except ValueError as exc:
            _err.print(f"[red]Save failed: {escape(str(exc))}[/red]")
            return 1
        _err.print(f"[dim]Saved template {record.id}[/dim]")
    return 0


def cli_templates(
    action: str,
    template_id: str | None = None,
    product_name: str | None = None,
) -> int:
    """List, preview or delete saved templates."""
    store = TemplateStore()

    if action == "list":
        records = store.list()
        if not records:
            _err.print("[yellow]No saved templates.[/yellow]")
            return 0
        table = Table(
            title="Templates",
            show_lines=True,
            title_style="bold cyan",
        )
        table.add_column("ID", style="dim")
        table.add_column("Category", style="magenta")
        table.add_column("Title")
        table.add_column("Updated", style="dim")
        for r in records:
            table.add_row(
                r.id, escape(r.category), escape(r.title), r.updated_at
            )
        Console().print(table)
        return 0

    if template_id is None:
        _err.print("[red]A template id is required.[/red]")
        return 1

    if action == "show":
        record = store.get(template_id)
        if record is None:
            _err.print(f"[red]Template not found: {escape(template_id)}[/red]")
            return 1
        title, description = record.render(product_name or "商品名")
        Console().print(
            f"[bold]{escape(title)}[/bold]\n\n{escape(description)}"
        )
        return 0

    if action == "delete":
        if not store.delete(template_id):
            _err.print(f"[red]Template not found: {escape(template_id)}[/red]")
            return 1
        _err.print(f"[dim]Deleted {escape(template_id)}[/dim]")
        return 0

    _err.print(f"[red]Unknown action: {escape(action)}[/red]")
    return 1


async def run_health_check() -> int:
    """Run connectivity health check on all sources."""
    from price_scout.services.health_checker import HealthChecker

    _err.print("[bold]Running marketplace health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Source Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        elif r.status == "unconfigured":
            status = "[yellow]🔑 NO KEY[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "-"
        )
        table.add_row(
            r.source_id, status, latency, r.message,
        )

    Console().print(table)
    return 1 if any_down else 0
