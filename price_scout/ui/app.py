# price_scout/ui/app.py

"""Terminal UI for the price_scout market price lookup."""

import json
import logging
from typing import cast

from rich.markup import escape
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
)

from price_scout.cli.runner import format_price
from price_scout.config.settings import Settings
from price_scout.models.errors import PriceScoutError
from price_scout.models.market import AggregateResult
from price_scout.services.price_orchestrator import PriceOrchestrator

logger = logging.getLogger("price_scout.ui")


class PriceScoutApp(App[object]):
    """Terminal UI for the price_scout market price lookup."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("c", "copy_summary", "Copy JSON"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.result: AggregateResult | None = None
        self.settings = Settings()
        self.orchestrator = PriceOrchestrator()

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        source_names = ", ".join(
            s["label"] for s in self.settings.AVAILABLE_SOURCES
        )

        yield Header()
        yield Container(
            Static(f"💴 相場チェック ({source_names})", id="title"),
            Horizontal(
                Input(placeholder="商品名を入力...", id="search_input"),
                Button("Search", variant="primary", id="search_btn"),
                id="search_bar",
            ),
            Static("Ready", id="status"),
            DataTable(
                id="results_table",
                zebra_stripes=True,
                cursor_type="row",
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure the results table columns on startup."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.add_columns("Source", "Min", "Max", "Avg", "Count", "Note")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "search_btn":
            await self.perform_search()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in the search input."""
        if event.input.id == "search_input":
            await self.perform_search()

    async def perform_search(self) -> None:
        """Aggregate marketplace prices for the entered query."""
        search_input = self.query_one("#search_input", Input)
        query = search_input.value.strip()
        if not query:
            self.notify(
                "検索キーワードを入力してください", severity="warning"
            )
            return

        status = self.query_one("#status", Static)
        status.update(f"🔍 Searching '{escape(query)}'...")

        try:
            self.result = await self.orchestrator.aggregate(query)
        except PriceScoutError as exc:
            logger.error("Lookup failed for '%s': %s", query, exc)
            self.notify(f"Error: {escape(str(exc))}", severity="error")
            status.update("❌ Lookup failed")
            return

        self.populate_table()
        placeholders = sum(
            1 for s in self.result.summaries.values() if s.note
        )
        if placeholders:
            status.update(
                f"⚠️ {placeholders} source(s) show placeholder data"
            )
        else:
            status.update(f"✅ Prices for '{escape(query)}'")

    def populate_table(self) -> None:
        """Fill the DataTable with one row per marketplace summary."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )
        table.clear()
        if self.result is None:
            return

        labels = {
            s["id"]: s["label"] for s in self.settings.AVAILABLE_SOURCES
        }
        for source_id, summary in self.result.summaries.items():
            avg_style = "dim" if summary.note else "bold green"
            table.add_row(
                labels.get(source_id, source_id),
                format_price(summary.min, summary.currency),
                format_price(summary.max, summary.currency),
                Text(
                    format_price(summary.avg, summary.currency),
                    style=avg_style,
                ),
                f"{summary.count}件",
                Text(summary.note or "", style="yellow"),
            )

    def action_copy_summary(self) -> None:
        """Copy the current result as JSON to the clipboard."""
        if self.result is None:
            self.notify("No results to copy", severity="warning")
            return
        self.copy_to_clipboard(
            json.dumps(self.result.to_dict(), ensure_ascii=False)
        )
        self.notify("Copied")
