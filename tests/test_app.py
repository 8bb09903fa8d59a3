# tests/test_app.py

"""Smoke tests for the TUI application using Textual's Pilot."""

import unittest
from typing import cast
from unittest.mock import AsyncMock, patch

from textual.widgets import DataTable, Input, Static

from price_scout.models.errors import InvalidRequest
from price_scout.models.market import AggregateResult, MarketSummary
from price_scout.ui.app import PriceScoutApp


def _fake_result() -> AggregateResult:
    return AggregateResult(
        product_name="ピカチュウ",
        summaries={
            "mercari": MarketSummary(
                min=800, max=2400, avg=1500, count=12, currency="JPY"
            ),
            "zenplus": MarketSummary(
                min=1500, max=4000, avg=2500, count=5, currency="JPY",
                note="ZenPlusからデータを取得できませんでした。",
            ),
            "ebay": MarketSummary(
                min=9.99, max=30.0, avg=18.25, count=7, currency="USD"
            ),
        },
    )


class TestPriceScoutApp(unittest.IsolatedAsyncioTestCase):
    """Smoke tests for the Textual TUI."""

    async def test_app_composes_without_crash(self) -> None:
        """Verify the app starts and renders all widgets."""
        app = PriceScoutApp()
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input)
            app.query_one("#search_btn")
            app.query_one("#status", Static)
            table = cast(
                DataTable[str], app.query_one("#results_table", DataTable)
            )
            self.assertEqual(len(table.columns), 6)
            await pilot.pause()

    async def test_empty_query_does_not_search(self) -> None:
        """Submitting an empty query never calls the orchestrator."""
        app = PriceScoutApp()
        app.orchestrator.aggregate = AsyncMock()  # type: ignore[method-assign]
        async with app.run_test(notifications=True) as pilot:
            await pilot.click("#search_btn")
            await pilot.pause()
            app.orchestrator.aggregate.assert_not_called()
            self.assertIsNone(app.result)

    async def test_search_populates_table(self) -> None:
        """A successful lookup adds one row per source."""
        app = PriceScoutApp()
        app.orchestrator.aggregate = AsyncMock(  # type: ignore[method-assign]
            return_value=_fake_result()
        )
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input).value = "ピカチュウ"
            await pilot.click("#search_btn")
            await pilot.pause()
            await pilot.pause()

            app.orchestrator.aggregate.assert_awaited_once_with("ピカチュウ")
            table = cast(
                DataTable[str], app.query_one("#results_table", DataTable)
            )
            self.assertEqual(table.row_count, 3)
            self.assertEqual(app.result, _fake_result())

    async def test_markup_in_query_is_shown_literally(self) -> None:
        app = PriceScoutApp()
        app.orchestrator.aggregate = AsyncMock(  # type: ignore[method-assign]
            return_value=AggregateResult(product_name="[/bold]x")
        )
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input).value = "[/bold]x"
            await pilot.click("#search_btn")
            await pilot.pause()
            await pilot.pause()

            app.orchestrator.aggregate.assert_awaited_once_with("[/bold]x")
            self.assertIsNotNone(app.result)

    async def test_lookup_error_keeps_table_empty(self) -> None:
        app = PriceScoutApp()
        app.orchestrator.aggregate = AsyncMock(  # type: ignore[method-assign]
            side_effect=InvalidRequest("bad", code="empty_query")
        )
        async with app.run_test(notifications=True) as pilot:
            app.query_one("#search_input", Input).value = "x"
            await pilot.click("#search_btn")
            await pilot.pause()

            table = cast(
                DataTable[str], app.query_one("#results_table", DataTable)
            )
            self.assertEqual(table.row_count, 0)

    async def test_copy_summary_copies_json(self) -> None:
        app = PriceScoutApp()
        async with app.run_test() as pilot:
            app.result = _fake_result()
            with patch.object(app, "copy_to_clipboard") as mock_copy:
                app.action_copy_summary()
                await pilot.pause()
            copied: str = mock_copy.call_args[0][0]
            self.assertIn('"productName": "ピカチュウ"', copied)
            self.assertIn('"ebay"', copied)


if __name__ == "__main__":
    unittest.main()
