# tests/test_fallback_policy.py

"""Tests for FallbackPolicy outcome resolution."""

import asyncio
import unittest
from unittest.mock import patch

from price_scout.filters.price_statistics import PriceStatistics
from price_scout.models.errors import (
    ConfigurationMissing,
    FetchError,
    PricesUnavailable,
)
from price_scout.models.market import (
    FallbackNotes,
    MarketSummary,
    PriceObservation,
)
from price_scout.services.fallback_policy import FallbackPolicy

DEFAULTS = MarketSummary(
    min=10, max=50, avg=25, count=15, currency="USD"
)
NOTES = FallbackNotes(
    access_failed="access failed",
    no_data="no data",
    credential_missing="no key",
)


class TestFallbackPolicy(unittest.TestCase):
    """Each outcome kind maps to exactly one summary shape."""

    def test_fetch_error_uses_access_note(self) -> None:
        summary = FallbackPolicy.resolve(
            FetchError("ebay", "HTTP error", 503), DEFAULTS, NOTES
        )
        self.assertEqual(summary, DEFAULTS.with_note("access failed"))

    def test_timeout_uses_access_note(self) -> None:
        for exc in (asyncio.TimeoutError(), TimeoutError()):
            with self.subTest(exc=type(exc).__name__):
                summary = FallbackPolicy.resolve(exc, DEFAULTS, NOTES)
                self.assertEqual(summary.note, "access failed")

    def test_cancellation_uses_access_note(self) -> None:
        summary = FallbackPolicy.resolve(
            asyncio.CancelledError(), DEFAULTS, NOTES
        )
        self.assertEqual(summary.note, "access failed")

    def test_missing_credential_uses_credential_note(self) -> None:
        summary = FallbackPolicy.resolve(
            ConfigurationMissing("ebay", "EBAY_APP_ID"), DEFAULTS, NOTES
        )
        self.assertEqual(summary.note, "no key")
        self.assertEqual(summary.count, 15)

    def test_missing_credential_without_note_text(self) -> None:
        """Sources without a credential note fall back to the error text."""
        notes = FallbackNotes(access_failed="a", no_data="b")
        summary = FallbackPolicy.resolve(
            ConfigurationMissing("x", "X_KEY"), DEFAULTS, notes
        )
        self.assertIn("X_KEY", summary.note or "")

    def test_parse_error_is_no_data(self) -> None:
        summary = FallbackPolicy.resolve(
            ValueError("bad markup"), DEFAULTS, NOTES
        )
        self.assertEqual(summary, DEFAULTS.with_note("no data"))

    def test_empty_sample_is_no_data(self) -> None:
        summary = FallbackPolicy.resolve([], DEFAULTS, NOTES)
        self.assertEqual(summary, DEFAULTS.with_note("no data"))

    def test_sample_of_invalid_prices_is_no_data(self) -> None:
        sample = [PriceObservation(0.0, "USD")]
        summary = FallbackPolicy.resolve(sample, DEFAULTS, NOTES)
        self.assertEqual(summary.note, "no data")

    def test_real_sample_has_no_note(self) -> None:
        sample = [
            PriceObservation(10.0, "USD"),
            PriceObservation(15.0, "USD"),
            PriceObservation(20.0, "USD"),
        ]
        summary = FallbackPolicy.resolve(sample, DEFAULTS, NOTES)
        self.assertIsNone(summary.note)
        self.assertEqual(
            (summary.min, summary.max, summary.avg, summary.count),
            (10.0, 20.0, 15.0, 3),
        )
        self.assertNotIn("note", summary.to_dict())

    def test_defaults_are_not_mutated(self) -> None:
        FallbackPolicy.resolve([], DEFAULTS, NOTES)
        self.assertIsNone(DEFAULTS.note)

    def test_unpriced_listings_use_their_own_note(self) -> None:
        notes = FallbackNotes(
            access_failed="access failed",
            no_data="no data",
            prices_unavailable="no prices",
        )
        summary = FallbackPolicy.resolve(
            PricesUnavailable("ebay", 3), DEFAULTS, notes
        )
        self.assertEqual(summary, DEFAULTS.with_note("no prices"))

    def test_unpriced_listings_without_note_text_are_no_data(self) -> None:
        summary = FallbackPolicy.resolve(
            PricesUnavailable("ebay", 3), DEFAULTS, NOTES
        )
        self.assertEqual(summary.note, "no data")

    def test_empty_sample_goes_through_reducer_with_placeholder(
        self,
    ) -> None:
        """The reducer receives the noted placeholder for empty samples."""
        with patch(
            "price_scout.services.fallback_policy.PriceStatistics.summarize",
            wraps=PriceStatistics.summarize,
        ) as mock_summarize:
            summary = FallbackPolicy.resolve([], DEFAULTS, NOTES)

        mock_summarize.assert_called_once_with(
            [], "USD", empty=DEFAULTS.with_note("no data")
        )
        self.assertEqual(summary, DEFAULTS.with_note("no data"))


if __name__ == "__main__":
    unittest.main()
