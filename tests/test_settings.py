# tests/test_settings.py

"""Tests for the Settings configuration class."""

import importlib
import json
import unittest

from price_scout.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants and source registry."""

    def test_request_delay_is_positive_float(self) -> None:
        """REQUEST_DELAY must be a positive number."""
        self.assertIsInstance(Settings.REQUEST_DELAY, float)
        self.assertGreater(Settings.REQUEST_DELAY, 0)

    def test_request_timeout_is_ten_seconds(self) -> None:
        """One unified per-request timeout for every source."""
        self.assertEqual(Settings.REQUEST_TIMEOUT, 10)

    def test_adapter_timeout_covers_request_timeout(self) -> None:
        """The per-adapter cap is at least one request long."""
        self.assertGreaterEqual(
            Settings.ADAPTER_TIMEOUT, Settings.REQUEST_TIMEOUT
        )

    def test_max_retries_is_positive(self) -> None:
        """MAX_RETRIES must be >= 1."""
        self.assertGreaterEqual(Settings.MAX_RETRIES, 1)

    def test_zenplus_ceiling(self) -> None:
        """Values of one million yen and above are treated as SKUs."""
        self.assertEqual(Settings.ZENPLUS_PRICE_CEILING, 1_000_000)

    def test_available_sources_order(self) -> None:
        """Registry lists mercari, zenplus, ebay in wire order."""
        ids = [s["id"] for s in Settings.AVAILABLE_SOURCES]
        self.assertEqual(ids, ["mercari", "zenplus", "ebay"])

    def test_each_source_has_required_keys(self) -> None:
        """Every source must have id, label, and scraper keys."""
        for src in Settings.AVAILABLE_SOURCES:
            with self.subTest(src=src.get("id", "?")):
                self.assertIn("id", src)
                self.assertIn("label", src)
                self.assertIn("scraper", src)

    def test_scraper_paths_importable(self) -> None:
        """Every dotted scraper path resolves to a class."""
        for src in Settings.AVAILABLE_SOURCES:
            with self.subTest(src=src["id"]):
                module_path, class_name = src["scraper"].rsplit(".", 1)
                module = importlib.import_module(module_path)
                self.assertTrue(hasattr(module, class_name))

    def test_selectors_file_has_html_sources(self) -> None:
        """selectors.json carries entries for the HTML sources."""
        self.assertTrue(Settings.SELECTORS_PATH.exists())
        with open(Settings.SELECTORS_PATH, encoding="utf-8") as f:
            selectors = json.load(f)
        self.assertIn("mercari", selectors)
        self.assertIn("zenplus", selectors)
        self.assertEqual(
            selectors["listing"]["title_suffix"], " - メルカリ"
        )

    def test_default_headers_look_like_a_browser(self) -> None:
        """HTML sources send a browser-like user agent."""
        self.assertIn("Mozilla/5.0", Settings.DEFAULT_HEADERS["User-Agent"])

    def test_logs_dir_under_base(self) -> None:
        """LOGS_DIR lives under the project base directory."""
        self.assertEqual(Settings.LOGS_DIR.parent, Settings.BASE_DIR)


if __name__ == "__main__":
    unittest.main()
