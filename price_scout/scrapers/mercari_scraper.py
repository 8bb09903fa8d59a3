# price_scout/scrapers/mercari_scraper.py

"""Price adapter for jp.mercari.com search result pages."""

import urllib.parse

from bs4 import BeautifulSoup

from price_scout.models.market import (
    FallbackNotes,
    MarketSummary,
    PriceObservation,
    PriceSample,
)
from price_scout.scrapers.base_scraper import BaseScraper


class MercariScraper(BaseScraper):
    """Price adapter for jp.mercari.com.

    Mercari is a client-rendered SPA, so the server HTML often carries no
    item cells at all. That case is an empty sample, not a failure.
    """

    SEARCH_URL = "https://jp.mercari.com/search?keyword={query}"
    CURRENCY = "JPY"
    DEFAULT_SUMMARY = MarketSummary(
        min=500, max=2000, avg=1000, count=10, currency="JPY"
    )
    NOTES = FallbackNotes(
        access_failed=(
            "メルカリへのアクセスに失敗しました。"
            "ダミーデータを表示しています。"
        ),
        no_data=(
            "メルカリからデータを取得できませんでした。"
            "ダミーデータを表示しています。"
        ),
    )

    def __init__(self) -> None:
        super().__init__("mercari")

    def _get_homepage(self) -> str:
        """Return the Mercari Japan homepage URL."""
        return "https://jp.mercari.com/"

    def _parse_prices(self, soup: BeautifulSoup) -> PriceSample:
        """Read the price badge of every item cell on the page."""
        prices: PriceSample = []
        for cell in soup.select(self.selectors["item_cell"]):
            price_el = cell.select_one(self.selectors["price"])
            if price_el is None:
                continue
            price = self.extract_price(price_el.get_text())
            if price > 0:
                prices.append(
                    PriceObservation(float(price), self.CURRENCY)
                )
        return prices

    def fetch_prices(self, query: str) -> PriceSample:
        """Search Mercari and return the listed prices in JPY."""
        url = self.SEARCH_URL.format(
            query=urllib.parse.quote(query)
        )
        self.logger.info("[mercari] Fetching %s", url)
        soup = self._get_page(url)
        prices = self._parse_prices(soup)
        self.logger.info(
            "[mercari] %d prices for '%s'", len(prices), query
        )
        return prices
