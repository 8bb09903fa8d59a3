# price_scout/scrapers/zenplus_scraper.py

"""Price adapter for zenplus.jp search result pages."""

import urllib.parse

from bs4 import BeautifulSoup

from price_scout.models.market import (
    FallbackNotes,
    MarketSummary,
    PriceObservation,
    PriceSample,
)
from price_scout.scrapers.base_scraper import BaseScraper


class ZenPlusScraper(BaseScraper):
    """Price adapter for zenplus.jp.

    ZenPlus markup has no stable test ids, so every element whose class
    mentions "price" is read. Large numbers picked up that way are
    usually SKUs or JAN codes and are discarded.
    """

    SEARCH_URL = "https://zenplus.jp/search?q={query}"
    CURRENCY = "JPY"
    DEFAULT_SUMMARY = MarketSummary(
        min=1500, max=4000, avg=2500, count=5, currency="JPY"
    )
    NOTES = FallbackNotes(
        access_failed=(
            "ZenPlusへのアクセスに失敗しました。"
            "ダミーデータを表示しています。"
        ),
        no_data=(
            "ZenPlusからデータを取得できませんでした。"
            "ダミーデータを表示しています。"
        ),
    )

    def __init__(self) -> None:
        super().__init__("zenplus")

    def _get_homepage(self) -> str:
        """Return the ZenPlus homepage URL."""
        return "https://zenplus.jp/"

    def _parse_prices(self, soup: BeautifulSoup) -> PriceSample:
        """Collect plausible prices from price-like elements."""
        ceiling = self.settings.ZENPLUS_PRICE_CEILING
        prices: PriceSample = []
        discarded = 0
        for element in soup.select(self.selectors["price"]):
            price = self.extract_price(element.get_text())
            if 0 < price < ceiling:
                prices.append(
                    PriceObservation(float(price), self.CURRENCY)
                )
            elif price >= ceiling:
                discarded += 1
        if discarded:
            self.logger.debug(
                "[zenplus] Discarded %d values >= %d",
                discarded,
                ceiling,
            )
        return prices

    def fetch_prices(self, query: str) -> PriceSample:
        """Search ZenPlus and return the listed prices in JPY."""
        url = self.SEARCH_URL.format(
            query=urllib.parse.quote(query)
        )
        self.logger.info("[zenplus] Fetching %s", url)
        soup = self._get_page(url)
        prices = self._parse_prices(soup)
        self.logger.info(
            "[zenplus] %d prices for '%s'", len(prices), query
        )
        return prices
