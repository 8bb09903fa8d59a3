# price_scout/scrapers/ebay_scraper.py

"""Price adapter for eBay via the Finding API (findItemsByKeywords)."""

import json
from typing import Any

from price_scout.models.errors import PricesUnavailable
from price_scout.models.market import (
    FallbackNotes,
    MarketSummary,
    PriceObservation,
    PriceSample,
)
from price_scout.scrapers.base_scraper import BaseScraper
from price_scout.scrapers.json_path import as_float, dig


class EbayScraper(BaseScraper):
    """Price adapter for eBay via the Finding API.

    Unlike the HTML sources this one needs an application id
    (``EBAY_APP_ID``). The Finding API wraps every value in a
    single-element list, so each path step below indexes ``[0]``.
    """

    API_URL = (
        "https://svcs.ebay.com/services/search/FindingService/v1"
    )
    CURRENCY = "USD"
    REQUIRED_CREDENTIAL = "EBAY_APP_ID"
    DEFAULT_SUMMARY = MarketSummary(
        min=10, max=50, avg=25, count=15, currency="USD"
    )
    NOTES = FallbackNotes(
        access_failed=(
            "eBayへのアクセスに失敗しました。"
            "ダミーデータを表示しています。"
        ),
        no_data="eBayで商品が見つかりませんでした。",
        prices_unavailable="価格情報を取得できませんでした。",
        credential_missing=(
            "eBay APIキーが設定されていません。"
            "ダミーデータを表示しています。"
        ),
    )

    def __init__(self) -> None:
        super().__init__("ebay")

    def _get_homepage(self) -> str:
        """Return the eBay homepage URL."""
        return "https://www.ebay.com/"

    def _build_params(self, query: str) -> dict[str, str]:
        """Build Finding API query parameters for *query*."""
        return {
            "OPERATION-NAME": "findItemsByKeywords",
            "SERVICE-VERSION": "1.0.0",
            "SECURITY-APPNAME": self.settings.EBAY_APP_ID,
            "RESPONSE-DATA-FORMAT": "JSON",
            "REST-PAYLOAD": "",
            "keywords": query,
            "paginationInput.entriesPerPage": str(
                self.settings.EBAY_ENTRIES_PER_PAGE
            ),
            "sortOrder": "PricePlusShippingLowest",
        }

    @staticmethod
    def _parse_item(item: Any) -> float | None:
        """Return the current price of one item, if present."""
        raw = dig(
            item, "sellingStatus", 0, "currentPrice", 0, "__value__"
        )
        return as_float(raw)

    def _parse_prices(self, text: str) -> PriceSample:
        """Extract positive USD prices from a Finding API payload.

        Raises :class:`PricesUnavailable` when the payload lists items
        but none of them has a positive price.
        """
        try:
            data: Any = json.loads(text)
        except ValueError:
            self.logger.warning(
                "[ebay] Response is not valid JSON (%d bytes)",
                len(text),
            )
            return []

        items = dig(
            data,
            "findItemsByKeywordsResponse", 0,
            "searchResult", 0,
            "item",
        )
        if not isinstance(items, list):
            return []

        prices: PriceSample = []
        for item in items:
            price = self._parse_item(item)
            if price is not None and price > 0:
                prices.append(PriceObservation(price, self.CURRENCY))
        if items and not prices:
            raise PricesUnavailable(self.source_name, len(items))
        return prices

    def fetch_prices(self, query: str) -> PriceSample:
        """Query the Finding API and return current prices in USD."""
        self.check_credentials()
        headers = {
            "Accept": "application/json",
            "User-Agent": self.settings.USER_AGENT,
        }
        resp = self._fetch_get(
            self.API_URL, headers, params=self._build_params(query)
        )
        prices = self._parse_prices(resp.text)
        self.logger.info(
            "[ebay] %d prices for '%s'", len(prices), query
        )
        return prices
