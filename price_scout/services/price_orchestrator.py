# price_scout/services/price_orchestrator.py

"""Orchestrates concurrent price discovery across marketplaces."""

import asyncio
import importlib
import logging
from typing import Any

from price_scout.config.settings import Settings
from price_scout.models.errors import InvalidRequest
from price_scout.models.listing import ProductIdentification
from price_scout.models.market import (
    AggregateResult,
    MarketSummary,
    PriceSample,
)
from price_scout.services.fallback_policy import FallbackPolicy

logger = logging.getLogger("price_scout.orchestrator")

UNKNOWN_PRODUCT_NAME = "商品名不明"


def _load_scraper_class(dotted_path: str) -> type[Any]:
    """Dynamically import a scraper class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


class PriceOrchestrator:
    """Fans one query out to every configured marketplace adapter.

    Each adapter runs in a worker thread under its own timeout. A
    failing or slow adapter only affects its own summary; the result
    always holds one summary per configured source, in registry order.
    """

    def __init__(
        self,
        sources: list[dict[str, str]] | None = None,
        timeout: float | None = None,
    ) -> None:
        self.settings = Settings()
        self.sources = (
            sources
            if sources is not None
            else self.settings.AVAILABLE_SOURCES
        )
        self.timeout = (
            timeout
            if timeout is not None
            else self.settings.ADAPTER_TIMEOUT
        )

    # ── Private helpers ──────────────────────────────────

    async def _invoke(
        self,
        scraper_cls: type[Any],
        query: str,
    ) -> PriceSample:
        """Run one adapter; exceptions are returned by the caller's gather."""
        scraper = scraper_cls()
        # Before any network call
        scraper.check_credentials()
        sample: PriceSample = await asyncio.wait_for(
            asyncio.to_thread(scraper.fetch_prices, query),
            timeout=self.timeout,
        )
        return sample

    async def _run_scrapers(
        self,
        query: str,
    ) -> dict[str, MarketSummary]:
        """Dispatch adapters concurrently and resolve each outcome."""
        classes = [
            _load_scraper_class(src["scraper"])
            for src in self.sources
        ]
        outcomes = await asyncio.gather(
            *(self._invoke(cls, query) for cls in classes),
            return_exceptions=True,
        )

        summaries: dict[str, MarketSummary] = {}
        for src, cls, outcome in zip(self.sources, classes, outcomes):
            summaries[src["id"]] = FallbackPolicy.resolve(
                outcome,
                cls.DEFAULT_SUMMARY,
                cls.NOTES,
                source=src["id"],
            )
        return summaries

    # ── Public API ───────────────────────────────────────

    async def aggregate(
        self,
        query: str,
        product_name: str | None = None,
    ) -> AggregateResult:
        """Summarise marketplace prices for *query*.

        Raises:
            InvalidRequest: When *query* is blank.
        """
        query = query.strip()
        if not query:
            raise InvalidRequest(
                "検索キーワードが指定されていません", code="empty_query"
            )

        logger.info(
            "Aggregating '%s' across %d sources",
            query,
            len(self.sources),
        )
        summaries = await self._run_scrapers(query)
        noted = [sid for sid, s in summaries.items() if s.note]
        if noted:
            logger.info(
                "Placeholders used for '%s': %s",
                query,
                ", ".join(noted),
            )
        return AggregateResult(
            product_name=product_name or query,
            summaries=summaries,
        )

    async def appraise_image(
        self,
        image_bytes: bytes,
        mime_type: str,
        classifier: Any = None,
    ) -> tuple[ProductIdentification, AggregateResult]:
        """Identify the photographed item, then aggregate its prices."""
        if classifier is None:
            from price_scout.services.image_classifier import (
                ImageClassifier,
            )

            classifier = ImageClassifier()

        identification: ProductIdentification = await asyncio.to_thread(
            classifier.classify, image_bytes, mime_type
        )
        result = await self.aggregate(
            identification.search_query,
            product_name=(
                identification.product_name.strip()
                or UNKNOWN_PRODUCT_NAME
            ),
        )
        return identification, result
