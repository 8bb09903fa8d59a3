# price_scout/services/health_checker.py

"""Reachability checks for every configured marketplace."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

from price_scout.config.settings import Settings
from price_scout.models.errors import ConfigurationMissing, FetchError
from price_scout.services.price_orchestrator import _load_scraper_class

logger = logging.getLogger("price_scout.health")

SLOW_THRESHOLD_MS = 5000.0


@dataclass(frozen=True)
class HealthResult:
    """Outcome of probing one marketplace."""

    source_id: str
    status: str  # "ok", "slow", "down", "unconfigured"
    latency_ms: float
    message: str = ""


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


def check_source(source: dict[str, str]) -> HealthResult:
    """Reach *source*'s homepage through its own adapter.

    The request goes through the adapter's retrying fetch with its
    session and challenge detection, so "ok" here means the aggregator
    can get through as well.
    """
    source_id = source["id"]
    try:
        scraper: Any = _load_scraper_class(source["scraper"])()
        scraper.check_credentials()
    except ConfigurationMissing as exc:
        return HealthResult(
            source_id,
            "unconfigured",
            0.0,
            f"{exc.setting} not set, placeholder data in use",
        )
    except Exception as exc:
        logger.error(
            "[%s] Adapter failed to load: %s", source_id, exc,
            exc_info=True,
        )
        return HealthResult(
            source_id, "down", 0.0, f"Adapter failed to load: {exc}"
        )

    homepage = scraper._get_homepage()
    headers = {**scraper.settings.DEFAULT_HEADERS, "Referer": homepage}
    started = time.perf_counter()
    try:
        scraper._fetch_get(homepage, headers)
    except FetchError as exc:
        detail = (
            f"HTTP {exc.status_code}" if exc.status_code else exc.reason
        )
        return HealthResult(
            source_id, "down", _elapsed_ms(started), detail[:80]
        )

    latency = _elapsed_ms(started)
    if latency > SLOW_THRESHOLD_MS:
        return HealthResult(source_id, "slow", latency, "High latency")
    return HealthResult(source_id, "ok", latency)


class HealthChecker:
    """Checks every registered marketplace concurrently."""

    def __init__(
        self, sources: list[dict[str, str]] | None = None,
    ) -> None:
        self.sources = (
            sources if sources is not None else Settings.AVAILABLE_SOURCES
        )

    async def check_all(self) -> list[HealthResult]:
        """Return one :class:`HealthResult` per source, in registry order."""
        results: list[HealthResult] = list(
            await asyncio.gather(
                *(
                    asyncio.to_thread(check_source, src)
                    for src in self.sources
                )
            )
        )
        for r in results:
            logger.log(
                logging.INFO if r.status == "ok" else logging.WARNING,
                "Health %s: %s (%.0fms) %s",
                r.source_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
