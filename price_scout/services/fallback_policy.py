# price_scout/services/fallback_policy.py

"""Turn one adapter outcome into a summary, substituting placeholders."""

import asyncio
import logging

from price_scout.filters.price_statistics import PriceStatistics
from price_scout.filters.price_validator import PriceValidator
from price_scout.models.errors import (
    ConfigurationMissing,
    FetchError,
    PricesUnavailable,
)
from price_scout.models.market import (
    FallbackNotes,
    MarketSummary,
    PriceSample,
)

logger = logging.getLogger("price_scout.fallback")

AdapterOutcome = PriceSample | BaseException


class FallbackPolicy:
    """Decide between real statistics and a documented placeholder.

    Outcomes map as follows:

    - ``ConfigurationMissing``: placeholder + credential note
    - ``FetchError`` / timeout / cancellation: placeholder +
      access-failed note
    - ``PricesUnavailable``: placeholder + prices-unavailable note,
      falling back to the no-data note
    - any other exception (unparseable content): placeholder + no-data note
    - sample with no usable price: placeholder + no-data note
    - sample with usable prices: reduced statistics, no note
    """

    @staticmethod
    def resolve(
        outcome: AdapterOutcome,
        defaults: MarketSummary,
        notes: FallbackNotes,
        source: str = "",
    ) -> MarketSummary:
        """Return the summary to publish for one source."""
        if isinstance(outcome, ConfigurationMissing):
            logger.warning(
                "[%s] %s, using placeholder", source, outcome
            )
            return defaults.with_note(
                notes.credential_missing or str(outcome)
            )

        if isinstance(
            outcome,
            (
                FetchError,
                asyncio.TimeoutError,
                TimeoutError,
                asyncio.CancelledError,
            ),
        ):
            logger.warning(
                "[%s] Access failed (%s), using placeholder",
                source,
                str(outcome) or type(outcome).__name__,
            )
            return defaults.with_note(notes.access_failed)

        if isinstance(outcome, PricesUnavailable):
            logger.warning(
                "[%s] %s, using placeholder", source, outcome
            )
            return defaults.with_note(
                notes.prices_unavailable or notes.no_data
            )

        if isinstance(outcome, BaseException):
            logger.error(
                "[%s] Unreadable response, using placeholder: %s",
                source,
                outcome,
                exc_info=outcome,
            )
            return defaults.with_note(notes.no_data)

        valid, _ = PriceValidator.validate(outcome, defaults.currency)
        if not valid:
            logger.warning(
                "[%s] No usable prices, using placeholder", source
            )
        return PriceStatistics.summarize(
            valid,
            defaults.currency,
            empty=defaults.with_note(notes.no_data),
        )
