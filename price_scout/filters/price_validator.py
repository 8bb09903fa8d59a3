# price_scout/filters/price_validator.py

"""Price validation: drop unusable observations before reduction."""

import logging
import math

from price_scout.models.market import PriceSample

logger = logging.getLogger("price_scout.filters")


class PriceValidator:
    """Validate observations and drop those that cannot be prices."""

    @staticmethod
    def validate(
        sample: PriceSample,
        currency: str | None = None,
    ) -> tuple[PriceSample, int]:
        """Drop zero, negative, non-finite and wrong-currency prices.

        Returns the valid observations and the count of dropped items.
        """
        valid: PriceSample = []
        dropped = 0

        for observation in sample:
            if not math.isfinite(observation.amount):
                dropped += 1
                continue
            if observation.amount <= 0:
                logger.debug(
                    "Dropped non-positive price %s %s",
                    observation.amount,
                    observation.currency,
                )
                dropped += 1
                continue
            if currency and observation.currency != currency:
                logger.debug(
                    "Dropped %s price in a %s sample",
                    observation.currency,
                    currency,
                )
                dropped += 1
                continue
            valid.append(observation)

        if dropped:
            logger.info(
                "Validation dropped %d invalid prices",
                dropped,
            )

        return valid, dropped
