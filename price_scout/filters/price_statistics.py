# price_scout/filters/price_statistics.py

"""Reduce a price sample to min/max/average/count."""

from decimal import ROUND_HALF_UP, Decimal

from price_scout.models.market import MarketSummary, PriceSample

# Currencies shown with minor units (cents); everything else is
# summarised in whole units.
MINOR_UNIT_CURRENCIES: frozenset[str] = frozenset({"USD"})

_CENTS = Decimal("0.01")
_WHOLE = Decimal("1")


def round_half_up(value: float, exponent: Decimal) -> Decimal:
    """Round like a shop till does: halves always go up."""
    return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)


def _as_whole(amount: float) -> float:
    """Render integral amounts as ints so JSON shows ``1280``, not ``1280.0``."""
    return int(amount) if float(amount).is_integer() else amount


class PriceStatistics:
    """Summary statistics with per-currency rounding rules.

    USD averages keep two decimals, JPY averages are whole yen. The two
    rules differ on purpose and are part of the wire contract.
    """

    @staticmethod
    def summarize(
        sample: PriceSample,
        currency: str,
        empty: MarketSummary | None = None,
    ) -> MarketSummary:
        """Reduce *sample* to a :class:`MarketSummary`.

        An empty sample yields *empty* (the source's documented
        placeholder) or an all-zero summary when none is given.
        """
        if not sample:
            if empty is not None:
                return empty
            return MarketSummary(
                min=0, max=0, avg=0, count=0, currency=currency
            )

        amounts = [o.amount for o in sample]
        mean = sum(amounts) / len(amounts)

        if currency in MINOR_UNIT_CURRENCIES:
            return MarketSummary(
                min=float(round_half_up(min(amounts), _CENTS)),
                max=float(round_half_up(max(amounts), _CENTS)),
                avg=float(round_half_up(mean, _CENTS)),
                count=len(amounts),
                currency=currency,
            )

        return MarketSummary(
            min=_as_whole(min(amounts)),
            max=_as_whole(max(amounts)),
            avg=int(round_half_up(mean, _WHOLE)),
            count=len(amounts),
            currency=currency,
        )
