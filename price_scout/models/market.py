# price_scout/models/market.py

"""Price data models shared by adapters, reducer and orchestrator."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class PriceObservation:
    """A single observed price in a known currency."""

    amount: float
    currency: str


PriceSample = list[PriceObservation]


@dataclass(frozen=True)
class MarketSummary:
    """Reduced view of a price sample, or a documented placeholder.

    ``note`` is only ever set by the fallback policy; a summary without a
    note was computed from real observations.
    """

    min: float
    max: float
    avg: float
    count: int
    currency: str
    note: str | None = None

    def with_note(self, note: str) -> "MarketSummary":
        """Return a copy of this summary carrying *note*."""
        return replace(self, note=note)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire shape; ``note`` is omitted when unset."""
        data: dict[str, Any] = {
            "min": self.min,
            "max": self.max,
            "avg": self.avg,
            "count": self.count,
            "currency": self.currency,
        }
        if self.note is not None:
            data["note"] = self.note
        return data


@dataclass(frozen=True)
class FallbackNotes:
    """User-facing explanations attached to placeholder summaries."""

    access_failed: str
    no_data: str
    credential_missing: str = ""
    prices_unavailable: str = ""


@dataclass(frozen=True)
class AggregateResult:
    """Joint price summary for one query across every configured source.

    ``summaries`` is stored as a read-only view over a private copy, so
    neither the caller's dict nor the result can be changed afterwards.
    """

    product_name: str
    summaries: Mapping[str, MarketSummary] = field(
        default_factory=lambda: dict[str, MarketSummary]()
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "summaries", MappingProxyType(dict(self.summaries))
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to ``{productName, <source>: summary, ...}``."""
        data: dict[str, Any] = {"productName": self.product_name}
        for source_id, summary in self.summaries.items():
            data[source_id] = summary.to_dict()
        return data
