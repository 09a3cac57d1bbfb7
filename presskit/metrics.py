"""
Market metric table and shared ranking/formatting helpers.

Every section builder formats numbers through METRICS so the decimals for a
metric live in exactly one place.
"""

from dataclasses import dataclass, fields
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional


@dataclass(frozen=True)
class Metric:
    key: str          # camelCase name used by the JSON API
    field: str        # column / attribute name
    slug: str         # /api/rankings?metric=<slug>
    label: str        # "Gross Yield"
    phrase: str       # "gross yield" (article copy)
    kind: str         # percentage / currency / count
    decimals: int = 0

    @property
    def rank_field(self) -> str:
        return f"{self.field}_rank"

    @property
    def rank_key(self) -> str:
        return f"{self.key}Rank"


METRICS = (
    Metric("grossYield", "gross_yield", "gross-yield", "Gross Yield", "gross yield", "percentage", 2),
    Metric("totalRevenue", "total_revenue", "total-revenue", "Total Revenue", "total Airbnb revenue", "currency", 0),
    Metric("totalListings", "total_listings", "total-listings", "Total Listings", "total listings", "count", 0),
    Metric("revenuePerListing", "revenue_per_listing", "revenue-per-listing", "Revenue Per Listing",
           "revenue per listing", "currency", 0),
    Metric("occupancy", "occupancy", "occupancy", "Occupancy", "occupancy", "percentage", 1),
    Metric("nightlyRate", "nightly_rate", "nightly-rate", "Nightly Rate", "average nightly rate", "currency", 2),
)

METRICS_BY_KEY = {m.key: m for m in METRICS}
METRICS_BY_SLUG = {m.slug: m for m in METRICS}


@dataclass
class MarketRecord:
    """One market's statistics. Any value or rank may be missing."""
    city: str
    state: Optional[str] = None
    gross_yield: Optional[float] = None
    gross_yield_rank: Optional[int] = None
    total_revenue: Optional[float] = None
    total_revenue_rank: Optional[int] = None
    total_listings: Optional[int] = None
    total_listings_rank: Optional[int] = None
    revenue_per_listing: Optional[float] = None
    revenue_per_listing_rank: Optional[int] = None
    occupancy: Optional[float] = None
    occupancy_rank: Optional[int] = None
    nightly_rate: Optional[float] = None
    nightly_rate_rank: Optional[int] = None

    @classmethod
    def from_row(cls, row) -> "MarketRecord":
        """Copy the matching attributes off an ORM row (or any object)."""
        return cls(**{f.name: getattr(row, f.name, None) for f in fields(cls)})


@dataclass
class AverageStatistics:
    gross_yield: Optional[float] = None
    total_revenue: Optional[float] = None
    total_listings: Optional[float] = None
    revenue_per_listing: Optional[float] = None
    occupancy: Optional[float] = None
    nightly_rate: Optional[float] = None

    @classmethod
    def from_records(cls, records: Iterable) -> "AverageStatistics":
        rows = list(records)
        averages = {}
        for metric in METRICS:
            values = [getattr(r, metric.field, None) for r in rows]
            values = [v for v in values if v is not None]
            averages[metric.field] = sum(values) / len(values) if values else None
        return cls(**averages)

    def get(self, metric_field: str) -> Optional[float]:
        return getattr(self, metric_field, None)

    def to_dict(self) -> dict:
        return {m.key: self.get(m.field) for m in METRICS}


@dataclass
class RankingEntry:
    label: str
    rank: int
    value: Optional[float]
    metric_key: str

    @property
    def metric(self) -> Metric:
        return METRICS_BY_KEY[self.metric_key]


# ---------------------------------------------------------------------------
# Rankings
# ---------------------------------------------------------------------------

def collect_rankings(record, label_attr: str = "label",
                     order: Iterable[Metric] = METRICS) -> List[RankingEntry]:
    """Ranked metrics of a record, best (lowest) rank first.

    sorted() is stable, so equal ranks keep the given metric order.
    """
    entries = []
    for metric in order:
        rank = getattr(record, metric.rank_field, None)
        if rank is None:
            continue
        entries.append(RankingEntry(
            label=getattr(metric, label_attr),
            rank=rank,
            value=getattr(record, metric.field, None),
            metric_key=metric.key,
        ))
    return sorted(entries, key=lambda e: e.rank)


def within(rankings: List[RankingEntry], limit: int) -> List[RankingEntry]:
    return [r for r in rankings if r.rank <= limit]


def market_name(record) -> str:
    state = getattr(record, "state", None)
    return f"{record.city}, {state}" if state else record.city


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

_SUFFIXES = ("th", "st", "nd", "rd")


def ordinal_suffix(n: int) -> str:
    v = n % 100
    # (v - 20) % 10 is only an index when v >= 20; below that it would be negative
    if v >= 20 and (v - 20) % 10 < len(_SUFFIXES):
        return _SUFFIXES[(v - 20) % 10]
    if v < len(_SUFFIXES):
        return _SUFFIXES[v]
    return _SUFFIXES[0]


def ordinal(n: int) -> str:
    return f"{n}{ordinal_suffix(n)}"


def round_half_up(value: float, decimals: int = 0) -> Decimal:
    """Halves round away from zero (72.25 -> 72.3), not to even."""
    return Decimal(value).quantize(Decimal(10) ** -decimals, rounding=ROUND_HALF_UP)


def fmt_currency(value: float, decimals: int = 0) -> str:
    return f"${round_half_up(value, decimals):,.{decimals}f}"


def fmt_pct(value: float, decimals: int = 1) -> str:
    return f"{round_half_up(value, decimals):.{decimals}f}%"


def fmt_count(value: float) -> str:
    return f"{round_half_up(value):,.0f}"


def format_metric(metric_key: str, value: Optional[float]) -> Optional[str]:
    """Render a metric value per METRICS. None stays None."""
    if value is None:
        return None
    metric = METRICS_BY_KEY[metric_key]
    if metric.kind == "percentage":
        return fmt_pct(value, metric.decimals)
    if metric.kind == "currency":
        return fmt_currency(value, metric.decimals)
    return fmt_count(value)


def compare_to_average(value: Optional[float], average: Optional[float]) -> Optional[str]:
    """'above' / 'below', or None when there is nothing to compare against."""
    if value is None or not average:
        return None
    return "above" if value > average else "below"


def above_average_pct(value: Optional[float], average: Optional[float]) -> Optional[str]:
    if value is None or not average:
        return None
    pct = (value - average) / average * 100
    return f"{round_half_up(pct):.0f}%"
