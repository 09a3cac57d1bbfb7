"""
Press release generator.
Ranked city statistics -> a press release assembled from independent sections.
"""

from datetime import date
from typing import List, Optional

from .brand import BRAND_NAME, MEDIA_CONTACT_EMAIL
from .metrics import (
    RankingEntry, collect_rankings, format_metric, market_name, ordinal, within,
)

TOP_TIER = 25
SECTION_SEPARATOR = "\n\n"

OUTLOOK_FACTORS = (
    "Strong demand fundamentals driven by tourism and business travel",
    "Favorable regulatory environment supporting short-term rentals",
    "Growing recognition of {city} as a premier destination",
    "Infrastructure improvements enhancing accessibility",
    "Diverse accommodation options meeting various traveler preferences",
)


def generate_press_release(record, year: Optional[int] = None) -> str:
    year = year or date.today().year
    rankings = collect_rankings(record)
    if not rankings:
        return build_fallback(record)

    headline = rankings[0]
    top_tier = within(rankings, TOP_TIER)
    strong = [r for r in top_tier if r is not headline]
    other = [r for r in rankings if r.rank > TOP_TIER]

    sections = [
        "FOR IMMEDIATE RELEASE",
        build_title(record, headline),
        build_opening(record, headline, year),
        build_performance_overview(record, headline, strong),
        build_regional_dynamics(record),
        build_detailed_metrics(record, top_tier, other),
        build_strengths(record),
        build_outlook(record),
        build_about(),
    ]
    return SECTION_SEPARATOR.join(s for s in sections if s)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def build_fallback(record) -> str:
    market = market_name(record)
    return SECTION_SEPARATOR.join([
        "FOR IMMEDIATE RELEASE",
        f"<strong>{market} Short-Term Rental Market Data</strong>",
        f"Market data is available for {market}. National rankings for this market have not been published yet.",
        _contact_block(),
    ])


def build_title(record, headline: RankingEntry) -> str:
    return (
        f"<strong>{market_name(record)} Ranks {ordinal(headline.rank)} Nationally for "
        f"{headline.label} Among U.S. Short-Term Rental Markets</strong>"
    )


def build_opening(record, headline: RankingEntry, year: int) -> str:
    rank = headline.rank
    if rank <= 10:
        standing = "placing it among the ten strongest short-term rental markets in the country"
    elif rank <= TOP_TIER:
        standing = "placing it firmly in the national top 25"
    elif rank <= 50:
        standing = "placing it in the top 50 markets nationwide"
    else:
        standing = "adding it to the growing list of markets tracked nationally"

    value = format_metric(headline.metric_key, headline.value)
    value_clause = f" with a figure of {value}" if value else ""
    return (
        f"{market_name(record)} ({year}) - New data from {BRAND_NAME} ranks {record.city} "
        f"{ordinal(rank)} in the nation for {headline.label.lower()}{value_clause}, {standing}. "
        f"The results position {record.city} as a market to watch for Airbnb investors and hosts heading into 2026."
    )


def build_performance_overview(record, headline: RankingEntry, strong: List[RankingEntry]) -> str:
    text = (
        f"<strong>Market Performance Overview</strong>\n\n"
        f"{record.city}'s {ordinal(headline.rank)} place finish for {headline.label.lower()} "
        f"leads the market's results. "
    )
    mentions = [f"{ordinal(r.rank)} for {r.label.lower()}" for r in strong[:2]]
    if mentions:
        text += (
            f"The market also ranks {' and '.join(mentions)}, showing strength that reaches "
            f"beyond a single metric."
        )
    else:
        text += "It stands out as the market's clearest competitive advantage in the current rankings."
    return text


def build_regional_dynamics(record) -> str:
    text = "<strong>Regional Market Dynamics</strong>\n\n"
    revenue = record.total_revenue
    revenue_rank = record.total_revenue_rank
    if revenue is not None and revenue_rank is not None and revenue_rank <= TOP_TIER:
        text += (
            f"Short-term rentals in {record.city} generated {format_metric('totalRevenue', revenue)} "
            f"in total revenue, ranking {ordinal(revenue_rank)} nationally"
        )
        if record.total_listings is not None:
            text += (
                f" across {format_metric('totalListings', record.total_listings)} active listings"
            )
        text += ". "
    text += (
        f"Visitor demand, local economic activity and housing supply all shape how "
        f"{record.city} performs relative to other U.S. markets."
    )
    return text


def _bullet(entry: RankingEntry) -> str:
    value = format_metric(entry.metric_key, entry.value)
    if value:
        return f"- {entry.label}: {value} ({ordinal(entry.rank)} nationally)"
    return f"- {entry.label}: ranked {ordinal(entry.rank)} nationally"


def build_detailed_metrics(record, top_tier: List[RankingEntry], other: List[RankingEntry]) -> str:
    text = "<strong>Detailed Performance Metrics</strong>\n\n"
    if top_tier:
        text += "\n".join(_bullet(r) for r in top_tier)
    else:
        text += f"None of {record.city}'s tracked metrics currently rank inside the national top 25."
    if other:
        text += "\n\n<strong>Additional Rankings</strong>\n\n"
        text += "\n".join(_bullet(r) for r in other)
    return text


def build_strengths(record) -> str:
    sentences = []
    if record.occupancy is not None and record.occupancy_rank is not None \
            and record.occupancy_rank <= TOP_TIER:
        sentences.append(
            f"An occupancy rate of {format_metric('occupancy', record.occupancy)} "
            f"({ordinal(record.occupancy_rank)} nationally) reflects consistent demand throughout the year."
        )
    if record.gross_yield is not None and record.gross_yield_rank is not None \
            and record.gross_yield_rank <= TOP_TIER:
        sentences.append(
            f"A Gross Yield of {format_metric('grossYield', record.gross_yield)} "
            f"({ordinal(record.gross_yield_rank)} nationally) indicates healthy returns for property investors."
        )
    if record.nightly_rate is not None:
        sentences.append(
            f"The average nightly rate of {format_metric('nightlyRate', record.nightly_rate)} positions "
            f"{record.city} as an attractive destination for travelers seeking quality accommodations."
        )
    sentences.append(
        f"Tourism, business travel and a steady supply of quality listings continue to support "
        f"{record.city}'s short-term rental market."
    )
    return "<strong>Market Strengths and Contributing Factors</strong>\n\n" + " ".join(sentences)


def build_outlook(record) -> str:
    bullets = "\n".join(f"- {f.format(city=record.city)}" for f in OUTLOOK_FACTORS)
    return (
        f"<strong>2026 Outlook</strong>\n\n"
        f"Industry trends suggest that {record.city}'s short-term rental market is well-positioned "
        f"for continued growth in 2026. Factors contributing to this positive outlook include:\n\n"
        f"{bullets}"
    )


def build_about() -> str:
    return (
        f"<strong>About {BRAND_NAME}</strong>\n\n"
        f"{BRAND_NAME} provides comprehensive market analysis and data insights for short-term "
        f"rental markets, helping investors and hosts make informed decisions.\n\n"
        + _contact_block()
    )


def _contact_block() -> str:
    return f"###\nContact: {BRAND_NAME} Media Relations\nEmail: {MEDIA_CONTACT_EMAIL}"
