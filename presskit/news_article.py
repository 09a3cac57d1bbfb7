"""
News article generator.
Three prose structures for the same market data, picked by variant % 3.
Sections are built independently and joined with a blank line.
"""

from datetime import date
from typing import List, Optional

from .brand import BRAND_DESC, BRAND_LINK
from .metrics import (
    METRICS_BY_KEY, AverageStatistics, RankingEntry, above_average_pct, collect_rankings,
    compare_to_average, format_metric, market_name, ordinal, within,
)

SECTION_SEPARATOR = "\n\n"
VARIANT_COUNT = 3

# order of the variant 2 data summary
DATA_DUMP = (
    ("totalRevenue", "total_revenue", "Total short-term rental revenue"),
    ("grossYield", "gross_yield", "Gross yield"),
    ("occupancy", "occupancy", "Average occupancy"),
    ("nightlyRate", "nightly_rate", "Average nightly rate"),
    ("revenuePerListing", "revenue_per_listing", "Revenue per listing"),
    ("totalListings", "total_listings", "Active listings"),
)

# tie order for equal ranks; listings come last in article copy
RANKING_ORDER = tuple(METRICS_BY_KEY[k] for k in (
    "grossYield", "totalRevenue", "revenuePerListing", "occupancy", "nightlyRate", "totalListings",
))


def generate_news_article(record, averages: Optional[AverageStatistics] = None,
                          total_markets: int = 0, variant: int = 0,
                          year: Optional[int] = None) -> str:
    averages = averages or AverageStatistics()
    year = year or date.today().year
    rankings = collect_rankings(record, label_attr="phrase", order=RANKING_ORDER)

    if not rankings:
        headline, lead, body = _unranked(record, year)
    else:
        builder = _VARIANTS[variant % VARIANT_COUNT]
        headline, lead, body = builder(record, averages, rankings, total_markets, year)

    sections = [f"<h1>{headline}</h1>", lead] + [s for s in body if s]
    return SECTION_SEPARATOR.join(sections)


# ===========================================================================
# Variant 0: lead with the best ranking
# ===========================================================================

def _variant_lead_ranking(record, averages, rankings, total_markets, year):
    city = record.city
    market = market_name(record)
    best = rankings[0]
    top25 = within(rankings, 25)
    top50 = within(rankings, 50)

    if best.rank <= 10:
        scope = f"{total_markets:,} U.S. markets" if total_markets else "hundreds of U.S. metros"
        headline = f"{city} Is Now a Top-10 Airbnb Market in America: Here's What That Means for Local Real Estate"
        lead = (
            f"{market} has landed the {ordinal(best.rank)} spot nationally for {best.label} among short-term "
            f"rental markets, according to new data from {BRAND_DESC} that tracks performance across {scope}. "
            f"The number puts {city} ahead of the vast majority of markets and raises fresh questions about "
            f"what's driving demand in the area, and what it means for homeowners, investors, and the broader "
            f"real estate picture."
        )
    elif best.rank <= 25:
        headline = f"{city} Quietly Became One of America's Hottest Short-Term Rental Markets"
        lead = (
            f"New data out of {BRAND_DESC}'s {year} market rankings places {market} at No. {best.rank} nationally "
            f"for {best.label}, putting it firmly in the top tier of short-term rental markets across the country. "
            f"For a metro that doesn't always make national real estate headlines, the ranking is worth a closer look."
        )
    elif best.rank <= 50:
        headline = f"The Surprising Airbnb Data That Shows {city}'s Real Estate Market Is Stronger Than You Think"
        lead = (
            f"{market} may not be the first city that comes to mind when people talk about booming Airbnb markets, "
            f"but data from {BRAND_DESC} tells an interesting story. The metro ranks {ordinal(best.rank)} nationally "
            f"in {best.label}, and when you dig into the rest of the numbers, a picture starts to form of a market "
            f"with real momentum."
        )
    else:
        headline = f"What {city}'s Short-Term Rental Boom Tells Us About the Future of Its Housing Market"
        lead = (
            f"Every housing market has a story to tell, and {market}'s short-term rental data offers a window into "
            f"what's happening on the ground. {BRAND_DESC}'s {year} rankings place the metro at "
            f"{ordinal(best.rank)} for {best.label}, but the full picture is more nuanced than any single number "
            f"suggests."
        )

    body = [
        build_revenue_yield_comparison(record, averages),
        build_why_it_matters(city, top25, top50),
        build_occupancy_rate(record, averages),
        build_revenue_per_listing(record, averages),
        build_bigger_picture(record, year),
    ]
    return headline, lead, body


def build_revenue_yield_comparison(record, averages: AverageStatistics) -> str:
    revenue, gross_yield = record.total_revenue, record.gross_yield
    if revenue is None or gross_yield is None:
        return ""
    avg_revenue = averages.get("total_revenue")
    avg_yield = averages.get("gross_yield")

    s = f"The local Airbnb market generated {format_metric('totalRevenue', revenue)} in total revenue, "
    revenue_vs = compare_to_average(revenue, avg_revenue)
    if revenue_vs == "above":
        s += f"which runs about {above_average_pct(revenue, avg_revenue)} above the national average. "
    elif revenue_vs == "below":
        s += "tracking near the national average for metros of its size. "
    else:
        s += "a figure that anchors the rest of the market's numbers. "

    s += "Gross yield, essentially the return an investor can expect relative to property prices, "
    yield_vs = compare_to_average(gross_yield, avg_yield)
    if yield_vs == "above":
        s += (
            f"comes in at {format_metric('grossYield', gross_yield)}, beating the national average of "
            f"{format_metric('grossYield', avg_yield)}. That's a meaningful gap, and it's the kind of number "
            f"that gets investors' attention."
        )
    elif yield_vs == "below":
        s += (
            f"sits at {format_metric('grossYield', gross_yield)} compared to a "
            f"{format_metric('grossYield', avg_yield)} national average. It's a competitive number, even if it "
            f"doesn't blow the doors off."
        )
    else:
        s += f"comes in at {format_metric('grossYield', gross_yield)}."
    return s


# ===========================================================================
# Variant 1: real estate angle
# ===========================================================================

def _variant_real_estate(record, averages, rankings, total_markets, year):
    city = record.city
    market = market_name(record)
    best = rankings[0]

    if best.rank <= 25:
        headline = f"{city}'s Airbnb Boom Is Reshaping the Local Real Estate Landscape"
        lead = (
            f"Real estate investors have been watching {market} closely, and the latest short-term rental data "
            f"gives them plenty to talk about. According to {BRAND_DESC}, the {city} metro ranks "
            f"{ordinal(best.rank)} in the nation for {best.label}. That number reflects more than just vacation "
            f"rental performance. It speaks to the underlying strength of the local property market itself."
        )
    elif best.rank <= 50:
        headline = f"Behind the Numbers: Why {city}'s Short-Term Rental Surge Matters for Every Homeowner"
        lead = (
            f"There's a reason real estate analysts pay attention to short-term rental numbers, and {market}'s "
            f"latest figures from {BRAND_DESC} are a case in point. Ranking {ordinal(best.rank)} nationally for "
            f"{best.label}, the metro's performance offers a useful lens into what's happening in the broader "
            f"housing market."
        )
    else:
        headline = f"The Hidden Signal in {city}'s Housing Market That Investors Are Watching Closely"
        lead = (
            f"Short-term rental data has become one of the more reliable barometers for local real estate health, "
            f"and {market}'s numbers, tracked by {BRAND_DESC}, paint a nuanced picture. The metro sits at "
            f"{ordinal(best.rank)} nationally for {best.label}, with additional data points that round out the story."
        )

    context = (
        f"The connection between short-term rental performance and housing market strength isn't coincidental. "
        f"Markets that attract visitors tend to attract investment. Property values get bolstered by "
        f"income-producing potential, and local economies benefit from the spending that comes with tourism. "
        f"That's the backdrop against which {city}'s numbers start to make sense."
    )

    body = [
        context,
        _real_estate_occupancy(record, averages),
        _real_estate_revenue_yield(record, averages),
        build_revenue_per_listing(record, averages),
        build_bigger_picture(record, year),
    ]
    return headline, lead, body


def _real_estate_occupancy(record, averages: AverageStatistics) -> str:
    occupancy, rate = record.occupancy, record.nightly_rate
    if occupancy is None or rate is None:
        return ""
    s = (
        f"Properties in {record.city} average a {format_metric('occupancy', occupancy)} occupancy rate with a "
        f"nightly rate of {format_metric('nightlyRate', rate)}. "
    )
    occ_vs = compare_to_average(occupancy, averages.get("occupancy"))
    rate_vs = compare_to_average(rate, averages.get("nightly_rate"))
    if occ_vs == "above" and rate_vs == "above":
        s += (
            "Both sit above the national average, a combination that's harder to pull off than it sounds. "
            "High rates usually push occupancy down. When a market holds both up, it means people genuinely "
            "want to be there and are willing to pay for it."
        )
    elif occ_vs == "above":
        s += (
            "The occupancy stands out: visitors are booking consistently, and that kind of demand doesn't appear "
            "out of nowhere. It reflects a metro that people actively choose as a destination."
        )
    elif rate_vs == "above":
        s += (
            f"The rate is what catches the eye. Guests are paying above-average prices to stay in {record.city}, "
            f"which suggests perceived value in the area as a destination."
        )
    elif occ_vs or rate_vs:
        s += (
            "Neither leads the country, but together they sketch a picture of steady, reliable demand, the kind "
            "of thing long-term investors tend to prefer over flashy spikes."
        )
    return s.rstrip()


def _real_estate_revenue_yield(record, averages: AverageStatistics) -> str:
    revenue, gross_yield = record.total_revenue, record.gross_yield
    if revenue is None or gross_yield is None:
        return ""
    avg_revenue = averages.get("total_revenue")
    avg_yield = averages.get("gross_yield")

    s = (
        f"The aggregate numbers add context. Total Airbnb revenue in the market hit "
        f"{format_metric('totalRevenue', revenue)}"
    )
    revenue_vs = compare_to_average(revenue, avg_revenue)
    if revenue_vs == "above":
        s += f", about {above_average_pct(revenue, avg_revenue)} above the national average. "
    elif revenue_vs == "below":
        s += ", near the national average. "
    else:
        s += ". "

    s += f"Gross yield sits at {format_metric('grossYield', gross_yield)}"
    yield_vs = compare_to_average(gross_yield, avg_yield)
    if yield_vs == "above":
        s += (
            f", clearing the {format_metric('grossYield', avg_yield)} national benchmark, a meaningful edge for "
            f"property investors."
        )
    elif yield_vs == "below":
        s += f", compared to a {format_metric('grossYield', avg_yield)} national average."
    else:
        s += "."
    return s


# ===========================================================================
# Variant 2: investment / data angle
# ===========================================================================

def _variant_investment(record, averages, rankings, total_markets, year):
    city = record.city
    market = market_name(record)
    best = rankings[0]
    second = rankings[1] if len(rankings) > 1 else None
    top25 = within(rankings, 25)
    top50 = within(rankings, 50)

    if best.rank <= 25:
        second_clause = f" and {ordinal(second.rank)} for {second.label}" if second else ""
        headline = f"{city} Climbs the National Rankings, and the Data Backs Up the Hype"
        lead = (
            f"Investors hunting for the next strong Airbnb market might want to look at {market}. Data published "
            f"by {BRAND_DESC} ranks the metro {ordinal(best.rank)} in the country for {best.label}{second_clause}, "
            f"figures that position it as one of the more compelling opportunities in the current landscape."
        )
    elif best.rank <= 50:
        headline = f"Why Smart Money Is Paying Attention to {city}'s Short-Term Rental Numbers"
        lead = (
            f"For anyone trying to gauge the health of {city}'s real estate market, the latest short-term rental "
            f"data from {BRAND_DESC} offers a useful snapshot. At {ordinal(best.rank)} nationally for {best.label}, "
            f"the metro isn't leading the pack, but the details under the surface are more interesting than the "
            f"headline number."
        )
    else:
        headline = f"Overlooked No More: The Data That Puts {city} on the Real Estate Investment Map"
        lead = (
            f"Data from {BRAND_DESC} reveals where {market} stands among the nation's short-term rental markets in "
            f"{year}. The metro's {ordinal(best.rank)} ranking for {best.label} is a starting point, but the more "
            f"telling story lives in the combination of metrics that define what's actually happening on the ground."
        )

    body = [
        build_data_summary(record, rankings),
        build_deep_dive(record, averages),
        build_why_it_matters(city, top25, top50),
        build_bigger_picture(record, year),
    ]
    return headline, lead, body


def _present_values(record) -> str:
    parts = []
    for metric_key, field, label in DATA_DUMP:
        value = getattr(record, field, None)
        if value is not None:
            parts.append(f"{label}: {format_metric(metric_key, value)}.")
    return " ".join(parts)


def build_data_summary(record, rankings: List[RankingEntry]) -> str:
    s = "Here's what the numbers look like."
    values = _present_values(record)
    if values:
        s += " " + values
    s += (
        f" Each of those has a national ranking attached, and {record.city}'s range from "
        f"{ordinal(rankings[0].rank)} to {ordinal(rankings[-1].rank)}, a spread that tells you this isn't a "
        f"one-trick market."
    )
    return s


def build_deep_dive(record, averages: AverageStatistics) -> str:
    gross_yield = record.gross_yield
    avg_yield = averages.get("gross_yield")
    if compare_to_average(gross_yield, avg_yield) == "above":
        return (
            f"The gross yield figure, {format_metric('grossYield', gross_yield)} against a "
            f"{format_metric('grossYield', avg_yield)} national average, is the one most likely to catch an "
            f"investor's eye. Yield is what separates a property that cash-flows from one that just sits there "
            f"appreciating on paper. In {record.city}'s case, the number suggests real income potential relative "
            f"to purchase prices."
        )

    per_listing = record.revenue_per_listing
    avg_per_listing = averages.get("revenue_per_listing")
    if compare_to_average(per_listing, avg_per_listing) == "above":
        return (
            f"The per-listing revenue of {format_metric('revenuePerListing', per_listing)} stands out. It's "
            f"{above_average_pct(per_listing, avg_per_listing)} above the national average, which means individual "
            f"properties in {record.city} are outearning their counterparts in most other metros. For a "
            f"single-property investor, that's the number that matters."
        )
    return ""


# ===========================================================================
# No ranked metrics yet
# ===========================================================================

def _unranked(record, year):
    city = record.city
    headline = f"What {city}'s Short-Term Rental Data Says About Its Housing Market"
    lead = (
        f"{BRAND_DESC} has started tracking {market_name(record)} as part of its {year} short-term rental market "
        f"data. National rankings for the metro have not been published yet, but the early figures are a useful "
        f"first look at local demand."
    )
    values = _present_values(record)
    body = [
        f"Here's what the numbers look like. {values}" if values else "",
        build_bigger_picture(record, year),
    ]
    return headline, lead, body


_VARIANTS = (_variant_lead_ranking, _variant_real_estate, _variant_investment)


# ===========================================================================
# Shared section builders
# ===========================================================================

def build_why_it_matters(city_name: str, top25: List[RankingEntry], top50: List[RankingEntry]) -> str:
    s = (
        "<strong>Why This Matters for the Local Real Estate Market</strong>\n\n"
        "Short-term rental performance isn't just an Airbnb story. It's a proxy for how attractive an area is to "
        "visitors, how strong local demand is, and ultimately, how healthy the housing market is. "
    )
    if len(top25) >= 2:
        s += (
            f"When a market ranks in the top 25 across {len(top25)} different metrics, as {city_name} does, it "
            f"tells you something broader: people want to be here. They're booking stays, they're paying "
            f"competitive rates, and the supply of listings hasn't outpaced demand. That kind of balance is exactly "
            f"what real estate economists look for when assessing market health."
        )
    elif len(top50) >= 2:
        s += (
            f"A market that performs in the top 50 across multiple categories ({city_name} does so in "
            f"{len(top50)}) tends to have the fundamentals working in its favor. Demand is solid, pricing holds up, "
            f"and there's enough economic activity to support continued growth without the overheating you see in "
            f"some flashier markets."
        )
    else:
        s += (
            "Even in markets that aren't grabbing national headlines, steady short-term rental numbers often signal "
            "underlying stability: the kind of demand that doesn't evaporate when interest rates shift or a new "
            "development breaks ground down the street."
        )
    return s


def build_occupancy_rate(record, averages: AverageStatistics) -> str:
    occupancy, rate = record.occupancy, record.nightly_rate
    if occupancy is None or rate is None:
        return ""

    s = (
        f"Look at the numbers another way: {record.city} properties average a "
        f"{format_metric('occupancy', occupancy)} occupancy rate"
    )
    if record.occupancy_rank is not None and record.occupancy_rank <= 50:
        s += f" ({ordinal(record.occupancy_rank)} nationally)"
    s += f" with a nightly rate of {format_metric('nightlyRate', rate)}"
    if record.nightly_rate_rank is not None and record.nightly_rate_rank <= 50:
        s += f" ({ordinal(record.nightly_rate_rank)} nationally)"
    s += ". "

    occ_vs = compare_to_average(occupancy, averages.get("occupancy"))
    rate_vs = compare_to_average(rate, averages.get("nightly_rate"))
    if occ_vs == "above" and rate_vs == "above":
        s += (
            f"Both numbers sit above the national average, which is unusual. Typically, markets trade off between "
            f"high rates and high occupancy. The fact that {record.city} manages both suggests the area has real "
            f"pricing power without scaring off bookings."
        )
    elif occ_vs == "above":
        s += (
            "The occupancy figure stands out especially. Properties are getting booked consistently, which reduces "
            "risk for anyone holding short-term rental inventory and signals sustained visitor interest in the area."
        )
    elif rate_vs == "above":
        s += (
            f"The nightly rate is the eye-catcher here. Guests are willing to pay a premium for {record.city} "
            f"stays, which speaks to the perceived value of the area as a destination."
        )
    elif occ_vs or rate_vs:
        s += (
            "While neither number leads the pack nationally, the combination tells a story of a stable, workhorse "
            "market where operators can count on predictable demand."
        )
    return s.rstrip()


def build_revenue_per_listing(record, averages: AverageStatistics) -> str:
    per_listing = record.revenue_per_listing
    if per_listing is None:
        return ""

    s = f"For individual hosts, the per-listing revenue of {format_metric('revenuePerListing', per_listing)} "
    avg_per_listing = averages.get("revenue_per_listing")
    if compare_to_average(per_listing, avg_per_listing) == "above":
        s += f"({above_average_pct(per_listing, avg_per_listing)} above the national average) "
    s += (
        "is the metric that arguably matters most. It's one thing for a market to post big aggregate numbers; that "
        "can just mean there are a lot of listings. Per-listing revenue strips that noise away and shows what an "
        "individual property actually earns. "
    )
    rank = record.revenue_per_listing_rank
    if rank is not None and rank <= 30:
        s += f"{record.city}'s {ordinal(rank)} ranking here is a strong signal for anyone thinking about entering the market."
    else:
        s += (
            f"In {record.city}'s case, the figure suggests a healthy market where well-managed properties can "
            f"generate solid returns."
        )
    return s


def build_bigger_picture(record, year: int) -> str:
    city = record.city
    s = "<strong>The Bigger Picture</strong>\n\n"
    if record.total_listings is not None:
        s += (
            f"With {format_metric('totalListings', record.total_listings)} active short-term rental listings in "
            f"the metro, {city} has a supply base that reflects genuine market maturity, not a speculative bubble. "
        )
    s += (
        "Strong short-term rental performance tends to correlate with broader housing market health for a few "
        "reasons. It signals that an area attracts visitors (tourism dollars flow into local businesses), that "
        "property values are supported by income-producing potential, and that the local economy generates enough "
        "activity to keep beds filled year-round.\n\n"
        "None of that happens in a vacuum. Infrastructure, job growth, quality of life, and accessibility all feed "
        f"into these numbers. When a market like {city} shows up in {BRAND_LINK}'s rankings, it's reflecting all "
        "of those forces at once.\n\n"
        "Whether you're a homeowner curious about your property's potential, an investor scouting new markets, or "
        f"a local official trying to understand the economic footprint of short-term rentals, the {year} data from "
        f"{city} is worth paying attention to. The rankings don't tell the whole story (they never do), but they "
        "point in a direction that's hard to ignore."
    )
    return s
