"""
Manual discovery aids: search queries per outlet type plus a few
well-known outlets that exist in most markets. No network access.
"""

from typing import Iterable, List, Optional
from urllib.parse import quote

SEARCH_TEMPLATES = {
    "local_news": [
        "{market} local news",
        "{market} newspaper",
        "{market} TV news station",
        "{market} news outlet",
        "{market} daily news",
        "{market} business journal",
        "{market} patch.com",
    ],
    "real_estate_publication": [
        "{market} real estate news",
        "{market} real estate magazine",
        "{market} real estate publication",
        "{market} housing market news",
        "{market} commercial real estate news",
        "{market} real estate journal",
    ],
    "realtor_blog": [
        "{market} real estate blog",
        "{market} realtor blog",
        "{market} real estate agent blog",
        "{market} brokerage blog",
        "{market} realty blog",
        "{market} best real estate agents",
    ],
}


def google_search_url(query: str) -> str:
    return "https://www.google.com/search?q=" + quote(query, safe="-_.!~*'()")


def build_search_links(market: str, types: Optional[Iterable[str]] = None) -> List[dict]:
    """Unknown types are ignored; no types means all of them."""
    types = list(types or []) or list(SEARCH_TEMPLATES)
    links = []
    for outlet_type in types:
        for template in SEARCH_TEMPLATES.get(outlet_type, []):
            query = template.format(market=market)
            links.append({"query": query, "type": outlet_type, "googleUrl": google_search_url(query)})
    return links


def well_known_suggestions(market: str) -> List[dict]:
    return [
        {"name": f"{market} Patch", "url": "https://patch.com",
         "type": "local_news", "description": "Hyperlocal news"},
        {"name": f"{market} Business Journal", "url": "https://www.bizjournals.com",
         "type": "local_news", "description": "Local business news"},
        {"name": f"Redfin {market} Blog", "url": "https://www.redfin.com/blog",
         "type": "realtor_blog", "description": "Redfin real estate blog"},
        {"name": f"Zillow {market}", "url": "https://www.zillow.com",
         "type": "real_estate_publication", "description": "Real estate listings and market data"},
        {"name": f"Realtor.com {market}", "url": "https://www.realtor.com",
         "type": "real_estate_publication", "description": "Real estate listings and news"},
    ]
