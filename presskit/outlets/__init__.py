import logging
from dataclasses import dataclass, field
from typing import List

from . import search
from .base import BaseOutletFinder, DiscoveredOutlet, get_domain
from .brokerages import BrokerageFinder
from .local_news import LocalNewsFinder
from .publications import PublicationFinder

logger = logging.getLogger(__name__)

OUTLET_TYPES = ("local_news", "real_estate_publication", "realtor_blog")

FINDERS = {
    "News": LocalNewsFinder,
    "RE pub": PublicationFinder,
    "Broker": BrokerageFinder,
}

MISSING_KEY_ERROR = "SERPER_API_KEY not set. Get a free key at serper.dev and add it to the environment."


@dataclass
class DiscoveryResult:
    outlets: List[DiscoveredOutlet] = field(default_factory=list)
    searches_used: int = 0
    errors: List[str] = field(default_factory=list)


def discover_outlets_for_market(market: str) -> DiscoveryResult:
    """Run every finder; one failing finder does not stop the others."""
    if not search.has_api_key():
        return DiscoveryResult(errors=[MISSING_KEY_ERROR])

    result = DiscoveryResult(searches_used=len(FINDERS))
    found: List[DiscoveredOutlet] = []
    for name, finder_cls in FINDERS.items():
        try:
            found.extend(finder_cls().discover(market))
        except Exception as e:
            logger.warning("[crawl] %s finder failed for %s: %s", name, market, str(e)[:200])
            result.errors.append(f"{name} error: {e}")

    seen = set()
    for outlet in found:
        domain = get_domain(outlet.url)
        if domain in seen:
            continue
        seen.add(domain)
        result.outlets.append(outlet)
    return result


__all__ = ["BaseOutletFinder", "DiscoveredOutlet", "LocalNewsFinder", "PublicationFinder",
           "BrokerageFinder", "FINDERS", "OUTLET_TYPES", "DiscoveryResult",
           "discover_outlets_for_market"]
