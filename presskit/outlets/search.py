"""
Google results through the Serper.dev API.
"""

import logging
import os
from dataclasses import dataclass
from typing import List

import requests
from dotenv import load_dotenv

load_dotenv()
logger = logging.getLogger(__name__)

SERPER_API_KEY = os.getenv("SERPER_API_KEY", "")
SERPER_URL = "https://google.serper.dev/search"
SEARCH_TIMEOUT_SEC = 15

SKIP_DOMAINS = (
    "google.com", "bing.com", "yahoo.com", "duckduckgo.com",
    "facebook.com", "twitter.com", "x.com", "instagram.com", "youtube.com",
    "linkedin.com", "pinterest.com", "reddit.com", "tiktok.com",
    "wikipedia.org", "yelp.com", "amazon.com", "zillow.com",
    "realtor.com", "redfin.com", "trulia.com", "apartments.com",
    "bbb.org", "mapquest.com", "yellowpages.com", "whitepages.com",
)


@dataclass
class SearchResult:
    title: str
    url: str
    snippet: str = ""


def has_api_key() -> bool:
    return bool(SERPER_API_KEY)


def filter_results(organic: List[dict]) -> List[SearchResult]:
    results = []
    for item in organic:
        url = item.get("link") or ""
        if not url.startswith("http"):
            continue
        if any(d in url for d in SKIP_DOMAINS):
            continue
        results.append(SearchResult(
            title=item.get("title") or "",
            url=url,
            snippet=item.get("snippet") or "",
        ))
    return results


def search_google(query: str, num: int = 10) -> List[SearchResult]:
    """Organic results minus social networks and listing portals. [] on any failure."""
    if not SERPER_API_KEY:
        return []
    try:
        response = requests.post(
            SERPER_URL,
            headers={"X-API-KEY": SERPER_API_KEY, "Content-Type": "application/json"},
            json={"q": query, "num": num},
            timeout=SEARCH_TIMEOUT_SEC,
        )
    except requests.RequestException as e:
        logger.warning("[crawl] serper request failed (%s): %s", query, str(e)[:200])
        return []
    if not response.ok:
        logger.warning("[crawl] serper error %s for %s", response.status_code, query)
        return []
    return filter_results(response.json().get("organic") or [])
