"""
Open Graph metadata for past press links.
Failures never raise: the article is still saved as "Untitled".
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
TIMEOUT_SEC = 10

_TITLE_KEYS = ("og:title", "twitter:title", "dc.title")
_IMAGE_KEYS = ("og:image", "og:image:url", "twitter:image", "twitter:image:src")
_DESCRIPTION_KEYS = ("og:description", "twitter:description", "dc.description")


@dataclass
class OGData:
    title: str = "Untitled"
    og_image: Optional[str] = None
    description: Optional[str] = None


def _meta_lookup(soup: BeautifulSoup) -> dict:
    found = {}
    for tag in soup.find_all("meta"):
        key = (tag.get("property") or tag.get("name") or "").strip().lower()
        content = (tag.get("content") or "").strip()
        if key and content and key not in found:
            found[key] = content
    return found


def _first(found: dict, keys) -> Optional[str]:
    for key in keys:
        if found.get(key):
            return found[key]
    return None


def parse_og_html(html: str) -> OGData:
    found = _meta_lookup(BeautifulSoup(html, "html.parser"))
    return OGData(
        title=_first(found, _TITLE_KEYS) or "Untitled",
        og_image=_first(found, _IMAGE_KEYS),
        description=_first(found, _DESCRIPTION_KEYS),
    )


def extract_og_data(url: str) -> OGData:
    try:
        response = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=TIMEOUT_SEC)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning("OG scrape failed %s: %s", url[:80], str(e)[:200])
        return OGData()
    return parse_og_html(response.text)
