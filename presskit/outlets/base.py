"""
Outlet finder base class and site crawling helpers.
Every finder returns the same output schema (DiscoveredOutlet).
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import urlsplit

import requests
from bs4 import BeautifulSoup

from . import search

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}")
EMAIL_NOISE = (
    "noreply", "no-reply", "donotreply", "unsubscribe", "privacy",
    "example.com", "sentry.io", "wixpress.com", "cloudflare", "wordpress",
    "googleapis", "gravatar", "schema.org", "w3.org",
    ".png", ".jpg", ".gif", ".svg", ".css", ".js", ".woff",
)
TIP_PREFIXES = (
    "tips", "tip", "newstip", "newstips", "news", "submit",
    "editor", "editorial", "newsroom", "newsdesk", "desk",
    "assignment", "breaking", "reports", "story", "stories",
)
CONTACT_PREFIXES = (
    "contact", "info", "hello", "press", "media", "feedback",
    "inquiries", "inquiry", "general", "admin", "support",
)
BLOG_PREFIXES = (
    "blog", "content", "marketing", "editor", "editorial",
    "media", "press", "info", "contact", "hello",
)
SOCIAL_RES = (
    re.compile(r"https?://(?:www\.)?facebook\.com/[a-zA-Z0-9._\-/]+"),
    re.compile(r"https?://(?:www\.)?twitter\.com/[a-zA-Z0-9._\-/]+"),
    re.compile(r"https?://(?:www\.)?instagram\.com/[a-zA-Z0-9._\-/]+"),
    re.compile(r"https?://(?:www\.)?linkedin\.com/[a-zA-Z0-9._\-/]+"),
)
BLOG_PATHS = (
    "/blog", "/news", "/articles", "/insights", "/resources",
    "/market-updates", "/market-report", "/housing-market",
)
BLOG_NAV_TEXT = (">blog<", ">news<", ">articles<", ">market updates<")
CONTACT_PATH_RE = re.compile(r"contact|about|tip|submit|newsroom|feedback", re.I)
SUBPAGES = ("/contact", "/contact-us", "/about", "/about-us", "/submit-a-tip", "/tips", "/newstips")
MAX_SUBPAGES = 5
NAME_SUFFIX_RE = re.compile(
    r"\s*[-|:].*(News|Home|Official Site|Homepage|Local News|Breaking News|Latest News|Weather|Traffic|Sports).*$",
    re.I,
)


@dataclass
class DiscoveredOutlet:
    name: str
    url: str
    type: str
    email: Optional[str] = None
    description: Optional[str] = None
    has_blog: bool = False
    social_links: List[str] = field(default_factory=list)
    email_source: Optional[str] = None

    def to_dict(self) -> dict:
        out = {
            "name": self.name, "url": self.url, "email": self.email,
            "type": self.type, "description": self.description,
        }
        if self.has_blog:
            out["hasBlog"] = True
        if self.social_links:
            out["socialLinks"] = self.social_links
        if self.email_source:
            out["emailSource"] = self.email_source
        return out


@dataclass
class SiteCrawl:
    emails: List[str] = field(default_factory=list)
    social_links: List[str] = field(default_factory=list)
    has_blog: bool = False


# ===========================================================================
# HTML helpers
# ===========================================================================

def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def extract_emails(html: str) -> List[str]:
    emails = [e for e in EMAIL_RE.findall(html or "")
              if not any(p in e.lower() for p in EMAIL_NOISE)]
    return _unique(emails)


def _pick_by_prefix(emails: List[str], prefixes) -> Optional[str]:
    for prefix in prefixes:
        for email in emails:
            if email.lower().startswith(prefix):
                return email
    return None


def find_tip_email(emails: List[str]) -> Optional[str]:
    return _pick_by_prefix(emails, TIP_PREFIXES)


def find_contact_email(emails: List[str]) -> Optional[str]:
    return _pick_by_prefix(emails, CONTACT_PREFIXES)


def find_blog_email(emails: List[str]) -> Optional[str]:
    return _pick_by_prefix(emails, BLOG_PREFIXES)


def extract_social_links(html: str) -> List[str]:
    links = []
    for pattern in SOCIAL_RES:
        for match in pattern.findall(html or ""):
            clean = match.rstrip("/").split("#")[0].split("?")[0]
            if any(s in clean for s in ("/sharer", "/share", "/intent")):
                continue
            if clean not in links:
                links.append(clean)
    return links


def site_has_blog(html: str, url: str) -> bool:
    lower = (html or "").lower()
    for path in BLOG_PATHS:
        if f'href="{path}' in lower or f'href="{url.lower()}{path}' in lower:
            return True
    return any(text in lower for text in BLOG_NAV_TEXT)


def find_contact_paths(html: str, limit: int = 3) -> List[str]:
    """Site-relative links that look like contact/about/tip pages."""
    soup = BeautifulSoup(html or "", "html.parser")
    paths = []
    for a in soup.find_all("a", href=True):
        href = a["href"].strip()
        if href.startswith("/") and not href.startswith("//") and CONTACT_PATH_RE.search(href):
            if href not in paths:
                paths.append(href)
        if len(paths) >= limit:
            break
    return paths


def get_domain(url: str) -> str:
    host = urlsplit(url).hostname
    return host.replace("www.", "") if host else url


def get_homepage(url: str) -> str:
    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        return url
    return f"{parts.scheme}://{parts.hostname}"


def clean_name(title: str) -> str:
    name = NAME_SUFFIX_RE.sub("", title or "")
    name = re.sub(r"\s*[-|:]\s*$", "", name).strip()
    if len(name) > 60:
        m = re.search(r"\s[-|:]\s", name)
        if m and m.start() > 10:
            name = name[:m.start()].strip()
    return name or title


# ===========================================================================
# Fetching
# ===========================================================================

def fetch_page(url: str, timeout: float = 8) -> Optional[str]:
    """HTML body of url, or None for errors, non-2xx and non-HTML responses."""
    try:
        response = requests.get(url, headers={"User-Agent": USER_AGENT},
                                timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        logger.debug("[crawl] fetch failed %s: %s", url[:80], str(e)[:120])
        return None
    if not response.ok:
        return None
    if "text/html" not in response.headers.get("content-type", ""):
        return None
    return response.text


def crawl_site(base_url: str) -> SiteCrawl:
    """Homepage plus a handful of contact/about/tip pages."""
    emails: List[str] = []
    social: List[str] = []
    has_blog = False
    subpages = [f"{base_url}{p}" for p in SUBPAGES]

    homepage = fetch_page(base_url)
    if homepage:
        emails.extend(extract_emails(homepage))
        social.extend(extract_social_links(homepage))
        has_blog = site_has_blog(homepage, base_url)
        # links found on the homepage are tried before the guessed paths
        linked = [f"{base_url}{p}" for p in find_contact_paths(homepage)]
        subpages = _unique(linked + subpages)

    for page_url in subpages[:MAX_SUBPAGES]:
        html = fetch_page(page_url, timeout=5)
        if html:
            emails.extend(extract_emails(html))

    return SiteCrawl(emails=_unique(emails), social_links=_unique(social), has_blog=has_blog)


def email_from_facebook(fb_url: str) -> Optional[str]:
    about_url = fb_url.rstrip("/")
    if "/about" not in about_url:
        about_url += "/about"
    html = fetch_page(about_url, timeout=5)
    if not html:
        return None
    emails = extract_emails(html)
    return emails[0] if emails else None


# ===========================================================================
# Finder base
# ===========================================================================

class BaseOutletFinder(ABC):
    """Search -> crawl each result's site -> pick the best contact email."""

    outlet_type: str = ""
    query_template: str = ""
    max_results: int = 8

    def build_query(self, market: str) -> str:
        return self.query_template.format(market=market)

    def accept(self, site: SiteCrawl) -> bool:
        return True

    @abstractmethod
    def pick_email(self, site: SiteCrawl) -> Tuple[Optional[str], Optional[str]]:
        """(email, where it came from), or (None, None)."""
        ...

    def build_outlet(self, result: search.SearchResult, homepage: str,
                     site: SiteCrawl) -> DiscoveredOutlet:
        email, source = self.pick_email(site)
        return DiscoveredOutlet(
            name=clean_name(result.title),
            url=homepage,
            email=email,
            type=self.outlet_type,
            description=result.snippet[:200] or None,
            email_source=source,
        )

    def discover(self, market: str) -> List[DiscoveredOutlet]:
        results = search.search_google(self.build_query(market), 10)
        outlets: List[DiscoveredOutlet] = []
        seen = set()
        for result in results[:self.max_results]:
            domain = get_domain(result.url)
            if domain in seen:
                continue
            seen.add(domain)

            homepage = get_homepage(result.url)
            site = crawl_site(homepage)
            if not self.accept(site):
                continue
            outlets.append(self.build_outlet(result, homepage, site))

        logger.info("[crawl][%s] market=%s found=%s", self.outlet_type, market, len(outlets))
        return outlets


def first_email(site: SiteCrawl, *pickers) -> Tuple[Optional[str], Optional[str]]:
    """Try (picker, label) pairs in order, then fall back to the first email seen."""
    for picker, label in pickers:
        email = picker(site.emails)
        if email:
            return email, label
    if site.emails:
        return site.emails[0], "site crawl"
    return None, None
