"""Unit tests: outlet discovery helpers and finders (network monkeypatched)"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from presskit import outlets
from presskit.outlets import base, local_news, queries, search
from presskit.outlets.base import (
    SiteCrawl, clean_name, extract_emails, extract_social_links, find_contact_email,
    find_contact_paths, find_tip_email, get_domain, get_homepage, site_has_blog,
)
from presskit.outlets.brokerages import BrokerageFinder
from presskit.outlets.local_news import LocalNewsFinder
from presskit.outlets.publications import PublicationFinder
from presskit.outlets.search import SearchResult, filter_results


# ---------------------------------------------------------------------------
# HTML helpers
# ---------------------------------------------------------------------------

def test_extract_emails_filters_noise():
    html = "Send tips to tips@kxan.com or noreply@kxan.com. <img src='logo@2x.png'> tips@kxan.com"
    assert extract_emails(html) == ["tips@kxan.com"]


def test_email_preference_by_prefix():
    emails = ["sales@station.com", "hello@station.com", "newsdesk@station.com"]
    assert find_tip_email(emails) == "newsdesk@station.com"
    assert find_contact_email(emails) == "hello@station.com"
    assert find_tip_email(["sales@station.com"]) is None


def test_extract_social_links():
    html = (
        '<a href="https://www.facebook.com/kxan/?ref=page">fb</a>'
        '<a href="https://facebook.com/sharer/sharer.php?u=1">share</a>'
        '<a href="https://twitter.com/kxan">tw</a>'
    )
    assert extract_social_links(html) == ["https://www.facebook.com/kxan", "https://twitter.com/kxan"]


def test_site_has_blog():
    assert site_has_blog('<a href="/blog/latest">Read</a>', "https://realty.com")
    assert site_has_blog("<nav><a>Blog</a></nav>", "https://realty.com")
    assert not site_has_blog('<a href="/listings">Homes</a>', "https://realty.com")


def test_find_contact_paths():
    html = (
        '<a href="/contact-us">Contact</a>'
        '<a href="//cdn.example.com/contact">cdn</a>'
        '<a href="/shop">Shop</a>'
        '<a href="/about">About</a>'
    )
    assert find_contact_paths(html) == ["/contact-us", "/about"]


def test_domain_and_homepage():
    assert get_domain("https://www.kxan.com/news/story") == "kxan.com"
    assert get_homepage("https://www.kxan.com/news/story?x=1") == "https://www.kxan.com"


def test_clean_name():
    assert clean_name("KXAN Austin - Breaking News, Weather") == "KXAN Austin"
    assert clean_name("Austin Monthly") == "Austin Monthly"


def test_filter_results_skips_portals():
    organic = [
        {"title": "Zillow", "link": "https://www.zillow.com/austin", "snippet": ""},
        {"title": "KXAN", "link": "https://www.kxan.com/", "snippet": "Austin news"},
        {"title": "bad", "link": "ftp://example.com"},
    ]
    assert filter_results(organic) == [SearchResult("KXAN", "https://www.kxan.com/", "Austin news")]


# ---------------------------------------------------------------------------
# Crawling
# ---------------------------------------------------------------------------

def test_crawl_site_tries_linked_contact_pages_first(monkeypatch):
    site = "https://realty-demo.test"
    pages = {
        site: (
            '<a href="/staff-contact">Reach us</a><a href="/blog">Blog</a> '
            "info@realty-demo.test template@example.com"
        ),
        f"{site}/staff-contact": "blog@realty-demo.test",
    }
    visited = []

    def fake_fetch(url, timeout=8):
        visited.append(url)
        return pages.get(url)

    monkeypatch.setattr(base, "fetch_page", fake_fetch)
    crawl = base.crawl_site(site)

    assert visited[0] == site
    assert visited[1] == f"{site}/staff-contact"
    assert len(visited) == 1 + base.MAX_SUBPAGES
    assert crawl.emails == ["info@realty-demo.test", "blog@realty-demo.test"]
    assert "template@example.com" not in crawl.emails
    assert crawl.has_blog


def test_crawl_site_unreachable_homepage(monkeypatch):
    monkeypatch.setattr(base, "fetch_page", lambda url, timeout=8: None)
    crawl = base.crawl_site("https://down.example.com")
    assert crawl == SiteCrawl()


# ---------------------------------------------------------------------------
# Finders
# ---------------------------------------------------------------------------

def _fake_search(results):
    def fake(query, num=10):
        fake.queries.append(query)
        return results
    fake.queries = []
    return fake


def test_local_news_prefers_tip_email(monkeypatch):
    fake = _fake_search([
        SearchResult("KXAN Austin - Breaking News", "https://www.kxan.com/news", "Austin's news leader"),
        SearchResult("KXAN again", "https://kxan.com/weather", ""),
    ])
    monkeypatch.setattr(search, "search_google", fake)
    monkeypatch.setattr(base, "crawl_site", lambda url: SiteCrawl(
        emails=["info@kxan.com", "tips@kxan.com"],
        social_links=["https://facebook.com/kxan", "https://twitter.com/kxan"],
    ))

    found = LocalNewsFinder().discover("Austin, TX")
    assert fake.queries == ["Local News in Austin, TX"]
    assert len(found) == 1
    outlet = found[0]
    assert outlet.name == "KXAN Austin"
    assert outlet.url == "https://www.kxan.com"
    assert outlet.email == "tips@kxan.com"
    assert outlet.email_source == "tip/news submission"
    assert outlet.social_links == ["https://facebook.com/kxan", "https://twitter.com/kxan"]
    assert outlet.to_dict()["emailSource"] == "tip/news submission"


def test_local_news_falls_back_to_facebook(monkeypatch):
    monkeypatch.setattr(search, "search_google", _fake_search([
        SearchResult("Hill Country Times", "https://hct.example.com/", ""),
    ]))
    monkeypatch.setattr(base, "crawl_site", lambda url: SiteCrawl(
        emails=[], social_links=["https://facebook.com/hct"],
    ))
    monkeypatch.setattr(local_news, "email_from_facebook", lambda url: "editor@hct.example.com")

    outlet = LocalNewsFinder().discover("Austin, TX")[0]
    assert outlet.email == "editor@hct.example.com"
    assert outlet.email_source == "Facebook about page"
    assert outlet.description is None


def test_publication_uses_first_email_when_no_preferred(monkeypatch):
    monkeypatch.setattr(search, "search_google", _fake_search([
        SearchResult("Austin Real Estate Journal", "https://arej.example.com/", "Property news"),
    ]))
    monkeypatch.setattr(base, "crawl_site", lambda url: SiteCrawl(emails=["sales@arej.example.com"]))

    outlet = PublicationFinder().discover("Austin, TX")[0]
    assert outlet.type == "real_estate_publication"
    assert outlet.email == "sales@arej.example.com"
    assert outlet.email_source == "site crawl"


def test_brokerages_without_blog_are_dropped(monkeypatch):
    monkeypatch.setattr(search, "search_google", _fake_search([
        SearchResult("Blog Realty", "https://blogrealty.example.com/", ""),
        SearchResult("Plain Realty", "https://plainrealty.example.com/", ""),
    ]))
    crawls = {
        "https://blogrealty.example.com": SiteCrawl(
            emails=["contact@blogrealty.example.com", "blog@blogrealty.example.com"], has_blog=True),
        "https://plainrealty.example.com": SiteCrawl(emails=["info@plainrealty.example.com"]),
    }
    monkeypatch.setattr(base, "crawl_site", lambda url: crawls[url])

    found = BrokerageFinder().discover("Austin, TX")
    assert [o.name for o in found] == ["Blog Realty"]
    assert found[0].email == "blog@blogrealty.example.com"
    assert found[0].email_source == "blog/content"
    assert found[0].to_dict()["hasBlog"] is True


# ---------------------------------------------------------------------------
# Market discovery
# ---------------------------------------------------------------------------

def test_discovery_without_api_key(monkeypatch):
    monkeypatch.setattr(search, "SERPER_API_KEY", "")
    result = outlets.discover_outlets_for_market("Austin, TX")
    assert result.outlets == []
    assert result.searches_used == 0
    assert result.errors == [outlets.MISSING_KEY_ERROR]


def test_discovery_dedupes_and_survives_failing_finder(monkeypatch):
    monkeypatch.setattr(search, "SERPER_API_KEY", "test-key")

    class Failing(PublicationFinder):
        def discover(self, market):
            raise RuntimeError("quota exceeded")

    class Shared(LocalNewsFinder):
        def discover(self, market):
            return [base.DiscoveredOutlet(name="KXAN", url="https://www.kxan.com", type=self.outlet_type)]

    monkeypatch.setattr(outlets, "FINDERS", {"News": Shared, "RE pub": Failing, "Broker": Shared})
    result = outlets.discover_outlets_for_market("Austin, TX")

    assert [o.name for o in result.outlets] == ["KXAN"]
    assert result.searches_used == 3
    assert result.errors == ["RE pub error: quota exceeded"]


def test_search_links_and_suggestions():
    links = queries.build_search_links("Austin, TX", ["realtor_blog", "unknown"])
    assert len(links) == len(queries.SEARCH_TEMPLATES["realtor_blog"])
    assert links[0] == {
        "query": "Austin, TX real estate blog",
        "type": "realtor_blog",
        "googleUrl": "https://www.google.com/search?q=Austin%2C%20TX%20real%20estate%20blog",
    }
    all_links = queries.build_search_links("Austin, TX")
    assert len(all_links) == sum(len(t) for t in queries.SEARCH_TEMPLATES.values())
    assert queries.well_known_suggestions("Austin, TX")[0]["name"] == "Austin, TX Patch"
