"""
Local news finder.
Newsroom tip lines beat general contact addresses; the outlet's Facebook
about page is checked before settling for any address on the site.
"""

from typing import Optional, Tuple

from .base import (
    BaseOutletFinder, SiteCrawl, email_from_facebook, find_contact_email, find_tip_email,
)


class LocalNewsFinder(BaseOutletFinder):
    outlet_type = "local_news"
    query_template = "Local News in {market}"

    def pick_email(self, site: SiteCrawl) -> Tuple[Optional[str], Optional[str]]:
        email = find_tip_email(site.emails)
        if email:
            return email, "tip/news submission"
        email = find_contact_email(site.emails)
        if email:
            return email, "contact page"
        fb_link = next((l for l in site.social_links if "facebook.com" in l), None)
        if fb_link:
            email = email_from_facebook(fb_link)
            if email:
                return email, "Facebook about page"
        if site.emails:
            return site.emails[0], "site crawl"
        return None, None

    def build_outlet(self, result, homepage, site):
        outlet = super().build_outlet(result, homepage, site)
        outlet.social_links = site.social_links[:4]
        return outlet
