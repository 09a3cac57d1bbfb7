"""
Brokerage finder. Only brokerages that run a blog are worth pitching.
"""

from .base import BaseOutletFinder, find_blog_email, find_contact_email, first_email


class BrokerageFinder(BaseOutletFinder):
    outlet_type = "realtor_blog"
    query_template = "Real Estate Brokers in {market}"

    def accept(self, site):
        return site.has_blog

    def pick_email(self, site):
        return first_email(site, (find_blog_email, "blog/content"), (find_contact_email, "contact page"))

    def build_outlet(self, result, homepage, site):
        outlet = super().build_outlet(result, homepage, site)
        outlet.has_blog = True
        return outlet
