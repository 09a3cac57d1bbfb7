"""
Real estate publication finder.
"""

from .base import BaseOutletFinder, find_contact_email, find_tip_email, first_email


class PublicationFinder(BaseOutletFinder):
    outlet_type = "real_estate_publication"
    query_template = "Real Estate publications in {market}"

    def pick_email(self, site):
        return first_email(site, (find_tip_email, "tip/submit"), (find_contact_email, "contact page"))
