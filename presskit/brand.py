"""
Brand strings interpolated into generated copy.
"""

import os

from dotenv import load_dotenv

load_dotenv()

BRAND_NAME = os.getenv("BRAND_NAME", "BNBCalc")
BRAND_URL = os.getenv("BRAND_URL", "https://bnbcalc.com")
MEDIA_CONTACT_EMAIL = os.getenv("MEDIA_CONTACT_EMAIL", "media@bnbcalc.com")

BRAND_LINK = f'<a href="{BRAND_URL}" target="_blank" rel="noopener noreferrer">{BRAND_NAME}</a>'
BRAND_DESC = (
    f'{BRAND_LINK}, an <a href="{BRAND_URL}" target="_blank" rel="noopener noreferrer">'
    f'Airbnb calculator</a> and analytics platform'
)
