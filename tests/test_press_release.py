"""Unit tests: press release sections"""
import re
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from presskit import MarketRecord, generate_press_release
from presskit.press_release import OUTLOOK_FACTORS

_RANK_RE = re.compile(r"\((\d+)(?:st|nd|rd|th) nationally\)")


def _austin():
    return MarketRecord(
        city="Austin", state="TX",
        gross_yield=7.5, gross_yield_rank=12,
        total_revenue=50000000, total_revenue_rank=8,
    )


def _section(text, start, end=None):
    body = text.split(start, 1)[1]
    return body.split(end, 1)[0] if end and end in body else body


def test_headline_uses_best_rank():
    out = generate_press_release(_austin(), year=2025)
    assert out.startswith("FOR IMMEDIATE RELEASE\n\n")
    assert "<strong>Austin, TX Ranks 8th Nationally for Total Revenue Among U.S. Short-Term Rental Markets</strong>" in out


def test_detailed_metrics_lists_top_tier_only():
    out = generate_press_release(_austin(), year=2025)
    assert "- Total Revenue: $50,000,000 (8th nationally)" in out
    assert "- Gross Yield: 7.50% (12th nationally)" in out
    assert "Additional Rankings" not in out


def test_regional_dynamics_revenue_without_listings():
    out = generate_press_release(_austin(), year=2025)
    assert "generated $50,000,000 in total revenue, ranking 8th nationally. Visitor demand" in out
    assert "active listings" not in out


def test_strengths_and_outlook():
    out = generate_press_release(_austin(), year=2025)
    assert "A Gross Yield of 7.50% (12th nationally)" in out
    assert "occupancy rate of" not in out
    assert "<strong>2026 Outlook</strong>" in out
    assert "- Growing recognition of Austin as a premier destination" in out
    assert out.count("\n- ") >= len(OUTLOOK_FACTORS) + 2


def test_bullets_are_sorted_and_split_at_25():
    record = MarketRecord(
        city="Tampa", state="FL",
        gross_yield=6.1, gross_yield_rank=30,
        total_revenue=1000000, total_revenue_rank=3,
        occupancy=61.0, occupancy_rank=25,
        nightly_rate=180.0, nightly_rate_rank=26,
        revenue_per_listing=30000, revenue_per_listing_rank=10,
    )
    out = generate_press_release(record, year=2025)
    strong = _section(out, "<strong>Detailed Performance Metrics</strong>", "<strong>Additional Rankings</strong>")
    other = _section(out, "<strong>Additional Rankings</strong>", "<strong>Market Strengths")
    strong_ranks = [int(r) for r in _RANK_RE.findall(strong)]
    other_ranks = [int(r) for r in _RANK_RE.findall(other)]
    assert strong_ranks == [3, 10, 25]
    assert all(r <= 25 for r in strong_ranks)
    assert other_ranks == [26, 30]


def test_rank_without_value_still_listed():
    record = MarketRecord(city="Reno", total_listings_rank=4)
    out = generate_press_release(record, year=2025)
    assert "- Total Listings: ranked 4th nationally" in out


def test_missing_gross_yield_is_omitted():
    record = MarketRecord(
        city="Reno", state="NV",
        occupancy=70.0, occupancy_rank=5,
        nightly_rate=150.0, nightly_rate_rank=40,
    )
    out = generate_press_release(record, year=2025)
    assert "Gross Yield" not in out
    assert "An occupancy rate of 70.0% (5th nationally)" in out
    assert "The average nightly rate of $150.00" in out


def test_gross_yield_rank_without_value_skips_strength_sentence():
    record = MarketRecord(city="Reno", gross_yield_rank=3)
    out = generate_press_release(record, year=2025)
    assert "A Gross Yield of" not in out


def test_fallback_without_rankings():
    out = generate_press_release(MarketRecord(city="Boise", state="ID", total_revenue=1.0))
    assert "Market data is available" in out
    assert "Boise, ID" in out
    assert "Detailed Performance Metrics" not in out
    assert "Media Relations\nEmail: " in out


def test_deterministic():
    assert generate_press_release(_austin(), year=2025) == generate_press_release(_austin(), year=2025)


if __name__ == "__main__":
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn):
            try:
                fn()
                print(f"  PASS {name}")
            except AssertionError as e:
                print(f"  FAIL {name}: {e}")
    print("Done.")
