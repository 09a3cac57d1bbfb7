"""Unit tests: metric table, ordinals, number formatting, averages"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from presskit.metrics import (
    AverageStatistics, MarketRecord, METRICS, above_average_pct, collect_rankings,
    compare_to_average, format_metric, market_name, ordinal, within,
)


def _english_ordinal(n):
    if 11 <= n % 100 <= 13:
        return f"{n}th"
    return f"{n}" + {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


def test_ordinal_matches_english_rule():
    for n in range(1, 121):
        assert ordinal(n) == _english_ordinal(n), n


def test_ordinal_teens_and_hundreds():
    assert ordinal(11) == "11th"
    assert ordinal(12) == "12th"
    assert ordinal(13) == "13th"
    assert ordinal(21) == "21st"
    assert ordinal(102) == "102nd"
    assert ordinal(111) == "111th"


def test_format_metric_per_kind():
    assert format_metric("totalRevenue", 50000000) == "$50,000,000"
    assert format_metric("nightlyRate", 150) == "$150.00"
    assert format_metric("revenuePerListing", 41234.7) == "$41,235"
    assert format_metric("grossYield", 7.5) == "7.50%"
    assert format_metric("occupancy", 70) == "70.0%"
    assert format_metric("totalListings", 12345) == "12,345"
    assert format_metric("occupancy", None) is None


def test_format_metric_rounds_halves_up():
    assert format_metric("occupancy", 72.25) == "72.3%"
    assert format_metric("grossYield", 6.125) == "6.13%"
    assert format_metric("revenuePerListing", 12344.5) == "$12,345"
    assert format_metric("totalListings", 2.5) == "3"


def test_above_average_pct_rounds_halves_up():
    assert above_average_pct(45, 40) == "13%"


def test_compare_to_average_guards_missing_and_zero():
    assert compare_to_average(5, 4) == "above"
    assert compare_to_average(3, 4) == "below"
    assert compare_to_average(5, 0) is None
    assert compare_to_average(5, None) is None
    assert compare_to_average(None, 4) is None


def test_above_average_pct():
    assert above_average_pct(50e6, 40e6) == "25%"
    assert above_average_pct(50e6, 0) is None
    assert above_average_pct(None, 40e6) is None


def test_collect_rankings_sorted_and_stable():
    record = MarketRecord(
        city="Denver", occupancy_rank=5, gross_yield_rank=5, nightly_rate_rank=2, total_revenue=1.0,
    )
    rankings = collect_rankings(record)
    assert [r.metric_key for r in rankings] == ["nightlyRate", "grossYield", "occupancy"]
    assert [r.rank for r in rankings] == [2, 5, 5]
    assert rankings[0].label == "Nightly Rate"
    assert collect_rankings(record, label_attr="phrase")[0].label == "average nightly rate"


def test_within_limit_is_inclusive():
    record = MarketRecord(city="X", gross_yield_rank=25, occupancy_rank=26)
    assert [r.rank for r in within(collect_rankings(record), 25)] == [25]


def test_market_name():
    assert market_name(MarketRecord(city="Austin", state="TX")) == "Austin, TX"
    assert market_name(MarketRecord(city="Austin")) == "Austin"


def test_averages_skip_missing_values():
    records = [
        MarketRecord(city="A", gross_yield=6.0, total_revenue=100.0),
        MarketRecord(city="B", gross_yield=8.0),
        MarketRecord(city="C"),
    ]
    averages = AverageStatistics.from_records(records)
    assert averages.gross_yield == 7.0
    assert averages.total_revenue == 100.0
    assert averages.occupancy is None
    assert set(averages.to_dict()) == {m.key for m in METRICS}


def test_averages_of_nothing():
    averages = AverageStatistics.from_records([])
    assert all(v is None for v in averages.to_dict().values())


if __name__ == "__main__":
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn):
            try:
                fn()
                print(f"  PASS {name}")
            except AssertionError as e:
                print(f"  FAIL {name}: {e}")
    print("Done.")
