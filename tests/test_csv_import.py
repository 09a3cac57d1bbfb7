"""Unit tests: CSV upload parsing and column mapping"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from presskit.csv_import import CsvImportError, map_rows, parse_csv, parse_float, parse_int

CSV = (
    "City,State,Gross Yield,Yield Rank,Listings,Notes\n"
    "Austin,TX,7.5%,12th,12000,hot\n"
    "\n"
    "Denver,CO,6,,900,\n"
    ",NV,5.1,40,10,missing city\n"
)
MAPPING = {
    "City": "city",
    "State": "state",
    "Gross Yield": "grossYield",
    "Yield Rank": "grossYieldRank",
    "Listings": "totalListings",
    "Notes": "",
}


def test_parse_csv_keeps_text_and_skips_blank_lines():
    parsed = parse_csv(CSV.encode("utf-8"))
    assert parsed["columns"] == ["City", "State", "Gross Yield", "Yield Rank", "Listings", "Notes"]
    assert len(parsed["data"]) == 3
    assert parsed["data"][0]["Gross Yield"] == "7.5%"
    assert parsed["data"][0]["Listings"] == "12000"
    assert parsed["data"][1]["Yield Rank"] == ""


def test_parse_csv_empty_file():
    assert parse_csv(b"") == {"data": [], "columns": []}


def test_parse_numbers_read_leading_digits():
    assert parse_int("12th") == 12
    assert parse_int(" 7 ") == 7
    assert parse_int("n/a") is None
    assert parse_float("7.5%") == 7.5
    assert parse_float("-0.25") == -0.25
    assert parse_float("n/a") is None


def test_map_rows_converts_and_drops_rows_without_city():
    rows = map_rows(parse_csv(CSV)["data"], MAPPING)
    assert len(rows) == 2
    austin, denver = rows
    assert austin == {
        "city": "Austin", "state": "TX", "gross_yield": 7.5,
        "gross_yield_rank": 12, "total_listings": 12000,
    }
    assert denver["gross_yield"] == 6.0
    assert "gross_yield_rank" not in denver
    assert denver["total_listings"] == 900


def test_map_rows_requires_city_mapping():
    with pytest.raises(CsvImportError, match="City column must be mapped"):
        map_rows([{"Name": "Austin"}], {"Name": "state"})


def test_map_rows_requires_one_city_value():
    with pytest.raises(CsvImportError, match="No valid data to import"):
        map_rows([{"City": ""}, {"City": "  "}], {"City": "city"})
