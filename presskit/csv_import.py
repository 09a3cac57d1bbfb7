"""
CSV import for city statistics.
Upload parses the file into rows; import maps the admin's column choices onto
CityData fields.
"""

import io
import logging
import re
from typing import Dict, List, Optional

import pandas as pd

from .metrics import METRICS

logger = logging.getLogger(__name__)

# camelCase field name sent by the admin UI -> CityData attribute
IMPORT_FIELDS = {"city": "city", "state": "state"}
for _m in METRICS:
    IMPORT_FIELDS[_m.key] = _m.field
    IMPORT_FIELDS[_m.rank_key] = _m.rank_field

INTEGER_FIELDS = {m.rank_field for m in METRICS} | {"total_listings"}
TEXT_FIELDS = {"city", "state"}

_INT_RE = re.compile(r"^\s*([-+]?\d+)")
_FLOAT_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


class CsvImportError(ValueError):
    """Import request that cannot be applied (nothing is deleted)."""


def parse_csv(content) -> dict:
    """Header row + data rows. Every cell stays text; blank lines are skipped."""
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig", errors="replace")
    try:
        df = pd.read_csv(io.StringIO(content), dtype=str, keep_default_na=False, skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        return {"data": [], "columns": []}
    return {"data": df.to_dict(orient="records"), "columns": [str(c) for c in df.columns]}


def parse_int(value) -> Optional[int]:
    m = _INT_RE.match(str(value))
    return int(m.group(1)) if m else None


def parse_float(value) -> Optional[float]:
    m = _FLOAT_RE.match(str(value))
    return float(m.group(1)) if m else None


def convert_value(field: str, value):
    if field in INTEGER_FIELDS:
        return parse_int(value)
    if field in TEXT_FIELDS:
        return str(value).strip()
    return parse_float(value)


def map_row(row: dict, column_mapping: Dict[str, str]) -> dict:
    mapped = {}
    for csv_column, target in column_mapping.items():
        field = IMPORT_FIELDS.get(target or "")
        if not field:
            continue
        value = row.get(csv_column)
        if value is None or value == "":
            continue
        mapped[field] = convert_value(field, value)
    return mapped


def map_rows(data: List[dict], column_mapping: Dict[str, str]) -> List[dict]:
    """Map every row; rows without a city are dropped.

    Raises CsvImportError when city is not mapped or no row survives.
    """
    if "city" not in column_mapping.values():
        raise CsvImportError('City column must be mapped. Please map at least one column to "City".')

    rows = [map_row(row, column_mapping) for row in data]
    rows = [r for r in rows if r.get("city")]
    if not rows:
        raise CsvImportError("No valid data to import. Please ensure at least one row has a city value.")

    skipped = len(data) - len(rows)
    if skipped:
        logger.info("csv import: %s rows without a city skipped", skipped)
    return rows
