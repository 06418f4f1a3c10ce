import math
import re
from typing import Any

from fitcalc.core.constants import SHEET_MATERIAL_ALIASES

_LEADING_NUMBER = re.compile(r"\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)")


def parse_number(val: Any) -> float | None:
    """
    Leniently read a number the way form fields and spreadsheet cells arrive.
    Accepts numbers and strings with a numeric prefix (e.g. "73.5°"); anything else,
    including NaN and infinities, gives ``None``.
    """
    if isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        try:
            number = float(val)
        except OverflowError:
            return None
    elif isinstance(val, str):
        m = _LEADING_NUMBER.match(val)
        if not m:
            return None
        number = float(m.group(1))
    else:
        return None
    return number if math.isfinite(number) else None


def number_or(val: Any, default: float) -> float:
    """Parsed number, or ``default`` when missing, unparsable or zero."""
    return parse_number(val) or default


def is_blank(val: Any) -> bool:
    return val is None or val == ""


def round_half_up(value: float) -> int | None:
    """Half-up rounding like ``Math.round``; ``None`` when the value overflowed to inf or NaN."""
    if not math.isfinite(value):
        return None
    return math.floor(value + 0.5)


def round_tenth(value: float) -> float | None:
    """One decimal place, ties rounded up like ``toFixed(1)``."""
    scaled = value * 10
    if not math.isfinite(scaled):
        return None
    return math.floor(scaled + 0.5) / 10


def finite_or(value: float, default: Any = None) -> Any:
    return value if math.isfinite(value) else default


def signed_diff(value: int | float) -> str:
    return f"+{value}" if value > 0 else f"{value}"


def sheet_key(header: str) -> str:
    key = re.sub(r"\s+", "_", str(header).lower())
    if key in SHEET_MATERIAL_ALIASES:
        return "material"
    return key


def normalize_sheet_rows(values: list[list[Any]] | None) -> list[dict[str, Any]]:
    """Turn raw spreadsheet rows into bike records keyed by the header row."""
    if not values or len(values) < 2:
        return []

    keys = [sheet_key(header) for header in values[0]]
    bikes = []
    for row in values[1:]:
        bike = {}
        for index, key in enumerate(keys):
            bike[key] = row[index] if index < len(row) else None
        bikes.append(bike)
    return bikes
