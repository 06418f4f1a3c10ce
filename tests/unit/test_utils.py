import math

import pytest

from fitcalc.core.utils import (
    finite_or,
    normalize_sheet_rows,
    number_or,
    parse_number,
    round_half_up,
    round_tenth,
    signed_diff,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (73, 73.0),
        (73.5, 73.5),
        ("380", 380.0),
        (" 72.5°", 72.5),
        ("-6", -6.0),
        (".5", 0.5),
        ("1e2", 100.0),
    ],
)
def test_parse_number(value, expected):
    assert parse_number(value) == expected


@pytest.mark.parametrize("value", [None, "", "abc", "mm 380", True, [], {}, math.nan, math.inf, 10**400, "1e400"])
def test_parse_number_rejects(value):
    assert parse_number(value) is None


def test_number_or_defaults_on_zero_and_garbage():
    assert number_or("0", 80) == 80
    assert number_or("x", 80) == 80
    assert number_or("90", 80) == 90


def test_round_half_up_matches_math_round():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(-2.6) == -3
    assert round_half_up(463.544) == 464


def test_signed_diff():
    assert signed_diff(4) == "+4"
    assert signed_diff(-3) == "-3"
    assert signed_diff(0) == "0"


def test_normalize_sheet_rows():
    values = [
        ["Brand", "Model  Name", "Frame Material", "Reach", "Stack"],
        ["Kross", "Esker 6.0", "Carbon", "380", "560"],
        ["Trek", "Domane"],
    ]

    bikes = normalize_sheet_rows(values)

    assert bikes == [
        {"brand": "Kross", "model_name": "Esker 6.0", "material": "Carbon", "reach": "380", "stack": "560"},
        {"brand": "Trek", "model_name": "Domane", "material": None, "reach": None, "stack": None},
    ]


@pytest.mark.parametrize("values", [None, [], [["Brand", "Reach"]]])
def test_normalize_sheet_rows_without_data(values):
    assert normalize_sheet_rows(values) == []


@pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
def test_round_half_up_non_finite(value):
    assert round_half_up(value) is None


def test_round_half_up_near_float_max():
    assert round_half_up(1.7e308) == int(1.7e308)


def test_round_tenth_rounds_ties_up():
    # 72.25 is exact in binary, so a half-even rounding would give 72.2
    assert round_tenth(72.25) == 72.3
    assert round_tenth(74.0546) == 74.1
    assert round_tenth(90.0) == 90.0
    assert round_tenth(1.7e308) is None


def test_finite_or():
    assert finite_or(12.5) == 12.5
    assert finite_or(math.inf) is None
    assert finite_or(math.nan, "--") == "--"
