"""
Unit tests for formatting.py
"""

import math

from findash.core.metric_registry import UNIT_CURRENCY, UNIT_PERCENTAGE, UNIT_RATIO
from findash.services.formatting import (
    NOT_AVAILABLE,
    format_axis_value,
    format_change,
    format_millions,
    format_value,
)


def test_format_value_by_unit():
    assert format_value(1234567.0, UNIT_CURRENCY) == "R$ 1.234.567"
    assert format_value(12.3456, UNIT_PERCENTAGE) == "12.35%"
    assert format_value(2.5, UNIT_RATIO) == "2.50"


def test_format_value_negative_currency():
    assert format_value(-1500.0, UNIT_CURRENCY) == "-R$ 1.500"


def test_format_value_missing():
    assert format_value(None, UNIT_CURRENCY) == NOT_AVAILABLE
    assert format_value(math.nan, UNIT_PERCENTAGE) == NOT_AVAILABLE
    assert format_value(None, UNIT_RATIO) == "N/A"


def test_format_value_zero_is_not_missing():
    assert format_value(0.0, UNIT_CURRENCY) == "R$ 0"
    assert format_value(0.0, UNIT_PERCENTAGE) == "0.00%"


def test_format_axis_value_abbreviations():
    assert format_axis_value(1_500_000_000.0, UNIT_CURRENCY) == "1.5B"
    assert format_axis_value(2_300_000.0, UNIT_CURRENCY) == "2.3M"
    assert format_axis_value(4_000.0, UNIT_CURRENCY) == "4.0K"
    assert format_axis_value(999.0, UNIT_CURRENCY) == "R$ 999"


def test_format_axis_value_non_currency():
    assert format_axis_value(12.0, UNIT_PERCENTAGE) == "12.00%"
    assert format_axis_value(1_500.0, UNIT_RATIO) == "1500.00"
    assert format_axis_value(None, UNIT_CURRENCY) == NOT_AVAILABLE


def test_format_millions():
    assert format_millions(145_000_000.0) == "R$ 145,0 milhões"
    assert format_millions(1_234_567_890.0) == "R$ 1.234,6 milhões"
    assert format_millions(0) == "R$ 0"
    assert format_millions(None) == NOT_AVAILABLE


def test_format_change():
    assert format_change(10.0) == "10.0"
    assert format_change(-5.26) == "-5.3"
    assert format_change(None) == NOT_AVAILABLE


def test_non_finite_values_are_not_available():
    assert format_value(math.inf, UNIT_CURRENCY) == NOT_AVAILABLE
    assert format_value(-math.inf, UNIT_PERCENTAGE) == NOT_AVAILABLE
    assert format_axis_value(math.inf, UNIT_CURRENCY) == NOT_AVAILABLE
    assert format_millions(math.inf) == NOT_AVAILABLE
    assert format_change(-math.inf) == NOT_AVAILABLE
