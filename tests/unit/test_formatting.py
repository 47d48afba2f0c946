"""Tests for amount formatting and risk bands."""

from decimal import Decimal

import pytest

from strata_kernel.domain.formatting import MISSING_AMOUNT, format_amount, risk_band


class TestFormatAmount:

    @pytest.mark.parametrize("value,expected", [
        (Decimal("2400000"), "$2.40M"),
        (Decimal("1250000000"), "$1.25B"),
        (Decimal("47500"), "$48K"),
        (Decimal("380000"), "$380K"),
        (Decimal("999"), "$999"),
        (Decimal("0"), "$0"),
        (Decimal("-21000"), "-$21K"),
        (Decimal("1005000"), "$1.01M"),
        (620000, "$620K"),
        (12.5, "$13"),
        ("2500", "$3K"),
    ])
    def test_scales(self, value, expected):
        assert format_amount(value) == expected

    @pytest.mark.parametrize("value", [None, "abc", Decimal("NaN"), float("inf")])
    def test_missing(self, value):
        assert format_amount(value) == MISSING_AMOUNT


class TestRiskBand:

    @pytest.mark.parametrize("score,band", [
        (100, "Critical"),
        (75, "Critical"),
        (74, "High"),
        (50, "High"),
        (49, "Moderate"),
        (30, "Moderate"),
        (29, "Low"),
        (0, "Low"),
    ])
    def test_bands(self, score, band):
        assert risk_band(score) == band
