"""Tests for the settlement distribution arithmetic."""

import pytest
from marketplace.finance.settlement import DISTRIBUTION_RATIOS, compute_distribution, round_franc


class TestDistribution:
    def test_reference_scenario(self):
        # 10,000 F sold for a 6,000 F capital basis
        assert compute_distribution(4000) == {
            "supplier": 1200.0,
            "vat": 720.0,
            "partner": 680.0,
            "operator": 1400.0,
        }

    def test_ratios_cover_the_whole_profit(self):
        assert sum(DISTRIBUTION_RATIOS.values()) == 1

    def test_each_share_is_rounded_on_its_own(self):
        shares = compute_distribution(1250)
        assert shares == {"supplier": 375.0, "vat": 225.0, "partner": 213.0, "operator": 438.0}
        # Independent rounding may overshoot the profit; that is accepted
        assert sum(shares.values()) == 1251.0

    def test_zero_profit(self):
        assert compute_distribution(0) == {"supplier": 0.0, "vat": 0.0, "partner": 0.0, "operator": 0.0}


class TestRounding:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [(0.5, 1.0), (1.5, 2.0), (2.5, 3.0), (212.49, 212.0), (437.5, 438.0)],
    )
    def test_half_up(self, amount, expected):
        assert round_franc(amount) == expected
