"""Unit tests for liquidity-lock classification."""

import pytest

from src.sandbox.engine import classify_locked, eligible_positions


class TestClassifyLocked:
    """Tests for classify_locked."""

    def test_fully_liquid_market(self, make_market, make_position):
        """Supply fully covered by market liquidity is all withdrawable."""
        market = make_market(total_supply=3_000, total_borrow=2_000)
        result = classify_locked(make_position(market, 1_000))

        assert result.locked == 0
        assert result.withdrawable == 1_000

    def test_partially_locked(self, make_market, make_position):
        """Supply above market liquidity is locked."""
        market = make_market(total_supply=10_000, total_borrow=9_600)
        result = classify_locked(make_position(market, 1_000))

        assert result.locked == 600
        assert result.withdrawable == 400

    def test_fully_borrowed_market(self, make_market, make_position):
        market = make_market(total_supply=5_000, total_borrow=5_000)
        result = classify_locked(make_position(market, 1_000))

        assert result.locked == 1_000
        assert result.withdrawable == 0

    @pytest.mark.parametrize("supply,liquidity", [(0, 100), (50, 0), (500, 499), (1, 10**12)])
    def test_parts_sum_to_supply(self, make_market, make_position, supply, liquidity):
        market = make_market(total_supply=10**13, total_borrow=10**13 - liquidity)
        result = classify_locked(make_position(market, supply))

        assert result.locked >= 0
        assert result.withdrawable >= 0
        assert result.total == supply

    def test_fresh_market_snapshot_overrides(self, make_market, make_position):
        """A fresher market passed explicitly is used instead of the position's."""
        stale = make_market(total_supply=10_000, total_borrow=0)
        fresh = make_market(total_supply=10_000, total_borrow=9_800)
        result = classify_locked(make_position(stale, 1_000), fresh)

        assert result.locked == 800

    def test_market_without_state_is_fully_locked(self, make_market, make_position):
        market = make_market(with_state=False)
        result = classify_locked(make_position(market, 1_000))

        assert result.locked == 1_000
        assert result.withdrawable == 0

    def test_negative_supply_rejected(self, make_market, make_position):
        with pytest.raises(ValueError):
            classify_locked(make_position(make_market(), -1))


class TestEligiblePositions:
    """Tests for eligible_positions."""

    def test_filters_empty_and_excluded(self, make_market, make_position):
        a = make_position(make_market(market_id="0xa"), 100)
        b = make_position(make_market(market_id="0xb"), 0)
        c = make_position(make_market(market_id="0xc"), 300)

        result = eligible_positions([a, b, c], excluded_market_ids=["0xc"])

        assert result == [a]

    def test_no_exclusions(self, make_market, make_position):
        a = make_position(make_market(market_id="0xa"), 100)
        assert eligible_positions([a]) == [a]
