"""Unit tests for period earnings and position reports."""

import logging

import pytest

from src.analytics import (
    build_position_report,
    calculate_period_earnings,
    get_earnings_for_period,
    get_grouped_earnings,
)
from src.core.constants import SECONDS_PER_DAY
from src.core.models import EarningsPeriod, TransactionType, UserTransaction

NOW = 100 * SECONDS_PER_DAY


def tx(market_id: str, ts: int, assets: int, tx_type: TransactionType = TransactionType.SUPPLY) -> UserTransaction:
    return UserTransaction(hash=f"0x{market_id[-3:]}{ts}", timestamp=ts, type=tx_type, market_id=market_id, assets=assets)


class TestCalculatePeriodEarnings:
    """Tests for calculate_period_earnings."""

    @pytest.fixture
    def position(self, make_market, make_position):
        return make_position(make_market(market_id="0xaaa"), 1_100)

    @pytest.fixture
    def transactions(self):
        return [
            tx("0xaaa", NOW - 40 * SECONDS_PER_DAY, 1_000),
            tx("0xbbb", NOW - 10 * SECONDS_PER_DAY, 5_000),
        ]

    def test_lifetime_and_periods(self, position, transactions):
        snapshots = {
            EarningsPeriod.DAY: 1_090,
            EarningsPeriod.WEEK: None,
            EarningsPeriod.MONTH: 1_000,
        }

        earnings = calculate_period_earnings(position, transactions, snapshots, NOW)

        assert earnings.market_id == "0xaaa"
        assert earnings.earned(EarningsPeriod.ALL) == 100
        assert earnings.earned(EarningsPeriod.DAY) == 10
        assert earnings.earned(EarningsPeriod.WEEK) is None
        assert earnings.earned(EarningsPeriod.MONTH) == 100

    def test_missing_snapshot_entry(self, position, transactions):
        earnings = calculate_period_earnings(position, transactions, {}, NOW)

        assert earnings.earned(EarningsPeriod.ALL) == 100
        assert earnings.by_period[EarningsPeriod.DAY] is None

    def test_lifetime_effective_time(self, position, transactions):
        earnings = calculate_period_earnings(position, transactions, {}, NOW)
        lifetime = earnings.by_period[EarningsPeriod.ALL]

        assert lifetime.effective_time == 40 * SECONDS_PER_DAY
        assert lifetime.avg_capital == 1_000


class TestGroupedEarnings:
    """Tests for get_earnings_for_period and get_grouped_earnings."""

    @pytest.fixture
    def earnings(self, make_market, make_position):
        a = calculate_period_earnings(
            make_position(make_market(market_id="0xaaa"), 1_100),
            [tx("0xaaa", NOW - 40 * SECONDS_PER_DAY, 1_000)],
            {EarningsPeriod.DAY: 1_090, EarningsPeriod.MONTH: 1_000},
            NOW,
        )
        b = calculate_period_earnings(
            make_position(make_market(market_id="0xbbb"), 520),
            [tx("0xbbb", NOW - 40 * SECONDS_PER_DAY, 500)],
            {EarningsPeriod.DAY: 518, EarningsPeriod.MONTH: 510},
            NOW,
        )
        return a, b

    def test_sum_across_positions(self, earnings):
        assert get_grouped_earnings(earnings, EarningsPeriod.DAY) == 12
        assert get_grouped_earnings(earnings, EarningsPeriod.MONTH) == 110
        assert get_grouped_earnings(earnings, EarningsPeriod.ALL) == 120

    def test_any_missing_period_gives_none(self, earnings):
        assert get_grouped_earnings(earnings, EarningsPeriod.WEEK) is None

    def test_position_without_earnings_counts_as_zero(self, earnings):
        assert get_earnings_for_period(None, EarningsPeriod.DAY) == 0
        assert get_grouped_earnings([earnings[0], None], EarningsPeriod.DAY) == 10

    def test_empty_group(self):
        assert get_grouped_earnings([], EarningsPeriod.DAY) is None


class TestBuildPositionReport:
    """Tests for build_position_report."""

    START = 1_000
    END = 2_000

    @pytest.fixture
    def positions(self, make_market, make_position):
        return [
            make_position(make_market(market_id="0xaaa"), 1_510),
            make_position(make_market(market_id="0xbbb"), 0),
            make_position(make_market(market_id="0xccc"), 300),
        ]

    @pytest.fixture
    def transactions(self):
        return [
            tx("0xaaa", 1_500, 500),
            tx("0xbbb", 1_250, 200, TransactionType.WITHDRAW),
        ]

    def test_report(self, positions, transactions):
        summary = build_position_report(
            positions,
            transactions,
            start_balances={"0xaaa": 1_000, "0xbbb": 200, "0xccc": 300},
            end_balances={"0xaaa": 1_510, "0xbbb": 0, "0xccc": 300},
            start=self.START,
            end=self.END,
        )

        by_market = {r.market.id: r for r in summary.market_reports}
        # 0xccc had no activity; closed 0xbbb is still reported
        assert set(by_market) == {"0xaaa", "0xbbb"}
        assert by_market["0xaaa"].interest_earned == 10
        assert by_market["0xbbb"].interest_earned == 0
        assert by_market["0xbbb"].earnings.effective_time == 250

        assert summary.period == 1_000
        assert summary.total_interest_earned == 10
        assert summary.total_deposits == 500
        assert summary.total_withdraws == 200
        assert summary.grouped_earnings.earned == 10

    def test_missing_snapshot_skips_market(self, positions, transactions, caplog):
        with caplog.at_level(logging.WARNING):
            summary = build_position_report(
                positions,
                transactions,
                start_balances={"0xaaa": 1_000},
                end_balances={"0xaaa": 1_510, "0xbbb": 0},
                start=self.START,
                end=self.END,
            )

        assert [r.market.id for r in summary.market_reports] == ["0xaaa"]
        assert summary.grouped_earnings.earned == 10
        assert "Missing snapshot" in caplog.text

    def test_transactions_outside_window_ignored(self, positions):
        summary = build_position_report(
            positions,
            [tx("0xaaa", 500, 1_000), tx("0xaaa", 1_500, 500)],
            start_balances={"0xaaa": 1_000},
            end_balances={"0xaaa": 1_510},
            start=self.START,
            end=self.END,
        )

        report = summary.market_reports[0]
        assert report.transactions == [tx("0xaaa", 1_500, 500)]
        assert report.earnings.total_deposits == 500

    def test_end_before_start(self, positions):
        with pytest.raises(ValueError):
            build_position_report(positions, [], {}, {}, start=10, end=5)
