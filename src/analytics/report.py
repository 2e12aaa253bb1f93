"""Per-period earnings and windowed position reports."""

import logging
from typing import Dict, Iterable, List, Optional

from src.analytics.earnings import compute_earnings, filter_transactions_in_period
from src.core.constants import SECONDS_PER_YEAR
from src.core.models import (
    EarningsPeriod,
    Position,
    PositionEarnings,
    PositionReport,
    ReportSummary,
    UserTransaction,
)

logger = logging.getLogger(__name__)


def calculate_period_earnings(
    position: Position,
    transactions: Iterable[UserTransaction],
    snapshots: Dict[EarningsPeriod, Optional[int]],
    now: int,
    seconds_per_year: int = SECONDS_PER_YEAR,
) -> PositionEarnings:
    """
    Earnings of one position for lifetime, 24h, 7d and 30d.

    Lifetime earnings start from a zero balance at epoch 0. The other
    windows need the supplied balance at the window start; when that
    snapshot is missing the period is reported as None.

    Args:
        position: Position with its current supplied balance
        transactions: User transactions (filtered to this market here)
        snapshots: Supplied assets at the start of each timed period
        now: Window end, unix seconds
        seconds_per_year: Annualization base

    Returns:
        PositionEarnings
    """
    market_txs = [tx for tx in transactions if tx.market_id == position.market.id]
    current = position.supply_assets

    earnings = PositionEarnings(market_id=position.market.id)
    earnings.by_period[EarningsPeriod.ALL] = compute_earnings(
        current, 0, market_txs, 0, now, seconds_per_year
    )

    for period in (EarningsPeriod.DAY, EarningsPeriod.WEEK, EarningsPeriod.MONTH):
        start_balance = snapshots.get(period)
        if start_balance is None:
            earnings.by_period[period] = None
            continue
        earnings.by_period[period] = compute_earnings(
            current, start_balance, market_txs, now - period.seconds, now, seconds_per_year
        )

    return earnings


def get_earnings_for_period(earnings: Optional[PositionEarnings], period: EarningsPeriod) -> Optional[int]:
    """Earned amount of a position for ``period`` (0 when no earnings were computed)."""
    if earnings is None:
        return 0
    return earnings.earned(period)


def get_grouped_earnings(
    earnings: Iterable[Optional[PositionEarnings]],
    period: EarningsPeriod,
) -> Optional[int]:
    """Combined earnings; None if any member lacks data for the period."""
    total: Optional[int] = None
    for item in earnings:
        value = get_earnings_for_period(item, period)
        if value is None:
            return None
        total = value if total is None else total + value
    return total


def build_position_report(
    positions: List[Position],
    transactions: List[UserTransaction],
    start_balances: Dict[str, int],
    end_balances: Dict[str, int],
    start: int,
    end: int,
    seconds_per_year: int = SECONDS_PER_YEAR,
) -> ReportSummary:
    """
    Realized performance of every market with activity in the window.

    Markets are discovered from the transaction log, so positions that are
    closed by ``end`` are still reported. Markets missing a start or end
    snapshot are skipped.
    """
    if end < start:
        raise ValueError(f"Report end {end} is before start {start}")

    active_ids = {tx.market_id for tx in transactions}
    reports: List[PositionReport] = []

    for position in positions:
        market_id = position.market.id
        if market_id not in active_ids:
            continue
        if market_id not in start_balances or market_id not in end_balances:
            logger.warning(f"Missing snapshot for {market_id[:10]}, skipping from report")
            continue

        market_txs = filter_transactions_in_period(
            (tx for tx in transactions if tx.market_id == market_id), start, end
        )
        earnings = compute_earnings(
            end_balances[market_id],
            start_balances[market_id],
            market_txs,
            start,
            end,
            seconds_per_year,
        )
        reports.append(
            PositionReport(
                market=position.market,
                earnings=earnings,
                start_balance=start_balances[market_id],
                end_balance=end_balances[market_id],
                transactions=market_txs,
            )
        )

    reported_ids = {r.market.id for r in reports}
    grouped = compute_earnings(
        sum(r.end_balance for r in reports),
        sum(r.start_balance for r in reports),
        [tx for tx in transactions if tx.market_id in reported_ids],
        start,
        end,
        seconds_per_year,
    )

    logger.info(f"Built report for {len(reports)} markets, earned {grouped.earned}")
    return ReportSummary(
        start_timestamp=start,
        end_timestamp=end,
        market_reports=reports,
        grouped_earnings=grouped,
    )
