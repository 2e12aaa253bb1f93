"""Time-weighted realized earnings and APY reconstruction."""

import logging
import time
from decimal import Decimal, Overflow, localcontext
from typing import Iterable, List, Optional

from src.core.constants import SECONDS_PER_YEAR
from src.core.models import EarningsCalculation, TransactionType, UserTransaction

logger = logging.getLogger(__name__)


def filter_transactions_in_period(
    transactions: Iterable[UserTransaction],
    start: int,
    end: int,
) -> List[UserTransaction]:
    """Transactions with start <= timestamp <= end, oldest first."""
    return sorted(
        (tx for tx in transactions if start <= tx.timestamp <= end),
        key=lambda tx: tx.timestamp,
    )


def compute_earnings(
    ending_balance: int,
    starting_balance: int,
    transactions: Iterable[UserTransaction],
    start: int,
    end: Optional[int] = None,
    seconds_per_year: int = SECONDS_PER_YEAR,
) -> EarningsCalculation:
    """
    Reconstruct realized interest and annualized return for one window.

    earned = ending + withdrawals - (starting + deposits), counting only
    transactions strictly inside (start, end). Average capital is the
    balance step function between transaction timestamps, weighted by how
    long each balance was held; intervals with no capital at risk are
    skipped entirely and do not count toward the effective time.

    APY = (earned / avg_capital + 1) ^ (seconds_per_year / effective_time) - 1,
    reported as 0 when nothing was earned (no negative annualized rates).

    Args:
        ending_balance: Supplied assets at ``end``
        starting_balance: Supplied assets at ``start``
        transactions: Transaction log of the position (any order)
        start: Window start, unix seconds
        end: Window end, unix seconds (defaults to now)
        seconds_per_year: Annualization base

    Returns:
        EarningsCalculation
    """
    if end is None:
        end = int(time.time())
    if end < start:
        raise ValueError(f"Window end {end} is before start {start}")
    if ending_balance < 0 or starting_balance < 0:
        raise ValueError("Balances must be non-negative")
    if seconds_per_year <= 0:
        raise ValueError(f"seconds_per_year must be positive, got {seconds_per_year}")

    window_txs = sorted(
        (tx for tx in transactions if start < tx.timestamp < end),
        key=lambda tx: tx.timestamp,
    )

    deposits = sum(tx.assets for tx in window_txs if tx.type == TransactionType.SUPPLY)
    withdraws = sum(tx.assets for tx in window_txs if tx.type == TransactionType.WITHDRAW)
    earned = ending_balance + withdraws - (starting_balance + deposits)

    moving_supply = starting_balance
    checkpoint = start
    effective_time = 0
    weighted_capital = 0

    for tx in window_txs:
        elapsed = tx.timestamp - checkpoint
        if moving_supply > 0 and elapsed > 0:
            effective_time += elapsed
            weighted_capital += moving_supply * elapsed
        moving_supply += tx.signed_supply_change
        checkpoint = tx.timestamp

    elapsed = end - checkpoint
    if moving_supply > 0 and elapsed > 0:
        effective_time += elapsed
        weighted_capital += moving_supply * elapsed

    if effective_time == 0:
        return EarningsCalculation(
            earned=earned,
            total_deposits=deposits,
            total_withdraws=withdraws,
            avg_capital=0,
            effective_time=0,
            apy=Decimal("0"),
        )

    avg_capital = weighted_capital // effective_time
    apy = Decimal("0")
    if earned > 0:
        periods = Decimal(seconds_per_year) / Decimal(effective_time)
        with localcontext() as ctx:
            # Very short windows can annualize beyond the Decimal range
            ctx.traps[Overflow] = False
            apy = (Decimal(earned) / Decimal(avg_capital) + 1) ** periods - 1

    return EarningsCalculation(
        earned=earned,
        total_deposits=deposits,
        total_withdraws=withdraws,
        avg_capital=avg_capital,
        effective_time=effective_time,
        apy=apy,
    )
