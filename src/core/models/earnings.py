"""Realized earnings data models."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from .market import Market
from .transaction import UserTransaction


@dataclass(frozen=True)
class EarningsCalculation:
    """Realized interest of one position over one time window."""

    earned: int
    total_deposits: int
    total_withdraws: int
    avg_capital: int  # Time-weighted average capital, native units
    effective_time: int  # Seconds with positive capital at risk
    apy: Decimal

    @property
    def has_annualized_return(self) -> bool:
        """False when there was no capital at risk to annualize against."""
        return self.effective_time > 0

    def to_dict(self) -> dict:
        return {
            "earned": str(self.earned),
            "total_deposits": str(self.total_deposits),
            "total_withdraws": str(self.total_withdraws),
            "avg_capital": str(self.avg_capital),
            "effective_time": self.effective_time,
            "apy": str(self.apy),
        }


class EarningsPeriod(Enum):
    """Look-back windows shown for a position."""

    ALL = "all"
    DAY = "1D"
    WEEK = "7D"
    MONTH = "30D"

    @property
    def seconds(self) -> Optional[int]:
        """Window length in seconds, None for lifetime."""
        return {
            EarningsPeriod.ALL: None,
            EarningsPeriod.DAY: 24 * 3600,
            EarningsPeriod.WEEK: 7 * 24 * 3600,
            EarningsPeriod.MONTH: 30 * 24 * 3600,
        }[self]


@dataclass
class PositionEarnings:
    """Earnings of one position across the standard look-back windows."""

    market_id: str
    by_period: Dict[EarningsPeriod, Optional[EarningsCalculation]] = field(default_factory=dict)

    def earned(self, period: EarningsPeriod) -> Optional[int]:
        """Earned amount for ``period``; None when the period's snapshot was missing."""
        calc = self.by_period.get(period)
        return calc.earned if calc is not None else None


@dataclass
class PositionReport:
    """Per-market realized performance over a report window."""

    market: Market
    earnings: EarningsCalculation
    start_balance: int
    end_balance: int
    transactions: List[UserTransaction] = field(default_factory=list)

    @property
    def interest_earned(self) -> int:
        return self.earnings.earned


@dataclass
class ReportSummary:
    """Realized performance of all markets of one loan asset over a window."""

    start_timestamp: int
    end_timestamp: int
    market_reports: List[PositionReport]
    grouped_earnings: EarningsCalculation

    @property
    def period(self) -> int:
        return self.end_timestamp - self.start_timestamp

    @property
    def total_interest_earned(self) -> int:
        return sum(r.interest_earned for r in self.market_reports)

    @property
    def total_deposits(self) -> int:
        return sum(r.earnings.total_deposits for r in self.market_reports)

    @property
    def total_withdraws(self) -> int:
        return sum(r.earnings.total_withdraws for r in self.market_reports)
