"""Core data models for the rebalancing engine."""

from .market import Market, MarketState
from .position import Position, GroupedPosition, CollateralShare
from .transaction import TransactionType, UserTransaction
from .earnings import (
    EarningsCalculation,
    EarningsPeriod,
    PositionEarnings,
    PositionReport,
    ReportSummary,
)

__all__ = [
    "Market",
    "MarketState",
    "Position",
    "GroupedPosition",
    "CollateralShare",
    "TransactionType",
    "UserTransaction",
    "EarningsCalculation",
    "EarningsPeriod",
    "PositionEarnings",
    "PositionReport",
    "ReportSummary",
]
