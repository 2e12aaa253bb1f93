"""Core module - models and constants."""

from .models import (
    Market,
    MarketState,
    Position,
    GroupedPosition,
    TransactionType,
    UserTransaction,
    EarningsCalculation,
)
from .constants import SECONDS_PER_YEAR, DEFAULT_REBALANCE_ROUNDS

__all__ = [
    "Market",
    "MarketState",
    "Position",
    "GroupedPosition",
    "TransactionType",
    "UserTransaction",
    "EarningsCalculation",
    "SECONDS_PER_YEAR",
    "DEFAULT_REBALANCE_ROUNDS",
]
