"""Sandbox data models."""

from .simulation import SimulationResult
from .rebalancing import (
    LiquidityClassification,
    MarketDelta,
    RebalanceResult,
    MarketParams,
    RebalanceAction,
    BatchedTransfer,
)

__all__ = [
    "SimulationResult",
    # Rebalancing models
    "LiquidityClassification",
    "MarketDelta",
    "RebalanceResult",
    "MarketParams",
    "RebalanceAction",
    "BatchedTransfer",
]
