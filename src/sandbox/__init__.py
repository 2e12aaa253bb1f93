"""Sandbox module for supply rebalancing simulation."""

from .models import (
    SimulationResult,
    MarketDelta,
    RebalanceResult,
    RebalanceAction,
)

__all__ = [
    "SimulationResult",
    "MarketDelta",
    "RebalanceResult",
    "RebalanceAction",
]
