"""Rebalancing engine components."""

from .simulator import MarketSimulator, MarketStateSimulator, apply_simulation, simulate_and_apply
from .liquidity import classify_locked, eligible_positions
from .allocator import AllocationEntry, GreedyAllocator
from .rebalance import SmartRebalancer, compute_allocation
from .queue import PendingRebalanceQueue, InvalidInstructionError, RejectionReason

__all__ = [
    "MarketSimulator",
    "MarketStateSimulator",
    "apply_simulation",
    "simulate_and_apply",
    "classify_locked",
    "eligible_positions",
    "AllocationEntry",
    "GreedyAllocator",
    "SmartRebalancer",
    "compute_allocation",
    "PendingRebalanceQueue",
    "InvalidInstructionError",
    "RejectionReason",
]
