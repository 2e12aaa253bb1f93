"""Greedy marginal-yield allocator for supply positions."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

from src.core.constants import DEFAULT_REBALANCE_ROUNDS
from src.core.models import Market
from src.sandbox.engine.simulator import MarketSimulator, apply_simulation, simulate_and_apply
from src.sandbox.models.simulation import SimulationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllocationEntry:
    """One eligible market as seen by the allocator."""

    market: Market
    current_amount: int
    locked: int
    withdrawable: int


class GreedyAllocator:
    """
    Distributes movable capital across markets by marginal supply APY.

    The movable total is split into ``rounds`` equal chunks (the last one
    also takes the integer-division remainder). Each chunk goes to the
    market whose simulated supply APY after absorbing it is highest, and
    that market's working state is updated so later rounds see the lower
    marginal yield. Filling the best market therefore pushes its APY down
    until another market becomes more attractive, which is what spreads
    capital across markets.

    Locked capital is never moved and is pre-seeded into its own market.
    Ties go to the first market in iteration order.
    """

    def __init__(self, simulator: MarketSimulator, rounds: int = DEFAULT_REBALANCE_ROUNDS):
        if rounds < 1:
            raise ValueError(f"Round count must be positive, got {rounds}")
        self.simulator = simulator
        self.rounds = rounds

    def allocate(self, entries: List[AllocationEntry]) -> Optional[Dict[str, int]]:
        """
        Compute target amounts per market.

        Args:
            entries: Classified eligible markets

        Returns:
            market id -> target amount, or None when there is nothing to move
        """
        total_rebalanceable = sum(e.withdrawable for e in entries)
        if total_rebalanceable == 0:
            logger.info("No withdrawable capital, nothing to rebalance")
            return None

        chunk = total_rebalanceable // self.rounds
        if chunk == 0:
            logger.info(
                f"Rebalanceable amount {total_rebalanceable} too small for {self.rounds} rounds"
            )
            return None
        remainder = total_rebalanceable - chunk * self.rounds

        working = self._baseline_markets(entries)
        allocation: Dict[str, int] = {e.market.id: e.locked for e in entries}

        logger.debug(
            f"chunk={chunk}, remainder={remainder}, rounds={self.rounds}, markets={len(entries)}"
        )

        for round_index in range(self.rounds):
            amount = chunk + remainder if round_index == self.rounds - 1 else chunk

            best = self._best_market(entries, working, amount)
            if best is None:
                logger.warning(
                    f"Round {round_index}: no market could absorb {amount}, stopping early"
                )
                break

            market_id, result = best
            allocation[market_id] += amount
            working[market_id] = apply_simulation(working[market_id], result)

            if round_index < 3:
                logger.debug(
                    f"Round {round_index}: +{amount} -> {working[market_id].name} "
                    f"(apy {float(result.supply_apy) * 100:.4f}%)"
                )

        return allocation

    def _baseline_markets(self, entries: List[AllocationEntry]) -> Dict[str, Market]:
        """Working copies as if every withdrawable amount had already been pulled out."""
        working: Dict[str, Market] = {}
        for entry in entries:
            baseline = simulate_and_apply(self.simulator, entry.market, -entry.withdrawable)
            if baseline is None:
                logger.warning(
                    f"Could not simulate withdrawal of {entry.withdrawable} from {entry.market.id[:10]}"
                )
                baseline = entry.market.clone()
            working[entry.market.id] = baseline
        return working

    def _best_market(
        self,
        entries: List[AllocationEntry],
        working: Dict[str, Market],
        amount: int,
    ) -> Optional[tuple]:
        """Market with the strictly highest supply APY after absorbing ``amount``."""
        best_id: Optional[str] = None
        best_result: Optional[SimulationResult] = None
        best_apy: Optional[Decimal] = None

        for entry in entries:
            market_id = entry.market.id
            result = self.simulator.simulate(working[market_id], amount)
            if result is None:
                continue
            if best_apy is None or result.supply_apy > best_apy:
                best_id = market_id
                best_result = result
                best_apy = result.supply_apy

        if best_id is None:
            return None
        return best_id, best_result
