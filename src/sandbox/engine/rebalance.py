"""Smart rebalance: classify, allocate and summarize a grouped supply position."""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from src.core.constants import DEFAULT_REBALANCE_ROUNDS
from src.core.models import GroupedPosition, Market
from src.sandbox.engine.allocator import AllocationEntry, GreedyAllocator
from src.sandbox.engine.liquidity import classify_locked, eligible_positions
from src.sandbox.engine.simulator import MarketSimulator, MarketStateSimulator, simulate_and_apply
from src.sandbox.models.rebalancing import MarketDelta, RebalanceResult

logger = logging.getLogger(__name__)


class SmartRebalancer:
    """
    Computes a yield-maximizing reallocation for one grouped position.

    Pipeline: eligibility filter -> liquidity-lock classification ->
    greedy allocation -> per-market deltas and weighted APY summaries.
    """

    def __init__(
        self,
        simulator: Optional[MarketSimulator] = None,
        rounds: int = DEFAULT_REBALANCE_ROUNDS,
        fee_tenths_bps: int = 10,
    ):
        self.simulator = simulator or MarketStateSimulator()
        self.allocator = GreedyAllocator(self.simulator, rounds=rounds)
        self.fee_tenths_bps = fee_tenths_bps

    @classmethod
    def from_settings(cls, settings, simulator: Optional[MarketSimulator] = None) -> "SmartRebalancer":
        """Build a rebalancer from application settings."""
        return cls(
            simulator=simulator,
            rounds=settings.rebalance_rounds,
            fee_tenths_bps=settings.rebalance_fee_tenths_bps,
        )

    def compute(
        self,
        grouped_position: GroupedPosition,
        excluded_market_ids: Optional[Iterable[str]] = None,
    ) -> Optional[RebalanceResult]:
        """
        Compute target allocation and deltas.

        Args:
            grouped_position: Positions sharing one loan asset and chain
            excluded_market_ids: Markets to leave out entirely

        Returns:
            RebalanceResult, or None when no rebalance is possible
        """
        positions = eligible_positions(grouped_position.positions, excluded_market_ids)
        if not positions:
            logger.info(f"No eligible {grouped_position.loan_asset_symbol} positions to rebalance")
            return None

        entries: List[AllocationEntry] = []
        for position in positions:
            classification = classify_locked(position)
            entries.append(
                AllocationEntry(
                    market=position.market,
                    current_amount=position.supply_assets,
                    locked=classification.locked,
                    withdrawable=classification.withdrawable,
                )
            )

        targets = self.allocator.allocate(entries)
        if targets is None:
            return None

        total_assets = sum(e.current_amount for e in entries)
        total_rebalanceable = sum(e.withdrawable for e in entries)

        deltas = [self._build_delta(entry, targets[entry.market.id]) for entry in entries]

        current_weighted = sum(Decimal(d.current_amount) * d.current_apy for d in deltas)
        projected_weighted = sum(Decimal(d.target_amount) * d.projected_apy for d in deltas)

        result = RebalanceResult(
            deltas=sorted(deltas, key=lambda d: d.delta, reverse=True),
            total_assets=total_assets,
            total_rebalanceable=total_rebalanceable,
            current_weighted_apy=Decimal(current_weighted) / Decimal(total_assets),
            projected_weighted_apy=Decimal(projected_weighted) / Decimal(total_assets),
            loan_asset_symbol=grouped_position.loan_asset_symbol,
            loan_asset_decimals=grouped_position.loan_asset_decimals,
            fee_tenths_bps=self.fee_tenths_bps,
        )

        logger.info(
            f"Smart rebalance {grouped_position.loan_asset_symbol}: "
            f"{float(result.current_weighted_apy) * 100:.4f}% -> "
            f"{float(result.projected_weighted_apy) * 100:.4f}%, moving {result.total_moved}"
        )
        return result

    def _build_delta(self, entry: AllocationEntry, target: int) -> MarketDelta:
        market = entry.market
        current_apy, current_util = self._current_rates(market)
        projected_apy, projected_util = self._project(market, entry.current_amount, target)
        if projected_apy is None:
            logger.warning(f"Could not project APY for {market.id[:10]}, using current APY")
            projected_apy, projected_util = current_apy, current_util

        return MarketDelta(
            market=market,
            current_amount=entry.current_amount,
            target_amount=target,
            locked_amount=entry.locked,
            current_apy=current_apy,
            projected_apy=projected_apy,
            current_utilization=current_util,
            projected_utilization=projected_util,
            collateral_symbol=market.collateral_asset_symbol or "N/A",
        )

    def _current_rates(self, market: Market) -> Tuple[Decimal, Decimal]:
        """Rates read through the simulator so current and projected use the same curve."""
        result = self.simulator.simulate(market, 0)
        if result is None:
            return market.supply_apy, market.utilization
        return result.supply_apy, result.utilization

    def _project(
        self,
        market: Market,
        current_amount: int,
        target_amount: int,
    ) -> Tuple[Optional[Decimal], Optional[Decimal]]:
        """
        Supply APY of a fresh copy after the user's move settles.

        Withdraw everything, then supply the target. When locked capital makes
        the full withdrawal impossible, the net move gives the same end state.
        """
        emptied = simulate_and_apply(self.simulator, market, -current_amount)
        if emptied is not None:
            result = self.simulator.simulate(emptied, target_amount)
        else:
            result = self.simulator.simulate(market.clone(), target_amount - current_amount)

        if result is None:
            return None, None
        return result.supply_apy, result.utilization


def compute_allocation(
    grouped_position: GroupedPosition,
    excluded_market_ids: Optional[Iterable[str]] = None,
    simulator: Optional[MarketSimulator] = None,
    rounds: int = DEFAULT_REBALANCE_ROUNDS,
) -> Optional[RebalanceResult]:
    """Convenience wrapper around SmartRebalancer.compute."""
    return SmartRebalancer(simulator=simulator, rounds=rounds).compute(
        grouped_position, excluded_market_ids
    )
