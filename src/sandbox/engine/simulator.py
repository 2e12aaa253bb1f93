"""Market state simulator for what-if supply and withdrawal previews."""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional, Protocol

from src.core.models import Market
from src.protocols.morpho.irm import AdaptiveCurveIRM
from src.sandbox.models.simulation import SimulationResult

logger = logging.getLogger(__name__)


class MarketSimulator(Protocol):
    """Anything that can preview a market after a signed capital delta."""

    def simulate(self, market: Market, delta: int) -> Optional[SimulationResult]:
        ...


class MarketStateSimulator:
    """
    Previews market state after a supply (positive delta) or withdrawal
    (negative delta) using the AdaptiveCurveIRM rate curve.

    The input market is never mutated. A simulation that cannot happen
    (no state, or pulling out more than the unborrowed liquidity) returns
    None instead of raising.
    """

    def __init__(self, irm: Optional[AdaptiveCurveIRM] = None):
        self.irm = irm or AdaptiveCurveIRM()

    def simulate(self, market: Market, delta: int) -> Optional[SimulationResult]:
        """
        Simulate a signed capital delta against a market.

        Args:
            market: Market to preview (left untouched)
            delta: Native-unit amount, positive to supply, negative to withdraw

        Returns:
            SimulationResult or None if the move is impossible
        """
        state = market.state
        if state is None:
            logger.debug(f"Market {market.id[:10]} has no state, cannot simulate")
            return None

        total_supply = state.total_supply_assets + delta
        if total_supply < 0 or total_supply < state.total_borrow_assets:
            logger.debug(
                f"Market {market.id[:10]}: delta {delta} exceeds liquidity {state.liquidity}"
            )
            return None

        if total_supply == 0:
            utilization = Decimal("0")
        else:
            utilization = Decimal(state.total_borrow_assets) / Decimal(total_supply)

        borrow_rate = self.irm.calculate_borrow_rate(utilization, market.rate_at_target)
        supply_rate = self.irm.calculate_supply_rate(utilization, borrow_rate, state.fee)

        return SimulationResult(
            supply_apy=self.irm.apr_to_apy(supply_rate),
            borrow_apy=self.irm.apr_to_apy(borrow_rate),
            utilization=utilization,
            total_supply_assets=total_supply,
            total_borrow_assets=state.total_borrow_assets,
            liquidity_assets=total_supply - state.total_borrow_assets,
        )


def apply_simulation(market: Market, result: SimulationResult) -> Market:
    """
    Build a new working copy of ``market`` reflecting a simulation result.

    Supply shares move proportionally with supplied assets so the share
    price is unchanged by the hypothetical deposit or withdrawal.
    """
    working = market.clone()
    state = working.state
    if state is not None:
        if state.total_supply_assets > 0:
            shares = state.total_supply_shares * result.total_supply_assets // state.total_supply_assets
        else:
            shares = result.total_supply_assets
        working.state = replace(
            state,
            total_supply_assets=result.total_supply_assets,
            total_supply_shares=shares,
            total_borrow_assets=result.total_borrow_assets,
        )
    working.supply_apy = result.supply_apy
    working.borrow_apy = result.borrow_apy
    return working


def simulate_and_apply(
    simulator: MarketSimulator,
    market: Market,
    delta: int,
) -> Optional[Market]:
    """Simulate ``delta`` and return the resulting working copy, or None."""
    result = simulator.simulate(market, delta)
    if result is None:
        return None
    return apply_simulation(market, result)
