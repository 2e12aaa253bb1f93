"""Liquidity-lock classification of supplied positions."""

from typing import Iterable, List, Optional

from src.core.models import Market, Position
from src.sandbox.models.rebalancing import LiquidityClassification


def classify_locked(position: Position, market: Optional[Market] = None) -> LiquidityClassification:
    """
    Split a supplied balance into withdrawable and locked capital.

    locked = max(0, user_supply - market_liquidity)
    withdrawable = user_supply - locked

    Capital above the market's unborrowed liquidity cannot be pulled out
    right now and has to stay where it is.

    Args:
        position: User position
        market: Fresh market snapshot (defaults to ``position.market``)

    Returns:
        LiquidityClassification
    """
    market = market or position.market
    user_supply = position.supply_assets
    if user_supply < 0:
        raise ValueError(f"Negative supply for position in {market.id}: {user_supply}")

    locked = max(0, user_supply - market.liquidity)
    return LiquidityClassification(locked=locked, withdrawable=user_supply - locked)


def eligible_positions(
    positions: Iterable[Position],
    excluded_market_ids: Optional[Iterable[str]] = None,
) -> List[Position]:
    """Positions with a positive supply in markets not explicitly excluded."""
    excluded = set(excluded_market_ids or ())
    return [
        p for p in positions
        if p.supply_assets > 0 and p.market.id not in excluded
    ]
