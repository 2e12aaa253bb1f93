"""Grouping of user positions by loan asset and chain."""

from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from src.core.models import (
    CollateralShare,
    EarningsPeriod,
    GroupedPosition,
    Position,
    PositionEarnings,
)


def group_positions_by_loan_asset(
    positions: List[Position],
    earnings: Optional[Dict[str, PositionEarnings]] = None,
    include_closed: bool = False,
) -> List[GroupedPosition]:
    """
    Group positions sharing a loan asset and chain.

    A position is kept if it still holds supply shares or has non-zero
    lifetime earnings (a closed position that earned something stays
    visible). With ``include_closed`` every position is kept, which the
    window report needs for markets exited inside the window. Groups are
    ordered by total supply, largest first.
    """
    earnings = earnings or {}
    groups: Dict[Tuple[str, int], GroupedPosition] = {}

    for position in positions:
        market = position.market
        lifetime = earnings.get(market.id)
        lifetime_earned = lifetime.earned(EarningsPeriod.ALL) if lifetime else 0
        if not include_closed and position.supply_shares <= 0 and not lifetime_earned:
            continue

        key = (market.loan_asset.lower(), market.chain_id)
        group = groups.get(key)
        if group is None:
            group = GroupedPosition(
                loan_asset_address=market.loan_asset,
                loan_asset_symbol=market.loan_asset_symbol or "Unknown",
                loan_asset_decimals=market.loan_asset_decimals,
                chain_id=market.chain_id,
            )
            groups[key] = group
        group.add(position)

        if market.collateral_asset and market.collateral_asset_symbol:
            amount = Decimal(position.supply_assets) / Decimal(10 ** market.loan_asset_decimals)
            existing = next(
                (c for c in group.collaterals if c.address == market.collateral_asset), None
            )
            if existing:
                existing.amount += amount
            else:
                group.collaterals.append(
                    CollateralShare(
                        address=market.collateral_asset,
                        symbol=market.collateral_asset_symbol,
                        amount=amount,
                    )
                )

    return sorted(groups.values(), key=lambda g: g.total_supply_tokens, reverse=True)


def process_collaterals(
    grouped_positions: List[GroupedPosition],
    threshold_pct: Decimal = Decimal("5"),
) -> List[GroupedPosition]:
    """Fill ``processed_collaterals``, folding collaterals under the threshold into "Others"."""
    for group in grouped_positions:
        total = sum((c.amount for c in group.collaterals), Decimal("0"))
        processed: List[CollateralShare] = []
        others = Decimal("0")

        if total > 0:
            for collateral in sorted(group.collaterals, key=lambda c: c.amount, reverse=True):
                percentage = collateral.amount / total * 100
                if percentage >= threshold_pct:
                    processed.append(
                        CollateralShare(
                            address=collateral.address,
                            symbol=collateral.symbol,
                            amount=collateral.amount,
                            percentage=percentage,
                        )
                    )
                else:
                    others += collateral.amount

        if others > 0:
            processed.append(
                CollateralShare(
                    address="others",
                    symbol="Others",
                    amount=others,
                    percentage=others / total * 100,
                )
            )
        group.processed_collaterals = processed

    return grouped_positions
