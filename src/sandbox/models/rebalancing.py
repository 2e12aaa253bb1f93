"""Supply rebalancing models."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from src.core.constants import FEE_BPS_DENOMINATOR
from src.core.models import Market


@dataclass(frozen=True)
class LiquidityClassification:
    """Split of a supplied balance into what can and cannot leave the market now."""

    locked: int
    withdrawable: int

    @property
    def total(self) -> int:
        return self.locked + self.withdrawable


@dataclass
class MarketDelta:
    """Allocator output for a single market."""

    market: Market
    current_amount: int
    target_amount: int
    locked_amount: int

    # Rates
    current_apy: Decimal
    projected_apy: Decimal
    current_utilization: Decimal = Decimal("0")
    projected_utilization: Decimal = Decimal("0")

    collateral_symbol: str = "N/A"

    @property
    def delta(self) -> int:
        """Signed move: positive = inflow, negative = withdrawal."""
        return self.target_amount - self.current_amount

    def to_dict(self) -> dict:
        return {
            "market_id": self.market.id,
            "collateral_symbol": self.collateral_symbol,
            "current_amount": str(self.current_amount),
            "target_amount": str(self.target_amount),
            "delta": str(self.delta),
            "locked_amount": str(self.locked_amount),
            "current_apy": str(self.current_apy),
            "projected_apy": str(self.projected_apy),
            "current_utilization": str(self.current_utilization),
            "projected_utilization": str(self.projected_utilization),
        }


@dataclass
class RebalanceResult:
    """Complete result of a smart rebalance computation for one grouped position."""

    deltas: List[MarketDelta]
    total_assets: int
    total_rebalanceable: int
    current_weighted_apy: Decimal
    projected_weighted_apy: Decimal

    loan_asset_symbol: str = ""
    loan_asset_decimals: int = 18
    fee_tenths_bps: int = 10

    @property
    def total_moved(self) -> int:
        """Capital leaving its current market (sum of negative deltas)."""
        return sum(-d.delta for d in self.deltas if d.delta < 0)

    @property
    def fee_amount(self) -> int:
        """Fee charged on moved capital."""
        return self.total_moved * self.fee_tenths_bps // FEE_BPS_DENOMINATOR

    @property
    def apy_improvement(self) -> Decimal:
        return self.projected_weighted_apy - self.current_weighted_apy

    def delta_for(self, market_id: str) -> Optional[MarketDelta]:
        for d in self.deltas:
            if d.market.id == market_id:
                return d
        return None

    def to_dict(self) -> dict:
        return {
            "deltas": [d.to_dict() for d in self.deltas],
            "total_assets": str(self.total_assets),
            "total_rebalanceable": str(self.total_rebalanceable),
            "current_weighted_apy": str(self.current_weighted_apy),
            "projected_weighted_apy": str(self.projected_weighted_apy),
            "total_moved": str(self.total_moved),
            "fee_amount": str(self.fee_amount),
            "loan_asset_symbol": self.loan_asset_symbol,
            "loan_asset_decimals": self.loan_asset_decimals,
        }


@dataclass(frozen=True)
class MarketParams:
    """Identifiers needed to address a market on-chain."""

    loan_token: str
    collateral_token: str
    oracle: str
    irm: str
    lltv: Decimal
    unique_key: str

    @classmethod
    def from_market(cls, market: Market) -> "MarketParams":
        return cls(
            loan_token=market.loan_asset,
            collateral_token=market.collateral_asset,
            oracle=market.oracle,
            irm=market.irm,
            lltv=market.lltv,
            unique_key=market.id,
        )


@dataclass(frozen=True)
class RebalanceAction:
    """A staged, not-yet-executed move of capital between two markets."""

    from_market: MarketParams
    to_market: MarketParams
    amount: int
    is_max: bool = False

    def to_dict(self) -> dict:
        return {
            "from_market": self.from_market.unique_key,
            "to_market": self.to_market.unique_key,
            "amount": str(self.amount),
            "is_max": self.is_max,
        }


@dataclass
class BatchedTransfer:
    """Aggregated amount to withdraw from, or supply to, one market."""

    market: MarketParams
    amount: int
    actions: List[RebalanceAction] = field(default_factory=list)
