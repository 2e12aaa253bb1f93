"""Market and MarketState data models."""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class MarketState:
    """Current state of a Morpho Blue market. Amounts are in native units."""

    total_supply_assets: int
    total_supply_shares: int
    total_borrow_assets: int
    total_borrow_shares: int
    last_update: Optional[datetime] = None
    fee: Decimal = Decimal("0")  # Protocol fee rate

    @property
    def utilization(self) -> Decimal:
        """Calculate current utilization rate."""
        if self.total_supply_assets == 0:
            return Decimal("0")
        return Decimal(self.total_borrow_assets) / Decimal(self.total_supply_assets)

    @property
    def liquidity(self) -> int:
        """Assets that can be withdrawn or borrowed right now."""
        return max(0, self.total_supply_assets - self.total_borrow_assets)

    def clone(self) -> "MarketState":
        """Independent copy for what-if simulation."""
        return replace(self)

    @classmethod
    def from_dict(cls, data: dict) -> "MarketState":
        return cls(
            total_supply_assets=int(data["total_supply_assets"]),
            total_supply_shares=int(data.get("total_supply_shares", data["total_supply_assets"])),
            total_borrow_assets=int(data["total_borrow_assets"]),
            total_borrow_shares=int(data.get("total_borrow_shares", data["total_borrow_assets"])),
            fee=Decimal(str(data.get("fee", "0"))),
        )


@dataclass
class Market:
    """Morpho Blue market representation."""

    id: str  # Unique market identifier (hash)
    loan_asset: str  # Loan token address
    loan_asset_symbol: str
    loan_asset_decimals: int
    collateral_asset: str  # Collateral token address
    collateral_asset_symbol: str
    collateral_asset_decimals: int
    lltv: Decimal  # Liquidation LTV
    oracle: str  # Oracle address
    irm: str  # Interest Rate Model address
    chain_id: int = 1

    # Current rates (APY)
    supply_apy: Decimal = Decimal("0")
    borrow_apy: Decimal = Decimal("0")
    rate_at_target: Decimal = Decimal("0")

    # Current state
    state: Optional[MarketState] = None

    @property
    def name(self) -> str:
        """Human-readable market name."""
        return f"{self.collateral_asset_symbol}/{self.loan_asset_symbol}"

    @property
    def utilization(self) -> Decimal:
        """Get current utilization from state."""
        if self.state:
            return self.state.utilization
        return Decimal("0")

    @property
    def liquidity(self) -> int:
        """Available (unborrowed) liquidity in native units."""
        if self.state:
            return self.state.liquidity
        return 0

    def clone(self) -> "Market":
        """
        Return a working copy whose state can be replaced freely.

        Identity fields are immutable strings/Decimals so a shallow copy is
        enough once the state is copied too.
        """
        return replace(self, state=self.state.clone() if self.state else None)

    @classmethod
    def from_dict(cls, data: dict) -> "Market":
        state = data.get("state")
        return cls(
            id=data["id"],
            loan_asset=data["loan_asset"],
            loan_asset_symbol=data.get("loan_asset_symbol", ""),
            loan_asset_decimals=int(data.get("loan_asset_decimals", 18)),
            collateral_asset=data.get("collateral_asset", ""),
            collateral_asset_symbol=data.get("collateral_asset_symbol", ""),
            collateral_asset_decimals=int(data.get("collateral_asset_decimals", 18)),
            lltv=Decimal(str(data.get("lltv", "0"))),
            oracle=data.get("oracle", ""),
            irm=data.get("irm", ""),
            chain_id=int(data.get("chain_id", 1)),
            supply_apy=Decimal(str(data.get("supply_apy", "0"))),
            borrow_apy=Decimal(str(data.get("borrow_apy", "0"))),
            rate_at_target=Decimal(str(data.get("rate_at_target", "0"))),
            state=MarketState.from_dict(state) if state else None,
        )

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Market):
            return self.id == other.id
        return False
