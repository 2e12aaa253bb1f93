"""Position data models for user positions in Morpho Blue markets."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from .market import Market


@dataclass
class Position:
    """User position in a Morpho Blue market."""

    market: Market
    user: str  # Wallet address

    # Supply position (native units)
    supply_shares: int = 0
    supply_assets: int = 0

    # Borrow position
    borrow_shares: int = 0
    borrow_assets: int = 0

    # Collateral
    collateral: int = 0

    @property
    def market_id(self) -> str:
        return self.market.id

    @property
    def is_supplier(self) -> bool:
        """Check if user is a supplier."""
        return self.supply_assets > 0

    @property
    def is_borrower(self) -> bool:
        """Check if user is a borrower."""
        return self.borrow_assets > 0

    def __hash__(self):
        return hash((self.market.id, self.user))

    def __eq__(self, other):
        if isinstance(other, Position):
            return self.market.id == other.market.id and self.user == other.user
        return False


@dataclass
class CollateralShare:
    """Supplied amount attributed to one collateral asset."""

    address: str
    symbol: str
    amount: Decimal  # Token units (decimals applied)
    percentage: Decimal = Decimal("0")


@dataclass
class GroupedPosition:
    """All positions of a user sharing one loan asset on one chain."""

    loan_asset_address: str
    loan_asset_symbol: str
    loan_asset_decimals: int
    chain_id: int
    positions: List[Position] = field(default_factory=list)
    collaterals: List[CollateralShare] = field(default_factory=list)
    processed_collaterals: List[CollateralShare] = field(default_factory=list)

    def __post_init__(self):
        for position in self.positions:
            self._check_member(position)

    def _check_member(self, position: Position) -> None:
        market = position.market
        if (
            market.loan_asset.lower() != self.loan_asset_address.lower()
            or market.loan_asset_decimals != self.loan_asset_decimals
            or market.chain_id != self.chain_id
        ):
            raise ValueError(
                f"Position in {market.id} does not belong to group "
                f"{self.loan_asset_symbol} on chain {self.chain_id}"
            )

    def add(self, position: Position) -> None:
        """Add a position, enforcing the shared loan asset and chain."""
        self._check_member(position)
        self.positions.append(position)

    @property
    def total_supply(self) -> int:
        """Total supplied assets in native units."""
        return sum(p.supply_assets for p in self.positions)

    @property
    def total_supply_tokens(self) -> Decimal:
        """Total supplied assets in token units."""
        return Decimal(self.total_supply) / Decimal(10 ** self.loan_asset_decimals)

    @property
    def weighted_apy(self) -> Decimal:
        """Asset-weighted average supply APY of all positions."""
        total = self.total_supply
        if total == 0:
            return Decimal("0")
        weighted = sum(Decimal(p.supply_assets) * p.market.supply_apy for p in self.positions)
        return weighted / Decimal(total)
