"""User transaction models consumed by the earnings calculator."""

from dataclasses import dataclass
from enum import Enum


class TransactionType(Enum):
    """Types of user transactions in a lending market."""

    SUPPLY = "MarketSupply"
    WITHDRAW = "MarketWithdraw"
    BORROW = "MarketBorrow"
    REPAY = "MarketRepay"
    SUPPLY_COLLATERAL = "MarketSupplyCollateral"
    WITHDRAW_COLLATERAL = "MarketWithdrawCollateral"


@dataclass(frozen=True)
class UserTransaction:
    """A single user transaction against one market."""

    hash: str
    timestamp: int  # Unix seconds
    type: TransactionType
    market_id: str
    assets: int  # Native units, always non-negative

    def __post_init__(self):
        if self.assets < 0:
            raise ValueError(f"Transaction {self.hash} has negative assets: {self.assets}")

    @property
    def signed_supply_change(self) -> int:
        """Effect on the supplied balance: +assets for supply, -assets for withdraw."""
        if self.type == TransactionType.SUPPLY:
            return self.assets
        if self.type == TransactionType.WITHDRAW:
            return -self.assets
        return 0

    def __lt__(self, other):
        """Enable sorting by timestamp."""
        if isinstance(other, UserTransaction):
            return self.timestamp < other.timestamp
        return NotImplemented

    def to_dict(self) -> dict:
        return {
            "hash": self.hash,
            "timestamp": self.timestamp,
            "type": self.type.value,
            "market_id": self.market_id,
            "assets": str(self.assets),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserTransaction":
        return cls(
            hash=data.get("hash", ""),
            timestamp=int(data["timestamp"]),
            type=TransactionType(data["type"]),
            market_id=data["market_id"],
            assets=int(data["assets"]),
        )
