"""Market simulation result models."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class SimulationResult:
    """Market state after a hypothetical supply or withdrawal."""

    supply_apy: Decimal
    borrow_apy: Decimal
    utilization: Decimal
    total_supply_assets: int
    total_borrow_assets: int
    liquidity_assets: int

    def to_dict(self) -> dict:
        return {
            "supply_apy": str(self.supply_apy),
            "borrow_apy": str(self.borrow_apy),
            "utilization": str(self.utilization),
            "total_supply_assets": str(self.total_supply_assets),
            "total_borrow_assets": str(self.total_borrow_assets),
            "liquidity_assets": str(self.liquidity_assets),
        }
