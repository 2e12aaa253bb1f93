"""Core constants module.

Re-exports all constants for convenience. Rate-model parameters live in
src.protocols.morpho.config.
"""

from src.core.constants.generic import (
    SECONDS_PER_DAY,
    SECONDS_PER_YEAR,
    DEFAULT_REBALANCE_ROUNDS,
    FEE_BPS_DENOMINATOR,
)

__all__ = [
    "SECONDS_PER_DAY",
    "SECONDS_PER_YEAR",
    "DEFAULT_REBALANCE_ROUNDS",
    "FEE_BPS_DENOMINATOR",
]
