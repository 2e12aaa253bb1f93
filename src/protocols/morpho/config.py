"""AdaptiveCurveIRM curve parameters (all rates are APRs)."""

from decimal import Decimal

# Utilization the curve pivots around
TARGET_UTILIZATION = Decimal("0.9")

# Rate at 100% utilization divided by the rate at target
CURVE_STEEPNESS = Decimal("4")

# Bounds enforced on rateAtTarget by the contract
MIN_RATE_AT_TARGET = Decimal("0.001")
MAX_RATE_AT_TARGET = Decimal("2.0")

# rateAtTarget of a market that has never been touched
INITIAL_RATE_AT_TARGET = Decimal("0.04")
