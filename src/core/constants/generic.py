"""Generic constants for lending protocol calculations.

These constants are protocol-agnostic and can be used across different protocols.
"""

# Time constants
SECONDS_PER_DAY = 24 * 3600
SECONDS_PER_YEAR = 365 * SECONDS_PER_DAY  # 31,536,000

# Greedy allocator granularity
DEFAULT_REBALANCE_ROUNDS = 20

# Rebalance fee is expressed in tenths of a basis point
FEE_BPS_DENOMINATOR = 100_000
