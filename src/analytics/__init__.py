"""Realized yield analytics for supply positions."""

from .earnings import compute_earnings, filter_transactions_in_period
from .report import (
    calculate_period_earnings,
    get_earnings_for_period,
    get_grouped_earnings,
    build_position_report,
)
from .positions import group_positions_by_loan_asset, process_collaterals
from .distribution import DistributionEntry, time_weighted_distribution

__all__ = [
    "compute_earnings",
    "filter_transactions_in_period",
    "calculate_period_earnings",
    "get_earnings_for_period",
    "get_grouped_earnings",
    "build_position_report",
    "group_positions_by_loan_asset",
    "process_collaterals",
    "DistributionEntry",
    "time_weighted_distribution",
]
