"""Time-weighted capital distribution across markets."""

from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from src.core.models import PositionReport


@dataclass
class DistributionEntry:
    """One slice of the time-weighted capital distribution."""

    key: str
    label: str
    percentage: float
    avg_capital: Optional[int] = None
    is_other: bool = False


def _display_names(reports: List[PositionReport]) -> Dict[str, str]:
    """Collateral symbol, disambiguated with a key prefix when symbols repeat."""
    counts: Dict[str, int] = {}
    for report in reports:
        symbol = report.market.collateral_asset_symbol or "Unknown"
        counts[symbol] = counts.get(symbol, 0) + 1

    names = {}
    for report in reports:
        symbol = report.market.collateral_asset_symbol or "Unknown"
        if counts[symbol] > 1:
            names[report.market.id] = f"{symbol} ({report.market.id[:8]}...)"
        else:
            names[report.market.id] = symbol
    return names


def time_weighted_distribution(
    reports: List[PositionReport],
    max_items: int = 6,
) -> List[DistributionEntry]:
    """
    Share of time-weighted capital (avg capital x effective time) per market.

    Markets are ordered by weight. Beyond ``max_items`` the tail is folded
    into a single "Other" entry.
    """
    if max_items < 2:
        raise ValueError(f"max_items must be at least 2, got {max_items}")

    weighted = [
        (report, report.earnings.avg_capital * report.earnings.effective_time)
        for report in reports
    ]
    weighted = [(r, w) for r, w in weighted if w > 0]
    if not weighted:
        return []
    weighted.sort(key=lambda item: item[1], reverse=True)

    weights = np.array([float(w) for _, w in weighted])
    shares = weights / weights.sum() * 100.0

    names = _display_names([r for r, _ in weighted])
    entries = [
        DistributionEntry(
            key=report.market.id,
            label=names[report.market.id],
            percentage=float(share),
            avg_capital=report.earnings.avg_capital,
        )
        for (report, _), share in zip(weighted, shares)
    ]

    if len(entries) <= max_items:
        return entries

    head = entries[: max_items - 1]
    other_pct = float(np.sum(shares[max_items - 1:]))
    return head + [DistributionEntry(key="other", label="Other", percentage=other_pct, is_other=True)]
