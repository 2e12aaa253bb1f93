"""Command-line interface for the rebalancing and reporting engine."""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from config.settings import Settings, get_settings
from src.analytics import (
    build_position_report,
    group_positions_by_loan_asset,
    process_collaterals,
    time_weighted_distribution,
)
from src.core.models import Position
from src.data.snapshot import AccountSnapshot, SnapshotError, load_snapshot
from src.sandbox.engine import SmartRebalancer
from src.ui.console import distribution_table, rebalance_panel, report_table

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="lending-rebalancer",
        description="Smart rebalancing and yield reports for lending market positions",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LOG_LEVEL setting)",
    )

    sub = parser.add_subparsers(dest="command")

    rebalance = sub.add_parser("rebalance", help="Propose a yield-maximizing reallocation")
    rebalance.add_argument("snapshot", help="Path to an account snapshot JSON file")
    rebalance.add_argument(
        "--exclude",
        nargs="*",
        default=[],
        metavar="MARKET_ID",
        help="Market ids to leave out of the rebalance",
    )
    rebalance.add_argument(
        "--rounds",
        type=int,
        default=None,
        help="Greedy allocation rounds (overrides REBALANCE_ROUNDS)",
    )

    report = sub.add_parser("report", help="Realized earnings over the snapshot's report window")
    report.add_argument("snapshot", help="Path to an account snapshot JSON file")

    return parser


def run_rebalance(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    """Print a rebalance proposal per loan asset group."""
    snapshot = load_snapshot(args.snapshot)
    groups = process_collaterals(group_positions_by_loan_asset(snapshot.positions))
    if not groups:
        console.print("[dim]No supply positions found[/]")
        return 0

    if args.rounds is not None:
        settings = settings.model_copy(update={"rebalance_rounds": args.rounds})
    rebalancer = SmartRebalancer.from_settings(settings)
    excluded = settings.excluded_market_set | set(args.exclude)

    for group in groups:
        result = rebalancer.compute(group, excluded)
        if result is None:
            console.print(f"[yellow]{group.loan_asset_symbol}: no rebalance possible[/]")
            continue
        console.print(rebalance_panel(result))
    return 0


def report_positions(snapshot: AccountSnapshot) -> List[Position]:
    """
    Snapshot positions plus an empty position for every market that only
    shows up in the transaction log, so markets exited before the export
    are still reported.
    """
    positions = list(snapshot.positions)
    known = {p.market_id for p in positions}
    for tx in snapshot.transactions:
        market = snapshot.markets.get(tx.market_id)
        if tx.market_id in known or market is None:
            continue
        positions.append(Position(market=market, user=snapshot.user))
        known.add(tx.market_id)
    return positions


def run_report(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    """Print the realized earnings report per loan asset group."""
    snapshot = load_snapshot(args.snapshot)
    if snapshot.end_timestamp <= 0:
        console.print("[red]Snapshot has no report window[/]")
        return 1

    for group in group_positions_by_loan_asset(report_positions(snapshot), include_closed=True):
        member_ids = {p.market_id for p in group.positions}
        summary = build_position_report(
            group.positions,
            [tx for tx in snapshot.transactions if tx.market_id in member_ids],
            snapshot.start_balances,
            snapshot.end_balances,
            snapshot.start_timestamp,
            snapshot.end_timestamp,
            settings.seconds_per_year,
        )
        if not summary.market_reports:
            console.print(f"[dim]{group.loan_asset_symbol}: no activity in window[/]")
            continue

        console.print(report_table(summary, group.loan_asset_decimals, group.loan_asset_symbol))
        entries = time_weighted_distribution(summary.market_reports, settings.report_max_distribution_items)
        if entries:
            console.print(distribution_table(entries))
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    settings = get_settings()
    logging.basicConfig(
        level=args.log_level or settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    console = Console()

    try:
        if args.command == "rebalance":
            code = run_rebalance(args, settings, console)
        else:
            code = run_report(args, settings, console)
    except (SnapshotError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    sys.exit(code)
