"""Rich renderables for rebalance results, pending queues and position reports."""

from decimal import Decimal
from typing import List

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from src.analytics.distribution import DistributionEntry
from src.core.models import ReportSummary
from src.protocols.morpho.irm import AdaptiveCurveIRM
from src.sandbox.engine.queue import PendingRebalanceQueue
from src.sandbox.models import RebalanceResult


def format_amount(value: int, decimals: int) -> str:
    """Native units to a readable token amount with thousands separators."""
    amount = Decimal(value) / Decimal(10 ** decimals)
    if abs(amount) >= 1:
        return f"{amount:,.2f}"
    return f"{amount:.6f}"


def format_apr(apy: Decimal) -> str:
    """Show an APY as its continuously compounded APR."""
    return f"{float(AdaptiveCurveIRM.apy_to_apr(apy)) * 100:.2f}%"


def format_pct(value: Decimal) -> str:
    return f"{float(value) * 100:.2f}%"


def format_days(seconds: int) -> str:
    return f"{seconds / 86400:.1f}"


def rebalance_table(result: RebalanceResult) -> Table:
    """Per-market current vs target allocation."""
    symbol = result.loan_asset_symbol
    decimals = result.loan_asset_decimals

    table = Table(
        show_header=True,
        header_style="bold orange1",
        border_style="dim",
        expand=True,
        padding=(0, 1),
    )
    table.add_column("Collateral", style="cyan")
    table.add_column("Current", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Delta", justify="right")
    table.add_column("Locked", justify="right", style="dim")
    table.add_column("Util Now", justify="right")
    table.add_column("Util After", justify="right")
    table.add_column("APR Now", justify="right")
    table.add_column("APR After", justify="right")
    table.add_column("Market", style="dim")

    for d in result.deltas:
        delta = Text(f"{'+' if d.delta >= 0 else '-'}{format_amount(abs(d.delta), decimals)}")
        delta.stylize("green" if d.delta > 0 else "red" if d.delta < 0 else "dim")
        table.add_row(
            d.collateral_symbol,
            f"{format_amount(d.current_amount, decimals)} {symbol}",
            f"{format_amount(d.target_amount, decimals)} {symbol}",
            delta,
            format_amount(d.locked_amount, decimals),
            format_pct(d.current_utilization),
            format_pct(d.projected_utilization),
            format_apr(d.current_apy),
            format_apr(d.projected_apy),
            f"{d.market.id[:10]}...",
        )

    return table


def rebalance_panel(result: RebalanceResult) -> Panel:
    """Rebalance table plus the weighted APR summary line."""
    symbol = result.loan_asset_symbol
    decimals = result.loan_asset_decimals

    header = Text()
    header.append(f"{symbol}  ", style="bold cyan")
    header.append("Total: ", style="dim")
    header.append(f"{format_amount(result.total_assets, decimals)} {symbol}")
    header.append("  Movable: ", style="dim")
    header.append(f"{format_amount(result.total_rebalanceable, decimals)} {symbol}")

    current_apr = AdaptiveCurveIRM.apy_to_apr(result.current_weighted_apy)
    projected_apr = AdaptiveCurveIRM.apy_to_apr(result.projected_weighted_apy)
    diff = projected_apr - current_apr

    footer = Text()
    footer.append("Weighted APR: ", style="dim")
    footer.append(f"{format_apr(result.current_weighted_apy)} -> {format_apr(result.projected_weighted_apy)}")
    footer.append(f"  ({'+' if diff >= 0 else ''}{float(diff) * 100:.4f}%)", style="green" if diff >= 0 else "red")
    footer.append("  Moved: ", style="dim")
    footer.append(f"{format_amount(result.total_moved, decimals)} {symbol}")
    footer.append("  Fee: ", style="dim")
    footer.append(f"{format_amount(result.fee_amount, decimals)} {symbol}")

    return Panel(
        Group(header, rebalance_table(result), footer),
        title="[bold orange1]Smart Rebalance[/]",
        border_style="dim",
    )


def queue_table(queue: PendingRebalanceQueue) -> Table:
    """Staged instructions in submission order."""
    group = queue.grouped_position
    table = Table(show_header=True, header_style="bold orange1", border_style="dim")
    table.add_column("#", justify="right", style="dim")
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Max", justify="center")

    for i, action in enumerate(queue.actions):
        table.add_row(
            str(i),
            f"{action.from_market.unique_key[:10]}...",
            f"{action.to_market.unique_key[:10]}...",
            f"{format_amount(action.amount, group.loan_asset_decimals)} {group.loan_asset_symbol}",
            "yes" if action.is_max else "",
        )
    return table


def report_table(summary: ReportSummary, decimals: int, symbol: str) -> Table:
    """Per-market realized performance over the report window."""
    table = Table(
        show_header=True,
        header_style="bold orange1",
        border_style="dim",
        expand=True,
        title=f"Report: {format_days(summary.period)} days",
    )
    table.add_column("Market", style="cyan")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Deposits", justify="right")
    table.add_column("Withdraws", justify="right")
    table.add_column("Avg Capital", justify="right")
    table.add_column("Days", justify="right")
    table.add_column("Earned", justify="right", style="green")
    table.add_column("APY", justify="right")

    for report in summary.market_reports:
        e = report.earnings
        table.add_row(
            report.market.name,
            format_amount(report.start_balance, decimals),
            format_amount(report.end_balance, decimals),
            format_amount(e.total_deposits, decimals),
            format_amount(e.total_withdraws, decimals),
            format_amount(e.avg_capital, decimals),
            format_days(e.effective_time),
            format_amount(e.earned, decimals),
            format_pct(e.apy) if e.has_annualized_return else "N/A",
        )

    grouped = summary.grouped_earnings
    table.add_section()
    table.add_row(
        Text("Total", style="bold"),
        "",
        "",
        format_amount(summary.total_deposits, decimals),
        format_amount(summary.total_withdraws, decimals),
        format_amount(grouped.avg_capital, decimals),
        format_days(grouped.effective_time),
        f"{format_amount(summary.total_interest_earned, decimals)} {symbol}",
        format_pct(grouped.apy) if grouped.has_annualized_return else "N/A",
    )
    return table


def distribution_table(entries: List[DistributionEntry]) -> Table:
    """Time-weighted capital share per market."""
    table = Table(show_header=True, header_style="bold orange1", border_style="dim", title="Time-weighted Distribution")
    table.add_column("Market", style="cyan")
    table.add_column("Share", justify="right")

    for entry in entries:
        table.add_row(Text(entry.label, style="dim" if entry.is_other else ""), f"{entry.percentage:.2f}%")
    return table
