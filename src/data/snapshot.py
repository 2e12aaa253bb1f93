"""Load a saved account snapshot (markets, positions, transactions) from JSON."""

import json
import logging
from dataclasses import dataclass, field
from decimal import InvalidOperation
from pathlib import Path
from typing import Dict, List, Union

from src.core.models import Market, Position, UserTransaction

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Snapshot file is missing, unreadable or malformed."""


@dataclass
class AccountSnapshot:
    """Everything the engine needs about one account, as exported by the data layer."""

    user: str
    markets: Dict[str, Market]
    positions: List[Position]
    transactions: List[UserTransaction] = field(default_factory=list)
    start_balances: Dict[str, int] = field(default_factory=dict)
    end_balances: Dict[str, int] = field(default_factory=dict)
    start_timestamp: int = 0
    end_timestamp: int = 0


def parse_snapshot(data: dict) -> AccountSnapshot:
    """Build an AccountSnapshot from decoded JSON."""
    try:
        markets = {m["id"]: Market.from_dict(m) for m in data.get("markets", [])}
        user = data.get("user", "")

        positions = []
        for raw in data.get("positions", []):
            market = markets.get(raw["market_id"])
            if market is None:
                raise SnapshotError(f"Position references unknown market {raw['market_id']}")
            positions.append(
                Position(
                    market=market,
                    user=user,
                    supply_shares=int(raw.get("supply_shares", raw.get("supply_assets", 0))),
                    supply_assets=int(raw.get("supply_assets", 0)),
                    borrow_shares=int(raw.get("borrow_shares", 0)),
                    borrow_assets=int(raw.get("borrow_assets", 0)),
                    collateral=int(raw.get("collateral", 0)),
                )
            )

        transactions = [UserTransaction.from_dict(tx) for tx in data.get("transactions", [])]
        report = data.get("report", {})
        return AccountSnapshot(
            user=user,
            markets=markets,
            positions=positions,
            transactions=transactions,
            start_balances={k: int(v) for k, v in report.get("start_balances", {}).items()},
            end_balances={k: int(v) for k, v in report.get("end_balances", {}).items()},
            start_timestamp=int(report.get("start", 0)),
            end_timestamp=int(report.get("end", 0)),
        )
    except SnapshotError:
        raise
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise SnapshotError(f"Malformed snapshot: {e}") from e


def load_snapshot(path: Union[str, Path]) -> AccountSnapshot:
    """Read and parse a snapshot file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Invalid JSON in {path}: {e}") from e

    snapshot = parse_snapshot(data)
    logger.info(
        f"Loaded snapshot for {snapshot.user or 'unknown user'}: "
        f"{len(snapshot.markets)} markets, {len(snapshot.positions)} positions, "
        f"{len(snapshot.transactions)} transactions"
    )
    return snapshot
