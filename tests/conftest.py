"""Pytest configuration and fixtures."""

import json

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from src.core.models import GroupedPosition, Market, MarketState, Position
from src.sandbox.engine import MarketStateSimulator
from src.sandbox.models import SimulationResult

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
WBTC = "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599"
USER = "0x1111111111111111111111111111111111111111"


def build_market(
    market_id: str = "0xc54d7acf14de29e0e5527cabd7a576506870346a78a11a6762e2cca66322ec41",
    total_supply: int = 10_000,
    total_borrow: int = 8_000,
    collateral_symbol: str = "WETH",
    collateral_asset: str = WETH,
    loan_asset: str = USDC,
    loan_symbol: str = "USDC",
    decimals: int = 6,
    chain_id: int = 1,
    rate_at_target: Decimal = Decimal("0.04"),
    fee: Decimal = Decimal("0"),
    with_state: bool = True,
) -> Market:
    """Create a market with an integer-unit state."""
    return Market(
        id=market_id,
        loan_asset=loan_asset,
        loan_asset_symbol=loan_symbol,
        loan_asset_decimals=decimals,
        collateral_asset=collateral_asset,
        collateral_asset_symbol=collateral_symbol,
        collateral_asset_decimals=18,
        lltv=Decimal("0.86"),
        oracle="0x48F7E36EB6B826B2dF4B2E630B62Cd25e89E40e2",
        irm="0x870aC11D48B15DB9a138Cf899d20F13F79Ba00BC",
        chain_id=chain_id,
        supply_apy=Decimal("0.03"),
        borrow_apy=Decimal("0.04"),
        rate_at_target=rate_at_target,
        state=MarketState(
            total_supply_assets=total_supply,
            total_supply_shares=total_supply,
            total_borrow_assets=total_borrow,
            total_borrow_shares=total_borrow,
            last_update=datetime.now(timezone.utc),
            fee=fee,
        ) if with_state else None,
    )


def build_position(market: Market, supply: int, user: str = USER) -> Position:
    return Position(market=market, user=user, supply_shares=supply, supply_assets=supply)


def build_group(*positions: Position) -> GroupedPosition:
    market = positions[0].market
    return GroupedPosition(
        loan_asset_address=market.loan_asset,
        loan_asset_symbol=market.loan_asset_symbol,
        loan_asset_decimals=market.loan_asset_decimals,
        chain_id=market.chain_id,
        positions=list(positions),
    )


class ConstantApySimulator:
    """Moves balances like the real simulator but always reports the same APY."""

    def __init__(self, apy: Decimal = Decimal("0.05")):
        self.apy = apy

    def simulate(self, market: Market, delta: int) -> Optional[SimulationResult]:
        state = market.state
        total_supply = state.total_supply_assets + delta
        if total_supply < state.total_borrow_assets:
            return None
        return SimulationResult(
            supply_apy=self.apy,
            borrow_apy=self.apy,
            utilization=Decimal(state.total_borrow_assets) / Decimal(total_supply) if total_supply else Decimal("0"),
            total_supply_assets=total_supply,
            total_borrow_assets=state.total_borrow_assets,
            liquidity_assets=total_supply - state.total_borrow_assets,
        )


@pytest.fixture
def simulator() -> MarketStateSimulator:
    return MarketStateSimulator()


@pytest.fixture
def sample_market() -> Market:
    """USDC market at 80% utilization."""
    return build_market()


@pytest.fixture
def twin_markets() -> tuple:
    """Two identical USDC markets differing only by id and collateral."""
    market_a = build_market(market_id="0x" + "a" * 64, collateral_symbol="WETH")
    market_b = build_market(market_id="0x" + "b" * 64, collateral_symbol="WBTC", collateral_asset=WBTC)
    return market_a, market_b


@pytest.fixture
def skewed_group() -> GroupedPosition:
    """
    Two USDC markets, one at 90% utilization and one at 50%.

    The user holds 100 USDC in the busy market and 500 USDC in the idle one.
    """
    busy = build_market(
        market_id="0x" + "1" * 64,
        total_supply=10_000 * 10**6,
        total_borrow=9_000 * 10**6,
        collateral_symbol="WETH",
    )
    idle = build_market(
        market_id="0x" + "2" * 64,
        total_supply=10_000 * 10**6,
        total_borrow=5_000 * 10**6,
        collateral_symbol="WBTC",
        collateral_asset=WBTC,
    )
    return build_group(
        build_position(busy, 100 * 10**6),
        build_position(idle, 500 * 10**6),
    )


@pytest.fixture
def make_market():
    """Factory for markets; see ``build_market`` for the keyword arguments."""
    return build_market


@pytest.fixture
def make_position():
    return build_position


@pytest.fixture
def make_group():
    return build_group


@pytest.fixture
def constant_simulator():
    """Factory for a simulator that reports a fixed APY."""
    return ConstantApySimulator


REPORT_START = 1_700_000_000
DAY = 86_400


def _market_json(market_id: str, collateral: str, collateral_symbol: str, borrow: int) -> dict:
    return {
        "id": market_id,
        "loan_asset": USDC,
        "loan_asset_symbol": "USDC",
        "loan_asset_decimals": 6,
        "collateral_asset": collateral,
        "collateral_asset_symbol": collateral_symbol,
        "collateral_asset_decimals": 18,
        "lltv": "0.86",
        "oracle": "0x48F7E36EB6B826B2dF4B2E630B62Cd25e89E40e2",
        "irm": "0x870aC11D48B15DB9a138Cf899d20F13F79Ba00BC",
        "supply_apy": "0.03",
        "rate_at_target": "0.04",
        "state": {
            "total_supply_assets": str(10_000 * 10**6),
            "total_borrow_assets": str(borrow),
            "fee": "0",
        },
    }


@pytest.fixture
def snapshot_data() -> dict:
    """
    Exported account snapshot with two USDC markets.

    Over the 30-day report window the user tops up 89 USDC in the busy
    market (earning 1 USDC) and opens a 495 USDC position in the idle
    market (earning 5 USDC).
    """
    busy_id = "0x" + "1" * 64
    idle_id = "0x" + "2" * 64
    return {
        "user": USER,
        "markets": [
            _market_json(busy_id, WETH, "WETH", 9_000 * 10**6),
            _market_json(idle_id, WBTC, "WBTC", 5_000 * 10**6),
        ],
        "positions": [
            {"market_id": busy_id, "supply_assets": str(100 * 10**6)},
            {"market_id": idle_id, "supply_assets": str(500 * 10**6)},
        ],
        "transactions": [
            {
                "hash": "0xt1",
                "timestamp": REPORT_START + DAY,
                "type": "MarketSupply",
                "market_id": busy_id,
                "assets": str(89 * 10**6),
            },
            {
                "hash": "0xt2",
                "timestamp": REPORT_START + 2 * DAY,
                "type": "MarketSupply",
                "market_id": idle_id,
                "assets": str(495 * 10**6),
            },
        ],
        "report": {
            "start": REPORT_START,
            "end": REPORT_START + 30 * DAY,
            "start_balances": {busy_id: str(10 * 10**6), idle_id: "0"},
            "end_balances": {busy_id: str(100 * 10**6), idle_id: str(500 * 10**6)},
        },
    }


@pytest.fixture
def snapshot_file(tmp_path, snapshot_data):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot_data))
    return path


@pytest.fixture
def exited_snapshot_data(snapshot_data) -> dict:
    """
    Same account, but the busy market is fully withdrawn on day 10.

    The position is closed at export time, yet it earned 1 USDC inside
    the report window.
    """
    busy_id = "0x" + "1" * 64
    snapshot_data["positions"][0] = {"market_id": busy_id, "supply_assets": "0", "supply_shares": "0"}
    snapshot_data["transactions"].append(
        {
            "hash": "0xt3",
            "timestamp": REPORT_START + 10 * DAY,
            "type": "MarketWithdraw",
            "market_id": busy_id,
            "assets": str(100 * 10**6),
        }
    )
    snapshot_data["report"]["end_balances"][busy_id] = "0"
    return snapshot_data


@pytest.fixture
def exited_snapshot_file(tmp_path, exited_snapshot_data):
    path = tmp_path / "exited.json"
    path.write_text(json.dumps(exited_snapshot_data))
    return path
