"""Pending queue of manually staged rebalance instructions."""

import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple

from src.core.models import GroupedPosition, Market
from src.sandbox.models.rebalancing import BatchedTransfer, MarketParams, RebalanceAction

logger = logging.getLogger(__name__)


class RejectionReason(Enum):
    """Why a staged instruction was refused."""

    MISSING_FIELDS = "missing_fields"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_MARKET = "invalid_market"
    INSUFFICIENT_BALANCE = "insufficient_balance"


class InvalidInstructionError(ValueError):
    """A rebalance instruction failed validation. The queue is unchanged."""

    def __init__(self, reason: RejectionReason, message: str):
        super().__init__(message)
        self.reason = reason


class PendingRebalanceQueue:
    """
    Staged (fromMarket, toMarket, amount) moves for one grouped position.

    A market's pending delta is what queued instructions would add to it
    (as destination) minus what they would take from it (as source).
    Withdrawals are validated against the balance the user would hold after
    the already-queued moves, not the raw on-chain balance.

    The action list is replaced on every change, never mutated in place.
    """

    def __init__(self, grouped_position: GroupedPosition):
        self.grouped_position = grouped_position
        self._actions: Tuple[RebalanceAction, ...] = ()

    @property
    def actions(self) -> Tuple[RebalanceAction, ...]:
        return self._actions

    def __len__(self) -> int:
        return len(self._actions)

    @property
    def total_amount(self) -> int:
        """Sum of all staged amounts."""
        return sum(a.amount for a in self._actions)

    def current_balance(self, market_id: str) -> int:
        """On-chain supplied balance of the grouped position in ``market_id``."""
        for position in self.grouped_position.positions:
            if position.market.id == market_id:
                return position.supply_assets
        return 0

    def pending_delta_for(self, market_id: str) -> int:
        """Signed net effect of queued instructions on ``market_id``."""
        delta = 0
        for action in self._actions:
            if action.from_market.unique_key == market_id:
                delta -= action.amount
            if action.to_market.unique_key == market_id:
                delta += action.amount
        return delta

    def available_balance(self, market_id: str) -> int:
        """Balance left in ``market_id`` after all queued instructions execute."""
        return self.current_balance(market_id) + self.pending_delta_for(market_id)

    def add_instruction(
        self,
        from_market: Optional[Market],
        to_market: Optional[Market],
        amount: Optional[int] = None,
        use_max: bool = False,
    ) -> RebalanceAction:
        """
        Validate and stage a move.

        Args:
            from_market: Source market
            to_market: Destination market
            amount: Native-unit amount (ignored when ``use_max`` is set)
            use_max: Move everything still available in the source market

        Returns:
            The staged RebalanceAction

        Raises:
            InvalidInstructionError: if validation fails
        """
        if use_max and from_market is not None:
            amount = self.available_balance(from_market.id)

        missing = []
        if from_market is None:
            missing.append('"From Market"')
        if to_market is None:
            missing.append('"To Market"')
        if amount is None:
            missing.append('"Amount"')
        if missing:
            raise InvalidInstructionError(
                RejectionReason.MISSING_FIELDS, f"Missing fields: {', '.join(missing)}"
            )

        if amount <= 0:
            raise InvalidInstructionError(
                RejectionReason.INVALID_AMOUNT, "Amount must be greater than zero"
            )

        for label, market in (('"From" Market', from_market), ('"To" Market', to_market)):
            if not self._is_eligible(market):
                raise InvalidInstructionError(
                    RejectionReason.INVALID_MARKET,
                    f"Invalid {label}: {market.id} is not a "
                    f"{self.grouped_position.loan_asset_symbol} market on chain {self.grouped_position.chain_id}",
                )

        available = self.available_balance(from_market.id)
        if amount > available:
            raise InvalidInstructionError(
                RejectionReason.INSUFFICIENT_BALANCE,
                f"Insufficient balance: requested {amount}, available {available}",
            )

        action = RebalanceAction(
            from_market=MarketParams.from_market(from_market),
            to_market=MarketParams.from_market(to_market),
            amount=amount,
            is_max=amount == available,
        )
        self._actions = self._actions + (action,)
        logger.debug(f"Queued {amount} from {from_market.id[:10]} to {to_market.id[:10]}")
        return action

    def remove_instruction(self, index: int) -> RebalanceAction:
        """Drop the staged action at ``index`` and return it."""
        if not 0 <= index < len(self._actions):
            raise IndexError(f"No pending instruction at index {index}")
        removed = self._actions[index]
        self._actions = tuple(a for i, a in enumerate(self._actions) if i != index)
        return removed

    def clear(self) -> None:
        self._actions = ()

    def batched_withdrawals(self) -> List[BatchedTransfer]:
        """One withdrawal per source market, in first-seen order."""
        return self._batch(lambda a: a.from_market)

    def batched_supplies(self) -> List[BatchedTransfer]:
        """One supply per destination market, in first-seen order."""
        return self._batch(lambda a: a.to_market)

    def _batch(self, key) -> List[BatchedTransfer]:
        batches: Dict[str, BatchedTransfer] = {}
        for action in self._actions:
            params = key(action)
            batch = batches.get(params.unique_key)
            if batch is None:
                batch = BatchedTransfer(market=params, amount=0)
                batches[params.unique_key] = batch
            batch.amount += action.amount
            batch.actions.append(action)
        return list(batches.values())

    def _is_eligible(self, market: Market) -> bool:
        group = self.grouped_position
        return (
            market.loan_asset.lower() == group.loan_asset_address.lower()
            and market.chain_id == group.chain_id
        )
