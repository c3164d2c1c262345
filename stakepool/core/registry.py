"""Stake bookkeeping and the holding-period lock."""
from typing import List, Optional
from loguru import logger

from .accounts import PoolState
from .clock import Clock
from .errors import ZeroAmountError, InvalidAmountError, LockActiveError, check_amount
from .token import TokenLedger


class StakeRegistry:
    """Tracks staked balances, stake times and the active-staker index."""

    def __init__(self, state: PoolState, ledger: TokenLedger, pool_account: str, clock: Clock):
        self.state = state
        self.ledger = ledger
        self.pool_account = pool_account
        self.clock = clock

    def stake(self, account: str, amount: int) -> None:
        """Pull ``amount`` into the pool and add it to ``account``'s position.

        A further stake on a live position restarts the lock for the whole
        position.

        Raises:
            ZeroAmountError: amount is zero
            TypeError: amount is not an integer
            InsufficientAllowanceError: pool is not approved for amount
            InsufficientBalanceError: account does not hold amount
        """
        check_amount(amount)
        if amount <= 0:
            raise ZeroAmountError(account=account, amount=amount)

        self.ledger.transfer_from(account, self.pool_account, amount)

        record = self.state.account(account)
        record.staked_balance += amount
        record.stake_timestamp = self.clock()
        self.state.total_staked += amount
        self.state.active_stakers.add(account)
        logger.info(
            f"{account} staked {amount} (position {record.staked_balance}, "
            f"pool total {self.state.total_staked})"
        )

    def unstake(self, account: str, amount: int) -> None:
        """Return ``amount`` of ``account``'s stake once the lock has elapsed.

        Raises:
            LockActiveError: position is younger than the lock duration
            InvalidAmountError: amount is zero or exceeds the staked balance
        """
        check_amount(amount)
        record = self.state.peek(account)
        now = self.clock()
        if record.stake_timestamp is not None and now - record.stake_timestamp < self.state.lock_duration:
            raise LockActiveError(
                account=account, amount=amount,
                limit=record.stake_timestamp + self.state.lock_duration
            )
        if amount <= 0 or amount > record.staked_balance:
            raise InvalidAmountError(account=account, amount=amount, limit=record.staked_balance)

        self.ledger.transfer(self.pool_account, account, amount)

        record = self.state.account(account)
        record.staked_balance -= amount
        self.state.total_staked -= amount
        if not record.is_staking:
            self.state.active_stakers.discard(account)
        logger.info(
            f"{account} unstaked {amount} (position {record.staked_balance}, "
            f"pool total {self.state.total_staked})"
        )

    def lock_expires_at(self, account: str) -> Optional[int]:
        """Instant from which ``account`` may unstake, or None if never staked."""
        timestamp = self.state.peek(account).stake_timestamp
        if timestamp is None:
            return None
        return timestamp + self.state.lock_duration

    def stakers(self) -> List[str]:
        return sorted(self.state.active_stakers)
