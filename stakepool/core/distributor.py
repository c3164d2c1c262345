"""Funding deposits and their pro-rata distribution to stakers."""
from dataclasses import dataclass, field
from typing import Dict
from loguru import logger

from .accounts import PoolState
from .errors import ZeroAmountError, check_amount
from .token import TokenLedger


@dataclass
class Distribution:
    """Outcome of splitting one funding amount across stakers."""
    amount: int
    total_staked: int
    shares: Dict[str, int] = field(default_factory=dict)

    @property
    def distributed(self) -> int:
        return sum(self.shares.values())

    @property
    def dust(self) -> int:
        return self.amount - self.distributed


class RewardDistributor:
    """Accepts funding and credits each active staker's yield."""

    def __init__(self, state: PoolState, ledger: TokenLedger, pool_account: str):
        self.state = state
        self.ledger = ledger
        self.pool_account = pool_account

    def fund_account(self, account: str, amount: int) -> Distribution:
        """Pull ``amount`` from ``account`` and distribute it as yield.

        Raises:
            ZeroAmountError: amount is zero
            TypeError: amount is not an integer
            InsufficientAllowanceError: pool is not approved for amount
            InsufficientBalanceError: account does not hold amount
        """
        check_amount(amount)
        if amount <= 0:
            raise ZeroAmountError("You cannot fund zero tokens", account=account, amount=amount)

        self.ledger.transfer_from(account, self.pool_account, amount)

        record = self.state.account(account)
        record.funded_balance += amount
        self.state.total_funded += amount
        logger.info(f"{account} funded {amount} (cumulative {record.funded_balance})")
        return self.distribute(amount)

    def distribute(self, amount: int) -> Distribution:
        """Credit ``floor(amount * stake / total_staked)`` to every active staker.

        Shares are computed from a snapshot of the balances taken before any
        credit, so iteration order does not matter. The truncated remainder
        stays in the pool as undistributed.
        """
        check_amount(amount)
        total = self.state.total_staked
        result = Distribution(amount=amount, total_staked=total)
        if total == 0:
            self.state.undistributed += amount
            logger.warning(f"No active stakers; {amount} retained by the pool")
            return result

        snapshot = {
            staker: self.state.accounts[staker].staked_balance
            for staker in self.state.active_stakers
        }
        for staker, balance in snapshot.items():
            share = amount * balance // total
            if share:
                self.state.accounts[staker].yield_balance += share
            result.shares[staker] = share

        self.state.undistributed += result.dust
        logger.info(
            f"Distributed {result.distributed} of {amount} across {len(snapshot)} stakers "
            f"(dust {result.dust})"
        )
        return result
