"""Accrued yield and its withdrawal."""
from loguru import logger

from .accounts import PoolState
from .errors import ZeroYieldError
from .token import TokenLedger


class YieldLedger:
    """Pays out the yield credited by distribution."""

    def __init__(self, state: PoolState, ledger: TokenLedger, pool_account: str):
        self.state = state
        self.ledger = ledger
        self.pool_account = pool_account

    def withdraw_yield(self, account: str) -> int:
        """Send ``account`` its whole yield balance and zero it.

        Returns:
            Amount paid out

        Raises:
            ZeroYieldError: nothing has accrued
        """
        owed = self.state.peek(account).yield_balance
        if owed == 0:
            raise ZeroYieldError(account=account, amount=0)

        self.ledger.transfer(self.pool_account, account, owed)

        self.state.account(account).yield_balance = 0
        self.state.total_yield_withdrawn += owed
        logger.info(f"{account} withdrew {owed} yield")
        return owed
