"""Single entry point that serialises every pool operation."""
import threading
from contextlib import contextmanager
from typing import Callable, List, Optional
from loguru import logger

from .accounts import Account, PoolState
from .clock import Clock, SystemClock
from .config import PoolConfig
from .distributor import Distribution, RewardDistributor
from .errors import CommitError, PoolError, InvariantViolation
from .registry import StakeRegistry
from .token import TokenLedger
from .yield_ledger import YieldLedger


class PoolController:
    """Stake, fund and yield operations over one pool.

    Every operation runs under a single re-entrant lock, so no caller can
    observe another operation half applied. Each component validates and
    calls the token ledger before it touches state, which means a rejected
    operation leaves the state exactly as it found it.
    """

    def __init__(self,
                 ledger: TokenLedger,
                 config: Optional[PoolConfig] = None,
                 clock: Optional[Clock] = None,
                 state: Optional[PoolState] = None,
                 on_commit: Optional[Callable[[PoolState], None]] = None):
        """Initialize the pool.

        Args:
            ledger: Token ledger holding the underlying balances
            config: Pool configuration (pool identity, lock duration)
            clock: Time source for lock checks, defaults to wall time
            state: Previously persisted state to resume from
            on_commit: Called with the state after every successful operation;
                a failure there raises CommitError after the operation took effect
        """
        self.config = config or PoolConfig()
        self.ledger = ledger
        self.clock = clock or SystemClock()
        self.pool_account = self.config.pool_account
        self.state = state if state is not None else PoolState(lock_duration=self.config.lock_duration)
        self.on_commit = on_commit
        self._lock = threading.RLock()

        self.registry = StakeRegistry(self.state, ledger, self.pool_account, self.clock)
        self.distributor = RewardDistributor(self.state, ledger, self.pool_account)
        self.yields = YieldLedger(self.state, ledger, self.pool_account)

    @contextmanager
    def _operation(self, name: str, account: str):
        with self._lock:
            try:
                yield
            except PoolError as e:
                logger.warning(f"{name} rejected for {account}: {e.kind.value} ({e})")
                raise
            if self.on_commit:
                try:
                    self.on_commit(self.state)
                except Exception as e:
                    logger.error(f"{name} for {account} applied but commit hook failed: {e}")
                    raise CommitError(f"{name} applied but commit hook failed: {e}") from e

    # Operations

    def stake(self, account: str, amount: int) -> None:
        with self._operation("stake", account):
            self.registry.stake(account, amount)

    def unstake(self, account: str, amount: int) -> None:
        with self._operation("unstake", account):
            self.registry.unstake(account, amount)

    def fund_account(self, account: str, amount: int) -> Distribution:
        with self._operation("fund", account):
            return self.distributor.fund_account(account, amount)

    def withdraw_yield(self, account: str) -> int:
        with self._operation("withdraw_yield", account):
            return self.yields.withdraw_yield(account)

    # Queries

    def staking_balance(self, account: str) -> int:
        with self._lock:
            return self.state.peek(account).staked_balance

    def is_staking(self, account: str) -> bool:
        with self._lock:
            return self.state.peek(account).is_staking

    def total_pool_staked_balance(self) -> int:
        with self._lock:
            return self.state.total_staked

    def betting_balance(self, account: str) -> int:
        with self._lock:
            return self.state.peek(account).funded_balance

    def is_betting(self, account: str) -> bool:
        with self._lock:
            return self.state.peek(account).is_betting

    def yield_balance(self, account: str) -> int:
        with self._lock:
            return self.state.peek(account).yield_balance

    def account_info(self, account: str) -> Account:
        """Copy of the full record; mutating it does not touch the pool."""
        with self._lock:
            return self.state.peek(account).model_copy()

    def lock_expires_at(self, account: str) -> Optional[int]:
        with self._lock:
            return self.registry.lock_expires_at(account)

    def stakers(self) -> List[str]:
        with self._lock:
            return self.registry.stakers()

    def pool_balance(self) -> int:
        """Tokens the ledger says the pool holds."""
        return self.ledger.balance_of(self.pool_account)

    def check_invariants(self) -> None:
        """Verify the pool's books against themselves and the ledger.

        Raises:
            InvariantViolation: any identity does not hold
        """
        with self._lock:
            state = self.state
            summed = sum(a.staked_balance for a in state.accounts.values())
            if summed != state.total_staked:
                raise InvariantViolation(
                    f"total_staked {state.total_staked} != sum of stakes {summed}"
                )

            staking = {name for name, a in state.accounts.items() if a.is_staking}
            if staking != state.active_stakers:
                raise InvariantViolation(
                    f"active staker index {sorted(state.active_stakers)} != {sorted(staking)}"
                )

            expected = state.total_staked + state.total_yield_owed() + state.undistributed
            held = self.pool_balance()
            if held != expected:
                raise InvariantViolation(
                    f"pool holds {held} but books account for {expected}"
                )
