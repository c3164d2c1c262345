"""Accounting core for the stake pool."""
from .accounts import Account, PoolState, DEFAULT_LOCK_DURATION
from .clock import Clock, SystemClock, ManualClock
from .config import PoolConfig, load_config
from .controller import PoolController
from .distributor import Distribution, RewardDistributor
from .errors import (
    ErrorKind,
    PoolError,
    CommitError,
    ZeroAmountError,
    InvalidAmountError,
    LockActiveError,
    ZeroYieldError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    InvariantViolation,
)
from .registry import StakeRegistry
from .storage import PoolStore, StorageError
from .token import TokenLedger, InMemoryTokenLedger
from .yield_ledger import YieldLedger
