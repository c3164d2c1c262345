"""Error kinds raised by the staking pool."""
from enum import Enum
from typing import Optional, Dict, Any


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced by pool operations."""
    ZERO_AMOUNT = "ZeroAmount"
    INVALID_AMOUNT = "InvalidAmount"
    LOCK_ACTIVE = "LockActive"
    ZERO_YIELD = "ZeroYield"
    INSUFFICIENT_ALLOWANCE = "InsufficientAllowance"
    INSUFFICIENT_BALANCE = "InsufficientBalance"


class PoolError(Exception):
    """Base error for every rejected pool operation.

    Args:
        message: Human readable description
        account: Account the operation was attempted for
        amount: Amount the caller attempted to move
        limit: The bound that was violated (balance, allowance, unlock time)
    """
    kind: ErrorKind
    default_message = "pool operation failed"

    def __init__(self, message: Optional[str] = None, account: Optional[str] = None,
                 amount: Optional[int] = None, limit: Optional[int] = None):
        self.account = account
        self.amount = amount
        self.limit = limit
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return self.args[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "account": self.account,
            "amount": self.amount,
            "limit": self.limit,
        }

    def __repr__(self):
        return (
            f"{type(self).__name__}(kind={self.kind.value}, account={self.account!r}, "
            f"amount={self.amount}, limit={self.limit})"
        )


class ZeroAmountError(PoolError):
    kind = ErrorKind.ZERO_AMOUNT
    default_message = "You cannot stake zero tokens"


class InvalidAmountError(PoolError):
    kind = ErrorKind.INVALID_AMOUNT
    default_message = "You cannot unstake zero tokens"


class LockActiveError(PoolError):
    """Unstake attempted before the lock elapsed; ``limit`` is the unlock instant."""
    kind = ErrorKind.LOCK_ACTIVE
    default_message = "unstake not yet due"


class ZeroYieldError(PoolError):
    kind = ErrorKind.ZERO_YIELD
    default_message = "You cannot withdraw zero tokens"


class InsufficientAllowanceError(PoolError):
    kind = ErrorKind.INSUFFICIENT_ALLOWANCE
    default_message = "insufficient allowance"


class InsufficientBalanceError(PoolError):
    kind = ErrorKind.INSUFFICIENT_BALANCE
    default_message = "transfer amount exceeds balance"


class InvariantViolation(AssertionError):
    """Raised when the pool's bookkeeping no longer balances."""
    pass


class CommitError(Exception):
    """The operation took effect, but the commit hook failed afterwards.

    The pool state and the token ledger already reflect the operation; only
    the post-commit step (typically persistence) did not complete.
    """
    pass


def check_amount(amount) -> None:
    """Reject amounts that are not whole token units."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"Amount must be an integer number of token units, got {amount!r}")
