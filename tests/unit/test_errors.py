"""Unit tests for pool error kinds."""
from stakepool.core import (
    ErrorKind,
    PoolError,
    LockActiveError,
    InvalidAmountError,
    ZeroAmountError,
    ZeroYieldError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
)


def test_every_kind_has_an_error():
    kinds = {cls.kind for cls in (
        ZeroAmountError, InvalidAmountError, LockActiveError, ZeroYieldError,
        InsufficientAllowanceError, InsufficientBalanceError,
    )}
    assert kinds == set(ErrorKind)


def test_structured_context():
    """Test errors carry account, amount and limit."""
    error = LockActiveError(account="eve", amount=50, limit=1_209_600)
    assert isinstance(error, PoolError)
    assert error.to_dict() == {
        "kind": "LockActive",
        "message": "unstake not yet due",
        "account": "eve",
        "amount": 50,
        "limit": 1_209_600,
    }


def test_custom_message():
    error = ZeroAmountError("You cannot fund zero tokens", account="carol", amount=0)
    assert str(error) == "You cannot fund zero tokens"
    assert error.kind == ErrorKind.ZERO_AMOUNT
    assert "carol" in repr(error)
