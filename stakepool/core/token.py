"""Fungible token ledger the pool moves balances through."""
from abc import ABC, abstractmethod
from typing import Dict, Any, Tuple
from loguru import logger

from .errors import InsufficientAllowanceError, InsufficientBalanceError, check_amount


class TokenLedger(ABC):
    """Interface the pool expects from the underlying token."""

    @abstractmethod
    def transfer_from(self, holder: str, recipient: str, amount: int) -> None:
        """Move ``amount`` from ``holder`` to ``recipient`` using the recipient's allowance.

        Raises:
            InsufficientAllowanceError: recipient may not spend that much
            InsufficientBalanceError: holder does not own that much
        """
        pass

    @abstractmethod
    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move ``amount`` owned by ``sender`` to ``recipient``.

        Raises:
            InsufficientBalanceError: sender does not own that much
        """
        pass

    @abstractmethod
    def balance_of(self, account: str) -> int:
        pass

    @abstractmethod
    def approve(self, owner: str, spender: str, amount: int) -> None:
        pass

    @abstractmethod
    def allowance(self, owner: str, spender: str) -> int:
        pass


class InMemoryTokenLedger(TokenLedger):
    """ERC20-style ledger kept in process memory."""

    def __init__(self):
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}

    def mint(self, account: str, amount: int) -> None:
        """Issue new supply to an account."""
        check_amount(amount)
        if amount <= 0:
            raise ValueError("Mint amount must be positive")
        self._balances[account] = self._balances.get(account, 0) + amount
        logger.debug(f"Minted {amount} to {account}")

    def total_supply(self) -> int:
        return sum(self._balances.values())

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        check_amount(amount)
        if amount < 0:
            raise ValueError("Allowance cannot be negative")
        self._allowances[(owner, spender)] = amount
        logger.debug(f"{owner} approved {spender} for {amount}")

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        self._move(sender, recipient, amount)

    def transfer_from(self, holder: str, recipient: str, amount: int) -> None:
        check_amount(amount)
        allowed = self.allowance(holder, recipient)
        if amount > allowed:
            raise InsufficientAllowanceError(account=holder, amount=amount, limit=allowed)
        self._move(holder, recipient, amount)
        self._allowances[(holder, recipient)] = allowed - amount

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        check_amount(amount)
        if amount < 0:
            raise ValueError("Transfer amount cannot be negative")
        available = self.balance_of(sender)
        if amount > available:
            raise InsufficientBalanceError(account=sender, amount=amount, limit=available)
        self._balances[sender] = available - amount
        self._balances[recipient] = self.balance_of(recipient) + amount

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data copy of balances and allowances for persistence."""
        return {
            "balances": dict(self._balances),
            "allowances": [
                {"owner": owner, "spender": spender, "amount": amount}
                for (owner, spender), amount in self._allowances.items()
            ],
        }

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any]) -> "InMemoryTokenLedger":
        ledger = cls()
        ledger._balances = {k: int(v) for k, v in data.get("balances", {}).items()}
        for entry in data.get("allowances", []):
            ledger._allowances[(entry["owner"], entry["spender"])] = int(entry["amount"])
        return ledger
