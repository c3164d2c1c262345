"""Account records and pool-wide state."""
from typing import Optional, Dict, Set
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LOCK_DURATION = 14 * 24 * 3600  # 14 days


class Account(BaseModel):
    """Per-participant bookkeeping."""
    model_config = ConfigDict(validate_assignment=True)

    staked_balance: int = Field(default=0, ge=0)
    stake_timestamp: Optional[int] = None  # None until the first stake
    funded_balance: int = Field(default=0, ge=0)
    yield_balance: int = Field(default=0, ge=0)

    @property
    def is_staking(self) -> bool:
        return self.staked_balance > 0

    @property
    def is_betting(self) -> bool:
        return self.funded_balance > 0


class PoolState(BaseModel):
    """Everything the pool owns, serialisable as one document."""
    model_config = ConfigDict(validate_assignment=True)

    accounts: Dict[str, Account] = {}
    total_staked: int = Field(default=0, ge=0)
    lock_duration: int = Field(default=DEFAULT_LOCK_DURATION, ge=0)
    active_stakers: Set[str] = set()
    undistributed: int = Field(default=0, ge=0)  # dust plus funding nobody was staking for
    total_funded: int = Field(default=0, ge=0)
    total_yield_withdrawn: int = Field(default=0, ge=0)

    def account(self, identity: str) -> Account:
        """Get the record for ``identity``, creating it on first touch."""
        if identity not in self.accounts:
            self.accounts[identity] = Account()
        return self.accounts[identity]

    def peek(self, identity: str) -> Account:
        """Read a record without creating it."""
        return self.accounts.get(identity) or Account()

    def total_yield_owed(self) -> int:
        return sum(a.yield_balance for a in self.accounts.values())
