"""Integration tests walking a pool through its whole lifecycle."""
import pytest
from stakepool.core import (
    InsufficientAllowanceError,
    InsufficientBalanceError,
    InvalidAmountError,
    LockActiveError,
    ZeroAmountError,
    ZeroYieldError,
)

DAY = 86400
START = 25_000


class TestLifecycle:
    """Staking, unstaking, funding and withdrawal in one shared pool."""

    @pytest.fixture(autouse=True)
    def setup(self, pool, ledger, approve, clock):
        self.pool = pool
        self.ledger = ledger
        self.approve = approve
        self.clock = clock

    def _stake_round(self):
        for name in ("alice", "bob", "dave"):
            self.approve(name, 100)
        assert not self.pool.is_staking("alice")
        for name in ("alice", "bob", "dave"):
            self.pool.stake(name, 100)
        self.approve("eve", 100)
        self.pool.stake("eve", 100)

    def test_staking(self):
        """Test stakes update mappings, move tokens and reject bad input."""
        self._stake_round()
        assert self.pool.staking_balance("alice") == 100
        assert self.pool.is_staking("alice")
        assert self.ledger.balance_of("alice") == START - 100
        assert self.pool.total_pool_staked_balance() == 400

        with pytest.raises(ZeroAmountError):
            self.pool.stake("bob", 0)
        with pytest.raises(InsufficientAllowanceError):
            self.pool.stake("bob", 50)
        self.approve("bob", 1_000_000)
        with pytest.raises(InsufficientBalanceError):
            self.pool.stake("bob", 1_000_000)
        assert self.pool.total_pool_staked_balance() == 400
        self.pool.check_invariants()

    def test_unstaking(self):
        """Test the lock, amount checks and a full exit."""
        self._stake_round()
        with pytest.raises(LockActiveError):
            self.pool.unstake("eve", 50)

        self.clock.advance(15 * DAY)
        with pytest.raises(InvalidAmountError):
            self.pool.unstake("eve", 500)
        with pytest.raises(InvalidAmountError):
            self.pool.unstake("eve", 0)

        self.pool.unstake("eve", self.pool.staking_balance("eve"))
        assert self.pool.total_pool_staked_balance() == self.pool.pool_balance()
        assert not self.pool.is_staking("eve")
        assert self.pool.staking_balance("eve") == 0
        assert self.ledger.balance_of("eve") == START
        self.pool.check_invariants()

    def test_funding_and_withdrawal(self):
        """Test funding distributes to stakers who can then withdraw."""
        self._stake_round()
        self.clock.advance(15 * DAY)
        self.pool.unstake("eve", 100)

        self.approve("dave", 1003)
        assert not self.pool.is_betting("dave")
        self.pool.fund_account("dave", 1000)
        assert self.pool.betting_balance("dave") == 1000
        assert self.pool.is_betting("dave")
        assert self.pool.yield_balance("bob") == 333
        assert self.pool.yield_balance("eve") == 0

        with pytest.raises(ZeroAmountError):
            self.pool.fund_account("carol", 0)
        assert not self.pool.is_betting("carol")

        assert self.pool.withdraw_yield("bob") == 333
        assert self.pool.yield_balance("bob") == 0
        with pytest.raises(ZeroYieldError):
            self.pool.withdraw_yield("carol")
        self.pool.check_invariants()


def test_three_stakers_share_funding(pool, staked, approve):
    """Three stakers of 100 each receive 333 of a 1000 funding."""
    staked(alice=100, bob=100, carol=100)
    assert pool.total_pool_staked_balance() == 300
    approve("dave", 1000)
    distribution = pool.fund_account("dave", 1000)

    for name in ("alice", "bob", "carol"):
        assert pool.yield_balance(name) == 333
    assert distribution.dust == 1
    assert pool.state.undistributed == 1
    pool.check_invariants()


def test_early_unstake_is_rejected(pool, staked, clock):
    staked(alice=100)
    clock.advance(pool.state.lock_duration - 1)
    with pytest.raises(LockActiveError):
        pool.unstake("alice", 50)
    assert pool.staking_balance("alice") == 100


def test_unstake_after_lock(pool, staked, clock):
    staked(alice=100, bob=50)
    clock.advance(pool.state.lock_duration)
    with pytest.raises(InvalidAmountError):
        pool.unstake("alice", 500)
    pool.unstake("alice", 100)
    assert pool.staking_balance("alice") == 0
    assert not pool.is_staking("alice")
    assert pool.total_pool_staked_balance() == 50


def test_withdraw_twice(pool, staked, approve, ledger):
    staked(alice=100, bob=100, carol=100)
    approve("dave", 1000)
    pool.fund_account("dave", 1000)

    before = ledger.balance_of("alice")
    assert pool.withdraw_yield("alice") == 333
    assert ledger.balance_of("alice") == before + 333
    assert pool.yield_balance("alice") == 0
    with pytest.raises(ZeroYieldError):
        pool.withdraw_yield("alice")


def test_funding_without_stakers(pool, approve):
    """Funding an empty pool is recorded but credits nobody."""
    approve("dave", 1000)
    distribution = pool.fund_account("dave", 1000)
    assert distribution.shares == {}
    assert pool.betting_balance("dave") == 1000
    assert pool.yield_balance("dave") == 0
    assert pool.pool_balance() == 1000
    pool.check_invariants()


def test_conservation_across_mixed_operations(pool, staked, approve, clock, ledger):
    """Total token supply and pool books stay exact through a busy sequence."""
    supply = ledger.total_supply()
    staked(alice=70, bob=130)
    approve("dave", 10_000)
    pool.fund_account("dave", 777)
    staked(carol=333)
    pool.fund_account("dave", 1001)
    clock.advance(pool.state.lock_duration)
    pool.unstake("bob", 30)
    pool.withdraw_yield("alice")
    pool.fund_account("dave", 5)
    pool.withdraw_yield("carol")

    pool.check_invariants()
    assert ledger.total_supply() == supply
    assert pool.state.total_funded == 777 + 1001 + 5
    assert (pool.state.total_funded
            == pool.state.total_yield_owed() + pool.state.total_yield_withdrawn + pool.state.undistributed)
