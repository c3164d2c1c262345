"""Test configuration and fixtures for Stake Pool."""
import pytest
from stakepool.core import InMemoryTokenLedger, ManualClock, PoolConfig, PoolController

LOCK_DURATION = 14 * 24 * 3600
START_BALANCE = 25_000
ACCOUNTS = ["owner", "alice", "bob", "carol", "dave", "eve"]


@pytest.fixture
def clock():
    """Controllable clock starting at a fixed instant."""
    return ManualClock(start=1_700_000_000)


@pytest.fixture
def ledger():
    """Token ledger with every test account holding the same balance."""
    ledger = InMemoryTokenLedger()
    for account in ACCOUNTS:
        ledger.mint(account, START_BALANCE)
    return ledger


@pytest.fixture
def config(tmp_path):
    return PoolConfig(lock_duration=LOCK_DURATION, state_dir=tmp_path)


@pytest.fixture
def pool(ledger, config, clock):
    """Pool controller wired to the test ledger and clock."""
    return PoolController(ledger, config=config, clock=clock)


@pytest.fixture
def approve(ledger, pool):
    """Approve the pool to spend on an account's behalf."""
    def _approve(account, amount):
        ledger.approve(account, pool.pool_account, amount)
    return _approve


@pytest.fixture
def staked(pool, approve):
    """Stake a given amount for each account."""
    def _staked(**positions):
        for account, amount in positions.items():
            approve(account, amount)
            pool.stake(account, amount)
    return _staked
