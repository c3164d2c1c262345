"""Stake Pool CLI."""
import sys
from datetime import datetime
from typing import Optional
import click
from loguru import logger

from .core.accounts import PoolState
from .core.clock import SystemClock
from .core.config import PoolConfig, load_config
from .core.controller import PoolController
from .core.errors import CommitError, PoolError, InvariantViolation
from .core.storage import PoolStore, StorageError
from .core.token import InMemoryTokenLedger


def configure_logging(level: str) -> None:
    """Route loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{level: <8}</level> | {message}")


class PoolSession:
    """Loads the persisted pool for a command and saves it back on commit."""

    def __init__(self, config: PoolConfig):
        self.config = config
        self.store = PoolStore(config.state_dir)
        self.ledger: Optional[InMemoryTokenLedger] = None

    def open(self) -> PoolController:
        ctx = click.get_current_context()
        try:
            loaded = self.store.load()
        except StorageError as e:
            logger.error(str(e))
            ctx.exit(1)
        if loaded is None:
            logger.error("No pool found. Run 'stake-pool init' first.")
            ctx.exit(1)

        state, self.ledger = loaded
        return PoolController(
            self.ledger,
            config=self.config,
            clock=SystemClock(),
            state=state,
            on_commit=lambda committed: self.store.save(committed, self.ledger),
        )


def _fail(action: str, error: PoolError) -> None:
    logger.error(f"{action} failed: {error.kind.value}: {error}")
    click.get_current_context().exit(1)


@click.group()
@click.version_option(package_name="stake-pool")
@click.option('--state-dir', type=click.Path(file_okay=False), help='Directory holding pool state')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help='YAML configuration file')
@click.pass_context
def cli(ctx, state_dir: Optional[str], config_path: Optional[str]):
    """Stake Pool CLI for time-locked staking and yield distribution."""
    config = load_config(config_path, state_dir)
    configure_logging(config.log_level)
    ctx.obj = PoolSession(config)


@cli.command()
@click.option('--lock-duration', type=click.IntRange(min=0), help='Seconds a stake stays locked')
@click.option('--force', is_flag=True, help='Replace an existing pool')
@click.pass_obj
def init(session: PoolSession, lock_duration: Optional[int], force: bool):
    """Create a new, empty pool."""
    if session.store.exists() and not force:
        logger.error(f"A pool already exists at {session.store.path}. Use --force to replace it.")
        click.get_current_context().exit(1)

    duration = session.config.lock_duration if lock_duration is None else lock_duration
    session.store.save(PoolState(lock_duration=duration), InMemoryTokenLedger())
    click.echo(f"Pool deployed to: {session.store.path}")
    click.echo(f"Pool account: {session.config.pool_account}")
    click.echo(f"Lock duration: {duration}s")


@cli.command()
@click.argument('account')
@click.argument('amount', type=click.IntRange(min=1))
@click.pass_obj
def mint(session: PoolSession, account: str, amount: int):
    """Issue tokens to an account."""
    controller = session.open()
    session.ledger.mint(account, amount)
    session.store.save(controller.state, session.ledger)
    click.echo(f"Issued {amount} tokens to {account}")


@cli.command()
@click.argument('account')
@click.argument('amount', type=click.IntRange(min=0))
@click.pass_obj
def approve(session: PoolSession, account: str, amount: int):
    """Allow the pool to pull AMOUNT from ACCOUNT."""
    controller = session.open()
    session.ledger.approve(account, controller.pool_account, amount)
    session.store.save(controller.state, session.ledger)
    click.echo(f"{account} approved {controller.pool_account} for {amount}")


@cli.command()
@click.argument('account')
@click.argument('amount', type=int)
@click.pass_obj
def stake(session: PoolSession, account: str, amount: int):
    """Stake AMOUNT tokens from ACCOUNT."""
    controller = session.open()
    try:
        controller.stake(account, amount)
    except PoolError as e:
        _fail("Stake", e)
    except CommitError as e:
        logger.error(str(e))
        click.get_current_context().exit(1)
    click.echo(f"Staked {amount}. Position: {controller.staking_balance(account)}")
    unlock = controller.lock_expires_at(account)
    click.echo(f"Unlocks at: {datetime.fromtimestamp(unlock).strftime('%Y-%m-%d %H:%M')}")


@cli.command()
@click.argument('account')
@click.argument('amount', type=int)
@click.pass_obj
def unstake(session: PoolSession, account: str, amount: int):
    """Return AMOUNT staked tokens to ACCOUNT."""
    controller = session.open()
    try:
        controller.unstake(account, amount)
    except PoolError as e:
        _fail("Unstake", e)
    except CommitError as e:
        logger.error(str(e))
        click.get_current_context().exit(1)
    click.echo(f"Unstaked {amount}. Position: {controller.staking_balance(account)}")


@cli.command()
@click.argument('account')
@click.argument('amount', type=int)
@click.pass_obj
def fund(session: PoolSession, account: str, amount: int):
    """Fund the pool; AMOUNT is shared across current stakers."""
    controller = session.open()
    try:
        distribution = controller.fund_account(account, amount)
    except PoolError as e:
        _fail("Fund", e)
    except CommitError as e:
        logger.error(str(e))
        click.get_current_context().exit(1)
    click.echo(f"Funded {amount} from {account}")
    click.echo(f"Distributed {distribution.distributed} to {len(distribution.shares)} stakers "
               f"(undistributed {distribution.dust})")


@cli.command('withdraw-yield')
@click.argument('account')
@click.pass_obj
def withdraw_yield(session: PoolSession, account: str):
    """Withdraw all yield accrued by ACCOUNT."""
    controller = session.open()
    try:
        paid = controller.withdraw_yield(account)
    except PoolError as e:
        _fail("Withdraw", e)
    except CommitError as e:
        logger.error(str(e))
        click.get_current_context().exit(1)
    click.echo(f"Withdrew {paid} yield to {account}")


@cli.command()
@click.argument('account')
@click.pass_obj
def balance(session: PoolSession, account: str):
    """Show token and pool balances for ACCOUNT."""
    controller = session.open()
    info = controller.account_info(account)

    click.echo(f"\nAccount: {account}")
    click.echo("-" * 40)
    click.echo(f"{'Token balance':<20}{session.ledger.balance_of(account):>20}")
    click.echo(f"{'Allowance':<20}{session.ledger.allowance(account, controller.pool_account):>20}")
    click.echo(f"{'Staked':<20}{info.staked_balance:>20}")
    click.echo(f"{'Staking':<20}{str(info.is_staking):>20}")
    click.echo(f"{'Funded':<20}{info.funded_balance:>20}")
    click.echo(f"{'Betting':<20}{str(info.is_betting):>20}")
    click.echo(f"{'Yield':<20}{info.yield_balance:>20}")
    unlock = controller.lock_expires_at(account)
    if unlock is not None:
        click.echo(f"{'Unlocks at':<20}{datetime.fromtimestamp(unlock).strftime('%Y-%m-%d %H:%M'):>20}")


@cli.command()
@click.pass_obj
def status(session: PoolSession):
    """Show pool totals and verify the books balance."""
    controller = session.open()
    state = controller.state

    click.echo("\nPool Status:")
    click.echo("-" * 40)
    click.echo(f"{'Pool holdings':<20}{controller.pool_balance():>20}")
    click.echo(f"{'Total staked':<20}{state.total_staked:>20}")
    click.echo(f"{'Yield owed':<20}{state.total_yield_owed():>20}")
    click.echo(f"{'Undistributed':<20}{state.undistributed:>20}")
    click.echo(f"{'Total funded':<20}{state.total_funded:>20}")
    click.echo(f"{'Yield withdrawn':<20}{state.total_yield_withdrawn:>20}")
    click.echo(f"{'Lock duration':<20}{str(state.lock_duration) + 's':>20}")
    click.echo(f"{'Active stakers':<20}{len(state.active_stakers):>20}")
    for staker in controller.stakers():
        click.echo(f"  {staker:<30}{controller.staking_balance(staker):>8}")

    try:
        controller.check_invariants()
    except InvariantViolation as e:
        logger.error(f"Books do not balance: {e}")
        click.get_current_context().exit(1)
    click.echo("\nBooks balance.")


if __name__ == '__main__':
    cli()
