"""JSON persistence for pool state and the local token ledger."""
import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Tuple, Union
from loguru import logger
from pydantic import ValidationError

from .accounts import PoolState
from .token import InMemoryTokenLedger

STATE_FILE = "pool_state.json"


class StorageError(Exception):
    """Persisted state could not be read."""
    pass


class PoolStore:
    """Reads and writes ``pool_state.json`` in a state directory."""

    def __init__(self, state_dir: Union[str, Path]):
        self.state_dir = Path(state_dir)
        self.path = self.state_dir / STATE_FILE

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[Tuple[PoolState, InMemoryTokenLedger]]:
        """Load state and ledger, or None if nothing has been saved yet.

        Raises:
            StorageError: file exists but is not a valid pool document
        """
        if not self.path.exists():
            return None
        try:
            with open(self.path) as f:
                data = json.load(f)
            state = PoolState.model_validate(data["pool"])
            ledger = InMemoryTokenLedger.from_snapshot(data["ledger"])
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, ValidationError) as e:
            raise StorageError(f"Corrupt pool state at {self.path}: {e}") from e
        logger.debug(f"Loaded pool state from {self.path}")
        return state, ledger

    def save(self, state: PoolState, ledger: InMemoryTokenLedger) -> None:
        """Write state and ledger, replacing the previous file atomically."""
        self.state_dir.mkdir(parents=True, exist_ok=True)
        document = {
            "pool": state.model_dump(mode="json"),
            "ledger": ledger.snapshot(),
        }
        document["pool"]["active_stakers"] = sorted(state.active_stakers)

        fd, tmp_path = tempfile.mkstemp(dir=self.state_dir, prefix=".pool_state.", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug(f"Saved pool state to {self.path}")
