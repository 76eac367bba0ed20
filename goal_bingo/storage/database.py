"""Local SQLite store for the saved board snapshot."""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as SchemaError

from goal_bingo.board.errors import CorruptSnapshot, PersistenceError
from goal_bingo.board.models import AppStage, AppState

from .models import Snapshot

logger = logging.getLogger(__name__)

STORAGE_KEY = "goal_bingo_save"


class SnapshotStore:
    """Keeps one board snapshot under a well-known key."""

    def __init__(self, db_path: str = "data/bingo.db", key: str = STORAGE_KEY):
        """Initialize database."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.key = key
        self._init_db()

    def _init_db(self):
        """
        Create database tables if they don't exist.

        A file that is not a usable database is moved aside and replaced by
        a fresh one. If that fails too, the store keeps running and every
        read or write reports its own failure.
        """
        try:
            self._create_tables()
        except sqlite3.DatabaseError as e:
            logger.warning(f"Snapshot store at {self.db_path} is unusable: {e}")
            if not self._move_aside():
                return
            try:
                self._create_tables()
            except sqlite3.DatabaseError as e:
                logger.warning(f"Could not recreate snapshot store: {e}")
                return

        logger.info(f"Snapshot store initialized at {self.db_path}")

    def _create_tables(self):
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS snapshots (
                    key TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    saved_at TEXT NOT NULL
                )
            """)
            conn.commit()

    def _move_aside(self) -> bool:
        """Rename a damaged database file so a new one can take its place."""
        if not self.db_path.is_file():
            return False

        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        backup = self.db_path.with_name(f"{self.db_path.name}.corrupt-{timestamp}")
        try:
            self.db_path.rename(backup)
        except OSError as e:
            logger.warning(f"Could not move damaged snapshot store aside: {e}")
            return False

        logger.warning(f"Moved damaged snapshot store to {backup}")
        return True

    def read(self) -> Optional[AppState]:
        """
        Read the saved state.

        Returns:
            Saved state, or None if nothing is saved

        Raises:
            CorruptSnapshot: If the record cannot be decoded
            PersistenceError: If the database cannot be read
        """
        try:
            with sqlite3.connect(self.db_path) as conn:
                row = conn.execute(
                    "SELECT payload FROM snapshots WHERE key = ?", (self.key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read snapshot: {e}") from e

        if not row:
            return None

        try:
            return Snapshot.model_validate_json(row[0]).to_state()
        except SchemaError as e:
            raise CorruptSnapshot(f"Saved snapshot is malformed: {e}") from e

    def load(self) -> Optional[AppState]:
        """
        Load the saved state, tolerating bad data.

        A corrupt snapshot is discarded and treated as "nothing saved". A
        database that cannot be read right now is left alone.
        """
        try:
            state = self.read()
        except CorruptSnapshot as e:
            logger.warning(f"Discarding saved state, starting fresh: {e}")
            self.clear()
            return None
        except PersistenceError as e:
            logger.warning(f"Failed to load saved state, starting fresh: {e}")
            return None

        if state:
            logger.info(f"Loaded saved board (stage: {state.stage.value})")
        return state

    def save(self, state: AppState) -> bool:
        """
        Write the state, best effort.

        Saving the setup stage removes the record. Failures are logged, not
        raised.

        Returns:
            True if the write went through
        """
        if state.stage == AppStage.SETUP:
            return self.clear()

        payload = Snapshot.from_state(state).to_json()

        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO snapshots (key, payload, saved_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        payload = excluded.payload,
                        saved_at = excluded.saved_at
                    """,
                    (self.key, payload, datetime.now().isoformat()),
                )
                conn.commit()
        except sqlite3.Error as e:
            logger.warning(f"Failed to save board state: {e}")
            return False

        logger.debug(f"Saved board state ({len(payload)} bytes)")
        return True

    def clear(self) -> bool:
        """Delete the saved record."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("DELETE FROM snapshots WHERE key = ?", (self.key,))
                conn.commit()
        except sqlite3.Error as e:
            logger.warning(f"Failed to clear saved state: {e}")
            return False

        logger.info("Cleared saved board state")
        return True
