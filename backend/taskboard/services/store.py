"""JSON document store for the board and its sibling event/notification logs.

Each document is read and written whole. Writes land in a temporary file that
is then renamed over the target, so a crash mid-write leaves the previous
version intact. `locked()` serializes load-modify-store cycles within one
process; separate processes sharing a data directory still race.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from taskboard.core.logging import get_logger
from taskboard.core.time import filename_stamp, utcnow
from taskboard.schemas.board import BackupHandle, Board
from taskboard.schemas.events import EventLogDocument
from taskboard.schemas.notifications import NotificationDocument
from taskboard.services.errors import StorageFailure

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = get_logger(__name__)

BOARD_FILE = "board.json"
EVENTS_FILE = "events.json"
NOTIFICATIONS_FILE = "notifications.json"
CLIENT_SETTINGS_FILE = "settings.json"
BACKUP_PREFIX = "backup-"


class DocumentStore:
    """Filesystem-backed persistence for every board document."""

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)
        self._lock = threading.RLock()

    @property
    def board_path(self) -> Path:
        return self.data_dir / BOARD_FILE

    @property
    def events_path(self) -> Path:
        return self.data_dir / EVENTS_FILE

    @property
    def notifications_path(self) -> Path:
        return self.data_dir / NOTIFICATIONS_FILE

    @property
    def client_settings_path(self) -> Path:
        return self.data_dir / CLIENT_SETTINGS_FILE

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the store lock for a whole load-modify-store cycle (re-entrant)."""
        with self._lock:
            yield

    def initialize(self) -> None:
        """Create the data directory and any missing documents."""
        with self._lock:
            self.load()
            if not self.events_path.exists():
                self.save_events(EventLogDocument())
            if not self.notifications_path.exists():
                self.save_notifications(NotificationDocument())

    # ---------------------------------------------------------------- board

    def load(self) -> Board:
        """Read the board, creating an empty one on first use."""
        raw = self._read_json(self.board_path)
        if raw is None:
            board = Board.empty()
            self.save(board)
            logger.info("store.board.initialized", extra={"path": str(self.board_path)})
            return board
        try:
            return Board.model_validate(raw)
        except ValidationError as exc:
            logger.error(
                "store.board.invalid",
                extra={"path": str(self.board_path), "error_count": exc.error_count()},
            )
            raise StorageFailure("Board document is corrupt") from exc

    def save(self, board: Board) -> None:
        """Stamp `last_updated` and overwrite the whole board document."""
        board.last_updated = utcnow()
        self._write_text(self.board_path, board.model_dump_json(indent=2))

    def snapshot(self) -> BackupHandle:
        """Copy the current board to a timestamp-named backup file."""
        with self._lock:
            board = self.load()
            name = f"{BACKUP_PREFIX}{filename_stamp()}.json"
            path = self.data_dir / name
            self._write_text(path, board.model_dump_json(indent=2))
        logger.info("store.snapshot.created", extra={"backup_name": name})
        return BackupHandle(name=name, path=str(path))

    # --------------------------------------------------------------- events

    def load_events(self) -> EventLogDocument:
        raw = self._read_json(self.events_path)
        if raw is None:
            return EventLogDocument()
        try:
            return EventLogDocument.model_validate(raw)
        except ValidationError as exc:
            raise _corrupt(self.events_path, exc) from exc

    def save_events(self, document: EventLogDocument) -> None:
        self._write_text(self.events_path, document.model_dump_json(indent=2))

    # -------------------------------------------------------- notifications

    def load_notifications(self) -> NotificationDocument:
        raw = self._read_json(self.notifications_path)
        if raw is None:
            return NotificationDocument()
        try:
            return NotificationDocument.model_validate(raw)
        except ValidationError as exc:
            raise _corrupt(self.notifications_path, exc) from exc

    def save_notifications(self, document: NotificationDocument) -> None:
        self._write_text(self.notifications_path, document.model_dump_json(indent=2))

    # ------------------------------------------------------ client settings

    def load_client_settings(self) -> dict[str, Any]:
        raw = self._read_json(self.client_settings_path)
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise StorageFailure("Client settings document is corrupt")
        return raw

    def save_client_settings(self, values: dict[str, Any]) -> None:
        self._write_text(self.client_settings_path, json.dumps(values, indent=2))

    # ------------------------------------------------------------ internals

    def _read_json(self, path: Path) -> Any | None:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.error("store.read_failed", extra={"path": str(path), "error": str(exc)})
            raise StorageFailure from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            logger.error("store.decode_failed", extra={"path": str(path), "error": str(exc)})
            raise StorageFailure(f"{path.name} is not valid JSON") from exc

    def _write_text(self, path: Path, text: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(text)
                    handle.write("\n")
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            logger.error("store.write_failed", extra={"path": str(path), "error": str(exc)})
            raise StorageFailure from exc


def _corrupt(path: Path, exc: ValidationError) -> StorageFailure:
    logger.error(
        "store.document.invalid",
        extra={"path": str(path), "error_count": exc.error_count()},
    )
    return StorageFailure(f"{path.name} is corrupt")
