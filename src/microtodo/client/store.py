"""
microtodo.client.store

Token storage for client devices.

Responsibilities:
- Hold exactly one `StoredSession` (or none).
- Replace it atomically: a reader sees the old value or the new one, never a
  partial write.

`FileTokenStore` writes a 0600 temp file beside the target and `os.replace`s it
into place; file handles are scoped with `with` so they are released on error.
"""

from __future__ import annotations

import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from microtodo.observability.logging import get_logger

log = get_logger(__name__)


class StoredSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str = Field(repr=False)
    user_id: int
    username: str
    expires_at: datetime | None = None


class TokenStore(Protocol):
    def load(self) -> StoredSession | None: ...

    def save(self, session: StoredSession) -> None: ...

    def clear(self) -> None: ...


class MemoryTokenStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._session: StoredSession | None = None

    def load(self) -> StoredSession | None:
        # Sessions are immutable; handing out the reference is safe.
        return self._session

    def save(self, session: StoredSession) -> None:
        with self._lock:
            self._session = session

    def clear(self) -> None:
        with self._lock:
            self._session = None


class FileTokenStore:
    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> StoredSession | None:
        try:
            raw = self._path.read_text(encoding="utf-8")
            return StoredSession.model_validate_json(raw)
        except FileNotFoundError:
            return None
        except (UnicodeDecodeError, ValidationError):
            log.warning("token_store_corrupt", path=str(self._path))
            return None

    def save(self, session: StoredSession) -> None:
        payload = session.model_dump_json()
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # mkstemp creates the file with 0600 permissions.
            fd, tmp_name = tempfile.mkstemp(prefix=".token-", dir=self._path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    def clear(self) -> None:
        with self._lock:
            self._path.unlink(missing_ok=True)


# --- Module Notes -----------------------------------------------------------
# Only one session is ever stored; login overwrites it and logout removes it.
