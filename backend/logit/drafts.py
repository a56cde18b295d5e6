# logit/drafts.py
"""
Best-effort autosave of the workout form.

One snapshot per device lives under a single storage key. Writes are
debounced so a burst of edits produces one write; ``flush`` writes at once
(page hide). Storage failures are logged at debug level and otherwise ignored.
"""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from logit.scheduler import KeyedDebouncer
from logit.schemas.draft import DraftSnapshot
from logit.settings import get_settings

log = logging.getLogger("uvicorn")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """All keys in one JSON object on disk; replaced atomically on write."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except ValueError:
            log.debug("draft store %s is not valid JSON, starting empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp, self.path)

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)


class DraftAutosaver:
    def __init__(self, store: KeyValueStore, *, key: Optional[str] = None, delay: Optional[float] = None):
        settings = get_settings()
        self.store = store
        self.key = key or settings.DRAFT_STORAGE_KEY
        self.delay = settings.AUTOSAVE_DELAY_MS / 1000 if delay is None else delay
        self.ready = False
        self.last_saved_at: Optional[str] = None
        self._latest: Optional[DraftSnapshot] = None
        self._debouncer = KeyedDebouncer(self.delay)

    def restore(self) -> Optional[DraftSnapshot]:
        """Read the stored draft once. Unreadable drafts are removed without a word."""
        self.ready = True
        try:
            raw = self.store.get(self.key)
        except OSError as exc:
            log.debug("draft read failed: %s", exc)
            return None
        if not raw:
            return None
        try:
            snapshot = DraftSnapshot.model_validate_json(raw)
        except ValidationError:
            log.debug("discarding unreadable draft under %s", self.key)
            self._remove()
            return None
        self._latest = snapshot
        self.last_saved_at = snapshot.saved_at
        return snapshot

    def schedule(self, snapshot: DraftSnapshot) -> None:
        """Remember the latest form state and (re)start the write timer."""
        self._latest = snapshot
        if self.ready:
            self._debouncer.schedule(self.key, self._write_latest)

    @property
    def pending(self) -> bool:
        return self._debouncer.is_pending(self.key)

    def flush(self) -> Optional[str]:
        """Write the latest snapshot now, whatever the timer is doing."""
        self._debouncer.cancel(self.key)
        if not self.ready:
            return None
        return self._write_latest()

    def _write_latest(self) -> Optional[str]:
        if self._latest is None:
            return None
        saved_at = datetime.now(timezone.utc).isoformat()
        payload = self._latest.model_copy(update={"saved_at": saved_at})
        try:
            self.store.set(self.key, payload.model_dump_json(by_alias=True))
        except (OSError, TypeError, ValueError) as exc:
            log.debug("draft autosave skipped: %s", exc)
            return None
        self.last_saved_at = saved_at
        return saved_at

    def clear(self) -> None:
        self._debouncer.cancel(self.key)
        self._latest = None
        self.last_saved_at = None
        self._remove()

    def _remove(self) -> None:
        try:
            self.store.remove(self.key)
        except OSError as exc:
            log.debug("draft remove failed: %s", exc)

    def close(self) -> None:
        self._debouncer.cancel_all()

    async def wait_idle(self) -> None:
        await self._debouncer.wait_idle()
