"""
Bounded build history.

HistoryRepository owns the list of saved builds (most recent first, never more
than ``capacity`` entries) and the single storage key it is persisted under.
The in-memory tuple is the source of truth for the running process: every
mutation replaces it first and then writes it out. A failed write is logged
and only costs the change on the next start.
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from utm_builder.errors import PersistenceCorruptError
from utm_builder.infrastructure.storage.protocol import KeyValueStorage
from utm_builder.schemas.models.shortener import ShortenedUrl
from utm_builder.schemas.models.url_build import BuildSnapshot, SavedBuild
from utm_builder.shared.generators import build_id_stamp, generate_build_id
from utm_builder.shared.logging import get_logger

log = get_logger(__name__)

DEFAULT_STORAGE_KEY = "utm-builder.history"
DEFAULT_CAPACITY = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def matches_build(build: SavedBuild, term: str) -> bool:
    """True when lowercase *term* occurs in either URL, a UTM value, or a custom key/value."""
    if term in build.final_url.lower():
        return True
    if build.shortened_url and term in build.shortened_url.lower():
        return True
    if any(term in value.lower() for value in build.utm_params.filled_values()):
        return True
    return any(
        term in param.key.lower() or term in param.value.lower()
        for param in build.custom_params
    )


class HistoryRepository:
    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: str = DEFAULT_STORAGE_KEY,
        capacity: int = DEFAULT_CAPACITY,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._storage = storage
        self._key = storage_key
        self._capacity = capacity
        self._clock = clock
        self._builds: tuple[SavedBuild, ...] = ()
        self._last_stamp = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def storage_key(self) -> str:
        return self._key

    def __len__(self) -> int:
        return len(self._builds)

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def load(self) -> tuple[SavedBuild, ...]:
        """Replace in-memory state with what storage holds.

        Missing, unreadable or incompatible payloads give an empty history.
        Individual records that fail validation are dropped.
        """
        with self._lock:
            self._builds = self._read()
            stamps = [build_id_stamp(b.id) for b in self._builds]
            self._last_stamp = max([s for s in stamps if s is not None], default=0)
            return self._builds

    def flush(self) -> bool:
        """Write the current collection to storage. Returns False on failure."""
        with self._lock:
            return self._write(self._builds)

    def _read(self) -> tuple[SavedBuild, ...]:
        try:
            payload = self._storage.get_item(self._key)
        except PersistenceCorruptError as e:
            log.warning(
                "history_load_corrupt",
                storage_key=self._key,
                error=e.message,
                details=e.details,
            )
            return ()

        if payload is None:
            return ()
        if not isinstance(payload, list):
            log.warning(
                "history_load_incompatible",
                storage_key=self._key,
                payload_type=type(payload).__name__,
            )
            return ()

        builds: list[SavedBuild] = []
        seen_ids: set[str] = set()
        dropped = 0
        for record in payload:
            try:
                build = SavedBuild.model_validate(record)
            except PydanticValidationError:
                dropped += 1
                continue
            if build.id in seen_ids:
                dropped += 1
                continue
            seen_ids.add(build.id)
            builds.append(build)

        if dropped:
            log.warning("history_records_dropped", storage_key=self._key, dropped=dropped)
        log.info("history_loaded", storage_key=self._key, count=len(builds))
        return tuple(builds[: self._capacity])

    def _write(self, builds: tuple[SavedBuild, ...]) -> bool:
        ok = self._storage.set_item(self._key, [b.to_json() for b in builds])
        if not ok:
            log.warning("history_persist_failed", storage_key=self._key, count=len(builds))
        return ok

    # ── Mutations ────────────────────────────────────────────────────────────

    def _next_stamp(self) -> int:
        self._last_stamp = max(time.time_ns(), self._last_stamp + 1)
        return self._last_stamp

    def add(self, snapshot: BuildSnapshot) -> SavedBuild:
        """Save *snapshot* as the newest build, evicting the oldest past capacity."""
        with self._lock:
            saved = SavedBuild(
                id=generate_build_id(self._next_stamp()),
                created_at=self._clock(),
                final_url=snapshot.final_url,
                base_url=snapshot.base_url,
                utm_params=snapshot.utm_params,
                custom_params=snapshot.custom_params,
            )
            updated = (saved,) + self._builds
            evicted = updated[self._capacity:]
            self._builds = updated[: self._capacity]

            log.info("history_build_saved", build_id=saved.id, count=len(self._builds))
            for build in evicted:
                log.info("history_build_evicted", build_id=build.id)

            self._write(self._builds)
            return saved

    def remove(self, build_id: str) -> bool:
        """Delete the build with *build_id*. Unknown ids are a no-op returning False."""
        with self._lock:
            remaining = tuple(b for b in self._builds if b.id != build_id)
            if len(remaining) == len(self._builds):
                return False
            self._builds = remaining
            log.info("history_build_removed", build_id=build_id, count=len(remaining))
            self._write(self._builds)
            return True

    def _update(self, build_id: str, event: str, **changes) -> Optional[SavedBuild]:
        with self._lock:
            for index, build in enumerate(self._builds):
                if build.id == build_id:
                    break
            else:
                return None
            updated = build.model_copy(update=changes)
            self._builds = self._builds[:index] + (updated,) + self._builds[index + 1 :]
            log.info(event, build_id=build_id)
            self._write(self._builds)
            return updated

    def attach_short_url(
        self, build_id: str, shortened: ShortenedUrl
    ) -> Optional[SavedBuild]:
        """Record the short link for a saved build, in place. None for unknown ids."""
        return self._update(
            build_id,
            "history_build_shortened",
            shortened_url=shortened.short_url,
            shortened_by=shortened.provider,
        )

    def mark_qr_code_generated(self, build_id: str) -> Optional[SavedBuild]:
        return self._update(build_id, "history_qr_code_generated", qr_code_generated=True)

    def clear(self) -> None:
        with self._lock:
            self._builds = ()
            self._storage.remove_item(self._key)
            log.info("history_cleared", storage_key=self._key)

    # ── Queries ──────────────────────────────────────────────────────────────

    def list(self) -> tuple[SavedBuild, ...]:
        return self._builds

    def find_by_id(self, build_id: str) -> Optional[SavedBuild]:
        return next((b for b in self._builds if b.id == build_id), None)

    def filter(self, term: str) -> list[SavedBuild]:
        """Builds matching *term*, case-insensitively; blank terms match all."""
        needle = term.strip().lower()
        builds = self._builds
        if not needle:
            return list(builds)
        return [b for b in builds if matches_build(b, needle)]
