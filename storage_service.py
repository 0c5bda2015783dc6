from __future__ import annotations
import asyncio
import json
import logging
import sqlite3
from typing import Any, Awaitable, Callable, Dict, Optional, Set

from db import KeyValueRepository, AsyncKeyValueRepository

logger = logging.getLogger(__name__)

SaveCallback = Callable[[bool], None]


class StorageService:
    """Load and save whole JSON documents for one user.

    Every document is stored under ``"{prefix}:{kind}:{user}"``. Failures are
    logged and reported through return values or callbacks, never raised.
    """

    KINDS = ("workouts", "workoutTypes", "weeklyTemplate", "trainingGoals")

    def __init__(
        self,
        repo: KeyValueRepository,
        async_repo: AsyncKeyValueRepository | None = None,
        *,
        user_id: str | None = None,
        prefix: str = "@pumpgym",
        anonymous_user: str = "anonymous",
    ) -> None:
        self.repo = repo
        self.async_repo = async_repo or AsyncKeyValueRepository(repo.db_path)
        self.prefix = prefix
        self.user_id = user_id or anonymous_user
        self._pending: Set[asyncio.Task] = set()
        self._tail: Dict[str, asyncio.Task] = {}

    def key(self, kind: str) -> str:
        if kind not in self.KINDS:
            raise ValueError(f"unknown document kind: {kind}")
        return f"{self.prefix}:{kind}:{self.user_id}"

    def _report_failure(self, key: str, exc: BaseException) -> None:
        logger.warning(
            "persistence failed for %s: %s",
            key,
            exc,
            extra={"event": "persistence_failure", "key": key},
        )

    def load(self, kind: str) -> Optional[Any]:
        """Return the decoded document or ``None`` if absent or unreadable."""
        key = self.key(kind)
        try:
            raw = self.repo.get(key)
        except (sqlite3.Error, OSError) as exc:
            self._report_failure(key, exc)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            self.report_malformed(kind, exc)
            return None

    def report_malformed(self, kind: str, exc: BaseException) -> None:
        """Log a stored document that could not be decoded or validated."""
        key = self.key(kind)
        logger.warning(
            "malformed document under %s ignored: %s",
            key,
            exc,
            extra={"event": "malformed_blob", "key": key},
        )

    def _serialize(self, key: str, document: Any) -> Optional[str]:
        try:
            return json.dumps(document, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            self._report_failure(key, exc)
            return None

    def _write(self, key: str, payload: str) -> bool:
        try:
            self.repo.set(key, payload)
        except (sqlite3.Error, OSError) as exc:
            self._report_failure(key, exc)
            return False
        return True

    async def _write_async(self, key: str, payload: str) -> bool:
        try:
            await self.async_repo.set(key, payload)
        except (sqlite3.Error, OSError) as exc:
            self._report_failure(key, exc)
            return False
        return True

    def _remove(self, key: str) -> bool:
        try:
            self.repo.delete(key)
        except (sqlite3.Error, OSError) as exc:
            self._report_failure(key, exc)
            return False
        return True

    async def _remove_async(self, key: str) -> bool:
        try:
            await self.async_repo.delete(key)
        except (sqlite3.Error, OSError) as exc:
            self._report_failure(key, exc)
            return False
        return True

    async def _run_after(
        self,
        previous: Optional[asyncio.Task],
        operation: Callable[[], Awaitable[bool]],
    ) -> bool:
        if previous is not None:
            await asyncio.wait([previous])
        return await operation()

    def _schedule(
        self,
        key: str,
        operation: Callable[[], bool],
        async_operation: Callable[[], Awaitable[bool]],
        callback: SaveCallback | None,
    ) -> Optional[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is None:
            ok = operation()
            if callback is not None:
                callback(ok)
            return None
        task = loop.create_task(self._run_after(self._tail.get(key), async_operation))
        self._pending.add(task)
        self._tail[key] = task

        def _done(t: asyncio.Task) -> None:
            self._pending.discard(t)
            if self._tail.get(key) is t:
                del self._tail[key]
            if callback is not None:
                callback(not t.cancelled() and t.result())

        task.add_done_callback(_done)
        return task

    def save(self, kind: str, document: Any) -> bool:
        """Persist ``document`` synchronously and return whether it worked."""
        key = self.key(kind)
        payload = self._serialize(key, document)
        if payload is None:
            return False
        return self._write(key, payload)

    async def save_async(self, kind: str, document: Any) -> bool:
        key = self.key(kind)
        payload = self._serialize(key, document)
        if payload is None:
            return False
        return await self._write_async(key, payload)

    def schedule_save(
        self,
        kind: str,
        document: Any,
        callback: SaveCallback | None = None,
    ) -> Optional[asyncio.Task]:
        """Persist ``document`` without making the caller wait.

        The document is serialized immediately, so later in-memory changes do
        not leak into this write. Inside a running event loop the write is an
        ``asyncio.Task`` (returned, and awaited by :meth:`flush`); otherwise it
        runs synchronously and ``None`` is returned. Writes and deletes of the
        same key run in the order they were scheduled. ``callback`` receives
        the success flag in both cases.
        """
        key = self.key(kind)
        payload = self._serialize(key, document)
        if payload is None:
            if callback is not None:
                callback(False)
            return None
        return self._schedule(
            key,
            lambda: self._write(key, payload),
            lambda: self._write_async(key, payload),
            callback,
        )

    def schedule_delete(
        self, kind: str, callback: SaveCallback | None = None
    ) -> Optional[asyncio.Task]:
        """Remove a document, queued behind writes already scheduled for it."""
        key = self.key(kind)
        return self._schedule(
            key,
            lambda: self._remove(key),
            lambda: self._remove_async(key),
            callback,
        )

    async def flush(self) -> bool:
        """Wait for all scheduled writes; return True if every one succeeded."""
        if not self._pending:
            return True
        results = await asyncio.gather(*list(self._pending), return_exceptions=True)
        return all(r is True for r in results)

    def delete(self, kind: str) -> bool:
        """Remove a document synchronously and return whether it worked."""
        return self._remove(self.key(kind))
