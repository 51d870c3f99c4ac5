"""Watch mode: rerun validation whenever records, the registry or the schema change.

At most one pass is active. A new change cancels the in-flight pass (its
token) before starting the next one, so the report on screen always
reflects the latest input.
"""

from __future__ import annotations

import asyncio
import importlib
import os
import sys
from enum import Enum
from pathlib import Path
from typing import Callable, TextIO

from instrukt_ai_logging import get_logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from contribcheck import schema
from contribcheck.cancellation import CancellationToken
from contribcheck.config import Settings
from contribcheck.constants import IGNORED_SUFFIXES, WATCHED_EVENT_TYPES
from contribcheck.loader import is_record_file
from contribcheck.runner import run_validation

logger = get_logger(__name__)


class PassState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class ChangeReason(str, Enum):
    STARTUP = "startup"
    RECORDS = "records"
    REGISTRY = "registry"
    SCHEMA = "schema"


class _ChangeHandler(FileSystemEventHandler):
    """Watchdog handler that forwards relevant changes to the event loop."""

    def __init__(self, controller: "WatchController", loop: asyncio.AbstractEventLoop) -> None:
        super().__init__()
        self._controller = controller
        self._loop = loop

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in WATCHED_EVENT_TYPES:
            return
        paths = [event.src_path]
        dest = getattr(event, "dest_path", None)
        if event.event_type == "moved" and dest:
            paths.append(dest)

        for raw in paths:
            path = Path(os.fsdecode(raw))
            reason = self._controller.classify_path(path)
            if reason is None:
                continue
            logger.debug("Change detected: %s (%s)", path, reason.value)
            try:
                self._loop.call_soon_threadsafe(self._controller.request_pass, reason)
            except RuntimeError:
                pass  # Loop closed
            return


class WatchController:
    """Owns the watchdog observers and the single current validation pass."""

    def __init__(
        self,
        settings: Settings,
        *,
        stream: TextIO | None = None,
        schema_source: Path | None = None,
        observer_factory: Callable[[], Observer] = Observer,
    ) -> None:
        self._settings = settings
        self._stream = stream or sys.stdout
        self._schema_source = Path(os.path.abspath(schema_source or schema.__file__))
        self._observer_factory = observer_factory
        self._observers: list[Observer] = []
        self._state = PassState.IDLE
        self._token: CancellationToken | None = None
        self._task: asyncio.Task[None] | None = None
        self._shutdown = asyncio.Event()

    @property
    def state(self) -> PassState:
        return self._state

    @property
    def current_task(self) -> asyncio.Task[None] | None:
        return self._task

    def classify_path(self, path: Path) -> ChangeReason | None:
        """Map a changed path to the reason it should trigger a pass, if any."""
        resolved = Path(os.path.abspath(path))
        if resolved == self._settings.projects_file:
            return ChangeReason.REGISTRY
        if resolved == self._schema_source:
            return ChangeReason.SCHEMA
        name = resolved.name
        if any(name.endswith(suffix) for suffix in IGNORED_SUFFIXES):
            return None
        if is_record_file(name) and self._settings.contributors_dir in resolved.parents:
            return ChangeReason.RECORDS
        return None

    def request_pass(self, reason: ChangeReason = ChangeReason.RECORDS) -> asyncio.Task[None]:
        """Cancel any in-flight pass and start a new one. Must run on the event loop."""
        if reason is ChangeReason.SCHEMA:
            self._reload_schema()
        if self._token is not None:
            logger.debug("Cancelling in-flight validation pass")
            self._token.cancel()

        token = CancellationToken()
        self._token = token
        self._state = PassState.RUNNING
        self._task = asyncio.get_running_loop().create_task(self._run_pass(token))
        return self._task

    async def _run_pass(self, token: CancellationToken) -> None:
        try:
            await run_validation(self._settings, token, watch_mode=True, stream=self._stream)
        except Exception as e:
            logger.error("Validation pass crashed: %s", e, exc_info=True)
        finally:
            if self._token is token:
                self._token = None
                self._state = PassState.IDLE

    def _reload_schema(self) -> None:
        try:
            importlib.reload(schema)
            logger.info("Reloaded schema from %s", self._schema_source)
        except Exception as e:
            logger.error("Schema reload failed, keeping previous schema: %s", e)

    def start_watching(self) -> None:
        """Start one observer per watched source."""
        loop = asyncio.get_running_loop()
        handler = _ChangeHandler(self, loop)
        targets = [
            (self._settings.contributors_dir, True),
            (self._settings.projects_file.parent, False),
            (self._schema_source.parent, False),
        ]
        for directory, recursive in targets:
            if not directory.is_dir():
                logger.warning("Not watching %s: directory does not exist", directory)
                continue
            observer = self._observer_factory()
            observer.daemon = True
            observer.schedule(handler, str(directory), recursive=recursive)
            observer.start()
            self._observers.append(observer)
            logger.debug("Watching %s (recursive=%s)", directory, recursive)

    def stop_watching(self) -> None:
        """Stop and release every active observer."""
        for observer in self._observers:
            observer.stop()
        for observer in self._observers:
            observer.join(timeout=2)
        self._observers.clear()
        logger.info("Watch stopped")

    def shutdown(self) -> None:
        self._shutdown.set()

    async def run(self) -> int:
        """Eager first pass, then rerun on changes until shutdown."""
        print("Time to watch 👀", file=self._stream)
        self.start_watching()
        self.request_pass(ChangeReason.STARTUP)
        try:
            await self._shutdown.wait()
        finally:
            if self._token is not None:
                self._token.cancel()
            self.stop_watching()
        print("\n👋 Bye bye!", file=self._stream)
        return 0
