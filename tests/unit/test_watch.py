import asyncio
import io
import os
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

import pytest
from watchdog.events import DirModifiedEvent, FileModifiedEvent, FileMovedEvent

from contribcheck import schema
from contribcheck.config import Settings
from contribcheck.watch import ChangeReason, PassState, WatchController, _ChangeHandler


class FakeObserver:
    instances: list["FakeObserver"] = []

    def __init__(self) -> None:
        self.daemon = False
        self.scheduled: list[tuple[str, bool]] = []
        self.started = False
        self.stopped = False
        self.joined = False
        FakeObserver.instances.append(self)

    def schedule(self, handler, path: str, recursive: bool = False) -> None:
        self.scheduled.append((path, recursive))

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def join(self, timeout: float | None = None) -> None:
        self.joined = True


class FakeLoop:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def call_soon_threadsafe(self, callback, *args) -> None:
        self.calls.append((callback, args))


@pytest.fixture(autouse=True)
def _reset_observers() -> None:
    FakeObserver.instances = []


@pytest.mark.unit
def test_classify_path(settings: Settings) -> None:
    controller = WatchController(settings, observer_factory=FakeObserver)
    contributors = settings.contributors_dir

    assert controller.classify_path(contributors / "alice.yaml") is ChangeReason.RECORDS
    assert controller.classify_path(contributors / "nested" / "bob.yml") is ChangeReason.RECORDS
    assert controller.classify_path(settings.projects_file) is ChangeReason.REGISTRY
    assert controller.classify_path(Path(schema.__file__)) is ChangeReason.SCHEMA
    assert controller.classify_path(contributors / "alice.yaml~") is None
    assert controller.classify_path(contributors / "README.md") is None
    assert controller.classify_path(contributors.parent / "elsewhere.yaml") is None


@pytest.mark.unit
def test_handler_forwards_relevant_events_to_loop(settings: Settings) -> None:
    controller = WatchController(settings, observer_factory=FakeObserver)
    loop = FakeLoop()
    handler = _ChangeHandler(controller, loop)  # type: ignore[arg-type]

    handler.on_any_event(FileModifiedEvent(str(settings.contributors_dir / "alice.yaml")))
    handler.on_any_event(FileModifiedEvent(str(settings.contributors_dir / "notes.txt")))
    handler.on_any_event(DirModifiedEvent(str(settings.contributors_dir)))

    assert loop.calls == [(controller.request_pass, (ChangeReason.RECORDS,))]


@pytest.mark.unit
def test_handler_uses_move_destination(settings: Settings) -> None:
    controller = WatchController(settings, observer_factory=FakeObserver)
    loop = FakeLoop()
    handler = _ChangeHandler(controller, loop)  # type: ignore[arg-type]

    handler.on_any_event(
        FileMovedEvent(
            str(settings.contributors_dir / ".alice.yaml.tmp"),
            str(settings.contributors_dir / "alice.yaml"),
        )
    )

    assert loop.calls == [(controller.request_pass, (ChangeReason.RECORDS,))]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_second_request_cancels_in_flight_pass(settings: Settings, write_record, valid_record: str) -> None:
    write_record("alice.yaml", "name: Alice\n")
    out = io.StringIO()
    controller = WatchController(replace(settings, pacing_delay=0.05), stream=out, observer_factory=FakeObserver)
    assert controller.state is PassState.IDLE

    first = controller.request_pass(ChangeReason.RECORDS)
    await asyncio.sleep(0)
    assert controller.state is PassState.RUNNING

    write_record("alice.yaml", valid_record)
    second = controller.request_pass(ChangeReason.RECORDS)
    await asyncio.gather(first, second)

    output = out.getvalue()
    assert output.count("Running validation...") == 2
    assert output.count("files valid") == 1
    assert "1/1 files valid" in output
    assert "Found errors" not in output
    assert controller.state is PassState.IDLE


@pytest.mark.unit
@pytest.mark.asyncio
async def test_cancellation_with_many_files(settings: Settings, write_record, valid_record: str) -> None:
    for index in range(25):
        write_record(f"person{index:02}.yaml", valid_record)
    out = io.StringIO()
    controller = WatchController(settings, stream=out, observer_factory=FakeObserver)

    first = controller.request_pass(ChangeReason.RECORDS)
    await asyncio.sleep(0)
    (settings.contributors_dir / "person00.yaml").write_text("name: Broken\n", encoding="utf-8")
    second = controller.request_pass(ChangeReason.RECORDS)
    await asyncio.gather(first, second)

    output = out.getvalue()
    assert output.count("files valid") == 1
    assert "24/25 files valid" in output


@pytest.mark.unit
@pytest.mark.asyncio
async def test_schema_change_reloads_schema_module(settings: Settings) -> None:
    controller = WatchController(settings, stream=io.StringIO(), observer_factory=FakeObserver)

    with patch("contribcheck.watch.importlib.reload") as reload:
        task = controller.request_pass(ChangeReason.SCHEMA)
        await task

    reload.assert_called_once_with(schema)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_schema_reload_failure_keeps_running(settings: Settings, write_record, valid_record: str) -> None:
    write_record("alice.yaml", valid_record)
    out = io.StringIO()
    controller = WatchController(settings, stream=out, observer_factory=FakeObserver)

    with patch("contribcheck.watch.importlib.reload", side_effect=SyntaxError("bad schema")):
        await controller.request_pass(ChangeReason.SCHEMA)

    assert "1/1 files valid" in out.getvalue()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_run_until_shutdown(settings: Settings, write_record, valid_record: str) -> None:
    write_record("alice.yaml", valid_record)
    out = io.StringIO()
    controller = WatchController(settings, stream=out, observer_factory=FakeObserver)

    running = asyncio.create_task(controller.run())
    while controller.current_task is None:
        await asyncio.sleep(0)
    await controller.current_task
    controller.shutdown()
    exit_code = await running

    assert exit_code == 0
    output = out.getvalue()
    assert output.startswith("Time to watch 👀\n")
    assert "1/1 files valid" in output
    assert output.endswith("\n👋 Bye bye!\n")

    watched = {path: recursive for observer in FakeObserver.instances for path, recursive in observer.scheduled}
    assert watched[str(settings.contributors_dir)] is True
    assert watched[str(settings.projects_file.parent)] is False
    assert watched[str(Path(os.path.abspath(schema.__file__)).parent)] is False
    assert all(o.daemon and o.started and o.stopped and o.joined for o in FakeObserver.instances)
