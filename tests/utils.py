"""Utilities / Helpers for writing tests."""
import asyncio
import sys
import time
from typing import Callable
from typing import Sequence

from statmemprof import CapturedFrame
from statmemprof import SampleKind
from statmemprof import SampleRecord
from statmemprof import TrieNode


def frame(name: str, lineno: int = 1) -> CapturedFrame:
    return CapturedFrame(name, f"{name}.py", lineno, 0, 5)


def make_record(
    stack: Sequence[str] = (),
    *,
    weight: int = 1,
    kind: SampleKind = SampleKind.FRESH,
    timestamp: int = 0,
) -> SampleRecord:
    """Build a record whose stack is made of ``frame(name)`` for each name."""
    return SampleRecord(
        kind=kind,
        timestamp=timestamp,
        weight=weight,
        stack=tuple(frame(name) for name in stack),
    )


def example_records():
    A, B = "a", "b"
    return [
        make_record([A, B], weight=10, kind=SampleKind.FRESH, timestamp=1),
        make_record([A, B], weight=5, kind=SampleKind.RETAINED, timestamp=3),
        make_record([A], weight=2, kind=SampleKind.FRESH, timestamp=2),
    ]


def assert_conserved(node: TrieNode) -> None:
    pending = [node]
    while pending:
        current = pending.pop()
        expected = sum(record.weight for record in current.terminal_samples) + sum(
            child.total_weight for child in current.children.values()
        )
        assert current.total_weight == expected
        pending.extend(current.children.values())


def wait_for(condition: Callable[[], bool], timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not condition():
        if time.monotonic() > deadline:
            raise AssertionError("timed out waiting for condition")
        time.sleep(0.01)


def async_run(coro):
    # This technique shamelessly cribbed from Textual itself...
    # `asyncio.get_event_loop()` is deprecated since Python 3.10:
    asyncio_get_event_loop_is_deprecated = sys.version_info >= (3, 10, 0)

    if asyncio_get_event_loop_is_deprecated:
        # N.B. This doesn't work with Python<3.10, as we end up with 2 event loops:
        return asyncio.run(coro)
    else:
        # pragma: no cover
        # However, this works with Python<3.10:
        event_loop = asyncio.get_event_loop()
        return event_loop.run_until_complete(coro)
