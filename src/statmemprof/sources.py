"""Sampling sources and the capture file format.

A capture file holds one JSON object per line::

    {"kind": "fresh", "timestamp": 12, "weight": 3,
     "stack": [["main", "main.py", 10, 4, 20], ["build", "lib.py", 3, 0, 8]]}

Stacks are stored root-first. Each frame is ``[function, filename, lineno]``
optionally followed by the start and end character of the expression.
"""
import json
import logging
import os
import threading
from pathlib import Path
from types import TracebackType
from typing import IO
from typing import Any
from typing import Dict
from typing import Iterator
from typing import Optional
from typing import Protocol
from typing import Type
from typing import Union

from statmemprof._records import CapturedFrame
from statmemprof._records import SampleKind
from statmemprof._records import SampleRecord

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class SampleSource(Protocol):
    def __iter__(self) -> Iterator[SampleRecord]:
        ...


def decode_record(payload: Dict[str, Any]) -> SampleRecord:
    """Build a record from a decoded capture line.

    Values are not validated here: a kind name outside :class:`SampleKind`
    is kept as a string so that ingestion can reject the record.
    """
    kind_name = payload["kind"]
    kind: Union[SampleKind, str]
    try:
        kind = SampleKind.from_name(kind_name)
    except (KeyError, AttributeError):
        kind = kind_name
    return SampleRecord(
        kind=kind,
        timestamp=payload["timestamp"],
        weight=payload["weight"],
        stack=tuple(CapturedFrame(*frame) for frame in payload.get("stack", ())),
    )


def encode_record(record: SampleRecord) -> Dict[str, Any]:
    kind = record.kind.label if isinstance(record.kind, SampleKind) else record.kind
    return {
        "kind": kind,
        "timestamp": record.timestamp,
        "weight": record.weight,
        "stack": [list(frame) for frame in record.stack],
    }


class JSONLinesSource:
    """Read sample records from a capture file.

    With ``follow=True`` the source keeps waiting for lines appended to the
    file, like ``tail -f``, until :meth:`close` is called.
    """

    def __init__(
        self, path: PathLike, *, follow: bool = False, poll_interval: float = 0.1
    ) -> None:
        self.path = Path(path)
        self.follow = follow
        self.poll_interval = poll_interval
        self.n_malformed_lines = 0
        self._closed = threading.Event()

    def close(self) -> None:
        self._closed.set()

    def __iter__(self) -> Iterator[SampleRecord]:
        # Lines are decoded one at a time so that bad bytes only spoil their line
        with open(self.path, "rb") as file:
            lineno = 0
            partial = b""
            while not self._closed.is_set():
                line = file.readline()
                if not line:
                    if not self.follow:
                        return
                    self._closed.wait(self.poll_interval)
                    continue
                if self.follow and not line.endswith(b"\n"):
                    # The writer has not finished this line yet
                    partial += line
                    continue
                line, partial = partial + line, b""
                lineno += 1
                if not line.strip():
                    continue
                record = self._decode_line(line, lineno)
                if record is not None:
                    yield record

    def _decode_line(self, line: bytes, lineno: int) -> Optional[SampleRecord]:
        try:
            return decode_record(json.loads(line.decode("utf-8")))
        except (UnicodeDecodeError, ValueError, KeyError, TypeError) as e:
            self.n_malformed_lines += 1
            logger.warning("Skipping malformed line %d of %s: %s", lineno, self.path, e)
            return None


class CaptureWriter:
    """Append sample records to a capture file."""

    def __init__(self, path: PathLike) -> None:
        self.path = Path(path)
        self._file: Optional[IO[str]] = None

    def __enter__(self) -> "CaptureWriter":
        self._file = open(self.path, "a", encoding="utf-8")
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def write(self, record: SampleRecord) -> None:
        if self._file is None:
            raise ValueError("CaptureWriter must be used as a context manager")
        self._file.write(json.dumps(encode_record(record)) + "\n")
        self._file.flush()
