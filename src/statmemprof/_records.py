"""Sample records, frame identities and the statistics folded over them."""
import enum
from dataclasses import dataclass
from typing import Hashable
from typing import NamedTuple
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import Union

FrameIdentity = Hashable
KindTotals = Tuple[int, ...]


class SampleKind(enum.IntEnum):
    """Closed set of sampled event kinds.

    The integer value of each member is its slot in a :data:`KindTotals`
    accumulator, so new kinds must be appended with the next free value.
    """

    FRESH = 0
    RETAINED = 1
    DESERIALIZED = 2

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_name(cls, name: str) -> "SampleKind":
        return cls[name.upper()]


EMPTY_KIND_TOTALS: KindTotals = (0,) * len(SampleKind)


@dataclass(frozen=True)
class Location:
    filename: str
    line_number: int
    start_char: int
    end_char: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line_number} {self.start_char}-{self.end_char}"


class CapturedFrame(NamedTuple):
    """A stack frame as recorded in a capture file."""

    function: str
    filename: str
    lineno: int
    start_char: int = 0
    end_char: int = 0

    def location(self) -> Optional[Location]:
        if not self.filename or self.lineno <= 0:
            return None
        return Location(self.filename, self.lineno, self.start_char, self.end_char)


@dataclass(frozen=True)
class TimingStats:
    min: int
    max: int
    sum: int
    count: int

    @classmethod
    def from_timestamp(cls, timestamp: int) -> "TimingStats":
        return cls(min=timestamp, max=timestamp, sum=timestamp, count=1)

    def fold(self, timestamp: int) -> "TimingStats":
        return TimingStats(
            min=min(self.min, timestamp),
            max=max(self.max, timestamp),
            sum=self.sum + timestamp,
            count=self.count + 1,
        )

    @property
    def mean(self) -> float:
        return self.sum / self.count


@dataclass(frozen=True)
class SampleRecord:
    """One observed event.

    ``stack`` is ordered root-first: ``stack[0]`` is the outermost frame.
    ``kind`` is typed loosely because decoded input may carry a kind outside
    :class:`SampleKind`; such records are rejected at ingestion.
    """

    kind: Union[SampleKind, str]
    timestamp: int
    weight: int
    stack: Sequence[FrameIdentity] = ()
