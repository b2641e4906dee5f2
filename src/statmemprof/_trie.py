import logging
import math
import threading
from dataclasses import dataclass
from dataclasses import field
from numbers import Real
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional
from typing import Tuple

from statmemprof._errors import InvalidSampleError
from statmemprof._records import FrameIdentity
from statmemprof._records import SampleKind
from statmemprof._records import SampleRecord
from statmemprof._records import TimingStats
from statmemprof._snapshot import SnapshotNode
from statmemprof._snapshot import freeze

logger = logging.getLogger(__name__)


@dataclass
class TrieNode:
    """A node of the aggregation trie"""

    timing: Optional[TimingStats] = None
    terminal_samples: List[SampleRecord] = field(default_factory=list)
    total_weight: int = 0
    n_samples: int = 0
    children: Dict[FrameIdentity, "TrieNode"] = field(default_factory=dict)

    def add(self, record: SampleRecord) -> None:
        if self.timing is None:
            self.timing = TimingStats.from_timestamp(record.timestamp)
        else:
            self.timing = self.timing.fold(record.timestamp)
        self.total_weight += record.weight
        self.n_samples += 1


def validate_record(record: SampleRecord) -> Tuple[FrameIdentity, ...]:
    """Check that ``record`` can be aggregated and return its stack as a tuple.

    Raises :class:`InvalidSampleError` without touching any trie.
    """
    if not isinstance(record.kind, SampleKind):
        raise InvalidSampleError(f"Unknown sample kind: {record.kind!r}", record=record)
    weight = record.weight
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise InvalidSampleError(
            f"Sample weight must be an integer, got {weight!r}", record=record
        )
    if weight < 0:
        raise InvalidSampleError(
            f"Sample weight must not be negative, got {weight}", record=record
        )
    timestamp = record.timestamp
    if isinstance(timestamp, bool) or not isinstance(timestamp, Real):
        raise InvalidSampleError(
            f"Sample timestamp must be a number, got {timestamp!r}", record=record
        )
    if not math.isfinite(timestamp):
        raise InvalidSampleError(
            f"Sample timestamp must be finite, got {timestamp!r}", record=record
        )
    try:
        stack = tuple(record.stack)
        for frame in stack:
            hash(frame)
    except TypeError as e:
        raise InvalidSampleError(f"Invalid stack: {e}", record=record) from e
    return stack


class AggregationTrie:
    """Call-stack prefix tree accumulating sample weights and timings.

    ``ingest`` and ``freeze`` are serialized through one lock, so a snapshot
    always reflects a state in which every record was either fully applied or
    not applied at all.
    """

    def __init__(self) -> None:
        self.root = TrieNode()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return self.root.n_samples

    def ingest(self, record: SampleRecord) -> None:
        stack = validate_record(record)
        with self._lock:
            node = self.root
            node.add(record)
            for frame in stack:
                child = node.children.get(frame)
                if child is None:
                    child = node.children[frame] = TrieNode()
                node = child
                node.add(record)
            node.terminal_samples.append(record)

    def ingest_many(self, records: Iterable[SampleRecord]) -> int:
        count = 0
        for record in records:
            self.ingest(record)
            count += 1
        return count

    def freeze(self) -> SnapshotNode:
        with self._lock:
            snapshot = freeze(self.root)
        logger.debug(
            "Froze trie with %d samples (total weight %d)",
            snapshot.n_samples,
            snapshot.total_weight,
        )
        return snapshot
