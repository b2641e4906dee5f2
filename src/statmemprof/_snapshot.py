"""Immutable, sorted projections of the aggregation trie."""
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Dict
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple

from statmemprof._records import EMPTY_KIND_TOTALS
from statmemprof._records import FrameIdentity
from statmemprof._records import KindTotals
from statmemprof._records import SampleRecord
from statmemprof._records import TimingStats

if TYPE_CHECKING:
    from statmemprof._trie import TrieNode


@dataclass(frozen=True)
class SnapshotNode:
    timing: Optional[TimingStats]
    kind_totals: KindTotals
    total_weight: int
    n_samples: int
    children: Tuple[Tuple[FrameIdentity, "SnapshotNode"], ...] = ()

    def walk(self) -> Iterator["SnapshotNode"]:
        """Yield this node and all of its descendants, depth first."""
        pending = [self]
        while pending:
            node = pending.pop()
            yield node
            pending.extend(child for _, child in reversed(node.children))


EMPTY_SNAPSHOT = SnapshotNode(
    timing=None, kind_totals=EMPTY_KIND_TOTALS, total_weight=0, n_samples=0
)

ChildEntry = Tuple[FrameIdentity, SnapshotNode]


def aggregate_kinds(
    terminal_samples: Iterable[SampleRecord], children: Sequence[ChildEntry]
) -> KindTotals:
    acc = list(EMPTY_KIND_TOTALS)
    for record in terminal_samples:
        acc[record.kind] += record.weight
    for _, child in children:
        for slot, weight in enumerate(child.kind_totals):
            acc[slot] += weight
    return tuple(acc)


def sort_children(children: Iterable[ChildEntry]) -> Tuple[ChildEntry, ...]:
    # sorted() is stable, so equal weights keep first-insertion order
    return tuple(sorted(children, key=lambda item: item[1].total_weight, reverse=True))


def freeze(root: "TrieNode") -> SnapshotNode:
    """Build a sorted snapshot of the trie rooted at ``root``.

    Children are frozen before their parent so that per-kind totals are
    summed bottom-up. The walk uses an explicit stack instead of recursion
    because stacks can be deeper than the interpreter's recursion limit.
    """
    frozen: Dict[int, SnapshotNode] = {}
    pending: List[Tuple["TrieNode", bool]] = [(root, False)]
    while pending:
        node, children_done = pending.pop()
        if not children_done:
            pending.append((node, True))
            pending.extend((child, False) for child in node.children.values())
            continue

        children = sort_children(
            (frame, frozen.pop(id(child))) for frame, child in node.children.items()
        )
        frozen[id(node)] = SnapshotNode(
            timing=node.timing,
            kind_totals=aggregate_kinds(node.terminal_samples, children),
            total_weight=node.total_weight,
            n_samples=node.n_samples,
            children=children,
        )
    return frozen[id(root)]
