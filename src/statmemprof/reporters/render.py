"""Threshold-filtered, lazily expanded display trees built from snapshots."""
import functools
from dataclasses import dataclass
from typing import Callable
from typing import List
from typing import Optional

from statmemprof._config import ReportConfig
from statmemprof._records import FrameIdentity
from statmemprof._records import SampleKind
from statmemprof._snapshot import SnapshotNode
from statmemprof.reporters.common import format_timing
from statmemprof.reporters.common import size_fmt
from statmemprof.reporters.frame_tools import format_location

ChildrenAccessor = Callable[[], List["DisplayNode"]]


@dataclass(frozen=True)
class DisplayNode:
    """A node of the display tree.

    ``children`` is ``None`` for leaves. For expandable nodes it is a
    callable rendering the next level, so levels the operator never opens
    are never rendered.
    """

    label: str
    data: SnapshotNode
    frame: Optional[FrameIdentity] = None
    share: float = 0.0
    children: Optional[ChildrenAccessor] = None

    @property
    def expandable(self) -> bool:
        return self.children is not None


def format_kind_breakdown(node: SnapshotNode) -> str:
    if node.total_weight <= 0:
        return ""
    parts = [
        f"{100 * weight / node.total_weight:.2f}% {SampleKind(slot).label}"
        for slot, weight in enumerate(node.kind_totals)
        if weight > 0
    ]
    if not parts:
        return ""
    return " (" + ", ".join(parts) + ")"


class ReportRenderer:
    def __init__(self, config: ReportConfig, threshold: Optional[int] = None):
        self.config = config
        self.threshold = (
            config.min_weight_threshold if threshold is None else threshold
        )

    def render(self, snapshot: SnapshotNode) -> DisplayNode:
        size = size_fmt(self.config.estimated_size(snapshot.total_weight))
        return DisplayNode(
            label=f"{size} total{format_kind_breakdown(snapshot)}",
            data=snapshot,
            share=1.0 if snapshot.total_weight > 0 else 0.0,
            children=self._children_accessor(snapshot, snapshot.total_weight),
        )

    def is_visible(self, node: SnapshotNode) -> bool:
        return node.total_weight >= self.threshold

    def node_label(self, frame: FrameIdentity, node: SnapshotNode) -> str:
        size = size_fmt(self.config.estimated_size(node.total_weight))
        return (
            f"{size} | {format_timing(node.timing)} | {format_location(frame)}"
            f"{format_kind_breakdown(node)}"
        )

    def _children_accessor(
        self, node: SnapshotNode, grand_total: int
    ) -> Optional[ChildrenAccessor]:
        if not any(self.is_visible(child) for _, child in node.children):
            return None
        return functools.partial(self._render_children, node, grand_total)

    def _render_children(
        self, node: SnapshotNode, grand_total: int
    ) -> List[DisplayNode]:
        return [
            DisplayNode(
                label=self.node_label(frame, child),
                data=child,
                frame=frame,
                share=child.total_weight / grand_total if grand_total else 0.0,
                children=self._children_accessor(child, grand_total),
            )
            for frame, child in node.children
            if self.is_visible(child)
        ]


def render(
    snapshot: SnapshotNode, config: ReportConfig, threshold: Optional[int] = None
) -> DisplayNode:
    """Render ``snapshot`` into a display tree.

    ``threshold`` overrides ``config.min_weight_threshold``; nodes whose
    total weight is below it are hidden, but still count towards the totals
    of their ancestors.
    """
    return ReportRenderer(config, threshold).render(snapshot)
