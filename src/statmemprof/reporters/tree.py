import functools
import logging
from typing import IO
from typing import Any
from typing import Iterable
from typing import List
from typing import Optional
from typing import Set
from typing import Tuple

from rich.style import Style
from rich.text import Text
from textual.app import App
from textual.app import ComposeResult
from textual.binding import Binding
from textual.color import Color
from textual.color import Gradient
from textual.screen import Screen
from textual.widgets import Footer
from textual.widgets import Label
from textual.widgets import Tree
from textual.widgets.tree import TreeNode

from statmemprof._config import ReportConfig
from statmemprof._errors import InvalidSampleError
from statmemprof._records import FrameIdentity
from statmemprof._records import SampleRecord
from statmemprof._session import ReportSession
from statmemprof._snapshot import SnapshotNode
from statmemprof.reporters.render import DisplayNode

logger = logging.getLogger(__name__)

FramePath = Tuple[FrameIdentity, ...]


@functools.lru_cache(maxsize=None)
def _percentage_to_color(percentage: int) -> Color:
    gradient = Gradient(
        (0, Color(97, 193, 44)),
        (0.4, Color(236, 152, 16)),
        (0.6, Color.parse("darkorange")),
        (1, Color.parse("indianred")),
    )
    return gradient.get_color(percentage / 100)


def node_text(node: DisplayNode) -> Text:
    if node.frame is None and node.data.n_samples == 0:
        return Text("<No samples>")

    ret = Text.from_markup(
        ":open_file_folder:" if node.expandable else ":page_facing_up:"
    )
    color = _percentage_to_color(int(node.share * 100))
    ret.append_text(Text(f" {node.label}", style=Style(color=color.rich_color)))
    return ret


class ReportTree(Tree[DisplayNode]):
    """Tree widget whose children are rendered when a node is first expanded."""

    def populate(self, node: TreeNode[DisplayNode]) -> None:
        display_node = node.data
        if display_node is None or display_node.children is None or node.children:
            return
        for child in display_node.children():
            node.add(node_text(child), data=child, allow_expand=child.expandable)

    def on_tree_node_expanded(self, event: Tree.NodeExpanded[DisplayNode]) -> None:
        self.populate(event.node)

    def expanded_paths(self) -> Set[FramePath]:
        paths: Set[FramePath] = set()
        pending: List[Tuple[TreeNode[DisplayNode], FramePath]] = [(self.root, ())]
        while pending:
            node, path = pending.pop()
            if not node.is_expanded:
                continue
            paths.add(path)
            for child in node.children:
                if child.data is not None:
                    pending.append((child, path + (child.data.frame,)))
        return paths

    def show(self, root: DisplayNode, expanded: Set[FramePath]) -> None:
        """Replace the displayed tree, re-expanding the nodes in ``expanded``."""
        self.reset(node_text(root), root)
        self.root.allow_expand = root.expandable
        pending: List[Tuple[TreeNode[DisplayNode], FramePath]] = [(self.root, ())]
        while pending:
            node, path = pending.pop()
            if path not in expanded:
                continue
            self.populate(node)
            node.expand()
            for child in node.children:
                if child.data is None:
                    continue
                pending.append((child, path + (child.data.frame,)))


class TreeScreen(Screen[None]):
    BINDINGS = [
        Binding("ctrl+z", "app.suspend_process"),
        Binding(key="q", action="app.quit", description="Quit the app"),
        Binding(key="r", action="refresh_report", description="Refresh"),
        Binding(key="+", action="raise_threshold", description="Raise threshold"),
        Binding(key="-", action="lower_threshold", description="Lower threshold"),
    ]

    DEFAULT_CSS = """
    #status {
        padding: 0 1;
        background: $panel;
        width: 100%;
    }
    """

    def __init__(self, session: ReportSession) -> None:
        super().__init__()
        self.session = session
        self.snapshot: Optional[SnapshotNode] = None

    def compose(self) -> ComposeResult:
        yield Label(id="status")
        yield ReportTree("")
        yield Footer()

    def on_mount(self) -> None:
        self.action_refresh_report()

    def action_refresh_report(self) -> None:
        self.snapshot = self.session.snapshot()
        self.redisplay()

    def action_raise_threshold(self) -> None:
        self.session.set_threshold(max(1, self.session.threshold * 2))
        self.redisplay()

    def action_lower_threshold(self) -> None:
        self.session.set_threshold(self.session.threshold // 2)
        self.redisplay()

    def redisplay(self) -> None:
        if self.snapshot is None:
            return
        tree = self.query_one(ReportTree)
        expanded = tree.expanded_paths() if tree.root.data is not None else {()}
        tree.show(self.session.render(self.snapshot), expanded)
        self.query_one("#status", Label).update(self.status_text())

    def status_text(self) -> str:
        return (
            f"[b]Samples[/]: {self.session.n_samples}"
            f"  [b]Rejected[/]: {self.session.n_rejected}"
            f"  [b]Threshold[/]: {self.session.threshold}"
        )


class TreeApp(App[None]):
    def __init__(
        self, session: ReportSession, *, poll_interval: Optional[float] = None
    ) -> None:
        super().__init__()
        self.session = session
        self.poll_interval = poll_interval
        self.tree_screen = TreeScreen(session)

    def on_mount(self) -> None:
        self.push_screen(self.tree_screen)
        if self.poll_interval is not None:
            self.set_interval(self.poll_interval, self.tree_screen.action_refresh_report)


class TreeReporter:
    def __init__(self, session: ReportSession) -> None:
        super().__init__()
        self.session = session

    @classmethod
    def from_records(
        cls, records: Iterable[SampleRecord], config: ReportConfig
    ) -> "TreeReporter":
        session = ReportSession(config)
        for record in records:
            try:
                session.ingest(record)
            except InvalidSampleError as e:
                session.record_rejection(e)
        return cls(session)

    def get_app(self, **kwargs: Any) -> TreeApp:
        return TreeApp(self.session, **kwargs)

    def render(
        self,
        *,
        file: Optional[IO[str]] = None,
    ) -> None:
        self.get_app().run()
