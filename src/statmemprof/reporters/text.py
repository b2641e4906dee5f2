from typing import IO
from typing import List
from typing import Optional
from typing import Tuple

from rich import print as rprint
from rich.markup import escape
from rich.tree import Tree

from statmemprof.reporters.render import DisplayNode

ELLIPSIS = "[dim]...[/]"


def _size_to_color(proportion_of_total: float) -> str:
    if proportion_of_total > 0.6:
        return "red"
    elif proportion_of_total > 0.2:
        return "yellow"
    elif proportion_of_total > 0.05:
        return "green"
    else:
        return "bright_green"


class TextReporter:
    """Print a display tree, expanding every visible node up to ``max_depth``."""

    def __init__(self, root: DisplayNode, *, max_depth: Optional[int] = None):
        self.root = root
        self.max_depth = max_depth

    def build_tree(self) -> Tree:
        tree = Tree(self._label(self.root))
        pending: List[Tuple[Tree, DisplayNode, int]] = [(tree, self.root, 0)]
        while pending:
            branch, node, depth = pending.pop(0)
            if node.children is None:
                continue
            if self.max_depth is not None and depth >= self.max_depth:
                branch.add(ELLIPSIS)
                continue
            for child in node.children():
                pending.append((branch.add(self._label(child)), child, depth + 1))
        return tree

    @staticmethod
    def _label(node: DisplayNode) -> str:
        color = _size_to_color(node.share)
        return f"[{color}]{escape(node.label)}[/{color}]"

    def render(self, *, file: Optional[IO[str]] = None) -> None:
        rprint(self.build_tree(), file=file)
