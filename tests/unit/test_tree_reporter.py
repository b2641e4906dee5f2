from dataclasses import dataclass
from typing import List

from statmemprof import ReportSession
from statmemprof.reporters.tree import ReportTree
from statmemprof.reporters.tree import TreeReporter
from tests.utils import async_run
from tests.utils import example_records
from tests.utils import make_record

FOLDER = "\N{OPEN FILE FOLDER}"
PAGE = "\N{PAGE FACING UP}"


@dataclass
class TreeElement:
    label: str
    children: List["TreeElement"]
    allow_expand: bool
    is_expanded: bool


def tree_to_dict(tree):
    return TreeElement(
        str(tree.label),
        [tree_to_dict(child) for child in tree.children],
        tree.allow_expand,
        tree.is_expanded,
    )


def run_app(app, *actions):
    """Run ``app``, perform ``actions`` and return the displayed tree root."""

    async def run_test():
        async with app.run_test() as pilot:
            await pilot.pause()
            for action in actions:
                await action(app, pilot)
                await pilot.pause()
            tree = app.screen.query_one(ReportTree)
            status = app.screen.status_text()
            return tree_to_dict(tree.root), status

    return async_run(run_test())


def press(*keys):
    async def action(app, pilot):
        await pilot.press(*keys)

    return action


def expand_first_child():
    async def action(app, pilot):
        tree = app.screen.query_one(ReportTree)
        tree.root.children[0].expand()

    return action


def ingest(*records):
    async def action(app, pilot):
        for record in records:
            app.session.ingest(record)

    return action


ROOT_LABEL = "136.000B total (70.59% fresh, 29.41% retained)"
A_LABEL = "136.000B | 1, 3, 2.0 | a.py:1 0-5 (70.59% fresh, 29.41% retained)"
B_LABEL = "120.000B | 1, 3, 2.0 | b.py:1 0-5 (66.67% fresh, 33.33% retained)"


class TestTreeTui:
    def test_no_samples(self, config):
        # GIVEN
        reporter = TreeReporter.from_records([], config)

        # WHEN
        root, status = run_app(reporter.get_app())

        # THEN
        assert root.label == "<No samples>"
        assert root.children == []
        assert root.allow_expand is False
        assert "[b]Samples[/]: 0" in status

    def test_root_is_expanded_and_children_are_collapsed(self, config):
        # GIVEN
        reporter = TreeReporter.from_records(example_records(), config)

        # WHEN
        root, _ = run_app(reporter.get_app())

        # THEN
        assert root == TreeElement(
            label=f"{FOLDER} {ROOT_LABEL}",
            children=[
                TreeElement(
                    label=f"{FOLDER} {A_LABEL}",
                    children=[],
                    allow_expand=True,
                    is_expanded=False,
                )
            ],
            allow_expand=True,
            is_expanded=True,
        )

    def test_children_are_added_when_expanded(self, config):
        # GIVEN
        reporter = TreeReporter.from_records(example_records(), config)

        # WHEN
        root, _ = run_app(reporter.get_app(), expand_first_child())

        # THEN
        (node_a,) = root.children
        assert node_a.is_expanded
        assert node_a.children == [
            TreeElement(
                label=f"{PAGE} {B_LABEL}",
                children=[],
                allow_expand=False,
                is_expanded=False,
            )
        ]

    def test_threshold_hides_small_children(self, config):
        # GIVEN
        reporter = TreeReporter.from_records(example_records(), config)
        reporter.session.set_threshold(16)

        # WHEN
        root, status = run_app(reporter.get_app())

        # THEN
        (node_a,) = root.children
        assert node_a == TreeElement(
            label=f"{PAGE} {A_LABEL}",
            children=[],
            allow_expand=False,
            is_expanded=False,
        )
        assert "[b]Threshold[/]: 16" in status

    def test_lowering_threshold_shows_children(self, config):
        # GIVEN
        reporter = TreeReporter.from_records(example_records(), config)
        reporter.session.set_threshold(16)

        # WHEN
        root, status = run_app(reporter.get_app(), press("-"), expand_first_child())

        # THEN
        (node_a,) = root.children
        assert [child.label for child in node_a.children] == [f"{PAGE} {B_LABEL}"]
        assert "[b]Threshold[/]: 8" in status

    def test_raising_threshold_hides_children(self, config):
        # GIVEN
        reporter = TreeReporter.from_records(example_records(), config)
        reporter.session.set_threshold(8)

        # WHEN
        root, status = run_app(reporter.get_app(), expand_first_child(), press("+"))

        # THEN
        (node_a,) = root.children
        assert node_a.children == []
        assert node_a.allow_expand is False
        assert "[b]Threshold[/]: 16" in status

    def test_refresh_shows_new_samples(self, config):
        # GIVEN
        reporter = TreeReporter.from_records(example_records(), config)
        app = reporter.get_app()

        # WHEN
        root, status = run_app(
            app, ingest(make_record(["c"], weight=20, timestamp=9)), press("r")
        )

        # THEN
        assert root.label == f"{FOLDER} 296.000B total (86.49% fresh, 13.51% retained)"
        assert [child.label for child in root.children] == [
            f"{PAGE} 160.000B | 9, 9, 9.0 | c.py:1 0-5 (100.00% fresh)",
            f"{FOLDER} {A_LABEL}",
        ]
        assert "[b]Samples[/]: 4" in status

    def test_shown_tree_does_not_change_until_refresh(self, config):
        reporter = TreeReporter.from_records(example_records(), config)

        root, _ = run_app(
            reporter.get_app(), ingest(make_record(["c"], weight=20, timestamp=9))
        )

        assert root.label == f"{FOLDER} {ROOT_LABEL}"

    def test_refresh_keeps_expanded_nodes(self, config):
        # GIVEN
        reporter = TreeReporter.from_records(example_records(), config)

        # WHEN
        root, _ = run_app(
            reporter.get_app(),
            expand_first_child(),
            ingest(make_record(["a", "b"], weight=3, timestamp=4)),
            press("r"),
        )

        # THEN
        (node_a,) = root.children
        assert node_a.is_expanded
        assert [child.label for child in node_a.children] == [
            f"{PAGE} 144.000B | 1, 4, 2.7 | b.py:1 0-5 (72.22% fresh, 27.78% retained)"
        ]

    def test_rejections_are_reported(self, config):
        records = [*example_records(), make_record(["a"], weight=-1)]

        reporter = TreeReporter.from_records(records, config)
        _, status = run_app(reporter.get_app())

        assert reporter.session.n_rejected == 1
        assert "[b]Rejected[/]: 1" in status

    def test_automatic_refresh(self, config):
        # GIVEN
        session = ReportSession(config)
        app = TreeReporter(session).get_app(poll_interval=0.01)

        async def wait(app, pilot):
            await pilot.pause(0.2)

        # WHEN
        root, _ = run_app(app, ingest(*example_records()), wait)

        # THEN
        assert root.label == f"{FOLDER} {ROOT_LABEL}"
