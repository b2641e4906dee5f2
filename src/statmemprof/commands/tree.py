import argparse

from statmemprof._errors import StatmemprofCommandError
from statmemprof.commands.common import add_report_arguments
from statmemprof.commands.common import config_from_args
from statmemprof.commands.common import validate_capture_file
from statmemprof.reporters import BaseReporter
from statmemprof.reporters.text import TextReporter
from statmemprof.reporters.tree import TreeReporter
from statmemprof.sources import JSONLinesSource


class TreeCommand:
    """Generate a tree view in the terminal of the sampled call stacks"""

    def prepare_parser(self, parser: argparse.ArgumentParser) -> None:
        add_report_arguments(parser)
        parser.add_argument(
            "-p",
            "--print",
            help="Print the tree instead of opening the interactive view",
            action="store_true",
            dest="print_tree",
            default=False,
        )
        parser.add_argument(
            "-d",
            "--max-depth",
            help="Maximum depth of the printed tree (defaults to unlimited)",
            type=int,
            default=None,
        )

    def run(self, args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
        if args.max_depth is not None and args.max_depth < 0:
            parser.error("The --max-depth argument must not be negative")
        capture_path = validate_capture_file(args.capture)
        config = config_from_args(args)

        source = JSONLinesSource(capture_path)
        try:
            tree_reporter = TreeReporter.from_records(source, config)
        except OSError as e:
            raise StatmemprofCommandError(
                f"Failed to read samples from {capture_path}\nReason: {e}",
                exit_code=1,
            )

        reporter: BaseReporter = tree_reporter
        if args.print_tree:
            reporter = TextReporter(
                tree_reporter.session.refresh(), max_depth=args.max_depth
            )
        reporter.render()
