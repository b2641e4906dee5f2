import argparse
import logging
import sys
from typing import List
from typing import Optional

from statmemprof._errors import StatmemprofCommandError
from statmemprof._errors import StatmemprofError
from statmemprof._logging import set_log_level
from statmemprof._version import __version__

from . import live
from . import parse
from . import tree
from .protocol import Command

_COMMANDS: List[Command] = [
    tree.TreeCommand(),
    live.LiveCommand(),
    parse.ParseCommand(),
]
_EXAMPLES: List[str] = [
    "$ statmemprof tree capture.jsonl",
    "$ statmemprof tree --print --min-samples 10 capture.jsonl",
    "$ statmemprof live capture.jsonl",
]

_DESCRIPTION = """\
Statistical memory profile viewer

Aggregate sampled allocations by call stack and browse the result as a tree.

    Example:

    """ + """
    """.join(
    _EXAMPLES
)


def get_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=_DESCRIPTION,
        prog="statmemprof",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity. Option is additive and can be specified up to 3 times",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=__version__,
        help="Displays the current version of statmemprof",
    )

    subparsers = parser.add_subparsers(
        help="Mode of operation",
        dest="command",
        required=True,
    )

    for command in _COMMANDS:
        # Extract the CLI command name from the classes' names
        assert command.__class__.__name__.endswith("Command")
        name = command.__class__.__name__[: -len("Command")].lower()

        command_parser = subparsers.add_parser(
            name, help=command.__doc__, description=command.__doc__
        )
        command_parser.set_defaults(entrypoint=command.run)
        command.prepare_parser(command_parser)

    return parser


def determine_logging_level_from_verbosity(
    verbose_level: int,
) -> int:  # pragma: no cover
    if verbose_level == 0:
        return logging.WARNING
    elif verbose_level == 1:
        return logging.INFO
    else:
        return logging.DEBUG


def main(args: Optional[List[str]] = None) -> int:
    if args is None:
        args = sys.argv[1:]

    parser = get_argument_parser()
    arg_values = parser.parse_args(args=args)
    set_log_level(determine_logging_level_from_verbosity(arg_values.verbose))

    try:
        arg_values.entrypoint(arg_values, parser)
    except StatmemprofCommandError as e:
        print(e, file=sys.stderr)
        return e.exit_code
    except StatmemprofError as e:
        print(e, file=sys.stderr)
        return 1
    else:
        return 0
