import argparse
import sys
from typing import IO
from typing import Optional

from rich import print as rprint
from rich.markup import escape

from statmemprof._errors import InvalidSampleError
from statmemprof._errors import StatmemprofCommandError
from statmemprof._trie import validate_record
from statmemprof.commands.common import validate_capture_file
from statmemprof.sources import JSONLinesSource


class ParseCommand:
    """Debug a capture file by parsing and printing each record in it"""

    def prepare_parser(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("capture", help="Capture file with one sample per line")

    def run(self, args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
        capture_path = validate_capture_file(args.capture)
        try:
            self.dump_records(JSONLinesSource(capture_path))
        except OSError as e:
            raise StatmemprofCommandError(
                f"Failed to read samples from {capture_path}\nReason: {e}",
                exit_code=1,
            )

    def dump_records(
        self, source: JSONLinesSource, file: Optional[IO[str]] = None
    ) -> None:
        file = file if file is not None else sys.stdout
        n_rejected = 0
        for record in source:
            try:
                validate_record(record)
            except InvalidSampleError as e:
                n_rejected += 1
                rprint(f"[red]REJECTED[/] {escape(str(e))}", file=file)
                continue
            rprint(escape(repr(record)), file=file)
        rprint(
            f"[b]Malformed lines[/]: {source.n_malformed_lines}"
            f"  [b]Rejected records[/]: {n_rejected}",
            file=file,
        )
