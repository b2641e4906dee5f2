import argparse
from contextlib import suppress

from statmemprof._session import IngestThread
from statmemprof._session import ReportSession
from statmemprof.commands.common import add_report_arguments
from statmemprof.commands.common import config_from_args
from statmemprof.commands.common import validate_capture_file
from statmemprof.reporters.tree import TreeApp
from statmemprof.sources import JSONLinesSource


class LiveCommand:
    """Follow a growing capture file and show its call tree as it updates"""

    def prepare_parser(self, parser: argparse.ArgumentParser) -> None:
        add_report_arguments(parser)
        parser.add_argument(
            "-i",
            "--poll-interval",
            help="Seconds between automatic refreshes (defaults to 1.0)",
            type=float,
            default=1.0,
        )

    def run(self, args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
        if args.poll_interval <= 0:
            parser.error("The --poll-interval argument must be positive")
        capture_path = validate_capture_file(args.capture)
        session = ReportSession(config_from_args(args))
        with suppress(KeyboardInterrupt):
            self.start_live_interface(
                session, JSONLinesSource(capture_path, follow=True), args.poll_interval
            )

    def start_live_interface(
        self, session: ReportSession, source: JSONLinesSource, poll_interval: float
    ) -> None:
        ingest_thread = IngestThread(session, source)
        ingest_thread.start()
        try:
            TreeApp(session, poll_interval=poll_interval).run()
        finally:
            ingest_thread.cancel()
            ingest_thread.join()
