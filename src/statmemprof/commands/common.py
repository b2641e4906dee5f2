import argparse
from pathlib import Path

from statmemprof._config import NATIVE_WORD_SIZE
from statmemprof._config import ReportConfig
from statmemprof._errors import ConfigurationError
from statmemprof._errors import StatmemprofCommandError


def add_report_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("capture", help="Capture file with one sample per line")
    parser.add_argument(
        "-s",
        "--sampling-rate",
        help="Rate at which allocated words were sampled (defaults to 1e-4)",
        type=float,
        default=1e-4,
    )
    parser.add_argument(
        "-w",
        "--word-size",
        help=f"Size of a word in bytes (defaults to {NATIVE_WORD_SIZE})",
        type=int,
        default=NATIVE_WORD_SIZE,
    )
    parser.add_argument(
        "-m",
        "--min-samples",
        help="Hide call sites with fewer samples than this (defaults to 0)",
        type=int,
        default=0,
    )


def config_from_args(args: argparse.Namespace) -> ReportConfig:
    try:
        return ReportConfig(
            sampling_rate=args.sampling_rate,
            word_size=args.word_size,
            min_weight_threshold=args.min_samples,
        )
    except ConfigurationError as e:
        raise StatmemprofCommandError(str(e), exit_code=1) from e


def validate_capture_file(capture: str) -> Path:
    capture_path = Path(capture)
    if not capture_path.exists() or not capture_path.is_file():
        raise StatmemprofCommandError(f"No such file: {capture}", exit_code=1)
    return capture_path
