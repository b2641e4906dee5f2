from typing import Optional

from statmemprof._records import TimingStats

TIMING_PLACEHOLDER = "<...>"


def size_fmt(num: float, suffix: str = "B") -> str:
    for unit in ["", "K", "M", "G", "T", "P", "E", "Z"]:
        if abs(num) < 1024.0:
            return f"{num:5.3f}{unit}{suffix}"
        num /= 1024.0
    return f"{num:.1f}Y{suffix}"


def format_timing(timing: Optional[TimingStats]) -> str:
    if timing is None:
        return TIMING_PLACEHOLDER
    return f"{timing.min}, {timing.max}, {timing.mean:.1f}"
