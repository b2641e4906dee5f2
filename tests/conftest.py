import pytest

from statmemprof import ReportConfig
from statmemprof.sources import CaptureWriter
from tests.utils import example_records


@pytest.fixture
def config():
    return ReportConfig(sampling_rate=1.0, word_size=8)


@pytest.fixture
def capture_file(tmp_path):
    path = tmp_path / "capture.jsonl"
    with CaptureWriter(path) as writer:
        for record in example_records():
            writer.write(record)
    return path
