from ._config import ReportConfig
from ._errors import ConfigurationError
from ._errors import InvalidSampleError
from ._errors import StatmemprofError
from ._logging import set_log_level
from ._records import CapturedFrame
from ._records import Location
from ._records import SampleKind
from ._records import SampleRecord
from ._records import TimingStats
from ._session import IngestThread
from ._session import ReportSession
from ._snapshot import SnapshotNode
from ._snapshot import freeze
from ._trie import AggregationTrie
from ._trie import TrieNode
from ._version import __version__
from .reporters.render import DisplayNode
from .reporters.render import render

__all__ = [
    "AggregationTrie",
    "CapturedFrame",
    "ConfigurationError",
    "DisplayNode",
    "IngestThread",
    "InvalidSampleError",
    "Location",
    "ReportConfig",
    "ReportSession",
    "SampleKind",
    "SampleRecord",
    "SnapshotNode",
    "StatmemprofError",
    "TimingStats",
    "TrieNode",
    "__version__",
    "freeze",
    "render",
    "set_log_level",
]
