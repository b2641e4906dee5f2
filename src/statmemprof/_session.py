import logging
import threading
import time
from typing import Iterable
from typing import Optional

from statmemprof._config import ReportConfig
from statmemprof._errors import ConfigurationError
from statmemprof._errors import InvalidSampleError
from statmemprof._records import SampleRecord
from statmemprof._snapshot import SnapshotNode
from statmemprof._trie import AggregationTrie
from statmemprof.reporters.render import DisplayNode
from statmemprof.reporters.render import render

logger = logging.getLogger(__name__)


class ReportSession:
    """State shared by the producer and the reporting role of one session."""

    def __init__(
        self, config: ReportConfig, trie: Optional[AggregationTrie] = None
    ) -> None:
        self.config = config
        self.trie = trie if trie is not None else AggregationTrie()
        self.threshold = config.min_weight_threshold
        self.n_rejected = 0

    @property
    def n_samples(self) -> int:
        return len(self.trie)

    def ingest(self, record: SampleRecord) -> None:
        self.trie.ingest(record)

    def record_rejection(self, error: InvalidSampleError) -> None:
        self.n_rejected += 1
        logger.info("Rejected sample: %s", error)

    def set_threshold(self, threshold: int) -> None:
        if threshold < 0:
            raise ConfigurationError(
                f"Minimum weight threshold must not be negative, got {threshold}"
            )
        self.threshold = threshold

    def snapshot(self) -> SnapshotNode:
        return self.trie.freeze()

    def render(self, snapshot: SnapshotNode) -> DisplayNode:
        return render(snapshot, self.config, self.threshold)

    def refresh(self) -> DisplayNode:
        """Freeze the trie as it is now and render the result."""
        return self.render(self.snapshot())


class IngestThread(threading.Thread):
    """Feed every record of a sampling source into a session.

    The loop sleeps for zero seconds every ``yield_every`` records so that
    the reporting thread gets scheduled promptly even while samples keep
    arriving.
    """

    def __init__(
        self,
        session: ReportSession,
        source: Iterable[SampleRecord],
        *,
        yield_every: int = 1000,
    ) -> None:
        self._session = session
        self._source = source
        self._yield_every = yield_every
        self._canceled = threading.Event()
        self.error: Optional[OSError] = None
        super().__init__(name="statmemprof-ingest", daemon=True)

    def run(self) -> None:
        try:
            for index, record in enumerate(self._source, 1):
                if self._canceled.is_set():
                    return
                try:
                    self._session.ingest(record)
                except InvalidSampleError as e:
                    self._session.record_rejection(e)
                if index % self._yield_every == 0:
                    time.sleep(0)
        except OSError as e:
            logger.error("Reading samples failed: %s", e)
            self.error = e

    def cancel(self) -> None:
        self._canceled.set()
        close = getattr(self._source, "close", None)
        if callable(close):
            close()
