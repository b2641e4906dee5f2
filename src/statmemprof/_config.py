import struct
from dataclasses import dataclass
from dataclasses import field

from statmemprof._errors import ConfigurationError

NATIVE_WORD_SIZE = struct.calcsize("P")


@dataclass(frozen=True)
class ReportConfig:
    """Display-time settings of a reporting session.

    None of these values affect aggregation: they only scale the size
    estimate and filter which nodes are shown.
    """

    sampling_rate: float
    word_size: int = field(default=NATIVE_WORD_SIZE)
    min_weight_threshold: int = 0

    def __post_init__(self) -> None:
        if not self.sampling_rate > 0:
            raise ConfigurationError(
                f"Sampling rate must be positive, got {self.sampling_rate}"
            )
        if self.word_size <= 0:
            raise ConfigurationError(
                f"Word size must be positive, got {self.word_size}"
            )
        if self.min_weight_threshold < 0:
            raise ConfigurationError(
                "Minimum weight threshold must not be negative,"
                f" got {self.min_weight_threshold}"
            )

    def estimated_size(self, weight: int) -> float:
        """Estimated number of bytes represented by ``weight`` samples."""
        return weight / self.sampling_rate * self.word_size
