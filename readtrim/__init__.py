"""
readtrim - quality, poly-X tail and primer trimming for FASTQ reads.
"""

__version__ = "0.1.0"

from .config import (
    ConfigError,
    PrimerSpec,
    TrimConfig,
)
from .core import (
    DiscardReason,
    PairDecision,
    Read,
    RecordShapeError,
    TrimDecision,
    trim_pair,
    trim_read,
)

__all__ = [
    "TrimConfig",
    "PrimerSpec",
    "ConfigError",
    "Read",
    "RecordShapeError",
    "TrimDecision",
    "PairDecision",
    "DiscardReason",
    "trim_read",
    "trim_pair",
    "__version__",
]
