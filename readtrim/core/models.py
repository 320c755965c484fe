"""
Data models for per-read trim decisions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from ..utils.sequence import decode_qualities


class RecordShapeError(ValueError):
    """A record whose bases and qualities cannot form a valid read."""


class TrimKind(Enum):
    """What triggered a trim operation."""
    QUALITY = 'quality'
    POLY_A = 'poly_a'
    POLY_G = 'poly_g'
    PRIMER = 'primer'


class TrimSide(Enum):
    """Read end a trim operation removes bases from."""
    HEAD = 'head'
    TAIL = 'tail'


class DiscardReason(Enum):
    """Why a read was dropped instead of trimmed."""
    PRIMER_INTERIOR = 'primer_interior'
    TOO_SHORT = 'too_short'


@dataclass(frozen=True)
class Read:
    """
    A single sequenced read.

    Attributes:
        record_id: Opaque identifier from the FASTQ header
        bases: Upper-case base sequence
        qualities: Phred quality score per base
    """
    record_id: str
    bases: str
    qualities: Tuple[int, ...]

    def __post_init__(self):
        if not self.bases:
            raise RecordShapeError(f"Read {self.record_id} is empty")
        if len(self.bases) != len(self.qualities):
            raise RecordShapeError(
                f"Read {self.record_id} has {len(self.bases)} bases "
                f"but {len(self.qualities)} quality scores"
            )
        # Frozen, so bypass __setattr__ to normalize
        object.__setattr__(self, 'bases', self.bases.upper())
        object.__setattr__(self, 'qualities', tuple(self.qualities))

    @classmethod
    def from_fastq(
        cls,
        name: str,
        sequence: str,
        quality: str,
        quality_offset: int = 33,
    ) -> 'Read':
        """Build a read from raw FASTQ fields."""
        try:
            qualities = decode_qualities(quality, quality_offset)
        except ValueError as e:
            raise RecordShapeError(f"Read {name}: {e}") from e
        return cls(record_id=name, bases=sequence, qualities=qualities)

    def slice(self, start: int, end: int) -> 'Read':
        """Keep only bases[start:end] and their qualities."""
        return Read(self.record_id, self.bases[start:end], self.qualities[start:end])

    def __len__(self) -> int:
        return len(self.bases)


@dataclass(frozen=True)
class TrimOperation:
    """
    One cut applied to a read.

    cut_position is an absolute offset into the original read: a HEAD cut
    removes bases [0, cut_position), a TAIL cut removes [cut_position, len).
    """
    kind: TrimKind
    side: TrimSide
    cut_position: int
    read_length: int

    @property
    def length(self) -> int:
        """Number of bases this operation removes on its own."""
        if self.side == TrimSide.HEAD:
            return self.cut_position
        return self.read_length - self.cut_position

    def removes(self, index: int) -> bool:
        """True if the base at index falls inside this cut."""
        if self.side == TrimSide.HEAD:
            return index < self.cut_position
        return index >= self.cut_position

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.side.value}@{self.cut_position}"


@dataclass(frozen=True)
class TrimDecision:
    """Outcome of trimming one read."""
    read_length: int
    retained_range: Tuple[int, int]
    operations: Tuple[TrimOperation, ...] = field(default_factory=tuple)
    discarded: bool = False
    discard_reason: Optional[DiscardReason] = None

    @property
    def start(self) -> int:
        return self.retained_range[0]

    @property
    def end(self) -> int:
        return self.retained_range[1]

    @property
    def retained_length(self) -> int:
        return self.end - self.start

    @property
    def kept(self) -> bool:
        return not self.discarded

    def apply(self, record):
        """Slice the retained range out of a record.

        Works on a Read or a FastqRecord (anything with record_id and
        slice(start, end)). Raises ValueError if the decision discarded it.
        """
        if self.discarded:
            raise ValueError(f"Read {record.record_id} was discarded ({self.discard_reason.value})")
        return record.slice(self.start, self.end)


@dataclass(frozen=True)
class PairDecision:
    """Outcome of trimming both mates of a read pair."""
    mate1: TrimDecision
    mate2: TrimDecision
    pair_discarded: bool

    @property
    def kept(self) -> bool:
        return not self.pair_discarded
