"""
Paired-end coordination.

Mates are trimmed independently, but downstream tools pair records by
position across the two output files, so a pair is kept or dropped as a
unit.
"""

from ..config import TrimConfig
from .models import PairDecision, Read
from .trimmer import ReadTrimmer


def coordinate_pair(trimmer: ReadTrimmer, read1: Read, read2: Read) -> PairDecision:
    """Trim both mates with an existing trimmer and share the discard verdict."""
    mate1 = trimmer.trim(read1)
    mate2 = trimmer.trim(read2)
    return PairDecision(
        mate1=mate1,
        mate2=mate2,
        pair_discarded=mate1.discarded or mate2.discarded,
    )


def trim_pair(read1: Read, read2: Read, config: TrimConfig) -> PairDecision:
    """
    Trim a read pair.

    Args:
        read1: First mate
        read2: Second mate
        config: Trimming configuration

    Returns:
        PairDecision; pair_discarded is set if either mate fails
    """
    return coordinate_pair(ReadTrimmer(config), read1, read2)
