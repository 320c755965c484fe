"""
Sequence manipulation utilities.

Provides the DNA and quality-string helpers shared by the trimmers.
"""

import re
from typing import Tuple


# Bases a read or primer may contain
DNA_PATTERN = re.compile(r'^[ACGTNacgtn]+$')

COMPLEMENT = {
    'A': 'T', 'T': 'A', 'G': 'C', 'C': 'G', 'N': 'N',
    'a': 't', 't': 'a', 'g': 'c', 'c': 'g', 'n': 'n'
}


def is_dna_sequence(s: str) -> bool:
    """Check if string is a non-empty DNA sequence."""
    return bool(s) and bool(DNA_PATTERN.match(s))


def reverse_complement(seq: str) -> str:
    """Return reverse complement of DNA sequence."""
    return ''.join(COMPLEMENT.get(base, 'N') for base in reversed(seq))


def bounded_mismatches(read: str, offset: int, primer: str, limit: int) -> int:
    """Count mismatches of primer against read[offset:], stopping past limit.

    The returned count is exact when it is <= limit; otherwise it is limit + 1.
    """
    mismatches = 0
    for i, base in enumerate(primer):
        if read[offset + i] != base:
            mismatches += 1
            if mismatches > limit:
                break
    return mismatches


def decode_qualities(quality: str, offset: int = 33) -> Tuple[int, ...]:
    """Decode an ASCII FASTQ quality string into Phred scores.

    Raises ValueError for characters below the encoding offset.
    """
    scores = tuple(ord(c) - offset for c in quality)
    if scores and min(scores) < 0:
        raise ValueError(f"Quality character below offset {offset}: {quality!r}")
    return scores
