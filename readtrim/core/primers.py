"""
Primer and adapter matching.

Searches each primer (and its reverse complement) at every offset of a
read with a mismatch budget and no indels. Matches near either end become
trim targets; a match in the read body means the read is a chimera or
concatemer and cannot be salvaged by trimming.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from ..config import PrimerSpec
from ..utils.sequence import bounded_mismatches


class MatchKind(Enum):
    """Primer search verdict for one read."""
    NO_MATCH = 'no_match'
    TRIM_HEAD = 'trim_head'
    TRIM_TAIL = 'trim_tail'
    TRIM_BOTH = 'trim_both'
    CONTAMINATED = 'contaminated'


@dataclass(frozen=True)
class PrimerHit:
    """An accepted alignment of a primer entry against a read."""
    primer: str
    start: int
    end: int
    mismatches: int

    def head_key(self) -> Tuple[int, int]:
        # Fewest mismatches, then closest to the 5' end
        return (self.mismatches, self.start)

    def tail_key(self, read_length: int) -> Tuple[int, int]:
        # Fewest mismatches, then closest to the 3' end
        return (self.mismatches, read_length - self.end)


@dataclass(frozen=True)
class MatchOutcome:
    """Result of scanning a read for primers."""
    kind: MatchKind
    head_cut: int = 0
    tail_cut: int = 0
    head_hit: Optional[PrimerHit] = None
    tail_hit: Optional[PrimerHit] = None
    interior_hit: Optional[PrimerHit] = None

    @property
    def contaminated(self) -> bool:
        return self.kind == MatchKind.CONTAMINATED


NO_MATCH = MatchOutcome(kind=MatchKind.NO_MATCH)


def find_primer_hits(bases: str, primer: str, max_mismatches: int) -> List[PrimerHit]:
    """
    Find every offset where primer aligns with at most max_mismatches.

    Args:
        bases: Upper-case read sequence
        primer: Upper-case primer sequence
        max_mismatches: Hamming-distance budget

    Returns:
        List of PrimerHit, ordered by start
    """
    m = len(primer)
    hits = []
    for offset in range(len(bases) - m + 1):
        mismatches = bounded_mismatches(bases, offset, primer, max_mismatches)
        if mismatches <= max_mismatches:
            hits.append(PrimerHit(primer, offset, offset + m, mismatches))
    return hits


def classify_hit(hit: PrimerHit, read_length: int, end_proportion: float) -> Optional[str]:
    """
    Place a hit at the 'head', the 'tail', or None for the read interior.

    Margin boundaries are inclusive. A hit inside both margins goes to the
    nearer end, ties to the head.
    """
    margin = end_proportion * read_length
    in_head = hit.end <= margin
    in_tail = hit.start >= read_length - margin
    if in_head and in_tail:
        return 'head' if hit.start <= read_length - hit.end else 'tail'
    if in_head:
        return 'head'
    if in_tail:
        return 'tail'
    return None


class PrimerMatcher:
    """Bounded-mismatch primer search over a fixed primer set."""

    def __init__(self, primers: Iterable[PrimerSpec]):
        self.primers = tuple(primers)

    def __bool__(self) -> bool:
        return bool(self.primers)

    def scan(self, bases: str) -> MatchOutcome:
        """
        Scan a read for every configured primer.

        Args:
            bases: Upper-case read sequence

        Returns:
            MatchOutcome; CONTAMINATED as soon as any interior hit is found
        """
        n = len(bases)
        best_head = None
        best_tail = None

        for spec in self.primers:
            for entry in spec.entries:
                if len(entry) > n:
                    continue
                for hit in find_primer_hits(bases, entry, spec.max_mismatches):
                    placement = classify_hit(hit, n, spec.end_proportion)
                    if placement is None:
                        return MatchOutcome(kind=MatchKind.CONTAMINATED, interior_hit=hit)
                    if placement == 'head':
                        if best_head is None or hit.head_key() < best_head.head_key():
                            best_head = hit
                    elif best_tail is None or hit.tail_key(n) < best_tail.tail_key(n):
                        best_tail = hit

        if best_head and best_tail:
            kind = MatchKind.TRIM_BOTH
        elif best_head:
            kind = MatchKind.TRIM_HEAD
        elif best_tail:
            kind = MatchKind.TRIM_TAIL
        else:
            return NO_MATCH

        return MatchOutcome(
            kind=kind,
            head_cut=best_head.end if best_head else 0,
            tail_cut=n - best_tail.start if best_tail else 0,
            head_hit=best_head,
            tail_hit=best_tail,
        )


def match_primers(bases: str, primers: Iterable[PrimerSpec]) -> MatchOutcome:
    """Scan bases against primers; see PrimerMatcher.scan."""
    return PrimerMatcher(primers).scan(bases)
