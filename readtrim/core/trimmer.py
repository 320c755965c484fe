"""
Per-read trim decisions.

Runs the quality, poly-tail and primer scanners against the original
coordinates of a read and merges their cuts into one TrimDecision. Each
scanner certifies its own region as unwanted, so the longest cut on each
side wins.
"""

from typing import List, Optional, Tuple
import logging

from ..config import TrimConfig
from .models import (
    DiscardReason,
    Read,
    TrimDecision,
    TrimKind,
    TrimOperation,
    TrimSide,
)
from .polytail import scan_poly_tail
from .primers import MatchOutcome, PrimerMatcher
from .quality import scan_quality_window

logger = logging.getLogger(__name__)

POLY_KINDS = {'A': TrimKind.POLY_A, 'G': TrimKind.POLY_G}


def _cut_operations(
    kind: TrimKind,
    head_cut: int,
    tail_cut: int,
    read_length: int,
) -> List[TrimOperation]:
    """Turn non-zero head/tail cut lengths into operations."""
    ops = []
    if head_cut > 0:
        ops.append(TrimOperation(kind, TrimSide.HEAD, head_cut, read_length))
    if tail_cut > 0:
        ops.append(TrimOperation(kind, TrimSide.TAIL, read_length - tail_cut, read_length))
    return ops


def retained_range(read_length: int, head_cut: int, tail_cut: int) -> Tuple[int, int]:
    """Retained [start, end) for merged cuts, clamped so start <= end."""
    start = min(head_cut, read_length)
    end = max(start, read_length - tail_cut)
    return start, end


class ReadTrimmer:
    """
    Trims reads against one configuration.

    The primer matcher is built once; the trimmer holds no per-read state and
    can be shared by any number of callers.
    """

    def __init__(self, config: TrimConfig):
        self.config = config
        self.matcher = PrimerMatcher(config.primer_specs)

    def scan_primers(self, read: Read) -> Optional[MatchOutcome]:
        if not self.matcher:
            return None
        return self.matcher.scan(read.bases)

    def trim(self, read: Read) -> TrimDecision:
        """
        Decide how to trim a read.

        Args:
            read: Read to evaluate (never modified)

        Returns:
            TrimDecision over the original read coordinates
        """
        config = self.config
        n = len(read)

        # 1. Quality window, both ends
        qual_head, qual_tail = scan_quality_window(
            read.qualities, config.window_size, config.window_min_qual_score
        )

        # 2. Poly-X tails, 3' end only
        poly_cuts = []
        for target in config.poly_targets:
            cut = scan_poly_tail(
                read.bases, target, config.trim_poly_x_length, config.trim_poly_x_proportion
            )
            poly_cuts.append((POLY_KINDS[target], cut))

        # 3. Primers; an interior hit drops the read outright
        outcome = self.scan_primers(read)
        if outcome is not None and outcome.contaminated:
            logger.debug(
                f"{read.record_id}: interior primer {outcome.interior_hit.primer} "
                f"at {outcome.interior_hit.start}"
            )
            return TrimDecision(
                read_length=n,
                retained_range=(0, 0),
                discarded=True,
                discard_reason=DiscardReason.PRIMER_INTERIOR,
            )
        primer_head = outcome.head_cut if outcome else 0
        primer_tail = outcome.tail_cut if outcome else 0

        # 4. Longest cut wins on each side
        head = max(qual_head, primer_head)
        tail = max([qual_tail, primer_tail] + [cut for _, cut in poly_cuts])

        # 5. Length filter
        start, end = retained_range(n, head, tail)
        too_short = head >= n - tail or (n - tail - head) < config.minimum_remaining_read_size

        # 6. Operations in evaluation order
        operations = _cut_operations(TrimKind.QUALITY, qual_head, qual_tail, n)
        for kind, cut in poly_cuts:
            operations.extend(_cut_operations(kind, 0, cut, n))
        operations.extend(_cut_operations(TrimKind.PRIMER, primer_head, primer_tail, n))

        return TrimDecision(
            read_length=n,
            retained_range=(start, end),
            operations=tuple(operations),
            discarded=too_short,
            discard_reason=DiscardReason.TOO_SHORT if too_short else None,
        )


def trim_read(read: Read, config: TrimConfig) -> TrimDecision:
    """Trim a single read; see ReadTrimmer.trim."""
    return ReadTrimmer(config).trim(read)
