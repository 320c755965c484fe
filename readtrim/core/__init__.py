"""
Core trim-decision engine for readtrim.
"""

from .models import (
    DiscardReason,
    PairDecision,
    Read,
    RecordShapeError,
    TrimDecision,
    TrimKind,
    TrimOperation,
    TrimSide,
)
from .pairs import coordinate_pair, trim_pair
from .polytail import scan_poly_tail
from .primers import (
    MatchKind,
    MatchOutcome,
    PrimerHit,
    PrimerMatcher,
    match_primers,
)
from .quality import scan_quality_window
from .trimmer import ReadTrimmer, trim_read

__all__ = [
    # Models
    'Read',
    'RecordShapeError',
    'TrimKind',
    'TrimSide',
    'TrimOperation',
    'TrimDecision',
    'PairDecision',
    'DiscardReason',
    # Scanners
    'scan_quality_window',
    'scan_poly_tail',
    'PrimerMatcher',
    'PrimerHit',
    'MatchKind',
    'MatchOutcome',
    'match_primers',
    # Trimming
    'ReadTrimmer',
    'trim_read',
    'trim_pair',
    'coordinate_pair',
]
