"""
I/O modules for readtrim.
"""

from .fastq import (
    FastqFormatError,
    FastqRecord,
    FastqWriter,
    PairingError,
    read_fastq,
    read_fastq_pairs,
    write_fastq,
)
from .output import (
    TrimStats,
    format_summary,
    write_stats_tsv,
)
from .preview import (
    legend,
    render_pair,
    render_read,
)

__all__ = [
    'FastqRecord',
    'FastqWriter',
    'FastqFormatError',
    'PairingError',
    'read_fastq',
    'read_fastq_pairs',
    'write_fastq',
    'TrimStats',
    'write_stats_tsv',
    'format_summary',
    'render_read',
    'render_pair',
    'legend',
]
