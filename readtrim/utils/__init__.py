"""
Utility modules for readtrim.
"""

from .sequence import (
    bounded_mismatches,
    decode_qualities,
    is_dna_sequence,
    reverse_complement,
)

__all__ = [
    'reverse_complement',
    'bounded_mismatches',
    'is_dna_sequence',
    'decode_qualities',
]
