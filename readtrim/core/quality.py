"""
Sliding-window quality trimming.

Finds how many bases to drop from each end of a read so that the retained
portion starts and ends with a window whose mean quality meets a threshold.
"""

from typing import Sequence, Tuple

import numpy as np


def window_sums(qualities: Sequence[int], window_size: int) -> np.ndarray:
    """Sum of every run of window_size consecutive scores.

    Element i covers qualities[i:i + window_size]. A read shorter than the
    window yields a single sum over the whole read.
    """
    q = np.asarray(qualities, dtype=np.int64)
    if len(q) <= window_size:
        return np.array([q.sum()], dtype=np.int64)
    cumulative = np.concatenate(([0], np.cumsum(q)))
    return cumulative[window_size:] - cumulative[:-window_size]


def scan_quality_window(
    qualities: Sequence[int],
    window_size: int,
    min_avg_qual: float,
) -> Tuple[int, int]:
    """
    Compute head and tail quality cuts for one read.

    The head cut is the start of the first window whose mean is at least
    min_avg_qual; the tail cut is the distance from the read end to the end
    of the last such window. The retained portion therefore starts and ends
    with a passing window. When no window passes, both cuts stop at the
    read midpoint and the whole read is cut (head + tail == len).

    Args:
        qualities: Phred scores of the read
        window_size: Number of consecutive scores averaged
        min_avg_qual: Minimum acceptable window mean

    Returns:
        Tuple of (head_cut, tail_cut), both counted from their own end
    """
    n = len(qualities)
    if n == 0:
        return 0, 0

    width = min(window_size, n)
    sums = window_sums(qualities, window_size)
    # Integer sums against the scaled threshold avoid float rounding
    passing = np.flatnonzero(sums >= min_avg_qual * width)

    if len(passing) == 0:
        return n // 2, n - n // 2

    return int(passing[0]), n - (int(passing[-1]) + width)
