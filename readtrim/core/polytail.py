"""
Poly-X tail detection.

Poly-A tails show up in RNA-seq libraries; poly-G runs appear when
two-color chemistry sequences past the end of the insert. Both are
trailing-strand artifacts, so only the 3' end is scanned.
"""

POLY_TARGETS = ('A', 'G')


def scan_poly_tail(
    bases: str,
    target: str,
    min_length: int,
    min_proportion: float,
) -> int:
    """
    Find how many 3' bases belong to a homopolymer tail.

    Grows a terminal window one base at a time. From min_length onward a
    window is accepted when the share of target bases is at or above
    min_proportion. A dip below the threshold does not end the scan while
    later target bases could still bring the proportion back; it stops once
    recovery is impossible. The longest accepted window is then shrunk so
    that its inner edge is a target base.

    Args:
        bases: Read sequence
        target: 'A' or 'G'
        min_length: Shortest tail worth trimming
        min_proportion: Minimum fraction of target bases in the tail

    Returns:
        Number of bases to cut from the 3' end (0 if no tail)
    """
    target = target.upper()
    if target not in POLY_TARGETS:
        raise ValueError(f"Poly-tail target must be one of {POLY_TARGETS}, got {target!r}")

    n = len(bases)
    if min_length < 1 or n < min_length:
        return 0

    count = 0
    best = 0
    for length in range(1, n + 1):
        if bases[n - length].upper() == target:
            count += 1
        if length < min_length:
            continue
        if count / length >= min_proportion:
            best = length
        elif count + (n - length) < min_proportion * n:
            # Even an all-target remainder cannot lift the proportion back
            break

    # A tail never starts on a foreign base
    while best > 0 and bases[n - best].upper() != target:
        best -= 1
    return best
