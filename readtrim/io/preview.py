"""
Terminal preview of trim decisions.

Shows each read with the bases that would be removed colored by what
removed them. Nothing is written to disk in preview mode.
"""

from itertools import groupby
from typing import List, Optional

import click

from ..core.models import PairDecision, Read, TrimDecision, TrimKind

KIND_COLORS = {
    TrimKind.QUALITY: 'red',
    TrimKind.POLY_A: 'yellow',
    TrimKind.POLY_G: 'magenta',
    TrimKind.PRIMER: 'cyan',
}


def base_annotations(decision: TrimDecision) -> List[Optional[TrimKind]]:
    """
    Which operation removes each base, or None for retained bases.

    Where cuts overlap, the first operation in application order wins.
    """
    annotations = []
    for i in range(decision.read_length):
        kind = None
        for op in decision.operations:
            if op.removes(i):
                kind = op.kind
                break
        annotations.append(kind)
    return annotations


def render_bases(read: Read, decision: TrimDecision, color: bool = True) -> str:
    """Color the read's bases by trim kind."""
    annotations = base_annotations(decision)
    segments = []
    position = 0
    for kind, group in groupby(annotations):
        length = len(list(group))
        chunk = read.bases[position:position + length]
        position += length
        if not color:
            segments.append(chunk.lower() if kind is not None else chunk)
        elif kind is not None:
            segments.append(click.style(chunk, fg=KIND_COLORS[kind]))
        elif decision.discarded:
            segments.append(click.style(chunk, dim=True))
        else:
            segments.append(chunk)
    return ''.join(segments)


def render_read(read: Read, decision: TrimDecision, color: bool = True) -> str:
    """
    Render one read for preview.

    Args:
        read: Original read
        decision: Trim decision for the read
        color: Use ANSI colors; otherwise trimmed bases are lower-cased

    Returns:
        Two-line string: '>' header with status, then the annotated bases
    """
    if decision.discarded:
        status = f"discarded:{decision.discard_reason.value}"
    else:
        status = f"kept:{decision.start}-{decision.end}"
    ops = ' '.join(str(op) for op in decision.operations)
    header = f">{read.record_id} {status}"
    if ops:
        header += f" {ops}"
    return f"{header}\n{render_bases(read, decision, color=color)}"


def render_pair(read1: Read, read2: Read, decision: PairDecision, color: bool = True) -> str:
    """Render both mates; a discarded pair marks both mates."""
    lines = [
        render_read(read1, decision.mate1, color=color),
        render_read(read2, decision.mate2, color=color),
    ]
    if decision.pair_discarded:
        lines.append(click.style("# pair discarded", dim=True) if color else "# pair discarded")
    return '\n'.join(lines)


def legend(color: bool = True) -> str:
    """One-line key of the trim colors."""
    if not color:
        return "# trimmed bases shown in lower case"
    parts = [click.style(kind.value, fg=fg) for kind, fg in KIND_COLORS.items()]
    return "# " + ' '.join(parts)
