"""
Run statistics and summary output.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional
import logging

import pandas as pd

from ..core.models import DiscardReason, PairDecision, TrimDecision, TrimKind

logger = logging.getLogger(__name__)


@dataclass
class TrimStats:
    """Counts for one trimming run. A read pair counts as one record."""
    mode: str = 'single'
    records_in: int = 0
    records_out: int = 0
    discarded_too_short: int = 0
    discarded_primer_interior: int = 0
    malformed_records: int = 0
    bases_in: int = 0
    bases_out: int = 0
    operations: Dict[str, int] = field(
        default_factory=lambda: {kind.value: 0 for kind in TrimKind}
    )

    @property
    def discarded(self) -> int:
        return self.discarded_too_short + self.discarded_primer_interior

    @property
    def pass_rate(self) -> float:
        return (self.records_out / self.records_in) if self.records_in > 0 else 0.0

    @property
    def bases_retained_rate(self) -> float:
        return (self.bases_out / self.bases_in) if self.bases_in > 0 else 0.0

    def _count_decision(self, decision: TrimDecision):
        self.bases_in += decision.read_length
        if not decision.discarded:
            self.bases_out += decision.retained_length
        for op in decision.operations:
            self.operations[op.kind.value] += 1

    def _count_discard(self, reason: Optional[DiscardReason]):
        if reason == DiscardReason.PRIMER_INTERIOR:
            self.discarded_primer_interior += 1
        else:
            self.discarded_too_short += 1

    def add_decision(self, decision: TrimDecision):
        """Tally a single-end decision."""
        self.records_in += 1
        self._count_decision(decision)
        if decision.discarded:
            self._count_discard(decision.discard_reason)
        else:
            self.records_out += 1

    def add_pair(self, decision: PairDecision):
        """Tally a paired-end decision."""
        self.records_in += 1
        for mate in (decision.mate1, decision.mate2):
            self.bases_in += mate.read_length
            for op in mate.operations:
                self.operations[op.kind.value] += 1
        if decision.pair_discarded:
            # Interior primers take precedence over length in the tally
            reasons = {decision.mate1.discard_reason, decision.mate2.discard_reason}
            if DiscardReason.PRIMER_INTERIOR in reasons:
                self._count_discard(DiscardReason.PRIMER_INTERIOR)
            else:
                self._count_discard(DiscardReason.TOO_SHORT)
        else:
            self.records_out += 1
            self.bases_out += decision.mate1.retained_length + decision.mate2.retained_length

    def add_malformed(self):
        self.records_in += 1
        self.malformed_records += 1

    def to_dict(self) -> Dict:
        """Convert to a flat dictionary for output."""
        row = {
            'mode': self.mode,
            'records_in': self.records_in,
            'records_out': self.records_out,
            'discarded_too_short': self.discarded_too_short,
            'discarded_primer_interior': self.discarded_primer_interior,
            'malformed_records': self.malformed_records,
            'pass_rate': f"{self.pass_rate:.4f}",
            'bases_in': self.bases_in,
            'bases_out': self.bases_out,
            'bases_retained_rate': f"{self.bases_retained_rate:.4f}",
        }
        for kind, count in self.operations.items():
            row[f'{kind}_trims'] = count
        return row


def write_stats_tsv(stats: TrimStats, output_path: Path) -> Path:
    """
    Write run statistics to a one-row TSV.

    Args:
        stats: Statistics to write
        output_path: Path for output TSV

    Returns:
        Path to written file
    """
    df = pd.DataFrame([stats.to_dict()])
    df.to_csv(output_path, sep='\t', index=False)

    logger.info(f"Wrote trimming statistics to {output_path}")

    return output_path


def format_summary(stats: TrimStats) -> str:
    """Human-readable run summary."""
    unit = 'pairs' if stats.mode == 'paired' else 'reads'
    lines = [
        f"{unit.capitalize()} processed: {stats.records_in:,}",
        f"{unit.capitalize()} written: {stats.records_out:,} ({stats.pass_rate * 100:.2f}%)",
        f"Discarded (too short): {stats.discarded_too_short:,}",
        f"Discarded (interior primer): {stats.discarded_primer_interior:,}",
        f"Malformed records skipped: {stats.malformed_records:,}",
        f"Bases retained: {stats.bases_out:,} of {stats.bases_in:,} "
        f"({stats.bases_retained_rate * 100:.2f}%)",
    ]
    ops = ', '.join(f"{kind}={count:,}" for kind, count in stats.operations.items())
    lines.append(f"Trim operations: {ops}")
    return '\n'.join(lines)
