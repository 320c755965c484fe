"""
Configuration classes for readtrim.

Holds the numeric trimming parameters, the resolved primer set, and the
YAML loading used by the command line.
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
import logging

import yaml

from .utils.sequence import is_dna_sequence, reverse_complement

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Invalid configuration; fatal before any record is processed."""


@dataclass(frozen=True)
class PrimerSpec:
    """A primer or adapter to remove, with its reverse complement."""
    forward: str
    reverse_complement: str
    max_mismatches: int
    end_proportion: float

    @classmethod
    def from_sequence(cls, sequence: str, max_mismatches: int, end_proportion: float) -> 'PrimerSpec':
        """Create a PrimerSpec, deriving the reverse complement once."""
        forward = sequence.strip().upper()
        return cls(
            forward=forward,
            reverse_complement=reverse_complement(forward),
            max_mismatches=max_mismatches,
            end_proportion=end_proportion,
        )

    @property
    def entries(self) -> Tuple[str, ...]:
        """Sequences searched independently (palindromes only once)."""
        if self.forward == self.reverse_complement:
            return (self.forward,)
        return (self.forward, self.reverse_complement)

    def __len__(self) -> int:
        return len(self.forward)


def build_primer_specs(
    sequences,
    max_mismatches: int,
    end_proportion: float,
) -> Tuple[PrimerSpec, ...]:
    """
    Build the primer set from raw sequences.

    Sequences are upper-cased and deduplicated, keeping first-seen order.

    Raises:
        ConfigError: If a sequence is not DNA
    """
    specs = []
    seen = set()
    for raw in sequences:
        seq = raw.strip().upper()
        if not seq:
            continue
        if not is_dna_sequence(seq):
            raise ConfigError(f"Invalid primer sequence: {raw!r}")
        if seq in seen:
            continue
        seen.add(seq)
        specs.append(PrimerSpec.from_sequence(seq, max_mismatches, end_proportion))
    return tuple(specs)


def load_fasta_records(path: Path) -> List[Tuple[str, str]]:
    """Load all (name, sequence) records from a FASTA file."""
    records = []
    name = None
    sequence = []
    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            if line.startswith('>'):
                if name is not None:
                    records.append((name, ''.join(sequence).upper()))
                name = line[1:].split()[0] if len(line) > 1 else f"record_{len(records)}"
                sequence = []
            else:
                sequence.append(line)
    if name is not None:
        records.append((name, ''.join(sequence).upper()))
    return records


def parse_primer_input(value: Union[str, List[str], Tuple[str, ...], None]) -> Tuple[str, ...]:
    """
    Parse primer input - comma-separated DNA sequences or a FASTA file path.

    Args:
        value: Sequences separated by commas, a FASTA path, or a list of either

    Returns:
        Tuple of upper-case primer sequences

    Examples:
        >>> parse_primer_input("ACGTACGT,ttggcc")
        ('ACGTACGT', 'TTGGCC')
    """
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        primers = []
        for item in value:
            primers.extend(parse_primer_input(item))
        return tuple(primers)

    value = str(value).strip()
    if not value:
        return ()

    parts = [p.strip() for p in value.split(',') if p.strip()]
    if all(is_dna_sequence(p) for p in parts):
        return tuple(p.upper() for p in parts)

    # Otherwise treat as file path
    path = Path(value)
    if not path.exists():
        raise ConfigError(f"Primers are neither DNA sequences nor an existing FASTA file: {value}")
    records = load_fasta_records(path)
    if not records:
        raise ConfigError(f"No primer sequences found in {path}")
    return tuple(seq for _, seq in records)


@dataclass(frozen=True)
class TrimConfig:
    """Trimming parameters shared read-only by every record."""

    # Length filter
    minimum_remaining_read_size: int = 10

    # Quality window
    window_min_qual_score: float = 10
    window_size: int = 10

    # Poly-X tails
    trim_poly_a: bool = False
    trim_poly_g: bool = False
    trim_poly_x_length: int = 10
    trim_poly_x_proportion: float = 0.9

    # Primers / adapters
    primers: Tuple[str, ...] = ()
    primers_max_mismatch_distance: int = 1
    primers_end_proportion: float = 0.2

    # Input encoding and execution
    quality_offset: int = 33
    threads: int = 1
    chunk_size: int = 10000

    # Derived (populated by __post_init__)
    primer_specs: Tuple[PrimerSpec, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'primers', parse_primer_input(self.primers))
        self.validate()
        object.__setattr__(self, 'primer_specs', build_primer_specs(
            self.primers,
            self.primers_max_mismatch_distance,
            self.primers_end_proportion,
        ))

    def validate(self):
        """Check every parameter, raising ConfigError on the first problem."""
        try:
            self._validate()
        except TypeError as e:
            raise ConfigError(f"Invalid configuration value type: {e}") from e

    def _validate(self):
        for name in ('minimum_remaining_read_size', 'window_size', 'trim_poly_x_length',
                     'primers_max_mismatch_distance', 'quality_offset', 'threads', 'chunk_size'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")

        if self.minimum_remaining_read_size < 0:
            raise ConfigError("minimum_remaining_read_size must be >= 0")
        if self.window_min_qual_score < 0:
            raise ConfigError("window_min_qual_score must be >= 0")
        if self.window_size < 1:
            raise ConfigError("window_size must be >= 1")
        if self.trim_poly_x_length < 1:
            raise ConfigError("trim_poly_x_length must be >= 1")
        if not 0 < self.trim_poly_x_proportion <= 1:
            raise ConfigError(
                f"trim_poly_x_proportion must be in (0, 1], got {self.trim_poly_x_proportion}"
            )
        if self.primers_max_mismatch_distance < 0:
            raise ConfigError("primers_max_mismatch_distance must be >= 0")
        if not 0 < self.primers_end_proportion <= 1:
            raise ConfigError(
                f"primers_end_proportion must be in (0, 1], got {self.primers_end_proportion}"
            )
        if self.quality_offset < 0:
            raise ConfigError("quality_offset must be >= 0")
        if self.threads < 1:
            raise ConfigError("threads must be >= 1")
        if self.chunk_size < 1:
            raise ConfigError("chunk_size must be >= 1")

        for primer in self.primers:
            if not is_dna_sequence(primer):
                raise ConfigError(f"Invalid primer sequence: {primer!r}")
            if self.primers_max_mismatch_distance >= len(primer):
                logger.warning(
                    f"Primer {primer} is not longer than the mismatch distance "
                    f"({self.primers_max_mismatch_distance}); it will match anywhere"
                )

    @property
    def poly_targets(self) -> List[str]:
        """Enabled poly-tail bases, in evaluation order."""
        targets = []
        if self.trim_poly_a:
            targets.append('A')
        if self.trim_poly_g:
            targets.append('G')
        return targets

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls) if f.init]

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'TrimConfig':
        """Create from dictionary, rejecting unknown keys."""
        unknown = sorted(set(d) - set(cls.field_names()))
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**d)

    @classmethod
    def from_yaml(cls, path: Path) -> 'TrimConfig':
        """Load configuration from YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read configuration {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration {path} must be a mapping")

        logger.info(f"Loaded configuration from {path}")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a YAML-friendly dictionary."""
        d = {name: getattr(self, name) for name in self.field_names()}
        d['primers'] = list(self.primers)
        return d

    def with_overrides(self, **overrides) -> 'TrimConfig':
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        unknown = sorted(set(changes) - set(self.field_names()))
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return replace(self, **changes)


CONFIG_TEMPLATE = '''# readtrim configuration template
# Command-line options override the values in this file.

# Reads shorter than this after trimming are discarded (both mates for pairs)
minimum_remaining_read_size: 10

# Sliding-window quality trimming
window_size: 10
window_min_qual_score: 10

# Poly-X tail trimming (3' end only)
trim_poly_a: false
trim_poly_g: false
trim_poly_x_length: 10
trim_poly_x_proportion: 0.9

# Primers/adapters: a list of sequences or a FASTA path.
# Reverse complements are searched too.
primers: []
primers_max_mismatch_distance: 1
# Matches outside this fraction of either read end discard the read
primers_end_proportion: 0.2

# Phred offset of the quality strings (33 for Sanger/Illumina 1.8+)
quality_offset: 33

# Worker processes (output order is preserved)
threads: 1
'''
