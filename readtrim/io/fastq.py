"""
FASTQ reading and writing.

Plain and gzip-compressed files are both supported; compression is chosen
by the '.gz' suffix.
"""

import gzip
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Tuple, Union
import logging

from ..core.models import Read

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class FastqFormatError(ValueError):
    """The FASTQ stream is structurally broken and cannot be resynchronized."""


class PairingError(ValueError):
    """The two mate files hold different numbers of records."""


@dataclass(frozen=True)
class FastqRecord:
    """A raw FASTQ record as read from disk."""
    name: str
    sequence: str
    quality: str

    @property
    def record_id(self) -> str:
        return self.name.split()[0] if self.name else self.name

    def to_read(self, quality_offset: int = 33) -> Read:
        """Decode into a Read; raises RecordShapeError for malformed records."""
        return Read.from_fastq(self.record_id, self.sequence, self.quality, quality_offset)

    def slice(self, start: int, end: int) -> 'FastqRecord':
        """Keep only sequence[start:end] and its qualities."""
        return FastqRecord(self.name, self.sequence[start:end], self.quality[start:end])

    def format(self) -> str:
        return f"@{self.name}\n{self.sequence}\n+\n{self.quality}\n"


def _open(path: PathLike, mode: str):
    open_func = gzip.open if str(path).endswith('.gz') else open
    return open_func(path, mode)


def read_fastq(path: PathLike) -> Iterator[FastqRecord]:
    """
    Iterate over records in a FASTQ file.

    Args:
        path: Plain or gzipped FASTQ

    Yields:
        FastqRecord for each four-line record

    Raises:
        FastqFormatError: On a bad header, separator, or truncated record
    """
    with _open(path, 'rt') as f:
        line_no = 0
        while True:
            header = f.readline()
            if not header:
                break
            line_no += 1
            header = header.rstrip('\r\n')
            if not header:
                # Tolerate trailing blank lines
                continue
            if not header.startswith('@'):
                raise FastqFormatError(f"{path}:{line_no}: expected '@' header, got {header[:40]!r}")

            seq = f.readline()
            plus = f.readline()
            qual = f.readline()
            line_no += 3
            if not qual:
                raise FastqFormatError(f"{path}:{line_no}: truncated record {header[1:]}")
            if not plus.startswith('+'):
                raise FastqFormatError(f"{path}:{line_no - 1}: expected '+' separator in record {header[1:]}")

            yield FastqRecord(
                name=header[1:],
                sequence=seq.rstrip('\r\n'),
                quality=qual.rstrip('\r\n'),
            )


def read_fastq_pairs(path1: PathLike, path2: PathLike) -> Iterator[Tuple[FastqRecord, FastqRecord]]:
    """
    Iterate over mate pairs from two FASTQ files in lockstep.

    Raises:
        PairingError: If one file has more records than the other
    """
    reader1 = read_fastq(path1)
    reader2 = read_fastq(path2)
    count = 0
    for record1 in reader1:
        record2 = next(reader2, None)
        if record2 is None:
            raise PairingError(
                f"Reads in {path1} and {path2} are not paired: {path2} ended "
                f"after {count} records, at read1 {record1.name}"
            )
        count += 1
        yield record1, record2
    extra = next(reader2, None)
    if extra is not None:
        raise PairingError(
            f"Reads in {path1} and {path2} are not paired: {path1} ended "
            f"after {count} records, at read2 {extra.name}"
        )


class FastqWriter:
    """Write FASTQ records to a plain or gzipped file."""

    def __init__(self, path: PathLike):
        self.path = Path(path)
        self.records_written = 0
        self._handle = _open(self.path, 'wt')

    def write(self, record: FastqRecord):
        self._handle.write(record.format())
        self.records_written += 1

    def close(self):
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            logger.debug(f"Wrote {self.records_written} records to {self.path}")

    def __enter__(self) -> 'FastqWriter':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def write_fastq(records, path: PathLike) -> int:
    """Write records to path, returning how many were written."""
    with FastqWriter(path) as writer:
        for record in records:
            writer.write(record)
        return writer.records_written
