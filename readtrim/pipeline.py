"""
Pipeline orchestration for readtrim.

Streams records from FASTQ, trims them in chunks (optionally across worker
processes), and writes or previews the results in input order.
"""

from collections import deque
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, TextIO, Tuple
import logging

import click

from .config import ConfigError, TrimConfig
from .core.models import PairDecision, Read, RecordShapeError, TrimDecision
from .core.pairs import coordinate_pair
from .core.trimmer import ReadTrimmer
from .io.fastq import FastqRecord, FastqWriter, read_fastq, read_fastq_pairs
from .io.output import TrimStats
from .io.preview import legend, render_pair, render_read

logger = logging.getLogger(__name__)

SingleResult = Optional[Tuple[Read, TrimDecision]]
PairResult = Optional[Tuple[Read, Read, PairDecision]]


def _chunked(items: Iterable, size: int) -> Iterator[List]:
    chunk = []
    for item in items:
        chunk.append(item)
        if len(chunk) >= size:
            yield chunk
            chunk = []
    if chunk:
        yield chunk


def trim_single_chunk(records: List[FastqRecord], config: TrimConfig) -> List[SingleResult]:
    """Trim a batch of single-end records; None marks a malformed record."""
    trimmer = ReadTrimmer(config)
    results = []
    for record in records:
        try:
            read = record.to_read(config.quality_offset)
        except RecordShapeError as e:
            logger.debug(f"Skipping malformed record: {e}")
            results.append(None)
            continue
        results.append((read, trimmer.trim(read)))
    return results


def trim_paired_chunk(
    pairs: List[Tuple[FastqRecord, FastqRecord]],
    config: TrimConfig,
) -> List[PairResult]:
    """Trim a batch of mate pairs; None marks a pair with a malformed mate."""
    trimmer = ReadTrimmer(config)
    results = []
    for record1, record2 in pairs:
        try:
            read1 = record1.to_read(config.quality_offset)
            read2 = record2.to_read(config.quality_offset)
        except RecordShapeError as e:
            logger.debug(f"Skipping malformed pair: {e}")
            results.append(None)
            continue
        results.append((read1, read2, coordinate_pair(trimmer, read1, read2)))
    return results


def _use_color(stream: TextIO, color: Optional[bool]) -> bool:
    """Explicit choice, else color only when the stream is a terminal."""
    if color is not None:
        return color
    isatty = getattr(stream, 'isatty', None)
    return bool(isatty and isatty())


class TrimmingPipeline:
    """Main pipeline orchestrator."""

    def __init__(self, config: TrimConfig):
        self.config = config

    def _process_chunks(self, items: Iterable, worker: Callable) -> Iterator[Tuple[List, List]]:
        """
        Run worker over chunks of items, yielding (chunk, results) in input order.

        With more than one thread, chunks go to a process pool; at most
        2 * threads chunks are in flight so memory stays bounded.
        """
        func = partial(worker, config=self.config)
        chunks = _chunked(items, self.config.chunk_size)

        if self.config.threads == 1:
            for chunk in chunks:
                yield chunk, func(chunk)
            return

        max_pending = self.config.threads * 2
        with ProcessPoolExecutor(max_workers=self.config.threads) as executor:
            pending = deque()
            for chunk in chunks:
                pending.append((chunk, executor.submit(func, chunk)))
                if len(pending) >= max_pending:
                    done_chunk, future = pending.popleft()
                    yield done_chunk, future.result()
            while pending:
                done_chunk, future = pending.popleft()
                yield done_chunk, future.result()

    @staticmethod
    def _check_mode(outputs: List[Optional[Path]], preview_stream: Optional[TextIO]):
        has_output = any(o is not None for o in outputs)
        if preview_stream is not None and has_output:
            raise ConfigError("Preview mode and output files are mutually exclusive")
        if preview_stream is None and not all(o is not None for o in outputs):
            raise ConfigError("Either preview mode or output file(s) must be set")

    def run_single(
        self,
        fastq1: Path,
        out_fastq1: Optional[Path] = None,
        preview_stream: Optional[TextIO] = None,
        color: Optional[bool] = None,
    ) -> TrimStats:
        """
        Trim a single-end FASTQ file.

        Args:
            fastq1: Input FASTQ (plain or .gz)
            out_fastq1: Output FASTQ, or None in preview mode
            preview_stream: Text stream for preview output, or None to write
            color: Force ANSI colors on/off in preview (None: only on a terminal)

        Returns:
            TrimStats for the run
        """
        self._check_mode([out_fastq1], preview_stream)
        stats = TrimStats(mode='single')
        logger.info(f"Trimming single-end reads from {fastq1}")

        writer = FastqWriter(out_fastq1) if out_fastq1 is not None else None
        if preview_stream is not None:
            color = _use_color(preview_stream, color)
            click.echo(legend(color), file=preview_stream, color=color)
        try:
            for chunk, results in self._process_chunks(read_fastq(fastq1), trim_single_chunk):
                for record, result in zip(chunk, results):
                    if result is None:
                        stats.add_malformed()
                        continue
                    read, decision = result
                    stats.add_decision(decision)
                    if preview_stream is not None:
                        text = render_read(read, decision, color=color)
                        click.echo(text, file=preview_stream, color=color)
                    elif decision.kept:
                        writer.write(decision.apply(record))
        finally:
            if writer is not None:
                writer.close()

        logger.info(
            f"Processed {stats.records_in} reads: {stats.records_out} kept, "
            f"{stats.discarded} discarded, {stats.malformed_records} malformed"
        )
        return stats

    def run_paired(
        self,
        fastq1: Path,
        fastq2: Path,
        out_fastq1: Optional[Path] = None,
        out_fastq2: Optional[Path] = None,
        preview_stream: Optional[TextIO] = None,
        color: Optional[bool] = None,
    ) -> TrimStats:
        """
        Trim a pair of mate FASTQ files, keeping the outputs in sync.

        A pair is written only when both mates survive, so record i of
        out_fastq1 is always the mate of record i of out_fastq2.

        Returns:
            TrimStats for the run (pairs count once)
        """
        self._check_mode([out_fastq1, out_fastq2], preview_stream)
        stats = TrimStats(mode='paired')
        logger.info(f"Trimming paired-end reads from {fastq1} and {fastq2}")

        writer1 = FastqWriter(out_fastq1) if out_fastq1 is not None else None
        writer2 = FastqWriter(out_fastq2) if out_fastq2 is not None else None
        if preview_stream is not None:
            color = _use_color(preview_stream, color)
            click.echo(legend(color), file=preview_stream, color=color)
        try:
            pairs = read_fastq_pairs(fastq1, fastq2)
            for chunk, results in self._process_chunks(pairs, trim_paired_chunk):
                for (record1, record2), result in zip(chunk, results):
                    if result is None:
                        stats.add_malformed()
                        continue
                    read1, read2, decision = result
                    stats.add_pair(decision)
                    if preview_stream is not None:
                        text = render_pair(read1, read2, decision, color=color)
                        click.echo(text, file=preview_stream, color=color)
                    elif decision.kept:
                        writer1.write(decision.mate1.apply(record1))
                        writer2.write(decision.mate2.apply(record2))
        finally:
            for writer in (writer1, writer2):
                if writer is not None:
                    writer.close()

        logger.info(
            f"Processed {stats.records_in} pairs: {stats.records_out} kept, "
            f"{stats.discarded} discarded, {stats.malformed_records} malformed"
        )
        return stats


def run_pipeline(
    config: TrimConfig,
    fastq1: Path,
    fastq2: Optional[Path] = None,
    out_fastq1: Optional[Path] = None,
    out_fastq2: Optional[Path] = None,
    preview_stream: Optional[TextIO] = None,
    color: Optional[bool] = None,
) -> TrimStats:
    """
    Convenience function to trim single- or paired-end input.

    Args:
        config: Trimming configuration
        fastq1: First (or only) input FASTQ
        fastq2: Second mate FASTQ for paired-end input
        out_fastq1: Output for fastq1
        out_fastq2: Output for fastq2
        preview_stream: Preview destination instead of output files
        color: Force preview colors on/off

    Returns:
        TrimStats
    """
    pipeline = TrimmingPipeline(config)
    if fastq2 is not None:
        return pipeline.run_paired(fastq1, fastq2, out_fastq1, out_fastq2, preview_stream, color)
    if out_fastq2 is not None:
        raise ConfigError("out_fastq2 requires a second input FASTQ")
    return pipeline.run_single(fastq1, out_fastq1, preview_stream, color)
