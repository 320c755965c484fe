"""
Command-line interface for readtrim.
"""

import sys
from pathlib import Path

import click

from . import __version__
from .config import CONFIG_TEMPLATE, ConfigError, TrimConfig


@click.group()
@click.version_option(version=__version__)
def cli():
    """readtrim: quality, poly-X and primer trimming for FASTQ reads."""
    pass


@cli.command()
@click.option('--fastq1', type=click.Path(exists=True, dir_okay=False), required=True,
              help='First FASTQ file (plain or .gz)')
@click.option('--fastq2', type=click.Path(exists=True, dir_okay=False),
              help='Second FASTQ file, for paired-end reads')
@click.option('--out-fastq1', type=click.Path(dir_okay=False),
              help='Output FASTQ for fastq1 (.gz to compress)')
@click.option('--out-fastq2', type=click.Path(dir_okay=False),
              help='Output FASTQ for fastq2, if using paired-end reads')
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='YAML configuration file; options below override it')
@click.option('--minimum-remaining-read-size', type=int,
              help='Reads shorter than this after trimming are discarded (default: 10)')
@click.option('--window-min-qual-score', type=float,
              help='Minimum average quality of a trimming window (default: 10)')
@click.option('--window-size', type=int,
              help='Quality trimming window size (default: 10)')
@click.option('--trim-poly-a/--no-trim-poly-a', default=None,
              help='Trim poly-A tails (seen in RNA-seq data)')
@click.option('--trim-poly-g/--no-trim-poly-g', default=None,
              help='Trim poly-G tails (two-color chemistry read-through)')
@click.option('--trim-poly-x-length', type=int,
              help='Minimum poly-X tail length to trim (default: 10)')
@click.option('--trim-poly-x-proportion', type=float,
              help='Proportion of bases that must be X to trim the tail (default: 0.9)')
@click.option('--primers', type=str,
              help='Comma-separated primers or a FASTA file; reverse complements are added')
@click.option('--primers-max-mismatch-distance', type=int,
              help='Maximum mismatches for a primer match, best kept at 1 or 2 (default: 1)')
@click.option('--primers-end-proportion', type=float,
              help='Fraction of each read end where primers are trimmed; '
                   'interior matches discard the read (default: 0.2)')
@click.option('--quality-offset', type=int,
              help='Phred offset of quality strings (default: 33)')
@click.option('--threads', '-t', type=int,
              help='Worker processes (default: 1)')
@click.option('--preview', is_flag=True, default=False,
              help="Show reads and what would be cut; write nothing to disk")
@click.option('--color/--no-color', default=None,
              help='Color the preview (default: only on a terminal)')
@click.option('--stats', 'stats_path', type=click.Path(dir_okay=False),
              help='Write run statistics to this TSV')
@click.option('--verbose', '-v', is_flag=True, default=False,
              help='Debug logging')
def trim(fastq1, fastq2, out_fastq1, out_fastq2, config_path, minimum_remaining_read_size,
         window_min_qual_score, window_size, trim_poly_a, trim_poly_g, trim_poly_x_length,
         trim_poly_x_proportion, primers, primers_max_mismatch_distance, primers_end_proportion,
         quality_offset, threads, preview, color, stats_path, verbose):
    """
    Trim low-quality ends, poly-X tails and primers from FASTQ reads.

    Paired-end mates are kept or dropped together so the two output files
    stay in sync.

    \b
    Example (single-end):
      readtrim trim --fastq1 reads.fastq.gz --out-fastq1 trimmed.fastq.gz \\
                    --trim-poly-a --primers AGATCGGAAGAGC

    \b
    Example (paired-end preview):
      readtrim trim --fastq1 R1.fastq.gz --fastq2 R2.fastq.gz --preview
    """
    import logging

    from .io.output import format_summary, write_stats_tsv
    from .pipeline import TrimmingPipeline

    # Set up logging
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    # Validate mode
    if preview and (out_fastq1 or out_fastq2):
        click.echo("Error: --preview cannot be combined with output files", err=True)
        sys.exit(1)
    if not preview and not out_fastq1:
        click.echo("Error: Either --preview or --out-fastq1 must be set", err=True)
        sys.exit(1)
    if fastq2 and not preview and not out_fastq2:
        click.echo("Error: --out-fastq2 is required for paired-end input", err=True)
        sys.exit(1)
    if out_fastq2 and not fastq2:
        click.echo("Error: --out-fastq2 requires --fastq2", err=True)
        sys.exit(1)

    # Defaults < config file < command line
    try:
        config = TrimConfig.from_yaml(Path(config_path)) if config_path else TrimConfig()
        config = config.with_overrides(
            minimum_remaining_read_size=minimum_remaining_read_size,
            window_min_qual_score=window_min_qual_score,
            window_size=window_size,
            trim_poly_a=trim_poly_a,
            trim_poly_g=trim_poly_g,
            trim_poly_x_length=trim_poly_x_length,
            trim_poly_x_proportion=trim_poly_x_proportion,
            primers=primers,
            primers_max_mismatch_distance=primers_max_mismatch_distance,
            primers_end_proportion=primers_end_proportion,
            quality_offset=quality_offset,
            threads=threads,
        )
    except ConfigError as e:
        click.echo(f"Error in configuration: {e}", err=True)
        sys.exit(1)

    if config.primers:
        logging.getLogger(__name__).info(f"Using primers: {', '.join(config.primers)}")

    pipeline = TrimmingPipeline(config)
    preview_stream = click.get_text_stream('stdout') if preview else None
    try:
        if fastq2:
            stats = pipeline.run_paired(
                Path(fastq1), Path(fastq2),
                Path(out_fastq1) if out_fastq1 else None,
                Path(out_fastq2) if out_fastq2 else None,
                preview_stream=preview_stream, color=color,
            )
        else:
            stats = pipeline.run_single(
                Path(fastq1),
                Path(out_fastq1) if out_fastq1 else None,
                preview_stream=preview_stream, color=color,
            )
    except ValueError as e:
        # FastqFormatError / PairingError: the input cannot be trusted
        click.echo(f"Error reading input: {e}", err=True)
        sys.exit(1)

    if stats_path:
        write_stats_tsv(stats, Path(stats_path))

    click.echo(format_summary(stats), err=True)


@cli.command()
@click.option('--output', '-o', type=click.Path(), default='readtrim_config.yaml',
              help='Output config file path')
def init(output):
    """Generate a template configuration file."""
    with open(output, 'w') as f:
        f.write(CONFIG_TEMPLATE)

    click.echo(f"Generated configuration template: {output}")
    click.echo("\nEdit this file and run:")
    click.echo(f"  readtrim trim --config {output} --fastq1 reads.fastq.gz --out-fastq1 trimmed.fastq.gz")


def main():
    cli()


if __name__ == '__main__':
    main()
