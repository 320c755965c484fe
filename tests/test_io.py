"""Tests for readtrim.io modules."""

import gzip

import click
import pandas as pd
import pytest
from readtrim.config import TrimConfig
from readtrim.core.models import Read
from readtrim.core.pairs import trim_pair
from readtrim.core.trimmer import trim_read
from readtrim.io.fastq import (
    FastqFormatError,
    FastqRecord,
    PairingError,
    read_fastq,
    read_fastq_pairs,
    write_fastq,
)
from readtrim.io.output import TrimStats, format_summary, write_stats_tsv
from readtrim.io.preview import base_annotations, render_pair, render_read


RECORDS = [
    FastqRecord("read1 sample=1", "ACGTACGT", "IIIIIIII"),
    FastqRecord("read2", "TTGGCCAA", "#####III"),
]


class TestFastqIO:
    """Test FASTQ reading and writing."""

    def test_roundtrip_plain(self, tmp_path):
        path = tmp_path / "reads.fastq"
        assert write_fastq(RECORDS, path) == 2
        assert list(read_fastq(path)) == RECORDS

    def test_roundtrip_gzip(self, tmp_path):
        path = tmp_path / "reads.fastq.gz"
        write_fastq(RECORDS, path)

        with gzip.open(path, 'rt') as f:
            assert f.readline() == "@read1 sample=1\n"
        assert list(read_fastq(path)) == RECORDS

    def test_record_id_is_first_token(self):
        assert RECORDS[0].record_id == "read1"
        assert RECORDS[0].to_read().record_id == "read1"

    def test_slice(self):
        assert RECORDS[1].slice(2, 6) == FastqRecord("read2", "GGCC", "###I")

    def test_decision_slices_record_and_read_alike(self):
        record = FastqRecord("r1 extra", "ACGT" * 5 + "A" * 10, "I" * 30)
        read = record.to_read()
        decision = trim_read(read, TrimConfig(trim_poly_a=True))

        assert decision.apply(record) == FastqRecord("r1 extra", "ACGT" * 5, "I" * 20)
        assert decision.apply(read).bases == "ACGT" * 5
        assert decision.apply(read).qualities == (40,) * 20

    def test_discarded_decision_cannot_be_applied(self):
        record = FastqRecord("r2", "ACGTACGTAC", "#" * 10)
        decision = trim_read(record.to_read(), TrimConfig())

        with pytest.raises(ValueError, match="discarded"):
            decision.apply(record)

    def test_crlf_and_trailing_blank_lines(self, tmp_path):
        path = tmp_path / "reads.fastq"
        path.write_text("@r1\r\nACGT\r\n+\r\nIIII\r\n\n")
        assert list(read_fastq(path)) == [FastqRecord("r1", "ACGT", "IIII")]

    def test_bad_header(self, tmp_path):
        path = tmp_path / "reads.fastq"
        path.write_text(">r1\nACGT\n+\nIIII\n")
        with pytest.raises(FastqFormatError, match="header"):
            list(read_fastq(path))

    def test_missing_separator(self, tmp_path):
        path = tmp_path / "reads.fastq"
        path.write_text("@r1\nACGT\nIIII\n@r2\n")
        with pytest.raises(FastqFormatError, match="separator"):
            list(read_fastq(path))

    def test_truncated_record(self, tmp_path):
        path = tmp_path / "reads.fastq"
        path.write_text("@r1\nACGT\n+\n")
        with pytest.raises(FastqFormatError, match="truncated"):
            list(read_fastq(path))

    def test_pairs(self, tmp_path):
        path1 = tmp_path / "r1.fastq"
        path2 = tmp_path / "r2.fastq"
        write_fastq(RECORDS, path1)
        write_fastq(reversed(RECORDS), path2)

        pairs = list(read_fastq_pairs(path1, path2))
        assert [(a.name, b.name) for a, b in pairs] == [
            ("read1 sample=1", "read2"),
            ("read2", "read1 sample=1"),
        ]

    @pytest.mark.parametrize("short_file", [1, 2])
    def test_unequal_pairs(self, tmp_path, short_file):
        path1 = tmp_path / "r1.fastq"
        path2 = tmp_path / "r2.fastq"
        write_fastq(RECORDS, path1 if short_file == 2 else path2)
        write_fastq(RECORDS[:1], path2 if short_file == 2 else path1)

        with pytest.raises(PairingError, match="not paired"):
            list(read_fastq_pairs(path1, path2))


class TestTrimStats:
    """Test statistics tallying and output."""

    def test_single_end_tally(self):
        config = TrimConfig(trim_poly_a=True)
        stats = TrimStats()
        stats.add_decision(trim_read(Read("a", "ACGT" * 5 + "A" * 10, (30,) * 30), config))
        stats.add_decision(trim_read(Read("b", "ACGTACGTAC", (2,) * 10), config))
        stats.add_malformed()

        assert stats.records_in == 3
        assert stats.records_out == 1
        assert stats.discarded_too_short == 1
        assert stats.malformed_records == 1
        assert stats.bases_in == 40
        assert stats.bases_out == 20
        assert stats.operations['poly_a'] == 1
        assert stats.operations['quality'] == 2

    def test_pair_counts_once(self):
        config = TrimConfig()
        decision = trim_pair(
            Read("a/1", "ACGTACGTACGTACGTACGT", (40,) * 20),
            Read("a/2", "ACGTACGTACGTACGTACGT", (2,) * 20),
            config,
        )
        stats = TrimStats(mode='paired')
        stats.add_pair(decision)

        assert stats.records_in == 1
        assert stats.records_out == 0
        assert stats.discarded_too_short == 1
        assert stats.bases_in == 40
        assert stats.bases_out == 0

    def test_write_stats_tsv(self, tmp_path):
        stats = TrimStats(records_in=10, records_out=7, discarded_too_short=3)
        path = write_stats_tsv(stats, tmp_path / "stats.tsv")

        df = pd.read_csv(path, sep='\t')
        assert len(df) == 1
        assert df.loc[0, 'records_in'] == 10
        assert df.loc[0, 'records_out'] == 7
        assert df.loc[0, 'pass_rate'] == pytest.approx(0.7)
        assert 'primer_trims' in df.columns

    def test_format_summary(self):
        stats = TrimStats(mode='paired', records_in=4, records_out=2)
        summary = format_summary(stats)

        assert "Pairs processed: 4" in summary
        assert "50.00%" in summary


class TestPreview:
    """Test preview rendering."""

    def test_trimmed_bases_lower_cased_without_color(self):
        config = TrimConfig(trim_poly_a=True, trim_poly_x_length=8, minimum_remaining_read_size=5)
        read = Read("r1", "AACCGGTTAAAAAAAAAA", (30,) * 18)
        text = render_read(read, trim_read(read, config), color=False)

        header, bases = text.split('\n')
        assert header == ">r1 kept:0-8 poly_a:tail@8"
        assert bases == "AACCGGTT" + "a" * 10

    def test_colored_output(self):
        config = TrimConfig(trim_poly_a=True, trim_poly_x_length=8, minimum_remaining_read_size=5)
        read = Read("r1", "AACCGGTTAAAAAAAAAA", (30,) * 18)
        text = render_read(read, trim_read(read, config))

        assert click.style("A" * 10, fg='yellow') in text
        assert click.unstyle(text).endswith("AACCGGTT" + "A" * 10)

    def test_discarded_read_shows_reason(self):
        read = Read("r2", "ACGTACGTAC", (2,) * 10)
        text = render_read(read, trim_read(read, TrimConfig()), color=False)
        assert text.startswith(">r2 discarded:too_short")

    def test_first_operation_wins_overlap(self):
        config = TrimConfig(trim_poly_a=True, window_size=3, window_min_qual_score=25)
        read = Read("r", "ACGT" * 5 + "A" * 10, tuple([30] * 27 + [0] * 3))
        annotations = base_annotations(trim_read(read, config))

        assert annotations[:20] == [None] * 20
        assert [a.value for a in annotations[20:27]] == ['poly_a'] * 7
        assert [a.value for a in annotations[27:]] == ['quality'] * 3

    def test_render_pair(self):
        config = TrimConfig()
        read1 = Read("p/1", "ACGTACGTACGTACGTACGT", (40,) * 20)
        read2 = Read("p/2", "ACGTACGTACGTACGTACGT", (2,) * 20)
        text = render_pair(read1, read2, trim_pair(read1, read2, config), color=False)

        lines = text.split('\n')
        assert lines[0].startswith(">p/1 kept")
        assert lines[2].startswith(">p/2 discarded")
        assert lines[-1] == "# pair discarded"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
