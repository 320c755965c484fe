"""Tests for readtrim.config module."""

import pytest
from readtrim.config import (
    CONFIG_TEMPLATE,
    ConfigError,
    PrimerSpec,
    TrimConfig,
    build_primer_specs,
    parse_primer_input,
)


class TestTrimConfig:
    """Test TrimConfig class."""

    def test_defaults(self):
        config = TrimConfig()

        assert config.minimum_remaining_read_size == 10
        assert config.window_min_qual_score == 10
        assert config.window_size == 10
        assert config.trim_poly_x_length == 10
        assert config.trim_poly_x_proportion == 0.9
        assert config.primers_max_mismatch_distance == 1
        assert config.primers_end_proportion == 0.2
        assert not config.trim_poly_a
        assert not config.trim_poly_g
        assert config.primer_specs == ()

    @pytest.mark.parametrize("value", [0, -0.1, 1.5])
    def test_end_proportion_out_of_range(self, value):
        with pytest.raises(ConfigError, match="primers_end_proportion"):
            TrimConfig(primers_end_proportion=value)

    def test_end_proportion_one_is_valid(self):
        assert TrimConfig(primers_end_proportion=1.0).primers_end_proportion == 1.0

    def test_negative_mismatch_distance(self):
        with pytest.raises(ConfigError, match="mismatch"):
            TrimConfig(primers_max_mismatch_distance=-1)

    def test_zero_window_size(self):
        with pytest.raises(ConfigError):
            TrimConfig(window_size=0)

    def test_poly_proportion_out_of_range(self):
        with pytest.raises(ConfigError):
            TrimConfig(trim_poly_x_proportion=1.1)

    def test_non_integer_window(self):
        with pytest.raises(ConfigError):
            TrimConfig(window_size="10")

    def test_invalid_primer(self):
        with pytest.raises(ConfigError, match="Primers"):
            TrimConfig(primers=("ACGX",))

    def test_primer_specs_built_once(self):
        config = TrimConfig(primers="acgtacgtaa,TTGGCCAAGG", primers_max_mismatch_distance=2)

        assert config.primers == ("ACGTACGTAA", "TTGGCCAAGG")
        assert len(config.primer_specs) == 2
        spec = config.primer_specs[0]
        assert spec.reverse_complement == "TTACGTACGT"
        assert spec.max_mismatches == 2
        assert spec.end_proportion == 0.2

    def test_poly_targets_order(self):
        assert TrimConfig(trim_poly_a=True, trim_poly_g=True).poly_targets == ['A', 'G']
        assert TrimConfig(trim_poly_g=True).poly_targets == ['G']

    def test_with_overrides_ignores_none(self):
        config = TrimConfig(window_size=5).with_overrides(window_size=None, trim_poly_a=True)

        assert config.window_size == 5
        assert config.trim_poly_a

    def test_with_overrides_rebuilds_primers(self):
        config = TrimConfig().with_overrides(primers="AGATCGGAAG")
        assert len(config.primer_specs) == 1

    def test_with_overrides_revalidates(self):
        with pytest.raises(ConfigError):
            TrimConfig().with_overrides(window_size=0)

    def test_config_is_frozen(self):
        config = TrimConfig()
        with pytest.raises(AttributeError):
            config.window_size = 3


class TestYamlConfig:
    """Test YAML loading."""

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "window_size: 4\n"
            "trim_poly_g: true\n"
            "primers:\n"
            "  - AGATCGGAAG\n"
        )
        config = TrimConfig.from_yaml(path)

        assert config.window_size == 4
        assert config.trim_poly_g
        assert config.primers == ("AGATCGGAAG",)

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert TrimConfig.from_yaml(path) == TrimConfig()

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("window: 4\n")
        with pytest.raises(ConfigError, match="Unknown"):
            TrimConfig.from_yaml(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError):
            TrimConfig.from_yaml(path)

    def test_template_loads(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_TEMPLATE)
        assert TrimConfig.from_yaml(path) == TrimConfig()

    def test_to_dict_roundtrip(self):
        config = TrimConfig(primers=("AGATCGGAAG",), trim_poly_a=True)
        assert TrimConfig.from_dict(config.to_dict()) == config


class TestPrimerInput:
    """Test primer parsing."""

    def test_comma_separated(self):
        assert parse_primer_input("ACGT, ttgg") == ("ACGT", "TTGG")

    def test_none(self):
        assert parse_primer_input(None) == ()

    def test_fasta_file(self, tmp_path):
        fasta = tmp_path / "primers.fasta"
        fasta.write_text(">p1\nAGATCGGA\nAGAGC\n>p2 second\nctgtctcttatacacatct\n")

        assert parse_primer_input(str(fasta)) == ("AGATCGGAAGAGC", "CTGTCTCTTATACACATCT")

    def test_missing_file(self):
        with pytest.raises(ConfigError, match="neither"):
            parse_primer_input("missing_primers.fasta")

    def test_deduplication(self):
        specs = build_primer_specs(["acgtacgt", "ACGTACGT", "TTTTGGGG"], 1, 0.2)
        assert [s.forward for s in specs] == ["ACGTACGT", "TTTTGGGG"]

    def test_palindrome_searched_once(self):
        spec = PrimerSpec.from_sequence("GAATTC", 0, 0.2)
        assert spec.entries == ("GAATTC",)

    def test_entries_include_reverse_complement(self):
        spec = PrimerSpec.from_sequence("AAGG", 0, 0.2)
        assert spec.entries == ("AAGG", "CCTT")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
