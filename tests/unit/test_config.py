"""Unit tests for configuration classes."""

import pytest
import yaml

from cytogate.core.assembly import AnalysisConfig, AssemblyConfig
from cytogate.core.phenotype import PhenotypeConfig
from cytogate.core.tree import TreeConfig


class TestTreeConfig:
    """Tests for TreeConfig dataclass."""

    def test_default_values(self):
        """Test default configuration values."""
        config = TreeConfig()
        assert config.marker_index_base == 0
        assert config.threshold_precision == 2
        assert config.reshape_flat_tables is True
        assert config.root_key == "root"
        assert config.marker_fields[0] == "marker"


class TestPhenotypeConfig:
    """Tests for PhenotypeConfig dataclass."""

    def test_default_columns(self):
        """Test default annotation column names."""
        config = PhenotypeConfig()
        assert config.population_column == "labels"
        assert config.count_column == "count"
        assert config.proportion_column == "prop"


class TestAssemblyConfig:
    """Tests for AssemblyConfig dataclass."""

    def test_default_values(self):
        """Test the cell ceiling and split sensitivity defaults."""
        config = AssemblyConfig()
        assert config.max_cells == 10000
        assert config.split_threshold == 0.01
        assert config.range_precision == 2

    def test_negative_ceiling(self):
        """Test that a negative ceiling is rejected."""
        with pytest.raises(ValueError):
            AssemblyConfig(max_cells=-1)


class TestAnalysisConfig:
    """Tests for AnalysisConfig master configuration."""

    def test_default(self):
        """Test default factory."""
        config = AnalysisConfig.default()
        assert config.assembly.max_cells == 10000
        assert config.combine.column_policy == "intersection"

    def test_from_yaml(self, sample_analysis_config):
        """Test loading from YAML file with a cytogate section."""
        config = AnalysisConfig.from_yaml(sample_analysis_config)
        assert config.tree.marker_fields == ("marker", "feature")
        assert config.combine.column_policy == "union"
        assert config.assembly.max_cells == 50
        assert config.assembly.seed == 3

    def test_from_yaml_without_section(self, tmp_path):
        """Test loading a file without the top-level section."""
        path = tmp_path / "flat.yaml"
        path.write_text(yaml.safe_dump({"tree": {"marker_index_base": 1}}))
        config = AnalysisConfig.from_yaml(path)
        assert config.tree.marker_index_base == 1

    def test_empty_yaml(self, tmp_path):
        """Test that an empty file gives defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert AnalysisConfig.from_yaml(path) == AnalysisConfig()

    def test_to_dict_round_trip(self):
        """Test that to_dict is YAML-safe and reloads to the same config."""
        config = AnalysisConfig(assembly=AssemblyConfig(max_cells=5, seed=9))
        data = yaml.safe_load(yaml.safe_dump(config.to_dict()))
        assert AnalysisConfig.from_dict(data) == config

    def test_unknown_field(self, tmp_path):
        """Test that unknown keys are rejected."""
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump({"assembly": {"max_events": 5}}))
        with pytest.raises(TypeError):
            AnalysisConfig.from_yaml(path)
