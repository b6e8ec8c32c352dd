"""
Unit tests for configuration loading.
"""

import pytest

from surrogate_th.config import (
    DEFAULT_INLET_TEMPERATURE,
    DEFAULT_VTK_RESOLUTION,
    SurrogateConfig,
    load_config,
)
from surrogate_th.exceptions import ConfigurationError


class TestSurrogateConfig:
    """Test validation of configuration mappings."""

    def test_defaults(self, config):
        """Optional settings take their defaults and output is off."""
        assert config.solver.inlet_temperature == DEFAULT_INLET_TEMPERATURE
        assert config.solver.backend == "reference"
        assert config.visualization is None
        assert config.viz_mode == "none"

    def test_visualization_defaults(self, config_dict):
        """Visualization settings default to final mode with all data."""
        config_dict["visualization"] = {"filename": "bundle"}
        config = SurrogateConfig.from_dict(config_dict)
        assert config.viz_mode == "final"
        assert config.visualization.resolution == DEFAULT_VTK_RESOLUTION
        assert config.visualization.data == "all"
        assert config.visualization.regions == "all"

    def test_visualization_without_filename(self, config_dict):
        """A visualization block without filename disables output."""
        config_dict["visualization"] = {"iterations": "all"}
        assert SurrogateConfig.from_dict(config_dict).viz_mode == "none"

    @pytest.mark.parametrize("block", ["geometry", "flow", "axial", "solver"])
    def test_missing_block(self, config_dict, block):
        """A missing top-level block is a configuration error."""
        del config_dict[block]
        with pytest.raises(ConfigurationError):
            SurrogateConfig.from_dict(config_dict)

    def test_missing_tolerance(self, config_dict):
        """Solver tolerance is required."""
        del config_dict["solver"]["tolerance"]
        with pytest.raises(ConfigurationError, match="tolerance"):
            SurrogateConfig.from_dict(config_dict)

    def test_short_axial_grid(self, config_dict):
        """An axial grid needs at least two boundaries."""
        config_dict["axial"]["z"] = [0.0]
        with pytest.raises(ConfigurationError):
            SurrogateConfig.from_dict(config_dict)

    def test_unknown_key(self, config_dict):
        """Unknown keys are rejected."""
        config_dict["geometry"]["pin_pich"] = 1.26
        with pytest.raises(ConfigurationError):
            SurrogateConfig.from_dict(config_dict)

    def test_bad_iterations(self, config_dict):
        """Only final, all and none are accepted as iteration modes."""
        config_dict["visualization"] = {"filename": "bundle", "iterations": "every"}
        with pytest.raises(ConfigurationError):
            SurrogateConfig.from_dict(config_dict)

    def test_not_a_mapping(self):
        """A non-mapping document is a configuration error."""
        with pytest.raises(ConfigurationError):
            SurrogateConfig.from_dict([1, 2, 3])


class TestLoadConfig:
    """Test YAML loading."""

    def test_load(self, config_file):
        """A YAML file loads into a SurrogateConfig."""
        config = load_config(config_file)
        assert config.geometry.n_pins_x == 2
        assert config.axial.z == [0.0, 1.0, 2.0, 3.0]
        assert config.viz_mode == "final"

    def test_missing_file(self, tmp_path):
        """A missing file is a configuration error."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Malformed YAML is a configuration error."""
        path = tmp_path / "broken.yaml"
        path.write_text("geometry: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_config(path)
