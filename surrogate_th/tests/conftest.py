"""
Shared fixtures: the 2x2 example bundle from the design notes.
"""

import pytest
import yaml

from surrogate_th.config import SurrogateConfig
from surrogate_th.geometry import GeometryModel


@pytest.fixture
def config_dict():
    """2x2 bundle, 2 fuel rings, 1 clad ring, three axial levels."""
    return {
        "geometry": {
            "clad_inner_radius": 0.50,
            "clad_outer_radius": 0.55,
            "pellet_radius": 0.40,
            "fuel_rings": 2,
            "clad_rings": 1,
            "n_pins_x": 2,
            "n_pins_y": 2,
            "pin_pitch": 1.26,
        },
        "flow": {"mass_flowrate": 1.0},
        "axial": {"z": [0.0, 1.0, 2.0, 3.0]},
        "solver": {"tolerance": 1.0e-4, "max_workers": 2},
    }


@pytest.fixture
def config(config_dict):
    return SurrogateConfig.from_dict(config_dict)


@pytest.fixture
def geometry():
    return GeometryModel(
        n_pins_x=2,
        n_pins_y=2,
        pin_pitch=1.26,
        clad_inner_radius=0.50,
        clad_outer_radius=0.55,
        pellet_radius=0.40,
        mass_flowrate=1.0,
        n_fuel_rings=2,
        n_clad_rings=1,
    )


@pytest.fixture
def config_file(tmp_path, config_dict):
    """Write a config with a final-iteration snapshot into tmp_path."""
    config_dict["visualization"] = {"filename": str(tmp_path / "bundle"), "resolution": 6}
    path = tmp_path / "bundle.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(config_dict, f)
    return path
