"""
Surrogate Configuration

Input model for the surrogate heat driver. A configuration document has
geometry, flow, axial and solver blocks plus an optional visualization block;
it can be loaded from YAML or built from a plain mapping.
"""

# Annotation imports
from __future__ import annotations
from typing import Any, Literal, Optional

# Import libraries
import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from surrogate_th.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


# NuScale inlet temperature [K]
DEFAULT_INLET_TEMPERATURE = 523.15

# Azimuthal cells per ring in VTK snapshots
DEFAULT_VTK_RESOLUTION = 20


class _Block(BaseModel):
    """Common settings for configuration blocks."""

    model_config = ConfigDict(
        extra="forbid",        # Misspelled keys are configuration errors
        frozen=True,           # Configuration is immutable once loaded
    )


class GeometryConfig(_Block):
    """
    Pin bundle geometry. Lengths are in centimeters.
    """
    clad_inner_radius: float
    clad_outer_radius: float
    pellet_radius: float
    fuel_rings: int
    clad_rings: int
    n_pins_x: int
    n_pins_y: int
    pin_pitch: float


class FlowConfig(_Block):
    """Coolant flow; mass_flowrate in kg/s for the whole bundle."""
    mass_flowrate: float


class AxialConfig(_Block):
    """Axial plane boundaries, bottom to top."""
    z: list[float]

    @field_validator("z")
    @classmethod
    def _check_length(cls, value: list[float]) -> list[float]:
        if len(value) < 2:
            raise ValueError("at least two z boundaries are required")
        return value


class SolverConfig(_Block):
    """
    Heat equation solver settings.
    Attributes:
        tolerance:          Convergence tolerance passed to the conduction backend
        inlet_temperature:  [K] Boundary temperature at the clad outer surface
        backend:            Name of the registered conduction backend
        max_workers:        Worker pool size for column solves (None = executor default)
        max_iterations:     Nonlinear iteration limit for the conduction backend
    """
    tolerance: float
    inlet_temperature: float = DEFAULT_INLET_TEMPERATURE
    backend: str = "reference"
    max_workers: Optional[int] = Field(default=None, ge=1)
    max_iterations: int = Field(default=100, ge=1)

    @field_validator("tolerance")
    @classmethod
    def _check_tolerance(cls, value: float) -> float:
        if value <= 0.0:
            raise ValueError("tolerance must be positive")
        return value


class VisualizationConfig(_Block):
    """
    Snapshot output. When the block is present the final iteration is
    written by default; without a filename nothing is written.
    """
    filename: Optional[str] = None
    iterations: Literal["final", "all", "none"] = "final"
    resolution: int = Field(default=DEFAULT_VTK_RESOLUTION, ge=3)
    data: Literal["all", "temperature", "density", "source"] = "all"
    regions: Literal["all", "fuel", "clad"] = "all"


class SurrogateConfig(_Block):
    """Complete surrogate heat driver configuration."""
    geometry: GeometryConfig
    flow: FlowConfig
    axial: AxialConfig
    solver: SolverConfig
    visualization: Optional[VisualizationConfig] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SurrogateConfig:
        """
        Build a configuration from a nested mapping.
        Raises:
            ConfigurationError: If keys are missing, unknown or ill-typed.
        """
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid surrogate configuration:\n{e}") from e

    @property
    def viz_mode(self) -> str:
        """Effective snapshot mode; 'none' when no output file is configured."""
        if self.visualization is None or self.visualization.filename is None:
            return "none"
        return self.visualization.iterations


def load_config(path: str | Path) -> SurrogateConfig:
    """
    Load a surrogate configuration from a YAML file.
    Args:
        path: Path to the YAML document
    Returns:
        Validated SurrogateConfig
    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e

    logger.debug(f"Loaded configuration from {path}")
    return SurrogateConfig.from_dict(data)
