"""
Heat-Fluids Drivers

Abstract interface for the thermal-hydraulics side of a coupled
neutronics/thermal-hydraulics Picard iteration, and the surrogate
implementation built from geometry, field store, conduction stepper and
snapshot scheduler.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import numpy as np

from surrogate_th.conduction import ConductionStepper
from surrogate_th.config import SurrogateConfig
from surrogate_th.fields import FieldStore
from surrogate_th.geometry import AxialGrid, GeometryModel
from surrogate_th.heat_transfer import SolverLike, get_solver
from surrogate_th.snapshot import SnapshotScheduler
from surrogate_th.vtk import SurrogateVtkWriter

logger = logging.getLogger(__name__)


class HeatFluidsDriver(ABC):
    """Abstract base class for heat-fluids solvers in the coupling loop"""

    @abstractmethod
    def set_heat_source(self, values) -> None:
        """
        Set the volumetric heat source for the next solve

        Args:
            values: Power density per cell, 3-D or flattened
        """
        pass

    @abstractmethod
    def solve_step(self) -> None:
        """Solve the heat-fluids problem for the current heat source"""
        pass

    @abstractmethod
    def write_step(self, timestep: int = -1, iteration: int = -1) -> Optional[str]:
        """
        Write visualization output for a (timestep, iteration) pair

        Returns:
            Path of the written file, or None
        """
        pass

    @abstractmethod
    def temperature(self) -> np.ndarray:
        """Flattened temperature field [K]"""
        pass

    @abstractmethod
    def density(self) -> np.ndarray:
        """Flattened density field [g/cm^3]"""
        pass

    @abstractmethod
    def fluid_mask(self) -> np.ndarray:
        """Flattened fluid mask, 1 for fluid cells"""
        pass

    def close(self) -> None:
        """Release resources held by the driver"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class SurrogateHeatDriver(HeatFluidsDriver):
    """Reduced-order thermal-hydraulics driver for a rectangular pin bundle.

    Example:
        >>> config = load_config("bundle.yaml")
        >>> with SurrogateHeatDriver(config) as driver:
        ...     driver.set_heat_source(power_density)
        ...     driver.solve_step()
        ...     T = driver.temperature()
        ...     driver.write_step()

    Attributes:
        geometry: Pin layout, channel partition and radial grids
        axial: Axial plane boundaries
        fields: Source, temperature, density and fluid mask arrays
        stepper: Column-wise conduction solve
        scheduler: Snapshot output policy
    """

    def __init__(self, config: SurrogateConfig, solver: Optional[SolverLike] = None):
        """
        Args:
            config: Validated surrogate configuration
            solver: Conduction backend overriding the configured one
        """
        self.config = config
        self.geometry = GeometryModel.from_config(config)
        self.axial = AxialGrid.from_boundaries(config.axial.z)
        self.fields = FieldStore.for_geometry(self.geometry, self.axial)

        if solver is None:
            solver = get_solver(config.solver.backend, max_iterations=config.solver.max_iterations)
        self.stepper = ConductionStepper(
            self.geometry,
            self.fields,
            solver,
            tol=config.solver.tolerance,
            t_boundary=config.solver.inlet_temperature,
            max_workers=config.solver.max_workers,
        )

        viz = config.visualization
        writer = None
        if config.viz_mode != "none":
            writer = SurrogateVtkWriter(
                self.geometry, self.axial, self.fields,
                resolution=viz.resolution, regions=viz.regions, data=viz.data,
            )
        self.scheduler = SnapshotScheduler(
            config.viz_mode, viz.filename if viz is not None else None, writer
        )

        logger.info(
            f"Surrogate heat driver: {self.geometry.n_pins_x}x{self.geometry.n_pins_y} pins, "
            f"{self.axial.n_axial} axial levels, {self.geometry.n_rings} rings"
        )

    # --- Sizes and grids ---

    @property
    def n_pins(self) -> int:
        return self.geometry.n_pins

    @property
    def n_axial(self) -> int:
        return self.axial.n_axial

    @property
    def n_rings(self) -> int:
        return self.geometry.n_rings

    def pin_centers(self) -> np.ndarray:
        return self.geometry.pin_centers

    def z(self) -> np.ndarray:
        return self.axial.z

    # --- Coupling interface ---

    def set_heat_source(self, values) -> None:
        self.fields.set_source(values)

    def solve_step(self) -> None:
        self.stepper.solve()

    def write_step(self, timestep: int = -1, iteration: int = -1) -> Optional[str]:
        return self.scheduler.maybe_write(timestep, iteration)

    def source(self) -> np.ndarray:
        return self.fields.source_view()

    def temperature(self, pin: Optional[int] = None, axial: Optional[int] = None,
                    ring: Optional[int] = None):
        """Flattened temperature field, or a single value when indices are given."""
        if pin is None and axial is None and ring is None:
            return self.fields.temperature_view()
        return self.fields.get("temperature", pin, axial, ring)

    def density(self) -> np.ndarray:
        return self.fields.density_view()

    def fluid_mask(self) -> np.ndarray:
        return self.fields.fluid_mask_view()

    def cell_volume(self, pin: int, axial: int, ring: int) -> float:
        """Volume of one (pin, axial, ring) cell in configuration units cubed."""
        self.fields.flat_index(pin, axial, ring)
        return float(self.geometry.radial.ring_areas()[ring] * self.axial.heights()[axial])

    def get_state_dict(self) -> Dict[str, Any]:
        """Summary of the current field state for logging/monitoring."""
        T = self.fields.temperature
        return {
            "n_pins": self.n_pins,
            "n_axial": self.n_axial,
            "n_rings": self.n_rings,
            "total_flow_area": self.geometry.total_flow_area,
            "max_temperature": float(T.max()),
            "min_temperature": float(T.min()),
            "mean_source": float(self.fields.source.mean()),
        }

    def close(self) -> None:
        self.stepper.close()
