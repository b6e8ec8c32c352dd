"""
Surrogate Thermal-Hydraulics Library

A reduced-order stand-in for a CFD solver that closes a coupled
neutronics/thermal-hydraulics Picard iteration for rectangular fuel pin
bundles.

This library provides:
- Pin layout, coolant channel and radial ring geometry
- 3-D source/temperature/density/fluid-mask fields per (pin, axial, ring)
- Column-wise nonlinear radial conduction through pluggable backends
- VTK snapshot output scheduled by timestep and iteration

Example:
    >>> from surrogate_th import SurrogateHeatDriver, load_config
    >>> with SurrogateHeatDriver(load_config("bundle.yaml")) as driver:
    ...     driver.set_heat_source(power_density)
    ...     driver.solve_step()
    ...     print(driver.temperature().max())
"""

__version__ = "1.0.0"
__author__ = "Nuclear Sim Team"

from surrogate_th.config import SurrogateConfig, load_config
from surrogate_th.geometry import AxialGrid, ChannelKind, GeometryModel, RadialGrid
from surrogate_th.fields import FieldStore
from surrogate_th.heat_transfer import (
    ConductionSolver,
    ReferenceConductionSolver,
    get_solver,
    register_solver,
)
from surrogate_th.conduction import ConductionStepper
from surrogate_th.snapshot import SnapshotScheduler
from surrogate_th.vtk import SurrogateVtkWriter
from surrogate_th.driver import HeatFluidsDriver, SurrogateHeatDriver
from surrogate_th.exceptions import (
    SurrogateError,
    ConfigurationError,
    ConductionSolveError,
    SnapshotIOError,
)

__all__ = [
    'SurrogateConfig',
    'load_config',
    'AxialGrid',
    'ChannelKind',
    'GeometryModel',
    'RadialGrid',
    'FieldStore',
    'ConductionSolver',
    'ReferenceConductionSolver',
    'get_solver',
    'register_solver',
    'ConductionStepper',
    'SnapshotScheduler',
    'SurrogateVtkWriter',
    'HeatFluidsDriver',
    'SurrogateHeatDriver',
    'SurrogateError',
    'ConfigurationError',
    'ConductionSolveError',
    'SnapshotIOError',
]
