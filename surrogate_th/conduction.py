"""
Conduction Stepper

Runs the radial conduction backend over every (pin, axial) column of the
field store and writes the converged temperatures back. Columns are
independent: each task reads its own source slice and the shared, read-only
radial grids, and writes only its own temperature slice.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional, Tuple

import numpy as np

from surrogate_th.config import DEFAULT_INLET_TEMPERATURE
from surrogate_th.exceptions import ConductionSolveError
from surrogate_th.fields import FieldStore
from surrogate_th.geometry import GeometryModel
from surrogate_th.heat_transfer import SolverLike

logger = logging.getLogger(__name__)


# Source is stored in [MW/m^3]; the backend expects [W/m^3]
SOURCE_TO_SI = 1.0e6

# Radial grids are stored in [cm]; the backend expects [m]
LENGTH_TO_SI = 0.01


class ConductionStepper:
    """Per-column steady conduction solve over a FieldStore.

    Example:
        >>> stepper = ConductionStepper(geometry, fields, get_solver("reference"), tol=1e-4)
        >>> stepper.solve()
        >>> stepper.close()
    """

    def __init__(
        self,
        geometry: GeometryModel,
        fields: FieldStore,
        solver: SolverLike,
        tol: float,
        t_boundary: float = DEFAULT_INLET_TEMPERATURE,
        max_workers: Optional[int] = None,
    ):
        """
        Args:
            geometry: Bundle geometry providing the radial grids
            fields: Field store to read the source from and write temperatures to
            solver: Conduction backend, any callable (q, r_fuel, r_clad, t_boundary, tol)
            tol: Convergence tolerance passed to the backend
            t_boundary: Clad outer surface temperature [K]
            max_workers: Worker pool size; 1 solves columns inline
        """
        self.geometry = geometry
        self.fields = fields
        self.solver = solver
        self.tol = tol
        self.t_boundary = t_boundary
        self.max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None

        self.r_fuel = geometry.r_grid_fuel * LENGTH_TO_SI
        self.r_clad = geometry.r_grid_clad * LENGTH_TO_SI

    def columns(self) -> Iterator[Tuple[int, int]]:
        """(pin, axial) pairs in solve order: pin-major, then axial."""
        for pin in range(self.fields.n_pins):
            for axial in range(self.fields.n_axial):
                yield pin, axial

    def solve(self) -> None:
        """
        Solve every column and store the converged temperatures.

        Raises:
            ConductionSolveError: If any column fails; no column is retried
        """
        logger.info("Solving heat equation...")

        self.fields.fill_temperature(self.t_boundary)
        q = self.fields.source * SOURCE_TO_SI
        columns = list(self.columns())

        if self.max_workers == 1:
            for pin, axial in columns:
                self._solve_column(q, pin, axial)
        else:
            executor = self._get_executor()
            futures = [executor.submit(self._solve_column, q, pin, axial) for pin, axial in columns]
            # Barrier: every column finishes before results are consumed
            errors: List[BaseException] = [f.exception() for f in futures]
            for error in errors:
                if error is not None:
                    raise error

        T = self.fields.temperature
        logger.info(
            f"Heat equation solved for {len(columns)} columns: "
            f"T min {T.min():.2f} K, max {T.max():.2f} K"
        )

    def _solve_column(self, q: np.ndarray, pin: int, axial: int) -> None:
        try:
            result = self.solver(q[pin, axial, :], self.r_fuel, self.r_clad, self.t_boundary, self.tol)
        except ConductionSolveError as e:
            raise ConductionSolveError(str(e), pin=pin, axial=axial) from e
        except Exception as e:
            raise ConductionSolveError(f"Conduction backend failed: {e}", pin=pin, axial=axial) from e

        result = np.asarray(result, dtype=float)
        if result.shape != (self.fields.n_rings,):
            raise ConductionSolveError(
                f"Backend returned shape {result.shape}, expected ({self.fields.n_rings},)",
                pin=pin, axial=axial,
            )
        if not np.all(np.isfinite(result)) or np.any(result < 0.0):
            raise ConductionSolveError(
                "Backend returned non-finite or negative temperatures", pin=pin, axial=axial
            )

        self.fields.temperature[pin, axial, :] = result
        logger.debug(f"Column pin={pin} axial={axial}: T max {result.max():.2f} K")

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="conduction"
            )
        return self._executor

    def close(self) -> None:
        """Shut down the worker pool."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
