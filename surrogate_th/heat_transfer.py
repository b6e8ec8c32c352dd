"""
Radial Heat Transfer Backends

Steady-state nonlinear radial conduction solvers for a single fuel pin
column (fuel rings, pellet-clad gap, clad rings). A backend is a pure
function of its inputs: it receives SI quantities and returns the converged
ring temperatures, fuel rings first.

Backends are selected by name through the solver configuration.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Type, Union

import numpy as np

from surrogate_th.exceptions import ConductionSolveError, ConfigurationError

logger = logging.getLogger(__name__)


class ConductionSolver(ABC):
    """Abstract base class for radial conduction backends"""

    @abstractmethod
    def solve(self, q: np.ndarray, r_fuel: np.ndarray, r_clad: np.ndarray,
              t_boundary: float, tol: float) -> np.ndarray:
        """
        Solve steady radial conduction for one column

        Args:
            q: Volumetric heat source per ring [W/m^3], fuel rings first
            r_fuel: Fuel ring boundaries [m], starting at 0
            r_clad: Clad ring boundaries [m]
            t_boundary: Temperature at the clad outer surface [K]
            tol: Convergence tolerance on the temperature change [K]

        Returns:
            Ring temperatures [K], same length as q

        Raises:
            ConductionSolveError: If the solve does not converge
        """
        pass

    def __call__(self, q, r_fuel, r_clad, t_boundary, tol):
        return self.solve(q, r_fuel, r_clad, t_boundary, tol)


def uo2_conductivity(T: np.ndarray) -> np.ndarray:
    """Fresh UO2 thermal conductivity [W/m-K] at temperature T [K]."""
    A1, A2, A4 = 0.0375, 2.165e-4, 0.058
    f = 1.0 / (1.0 + np.exp((T - 900.0) / 80.0))
    g = 4.715e9 * T ** -2.0 * np.exp(-16361.0 / T)
    return 1.0 / (A1 + A2 * T + A4 * f) + g


def zircaloy_conductivity(T: np.ndarray) -> np.ndarray:
    """Zircaloy-4 thermal conductivity [W/m-K] at temperature T [K]."""
    return (0.113 + 2.25e-5 * T + 0.725e-8 * T ** 2) * 100.0


class ReferenceConductionSolver(ConductionSolver):
    """
    Finite-volume radial conduction with temperature-dependent conductivity.

    Each ring is one control volume with its temperature at the ring
    midpoint. Neighboring volumes are joined by cylindrical thermal
    resistances; the pellet-clad gap adds a constant conductance and the
    clad outer surface is held at the boundary temperature. Conductivities
    are lagged and the linear system is re-solved until the largest
    temperature change falls below the tolerance.
    """

    def __init__(self, h_gap: float = 1.0e4, max_iterations: int = 100,
                 k_fuel: Callable = uo2_conductivity,
                 k_clad: Callable = zircaloy_conductivity):
        """
        Args:
            h_gap: Gap conductance [W/m^2-K]
            max_iterations: Picard iteration limit
            k_fuel: Fuel conductivity correlation k(T)
            k_clad: Clad conductivity correlation k(T)
        """
        self.h_gap = h_gap
        self.max_iterations = max_iterations
        self.k_fuel = k_fuel
        self.k_clad = k_clad

    def solve(self, q, r_fuel, r_clad, t_boundary, tol):
        q = np.asarray(q, dtype=float)
        r_fuel = np.asarray(r_fuel, dtype=float)
        r_clad = np.asarray(r_clad, dtype=float)
        n_fuel = len(r_fuel) - 1
        n_clad = len(r_clad) - 1
        n = n_fuel + n_clad
        if q.shape != (n,):
            raise ConductionSolveError(f"Source has {q.size} rings, expected {n}")

        r_in = np.concatenate([r_fuel[:-1], r_clad[:-1]])
        r_out = np.concatenate([r_fuel[1:], r_clad[1:]])
        r_mid = 0.5 * (r_in + r_out)
        # Heat generated per unit length in each ring [W/m]
        q_lin = q * np.pi * (r_out ** 2 - r_in ** 2)

        T = np.full(n, float(t_boundary))
        for iteration in range(1, self.max_iterations + 1):
            k = np.concatenate([self.k_fuel(T[:n_fuel]), self.k_clad(T[n_fuel:])])
            T_new = self._linear_solve(k, r_in, r_out, r_mid, q_lin, n_fuel, t_boundary)
            change = np.max(np.abs(T_new - T))
            T = T_new
            if not np.all(np.isfinite(T)):
                raise ConductionSolveError(f"Non-finite temperature at iteration {iteration}")
            if change < tol:
                logger.debug(f"Radial conduction converged in {iteration} iterations")
                return T

        raise ConductionSolveError(
            f"Radial conduction did not converge in {self.max_iterations} iterations "
            f"(last change {change:.3e} K, tolerance {tol:.3e} K)"
        )

    def _linear_solve(self, k, r_in, r_out, r_mid, q_lin, n_fuel, t_boundary):
        n = len(k)
        A = np.zeros((n, n))
        b = q_lin.copy()

        for i in range(n - 1):
            # Resistance from the center of ring i to the center of ring i+1
            resistance = np.log(r_out[i] / r_mid[i]) / (2.0 * np.pi * k[i])
            resistance += np.log(r_mid[i + 1] / r_in[i + 1]) / (2.0 * np.pi * k[i + 1])
            if i == n_fuel - 1:
                resistance += 1.0 / (2.0 * np.pi * r_out[i] * self.h_gap)
            conductance = 1.0 / resistance
            A[i, i] += conductance
            A[i + 1, i + 1] += conductance
            A[i, i + 1] -= conductance
            A[i + 1, i] -= conductance

        # Fixed temperature at the clad outer surface
        conductance = 2.0 * np.pi * k[-1] / np.log(r_out[-1] / r_mid[-1])
        A[-1, -1] += conductance
        b[-1] += conductance * t_boundary

        return np.linalg.solve(A, b)


# Backend registry
_BACKENDS: Dict[str, Type[ConductionSolver]] = {
    "reference": ReferenceConductionSolver,
}

SolverLike = Union[ConductionSolver, Callable]


def register_solver(name: str, solver_class: Type[ConductionSolver]) -> None:
    """Make a backend selectable by name from configuration."""
    _BACKENDS[name] = solver_class


def get_solver(name: str, **kwargs) -> ConductionSolver:
    """
    Instantiate a registered backend.

    Raises:
        ConfigurationError: If no backend is registered under ``name``
    """
    try:
        solver_class = _BACKENDS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown conduction backend '{name}', available: {sorted(_BACKENDS)}"
        ) from None
    return solver_class(**kwargs)
