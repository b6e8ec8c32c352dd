"""
Field Store

Owns the 3-D fields of the surrogate model, indexed by (pin, axial, ring):
volumetric heat source, temperature, density and the fluid/solid mask.
Arrays are allocated once and mutated in place; flattened views are
row-major (pin, then axial, then ring) and read-only.
"""

import logging
from typing import Dict, Tuple

import numpy as np

logger = logging.getLogger(__name__)


FIELD_NAMES = ("source", "temperature", "density", "fluid_mask")


def _frozen_view(array: np.ndarray) -> np.ndarray:
    view = array.reshape(-1)
    view.flags.writeable = False
    return view


class FieldStore:
    """Dense (n_pins, n_axial, n_rings) fields of one surrogate model.

    Attributes:
        source: Volumetric heat source [MW/m^3]
        temperature: Temperature [K]
        density: Density [g/cm^3]
        fluid_mask: 1 where the ring belongs to the fluid phase, 0 for solid
    """

    def __init__(self, n_pins: int, n_axial: int, n_rings: int):
        self.shape: Tuple[int, int, int] = (int(n_pins), int(n_axial), int(n_rings))
        self.source = np.zeros(self.shape)
        self.temperature = np.zeros(self.shape)
        self.density = np.zeros(self.shape)
        self.fluid_mask = np.zeros(self.shape, dtype=int)
        logger.debug(f"Allocated fields with shape {self.shape}")

    @classmethod
    def for_geometry(cls, geometry, axial) -> "FieldStore":
        """Size fields from a GeometryModel and an AxialGrid."""
        return cls(geometry.n_pins, axial.n_axial, geometry.n_rings)

    @property
    def n_pins(self) -> int:
        return self.shape[0]

    @property
    def n_axial(self) -> int:
        return self.shape[1]

    @property
    def n_rings(self) -> int:
        return self.shape[2]

    @property
    def size(self) -> int:
        return self.n_pins * self.n_axial * self.n_rings

    def _field(self, name: str) -> np.ndarray:
        if name not in FIELD_NAMES:
            raise KeyError(f"Unknown field '{name}', expected one of {FIELD_NAMES}")
        return getattr(self, name)

    def _check_index(self, pin: int, axial: int, ring: int) -> Tuple[int, int, int]:
        for label, value, bound in zip(("pin", "axial", "ring"), (pin, axial, ring), self.shape):
            if not 0 <= value < bound:
                raise IndexError(f"{label} index {value} out of range [0, {bound})")
        return pin, axial, ring

    # --- Indexed access ---

    def get(self, name: str, pin: int, axial: int, ring: int):
        """Value of field ``name`` at (pin, axial, ring)."""
        return self._field(name)[self._check_index(pin, axial, ring)]

    def set(self, name: str, pin: int, axial: int, ring: int, value) -> None:
        """Set field ``name`` at (pin, axial, ring)."""
        self._field(name)[self._check_index(pin, axial, ring)] = value

    def column(self, name: str, pin: int, axial: int) -> np.ndarray:
        """Radial profile of field ``name`` for one (pin, axial) column."""
        self._check_index(pin, axial, 0)
        return self._field(name)[pin, axial, :]

    # --- Bulk updates ---

    def set_source(self, values) -> None:
        """
        Copy a power density field into the source array.
        Accepts either the full 3-D shape or a flat array in view order.
        """
        self._assign(self.source, values)

    def set_density(self, values) -> None:
        self._assign(self.density, values)

    def fill_temperature(self, value: float) -> None:
        self.temperature.fill(value)

    def _assign(self, target: np.ndarray, values) -> None:
        values = np.asarray(values, dtype=target.dtype)
        if values.shape == self.shape:
            target[...] = values
        elif values.ndim == 1 and values.size == self.size:
            target[...] = values.reshape(self.shape)
        else:
            raise ValueError(
                f"Expected shape {self.shape} or flat length {self.size}, got {values.shape}"
            )

    # --- Flattened views ---

    def source_view(self) -> np.ndarray:
        return _frozen_view(self.source)

    def temperature_view(self) -> np.ndarray:
        return _frozen_view(self.temperature)

    def density_view(self) -> np.ndarray:
        return _frozen_view(self.density)

    def fluid_mask_view(self) -> np.ndarray:
        return _frozen_view(self.fluid_mask)

    def views(self) -> Dict[str, np.ndarray]:
        return {name: _frozen_view(self._field(name)) for name in FIELD_NAMES}

    def flat_index(self, pin: int, axial: int, ring: int) -> int:
        """Position of (pin, axial, ring) in the flattened views."""
        self._check_index(pin, axial, ring)
        return (pin * self.n_axial + axial) * self.n_rings + ring

    def unflatten(self, flat) -> np.ndarray:
        """Reshape a flattened field back to (n_pins, n_axial, n_rings)."""
        flat = np.asarray(flat)
        if flat.size != self.size:
            raise ValueError(f"Expected {self.size} values, got {flat.size}")
        return flat.reshape(self.shape)
