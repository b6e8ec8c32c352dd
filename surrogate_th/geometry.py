"""
Pin Bundle Geometry

Decomposes a rectangular pin bundle into pins, coolant channels and radial
material rings. The center of the assembly is at x = 0, y = 0 and the
rod-boundary separation in x and y equals half the pitch.

Lengths are in the units of the configuration (centimeters by convention).
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence

import numpy as np

from surrogate_th.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ChannelKind(IntEnum):
    """Position of a coolant channel in the (n_y+1) x (n_x+1) channel grid."""
    INTERIOR = 0
    EDGE = 1
    CORNER = 2


# Share of an interior channel's open flow area by position
CHANNEL_AREA_FRACTION = {
    ChannelKind.INTERIOR: 1.0,
    ChannelKind.EDGE: 0.5,
    ChannelKind.CORNER: 0.25,
}


def _readonly(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class RadialGrid:
    """
    Ring boundaries for the fuel pellet and the cladding.

    Attributes:
        r_fuel: n_fuel_rings + 1 boundaries spanning [0, pellet_radius]
        r_clad: n_clad_rings + 1 boundaries spanning [clad_inner, clad_outer]
    """
    r_fuel: np.ndarray
    r_clad: np.ndarray

    @classmethod
    def equally_spaced(cls, pellet_radius: float, clad_inner_radius: float,
                       clad_outer_radius: float, n_fuel_rings: int,
                       n_clad_rings: int) -> "RadialGrid":
        r_fuel = np.linspace(0.0, pellet_radius, n_fuel_rings + 1)
        r_clad = np.linspace(clad_inner_radius, clad_outer_radius, n_clad_rings + 1)
        return cls(r_fuel=_readonly(r_fuel), r_clad=_readonly(r_clad))

    @property
    def n_fuel_rings(self) -> int:
        return len(self.r_fuel) - 1

    @property
    def n_clad_rings(self) -> int:
        return len(self.r_clad) - 1

    @property
    def n_rings(self) -> int:
        return self.n_fuel_rings + self.n_clad_rings

    def ring_bounds(self) -> np.ndarray:
        """Inner and outer radius of every ring, fuel rings first. Shape (n_rings, 2)."""
        inner = np.concatenate([self.r_fuel[:-1], self.r_clad[:-1]])
        outer = np.concatenate([self.r_fuel[1:], self.r_clad[1:]])
        return np.column_stack([inner, outer])

    def ring_midpoints(self) -> np.ndarray:
        return self.ring_bounds().mean(axis=1)

    def ring_areas(self) -> np.ndarray:
        """Cross-sectional area of every ring (volume per unit height)."""
        bounds = self.ring_bounds()
        return np.pi * (bounds[:, 1] ** 2 - bounds[:, 0] ** 2)


@dataclass(frozen=True, eq=False)
class AxialGrid:
    """Axial plane boundaries; n_axial = len(z) - 1."""
    z: np.ndarray

    @classmethod
    def from_boundaries(cls, z: Sequence[float]) -> "AxialGrid":
        """
        Args:
            z: Ordered plane boundaries, bottom to top

        Raises:
            ConfigurationError: Fewer than two boundaries, or not strictly increasing
        """
        z = np.asarray(z, dtype=float)
        if z.ndim != 1 or z.size < 2:
            raise ConfigurationError("Axial grid needs at least two z boundaries")
        if np.any(np.diff(z) <= 0.0):
            raise ConfigurationError(f"Axial z boundaries must be strictly increasing: {z}")
        return cls(z=_readonly(z))

    @property
    def n_axial(self) -> int:
        return len(self.z) - 1

    def heights(self) -> np.ndarray:
        return np.diff(self.z)


class GeometryModel:
    """Pin layout, coolant channel partition and radial grids of a pin bundle.

    Channels are centered between and around pins: channel (row, col) of the
    (n_pins_y+1) x (n_pins_x+1) grid. Channel flow areas use a coolant-centered
    approximation where edge channels get half and corner channels a quarter
    of the interior open area ``pitch**2 - pi * clad_outer_radius**2``. The
    mass flow rate is split in proportion to channel area.

    Example:
        >>> geom = GeometryModel(2, 2, 1.26, 0.50, 0.55, 0.40, 1.0, 2, 1)
        >>> geom.n_channels
        9
    """

    def __init__(
        self,
        n_pins_x: int,
        n_pins_y: int,
        pin_pitch: float,
        clad_inner_radius: float,
        clad_outer_radius: float,
        pellet_radius: float,
        mass_flowrate: float,
        n_fuel_rings: int,
        n_clad_rings: int,
    ):
        """Build the bundle geometry.

        Args:
            n_pins_x: Number of pins along x
            n_pins_y: Number of pins along y
            pin_pitch: Pin center-to-center distance
            clad_inner_radius: Inner radius of the cladding
            clad_outer_radius: Outer radius of the cladding
            pellet_radius: Fuel pellet radius
            mass_flowrate: Total coolant mass flow rate [kg/s]
            n_fuel_rings: Radial rings in the pellet
            n_clad_rings: Radial rings in the cladding

        Raises:
            ConfigurationError: If a geometric or physical precondition fails
        """
        checks = [
            (clad_inner_radius > 0, "clad_inner_radius must be positive"),
            (clad_outer_radius > clad_inner_radius,
             "clad_outer_radius must exceed clad_inner_radius"),
            (pellet_radius > 0, "pellet_radius must be positive"),
            (pellet_radius < clad_inner_radius,
             "pellet_radius must be smaller than clad_inner_radius"),
            (n_fuel_rings > 0, "fuel_rings must be positive"),
            (n_clad_rings > 0, "clad_rings must be positive"),
            (n_pins_x > 0, "n_pins_x must be positive"),
            (n_pins_y > 0, "n_pins_y must be positive"),
            (pin_pitch > 2.0 * clad_outer_radius,
             "pin_pitch must exceed the rod diameter (rods would overlap)"),
            (mass_flowrate > 0.0, "mass_flowrate must be positive"),
        ]
        for ok, message in checks:
            if not ok:
                raise ConfigurationError(message)

        self.n_pins_x = int(n_pins_x)
        self.n_pins_y = int(n_pins_y)
        self.pin_pitch = float(pin_pitch)
        self.clad_inner_radius = float(clad_inner_radius)
        self.clad_outer_radius = float(clad_outer_radius)
        self.pellet_radius = float(pellet_radius)
        self.mass_flowrate = float(mass_flowrate)

        self.radial = RadialGrid.equally_spaced(
            self.pellet_radius, self.clad_inner_radius, self.clad_outer_radius,
            int(n_fuel_rings), int(n_clad_rings),
        )
        self.pin_centers = _readonly(self._build_pin_centers())
        self.channel_areas = _readonly(self._build_channel_areas())
        self.total_flow_area = float(self.channel_areas.sum())
        self.channel_flowrates = _readonly(
            self.channel_areas / self.total_flow_area * self.mass_flowrate
        )

        logger.debug(
            f"Geometry: {self.n_pins} pins, {self.n_channels} channels, "
            f"{self.n_rings} rings per pin"
        )

    @classmethod
    def from_config(cls, config) -> "GeometryModel":
        """Build from a SurrogateConfig."""
        g = config.geometry
        return cls(
            n_pins_x=g.n_pins_x,
            n_pins_y=g.n_pins_y,
            pin_pitch=g.pin_pitch,
            clad_inner_radius=g.clad_inner_radius,
            clad_outer_radius=g.clad_outer_radius,
            pellet_radius=g.pellet_radius,
            mass_flowrate=config.flow.mass_flowrate,
            n_fuel_rings=g.fuel_rings,
            n_clad_rings=g.clad_rings,
        )

    # --- Sizes ---

    @property
    def n_pins(self) -> int:
        return self.n_pins_x * self.n_pins_y

    @property
    def n_channels(self) -> int:
        return (self.n_pins_x + 1) * (self.n_pins_y + 1)

    @property
    def n_fuel_rings(self) -> int:
        return self.radial.n_fuel_rings

    @property
    def n_clad_rings(self) -> int:
        return self.radial.n_clad_rings

    @property
    def n_rings(self) -> int:
        return self.radial.n_rings

    @property
    def r_grid_fuel(self) -> np.ndarray:
        return self.radial.r_fuel

    @property
    def r_grid_clad(self) -> np.ndarray:
        return self.radial.r_clad

    @property
    def interior_flow_area(self) -> float:
        return self.pin_pitch ** 2 - np.pi * self.clad_outer_radius ** 2

    @property
    def flow_fractions(self) -> np.ndarray:
        """Fraction of the total mass flow carried by each channel."""
        return self.channel_areas / self.total_flow_area

    # --- Indexing ---

    def pin_index(self, row: int, col: int) -> int:
        if not (0 <= row < self.n_pins_y and 0 <= col < self.n_pins_x):
            raise IndexError(f"Pin ({row}, {col}) outside {self.n_pins_y}x{self.n_pins_x} lattice")
        return row * self.n_pins_x + col

    def channel_index(self, row: int, col: int) -> int:
        if not (0 <= row <= self.n_pins_y and 0 <= col <= self.n_pins_x):
            raise IndexError(
                f"Channel ({row}, {col}) outside {self.n_pins_y + 1}x{self.n_pins_x + 1} grid"
            )
        return row * (self.n_pins_x + 1) + col

    def channel_kind(self, row: int, col: int) -> ChannelKind:
        self.channel_index(row, col)
        on_row_edge = row == 0 or row == self.n_pins_y
        on_col_edge = col == 0 or col == self.n_pins_x
        if on_row_edge and on_col_edge:
            return ChannelKind.CORNER
        if on_row_edge or on_col_edge:
            return ChannelKind.EDGE
        return ChannelKind.INTERIOR

    # --- Builders ---

    def _build_pin_centers(self) -> np.ndarray:
        width_x = self.n_pins_x * self.pin_pitch
        width_y = self.n_pins_y * self.pin_pitch

        centers = np.empty((self.n_pins, 2))
        for row in range(self.n_pins_y):
            for col in range(self.n_pins_x):
                pin = row * self.n_pins_x + col
                centers[pin, 0] = -width_x / 2.0 + self.pin_pitch / 2.0 + col * self.pin_pitch
                centers[pin, 1] = width_y / 2.0 - (self.pin_pitch / 2.0 + row * self.pin_pitch)
        return centers

    def _build_channel_areas(self) -> np.ndarray:
        interior = self.interior_flow_area
        areas = np.empty(self.n_channels)
        for row in range(self.n_pins_y + 1):
            for col in range(self.n_pins_x + 1):
                kind = self.channel_kind(row, col)
                areas[self.channel_index(row, col)] = interior * CHANNEL_AREA_FRACTION[kind]
        return areas
