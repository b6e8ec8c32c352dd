"""
VTK snapshot writer for the surrogate model.

Writes a legacy ASCII VTK unstructured grid. Every (pin, axial, ring) cell of
the field store is swept azimuthally into ``resolution`` cells around the pin
center: wedges for the innermost fuel ring, hexahedra elsewhere. Field values
are attached as cell data.
"""

import logging
from typing import Dict, List, Tuple

import numpy as np

from surrogate_th.config import DEFAULT_VTK_RESOLUTION

logger = logging.getLogger(__name__)


VTK_WEDGE = 13
VTK_HEXAHEDRON = 12

DATA_SELECTORS = {
    "all": ("temperature", "density", "source", "fluid_mask"),
    "temperature": ("temperature",),
    "density": ("density",),
    "source": ("source",),
}

REGION_SELECTORS = ("all", "fuel", "clad")


class SurrogateVtkWriter:
    """Serializes surrogate fields and grids to a .vtk file."""

    def __init__(self, geometry, axial, fields, resolution: int = DEFAULT_VTK_RESOLUTION,
                 regions: str = "all", data: str = "all"):
        """
        Args:
            geometry: GeometryModel with pin centers and radial grids
            axial: AxialGrid with the z boundaries
            fields: FieldStore providing the flattened views
            resolution: Azimuthal cells per ring
            regions: Which rings to export: 'all', 'fuel' or 'clad'
            data: Which fields to export: 'all', 'temperature', 'density' or 'source'
        """
        if resolution < 3:
            raise ValueError(f"VTK resolution must be at least 3, got {resolution}")
        if regions not in REGION_SELECTORS:
            raise ValueError(f"Unknown region selector '{regions}'")
        if data not in DATA_SELECTORS:
            raise ValueError(f"Unknown data selector '{data}'")

        self.geometry = geometry
        self.axial = axial
        self.fields = fields
        self.resolution = resolution
        self.regions = regions
        self.data = data

    def selected_rings(self) -> np.ndarray:
        n_fuel = self.geometry.n_fuel_rings
        rings = np.arange(self.geometry.n_rings)
        if self.regions == "fuel":
            return rings[:n_fuel]
        if self.regions == "clad":
            return rings[n_fuel:]
        return rings

    def build_mesh(self) -> Tuple[np.ndarray, List[List[int]], List[int], np.ndarray]:
        """
        Returns:
            points: (n_points, 3) coordinates
            connectivity: point ids per VTK cell
            cell_types: VTK cell type per VTK cell
            source_index: flat field index of the (pin, axial, ring) each VTK cell came from
        """
        bounds = self.geometry.radial.ring_bounds()
        theta = np.linspace(0.0, 2.0 * np.pi, self.resolution + 1)
        cos_t, sin_t = np.cos(theta), np.sin(theta)
        z = self.axial.z

        points: List[Tuple[float, float, float]] = []
        connectivity: List[List[int]] = []
        cell_types: List[int] = []
        source_index: List[int] = []

        for pin, (x0, y0) in enumerate(self.geometry.pin_centers):
            for axial in range(self.axial.n_axial):
                z0, z1 = z[axial], z[axial + 1]
                for ring in self.selected_rings():
                    r_in, r_out = bounds[ring]
                    flat = self.fields.flat_index(pin, axial, int(ring))
                    for k in range(self.resolution):
                        start = len(points)
                        outer = [(x0 + r_out * cos_t[k], y0 + r_out * sin_t[k]),
                                 (x0 + r_out * cos_t[k + 1], y0 + r_out * sin_t[k + 1])]
                        if r_in == 0.0:
                            base = [(x0, y0), outer[1], outer[0]]
                            cell_types.append(VTK_WEDGE)
                        else:
                            inner = [(x0 + r_in * cos_t[k], y0 + r_in * sin_t[k]),
                                     (x0 + r_in * cos_t[k + 1], y0 + r_in * sin_t[k + 1])]
                            base = [inner[0], outer[0], outer[1], inner[1]]
                            cell_types.append(VTK_HEXAHEDRON)
                        points.extend((x, y, z0) for x, y in base)
                        points.extend((x, y, z1) for x, y in base)
                        connectivity.append(list(range(start, start + 2 * len(base))))
                        source_index.append(flat)

        return np.array(points).reshape(-1, 3), connectivity, cell_types, np.array(source_index, dtype=int)

    def cell_data(self, source_index: np.ndarray) -> Dict[str, np.ndarray]:
        views = self.fields.views()
        return {name: views[name][source_index] for name in DATA_SELECTORS[self.data]}

    def write(self, filename: str) -> None:
        """
        Write the snapshot.

        Raises:
            OSError: If the file cannot be written
        """
        points, connectivity, cell_types, source_index = self.build_mesh()
        n_cells = len(connectivity)

        lines = [
            "# vtk DataFile Version 3.0",
            "surrogate heat driver",
            "ASCII",
            "DATASET UNSTRUCTURED_GRID",
            f"POINTS {len(points)} double",
        ]
        lines.extend(f"{x:.8g} {y:.8g} {z:.8g}" for x, y, z in points)

        size = sum(len(ids) + 1 for ids in connectivity)
        lines.append(f"CELLS {n_cells} {size}")
        lines.extend(" ".join(map(str, [len(ids)] + ids)) for ids in connectivity)

        lines.append(f"CELL_TYPES {n_cells}")
        lines.extend(str(t) for t in cell_types)

        lines.append(f"CELL_DATA {n_cells}")
        for name, values in self.cell_data(source_index).items():
            kind = "int" if np.issubdtype(values.dtype, np.integer) else "double"
            lines.append(f"SCALARS {name} {kind} 1")
            lines.append("LOOKUP_TABLE default")
            lines.extend(f"{v:.8g}" if kind == "double" else str(v) for v in values)

        with open(filename, "w") as f:
            f.write("\n".join(lines))
            f.write("\n")

        logger.debug(f"Wrote {n_cells} cells and {len(points)} points to {filename}")
