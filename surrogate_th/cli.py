"""
Surrogate heat driver CLI

Examples:
  # Solve with a uniform 300 MW/m^3 fuel power density and write the final snapshot
  surrogate-th run bundle.yaml --power-density 300

  # Show the pin layout and coolant channel partition
  surrogate-th info bundle.yaml
"""

import argparse
import logging
import sys

import numpy as np

from surrogate_th.config import load_config
from surrogate_th.driver import SurrogateHeatDriver
from surrogate_th.exceptions import SurrogateError

logger = logging.getLogger(__name__)


def uniform_fuel_source(driver: SurrogateHeatDriver, power_density: float) -> np.ndarray:
    """Source field with ``power_density`` in every fuel ring and none in the clad."""
    source = np.zeros(driver.fields.shape)
    source[:, :, :driver.geometry.n_fuel_rings] = power_density
    return source


def cmd_run(args) -> int:
    config = load_config(args.config)
    with SurrogateHeatDriver(config) as driver:
        driver.set_heat_source(uniform_fuel_source(driver, args.power_density))
        driver.solve_step()
        filename = driver.write_step(args.timestep, args.iteration)

        state = driver.get_state_dict()
        print(f"Columns solved:   {driver.n_pins * driver.n_axial}")
        print(f"Min temperature:  {state['min_temperature']:.2f} K")
        print(f"Max temperature:  {state['max_temperature']:.2f} K")
        if filename:
            print(f"Snapshot:         {filename}")
    return 0


def cmd_info(args) -> int:
    config = load_config(args.config)
    with SurrogateHeatDriver(config) as driver:
        geom = driver.geometry
        print(f"Pins:     {geom.n_pins_x} x {geom.n_pins_y} (pitch {geom.pin_pitch})")
        print(f"Rings:    {geom.n_fuel_rings} fuel + {geom.n_clad_rings} clad")
        print(f"Axial:    {driver.n_axial} levels")
        print(f"Channels: {geom.n_channels} (total flow area {geom.total_flow_area:.5g})")
        print()
        print(f"{'Channel':<8} {'Row':<4} {'Col':<4} {'Kind':<9} {'Area':<12} {'Flow [kg/s]':<12}")
        for row in range(geom.n_pins_y + 1):
            for col in range(geom.n_pins_x + 1):
                i = geom.channel_index(row, col)
                kind = geom.channel_kind(row, col).name.lower()
                print(f"{i:<8} {row:<4} {col:<4} {kind:<9} "
                      f"{geom.channel_areas[i]:<12.5g} {geom.channel_flowrates[i]:<12.5g}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="surrogate-th",
        description="Surrogate thermal-hydraulics model for pin bundles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Solve the bundle for a uniform fuel source")
    run_parser.add_argument("config", help="YAML configuration file")
    run_parser.add_argument("--power-density", type=float, required=True,
                            help="Fuel power density in MW/m^3")
    run_parser.add_argument("--timestep", type=int, default=-1, help="Timestep for snapshot naming")
    run_parser.add_argument("--iteration", type=int, default=-1,
                            help="Picard iteration; negative means final (default: -1)")
    run_parser.set_defaults(func=cmd_run)

    info_parser = subparsers.add_parser("info", help="Show bundle geometry")
    info_parser.add_argument("config", help="YAML configuration file")
    info_parser.set_defaults(func=cmd_info)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        return args.func(args)
    except SurrogateError as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
