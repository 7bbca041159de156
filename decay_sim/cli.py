"""
Command-line interface for the decay simulator.
"""

import argparse
import dataclasses
import logging
import sys

from .config import SimulationConfig, load_config
from .simulator import DecaySimulator


def progress_callback(time: float, unstable_count: int):
    """Print simulation progress."""
    print(f"Time: {time:.2f} fm, Resonances left: {unstable_count}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resonance decay transport in a box"
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Configuration file (JSON)"
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed (default: 42)"
    )

    parser.add_argument(
        "--dt",
        type=float,
        help="Time step in fm (default: 0.1)"
    )

    parser.add_argument(
        "--end-time",
        type=float,
        help="End of the simulation in fm (default: 20)"
    )

    parser.add_argument(
        "--box-length",
        type=float,
        help="Edge length of the initial box in fm (default: 10)"
    )

    parser.add_argument(
        "--cell-length",
        type=float,
        help="Edge length of the search cells in fm (default: 2)"
    )

    parser.add_argument(
        "--log",
        dest="loglevel",
        type=str,
        help="Logging level (DEBUG/INFO/WARNING)"
    )

    return parser


def resolve_config(args: argparse.Namespace) -> SimulationConfig:
    """Combine the configuration file (if any) with command-line overrides."""
    config = load_config(args.config) if args.config else SimulationConfig()
    overrides = {
        name: getattr(args, name)
        for name in ("seed", "dt", "end_time", "box_length", "cell_length", "loglevel")
        if getattr(args, name) is not None
    }
    return dataclasses.replace(config, **overrides)


def main(argv=None):
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, config.loglevel.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    print("=" * 60)
    print("Resonance Decay Simulator")
    print("=" * 60)
    print(f"Particles: {config.particles}")
    print(f"Box: {config.box_length} fm, cells: {config.cell_length} fm")
    print(f"Time step: {config.dt} fm, end time: {config.end_time} fm")
    print(f"Seed: {config.seed}")
    print("=" * 60)

    try:
        simulator = DecaySimulator.from_config(config)
    except KeyError as e:
        print(f"Error: {e.args[0]}")
        sys.exit(1)

    print("\nRunning simulation...")
    simulator.run(progress_callback=progress_callback)

    stats = simulator.get_statistics()
    print("\nSimulation complete!")
    print(f"Decays during the run: {stats['decays']}")
    print(f"Forced final decays: {stats['final_decays']}")
    print(f"Stale actions discarded: {stats['actions_discarded']}")
    print("\nFinal state:")
    for name, count in sorted(stats["species"].items()):
        print(f"  {name}: {count}")


if __name__ == "__main__":
    main()
