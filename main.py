#!/usr/bin/env python3
"""
Anomaly-Tracking Drone Fleet Simulator

Entry point for running the simulation.

Usage:
    python main.py                          # Run with visualization
    python main.py --no-viz                 # Run headless (faster)
    python main.py --scenario heavy_pollution --seed 7
    python main.py --no-viz --export-dir out
    python main.py --help                   # Show help
"""

from pathlib import Path
import argparse
import sys

import config
from config import SimulationParams
from export import export_measurements_to_csv, export_metrics_to_csv, generate_timestamp
from scenarios import Scenario, apply_scenario
from simulation import Simulation


def build_params(args: argparse.Namespace) -> SimulationParams:
    """Turn parsed CLI arguments into validated simulation parameters."""
    params = SimulationParams(
        grid_width=args.width,
        grid_height=args.height,
        num_drones=args.drones,
    )
    if args.scenario:
        params = apply_scenario(Scenario.from_name(args.scenario), params)
    return params


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Anomaly-Tracking Drone Fleet Simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                          Run with visualization
  python main.py --no-viz                 Run without visualization
  python main.py --drones 4 --time 600    Four drones for ten simulated minutes
  python main.py --scenario sparse_anomalies --seed 1
        """
    )

    parser.add_argument(
        '--no-viz', action='store_true',
        help='Run without matplotlib visualization'
    )
    parser.add_argument(
        '--drones', type=int, default=config.NUM_DRONES,
        help=f'Number of drones (default: {config.NUM_DRONES})'
    )
    parser.add_argument(
        '--width', type=int, default=config.GRID_WIDTH,
        help=f'Grid width in cells (default: {config.GRID_WIDTH})'
    )
    parser.add_argument(
        '--height', type=int, default=config.GRID_HEIGHT,
        help=f'Grid height in cells (default: {config.GRID_HEIGHT})'
    )
    parser.add_argument(
        '--time', type=float, default=300.0,
        help='Maximum simulation time in seconds (default: 300)'
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed for reproducible runs'
    )
    parser.add_argument(
        '--scenario', type=str, default=None,
        help='Anomaly preset: ' + ', '.join(s.name.lower() for s in Scenario)
    )
    parser.add_argument(
        '--fast', action='store_true',
        help='Animate as fast as possible instead of one tick per tick duration'
    )
    parser.add_argument(
        '--verbose', action='store_true',
        help='Print simulation events as they happen'
    )
    parser.add_argument(
        '--export-dir', type=str, default=None,
        help='Write metrics and measurements CSV files to this directory'
    )

    args = parser.parse_args(argv)

    try:
        params = build_params(args)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    # Print configuration
    print("=" * 50)
    print("DRONE FLEET - ANOMALY TRACKING")
    print("=" * 50)
    print(f"Drones: {params.num_drones}")
    print(f"Grid: {params.grid_width} x {params.grid_height} cells")
    print(f"Scenario: {args.scenario or 'default'}")
    print(f"Spawn/decay/diffusion: {params.spawn_probability}/"
          f"{params.decay_rate}/{params.diffusion_factor}")
    print(f"Max simulation time: {args.time}s")
    print("=" * 50)

    sim = Simulation(params=params, seed=args.seed, verbose=args.verbose)

    try:
        if args.no_viz:
            sim.run(max_time=args.time)
        else:
            from visualization import SimulationView
            SimulationView(sim).run(max_time=args.time, realtime=not args.fast)
        sim.print_final_stats()
    except KeyboardInterrupt:
        print("\n\nSimulation interrupted by user")
        sys.exit(0)

    if args.export_dir:
        out_dir = Path(args.export_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        stamp = generate_timestamp()
        metrics_path = out_dir / f"metrics_{stamp}.csv"
        measurements_path = out_dir / f"measurements_{stamp}.csv"
        n_metrics = export_metrics_to_csv(sim.metrics.history, metrics_path)
        n_meas = export_measurements_to_csv(sim.drones, measurements_path)
        print(f"Exported {n_metrics} snapshots to {metrics_path}")
        print(f"Exported {n_meas} measurements to {measurements_path}")


if __name__ == '__main__':
    main()
