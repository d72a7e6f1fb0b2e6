#!/usr/bin/env python3
# relief-smart-dispatch/main.py
"""
Command-Line Interface for the Relief Smart Dispatch optimizer.

Builds a scenario (base, zones, fleet), runs the optimizer once and prints
each drone's route followed by the fleet summary.

Usage:
    python main.py                                   # Default preset, random zones
    python main.py --preset lahore --zones 25 --seed 7
    python main.py --base 33.68 73.04 --zones-file zones.csv --drones-file drones.csv
    python main.py --drones 5 --battery 80 --payload 120

Exit Codes:
    0: Success
    1: Input error (bad arguments, missing or invalid files)
    2: Optimization error
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

# Ensure the package is importable when run from a checkout
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from relief_dispatch import config
from relief_dispatch.exceptions import DispatchError
from relief_dispatch.optimizer import DeliveryOptimizer
from relief_dispatch.results import OptimizationResult
from relief_dispatch.scenario import (
    generate_random_zones,
    get_preset,
    load_drones_csv,
    load_zones_csv,
)


def print_header() -> None:
    """Print the CLI header."""
    print("\n" + "=" * 60)
    print("  RELIEF SMART DISPATCH - Drone Supply Routing")
    print("  Priority Nearest Neighbor + 2-Opt")
    print("=" * 60 + "\n")


def print_routes(result: OptimizationResult) -> None:
    """Print one block per drone."""
    for drone in result.drones:
        print(f"Drone {drone.drone_id}")
        print(f"  Distance:       {drone.total_distance_km:.2f} km")
        print(f"  Battery Usage:  {drone.battery_usage_pct:.1f}%")
        print(f"  Delivered:      {drone.total_delivered} units")
        print(f"  Zones Visited:  {drone.zones_visited}")
        print(f"  Route:          {drone.route_label()}")
        print()


def print_summary(result: OptimizationResult) -> None:
    """Print the fleet summary table."""
    print("=" * 60)
    print("  SUMMARY")
    print("=" * 60 + "\n")

    for metric, value in result.to_dict().items():
        print(f"| {metric:<25} | {str(value):^20} |")

    if result.unserved_zone_ids:
        ids = ", ".join(str(z) for z in result.unserved_zone_ids)
        print(f"\n  Unserved zones: {ids}")

    print("\n" + "=" * 60 + "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Relief Smart Dispatch CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                  # Default preset, random zones
  python main.py --preset karachi --zones 20      # Another city
  python main.py --zones-file zones.csv           # Zones from CSV
  python main.py --list-presets                   # Show available presets
        """
    )

    parser.add_argument(
        "--preset", "-p",
        type=str,
        default=config.DEFAULT_PRESET,
        help=f"Base location preset (default: {config.DEFAULT_PRESET}). "
             f"Options: {', '.join(config.LOCATION_PRESETS)}"
    )
    parser.add_argument(
        "--base",
        type=float,
        nargs=2,
        metavar=("LAT", "LNG"),
        help="Explicit base coordinates (overrides --preset)"
    )
    parser.add_argument(
        "--zones", "-z",
        type=int,
        default=config.DEFAULT_ZONE_COUNT,
        help=f"Number of random zones (default: {config.DEFAULT_ZONE_COUNT})"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible zones"
    )
    parser.add_argument(
        "--zones-file",
        type=str,
        help="CSV with columns priority,demand,lat,lng (replaces random zones)"
    )
    parser.add_argument(
        "--drones", "-d",
        type=int,
        default=config.DEFAULT_DRONE_COUNT,
        help=f"Number of identical drones (default: {config.DEFAULT_DRONE_COUNT})"
    )
    parser.add_argument(
        "--battery", "-b",
        type=float,
        default=config.DEFAULT_BATTERY_RANGE_KM,
        help=f"Battery range per drone in km (default: {config.DEFAULT_BATTERY_RANGE_KM})"
    )
    parser.add_argument(
        "--payload",
        type=int,
        default=config.DEFAULT_PAYLOAD_CAPACITY,
        help=f"Payload capacity per drone in units (default: {config.DEFAULT_PAYLOAD_CAPACITY})"
    )
    parser.add_argument(
        "--drones-file",
        type=str,
        help="CSV with columns battery_range_km,payload_capacity (replaces --drones)"
    )
    parser.add_argument(
        "--list-presets",
        action="store_true",
        help="List available location presets and exit"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show optimizer log output"
    )
    return parser


def build_scenario(args: argparse.Namespace) -> DeliveryOptimizer:
    """
    Build the optimizer input from parsed arguments.

    Raises:
        DispatchError: Invalid preset, coordinates, zones or drones
        FileNotFoundError: Missing CSV file
    """
    optimizer = DeliveryOptimizer()

    if args.base:
        optimizer.set_base(args.base[0], args.base[1])
    else:
        preset = get_preset(args.preset)
        optimizer.set_base(preset["lat"], preset["lng"])
        print(f"Base: {preset['name']} ({preset['lat']:.4f}, {preset['lng']:.4f})")

    if args.zones_file:
        zones = load_zones_csv(optimizer, args.zones_file)
        print(f"Loaded {len(zones)} zones from {args.zones_file}")
    else:
        zones = generate_random_zones(optimizer, args.zones, seed=args.seed)
        print(f"Generated {len(zones)} random zones")

    if args.drones_file:
        drones = load_drones_csv(optimizer, args.drones_file)
        print(f"Loaded {len(drones)} drones from {args.drones_file}")
    else:
        drones = optimizer.replace_fleet(args.drones, args.battery, args.payload)
        print(f"Fleet: {len(drones)} drones, {args.battery:.1f} km range, {args.payload} units payload")

    return optimizer


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_presets:
        print("\nAvailable Presets:")
        print("-" * 50)
        for key, info in config.LOCATION_PRESETS.items():
            print(f"  {key:12} ({info['lat']:.4f}, {info['lng']:.4f}) - {info['name']}")
        return 0

    print_header()

    try:
        optimizer = build_scenario(args)
    except (DispatchError, FileNotFoundError) as e:
        print(f"ERROR: {e}")
        return 1

    try:
        result = optimizer.optimize()
    except DispatchError as e:
        print(f"ERROR: Optimization failed: {e}")
        return 2

    print()
    print_routes(result)
    print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
