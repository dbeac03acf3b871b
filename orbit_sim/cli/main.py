"""CLI main entry point."""

import argparse
import sys

from orbit_sim.errors import OrbitSimError
from orbit_sim.loader import list_systems, load_system
from orbit_sim.physics.controller import SimulationController
from orbit_sim.physics.diagnostics import Diagnostics
from orbit_sim.physics.integrators import list_integrators
from orbit_sim.utils.config import Config, load_config


def print_header():
    print(f"{'Index':<8} {'Time':<12} {'K':<14} {'U':<14} {'E':<14} {'Lz':<14} {'dE/E0':<10}")
    print("-" * 90)


def print_row(index: int, row: dict, E0: float):
    dE = (row["E"] - E0) / abs(E0) * 100 if abs(E0) > 0 else 0.0
    print(
        f"{index:<8} {row['time']:<12.4g} {row['K']:<14.6g} {row['U']:<14.6g} "
        f"{row['E']:<14.6g} {row['Lz']:<14.6g} {dE:<10.4f}%"
    )


def build_config(args) -> Config:
    """Config file (if any) overridden by explicit command line flags."""
    config = load_config(args.config) if args.config else Config()
    return config.updated(
        system=args.system,
        dt=args.dt,
        speed=args.speed,
        integrator=args.integrator,
        G=args.G,
        min_separation=args.min_separation,
        history_capacity=args.capacity,
        verbose=True if args.verbose else None,
    )


def run_simulation(args, config: Config):
    """Run a headless simulation and print diagnostics."""
    system = load_system(config.system, G=config.G)
    controller = SimulationController.from_config(system, config)
    diagnostics = Diagnostics.for_integrator(controller.integrator)

    print(f"Running simulation: {config.system} with {system.n_bodies} bodies")
    print(
        f"Integrator: {controller.integrator.name}, dt: {config.dt:g}, speed: {controller.speed:g}, "
        f"history: {controller.history.capacity}"
    )

    initial = diagnostics.summary(controller.current_system)
    E0 = initial["E"]
    print_header()
    print_row(0, initial, E0)

    review_at = args.review_at
    rewind_step = max(1, args.steps // 2)
    for step in range(1, args.steps + 1):
        controller.tick()

        if review_at is not None and step == rewind_step:
            controller.enter_review()
            oldest, newest = controller.index_range
            if not oldest <= review_at <= newest:
                print(f"--review-at {review_at} is outside the retained window [{oldest}, {newest}]")
                sys.exit(1)
            controller.set_review_cursor(review_at)
            restored = controller.resume()
            print(f"Rewound to #{review_at} (t={restored.time:g}), continuing from there")
            # Only rewind once
            review_at = None

        if step % args.debug_every == 0:
            print_row(controller.current_index, diagnostics.summary(controller.current_system), E0)

    final = controller.current_system
    print(f"Finished at #{controller.current_index}, t={final.time:g}, "
          f"{len(controller.history)} snapshots retained")
    print("Simulation complete!")


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Orbit Simulator - gravitational N-body simulation")

    parser.add_argument('system', nargs='?', default=None,
                        help='System file (.json/.yaml) or prefab name (default: ours)')
    parser.add_argument('--config', type=str, default=None,
                        help='Config file (.json or .yaml)')

    # Simulation parameters
    parser.add_argument('--steps', type=int, default=1000,
                        help='Number of ticks to run')
    parser.add_argument('--dt', type=float, default=None,
                        help='Base time step in seconds (default: 3600)')
    parser.add_argument('--speed', type=float, default=None,
                        help='Initial speed multiplier')
    parser.add_argument('--integrator', type=str, default=None,
                        choices=list_integrators(),
                        help='Numerical integrator (default: symplectic_euler)')
    parser.add_argument('--G', type=float, default=None,
                        help='Gravitational constant (default: 6.674e-11)')
    parser.add_argument('--min-separation', type=float, default=None,
                        help='Separation floor for the force law in metres')
    parser.add_argument('--capacity', type=int, default=None,
                        help='Number of snapshots kept for review (default: 10000)')
    parser.add_argument('--debug-every', type=int, default=100,
                        help='Print diagnostics every N ticks')
    parser.add_argument('--review-at', type=int, default=None,
                        help='Halfway through, rewind to this history index and continue from it')
    parser.add_argument('--verbose', action='store_true',
                        help='Print review/resume status lines')

    # Info
    parser.add_argument('--list-prefabs', action='store_true',
                        help='List prefab systems and exit')
    parser.add_argument('--list-integrators', action='store_true',
                        help='List available integrators and exit')

    args = parser.parse_args(argv)

    if args.list_prefabs:
        print("Available prefab systems:")
        for name in list_systems():
            print(f"  - {name}")
        return

    if args.list_integrators:
        print("Available integrators:")
        for name in list_integrators():
            print(f"  - {name}")
        return

    if args.steps < 0 or args.debug_every < 1:
        parser.error("--steps must be non-negative and --debug-every at least 1")
    if args.review_at is not None and args.steps < 1:
        parser.error("--review-at needs at least one step")

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        print(f"Invalid configuration: {e}")
        sys.exit(1)

    try:
        run_simulation(args, config)
    except OrbitSimError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
