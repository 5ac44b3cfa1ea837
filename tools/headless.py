"""
Headless Runner
===============

Runs the planet simulation without a window and prints the final state.

Usage:
    python -m tools.headless                          # 600 ticks, config defaults
    python -m tools.headless --ticks 100 --collision detect
    python -m tools.headless --scheme two_pass --gravity 5
    python -m tools.headless --max-planets 2          # Extra configured planets are dropped
"""

import argparse
import sys
import time

from config import planets as config
from planets import (
    CollisionPolicy,
    IntegrationScheme,
    Integrator,
    PlanetPool,
    UnresolvedCollisionError,
)
from planets.logging_config import setup_logging
from planets.physics import kinetic_energy, total_momentum
from planets.presets import initial_specs, populate


def format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    return f"{size / 1024:.1f} KB"


def print_state(pool: PlanetPool):
    print(f"  {'#':>3}  {'name':<29}  {'mass':>8}  {'x':>12}  {'y':>12}  {'vx':>10}  {'vy':>10}")
    for planet in pool:
        x, y = planet.position
        vx, vy = planet.velocity
        print(f"  {planet.index:>3}  {planet.name:<29}  {planet.mass:>8.2f}  "
              f"{x:>12.3f}  {y:>12.3f}  {vx:>10.4f}  {vy:>10.4f}")


def run(ticks: int, integrator: Integrator, max_planets: int, report_every: int = 0) -> int:
    """Simulate ``ticks`` ticks. Returns a process exit code."""
    with PlanetPool(max_planets) as pool:
        inserted = populate(pool, initial_specs())
        print(f"[Headless] {inserted} planets, {integrator}")
        print(f"[Headless] Pool footprint: {format_bytes(pool.footprint_bytes)} "
              f"({pool.used_bytes}/{pool.capacity_bytes} arena bytes in use)")

        degenerate_events = 0
        collision_events = 0
        start = time.time()

        for tick in range(1, ticks + 1):
            try:
                result = integrator.step(pool)
            except UnresolvedCollisionError as e:
                print(f"[Headless] Tick {tick}: {e}")
                print_state(pool)
                return 1

            degenerate_events += len(result.degenerate_pairs)
            collision_events += len(result.collisions)

            if report_every and tick % report_every == 0:
                px, py = total_momentum(pool)
                print(f"[Headless] Tick {tick:>6}  KE={kinetic_energy(pool):.3f}  "
                      f"p=({px:.4f}, {py:.4f})")

        elapsed = time.time() - start
        print(f"[Headless] {ticks} ticks in {elapsed:.3f}s")
        print(f"[Headless] Degenerate pairs skipped: {degenerate_events}  |  "
              f"Collisions: {collision_events}")
        print_state(pool)
    return 0


def main(argv=None) -> int:
    sim_cfg = config.SIMULATION
    parser = argparse.ArgumentParser(description="Run the planet simulation without a window")
    parser.add_argument("--ticks", "-n", type=int, default=600, help="Number of ticks to simulate")
    parser.add_argument("--max-planets", type=int, default=sim_cfg["max_planets"], help="Pool capacity")
    parser.add_argument("--gravity", "-g", type=float, default=sim_cfg["G"], help="Force constant")
    parser.add_argument("--collision", choices=[p.value for p in CollisionPolicy],
                        default=sim_cfg["collision"], help="Collision hook policy")
    parser.add_argument("--scheme", choices=[s.value for s in IntegrationScheme],
                        default=sim_cfg["scheme"], help="Integration scheme")
    parser.add_argument("--restitution", type=float, default=sim_cfg["restitution"],
                        help="Bounce factor for --collision resolve")
    parser.add_argument("--report-every", type=int, default=0, metavar="TICKS",
                        help="Print energy and momentum every N ticks")
    parser.add_argument("--log-level", default=config.LOGGING["level"], help="Logging level")
    args = parser.parse_args(argv)

    if args.ticks < 0:
        parser.error("--ticks must be non-negative")
    if args.max_planets < 0:
        parser.error("--max-planets must be non-negative")

    setup_logging(args.log_level, config.LOGGING["file"])

    integrator = Integrator(
        gravity=args.gravity,
        collision=args.collision,
        scheme=args.scheme,
        restitution=args.restitution,
    )
    return run(args.ticks, integrator, args.max_planets, args.report_every)


if __name__ == "__main__":
    sys.exit(main())
