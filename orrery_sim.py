#!/usr/bin/env python3
"""
Orrery headless driver.

What this module does
- Loads a body catalog (the built-in Solar System or a JSON file).
- Builds the initial state tree and drives a SimulationController tick by tick for
  the requested simulated duration, the way an interactive host's frame loop would.
- Prints each requested body's type, position, distance from its primary parent, speed
  and speed as a fraction of the circular orbit speed around that parent, plus the
  relative energy drift of the run.

Units and conventions
- SI units throughout: meters [m], kilograms [kg], seconds [s].
- Positions are in the single inertial frame centered on the catalog root.

Running
1) Install: `pip install -e .`
2) Run: `orrery-sim --duration 31557600 --tick 86400 --body Earth --body Luna`
"""

import argparse
import logging
import sys
from typing import List, Optional

from orrery.catalog_loader import list_catalogs, load_builtin_catalog, load_catalog
from orrery.constants import DAY, DEFAULT_TICK_DT, MAX_SAFE_DT, YEAR
from orrery.errors import OrreryError
from orrery.physics import Coupling, circular_orbit_velocity, total_energy
from orrery.simulation import SimulationController
from orrery.state_tree import iter_states
from orrery.utils import format_distance, format_duration, pluralize
from orrery.vector_utils import vec_len, vec_sub

log = logging.getLogger("orrery_sim")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Advance a body catalog through time and report positions.")
    ap.add_argument("--catalog", help="Path to a catalog JSON file (default: built-in Solar System).")
    ap.add_argument("--list-catalogs", action="store_true", help="List built-in catalogs and exit.")
    ap.add_argument("--duration", type=float, default=YEAR, help="Simulated seconds to run (default: 1 year).")
    ap.add_argument("--tick", type=float, default=DEFAULT_TICK_DT,
                    help="Simulated seconds per host tick (default: 1 day).")
    ap.add_argument("--max-safe-dt", type=float, default=MAX_SAFE_DT,
                    help="Largest integrator sub-step in seconds (default: 1 hour).")
    ap.add_argument("--coupling", choices=[c.value for c in Coupling], default=Coupling.GAUSS_SEIDEL.value,
                    help="How satellites see parents updated in the same sub-step (default: gauss-seidel).")
    ap.add_argument("--body", action="append", default=[],
                    help="Body to report; repeat for several (default: all).")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return ap.parse_args(argv)


def report(sim: SimulationController, names: List[str]) -> List[str]:
    """
    Format one line per requested body from a snapshot of the controller.

    Satellites also show their speed relative to the parent as a fraction of the
    circular orbit speed at the current separation (1.00 for a circular orbit).
    """
    state = sim.snapshot()
    kinds = {body.name: body.body_type.value for body in sim.catalog}
    lines = []
    parents = {}
    for node in iter_states(state):
        for child in node.satellites:
            parents[child.name] = node
    for node in iter_states(state):
        if names and node.name not in names:
            continue
        position, velocity = node.cartesian
        x, y, z = position
        parent = parents.get(node.name)
        if parent is not None:
            r = vec_len(vec_sub(position, parent.position))
            where = f"{format_distance(r)} from {parent.name}"
            v_circ = circular_orbit_velocity(parent.mass, r)
            v_rel = vec_len(vec_sub(velocity, parent.velocity))
            ratio = f"v/v_circ {v_rel / v_circ:.2f}" if v_circ > 0 else ""
        else:
            where = "root"
            ratio = ""
        speed = vec_len(velocity)
        lines.append(
            f"{node.name:<10} {kinds.get(node.name, ''):<22} ({x: .4e}, {y: .4e}, {z: .4e}) m  "
            f"{where:<28} {speed:,.1f} m/s  {ratio}".rstrip()
        )
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_catalogs:
        for file_name, display_name in list_catalogs():
            print(f"{file_name}\t{display_name}")
        return 0

    if args.tick <= 0 or args.duration < 0:
        log.error("--tick must be positive and --duration non-negative")
        return 2

    try:
        if args.catalog:
            catalog, _ = load_catalog(args.catalog)
        else:
            catalog = load_builtin_catalog()
        sim = SimulationController(catalog, tick_dt=args.tick, max_safe_dt=args.max_safe_dt,
                                   coupling=Coupling(args.coupling))
    except (OrreryError, ValueError) as e:
        log.error("%s", e)
        return 1

    known = {node.name for node in iter_states(sim.state)}
    unknown = [name for name in args.body if name not in known]
    if unknown:
        log.error("no such body: %s", ", ".join(unknown))
        return 1

    energy_start = total_energy(sim.state)
    ticks = 0
    while sim.time + sim.tick_dt <= args.duration:
        sim.tick()
        ticks += 1
        if ticks % max(1, int(30 * DAY // sim.tick_dt)) == 0:
            log.debug("t = %s", format_duration(sim.time))
    remainder = args.duration - sim.time
    if remainder > 0:
        sim.step(remainder)
    energy_end = total_energy(sim.state)

    print(f"t = {format_duration(sim.time)} after {pluralize(ticks, 'tick')}")
    for line in report(sim, args.body):
        print(line)
    if energy_start != 0:
        print(f"relative energy drift: {(energy_end - energy_start) / abs(energy_start):.3e}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
