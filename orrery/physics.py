#!/usr/bin/env python3
"""
Core Physics Engine for the orrery

Responsibilities
- Compute the gravitational acceleration on each body from its declared influence list.
- Advance the whole state tree with a semi-implicit (symplectic) Euler update.
- Subdivide large time steps into stable sub-steps.
- Provide small helpers for common orbital computations (circular velocity, orbital
  period, total energy).

Units and conventions
- World space positions are in meters [m].
- Velocities are in meters per second [m/s].
- Masses are in kilograms [kg].
- Time steps are in seconds [s].
- The gravitational constant G is expressed in SI: N m^2 kg^-2.

Update order
- Every sub-step first snapshots (position, mass) of every node.
- The tree is then walked top-down. A node's acceleration sums
      a = Σ_j -G * m_j * (r - r_j) / |r - r_j|^3
  over its influenced_by list. With the default Gauss-Seidel coupling, an influencer
  that is an ancestor of the node has already been updated in this sub-step and
  contributes its new position; any other influencer contributes its snapshot
  position. With Jacobi coupling every influencer contributes its snapshot position.
  Influencers that are no longer in the tree contribute nothing.
- Gauss-Seidel coupling shifts a satellite's attraction center ahead of its parent by
  roughly v_parent * dt (about 1e8 m for the Moon at one-hour sub-steps). Jacobi
  coupling has no such offset and makes the result independent of traversal order.
- Velocity is updated first and the new velocity moves the position:
      v' = v + a dt
      r' = r + v' dt

Numerical notes
- Semi-implicit Euler keeps energy error bounded for orbits, but only while dt is small
  compared with the shortest orbital period. Requested steps are split into
  n = ceil(|dt| / max_safe_dt) equal sub-steps, with the same n for every body.
- Bodies with very short periods may still drift at the default max_safe_dt, and
  long-period bodies pay for sub-steps they do not need.
- Two bodies at exactly zero separation raise ZeroDivisionError; near-coincident bodies
  yield non-finite values. Neither case is softened or clamped.

Threading
- This module is pure compute. advance returns a new tree and never modifies its input,
  so an interrupted call cannot leave a half-stepped tree behind.
"""

import copy
import logging
import math
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Tuple

from .constants import G, MAX_SAFE_DT
from .data_models import BodyState
from .state_tree import iter_states
from .vector_utils import Vec3, ZERO, vec_add, vec_dot, vec_len, vec_scale, vec_sub

log = logging.getLogger(__name__)

# (position, mass) of a gravitational source
Source = Tuple[Vec3, float]


class Coupling(str, Enum):
    GAUSS_SEIDEL = "gauss-seidel"  # satellites see ancestors' positions from this sub-step
    JACOBI = "jacobi"  # every node sees the pre-step snapshot only


class GravitationalIntegrator:
    """
    Hierarchical gravity integrator with a global sub-step policy.

    The integrator walks the satellite tree parents-first and applies a
    semi-implicit Euler update to each node, using the node's influenced_by list
    (not its tree parent) as the set of gravitational sources.
    """

    def __init__(self, max_safe_dt: float = MAX_SAFE_DT, coupling: Coupling = Coupling.GAUSS_SEIDEL):
        """
        Initialize the integrator.

        Args:
            max_safe_dt: Largest sub-step in seconds (must be > 0)
            coupling: How satellites see ancestors updated earlier in the same sub-step
        """
        self.max_safe_dt = MAX_SAFE_DT
        self.set_max_safe_dt(max_safe_dt)
        self.coupling = Coupling(coupling)

    def set_max_safe_dt(self, max_safe_dt: float) -> None:
        max_safe_dt = float(max_safe_dt)
        if not (math.isfinite(max_safe_dt) and max_safe_dt > 0.0):
            raise ValueError(f"max_safe_dt must be positive, got {max_safe_dt}")
        self.max_safe_dt = max_safe_dt

    def substep_count(self, dt: float) -> int:
        """Number of equal sub-steps used to advance by dt."""
        return math.ceil(abs(dt) / self.max_safe_dt)

    @staticmethod
    def compute_acceleration(position: Vec3, sources: Iterable[Source]) -> Vec3:
        """
        Sum the inverse-square acceleration at `position` due to every source.

        Args:
            position: Position of the attracted body (meters).
            sources: (position, mass) pairs of the attracting bodies.

        Returns:
            Acceleration (m/s^2).
        """
        ax, ay, az = ZERO
        for source_position, mass in sources:
            dx, dy, dz = vec_sub(position, source_position)
            d = math.sqrt(dx * dx + dy * dy + dz * dz)
            k = -G * mass / (d * d * d)
            ax += k * dx
            ay += k * dy
            az += k * dz
        return (ax, ay, az)

    def step(self, tree: BodyState, dt: float) -> BodyState:
        """
        Perform one semi-implicit Euler step of size dt over the whole tree.

        Args:
            tree: Root of the state tree (not modified).
            dt: Step in seconds; callers keep |dt| <= max_safe_dt.

        Returns:
            New tree dt seconds later.
        """
        pre_step: Dict[str, Source] = {node.name: (node.position, node.mass) for node in iter_states(tree)}
        return self._step_node(tree, dt, pre_step, {})

    def _step_node(self, node: BodyState, dt: float,
                   pre_step: Mapping[str, Source], ancestors: Mapping[str, Source]) -> BodyState:
        sources: List[Source] = []
        for name in node.influenced_by:
            if name in ancestors:
                sources.append(ancestors[name])
            elif name in pre_step:
                sources.append(pre_step[name])

        acceleration = self.compute_acceleration(node.position, sources)
        velocity = vec_add(node.velocity, vec_scale(acceleration, dt))
        position = vec_add(node.position, vec_scale(velocity, dt))

        updated = BodyState(
            name=node.name,
            mass=node.mass,
            position=position,
            velocity=velocity,
            influenced_by=node.influenced_by,
        )
        if node.satellites:
            child_ancestors = ancestors
            if self.coupling is Coupling.GAUSS_SEIDEL:
                child_ancestors = dict(ancestors)
                child_ancestors[node.name] = (position, node.mass)
            updated.satellites = [
                self._step_node(child, dt, pre_step, child_ancestors) for child in node.satellites
            ]
        return updated

    def advance(self, tree: BodyState, dt: float) -> BodyState:
        """
        Advance the tree by dt seconds, split into ceil(|dt| / max_safe_dt) sub-steps.

        Negative dt integrates backwards with the same policy; dt == 0 returns an
        unchanged copy.

        Raises:
            ValueError: if dt is not finite.
        """
        dt = float(dt)
        if not math.isfinite(dt):
            raise ValueError(f"dt must be finite, got {dt}")
        n = self.substep_count(dt)
        if n == 0:
            return copy.deepcopy(tree)

        sub_dt = dt / n
        log.debug("advancing %s s in %d sub-steps of %s s", dt, n, sub_dt)
        state = tree
        for _ in range(n):
            state = self.step(state, sub_dt)
        return state


def advance(tree: BodyState, dt: float, max_safe_dt: float = MAX_SAFE_DT,
            coupling: Coupling = Coupling.GAUSS_SEIDEL) -> BodyState:
    """Advance `tree` by `dt` seconds; see GravitationalIntegrator.advance."""
    return GravitationalIntegrator(max_safe_dt, coupling).advance(tree, dt)


def circular_orbit_velocity(central_mass: float, orbital_radius: float) -> float:
    """Speed of a circular orbit of radius `orbital_radius` around `central_mass`, 0.0 if r <= 0."""
    if orbital_radius <= 0:
        return 0.0
    return math.sqrt(G * central_mass / orbital_radius)


def orbital_period(central_mass: float, semi_major_axis: float) -> float:
    """
    Kepler's third law: T = 2 * pi * sqrt(a^3 / (G * M)).

    Returns:
        Period in seconds, or 0.0 for non-positive inputs.
    """
    if semi_major_axis <= 0 or central_mass <= 0:
        return 0.0

    return 2.0 * math.pi * math.sqrt(semi_major_axis ** 3 / (G * central_mass))


def total_energy(tree: BodyState) -> float:
    """
    Kinetic plus pairwise potential energy of the bodies in the tree (J).

    Potential terms follow the influence lists: each (body, influencer) pair counts
    once even when the influence is mutual. Useful as a drift diagnostic.
    """
    nodes = {node.name: node for node in iter_states(tree)}
    kinetic = sum(0.5 * n.mass * vec_dot(n.velocity, n.velocity) for n in nodes.values())
    pairs = set()
    for node in nodes.values():
        for name in node.influenced_by:
            if name in nodes:
                pairs.add(frozenset((node.name, name)))
    potential = 0.0
    for pair in pairs:
        a, b = (nodes[name] for name in pair)
        potential -= G * a.mass * b.mass / vec_len(vec_sub(a.position, b.position))
    return kinetic + potential
