#!/usr/bin/env python3
"""
Host-side simulation controller.

The controller owns the handle to the current state tree and threads it through
the integrator on every tick; nothing in the engine keeps module-level state.
Hosts call tick() from their frame/timer loop; the play flag decides whether a tick
advances anything, never whether an advance runs to completion.

Consumers read the system through snapshot(), which returns a deep copy. Structural
changes go through add_body/remove_body, which rebuild the affected subtree.

All public methods are guarded by a re-entrant lock so a render thread and a UI
thread can share one controller.
"""
import dataclasses
import logging
import threading
from typing import List, Optional, Sequence, Set

from .constants import DEFAULT_TICK_DT, MAX_SAFE_DT
from .data_models import Body, BodyState
from .physics import Coupling, GravitationalIntegrator
from .state_tree import (
    add_body,
    body_names,
    build_state_tree,
    find_state,
    is_finite,
    remove_body,
    snapshot,
)

log = logging.getLogger(__name__)


def _prune_influencers(body: Body, removed: Set[str]) -> Body:
    if not any(name in removed for name in body.influenced_by):
        return body
    kept = tuple(name for name in body.influenced_by if name not in removed)
    return dataclasses.replace(body, influenced_by=kept or (body.parent_name,))


class SimulationController:
    """
    Current tree, simulated time and play state for one session.
    """

    def __init__(self, catalog: Sequence[Body], tick_dt: float = DEFAULT_TICK_DT,
                 max_safe_dt: float = MAX_SAFE_DT, playing: bool = True,
                 coupling: Coupling = Coupling.GAUSS_SEIDEL):
        self.lock = threading.RLock()
        self.integrator = GravitationalIntegrator(max_safe_dt, coupling)
        self.tick_dt = float(tick_dt)
        self.playing = playing
        self.time = 0.0  # simulated seconds since the catalog epoch
        self.catalog: List[Body] = list(catalog)
        self.state: BodyState = build_state_tree(self.catalog)

    def set_tick_dt(self, dt: float) -> None:
        with self.lock:
            self.tick_dt = float(dt)

    def set_max_safe_dt(self, max_safe_dt: float) -> None:
        with self.lock:
            self.integrator.set_max_safe_dt(max_safe_dt)

    def play(self) -> None:
        with self.lock:
            self.playing = True

    def pause(self) -> None:
        with self.lock:
            self.playing = False

    def toggle_play(self) -> bool:
        with self.lock:
            self.playing = not self.playing
            return self.playing

    def tick(self) -> bool:
        """
        Advance by tick_dt if playing.

        Returns:
            True if the state was advanced.
        """
        with self.lock:
            if not self.playing:
                return False
            self.step(self.tick_dt)
            return True

    def step(self, dt: float) -> None:
        """Advance by dt regardless of the play flag (single-step / scrubbing)."""
        with self.lock:
            new_state = self.integrator.advance(self.state, dt)
            if not is_finite(new_state):
                log.error("non-finite body state after advancing %s s at t=%s s", dt, self.time)
            self.state = new_state
            self.time += dt

    def reset(self, catalog: Optional[Sequence[Body]] = None) -> None:
        """Rebuild the tree from the catalog (optionally a new one) and zero the clock."""
        with self.lock:
            if catalog is not None:
                new_catalog = list(catalog)
            else:
                new_catalog = self.catalog
            self.state = build_state_tree(new_catalog)
            self.catalog = new_catalog
            self.time = 0.0
            log.info("simulation reset with %d bodies", len(self.catalog))

    def add_body(self, body: Body) -> None:
        with self.lock:
            self.state = add_body(self.state, body)
            self.catalog.append(body)

    def remove_body(self, name: str) -> None:
        """
        Remove a body and its satellites from the running system and the catalog.

        The running tree keeps every influenced_by list as is. The catalog copies of
        the remaining bodies drop the removed names so that reset() can rebuild; a
        body left without influencers falls back to its primary parent.
        """
        with self.lock:
            removed = set(body_names(find_state(self.state, name)))
            self.state = remove_body(self.state, name)
            self.catalog = [_prune_influencers(b, removed) for b in self.catalog if b.name not in removed]

    def get_body_state(self, name: str) -> BodyState:
        """Copy of one body's current state (with its satellites)."""
        with self.lock:
            return snapshot(find_state(self.state, name))

    def snapshot(self) -> BodyState:
        with self.lock:
            return snapshot(self.state)
