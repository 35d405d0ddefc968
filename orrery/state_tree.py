#!/usr/bin/env python3
"""
State tree construction and structural edits.

Responsibilities
- Place every catalog body in the global inertial frame from its orbital elements,
  walking the satellite hierarchy parents-first (build_initial_state / build_state_tree).
- Insert or detach a single body in a running system without touching other nodes
  (add_body / remove_body).
- Lookup, traversal and snapshot helpers for hosts that read the tree.

Placement is two-body: a body is positioned against its primary parent only, using
mu = G * parent mass. Additional influencers only affect later time evolution.

Structural edits return new trees; the input tree is never mutated.
"""
import copy
import logging
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

from .catalog import group_satellites, validate_body, validate_catalog
from .constants import G
from .data_models import Body, BodyState
from .elements import to_cartesian
from .errors import CatalogError, NoSuchBodyError, StructureError
from .vector_utils import ZERO, vec_add, vec_is_finite

log = logging.getLogger(__name__)


def build_initial_state(parent_state: Optional[BodyState], body: Body,
                        satellites_by_parent: Optional[Mapping[str, Sequence[Body]]] = None) -> BodyState:
    """
    Build the state of `body` and, recursively, of its satellites.

    Args:
        parent_state: Absolute state of the primary parent, or None for the root.
        body: Catalog entry to place.
        satellites_by_parent: Parent name -> satellites, as produced by group_satellites.

    Returns:
        BodyState for `body` with its satellite subtree populated.
    """
    if parent_state is None:
        position, velocity = ZERO, ZERO
    else:
        relative = to_cartesian(body.elements, G * parent_state.mass)
        position = vec_add(parent_state.position, relative.position)
        velocity = vec_add(parent_state.velocity, relative.velocity)

    state = BodyState(
        name=body.name,
        mass=body.mass,
        position=position,
        velocity=velocity,
        influenced_by=tuple(body.influenced_by),
    )
    for satellite in (satellites_by_parent or {}).get(body.name, ()):
        state.satellites.append(build_initial_state(state, satellite, satellites_by_parent))
    return state


def build_state_tree(catalog: Sequence[Body]) -> BodyState:
    """
    Validate a catalog and build its full state tree.

    Raises:
        CatalogError: if the catalog is malformed.
    """
    root = validate_catalog(catalog)
    tree = build_initial_state(None, root, group_satellites(catalog))
    log.info("built state tree for %d bodies rooted at %s", len(catalog), root.name)
    return tree


def iter_states(tree: BodyState) -> Iterator[BodyState]:
    """Yield every node in parents-before-children order."""
    stack = [tree]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.satellites))


def find_state(tree: BodyState, name: str) -> BodyState:
    """Return the node called `name`; raise NoSuchBodyError if absent."""
    for node in iter_states(tree):
        if node.name == name:
            return node
    raise NoSuchBodyError(name)


def body_names(tree: BodyState) -> List[str]:
    return [node.name for node in iter_states(tree)]


def states_by_name(tree: BodyState) -> Dict[str, BodyState]:
    return {node.name: node for node in iter_states(tree)}


def snapshot(tree: BodyState) -> BodyState:
    """Deep copy of the tree for read-only consumers."""
    return copy.deepcopy(tree)


def is_finite(tree: BodyState) -> bool:
    """False if any node has a non-finite position or velocity."""
    return all(vec_is_finite(n.position) and vec_is_finite(n.velocity) for n in iter_states(tree))


def _parent_of(tree: BodyState, name: str) -> Optional[str]:
    for node in iter_states(tree):
        if any(child.name == name for child in node.satellites):
            return node.name
    return None


def _copy_path(node: BodyState, target: str, edit) -> Optional[BodyState]:
    """
    Return a copy of `node` where the subtree holding `target` has been passed through
    `edit(parent_copy)`. Nodes off the path are shared, not copied. None if `target`
    is not below `node`.
    """
    if node.name == target:
        clone = copy.copy(node)
        clone.satellites = list(node.satellites)
        edit(clone)
        return clone
    for i, child in enumerate(node.satellites):
        replaced = _copy_path(child, target, edit)
        if replaced is not None:
            clone = copy.copy(node)
            clone.satellites = list(node.satellites)
            clone.satellites[i] = replaced
            return clone
    return None


def add_body(tree: BodyState, body: Body) -> BodyState:
    """
    Insert a single body as a satellite of its (existing) primary parent.

    The body is placed against the parent's current state. Nodes outside the
    parent's path are left untouched.

    Raises:
        NoSuchBodyError: if body.elements.parent_name is not in the tree.
        CatalogError: if the body is malformed, is a root, duplicates a name in the
            tree, or lists an influencer that is not in the tree or would come after
            it in a parents-first walk.
    """
    validate_body(body)
    if body.is_root:
        raise CatalogError(f"{body.name}: cannot add a second root body")
    existing = states_by_name(tree)
    if body.name in existing:
        raise CatalogError(f"duplicate body name {body.name!r}")
    parent = existing.get(body.parent_name)
    if parent is None:
        raise NoSuchBodyError(body.parent_name)
    missing = [name for name in body.influenced_by if name not in existing]
    if missing:
        raise CatalogError(f"{body.name}: unknown influencers {missing}")

    # The new body becomes the parent's last satellite, so in a parents-first walk it
    # comes right after the parent's current subtree.
    order = body_names(tree)
    placed = set(order[:order.index(parent.name) + len(body_names(parent))])
    for name in body.influenced_by:
        if name not in placed:
            raise CatalogError(
                f"{body.name}: influencer {name!r} is not placed before this body "
                f"(cyclic or out-of-order influence)"
            )

    new_state = build_initial_state(parent, body)
    new_tree = _copy_path(tree, parent.name, lambda p: p.satellites.append(new_state))
    log.info("added %s as satellite of %s", body.name, parent.name)
    return new_tree


def remove_body(tree: BodyState, name: str) -> BodyState:
    """
    Detach the named body and its satellites.

    Bodies whose influenced_by still names a removed body keep that entry; the
    integrator skips influencers that are no longer in the tree.

    Raises:
        NoSuchBodyError: if `name` is not in the tree.
        StructureError: if `name` is the root.
    """
    if tree.name == name:
        raise StructureError(f"cannot remove root body {name!r}")
    parent_name = _parent_of(tree, name)
    if parent_name is None:
        raise NoSuchBodyError(name)

    def detach(parent: BodyState) -> None:
        parent.satellites = [s for s in parent.satellites if s.name != name]

    new_tree = _copy_path(tree, parent_name, detach)
    log.info("removed %s from %s", name, parent_name)
    return new_tree
