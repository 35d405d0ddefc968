#!/usr/bin/env python3
"""
Body catalog validation and hierarchy grouping.

A catalog is an ordered sequence of Body records. Two relations are defined
over the body names and validated here:

- the satellite tree: each non-root body has exactly one primary parent
  (elements.parent_name); exactly one body has none and is the root;
- the influence relation: each body lists the bodies whose gravity acts on it
  (influenced_by). Every influencer must already be placed when the body is
  reached in a parents-before-children walk of the tree. This rules out
  self-references and cycles.

Any violation raises CatalogError before a state tree is built.
"""
import logging
import math
from collections import defaultdict
from typing import Dict, Iterable, List, Sequence, Set

from .data_models import Body
from .elements import validate_elements
from .errors import CatalogError

log = logging.getLogger(__name__)


def validate_body(body: Body) -> None:
    """Check the intrinsic fields of a single body."""
    if not body.name:
        raise CatalogError("body name must be a non-empty string")
    if not (math.isfinite(body.mass) and body.mass > 0.0):
        raise CatalogError(f"{body.name}: mass must be positive, got {body.mass}")
    if not (math.isfinite(body.radius) and body.radius >= 0.0):
        raise CatalogError(f"{body.name}: radius must be non-negative, got {body.radius}")
    if body.name in body.influenced_by:
        raise CatalogError(f"{body.name}: body cannot be influenced by itself")
    if len(set(body.influenced_by)) != len(body.influenced_by):
        raise CatalogError(f"{body.name}: duplicate entries in influenced_by {list(body.influenced_by)}")
    if body.is_root:
        if body.influenced_by:
            raise CatalogError(f"{body.name}: root body cannot have influencers")
        return
    if body.parent_name == body.name:
        raise CatalogError(f"{body.name}: body cannot be its own parent")
    if not body.influenced_by:
        raise CatalogError(f"{body.name}: non-root body needs at least one influencer")
    try:
        validate_elements(body.elements)
    except ValueError as e:
        raise CatalogError(f"{body.name}: {e}") from e


def group_satellites(catalog: Iterable[Body]) -> Dict[str, List[Body]]:
    """Map each parent name to its satellites, preserving catalog order."""
    satellites: Dict[str, List[Body]] = defaultdict(list)
    for body in catalog:
        if body.parent_name is not None:
            satellites[body.parent_name].append(body)
    return dict(satellites)


def validate_catalog(catalog: Sequence[Body]) -> Body:
    """
    Validate a catalog and return its root body.

    Raises:
        CatalogError: on any malformed body, duplicate or unknown name, missing
        or multiple roots, bodies unreachable from the root, or an influencer
        that would not be placed before the body it acts on.
    """
    if not catalog:
        raise CatalogError("catalog is empty")

    by_name: Dict[str, Body] = {}
    for body in catalog:
        validate_body(body)
        if body.name in by_name:
            raise CatalogError(f"duplicate body name {body.name!r}")
        by_name[body.name] = body

    roots = [b for b in catalog if b.is_root]
    if len(roots) != 1:
        raise CatalogError(f"catalog needs exactly one root body, found {[b.name for b in roots]}")
    root = roots[0]

    for body in catalog:
        if body.parent_name is not None and body.parent_name not in by_name:
            raise CatalogError(f"{body.name}: unknown parent {body.parent_name!r}")
        for name in body.influenced_by:
            if name not in by_name:
                raise CatalogError(f"{body.name}: unknown influencer {name!r}")

    # Walk parents before children; each influencer must already be placed.
    satellites = group_satellites(catalog)
    placed: Set[str] = set()
    stack = [root]
    while stack:
        body = stack.pop()
        for name in body.influenced_by:
            if name not in placed:
                raise CatalogError(
                    f"{body.name}: influencer {name!r} is not placed before this body "
                    f"(cyclic or out-of-order influence)"
                )
        placed.add(body.name)
        stack.extend(reversed(satellites.get(body.name, [])))

    unreachable = [b.name for b in catalog if b.name not in placed]
    if unreachable:
        raise CatalogError(f"bodies not connected to root {root.name!r}: {unreachable}")

    log.debug("validated catalog of %d bodies rooted at %s", len(catalog), root.name)
    return root
