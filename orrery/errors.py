#!/usr/bin/env python3
"""
Exceptions raised by the orrery engine.

- CatalogError: the body catalog (or a body handed to add_body) is malformed.
  Raised before any state is produced.
- StructureError: a structural operation on the state tree cannot be applied.
- NoSuchBodyError: a structural operation named a body that is not in the tree.

Numerical degeneracy is not wrapped: bodies at exactly zero separation let
ZeroDivisionError through, and near-coincident bodies end up with non-finite
positions and velocities.
"""


class OrreryError(Exception):
    """Base class for all engine errors."""


class CatalogError(OrreryError, ValueError):
    """Malformed catalog data."""


class StructureError(OrreryError):
    """Invalid add/remove operation on a state tree."""


class NoSuchBodyError(StructureError, LookupError):
    """The named body is not present in the state tree."""

    def __init__(self, name: str):
        super().__init__(f"No such body: {name!r}")
        self.name = name
