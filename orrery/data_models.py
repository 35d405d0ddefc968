#!/usr/bin/env python3
"""
Data models for the orrery engine.

This module defines the catalog records (OrbitalElements, Body) and the
engine-owned state tree (BodyState).

Units and usage
- position is in meters [m], velocity in meters per second [m/s], radius in meters [m], mass in kg.
- angles in OrbitalElements are in degrees.
- Body and OrbitalElements are immutable catalog input; BodyState is owned by the engine
  and handed to consumers only as a snapshot.
- BodyState.satellites is the primary-parent tree used for update ordering;
  BodyState.influenced_by is the separate list of gravitational sources.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

from .vector_utils import Vec3, ZERO


class BodyType(str, Enum):
    STAR = "star"
    PLANET = "planet"
    MOON = "moon"
    DWARF_PLANET = "dwarf-planet"
    ASTEROID = "asteroid"
    COMET = "comet"
    TRANS_NEPTUNIAN_OBJECT = "trans-neptunian-object"
    SPACECRAFT = "spacecraft"


@dataclass(frozen=True)
class OrbitalElements:
    """
    Classical orbital elements of a body relative to its primary parent.

    Fields:
    - parent_name: Name of the body these elements are given with respect to; None for the root
    - eccentricity: Ratio in [0, 1); only closed orbits are supported
    - semi_major_axis: Meters
    - inclination, longitude_ascending, argument_of_periapsis: Degrees
    - true_anomaly: Degrees, value at the reference epoch used for initialization
    """
    parent_name: Optional[str] = None
    eccentricity: float = 0.0
    semi_major_axis: float = 0.0
    inclination: float = 0.0
    longitude_ascending: float = 0.0
    argument_of_periapsis: float = 0.0
    true_anomaly: float = 0.0


@dataclass(frozen=True)
class Body:
    """
    A catalog entry.

    Fields:
    - name: Unique identifier for the body
    - mass: Mass in kilograms
    - radius: Physical radius in meters
    - elements: Orbital elements relative to elements.parent_name
    - influenced_by: Ordered names of the bodies whose gravity acts on this one
    - body_type: Classification, informational only
    """
    name: str
    mass: float
    radius: float = 0.0
    elements: OrbitalElements = field(default_factory=OrbitalElements)
    influenced_by: Tuple[str, ...] = ()
    body_type: BodyType = BodyType.PLANET

    @property
    def parent_name(self) -> Optional[str]:
        return self.elements.parent_name

    @property
    def is_root(self) -> bool:
        return self.elements.parent_name is None


class CartesianState(NamedTuple):
    position: Vec3
    velocity: Vec3


@dataclass
class BodyState:
    """
    Engine-owned state of one body in the global inertial frame.

    The satellites list holds the bodies whose primary parent is this body.
    """
    name: str
    mass: float
    position: Vec3 = ZERO
    velocity: Vec3 = ZERO
    influenced_by: Tuple[str, ...] = ()
    satellites: List["BodyState"] = field(default_factory=list)

    @property
    def cartesian(self) -> CartesianState:
        return CartesianState(self.position, self.velocity)
