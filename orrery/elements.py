#!/usr/bin/env python3
"""
Keplerian element conversion.

Maps classical orbital elements plus the parent's gravitational parameter to a
Cartesian position/velocity relative to the parent:

    p = a (1 - e^2)
    r = p / (1 + e cos(nu))
    r_pf = (r cos(nu), r sin(nu), 0)
    v_pf = (-sqrt(mu/p) sin(nu), sqrt(mu/p) (e + cos(nu)), 0)

and rotates the perifocal vectors into the inertial frame with the standard
3-1-3 rotation R3(-Omega) R1(-i) R3(-omega). Only the first two columns of the
rotation are needed since the perifocal z-components are zero.

The result is relative to the parent's own position/velocity; callers add the
parent's absolute state.
"""
import math
from typing import Tuple

from .data_models import CartesianState, OrbitalElements
from .vector_utils import Vec3


def validate_elements(elements: OrbitalElements) -> None:
    """Raise ValueError for element sets that do not describe a closed orbit."""
    e = elements.eccentricity
    if not (math.isfinite(e) and 0.0 <= e < 1.0):
        raise ValueError(f"eccentricity must be in [0, 1), got {e}")
    a = elements.semi_major_axis
    if not (math.isfinite(a) and a > 0.0):
        raise ValueError(f"semi_major_axis must be positive, got {a}")
    for label in ("inclination", "longitude_ascending", "argument_of_periapsis", "true_anomaly"):
        if not math.isfinite(getattr(elements, label)):
            raise ValueError(f"{label} must be finite, got {getattr(elements, label)}")


def perifocal_basis(inclination: float, longitude_ascending: float,
                    argument_of_periapsis: float) -> Tuple[Vec3, Vec3]:
    """
    Return the inertial-frame directions of the perifocal x (periapsis) and y axes.

    Angles are in radians. These are the first two columns of the
    perifocal -> inertial rotation matrix.
    """
    cos_o, sin_o = math.cos(longitude_ascending), math.sin(longitude_ascending)
    cos_i, sin_i = math.cos(inclination), math.sin(inclination)
    cos_w, sin_w = math.cos(argument_of_periapsis), math.sin(argument_of_periapsis)

    p_hat = (
        cos_o * cos_w - sin_o * sin_w * cos_i,
        sin_o * cos_w + cos_o * sin_w * cos_i,
        sin_w * sin_i,
    )
    q_hat = (
        -cos_o * sin_w - sin_o * cos_w * cos_i,
        -sin_o * sin_w + cos_o * cos_w * cos_i,
        cos_w * sin_i,
    )
    return p_hat, q_hat


def to_cartesian(elements: OrbitalElements, mu: float) -> CartesianState:
    """
    Convert orbital elements to a parent-relative Cartesian state.

    Args:
        elements: Orbital elements, angles in degrees.
        mu: Gravitational parameter G * M of the parent in m^3/s^2 (> 0).

    Returns:
        CartesianState with position [m] and velocity [m/s] relative to the parent.

    Raises:
        ValueError: if mu <= 0 or the elements do not describe a closed orbit.
    """
    if not (math.isfinite(mu) and mu > 0.0):
        raise ValueError(f"gravitational parameter must be positive, got {mu}")
    validate_elements(elements)

    e = elements.eccentricity
    a = elements.semi_major_axis
    i = math.radians(elements.inclination)
    raan = math.radians(elements.longitude_ascending)
    argp = math.radians(elements.argument_of_periapsis)
    nu = math.radians(elements.true_anomaly)

    # Semi-latus rectum
    p = a * (1.0 - e * e)

    # Orbital plane position and velocity
    r = p / (1.0 + e * math.cos(nu))
    x_pf, y_pf = r * math.cos(nu), r * math.sin(nu)
    k = math.sqrt(mu / p)
    vx_pf, vy_pf = -k * math.sin(nu), k * (e + math.cos(nu))

    p_hat, q_hat = perifocal_basis(i, raan, argp)
    position = (
        p_hat[0] * x_pf + q_hat[0] * y_pf,
        p_hat[1] * x_pf + q_hat[1] * y_pf,
        p_hat[2] * x_pf + q_hat[2] * y_pf,
    )
    velocity = (
        p_hat[0] * vx_pf + q_hat[0] * vy_pf,
        p_hat[1] * vx_pf + q_hat[1] * vy_pf,
        p_hat[2] * vx_pf + q_hat[2] * vy_pf,
    )
    return CartesianState(position, velocity)
