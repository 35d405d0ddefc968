#!/usr/bin/env python3
"""
Shared constants for the orrery engine (SI units unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""

# Physical constants
G = 6.6743e-11  # N m^2 kg^-2
AU = 1.496e11  # m
SOLAR_MASS = 1.9885e30  # kg
SOLAR_RADIUS = 6.957e8  # m
EARTH_MASS = 5.972168e24  # kg
EARTH_RADIUS = 6.371e6  # m

# Time units (seconds)
SECOND = 1.0
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
YEAR = 365.25 * DAY
MONTH = YEAR / 12

# Integrator controls
MAX_SAFE_DT = HOUR  # largest sub-step the semi-implicit Euler update is trusted with
DEFAULT_TICK_DT = DAY  # simulated seconds advanced per host tick
