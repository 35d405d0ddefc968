#!/usr/bin/env python3
"""
General utilities for the orrery: human-readable time and distance units.
"""
from typing import Tuple

from .constants import AU, DAY, HOUR, MINUTE, MONTH, WEEK, YEAR


def human_time_units(t: float, include_week_and_month: bool = False) -> Tuple[float, str]:
    """Express a duration in seconds in the largest unit below its magnitude."""
    t_abs = abs(t)
    if t_abs < MINUTE:
        return t, "second"
    if t_abs < HOUR:
        return t / MINUTE, "minute"
    if t_abs < DAY:
        return t / HOUR, "hour"
    if t_abs < (WEEK if include_week_and_month else YEAR):
        return t / DAY, "day"
    if include_week_and_month and t_abs < MONTH:
        return t / WEEK, "week"
    if include_week_and_month and t_abs < YEAR:
        return t / MONTH, "month"
    return t / YEAR, "year"


def human_distance_units(d: float) -> Tuple[float, str]:
    if d < 1_000:
        return d, "m"
    if d < 0.01 * AU:
        return d / 1_000, "km"
    return d / AU, "AU"


def pluralize(n: float, unit: str) -> str:
    return f"{n:,.6g} {unit}" if abs(n) == 1 else f"{n:,.6g} {unit}s"


def format_duration(t: float) -> str:
    value, unit = human_time_units(t)
    return pluralize(round(value, 2), unit)


def format_distance(d: float) -> str:
    value, unit = human_distance_units(d)
    return f"{value:,.4g} {unit}"
