#!/usr/bin/env python3
"""
Body catalog JSON loading utilities.

Catalogs live in orrery/catalogs/*.json (built in) or anywhere on disk.

Schema
======
{
  "name": "Human-friendly catalog name",
  "description": "Optional description",
  "bodies": [
    {
      "name": "Sol",
      "type": "star",                      # optional, default "planet"
      "mass": 1.9885e30,                   # kg, > 0
      "radius": 6.957e8,                   # m, optional, default 0
      "influenced_by": []                  # names of gravitational sources
    },
    {
      "name": "Earth",
      "type": "planet",
      "mass": 5.972168e24,
      "radius": 6.371e6,
      "influenced_by": ["Sol"],
      "elements": {
        "parent": "Sol",                   # primary parent, omit or null for the root
        "eccentricity": 0.0167086,
        "semi_major_axis": 1.495978707e11, # m
        "inclination": 0.00005,            # degrees
        "longitude_ascending": -11.26064,  # degrees
        "argument_of_periapsis": 114.20783,# degrees
        "true_anomaly": 358.571            # degrees at the catalog epoch
      }
    }
  ]
}

Loading only parses; structural checks (roots, references, influence order) happen
when the catalog is validated by the state tree builder. Malformed files raise
CatalogError naming the file and the offending entry.
"""
import json
import logging
import os
from typing import Any, Dict, List, Tuple

from .data_models import Body, BodyType, OrbitalElements
from .errors import CatalogError

log = logging.getLogger(__name__)

CATALOGS_DIR = os.path.join(os.path.dirname(__file__), "catalogs")
DEFAULT_CATALOG = "solar_system.json"

_ELEMENT_FIELDS = (
    "eccentricity",
    "semi_major_axis",
    "inclination",
    "longitude_ascending",
    "argument_of_periapsis",
    "true_anomaly",
)


def _read_json(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise CatalogError(f"cannot read catalog {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"invalid JSON in catalog {path}: {e}") from e
    if not isinstance(data, dict):
        raise CatalogError(f"catalog {path} must be a JSON object")
    return data


def parse_elements(data: Dict[str, Any]) -> OrbitalElements:
    parent = data.get("parent")
    if parent is not None and not isinstance(parent, str):
        raise TypeError(f"parent must be a string or null, got {parent!r}")
    values = {f: float(data.get(f, 0.0)) for f in _ELEMENT_FIELDS}
    return OrbitalElements(parent_name=parent, **values)


def parse_body(data: Dict[str, Any]) -> Body:
    """Build a Body from one catalog entry."""
    name = data["name"]
    if not isinstance(name, str):
        raise TypeError(f"name must be a string, got {name!r}")
    influenced_by = data.get("influenced_by", [])
    if not isinstance(influenced_by, list) or not all(isinstance(n, str) for n in influenced_by):
        raise TypeError(f"influenced_by must be a list of names, got {influenced_by!r}")
    return Body(
        name=name,
        mass=float(data["mass"]),
        radius=float(data.get("radius", 0.0)),
        elements=parse_elements(data.get("elements") or {}),
        influenced_by=tuple(influenced_by),
        body_type=BodyType(data.get("type", BodyType.PLANET.value)),
    )


def load_catalog(path: str) -> Tuple[List[Body], str]:
    """
    Load a catalog JSON file.
    Returns (bodies, display_name)
    """
    data = _read_json(path)
    display_name = data.get("name") or os.path.splitext(os.path.basename(path))[0]
    entries = data.get("bodies")
    if not isinstance(entries, list):
        raise CatalogError(f"catalog {path} needs a 'bodies' list")
    bodies: List[Body] = []
    for index, entry in enumerate(entries):
        try:
            bodies.append(parse_body(entry))
        except KeyError as e:
            raise CatalogError(f"{path}: body #{index} is missing field {e}") from e
        except (TypeError, ValueError, AttributeError) as e:
            raise CatalogError(f"{path}: body #{index} is malformed: {e}") from e
    log.info("loaded catalog %r with %d bodies from %s", display_name, len(bodies), path)
    return bodies, display_name


def list_catalogs() -> List[Tuple[str, str]]:
    """Return list of (file_name, display_name) for built-in catalogs."""
    items: List[Tuple[str, str]] = []
    if not os.path.isdir(CATALOGS_DIR):
        return items
    for fn in sorted(os.listdir(CATALOGS_DIR)):
        if not fn.lower().endswith(".json"):
            continue
        data = _read_json(os.path.join(CATALOGS_DIR, fn))
        items.append((fn, data.get("name") or os.path.splitext(fn)[0]))
    return items


def load_builtin_catalog(file_name: str = DEFAULT_CATALOG) -> List[Body]:
    """Load one of the catalogs shipped in orrery/catalogs."""
    bodies, _ = load_catalog(os.path.join(CATALOGS_DIR, file_name))
    return bodies
