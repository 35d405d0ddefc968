import json

import pytest

from orrery.catalog import group_satellites, validate_catalog
from orrery.catalog_loader import list_catalogs, load_builtin_catalog, load_catalog, parse_body
from orrery.data_models import BodyType
from orrery.errors import CatalogError
from orrery.state_tree import body_names, build_state_tree

from conftest import make_body


def test_validate_returns_root(moon_catalog):
    assert validate_catalog(moon_catalog).name == "Sun"


def test_group_satellites_keeps_order(moon_catalog):
    groups = group_satellites(moon_catalog)
    assert [b.name for b in groups["Sun"]] == ["Earth", "Mars"]
    assert [b.name for b in groups["Earth"]] == ["Luna"]
    assert "Luna" not in groups


def test_influencer_from_other_branch_placed_earlier(sun):
    # A body may be influenced by a body outside its ancestor chain if it is placed first
    catalog = [
        sun,
        make_body("Jupiter", 1.9e27, parent="Sun", a=7.8e11),
        make_body("Hilda", 1.0e18, parent="Sun", influenced_by=("Sun", "Jupiter"), a=5.9e11, e=0.1),
    ]
    assert validate_catalog(catalog).name == "Sun"


@pytest.mark.parametrize("catalog, message", [
    ([], "empty"),
    ([make_body("A", 1.0), make_body("A", 2.0)], "duplicate"),
    ([make_body("A", 1.0), make_body("B", 1.0)], "exactly one root"),
    ([make_body("A", 1.0, parent="B", influenced_by=("B",), a=1.0),
      make_body("B", 1.0, parent="A", influenced_by=("A",), a=1.0)], "exactly one root"),
    ([make_body("S", 1.0), make_body("A", 1.0, parent="X", influenced_by=("S",), a=1.0)], "unknown parent"),
    ([make_body("S", 1.0), make_body("A", 1.0, parent="S", influenced_by=("S", "X"), a=1.0)], "unknown influencer"),
    ([make_body("S", 1.0), make_body("A", 1.0, parent="S", influenced_by=("A",), a=1.0)], "itself"),
    ([make_body("S", 1.0), make_body("A", 1.0, parent="S", influenced_by=("S", "S"), a=1.0)], "duplicate entries"),
    ([make_body("S", 1.0), make_body("A", 1.0, parent="S", influenced_by=(), a=1.0)], "at least one influencer"),
    ([make_body("S", 1.0, influenced_by=("A",)), make_body("A", 1.0, parent="S", a=1.0)], "root body cannot"),
    ([make_body("S", 0.0)], "mass"),
    ([make_body("S", -5.0)], "mass"),
    ([make_body("S", 1.0, radius=-1.0)], "radius"),
    ([make_body("S", 1.0), make_body("A", 1.0, parent="S", a=0.0)], "semi_major_axis"),
    ([make_body("S", 1.0), make_body("A", 1.0, parent="S", a=1.0, e=1.0)], "eccentricity"),
    # Influence cycle between siblings
    ([make_body("S", 1.0),
      make_body("A", 1.0, parent="S", influenced_by=("S", "B"), a=1.0),
      make_body("B", 1.0, parent="S", influenced_by=("S", "A"), a=2.0)], "not placed before"),
    # Influenced by its own satellite
    ([make_body("S", 1.0),
      make_body("A", 1.0, parent="S", influenced_by=("S", "M"), a=1.0),
      make_body("M", 1.0, parent="A", influenced_by=("A",), a=0.1)], "not placed before"),
    # Parent cycle hanging off a valid root
    ([make_body("S", 1.0),
      make_body("A", 1.0, parent="B", influenced_by=("S",), a=1.0),
      make_body("B", 1.0, parent="A", influenced_by=("S",), a=1.0)], "not connected"),
])
def test_malformed_catalogs_rejected(catalog, message):
    with pytest.raises(CatalogError, match=message):
        build_state_tree(catalog)


def test_catalog_error_is_value_error():
    with pytest.raises(ValueError):
        validate_catalog([])


def _write(tmp_path, data, name="catalog.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_load_catalog_from_json(tmp_path):
    path = _write(tmp_path, {
        "name": "Binary test",
        "bodies": [
            {"name": "Star", "type": "star", "mass": 2.0e30, "radius": 7.0e8, "influenced_by": []},
            {"name": "Rock", "mass": 1.0e20, "influenced_by": ["Star"],
             "elements": {"parent": "Star", "eccentricity": 0.1, "semi_major_axis": 1.0e11, "true_anomaly": 45}},
        ],
    })
    bodies, display_name = load_catalog(path)

    assert display_name == "Binary test"
    assert [b.name for b in bodies] == ["Star", "Rock"]
    star, rock = bodies
    assert star.body_type is BodyType.STAR
    assert star.is_root
    assert rock.body_type is BodyType.PLANET
    assert rock.radius == 0.0
    assert rock.parent_name == "Star"
    assert rock.elements.true_anomaly == 45.0
    assert rock.elements.inclination == 0.0
    assert rock.influenced_by == ("Star",)


def test_display_name_defaults_to_file_name(tmp_path):
    path = _write(tmp_path, {"bodies": []}, name="empty_system.json")
    assert load_catalog(path) == ([], "empty_system")


@pytest.mark.parametrize("data", [
    [1, 2, 3],
    {"name": "no bodies"},
    {"bodies": [{"mass": 1.0}]},
    {"bodies": [{"name": "A"}]},
    {"bodies": [{"name": "A", "mass": "heavy"}]},
    {"bodies": [{"name": "A", "mass": 1.0, "type": "nebula"}]},
    {"bodies": [{"name": "A", "mass": 1.0, "influenced_by": "B"}]},
    {"bodies": [{"name": "A", "mass": 1.0, "elements": {"parent": 3}}]},
    {"bodies": ["A"]},
])
def test_load_catalog_malformed(tmp_path, data):
    with pytest.raises(CatalogError):
        load_catalog(_write(tmp_path, data))


def test_load_catalog_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError, match="invalid JSON"):
        load_catalog(str(path))


def test_load_catalog_missing_file(tmp_path):
    with pytest.raises(CatalogError, match="cannot read"):
        load_catalog(str(tmp_path / "nope.json"))


def test_parse_body_root_without_elements():
    body = parse_body({"name": "Sol", "type": "star", "mass": 1.9885e30})
    assert body.is_root
    assert body.influenced_by == ()


def test_builtin_catalog_builds():
    catalog = load_builtin_catalog()
    tree = build_state_tree(catalog)
    names = body_names(tree)

    assert tree.name == "Sol"
    assert len(names) == len(catalog)
    for name in ("Earth", "Luna", "Jupiter", "Io", "Triton", "Charon"):
        assert name in names
    assert ("solar_system.json", "Solar System") in list_catalogs()
