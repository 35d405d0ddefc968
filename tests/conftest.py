import pytest

from orrery.data_models import Body, BodyType, OrbitalElements

SUN_MASS = 1.989e30
EARTH_MASS = 5.972e24
ONE_AU = 1.496e11


def make_body(name, mass, parent=None, influenced_by=None, a=0.0, e=0.0, i=0.0,
              raan=0.0, argp=0.0, nu=0.0, body_type=BodyType.PLANET, radius=1.0):
    if influenced_by is None:
        influenced_by = () if parent is None else (parent,)
    return Body(
        name=name,
        mass=mass,
        radius=radius,
        elements=OrbitalElements(
            parent_name=parent,
            eccentricity=e,
            semi_major_axis=a,
            inclination=i,
            longitude_ascending=raan,
            argument_of_periapsis=argp,
            true_anomaly=nu,
        ),
        influenced_by=tuple(influenced_by),
        body_type=body_type,
    )


@pytest.fixture
def sun():
    return make_body("Sun", SUN_MASS, body_type=BodyType.STAR)


@pytest.fixture
def two_body_catalog(sun):
    return [sun, make_body("Earth", EARTH_MASS, parent="Sun", a=ONE_AU)]


@pytest.fixture
def moon_catalog(sun):
    """Sun, a tilted eccentric planet with a moon influenced by both, and a second planet."""
    return [
        sun,
        make_body("Earth", EARTH_MASS, parent="Sun", a=ONE_AU, e=0.0167, i=0.5, raan=-11.3, argp=114.2, nu=40.0),
        make_body("Luna", 7.342e22, parent="Earth", influenced_by=("Sun", "Earth"),
                  a=3.844e8, e=0.0549, i=5.145, raan=125.08, argp=318.15, nu=10.0, body_type=BodyType.MOON),
        make_body("Mars", 6.4171e23, parent="Sun", a=2.279e11, e=0.0935, i=1.85, raan=49.6, argp=286.5, nu=23.4),
    ]
