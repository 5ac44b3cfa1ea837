import pytest

from planets import PlanetPool, PlanetSpec


@pytest.fixture
def pool():
    with PlanetPool(10) as p:
        yield p


@pytest.fixture
def solar_pool():
    """Sun, Earth and Mars with the Sun at the origin."""
    with PlanetPool(10) as p:
        p.insert(PlanetSpec("Sun", 500.0, 75.0, (0.0, 0.0), (0.0, 0.0)))
        p.insert(PlanetSpec("Earth", 20.0, 30.0, (150.0, 150.0), (-2.5, 3.5)))
        p.insert(PlanetSpec("Mars", 10.0, 25.0, (-150.0, -150.0), (-1.5, 2.5)))
        yield p
