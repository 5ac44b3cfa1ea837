"""Planet pool, arena allocator and pairwise gravity integrator."""

from .arena import Arena
from .collision import CollisionPolicy
from .errors import (
    ArenaAllocationError,
    ArenaCapacityError,
    ArenaReleasedError,
    InvalidPlanetError,
    PlanetsError,
    PoolClosedError,
    PoolFullError,
    PoolInitError,
    UnresolvedCollisionError,
)
from .physics import IntegrationScheme, Integrator, StepResult, step
from .pool import (
    DrawablePlanet,
    Planet,
    PlanetPool,
    PlanetSpec,
    create_pool,
    iterate_planets,
    teardown_pool,
    total_footprint_bytes,
)

__all__ = [
    "Arena",
    "CollisionPolicy",
    "IntegrationScheme",
    "Integrator",
    "StepResult",
    "step",
    "DrawablePlanet",
    "Planet",
    "PlanetPool",
    "PlanetSpec",
    "create_pool",
    "iterate_planets",
    "teardown_pool",
    "total_footprint_bytes",
    "PlanetsError",
    "ArenaAllocationError",
    "ArenaCapacityError",
    "ArenaReleasedError",
    "InvalidPlanetError",
    "PoolClosedError",
    "PoolFullError",
    "PoolInitError",
    "UnresolvedCollisionError",
]
