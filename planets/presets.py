"""Builds planet specs from the configured initial system and spawn template."""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from config import planets as config
from .errors import PoolFullError
from .pool import PlanetPool, PlanetSpec

logger = logging.getLogger(__name__)


def initial_specs(origin: Tuple[float, float] = (0.0, 0.0),
                  planets: Optional[Sequence[dict]] = None) -> List[PlanetSpec]:
    """Specs for the configured bodies, offsets measured from ``origin``."""
    if planets is None:
        planets = config.PLANETS
    ox, oy = origin
    specs = []
    for entry in planets:
        dx, dy = entry.get("offset", (0.0, 0.0))
        specs.append(PlanetSpec(
            name=entry["name"],
            mass=entry["mass"],
            diameter=entry["diameter"],
            position=(ox + dx, oy + dy),
            velocity=entry.get("velocity", (0.0, 0.0)),
        ))
    return specs


def spawn_spec(position: Tuple[float, float], template: Optional[dict] = None) -> PlanetSpec:
    if template is None:
        template = config.SPAWN
    return PlanetSpec(
        name=template["name"],
        mass=template["mass"],
        diameter=template["diameter"],
        position=position,
        velocity=template.get("velocity", (0.0, 0.0)),
    )


def populate(pool: PlanetPool, specs: Iterable[PlanetSpec]) -> int:
    """Insert ``specs`` in order until the pool fills up. Returns how many went in."""
    inserted = 0
    for spec in specs:
        try:
            pool.insert(spec)
        except PoolFullError:
            logger.warning("Pool full, dropped %r and any remaining planets", spec.name)
            break
        inserted += 1
    return inserted
