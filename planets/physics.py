"""
Direct pairwise gravity for the planet pool.

One call to :func:`step` advances the simulation by one tick. For every
unordered pair ``(i, j)`` with ``i < j`` the force magnitude
``G * m_i * m_j / d^2`` is turned into equal and opposite velocity kicks
(``F / m``, i.e. a unit time step) and each body's position is then moved
by its freshly updated velocity.

Two schemes are available:

- PAIRWISE: the kick and the position update happen inside the pair loop,
  so a body touching k other bodies is nudged k times per tick and the
  result depends on pair order. This is the reference behaviour.
- TWO_PASS: every kick is computed from start-of-tick positions into a
  per-body accumulator (in parallel), then each body gets one velocity
  update followed by one position update. Order independent, but its
  output differs from PAIRWISE.

Coincident bodies (zero distance) would divide by zero. Such pairs are
skipped and reported in :attr:`StepResult.degenerate_pairs`.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np
from numba import njit, prange

from config import planets as config
from .collision import CollisionPolicy, check_all_pairs, check_collision
from .errors import UnresolvedCollisionError
from .pool import PlanetPool, PlanetSpec

logger = logging.getLogger(__name__)

Pair = Tuple[int, int]


class IntegrationScheme(Enum):
    PAIRWISE = "pairwise"
    TWO_PASS = "two_pass"

    @classmethod
    def parse(cls, value) -> "IntegrationScheme":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower().replace("-", "_"))
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown integration scheme {value!r} (expected one of: {choices})")


@dataclass
class StepResult:
    """Per-tick outcome. Degenerate pairs had their force update skipped."""
    degenerate_pairs: List[Pair] = field(default_factory=list)
    collisions: List[Pair] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.degenerate_pairs


# ============================================================================
# KERNELS
# ============================================================================
# No fastmath here: it assumes finite values and would weaken the zero guard.


@njit(cache=True)
def integrate_pairwise(
    positions: np.ndarray,     # (n, 2)
    velocities: np.ndarray,    # (n, 2)
    masses: np.ndarray,        # (n,)
    radii: np.ndarray,         # (n,)
    num_planets: int,
    G: float,
    policy: int,
    restitution: float,
    degenerate: np.ndarray,    # (max_pairs, 2) output
    collisions: np.ndarray,    # (max_pairs, 2) output
):
    """
    In-place semi-implicit Euler over every pair, in index order.
    Returns (number of degenerate pairs, number of collisions).
    """
    num_degenerate = 0
    num_collisions = 0

    for i in range(num_planets):
        for j in range(i + 1, num_planets):
            dx = positions[j, 0] - positions[i, 0]
            dy = positions[j, 1] - positions[i, 1]
            dist = math.sqrt(dx * dx + dy * dy)

            if dist == 0.0:
                degenerate[num_degenerate, 0] = i
                degenerate[num_degenerate, 1] = j
                num_degenerate += 1
            else:
                force_mag = G * masses[i] * masses[j] / (dist * dist)
                ux = dx / dist
                uy = dy / dist

                # Equal and opposite kicks
                velocities[i, 0] += force_mag * ux / masses[i]
                velocities[i, 1] += force_mag * uy / masses[i]
                velocities[j, 0] += -force_mag * ux / masses[j]
                velocities[j, 1] += -force_mag * uy / masses[j]

                # Position follows the just-updated velocity
                positions[i, 0] += velocities[i, 0]
                positions[i, 1] += velocities[i, 1]
                positions[j, 0] += velocities[j, 0]
                positions[j, 1] += velocities[j, 1]

            if check_collision(i, j, positions, velocities, masses, radii,
                               policy, restitution):
                collisions[num_collisions, 0] = i
                collisions[num_collisions, 1] = j
                num_collisions += 1

    return num_degenerate, num_collisions


@njit(cache=True)
def find_degenerate_pairs(positions: np.ndarray, num_planets: int, out: np.ndarray) -> int:
    """Collect every pair at exactly zero separation."""
    count = 0
    for i in range(num_planets):
        for j in range(i + 1, num_planets):
            dx = positions[j, 0] - positions[i, 0]
            dy = positions[j, 1] - positions[i, 1]
            if math.sqrt(dx * dx + dy * dy) == 0.0:
                out[count, 0] = i
                out[count, 1] = j
                count += 1
    return count


@njit(parallel=True, cache=True)
def accumulate_kicks(
    positions: np.ndarray,
    masses: np.ndarray,
    kicks: np.ndarray,         # (n, 2) output
    num_planets: int,
    G: float,
):
    """Sum every pair's velocity kick per body. Each thread owns one body."""
    for i in prange(num_planets):
        kx = 0.0
        ky = 0.0
        for j in range(num_planets):
            if j == i:
                continue
            dx = positions[j, 0] - positions[i, 0]
            dy = positions[j, 1] - positions[i, 1]
            dist = math.sqrt(dx * dx + dy * dy)
            if dist == 0.0:
                continue
            force_mag = G * masses[i] * masses[j] / (dist * dist)
            kx += force_mag * (dx / dist) / masses[i]
            ky += force_mag * (dy / dist) / masses[i]
        kicks[i, 0] = kx
        kicks[i, 1] = ky


@njit(parallel=True, cache=True)
def apply_kicks(positions: np.ndarray, velocities: np.ndarray, kicks: np.ndarray,
                num_planets: int):
    """Velocity first, then position, once per body."""
    for i in prange(num_planets):
        velocities[i, 0] += kicks[i, 0]
        velocities[i, 1] += kicks[i, 1]
        positions[i, 0] += velocities[i, 0]
        positions[i, 1] += velocities[i, 1]


# ============================================================================
# PUBLIC API
# ============================================================================

def _pairs(buffer: np.ndarray, count: int) -> List[Pair]:
    return [(int(i), int(j)) for i, j in buffer[:count]]


def step(
    pool: PlanetPool,
    gravity: Optional[float] = None,
    collision=None,
    scheme=None,
    restitution: Optional[float] = None,
) -> StepResult:
    """
    Advance every live planet in ``pool`` by one tick.

    Args:
        pool: The pool to mutate in place
        gravity: Force constant G (default: config.GRAVITY)
        collision: CollisionPolicy or its name (default: config.SIMULATION)
        scheme: IntegrationScheme or its name (default: config.SIMULATION)
        restitution: Bounce factor for the resolving collision policy

    Returns:
        StepResult listing pairs skipped for zero distance and the pairs
        the collision hook found overlapping.

    Raises:
        UnresolvedCollisionError: overlaps were found under the fatal
            policy. The tick has already been applied.
    """
    sim_cfg = config.SIMULATION
    if gravity is None:
        gravity = config.GRAVITY
    if restitution is None:
        restitution = sim_cfg["restitution"]
    policy = CollisionPolicy.parse(sim_cfg["collision"] if collision is None else collision)
    scheme = IntegrationScheme.parse(sim_cfg["scheme"] if scheme is None else scheme)

    records = pool.live_records()
    num_planets = len(records)
    result = StepResult()
    if num_planets < 2:
        return result

    positions = records["pos"]
    velocities = records["velo"]
    masses = records["mass"]
    radii = records["diameter"]

    max_pairs = num_planets * (num_planets - 1) // 2
    degenerate = np.empty((max_pairs, 2), dtype=np.int64)
    collisions = np.empty((max_pairs, 2), dtype=np.int64)

    if scheme is IntegrationScheme.PAIRWISE:
        num_degenerate, num_collisions = integrate_pairwise(
            positions, velocities, masses, radii, num_planets,
            float(gravity), policy.code, float(restitution),
            degenerate, collisions
        )
    else:
        num_degenerate = find_degenerate_pairs(positions, num_planets, degenerate)
        kicks = np.zeros((num_planets, 2), dtype=np.float64)
        accumulate_kicks(positions, masses, kicks, num_planets, float(gravity))
        apply_kicks(positions, velocities, kicks, num_planets)
        num_collisions = check_all_pairs(
            positions, velocities, masses, radii, num_planets,
            policy.code, float(restitution), collisions
        )

    result.degenerate_pairs = _pairs(degenerate, num_degenerate)
    result.collisions = _pairs(collisions, num_collisions)

    if result.degenerate_pairs:
        logger.debug("Skipped %d coincident pair(s): %s",
                     len(result.degenerate_pairs), result.degenerate_pairs)
    if result.collisions:
        logger.debug("Collision hook (%s) hit %d pair(s): %s",
                     policy.value, len(result.collisions), result.collisions)
        if policy is CollisionPolicy.FATAL:
            raise UnresolvedCollisionError(result.collisions)

    return result


class Integrator:
    """Holds step settings, defaulting to ``config.SIMULATION``."""

    def __init__(self, gravity=None, collision=None, scheme=None, restitution=None):
        sim_cfg = config.SIMULATION
        self.gravity = float(sim_cfg["G"] if gravity is None else gravity)
        self.collision = CollisionPolicy.parse(sim_cfg["collision"] if collision is None else collision)
        self.scheme = IntegrationScheme.parse(sim_cfg["scheme"] if scheme is None else scheme)
        self.restitution = float(sim_cfg["restitution"] if restitution is None else restitution)

    def step(self, pool: PlanetPool) -> StepResult:
        return step(
            pool,
            gravity=self.gravity,
            collision=self.collision,
            scheme=self.scheme,
            restitution=self.restitution,
        )

    def __repr__(self):
        return (f"Integrator(G={self.gravity}, collision={self.collision.value}, "
                f"scheme={self.scheme.value})")


# ============================================================================
# DIAGNOSTICS
# ============================================================================

def total_momentum(pool: PlanetPool) -> Tuple[float, float]:
    records = pool.live_records()
    momentum = (records["mass"][:, None] * records["velo"]).sum(axis=0)
    return float(momentum[0]), float(momentum[1])


def kinetic_energy(pool: PlanetPool) -> float:
    records = pool.live_records()
    speed_sq = (records["velo"] ** 2).sum(axis=1)
    return float(0.5 * (records["mass"] * speed_sq).sum())


def warmup():
    """Compile every kernel on a throwaway pool."""
    with PlanetPool(3) as pool:
        pool.insert(PlanetSpec("a", 1.0, 1.0, (0.0, 0.0)))
        pool.insert(PlanetSpec("b", 1.0, 1.0, (10.0, 0.0)))
        pool.insert(PlanetSpec("c", 1.0, 1.0, (0.0, 10.0)))
        for scheme in IntegrationScheme:
            step(pool, gravity=1.0, collision=CollisionPolicy.DETECT, scheme=scheme)
