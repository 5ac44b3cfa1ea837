"""
Collision hook invoked for every planet pair on every tick.

Two planets overlap when the distance between their centres is less than
the sum of their ``diameter`` fields (the field holds the render radius).
What happens next depends on the :class:`CollisionPolicy`.
"""

import math
from enum import Enum

from numba import njit

# Integer codes passed into the JIT kernels
POLICY_IGNORE = 0
POLICY_DETECT = 1
POLICY_RESOLVE = 2
POLICY_FATAL = 3


class CollisionPolicy(Enum):
    IGNORE = "ignore"     # Hook is a no-op
    DETECT = "detect"     # Report overlapping pairs, leave state alone
    RESOLVE = "resolve"   # Push apart and exchange momentum along the normal
    FATAL = "fatal"       # Report, then step() raises UnresolvedCollisionError

    @property
    def code(self) -> int:
        return _POLICY_CODES[self]

    @classmethod
    def parse(cls, value) -> "CollisionPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown collision policy {value!r} (expected one of: {choices})")


_POLICY_CODES = {
    CollisionPolicy.IGNORE: POLICY_IGNORE,
    CollisionPolicy.DETECT: POLICY_DETECT,
    CollisionPolicy.RESOLVE: POLICY_RESOLVE,
    CollisionPolicy.FATAL: POLICY_FATAL,
}


@njit(cache=True)
def resolve_collision(i, j, positions, velocities, masses, radii, restitution):
    """
    Separate an overlapping pair and apply a restitution impulse.

    Overlap is removed along the contact normal, split by mass so the
    heavier body moves less. The impulse only applies when the bodies are
    approaching. Total momentum is unchanged.
    """
    dx = positions[j, 0] - positions[i, 0]
    dy = positions[j, 1] - positions[i, 1]
    dist = math.sqrt(dx * dx + dy * dy)
    if dist == 0.0:
        # No contact normal
        return

    nx = dx / dist
    ny = dy / dist
    m_i = masses[i]
    m_j = masses[j]
    total_mass = m_i + m_j

    # 1. Resolve overlap
    overlap = radii[i] + radii[j] - dist
    positions[i, 0] -= (m_j / total_mass) * overlap * nx
    positions[i, 1] -= (m_j / total_mass) * overlap * ny
    positions[j, 0] += (m_i / total_mass) * overlap * nx
    positions[j, 1] += (m_i / total_mass) * overlap * ny

    # 2. Impulse along the normal
    rel_vx = velocities[j, 0] - velocities[i, 0]
    rel_vy = velocities[j, 1] - velocities[i, 1]
    rel_normal = rel_vx * nx + rel_vy * ny
    if rel_normal < 0.0:
        impulse = -(1.0 + restitution) * m_i * m_j * rel_normal / total_mass
        velocities[i, 0] -= impulse / m_i * nx
        velocities[i, 1] -= impulse / m_i * ny
        velocities[j, 0] += impulse / m_j * nx
        velocities[j, 1] += impulse / m_j * ny


@njit(cache=True)
def check_collision(i, j, positions, velocities, masses, radii, policy, restitution):
    """Run the hook for one pair. Returns True when the pair overlaps."""
    if policy == POLICY_IGNORE:
        return False

    dx = positions[j, 0] - positions[i, 0]
    dy = positions[j, 1] - positions[i, 1]
    reach = radii[i] + radii[j]
    if dx * dx + dy * dy >= reach * reach:
        return False

    if policy == POLICY_RESOLVE:
        resolve_collision(i, j, positions, velocities, masses, radii, restitution)
    return True


@njit(cache=True)
def check_all_pairs(positions, velocities, masses, radii, num_planets,
                    policy, restitution, out):
    """Run the hook over every unordered pair. Overlapping pairs go to ``out``."""
    count = 0
    for i in range(num_planets):
        for j in range(i + 1, num_planets):
            if check_collision(i, j, positions, velocities, masses, radii,
                               policy, restitution):
                out[count, 0] = i
                out[count, 1] = j
                count += 1
    return count
