"""
Fixed-capacity planet pool.

All planet records live in one :class:`~planets.arena.Arena` sized for
``max_planets`` records. The pool keeps a slot table of byte offsets into
that arena (one entry per inserted planet, in insertion order) and never
removes or reorders entries. Tearing the pool down releases every planet
at once.

Record layout (numpy structured dtype, C-aligned):
- name: up to 29 bytes of UTF-8, NUL padded
- mass, diameter: float64 (diameter is used as the render radius)
- pos, velo, accel: 2 x float64
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np

from config import planets as config
from .arena import ARENA_HEADER_BYTES, Arena
from .errors import (
    ArenaAllocationError,
    InvalidPlanetError,
    PoolClosedError,
    PoolFullError,
    PoolInitError,
)

logger = logging.getLogger(__name__)

NAME_FIELD_BYTES = 30
NAME_MAX_CHARS = NAME_FIELD_BYTES - 1

PLANET_DTYPE = np.dtype(
    [
        ("name", f"S{NAME_FIELD_BYTES}"),
        ("mass", np.float64),
        ("diameter", np.float64),
        ("pos", np.float64, (2,)),
        ("velo", np.float64, (2,)),
        ("accel", np.float64, (2,)),
    ],
    align=True,
)
PLANET_RECORD_BYTES = PLANET_DTYPE.itemsize

# Slot table entry, length counter, arena reference
SLOT_REFERENCE_BYTES = 8
POOL_FIXED_BYTES = 8 + 8

Vector2 = Tuple[float, float]


def _as_vector(value, label: str) -> Vector2:
    try:
        x, y = (float(v) for v in value)
    except (TypeError, ValueError) as e:
        raise InvalidPlanetError(f"{label} must be a pair of numbers, got {value!r}") from e
    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidPlanetError(f"{label} must be finite, got ({x}, {y})")
    return (x, y)


def encode_name(name: str) -> bytes:
    """Truncating copy of a planet name into the fixed-width field."""
    raw = name.encode("utf-8")[:NAME_MAX_CHARS]
    # Do not leave half of a multi-byte character behind
    return raw.decode("utf-8", errors="ignore").encode("utf-8")


def decode_name(raw: bytes) -> str:
    return bytes(raw).rstrip(b"\x00").decode("utf-8", errors="ignore")


@dataclass
class PlanetSpec:
    """
    Values for a planet about to be inserted into a pool.

    Attributes:
        name: Display name, silently truncated to 29 bytes on insertion
        mass: Positive mass
        diameter: Positive render radius
        position: 2D position
        velocity: 2D velocity
        acceleration: 2D acceleration (stored, not used by the integrator)
    """
    name: str
    mass: float
    diameter: float
    position: Vector2 = (0.0, 0.0)
    velocity: Vector2 = (0.0, 0.0)
    acceleration: Vector2 = (0.0, 0.0)

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise InvalidPlanetError(f"Planet name must be a str, got {type(self.name).__name__}")
        try:
            self.mass = float(self.mass)
            self.diameter = float(self.diameter)
        except (TypeError, ValueError) as e:
            raise InvalidPlanetError(f"Planet {self.name!r} needs numeric mass and diameter") from e
        if not (math.isfinite(self.mass) and self.mass > 0):
            raise InvalidPlanetError(f"Planet {self.name!r} needs a positive mass, got {self.mass}")
        if not (math.isfinite(self.diameter) and self.diameter > 0):
            raise InvalidPlanetError(
                f"Planet {self.name!r} needs a positive diameter, got {self.diameter}"
            )
        self.position = _as_vector(self.position, "position")
        self.velocity = _as_vector(self.velocity, "velocity")
        self.acceleration = _as_vector(self.acceleration, "acceleration")


@dataclass(frozen=True)
class Planet:
    """Read-only snapshot of one pool record."""
    index: int
    name: str
    mass: float
    diameter: float
    position: Vector2
    velocity: Vector2
    acceleration: Vector2


@dataclass(frozen=True)
class DrawablePlanet:
    """The part of a planet the renderer needs."""
    name: str
    position: Vector2
    diameter: float


def total_footprint_bytes(max_planets: int = config.MAX_PLANETS) -> int:
    """Bytes held by a pool of ``max_planets``: records, slot table and arena header."""
    records = max_planets * PLANET_RECORD_BYTES
    pool = max_planets * SLOT_REFERENCE_BYTES + POOL_FIXED_BYTES
    return records + pool + ARENA_HEADER_BYTES


class PlanetPool:
    """Append-only registry of at most ``max_planets`` planets."""

    def __init__(self, max_planets: int = config.MAX_PLANETS):
        max_planets = int(max_planets)
        if max_planets < 0:
            raise ValueError(f"max_planets must be non-negative, got {max_planets}")
        self.max_planets = max_planets

        try:
            self._arena = Arena(max_planets * PLANET_RECORD_BYTES)
        except ArenaAllocationError as e:
            raise PoolInitError(f"Failed to set up a pool of {max_planets} planets") from e

        self._records = self._arena.view(PLANET_DTYPE)
        self._slots = np.full(max_planets, -1, dtype=np.int64)
        self._length = 0

        logger.info(
            "Planet pool ready: %d slots, total memory allocation: %d bytes",
            max_planets, self.footprint_bytes
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._records is None

    @property
    def is_full(self) -> bool:
        return self._length >= self.max_planets

    @property
    def used_bytes(self) -> int:
        return self._require_open()._arena.used_bytes

    @property
    def capacity_bytes(self) -> int:
        return self._arena.capacity_bytes

    @property
    def footprint_bytes(self) -> int:
        return total_footprint_bytes(self.max_planets)

    def __len__(self) -> int:
        return self._length

    def _require_open(self) -> "PlanetPool":
        if self._records is None:
            raise PoolClosedError("Planet pool has been torn down")
        return self

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def insert(self, spec: PlanetSpec) -> int:
        """
        Copy ``spec`` into a freshly allocated record.

        Returns:
            The slot index of the new planet.

        Raises:
            PoolFullError: the pool already holds ``max_planets`` planets.
                Nothing is allocated and the length is unchanged.
            InvalidPlanetError: the spec no longer holds storable values
                (e.g. mutated after construction). Nothing is allocated.
        """
        self._require_open()
        if self._length >= self.max_planets:
            logger.error("Too many planets. Max allowed is %d. Pool's closed!", self.max_planets)
            raise PoolFullError(self.max_planets)

        # Build the record first so a bad spec never claims arena space
        record = np.zeros((), dtype=PLANET_DTYPE)
        try:
            if not isinstance(spec.name, str):
                raise TypeError(f"name must be a str, got {type(spec.name).__name__}")
            record[()] = (
                encode_name(spec.name),
                spec.mass,
                spec.diameter,
                spec.position,
                spec.velocity,
                spec.acceleration,
            )
        except (TypeError, ValueError) as e:
            raise InvalidPlanetError(f"Cannot store planet {spec.name!r}: {e}") from e

        index = self._length
        offset = self._arena.allocate(PLANET_RECORD_BYTES)
        # live_records() relies on slot k being record k
        assert offset == index * PLANET_RECORD_BYTES
        self._records[index] = record
        self._slots[index] = offset
        self._length += 1
        return index

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def live_records(self) -> np.ndarray:
        """
        Mutable record view over the occupied slots, in insertion order.

        Bump allocation puts slot ``k`` at record ``k`` of the arena, so the
        live set is a prefix of the arena view. Field views of the result
        (``["pos"]``, ``["velo"]``, ...) write straight into the arena.
        """
        self._require_open()
        return self._records[:self._length]

    def _record(self, index: int):
        if not 0 <= index < self._length:
            raise IndexError(f"Planet index {index} out of range for {self._length} planets")
        return self._records[self._slots[index] // PLANET_RECORD_BYTES]

    def planet(self, index: int) -> Planet:
        self._require_open()
        record = self._record(index)
        return Planet(
            index=index,
            name=decode_name(record["name"]),
            mass=float(record["mass"]),
            diameter=float(record["diameter"]),
            position=tuple(float(v) for v in record["pos"]),
            velocity=tuple(float(v) for v in record["velo"]),
            acceleration=tuple(float(v) for v in record["accel"]),
        )

    def __iter__(self) -> Iterator[Planet]:
        self._require_open()
        for index in range(self._length):
            yield self.planet(index)

    def drawables(self) -> Iterator[DrawablePlanet]:
        """Name, position and render radius of every live planet."""
        self._require_open()
        for index in range(self._length):
            record = self._record(index)
            yield DrawablePlanet(
                name=decode_name(record["name"]),
                position=(float(record["pos"][0]), float(record["pos"][1])),
                diameter=float(record["diameter"]),
            )

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self):
        """Release the arena and with it every planet record."""
        if self._records is None:
            return
        self._records = None
        self._slots = None
        self._arena.release()
        logger.info("Planet pool released (%d planets)", self._length)

    def __enter__(self) -> "PlanetPool":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __repr__(self):
        if self.closed:
            return f"PlanetPool(closed, max_planets={self.max_planets})"
        return f"PlanetPool({self._length}/{self.max_planets} planets)"


def create_pool(max_planets: int = config.MAX_PLANETS) -> PlanetPool:
    return PlanetPool(max_planets)


def iterate_planets(pool: PlanetPool) -> Iterator[DrawablePlanet]:
    return pool.drawables()


def teardown_pool(pool: PlanetPool):
    pool.close()
