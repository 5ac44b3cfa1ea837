"""Exception types raised by the planet pool, arena and integrator."""


class PlanetsError(Exception):
    """Base class for every error raised by the simulation core."""


class ArenaAllocationError(PlanetsError):
    """The arena's backing block could not be obtained."""


class ArenaCapacityError(PlanetsError):
    """A bump allocation would run past the end of the arena."""

    def __init__(self, requested: int, used: int, capacity: int):
        super().__init__(
            f"Arena exhausted: requested {requested} bytes with "
            f"{used}/{capacity} bytes in use"
        )
        self.requested = requested
        self.used = used
        self.capacity = capacity


class ArenaReleasedError(PlanetsError):
    """The arena was used after its block was released."""


class PoolInitError(PlanetsError):
    """The planet pool could not set up its arena."""


class PoolFullError(PlanetsError):
    """Insertion into a pool that already holds its maximum number of planets."""

    def __init__(self, capacity: int):
        super().__init__(f"Too many planets. Max allowed is {capacity}. Pool's closed!")
        self.capacity = capacity


class PoolClosedError(PlanetsError):
    """The pool was used after teardown."""


class InvalidPlanetError(PlanetsError, ValueError):
    """A planet spec with non-physical values."""


class UnresolvedCollisionError(PlanetsError):
    """Overlapping planets under the ``fatal`` collision policy."""

    def __init__(self, pairs):
        self.pairs = list(pairs)
        names = ", ".join(f"{i}<->{j}" for i, j in self.pairs)
        super().__init__(f"Collision resolution is not implemented (overlapping: {names})")
