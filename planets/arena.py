"""
Bump allocator over a single contiguous block.

The arena owns one numpy byte buffer sized once at construction. Regions are
handed out by advancing a ``used_bytes`` cursor and are never freed one at a
time; the whole block goes away in :meth:`Arena.release`.
"""

import logging

import numpy as np

from .errors import ArenaAllocationError, ArenaCapacityError, ArenaReleasedError

logger = logging.getLogger(__name__)

# size, used, memory pointer
ARENA_HEADER_BYTES = 3 * 8


class Arena:
    """Fixed-capacity bump allocator backed by a ``uint8`` numpy buffer."""

    def __init__(self, capacity_bytes: int):
        capacity_bytes = int(capacity_bytes)
        if capacity_bytes < 0:
            raise ValueError(f"Arena capacity must be non-negative, got {capacity_bytes}")

        try:
            self._memory = np.zeros(capacity_bytes, dtype=np.uint8)
        except MemoryError as e:
            logger.warning("Could not reserve %d bytes for the arena", capacity_bytes)
            raise ArenaAllocationError(
                f"Failed to allocate an arena of {capacity_bytes} bytes"
            ) from e

        self.capacity_bytes = capacity_bytes
        self.used_bytes = 0

    @property
    def released(self) -> bool:
        return self._memory is None

    @property
    def free_bytes(self) -> int:
        return self.capacity_bytes - self.used_bytes

    def _require_memory(self) -> np.ndarray:
        if self._memory is None:
            raise ArenaReleasedError("Arena has already been released")
        return self._memory

    def allocate(self, size_bytes: int) -> int:
        """
        Reserve ``size_bytes`` at the current cursor.

        Returns:
            Byte offset of the new region inside the block.

        Raises:
            ArenaCapacityError: the request does not fit. ``used_bytes`` is
                left untouched and the arena never grows.
        """
        self._require_memory()
        size_bytes = int(size_bytes)
        if size_bytes < 0:
            raise ValueError(f"Allocation size must be non-negative, got {size_bytes}")

        if self.used_bytes + size_bytes > self.capacity_bytes:
            raise ArenaCapacityError(size_bytes, self.used_bytes, self.capacity_bytes)

        offset = self.used_bytes
        self.used_bytes += size_bytes
        return offset

    def region(self, offset: int, size_bytes: int) -> np.ndarray:
        """Writable byte view of a previously allocated region."""
        memory = self._require_memory()
        if offset < 0 or offset + size_bytes > self.used_bytes:
            raise ValueError(
                f"Region [{offset}, {offset + size_bytes}) lies outside the "
                f"{self.used_bytes} allocated bytes"
            )
        return memory[offset:offset + size_bytes]

    def view(self, dtype) -> np.ndarray:
        """Reinterpret the whole block as an array of ``dtype`` records."""
        memory = self._require_memory()
        dtype = np.dtype(dtype)
        if self.capacity_bytes % dtype.itemsize:
            raise ValueError(
                f"Arena of {self.capacity_bytes} bytes is not a whole number "
                f"of {dtype.itemsize}-byte records"
            )
        return memory.view(dtype)

    def release(self):
        """Drop the backing block. Every region handed out becomes invalid."""
        self._memory = None

    def __repr__(self):
        state = "released" if self.released else f"{self.used_bytes}/{self.capacity_bytes} bytes"
        return f"Arena({state})"
