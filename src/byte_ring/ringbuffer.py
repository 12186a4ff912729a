# src/byte_ring/ringbuffer.py
"""Fixed-capacity ring buffer for single bytes.

Storage is allocated once and never resized. One slot is always left
unused so that full and empty can be told apart from the two cursors
alone: a buffer of capacity C holds at most C - 1 bytes.
"""

import logging
from dataclasses import dataclass
from enum import Enum

import structlog

# Backed by a stdlib logger: silent until the application configures logging
log = structlog.wrap_logger(
    logging.getLogger(__name__), wrapper_class=structlog.stdlib.BoundLogger
)

MIN_CAPACITY = 2


class RingBufferError(Exception):
    """Base class for ring buffer errors."""

    pass


class BufferFull(RingBufferError):
    """Raised when pushing into a buffer with no free slot."""

    pass


class BufferEmpty(RingBufferError):
    """Raised when popping from a buffer with no element."""

    pass


class InvalidCapacity(RingBufferError, ValueError):
    """Raised when a buffer is initialized with fewer than two slots."""

    pass


class BufferReleased(RingBufferError):
    """Raised when a released buffer is used without re-initializing it."""

    pass


class BufferState(Enum):
    """Lifecycle state of a RingBuffer."""

    READY = "ready"
    RELEASED = "released"


@dataclass(frozen=True)
class BufferContents:
    """Immutable snapshot of a buffer's storage and cursors."""

    capacity: int
    head: int
    tail: int
    storage: bytes

    @property
    def data(self) -> bytes:
        """Occupied bytes in pop order."""
        if self.head >= self.tail:
            return self.storage[self.tail : self.head]
        return self.storage[self.tail :] + self.storage[: self.head]


class RingBuffer:
    """Ring buffer of bytes with push at head and pop at tail.

    Push and pop are O(1). A failed push or pop leaves the buffer untouched.
    Not thread-safe: concurrent callers must serialize access themselves.
    """

    def __init__(self, capacity: int) -> None:
        self._storage: bytearray | None = None
        self._head = 0
        self._tail = 0
        self._capacity = 0
        self._state = BufferState.RELEASED
        self.initialize(capacity)

    def initialize(self, capacity: int) -> None:
        """Allocate storage for `capacity` slots and reset both cursors.

        Only valid on a released buffer; the constructor calls this once.

        Raises:
            InvalidCapacity: If capacity is not an int of at least 2.
            RingBufferError: If the buffer is still ready.
        """
        if self._state is BufferState.READY:
            raise RingBufferError("Buffer already initialized; release it first")
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise InvalidCapacity(f"capacity must be an int, got {type(capacity).__name__}")
        if capacity < MIN_CAPACITY:
            raise InvalidCapacity(f"capacity must be >= {MIN_CAPACITY}, got {capacity}")

        self._storage = bytearray(capacity)
        self._head = 0
        self._tail = 0
        self._capacity = capacity
        self._state = BufferState.READY
        log.debug("ring_buffer_initialized", capacity=capacity)

    def __len__(self) -> int:
        """Return number of bytes currently stored."""
        if self._state is BufferState.RELEASED:
            return 0
        return (self._head - self._tail + self._capacity) % self._capacity

    def __enter__(self) -> "RingBuffer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        return (
            f"RingBuffer(capacity={self._capacity}, head={self._head}, "
            f"tail={self._tail}, state={self._state.value})"
        )

    @property
    def state(self) -> BufferState:
        """Current lifecycle state."""
        return self._state

    @property
    def capacity(self) -> int:
        """Total slots, including the one kept free."""
        return self._capacity

    @property
    def usable_capacity(self) -> int:
        """Maximum number of bytes the buffer can hold at once."""
        return max(self._capacity - 1, 0)

    @property
    def free_space(self) -> int:
        """Number of bytes that can still be pushed."""
        return self.usable_capacity - len(self)

    @property
    def head(self) -> int:
        """Index of the next slot to write."""
        return self._head

    @property
    def tail(self) -> int:
        """Index of the oldest stored byte."""
        return self._tail

    @property
    def is_empty(self) -> bool:
        """Return True if head == tail."""
        return self._head == self._tail

    @property
    def is_full(self) -> bool:
        """Return True if one more push would raise BufferFull."""
        if self._state is BufferState.RELEASED:
            return False
        return self._advance(self._head) == self._tail

    def _advance(self, index: int) -> int:
        nxt = index + 1
        if nxt >= self._capacity:
            nxt = 0
        return nxt

    def _require_ready(self) -> bytearray:
        if self._state is BufferState.RELEASED or self._storage is None:
            raise BufferReleased("Buffer has been released; call initialize() before use")
        return self._storage

    def push(self, value: int) -> None:
        """Write one byte at head.

        Raises:
            BufferFull: If advancing head would reach tail. Nothing is written.
            ValueError: If value is not an int in 0..255.
            BufferReleased: If the buffer has been released.
        """
        storage = self._require_ready()
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFF:
            raise ValueError(f"value must be a byte (0..255), got {value!r}")

        nxt = self._advance(self._head)
        if nxt == self._tail:
            raise BufferFull(f"Buffer full ({self.usable_capacity} bytes)")
        storage[self._head] = value
        self._head = nxt

    def pop(self) -> int:
        """Remove and return the oldest byte.

        The vacated slot keeps its old value until it is overwritten.

        Raises:
            BufferEmpty: If head == tail.
            BufferReleased: If the buffer has been released.
        """
        storage = self._require_ready()
        if self._head == self._tail:
            raise BufferEmpty("Buffer empty")
        value = storage[self._tail]
        self._tail = self._advance(self._tail)
        return value

    def release(self) -> None:
        """Drop storage and zero the cursors. Safe to call more than once."""
        if self._state is BufferState.RELEASED:
            return
        self._storage = None
        self._head = 0
        self._tail = 0
        self._capacity = 0
        self._state = BufferState.RELEASED
        log.debug("ring_buffer_released")

    def freeze(self) -> BufferContents:
        """Return immutable copy of storage and cursors."""
        storage = self._require_ready()
        return BufferContents(
            capacity=self._capacity,
            head=self._head,
            tail=self._tail,
            storage=bytes(storage),
        )
