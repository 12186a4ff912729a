"""Fixed-capacity byte ring buffer."""

from byte_ring.ringbuffer import (
    BufferContents,
    BufferEmpty,
    BufferFull,
    BufferReleased,
    BufferState,
    InvalidCapacity,
    RingBuffer,
    RingBufferError,
)

__all__ = [
    "BufferContents",
    "BufferEmpty",
    "BufferFull",
    "BufferReleased",
    "BufferState",
    "InvalidCapacity",
    "RingBuffer",
    "RingBufferError",
]
