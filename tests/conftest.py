"""Shared test fixtures for byte-ring."""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from byte_ring.config import Config
from byte_ring.ringbuffer import RingBuffer


def _make_path_prop(path: Path):
    """Create a property that returns a fixed path."""
    return property(lambda self: path)


@pytest.fixture
def rb() -> Iterator[RingBuffer]:
    """A 5-slot buffer (4 usable), released after the test."""
    buffer = RingBuffer(5)
    yield buffer
    buffer.release()


@pytest.fixture
def config_paths(tmp_path: Path) -> Iterator[Path]:
    """Point Config's config and state directories at tmp_path."""
    config_dir = tmp_path / "config"
    state_dir = tmp_path / "state"
    with (
        patch.object(Config, "config_dir", new_callable=lambda: _make_path_prop(config_dir)),
        patch.object(
            Config, "config_path", new_callable=lambda: _make_path_prop(config_dir / "config.toml")
        ),
        patch.object(Config, "state_dir", new_callable=lambda: _make_path_prop(state_dir)),
        patch.object(
            Config, "log_path", new_callable=lambda: _make_path_prop(state_dir / "byte-ring.log")
        ),
    ):
        yield tmp_path
