"""Configuration system for byte-ring."""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path

import tomlkit

from byte_ring.ringbuffer import MIN_CAPACITY

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class BufferConfig:
    """Ring buffer configuration."""

    capacity: int = 5  # Total slots; one is always kept free, so 4 usable


@dataclass
class LoggingConfig:
    """Log file configuration."""

    level: str = "info"
    # Log file rotation
    log_max_bytes: int = 1024 * 1024  # Max log file size (1MB)
    log_backup_count: int = 3  # Number of backup log files to keep


def _dataclass_to_table(obj: object) -> tomlkit.items.Table:
    """Convert a dataclass instance to a tomlkit Table recursively."""
    table = tomlkit.table()
    for f in fields(obj):  # type: ignore[arg-type]
        value = getattr(obj, f.name)
        if is_dataclass(value) and not isinstance(value, type):
            table.add(f.name, _dataclass_to_table(value))
        else:
            table.add(f.name, value)
    return table


@dataclass
class Config:
    """Main configuration container."""

    buffer: BufferConfig = field(default_factory=BufferConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def config_dir(self) -> Path:
        """Configuration directory."""
        return Path.home() / ".config" / "byte-ring"

    @property
    def config_path(self) -> Path:
        """Path to config file."""
        return self.config_dir / "config.toml"

    @property
    def state_dir(self) -> Path:
        """State directory for logs."""
        return Path.home() / ".local" / "state" / "byte-ring"

    @property
    def log_path(self) -> Path:
        """JSON Lines log path."""
        return self.state_dir / "byte-ring.log"

    def save(self, path: Path | None = None) -> None:
        """Save config to TOML file."""
        path = path or self.config_path
        path.parent.mkdir(parents=True, exist_ok=True)

        doc = tomlkit.document()
        for name in ("buffer", "logging"):
            doc.add(name, _dataclass_to_table(getattr(self, name)))
            doc.add(tomlkit.nl())

        path.write_text(tomlkit.dumps(doc))

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load config from TOML file, returning defaults for missing values.

        Raises:
            ValueError: If the file cannot be parsed or holds invalid values.
        """
        defaults = cls()
        path = path or defaults.config_path
        if not path.exists():
            return defaults

        try:
            with open(path) as f:
                data = tomlkit.load(f)
        except tomlkit.exceptions.TOMLKitError as e:
            raise ValueError(f"Failed to parse config file {path}: {e}") from e

        return cls(
            buffer=_load_buffer_config(_section(data, "buffer")),
            logging=_load_logging_config(_section(data, "logging")),
        )


def _section(data: Mapping, name: str) -> Mapping:
    """Return a TOML table by name, or an empty mapping if it is absent."""
    section = data.get(name, {})
    if not isinstance(section, Mapping):
        raise ValueError(f"[{name}] must be a table, got {section!r}")
    return section


def _require_int(value: object, name: str, minimum: int) -> int:
    """Validate an integer setting (bools rejected) against a lower bound."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return int(value)


def _load_buffer_config(data: Mapping) -> BufferConfig:
    """Load buffer config from TOML data, using dataclass defaults for missing fields."""
    defaults = BufferConfig()
    capacity = _require_int(
        data.get("capacity", defaults.capacity), "buffer.capacity", MIN_CAPACITY
    )
    return BufferConfig(capacity=capacity)


def _load_logging_config(data: Mapping) -> LoggingConfig:
    """Load logging config from TOML data."""
    d = LoggingConfig()
    level = data.get("level", d.level)

    if not isinstance(level, str):
        raise ValueError(f"logging.level must be a string, got {level!r}")
    level = str(level).lower()
    if level not in LOG_LEVELS:
        raise ValueError(f"Invalid logging.level: {level!r}. Must be one of {LOG_LEVELS}")

    return LoggingConfig(
        level=level,
        log_max_bytes=_require_int(
            data.get("log_max_bytes", d.log_max_bytes), "logging.log_max_bytes", 1
        ),
        log_backup_count=_require_int(
            data.get("log_backup_count", d.log_backup_count), "logging.log_backup_count", 1
        ),
    )
