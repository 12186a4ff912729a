"""Tests for CLI commands."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog
from click.testing import CliRunner

from byte_ring.cli import main
from byte_ring.config import BufferConfig, Config, LoggingConfig


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """demo configures logging; put the root logger back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


def popped(output: str) -> list[int]:
    """Extract the values from 'Popped: N' lines."""
    return [int(line.split(":")[1]) for line in output.splitlines() if line.startswith("Popped:")]


class TestDemoCommand:
    """Tests for the demo command."""

    def test_default_two_push_drain(self, runner: CliRunner, config_paths: Path) -> None:
        """demo with no arguments pushes 10 and 20 and drains them."""
        result = runner.invoke(main, ["demo", "--quiet"])

        assert result.exit_code == 0
        assert result.output.splitlines() == ["Popped: 10", "Popped: 20"]

    def test_reports_full(self, runner: CliRunner, config_paths: Path) -> None:
        """Values beyond usable capacity are reported and dropped."""
        result = runner.invoke(main, ["demo", "-c", "3", "1", "2", "3"])

        assert result.exit_code == 0
        assert "Buffer full" in result.output
        assert "dropped 3" in result.output
        assert popped(result.output) == [1, 2]
        assert "Buffer released" in result.output

    def test_capacity_from_config(self, runner: CliRunner, config_paths: Path) -> None:
        """Without --capacity the configured capacity is used."""
        Config(buffer=BufferConfig(capacity=3)).save()

        result = runner.invoke(main, ["demo", "-q", "7", "8", "9"])

        assert result.exit_code == 0
        assert popped(result.output) == [7, 8]

    def test_writes_log_file(self, runner: CliRunner, config_paths: Path) -> None:
        """demo writes structured events to the log file."""
        result = runner.invoke(main, ["demo", "-q"])

        assert result.exit_code == 0
        for handler in logging.getLogger().handlers:
            handler.flush()
        content = Config().log_path.read_text()
        assert "demo_started" in content
        assert "demo_finished" in content

    @pytest.mark.parametrize("capacity", ["0", "1"])
    def test_rejects_degenerate_capacity(
        self, runner: CliRunner, config_paths: Path, capacity: str
    ) -> None:
        result = runner.invoke(main, ["demo", "--capacity", capacity])

        assert result.exit_code == 2
        assert "capacity must be >= 2" in result.output

    def test_rejects_out_of_range_value(self, runner: CliRunner, config_paths: Path) -> None:
        result = runner.invoke(main, ["demo", "256"])

        assert result.exit_code == 2

    def test_invalid_config_file(self, runner: CliRunner, config_paths: Path) -> None:
        """A broken config file is reported as an error, not a traceback."""
        config_path = Config().config_path
        config_path.parent.mkdir(parents=True)
        config_path.write_text("[buffer]\ncapacity = 1\n")

        result = runner.invoke(main, ["demo"])

        assert result.exit_code == 1
        assert "capacity must be >= 2" in result.output


class TestConfigCommand:
    """Tests for the config command group."""

    def test_config_show_defaults(self, runner: CliRunner, config_paths: Path) -> None:
        """config show displays default values when no config file exists."""
        result = runner.invoke(main, ["config", "show"])

        assert result.exit_code == 0
        assert "Config file:" in result.output
        assert "Exists: False" in result.output
        defaults = Config()
        assert "[buffer]" in result.output
        assert f"capacity = {defaults.buffer.capacity}" in result.output
        assert "[logging]" in result.output
        assert f"level = {defaults.logging.level}" in result.output

    def test_config_show_custom_values(self, runner: CliRunner, config_paths: Path) -> None:
        """config show displays custom values from config file."""
        Config(
            buffer=BufferConfig(capacity=128),
            logging=LoggingConfig(level="debug", log_backup_count=7),
        ).save()

        result = runner.invoke(main, ["config", "show"])

        assert result.exit_code == 0
        assert "Exists: True" in result.output
        assert "capacity = 128" in result.output
        assert "level = debug" in result.output
        assert "log_backup_count = 7" in result.output

    def test_config_edit_creates_default(self, runner: CliRunner, config_paths: Path) -> None:
        """config edit creates default config if it doesn't exist."""
        config_path = Config().config_path

        with (
            patch("subprocess.run") as mock_run,
            patch.dict("os.environ", {"EDITOR": "vim"}),
        ):
            result = runner.invoke(main, ["config", "edit"])

        assert result.exit_code == 0
        assert f"Created default config at {config_path}" in result.output
        assert config_path.exists()
        mock_run.assert_called_once_with(["vim", str(config_path)])

    def test_config_edit_opens_invalid_config(
        self, runner: CliRunner, config_paths: Path
    ) -> None:
        """config edit opens a file that fails validation so it can be fixed."""
        config_path = Config().config_path
        config_path.parent.mkdir(parents=True)
        config_path.write_text("[buffer]\ncapacity = 1\n")

        with (
            patch("subprocess.run") as mock_run,
            patch.dict("os.environ", {"EDITOR": "vim"}),
        ):
            result = runner.invoke(main, ["config", "edit"])

        assert result.exit_code == 0
        assert "Created default config" not in result.output
        assert config_path.read_text() == "[buffer]\ncapacity = 1\n"
        mock_run.assert_called_once_with(["vim", str(config_path)])

    @pytest.mark.parametrize(
        "content",
        ["buffer = 5\n", "[logging]\nlog_max_bytes = \"big\"\n"],
    )
    def test_config_show_invalid_types(
        self, runner: CliRunner, config_paths: Path, content: str
    ) -> None:
        """Wrongly typed settings are a clean error, not a traceback."""
        config_path = Config().config_path
        config_path.parent.mkdir(parents=True)
        config_path.write_text(content)

        result = runner.invoke(main, ["config", "show"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error:" in result.output

    def test_config_reset_with_confirmation(self, runner: CliRunner, config_paths: Path) -> None:
        """config reset writes defaults when user confirms."""
        Config(buffer=BufferConfig(capacity=999)).save()

        result = runner.invoke(main, ["config", "reset", "--yes"])

        assert result.exit_code == 0
        assert "Config reset to defaults" in result.output
        assert Config.load().buffer.capacity == BufferConfig().capacity

    def test_config_reset_aborted(self, runner: CliRunner, config_paths: Path) -> None:
        """config reset leaves the file alone when the user declines."""
        Config(buffer=BufferConfig(capacity=999)).save()

        result = runner.invoke(main, ["config", "reset"], input="n\n")

        assert result.exit_code == 1
        assert Config.load().buffer.capacity == 999
