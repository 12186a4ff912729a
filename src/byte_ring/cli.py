"""CLI commands for byte-ring."""

import click


def _load_config():
    """Load config, turning invalid files into a CLI error."""
    from byte_ring.config import Config

    try:
        return Config.load()
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(package_name="byte-ring")
def main() -> None:
    """Fixed-capacity byte ring buffer."""
    pass


@main.command()
@click.argument("values", nargs=-1, type=click.IntRange(0, 255))
@click.option("--capacity", "-c", type=int, default=None, help="Total slots (one stays free)")
@click.option("--quiet", "-q", is_flag=True, help="Only print popped values")
def demo(values: tuple[int, ...], capacity: int | None, quiet: bool) -> None:
    """Push VALUES into a buffer, then pop until it is empty.

    With no VALUES, pushes 10 and 20. Capacity defaults to the config (5).
    """
    from byte_ring import logging as console
    from byte_ring.ringbuffer import BufferEmpty, BufferFull, InvalidCapacity, RingBuffer

    cfg = _load_config()
    console.configure(cfg)
    log = console.get_structlog()

    if capacity is None:
        capacity = cfg.buffer.capacity
    if not values:
        values = (10, 20)

    try:
        rb = RingBuffer(capacity)
    except InvalidCapacity as e:
        raise click.BadParameter(str(e), param_hint="--capacity") from e

    with rb:
        if not quiet:
            console.buffer_created(rb.capacity)
        log.info("demo_started", capacity=rb.capacity, values=list(values))

        dropped = 0
        for value in values:
            try:
                rb.push(value)
            except BufferFull:
                dropped += 1
                if not quiet:
                    console.buffer_full(value)
                continue
            if not quiet:
                console.byte_pushed(value, len(rb), rb.usable_capacity)

        while True:
            try:
                value = rb.pop()
            except BufferEmpty:
                break
            click.echo(f"Popped: {value}")

        if not quiet:
            console.buffer_drained()
        log.info("demo_finished", pushed=len(values) - dropped, dropped=dropped)

    if not quiet:
        console.buffer_released()


@main.group()
def config() -> None:
    """Manage configuration."""
    pass


@config.command("show")
def config_show() -> None:
    """Display current configuration."""
    cfg = _load_config()

    click.echo(f"Config file: {cfg.config_path}")
    click.echo(f"Exists: {cfg.config_path.exists()}")
    click.echo()
    click.echo("[buffer]")
    click.echo(f"  capacity = {cfg.buffer.capacity}")
    click.echo()
    click.echo("[logging]")
    click.echo(f"  level = {cfg.logging.level}")
    click.echo(f"  log_max_bytes = {cfg.logging.log_max_bytes}")
    click.echo(f"  log_backup_count = {cfg.logging.log_backup_count}")
    click.echo()
    click.echo(f"Log file: {cfg.log_path}")


@config.command("edit")
def config_edit() -> None:
    """Open config file in editor."""
    import os
    import subprocess

    from byte_ring.config import Config

    # Not Config.load(): the file may not validate yet
    cfg = Config()

    # Create config if it doesn't exist
    if not cfg.config_path.exists():
        cfg.save()
        click.echo(f"Created default config at {cfg.config_path}")

    editor = os.environ.get("EDITOR", "nano")
    subprocess.run([editor, str(cfg.config_path)])


@config.command("reset")
@click.confirmation_option(prompt="Reset config to defaults?")
def config_reset() -> None:
    """Reset configuration to defaults."""
    from byte_ring.config import Config

    cfg = Config()
    cfg.save()
    click.echo(f"Config reset to defaults at {cfg.config_path}")


if __name__ == "__main__":
    main()
