"""CLI for lavarand."""

from __future__ import annotations

import json
import logging
import sys

import click

from lavarand import __version__, config
from lavarand.errors import LavarandError
from lavarand.formatting import OutputKind
from lavarand.logging_config import setup_logging
from lavarand.platform import SOURCE_NAMES

_KINDS = [k.value for k in OutputKind]


@click.group()
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="Debug logging.")
@click.option("--log-file", default=None, help="Also write log records to this file.")
def main(verbose: bool, log_file: str | None) -> None:
    """🌋 lavarand: keys, UUIDs and integers from chaotic pixels."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING, log_file)


# ────────────────────────────────────────────────────────────
# Discovery
# ────────────────────────────────────────────────────────────


@main.command()
@click.option("--camera-index", default=config.CAMERA_INDEX, show_default=True)
def scan(camera_index: int) -> None:
    """List entropy sources usable on this machine."""
    from lavarand.platform import detect_available_sources, platform_info

    info = platform_info()
    click.echo(f"Platform: {info['system']} {info['machine']} (Python {info['python']})")
    click.echo()

    sources = detect_available_sources(camera_index)
    click.echo(f"Found {len(sources)} available entropy source(s):\n")
    for src in sources:
        click.echo(f"  ✅ {src.name:<10} {src.description}")


# ────────────────────────────────────────────────────────────
# Derivation
# ────────────────────────────────────────────────────────────


@main.command()
@click.option("--kind", type=click.Choice(_KINDS), default="hex", show_default=True,
              help="Output type.")
@click.option("--min", "lo", default=config.DEFAULT_INT_MIN,
              type=click.IntRange(0, config.UINT32_MAX), show_default=True,
              help="Inclusive lower bound for --kind int.")
@click.option("--max", "hi", default=config.DEFAULT_INT_MAX,
              type=click.IntRange(0, config.UINT32_MAX), show_default=True,
              help="Inclusive upper bound for --kind int.")
@click.option("--source", "source_name", type=click.Choice(SOURCE_NAMES), default="lava",
              show_default=True)
@click.option("--count", default=1, type=click.IntRange(min=1), help="Number of derivations.")
@click.option("--warmup", default=30, type=click.IntRange(min=0), show_default=True,
              help="Simulation ticks before the first capture (lava only).")
@click.option("--width", default=config.DEFAULT_WIDTH, show_default=True)
@click.option("--height", default=config.DEFAULT_HEIGHT, show_default=True)
@click.option("--seed", default=None, type=int, help="Seed the blob layout (lava only).")
@click.option("--camera-index", default=config.CAMERA_INDEX, show_default=True)
@click.option("--show-log", is_flag=True, help="Print the capture log afterwards.")
@click.option("--json", "as_json", is_flag=True, help="Emit records as JSON lines.")
def generate(
    kind: str,
    lo: int,
    hi: int,
    source_name: str,
    count: int,
    warmup: int,
    width: int,
    height: int,
    seed: int | None,
    camera_index: int,
    show_log: bool,
    as_json: bool,
) -> None:
    """Capture the entropy surface and derive keys from it.

    Examples:

        lavarand generate --kind uuid --count 3

        lavarand generate --kind int --min 1 --max 6

        lavarand generate --source camera --json
    """
    from lavarand.pipeline import KeyGenerator
    from lavarand.platform import make_source
    from lavarand.sources.lava import LavaSource

    if kind == OutputKind.INT.value and lo > hi:
        raise click.BadParameter(f"--min {lo} is greater than --max {hi}")

    try:
        source = make_source(source_name, width, height, camera_index, seed)
    except LavarandError as e:
        _fail(e)

    with source:
        loop = source.frame_loop() if isinstance(source, LavaSource) else None
        for _ in range(warmup if loop else 0):
            loop.tick()

        gen = KeyGenerator(source)
        for _ in range(count):
            try:
                record = gen.generate(kind, (lo, hi))
            except LavarandError as e:
                _fail(e)
            if as_json:
                click.echo(json.dumps(record.to_dict()))
            else:
                click.echo(record.key)
            if loop:
                loop.tick()

    if show_log:
        _print_log(gen)


# ────────────────────────────────────────────────────────────
# Simulation
# ────────────────────────────────────────────────────────────


@main.command()
@click.option("--ticks", default=600, type=click.IntRange(min=0), show_default=True)
@click.option("--width", default=config.DEFAULT_WIDTH, show_default=True)
@click.option("--height", default=config.DEFAULT_HEIGHT, show_default=True)
@click.option("--seed", default=None, type=int)
def simulate(ticks: int, width: int, height: int, seed: int | None) -> None:
    """Run the blob simulation headless and print the final state."""
    from lavarand.simulation import LavaSimulation

    sim = LavaSimulation(seed=seed)
    sim.resize(width, height)
    for _ in range(ticks):
        sim.step()

    click.echo(f"{len(sim.blobs)} blobs on {width}x{height} after {sim.ticks} ticks\n")
    click.echo(f"{'#':>3} {'x':>8} {'y':>8} {'vx':>7} {'vy':>7} {'r':>6}  color")
    click.echo("-" * 52)
    for i, b in enumerate(sim.blobs):
        click.echo(f"{i:>3} {b.x:>8.1f} {b.y:>8.1f} {b.vx:>+7.2f} {b.vy:>+7.2f} {b.radius:>6.1f}  {b.color}")


@main.command()
@click.option("--refresh", default=1.0, type=float, help="Seconds between derivations.")
@click.option("--kind", type=click.Choice(_KINDS), default="hex", show_default=True)
@click.option("--source", "source_name", type=click.Choice(SOURCE_NAMES), default="lava",
              show_default=True)
@click.option("--fps", default=30.0, type=float, show_default=True)
def monitor(refresh: float, kind: str, source_name: str, fps: float) -> None:
    """Live dashboard: animated surface, latest digest and capture log.

    Press Ctrl+C to stop.
    """
    from lavarand.monitor import LavaMonitor

    try:
        LavaMonitor(refresh_rate=refresh, kind=kind, source_name=source_name, fps=fps).run()
    except LavarandError as e:
        _fail(e)


# ────────────────────────────────────────────────────────────
# Helpers
# ────────────────────────────────────────────────────────────


def _fail(error: LavarandError) -> None:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def _print_log(gen) -> None:
    click.echo(f"\n{'='*60}")
    click.echo(f"CAPTURE LOG ({len(gen.log)} items, newest first)")
    click.echo(f"{'='*60}")
    for rec in gen.log:
        click.echo(f"{rec.kind.value.upper():<5} {rec.timestamp:%H:%M:%S}  seed {rec.seed_preview}")
        click.echo(f"      {rec.key}")
