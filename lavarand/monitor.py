"""Live lava monitor: interactive TUI dashboard.

Shows:
- A downsampled view of the entropy surface
- The capture log, newest first
- A colourised dump of the latest digest
"""

from __future__ import annotations

import logging
import signal
import threading
import time
from collections import deque

import numpy as np

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from lavarand.errors import LavarandError, SourceUnavailable
from lavarand.formatting import OutputKind
from lavarand.sources.base import FrameSnapshot

logger = logging.getLogger(__name__)

# ── Sparkline characters ──
SPARK = "▁▂▃▄▅▆▇█"

_KIND_STYLE = {
    OutputKind.HEX: "bold dark_orange",
    OutputKind.UUID: "bold magenta",
    OutputKind.INT: "bold blue",
}


def _sparkline(values: list[float], width: int = 30) -> str:
    """Render a sparkline string from values."""
    if not values:
        return ""
    recent = values[-width:]
    mn, mx = min(recent), max(recent)
    rng = mx - mn if mx > mn else 1.0
    return "".join(SPARK[min(int((v - mn) / rng * 7), 7)] for v in recent)


def _hex_dump(digest: str, width: int = 16) -> Text:
    """Colorized hex dump of a digest, *width* bytes per line."""
    text = Text()
    data = bytes.fromhex(digest)
    for i, b in enumerate(data):
        if b < 32:
            style = "bright_black"
        elif b < 96:
            style = "blue"
        elif b < 160:
            style = "green"
        elif b < 224:
            style = "yellow"
        else:
            style = "red"
        text.append(f"{b:02x}", style=style)
        if (i + 1) % 2 == 0:
            text.append(" ")
        if (i + 1) % width == 0 and i < len(data) - 1:
            text.append("\n")
    return text


def _thumbnail(snapshot: FrameSnapshot, cols: int = 48, rows: int = 12) -> Text:
    """Half-block rendering: each character cell shows two vertical pixels."""
    pixels = snapshot.as_array()
    h, w = pixels.shape[:2]
    ys = np.linspace(0, h - 1, rows * 2).astype(int)
    xs = np.linspace(0, w - 1, cols).astype(int)
    small = pixels[np.ix_(ys, xs)][..., :3]

    text = Text()
    for r in range(rows):
        top, bottom = small[2 * r], small[2 * r + 1]
        for c in range(cols):
            fg = "#{:02x}{:02x}{:02x}".format(*map(int, top[c]))
            bg = "#{:02x}{:02x}{:02x}".format(*map(int, bottom[c]))
            text.append("▀", style=f"{fg} on {bg}")
        if r < rows - 1:
            text.append("\n")
    return text


class LavaMonitor:
    """Live TUI: animates the source and derives a key every *refresh_rate* seconds."""

    def __init__(
        self,
        refresh_rate: float = 1.0,
        kind: OutputKind | str = OutputKind.HEX,
        source_name: str = "lava",
        fps: float = 30.0,
    ):
        self.refresh_rate = refresh_rate
        self.kind = OutputKind(kind)
        self.source_name = source_name
        self.fps = fps
        self.console = Console()
        self._stop = threading.Event()

        # State
        self._generator = None
        self._first_bytes: deque = deque(maxlen=60)
        self._misses = 0
        self._start_time = 0.0
        self._last_error = ""

    def _build_log_table(self) -> Table:
        table = Table(
            title="🔑 Generated Keys",
            show_header=True,
            header_style="bold cyan",
            border_style="bright_black",
            expand=True,
            padding=(0, 1),
        )
        table.add_column("Type", ratio=1, no_wrap=True)
        table.add_column("Time", ratio=1, no_wrap=True)
        table.add_column("Key", ratio=5)
        table.add_column("Seed", ratio=2, style="bright_black")

        if self._generator is None or not len(self._generator.log):
            table.add_row("", "", Text("No keys generated yet.", style="dim"), "")
            return table

        for rec in self._generator.log:
            table.add_row(
                Text(rec.kind.value.upper(), style=_KIND_STYLE[rec.kind]),
                f"{rec.timestamp:%H:%M:%S}",
                rec.key,
                rec.seed_preview,
            )
        return table

    def _build_surface_panel(self) -> Panel:
        snap = self._generator.source.get_snapshot() if self._generator else None
        if snap is None:
            body = Text("[surface unavailable]", style="dim")
        else:
            body = _thumbnail(snap)
        return Panel(body, title=f"🌋 {self.source_name}", border_style="dark_orange")

    def _build_digest_panel(self) -> Panel:
        digest = self._generator.last_digest if self._generator else None
        if digest:
            text = _hex_dump(digest)
        else:
            text = Text("[waiting for first capture...]", style="dim")
        text.append("\n\n")
        text.append(_sparkline(list(self._first_bytes), width=40), style="cyan")
        if self._last_error:
            text.append(f"\n{self._last_error}", style="red")
        return Panel(text, title="🔬 Latest SHA-256", border_style="magenta")

    def _build_layout(self) -> Layout:
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=8),
        )

        elapsed = time.monotonic() - self._start_time if self._start_time else 0
        status = self._generator.status() if self._generator else {}
        header = Text()
        header.append("  🌋 LAVARAND MONITOR", style="bold magenta")
        header.append(f"  │  {status.get('derivations', 0)} derivations", style="cyan")
        header.append(f"  │  {self._misses} misses", style="cyan")
        header.append(f"  │  uptime {int(elapsed)}s", style="dim")
        header.append("  │  [Ctrl+C] quit", style="bright_black")
        layout["header"].update(Panel(header, border_style="bright_black"))

        layout["body"].split_row(
            Layout(self._build_surface_panel(), name="surface", ratio=1),
            Layout(self._build_log_table(), name="log", ratio=2),
        )
        layout["footer"].update(self._build_digest_panel())
        return layout

    def _derive_cycle(self) -> None:
        """Run one derivation."""
        try:
            self._generator.generate(self.kind)
        except SourceUnavailable as e:
            self._misses += 1
            self._last_error = str(e)
            return
        self._last_error = ""
        self._first_bytes.append(int(self._generator.last_digest[:2], 16))

    def run(self) -> None:
        """Run the live monitor."""
        from lavarand.pipeline import KeyGenerator
        from lavarand.platform import make_source
        from lavarand.sources.lava import LavaSource

        source = make_source(self.source_name)
        self._generator = KeyGenerator(source)
        loop = source.frame_loop(self.fps) if isinstance(source, LavaSource) else None

        self.console.clear()
        self._start_time = time.monotonic()

        def _deriver():
            while not self._stop.is_set():
                try:
                    self._derive_cycle()
                except LavarandError as e:
                    logger.error("derivation failed: %s", e)
                    self._last_error = str(e)
                self._stop.wait(self.refresh_rate)

        deriver = threading.Thread(target=_deriver, daemon=True)

        def _sigint(sig, frame):
            self._stop.set()

        old_handler = signal.signal(signal.SIGINT, _sigint)

        try:
            if loop:
                loop.start()
            deriver.start()
            with Live(
                self._build_layout(),
                console=self.console,
                refresh_per_second=4,
                screen=True,
            ) as live:
                while not self._stop.is_set():
                    live.update(self._build_layout())
                    self._stop.wait(0.25)
        except KeyboardInterrupt:
            pass
        finally:
            self._stop.set()
            if loop:
                loop.cancel()
            source.close()
            signal.signal(signal.SIGINT, old_handler)
            self.console.clear()
            self.console.print("[green]Monitor stopped.[/]")
            elapsed = time.monotonic() - self._start_time
            self.console.print(f"  Derivations: {self._generator.status()['derivations']}")
            self.console.print(f"  Misses: {self._misses}")
            self.console.print(f"  Uptime: {elapsed:.0f}s")
