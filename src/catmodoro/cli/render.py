"""Rich renderables for the countdown gauge."""

from __future__ import annotations

from rich import box
from rich.align import Align
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.text import Text

from catmodoro.core.timer import ColorBand, Display

TITLE = "Catmodoro Timer"
KEY_HINT = "p pause/resume  •  q/esc quit"

BAND_COLORS: dict[ColorBand, str] = {
    ColorBand.PLENTY: "bright_magenta",
    ColorBand.HALFWAY: "bright_cyan",
    ColorBand.URGENT: "bright_red",
}


def render_gauge(display: Display, paused: bool = False, height: int | None = None) -> RenderableType:
    """Build a bordered gauge for *display* that fills *height* rows."""
    color = BAND_COLORS[display.band]
    bar = ProgressBar(
        total=100,
        completed=display.percent,
        width=None,
        complete_style=color,
        finished_style=color,
    )

    label = Text(display.label, style=f"bold {color}", justify="center")
    status = Text(
        f"PAUSED  {display.percent}%" if paused else f"{display.percent}%",
        style="dim",
        justify="center",
    )

    return Panel(
        Align.center(Group(bar, label, status), vertical="middle"),
        title=TITLE,
        subtitle=KEY_HINT,
        border_style=color,
        box=box.ROUNDED,
        height=height,
    )
