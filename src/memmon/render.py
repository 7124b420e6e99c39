"""Text rendering of memory reports as rich markup."""

import math
from collections.abc import Sequence
from enum import Enum

from rich.console import Console
from rich.markup import escape

from memmon.aggregate import total_memory
from memmon.models import AppUsage, MemorySnapshot

SYSTEM_BAR_WIDTH = 50
NAME_WIDTH = 30

FILLED = "█"
EMPTY = "░"

GIB = 1024**3
MIB = 1024**2


class Pressure(Enum):
    """Memory pressure categories for the system-wide used percentage."""

    NORMAL = "normal"
    MODERATE = "moderate"
    HIGH = "high"


class AppLoad(Enum):
    """Categories for an application's share of total memory."""

    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


PRESSURE_STYLES = {
    Pressure.NORMAL: ("green", "Normal ✓"),
    Pressure.MODERATE: ("yellow", "Moderate"),
    Pressure.HIGH: ("red", "High ⚠"),
}

APP_LOAD_COLORS = {
    AppLoad.LIGHT: "green",
    AppLoad.MEDIUM: "yellow",
    AppLoad.HEAVY: "red",
}


def percent(part: int, whole: int) -> float:
    """Return part as a percentage of whole."""
    if whole <= 0:
        raise ValueError(f"whole must be positive, got {whole}")
    return part / whole * 100


def system_bar_segments(used_percent: float) -> tuple[int, int]:
    """Split the fixed-width system bar into (filled, empty) segment counts."""
    filled = math.floor(used_percent / 100 * SYSTEM_BAR_WIDTH)
    filled = min(max(filled, 0), SYSTEM_BAR_WIDTH)
    return filled, SYSTEM_BAR_WIDTH - filled


def app_bar_width(percent_of_total: float) -> int:
    """Two segments per percent of total memory, without an upper bound."""
    return max(math.floor(percent_of_total * 2), 0)


def pressure_for(used_percent: float) -> Pressure:
    """Categorize the system-wide used percentage."""
    if used_percent < 70.0:
        return Pressure.NORMAL
    if used_percent < 85.0:
        return Pressure.MODERATE
    return Pressure.HIGH


def app_load_for(percent_of_total: float) -> AppLoad:
    """Categorize an application's share of total memory."""
    if percent_of_total > 2.0:
        return AppLoad.HEAVY
    if percent_of_total > 1.0:
        return AppLoad.MEDIUM
    return AppLoad.LIGHT


def truncate_name(name: str, width: int = NAME_WIDTH) -> str:
    """Shorten names longer than width, ending them with '...'."""
    if len(name) <= width:
        return name
    return name[: width - 3] + "..."


def _banner(width: int) -> str:
    return f"[blue]{'=' * width}[/blue]"


def render_system_memory(snapshot: MemorySnapshot) -> list[str]:
    """Render the system memory summary as a list of markup lines."""
    total_gb = snapshot.total / GIB
    used_gb = snapshot.used / GIB
    free_gb = snapshot.free / GIB
    available_gb = snapshot.available / GIB

    used_percent = percent(snapshot.used, snapshot.total)
    free_percent = percent(snapshot.free, snapshot.total)
    available_percent = percent(snapshot.available, snapshot.total)

    filled, empty = system_bar_segments(used_percent)
    color, label = PRESSURE_STYLES[pressure_for(used_percent)]

    bar = f"[[red]{FILLED * filled}[/red][white]{EMPTY * empty}[/white]]"

    return [
        _banner(60),
        f"[bold white]{'Memory Usage':^60}[/bold white]",
        _banner(60),
        "",
        f"Total memory: [bold green]{total_gb:.1f}[/bold green] GB",
        "",
        "Breakdown:",
        f"  Used:        {used_gb:>8.1f} GB ({used_percent:>5.1f}%)",
        f"  Free:        {free_gb:>8.1f} GB ({free_percent:>5.1f}%)",
        f"  Available:   {available_gb:>8.1f} GB ({available_percent:>5.1f}%)",
        "",
        f"Used: {used_gb:.1f} GB ({used_percent:.1f}%)",
        f"Free: {free_gb:.1f} GB ({free_percent:.1f}%)",
        "",
        "Memory usage:",
        bar,
        f"{' ' * filled}{used_percent:.1f}%",
        "",
        f"Memory pressure: [{color}]{label}[/{color}]",
        _banner(60),
    ]


def render_app_memory(usages: Sequence[AppUsage], total: int, top: int) -> list[str]:
    """
    Render the per-application table as a list of markup lines.

    Args:
        usages: Application groups, already sorted largest first.
        total: Total system memory in bytes, the baseline for percentages.
        top: Maximum number of rows to show.

    The totals row covers every group in usages, not only the rows shown.
    """
    lines = [
        "",
        _banner(70),
        f"[bold white]{'Memory Usage by Application':^70}[/bold white]",
        _banner(70),
        "",
        f"{'Application':<{NAME_WIDTH}} {'Memory':>13} {'Usage':>9} Graph",
        "-" * 70,
    ]

    for usage in usages[:top]:
        memory_mb = usage.memory / MIB
        memory_percent = percent(usage.memory, total)
        color = APP_LOAD_COLORS[app_load_for(memory_percent)]
        bar = FILLED * app_bar_width(memory_percent)
        # Pad before escaping so markup escapes do not count toward the width
        name = escape(f"{truncate_name(usage.name):<{NAME_WIDTH}}")
        lines.append(
            f"{name} {memory_mb:>10.0f} MB {memory_percent:>8.1f}% [{color}]{bar}[/{color}]"
        )

    total_used = total_memory(usages)
    lines.extend(
        [
            "-" * 70,
            f"{'Total':<{NAME_WIDTH}} {total_used / MIB:>10.0f} MB "
            f"{percent(total_used, total):>8.1f}%",
            _banner(70),
        ]
    )
    return lines


def print_lines(console: Console, lines: Sequence[str]) -> None:
    """Print markup lines without re-wrapping them to the terminal width.

    Emoji codes are left alone so names such as "x:fire:y" print verbatim.
    """
    for line in lines:
        console.print(line, soft_wrap=True, emoji=False)
