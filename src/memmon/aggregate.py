"""Grouping of process memory by application name."""

import logging
from collections.abc import Iterable

from memmon.models import AppUsage, ProcessRecord

logger = logging.getLogger(__name__)

# Ordered (pattern, replacement) pairs. Each is an unanchored literal
# replacement of every occurrence, applied to the result of the previous one.
NORMALIZE_RULES: tuple[tuple[str, str], ...] = (
    (".app", ""),
    (" Helper", ""),
    (" (Renderer)", ""),
    (" (GPU)", ""),
    ("com.docker.", "Docker "),
    ("com.apple.", ""),
)


def normalize_name(raw: str) -> str:
    """
    Map a raw process name to an application name.

    Helper, renderer and GPU sub-processes collapse onto their parent
    application, vendor prefixes are rewritten, and path-like names are
    reduced to their last component.
    """
    name = raw
    for pattern, replacement in NORMALIZE_RULES:
        name = name.replace(pattern, replacement)

    if "/" in name:
        name = name.rsplit("/", 1)[-1]
    return name


def aggregate(records: Iterable[ProcessRecord]) -> list[AppUsage]:
    """
    Sum process memory per normalized application name.

    Returns the groups sorted by memory, largest first. Groups with equal
    memory stay in the order they were first seen.
    """
    totals: dict[str, int] = {}
    for record in records:
        key = normalize_name(record.name)
        totals[key] = totals.get(key, 0) + record.memory

    logger.debug("Aggregated processes into %d application groups", len(totals))

    usages = [AppUsage(name=name, memory=memory) for name, memory in totals.items()]
    return sorted(usages, key=lambda usage: usage.memory, reverse=True)


def total_memory(usages: Iterable[AppUsage]) -> int:
    """Sum of memory across all application groups."""
    return sum(usage.memory for usage in usages)
