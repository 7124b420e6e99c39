"""Memory snapshot collection for memmon."""

import logging

import psutil

from memmon.models import MemorySnapshot, ProcessRecord

logger = logging.getLogger(__name__)


class MemoryCollector:
    """
    Collects system memory counters and the process table using psutil.

    Each call queries the OS afresh and returns immutable values; the
    collector itself keeps no state between calls. Handles NoSuchProcess,
    AccessDenied and ZombieProcess errors by skipping the affected process.
    """

    # Attributes to fetch per process
    PROCESS_ATTRS = ["name", "memory_info"]

    def get_system_snapshot(self) -> MemorySnapshot:
        """Read the system-wide memory counters."""
        mem = psutil.virtual_memory()
        snapshot = MemorySnapshot(
            total=mem.total,
            used=mem.used,
            free=mem.free,
            available=mem.available,
        )
        logger.debug(
            "Memory snapshot: total=%d used=%d free=%d available=%d",
            snapshot.total,
            snapshot.used,
            snapshot.free,
            snapshot.available,
        )
        return snapshot

    def list_processes(self) -> list[ProcessRecord]:
        """
        Collect the name and resident memory of every running process.

        Uses psutil.process_iter() with oneshot() context manager for efficiency.
        """
        records: list[ProcessRecord] = []
        skipped = 0

        for proc in psutil.process_iter(attrs=self.PROCESS_ATTRS):
            try:
                with proc.oneshot():
                    info = proc.info

                    # Get memory RSS, defaulting to 0 if unavailable
                    mem_info = info.get("memory_info")
                    memory = mem_info.rss if mem_info else 0

                    records.append(
                        ProcessRecord(
                            name=info.get("name") or "",
                            memory=memory,
                        )
                    )

            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                # Process died mid-scan, access denied, or zombie
                skipped += 1
                continue

        logger.debug("Collected %d processes (%d skipped)", len(records), skipped)
        return records
