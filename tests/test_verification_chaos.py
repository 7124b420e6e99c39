"""Verification Test: Chaos Monkey - process churn while listing processes.

Processes are started and terminated while the collector walks the process
table. Listing must never fail because a process vanished, became a zombie,
or denied access mid-scan.
"""

import multiprocessing
import random
import time

import pytest

from memmon.aggregate import aggregate, total_memory
from memmon.models import ProcessRecord
from memmon.monitor import MemoryCollector


def dummy_worker(duration: float = 60.0) -> None:
    """A dummy worker process that sleeps for a given duration."""
    try:
        time.sleep(duration)
    except (KeyboardInterrupt, SystemExit):
        pass


def _cleanup(processes: list[multiprocessing.Process]) -> None:
    for p in processes:
        if p.is_alive():
            p.terminate()
    for p in processes:
        p.join(timeout=1.0)


class TestChaosMonkey:
    """Chaos Monkey verification suite tests."""

    def test_listing_survives_process_termination(self):
        """
        Test that listing does not crash when processes die between scans.

        Half of the spawned workers are terminated one by one, with a full
        scan of the process table after each termination.
        """
        processes = []
        for _ in range(20):
            p = multiprocessing.Process(target=dummy_worker, args=(60.0,))
            p.start()
            processes.append(p)

        collector = MemoryCollector()

        try:
            for p in random.sample(processes, 10):
                p.terminate()
                try:
                    records = collector.list_processes()
                except Exception as e:
                    pytest.fail(f"list_processes raised during churn: {e}")
                assert all(isinstance(record, ProcessRecord) for record in records)
        finally:
            _cleanup(processes)

    def test_rapid_process_creation_and_termination(self):
        """
        Test collector stability during rapid process churn.

        Workers are created and destroyed continuously while the process
        table is scanned and aggregated over and over.
        """
        collector = MemoryCollector()
        processes = []
        scans = 0

        try:
            start_time = time.time()
            while time.time() - start_time < 2.0:
                for _ in range(3):
                    p = multiprocessing.Process(target=dummy_worker, args=(10.0,))
                    p.start()
                    processes.append(p)

                alive = [p for p in processes if p.is_alive()]
                if len(alive) > 6:
                    for p in random.sample(alive, 3):
                        p.terminate()

                records = collector.list_processes()
                usages = aggregate(records)
                assert total_memory(usages) == sum(record.memory for record in records)
                scans += 1

            assert scans > 0
        finally:
            _cleanup(processes)

    def test_terminated_process_not_fatal(self):
        """Test listing right after a child has exited and been reaped."""
        p = multiprocessing.Process(target=dummy_worker, args=(60.0,))
        p.start()
        time.sleep(0.1)
        p.terminate()
        p.join(timeout=1.0)

        records = MemoryCollector().list_processes()

        assert isinstance(records, list)
        assert len(records) > 0

    def test_zombie_process_handling(self):
        """
        Test that listing handles zombie processes gracefully.

        A child that exits before its parent waits for it stays a zombie
        until joined.
        """
        p = multiprocessing.Process(target=dummy_worker, args=(0.1,))
        p.start()

        try:
            time.sleep(0.3)
            records = MemoryCollector().list_processes()
            assert isinstance(records, list)
        finally:
            p.join(timeout=1.0)
