"""Kernel counter builder."""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from procinspect.config import InspectorConfig
from procinspect.models import KernelCounters
from procinspect.reader import read_pseudo_file
from procinspect.tokenizer import DIGITS, Cursor, next_token, parse_int

logger = logging.getLogger(__name__)

COUNTER_LABELS = ("intr", "ctxt", "processes")


def is_pid_name(name: str) -> bool:
    """Check if a directory entry name is all decimal digits."""
    return bool(name) and all(char in DIGITS for char in name)


def iter_task_dirs(proc_root: Path) -> Iterator[os.DirEntry[str]]:
    """
    Yield the numeric entries of a procfs root in enumeration order.

    Raises:
        OSError: If the root itself cannot be listed.
    """
    with os.scandir(proc_root) as entries:
        for entry in entries:
            if is_pid_name(entry.name):
                yield entry


def task_dir_exists(path: str | os.PathLike[str]) -> bool:
    """Check if a task directory can still be opened."""
    try:
        with os.scandir(path):
            return True
    except OSError:
        # Exited between listing and opening
        return False


def count_running_tasks(proc_root: Path) -> int:
    """Count task directories that can still be opened."""
    count = 0
    for entry in iter_task_dirs(proc_root):
        if task_dir_exists(entry.path):
            count += 1
        else:
            logger.debug("task %s exited before it was counted", entry.name)
    return count


def parse_kernel_counters(text: str) -> tuple[int, int, int]:
    """
    Get the intr, ctxt and processes counters of a stat file.

    Each value is the first field after its label. Scanning stops at the
    "processes" line; labels that never appear stay at 0.

    Returns:
        (interrupts, context switches, forks)
    """
    values = dict.fromkeys(COUNTER_LABELS, 0)
    for line in text.split("\n"):
        label, cursor = next_token(Cursor(line), " ")
        if label not in values:
            continue
        value, _ = next_token(cursor, " ")
        values[label] = parse_int(value)
        if label == "processes":
            break
    return values["intr"], values["ctxt"], values["processes"]


def build_kernel_counters(config: InspectorConfig) -> KernelCounters:
    """Count live tasks and read the since-boot counters."""
    try:
        running = count_running_tasks(config.proc_root)
    except OSError as exc:
        logger.error("opendir %s: %s", config.proc_root, exc.strerror or exc)
        running = 0

    stat = read_pseudo_file(config.path("stat"), config.chunk_size)
    interrupts, context_switches, forks = parse_kernel_counters(stat.text)

    return KernelCounters(
        interrupts=interrupts,
        context_switches=context_switches,
        forks=forks,
        running_task_count=running,
    )
