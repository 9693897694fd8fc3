"""Task list builder."""

import logging
import pwd
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Protocol

from procinspect.config import InspectorConfig
from procinspect.counters import iter_task_dirs, task_dir_exists
from procinspect.models import ProcessRecord, TaskList, TaskState
from procinspect.reader import ReadStatus, read_pseudo_file
from procinspect.tokenizer import Cursor, next_token, parse_int

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 24

STATE_CODES = {
    "R": TaskState.RUNNING,
    "S": TaskState.SLEEPING,
    "D": TaskState.DISK_SLEEP,
    "Z": TaskState.ZOMBIE,
    "T": TaskState.TRACING_STOP,
    "t": TaskState.TRACING_STOP,
    "X": TaskState.DEAD,
}


class UserLookup(Protocol):
    """Resolves numeric user ids to user names."""

    def lookup(self, uid: int) -> str | None:
        """Get the user name for a uid, or None if it has none."""
        ...


class PasswdUserLookup:
    """User lookup backed by the system passwd database."""

    def lookup(self, uid: int) -> str | None:
        try:
            return pwd.getpwuid(uid).pw_name
        except (KeyError, OverflowError):
            return None


class MappingUserLookup:
    """User lookup over a fixed uid to name mapping."""

    def __init__(self, names: Mapping[int, str]) -> None:
        self._names = dict(names)

    def lookup(self, uid: int) -> str | None:
        return self._names.get(uid)


def state_from_code(code: str) -> TaskState:
    """Map a status State code to a task state, sleeping when unknown."""
    return STATE_CODES.get(code[:1], TaskState.SLEEPING)


@dataclass(slots=True)
class StatusFields:
    """Raw values gathered from a status file before they are finalized."""

    name: str = ""
    state: str = ""
    uid: str = ""
    threads: str = ""

    def feed(self, text: str) -> None:
        """Pick the labelled fields out of status text."""
        for line in text.split("\n"):
            label, cursor = next_token(Cursor(line), "\t")
            if label == "Name:":
                self.name = next_token(cursor, "\t\n")[0]
            elif label == "State:":
                self.state = next_token(cursor, " ")[0]
            elif label == "Uid:":
                self.uid = next_token(cursor, "\t")[0]
            elif label == "Threads:":
                self.threads = next_token(cursor, "\t")[0]


def resolve_owner(uid_text: str, users: UserLookup) -> str:
    """Get the user name for a uid field, falling back to the raw text."""
    if not uid_text:
        return ""
    name = users.lookup(parse_int(uid_text))
    return name if name is not None else uid_text


def parse_status(pid: int, text: str, users: UserLookup) -> ProcessRecord:
    """
    Build a process record from the text of its status file.

    Name, Uid and Threads take the tab-delimited field after their label;
    State takes the code before the space. Names are cut to 24 characters.
    """
    fields = StatusFields()
    fields.feed(text)
    return ProcessRecord(
        pid=pid,
        state=state_from_code(fields.state),
        name=fields.name[:MAX_NAME_LENGTH],
        owner=resolve_owner(fields.uid, users),
        thread_count=parse_int(fields.threads),
    )


def read_process(
    pid: int,
    task_dir: str,
    config: InspectorConfig,
    users: UserLookup,
) -> ProcessRecord | None:
    """
    Read one task directory.

    Returns:
        The record, or None if the task exited before it could be read.
    """
    if not task_dir_exists(task_dir):
        logger.debug("task %d exited before it was read", pid)
        return None

    status = read_pseudo_file(f"{task_dir}/status", config.chunk_size, missing_ok=True)
    if status.status is ReadStatus.UNAVAILABLE and not task_dir_exists(task_dir):
        logger.debug("task %d exited while reading status", pid)
        return None
    return parse_status(pid, status.text, users)


def build_task_list(
    config: InspectorConfig,
    users: UserLookup | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> TaskList:
    """
    Read the status of every task under the procfs root.

    Args:
        config: Run configuration. task_delay pauses between task
            directories and sort_by_pid orders the result.
        users: Uid resolver, the passwd database by default.
        sleep: Called with task_delay after each task directory.
    """
    users = users if users is not None else PasswdUserLookup()
    records: list[ProcessRecord] = []

    try:
        for entry in iter_task_dirs(config.proc_root):
            record = read_process(int(entry.name), entry.path, config, users)
            if record is not None:
                records.append(record)
            if config.task_delay > 0:
                sleep(config.task_delay)
    except OSError as exc:
        logger.error("opendir %s: %s", config.proc_root, exc.strerror or exc)

    if config.sort_by_pid:
        records.sort(key=lambda proc: proc.pid)
    return TaskList(tuple(records))
