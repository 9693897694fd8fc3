"""Inspection engine for procinspect."""

import logging
import os
import time
from collections.abc import Callable

from procinspect.config import InspectorConfig
from procinspect.counters import build_kernel_counters
from procinspect.hardware import build_hardware_metrics
from procinspect.models import Report
from procinspect.system import build_system_identity
from procinspect.tasks import UserLookup, build_task_list

logger = logging.getLogger(__name__)


class InvalidRootError(Exception):
    """The procfs root cannot be opened as a directory."""

    def __init__(self, proc_root: os.PathLike[str], reason: str) -> None:
        super().__init__(f"{proc_root}: {reason}")
        self.proc_root = proc_root
        self.reason = reason


def check_proc_root(config: InspectorConfig) -> None:
    """
    Make sure the procfs root can be opened.

    Raises:
        InvalidRootError: If it cannot be listed.
    """
    try:
        with os.scandir(config.proc_root):
            pass
    except OSError as exc:
        raise InvalidRootError(config.proc_root, exc.strerror or str(exc)) from exc


class Inspector:
    """
    Single-shot inspector that runs the builders selected in its config.

    Builders are independent: each reads its own files and a failure in
    one leaves the others untouched. Nothing is cached between runs.
    """

    def __init__(
        self,
        config: InspectorConfig | None = None,
        users: UserLookup | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        """
        Initialize the Inspector.

        Args:
            config: Run configuration. Defaults to every section under /proc.
            users: Uid resolver for the task list.
            sleep: Used for the cpu sampling pause and the task throttle.
                Defaults to time.sleep.
        """
        self._config = config if config is not None else InspectorConfig()
        self._users = users
        self._sleep = sleep if sleep is not None else time.sleep

    @property
    def config(self) -> InspectorConfig:
        """Get the run configuration."""
        return self._config

    def collect(self) -> Report:
        """Build a report of the selected sections."""
        views = self._config.views
        logger.debug("options selected: %s", views.describe())

        system = build_system_identity(self._config) if views.system else None
        hardware = (
            build_hardware_metrics(self._config, self._sleep) if views.hardware else None
        )
        counters = build_kernel_counters(self._config) if views.task_summary else None
        tasks = (
            build_task_list(self._config, self._users, self._sleep)
            if views.task_list
            else None
        )

        return Report(system=system, hardware=hardware, counters=counters, tasks=tasks)
