"""Data models for procinspect."""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

SECONDS_PER_YEAR = 31536000
SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60


@dataclass(slots=True, frozen=True)
class UptimeBreakdown:
    """Uptime split into calendar-ish units (365-day years)."""

    years: int
    days: int
    hours: int
    minutes: int
    seconds: int

    @classmethod
    def from_seconds(cls, uptime_seconds: float) -> "UptimeBreakdown":
        """Break an uptime down after truncating it to whole seconds."""
        total = max(int(uptime_seconds), 0)
        return cls(
            years=total // SECONDS_PER_YEAR,
            days=(total // SECONDS_PER_DAY) % 365,
            hours=(total // SECONDS_PER_HOUR) % 24,
            minutes=(total // SECONDS_PER_MINUTE) % 60,
            seconds=total % 60,
        )

    @property
    def total_seconds(self) -> int:
        """Recompose the breakdown into whole seconds."""
        return (
            self.years * SECONDS_PER_YEAR
            + self.days * SECONDS_PER_DAY
            + self.hours * SECONDS_PER_HOUR
            + self.minutes * SECONDS_PER_MINUTE
            + self.seconds
        )


@dataclass(slots=True, frozen=True)
class SystemIdentity:
    """Immutable snapshot of the system identity."""

    hostname: str
    kernel_version: str
    uptime_seconds: float

    @property
    def uptime(self) -> UptimeBreakdown:
        """Get the uptime breakdown."""
        return UptimeBreakdown.from_seconds(self.uptime_seconds)


@dataclass(slots=True, frozen=True)
class CpuSample:
    """One read of the aggregate cpu line, in jiffies."""

    total: float
    idle: float


@dataclass(slots=True, frozen=True)
class HardwareMetrics:
    """Immutable snapshot of hardware utilization."""

    cpu_model: str
    logical_units: int
    load_average: tuple[float, float, float]
    cpu_usage_ratio: float | None  # None when the sampled total delta is zero
    memory_total_gb: float
    memory_active_gb: float
    load_average_text: str = ""  # Raw loadavg fields as the kernel wrote them

    @property
    def memory_usage_ratio(self) -> float | None:
        """Get active/total memory, None when the total is unknown."""
        if self.memory_total_gb == 0:
            return None
        return self.memory_active_gb / self.memory_total_gb


@dataclass(slots=True, frozen=True)
class KernelCounters:
    """Immutable snapshot of kernel activity since boot."""

    interrupts: int = 0
    context_switches: int = 0
    forks: int = 0
    running_task_count: int = 0


class TaskState(Enum):
    """Scheduler state of a task."""

    RUNNING = "running"
    SLEEPING = "sleeping"
    DISK_SLEEP = "disk sleep"
    ZOMBIE = "zombie"
    TRACING_STOP = "tracing stop"
    DEAD = "dead"


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable snapshot of one task."""

    pid: int
    state: TaskState
    name: str  # At most 24 characters
    owner: str  # Username, or the raw uid when it has no passwd entry
    thread_count: int


@dataclass(slots=True, frozen=True)
class TaskList:
    """Tasks in the order they were collected."""

    processes: tuple[ProcessRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.processes)

    def __iter__(self) -> Iterator[ProcessRecord]:
        return iter(self.processes)

    @property
    def pids(self) -> list[int]:
        """Get the pids in collection order."""
        return [proc.pid for proc in self.processes]


@dataclass(slots=True, frozen=True)
class Report:
    """Snapshots built in one run. Sections that were not selected are None."""

    system: SystemIdentity | None = None
    hardware: HardwareMetrics | None = None
    counters: KernelCounters | None = None
    tasks: TaskList | None = None
