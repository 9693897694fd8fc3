"""Run configuration for procinspect."""

from dataclasses import dataclass, field
from pathlib import Path

from procinspect.reader import DEFAULT_CHUNK_SIZE

DEFAULT_PROC_ROOT = Path("/proc")
DEFAULT_SAMPLE_INTERVAL = 1.0
DEFAULT_TASK_DELAY = 0.001


@dataclass(slots=True, frozen=True)
class ViewOptions:
    """Which report sections to build."""

    hardware: bool = False
    system: bool = False
    task_list: bool = False
    task_summary: bool = False

    @classmethod
    def all(cls) -> "ViewOptions":
        """Enable every section."""
        return cls(hardware=True, system=True, task_list=True, task_summary=True)

    @classmethod
    def none(cls) -> "ViewOptions":
        """Disable every section."""
        return cls()

    @property
    def any(self) -> bool:
        """Check if at least one section is enabled."""
        return self.hardware or self.system or self.task_list or self.task_summary

    def describe(self) -> str:
        """List the enabled sections, space separated."""
        names = [
            name
            for name, enabled in (
                ("hardware", self.hardware),
                ("system", self.system),
                ("task_list", self.task_list),
                ("task_summary", self.task_summary),
            )
            if enabled
        ]
        return " ".join(names)


@dataclass(slots=True, frozen=True)
class InspectorConfig:
    """
    Immutable settings for one inspection run.

    Attributes:
        proc_root: Mount point of the procfs tree to read.
        views: Sections to build.
        chunk_size: Bytes requested per read of a pseudo-file.
        sample_interval: Seconds between the two cpu counter samples.
        task_delay: Pause between task directories (0 disables it).
        sort_by_pid: Sort the task list by pid instead of keeping directory order.
    """

    proc_root: Path = DEFAULT_PROC_ROOT
    views: ViewOptions = field(default_factory=ViewOptions.all)
    chunk_size: int = DEFAULT_CHUNK_SIZE
    sample_interval: float = DEFAULT_SAMPLE_INTERVAL
    task_delay: float = DEFAULT_TASK_DELAY
    sort_by_pid: bool = True

    def __post_init__(self) -> None:
        # Frozen, so normalize through object.__setattr__
        object.__setattr__(self, "proc_root", Path(self.proc_root))
        object.__setattr__(self, "chunk_size", max(1, self.chunk_size))
        object.__setattr__(self, "sample_interval", max(0.0, self.sample_interval))
        object.__setattr__(self, "task_delay", max(0.0, self.task_delay))

    def path(self, *parts: str) -> Path:
        """Build a path under the procfs root."""
        return self.proc_root.joinpath(*parts)
