"""Shared fixtures: a fake procfs tree built under tmp_path."""

from pathlib import Path

import pytest

from procinspect.config import InspectorConfig, ViewOptions

CPUINFO = """\
processor\t: 0
vendor_id\t: GenuineIntel
cpu family\t: 6
model\t\t: 142
model name\t: Intel(R) Core(TM) i7-8550U CPU @ 1.80GHz
stepping\t: 10
physical id\t: 0
siblings\t: 4
core id\t\t: 0
cpu cores\t: 4
"""

STAT = """\
cpu  100 0 50 800 20 0 10 0 0 0
cpu0 50 0 25 400 10 0 5 0 0 0
intr 123456 10 20 30
ctxt 987654
btime 1700000000
processes 4321
procs_running 2
procs_blocked 0
"""

MEMINFO = """\
MemTotal:        8388608 kB
MemFree:         2097152 kB
MemAvailable:    4194304 kB
"""


def status_text(name: str, state: str = "S (sleeping)", uid: int = 0, threads: int = 1) -> str:
    """Build a /proc/<pid>/status body."""
    return (
        f"Name:\t{name}\n"
        "Umask:\t0022\n"
        f"State:\t{state}\n"
        f"Tgid:\t1\n"
        f"Uid:\t{uid}\t{uid}\t{uid}\t{uid}\n"
        f"Gid:\t{uid}\t{uid}\t{uid}\t{uid}\n"
        "VmRSS:\t    1024 kB\n"
        f"Threads:\t{threads}\n"
    )


class FakeProc:
    """Writes procfs-style files under a temporary root."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def write(self, relpath: str, text: str) -> Path:
        path = self.root / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path

    def add_task(self, pid: int, name: str, **kwargs) -> Path:
        return self.write(f"{pid}/status", status_text(name, **kwargs)).parent

    def populate(self) -> "FakeProc":
        self.write("sys/kernel/hostname", "myhost\n")
        self.write("sys/kernel/osrelease", "5.15.0\n")
        self.write("uptime", "123456.78 0.00\n")
        self.write("cpuinfo", CPUINFO)
        self.write("loadavg", "0.52 0.58 0.59 1/467 12345\n")
        self.write("stat", STAT)
        self.write("meminfo", MEMINFO)
        self.add_task(1, "systemd", uid=0)
        self.add_task(42, "bash", state="R (running)", uid=1000, threads=1)
        self.add_task(7, "kworker/0:1", state="I (idle)", uid=0)
        return self

    def config(self, views: ViewOptions | None = None, **kwargs) -> InspectorConfig:
        kwargs.setdefault("task_delay", 0.0)
        kwargs.setdefault("sample_interval", 0.0)
        return InspectorConfig(
            proc_root=self.root,
            views=views if views is not None else ViewOptions.all(),
            **kwargs,
        )


@pytest.fixture
def fake_proc(tmp_path: Path) -> FakeProc:
    """An empty fake procfs root."""
    return FakeProc(tmp_path / "proc")


@pytest.fixture
def populated_proc(fake_proc: FakeProc) -> FakeProc:
    """A fake procfs root with every file the report reads."""
    return fake_proc.populate()
