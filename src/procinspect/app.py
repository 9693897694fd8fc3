"""procinspect - Textual viewer for a collected report."""

from enum import Enum

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import DataTable, Footer, Static

from procinspect.hardware import GAUGE_SLOTS, gauge_slots
from procinspect.models import (
    HardwareMetrics,
    KernelCounters,
    ProcessRecord,
    Report,
    SystemIdentity,
)
from procinspect.report import format_load_average, format_percent
from procinspect.system import format_uptime


class SortKey(Enum):
    """Sort keys for the process table."""

    PID = "pid"
    NAME = "name"
    USER = "user"
    THREADS = "threads"


def markup_gauge(ratio: float | None, color: str) -> str:
    """Render a ratio as a 20-slot Rich markup bar."""
    filled = gauge_slots(ratio)
    bar = f"[{color}]█[/{color}]" * filled + "[dim]░[/dim]" * (GAUGE_SLOTS - filled)
    # Escaped bracket for the bar container
    return f"\\[{bar}] {format_percent(ratio)}"


class ReportHeader(Static):
    """Header widget showing system, hardware and kernel counter sections."""

    DEFAULT_CSS = """
    ReportHeader {
        height: auto;
        min-height: 5;
        padding: 1;
        background: $surface;
    }
    """

    def __init__(self, report: Report, *args, **kwargs) -> None:
        """Initialize ReportHeader."""
        super().__init__(*args, **kwargs)
        self._report = report

    def compose(self) -> ComposeResult:
        """Compose the header layout."""
        yield Horizontal(
            Static(self._get_system_info(), id="system-info"),
            Static(self._get_hardware_info(), id="hardware-info"),
            Static(self._get_counter_info(), id="counter-info"),
        )

    def _get_system_info(self) -> str:
        """Get system section display."""
        identity: SystemIdentity | None = self._report.system
        if identity is None:
            return ""
        return (
            f"[b]{identity.hostname}[/b]\n"
            f"Kernel: {identity.kernel_version}\n"
            f"Uptime:{format_uptime(identity.uptime)}"
        )

    def _get_hardware_info(self) -> str:
        """Get hardware section display."""
        metrics: HardwareMetrics | None = self._report.hardware
        if metrics is None:
            return ""
        load = format_load_average(metrics)
        return (
            f"{metrics.cpu_model} ({metrics.logical_units} units)\n"
            f"CPU {markup_gauge(metrics.cpu_usage_ratio, 'green')}\n"
            f"Mem {markup_gauge(metrics.memory_usage_ratio, 'cyan')} "
            f"{metrics.memory_active_gb:.1f}G/{metrics.memory_total_gb:.1f}G\n"
            f"Load average: {load}"
        )

    def _get_counter_info(self) -> str:
        """Get kernel counter section display."""
        counters: KernelCounters | None = self._report.counters
        if counters is None:
            return ""
        return (
            f"Tasks running: {counters.running_task_count}\n"
            f"Interrupts: {counters.interrupts}\n"
            f"Context switches: {counters.context_switches}\n"
            f"Forks: {counters.forks}"
        )


class ProcessTable(Container):
    """Container for the process data table."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(self, processes: list[ProcessRecord] | None = None, *args, **kwargs) -> None:
        """Initialize ProcessTable."""
        super().__init__(*args, **kwargs)
        self._processes: list[ProcessRecord] = list(processes or [])
        self._sort_key: SortKey = SortKey.PID

    @property
    def sort_key(self) -> SortKey:
        """Get current sort key."""
        return self._sort_key

    @property
    def row_pids(self) -> list[int]:
        """Get the pids in displayed order."""
        return [proc.pid for proc in self._sort_processes(self._processes)]

    def cycle_sort(self) -> SortKey:
        """Cycle to the next sort key, re-sort the rows and return the key."""
        keys = list(SortKey)
        current_index = keys.index(self._sort_key)
        self._sort_key = keys[(current_index + 1) % len(keys)]
        self._populate()
        return self._sort_key

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield DataTable(id="process-table")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "row"

        table.add_column("PID", key="pid", width=8)
        table.add_column("State", key="state", width=13)
        table.add_column("Task Name", key="name", width=25)
        table.add_column("User", key="user", width=16)
        table.add_column("Tasks", key="threads", width=6)
        self._populate()

    def show_processes(self, processes: list[ProcessRecord]) -> None:
        """Replace the rows with a new set of processes."""
        self._processes = list(processes)
        self._populate()

    def _sort_processes(self, processes: list[ProcessRecord]) -> list[ProcessRecord]:
        """Sort processes based on the current sort key."""
        key_func = {
            SortKey.PID: lambda p: p.pid,
            SortKey.NAME: lambda p: p.name.lower(),
            SortKey.USER: lambda p: p.owner.lower(),
            SortKey.THREADS: lambda p: p.thread_count,
        }
        # Most threads first
        reverse = self._sort_key is SortKey.THREADS
        return sorted(processes, key=key_func[self._sort_key], reverse=reverse)

    def _populate(self) -> None:
        """Fill the table from the current processes and sort key."""
        try:
            table = self.query_one("#process-table", DataTable)
        except Exception:
            return  # Not mounted yet
        table.clear()
        for proc in self._sort_processes(self._processes):
            table.add_row(
                str(proc.pid),
                proc.state.value,
                proc.name,
                proc.owner[:15],
                str(proc.thread_count),
                key=str(proc.pid),
            )


class InspectorApp(App):
    """Viewer for one procinspect report."""

    TITLE = "procinspect"
    SUB_TITLE = "procfs diagnostic report"

    CSS = """
    Screen {
        layout: vertical;
    }

    #report-header {
        dock: top;
        height: auto;
        min-height: 6;
    }

    Horizontal {
        height: auto;
    }

    #system-info, #hardware-info, #counter-info {
        width: 1fr;
        padding-right: 2;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("f6", "sort", "Sort"),
    ]

    def __init__(self, report: Report) -> None:
        """Initialize the InspectorApp."""
        super().__init__()
        self._report = report

    @property
    def report(self) -> Report:
        """Get the report being shown."""
        return self._report

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield ReportHeader(self._report, id="report-header")
        processes = list(self._report.tasks) if self._report.tasks is not None else []
        yield ProcessTable(processes)
        yield Footer()

    def action_sort(self) -> None:
        """Handle sort action - cycle through sort keys."""
        try:
            process_table = self.query_one(ProcessTable)
            new_sort_key = process_table.cycle_sort()
            self.notify(f"Sort: {new_sort_key.value.upper()}")
        except Exception:
            pass

    def action_quit(self) -> None:
        """Handle quit action."""
        self.exit()
