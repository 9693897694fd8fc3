"""Tests for the procinspect viewer."""

import pytest

from procinspect.app import InspectorApp, ProcessTable, ReportHeader, SortKey, markup_gauge
from procinspect.models import (
    HardwareMetrics,
    KernelCounters,
    ProcessRecord,
    Report,
    SystemIdentity,
    TaskList,
    TaskState,
)


def make_report() -> Report:
    processes = (
        ProcessRecord(pid=300, state=TaskState.SLEEPING, name="bash", owner="alice", thread_count=1),
        ProcessRecord(pid=1, state=TaskState.SLEEPING, name="systemd", owner="root", thread_count=1),
        ProcessRecord(pid=42, state=TaskState.RUNNING, name="Xorg", owner="root", thread_count=12),
    )
    return Report(
        system=SystemIdentity(hostname="myhost", kernel_version="5.15.0", uptime_seconds=3600.0),
        hardware=HardwareMetrics(
            cpu_model="Test CPU",
            logical_units=8,
            load_average=(1.0, 0.5, 0.25),
            cpu_usage_ratio=None,
            memory_total_gb=16.0,
            memory_active_gb=8.0,
            load_average_text="1.00 0.50 0.25",
        ),
        counters=KernelCounters(interrupts=5, context_switches=6, forks=7, running_task_count=3),
        tasks=TaskList(processes),
    )


def test_markup_gauge():
    """Test the markup bar fills slots and shows the percentage."""
    gauge = markup_gauge(0.5, "cyan")
    assert gauge.count("[cyan]█[/cyan]") == 10
    assert gauge.count("[dim]░[/dim]") == 10
    assert gauge.endswith("50.0%")


def test_markup_gauge_undefined():
    """Test an undefined ratio renders an empty bar at 0.0%."""
    gauge = markup_gauge(None, "green")
    assert gauge.count("[dim]░[/dim]") == 20
    assert gauge.endswith("0.0%")


def test_header_load_average_as_read():
    """Test the header shows the load averages as read."""
    header = ReportHeader(make_report())
    assert header._get_hardware_info().endswith("Load average: 1.00 0.50 0.25")


class TestSortKey:
    """Tests for SortKey enum."""

    def test_sort_key_members(self):
        """Test SortKey enum has all expected members."""
        assert [key.value for key in SortKey] == ["pid", "name", "user", "threads"]


@pytest.mark.asyncio
async def test_app_creation():
    """Test InspectorApp can be instantiated."""
    app = InspectorApp(make_report())
    assert app.title == "procinspect"
    assert app.report.system.hostname == "myhost"


@pytest.mark.asyncio
async def test_app_compose():
    """Test InspectorApp composes correctly."""
    app = InspectorApp(make_report())
    async with app.run_test() as pilot:
        assert pilot.app.query_one("#report-header", ReportHeader) is not None
        assert pilot.app.query_one("#process-table") is not None


@pytest.mark.asyncio
async def test_app_quit_binding():
    """Test that 'q' binding triggers quit."""
    app = InspectorApp(make_report())
    async with app.run_test() as pilot:
        await pilot.press("q")
        assert pilot.app._exit


@pytest.mark.asyncio
async def test_process_table_rows():
    """Test the table shows every process sorted by pid."""
    app = InspectorApp(make_report())
    async with app.run_test() as pilot:
        process_table = pilot.app.query_one(ProcessTable)
        table = pilot.app.query_one("#process-table")

        assert table.row_count == 3
        assert process_table.row_pids == [1, 42, 300]


@pytest.mark.asyncio
async def test_process_table_cycle_sort():
    """Test ProcessTable sort key cycling."""
    app = InspectorApp(make_report())
    async with app.run_test() as pilot:
        process_table = pilot.app.query_one(ProcessTable)

        assert process_table.sort_key == SortKey.PID

        process_table.cycle_sort()
        assert process_table.sort_key == SortKey.NAME
        assert process_table.row_pids == [300, 1, 42]

        process_table.cycle_sort()
        assert process_table.sort_key == SortKey.USER

        process_table.cycle_sort()
        assert process_table.sort_key == SortKey.THREADS
        assert process_table.row_pids[0] == 42

        # Should wrap back to PID
        process_table.cycle_sort()
        assert process_table.sort_key == SortKey.PID


@pytest.mark.asyncio
async def test_app_sort_binding():
    """Test that F6 binding cycles sort key."""
    app = InspectorApp(make_report())
    async with app.run_test() as pilot:
        process_table = pilot.app.query_one(ProcessTable)
        initial_sort = process_table.sort_key

        await pilot.press("f6")

        assert process_table.sort_key != initial_sort


@pytest.mark.asyncio
async def test_show_processes_replaces_rows():
    """Test show_processes swaps the displayed set."""
    app = InspectorApp(make_report())
    async with app.run_test() as pilot:
        process_table = pilot.app.query_one(ProcessTable)
        process_table.show_processes(
            [ProcessRecord(pid=9, state=TaskState.ZOMBIE, name="z", owner="root", thread_count=0)]
        )

        assert process_table.row_pids == [9]
        assert pilot.app.query_one("#process-table").row_count == 1


@pytest.mark.asyncio
async def test_app_without_task_list():
    """Test a report without a task list shows an empty table."""
    app = InspectorApp(Report(system=make_report().system))
    async with app.run_test() as pilot:
        assert pilot.app.query_one("#process-table").row_count == 0
