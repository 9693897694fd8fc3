"""Plain-text rendering of procinspect reports."""

from procinspect.hardware import GAUGE_SLOTS, gauge_slots
from procinspect.models import (
    HardwareMetrics,
    KernelCounters,
    Report,
    SystemIdentity,
    TaskList,
)
from procinspect.system import format_uptime


def heading(title: str) -> str:
    """Underline a section title."""
    return f"{title}\n{'-' * len(title)}\n"


def format_gauge(ratio: float | None) -> str:
    """Render a ratio as a 20-slot bar of '#' and '-'."""
    filled = gauge_slots(ratio)
    return "[" + "#" * filled + "-" * (GAUGE_SLOTS - filled) + "]"


def format_percent(ratio: float | None) -> str:
    """Render a ratio as a percentage, 0.0% when undefined."""
    if ratio is None:
        return "0.0%"
    return f"{ratio * 100:.1f}%"


def format_load_average(metrics: HardwareMetrics) -> str:
    """Render the load averages as read, or formatted when no raw text was kept."""
    if metrics.load_average_text:
        return metrics.load_average_text
    return " ".join(f"{value:.2f}" for value in metrics.load_average)


def render_system(identity: SystemIdentity) -> str:
    """Render the system information section."""
    return (
        heading("System Information")
        + f"Hostname: {identity.hostname}\n"
        + f"Kernel Version: {identity.kernel_version}\n"
        + f"Uptime:{format_uptime(identity.uptime)}\n\n"
    )


def render_hardware(metrics: HardwareMetrics) -> str:
    """Render the hardware information section."""
    load = format_load_average(metrics)
    memory = metrics.memory_usage_ratio
    return (
        heading("Hardware Information")
        + f"CPU Model: {metrics.cpu_model}\n"
        + f"Processing Units: {metrics.logical_units}\n"
        + f"Load Average (1/5/15 min): {load}\n"
        + f"CPU Usage:    {format_gauge(metrics.cpu_usage_ratio)} "
        + f"{format_percent(metrics.cpu_usage_ratio)}\n"
        + f"Memory Usage: {format_gauge(memory)} {format_percent(memory)} "
        + f"({metrics.memory_active_gb:.1f} GB / {metrics.memory_total_gb:.1f} GB)\n\n"
    )


def render_task_summary(counters: KernelCounters) -> str:
    """Render the task information section."""
    return (
        heading("Task Information")
        + f"Tasks running: {counters.running_task_count}\n"
        + "Since boot:\n"
        + f"    Interrupts: {counters.interrupts}\n"
        + f"    Context Switches: {counters.context_switches}\n"
        + f"    Forks: {counters.forks}\n\n"
    )


def render_task_list(tasks: TaskList) -> str:
    """Render the task table."""
    lines = [f"{'PID':>5} | {'State':>12} | {'Task Name':>25} | {'User':>15} | Tasks "]
    for proc in tasks:
        lines.append(
            f"{proc.pid:>5} | {proc.state.value:>12} | {proc.name:>25} | "
            f"{proc.owner:>15} | {proc.thread_count} "
        )
    return "\n".join(lines) + "\n\n"


def render_report(report: Report) -> str:
    """Render every section present in a report, in display order."""
    parts = []
    if report.system is not None:
        parts.append(render_system(report.system))
    if report.hardware is not None:
        parts.append(render_hardware(report.hardware))
    if report.counters is not None:
        parts.append(render_task_summary(report.counters))
    if report.tasks is not None:
        parts.append(render_task_list(report.tasks))
    return "".join(parts)
