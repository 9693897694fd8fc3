"""Hardware metrics builder.

Collects the CPU model and logical unit count, load averages, a sampled CPU
usage ratio and memory usage from procfs:

    cpuinfo   "model name" and "siblings" lines
    loadavg   first three fields
    stat      aggregate "cpu" line, read twice one interval apart
    meminfo   second field of the first two lines
"""

import logging
import math
import time
from collections.abc import Callable

from procinspect.config import InspectorConfig
from procinspect.models import CpuSample, HardwareMetrics
from procinspect.reader import read_pseudo_file
from procinspect.tokenizer import Cursor, next_token, parse_float, parse_int, tokens

logger = logging.getLogger(__name__)

GAUGE_SLOTS = 20
GAUGE_STEP = 0.05
KB_PER_GB = 1024 * 1024

# user nice system idle iowait irq softirq steal guest
CPU_FIELDS = 9
CPU_IDLE_FIELD = 4


def parse_cpuinfo(text: str) -> tuple[str, int]:
    """
    Find the CPU model name and logical unit count.

    The unit count is the first "siblings" value times two. Scanning stops
    at that line; a file without one leaves the count at 0.

    Returns:
        (model name, logical units)
    """
    model = ""
    units = 0
    for line in text.splitlines():
        if "model name" in line and not model:
            _, cursor = next_token(Cursor(line), ":")
            model = cursor.rest.strip()
        if "siblings" in line:
            _, cursor = next_token(Cursor(line), ":")
            value, _ = next_token(cursor, " \t")
            units = parse_int(value) * 2
            break
    return model, units


def parse_loadavg(text: str) -> tuple[float, float, float]:
    """Get the 1, 5 and 15 minute load averages."""
    fields = list(tokens(text, " \t\n"))[:3]
    fields += [""] * (3 - len(fields))
    return parse_float(fields[0]), parse_float(fields[1]), parse_float(fields[2])


def loadavg_text(text: str) -> str:
    """Join the first three loadavg fields with single spaces, unparsed."""
    return " ".join(list(tokens(text, " \t\n"))[:3])


def parse_cpu_sample(text: str) -> CpuSample:
    """
    Read the aggregate cpu line of a stat file.

    The leading label is skipped, the next nine fields are summed into the
    total and the fourth is kept as idle. Missing or malformed fields count
    as zero.
    """
    line = text.split("\n", 1)[0]
    cursor = Cursor(line)
    _, cursor = next_token(cursor, " \t")

    total = 0.0
    idle = 0.0
    for index in range(1, CPU_FIELDS + 1):
        value, cursor = next_token(cursor, " \t")
        jiffies = parse_float(value)
        total += jiffies
        if index == CPU_IDLE_FIELD:
            idle = jiffies
    return CpuSample(total=total, idle=idle)


def cpu_usage_ratio(first: CpuSample, second: CpuSample) -> float | None:
    """
    Compute busy time over the interval between two samples.

    Returns:
        1 - idle delta / total delta clamped to [0, 1], or None when the
        total did not move.
    """
    total = second.total - first.total
    if total == 0:
        return None
    idle = second.idle - first.idle
    return min(max(1.0 - idle / total, 0.0), 1.0)


def parse_meminfo(text: str) -> tuple[float, float]:
    """
    Get total and active memory in gigabytes.

    Both come from the second field of the first and second lines, whatever
    their labels, and are converted from kilobytes.
    """
    lines = text.split("\n")
    values = []
    for line in lines[:2]:
        _, cursor = next_token(Cursor(line), " \t")
        value, _ = next_token(cursor, " \t")
        values.append(parse_float(value))
    values += [0.0] * (2 - len(values))
    return values[0] / KB_PER_GB, values[1] / KB_PER_GB


def gauge_slots(ratio: float | None) -> int:
    """Get how many of the 20 gauge slots a ratio fills."""
    if ratio is None or math.isnan(ratio):
        return 0
    return min(max(math.floor(ratio / GAUGE_STEP), 0), GAUGE_SLOTS)


def sample_cpu(
    config: InspectorConfig,
    sleep: Callable[[float], None] = time.sleep,
) -> float | None:
    """Sample the stat file twice, sample_interval apart, and compute usage."""
    path = config.path("stat")
    first = parse_cpu_sample(read_pseudo_file(path, config.chunk_size).text)
    sleep(config.sample_interval)
    second = parse_cpu_sample(read_pseudo_file(path, config.chunk_size).text)

    ratio = cpu_usage_ratio(first, second)
    if ratio is None:
        logger.debug("cpu total did not change over %.3fs", config.sample_interval)
    return ratio


def build_hardware_metrics(
    config: InspectorConfig,
    sleep: Callable[[float], None] = time.sleep,
) -> HardwareMetrics:
    """
    Build the hardware snapshot.

    Args:
        config: Run configuration.
        sleep: Called once between the two cpu samples.
    """
    cpuinfo = read_pseudo_file(config.path("cpuinfo"), config.chunk_size)
    model, units = parse_cpuinfo(cpuinfo.text)
    if cpuinfo.ok and not units:
        logger.debug("no siblings line in %s", cpuinfo.path)

    loadavg = read_pseudo_file(config.path("loadavg"), config.chunk_size)
    usage = sample_cpu(config, sleep)
    meminfo = read_pseudo_file(config.path("meminfo"), config.chunk_size)
    memory_total, memory_active = parse_meminfo(meminfo.text)

    return HardwareMetrics(
        cpu_model=model,
        logical_units=units,
        load_average=parse_loadavg(loadavg.text),
        cpu_usage_ratio=usage,
        memory_total_gb=memory_total,
        memory_active_gb=memory_active,
        load_average_text=loadavg_text(loadavg.text),
    )
