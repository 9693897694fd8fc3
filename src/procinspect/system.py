"""System identity builder."""

import logging

from procinspect.config import InspectorConfig
from procinspect.models import SystemIdentity, UptimeBreakdown
from procinspect.reader import read_pseudo_file
from procinspect.tokenizer import Cursor, next_token, parse_float

logger = logging.getLogger(__name__)

HOSTNAME_FILE = ("sys", "kernel", "hostname")
OSRELEASE_FILE = ("sys", "kernel", "osrelease")
UPTIME_FILE = ("uptime",)

WHITESPACE = " \t\n"


def first_token(text: str) -> str:
    """Get the first whitespace-delimited token of a text."""
    token, _ = next_token(Cursor(text), WHITESPACE)
    return token


def format_uptime(breakdown: UptimeBreakdown) -> str:
    """
    Format an uptime breakdown.

    Years, days and hours appear only when nonzero; minutes and seconds
    always do. The text starts with a single space and fields are joined
    by ", ", e.g. " 1 days, 10 hours, 17 minutes, 36 seconds".
    """
    fields = []
    if breakdown.years:
        fields.append(f"{breakdown.years} years")
    if breakdown.days:
        fields.append(f"{breakdown.days} days")
    if breakdown.hours:
        fields.append(f"{breakdown.hours} hours")
    fields.append(f"{breakdown.minutes} minutes")
    fields.append(f"{breakdown.seconds} seconds")
    return " " + ", ".join(fields)


def build_system_identity(config: InspectorConfig) -> SystemIdentity:
    """Read hostname, kernel release and uptime from the procfs root."""
    hostname = read_pseudo_file(config.path(*HOSTNAME_FILE), config.chunk_size)
    osrelease = read_pseudo_file(config.path(*OSRELEASE_FILE), config.chunk_size)
    uptime = read_pseudo_file(config.path(*UPTIME_FILE), config.chunk_size)

    identity = SystemIdentity(
        hostname=first_token(hostname.text),
        kernel_version=first_token(osrelease.text),
        uptime_seconds=parse_float(first_token(uptime.text)),
    )
    logger.debug(
        "system identity: %s %s up %.2fs",
        identity.hostname,
        identity.kernel_version,
        identity.uptime_seconds,
    )
    return identity
