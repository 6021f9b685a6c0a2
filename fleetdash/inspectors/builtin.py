"""
FleetDash Inspectors - Built-in Linux metrics.

Each inspector reads a standard command or /proc file. Values are small
frozen dataclasses so the dashboard can render them without reparsing.
"""

from __future__ import annotations

from dataclasses import dataclass

from fleetdash.core.exceptions import InspectorParseError
from fleetdash.inspectors.base import Inspector


def format_kib(kib: int) -> str:
    """Human readable size from KiB."""
    value = float(kib)
    for unit in ("K", "M", "G", "T"):
        if value < 1024 or unit == "T":
            return f"{value:.1f}{unit}"
        value /= 1024
    return f"{value:.1f}T"


def format_duration(seconds: float) -> str:
    total = int(seconds)
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


# =============================================================================
# Disk
# =============================================================================


@dataclass(frozen=True)
class DiskUsage:
    filesystem: str
    mount: str
    size_kib: int
    used_kib: int
    available_kib: int
    percent: int


class DiskInspector(Inspector):
    """Disk usage per mount point from POSIX `df`."""

    name = "disk"
    default_command = "df -P"
    description = "Disk usage per mount point"

    def parse(self, output: str) -> list[DiskUsage]:
        disks: list[DiskUsage] = []
        for line in output.strip().splitlines()[1:]:
            parts = line.split(maxsplit=5)
            if len(parts) < 6:
                continue
            filesystem, size, used, available, capacity, mount = parts
            try:
                disks.append(
                    DiskUsage(
                        filesystem=filesystem,
                        mount=mount,
                        size_kib=int(size),
                        used_kib=int(used),
                        available_kib=int(available),
                        percent=int(capacity.rstrip("%")) if capacity != "-" else 0,
                    )
                )
            except ValueError:
                continue
        if not disks:
            raise InspectorParseError(self.name, "no filesystem lines found")
        return disks

    def summarize(self, value: list[DiskUsage]) -> str:
        fullest = max(value, key=lambda disk: disk.percent)
        return f"{fullest.percent}% {fullest.mount}"

    def details(self, value: list[DiskUsage]) -> list[tuple[str, str]]:
        return [
            (
                disk.mount,
                f"{disk.percent}% of {format_kib(disk.size_kib)} "
                f"({format_kib(disk.available_kib)} free)",
            )
            for disk in value
        ]


# =============================================================================
# Memory
# =============================================================================


@dataclass(frozen=True)
class MemoryInfo:
    total_kib: int
    available_kib: int
    swap_total_kib: int = 0
    swap_free_kib: int = 0

    @property
    def used_percent(self) -> float:
        if not self.total_kib:
            return 0.0
        return 100.0 * (self.total_kib - self.available_kib) / self.total_kib


class MemoryInspector(Inspector):
    """Memory usage from /proc/meminfo."""

    name = "memory"
    default_command = "cat /proc/meminfo"
    description = "Memory and swap usage"

    def parse(self, output: str) -> MemoryInfo:
        fields: dict[str, int] = {}
        for line in output.splitlines():
            key, sep, rest = line.partition(":")
            if not sep:
                continue
            amount = rest.split()
            if amount and amount[0].isdigit():
                fields[key.strip()] = int(amount[0])

        if "MemTotal" not in fields:
            raise InspectorParseError(self.name, "MemTotal missing")

        available = fields.get("MemAvailable")
        if available is None:
            # Kernels before 3.14
            available = sum(fields.get(key, 0) for key in ("MemFree", "Buffers", "Cached"))

        return MemoryInfo(
            total_kib=fields["MemTotal"],
            available_kib=available,
            swap_total_kib=fields.get("SwapTotal", 0),
            swap_free_kib=fields.get("SwapFree", 0),
        )

    def summarize(self, value: MemoryInfo) -> str:
        return f"{value.used_percent:.1f}% of {format_kib(value.total_kib)}"

    def details(self, value: MemoryInfo) -> list[tuple[str, str]]:
        return [
            ("total", format_kib(value.total_kib)),
            ("available", format_kib(value.available_kib)),
            ("used", f"{value.used_percent:.1f}%"),
            (
                "swap",
                f"{format_kib(value.swap_free_kib)} free of {format_kib(value.swap_total_kib)}",
            ),
        ]


# =============================================================================
# Uptime / load
# =============================================================================


class UptimeInspector(Inspector):
    """Seconds since boot from /proc/uptime."""

    name = "uptime"
    default_command = "cat /proc/uptime"
    description = "Time since boot"

    def parse(self, output: str) -> float:
        parts = output.split()
        try:
            return float(parts[0])
        except (IndexError, ValueError):
            raise InspectorParseError(self.name, f"unexpected output {output[:40]!r}") from None

    def summarize(self, value: float) -> str:
        return format_duration(value)


@dataclass(frozen=True)
class LoadAverage:
    one: float
    five: float
    fifteen: float


class LoadAvgInspector(Inspector):
    """1, 5 and 15 minute load averages from /proc/loadavg."""

    name = "loadavg"
    default_command = "cat /proc/loadavg"
    description = "Load averages"

    def parse(self, output: str) -> LoadAverage:
        parts = output.split()
        try:
            return LoadAverage(float(parts[0]), float(parts[1]), float(parts[2]))
        except (IndexError, ValueError):
            raise InspectorParseError(self.name, f"unexpected output {output[:40]!r}") from None

    def summarize(self, value: LoadAverage) -> str:
        return f"{value.one:.2f} {value.five:.2f} {value.fifteen:.2f}"

    def details(self, value: LoadAverage) -> list[tuple[str, str]]:
        return [
            ("1 min", f"{value.one:.2f}"),
            ("5 min", f"{value.five:.2f}"),
            ("15 min", f"{value.fifteen:.2f}"),
        ]


# =============================================================================
# Custom
# =============================================================================


class CustomInspector(Inspector):
    """Run a user supplied command and show its output."""

    name = "custom"
    description = "Output of a configured command"

    MAX_CELL = 40

    def parse(self, output: str) -> str:
        return output.strip()

    def summarize(self, value: str) -> str:
        first = value.splitlines()[0] if value else ""
        if len(first) > self.MAX_CELL:
            return first[: self.MAX_CELL - 1] + "…"
        return first

    def details(self, value: str) -> list[tuple[str, str]]:
        return [("output", value or "(empty)")]


BUILTIN_INSPECTORS: tuple[type[Inspector], ...] = (
    DiskInspector,
    MemoryInspector,
    UptimeInspector,
    LoadAvgInspector,
    CustomInspector,
)
