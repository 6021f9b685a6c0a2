"""Tests for metric inspectors and the registry."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from fleetdash.core.exceptions import InspectorParseError
from fleetdash.drivers import DriverPool
from fleetdash.inspectors import (
    CustomInspector,
    DiskInspector,
    InspectorSamplers,
    LoadAvgInspector,
    MemoryInspector,
    MetricRegistry,
    UptimeInspector,
)
from fleetdash.inspectors.builtin import format_duration, format_kib

DF_OUTPUT = """\
Filesystem     1024-blocks      Used Available Capacity Mounted on
/dev/sda1         41152812  20576406  18462912      53% /
tmpfs              1018136         0   1018136       0% /dev/shm
/dev/sdb1        103081248  92773123  10308125      91% /var/lib/data dir
"""

MEMINFO_OUTPUT = """\
MemTotal:        8000000 kB
MemFree:          500000 kB
MemAvailable:    2000000 kB
Buffers:          100000 kB
Cached:          1000000 kB
SwapTotal:       1000000 kB
SwapFree:         750000 kB
"""


class TestFormatting:
    """Tests for display helpers."""

    def test_format_kib(self) -> None:
        assert format_kib(512) == "512.0K"
        assert format_kib(2048) == "2.0M"
        assert format_kib(8 * 1024 * 1024) == "8.0G"

    def test_format_duration(self) -> None:
        assert format_duration(59) == "0m"
        assert format_duration(3 * 3600 + 120) == "3h 2m"
        assert format_duration(2 * 86400 + 3600) == "2d 1h 0m"


class TestDiskInspector:
    """Tests for DiskInspector."""

    def test_parse(self) -> None:
        disks = DiskInspector().parse(DF_OUTPUT)

        assert [disk.mount for disk in disks] == ["/", "/dev/shm", "/var/lib/data dir"]
        assert disks[0].percent == 53

    def test_summary_shows_fullest(self) -> None:
        inspector = DiskInspector()

        assert inspector.summarize(inspector.parse(DF_OUTPUT)) == "91% /var/lib/data dir"

    def test_no_filesystems(self) -> None:
        with pytest.raises(InspectorParseError, match="no filesystem lines"):
            DiskInspector().parse("Filesystem 1024-blocks Used Available Capacity Mounted on\n")


class TestMemoryInspector:
    """Tests for MemoryInspector."""

    def test_parse(self) -> None:
        info = MemoryInspector().parse(MEMINFO_OUTPUT)

        assert info.total_kib == 8000000
        assert info.available_kib == 2000000
        assert info.used_percent == pytest.approx(75.0)
        assert info.swap_free_kib == 750000

    def test_fallback_without_mem_available(self) -> None:
        output = "\n".join(
            line for line in MEMINFO_OUTPUT.splitlines() if not line.startswith("MemAvailable")
        )

        info = MemoryInspector().parse(output)

        assert info.available_kib == 1600000

    def test_missing_total(self) -> None:
        with pytest.raises(InspectorParseError, match="MemTotal"):
            MemoryInspector().parse("MemFree: 1 kB\n")


class TestUptimeAndLoad:
    """Tests for UptimeInspector and LoadAvgInspector."""

    def test_uptime(self) -> None:
        inspector = UptimeInspector()

        value = inspector.parse("93784.12 180000.50\n")

        assert value == pytest.approx(93784.12)
        assert inspector.summarize(value) == "1d 2h 3m"

    def test_uptime_garbage(self) -> None:
        with pytest.raises(InspectorParseError):
            UptimeInspector().parse("")

    def test_loadavg(self) -> None:
        inspector = LoadAvgInspector()

        value = inspector.parse("0.52 0.58 0.59 1/467 12345\n")

        assert inspector.summarize(value) == "0.52 0.58 0.59"
        assert inspector.details(value)[2] == ("15 min", "0.59")


class TestCustomInspector:
    """Tests for CustomInspector."""

    def test_requires_command(self) -> None:
        assert CustomInspector.requires_command()
        with pytest.raises(ValueError, match="needs a command"):
            CustomInspector()

    def test_summary_truncates(self) -> None:
        inspector = CustomInspector("cat /etc/motd")

        summary = inspector.summarize("x" * 100 + "\nsecond line")

        assert len(summary) == CustomInspector.MAX_CELL
        assert summary.endswith("…")

    def test_command_override(self) -> None:
        assert DiskInspector("df -Pk").command == "df -Pk"
        assert DiskInspector().command == "df -P"


class TestMetricRegistry:
    """Tests for MetricRegistry and InspectorSamplers."""

    def test_builtin_names(self) -> None:
        assert MetricRegistry().names() == ["custom", "disk", "loadavg", "memory", "uptime"]

    def test_unknown_metric(self) -> None:
        registry = MetricRegistry()

        assert not registry.valid("cpu")
        with pytest.raises(KeyError):
            registry.create("cpu")

    @pytest.mark.asyncio
    async def test_sampler_runs_command_on_host_driver(self, make_host) -> None:
        pool = DriverPool()
        host = make_host("db")
        driver = MagicMock()
        driver.run = AsyncMock(return_value="123.0 456.0\n")
        pool._drivers[host.address] = driver

        factory = InspectorSamplers(MetricRegistry(), {"uptime": None}, pool)
        value = await factory(host, "uptime")(3.0)

        assert value == pytest.approx(123.0)
        driver.run.assert_awaited_once_with("cat /proc/uptime", 3.0)
        assert factory.summarize("uptime", value) == "2m"
