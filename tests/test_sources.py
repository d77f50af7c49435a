"""
Tests for the built-in feature sources against a fake host tree.
"""

import pytest

from node_feature_discovery.exceptions import DetectorError
from node_feature_discovery.sources import (
    DEFAULT_SOURCES,
    SOURCE_REGISTRY,
    available_sources,
    get_source,
    resolve_sources,
)
from node_feature_discovery.sources.cpuid import CpuidSource
from node_feature_discovery.sources.gpu import GpuSource
from node_feature_discovery.sources.iommu import IommuSource
from node_feature_discovery.sources.memory import MemorySource
from node_feature_discovery.sources.network import NetworkSource
from node_feature_discovery.sources.pstate import PstateSource
from node_feature_discovery.sources.rdt import RdtSource
from node_feature_discovery.sources.selinux import SelinuxSource
from node_feature_discovery.sources.storage import StorageSource


CPUINFO = """\
processor\t: 0
vendor_id\t: GenuineIntel
flags\t\t: fpu sse sse2 pni ssse3 sse4_1 sse4_2 aes avx avx2 fma abm cqm cat_l3 mba
bogomips\t: 4800.00

processor\t: 1
vendor_id\t: GenuineIntel
flags\t\t: fpu sse sse2 pni ssse3 sse4_1 sse4_2 aes avx avx2 fma abm cqm cat_l3 mba cqm_occup_llc
"""


def write(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


@pytest.fixture
def sysfs(host_root):
    return host_root / "sys"


@pytest.fixture
def procfs(host_root):
    return host_root / "proc"


class TestRegistry:

    def test_names_match_registry_keys(self):
        for key, factory in SOURCE_REGISTRY.items():
            assert factory().name() == key

    def test_defaults_are_registered_and_exclude_test_sources(self):
        assert set(DEFAULT_SOURCES) <= set(available_sources())
        assert "fake" not in DEFAULT_SOURCES
        assert "panic_fake" not in DEFAULT_SOURCES

    def test_get_source_unknown(self):
        with pytest.raises(KeyError):
            get_source("nope")

    def test_resolve_sources_ignores_unknown_and_blank(self):
        sources = resolve_sources(["", "fake", "nope", "fake"])
        assert [s.name() for s in sources] == ["fake"]


class TestCpuid:

    def test_flags_translated(self, procfs):
        write(procfs / "cpuinfo", CPUINFO)

        features = CpuidSource().discover()

        assert features == sorted(
            ["SSE", "SSE2", "SSE3", "SSSE3", "SSE4.1", "SSE4.2", "AESNI", "AVX", "AVX2", "FMA3", "LZCNT"]
        )

    def test_missing_cpuinfo(self, host_root):
        with pytest.raises(DetectorError) as excinfo:
            CpuidSource().discover()
        assert excinfo.value.source == "cpuid"


class TestRdt:

    def test_monitoring_and_allocation(self, procfs):
        write(procfs / "cpuinfo", CPUINFO)
        assert RdtSource().discover() == ["RDTCMT", "RDTL3CA", "RDTMBA", "RDTMON"]

    def test_no_rdt(self, procfs):
        write(procfs / "cpuinfo", "processor\t: 0\nflags\t\t: fpu sse\n")
        assert RdtSource().discover() == []

    def test_missing_cpuinfo(self, host_root):
        with pytest.raises(DetectorError):
            RdtSource().discover()


class TestIommu:

    def test_enabled(self, sysfs):
        (sysfs / "class" / "iommu" / "dmar0").mkdir(parents=True)
        assert IommuSource().discover() == ["enabled"]

    def test_absent(self, host_root):
        assert IommuSource().discover() == []


class TestMemory:

    def test_numa(self, sysfs):
        root = sysfs / "devices" / "system" / "node"
        for name in ("node0", "node1", "possible"):
            (root / name).mkdir(parents=True)
        assert MemorySource().discover() == ["numa"]

    def test_single_node(self, sysfs):
        (sysfs / "devices" / "system" / "node" / "node0").mkdir(parents=True)
        assert MemorySource().discover() == []

    def test_missing_topology(self, host_root):
        with pytest.raises(DetectorError):
            MemorySource().discover()


class TestNetwork:

    def test_sriov_capable_and_configured(self, sysfs):
        write(sysfs / "class" / "net" / "eth0" / "device" / "sriov_totalvfs", "8\n")
        write(sysfs / "class" / "net" / "eth0" / "device" / "sriov_numvfs", "2\n")
        (sysfs / "class" / "net" / "lo").mkdir(parents=True)

        assert NetworkSource().discover() == ["sriov", "sriov-configured"]

    def test_sriov_capable_only(self, sysfs):
        write(sysfs / "class" / "net" / "eth0" / "device" / "sriov_totalvfs", "8\n")
        write(sysfs / "class" / "net" / "eth0" / "device" / "sriov_numvfs", "0\n")

        assert NetworkSource().discover() == ["sriov"]

    def test_no_sriov(self, sysfs):
        (sysfs / "class" / "net" / "lo").mkdir(parents=True)
        assert NetworkSource().discover() == []

    def test_missing_net_class(self, host_root):
        with pytest.raises(DetectorError):
            NetworkSource().discover()


class TestPstate:

    @pytest.fixture
    def no_turbo(self, sysfs):
        return sysfs / "devices" / "system" / "cpu" / "intel_pstate" / "no_turbo"

    def test_turbo(self, no_turbo):
        write(no_turbo, "0\n")
        assert PstateSource().discover() == ["turbo"]

    def test_turbo_disabled(self, no_turbo):
        write(no_turbo, "1\n")
        assert PstateSource().discover() == []

    def test_driver_missing(self, host_root):
        with pytest.raises(DetectorError, match="intel_pstate"):
            PstateSource().discover()


class TestSelinux:

    def test_enforcing(self, sysfs):
        write(sysfs / "fs" / "selinux" / "enforce", "1\n")
        assert SelinuxSource().discover() == ["enabled"]

    def test_permissive_or_absent(self, sysfs):
        assert SelinuxSource().discover() == []
        write(sysfs / "fs" / "selinux" / "enforce", "0\n")
        assert SelinuxSource().discover() == []


class TestStorage:

    def test_nonrotational(self, sysfs):
        write(sysfs / "block" / "sda" / "queue" / "rotational", "1\n")
        write(sysfs / "block" / "nvme0n1" / "queue" / "rotational", "0\n")
        assert StorageSource().discover() == ["nonrotationaldisk"]

    def test_rotational_only(self, sysfs):
        write(sysfs / "block" / "sda" / "queue" / "rotational", "1\n")
        assert StorageSource().discover() == []

    def test_missing_block_dir(self, host_root):
        with pytest.raises(DetectorError):
            StorageSource().discover()


class TestGpu:

    def pci_device(self, sysfs, slot, vendor, pci_class):
        device = sysfs / "bus" / "pci" / "devices" / slot
        write(device / "vendor", f"{vendor}\n")
        write(device / "class", f"{pci_class}\n")

    @pytest.mark.parametrize("pci_class", ["0x030000", "0x030200"])
    def test_nvidia_display_present(self, sysfs, pci_class):
        self.pci_device(sysfs, "0000:00:02.0", "0x8086", "0x030000")
        self.pci_device(sysfs, "0000:01:00.0", "0x10de", pci_class)

        assert GpuSource().discover() == ["present"]

    def test_nvidia_non_display_function(self, sysfs):
        self.pci_device(sysfs, "0000:01:00.1", "0x10de", "0x040300")

        with pytest.raises(DetectorError, match="failed to detect a gpu"):
            GpuSource().discover()

    def test_other_vendor_is_failure(self, sysfs):
        self.pci_device(sysfs, "0000:00:02.0", "0x8086", "0x030000")

        with pytest.raises(DetectorError) as excinfo:
            GpuSource().discover()
        assert excinfo.value.source == "gpu"

    def test_no_pci_bus(self, host_root):
        with pytest.raises(DetectorError):
            GpuSource().discover()
