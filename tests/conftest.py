from unittest.mock import MagicMock

import pytest
from kubernetes import client

from node_feature_discovery import config
from node_feature_discovery.k8s import APIHelpers


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test sees settings rebuilt from its own environment."""
    config._settings = None
    yield
    config._settings = None


@pytest.fixture
def host_root(tmp_path, monkeypatch):
    """Empty fake host with sys/ and proc/ roots wired into the settings."""
    sysfs = tmp_path / "sys"
    procfs = tmp_path / "proc"
    sysfs.mkdir()
    procfs.mkdir()
    monkeypatch.setenv("NFD_SYSFS_ROOT", str(sysfs))
    monkeypatch.setenv("NFD_PROCFS_ROOT", str(procfs))
    config.reload_settings()
    return tmp_path


@pytest.fixture
def node():
    """Node object carrying a foreign label and two stale feature labels."""
    return client.V1Node(
        metadata=client.V1ObjectMeta(
            name="worker-1",
            labels={
                "kubernetes.io/hostname": "worker-1",
                "node.alpha.kubernetes-incubator.io/nfd-cpuid-AVX": "true",
                "node.alpha.kubernetes-incubator.io/nfd-gpu-present": "true",
            },
        )
    )


@pytest.fixture
def mock_helper():
    """APIHelpers mock; the collaborator calls are recorded in mock_calls."""
    return MagicMock(spec=APIHelpers)
