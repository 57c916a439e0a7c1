"""Master and worker machine manifests.

Each role gets a list of MachineConfigs (hyperthreading, ssh access, node
DNS) and the user-data secret that carries its pointer Ignition config.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

from clusterforge.assets._formatting import dump_yaml, parse_yaml_model
from clusterforge.assets.dnsmasq import ARODNSConfig
from clusterforge.assets.ignition import MasterIgnition, WorkerIgnition
from clusterforge.assets.installconfig import ClusterID, InstallConfig
from clusterforge.core.asset import File
from clusterforge.core.fetcher import FileFetcher
from clusterforge.core.parents import Parents
from clusterforge.models.ignition import IgnitionConfig, Passwd, PasswdUser
from clusterforge.models.install_config import ClusterInstallConfig, HyperthreadingMode
from clusterforge.models.machineconfig import MachineConfig

logger = logging.getLogger(__name__)

OPENSHIFT_DIR = "openshift"
MACHINE_CONFIG_FILENAME = OPENSHIFT_DIR + "/99_openshift-machineconfig_{name}.yaml"
USER_DATA_SECRET_FILENAME = OPENSHIFT_DIR + "/99_openshift-cluster-api_{role}-user-data-secret.yaml"
MACHINE_API_NAMESPACE = "openshift-machine-api"
CLUSTER_LABEL = "machine.openshift.io/cluster-api-cluster"


# ---------------------------------------------------------------------------
# MachineConfig builders
# ---------------------------------------------------------------------------

def for_hyperthreading_disabled(role: str) -> MachineConfig:
    return MachineConfig.for_role(
        f"99-{role}-disable-hyperthreading",
        role,
        IgnitionConfig().to_dict(),
        kernel_arguments=["nosmt"],
    )


def for_authorized_keys(key: str, role: str) -> MachineConfig:
    ignition = IgnitionConfig(
        passwd=Passwd(users=[PasswdUser(name="core", ssh_authorized_keys=[key])])
    )
    return MachineConfig.for_role(f"99-{role}-ssh", role, ignition.to_dict())


def machine_configs(role: str, config: ClusterInstallConfig, aro_dns: ARODNSConfig) -> list[MachineConfig]:
    """Return the MachineConfigs for *role* in their fixed order."""
    configs: list[MachineConfig] = []
    pool = config.pool_for_role(role)
    if pool is not None and pool.hyperthreading == HyperthreadingMode.DISABLED:
        configs.append(for_hyperthreading_disabled(role))
    if config.ssh_key:
        configs.append(for_authorized_keys(config.ssh_key, role))
    configs.append(aro_dns.machine_config(role))
    return configs


def user_data_secret(role: str, infra_id: str, user_data: bytes) -> dict[str, Any]:
    """Secret holding the pointer Ignition config machines boot from."""
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {
            "name": f"{role}-user-data",
            "namespace": MACHINE_API_NAMESPACE,
            "labels": {CLUSTER_LABEL: infra_id},
        },
        "type": "Opaque",
        "data": {
            "disableTemplating": base64.b64encode(b"true").decode("ascii"),
            "userData": base64.b64encode(user_data).decode("ascii"),
        },
    }


# ---------------------------------------------------------------------------
# Shared generate / load
# ---------------------------------------------------------------------------

class _MachineFiles:
    """Generated or loaded state of one role's machine manifests."""

    def __init__(self) -> None:
        self.machine_config_files: list[File] = []
        self.user_data_file: File | None = None

    def files(self) -> list[File]:
        files = list(self.machine_config_files)
        if self.user_data_file is not None:
            files.append(self.user_data_file)
        return files


def _generate(role: str, ignition_type: type, parents: Parents) -> _MachineFiles:
    # The install config is read, never modified.
    config = parents.get(InstallConfig).require()
    cluster_id = parents.get(ClusterID)
    ignition_file = parents.get(ignition_type).file
    aro_dns = parents.get(ARODNSConfig)

    state = _MachineFiles()
    state.machine_config_files = [
        File(
            filename=MACHINE_CONFIG_FILENAME.format(name=mc.metadata.name),
            data=dump_yaml(mc.to_dict()),
        )
        for mc in machine_configs(role, config, aro_dns)
    ]
    if ignition_file is not None:
        state.user_data_file = File(
            filename=USER_DATA_SECRET_FILENAME.format(role=role),
            data=dump_yaml(user_data_secret(role, cluster_id.infra_id, ignition_file.data)),
        )
    logger.debug("Prepared %d machine configs for role %s", len(state.machine_config_files), role)
    return state


def _load(role: str, fetcher: FileFetcher) -> _MachineFiles | None:
    pattern = MACHINE_CONFIG_FILENAME.format(name=f"99-{role}-*")
    found = fetcher.fetch_by_pattern(pattern)
    if not found:
        return None

    for file in found:
        mc = parse_yaml_model(MachineConfig, file.data, file.filename)
        if mc.role != role:
            raise ValueError(f"{file.filename}: expected role {role!r}, found {mc.role!r}")

    state = _MachineFiles()
    state.machine_config_files = found
    try:
        state.user_data_file = fetcher.fetch_by_name(USER_DATA_SECRET_FILENAME.format(role=role))
    except FileNotFoundError:
        pass
    return state


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------

class Master:
    asset_id = "master-machines"
    name = "Master Machines"

    def __init__(self) -> None:
        self.state = _MachineFiles()

    @property
    def machine_config_files(self) -> list[File]:
        return self.state.machine_config_files

    def dependencies(self) -> list[type]:
        return [ClusterID, InstallConfig, MasterIgnition, ARODNSConfig]

    def generate(self, parents: Parents) -> None:
        self.state = _generate("master", MasterIgnition, parents)

    def files(self) -> list[File]:
        return self.state.files()

    def load(self, fetcher: FileFetcher) -> bool:
        state = _load("master", fetcher)
        if state is None:
            return False
        self.state = state
        return True


class Worker:
    asset_id = "worker-machines"
    name = "Worker Machines"

    def __init__(self) -> None:
        self.state = _MachineFiles()

    @property
    def machine_config_files(self) -> list[File]:
        return self.state.machine_config_files

    def dependencies(self) -> list[type]:
        return [ClusterID, InstallConfig, WorkerIgnition, ARODNSConfig]

    def generate(self, parents: Parents) -> None:
        self.state = _generate("worker", WorkerIgnition, parents)

    def files(self) -> list[File]:
        return self.state.files()

    def load(self, fetcher: FileFetcher) -> bool:
        state = _load("worker", fetcher)
        if state is None:
            return False
        self.state = state
        return True
