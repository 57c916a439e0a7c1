"""Tests for Master/Worker machine manifests."""

from __future__ import annotations

import base64
from pathlib import Path

import pytest
import yaml

from clusterforge.assets.dnsmasq import ARODNSConfig
from clusterforge.assets.ignition import MasterIgnition, WorkerIgnition
from clusterforge.assets.installconfig import ClusterID
from clusterforge.assets.machines import Master, Worker
from clusterforge.core.asset import File
from clusterforge.core.parents import Parents
from clusterforge.core.writer import AssetWriter

ARO_DNS_FILE = "openshift/99_openshift-machineconfig_99-worker-aro-dns.yaml"
SSH_FILE = "openshift/99_openshift-machineconfig_99-worker-ssh.yaml"
HT_FILE = "openshift/99_openshift-machineconfig_99-worker-disable-hyperthreading.yaml"
WORKER_SECRET = "openshift/99_openshift-cluster-api_worker-user-data-secret.yaml"


@pytest.fixture
def build_parents(make_install_config):
    """Return a factory for a Worker/Master dependency bundle."""

    def _build(data, *, role="worker") -> Parents:
        install_config = make_install_config(data)
        cluster_id = ClusterID()
        cluster_id.uuid, cluster_id.infra_id = "test-uuid", "test-infra-id"
        ignition = WorkerIgnition() if role == "worker" else MasterIgnition()
        ignition.file = File(filename=f"{role}-ignition", data=b"test-ignition")
        aro_dns = ARODNSConfig()
        aro_dns.generate(Parents([install_config]))
        return Parents([cluster_id, install_config, ignition, aro_dns])

    return _build


def _machine_config_names(asset) -> list[str]:
    return [f.filename for f in asset.machine_config_files]


class TestWorkerGenerate:
    @pytest.mark.parametrize(
        ("key", "hyperthreading", "expected"),
        [
            ("", "Enabled", [ARO_DNS_FILE]),
            ("ssh-rsa: dummy-key", "Enabled", [SSH_FILE, ARO_DNS_FILE]),
            ("", "Disabled", [HT_FILE, ARO_DNS_FILE]),
            ("ssh-rsa: dummy-key", "Disabled", [HT_FILE, SSH_FILE, ARO_DNS_FILE]),
        ],
    )
    def test_machine_configs(self, build_parents, install_config_data, key, hyperthreading, expected):
        if key:
            install_config_data["sshKey"] = key
        install_config_data["compute"][0]["hyperthreading"] = hyperthreading
        worker = Worker()

        worker.generate(build_parents(install_config_data))

        assert _machine_config_names(worker) == expected

    def test_aro_dns_machine_config_contents(self, build_parents, install_config_data):
        worker = Worker()
        worker.generate(build_parents(install_config_data))

        document = yaml.safe_load(worker.machine_config_files[-1].data)

        assert document["apiVersion"] == "machineconfiguration.openshift.io/v1"
        assert document["kind"] == "MachineConfig"
        assert document["metadata"]["name"] == "99-worker-aro-dns"
        assert document["metadata"]["labels"] == {"machineconfiguration.openshift.io/role": "worker"}
        files = document["spec"]["config"]["storage"]["files"]
        assert [f["path"] for f in files] == [
            "/etc/dnsmasq.conf",
            "/usr/local/bin/aro-dnsmasq-pre.sh",
            "/etc/NetworkManager/dispatcher.d/99-dnsmasq-restart",
        ]
        assert [f["mode"] for f in files] == [420, 484, 484]
        unit = document["spec"]["config"]["systemd"]["units"][0]
        assert unit["name"] == "dnsmasq.service"
        assert unit["enabled"] is True
        assert document["spec"]["kernelArguments"] is None
        assert document["spec"]["fips"] is False
        assert document["spec"]["osImageURL"] == ""

    def test_ssh_machine_config_contents(self, build_parents, install_config_data):
        install_config_data["sshKey"] = "ssh-rsa: dummy-key"
        worker = Worker()
        worker.generate(build_parents(install_config_data))

        document = yaml.safe_load(worker.machine_config_files[0].data)

        assert document["spec"]["config"] == {
            "ignition": {"version": "3.2.0"},
            "passwd": {"users": [{"name": "core", "sshAuthorizedKeys": ["ssh-rsa: dummy-key"]}]},
        }

    def test_hyperthreading_machine_config_contents(self, build_parents, install_config_data):
        install_config_data["compute"][0]["hyperthreading"] = "Disabled"
        worker = Worker()
        worker.generate(build_parents(install_config_data))

        document = yaml.safe_load(worker.machine_config_files[0].data)

        assert document["spec"]["config"] == {"ignition": {"version": "3.2.0"}}
        assert document["spec"]["kernelArguments"] == ["nosmt"]

    def test_user_data_secret(self, build_parents, install_config_data):
        worker = Worker()
        worker.generate(build_parents(install_config_data))

        secret_file = worker.files()[-1]
        secret = yaml.safe_load(secret_file.data)

        assert secret_file.filename == WORKER_SECRET
        assert secret["metadata"]["name"] == "worker-user-data"
        assert secret["metadata"]["namespace"] == "openshift-machine-api"
        assert secret["metadata"]["labels"]["machine.openshift.io/cluster-api-cluster"] == "test-infra-id"
        assert base64.b64decode(secret["data"]["userData"]) == b"test-ignition"
        assert base64.b64decode(secret["data"]["disableTemplating"]) == b"true"

    def test_install_config_is_not_modified(self, build_parents, install_config_data):
        install_config_data["sshKey"] = "ssh-rsa: dummy-key"
        install_config_data["compute"][0]["hyperthreading"] = "Disabled"
        install_config_data["compute"][0]["platform"]["aws"]["type"] = ""
        parents = build_parents(install_config_data)
        config = parents.get("install-config").config
        before = config.model_dump()

        Worker().generate(parents)

        assert config.model_dump() == before
        assert config.compute[0].platform["aws"]["type"] == ""


class TestMasterGenerate:
    def test_control_plane_pool_drives_hyperthreading(self, build_parents, install_config_data):
        install_config_data["controlPlane"] = {"name": "master", "hyperthreading": "Disabled"}
        master = Master()

        master.generate(build_parents(install_config_data, role="master"))

        assert _machine_config_names(master) == [
            "openshift/99_openshift-machineconfig_99-master-disable-hyperthreading.yaml",
            "openshift/99_openshift-machineconfig_99-master-aro-dns.yaml",
        ]
        role = yaml.safe_load(master.machine_config_files[0].data)["metadata"]["labels"]
        assert role == {"machineconfiguration.openshift.io/role": "master"}


class TestLoad:
    def test_reload_round_trips_bytes(self, build_parents, install_config_data, asset_dir: Path, fetcher):
        install_config_data["sshKey"] = "ssh-rsa: dummy-key"
        worker = Worker()
        worker.generate(build_parents(install_config_data))
        AssetWriter(asset_dir).write(worker.files())

        reloaded = Worker()
        assert reloaded.load(fetcher) is True

        assert sorted(reloaded.files(), key=lambda f: f.filename) == sorted(
            worker.files(), key=lambda f: f.filename
        )

    def test_nothing_persisted(self, fetcher):
        assert Worker().load(fetcher) is False

    def test_master_files_are_not_worker_files(self, build_parents, install_config_data, asset_dir: Path, fetcher):
        master = Master()
        master.generate(build_parents(install_config_data, role="master"))
        AssetWriter(asset_dir).write(master.files())

        assert Worker().load(fetcher) is False
        assert Master().load(fetcher) is True

    def test_malformed_machine_config_is_fatal(self, asset_dir: Path, fetcher):
        path = asset_dir / ARO_DNS_FILE
        path.parent.mkdir(parents=True)
        path.write_text("kind: [unterminated")

        with pytest.raises(ValueError, match="failed to parse"):
            Worker().load(fetcher)

    def test_role_mismatch_is_fatal(self, build_parents, install_config_data, asset_dir: Path, fetcher):
        master = Master()
        master.generate(build_parents(install_config_data, role="master"))
        path = asset_dir / ARO_DNS_FILE
        path.parent.mkdir(parents=True)
        path.write_bytes(master.machine_config_files[-1].data)

        with pytest.raises(ValueError, match="expected role 'worker'"):
            Worker().load(fetcher)
