"""Node-local DNS cache (dnsmasq) for ARO clusters.

Every node runs dnsmasq in front of the VNET's resolvers so that the API,
internal API and ingress names resolve to in-cluster addresses even before
cluster DNS is up.  The asset renders the configuration once; each machine
role gets it wrapped in its own ``99-<role>-aro-dns`` MachineConfig.
"""

from __future__ import annotations

from clusterforge.assets._formatting import read_template, render_template
from clusterforge.assets.installconfig import InstallConfig
from clusterforge.core.asset import File
from clusterforge.core.fetcher import FileFetcher
from clusterforge.core.parents import Parents
from clusterforge.models.ignition import (
    IgnitionConfig,
    IgnitionFile,
    NodeUser,
    Resource,
    Storage,
    Systemd,
    SystemdUnit,
    encode_data_url,
)
from clusterforge.models.install_config import AROSettings
from clusterforge.models.machineconfig import MachineConfig

DNSMASQ_CONF_PATH = "/etc/dnsmasq.conf"
PRE_START_SCRIPT_PATH = "/usr/local/bin/aro-dnsmasq-pre.sh"
RESTART_DISPATCHER_PATH = "/etc/NetworkManager/dispatcher.d/99-dnsmasq-restart"
UNIT_NAME = "dnsmasq.service"


def render_config(cluster_domain: str, aro: AROSettings) -> bytes:
    """Render ``/etc/dnsmasq.conf``."""
    return render_template(
        "dnsmasq/dnsmasq.conf.j2",
        cluster_domain=cluster_domain,
        api_int_ip=aro.api_int_ip,
        ingress_ip=aro.ingress_ip,
        gateway_domains=aro.gateway_domains,
        gateway_private_endpoint_ip=aro.gateway_private_endpoint_ip,
    ).encode("utf-8")


def _root_file(path: str, data: bytes, mode: int) -> IgnitionFile:
    return IgnitionFile(
        path=path,
        overwrite=True,
        user=NodeUser(name="root"),
        mode=mode,
        contents=Resource(source=encode_data_url(data)),
    )


def ignition_config(cluster_domain: str, aro: AROSettings) -> IgnitionConfig:
    """Build the Ignition fragment: three files and the dnsmasq unit."""
    return IgnitionConfig(
        storage=Storage(
            files=[
                _root_file(DNSMASQ_CONF_PATH, render_config(cluster_domain, aro), 0o644),
                _root_file(PRE_START_SCRIPT_PATH, read_template("dnsmasq/aro-dnsmasq-pre.sh"), 0o744),
                _root_file(RESTART_DISPATCHER_PATH, read_template("dnsmasq/99-dnsmasq-restart"), 0o744),
            ]
        ),
        systemd=Systemd(
            units=[
                SystemdUnit(
                    name=UNIT_NAME,
                    enabled=True,
                    contents=read_template("dnsmasq/dnsmasq.service").decode("utf-8"),
                )
            ]
        ),
    )


class ARODNSConfig:
    """Renders the dnsmasq configuration shared by every machine role.

    Contributes no files of its own; the machine assets embed it.
    """

    asset_id = "aro-dns-config"
    name = "ARO DNS Config"

    def __init__(self) -> None:
        self.ignition: IgnitionConfig | None = None

    def dependencies(self) -> list[type]:
        return [InstallConfig]

    def generate(self, parents: Parents) -> None:
        config = parents.get(InstallConfig).require()
        self.ignition = ignition_config(config.cluster_domain, config.aro)

    def files(self) -> list[File]:
        return []

    def load(self, fetcher: FileFetcher) -> bool:
        return False

    def machine_config(self, role: str) -> MachineConfig:
        """Wrap the rendered fragment for one machine role."""
        if self.ignition is None:
            raise ValueError(f"{self.name} has not been generated")
        return MachineConfig.for_role(
            f"99-{role}-aro-dns", role, self.ignition.to_dict()
        )
