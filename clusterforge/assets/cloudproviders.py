"""In-cluster cloud provider configuration.

Platforms whose cloud controller needs a config file get it published as
the ``openshift-config/cloud-provider-config`` ConfigMap.  Platforms that
need none (aws, libvirt, none, baremetal) produce no file at all.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from clusterforge.assets._formatting import dump_yaml, render_template
from clusterforge.assets.installconfig import ClusterID, InstallConfig, PlatformCreds, PlatformCredsCheck
from clusterforge.config import AzureCredentials, OpenStackCredentials
from clusterforge.core.asset import File
from clusterforge.core.fetcher import FileFetcher
from clusterforge.core.parents import Parents
from clusterforge.models.install_config import AzurePlatform, ClusterInstallConfig, GCPPlatform, VSpherePlatform

logger = logging.getLogger(__name__)

CLOUD_PROVIDER_CONFIG_FILENAME = "manifests/cloud-provider-config.yaml"
CONFIG_DATA_KEY = "config"

_NO_CONFIG_PLATFORMS = frozenset({"aws", "libvirt", "none", "baremetal"})


# ---------------------------------------------------------------------------
# Per-platform renderers
# ---------------------------------------------------------------------------

def azure_config(platform: AzurePlatform, infra_id: str, creds: AzureCredentials) -> str:
    """Azure cloud provider JSON, tab-indented with a trailing newline."""
    config = {
        "cloud": platform.cloud_name,
        "tenantId": creds.tenant_id,
        "aadClientId": "",
        "aadClientSecret": "",
        "subscriptionId": creds.subscription_id,
        "useManagedIdentityExtension": True,
        "userAssignedIdentityID": "",
        "resourceGroup": f"{infra_id}-rg",
        "location": platform.region,
        "vmType": "standard",
        "subnetName": platform.compute_subnet or f"{infra_id}-worker-subnet",
        "securityGroupName": f"{infra_id}-node-nsg",
        "vnetName": platform.virtual_network or f"{infra_id}-vnet",
        "vnetResourceGroup": platform.network_resource_group_name or f"{infra_id}-rg",
        "routeTableName": f"{infra_id}-node-routetable",
        "cloudProviderBackoff": True,
        "cloudProviderBackoffDuration": 6,
        "useInstanceMetadata": True,
        "loadBalancerSku": "standard",
        "excludeMasterFromStandardLB": False,
    }
    return json.dumps(config, indent="\t") + "\n"


def gcp_config(platform: GCPPlatform, infra_id: str) -> str:
    return render_template(
        "cloudprovider/gcp.ini.j2",
        project_id=platform.project_id,
        infra_id=infra_id,
        subnet=platform.compute_subnet or f"{infra_id}-worker-subnet",
    )


def vsphere_config(cluster_name: str, platform: VSpherePlatform) -> str:
    folder = platform.folder or f"/{platform.datacenter}/vm/{cluster_name}"
    return render_template("cloudprovider/vsphere.ini.j2", vsphere=platform, folder=folder)


def openstack_config(creds: OpenStackCredentials) -> str:
    return render_template("cloudprovider/openstack.ini.j2", creds=creds)


def render_cloud_config(config: ClusterInstallConfig, infra_id: str, creds: PlatformCreds) -> str | None:
    """Return the config text for the configured platform, or ``None``."""
    platform = config.platform
    name = platform.name
    if name in _NO_CONFIG_PLATFORMS:
        return None
    if name == "azure":
        return azure_config(platform.azure, infra_id, creds.azure or AzureCredentials())
    if name == "gcp":
        return gcp_config(platform.gcp, infra_id)
    if name == "vsphere":
        return vsphere_config(config.cluster_name, platform.vsphere)
    if name == "openstack":
        return openstack_config(creds.openstack or OpenStackCredentials())
    raise ValueError(f"invalid platform {name!r}")


def config_map(data: str) -> dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {
            "namespace": "openshift-config",
            "name": "cloud-provider-config",
        },
        "data": {CONFIG_DATA_KEY: data},
    }


# ---------------------------------------------------------------------------
# Asset
# ---------------------------------------------------------------------------

class CloudProviderConfig:
    """Generates ``manifests/cloud-provider-config.yaml``.

    Never loaded from disk: the config follows the install config and
    credentials of the current run.
    """

    asset_id = "cloud-provider-config"
    name = "Cloud Provider Config"

    def __init__(self) -> None:
        self.config_map: dict[str, Any] | None = None
        self.file: File | None = None

    def dependencies(self) -> list[type]:
        # PlatformCredsCheck is not read in generate; depending on it
        # makes missing credentials fail before rendering.
        return [PlatformCreds, InstallConfig, ClusterID, PlatformCredsCheck]

    def generate(self, parents: Parents) -> None:
        install_config, cluster_id, creds = parents.get_many(InstallConfig, ClusterID, PlatformCreds)
        config = install_config.require()

        data = render_cloud_config(config, cluster_id.infra_id, creds)
        if data is None:
            logger.debug("Platform %s needs no cloud provider config", config.platform.name)
            self.config_map, self.file = None, None
            return

        self.config_map = config_map(data)
        self.file = File(filename=CLOUD_PROVIDER_CONFIG_FILENAME, data=dump_yaml(self.config_map))

    def files(self) -> list[File]:
        return [self.file] if self.file else []

    def load(self, fetcher: FileFetcher) -> bool:
        return False
