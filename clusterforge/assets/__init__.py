"""Built-in producers and the registry a default ``Resolver`` uses.

Usage::

    from clusterforge.assets import DEFAULT_REGISTRY, get_asset

    asset_cls = DEFAULT_REGISTRY.lookup("worker-machines")

    # Or instantiate directly:
    worker = get_asset("worker-machines")
"""

from __future__ import annotations

from clusterforge.assets.agentconfig import AgentConfig, AgentHostConfig
from clusterforge.assets.bootkube import AROIngressService
from clusterforge.assets.cloudproviders import CloudProviderConfig
from clusterforge.assets.dnsmasq import ARODNSConfig
from clusterforge.assets.ignition import MasterIgnition, WorkerIgnition
from clusterforge.assets.installconfig import ClusterID, InstallConfig, PlatformCreds, PlatformCredsCheck
from clusterforge.assets.machines import Master, Worker
from clusterforge.assets.targets import TARGETS, IgnitionConfigs, Manifests
from clusterforge.core.asset import Asset
from clusterforge.core.registry import AssetRegistry

# ---------------------------------------------------------------------------
# Producer registry: dependencies are registered before their consumers
# ---------------------------------------------------------------------------

ASSET_TYPES: list[type] = [
    InstallConfig,
    ClusterID,
    PlatformCreds,
    PlatformCredsCheck,
    AgentConfig,
    AgentHostConfig,
    ARODNSConfig,
    AROIngressService,
    MasterIgnition,
    WorkerIgnition,
    Master,
    Worker,
    CloudProviderConfig,
    Manifests,
    IgnitionConfigs,
]

DEFAULT_REGISTRY = AssetRegistry(ASSET_TYPES)

TARGET_IDS: list[str] = [t.asset_id for t in TARGETS]


def get_asset(asset_id: str) -> Asset:
    """Instantiate a registered producer by its ``asset_id``.

    Raises ``UnknownAssetError`` if the id is not registered.
    """
    return DEFAULT_REGISTRY.lookup(asset_id)()


__all__ = [
    # Registry
    "ASSET_TYPES",
    "DEFAULT_REGISTRY",
    "TARGET_IDS",
    "get_asset",
    # Producers
    "InstallConfig",
    "ClusterID",
    "PlatformCreds",
    "PlatformCredsCheck",
    "AgentConfig",
    "AgentHostConfig",
    "ARODNSConfig",
    "AROIngressService",
    "MasterIgnition",
    "WorkerIgnition",
    "Master",
    "Worker",
    "CloudProviderConfig",
    # Targets
    "Manifests",
    "IgnitionConfigs",
]
