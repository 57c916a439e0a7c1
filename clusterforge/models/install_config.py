"""Schema of the user-supplied ``install-config.yaml``.

Keys are camelCase on disk, snake_case in Python.  Unknown keys are
rejected so that a typo in a hand-edited file surfaces as malformed state
instead of being silently ignored.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _Strict(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class HyperthreadingMode(str, Enum):
    ENABLED = "Enabled"
    DISABLED = "Disabled"


class ObjectMeta(_Strict):
    name: str


class AWSMachinePool(_Strict):
    zones: list[str] = []
    instance_type: str = Field(default="", alias="type")


class AWSPlatform(_Strict):
    region: str
    default_machine_platform: AWSMachinePool | None = None


class AzurePlatform(_Strict):
    region: str
    cloud_name: str = "AzurePublicCloud"
    base_domain_resource_group_name: str = ""
    network_resource_group_name: str = ""
    virtual_network: str = ""
    compute_subnet: str = ""
    control_plane_subnet: str = ""


class GCPPlatform(_Strict):
    project_id: str = Field(alias="projectID")
    region: str
    network: str = ""
    compute_subnet: str = ""


class OpenStackPlatform(_Strict):
    cloud: str
    external_network: str = ""


class VSpherePlatform(_Strict):
    v_center: str = Field(alias="vCenter")
    datacenter: str
    default_datastore: str
    folder: str = ""
    cluster: str = ""


class Platform(_Strict):
    """Exactly one platform section must be present."""

    aws: AWSPlatform | None = None
    azure: AzurePlatform | None = None
    gcp: GCPPlatform | None = None
    openstack: OpenStackPlatform | None = None
    vsphere: VSpherePlatform | None = None
    none: dict[str, Any] | None = None
    baremetal: dict[str, Any] | None = None
    libvirt: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> Platform:
        configured = [k for k in type(self).model_fields if getattr(self, k) is not None]
        if len(configured) != 1:
            raise ValueError(
                f"exactly one platform must be configured, got {configured or 'none'}"
            )
        return self

    @property
    def name(self) -> str:
        """The configured platform key, e.g. ``"aws"``."""
        return next(k for k in type(self).model_fields if getattr(self, k) is not None)


class MachinePool(_Strict):
    name: str = "worker"
    replicas: int | None = None
    hyperthreading: HyperthreadingMode = HyperthreadingMode.ENABLED
    platform: dict[str, Any] = {}


class AROSettings(_Strict):
    """Addresses served by the node-local DNS cache."""

    api_int_ip: str = Field(default="", alias="apiIntIP")
    ingress_ip: str = Field(default="", alias="ingressIP")
    gateway_domains: list[str] = []
    gateway_private_endpoint_ip: str = Field(default="", alias="gatewayPrivateEndpointIP")


class ClusterInstallConfig(_Strict):
    """Top-level install configuration."""

    api_version: str = "v1"
    metadata: ObjectMeta
    base_domain: str
    ssh_key: str = ""
    platform: Platform
    control_plane: MachinePool = MachinePool(name="master")
    compute: list[MachinePool] = [MachinePool(name="worker")]
    aro: AROSettings = AROSettings()

    @property
    def cluster_name(self) -> str:
        return self.metadata.name

    @property
    def cluster_domain(self) -> str:
        """``<name>.<baseDomain>``."""
        return f"{self.metadata.name}.{self.base_domain}"

    def pool_for_role(self, role: str) -> MachinePool | None:
        """Return the machine pool backing *role* (``master`` or ``worker``)."""
        if role == "master":
            return self.control_plane
        for pool in self.compute:
            if pool.name == role:
                return pool
        return self.compute[0] if self.compute else None
