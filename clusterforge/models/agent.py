"""Schema of the optional ``agent-config.yaml`` (per-host settings)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Strict(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class AgentMetadata(_Strict):
    name: str = ""


class Interface(_Strict):
    name: str = ""
    mac_address: str = ""


class RootDeviceHints(_Strict):
    device_name: str = ""
    hctl: str = Field(default="", alias="HCTL")
    model: str = ""
    vendor: str = ""
    serial_number: str = ""
    min_size_gigabytes: int | None = None
    wwn: str = ""
    wwn_with_extension: str = ""
    wwn_vendor_extension: str = ""
    rotational: bool | None = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_defaults=True)


class HostConfig(_Strict):
    hostname: str = ""
    role: str = ""
    interfaces: list[Interface] = []
    root_device_hints: RootDeviceHints = RootDeviceHints()


class AgentConfigDocument(_Strict):
    api_version: str = "v1alpha1"
    metadata: AgentMetadata = AgentMetadata()
    rendezvous_ip: str = Field(default="", alias="rendezvousIP")
    hosts: list[HostConfig] = []
