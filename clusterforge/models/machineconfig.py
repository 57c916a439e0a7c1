"""MachineConfig documents consumed by the machine-config operator."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MACHINECONFIG_API_VERSION = "machineconfiguration.openshift.io/v1"
ROLE_LABEL = "machineconfiguration.openshift.io/role"


class _MachineConfigModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class MachineConfigMeta(_MachineConfigModel):
    name: str
    labels: dict[str, str] = {}


class MachineConfigSpec(_MachineConfigModel):
    config: dict[str, Any]
    kernel_arguments: list[str] | None = None
    extensions: list[str] | None = None
    fips: bool = False
    kernel_type: str = ""
    os_image_url: str = Field(default="", alias="osImageURL")


class MachineConfig(_MachineConfigModel):
    api_version: str = MACHINECONFIG_API_VERSION
    kind: str = "MachineConfig"
    metadata: MachineConfigMeta
    spec: MachineConfigSpec

    @classmethod
    def for_role(
        cls,
        name: str,
        role: str,
        config: dict[str, Any],
        *,
        kernel_arguments: list[str] | None = None,
    ) -> MachineConfig:
        return cls(
            metadata=MachineConfigMeta(name=name, labels={ROLE_LABEL: role}),
            spec=MachineConfigSpec(config=config, kernel_arguments=kernel_arguments),
        )

    @property
    def role(self) -> str:
        return self.metadata.labels.get(ROLE_LABEL, "")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
