"""Per-host agent configuration and the host config files derived from it."""

from __future__ import annotations

import logging

from clusterforge.assets._formatting import dump_yaml, parse_yaml_model
from clusterforge.core.asset import File
from clusterforge.core.fetcher import FileFetcher
from clusterforge.core.parents import Parents
from clusterforge.models.agent import AgentConfigDocument
from clusterforge.models.validation import (
    FieldError,
    forbidden,
    raise_if_errors,
    required,
)

logger = logging.getLogger(__name__)

AGENT_CONFIG_FILENAME = "agent-config.yaml"
HOST_CONFIG_DIR = "hostconfig"

_VALID_ROLES = ("master", "worker")


class AgentConfig:
    """Reads ``agent-config.yaml``.

    The file is optional: when it is absent, generation leaves the asset
    empty instead of failing.
    """

    asset_id = "agent-config"
    name = "Agent Config"

    def __init__(self) -> None:
        self.file: File | None = None
        self.config: AgentConfigDocument | None = None

    def dependencies(self) -> list[type]:
        return []

    def generate(self, parents: Parents) -> None:
        return None

    def files(self) -> list[File]:
        return [self.file] if self.file else []

    def load(self, fetcher: FileFetcher) -> bool:
        try:
            file = fetcher.fetch_by_name(AGENT_CONFIG_FILENAME)
        except FileNotFoundError:
            return False

        config = parse_yaml_model(AgentConfigDocument, file.data, AGENT_CONFIG_FILENAME)
        raise_if_errors("Agent Config configuration", validate_agent_config(config))
        self.file, self.config = file, config
        return True

    def host_config_files(self) -> dict[str, bytes]:
        """Map ``<host>/<file>`` to contents for host-specific configuration."""
        if self.config is None:
            return {}

        files: dict[str, bytes] = {}
        for i, host in enumerate(self.config.hosts):
            host_name = host.hostname or f"host-{i}"

            macs = [iface.mac_address.lower() + "\n" for iface in host.interfaces]
            if macs:
                files[f"{host_name}/mac_addresses"] = "".join(macs).encode("utf-8")

            if not host.root_device_hints.is_empty():
                hints = host.root_device_hints.model_dump(
                    mode="json", by_alias=True, exclude_defaults=True
                )
                files[f"{host_name}/root-device-hints.yaml"] = dump_yaml(hints)

            if host.role:
                files[f"{host_name}/role"] = host.role.encode("utf-8")
        return files


def validate_agent_config(config: AgentConfigDocument) -> list[FieldError]:
    """Collect every violation instead of stopping at the first."""
    return [
        *_validate_interfaces(config),
        *_validate_root_device_hints(config),
        *_validate_roles(config),
    ]


def _validate_interfaces(config: AgentConfigDocument) -> list[FieldError]:
    errors: list[FieldError] = []
    for i, host in enumerate(config.hosts):
        interface_path = f"hosts[{i}].interfaces"
        if not host.interfaces:
            errors.append(required(interface_path, "at least one interface must be defined for each node"))
        for j, iface in enumerate(host.interfaces):
            if not iface.mac_address:
                errors.append(
                    required(f"{interface_path}[{j}].macAddress", "each interface must have a MAC address defined")
                )
    return errors


def _validate_root_device_hints(config: AgentConfigDocument) -> list[FieldError]:
    errors: list[FieldError] = []
    for i, host in enumerate(config.hosts):
        hints_path = f"hosts[{i}].rootDeviceHints"
        if host.root_device_hints.wwn_with_extension:
            errors.append(
                forbidden(f"{hints_path}.wwnWithExtension", "WWN extensions are not supported in root device hints")
            )
        if host.root_device_hints.wwn_vendor_extension:
            errors.append(
                forbidden(
                    f"{hints_path}.wwnVendorExtension",
                    "WWN vendor extensions are not supported in root device hints",
                )
            )
    return errors


def _validate_roles(config: AgentConfigDocument) -> list[FieldError]:
    return [
        forbidden(
            f"hosts[{i}].role",
            "host role has incorrect value. Role must either be 'master' or 'worker'",
        )
        for i, host in enumerate(config.hosts)
        if host.role and host.role not in _VALID_ROLES
    ]


class AgentHostConfig:
    """Writes ``hostconfig/<host>/...`` files from the agent config."""

    asset_id = "agent-host-config"
    name = "Agent Host Config"

    def __init__(self) -> None:
        self.file_list: list[File] = []

    def dependencies(self) -> list[type]:
        return [AgentConfig]

    def generate(self, parents: Parents) -> None:
        agent_config = parents.get(AgentConfig)
        self.file_list = [
            File(filename=f"{HOST_CONFIG_DIR}/{path}", data=data)
            for path, data in sorted(agent_config.host_config_files().items())
        ]
        logger.debug("Prepared %d host config files", len(self.file_list))

    def files(self) -> list[File]:
        return list(self.file_list)

    def load(self, fetcher: FileFetcher) -> bool:
        return False
