"""Cluster-level inputs: install config, cluster identity, platform credentials."""

from __future__ import annotations

import hashlib
import logging
import uuid

from clusterforge.assets._formatting import dump_yaml, parse_yaml_model
from clusterforge.config import AzureCredentials, OpenStackCredentials, VSphereCredentials
from clusterforge.core.asset import File
from clusterforge.core.fetcher import FileFetcher
from clusterforge.core.parents import Parents
from clusterforge.models.install_config import ClusterInstallConfig
from clusterforge.models.validation import FieldError, raise_if_errors, required

logger = logging.getLogger(__name__)

INSTALL_CONFIG_FILENAME = "install-config.yaml"

# Infra IDs end up in cloud resource names, several of which cap at 32 chars.
_INFRA_ID_NAME_LIMIT = 27


class InstallConfig:
    """The user-supplied ``install-config.yaml``.

    This is a leaf: it can only be loaded, never generated.
    """

    asset_id = "install-config"
    name = "Install Config"

    def __init__(self) -> None:
        self.config: ClusterInstallConfig | None = None
        self.file: File | None = None

    @classmethod
    def from_config(cls, config: ClusterInstallConfig) -> InstallConfig:
        """Build an already-resolved instance from a parsed config."""
        asset = cls()
        asset.config = config
        asset.file = File(
            filename=INSTALL_CONFIG_FILENAME,
            data=dump_yaml(config.model_dump(mode="json", by_alias=True, exclude_defaults=True)),
        )
        return asset

    def dependencies(self) -> list[type]:
        return []

    def generate(self, parents: Parents) -> None:
        raise ValueError(
            f"{INSTALL_CONFIG_FILENAME} must be provided in the asset directory"
        )

    def files(self) -> list[File]:
        return [self.file] if self.file else []

    def load(self, fetcher: FileFetcher) -> bool:
        try:
            file = fetcher.fetch_by_name(INSTALL_CONFIG_FILENAME)
        except FileNotFoundError:
            return False
        self.config = parse_yaml_model(ClusterInstallConfig, file.data, INSTALL_CONFIG_FILENAME)
        self.file = file
        return True

    def require(self) -> ClusterInstallConfig:
        if self.config is None:
            raise ValueError("install config has not been resolved")
        return self.config


class ClusterID:
    """Stable identifiers derived from the cluster domain.

    ``infra_id`` prefixes every cloud resource the cluster owns.
    """

    asset_id = "cluster-id"
    name = "Cluster ID"

    def __init__(self) -> None:
        self.uuid: str = ""
        self.infra_id: str = ""

    def dependencies(self) -> list[type]:
        return [InstallConfig]

    def generate(self, parents: Parents) -> None:
        config = parents.get(InstallConfig).require()
        domain = config.cluster_domain
        self.uuid = str(uuid.uuid5(uuid.NAMESPACE_DNS, domain))
        suffix = hashlib.sha256(domain.encode("utf-8")).hexdigest()[:5]
        base = config.cluster_name[:_INFRA_ID_NAME_LIMIT].rstrip("-.")
        self.infra_id = f"{base}-{suffix}"

    def files(self) -> list[File]:
        return []

    def load(self, fetcher: FileFetcher) -> bool:
        return False


class PlatformCreds:
    """Credentials for the configured platform, read from the environment."""

    asset_id = "platform-creds"
    name = "Platform Credentials"

    def __init__(self) -> None:
        self.platform: str = ""
        self.azure: AzureCredentials | None = None
        self.openstack: OpenStackCredentials | None = None
        self.vsphere: VSphereCredentials | None = None

    def dependencies(self) -> list[type]:
        return [InstallConfig]

    def generate(self, parents: Parents) -> None:
        self.platform = parents.get(InstallConfig).require().platform.name
        if self.platform == "azure":
            self.azure = AzureCredentials()
        elif self.platform == "openstack":
            self.openstack = OpenStackCredentials()
        elif self.platform == "vsphere":
            self.vsphere = VSphereCredentials()
        logger.debug("Read credentials for platform %s", self.platform)

    def files(self) -> list[File]:
        return []

    def load(self, fetcher: FileFetcher) -> bool:
        return False


_ENV_PREFIXES = {"azure": "AZURE_", "openstack": "OS_", "vsphere": "VSPHERE_"}


class PlatformCredsCheck:
    """Fails the run early when the configured platform lacks credentials."""

    asset_id = "platform-creds-check"
    name = "Platform Credentials Check"

    def dependencies(self) -> list[type]:
        return [InstallConfig, PlatformCreds]

    def generate(self, parents: Parents) -> None:
        creds = parents.get(PlatformCreds)
        settings = getattr(creds, creds.platform, None) if creds.platform in _ENV_PREFIXES else None
        if settings is None:
            return
        prefix = _ENV_PREFIXES[creds.platform]
        errors: list[FieldError] = [
            required(f"{prefix}{field.upper()}", f"{creds.platform} credentials are incomplete")
            for field in settings.required_fields
            if not getattr(settings, field)
        ]
        raise_if_errors(f"{creds.platform} credentials", errors)

    def files(self) -> list[File]:
        return []

    def load(self, fetcher: FileFetcher) -> bool:
        return False
