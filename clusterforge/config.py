"""Runtime configuration: env-driven via pydantic-settings.

Run settings are read from ``CLUSTERFORGE_*`` environment variables or a
``.env`` file.  Cloud credentials have their own settings classes, each
bound to the environment variables the respective cloud tooling already
uses, and are only read for the platform a cluster is configured for.
"""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar

from pydantic_settings import BaseSettings, SettingsConfigDict


class ForgeSettings(BaseSettings):
    """Run settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export CLUSTERFORGE_ASSET_DIR=/work/cluster-a
        export CLUSTERFORGE_LOG_LEVEL=DEBUG

    Or via .env file::

        CLUSTERFORGE_WRITE_MANIFEST=false
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CLUSTERFORGE_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Backing store read by the reload path; also the default output root.
    asset_dir: Path = Path(".")
    output_dir: Path | None = None

    write_manifest: bool = True
    manifest_filename: str = ".clusterforge-manifest.json"

    @property
    def effective_output_dir(self) -> Path:
        return self.output_dir or self.asset_dir


class AzureCredentials(BaseSettings):
    """Service principal credentials (``AZURE_*``)."""

    model_config = SettingsConfigDict(env_prefix="AZURE_", extra="ignore")

    subscription_id: str = ""
    tenant_id: str = ""
    client_id: str = ""
    client_secret: str = ""

    required_fields: ClassVar[tuple[str, ...]] = ("subscription_id", "tenant_id", "client_id", "client_secret")


class OpenStackCredentials(BaseSettings):
    """Keystone credentials (``OS_*``), as exported by an OpenStack RC file."""

    model_config = SettingsConfigDict(env_prefix="OS_", extra="ignore")

    auth_url: str = ""
    username: str = ""
    password: str = ""
    project_name: str = ""
    user_domain_name: str = "Default"
    project_domain_name: str = "Default"
    region_name: str = ""

    required_fields: ClassVar[tuple[str, ...]] = ("auth_url", "username", "password", "project_name")


class VSphereCredentials(BaseSettings):
    """vCenter credentials (``VSPHERE_*``)."""

    model_config = SettingsConfigDict(env_prefix="VSPHERE_", extra="ignore")

    username: str = ""
    password: str = ""

    required_fields: ClassVar[tuple[str, ...]] = ("username", "password")
