"""Shared test fixtures for Clusterforge."""

from __future__ import annotations

import copy
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest
import yaml

from clusterforge.assets.installconfig import INSTALL_CONFIG_FILENAME, InstallConfig
from clusterforge.core.asset import File
from clusterforge.core.fetcher import DirectoryFetcher
from clusterforge.core.parents import Parents
from clusterforge.models.install_config import ClusterInstallConfig

_CREDENTIAL_ENV_VARS = (
    "AZURE_SUBSCRIPTION_ID",
    "AZURE_TENANT_ID",
    "AZURE_CLIENT_ID",
    "AZURE_CLIENT_SECRET",
    "OS_AUTH_URL",
    "OS_USERNAME",
    "OS_PASSWORD",
    "OS_PROJECT_NAME",
    "OS_USER_DOMAIN_NAME",
    "OS_PROJECT_DOMAIN_NAME",
    "OS_REGION_NAME",
    "VSPHERE_USERNAME",
    "VSPHERE_PASSWORD",
)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep credentials and run settings of the host out of every test."""
    for name in _CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in ("ASSET_DIR", "OUTPUT_DIR", "WRITE_MANIFEST", "LOG_LEVEL", "MANIFEST_FILENAME"):
        monkeypatch.delenv(f"CLUSTERFORGE_{name}", raising=False)


@pytest.fixture
def asset_dir(tmp_path: Path) -> Path:
    """Provide an empty asset directory (the backing store)."""
    path = tmp_path / "assets"
    path.mkdir()
    return path


@pytest.fixture
def fetcher(asset_dir: Path) -> DirectoryFetcher:
    return DirectoryFetcher(asset_dir)


# ---------------------------------------------------------------------------
# Fake producers for engine tests
# ---------------------------------------------------------------------------


def make_fake_asset(
    tag: str,
    dependencies: Sequence[Any] = (),
    *,
    calls: list[str] | None = None,
    error: Exception | None = None,
    persisted: str | None = None,
    reads: Sequence[Any] = (),
) -> type:
    """Build a producer class for engine tests.

    Parameters
    ----------
    tag:
        The ``asset_id``; the generated file is ``<tag>.txt``.
    dependencies:
        Declared dependency classes or tags.
    calls:
        Receives ``"<tag>:generate"`` / ``"<tag>:load"`` on each call.
    error:
        Raised from ``generate`` when set.
    persisted:
        File name ``load`` looks for.  Content starting with ``corrupt``
        is treated as malformed.
    reads:
        Dependencies looked up from the bundle during ``generate``.
    """

    class FakeAsset:
        asset_id = tag
        name = f"Fake {tag}"

        def __init__(self) -> None:
            self.file_list: list[File] = []
            self.parent_ids: list[str] = []

        def dependencies(self) -> list[Any]:
            return list(dependencies)

        def generate(self, parents: Parents) -> None:
            if calls is not None:
                calls.append(f"{tag}:generate")
            if error is not None:
                raise error
            for dependency in reads:
                parents.get(dependency)
            self.parent_ids = parents.ids()
            data = f"{tag} <- {','.join(self.parent_ids)}\n".encode("utf-8")
            self.file_list = [File(filename=f"{tag}.txt", data=data)]

        def files(self) -> list[File]:
            return list(self.file_list)

        def load(self, fetcher) -> bool:
            if calls is not None:
                calls.append(f"{tag}:load")
            if persisted is None:
                return False
            try:
                file = fetcher.fetch_by_name(persisted)
            except FileNotFoundError:
                return False
            if file.data.startswith(b"corrupt"):
                raise ValueError(f"cannot parse {persisted}")
            self.file_list = [file]
            return True

    FakeAsset.__name__ = FakeAsset.__qualname__ = f"Fake_{tag.replace('-', '_')}"
    return FakeAsset


@pytest.fixture
def fake_asset() -> Callable[..., type]:
    """Provide the fake producer factory."""
    return make_fake_asset


# ---------------------------------------------------------------------------
# Install config fixtures
# ---------------------------------------------------------------------------

_BASE_INSTALL_CONFIG: dict[str, Any] = {
    "apiVersion": "v1",
    "metadata": {"name": "test-cluster"},
    "baseDomain": "test-domain",
    "platform": {"aws": {"region": "us-east-1"}},
    "compute": [
        {
            "name": "worker",
            "replicas": 1,
            "hyperthreading": "Enabled",
            "platform": {"aws": {"zones": ["us-east-1a"], "type": "m5.large"}},
        }
    ],
}


@pytest.fixture
def install_config_data() -> dict[str, Any]:
    """A minimal AWS install config, as it appears on disk (camelCase)."""
    return copy.deepcopy(_BASE_INSTALL_CONFIG)


@pytest.fixture
def make_install_config() -> Callable[[dict[str, Any]], InstallConfig]:
    """Build a resolved ``InstallConfig`` asset from on-disk style data."""

    def _make(data: dict[str, Any]) -> InstallConfig:
        return InstallConfig.from_config(ClusterInstallConfig.model_validate(data))

    return _make


@pytest.fixture
def write_install_config(asset_dir: Path) -> Callable[[dict[str, Any]], Path]:
    """Write ``install-config.yaml`` into the asset directory."""

    def _write(data: dict[str, Any]) -> Path:
        path = asset_dir / INSTALL_CONFIG_FILENAME
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write
