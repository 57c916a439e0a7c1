"""Target assets: named groups the CLI can ``create``.

Targets produce nothing themselves; resolving one resolves, and so
writes, everything it depends on.
"""

from __future__ import annotations

from clusterforge.assets.bootkube import AROIngressService
from clusterforge.assets.cloudproviders import CloudProviderConfig
from clusterforge.assets.ignition import MasterIgnition, WorkerIgnition
from clusterforge.assets.machines import Master, Worker
from clusterforge.core.asset import File
from clusterforge.core.fetcher import FileFetcher
from clusterforge.core.parents import Parents


class Manifests:
    asset_id = "manifests"
    name = "Manifests"

    def dependencies(self) -> list[type]:
        return [CloudProviderConfig, AROIngressService, Master, Worker]

    def generate(self, parents: Parents) -> None:
        return None

    def files(self) -> list[File]:
        return []

    def load(self, fetcher: FileFetcher) -> bool:
        return False


class IgnitionConfigs:
    asset_id = "ignition-configs"
    name = "Ignition Configs"

    def dependencies(self) -> list[type]:
        return [MasterIgnition, WorkerIgnition]

    def generate(self, parents: Parents) -> None:
        return None

    def files(self) -> list[File]:
        return []

    def load(self, fetcher: FileFetcher) -> bool:
        return False


TARGETS: tuple[type, ...] = (Manifests, IgnitionConfigs)
