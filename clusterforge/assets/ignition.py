"""Pointer Ignition configs for masters and workers.

A pointer config only tells the booting machine where to fetch its real
configuration: the machine-config server behind the internal API name.
"""

from __future__ import annotations

import json

from clusterforge.assets._formatting import parse_json_model
from clusterforge.assets.installconfig import InstallConfig
from clusterforge.core.asset import File
from clusterforge.core.fetcher import FileFetcher
from clusterforge.core.parents import Parents
from clusterforge.models.ignition import ConfigReferences, IgnitionConfig, IgnitionMeta, Resource

MACHINE_CONFIG_SERVER_PORT = 22623


def pointer_ignition(cluster_domain: str, role: str) -> IgnitionConfig:
    source = f"https://api-int.{cluster_domain}:{MACHINE_CONFIG_SERVER_PORT}/config/{role}"
    return IgnitionConfig(
        ignition=IgnitionMeta(config=ConfigReferences(merge=[Resource(source=source)]))
    )


def _generate(role: str, parents: Parents) -> File:
    config = parents.get(InstallConfig).require()
    data = json.dumps(pointer_ignition(config.cluster_domain, role).to_dict(), sort_keys=True)
    return File(filename=f"{role}.ign", data=data.encode("utf-8"))


def _load(role: str, fetcher: FileFetcher) -> File | None:
    filename = f"{role}.ign"
    try:
        file = fetcher.fetch_by_name(filename)
    except FileNotFoundError:
        return None
    parse_json_model(IgnitionConfig, file.data, filename)
    return file


class MasterIgnition:
    asset_id = "master-ignition"
    name = "Master Ignition Config"

    def __init__(self) -> None:
        self.file: File | None = None

    def dependencies(self) -> list[type]:
        return [InstallConfig]

    def generate(self, parents: Parents) -> None:
        self.file = _generate("master", parents)

    def files(self) -> list[File]:
        return [self.file] if self.file else []

    def load(self, fetcher: FileFetcher) -> bool:
        self.file = _load("master", fetcher)
        return self.file is not None


class WorkerIgnition:
    asset_id = "worker-ignition"
    name = "Worker Ignition Config"

    def __init__(self) -> None:
        self.file: File | None = None

    def dependencies(self) -> list[type]:
        return [InstallConfig]

    def generate(self, parents: Parents) -> None:
        self.file = _generate("worker", parents)

    def files(self) -> list[File]:
        return [self.file] if self.file else []

    def load(self, fetcher: FileFetcher) -> bool:
        self.file = _load("worker", fetcher)
        return self.file is not None
