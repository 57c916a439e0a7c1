"""Bootkube manifest templates shipped verbatim with the package."""

from __future__ import annotations

from clusterforge.assets._formatting import read_template
from clusterforge.core.asset import File
from clusterforge.core.fetcher import FileFetcher
from clusterforge.core.parents import Parents

TEMPLATE_DIR = "templates"

ARO_INGRESS_NAMESPACE_FILENAME = "aro-ingress-namespace.yaml"
ARO_INGRESS_SERVICE_FILENAME = "aro-ingress-service.yaml.template"


class AROIngressService:
    """Namespace and load-balancer Service templates for the default router.

    The service file is still a template; it is filled in on the bootstrap
    node, so it is copied here without rendering.
    """

    asset_id = "aro-ingress-service"
    name = "AROIngressService"

    _filenames = (ARO_INGRESS_NAMESPACE_FILENAME, ARO_INGRESS_SERVICE_FILENAME)

    def __init__(self) -> None:
        self.file_list: list[File] = []

    def dependencies(self) -> list[type]:
        return []

    def generate(self, parents: Parents) -> None:
        self.file_list = [
            File(filename=f"{TEMPLATE_DIR}/{filename}", data=read_template(f"bootkube/{filename}"))
            for filename in self._filenames
        ]

    def files(self) -> list[File]:
        return list(self.file_list)

    def load(self, fetcher: FileFetcher) -> bool:
        loaded: list[File] = []
        for filename in self._filenames:
            try:
                loaded.append(fetcher.fetch_by_name(f"{TEMPLATE_DIR}/{filename}"))
            except FileNotFoundError:
                return False
        self.file_list = loaded
        return True
