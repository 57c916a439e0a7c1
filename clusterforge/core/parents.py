"""Typed container of resolved dependencies handed to ``Asset.generate``.

A ``Parents`` bundle holds exactly the dependency instances one consumer
declared, keyed by ``asset_id``.  Asking it for a type the consumer did not
declare is a wiring defect and fails loudly instead of returning an empty
value.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TypeVar, overload

from clusterforge.core.asset import Asset, AssetError, AssetIdentity, asset_id_of

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")


class UndeclaredDependencyError(AssetError, LookupError):
    """Raised when a producer looks up a dependency it did not declare."""


class DuplicateDependencyError(AssetError, ValueError):
    """Raised when two instances of the same asset type are added."""


class Parents:
    """Mapping from asset type to its resolved instance.

    Examples
    --------
    >>> parents = Parents()
    >>> parents.add(install_config, cluster_id)          # doctest: +SKIP
    >>> parents.get(InstallConfig).config.base_domain     # doctest: +SKIP
    'example.com'
    """

    def __init__(self, assets: Iterable[Asset] = ()) -> None:
        self._assets: dict[str, Asset] = {}
        self.add(*assets)

    def add(self, *assets: Asset) -> None:
        """Add resolved instances.  Each type may appear only once."""
        for asset in assets:
            asset_id = asset_id_of(asset)
            if asset_id in self._assets:
                raise DuplicateDependencyError(
                    f"Dependency {asset_id!r} was added twice"
                )
            self._assets[asset_id] = asset

    @overload
    def get(self, asset_type: type[A]) -> A: ...

    @overload
    def get(self, asset_type: str) -> Asset: ...

    def get(self, asset_type):
        """Return the resolved instance of *asset_type*.

        Raises ``UndeclaredDependencyError`` if the type is not in the bundle.
        """
        asset_id = asset_id_of(asset_type)
        try:
            asset = self._assets[asset_id]
        except KeyError:
            raise UndeclaredDependencyError(
                f"Dependency {asset_id!r} was requested but not declared. "
                f"Available: {sorted(self._assets)}"
            ) from None
        if isinstance(asset_type, type) and not isinstance(asset, asset_type):
            raise UndeclaredDependencyError(
                f"Dependency {asset_id!r} resolved to {type(asset).__name__}, "
                f"not {asset_type.__name__}"
            )
        return asset

    @overload
    def get_many(self, a: type[A], b: type[B], /) -> tuple[A, B]: ...

    @overload
    def get_many(self, a: type[A], b: type[B], c: type[C], /) -> tuple[A, B, C]: ...

    def get_many(self, *asset_types: AssetIdentity) -> tuple:
        """Look up several dependencies at once, in argument order."""
        return tuple(self.get(t) for t in asset_types)

    def __contains__(self, asset_type: object) -> bool:
        try:
            return asset_id_of(asset_type) in self._assets  # type: ignore[arg-type]
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[Asset]:
        return iter(self._assets.values())

    def ids(self) -> list[str]:
        return list(self._assets)

    def __repr__(self) -> str:
        return f"<Parents {self.ids()}>"
