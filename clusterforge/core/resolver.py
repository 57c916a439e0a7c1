"""Dependency resolution engine: depth-first, memoized, load-or-generate.

One ``Resolver`` is one resolution run.  For a requested asset type it:

1. returns the cached instance if that type was already resolved;
2. fails with ``CyclicDependencyError`` if the type is already on the
   current resolution path;
3. instantiates the type and asks for its declared dependencies;
4. resolves each dependency, in declared order, with this same algorithm;
5. tries ``load()`` against the backing store and, only when nothing was
   persisted, builds a ``Parents`` bundle from the resolved dependencies and
   calls ``generate()``;
6. caches the finished instance under its ``asset_id``.

Every type is therefore loaded or generated at most once per run, no matter
how many consumers share it.  The first failure aborts the whole run;
failures are never cached.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import TypeVar, overload

from clusterforge.core.asset import Asset, AssetError, AssetIdentity, File, asset_id_of
from clusterforge.core.fetcher import FileFetcher
from clusterforge.core.parents import Parents
from clusterforge.core.registry import AssetRegistry
from clusterforge.core.writer import collect_files
from clusterforge.models.output import ResolutionRecord, ResolutionSource

logger = logging.getLogger(__name__)

A = TypeVar("A")


class CyclicDependencyError(AssetError):
    """Raised when an asset type depends, directly or transitively, on itself."""

    def __init__(self, asset_id: str, cycle: list[str]) -> None:
        self.asset_id = asset_id
        self.cycle = cycle
        super().__init__(
            f"Dependency cycle detected at {asset_id!r}: {' -> '.join(cycle)}"
        )


class AssetLoadError(AssetError):
    """Raised when persisted state for an asset exists but is malformed."""

    def __init__(self, asset: Asset, cause: BaseException) -> None:
        self.asset_id = asset.asset_id
        self.asset_name = asset.name
        super().__init__(f'failed to load asset "{asset.name}" ({asset.asset_id}): {cause}')


class AssetGenerationError(AssetError):
    """Raised when an asset's ``generate()`` fails."""

    def __init__(self, asset: Asset, cause: BaseException) -> None:
        self.asset_id = asset.asset_id
        self.asset_name = asset.name
        super().__init__(
            f'failed to generate asset "{asset.name}" ({asset.asset_id}): {cause}'
        )


class Resolver:
    """Resolves assets for a single run, caching each type exactly once.

    Parameters
    ----------
    fetcher:
        Backing store consulted by ``load()``.
    registry:
        The set of producer types this run may instantiate.  Defaults to
        the built-in producers.
    """

    def __init__(
        self,
        fetcher: FileFetcher,
        registry: AssetRegistry | None = None,
    ) -> None:
        if registry is None:
            from clusterforge.assets import DEFAULT_REGISTRY

            registry = DEFAULT_REGISTRY
        self._fetcher = fetcher
        self._registry = registry
        self._cache: dict[str, Asset] = {}
        self._records: list[ResolutionRecord] = []

    @property
    def registry(self) -> AssetRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    @overload
    def resolve(self, identity: type[A]) -> A: ...

    @overload
    def resolve(self, identity: str) -> Asset: ...

    def resolve(self, identity):
        """Resolve *identity* (a producer class or tag) and all its dependencies."""
        asset_type = self._registry.lookup(identity)
        return self._resolve(asset_type, [])

    def resolve_many(self, identities: Iterable[AssetIdentity]) -> list[Asset]:
        """Resolve several targets in order, sharing this run's cache."""
        return [self.resolve(identity) for identity in identities]

    def _resolve(self, asset_type: type, path: list[str]) -> Asset:
        asset_id = asset_type.asset_id

        cached = self._cache.get(asset_id)
        if cached is not None:
            logger.debug("Reusing resolved asset %s", asset_id)
            return cached

        if asset_id in path:
            cycle = path[path.index(asset_id):] + [asset_id]
            raise CyclicDependencyError(asset_id, cycle)

        path.append(asset_id)
        try:
            asset: Asset = asset_type()
            resolved: list[Asset] = []
            for dependency in asset.dependencies():
                dependency_type = self._registry.lookup(dependency)
                resolved.append(self._resolve(dependency_type, path))
            source = self._load_or_generate(asset, resolved)
        finally:
            path.pop()

        self._cache[asset_id] = asset
        self._records.append(
            ResolutionRecord(asset_id=asset_id, name=asset.name, source=source)
        )
        return asset

    def _load_or_generate(self, asset: Asset, resolved: list[Asset]) -> ResolutionSource:
        started = time.perf_counter()
        try:
            found = asset.load(self._fetcher)
        except AssetError:
            raise
        except Exception as exc:
            logger.error("%s [%s] persisted state is invalid: %s", asset.name, asset.asset_id, exc)
            raise AssetLoadError(asset, exc) from exc

        if found:
            logger.info("%s [%s] loaded from %r", asset.name, asset.asset_id, self._fetcher)
            return ResolutionSource.LOADED

        parents = Parents(resolved)
        try:
            asset.generate(parents)
        except AssetError:
            raise
        except Exception as exc:
            logger.error("%s [%s] generation failed: %s", asset.name, asset.asset_id, exc)
            raise AssetGenerationError(asset, exc) from exc

        logger.info(
            "%s [%s] generated in %.1f ms",
            asset.name,
            asset.asset_id,
            (time.perf_counter() - started) * 1000,
        )
        return ResolutionSource.GENERATED

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @overload
    def get(self, identity: type[A]) -> A: ...

    @overload
    def get(self, identity: str) -> Asset: ...

    def get(self, identity):
        """Return an already-resolved instance.  Raises ``KeyError`` otherwise."""
        asset_id = asset_id_of(identity)
        try:
            return self._cache[asset_id]
        except KeyError:
            raise KeyError(f"Asset {asset_id!r} has not been resolved in this run") from None

    def is_resolved(self, identity: AssetIdentity) -> bool:
        return asset_id_of(identity) in self._cache

    @property
    def records(self) -> list[ResolutionRecord]:
        """One record per resolved type, in the order resolution finished."""
        return list(self._records)

    def resolved_assets(self) -> list[Asset]:
        """All resolved instances, dependencies before their consumers."""
        return [self._cache[r.asset_id] for r in self._records]

    def files(self) -> list[File]:
        """Aggregate output of the run.  Raises on duplicate paths."""
        return collect_files(self.resolved_assets())
