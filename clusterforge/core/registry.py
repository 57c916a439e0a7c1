"""Registry of known producer classes, keyed by ``asset_id``.

The registry is the closed set of asset types a resolver may instantiate.
A dependency on anything outside it is an "unknown dependency type" error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from clusterforge.core.asset import AssetError, AssetIdentity, is_asset_type

logger = logging.getLogger(__name__)


class UnknownAssetError(AssetError, LookupError):
    """Raised when an asset type has no registered producer."""


class DuplicateAssetError(AssetError, ValueError):
    """Raised when two producer classes claim the same ``asset_id``."""


class AssetRegistry:
    """Maps ``asset_id`` tags to producer classes.

    Parameters
    ----------
    asset_types:
        Producer classes to register up front, in order.
    """

    def __init__(self, asset_types: Iterable[type] = ()) -> None:
        self._types: dict[str, type] = {}
        for asset_type in asset_types:
            self.register(asset_type)

    def register(self, asset_type: type) -> type:
        """Register a producer class.  Returns it, so this works as a decorator."""
        if not is_asset_type(asset_type):
            raise TypeError(
                f"{asset_type!r} does not implement the asset contract "
                "(asset_id, name, dependencies, generate, files, load)"
            )
        asset_id = asset_type.asset_id
        existing = self._types.get(asset_id)
        if existing is not None and existing is not asset_type:
            raise DuplicateAssetError(
                f"asset_id {asset_id!r} is already registered by "
                f"{existing.__qualname__}"
            )
        self._types[asset_id] = asset_type
        logger.debug("Registered asset %s (%s)", asset_id, asset_type.__qualname__)
        return asset_type

    def lookup(self, identity: AssetIdentity) -> type:
        """Return the registered class for a class or ``asset_id`` tag."""
        if isinstance(identity, str):
            try:
                return self._types[identity]
            except KeyError:
                raise UnknownAssetError(
                    f"Unknown dependency type {identity!r}. "
                    f"Registered assets: {sorted(self._types)}"
                ) from None

        asset_id = getattr(identity, "asset_id", None)
        if isinstance(asset_id, str) and self._types.get(asset_id) is identity:
            return identity
        label = getattr(identity, "__qualname__", repr(identity))
        raise UnknownAssetError(
            f"Unknown dependency type {label} (asset_id={asset_id!r}): "
            "no producer is registered for it"
        )

    def ids(self) -> list[str]:
        """Registered ``asset_id`` tags in registration order."""
        return list(self._types)

    def __contains__(self, identity: object) -> bool:
        try:
            self.lookup(identity)  # type: ignore[arg-type]
        except UnknownAssetError:
            return False
        return True

    def __iter__(self) -> Iterator[type]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"<AssetRegistry {len(self)} assets>"
