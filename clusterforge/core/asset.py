"""The asset contract shared by every producer and the resolution engine.

An asset is a typed producer of zero or more output files.  It declares the
asset types it depends on, computes its state from those dependencies
(``generate``) or reconstructs it from previously written files (``load``),
and exposes the files it contributes to the final output set.

Producers do not inherit from a base class: any class that provides the
members of the :class:`Asset` protocol and a stable ``asset_id`` tag can be
registered and resolved.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, ClassVar, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, field_validator

if TYPE_CHECKING:
    from clusterforge.core.fetcher import FileFetcher
    from clusterforge.core.parents import Parents


class AssetError(RuntimeError):
    """Base class for every error raised by the resolution engine."""


class File(BaseModel):
    """One output artifact: a relative path and its exact bytes."""

    model_config = ConfigDict(frozen=True)

    filename: str
    data: bytes

    @field_validator("filename")
    @classmethod
    def _relative_path(cls, value: str) -> str:
        path = PurePosixPath(value)
        if not value or path.is_absolute() or ".." in path.parts:
            raise ValueError(f"file path must be relative and stay inside the output set: {value!r}")
        return value

    @property
    def text(self) -> str:
        """The content decoded as UTF-8."""
        return self.data.decode("utf-8")


@runtime_checkable
class Asset(Protocol):
    """Capability set every producer implements.

    Attributes
    ----------
    asset_id:
        Stable type tag, unique per producer kind.  Used as the memoization
        key by the resolver and for typed lookup inside :class:`Parents`.
    name:
        Human-friendly name used in logs and error messages.
    """

    asset_id: ClassVar[str]
    name: ClassVar[str]

    def dependencies(self) -> Sequence[AssetIdentity]:
        """Return the asset types that must be resolved before this one.

        Must be pure: the result cannot depend on the instance's state.
        """
        ...

    def generate(self, parents: Parents) -> None:
        """Compute this asset's state from its resolved dependencies.

        Raises on missing or invalid upstream data.
        """
        ...

    def files(self) -> list[File]:
        """Return the files this asset contributes; empty before resolution."""
        ...

    def load(self, fetcher: FileFetcher) -> bool:
        """Reload state from previously written files.

        Returns ``False`` when the files are simply absent.  Raises when
        they exist but cannot be parsed or validated.
        """
        ...


# A producer class, or its ``asset_id`` tag.
AssetIdentity = Union[type, str]

_CONTRACT_METHODS = ("dependencies", "generate", "files", "load")


def is_asset_type(candidate: object) -> bool:
    """Return ``True`` if *candidate* is a class satisfying the Asset contract."""
    if not isinstance(candidate, type):
        return False
    asset_id = getattr(candidate, "asset_id", None)
    if not isinstance(asset_id, str) or not asset_id:
        return False
    if not isinstance(getattr(candidate, "name", None), str):
        return False
    return all(callable(getattr(candidate, m, None)) for m in _CONTRACT_METHODS)


def asset_id_of(identity: AssetIdentity | Asset) -> str:
    """Return the ``asset_id`` tag for a class, an instance, or a tag string."""
    if isinstance(identity, str):
        return identity
    asset_id = getattr(identity, "asset_id", None)
    if not isinstance(asset_id, str):
        raise TypeError(f"{identity!r} does not declare an asset_id")
    return asset_id
