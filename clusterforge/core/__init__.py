"""Asset resolution engine: contract, registry, resolver, backing store, writer."""

from clusterforge.core.asset import Asset, AssetError, File
from clusterforge.core.fetcher import DirectoryFetcher, FileFetcher
from clusterforge.core.parents import Parents, UndeclaredDependencyError
from clusterforge.core.registry import AssetRegistry, UnknownAssetError
from clusterforge.core.resolver import (
    AssetGenerationError,
    AssetLoadError,
    CyclicDependencyError,
    Resolver,
)
from clusterforge.core.writer import (
    AssetWriter,
    DuplicateFileError,
    OutputConflictError,
    UnsafePathError,
)

__all__ = [
    "Asset",
    "AssetError",
    "AssetGenerationError",
    "AssetLoadError",
    "AssetRegistry",
    "AssetWriter",
    "CyclicDependencyError",
    "DirectoryFetcher",
    "DuplicateFileError",
    "File",
    "FileFetcher",
    "OutputConflictError",
    "Parents",
    "Resolver",
    "UndeclaredDependencyError",
    "UnknownAssetError",
    "UnsafePathError",
]
