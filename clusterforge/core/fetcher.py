"""Backing-store access for the reload path.

A fetcher reads previously written artifacts by their relative path.  The
engine only ever distinguishes "absent" (``FileNotFoundError``) from
"present"; interpreting the bytes is the producer's job.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable

from clusterforge.core.asset import File

logger = logging.getLogger(__name__)


@runtime_checkable
class FileFetcher(Protocol):
    """Read-only view of a backing store keyed by relative path."""

    def fetch_by_name(self, name: str) -> File:
        """Return the file stored at *name*.

        Raises ``FileNotFoundError`` when nothing is stored there.
        """
        ...

    def fetch_by_pattern(self, pattern: str) -> list[File]:
        """Return every file matching the glob *pattern*, sorted by path."""
        ...


class DirectoryFetcher:
    """Fetches artifacts from a working directory on disk.

    Parameters
    ----------
    base_dir:
        Directory the artifact names are relative to.
    """

    def __init__(self, base_dir: Path) -> None:
        self._base = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base

    def _resolve(self, name: str) -> Path:
        relative = PurePosixPath(name)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Artifact name {name!r} escapes the asset directory")
        return self._base.joinpath(*relative.parts)

    def fetch_by_name(self, name: str) -> File:
        path = self._resolve(name)
        if not path.is_file():
            raise FileNotFoundError(f"Artifact not found: {name}")
        logger.debug("Fetched %s from %s", name, self._base)
        return File(filename=name, data=path.read_bytes())

    def fetch_by_pattern(self, pattern: str) -> list[File]:
        if not self._base.is_dir():
            return []
        matches = sorted(p for p in self._base.glob(pattern) if p.is_file())
        return [
            File(filename=p.relative_to(self._base).as_posix(), data=p.read_bytes())
            for p in matches
        ]

    def __repr__(self) -> str:
        return f"<DirectoryFetcher base_dir={str(self._base)!r}>"
