"""Materialization of a resolved file set onto disk.

The whole set is checked before the first byte is written: duplicate paths,
paths that would land outside the output directory and existing entries in
the way abort the write.  Files are staged and then moved into place, so a
rejected set, or an I/O error while writing, leaves no partial output behind.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from clusterforge.core.asset import Asset, AssetError, File
from clusterforge.core.hasher import compute_manifest_hash, digest_file
from clusterforge.models.output import OutputManifest

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_FILENAME = ".clusterforge-manifest.json"


class DuplicateFileError(AssetError):
    """Raised when two files in one output set share a path."""


class UnsafePathError(AssetError):
    """Raised when a file path is absolute or climbs out of the output directory."""


class OutputConflictError(AssetError):
    """Raised when an existing file or directory is in the way of the output set."""


def collect_files(assets: Iterable[Asset]) -> list[File]:
    """Concatenate ``files()`` of *assets*, rejecting duplicate paths."""
    owners: dict[str, str] = {}
    collected: list[File] = []
    for asset in assets:
        for file in asset.files():
            owner = owners.get(file.filename)
            if owner is not None:
                raise DuplicateFileError(
                    f"File {file.filename!r} is produced by both "
                    f"{owner!r} and {asset.asset_id!r}"
                )
            owners[file.filename] = asset.asset_id
            collected.append(file)
    return collected


def _check_path(filename: str) -> PurePosixPath:
    path = PurePosixPath(filename)
    if not filename or path.is_absolute() or ".." in path.parts:
        raise UnsafePathError(f"Refusing to write {filename!r} outside the output directory")
    return path


class AssetWriter:
    """Writes files verbatim under an output directory.

    The set is first written into a staging directory next to
    ``output_dir`` and only moved into place once every file (and the
    manifest) has been written, so an I/O failure leaves the output
    directory untouched.

    Parameters
    ----------
    output_dir:
        Root directory for the written files.  Created if missing.
    manifest_filename:
        Name of the manifest written by ``write(..., manifest_target=...)``.
    """

    def __init__(
        self,
        output_dir: Path,
        *,
        manifest_filename: str = DEFAULT_MANIFEST_FILENAME,
    ) -> None:
        self._output_dir = Path(output_dir)
        self._manifest_filename = manifest_filename

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def build_manifest(self, target: str, files: list[File]) -> OutputManifest:
        digests = [digest_file(f) for f in files]
        return OutputManifest(
            target=target,
            files=digests,
            manifest_hash=compute_manifest_hash(digests),
        )

    def _check_destination(self, relative: PurePosixPath) -> None:
        """Refuse a path whose parents are existing files or that is an existing directory."""
        current = self._output_dir
        for part in relative.parts[:-1]:
            current = current / part
            if current.exists() and not current.is_dir():
                raise OutputConflictError(
                    f"Cannot write {relative.as_posix()!r}: {current} exists and is not a directory"
                )
        if (current / relative.name).is_dir():
            raise OutputConflictError(
                f"Cannot write {relative.as_posix()!r}: {current / relative.name} is a directory"
            )

    def write(
        self,
        files: list[File],
        *,
        manifest_target: str | None = None,
    ) -> list[Path]:
        """Write *files* and return the paths written.

        When *manifest_target* is given, an ``OutputManifest`` for the set is
        written next to the files.
        """
        seen: set[str] = set()
        checked: list[tuple[PurePosixPath, bytes]] = []
        for file in files:
            relative = _check_path(file.filename)
            if file.filename in seen:
                raise DuplicateFileError(f"File {file.filename!r} appears twice in the output set")
            seen.add(file.filename)
            checked.append((relative, file.data))

        manifest: OutputManifest | None = None
        if manifest_target is not None:
            manifest = self.build_manifest(manifest_target, files)
            checked.append(
                (_check_path(self._manifest_filename), manifest.model_dump_json(indent=2).encode("utf-8"))
            )

        if self._output_dir.exists() and not self._output_dir.is_dir():
            raise OutputConflictError(f"Output path {self._output_dir} exists and is not a directory")
        for relative, _ in checked:
            self._check_destination(relative)

        self._output_dir.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.TemporaryDirectory(
            prefix=".clusterforge-staging-", dir=self._output_dir.parent
        ) as staging:
            staged: list[tuple[Path, Path]] = []
            for relative, data in checked:
                source = Path(staging).joinpath(*relative.parts)
                source.parent.mkdir(parents=True, exist_ok=True)
                source.write_bytes(data)
                staged.append((source, self._output_dir.joinpath(*relative.parts)))

            self._output_dir.mkdir(exist_ok=True)
            for source, destination in staged:
                destination.parent.mkdir(parents=True, exist_ok=True)
                source.replace(destination)
                logger.debug("Wrote %s", destination)

        written = [destination for _, destination in staged[: len(files)]]
        if manifest is not None:
            logger.info(
                "Wrote manifest for %s (%d files, hash=%s)",
                manifest_target,
                len(files),
                manifest.manifest_hash[:12],
            )

        logger.info("Wrote %d files to %s", len(written), self._output_dir)
        return written
