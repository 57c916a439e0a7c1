"""Resolution records and the output manifest (immutable)."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ResolutionSource(str, Enum):
    """How an asset's state was obtained during a run."""

    LOADED = "loaded"
    GENERATED = "generated"


class ResolutionRecord(BaseModel):
    """One resolved asset type, recorded when it enters the run cache."""

    model_config = ConfigDict(frozen=True)

    asset_id: str
    name: str
    source: ResolutionSource


class FileDigest(BaseModel):
    """Integrity entry for one written file."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content_address: str  # "sha256:<hex>"
    size_bytes: int


class OutputManifest(BaseModel):
    """The set of files materialized by one run.

    ``manifest_hash`` covers the sorted file digests only.  The manifest
    carries no timestamp, so two runs over identical inputs write
    byte-identical manifest files.
    """

    model_config = ConfigDict(frozen=True)

    target: str
    files: list[FileDigest]
    manifest_hash: str
