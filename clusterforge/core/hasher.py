"""Canonical hashing helpers for output manifests and derived identifiers."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable
from typing import Any

from clusterforge.core.asset import File
from clusterforge.models.output import FileDigest


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes: sorted keys, compact separators.

    - sorted keys
    - no whitespace separators (",", ":")
    - ensure_ascii=True
    - UTF-8 encoding
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def content_address(data: bytes) -> str:
    """Return the ``sha256:<hex>`` address of raw bytes."""
    return f"sha256:{sha256_hex(data)}"


def digest_file(file: File) -> FileDigest:
    return FileDigest(
        filename=file.filename,
        content_address=content_address(file.data),
        size_bytes=len(file.data),
    )


def compute_manifest_hash(digests: Iterable[FileDigest]) -> str:
    """SHA-256 of canonical(sorted file digests).

    Independent of the order files were produced in.
    """
    payload = sorted(
        (d.model_dump() for d in digests), key=lambda d: d["filename"]
    )
    return sha256_hex(canonical_json_bytes(payload))
