"""Tests for the canonical hashing helpers."""

from __future__ import annotations

from clusterforge.core.asset import File
from clusterforge.core.hasher import (
    canonical_json_bytes,
    compute_manifest_hash,
    content_address,
    digest_file,
    sha256_hex,
)


class TestCanonicalJson:
    def test_sorted_and_compact(self):
        assert canonical_json_bytes({"b": 1, "a": [1, 2]}) == b'{"a":[1,2],"b":1}'

    def test_non_ascii_escaped(self):
        assert canonical_json_bytes({"k": "é"}) == b'{"k":"\\u00e9"}'


class TestDigests:
    def test_sha256_of_empty(self):
        assert sha256_hex(b"") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

    def test_content_address_prefix(self):
        assert content_address(b"").startswith("sha256:e3b0c442")

    def test_digest_file(self):
        digest = digest_file(File(filename="x", data=b"abc"))
        assert digest.filename == "x"
        assert digest.size_bytes == 3

    def test_manifest_hash_is_order_independent(self):
        d1 = digest_file(File(filename="a", data=b"1"))
        d2 = digest_file(File(filename="b", data=b"2"))
        assert compute_manifest_hash([d1, d2]) == compute_manifest_hash([d2, d1])
