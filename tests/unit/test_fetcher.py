"""Tests for DirectoryFetcher: the on-disk backing store."""

from __future__ import annotations

from pathlib import Path

import pytest

from clusterforge.core.fetcher import DirectoryFetcher, FileFetcher


class TestFetchByName:
    def test_returns_exact_bytes(self, asset_dir: Path, fetcher: DirectoryFetcher):
        (asset_dir / "sub").mkdir()
        (asset_dir / "sub" / "a.yaml").write_bytes(b"\x00raw\r\n")

        file = fetcher.fetch_by_name("sub/a.yaml")

        assert file.filename == "sub/a.yaml"
        assert file.data == b"\x00raw\r\n"

    def test_missing_file(self, fetcher: DirectoryFetcher):
        with pytest.raises(FileNotFoundError):
            fetcher.fetch_by_name("install-config.yaml")

    def test_directory_is_not_a_file(self, asset_dir: Path, fetcher: DirectoryFetcher):
        (asset_dir / "openshift").mkdir()
        with pytest.raises(FileNotFoundError):
            fetcher.fetch_by_name("openshift")

    @pytest.mark.parametrize("name", ["../outside.yaml", "/etc/passwd", "a/../../b"])
    def test_escaping_names_rejected(self, fetcher: DirectoryFetcher, name: str):
        with pytest.raises(ValueError, match="escapes"):
            fetcher.fetch_by_name(name)


class TestFetchByPattern:
    def test_sorted_posix_names(self, asset_dir: Path, fetcher: DirectoryFetcher):
        target = asset_dir / "openshift"
        target.mkdir()
        for name in ("b.yaml", "a.yaml", "c.txt"):
            (target / name).write_text(name)

        files = fetcher.fetch_by_pattern("openshift/*.yaml")

        assert [f.filename for f in files] == ["openshift/a.yaml", "openshift/b.yaml"]
        assert files[0].data == b"a.yaml"

    def test_no_match_is_empty(self, fetcher: DirectoryFetcher):
        assert fetcher.fetch_by_pattern("openshift/*.yaml") == []

    def test_missing_base_dir_is_empty(self, tmp_path: Path):
        assert DirectoryFetcher(tmp_path / "missing").fetch_by_pattern("*") == []


def test_satisfies_protocol(fetcher: DirectoryFetcher):
    assert isinstance(fetcher, FileFetcher)
