"""Tests for AssetWriter: all-or-nothing materialization and the manifest."""

from __future__ import annotations

from pathlib import Path

import pytest

from clusterforge.core.asset import File
from clusterforge.core.writer import (
    DEFAULT_MANIFEST_FILENAME,
    AssetWriter,
    DuplicateFileError,
    OutputConflictError,
    UnsafePathError,
    collect_files,
)
from clusterforge.models.output import OutputManifest


class TestWrite:
    def test_writes_bytes_verbatim(self, tmp_path: Path):
        out = tmp_path / "out"
        files = [
            File(filename="install-config.yaml", data=b"a: 1\n"),
            File(filename="openshift/99_x.yaml", data=b"\x00\xff"),
        ]

        written = AssetWriter(out).write(files)

        assert written == [out / "install-config.yaml", out / "openshift" / "99_x.yaml"]
        assert (out / "openshift" / "99_x.yaml").read_bytes() == b"\x00\xff"
        assert not (out / DEFAULT_MANIFEST_FILENAME).exists()

    def test_duplicate_paths_write_nothing(self, tmp_path: Path):
        out = tmp_path / "out"
        files = [File(filename="a", data=b"1"), File(filename="a", data=b"2")]

        with pytest.raises(DuplicateFileError):
            AssetWriter(out).write(files)

        assert not out.exists()

    @pytest.mark.parametrize("name", ["../escape.yaml", "/abs/path", "", "x/../../y"])
    def test_unsafe_paths_write_nothing(self, tmp_path: Path, name: str):
        out = tmp_path / "out"
        files = [File(filename="ok.yaml", data=b"ok"), File.model_construct(filename=name, data=b"bad")]

        with pytest.raises(UnsafePathError):
            AssetWriter(out).write(files)

        assert not out.exists()

    def test_file_in_place_of_directory_writes_nothing(self, tmp_path: Path):
        out = tmp_path / "out"
        out.mkdir()
        (out / "openshift").write_bytes(b"not a directory")
        files = [
            File(filename="install-config.yaml", data=b"a: 1\n"),
            File(filename="openshift/99_x.yaml", data=b"x"),
        ]

        with pytest.raises(OutputConflictError, match="openshift"):
            AssetWriter(out).write(files, manifest_target="manifests")

        assert sorted(p.name for p in out.iterdir()) == ["openshift"]

    def test_directory_in_place_of_file_writes_nothing(self, tmp_path: Path):
        out = tmp_path / "out"
        (out / "worker.ign").mkdir(parents=True)

        with pytest.raises(OutputConflictError):
            AssetWriter(out).write(
                [File(filename="master.ign", data=b"{}"), File(filename="worker.ign", data=b"{}")]
            )

        assert not (out / "master.ign").exists()

    def test_io_error_while_staging_leaves_no_output(self, tmp_path: Path):
        """A file that is also used as a parent directory fails before anything moves."""
        out = tmp_path / "out"
        files = [File(filename="a", data=b"1"), File(filename="a/b", data=b"2")]

        with pytest.raises(OSError):
            AssetWriter(out).write(files)

        assert not out.exists()
        assert list(tmp_path.iterdir()) == []

    def test_overwrites_existing_files(self, tmp_path: Path):
        out = tmp_path / "out"
        out.mkdir()
        (out / "a.txt").write_bytes(b"old")

        AssetWriter(out).write([File(filename="a.txt", data=b"new")])

        assert (out / "a.txt").read_bytes() == b"new"
        assert [p.name for p in tmp_path.iterdir()] == ["out"]

    def test_empty_set_with_manifest(self, tmp_path: Path):
        out = tmp_path / "out"

        AssetWriter(out).write([], manifest_target="ignition-configs")

        manifest = OutputManifest.model_validate_json((out / DEFAULT_MANIFEST_FILENAME).read_text())
        assert manifest.target == "ignition-configs"
        assert manifest.files == []


class TestManifest:
    def test_manifest_records_digests(self, tmp_path: Path):
        out = tmp_path / "out"
        files = [File(filename="a.txt", data=b"hello")]

        AssetWriter(out, manifest_filename="m.json").write(files, manifest_target="manifests")

        manifest = OutputManifest.model_validate_json((out / "m.json").read_text())
        assert manifest.files[0].filename == "a.txt"
        assert manifest.files[0].size_bytes == 5
        assert manifest.files[0].content_address == (
            "sha256:2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
        )

    def test_manifest_hash_ignores_production_order(self, tmp_path: Path):
        writer = AssetWriter(tmp_path)
        a, b = File(filename="a", data=b"1"), File(filename="b", data=b"2")

        first = writer.build_manifest("t", [a, b])
        second = writer.build_manifest("t", [b, a])

        assert first.manifest_hash == second.manifest_hash

    def test_manifest_hash_tracks_content(self, tmp_path: Path):
        writer = AssetWriter(tmp_path)

        first = writer.build_manifest("t", [File(filename="a", data=b"1")])
        second = writer.build_manifest("t", [File(filename="a", data=b"2")])

        assert first.manifest_hash != second.manifest_hash


class TestCollectFiles:
    def test_concatenates_in_asset_order(self, fake_asset):
        a, b = fake_asset("a")(), fake_asset("b")()
        a.file_list = [File(filename="a1", data=b"")]
        b.file_list = [File(filename="b1", data=b""), File(filename="b2", data=b"")]

        assert [f.filename for f in collect_files([a, b])] == ["a1", "b1", "b2"]

    def test_duplicate_across_assets(self, fake_asset):
        a, b = fake_asset("a")(), fake_asset("b")()
        a.file_list = [File(filename="same", data=b"")]
        b.file_list = [File(filename="same", data=b"")]

        with pytest.raises(DuplicateFileError, match="'a' and 'b'"):
            collect_files([a, b])
