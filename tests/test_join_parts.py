"""Tests for llvm_prebuilt.join_parts and manifest reading."""

import json
import os
import zipfile

import pytest

from llvm_prebuilt.archiver import ZipfileStrategy, archive_bundle
from llvm_prebuilt.join_parts import join_from_manifest, main
from llvm_prebuilt.manifest import build_manifest, read_manifest, write_manifest

MB = 1024 * 1024


@pytest.fixture
def split_bundle(tmp_path):
    stage = tmp_path / "stage-mlir"
    (stage / "lib").mkdir(parents=True)
    payload = os.urandom(int(2.2 * MB))
    (stage / "lib/MLIRIR.lib").write_bytes(payload)
    result = archive_bundle(
        "mlir", stage, tmp_path / "zips", tmp_path / "work", "v1", "linux-x64", 1, ZipfileStrategy()
    )
    return result, payload


class TestJoinFromManifest:
    def test_round_trip(self, split_bundle, tmp_path):
        result, payload = split_bundle
        joined = join_from_manifest(result.manifest_path)

        assert joined.name == "mlir-v1-linux-x64.zip"
        with zipfile.ZipFile(joined) as zf:
            assert zf.read("lib/MLIRIR.lib") == payload

    def test_custom_output(self, split_bundle, tmp_path):
        result, _ = split_bundle
        joined = join_from_manifest(result.manifest_path, tmp_path / "out" / "mlir.zip")
        assert joined == tmp_path / "out" / "mlir.zip"
        assert zipfile.is_zipfile(joined)

    def test_corrupt_part(self, split_bundle):
        result, _ = split_bundle
        with open(result.parts[1].path, "r+b") as f:
            f.write(b"\x00\x00\x00\x00")

        with pytest.raises(ValueError, match="Checksum mismatch"):
            join_from_manifest(result.manifest_path)

    def test_missing_part(self, split_bundle):
        result, _ = split_bundle
        result.parts[-1].path.unlink()

        with pytest.raises(FileNotFoundError, match="Missing part"):
            join_from_manifest(result.manifest_path)

    def test_single_needs_no_join(self, tmp_path):
        part = tmp_path / "mlir-v1-linux-x64.zip"
        part.write_bytes(b"PK")
        manifest = write_manifest(build_manifest("mlir", "v1", "linux-x64", "single", 1800, [part]), tmp_path)

        assert join_from_manifest(manifest) == part

    def test_multi_volume_is_refused(self, tmp_path):
        part = tmp_path / "mlir-v1-linux-x64-part01.zip"
        part.write_bytes(b"PK")
        manifest = write_manifest(build_manifest("mlir", "v1", "linux-x64", "multi-volume", 1, [part]), tmp_path)

        with pytest.raises(ValueError, match="7z x"):
            join_from_manifest(manifest)


class TestReadManifest:
    def test_missing_key(self, tmp_path):
        path = tmp_path / "m.manifest.json"
        path.write_text(json.dumps({"bundle": "mlir"}))
        with pytest.raises(ValueError, match="missing"):
            read_manifest(path)

    def test_unknown_strategy(self, tmp_path):
        path = tmp_path / "m.manifest.json"
        path.write_text(
            json.dumps({"bundle": "m", "version": "v", "platform": "p", "strategy": "rar", "parts": []})
        )
        with pytest.raises(ValueError, match="unknown strategy"):
            read_manifest(path)

    def test_empty_parts(self, tmp_path):
        path = tmp_path / "m.manifest.json"
        path.write_text(
            json.dumps({"bundle": "m", "version": "v", "platform": "p", "strategy": "single", "parts": []})
        )
        with pytest.raises(ValueError, match="lists no parts"):
            read_manifest(path)

    @pytest.mark.parametrize("entry", [{"sha256": "ab"}, {"name": "m-part01.zip"}, "m-part01.zip"])
    def test_malformed_part_entry(self, tmp_path, entry):
        path = tmp_path / "m.manifest.json"
        path.write_text(
            json.dumps({"bundle": "m", "version": "v", "platform": "p", "strategy": "byte-split", "parts": [entry]})
        )
        with pytest.raises(ValueError, match="part 1"):
            read_manifest(path)

    def test_build_rejects_unknown_strategy(self, tmp_path):
        with pytest.raises(ValueError):
            build_manifest("m", "v", "p", "rar", 1, [])


class TestMain:
    def test_ok(self, split_bundle):
        result, _ = split_bundle
        assert main([str(result.manifest_path)]) == 0

    def test_missing_manifest(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.manifest.json")]) == 1
        assert "Manifest not found" in capsys.readouterr().err

    def test_malformed_manifest_exits_1(self, tmp_path, capsys):
        path = tmp_path / "m.manifest.json"
        path.write_text(
            json.dumps({"bundle": "m", "version": "v", "platform": "p", "strategy": "single", "parts": []})
        )
        assert main([str(path)]) == 1
        assert "lists no parts" in capsys.readouterr().err

    def test_usage_error_exits_1(self):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1
