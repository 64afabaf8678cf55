"""Tests for llvm_prebuilt.splitting: byte splitting and joining."""

import hashlib

import pytest

from llvm_prebuilt.splitting import calculate_sha256, join_files, split_file


@pytest.fixture
def blob(tmp_path):
    path = tmp_path / "full.zip"
    path.write_bytes(bytes(range(256)) * 40 + b"tail")  # 10244 bytes
    return path


def numbered(out_dir):
    return lambda n: out_dir / f"chunk-part{n:02d}.zip"


class TestSplitFile:
    def test_part_sizes(self, blob, tmp_path):
        parts = split_file(blob, 4096, numbered(tmp_path / "out"))

        assert [p.name for p in parts] == ["chunk-part01.zip", "chunk-part02.zip", "chunk-part03.zip"]
        assert [p.stat().st_size for p in parts] == [4096, 4096, 2052]

    def test_exact_multiple(self, tmp_path):
        path = tmp_path / "even.bin"
        path.write_bytes(b"a" * 300)
        parts = split_file(path, 100, numbered(tmp_path))
        assert [p.stat().st_size for p in parts] == [100, 100, 100]

    def test_smaller_than_part(self, blob, tmp_path):
        parts = split_file(blob, 1 << 20, numbered(tmp_path))
        assert len(parts) == 1
        assert parts[0].read_bytes() == blob.read_bytes()

    def test_part_larger_than_copy_block(self, tmp_path, monkeypatch):
        import llvm_prebuilt.splitting as splitting

        monkeypatch.setattr(splitting, "COPY_BLOCK_SIZE", 7)
        path = tmp_path / "data.bin"
        path.write_bytes(bytes(range(100)))
        parts = split_file(path, 30, numbered(tmp_path / "out"))
        assert [p.stat().st_size for p in parts] == [30, 30, 30, 10]
        assert b"".join(p.read_bytes() for p in parts) == path.read_bytes()

    def test_missing_archive(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            split_file(tmp_path / "nope.zip", 10, numbered(tmp_path))

    def test_bad_part_size(self, blob, tmp_path):
        with pytest.raises(ValueError):
            split_file(blob, 0, numbered(tmp_path))


class TestJoinFiles:
    def test_join_restores_bytes(self, blob, tmp_path):
        original = blob.read_bytes()
        parts = split_file(blob, 1000, numbered(tmp_path / "parts"))
        joined = join_files(parts, tmp_path / "joined.zip")
        assert joined.read_bytes() == original

    def test_sha256(self, blob):
        assert calculate_sha256(blob) == hashlib.sha256(blob.read_bytes()).hexdigest()
