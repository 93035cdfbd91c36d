"""
tests/analyzers/cloudtrail/test_decompress.py - gzip 압축 해제 테스트
"""

import json

import pytest

from analyzers.cloudtrail.decompress import (
    DecompressionSummary,
    decompress_file,
    decompress_folders,
    decompressed_path,
    find_gz_files,
)
from analyzers.cloudtrail.walker import list_leaf_folders
from core.exceptions import DecompressionError
from core.parallel import ParallelConfig


class TestFindGzFiles:
    """find_gz_files 테스트"""

    def test_only_gz_sorted(self, tmp_path):
        for name in ["b.json.gz", "a.json.gz", "c.json", "d.txt"]:
            (tmp_path / name).write_bytes(b"")

        assert [p.name for p in find_gz_files(tmp_path)] == ["a.json.gz", "b.json.gz"]

    def test_decompressed_path(self, tmp_path):
        assert decompressed_path(tmp_path / "x.json.gz") == tmp_path / "x.json"


class TestDecompressFile:
    """decompress_file 테스트"""

    def test_roundtrip_content(self, tmp_path):
        from conftest import write_gz

        payload = [[{"eventName": "UpdateTable"}]]
        gz_path = write_gz(tmp_path / "a.json.gz", payload)

        target = decompress_file(gz_path)

        assert target == tmp_path / "a.json"
        assert json.loads(target.read_text(encoding="utf-8")) == payload
        assert gz_path.exists()

    def test_overwrites_existing(self, tmp_path):
        from conftest import write_gz

        gz_path = write_gz(tmp_path / "a.json.gz", [])
        (tmp_path / "a.json").write_text("stale")

        decompress_file(gz_path)

        assert (tmp_path / "a.json").read_text(encoding="utf-8") == "[]"

    def test_corrupt_archive(self, tmp_path):
        gz_path = tmp_path / "broken.json.gz"
        gz_path.write_bytes(b"not gzip data")

        with pytest.raises(DecompressionError) as exc_info:
            decompress_file(gz_path)
        assert exc_info.value.path == str(gz_path)

    def test_truncated_archive_leaves_no_output(self, tmp_path):
        """잘린 gzip은 실패하고 .json이나 임시 파일을 남기지 않음"""
        from conftest import make_record, write_gz

        records = [make_record("UpdateTable", table_name=f"table-{i}", read=i, write=i) for i in range(2000)]
        full = write_gz(tmp_path / "full.json.gz", [records]).read_bytes()
        gz_path = tmp_path / "cut.json.gz"
        gz_path.write_bytes(full[: len(full) // 2])

        with pytest.raises(DecompressionError):
            decompress_file(gz_path)

        assert not (tmp_path / "cut.json").exists()
        assert list(tmp_path.glob("*.tmp")) == []

    def test_failure_keeps_previous_output(self, tmp_path):
        """실패 시 이전에 압축 해제된 파일은 그대로 유지"""
        gz_path = tmp_path / "a.json.gz"
        gz_path.write_bytes(b"not gzip data")
        (tmp_path / "a.json").write_text("[]", encoding="utf-8")

        with pytest.raises(DecompressionError):
            decompress_file(gz_path)

        assert (tmp_path / "a.json").read_text(encoding="utf-8") == "[]"


class TestDecompressFolders:
    """decompress_folders 테스트"""

    def test_decompress_all(self, log_root):
        folders = list_leaf_folders(log_root)
        progress = []

        summary = decompress_folders(
            folders,
            ParallelConfig(max_workers=2),
            on_folder=lambda folder, n: progress.append((folder.name, n)),
        )

        assert summary.folders_scanned == 3
        assert summary.folders_with_archives == 3
        assert summary.file_count == 3
        assert all(p.suffix == ".json" and p.exists() for p in summary.files)
        assert progress == [("01", 1), ("02", 1), ("01", 1)]

    def test_no_archives_is_noop(self, tmp_path):
        """.gz 파일이 없으면 폴더 내용 변화 없음"""
        folder = tmp_path / "2020-01" / "01"
        folder.mkdir(parents=True)
        (folder / "a.json").write_text("[]")
        before = sorted(p.name for p in folder.iterdir())

        summary = decompress_folders([folder], ParallelConfig(max_workers=1))

        assert summary == DecompressionSummary(folders_scanned=1, folders_with_archives=0, files=())
        assert sorted(p.name for p in folder.iterdir()) == before

    def test_failure_aborts(self, log_root):
        bad = log_root / "2020-01" / "02" / "zz-broken.json.gz"
        bad.write_bytes(b"garbage")

        with pytest.raises(DecompressionError):
            decompress_folders(list_leaf_folders(log_root), ParallelConfig(max_workers=2))

    def test_fail_fast_forced(self, log_root):
        """fail_fast=False 설정이어도 첫 실패에서 중단"""
        bad = log_root / "2020-01" / "01" / "zz-broken.json.gz"
        bad.write_bytes(b"garbage")

        with pytest.raises(DecompressionError):
            decompress_folders(list_leaf_folders(log_root), ParallelConfig(max_workers=2, fail_fast=False))

    def test_failure_leaves_no_partial_json(self, log_root):
        """중단 후 폴더에 잘린 .json이 없어 집계가 그대로 동작"""
        from analyzers.cloudtrail.tally import tally_events

        bad = log_root / "2020-01" / "02" / "zz-broken.json.gz"
        bad.write_bytes(b"\x1f\x8b\x08\x00garbage")
        folders = list_leaf_folders(log_root)

        with pytest.raises(DecompressionError):
            decompress_folders(folders, ParallelConfig(max_workers=2))

        assert not (log_root / "2020-01" / "02" / "zz-broken.json").exists()
        assert list(log_root.rglob("*.tmp")) == []
        assert tally_events(folders).total <= 6
