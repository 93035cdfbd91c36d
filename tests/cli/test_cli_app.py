# tests/cli/test_cli_app.py
"""
cli/app.py 단위 테스트

CLI 메인 엔트리포인트 테스트.
"""

import logging

import pytest
from click.testing import CliRunner

from cli.app import STAGE_LABELS, _configure_logging, cli


@pytest.fixture
def runner():
    """Click CliRunner"""
    return CliRunner()


# =============================================================================
# CLI 그룹 테스트
# =============================================================================


class TestCLI:
    """CLI 그룹 테스트"""

    def test_version_option(self, runner):
        """--version 옵션 테스트"""
        from core.config import get_version

        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "cta" in result.output
        assert get_version() in result.output

    def test_help_option(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("fetch", "decompress", "tally", "throughput", "plot", "report", "run"):
            assert command in result.output

    def test_stage_labels_match_pipeline(self):
        from analyzers.cloudtrail.pipeline import STAGE_DECOMPRESS, STAGE_FILTER, STAGE_TALLY

        assert set(STAGE_LABELS) == {STAGE_DECOMPRESS, STAGE_TALLY, STAGE_FILTER}


class TestConfigureLogging:
    """로그 레벨 설정 테스트"""

    @pytest.fixture(autouse=True)
    def restore_level(self):
        root = logging.getLogger()
        level = root.level
        yield
        root.setLevel(level)

    def test_default_warning(self):
        assert _configure_logging(0) == logging.WARNING

    def test_verbose(self):
        assert _configure_logging(1) == logging.INFO
        assert _configure_logging(2) == logging.DEBUG

    def test_env_level(self, monkeypatch):
        monkeypatch.setenv("CTA_LOG_LEVEL", "error")
        assert _configure_logging(0) == logging.ERROR

    def test_env_level_invalid(self, monkeypatch):
        monkeypatch.setenv("CTA_LOG_LEVEL", "loud")
        assert _configure_logging(0) == logging.WARNING


# =============================================================================
# 명령어 테스트
# =============================================================================


class TestDecompressCommand:
    """decompress 명령 테스트"""

    def test_decompress(self, runner, log_root):
        result = runner.invoke(cli, ["decompress", str(log_root), "--workers", "2"])

        assert result.exit_code == 0, result.output
        assert "3개 파일 압축 해제" in result.output
        assert (log_root / "2020-01" / "01" / "part-0001.json").exists()

    def test_missing_root(self, runner, tmp_path):
        result = runner.invoke(cli, ["decompress", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "로그 경로 오류" in result.output

    def test_invalid_workers(self, runner, log_root):
        result = runner.invoke(cli, ["decompress", str(log_root), "--workers", "0"])
        assert result.exit_code == 2

    def test_invalid_workers_env(self, runner, log_root, monkeypatch):
        monkeypatch.setenv("CTA_MAX_WORKERS", "0")
        result = runner.invoke(cli, ["decompress", str(log_root)])

        assert result.exit_code == 1
        assert "CTA_MAX_WORKERS" in result.output


class TestTallyCommand:
    """tally 명령 테스트"""

    def test_tally(self, runner, decompressed_root):
        result = runner.invoke(cli, ["tally", str(decompressed_root)])

        assert result.exit_code == 0, result.output
        assert "UpdateTable" in result.output
        assert "50.00%" in result.output
        assert "총 이벤트" in result.output

    def test_tally_top(self, runner, decompressed_root):
        result = runner.invoke(cli, ["tally", str(decompressed_root), "--top", "1"])

        assert result.exit_code == 0, result.output
        assert "ListTables" not in result.output

    def test_tally_bad_json(self, runner, decompressed_root):
        (decompressed_root / "2020-01" / "01" / "zz.json").write_text("{oops")
        result = runner.invoke(cli, ["tally", str(decompressed_root)])

        assert result.exit_code == 1
        assert "레코드 형식 오류" in result.output

    def test_tally_null_event_name(self, runner, decompressed_root):
        """eventName이 null이면 traceback 없이 종료 코드 1"""
        from conftest import write_json

        write_json(decompressed_root / "2020-01" / "01" / "zz.json", [[{"eventName": None}]])
        result = runner.invoke(cli, ["tally", str(decompressed_root)])

        assert result.exit_code == 1
        assert "eventName" in result.output
        assert not isinstance(result.exception, TypeError)


class TestThroughputCommand:
    """throughput 명령 테스트"""

    def test_summary(self, runner, decompressed_root):
        result = runner.invoke(cli, ["throughput", str(decompressed_root), "--timezone", "Asia/Seoul"])

        assert result.exit_code == 0, result.output
        assert "orders" in result.output
        assert "users" in result.output

    def test_no_events(self, runner, decompressed_root):
        result = runner.invoke(cli, ["throughput", str(decompressed_root), "--event", "DeleteTable"])

        assert result.exit_code == 0
        assert "이벤트가 없습니다" in result.output


class TestOutputCommands:
    """plot / report / run 명령 테스트"""

    def test_plot(self, runner, decompressed_root, tmp_path):
        out = tmp_path / "charts"
        result = runner.invoke(cli, ["plot", str(decompressed_root), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in out.glob("*.png")) == [
            "read_capacity.png",
            "write_capacity.png",
            "write_capacity_legend.png",
        ]

    def test_plot_without_events(self, runner, log_root, tmp_path):
        """압축 해제 전에는 이벤트가 없어 검증 오류"""
        result = runner.invoke(cli, ["plot", str(log_root), "-o", str(tmp_path / "charts")])

        assert result.exit_code == 1
        assert "검증 오류" in result.output

    def test_report(self, runner, decompressed_root, tmp_path):
        out = tmp_path / "reports"
        result = runner.invoke(cli, ["report", str(decompressed_root), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert len(list(out.glob("*.xlsx"))) == 1

    def test_run_both(self, runner, log_root, tmp_path):
        out = tmp_path / "out"
        result = runner.invoke(cli, ["run", str(log_root), "-w", "2", "-f", "both", "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert len(list(out.glob("*.png"))) == 3
        assert len(list(out.glob("*.xlsx"))) == 1
        assert "UpdateTable" in result.output

    def test_run_output_dir_from_env(self, runner, log_root, tmp_path, monkeypatch):
        out = tmp_path / "env-out"
        monkeypatch.setenv("CTA_OUTPUT_DIR", str(out))

        result = runner.invoke(cli, ["run", str(log_root)])

        assert result.exit_code == 0, result.output
        assert len(list(out.glob("*.png"))) == 3

    def test_run_skip_decompress(self, runner, log_root, tmp_path):
        result = runner.invoke(cli, ["run", str(log_root), "--skip-decompress", "-o", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "이벤트가 없습니다" in result.output
        assert not list(tmp_path.glob("*.png"))


class TestFetchCommand:
    """fetch 명령 테스트"""

    def test_fetch(self, runner, moto_s3, tmp_path):
        moto_s3.create_bucket(
            Bucket="trail-bucket",
            CreateBucketConfiguration={"LocationConstraint": "ap-northeast-2"},
        )
        moto_s3.put_object(
            Bucket="trail-bucket",
            Key="AWSLogs/123456789012/CloudTrail/ap-northeast-2/2020/01/01/a.json.gz",
            Body=b"data",
        )

        result = runner.invoke(cli, ["fetch", "s3://trail-bucket/AWSLogs", str(tmp_path), "-w", "1"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "2020-01" / "01" / "a.json.gz").exists()

    def test_invalid_uri(self, runner, moto_s3, tmp_path):
        result = runner.invoke(cli, ["fetch", "trail-bucket/AWSLogs", str(tmp_path)])

        assert result.exit_code == 1
        assert "s3://bucket/prefix" in result.output
