"""Test cases for the command-line interface."""

import json
import logging
from pathlib import Path
from typing import Iterator

import pytest
from click.testing import CliRunner

from resource_extractor.main import cli


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Undo the basicConfig call made by every CLI invocation."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestListCommand:
    """Test cases for the list command."""

    def test_lists_package_resources(
        self, runner: CliRunner, sample_package: str
    ) -> None:
        result = runner.invoke(
            cli, ["list", sample_package, "--prefix", "sample_assets.html"]
        )

        assert result.exit_code == 0
        assert "index.html" in result.output
        assert "config.json" not in result.output
        assert "2 resource(s)" in result.output

    def test_unknown_source_fails(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["list", "no_such_package_for_cli_tests"])

        assert result.exit_code == 1

    def test_empty_separator_is_rejected(
        self, runner: CliRunner, sample_package: str
    ) -> None:
        result = runner.invoke(cli, ["list", sample_package, "--separator", ""])

        assert result.exit_code == 1
        assert "Invalid settings" in result.output
        assert isinstance(result.exception, SystemExit)


class TestExtractCommand:
    """Test cases for the extract command."""

    def test_extracts_whole_prefix(
        self, runner: CliRunner, sample_zip: Path, output_dir: Path
    ) -> None:
        result = runner.invoke(
            cli, ["extract", str(sample_zip), str(output_dir), "--prefix", "www"]
        )

        assert result.exit_code == 0, result.output
        assert (output_dir / "index.html").read_bytes() == b"<html></html>"
        assert (output_dir / "app.js").read_bytes() == b"console.log(1);"

    def test_extracts_selected_files(
        self, runner: CliRunner, sample_package: str, output_dir: Path
    ) -> None:
        result = runner.invoke(
            cli,
            [
                "extract",
                sample_package,
                str(output_dir),
                "-p",
                "sample_assets.html",
                "-f",
                "app.js",
            ],
        )

        assert result.exit_code == 0, result.output
        assert [p.name for p in output_dir.iterdir()] == ["app.js"]

    def test_missing_file_exits_non_zero(
        self, runner: CliRunner, sample_zip: Path, output_dir: Path
    ) -> None:
        result = runner.invoke(
            cli,
            ["extract", str(sample_zip), str(output_dir), "-p", "www", "-f", "x.css"],
        )

        assert result.exit_code == 1
        assert list(output_dir.iterdir()) == []

    def test_invalid_chunk_size(
        self, runner: CliRunner, sample_zip: Path, output_dir: Path
    ) -> None:
        result = runner.invoke(
            cli, ["extract", str(sample_zip), str(output_dir), "--chunk-size", "0"]
        )

        assert result.exit_code == 1


class TestShowCommand:
    """Test cases for the show command."""

    def test_prints_json(self, runner: CliRunner, sample_zip: Path) -> None:
        result = runner.invoke(cli, ["show", str(sample_zip), "settings.json"])

        assert result.exit_code == 0, result.output
        assert '"demo"' in result.output

    def test_missing_resource(self, runner: CliRunner, sample_zip: Path) -> None:
        result = runner.invoke(cli, ["show", str(sample_zip), "other.json"])

        assert result.exit_code == 1
        assert "resource_not_found" in result.output

    def test_empty_separator_is_rejected(
        self, runner: CliRunner, sample_zip: Path
    ) -> None:
        result = runner.invoke(
            cli, ["show", str(sample_zip), "settings.json", "--separator", ""]
        )

        assert result.exit_code == 1
        assert "Invalid settings" in result.output
        assert isinstance(result.exception, SystemExit)


class TestRunCommand:
    """Test cases for manifest runs."""

    def _write_manifest(self, path: Path, source: str, output: Path) -> Path:
        path.write_text(
            json.dumps(
                {
                    "jobs": [
                        {
                            "source": source,
                            "prefix": "sample_assets.html",
                            "output_directory": str(output),
                            "description": "web assets",
                        }
                    ]
                }
            )
        )
        return path

    def test_runs_jobs(
        self,
        runner: CliRunner,
        sample_package: str,
        output_dir: Path,
        tmp_path: Path,
    ) -> None:
        manifest = self._write_manifest(
            tmp_path / "manifest.json", sample_package, output_dir
        )

        result = runner.invoke(cli, ["run", "--config", str(manifest)])

        assert result.exit_code == 0, result.output
        assert "web assets" in result.output
        assert sorted(p.name for p in output_dir.iterdir()) == ["app.js", "index.html"]

    def test_failed_job_exits_non_zero(
        self, runner: CliRunner, sample_package: str, tmp_path: Path
    ) -> None:
        manifest = self._write_manifest(
            tmp_path / "manifest.json", sample_package, tmp_path / "absent"
        )

        result = runner.invoke(cli, ["run", "-c", str(manifest)])

        assert result.exit_code == 1

    def test_invalid_manifest(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "manifest.json"
        path.write_text(json.dumps({"jobs": []}))

        result = runner.invoke(cli, ["run", "-c", str(path)])

        assert result.exit_code == 1
        assert "Configuration error" in result.output


class TestValidateCommand:
    """Test cases for the validate command."""

    def test_valid_manifest(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "manifest.json"
        path.write_text(
            json.dumps(
                {
                    "jobs": [
                        {
                            "source": "app",
                            "files": ["index.html"],
                            "output_directory": str(tmp_path),
                        }
                    ]
                }
            )
        )

        result = runner.invoke(cli, ["validate", str(path)])

        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "index.html" in result.output

    def test_missing_manifest(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["validate", str(tmp_path / "absent.json")])

        assert result.exit_code == 1
