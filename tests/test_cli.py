"""
Tests for the command-line interface.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from doc_dig.extractors import ExtractionError
from doc_dig.main import app
from doc_dig.models import ExtractedDocument, SourceKind

RPATH_LINE = "cargo:rustc-link-arg=-Wl,-rpath,$ORIGIN"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestStageCommand:
    """Tests for `doc-dig stage`."""

    def test_fast_path_prints_rpath(
        self, runner: CliRunner, staging_dir: Path, make_file
    ) -> None:
        """Test an already staged payload needs no build tree."""
        make_file(staging_dir / "libtika_native.so")

        result = runner.invoke(
            app, ["stage", "--staging-dir", str(staging_dir), "--target-os", "linux"]
        )

        assert result.exit_code == 0
        assert RPATH_LINE in result.stdout.splitlines()

    def test_slow_path_stages_from_env(
        self,
        runner: CliRunner,
        out_dir: Path,
        target_root: Path,
        temp_dir: Path,
        make_file,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test the build tool's environment drives a full staging run."""
        libs = target_root / "debug" / "build" / "extractous-77aa" / "out"
        make_file(libs / "libtika_native.so")
        manifest_dir = temp_dir / "project" / "native" / "doc_dig"
        manifest_dir.mkdir(parents=True)
        monkeypatch.setenv("OUT_DIR", str(out_dir))
        monkeypatch.setenv("CARGO_MANIFEST_DIR", str(manifest_dir))
        monkeypatch.setenv("CARGO_CFG_TARGET_OS", "linux")

        result = runner.invoke(app, ["stage"])

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert f"cargo:rerun-if-changed={libs / 'libtika_native.so'}" in lines
        assert RPATH_LINE in lines
        assert (temp_dir / "project" / "priv" / "native" / "libtika_native.so").is_file()

    def test_apple_emits_no_link_arg(
        self, runner: CliRunner, staging_dir: Path, make_file
    ) -> None:
        """Test no loader directive is printed for Apple targets."""
        make_file(staging_dir / "libtika_native.dylib")

        result = runner.invoke(
            app, ["stage", "--staging-dir", str(staging_dir), "--target-os", "macos"]
        )

        assert result.exit_code == 0
        assert "cargo:rustc-link-arg" not in result.stdout

    def test_missing_artifact_fails(
        self, runner: CliRunner, out_dir: Path, staging_dir: Path
    ) -> None:
        """Test exhaustion exits non-zero with a staging error."""
        result = runner.invoke(
            app,
            [
                "stage",
                "--out-dir",
                str(out_dir),
                "--staging-dir",
                str(staging_dir),
                "--target-os",
                "linux",
            ],
        )

        assert result.exit_code == 1
        assert "Staging Error" in result.output

    def test_missing_configuration_fails(self, runner: CliRunner) -> None:
        """Test no staging location exits with a configuration error."""
        result = runner.invoke(app, ["stage", "--target-os", "linux"])

        assert result.exit_code == 1
        assert "Configuration Error" in result.output

    def test_unknown_log_level_fails_cleanly(
        self, runner: CliRunner, staging_dir: Path, make_file, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test an invalid log level is a one-line configuration error, not a traceback."""
        make_file(staging_dir / "libtika_native.so")
        monkeypatch.setenv("DOC_DIG_LOG_LEVEL", "verbose")

        result = runner.invoke(
            app, ["stage", "--staging-dir", str(staging_dir), "--target-os", "linux"]
        )

        assert result.exit_code == 1
        assert "Configuration Error" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert RPATH_LINE not in result.stdout


class TestLocateCommand:
    """Tests for `doc-dig locate`."""

    def test_prints_path(
        self, runner: CliRunner, out_dir: Path, target_root: Path, make_file
    ) -> None:
        """Test the located artifact path is printed."""
        hit = make_file(target_root / "debug" / "build" / "extractous-1" / "libtika_native.so")

        result = runner.invoke(app, ["locate", "--out-dir", str(out_dir), "--target-os", "linux"])

        assert result.exit_code == 0
        assert str(hit) in result.stdout.splitlines()

    def test_requires_out_dir(self, runner: CliRunner) -> None:
        """Test an error without any output directory."""
        result = runner.invoke(app, ["locate"])

        assert result.exit_code == 1


class TestDoctorCommand:
    """Tests for `doc-dig doctor`."""

    def test_reports_platform(self, runner: CliRunner, staging_dir: Path, make_file) -> None:
        """Test the resolved platform and staged state are shown."""
        make_file(staging_dir / "libtika_native.so")

        result = runner.invoke(
            app, ["doctor", "--staging-dir", str(staging_dir), "--target-os", "linux"]
        )

        assert result.exit_code == 0
        assert "libtika_native.so" in result.stdout
        assert "linux" in result.stdout


class TestExtractCommand:
    """Tests for `doc-dig extract`."""

    def _document(self, content: str, kind: SourceKind = SourceKind.FILE) -> ExtractedDocument:
        return ExtractedDocument(
            content=content,
            metadata={"Content-Type": ["text/plain"]},
            source="src",
            source_kind=kind,
        )

    def test_extract_file(self, runner: CliRunner, temp_dir: Path) -> None:
        """Test extracted text is printed."""
        with patch("doc_dig.main.extract_file", return_value=self._document("Hello")) as mock:
            result = runner.invoke(app, ["extract", str(temp_dir / "a.docx")])

        assert result.exit_code == 0
        assert "Hello" in result.stdout
        mock.assert_called_once_with(temp_dir / "a.docx")

    def test_extract_ocr(self, runner: CliRunner, temp_dir: Path) -> None:
        """Test --ocr routes to OCR extraction with the language."""
        with patch("doc_dig.main.extract_file_ocr", return_value=self._document("Scan")) as mock:
            result = runner.invoke(app, ["extract", str(temp_dir / "s.pdf"), "--ocr", "-l", "deu"])

        assert result.exit_code == 0
        mock.assert_called_once_with(temp_dir / "s.pdf", language="deu")

    def test_extract_url(self, runner: CliRunner) -> None:
        """Test --url routes to URL extraction."""
        doc = self._document("Web", SourceKind.URL)
        with patch("doc_dig.main.extract_url", return_value=doc) as mock:
            result = runner.invoke(app, ["extract", "https://example.com", "--url"])

        assert result.exit_code == 0
        mock.assert_called_once_with("https://example.com")

    def test_extract_stdin(self, runner: CliRunner) -> None:
        """Test '-' reads the document from stdin."""
        doc = self._document("Piped", SourceKind.BYTES)
        with patch("doc_dig.main.extract_bytes", return_value=doc) as mock:
            result = runner.invoke(app, ["extract", "-"], input=b"raw-bytes")

        assert result.exit_code == 0
        mock.assert_called_once_with(b"raw-bytes")

    @pytest.mark.parametrize(
        "args",
        [
            ["-", "--ocr"],
            ["-", "--lang", "deu"],
            ["https://example.com", "--url", "--ocr", "-l", "deu"],
        ],
    )
    def test_ocr_options_need_a_file(self, runner: CliRunner, args: list[str]) -> None:
        """Test OCR options are rejected for URL and stdin sources."""
        with patch("doc_dig.main.extract_bytes") as bytes_mock, patch(
            "doc_dig.main.extract_url"
        ) as url_mock:
            result = runner.invoke(app, ["extract", *args], input=b"raw")

        assert result.exit_code == 2
        bytes_mock.assert_not_called()
        url_mock.assert_not_called()

    def test_empty_extraction_warns(self, runner: CliRunner, temp_dir: Path) -> None:
        """Test a whitespace-only result is flagged on stderr."""
        with patch("doc_dig.main.extract_file", return_value=self._document("  \n")):
            result = runner.invoke(app, ["extract", str(temp_dir / "blank.pdf")])

        assert result.exit_code == 0
        assert "No text extracted" in result.output

    def test_extraction_error(self, runner: CliRunner, temp_dir: Path) -> None:
        """Test extraction failures exit non-zero."""
        error = ExtractionError("File does not exist", temp_dir / "x.pdf")
        with patch("doc_dig.main.extract_file", side_effect=error):
            result = runner.invoke(app, ["extract", str(temp_dir / "x.pdf")])

        assert result.exit_code == 1
        assert "Extraction Error" in result.output
