"""Tests for the split_pdf command-line entry point."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import zipfile
import pytest
from unittest.mock import patch

import split_pdf
from models.job import SplitMode
from fake_pdf import make_pdf


def run_cli(*argv):
    with patch.object(sys, "argv", ["split_pdf.py", *argv]):
        with pytest.raises(SystemExit) as exc_info:
            split_pdf.main()
    return exc_info.value.code


def test_split_by_pages_writes_archive(tmp_path):
    """Test the default output path sits next to the input."""
    source = tmp_path / "report.pdf"
    source.write_bytes(make_pdf(12))

    assert run_cli(str(source), "--pages", "5") == 0

    with zipfile.ZipFile(tmp_path / "report_split.zip") as zf:
        names = zf.namelist()
    assert names[:3] == ["part_1_report.pdf", "part_2_report.pdf", "part_3_report.pdf"]


def test_split_by_size_with_explicit_output(tmp_path):
    """Test --max-size-mb and --output."""
    source = tmp_path / "report.pdf"
    source.write_bytes(make_pdf(3))
    output = tmp_path / "out" / "parts.zip"
    output.parent.mkdir()

    assert run_cli(str(source), "--max-size-mb", "5", "--output", str(output)) == 0
    assert output.exists()


def test_invalid_pages_exits_with_error(tmp_path):
    """Test a failed job exits non-zero without writing an archive."""
    source = tmp_path / "report.pdf"
    source.write_bytes(make_pdf(3))

    assert run_cli(str(source), "--pages", "0") == 1
    assert not (tmp_path / "report_split.zip").exists()


def test_non_finite_size_exits_with_error(tmp_path):
    """Test --max-size-mb nan is reported instead of raising."""
    source = tmp_path / "report.pdf"
    source.write_bytes(make_pdf(3))

    assert run_cli(str(source), "--max-size-mb", "nan") == 1
    assert not (tmp_path / "report_split.zip").exists()


def test_missing_input_exits_with_error(tmp_path):
    """Test a missing input file is reported."""
    assert run_cli(str(tmp_path / "missing.pdf"), "--pages", "5") == 1


def test_build_request_converts_megabytes(tmp_path):
    """Test size budgets are converted from MB to bytes."""
    source = tmp_path / "report.pdf"
    source.write_bytes(b"%PDF-1.7")
    args = split_pdf.argparse.Namespace(input=str(source), pages=None, max_size_mb=1.5)

    request = split_pdf.build_request(args)

    assert request.mode == SplitMode.SIZE
    assert request.max_size_bytes == int(1.5 * 1024 * 1024)
    assert request.filename == "report.pdf"
