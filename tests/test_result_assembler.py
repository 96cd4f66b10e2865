"""Unit tests for ResultAssembler."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import io
import json
import zipfile
import pytest

from models.artifact import OutputArtifact
from models.document import PageGroup
from services.result_assembler import ResultAssembler, base_filename


@pytest.fixture
def artifacts():
    """Three parts of a 25-page document."""
    return [
        OutputArtifact(part_number=1, group=PageGroup(0, 10), data=b"%PDF-one", size_limit=2048),
        OutputArtifact(part_number=2, group=PageGroup(10, 20), data=b"%PDF-two", size_limit=2048),
        OutputArtifact(part_number=3, group=PageGroup(20, 21), data=b"%PDF-three", compressed=True, size_limit=2048),
    ]


def test_archive_entries_follow_naming_convention(artifacts):
    """Test each part is stored as part_<N>_<name> with its bytes."""
    archive = ResultAssembler().assemble(artifacts, "report.pdf")

    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        names = zf.namelist()
        assert names == ["part_1_report.pdf", "part_2_report.pdf", "part_3_report.pdf", "manifest.json"]
        assert zf.read("part_3_report.pdf") == b"%PDF-three"


def test_manifest_reports_ranges_sizes_and_compression(artifacts):
    """Test the manifest lists every part in order."""
    archive = ResultAssembler().assemble(artifacts, "report.pdf")

    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        manifest = json.loads(zf.read("manifest.json"))

    assert manifest["source"] == "report.pdf"
    assert manifest["part_count"] == 3
    third = manifest["parts"][2]
    assert third["entry_name"] == "part_3_report.pdf"
    assert third["page_range"] == "21"
    assert third["byte_size"] == len(b"%PDF-three")
    assert third["size_limit_display"] == "2 KB"
    assert third["compressed"] is True


def test_manifest_can_be_disabled(artifacts):
    """Test only parts are written when the manifest is turned off."""
    archive = ResultAssembler(include_manifest=False).assemble(artifacts, "report.pdf")

    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        assert "manifest.json" not in zf.namelist()


def test_directory_components_are_stripped(artifacts):
    """Test client paths do not leak into entry names."""
    archive = ResultAssembler().assemble(artifacts[:1], "C:\\Users\\me\\Docs\\big file.pdf")

    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        assert zf.namelist()[0] == "part_1_big file.pdf"


def test_base_filename():
    """Test path stripping for POSIX and Windows names."""
    assert base_filename("/tmp/uploads/a.pdf") == "a.pdf"
    assert base_filename("dir\\b.pdf") == "b.pdf"
    assert base_filename("") == "document.pdf"


def test_empty_split_produces_manifest_only():
    """Test a zero-page document still yields a valid archive."""
    archive = ResultAssembler().assemble([], "empty.pdf")

    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        assert zf.namelist() == ["manifest.json"]
