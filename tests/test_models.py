"""Tests for data models and display helpers."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest

from config import SplitterConfig
from formatting import format_file_size, mb_to_bytes
from models.artifact import OutputArtifact
from models.document import PageGroup
from models.job import JobState, JobStatus, SplitMode


class TestPageGroup:
    """Test suite for PageGroup."""

    def test_display_range(self):
        """Test 1-based inclusive display."""
        assert PageGroup(0, 10).display_range == "1-10"
        assert PageGroup(6, 7).display_range == "7"

    def test_page_count_and_indices(self):
        """Test half-open semantics."""
        group = PageGroup(3, 6)
        assert group.page_count == 3
        assert list(group.indices) == [3, 4, 5]

    @pytest.mark.parametrize("start,end", [(2, 2), (5, 3), (-1, 2)])
    def test_empty_or_negative_groups_rejected(self, start, end):
        """Test groups are never empty."""
        with pytest.raises(ValueError):
            PageGroup(start, end)


def test_artifact_report():
    """Test the per-part report fields."""
    artifact = OutputArtifact(part_number=2, group=PageGroup(10, 20), data=b"x" * 1536, size_limit=10 * 1024 * 1024)

    report = artifact.to_report()

    assert report == {
        "part_number": 2,
        "page_range": "11-20",
        "byte_size": 1536,
        "size_display": "1.5 KB",
        "size_limit": 10 * 1024 * 1024,
        "size_limit_display": "10 MB",
        "compressed": False,
    }
    assert artifact.entry_name("big.pdf") == "part_2_big.pdf"


@pytest.mark.parametrize("size,expected", [
    (0, "0 Bytes"),
    (512, "512 Bytes"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (10 * 1024 * 1024, "10 MB"),
    (int(9.4 * 1024 * 1024), "9.4 MB"),
    (3 * 1024 ** 3, "3 GB"),
])
def test_format_file_size(size, expected):
    """Test human-readable sizes."""
    assert format_file_size(size) == expected


def test_mb_to_bytes():
    """Test fractional megabytes convert to whole bytes."""
    assert mb_to_bytes(10) == 10 * 1024 * 1024
    assert mb_to_bytes(0.5) == 512 * 1024


def test_job_state_round_trip():
    """Test JobState survives dict serialization."""
    state = JobState(job_id="job_1", filename="a.pdf", mode=SplitMode.PAGES)
    state.status = JobStatus.DONE
    state.parts = [{"part_number": 1}]

    restored = JobState.from_dict(state.to_dict())

    assert restored == state
    assert restored.status.is_terminal


def test_splitter_config_rejects_bad_margin():
    """Test the safety margin must be a fraction in (0, 1]."""
    with pytest.raises(ValueError, match="safety_margin"):
        SplitterConfig(safety_margin=0)
    with pytest.raises(ValueError, match="safety_margin"):
        SplitterConfig(safety_margin=1.5)


def test_splitter_config_rejects_bad_retention():
    """Test archives must be retained for a positive period."""
    with pytest.raises(ValueError, match="archive_retention_seconds"):
        SplitterConfig(archive_retention_seconds=0)
    assert SplitterConfig().archive_retention_seconds == 3600.0
