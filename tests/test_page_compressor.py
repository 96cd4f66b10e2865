"""Unit tests for PageCompressor."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest

from services.errors import SerializationFailure
from services.page_compressor import DEFAULT_COMPRESSION_TIERS, PageCompressor
from services.pdf_document import DEFAULT_SAVE_OPTIONS
from fake_pdf import FakeDocument, serialized_size


@pytest.fixture
def compressor():
    """Create a PageCompressor with the default tiers."""
    return PageCompressor()


class TestPageCompressor:
    """Test suite for PageCompressor."""

    def test_returns_first_attempt_when_it_fits(self, compressor):
        """Test no further attempts are made once under target."""
        reported = []

        result = compressor.compress(FakeDocument([1000]), 5000, progress=reported.append)

        assert result.attempts == 1
        assert result.tier.name == "baseline"
        assert result.within_target
        assert reported == []

    def test_second_tier(self, compressor):
        """Test the dense tier is used when baseline is too large."""
        reported = []
        target = serialized_size([2000], DEFAULT_COMPRESSION_TIERS[1].options)

        result = compressor.compress(FakeDocument([2000]), target, progress=reported.append)

        assert result.attempts == 2
        assert result.tier.name == "dense"
        assert result.byte_size == target
        assert reported == [25.0]

    def test_returns_last_attempt_when_nothing_fits(self, compressor):
        """Test the most aggressive result is returned even if still over target."""
        reported = []

        result = compressor.compress(FakeDocument([5000]), 100, progress=reported.append)

        assert result.attempts == 3
        assert result.tier.name == "maximum"
        assert not result.within_target
        assert result.byte_size == serialized_size([5000], DEFAULT_COMPRESSION_TIERS[-1].options)
        assert reported == [25.0, 50.0, 75.0]

    def test_custom_checkpoints(self):
        """Test checkpoints are tunable."""
        compressor = PageCompressor(checkpoints=(10.0, 20.0, 30.0))
        reported = []

        compressor.compress(FakeDocument([5000]), 100, progress=reported.append)

        assert reported == [10.0, 20.0, 30.0]

    def test_serialization_failure_propagates(self, compressor):
        """Test save failures are not swallowed by the compressor."""
        document = FakeDocument([5000], fail_on_options=DEFAULT_COMPRESSION_TIERS[2].options)

        with pytest.raises(SerializationFailure):
            compressor.compress(document, 100)

    def test_requires_tiers(self):
        """Test an empty tier list is rejected."""
        with pytest.raises(ValueError, match="At least one compression tier"):
            PageCompressor(tiers=())

    def test_baseline_tier_saves_smaller_than_default(self, compressor):
        """Test a page just over target with default options fits on the first tier."""
        assert DEFAULT_COMPRESSION_TIERS[0].options != DEFAULT_SAVE_OPTIONS
        target = 1900
        assert serialized_size([1750]) > target

        result = compressor.compress(FakeDocument([1750]), target)

        assert result.attempts == 1
        assert result.tier.name == "baseline"
        assert result.within_target
