"""Best-effort size reduction for a single page that exceeds the budget."""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from services.pdf_document import PdfDocument, SaveOptions
from services.progress import ProgressSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompressionTier:
    """One serialization attempt, from mildest to most aggressive."""
    name: str
    options: SaveOptions


DEFAULT_COMPRESSION_TIERS: Tuple[CompressionTier, ...] = (
    # Every tier saves more aggressively than DEFAULT_SAVE_OPTIONS
    CompressionTier("baseline", SaveOptions(use_objstms=True, garbage=1, deflate=True)),
    CompressionTier("dense", SaveOptions(use_objstms=True, garbage=3, deflate=True)),
    CompressionTier(
        "maximum",
        SaveOptions(
            use_objstms=True,
            garbage=4,
            clean=True,
            deflate=True,
            deflate_images=True,
            deflate_fonts=True,
        ),
    ),
)


@dataclass(frozen=True)
class CompressionResult:
    """Best serialization achieved for a single-page document."""
    data: bytes
    tier: CompressionTier
    attempts: int
    target_bytes: float

    @property
    def byte_size(self) -> int:
        return len(self.data)

    @property
    def within_target(self) -> bool:
        return self.byte_size <= self.target_bytes


class PageCompressor:
    """
    Tries progressively more aggressive save settings on a single-page
    document, stopping at the first result that fits.
    """

    def __init__(
        self,
        tiers: Sequence[CompressionTier] = DEFAULT_COMPRESSION_TIERS,
        checkpoints: Sequence[float] = (25.0, 50.0, 75.0),
    ):
        """
        Initialize PageCompressor.

        Args:
            tiers: Ordered save attempts; must not be empty
            checkpoints: Progress reported after each attempt that does not fit
        """
        if not tiers:
            raise ValueError("At least one compression tier is required")
        self.tiers = tuple(tiers)
        self.checkpoints = tuple(checkpoints)

    def compress(
        self,
        document: PdfDocument,
        target_bytes: float,
        progress: Optional[ProgressSink] = None,
    ) -> CompressionResult:
        """
        Serialize the document as small as the configured tiers allow.

        Never fails for missing the target: if no tier fits, the output of
        the last tier is returned.

        Args:
            document: Single-page document to serialize
            target_bytes: Size to get under
            progress: Optional sink receiving the fixed checkpoints

        Returns:
            CompressionResult with the chosen bytes and tier

        Raises:
            SerializationFailure: If saving itself fails
        """
        data = b""
        tier = self.tiers[0]

        for attempt, tier in enumerate(self.tiers, start=1):
            data = document.serialize(tier.options)
            logger.debug(f"Compression attempt {attempt} ({tier.name}): {len(data)} bytes, target {target_bytes:.0f}")

            if len(data) <= target_bytes:
                return CompressionResult(data=data, tier=tier, attempts=attempt, target_bytes=target_bytes)

            if progress is not None and attempt <= len(self.checkpoints):
                progress(self.checkpoints[attempt - 1])

        logger.warning(
            f"Page still exceeds target after {len(self.tiers)} attempts: "
            f"{len(data)} bytes > {target_bytes:.0f}"
        )
        return CompressionResult(data=data, tier=tier, attempts=len(self.tiers), target_bytes=target_bytes)
