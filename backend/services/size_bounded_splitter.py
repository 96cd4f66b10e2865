"""
Size-bounded splitting.

Pages are packed greedily into a probe document one at a time; the probe is
serialized after every addition because there is no way to predict a PDF's
size without writing it. A group is committed as soon as the next page would
push it past the budget; the last probe that fit becomes the part, so the
measured and written sizes agree. A page that cannot fit on its own is sent
through PageCompressor and emitted alone, whatever size it reaches.
"""
import logging
import threading
from typing import Callable, List, Optional, Tuple

from config import SplitterConfig
from models.artifact import OutputArtifact
from models.document import PageGroup
from services.errors import CorruptDocument, InvalidParameter, PartialCompressionFailure, SerializationFailure
from services.page_compressor import PageCompressor
from services.pdf_document import PdfDocument
from services.progress import ProgressSink, ProgressTracker, raise_if_cancelled

logger = logging.getLogger(__name__)


class SizeBoundedSplitter:
    """Partitions a document into contiguous parts that each fit a byte budget."""

    def __init__(
        self,
        config: Optional[SplitterConfig] = None,
        compressor: Optional[PageCompressor] = None,
        document_factory: Callable[[], PdfDocument] = PdfDocument.create,
        document_loader: Callable[[bytes], PdfDocument] = PdfDocument.load,
    ):
        """
        Initialize SizeBoundedSplitter.

        Args:
            config: Safety margin and compression checkpoints (defaults apply if omitted)
            compressor: Fallback for single oversized pages
            document_factory: Creates empty probe and output documents
            document_loader: Re-opens compressed page bytes
        """
        self.config = config or SplitterConfig()
        self.compressor = compressor or PageCompressor(checkpoints=self.config.compression_checkpoints)
        self.document_factory = document_factory
        self.document_loader = document_loader

    def safe_max_size(self, max_size_bytes: int) -> float:
        """Budget actually used for grouping, leaving room for container overhead."""
        return max_size_bytes * self.config.safety_margin

    def split(
        self,
        source: PdfDocument,
        max_size_bytes: int,
        progress: Optional[ProgressSink] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[OutputArtifact]:
        """
        Split the source into parts no larger than the safety-margined budget.

        Every page lands in exactly one part and no part is empty. A part
        holding a single page may exceed the budget after compression.

        Args:
            source: Loaded source document (not modified)
            max_size_bytes: Requested maximum size per part
            progress: Optional sink receiving completion percentage
            cancel_event: Optional token checked between page iterations

        Returns:
            Output artifacts in ascending page order

        Raises:
            InvalidParameter: If max_size_bytes is not positive
            SerializationFailure: If copying or saving a part fails
            JobCancelled: If cancel_event is set
        """
        if max_size_bytes is None or max_size_bytes <= 0:
            raise InvalidParameter(
                "Maximum part size must be a positive number of bytes",
                max_size_bytes=max_size_bytes,
            )

        safe_max = self.safe_max_size(max_size_bytes)
        total_pages = source.page_count
        tracker = ProgressTracker(progress)
        artifacts: List[OutputArtifact] = []
        page_start = 0

        logger.info(f"Splitting {total_pages} pages with budget {max_size_bytes} bytes (safe max {safe_max:.0f})")

        while page_start < total_pages:
            page_end, data = self._probe_group(source, page_start, safe_max, cancel_event)
            group = PageGroup(start=page_start, end=page_end)
            compressed = False

            if group.page_count == 1 and len(data) > safe_max:
                data, compressed = self._compress_page(source, page_start, data, safe_max, tracker, total_pages)

            artifact = OutputArtifact(
                part_number=len(artifacts) + 1,
                group=group,
                data=data,
                compressed=compressed,
                size_limit=max_size_bytes,
            )
            artifacts.append(artifact)
            logger.info(
                f"Part {artifact.part_number}: pages {group.display_range}, {artifact.byte_size} bytes"
                + (" (compressed)" if compressed else "")
            )

            page_start = page_end
            tracker.report_fraction(page_start, total_pages)

        return artifacts

    def _probe_group(
        self,
        source: PdfDocument,
        page_start: int,
        safe_max: float,
        cancel_event: Optional[threading.Event],
    ) -> Tuple[int, bytes]:
        """
        Find where the group starting at page_start must end.

        Returns:
            (page_end, data) where [page_start, page_end) is the group and data
            is its serialized form
        """
        total_pages = source.page_count
        page_end = page_start
        group_data = b""

        with self.document_factory() as probe:
            while page_end < total_pages:
                raise_if_cancelled(cancel_event, page_start=page_start, page_end=page_end)

                probe.insert_pages(source, [page_end])
                data = probe.serialize()

                if len(data) > safe_max and page_end > page_start:
                    logger.debug(f"Page {page_end + 1} pushes group to {len(data)} bytes; closing at page {page_end}")
                    return page_end, group_data

                # A lone page over budget is kept; the compression fallback handles it
                group_data = data
                page_end += 1

        return page_end, group_data

    def _compress_page(
        self,
        source: PdfDocument,
        page_index: int,
        uncompressed: bytes,
        safe_max: float,
        tracker: ProgressTracker,
        total_pages: int,
    ) -> Tuple[bytes, bool]:
        """
        Shrink a single oversized page as far as possible.

        A failing compression attempt is logged and the page is emitted
        as the already serialized uncompressed bytes instead.

        Returns:
            (data, compressed)
        """
        logger.warning(f"Page {page_index + 1} alone exceeds {safe_max:.0f} bytes; compressing")

        def page_progress(percent: float) -> None:
            tracker.report_fraction(page_index + percent / 100.0, total_pages)

        try:
            with self.document_factory() as single:
                single.insert_pages(source, [page_index])
                result = self.compressor.compress(single, safe_max, progress=page_progress)

            with self.document_loader(result.data) as compressed_page, self.document_factory() as part:
                part.insert_pages(compressed_page, [0])
                data = part.serialize(result.tier.options)
        except (SerializationFailure, CorruptDocument) as e:
            failure = PartialCompressionFailure(
                f"Compression of page {page_index + 1} failed; keeping it uncompressed",
                page=page_index + 1,
                cause=str(e),
            )
            logger.warning(failure.error.message, exc_info=True)
            return uncompressed, False

        logger.info(
            f"Page {page_index + 1} compressed to {len(data)} bytes with '{result.tier.name}' "
            f"after {result.attempts} attempt(s)"
        )
        return data, True
