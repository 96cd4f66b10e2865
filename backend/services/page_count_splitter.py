"""Split a document into fixed-size runs of pages."""
import logging
import threading
from typing import Callable, List, Optional

from models.artifact import OutputArtifact
from models.document import PageGroup
from services.errors import InvalidParameter
from services.pdf_document import PdfDocument
from services.progress import ProgressSink, ProgressTracker, raise_if_cancelled

logger = logging.getLogger(__name__)


def plan_page_groups(total_pages: int, pages_per_group: int) -> List[PageGroup]:
    """
    Partition [0, total_pages) into consecutive groups of pages_per_group pages.

    The last group holds the remainder. Zero pages yields zero groups.

    Raises:
        InvalidParameter: If pages_per_group is not positive or total_pages is negative
    """
    if pages_per_group is None or pages_per_group <= 0:
        raise InvalidParameter(
            "Pages per file must be a positive integer",
            pages_per_group=pages_per_group,
        )
    if total_pages < 0:
        raise InvalidParameter("Page count cannot be negative", total_pages=total_pages)

    return [
        PageGroup(start=start, end=min(start + pages_per_group, total_pages))
        for start in range(0, total_pages, pages_per_group)
    ]


class PageCountSplitter:
    """Produces one output part per fixed-size run of pages."""

    def __init__(self, document_factory: Callable[[], PdfDocument] = PdfDocument.create):
        """
        Initialize PageCountSplitter.

        Args:
            document_factory: Creates the empty document each part is built in
        """
        self.document_factory = document_factory

    def split(
        self,
        source: PdfDocument,
        pages_per_group: int,
        progress: Optional[ProgressSink] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[OutputArtifact]:
        """
        Split the source into parts of pages_per_group pages each.

        Args:
            source: Loaded source document (not modified)
            pages_per_group: Pages per output part
            progress: Optional sink receiving completion percentage
            cancel_event: Optional token checked before each part

        Returns:
            Output artifacts in ascending page order

        Raises:
            InvalidParameter: If pages_per_group is not positive
            SerializationFailure: If copying or saving any part fails
            JobCancelled: If cancel_event is set
        """
        groups = plan_page_groups(source.page_count, pages_per_group)
        tracker = ProgressTracker(progress)
        artifacts: List[OutputArtifact] = []

        logger.info(f"Splitting {source.page_count} pages into {len(groups)} parts of {pages_per_group}")

        for part_number, group in enumerate(groups, start=1):
            raise_if_cancelled(cancel_event, page_start=group.start)

            with self.document_factory() as part:
                part.insert_pages(source, group.indices)
                data = part.serialize()

            artifacts.append(OutputArtifact(part_number=part_number, group=group, data=data))
            logger.debug(f"Part {part_number}: pages {group.display_range}, {len(data)} bytes")
            tracker.report_fraction(part_number, len(groups))

        return artifacts
