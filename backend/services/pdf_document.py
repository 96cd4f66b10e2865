"""PDF document operations used by the splitters, backed by PyMuPDF."""
import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Sequence, Tuple
import fitz  # PyMuPDF

from services.errors import CorruptDocument, SerializationFailure

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"


@dataclass(frozen=True)
class SaveOptions:
    """Keyword arguments forwarded to fitz.Document.tobytes()."""
    garbage: int = 0
    clean: bool = False
    deflate: bool = False
    deflate_images: bool = False
    deflate_fonts: bool = False
    use_objstms: bool = True

    def to_kwargs(self) -> Dict[str, Any]:
        kwargs = asdict(self)
        kwargs["use_objstms"] = int(self.use_objstms)
        return kwargs


# Used for probing and for every regular output part, so that probe sizes
# match what is finally written.
DEFAULT_SAVE_OPTIONS = SaveOptions()


def _contiguous_runs(indices: Sequence[int]) -> List[Tuple[int, int]]:
    """Collapse [3, 4, 5, 9] into [(3, 5), (9, 9)] for insert_pdf."""
    runs: List[Tuple[int, int]] = []
    for index in indices:
        if runs and index == runs[-1][1] + 1:
            runs[-1] = (runs[-1][0], index)
        else:
            runs.append((index, index))
    return runs


class PdfDocument:
    """Thin wrapper over a fitz.Document exposing only what splitting needs."""

    def __init__(self, doc: "fitz.Document"):
        self._doc = doc

    @classmethod
    def load(cls, data: bytes) -> "PdfDocument":
        """
        Open a PDF from bytes.

        Raises:
            CorruptDocument: If the bytes are not a readable PDF
        """
        if not data:
            raise CorruptDocument("Document is empty")
        # MuPDF will try to repair almost anything; refuse input without a PDF header
        if not looks_like_pdf(data):
            raise CorruptDocument("Document has no PDF header")

        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise CorruptDocument(f"Failed to open PDF: {e}") from e

        if not doc.is_pdf:
            doc.close()
            raise CorruptDocument("Document is not a PDF")
        if doc.needs_pass:
            doc.close()
            raise CorruptDocument("Document is password protected")

        return cls(doc)

    @classmethod
    def create(cls) -> "PdfDocument":
        """Create a new, empty document."""
        return cls(fitz.open())

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def insert_pages(self, source: "PdfDocument", indices: Sequence[int]) -> None:
        """
        Append copies of the given source pages, in order.

        Raises:
            SerializationFailure: If PyMuPDF fails to copy a page
        """
        for first, last in _contiguous_runs(indices):
            try:
                self._doc.insert_pdf(source._doc, from_page=first, to_page=last)
            except (RuntimeError, ValueError) as e:
                raise SerializationFailure(
                    f"Failed to copy pages {first + 1}-{last + 1}: {e}",
                    first_page=first,
                    last_page=last,
                ) from e

    def serialize(self, options: SaveOptions = DEFAULT_SAVE_OPTIONS) -> bytes:
        """
        Serialize the document to PDF bytes.

        Raises:
            SerializationFailure: If PyMuPDF fails to save
        """
        try:
            return self._doc.tobytes(**options.to_kwargs())
        except (RuntimeError, ValueError) as e:
            raise SerializationFailure(f"Failed to serialize document: {e}") from e

    def close(self) -> None:
        self._doc.close()

    def __enter__(self) -> "PdfDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def looks_like_pdf(data: bytes) -> bool:
    """Check the PDF header; tolerates leading whitespace/garbage within 1KB."""
    return PDF_MAGIC in data[:1024]
