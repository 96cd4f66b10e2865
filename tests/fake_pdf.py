"""Test doubles: a deterministic stand-in for PdfDocument, and real PDF builders.

Each page has a fixed logical byte size. A document serializes to
OVERHEAD + sum(page sizes) * factor bytes, where factor shrinks with the
aggressiveness of the save options. The serialized bytes embed the page
sizes so they can be loaded back.
"""
import json
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import fitz  # PyMuPDF

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from services.errors import CorruptDocument, SerializationFailure
from services.pdf_document import DEFAULT_SAVE_OPTIONS, SaveOptions

HEADER = b"%PDF-FAKE"


class FakeDocument:
    OVERHEAD = 200

    # Every serialize() call across all instances, as (page_count, options)
    serialize_log: List[tuple] = []

    def __init__(self, page_sizes: Optional[Sequence[int]] = None, fail_on_options: Optional[SaveOptions] = None):
        self.page_sizes = list(page_sizes or [])
        self.fail_on_options = fail_on_options
        self.closed = False

    @classmethod
    def create(cls) -> "FakeDocument":
        return cls()

    @classmethod
    def load(cls, data: bytes) -> "FakeDocument":
        if not data.startswith(HEADER):
            raise CorruptDocument("Not a fake PDF")
        header = data[len(HEADER):data.index(b"\n")]
        return cls(json.loads(header))

    @property
    def page_count(self) -> int:
        return len(self.page_sizes)

    def insert_pages(self, source: "FakeDocument", indices: Sequence[int]) -> None:
        for index in indices:
            self.page_sizes.append(source.page_sizes[index])
        if source.fail_on_options is not None:
            self.fail_on_options = source.fail_on_options

    @staticmethod
    def factor(options: SaveOptions) -> float:
        if options.garbage >= 4:
            return 0.5
        if options.garbage >= 3:
            return 0.8
        if options.garbage >= 1:
            return 0.95
        return 1.0

    def serialize(self, options: SaveOptions = DEFAULT_SAVE_OPTIONS) -> bytes:
        FakeDocument.serialize_log.append((self.page_count, options))
        if self.fail_on_options is not None and options == self.fail_on_options:
            raise SerializationFailure("Simulated save failure")

        size = int(self.OVERHEAD + sum(self.page_sizes) * self.factor(options))
        header = HEADER + json.dumps(self.page_sizes).encode() + b"\n"
        return header + b"0" * max(size - len(header), 0)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def serialized_size(page_sizes: Sequence[int], options: SaveOptions = DEFAULT_SAVE_OPTIONS) -> int:
    return len(FakeDocument(page_sizes).serialize(options))


def make_pdf(page_count: int, noise_pages=()) -> bytes:
    """Build a real PDF whose pages carry their number; noise_pages get an incompressible image."""
    doc = fitz.open()
    for index in range(page_count):
        page = doc.new_page()
        page.insert_text((72, 72), f"Page {index + 1}", fontsize=24)
        if index in noise_pages:
            pixmap = fitz.Pixmap(fitz.csRGB, 160, 160, os.urandom(160 * 160 * 3), False)
            page.insert_image(fitz.Rect(72, 100, 400, 428), pixmap=pixmap)
    data = doc.tobytes()
    doc.close()
    return data
