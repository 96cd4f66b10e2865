"""Document data models."""
from dataclasses import dataclass


@dataclass(frozen=True)
class SourceDocument:
    """Represents an uploaded PDF held in memory for the duration of a split."""
    filename: str
    content: bytes
    total_pages: int

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class PageGroup:
    """A contiguous half-open range of page indices [start, end)."""
    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end <= self.start:
            raise ValueError(f"Invalid page group [{self.start}, {self.end})")

    @property
    def page_count(self) -> int:
        return self.end - self.start

    @property
    def indices(self) -> range:
        return range(self.start, self.end)

    @property
    def display_range(self) -> str:
        """1-based inclusive form, e.g. "1-10" or "7" for a single page."""
        first, last = self.start + 1, self.end
        return str(first) if first == last else f"{first}-{last}"
