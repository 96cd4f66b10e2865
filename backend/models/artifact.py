"""Output artifact data models."""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from formatting import format_file_size
from models.document import PageGroup


@dataclass(frozen=True)
class OutputArtifact:
    """One serialized output file plus the metadata reported alongside it."""
    part_number: int  # 1-based, sequential
    group: PageGroup
    data: bytes
    compressed: bool = False
    size_limit: Optional[int] = None  # bytes; set only for size-bounded splits

    @property
    def byte_size(self) -> int:
        return len(self.data)

    @property
    def page_range_display(self) -> str:
        return self.group.display_range

    def entry_name(self, original_filename: str) -> str:
        """Archive entry name following the part_<N>_<name> convention."""
        return f"part_{self.part_number}_{original_filename}"

    def to_report(self) -> Dict[str, Any]:
        return {
            "part_number": self.part_number,
            "page_range": self.page_range_display,
            "byte_size": self.byte_size,
            "size_display": format_file_size(self.byte_size),
            "size_limit": self.size_limit,
            "size_limit_display": format_file_size(self.size_limit) if self.size_limit else None,
            "compressed": self.compressed,
        }
