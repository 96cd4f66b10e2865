"""Split job data models."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class JobStatus(str, Enum):
    """Lifecycle of a split job. DONE and FAILED are terminal."""
    IDLE = "idle"
    VALIDATING = "validating"
    SPLITTING = "splitting"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.DONE, JobStatus.FAILED)


class SplitMode(str, Enum):
    """Which splitting strategy a job runs."""
    PAGES = "pages"
    SIZE = "size"


@dataclass(frozen=True)
class SplitRequest:
    """Everything needed to run one split job."""
    filename: str
    content: bytes
    mode: SplitMode
    pages_per_group: Optional[int] = None
    max_size_bytes: Optional[int] = None
    content_type: Optional[str] = None


@dataclass
class JobState:
    """Persisted view of a split job, polled by clients."""
    job_id: str
    filename: str
    mode: SplitMode
    status: JobStatus = JobStatus.IDLE
    progress: float = 0.0
    total_pages: Optional[int] = None
    parts: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[Dict[str, Any]] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id,
            "filename": self.filename,
            "mode": self.mode.value,
            "status": self.status.value,
            "progress": self.progress,
            "total_pages": self.total_pages,
            "parts": self.parts,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JobState":
        return cls(
            job_id=data["job_id"],
            filename=data["filename"],
            mode=SplitMode(data["mode"]),
            status=JobStatus(data["status"]),
            progress=float(data.get("progress") or 0.0),
            total_pages=data.get("total_pages"),
            parts=list(data.get("parts") or []),
            error=data.get("error"),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
