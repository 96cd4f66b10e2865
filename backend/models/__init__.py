"""Data models for the PDF Splitter service."""
from .document import SourceDocument, PageGroup
from .artifact import OutputArtifact
from .job import JobState, JobStatus, SplitMode, SplitRequest
from .api import PartInfo, ErrorInfo, SplitJobResponse, JobStatusResponse

__all__ = [
    "SourceDocument",
    "PageGroup",
    "OutputArtifact",
    "JobState",
    "JobStatus",
    "SplitMode",
    "SplitRequest",
    "PartInfo",
    "ErrorInfo",
    "SplitJobResponse",
    "JobStatusResponse",
]
