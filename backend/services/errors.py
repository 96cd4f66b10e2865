"""Error taxonomy for split jobs."""
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class SplitErrorDetail:
    """Structured error information carried by every SplitError."""
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class SplitError(Exception):
    """Base exception for split failures with structured error information."""

    code = "SPLIT_ERROR"

    def __init__(self, message: str, **details: Any):
        self.error = SplitErrorDetail(code=self.code, message=message, details=details)
        super().__init__(message)


class InvalidParameter(SplitError):
    """Non-positive split size or page count, or an unacceptable upload."""
    code = "INVALID_PARAMETER"


class CorruptDocument(SplitError):
    """The source failed to load or parse as a PDF."""
    code = "CORRUPT_DOCUMENT"


class SerializationFailure(SplitError):
    """A page copy or document save step failed."""
    code = "SERIALIZATION_FAILURE"


class PartialCompressionFailure(SplitError):
    """A compression attempt failed; recovered by keeping the uncompressed page."""
    code = "PARTIAL_COMPRESSION_FAILURE"


class JobCancelled(SplitError):
    """The caller's cancellation token was set between page iterations."""
    code = "JOB_CANCELLED"


class JobNotFound(SplitError):
    """No job state exists for the requested id."""
    code = "JOB_NOT_FOUND"
