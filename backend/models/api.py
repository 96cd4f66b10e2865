"""API request and response schemas."""
from typing import List, Optional
from pydantic import BaseModel


class PartInfo(BaseModel):
    """One produced part as reported to clients."""
    part_number: int
    page_range: str
    byte_size: int
    size_display: str
    size_limit: Optional[int] = None
    size_limit_display: Optional[str] = None
    compressed: bool = False


class ErrorInfo(BaseModel):
    code: str
    message: str


class SplitJobResponse(BaseModel):
    """Returned when a split job is accepted."""
    job_id: str
    status: str


class JobStatusResponse(BaseModel):
    """Polling view of a split job."""
    job_id: str
    filename: str
    mode: str
    status: str
    progress: float
    total_pages: Optional[int] = None
    parts: List[PartInfo] = []
    error: Optional[ErrorInfo] = None
    download_url: Optional[str] = None
