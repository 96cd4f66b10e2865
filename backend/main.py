"""Main entry point for the PDF Splitter API."""
import logging
from pathlib import PurePath
from typing import Optional
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from config import (
    CORS_ORIGINS,
    DEFAULT_PAGES_PER_GROUP,
    DEFAULT_SPLIT_SIZE_MB,
    JOB_STORE_BACKEND,
    LOG_LEVEL,
    PORT,
    SPLIT_JOBS_TABLE,
    SPLIT_WORKERS,
    SUPABASE_KEY,
    SUPABASE_URL,
    SplitterConfig,
)
from logger import setup_logging
from models.api import ErrorInfo, JobStatusResponse, PartInfo, SplitJobResponse
from models.job import JobState, JobStatus, SplitMode, SplitRequest
from services.errors import JobNotFound, SplitError
from services.job_store import create_job_store
from services.result_assembler import base_filename
from services.split_job_runner import SplitJobRunner, max_size_from_mb

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="PDF Splitter",
    description="Split large PDFs into smaller files by page count or maximum file size",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Initialized on startup
job_runner: SplitJobRunner = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global job_runner

    setup_logging(LOG_LEVEL)
    logger.info("Initializing PDF Splitter services...")

    try:
        job_store = create_job_store(JOB_STORE_BACKEND, SUPABASE_URL, SUPABASE_KEY, SPLIT_JOBS_TABLE)
        job_runner = SplitJobRunner(
            job_store=job_store,
            config=SplitterConfig.from_env(),
            max_workers=SPLIT_WORKERS,
        )
        logger.info(f"Initialized SplitJobRunner with {JOB_STORE_BACKEND} job store")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Stop accepting background work."""
    if job_runner is not None:
        job_runner.shutdown(wait=False)


def _error_detail(error: SplitError) -> dict:
    return {
        "error": {
            "code": error.error.code,
            "message": error.error.message,
            "details": error.error.details,
        }
    }


def _status_response(state: JobState) -> JobStatusResponse:
    download_url = f"/split/{state.job_id}/download" if state.status == JobStatus.DONE else None
    return JobStatusResponse(
        job_id=state.job_id,
        filename=state.filename,
        mode=state.mode.value,
        status=state.status.value,
        progress=round(state.progress, 2),
        total_pages=state.total_pages,
        parts=[PartInfo(**part) for part in state.parts],
        error=ErrorInfo(**state.error) if state.error else None,
        download_url=download_url,
    )


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "PDF Splitter API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "pdf-splitter",
        "version": "1.0.0"
    }


@app.post("/split", response_model=SplitJobResponse, status_code=202)
async def split_endpoint(
    file: UploadFile = File(...),
    mode: str = Form(SplitMode.SIZE.value),
    pages_per_group: Optional[int] = Form(None),
    max_size_mb: Optional[float] = Form(None),
) -> SplitJobResponse:
    """
    Accept a PDF upload and start splitting it in the background.

    Args:
        file: The PDF to split
        mode: "pages" to split every N pages, "size" to split by maximum file size
        pages_per_group: Pages per output file (pages mode)
        max_size_mb: Maximum output file size in MB (size mode)

    Returns:
        SplitJobResponse with the job id to poll

    Raises:
        HTTPException: 400 for invalid uploads or parameters
    """
    try:
        split_mode = SplitMode(mode)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail={"error": {"code": "INVALID_PARAMETER", "message": f"Unknown split mode: {mode}", "details": {}}}
        )

    content = await file.read()
    filename = base_filename(file.filename or "document.pdf")

    try:
        if split_mode == SplitMode.PAGES:
            request = SplitRequest(
                filename=filename,
                content=content,
                mode=split_mode,
                pages_per_group=pages_per_group if pages_per_group is not None else DEFAULT_PAGES_PER_GROUP,
                content_type=file.content_type,
            )
        else:
            size_mb = max_size_mb if max_size_mb is not None else DEFAULT_SPLIT_SIZE_MB
            request = SplitRequest(
                filename=filename,
                content=content,
                mode=split_mode,
                max_size_bytes=max_size_from_mb(size_mb),
                content_type=file.content_type,
            )

        # Reject bad input before a job is created
        job_runner.validate(request)
    except SplitError as e:
        logger.warning(f"Rejected upload {filename}: {e.error.message}")
        raise HTTPException(status_code=400, detail=_error_detail(e))

    state = job_runner.submit(request)
    logger.info(f"Accepted {filename} ({len(content)} bytes) as job {state.job_id}")
    return SplitJobResponse(job_id=state.job_id, status=state.status.value)


@app.get("/split/{job_id}", response_model=JobStatusResponse)
async def split_status_endpoint(job_id: str) -> JobStatusResponse:
    """Report a job's status, progress and produced parts."""
    try:
        state = job_runner.get_state(job_id)
    except JobNotFound as e:
        raise HTTPException(status_code=404, detail=_error_detail(e))
    return _status_response(state)


@app.get("/split/{job_id}/download")
async def split_download_endpoint(job_id: str):
    """Return the finished ZIP archive."""
    try:
        state = job_runner.get_state(job_id)
    except JobNotFound as e:
        raise HTTPException(status_code=404, detail=_error_detail(e))

    if state.status != JobStatus.DONE:
        raise HTTPException(
            status_code=409,
            detail={"error": {"code": "JOB_NOT_FINISHED", "message": f"Job is {state.status.value}", "details": {}}}
        )

    archive = job_runner.get_archive(job_id)
    if archive is None:
        raise HTTPException(
            status_code=404,
            detail={"error": {"code": "ARCHIVE_NOT_FOUND", "message": "Archive is no longer available", "details": {}}}
        )

    archive_name = f"{PurePath(state.filename).stem}_split.zip"
    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{archive_name}"'}
    )


@app.post("/split/{job_id}/cancel")
async def split_cancel_endpoint(job_id: str):
    """Ask a running job to stop."""
    try:
        state = job_runner.get_state(job_id)
    except JobNotFound as e:
        raise HTTPException(status_code=404, detail=_error_detail(e))

    cancelled = False if state.status.is_terminal else job_runner.cancel(job_id)
    return {"job_id": job_id, "cancelled": cancelled}


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting PDF Splitter API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
