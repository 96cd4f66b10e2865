"""
Split job orchestration.

Each job moves through idle -> validating -> splitting -> assembling -> done,
or ends in failed from any non-terminal state. Jobs are executed on a thread
pool; their state is persisted through a JobStore so clients can poll it.
Finished archives are kept in process memory and evicted once they are older
than the configured retention period.
"""
import logging
import math
import threading
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Tuple

from config import SplitterConfig
from formatting import format_file_size, mb_to_bytes
from models.document import SourceDocument
from models.job import JobState, JobStatus, SplitMode, SplitRequest
from services.errors import InvalidParameter, JobNotFound, SplitError
from services.job_store import JobStore
from services.page_count_splitter import PageCountSplitter
from services.pdf_document import PdfDocument, looks_like_pdf
from services.result_assembler import ResultAssembler
from services.size_bounded_splitter import SizeBoundedSplitter

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}


def max_size_from_mb(size_mb: Optional[float]) -> int:
    """
    Convert a user-supplied size in MB to a byte budget.

    Raises:
        InvalidParameter: If the size is missing, not finite or not positive
    """
    if size_mb is None or not math.isfinite(size_mb) or size_mb <= 0:
        raise InvalidParameter(
            "Maximum part size must be a positive number of MB",
            max_size_mb=str(size_mb),
        )
    return mb_to_bytes(size_mb)


class SplitJobRunner:
    """Validates, splits and packages uploaded PDFs, one job per upload."""

    def __init__(
        self,
        job_store: JobStore,
        config: Optional[SplitterConfig] = None,
        max_workers: int = 2,
        page_count_splitter: Optional[PageCountSplitter] = None,
        size_bounded_splitter: Optional[SizeBoundedSplitter] = None,
        assembler: Optional[ResultAssembler] = None,
        document_loader: Callable[[bytes], PdfDocument] = PdfDocument.load,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize SplitJobRunner.

        Args:
            job_store: Where job states are persisted
            config: Splitting parameters shared by both strategies
            max_workers: Concurrent jobs on the background executor
            page_count_splitter: Strategy for fixed page counts
            size_bounded_splitter: Strategy for byte budgets
            assembler: Packages finished parts into a ZIP
            document_loader: Opens uploaded bytes as a document
            clock: Time source for archive retention, in seconds
        """
        self.job_store = job_store
        self.config = config or SplitterConfig()
        self.page_count_splitter = page_count_splitter or PageCountSplitter()
        self.size_bounded_splitter = size_bounded_splitter or SizeBoundedSplitter(self.config)
        self.assembler = assembler or ResultAssembler()
        self.document_loader = document_loader
        self.clock = clock

        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="split-job")
        self._archives: Dict[str, Tuple[bytes, float]] = {}
        self._cancel_events: Dict[str, threading.Event] = {}
        self._lock = threading.Lock()
        logger.info(f"SplitJobRunner initialized with {max_workers} workers")

    def create_job(self, request: SplitRequest) -> JobState:
        """Register a new job in the idle state."""
        state = JobState(
            job_id=self._generate_job_id(),
            filename=request.filename,
            mode=request.mode,
        )
        with self._lock:
            self._cancel_events[state.job_id] = threading.Event()
        self.job_store.put(state.job_id, state)
        logger.info(f"Created job {state.job_id} for {request.filename} ({request.mode.value})")
        return state

    def submit(self, request: SplitRequest) -> JobState:
        """
        Create a job and hand it to the background executor.

        Returns:
            The job's initial state; poll get_state() for progress
        """
        self.evict_expired_archives()
        state = self.create_job(request)
        future = self._executor.submit(self.run, state.job_id, request)
        future.add_done_callback(lambda f, job_id=state.job_id: self._log_unexpected(job_id, f))
        return state

    def run(self, job_id: str, request: SplitRequest) -> JobState:
        """
        Execute a job to completion on the calling thread.

        Failures are recorded on the job state rather than raised.

        Returns:
            The terminal job state
        """
        state = self.get_state(job_id)
        if state.status.is_terminal:
            logger.warning(f"Job {job_id} already {state.status.value}; resubmit to retry")
            return state

        source: Optional[PdfDocument] = None
        try:
            self._transition(state, JobStatus.VALIDATING)
            self.validate(request)
            source = self.document_loader(request.content)
            document = SourceDocument(filename=request.filename, content=request.content, total_pages=source.page_count)
            state.total_pages = document.total_pages
            logger.info(
                f"Job {job_id}: loaded {document.filename}, {document.total_pages} pages, "
                f"{format_file_size(document.size_bytes)}"
            )

            self._transition(state, JobStatus.SPLITTING)
            artifacts = self._split(job_id, state, request, source)

            self._transition(state, JobStatus.ASSEMBLING)
            archive = self.assembler.assemble(artifacts, request.filename)
            with self._lock:
                self._archives[job_id] = (archive, self.clock())

            state.parts = [artifact.to_report() for artifact in artifacts]
            state.progress = 100.0
            self._transition(state, JobStatus.DONE)
        except SplitError as e:
            logger.error(f"Job {job_id} failed: {e.error.message}", exc_info=e.__cause__ is not None)
            self._fail(state, e.error.code, e.error.message)
        except Exception as e:
            logger.error(f"Unexpected error in job {job_id}: {e}", exc_info=True)
            self._fail(state, "INTERNAL_ERROR", f"Internal error: {str(e)}")
        finally:
            if source is not None:
                source.close()
            with self._lock:
                self._cancel_events.pop(job_id, None)

        return state

    def validate(self, request: SplitRequest) -> None:
        """
        Check the upload and parameters before any work is done.

        Raises:
            InvalidParameter: If the file is not PDF-like, too large, or the
                split parameter is not positive
        """
        name_ok = request.filename.lower().endswith(".pdf")
        type_ok = (request.content_type or "").split(";")[0].strip().lower() in PDF_CONTENT_TYPES
        if not (name_ok or type_ok):
            raise InvalidParameter("Only PDF files are supported", filename=request.filename)
        if not looks_like_pdf(request.content):
            raise InvalidParameter("File does not look like a PDF", filename=request.filename)
        if len(request.content) > self.config.max_upload_bytes:
            raise InvalidParameter(
                "File exceeds the maximum upload size",
                size_bytes=len(request.content),
                max_upload_bytes=self.config.max_upload_bytes,
            )

        if request.mode == SplitMode.PAGES:
            if request.pages_per_group is None or request.pages_per_group <= 0:
                raise InvalidParameter(
                    "Pages per file must be a positive integer",
                    pages_per_group=request.pages_per_group,
                )
        elif request.max_size_bytes is None or request.max_size_bytes <= 0:
            raise InvalidParameter(
                "Maximum part size must be positive",
                max_size_bytes=request.max_size_bytes,
            )

    def get_state(self, job_id: str) -> JobState:
        """
        Raises:
            JobNotFound: If no job with this id exists
        """
        state = self.job_store.get(job_id)
        if state is None:
            raise JobNotFound(f"Job {job_id} not found", job_id=job_id)
        return state

    def get_archive(self, job_id: str) -> Optional[bytes]:
        """Return the finished archive, or None if it was never built or has expired."""
        self.evict_expired_archives()
        with self._lock:
            entry = self._archives.get(job_id)
        return entry[0] if entry is not None else None

    def evict_expired_archives(self) -> int:
        """
        Drop archives older than the retention period.

        Returns:
            Number of archives evicted
        """
        cutoff = self.clock() - self.config.archive_retention_seconds
        with self._lock:
            expired = [job_id for job_id, (_, stored_at) in self._archives.items() if stored_at <= cutoff]
            for job_id in expired:
                del self._archives[job_id]
        for job_id in expired:
            logger.info(f"Evicted archive for job {job_id} after retention period")
        return len(expired)

    def discard_archive(self, job_id: str) -> None:
        with self._lock:
            self._archives.pop(job_id, None)

    def cancel(self, job_id: str) -> bool:
        """Ask a running job to stop at its next page iteration."""
        with self._lock:
            event = self._cancel_events.get(job_id)
        if event is None:
            return False
        event.set()
        logger.info(f"Cancellation requested for job {job_id}")
        return True

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _split(self, job_id: str, state: JobState, request: SplitRequest, source: PdfDocument):
        with self._lock:
            cancel_event = self._cancel_events.get(job_id)

        def on_progress(percent: float) -> None:
            # Only persist whole-percent changes to keep store writes bounded
            if int(percent) != int(state.progress):
                state.progress = percent
                self._save(state)
            else:
                state.progress = percent

        if request.mode == SplitMode.PAGES:
            return self.page_count_splitter.split(
                source, request.pages_per_group, progress=on_progress, cancel_event=cancel_event
            )
        return self.size_bounded_splitter.split(
            source, request.max_size_bytes, progress=on_progress, cancel_event=cancel_event
        )

    def _transition(self, state: JobState, status: JobStatus) -> None:
        logger.info(f"Job {state.job_id}: {state.status.value} -> {status.value}")
        state.status = status
        self._save(state)

    def _fail(self, state: JobState, code: str, message: str) -> None:
        state.error = {"code": code, "message": message}
        self._transition(state, JobStatus.FAILED)

    def _save(self, state: JobState) -> None:
        state.updated_at = datetime.now(timezone.utc)
        self.job_store.put(state.job_id, state)

    def _log_unexpected(self, job_id: str, future: Future) -> None:
        # run() records its own failures; this only catches store errors etc.
        error = future.exception()
        if error is not None:
            logger.error(f"Background job {job_id} crashed: {error}", exc_info=error)

    def _generate_job_id(self) -> str:
        return f"job_{uuid.uuid4().hex[:12]}"
