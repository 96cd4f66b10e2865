"""Persistence for split job state: get(job_id) / put(job_id, state)."""
import logging
import threading
from typing import Dict, Optional
from supabase import create_client, Client

from models.job import JobState

logger = logging.getLogger(__name__)


class JobStore:
    """Key-value interface the job runner persists state through."""

    def get(self, job_id: str) -> Optional[JobState]:
        raise NotImplementedError

    def put(self, job_id: str, state: JobState) -> None:
        raise NotImplementedError


class InMemoryJobStore(JobStore):
    """Process-local store; safe to share between worker threads."""

    def __init__(self):
        self._states: Dict[str, dict] = {}
        self._lock = threading.Lock()

    def get(self, job_id: str) -> Optional[JobState]:
        with self._lock:
            data = self._states.get(job_id)
        # Stored as dicts so callers never share a mutable JobState
        return JobState.from_dict(data) if data is not None else None

    def put(self, job_id: str, state: JobState) -> None:
        with self._lock:
            self._states[job_id] = state.to_dict()


class SupabaseJobStore(JobStore):
    """Stores job state as rows of a Supabase table keyed by job_id."""

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        table_name: str = "split_jobs",
    ):
        """
        Initialize the Supabase-backed store.

        Args:
            supabase_url: Supabase project URL
            supabase_key: Supabase API key
            table_name: Table holding one row per job (job_id primary key, state jsonb)
        """
        if not supabase_url or not supabase_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in environment variables")

        self.client: Client = create_client(supabase_url, supabase_key)
        self.table_name = table_name
        logger.info(f"SupabaseJobStore initialized with table {table_name}")

    def get(self, job_id: str) -> Optional[JobState]:
        try:
            result = self.client.table(self.table_name).select("state").eq("job_id", job_id).execute()
        except Exception as e:
            logger.error(f"Error retrieving job {job_id}: {e}")
            raise

        if not result.data:
            return None
        return JobState.from_dict(result.data[0]["state"])

    def put(self, job_id: str, state: JobState) -> None:
        try:
            self.client.table(self.table_name).upsert({
                "job_id": job_id,
                "status": state.status.value,
                "state": state.to_dict(),
            }).execute()
        except Exception as e:
            logger.error(f"Error storing job {job_id}: {e}")
            raise


def create_job_store(backend: str, supabase_url: Optional[str] = None,
                     supabase_key: Optional[str] = None, table_name: str = "split_jobs") -> JobStore:
    """Build the store named by JOB_STORE_BACKEND ("memory" or "supabase")."""
    if backend == "supabase":
        return SupabaseJobStore(supabase_url, supabase_key, table_name)
    if backend == "memory":
        return InMemoryJobStore()
    raise ValueError(f"Unknown job store backend: {backend}")
