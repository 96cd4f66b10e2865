"""Configuration management for the PDF Splitter service."""
import os
import logging
from dataclasses import dataclass
from typing import Tuple
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:3001"
).split(",")

# Splitting Configuration
SAFETY_MARGIN = float(os.getenv("SAFETY_MARGIN", "0.95"))
COMPRESSION_CHECKPOINTS = tuple(
    float(value) for value in os.getenv("COMPRESSION_CHECKPOINTS", "25,50,75").split(",")
)
DEFAULT_SPLIT_SIZE_MB = float(os.getenv("DEFAULT_SPLIT_SIZE_MB", "10"))
DEFAULT_PAGES_PER_GROUP = int(os.getenv("DEFAULT_PAGES_PER_GROUP", "10"))
MAX_UPLOAD_MB = float(os.getenv("MAX_UPLOAD_MB", "200"))
ARCHIVE_RETENTION_SECONDS = float(os.getenv("ARCHIVE_RETENTION_SECONDS", "3600"))

# Job Execution
SPLIT_WORKERS = int(os.getenv("SPLIT_WORKERS", "2"))

# Job Storage
JOB_STORE_BACKEND = os.getenv("JOB_STORE_BACKEND", "memory")
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
SPLIT_JOBS_TABLE = os.getenv("SPLIT_JOBS_TABLE", "split_jobs")

MB = 1024 * 1024

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@dataclass(frozen=True)
class SplitterConfig:
    """
    Tunable parameters handed to the splitters and the job runner.

    Attributes:
        safety_margin: Fraction of the requested byte budget a group may use
        compression_checkpoints: Progress values (0-100) reported after each
            failed compression attempt
        max_upload_bytes: Largest accepted source document
        archive_retention_seconds: How long a finished archive stays downloadable
    """
    safety_margin: float = 0.95
    compression_checkpoints: Tuple[float, ...] = (25.0, 50.0, 75.0)
    max_upload_bytes: int = int(200 * MB)
    archive_retention_seconds: float = 3600.0

    def __post_init__(self):
        if not 0 < self.safety_margin <= 1:
            raise ValueError(f"safety_margin must be in (0, 1], got {self.safety_margin}")
        if self.archive_retention_seconds <= 0:
            raise ValueError(f"archive_retention_seconds must be positive, got {self.archive_retention_seconds}")

    @classmethod
    def from_env(cls) -> "SplitterConfig":
        """Snapshot the environment-driven settings."""
        return cls(
            safety_margin=SAFETY_MARGIN,
            compression_checkpoints=COMPRESSION_CHECKPOINTS,
            max_upload_bytes=int(MAX_UPLOAD_MB * MB),
            archive_retention_seconds=ARCHIVE_RETENTION_SECONDS,
        )
