"""Services for the PDF Splitter."""
from .pdf_document import PdfDocument, SaveOptions
from .page_count_splitter import PageCountSplitter, plan_page_groups
from .page_compressor import PageCompressor, CompressionResult, CompressionTier
from .size_bounded_splitter import SizeBoundedSplitter
from .result_assembler import ResultAssembler
from .job_store import JobStore, InMemoryJobStore, SupabaseJobStore, create_job_store
from .split_job_runner import SplitJobRunner
from .errors import (
    SplitError,
    InvalidParameter,
    CorruptDocument,
    SerializationFailure,
    PartialCompressionFailure,
    JobCancelled,
    JobNotFound,
)

__all__ = ['PdfDocument', 'SaveOptions', 'PageCountSplitter', 'plan_page_groups', 'PageCompressor', 'CompressionResult', 'CompressionTier', 'SizeBoundedSplitter', 'ResultAssembler', 'JobStore', 'InMemoryJobStore', 'SupabaseJobStore', 'create_job_store', 'SplitJobRunner', 'SplitError', 'InvalidParameter', 'CorruptDocument', 'SerializationFailure', 'PartialCompressionFailure', 'JobCancelled', 'JobNotFound']
