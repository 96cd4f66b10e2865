"""
Command-line PDF splitter.

Splits a local PDF by page count or maximum file size and writes the parts
as a ZIP archive next to the input (or to --output).

Usage:
    python split_pdf.py report.pdf --max-size-mb 10
    python split_pdf.py report.pdf --pages 25 --output parts.zip
"""
import argparse
import logging
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from config import SplitterConfig
from models.job import JobStatus, SplitMode, SplitRequest
from services.errors import SplitError
from services.job_store import InMemoryJobStore
from services.split_job_runner import SplitJobRunner, max_size_from_mb

logger = logging.getLogger(__name__)


def build_request(args: argparse.Namespace) -> SplitRequest:
    """Read the input file and turn the CLI arguments into a SplitRequest."""
    input_path = Path(args.input)
    content = input_path.read_bytes()

    if args.pages is not None:
        return SplitRequest(
            filename=input_path.name,
            content=content,
            mode=SplitMode.PAGES,
            pages_per_group=args.pages,
        )
    return SplitRequest(
        filename=input_path.name,
        content=content,
        mode=SplitMode.SIZE,
        max_size_bytes=max_size_from_mb(args.max_size_mb),
    )


def main():
    """Main entry point for the splitter CLI."""
    parser = argparse.ArgumentParser(
        description="Split a PDF into smaller PDFs packaged as a ZIP archive"
    )
    parser.add_argument("input", help="Path to the PDF to split")
    strategy = parser.add_mutually_exclusive_group(required=True)
    strategy.add_argument(
        "--pages",
        type=int,
        help="Number of pages per output file"
    )
    strategy.add_argument(
        "--max-size-mb",
        type=float,
        help="Maximum size of each output file in MB"
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Output ZIP path (default: <input>_split.zip next to the input)"
    )

    args = parser.parse_args()

    input_path = Path(args.input)
    if not input_path.is_file():
        logger.error(f"Input file not found: {input_path}")
        sys.exit(1)

    output_path = Path(args.output) if args.output else input_path.with_name(f"{input_path.stem}_split.zip")

    runner = SplitJobRunner(job_store=InMemoryJobStore(), config=SplitterConfig.from_env(), max_workers=1)
    try:
        request = build_request(args)
        job = runner.create_job(request)
        state = runner.run(job.job_id, request)
    except SplitError as e:
        logger.error(f"Invalid arguments: {e.error.message}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Split interrupted by user")
        sys.exit(1)
    finally:
        runner.shutdown()

    if state.status != JobStatus.DONE:
        logger.error(f"Split failed: {state.error['message']}")
        sys.exit(1)

    output_path.write_bytes(runner.get_archive(state.job_id))

    for part in state.parts:
        note = " (compressed)" if part["compressed"] else ""
        logger.info(f"  Part {part['part_number']}: pages {part['page_range']}, {part['size_display']}{note}")
    logger.info(f"Wrote {len(state.parts)} parts to {output_path}")
    sys.exit(0)


if __name__ == "__main__":
    main()
