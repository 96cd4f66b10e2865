"""Packages split parts into a downloadable ZIP archive."""
import io
import json
import logging
import ntpath
import zipfile
from typing import Any, Dict, List, Sequence

from models.artifact import OutputArtifact

logger = logging.getLogger(__name__)


def base_filename(filename: str) -> str:
    """Strip any client-side directory components (POSIX or Windows)."""
    name = ntpath.basename(filename.replace("/", "\\")).strip()
    return name or "document.pdf"


class ResultAssembler:
    """Writes each artifact as part_<N>_<name> plus a manifest.json report."""

    MANIFEST_NAME = "manifest.json"

    def __init__(self, include_manifest: bool = True):
        self.include_manifest = include_manifest

    def build_manifest(self, artifacts: Sequence[OutputArtifact], original_filename: str) -> Dict[str, Any]:
        """Describe the parts in order: entry name, page range, size, limit, compression."""
        name = base_filename(original_filename)
        parts: List[Dict[str, Any]] = []
        for artifact in artifacts:
            report = artifact.to_report()
            report["entry_name"] = artifact.entry_name(name)
            parts.append(report)

        return {
            "source": name,
            "part_count": len(parts),
            "parts": parts,
        }

    def assemble(self, artifacts: Sequence[OutputArtifact], original_filename: str) -> bytes:
        """
        Build the ZIP archive in memory.

        Args:
            artifacts: Parts in part-number order
            original_filename: Uploaded file name used in entry names

        Returns:
            ZIP archive bytes
        """
        name = base_filename(original_filename)
        buffer = io.BytesIO()

        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            for artifact in artifacts:
                archive.writestr(artifact.entry_name(name), artifact.data)
            if self.include_manifest:
                manifest = self.build_manifest(artifacts, name)
                archive.writestr(self.MANIFEST_NAME, json.dumps(manifest, indent=2))

        data = buffer.getvalue()
        logger.info(f"Assembled {len(artifacts)} parts of {name} into {len(data)} byte archive")
        return data
