"""
Workspace scanner for AL source files.

Finds the AL files of a project, extracts their objects in batches so every
implemented interface is in the object cache, and then runs the
documentation check on each object.
"""

import concurrent.futures
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from typing import List, Optional, Set

from .analyzer import DocumentationAnalyzer
from .config import Config
from .constants import AL_FILE_PATTERN, PROCEDURE_DECLARATION_PATTERN
from .documents import BufferDocument
from .extractor import SourceExtractor
from .models import SourceObject
from ..utils.logger_setup import get_logger

logger = get_logger(__name__)


@dataclass
class ScanResult:
    """Result of scanning operation."""
    files_scanned: int = 0
    objects_found: int = 0
    diagnostics_found: int = 0
    errors: List[str] = field(default_factory=list)


class Scanner:
    """Scans project files and checks their documentation."""

    def __init__(self, config: Config, analyzer: DocumentationAnalyzer):
        """
        Initialize Scanner.

        Args:
            config: Configuration object
            analyzer: Analyzer receiving every extracted object
        """
        self.config = config
        self.analyzer = analyzer

    @property
    def extractor(self) -> SourceExtractor:
        return self.analyzer.extractor

    def scan(self, paths: Optional[List[str]] = None) -> ScanResult:
        """
        Scan files and check their documentation.

        All files are extracted before the first check runs, so interface
        lookups see every object of the scanned paths.

        Args:
            paths: Optional list of paths to scan. If None, uses config paths.

        Returns:
            ScanResult with statistics
        """
        if paths is None:
            paths = self.config.scanning.paths

        result = ScanResult()
        files_to_scan = self._collect_files(paths)
        logger.info(f"Scanning {len(files_to_scan)} AL file(s)")

        documents = []
        for file_path in files_to_scan:
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    content = f.read()
            except Exception as e:
                error_msg = f"Error reading {file_path}: {str(e)}"
                logger.error(error_msg)
                result.errors.append(error_msg)
                continue

            result.files_scanned += 1
            if PROCEDURE_DECLARATION_PATTERN.search(content):
                documents.append(BufferDocument(content, file_path))

        extracted = self._extract_in_batches(documents, result)
        result.objects_found = len(extracted)

        for document, source_object in extracted:
            try:
                diagnostics = self.analyzer.analyze(source_object, document, document.uri)
                result.diagnostics_found += len(diagnostics or [])
            except Exception as e:
                error_msg = f"Error checking {document.path}: {str(e)}"
                logger.error(error_msg)
                result.errors.append(error_msg)

        return result

    def _extract_in_batches(self, documents: List[BufferDocument], result: ScanResult) -> List[tuple]:
        """Extract objects, waiting for each batch before starting the next one."""
        extracted = []
        batch_size = self.config.scanning.batch_size

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.config.scanning.max_workers) as executor:
            for start in range(0, len(documents), batch_size):
                batch = documents[start:start + batch_size]
                future_to_document = {
                    executor.submit(self.extractor.extract_object, document): document
                    for document in batch
                }

                # Keep file order stable within the batch
                for future, document in future_to_document.items():
                    try:
                        source_object: Optional[SourceObject] = future.result()
                    except Exception as e:
                        error_msg = f"Error extracting {document.path}: {str(e)}"
                        logger.error(error_msg)
                        result.errors.append(error_msg)
                        continue

                    if source_object is not None:
                        extracted.append((document, source_object))

                logger.debug(f"Extracted batch of {len(batch)} file(s)")

        return extracted

    def _collect_files(self, paths: List[str]) -> List[Path]:
        """
        Collect all files to scan based on configuration.

        Args:
            paths: List of paths to scan (files or directories)

        Returns:
            List of file paths to scan
        """
        files = []
        exclude_patterns = set(self.config.scanning.exclude)

        for path_str in paths:
            path = Path(path_str)

            if not path.exists():
                logger.warning(f"Path not found: {path}")
                continue

            if path.is_file():
                if self._should_include_file(path, exclude_patterns):
                    files.append(path)
            elif path.is_dir():
                files.extend(self._scan_directory(path, exclude_patterns))

        return sorted(set(files))

    def _scan_directory(self, directory: Path, exclude_patterns: Set[str]) -> List[Path]:
        files = []
        for file_path in directory.rglob(AL_FILE_PATTERN):
            if file_path.is_file() and self._should_include_file(file_path, exclude_patterns):
                files.append(file_path)
        return files

    def _should_include_file(self, file_path: Path, exclude_patterns: Set[str]) -> bool:
        """Check the extension and that no path part matches an exclude pattern."""
        if not fnmatch(file_path.name.lower(), AL_FILE_PATTERN):
            return False

        for part in file_path.parts:
            if any(fnmatch(part, pattern) for pattern in exclude_patterns):
                return False
        return True
