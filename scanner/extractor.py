"""
High-level orchestrator for Go declaration extraction.

This module provides the main entry points for extracting scanned models from
single files or entire directory trees.
"""

import logging
import os
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from scanner.config import (
    DEFAULT_INCLUDE_TEST_FILES,
    DEFAULT_PER_PACKAGE_INDEX,
    EXCLUDED_DIRS,
    GO_EXTENSIONS,
)
from scanner.diagnostics import ScanDiagnostics
from scanner.models import ScanResult
from scanner.nodes import SourceUnit, build_source_unit
from scanner.parser import count_error_nodes, parse_file
from scanner.lookup import DeclarationIndex, ScanContext
from scanner.traversal import extract_unit

logger = logging.getLogger(__name__)


@dataclass
class FileScan:
    """Scanned model and parse diagnostics of one Go file."""

    file_path: str
    package: Optional[str]
    result: ScanResult
    parse_error_count: int = 0
    diagnostics: Optional[ScanDiagnostics] = None

    @property
    def package_segments(self) -> List[str]:
        """Directory components of the file path, used to mirror output folders."""
        return package_segments(self.file_path)

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "file_path": self.file_path,
            "package": self.package,
            **self.result.to_dict(),
        }
        if self.diagnostics is not None:
            payload["omissions"] = [o.to_dict() for o in self.diagnostics.omissions]
        return payload


class ExtractionStats:
    """Statistics for an extraction operation."""

    def __init__(self):
        self.files_processed = 0
        self.files_failed = 0
        self.structs_extracted = 0
        self.types_extracted = 0
        self.parse_errors = 0
        self.omissions = 0

    def add(self, scan: FileScan) -> None:
        self.files_processed += 1
        self.structs_extracted += len(scan.result.structs)
        self.types_extracted += len(scan.result.types)
        self.parse_errors += scan.parse_error_count
        if scan.diagnostics is not None:
            self.omissions += len(scan.diagnostics)

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "files_processed": self.files_processed,
            "files_failed": self.files_failed,
            "structs_extracted": self.structs_extracted,
            "types_extracted": self.types_extracted,
            "parse_errors": self.parse_errors,
            "omissions": self.omissions,
        }

    def __str__(self) -> str:
        return (
            f"ExtractionStats(processed={self.files_processed}, "
            f"failed={self.files_failed}, structs={self.structs_extracted}, "
            f"types={self.types_extracted}, parse_errors={self.parse_errors})"
        )


def package_segments(relative_path: str) -> List[str]:
    """Split the directory part of a relative file path into components."""
    directory = os.path.dirname(os.path.normpath(relative_path))
    if not directory or directory == os.curdir:
        return []
    return [part for part in directory.split(os.sep) if part and part != os.curdir]


def _relative_path(file_path: str, repo_root: Optional[str]) -> str:
    root = os.path.dirname(file_path) if repo_root is None else os.path.abspath(repo_root)
    try:
        return os.path.relpath(file_path, root)
    except ValueError:
        logger.warning(
            "Cannot compute relative path for %s from %s. Using absolute path.",
            file_path,
            root,
        )
        return file_path


def _load_unit(file_path: str, repo_root: Optional[str]) -> Tuple[SourceUnit, int]:
    file_path = os.path.abspath(file_path)

    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    ext = os.path.splitext(file_path)[1]
    if ext not in GO_EXTENSIONS:
        raise ValueError(
            f"File {file_path} is not a Go source file. "
            f"Expected one of: {GO_EXTENSIONS}"
        )

    relative_path = _relative_path(file_path, repo_root)
    tree, source_bytes = parse_file(file_path)
    parse_error_count = count_error_nodes(tree)
    if tree.root_node.has_error:
        logger.warning(
            "File %s contains syntax errors (%d error nodes)",
            relative_path,
            parse_error_count,
        )
    return build_source_unit(tree, source_bytes, path=relative_path), parse_error_count


def _scan_loaded_units(
    loaded: List[Tuple[SourceUnit, int]],
    record_omissions: bool,
) -> List[FileScan]:
    """Extract units resolving identifiers against one shared index."""
    index = DeclarationIndex.from_units(unit for unit, _ in loaded)
    scans = []
    for unit, error_count in loaded:
        diagnostics = ScanDiagnostics(source=unit.path) if record_omissions else None
        context = ScanContext(index=index, diagnostics=diagnostics)
        result = extract_unit(unit, context)
        logger.info(
            "Extracted %d structs and %d values from %s",
            len(result.structs),
            len(result.types),
            unit.path,
        )
        scans.append(
            FileScan(
                file_path=unit.path,
                package=unit.package,
                result=result,
                parse_error_count=error_count,
                diagnostics=diagnostics,
            )
        )
    return scans


def scan_file(
    file_path: str,
    repo_root: Optional[str] = None,
    record_omissions: bool = False,
) -> FileScan:
    """Extract one Go file, resolving identifiers within that file only.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a Go source file.
    """
    return _scan_loaded_units([_load_unit(file_path, repo_root)], record_omissions)[0]


def extract_file(
    file_path: str,
    repo_root: Optional[str] = None,
    diagnostics: Optional[ScanDiagnostics] = None,
) -> ScanResult:
    """Extract all structs and value entries from a single Go source file.

    Args:
        file_path: Absolute or relative path to the Go file.
        repo_root: Repository root directory. If None, uses file's parent directory.
        diagnostics: Optional sink recording every skipped unit.

    Returns:
        ScanResult of the file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a Go source file.

    Example:
        >>> result = extract_file("models/user.go")
        >>> [struct.name for struct in result.structs]
        ['User']
    """
    try:
        unit, _ = _load_unit(file_path, repo_root)
        context = ScanContext(
            index=DeclarationIndex.from_units([unit]),
            diagnostics=diagnostics,
        )
        return extract_unit(unit, context)

    except Exception as e:
        logger.error("Error extracting declarations from %s: %s", file_path, e)
        raise


def discover_go_files(
    directory: str,
    include_tests: bool = DEFAULT_INCLUDE_TEST_FILES,
) -> List[str]:
    """Recursively discover all Go source files in a directory.

    Args:
        directory: Root directory to search.
        include_tests: Whether ``_test.go`` files are included.

    Returns:
        Sorted list of absolute paths to Go files.
    """
    go_files = []
    directory = os.path.abspath(directory)

    logger.info(f"Discovering Go files in {directory}")

    for root, dirs, files in os.walk(directory):
        dirs[:] = [d for d in dirs if not d.startswith('.') and d not in EXCLUDED_DIRS]

        for file in files:
            ext = os.path.splitext(file)[1]
            if ext not in GO_EXTENSIONS:
                continue
            if not include_tests and file.endswith("_test.go"):
                continue
            go_files.append(os.path.join(root, file))

    logger.info(f"Found {len(go_files)} Go files")
    return sorted(go_files)


def extract_directory(
    directory: str,
    repo_root: Optional[str] = None,
    continue_on_error: bool = True,
    per_package_index: bool = DEFAULT_PER_PACKAGE_INDEX,
    record_omissions: bool = False,
    include_tests: bool = DEFAULT_INCLUDE_TEST_FILES,
) -> Tuple[List[FileScan], ExtractionStats]:
    """Extract scanned models from all Go files in a directory tree.

    Args:
        directory: Root directory to process.
        repo_root: Root for computing relative paths. If None, uses directory.
        continue_on_error: If True, continue processing files even if some fail.
                          If False, raise exception on first error.
        per_package_index: If True, files in the same folder (one Go package)
            resolve identifiers against each other; otherwise each file is
            resolved on its own.
        record_omissions: Whether each FileScan carries a diagnostics sink.
        include_tests: Whether ``_test.go`` files are scanned.

    Returns:
        A tuple of (scans, stats).

    Raises:
        FileNotFoundError: If directory does not exist.
    """
    directory = os.path.abspath(directory)

    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Directory not found: {directory}")

    repo_root = directory if repo_root is None else os.path.abspath(repo_root)

    stats = ExtractionStats()
    scans: List[FileScan] = []

    go_files = discover_go_files(directory, include_tests=include_tests)
    if not go_files:
        logger.warning(f"No Go files found in {directory}")
        return scans, stats

    logger.info(f"Processing {len(go_files)} Go files from {directory}")

    groups: Dict[str, List[Tuple[SourceUnit, int]]] = defaultdict(list)
    for file_path in go_files:
        try:
            loaded = _load_unit(file_path, repo_root)
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"Invalid file: {e}")
            stats.files_failed += 1
            if not continue_on_error:
                raise
            continue
        except Exception as e:
            logger.error(f"Unexpected error processing {file_path}: {e}", exc_info=True)
            stats.files_failed += 1
            if not continue_on_error:
                raise
            continue

        key = os.path.dirname(file_path) if per_package_index else file_path
        groups[key].append(loaded)

    for group in groups.values():
        for scan in _scan_loaded_units(group, record_omissions):
            scans.append(scan)
            stats.add(scan)

    logger.info(f"Extraction complete: {stats}")
    return scans, stats


def extract_to_dict_list(
    source: str,
    repo_root: Optional[str] = None,
    per_package_index: bool = DEFAULT_PER_PACKAGE_INDEX,
) -> List[Dict[str, Any]]:
    """Extract scanned models and return one dictionary per file.

    Detects whether ``source`` is a file or a directory.

    Example:
        >>> files = extract_to_dict_list("pkg/")
        >>> files[0]["structs"][0]["name"]
        'User'
    """
    source = os.path.abspath(source)

    if os.path.isfile(source):
        scans = [scan_file(source, repo_root)]
    elif os.path.isdir(source):
        scans, stats = extract_directory(
            source,
            repo_root,
            per_package_index=per_package_index,
        )
        logger.info(f"Extraction stats: {stats}")
    else:
        raise FileNotFoundError(f"Source not found: {source}")

    return [scan.to_dict() for scan in scans]
