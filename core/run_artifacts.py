"""Result writing helpers.

Failures here are reported through logging and return values; they never
abort the scan of the remaining files.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Sequence

logger = logging.getLogger(__name__)

DEFAULT_RESULT_ROOT = "result"
FOLDER_PERMISSIONS = 0o744


def create_result_folder(result_root: str = DEFAULT_RESULT_ROOT) -> bool:
    """Create the top-level results directory once per run.

    Returns:
        True if the folder exists afterwards, False if creation failed.
    """
    try:
        os.mkdir(result_root, FOLDER_PERMISSIONS)
    except FileExistsError:
        logger.info("Skipping folder creation since %s already exists", result_root)
    except OSError as exc:
        logger.error("Could not create result folder %s: %s", result_root, exc)
        return False
    return True


def _ensure_package_folder(result_root: str, package_segments: Sequence[str]) -> None:
    folder = os.path.join(result_root, *package_segments)
    try:
        os.makedirs(folder, FOLDER_PERMISSIONS, exist_ok=True)
    except OSError as exc:
        logger.error("Could not create package folder %s: %s", folder, exc)


def write_result_to_file(
    result: str,
    filename: str,
    package_segments: Sequence[str] = (),
    result_root: str = DEFAULT_RESULT_ROOT,
) -> bool:
    """Write rendered results to ``filename``.

    When the originating file lives below the scan root, the folder mirroring
    its package path is created under ``result_root`` first.

    Returns:
        True on success, False if the file could not be written.
    """
    if package_segments:
        _ensure_package_folder(result_root, package_segments)

    try:
        with open(filename, "w", encoding="utf-8") as f:
            f.write(result)
    except OSError as exc:
        logger.error("Could not write result file %s: %s", filename, exc)
        return False

    logger.debug("Wrote %d characters to %s", len(result), filename)
    return True


def result_path_for(
    source_path: str,
    result_root: str = DEFAULT_RESULT_ROOT,
    suffix: str = ".json",
) -> str:
    """Map a source file path relative to the scan root onto the results tree."""
    stem = os.path.splitext(os.path.normpath(source_path))[0]
    return os.path.join(result_root, stem + suffix)


def write_run_report(
    report: dict[str, Any],
    run_id: str,
    output_dir: str = os.path.join(DEFAULT_RESULT_ROOT, "run_reports"),
) -> str:
    """Write a JSON run report and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    payload = dict(report)
    payload.setdefault("run_id", run_id)
    payload.setdefault("timestamp_utc", datetime.now(timezone.utc).isoformat())
    path = os.path.join(output_dir, f"{run_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    return path
