#!/usr/bin/env python3
"""
Top-level scan runner for Go declaration extraction.

Scans a Go source tree, extracts the scanned model of every file and writes
one JSON document per file under the results root, mirroring the package
layout of the source tree.

Usage:
    python run_scan.py --source-dir /path/to/go/module
    python run_scan.py --source-dir ./pkg --result-root out --record-omissions
    python run_scan.py --config godmt.yaml
"""

import argparse
import json
import logging
import os
import sys
import time
from typing import Any, Dict, List, Optional

from core.run_artifacts import (
    create_result_folder,
    result_path_for,
    write_result_to_file,
    write_run_report,
)
from core.run_config import RunConfig, load_run_config, resolve_strict_config_validation
from core.structured_logging import configure_structured_logging, file_scope, set_run_id

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Go declaration scanner: structs, consts and vars to a JSON model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_scan.py --source-dir ./pkg\n"
            "  python run_scan.py --source-dir ./pkg --result-root out --record-omissions\n"
        ),
    )

    parser.add_argument(
        "--config",
        default=None,
        help="YAML run configuration. Default: ./godmt.yaml when present.",
    )
    parser.add_argument(
        "--source-dir",
        default=None,
        help="Path to the Go source directory to scan.",
    )
    parser.add_argument(
        "--result-root",
        default=None,
        help="Directory receiving one JSON model per Go file. Default: result",
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="Directory receiving the JSON run report.",
    )
    parser.add_argument(
        "--record-omissions",
        action="store_true",
        default=None,
        help="Include every skipped field/initializer in the per-file output.",
    )
    parser.add_argument(
        "--file-index",
        action="store_true",
        default=False,
        help="Resolve identifiers per file instead of per package folder.",
    )
    parser.add_argument(
        "--strict-config",
        action="store_true",
        default=resolve_strict_config_validation(default=False),
        help="Fail on invalid configuration instead of falling back to defaults.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RunConfig:
    """Merge the YAML file, environment and command-line flags."""
    return load_run_config(
        config_path=args.config,
        strict=args.strict_config,
        source_dir=args.source_dir,
        result_root=args.result_root,
        report_dir=args.report_dir,
        record_omissions=args.record_omissions,
        per_package_index=False if args.file_index else None,
        log_level="DEBUG" if args.verbose else None,
    )


def run_scan(config: RunConfig) -> Dict[str, Any]:
    """Scan ``config.source_dir`` and write one JSON model per Go file.

    Returns:
        Run report payload with statistics and written files.

    Raises:
        FileNotFoundError: If the source directory does not exist.
    """
    from scanner.extractor import extract_directory

    if not os.path.isdir(config.source_dir):
        raise FileNotFoundError(f"Source directory not found: {config.source_dir}")

    logger.info(f"Source directory : {os.path.abspath(config.source_dir)}")
    logger.info(f"Result root      : {os.path.abspath(config.result_root)}")

    t0 = time.time()
    scans, stats = extract_directory(
        config.source_dir,
        per_package_index=config.per_package_index,
        record_omissions=config.record_omissions,
        include_tests=config.include_tests,
    )
    extraction_time = time.time() - t0
    logger.info("Extraction completed in %.2fs: %s", extraction_time, stats)

    written: List[str] = []
    failed: List[str] = []
    root_ready = not scans or create_result_folder(config.result_root)
    for scan in scans:
        target = result_path_for(scan.file_path, config.result_root)
        if not root_ready:
            failed.append(target)
            continue
        with file_scope(scan.file_path, package=scan.package):
            rendered = json.dumps(scan.to_dict(), indent=2, ensure_ascii=False)
            if write_result_to_file(
                rendered,
                target,
                package_segments=scan.package_segments,
                result_root=config.result_root,
            ):
                written.append(target)
            else:
                failed.append(target)

    logger.info(f"Wrote {len(written)} result files to {config.result_root}")
    if failed:
        logger.error(f"{len(failed)} result files could not be written")

    if scans and not written:
        status = "failed"
    elif failed or stats.files_failed:
        status = "partial"
    else:
        status = "success"

    return {
        "status": status,
        "source_dir": os.path.abspath(config.source_dir),
        "result_root": os.path.abspath(config.result_root),
        "extraction_seconds": round(extraction_time, 3),
        "stats": stats.to_dict(),
        "written": written,
        "write_failures": failed,
    }


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the scan."""
    args = parse_args(argv)
    configure_structured_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    run_id = set_run_id()

    run_report: Dict[str, Any] = {
        "run_id": run_id,
        "pipeline": "go_declaration_scan",
        "status": "failed",
    }
    report_dir = args.report_dir or RunConfig.report_dir

    try:
        config = build_config(args)
        configure_structured_logging(level=config.log_level)
        report_dir = config.report_dir

        run_report.update(run_scan(config))
        report_path = write_run_report(run_report, run_id, output_dir=report_dir)
        logger.info("Run report written: %s", report_path)
        if run_report["status"] == "failed":
            sys.exit(1)

    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        run_report["error"] = str(e)
        write_run_report(run_report, run_id, output_dir=report_dir)
        sys.exit(1)
    except Exception as e:
        logger.error(f"Scan failed: {e}", exc_info=True)
        run_report["error"] = str(e)
        write_run_report(run_report, run_id, output_dir=report_dir)
        sys.exit(1)


if __name__ == "__main__":
    main()
