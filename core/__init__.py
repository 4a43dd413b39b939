"""Core shared configuration, logging and result-writing utilities."""

from core.structured_logging import (
    configure_structured_logging,
    get_run_id,
    get_source,
    set_run_id,
    file_scope,
    get_package,
)
from core.run_config import (
    ConfigValidationError,
    RunConfig,
    load_config_file,
    load_run_config,
    resolve_strict_config_validation,
)
from core.run_artifacts import (
    create_result_folder,
    result_path_for,
    write_result_to_file,
    write_run_report,
)

__all__ = [
    "configure_structured_logging",
    "get_run_id",
    "get_source",
    "set_run_id",
    "file_scope",
    "get_package",
    "ConfigValidationError",
    "RunConfig",
    "load_config_file",
    "load_run_config",
    "resolve_strict_config_validation",
    "create_result_folder",
    "result_path_for",
    "write_result_to_file",
    "write_run_report",
]
