"""Core module exports."""

from canopy.core.errors import (
    CanopyError,
    ConfigError,
    ConsistencyError,
    DiffSourceError,
    ErrorCode,
    FormatError,
    InputError,
    ModeMismatchError,
    NoProfilesError,
    NoValidFilesError,
    ProfileValidationError,
)
from canopy.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "CanopyError",
    "ConfigError",
    "ConsistencyError",
    "DiffSourceError",
    "ErrorCode",
    "FormatError",
    "InputError",
    "ModeMismatchError",
    "NoProfilesError",
    "NoValidFilesError",
    "ProfileValidationError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
