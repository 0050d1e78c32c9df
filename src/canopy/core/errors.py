"""Canopy error types with typed error codes.

Error code ranges:
- 1xxx: Input
- 2xxx: Config
- 3xxx: Format
- 4xxx: Consistency
- 5xxx: Diff source
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Input (1xxx)
    INPUT_EMPTY = 1001
    NO_PROFILES = 1002
    NO_VALID_FILES = 1003
    COVERAGE_NOT_FOUND = 1004

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Format (3xxx)
    COVERAGE_FORMAT = 3002
    ARCHIVE_FORMAT = 3003

    # Consistency (4xxx)
    MODE_MISMATCH = 4001
    INVALID_PROFILE = 4002
    INVALID_BLOCK = 4003

    # Diff source (5xxx)
    DIFF_SOURCE = 5001


@dataclass(frozen=True, slots=True)
class CanopyError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'MODE_MISMATCH')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class InputError(CanopyError):
    """A required buffer is missing or empty."""

    @classmethod
    def empty(cls, what: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_EMPTY,
            message=f"{what} is empty",
            details={"input": what},
        )

    @classmethod
    def coverage_not_found(cls, path: str, hint: str) -> "InputError":
        return cls(
            code=ErrorCode.COVERAGE_NOT_FOUND,
            message=f"coverage not found: {path}. {hint}",
            details={"path": path},
        )


class NoProfilesError(InputError):
    """Decoding or merging produced no coverage profiles."""

    @classmethod
    def none_found(cls, reason: str = "no coverage profiles found in data") -> "NoProfilesError":
        return cls(code=ErrorCode.NO_PROFILES, message=reason)


class NoValidFilesError(InputError):
    """A coverage archive contained no parseable coverage file."""

    @classmethod
    def in_archive(cls, scanned: int, skipped: list[str]) -> "NoValidFilesError":
        return cls(
            code=ErrorCode.NO_VALID_FILES,
            message="no valid coverage files found in archive",
            details={"scanned": scanned, "skipped": skipped},
        )


class FormatError(CanopyError):
    """Malformed coverage, or archive data."""

    @classmethod
    def coverage(cls, reason: str, line: str | None = None) -> "FormatError":
        details: dict[str, Any] = {"reason": reason}
        if line is not None:
            details["line"] = line
        return cls(
            code=ErrorCode.COVERAGE_FORMAT,
            message=f"failed to parse coverage profiles: {reason}",
            details=details,
        )

    @classmethod
    def archive(cls, reason: str) -> "FormatError":
        return cls(
            code=ErrorCode.ARCHIVE_FORMAT,
            message=f"failed to read zip archive: {reason}",
            details={"reason": reason},
        )


class ConsistencyError(CanopyError):
    """Profiles disagree with each other or violate block geometry."""

    pass


class ModeMismatchError(ConsistencyError):
    """Profiles being merged were recorded in different coverage modes."""

    @classmethod
    def at(cls, index: int, mode: str, expected: str) -> "ModeMismatchError":
        return cls(
            code=ErrorCode.MODE_MISMATCH,
            message=f"profile {index} has mode {mode!r}, expected {expected!r}",
            details={"index": index, "mode": mode, "expected": expected},
        )


class ProfileValidationError(ConsistencyError):
    """A profile or one of its blocks is not well-formed."""

    @classmethod
    def invalid_profile(cls, reason: str) -> "ProfileValidationError":
        return cls(
            code=ErrorCode.INVALID_PROFILE,
            message=reason,
            details={"reason": reason},
        )

    @classmethod
    def invalid_block(cls, file_name: str, index: int, reason: str) -> "ProfileValidationError":
        return cls(
            code=ErrorCode.INVALID_BLOCK,
            message=f"invalid block in {file_name}: block {index} {reason}",
            details={"file_name": file_name, "index": index, "reason": reason},
        )


class ConfigError(CanopyError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class DiffSourceError(CanopyError):
    """A diff could not be produced from the repository."""

    @classmethod
    def failed(cls, source: str, reason: str) -> "DiffSourceError":
        return cls(
            code=ErrorCode.DIFF_SOURCE,
            message=f"{source} failed: {reason}",
            details={"source": source, "reason": reason},
        )

