"""Tests for error types and codes."""

import pytest

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


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.INPUT_EMPTY, 1000),
            (ErrorCode.NO_PROFILES, 1000),
            (ErrorCode.COVERAGE_NOT_FOUND, 1000),
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.COVERAGE_FORMAT, 3000),
            (ErrorCode.ARCHIVE_FORMAT, 3000),
            (ErrorCode.MODE_MISMATCH, 4000),
            (ErrorCode.INVALID_BLOCK, 4000),
            (ErrorCode.DIFF_SOURCE, 5000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        assert expected_range <= code.value < expected_range + 1000


class TestCanopyError:
    """Base error behavior tests."""

    def test_given_error_when_str_then_includes_code_and_name(self) -> None:
        """String form is '[code] NAME: message'."""
        error = InputError.empty("diff data")

        assert str(error) == "[1001] INPUT_EMPTY: diff data is empty"

    def test_given_error_when_to_dict_then_serializable(self) -> None:
        """to_dict carries code, name, message and details."""
        error = ModeMismatchError.at(2, "count", "set")

        result = error.to_dict()

        assert result == {
            "code": 4001,
            "error": "MODE_MISMATCH",
            "message": "profile 2 has mode 'count', expected 'set'",
            "details": {"index": 2, "mode": "count", "expected": "set"},
        }

    def test_errors_are_raisable_and_catchable_as_base(self) -> None:
        with pytest.raises(CanopyError):
            raise FormatError.coverage("bad mode line: x")

    def test_errors_are_frozen(self) -> None:
        error = InputError.empty("zip data")

        with pytest.raises(AttributeError):
            error.message = "changed"  # type: ignore[misc]


class TestErrorHierarchy:
    """Callers can catch a family of errors with one except clause."""

    @pytest.mark.parametrize(
        ("error", "family"),
        [
            (NoProfilesError.none_found(), InputError),
            (NoValidFilesError.in_archive(2, ["a.out", "b.out"]), InputError),
            (ModeMismatchError.at(1, "set", "count"), ConsistencyError),
            (ProfileValidationError.invalid_profile("profile is None"), ConsistencyError),
        ],
    )
    def test_subclass_belongs_to_family(self, error: CanopyError, family: type) -> None:
        assert isinstance(error, family)

    def test_format_error_is_not_input_error(self) -> None:
        assert not isinstance(FormatError.archive("truncated"), InputError)


class TestFactories:
    """Factory methods produce the documented messages."""

    def test_coverage_format_keeps_offending_line(self) -> None:
        error = FormatError.coverage("line doesn't match", line="garbage")

        assert error.code == ErrorCode.COVERAGE_FORMAT
        assert error.message == "failed to parse coverage profiles: line doesn't match"
        assert error.details["line"] == "garbage"

    def test_archive_format(self) -> None:
        error = FormatError.archive("File is not a zip file")

        assert error.code == ErrorCode.ARCHIVE_FORMAT
        assert "failed to read zip archive" in error.message

    def test_no_valid_files_records_skipped_members(self) -> None:
        error = NoValidFilesError.in_archive(1, ["broken.out"])

        assert error.code == ErrorCode.NO_VALID_FILES
        assert error.details == {"scanned": 1, "skipped": ["broken.out"]}

    def test_invalid_block_names_file_and_index(self) -> None:
        error = ProfileValidationError.invalid_block("main.go", 3, "has invalid start line: 0")

        assert error.code == ErrorCode.INVALID_BLOCK
        assert error.message == "invalid block in main.go: block 3 has invalid start line: 0"

    def test_coverage_not_found_includes_hint(self) -> None:
        error = InputError.coverage_not_found("/repo/.coverage", "Run tests first")

        assert error.code == ErrorCode.COVERAGE_NOT_FOUND
        assert error.message == "coverage not found: /repo/.coverage. Run tests first"

    def test_config_errors(self) -> None:
        assert ConfigError.parse_error("/x.yaml", "bad").code == ErrorCode.CONFIG_PARSE_ERROR
        assert ConfigError.file_not_found("/x.yaml").details == {"path": "/x.yaml"}
        invalid = ConfigError.invalid_value("output.format", "pdf", "unknown format")
        assert invalid.details["value"] == "pdf"

    def test_diff_source_failed(self) -> None:
        error = DiffSourceError.failed("commit diff", "reference not found: nope")

        assert error.code == ErrorCode.DIFF_SOURCE
        assert error.message == "commit diff failed: reference not found: nope"
