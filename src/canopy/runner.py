"""Local analysis pipeline.

diff source -> added lines -> coverage files -> merge -> analyze -> report.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from canopy.config.models import CanopyConfig
from canopy.core.errors import InputError, NoProfilesError
from canopy.core.logging import get_logger
from canopy.coverage import (
    AnalysisResult,
    Profile,
    analyze_coverage,
    merge_profiles,
    parse_profiles,
    parse_profiles_from_zip,
)
from canopy.diff import DiffSource, added_lines_by_file, parse_diff, total_added_lines
from canopy.format import Formatter, get_formatter

log = get_logger(__name__)

NO_CHANGES = "No changes detected in diff"


def find_coverage_files(directory: Path, patterns: list[str]) -> list[Path]:
    """Files in directory matching any pattern, sorted, without duplicates."""
    found: set[Path] = set()
    for pattern in patterns:
        found.update(p for p in directory.glob(pattern) if p.is_file())
    return sorted(found)


class LocalRunner:
    """Runs one analysis against a local checkout.

    The report goes to out; progress messages go to err so a markdown or
    github report can be piped on unchanged.
    """

    def __init__(
        self,
        config: CanopyConfig,
        diff_source: DiffSource,
        *,
        repo_root: Path | str = ".",
        coverage_path: Path | str | None = None,
        formatter: Formatter | None = None,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.config = config
        self.diff_source = diff_source
        self.repo_root = Path(repo_root)
        path = Path(coverage_path) if coverage_path is not None else Path(config.coverage.directory)
        self.coverage_path = path if path.is_absolute() else self.repo_root / path
        self.formatter = formatter or get_formatter(
            config.output.format, level=config.analysis.annotation_level
        )
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr

    def run(self) -> AnalysisResult | None:
        """Analyze the diff against the coverage files.

        Returns:
            The analysis result, or None when the diff holds no source
            changes (a message is printed instead of a report).

        Raises:
            CanopyError: On a missing coverage path or unreadable input.
        """
        data = self.diff_source.get_diff()
        if not data:
            self.out.write(f"{NO_CHANGES}\n")
            return None

        extensions = self.config.analysis.source_extensions
        added = added_lines_by_file(parse_diff(data), extensions)
        log.info("diff_parsed", files=len(added), added_lines=total_added_lines(added))
        if not added:
            self.out.write(f"No {', '.join(extensions)} files changed in diff\n")
            return None

        merged = merge_profiles(self.load_profiles())
        result = analyze_coverage(merged, added)
        log.info(
            "analysis_complete",
            added=result.total_added,
            uncovered=result.total_uncovered,
            files=len(result.uncovered_by_file),
        )
        self.formatter.format(result, self.out)
        return result

    def load_profiles(self) -> list[Profile]:
        """Read every profile from the coverage directory, zip archive or file.

        A path ending in .zip is read as an archive; any other regular file
        is parsed as a single coverage profile.
        """
        path = self.coverage_path
        if path.is_file():
            data = path.read_bytes()
            if path.suffix == ".zip":
                profiles = parse_profiles_from_zip(data)
            else:
                profiles = parse_profiles(data)
            self.err.write(f"Found {len(profiles)} coverage profile(s) in {path.name}\n")
            return profiles

        if not path.is_dir():
            raise InputError.coverage_not_found(
                str(path),
                f"Run tests with coverage first: go test ./... -coverprofile={path}/coverage.out",
            )

        files = find_coverage_files(path, self.config.coverage.patterns)
        if not files:
            patterns = ", ".join(self.config.coverage.patterns)
            raise NoProfilesError.none_found(f"no coverage files matching {patterns} in {path}")

        self.err.write(f"Found {len(files)} coverage file(s) to merge\n")
        profiles: list[Profile] = []
        for file in files:
            log.debug("coverage_file_read", path=str(file))
            profiles.extend(parse_profiles(file.read_bytes()))
        return profiles
