"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CANOPY__SECTION__KEY)
3. Repo YAML (.canopy/config.yaml)
4. Global YAML (~/.config/canopy/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    CANOPY__<SECTION>__<KEY>=<VALUE>

Examples:
    CANOPY__LOGGING__LEVEL=DEBUG
    CANOPY__ANALYSIS__ANNOTATION_LEVEL=warning
    CANOPY__COVERAGE__DIRECTORY=build/coverage
    CANOPY__OUTPUT__FORMAT=markdown
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
AnnotationLevel = Literal["notice", "warning", "failure"]
OutputFormat = Literal["text", "markdown", "github"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CANOPY__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Analysis output goes to stdout regardless of this.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class AnalysisConfig(BaseModel):
    """Diff/coverage cross-referencing configuration.

    Env vars:
        CANOPY__ANALYSIS__SOURCE_EXTENSIONS: JSON list of file suffixes to analyze
        CANOPY__ANALYSIS__ANNOTATION_LEVEL: notice, warning or failure
    """

    source_extensions: list[str] = Field(
        default_factory=lambda: [".go"],
        description="Only diff files ending with one of these suffixes are analyzed. "
        "Coverage profiles only exist for instrumented sources.",
    )
    annotation_level: AnnotationLevel = Field(
        default="notice",
        description="Level attached to every uncovered-range annotation.",
    )

    @field_validator("source_extensions")
    @classmethod
    def validate_source_extensions(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one source extension is required")
        return v


class CoverageConfig(BaseModel):
    """Coverage input configuration.

    Env vars:
        CANOPY__COVERAGE__DIRECTORY: Directory (or .zip archive) holding profiles
        CANOPY__COVERAGE__PATTERNS: JSON list of glob patterns inside the directory
    """

    directory: str = Field(
        default=".coverage",
        description="Directory of coverage profiles, relative to the repo root, "
        "or a zip archive of them.",
    )
    patterns: list[str] = Field(
        default_factory=lambda: ["*.out"],
        description="Glob patterns matched against file names in the directory.",
    )


class OutputConfig(BaseModel):
    """Report output configuration.

    Env vars:
        CANOPY__OUTPUT__FORMAT: text, markdown or github
    """

    format: OutputFormat = Field(
        default="text",
        description="text for terminals, markdown for PR comments, "
        "github for workflow-command annotations.",
    )


class CanopyConfig(BaseModel):
    """Root configuration for Canopy.

    All settings can be configured via:
    1. Environment variables: CANOPY__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
