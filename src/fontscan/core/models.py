"""Pydantic models for type-safe data structures."""

from collections import Counter
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from .config import ScannerConfig

FontStyle = Literal["normal", "italic", "oblique"]


class FontErrorCode(Enum):
    """Failure classes for a single font file."""

    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INVALID_FONT = "INVALID_FONT"
    PARSE_ERROR = "PARSE_ERROR"
    UNKNOWN = "UNKNOWN"


class FontEntry(BaseModel):
    """One discovered font file."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Full font name or filename fallback")
    path: str = Field(..., description="Absolute path to the font file")
    format: str = Field(..., description="Lower-case extension without the dot")
    family: str | None = Field(None, description="Family name (name record 1)")
    # Raw usWeightClass, not range-checked
    weight: int | None = Field(None, description="Weight class from the OS/2 table")
    style: FontStyle | None = Field(None, description="Style from OS/2 fsSelection")
    version: str | None = Field(None, description="Version string (name record 5)")
    copyright: str | None = Field(None, description="Copyright notice (name record 0)")
    is_monospace: bool | None = Field(None, description="True when fixed pitch, None if unknown")
    file_size: int = Field(0, ge=0, description="File size in bytes")
    last_modified: datetime | None = Field(None, description="File modification time")

    # Non-empty; surrogate-escaped filename bytes are kept as-is
    @field_validator("name", "path")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v

    @property
    def filename(self) -> str:
        """Get the font filename."""
        return Path(self.path).name

    def matches_name(self, query: str, exact: bool = False) -> bool:
        """Case-insensitive match of ``query`` against name or family."""
        query_lower = query.lower()
        candidates = [self.name.lower()]
        if self.family is not None:
            candidates.append(self.family.lower())

        if exact:
            return any(candidate == query_lower for candidate in candidates)
        return any(query_lower in candidate for candidate in candidates)

    def __str__(self) -> str:
        return f"{self.name} ({self.format}) - {self.path}"


class FontError(BaseModel):
    """One failed extraction."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path to the font file that failed")
    message: str = Field(..., description="Error message")
    code: FontErrorCode = Field(..., description="Error code for programmatic handling")


class ScanStats(BaseModel):
    """Aggregate counters for one scan."""

    model_config = ConfigDict(frozen=True)

    directories_scanned: int = Field(0, ge=0, description="Root directories visited")
    files_processed: int = Field(0, ge=0, description="Candidate files processed")
    fonts_found: int = Field(0, ge=0, description="Files yielding a font entry")
    files_failed: int = Field(0, ge=0, description="Files yielding an error")
    scan_time_ms: float = Field(0.0, ge=0.0, description="Elapsed time in milliseconds")

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage."""
        if self.files_processed == 0:
            return 0.0
        return (self.fonts_found / self.files_processed) * 100.0


class ScanResult(BaseModel):
    """Fonts, errors and statistics of one scan."""

    fonts: list[FontEntry] = Field(default_factory=list, description="Extracted fonts")
    errors: list[FontError] = Field(default_factory=list, description="Per-file failures")
    stats: ScanStats = Field(default_factory=ScanStats)
    from_cache: bool = Field(False, description="Whether the fonts came from the cache")

    def error_counts(self) -> dict[FontErrorCode, int]:
        """Count errors per error code."""
        return dict(Counter(error.code for error in self.errors))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serialisable dictionary."""
        return self.model_dump(mode="json")


class ScanOptions(BaseModel):
    """Options for a single scan call."""

    use_cache: bool = Field(True, description="Consult and update the result cache")
    include_system_fonts: bool = Field(True, description="Scan system font directories")
    include_user_fonts: bool = Field(True, description="Scan per-user font directories")
    custom_dirs: list[Path] = Field(default_factory=list, description="Extra directories")
    max_depth: int = Field(3, ge=1, description="Directory recursion depth")

    @field_validator("custom_dirs")
    @classmethod
    def expand_custom_dirs(cls, v: list[Path]) -> list[Path]:
        return [Path(d).expanduser().absolute() for d in v]

    @classmethod
    def from_config(cls, config: "ScannerConfig", **overrides: Any) -> "ScanOptions":
        """Build options from scanner configuration defaults."""
        values = {
            "use_cache": config.use_cache,
            "include_system_fonts": config.include_system_fonts,
            "include_user_fonts": config.include_user_fonts,
            "custom_dirs": list(config.custom_dirs),
            "max_depth": config.max_depth,
        }
        values.update(overrides)
        return cls(**values)
