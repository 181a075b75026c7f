"""
Core data models for the Snapmatic converter.

This module defines the Pydantic models returned by conversion operations so
callers get a structured per-file outcome instead of only log lines.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================


class MarkerPolicy(str, Enum):
    """What to do when a buffer has no JPEG start marker."""

    STRICT = "strict"
    PASSTHROUGH = "passthrough"


class ConversionStatus(str, Enum):
    """Outcome of a single file conversion."""

    CONVERTED = "converted"
    FAILED = "failed"


class ErrorKind(str, Enum):
    """Category of a failed conversion."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    IO_FAILURE = "io_failure"
    MARKER_NOT_FOUND = "marker_not_found"


# =============================================================================
# Result Models
# =============================================================================


class ConversionResult(BaseModel):
    """Result of converting one Snapmatic picture."""

    filename: str = Field(..., description="Container file name")
    source_path: str = Field(..., description="Full path of the container file")
    destination_path: Optional[str] = Field(None, description="Path of the written JPEG")
    status: ConversionStatus = Field(..., description="Conversion outcome")
    error_kind: Optional[ErrorKind] = Field(None, description="Failure category")
    error: Optional[str] = Field(None, description="Failure message with context")
    marker_offset: Optional[int] = Field(None, ge=0, description="Offset of the JPEG start marker")
    bytes_written: int = Field(0, ge=0, description="Size of the written JPEG")

    @property
    def ok(self) -> bool:
        """Whether the file was converted."""
        return self.status == ConversionStatus.CONVERTED


class BatchReport(BaseModel):
    """Results of a batch conversion, in processing order."""

    results: List[ConversionResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> List[ConversionResult]:
        return [result for result in self.results if result.ok]

    @property
    def failed(self) -> List[ConversionResult]:
        return [result for result in self.results if not result.ok]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def all_ok(self) -> bool:
        """True when every file converted (vacuously true for an empty batch)."""
        return not self.failed
