"""
Shared fixtures for Snapmatic converter tests.
"""

from pathlib import Path

import pytest

from snapmatic.config import ConverterSettings
from snapmatic.converter import SnapConverter

# Fake container: proprietary header, then a tiny JPEG-looking stream
HEADER = b"\x00\x00\x00\x01PHOTO - 13/08/20 14:30:00\x00" * 4
JPEG = b"\xFF\xD8\xFF\xE0\x00\x10JFIF\x00\x01\x01" + b"\x12\x34" * 16 + b"\xFF\xD9"


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Base directory for a test run."""
    return tmp_path


@pytest.fixture
def source_dir(temp_dir) -> Path:
    """Source directory with two Snapmatic files and one unrelated file."""
    src = temp_dir / "source"
    src.mkdir()
    (src / "PGTA0001").write_bytes(HEADER + JPEG)
    (src / "PGTA0002").write_bytes(b"\x00\x01" + JPEG)
    (src / "ignored.txt").write_bytes(b"not a snapmatic file")
    return src


@pytest.fixture
def make_settings(temp_dir):
    """Factory for settings rooted at the temp directory."""

    def _make(**overrides) -> ConverterSettings:
        return ConverterSettings(base_dir=str(temp_dir), **overrides)

    return _make


@pytest.fixture
def converter(source_dir, make_settings) -> SnapConverter:
    """Converter over the populated source directory."""
    return SnapConverter(make_settings())
