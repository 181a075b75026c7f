"""
Snapmatic picture to JPEG converter.

Extracts the JPEG stream embedded in Snapmatic container files and writes it
out as standalone .jpg files.
"""

from importlib.metadata import PackageNotFoundError, version

from snapmatic.config import ConverterSettings
from snapmatic.converter import SnapConverter
from snapmatic.discovery import ContainerDiscovery
from snapmatic.extractor import SOI, extract, find_marker, locate_jpeg
from snapmatic.models import BatchReport, ConversionResult, ConversionStatus, ErrorKind, MarkerPolicy

try:
    __version__ = version("snapmatic-converter")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "SOI",
    "BatchReport",
    "ContainerDiscovery",
    "ConversionResult",
    "ConversionStatus",
    "ConverterSettings",
    "ErrorKind",
    "MarkerPolicy",
    "SnapConverter",
    "extract",
    "find_marker",
    "locate_jpeg",
]
