"""
Snapmatic to JPEG conversion.

This module drives discovery, extraction and writing for one file, a chosen
subset of files, or every Snapmatic file in the source directory. Per-file
failures are recorded in the returned results and never stop a batch.
"""

import asyncio
import os
from collections.abc import Sequence
from typing import List

from snapmatic.config import ConverterSettings
from snapmatic.discovery import ContainerDiscovery
from snapmatic.extractor import locate_jpeg
from snapmatic.models import (
    BatchReport,
    ConversionResult,
    ConversionStatus,
    ErrorKind,
)
from snapmatic.utils.errors import (
    ContainerNotFoundError,
    ConversionIOError,
    InvalidInputError,
    MarkerNotFoundError,
    SnapmaticException,
)
from snapmatic.utils.logging import get_logger, log_performance

logger = get_logger(__name__)

JPEG_SUFFIX = ".jpg"


def _error_kind(error: SnapmaticException) -> ErrorKind:
    if isinstance(error, MarkerNotFoundError):
        return ErrorKind.MARKER_NOT_FOUND
    if isinstance(error, ContainerNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(error, InvalidInputError):
        return ErrorKind.INVALID_INPUT
    return ErrorKind.IO_FAILURE


class SnapConverter:
    """Convert Snapmatic pictures to JPEG files."""

    def __init__(self, settings: ConverterSettings) -> None:
        """
        Initialize the converter.

        Args:
            settings: Source/destination paths and runtime options
        """
        self.settings = settings
        self.discovery = ContainerDiscovery(settings.src_path, settings.file_prefix)

    @property
    def src_path(self) -> str:
        return self.settings.src_path

    @property
    def dst_path(self) -> str:
        return self.settings.dst_path

    def list_files(self) -> List[str]:
        """Snapmatic files available for conversion."""
        return self.discovery.list_all()

    # =========================================================================
    # Public operations
    # =========================================================================

    def convert_single_file(self, filename: str) -> ConversionResult:
        """
        Convert one Snapmatic picture.

        Args:
            filename: Name of a file in the source directory

        Returns:
            Result of the conversion; a name that is not a Snapmatic file
            gives a failed result with error kind NOT_FOUND

        Raises:
            InvalidInputError: If `filename` is not a non-empty string
            SourceDirectoryNotFoundError: If the source directory is missing
            ConversionIOError: If the destination directory cannot be created
        """
        if not isinstance(filename, str) or not filename:
            raise InvalidInputError("Invalid file name.", {"filename": repr(filename)})

        logger.debug("Analyzing Snapmatic file in folder.")
        try:
            self.discovery.find(filename)
        except ContainerNotFoundError as e:
            logger.warning("No Snapmatic picture found matching that name.")
            return self._failed(filename, e)

        self.ensure_destination_dir()
        result = self._convert_one(filename)
        logger.debug("Done.")
        return result

    @log_performance
    def convert_all_files(self) -> BatchReport:
        """
        Convert every Snapmatic picture in the source directory.

        Raises:
            SourceDirectoryNotFoundError: If the source directory is missing
            ConversionIOError: If the destination directory cannot be created
        """
        logger.debug("Analyzing Snapmatic files in folder.")
        files = self.discovery.list_all()
        if not files:
            logger.info("No Snapmatic pictures found.")
            return BatchReport()

        return self._convert_batch(files)

    @log_performance
    def convert_some_files(self, filenames: Sequence) -> BatchReport:
        """
        Convert the listed Snapmatic pictures.

        Names that are not Snapmatic files in the source directory are
        reported as NOT_FOUND after the converted files.

        Args:
            filenames: Non-empty sequence of file names

        Raises:
            InvalidInputError: If `filenames` is not a non-empty sequence of strings
            SourceDirectoryNotFoundError: If the source directory is missing
            ConversionIOError: If the destination directory cannot be created
        """
        if isinstance(filenames, (str, bytes)) or not isinstance(filenames, Sequence):
            raise InvalidInputError("Missing array of files.", {"filenames": repr(filenames)})
        if not filenames:
            raise InvalidInputError("Missing array of files.")
        for name in filenames:
            if not isinstance(name, str) or not name:
                raise InvalidInputError("Invalid file name.", {"filename": repr(name)})

        logger.debug("Analyzing Snapmatic files in folder.")
        files = self.discovery.select(filenames)
        missing = [name for name in dict.fromkeys(filenames) if name not in files]

        report = self._convert_batch(files) if files else BatchReport()
        if not files:
            logger.info("No Snapmatic pictures found.")

        for name in missing:
            logger.warning(f"No Snapmatic picture found matching '{name}'.")
            report.results.append(
                self._failed(name, ContainerNotFoundError(name, self.src_path))
            )
        return report

    def ensure_destination_dir(self) -> None:
        """Create the destination directory if it does not exist."""
        logger.debug("Creating destination folder if does not exist.")
        try:
            os.makedirs(self.dst_path, exist_ok=True)
        except OSError as e:
            raise ConversionIOError(f"Error creating directory: {e}", {"path": self.dst_path}) from e

    # =========================================================================
    # Per-file conversion
    # =========================================================================

    def _convert_batch(self, files: List[str]) -> BatchReport:
        self.ensure_destination_dir()
        logger.debug(f"Converting Snapmatic files to JPEG: {files}")

        if self.settings.workers > 1 and len(files) > 1:
            results = asyncio.run(self._convert_concurrently(files))
        else:
            results = [self._convert_one(name) for name in files]

        report = BatchReport(results=results)
        logger.info(
            f"Converted {len(report.succeeded)}/{report.total} Snapmatic file(s)",
            extra={"failed": len(report.failed)},
        )
        logger.debug("Done.")
        return report

    async def _convert_concurrently(self, files: List[str]) -> List[ConversionResult]:
        """Run conversions on worker threads, at most `workers` at a time."""
        semaphore = asyncio.Semaphore(self.settings.workers)

        async def _bounded(name: str) -> ConversionResult:
            async with semaphore:
                return await asyncio.to_thread(self._convert_one, name)

        # gather keeps input order
        return list(await asyncio.gather(*(_bounded(name) for name in files)))

    def _convert_one(self, filename: str) -> ConversionResult:
        """Read, extract and write one file, capturing any failure."""
        source_path = os.path.join(self.src_path, filename)
        destination_path = os.path.join(self.dst_path, filename + JPEG_SUFFIX)

        try:
            data = self._read_file(source_path)
            offset, image = locate_jpeg(data, self.settings.marker_policy)
            self._write_file(destination_path, image)
        except SnapmaticException as e:
            logger.error(
                f"Error converting file {filename}: {e.message}",
                extra={"container": filename},
            )
            return self._failed(filename, e)

        if offset < 0:
            logger.warning(
                f"No JPEG marker in {filename}, wrote container unchanged",
                extra={"container": filename},
            )

        logger.debug(f"Successfully converted the {source_path} image in {destination_path}.")
        return ConversionResult(
            filename=filename,
            source_path=source_path,
            destination_path=destination_path,
            status=ConversionStatus.CONVERTED,
            marker_offset=offset if offset >= 0 else None,
            bytes_written=len(image),
        )

    def _failed(self, filename: str, error: SnapmaticException) -> ConversionResult:
        return ConversionResult(
            filename=filename,
            source_path=os.path.join(self.src_path, filename),
            status=ConversionStatus.FAILED,
            error_kind=_error_kind(error),
            error=f"Error converting file: {error.message}",
        )

    @staticmethod
    def _read_file(path: str) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise ConversionIOError(f"Error generating file buffer: {e}", {"path": path}) from e

    @staticmethod
    def _write_file(path: str, data: bytes) -> None:
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise ConversionIOError(f"Error writing file: {e}", {"path": path}) from e
