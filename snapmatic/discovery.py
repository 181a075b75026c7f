"""
Discovery of Snapmatic files in a source directory.
"""

import os
from typing import Iterable, List

from snapmatic.config import DEFAULT_FILE_PREFIX
from snapmatic.utils.errors import (
    ContainerNotFoundError,
    ConversionIOError,
    SourceDirectoryNotFoundError,
)
from snapmatic.utils.logging import get_logger

logger = get_logger(__name__)


class ContainerDiscovery:
    """Find container files by name prefix in a directory."""

    def __init__(self, src_path: str, prefix: str = DEFAULT_FILE_PREFIX) -> None:
        self.src_path = src_path
        self.prefix = prefix

    def list_all(self) -> List[str]:
        """
        List container files in the source directory.

        Returns:
            File names starting with the prefix, in directory order

        Raises:
            SourceDirectoryNotFoundError: If the source directory is missing
            ConversionIOError: If the directory cannot be listed
        """
        if not os.path.isdir(self.src_path):
            raise SourceDirectoryNotFoundError(self.src_path)

        try:
            entries = os.listdir(self.src_path)
        except OSError as e:
            raise ConversionIOError(f"Error getting Snapmatic files: {e}") from e

        files = [
            name
            for name in entries
            if name.startswith(self.prefix)
            and os.path.isfile(os.path.join(self.src_path, name))
        ]
        logger.debug(f"Found {len(files)} Snapmatic file(s) in {self.src_path}")
        return files

    def select(self, names: Iterable[str]) -> List[str]:
        """Discovered files that are also in `names`."""
        wanted = set(names)
        return [name for name in self.list_all() if name in wanted]

    def find(self, name: str) -> str:
        """Return `name` if it is a discovered container file."""
        if name not in self.list_all():
            raise ContainerNotFoundError(name, self.src_path)
        return name
