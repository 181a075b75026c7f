"""
JPEG extraction from Snapmatic containers.

A Snapmatic picture is a proprietary header followed by a plain JPEG stream.
Extraction locates the first JPEG Start-Of-Image marker and keeps everything
from there to the end of the buffer. The tail is not validated as a JPEG.
"""

from typing import Tuple

from snapmatic.models import MarkerPolicy
from snapmatic.utils.errors import InvalidInputError, MarkerNotFoundError

SOI = b"\xFF\xD8"


def find_marker(data: bytes, start: int = 0) -> int:
    """Offset of the first SOI marker at or after `start`, or -1."""
    return data.find(SOI, start)


def locate_jpeg(data: bytes, policy: MarkerPolicy = MarkerPolicy.STRICT) -> Tuple[int, bytes]:
    """
    Find the JPEG stream embedded in a container buffer.

    Args:
        data: Raw container bytes
        policy: STRICT raises when there is no marker, PASSTHROUGH returns
            the buffer unchanged

    Returns:
        Tuple of (marker offset or -1, bytes from the first SOI marker
        inclusive to the end of `data`)

    Raises:
        InvalidInputError: If `data` is not bytes-like
        MarkerNotFoundError: If no marker is present and policy is STRICT
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise InvalidInputError(f"Expected a bytes-like buffer, got {type(data).__name__}")

    data = bytes(data)
    offset = find_marker(data)
    if offset < 0:
        if policy == MarkerPolicy.PASSTHROUGH:
            return offset, data
        raise MarkerNotFoundError(len(data))

    return offset, data[offset:]


def extract(data: bytes, policy: MarkerPolicy = MarkerPolicy.STRICT) -> bytes:
    """Return the JPEG stream embedded in a container buffer."""
    return locate_jpeg(data, policy)[1]
