"""
Tests for JPEG extraction from Snapmatic containers.
"""

import pytest

from snapmatic.extractor import SOI, extract, find_marker, locate_jpeg
from snapmatic.models import MarkerPolicy
from snapmatic.utils.errors import InvalidInputError, MarkerNotFoundError


class TestFindMarker:
    """Test the SOI marker search."""

    def test_marker_offset(self):
        """Test the offset of the first marker is returned."""
        assert find_marker(b"\x00\x01\xFF\xD8\xAA") == 2

    def test_marker_absent(self):
        """Test -1 is returned when there is no marker."""
        assert find_marker(b"\x00\xFF\x00\xD8") == -1
        assert find_marker(b"") == -1

    def test_search_from_start(self):
        """Test searching past an earlier marker."""
        data = SOI + b"\x00" + SOI
        assert find_marker(data, 1) == 3


class TestExtract:
    """Test slicing the JPEG stream out of a container."""

    def test_header_is_stripped(self):
        """Test the bytes before the marker are dropped."""
        data = bytes([0x00, 0x01, 0xFF, 0xD8, 0xAA, 0xBB])
        assert extract(data) == bytes([0xFF, 0xD8, 0xAA, 0xBB])

    @pytest.mark.parametrize("offset", [1, 7, 300])
    def test_tail_length(self, offset):
        """Test the result is the tail from the marker offset."""
        data = b"\x00" * offset + SOI + b"payload"
        result = extract(data)

        assert result == data[offset:]
        assert len(result) == len(data) - offset

    def test_marker_at_start(self):
        """Test a header-less container is returned whole."""
        data = SOI + b"\xFF\xE0rest"
        assert extract(data) == data

    def test_first_marker_wins(self):
        """Test later FF D8 pairs inside segment data do not move the cut."""
        # APP0 segment whose payload contains a spurious FF D8
        app0 = b"\xFF\xE0\x00\x08\xFF\xD8\xFF\xD8\x00\x00"
        data = b"HEADER\xFF\x00" + SOI + app0 + b"\xFF\xD9"

        result = extract(data)

        assert result.startswith(SOI + b"\xFF\xE0")
        assert result == data[8:]

    def test_lone_ff_before_marker(self):
        """Test an FF not followed by D8 is skipped."""
        data = b"\xFF\x00\xFF\xFF\xD8\x01"
        assert extract(data) == b"\xFF\xD8\x01"

    def test_marker_split_across_end(self):
        """Test a trailing FF is not treated as a marker."""
        with pytest.raises(MarkerNotFoundError):
            extract(b"\x00\x00\xFF")

    def test_no_marker_strict(self):
        """Test a buffer without a marker raises by default."""
        with pytest.raises(MarkerNotFoundError) as exc_info:
            extract(b"no jpeg in here")

        assert exc_info.value.details == {"size": 15}

    def test_empty_buffer_strict(self):
        """Test an empty buffer raises by default."""
        with pytest.raises(MarkerNotFoundError):
            extract(b"")

    def test_no_marker_passthrough(self):
        """Test passthrough returns the buffer unchanged."""
        data = b"no jpeg in here"
        assert extract(data, MarkerPolicy.PASSTHROUGH) == data
        assert extract(b"", MarkerPolicy.PASSTHROUGH) == b""

    def test_passthrough_still_cuts_at_marker(self):
        """Test passthrough only affects buffers without a marker."""
        assert extract(b"\x00" + SOI, MarkerPolicy.PASSTHROUGH) == SOI

    def test_bytearray_input(self):
        """Test bytes-like input gives an independent bytes result."""
        data = bytearray(b"\x00\x01\xFF\xD8\xAA")
        result = extract(data)
        data[3] = 0x00

        assert isinstance(result, bytes)
        assert result == b"\xFF\xD8\xAA"

    def test_rejects_non_bytes(self):
        """Test a str buffer is rejected."""
        with pytest.raises(InvalidInputError):
            extract("\xff\xd8")


class TestLocateJpeg:
    """Test the single-pass offset and tail lookup."""

    def test_offset_and_tail(self):
        """Test the offset matches the cut point of the tail."""
        data = b"\x00\x01\xFF\xD8\xAA\xBB"
        assert locate_jpeg(data) == (2, b"\xFF\xD8\xAA\xBB")

    def test_single_search(self, monkeypatch):
        """Test the buffer is searched once per lookup."""
        calls = []

        def _find(data, start=0):
            calls.append(start)
            return data.find(SOI, start)

        monkeypatch.setattr("snapmatic.extractor.find_marker", _find)

        locate_jpeg(b"\x00" + SOI)

        assert calls == [0]

    def test_passthrough_offset(self):
        """Test passthrough reports -1 alongside the unchanged buffer."""
        assert locate_jpeg(b"\x00\x00", MarkerPolicy.PASSTHROUGH) == (-1, b"\x00\x00")

    def test_strict_raises(self):
        """Test a buffer without a marker raises under the strict policy."""
        with pytest.raises(MarkerNotFoundError):
            locate_jpeg(b"\x00\x00")
