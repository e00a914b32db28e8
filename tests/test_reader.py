import io

import pytest
from bencoder import FormatError, InvalidArgument, StreamReader


class FailingSource:
    def read(self, n):
        raise OSError("device not ready")


class TestStreamReader:
    """Test suite for the byte stream reader."""

    def test_read_byte(self):
        """Test reading single bytes until the end of the stream."""
        bsr = StreamReader(b"ab")
        assert bsr.read_byte() == ord("a")
        assert bsr.read_byte() == ord("b")
        assert bsr.read_byte() is None
        assert bsr.read_byte() is None

    def test_unread_byte(self):
        """Test that a pushed back byte is read again."""
        bsr = StreamReader(b"ab")
        b = bsr.read_byte()
        bsr.unread_byte(b)
        assert bsr.read_byte() == ord("a")
        assert bsr.read_byte() == ord("b")

    def test_unread_twice(self):
        """Test that only one byte of pushback is supported."""
        bsr = StreamReader(b"ab")
        bsr.unread_byte(bsr.read_byte())
        with pytest.raises(InvalidArgument):
            bsr.unread_byte(ord("x"))

    def test_unread_end_of_stream(self):
        """Test that pushing back the end of the stream is a no-op."""
        bsr = StreamReader(b"")
        bsr.unread_byte(bsr.read_byte())
        assert bsr.read_byte() is None

    def test_peek_byte(self):
        """Test that peeking does not consume."""
        bsr = StreamReader(io.BytesIO(b"x"))
        assert bsr.peek_byte() == ord("x")
        assert bsr.peek_byte() == ord("x")
        assert bsr.read_byte() == ord("x")
        assert bsr.peek_byte() is None

    def test_read_exact(self):
        """Test reading a fixed number of bytes."""
        bsr = StreamReader(b"spameggs")
        assert bsr.read_exact(4) == b"spam"
        assert bsr.read_exact(4) == b"eggs"

    def test_read_exact_short(self):
        """Test that fewer bytes are returned at the end of the stream."""
        bsr = StreamReader(b"spa")
        assert bsr.read_exact(4) == b"spa"

    def test_read_exact_nothing(self):
        """Test reading zero bytes."""
        bsr = StreamReader(b"")
        assert bsr.read_exact(0) == b""
        assert bsr.read_exact(-1) == b""

    def test_read_exact_after_unread(self):
        """Test that the pushed back byte comes first."""
        bsr = StreamReader(b"spam")
        bsr.unread_byte(bsr.read_byte())
        assert bsr.read_exact(4) == b"spam"

    def test_read_until(self):
        """Test reading up to a stop symbol."""
        bsr = StreamReader(b"123:abc")
        assert bsr.read_until(b":") == "123"
        assert bsr.read_byte() == ord("a")

    def test_read_until_immediate_stop(self):
        """Test that an immediate stop symbol yields an empty string."""
        bsr = StreamReader(b":abc")
        assert bsr.read_until(b":") == ""

    def test_read_until_end_of_stream(self):
        """Test the error when nothing was read before the stream ended."""
        bsr = StreamReader(b"")
        with pytest.raises(FormatError, match="Unexpected end of stream"):
            bsr.read_until(b"e")

    def test_read_until_stop_not_reached(self):
        """Test the error when the stream ended before the stop symbol."""
        bsr = StreamReader(b"123")
        with pytest.raises(FormatError, match="Stop symbol 'e' was not reached"):
            bsr.read_until(b"e")

    def test_io_errors_propagate(self):
        """Test that source failures are not wrapped."""
        bsr = StreamReader(FailingSource())
        with pytest.raises(OSError, match="device not ready"):
            bsr.read_byte()
