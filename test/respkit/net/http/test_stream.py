import pytest
from hypothesis import given
from hypothesis import strategies as st

from respkit.net.http.stream import ChunkedByteStream


def test_empty():
    with pytest.raises(ValueError):
        ChunkedByteStream([])


def test_read_byte():
    s = ChunkedByteStream([b"ab", b"c"])
    assert s.available() == 3
    assert s.read_byte() == ord("a")
    assert s.read_byte() == ord("b")
    assert s.read_byte() == ord("c")
    assert s.read_byte() is None
    assert s.read_byte() is None
    # available() is the total at construction, not what is left
    assert s.available() == 3


def test_high_bytes():
    s = ChunkedByteStream([b"\xff\x00\x80"])
    assert list(s) == [255, 0, 128]


def test_empty_chunks_are_skipped():
    s = ChunkedByteStream([b"", b"a", b"", b"", b"b", b""])
    assert s.available() == 2
    assert list(s) == [ord("a"), ord("b")]

    s = ChunkedByteStream([b""])
    assert s.available() == 0
    assert s.read_byte() is None
    assert s.read() == b""


def test_read():
    s = ChunkedByteStream([b"Hel", b"lo, ", b"World"])
    assert s.read(0) == b""
    assert s.read(2) == b"He"
    assert s.read(3) == b"lo,"
    assert s.read_byte() == ord(" ")
    assert s.read(100) == b"World"
    assert s.read() == b""


def test_read_all():
    s = ChunkedByteStream([b"foo", b"bar"])
    s.read_byte()
    assert s.read() == b"oobar"
    assert s.read_byte() is None


def test_chunks_are_not_copied():
    chunk = b"x" * 100
    s = ChunkedByteStream([chunk])
    assert s._chunks[0] is chunk


def test_repr():
    assert repr(ChunkedByteStream([b"ab", b"c"])) == "ChunkedByteStream(2 chunks, 3 bytes)"


@given(st.lists(st.binary(), min_size=1, max_size=10))
def test_yields_concatenation(chunks):
    s = ChunkedByteStream(chunks)
    assert s.available() == sum(len(c) for c in chunks)
    assert bytes(s) == b"".join(chunks)
    assert s.read_byte() is None


@given(
    st.lists(st.binary(), min_size=1, max_size=10),
    st.lists(st.integers(min_value=0, max_value=20), max_size=20),
)
def test_mixed_reads(chunks, sizes):
    s = ChunkedByteStream(chunks)
    out = b""
    for size in sizes:
        out += s.read(size)
    out += s.read()
    assert out == b"".join(chunks)
