import io

import pytest

from bfres.compression import yaz0
from bfres.exceptions import EndOfStreamException, Yaz0Exception


def header(size, alignment=0):
    return b'Yaz0' + size.to_bytes(4, 'big') + alignment.to_bytes(4, 'big') + bytes(4)


def test_decompress():
    '''three literals followed by a back reference overlapping the output'''
    data = header(5) + bytes([0xe0, 0x01, 0x02, 0x03, 0x20, 0x00])

    assert yaz0.decompress(data) == b'\x01\x02\x03\x03\x03'


def test_decompress_stops_at_size():
    data = header(4) + bytes([0xe0, 0x01, 0x02, 0x03, 0x20, 0x00])

    assert yaz0.decompress(data) == b'\x01\x02\x03\x03'


def test_decompress_long_reference():
    # a single literal repeated using the three bytes form
    data = header(0x20) + bytes([0x80, 0x61, 0x00, 0x00, 0x1f - 0x12])

    assert yaz0.decompress(data) == b'a' * 0x20


def test_decompress_empty():
    assert yaz0.decompress(header(0)) == b''


def test_bad_magic():
    with pytest.raises(Yaz0Exception):
        yaz0.decompress(b'Yaz1' + bytes(12))


def test_truncated():
    with pytest.raises(EndOfStreamException):
        yaz0.decompress(header(5) + bytes([0xe0, 0x01]))


def test_reference_before_start():
    with pytest.raises(Yaz0Exception):
        yaz0.decompress(header(3) + bytes([0x00, 0x20, 0x00]))


def test_is_compressed():
    assert yaz0.is_compressed(header(0))
    assert not yaz0.is_compressed(b'FRES')

    stream = io.BytesIO(header(0))
    assert yaz0.is_compressed(stream)
    assert stream.tell() == 0


@pytest.mark.parametrize('data', [
    b'',
    b'a',
    b'abc' * 100,
    b'a' * 1000,
    bytes(range(256)) * 4 + b'hello world' * 50,
])
def test_compress(data):
    compressed = yaz0.compress(data)

    assert compressed[:4] == b'Yaz0'
    assert int.from_bytes(compressed[4:8], 'big') == len(data)
    assert yaz0.decompress(compressed) == data


def test_compress_is_smaller():
    data = b'hello world ' * 100

    assert len(yaz0.compress(data)) < len(data) // 4


def test_compress_alignment():
    compressed = yaz0.compress(b'abc', alignment=0x2000)

    assert compressed[8:12] == b'\x00\x00\x20\x00'


def test_streams():
    data = b'0123456789' * 20
    compressed = io.BytesIO()

    size = yaz0.compress_stream(io.BytesIO(data), compressed)
    assert size == len(compressed.getvalue())

    compressed.seek(0)
    target = io.BytesIO()
    assert yaz0.decompress_stream(compressed, target) == len(data)
    assert target.getvalue() == data


def test_is_compressed_path_is_closed(tmp_path, monkeypatch):
    path = tmp_path / 'data.szs'
    path.write_bytes(yaz0.compress(b'abc'))

    opened = []

    def tracking_open(*args, **kwargs):
        handle = open(*args, **kwargs)
        opened.append(handle)
        return handle

    monkeypatch.setattr('bfres.streams.open', tracking_open, raising=False)

    assert yaz0.is_compressed(str(path))
    assert len(opened) == 1
    assert opened[0].closed
