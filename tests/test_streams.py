import io

import pytest

from bfres.meta import Endianess
from bfres.streams import Stream
from bfres.exceptions import EndOfStreamException, FormatException, LogicException


def test_read_integers():
    stream = Stream(b'\x00\x01\xff\xff\x12\x34\x56\x78')

    assert stream.read_uint16() == 1
    assert stream.read_int16() == -1
    assert stream.read_uint32() == 0x12345678
    assert stream.tell() == 8


def test_read_little_endian():
    stream = Stream(b'\x01\x00\x02\x00', endianess=Endianess.LITTLE_ENDIAN)

    assert stream.read_uint16() == 1
    # the endianess can be overridden for a single read
    assert stream.read_struct('H', endianess=Endianess.BIG_ENDIAN) == 0x200


def test_read_struct_tuple():
    stream = Stream(b'\x3f\x80\x00\x00' * 3)

    assert stream.read_struct('3f') == (1.0, 1.0, 1.0)


def test_end_of_stream():
    stream = Stream(b'\x00\x00')

    with pytest.raises(EndOfStreamException) as exc:
        stream.read_uint32()

    assert isinstance(exc.value, FormatException)
    assert isinstance(exc.value, EOFError)
    assert exc.value.offset == 0


def test_temporary_seek_restores_position():
    stream = Stream(b'\x00' * 8)
    stream.seek(2)

    with stream.temporary_seek(4):
        assert stream.tell() == 4
        stream.read_uint16()

    assert stream.tell() == 2


def test_temporary_seek_restores_position_on_error():
    stream = Stream(b'\x00' * 8)
    stream.seek(2)

    with pytest.raises(FormatException):
        with stream.temporary_seek(6):
            stream.read_uint32()

    assert stream.tell() == 2


def test_align_writing():
    stream = Stream(None, flags='w+b')
    stream.write(b'\x01')
    stream.align(4)
    stream.align(4)

    assert stream.getvalue() == b'\x01\x00\x00\x00'


def test_align_reading():
    stream = Stream(b'\x00' * 0x20)
    stream.read(3)
    stream.align(0x10)

    assert stream.tell() == 0x10


def test_align_zero_is_noop():
    stream = Stream(b'\x00' * 4)
    stream.read(1)
    stream.align(0)

    assert stream.tell() == 1


def test_align_not_power_of_two():
    stream = Stream(None, flags='w+b')

    with pytest.raises(LogicException):
        stream.align(3)


def test_strings():
    stream = Stream(None, flags='w+b')
    stream.write_string('abc')
    stream.write_string('wide', encoding='utf-16-le')
    stream.seek(0)

    assert stream.read_string() == 'abc'
    assert stream.read_string('utf-16-le') == 'wide'
    assert stream.tell() == 4 + 10


def test_write_element():
    stream = Stream(None, flags='w+b')
    stream.write_element('H', 1)
    stream.write_element('2H', (2, 3))
    stream.write_array('b', [-1, 1])

    assert stream.getvalue() == b'\x00\x01\x00\x02\x00\x03\xff\x01'


def test_write_out_of_range():
    stream = Stream(None, flags='w+b')

    with pytest.raises(LogicException):
        stream.write_uint16(0x10000)


def test_length():
    stream = Stream(b'\x00' * 10)
    stream.read(4)

    assert stream.length == 10
    assert stream.tell() == 4


def test_leave_open():
    obj = io.BytesIO(b'abc')

    with Stream(obj, leave_open=True) as stream:
        stream.read(1)

    assert not obj.closed

    with Stream(obj) as stream:
        stream.read(1)

    assert obj.closed


def test_path(tmp_path):
    path = tmp_path / 'data.bin'
    path.write_bytes(b'\x00\x2a')

    with Stream(path) as stream:
        assert stream.read_uint16() == 42

    with Stream(str(path)) as stream:
        assert stream.read_uint16() == 42


def test_not_seekable():
    with pytest.raises(LogicException):
        Stream(object())


def test_read_string_not_decodable():
    stream = Stream(b'\x00\x00\xe9t\xe9\x00')
    stream.seek(2)

    with pytest.raises(FormatException) as exc:
        stream.read_string()

    assert exc.value.offset == 2


def test_write_string_not_encodable():
    stream = Stream(None, flags='w+b')

    with pytest.raises(LogicException):
        stream.write_string('été')

    assert stream.getvalue() == b''
