import io
import logging
import os
import struct
from contextlib import contextmanager

from .meta import Endianess
from .exceptions import EndOfStreamException, FormatException, LogicException


logger = logging.getLogger(__name__)


def is_power_of_two(value):
    return value > 0 and (value & (value - 1)) == 0


def _terminator_width(encoding):
    return 2 if encoding.lower().replace('_', '-').startswith('utf-16') else 1


class Stream(object):
    '''This is a simple wrapper around bytes/file objects to
    uniform their properties: the binary formats need to read and write
    integers with a given endianess and to jump back and forth without
    losing the position of the caller.

    The object can be a path, some raw bytes, None (a fresh in-memory buffer)
    or a file-like object already opened.'''
    def __init__(self, obj, flags='rb', endianess=Endianess.BIG_ENDIAN, encoding='ascii', leave_open=False):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self.flags = flags
        self.endianess = endianess
        self.encoding = encoding
        self.obj = obj
        # we close only what we opened or what the caller gave us to own
        self._owned = True

        init_method = getattr(self, 'init_%s' % self.obj.__class__.__name__, None)

        if init_method is None:
            init_method = self.init_path if isinstance(obj, os.PathLike) else self.init_stream

        init_method()

        if leave_open and init_method == self.init_stream:
            self._owned = False

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        if self._owned and not self.obj.closed:
            self.obj.close()

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        self.obj = open(self.obj, self.flags)

    init_path = init_str

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    init_bytearray = init_bytes
    init_memoryview = init_bytes

    def init_NoneType(self):
        self.obj = io.BytesIO()

    def init_stream(self):
        if not hasattr(self.obj, 'seek'):
            raise LogicException('\'%s\' is not a seekable stream' % self.obj.__class__.__name__)

    @property
    def writable(self):
        return any(_ in self.flags for _ in 'wa+')

    @property
    def length(self):
        with self.temporary_seek():
            return self.obj.seek(0, io.SEEK_END)

    def tell(self):
        return self.obj.tell()

    def seek(self, offset, whence=io.SEEK_SET):
        return self.obj.seek(offset, whence)

    @contextmanager
    def temporary_seek(self, offset=None):
        '''Jump to the given absolute offset (if any) and come back to the actual
        position whatever happens in the with block.'''
        position = self.obj.tell()
        try:
            if offset is not None:
                self.obj.seek(offset)
            yield self
        finally:
            self.obj.seek(position)

    def align(self, alignment):
        '''Move forward to the next multiple of alignment: when writing the gap
        is filled with zeroes.'''
        if alignment == 0:
            return
        if not is_power_of_two(alignment):
            raise LogicException('alignment %r is not a power of two' % alignment)

        position = self.obj.tell()
        padding = -position % alignment

        if not padding:
            return

        if self.writable:
            self.obj.write(b'\x00' * padding)
        else:
            self.obj.seek(padding, io.SEEK_CUR)

    def get_format(self, format, endianess=None):
        endianess = endianess or self.endianess
        return '%s%s' % ('<' if endianess == Endianess.LITTLE_ENDIAN else '>', format)

    def read(self, size):
        offset = self.obj.tell()
        data = self.obj.read(size)
        if len(data) != size:
            raise EndOfStreamException(
                'wanted %d bytes, only %d available' % (size, len(data)), offset=offset)

        return data

    def read_all(self):
        return self.obj.read()

    def read_struct(self, format, endianess=None):
        '''Read the values described by the struct format: a single value
        is returned as is, more than one as a tuple.'''
        format = self.get_format(format, endianess)
        values = struct.unpack(format, self.read(struct.calcsize(format)))

        return values[0] if len(values) == 1 else values

    def read_array(self, format, count, endianess=None):
        return [self.read_struct(format, endianess) for _ in range(count)]

    def read_byte(self):
        return self.read_struct('B')

    def read_sbyte(self):
        return self.read_struct('b')

    def read_uint16(self):
        return self.read_struct('H')

    def read_int16(self):
        return self.read_struct('h')

    def read_uint32(self):
        return self.read_struct('I')

    def read_int32(self):
        return self.read_struct('i')

    def read_single(self):
        return self.read_struct('f')

    def read_string(self, encoding=None):
        '''Read a zero-terminated string.'''
        encoding = encoding or self.encoding
        offset = self.obj.tell()
        width = _terminator_width(encoding)
        terminator = b'\x00' * width

        chunks = []
        while True:
            unit = self.read(width)
            if unit == terminator:
                break
            chunks.append(unit)

        return self._decode(b''.join(chunks), encoding, offset)

    def read_fixed_string(self, length, encoding=None):
        offset = self.obj.tell()
        return self._decode(self.read(length), encoding or self.encoding, offset)

    def _decode(self, raw, encoding, offset):
        try:
            return raw.decode(encoding)
        except UnicodeError as e:
            raise FormatException('cannot decode %r as %s: %s' % (raw, encoding, e), offset=offset) from e

    def write(self, data):
        return self.obj.write(data)

    def write_struct(self, format, *values, endianess=None):
        format = self.get_format(format, endianess)
        try:
            raw = struct.pack(format, *values)
        except struct.error as e:
            raise LogicException('cannot pack %r with format \'%s\': %s' % (values, format, e)) from e

        return self.obj.write(raw)

    def write_element(self, format, element, endianess=None):
        '''Write a value read by read_struct(): tuples are unpacked.'''
        if isinstance(element, (tuple, list)):
            return self.write_struct(format, *element, endianess=endianess)

        return self.write_struct(format, element, endianess=endianess)

    def write_array(self, format, elements, endianess=None):
        for element in elements:
            self.write_element(format, element, endianess=endianess)

    def write_byte(self, value):
        self.write_struct('B', value)

    def write_sbyte(self, value):
        self.write_struct('b', value)

    def write_uint16(self, value):
        self.write_struct('H', value)

    def write_int16(self, value):
        self.write_struct('h', value)

    def write_uint32(self, value):
        self.write_struct('I', value)

    def write_int32(self, value):
        self.write_struct('i', value)

    def write_single(self, value):
        self.write_struct('f', value)

    def write_string(self, value, encoding=None, terminated=True):
        encoding = encoding or self.encoding
        try:
            raw = value.encode(encoding)
        except UnicodeError as e:
            raise LogicException('cannot encode %r as %s: %s' % (value, encoding, e)) from e

        self.obj.write(raw)
        if terminated:
            self.obj.write(b'\x00' * _terminator_width(encoding))

    def write_padding(self, size):
        self.obj.write(b'\x00' * size)
