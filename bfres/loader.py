"""
# Loading of resource files

Every field pointing elsewhere in the file stores a signed 32 bits offset
relative to the end of the field itself, zero meaning nothing. The loader
resolves them with temporary seeks so that the caller doesn't lose its
position, and keeps a map from offset to record so that the same record
referenced from different places becomes the same instance.
"""
import logging

from .core import OFFSET_BIAS
from .dicts import ResDict
from .enum import Compliant
from .meta import Endianess
from .streams import Stream
from .exceptions import FormatException, LogicException, MagicException


logger = logging.getLogger(__name__)


class ResFileLoader(Stream):
    '''Load the records of the given ResFile from source; the instance is
    good for a single call of execute().'''

    def __init__(self, res_file, source, encoding='ascii', leave_open=False, compliant=Compliant.NONE):
        super().__init__(source, flags='rb', endianess=Endianess.BIG_ENDIAN, encoding=encoding, leave_open=leave_open)
        self.res_file = res_file
        self.compliant = compliant
        self._data_map = {}

    @property
    def version(self):
        return self.res_file.version

    def execute(self):
        logger.debug('loading %s' % self.res_file.__class__.__name__)
        self.res_file.unpack(self)

        return self.res_file

    def read_offset(self):
        '''Read an offset returning the absolute position it points to, 0 if absent.'''
        position = self.tell()
        value = self.read_int32()
        if not value:
            return 0

        target = position + OFFSET_BIAS + value
        if target < 0:
            raise FormatException('offset %d points before the start of the file' % value, offset=position)

        return target

    def check_signature(self, expected):
        offset = self.tell()
        actual = self.read(len(expected))
        if actual != expected:
            raise MagicException(expected, actual, offset=offset)

        return actual

    def _read_res_data(self, cls):
        '''Always unpack the record at the actual position (so that the position
        moves after it) but return the instance already created for this offset
        if any.'''
        offset = self.tell()

        try:
            instance = cls()
        except TypeError as e:
            raise LogicException(f'{cls.__name__} can\'t be created without arguments', offset=offset) from e

        instance.unpack(self)

        existing = self._data_map.get(offset)
        if existing is None:
            self._data_map[offset] = instance
            return instance

        if not isinstance(existing, cls):
            raise FormatException(
                f'{cls.__name__} at the same offset of a {existing.__class__.__name__}', offset=offset)

        logger.debug('reusing %s at 0x%x', cls.__name__, offset)

        return existing

    def load(self, cls, offset=None):
        '''Load the record of type cls at the offset read from the actual position
        (if not given explicitly); None if the offset is zero.'''
        if offset is None:
            offset = self.read_offset()
        if not offset:
            return None

        with self.temporary_seek(offset):
            return self._read_res_data(cls)

    def load_list(self, cls, count, offset=None):
        if offset is None:
            offset = self.read_offset()

        values = []
        if not offset or not count:
            return values

        with self.temporary_seek(offset):
            for _ in range(count):
                values.append(self._read_res_data(cls))

        return values

    def load_dict(self, cls, offset=None):
        if offset is None:
            offset = self.read_offset()

        values = ResDict(cls)
        if not offset:
            return values

        with self.temporary_seek(offset):
            values.unpack(self)

        return values

    def load_string(self, offset=None, encoding=None):
        if offset is None:
            offset = self.read_offset()
        if not offset:
            return None

        with self.temporary_seek(offset):
            return self.read_string(encoding)

    def load_strings(self, count, encoding=None):
        '''Read count offsets from the actual position and the strings they point to.'''
        offsets = [self.read_offset() for _ in range(count)]

        return [self.load_string(_, encoding=encoding) for _ in offsets]

    def load_custom(self, callback, offset=None):
        '''Call callback at the offset and return its value, None if the offset is zero.'''
        if offset is None:
            offset = self.read_offset()
        if not offset:
            return None

        with self.temporary_seek(offset):
            return callback()
