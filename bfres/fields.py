"""
A Field describes how a single slot of a record is laid out in the file.

The record unpacks its fields in declaration order: the inline ones store
their value right away while the ones referencing data stored elsewhere
(ReferenceField subclasses) only read their offset and are resolved after
the inline part of the record is complete. This way a list can be declared
at the position of its offset even if its count comes later in the record.
"""
import logging
import struct
from enum import Flag, auto

from .dicts import ResDict
from .enum import Compliant
from .meta import FieldBase
from .properties import Dependency
from .exceptions import FormatException, LogicException


logger = logging.getLogger(__name__)


def resolve_count(n, record, codec):
    return n.resolve(record, codec) if isinstance(n, Dependency) else n


class Field(FieldBase):
    """Base class to subclass from.

    The arguments since/until/when control the presence of the field: the first
    two with respect to the version of the file, the last one with a callable
    taking the record.

    With equals_to the value packed is derived from the record (like the number
    of elements of a list) instead of the attribute itself."""

    deferred = False  # the value is resolved after the inline part of the record
    store = True  # the value is kept as attribute of the record

    def __init__(self, default=None, equals_to=None, since=None, until=None, when=None):
        super().__init__()
        self.name = None
        self.default = default
        self.equals_to = equals_to
        self.since = since
        self.until = until
        self.when = when

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.name})>'

    def is_present(self, record, codec):
        if self.since is not None and codec.version < self.since:
            return False
        if self.until is not None and codec.version >= self.until:
            return False
        if self.when is not None and not self.when(record):
            return False

        return True

    def get_value(self, record, codec):
        '''This is used to update the value before packing'''
        if self.equals_to is None:
            return getattr(record, self.name, None) if self.store else None

        value = self.equals_to.resolve(record, codec)
        if self.store:
            setattr(record, self.name, value)

        return value

    def unpack(self, record, loader):
        raise NotImplementedError(f'method {self.__class__.__name__}.unpack() not implemented')

    def resolve(self, record, loader, raw):
        return raw

    def pack(self, record, saver, value):
        raise NotImplementedError(f'method {self.__class__.__name__}.pack() not implemented')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers and floats to/from bytes, formats with more than one element
    give tuples (like '3f' for a vector).

    The main advantage is the possibility to indicate via the "enum" argument some subclass
    of enum.Enum so to have directly a representation of the integer value of the field itself.
    """

    def __init__(self, format, default=0, enum=None, **kw):
        self.format = format
        self.enum = enum
        super().__init__(default=default, **kw)

    def value_from_default(self):
        if not self.enum or self.default is None:
            return super().value_from_default()

        return self.enum(self.default)

    def _unpack_enum(self, value, loader):
        try:
            return self.enum(value)
        except ValueError:
            if loader.compliant & Compliant.ENUM:
                raise FormatException(
                    f'enum {self.enum.__name__} doesn\'t have element with value 0x{value:x} in it',
                    offset=loader.tell())

            logger.warning(f'enum {self.enum!r} doesn\'t have element with value 0x{value:x} in it')
            return value

    def unpack(self, record, loader):
        value = loader.read_struct(self.format)
        if self.enum:
            value = self._unpack_enum(value, loader)

        return value

    def pack(self, record, saver, value):
        if self.enum and value is not None:
            value = int(value)

        saver.write_element(self.format, value)


class Magic(StructField):
    '''The four characters identifying the main records.'''
    store = False

    def __init__(self, signature, **kw):
        self.signature = signature
        super().__init__('4s', default=signature, **kw)

    def unpack(self, record, loader):
        return loader.check_signature(self.signature)

    def pack(self, record, saver, value):
        saver.write(self.signature)


class Padding(Field):
    store = False

    def __init__(self, size, **kw):
        self.size = size
        super().__init__(**kw)

    def unpack(self, record, loader):
        loader.read(self.size)

    def pack(self, record, saver, value):
        saver.write_padding(self.size)


class ArrayField(Field):
    '''Un/Pack an inline array of struct values.

    You can indicate an explicit number of elements via the parameter named "n"
    or a Dependency from another field of the record.'''

    def __init__(self, format, n, **kw):
        if not isinstance(n, (Dependency, int)):
            raise TypeError('n is \'%s\' must be of the right type' % n.__class__.__name__)

        self.format = format
        self.n = n

        if 'default' not in kw:
            kw['default'] = []
            if isinstance(n, int):
                zero = struct.unpack('<' + format, bytes(struct.calcsize('<' + format)))
                kw['default'] = [zero[0] if len(zero) == 1 else zero] * n

        super().__init__(**kw)

    def unpack(self, record, loader):
        return loader.read_array(self.format, resolve_count(self.n, record, loader))

    def pack(self, record, saver, value):
        if isinstance(self.n, int) and len(value) != self.n:
            raise LogicException(f'field {self.name} must have exactly {self.n} elements, not {len(value)}')

        saver.write_array(self.format, value)


class BytesField(ArrayField):
    '''Inline bytes.'''

    def __init__(self, n, **kw):
        kw.setdefault('default', b'' if isinstance(n, Dependency) else b'\x00' * n)
        super().__init__('B', n, **kw)

    def unpack(self, record, loader):
        return loader.read(resolve_count(self.n, record, loader))

    def pack(self, record, saver, value):
        if isinstance(self.n, int) and len(value) != self.n:
            raise LogicException(f'field {self.name} must have exactly {self.n} bytes, not {len(value)}')

        saver.write(bytes(value))


class SelectField(Field):
    """Allow to select the kind of final field based on another field of the record.
    You need to pass the name of the field to use as key and a dictionary with the mapping
    between its values and the field. You can use Type.DEFAULT as a default.

    Like in the following example where the type of the user data decides what follows

        class UserData(ResData):
            _count = fields.StructField('H', equals_to=Count('.value'))
            type = fields.StructField('B', enum=UserDataType)
            value = fields.SelectField('type', {
                UserDataType.INT32: fields.ArrayField('i', n=Dependency('._count')),
                UserDataType.STRING: fields.StringArrayField(n=Dependency('._count')),
            })
    """
    deferred = True

    class Type(Flag):
        DEFAULT = auto()

    def __init__(self, key, mapping, **kw):
        self._key = key
        self._mapping = mapping

        super().__init__(**kw)

    def value_from_default(self):
        key = self.default if self.default in self._mapping else SelectField.Type.DEFAULT
        field = self._mapping.get(key)

        return field.value_from_default() if field is not None else None

    def select(self, record, exception_class=FormatException):
        key = getattr(record, self._key)
        logger.debug('resolving key \'%s\' to %r' % (self._key, key))

        field = self._mapping.get(key, self._mapping.get(SelectField.Type.DEFAULT))
        if field is None:
            raise exception_class(f'no field for value {key!r} of \'{self._key}\'')

        return field

    def unpack(self, record, loader):
        field = self.select(record)

        return field, field.unpack(record, loader)

    def resolve(self, record, loader, raw):
        field, value = raw

        return field.resolve(record, loader, value) if field.deferred else value

    def pack(self, record, saver, value):
        self.select(record, exception_class=LogicException).pack(record, saver, value)


class ReferenceField(Field):
    '''Field stored as an offset to data living elsewhere in the file: the
    offset is read inline, the data once the inline part of the record is complete.'''
    deferred = True

    def unpack(self, record, loader):
        return loader.read_offset()


class Ref(ReferenceField):
    '''Offset to another record, the same offset always gives the same instance.'''

    def __init__(self, cls, **kw):
        self.cls = cls
        super().__init__(**kw)

    def resolve(self, record, loader, raw):
        return loader.load(self.cls, raw)

    def pack(self, record, saver, value):
        saver.save(value)


class StringRef(ReferenceField):
    '''Offset to a string of the string pool.'''

    def __init__(self, encoding=None, **kw):
        self.encoding = encoding
        super().__init__(**kw)

    def resolve(self, record, loader, raw):
        return loader.load_string(raw, encoding=self.encoding)

    def pack(self, record, saver, value):
        saver.save_string(value, encoding=self.encoding)


class StringArrayField(Field):
    '''Inline array of offsets to strings.'''
    deferred = True

    def __init__(self, n, encoding=None, **kw):
        self.n = n
        self.encoding = encoding
        kw.setdefault('default', [])
        super().__init__(**kw)

    def unpack(self, record, loader):
        return [loader.read_offset() for _ in range(resolve_count(self.n, record, loader))]

    def resolve(self, record, loader, raw):
        return [loader.load_string(offset, encoding=self.encoding) for offset in raw]

    def pack(self, record, saver, value):
        saver.save_strings(value, encoding=self.encoding)


class ListRef(ReferenceField):
    '''Offset to records stored one after the other.'''

    def __init__(self, cls, count, **kw):
        self.cls = cls
        self.count = count
        kw.setdefault('default', [])
        super().__init__(**kw)

    def resolve(self, record, loader, raw):
        return loader.load_list(self.cls, resolve_count(self.count, record, loader), raw)

    def pack(self, record, saver, value):
        saver.save_list(value)


class MirrorListRef(Field):
    '''Offset to the records of a dictionary of the same record laid out as a list:
    the dictionary is enough when unpacking, so we only write it.'''
    store = False

    def __init__(self, source, **kw):
        self.source = source
        super().__init__(**kw)

    def unpack(self, record, loader):
        loader.read_offset()

    def pack(self, record, saver, value):
        saver.save_list(list(self.source.resolve(record, saver)))


class DictRef(ReferenceField):
    '''Offset to a ResDict whose values have type cls (str for strings).'''

    def __init__(self, cls, **kw):
        self.cls = cls
        super().__init__(**kw)

    def value_from_default(self):
        return ResDict(self.cls)

    def resolve(self, record, loader, raw):
        return loader.load_dict(self.cls, raw)

    def pack(self, record, saver, value):
        saver.save_dict(value)


class ArrayRef(ReferenceField):
    '''Offset to an array of struct values, optionally converted with element.'''

    def __init__(self, format, count, element=None, **kw):
        self.format = format
        self.count = count
        self.element = element
        kw.setdefault('default', [])
        super().__init__(**kw)

    def _read(self, loader, count):
        values = loader.read_array(self.format, count)
        if self.element is not None:
            values = [self.element(*_) if isinstance(_, tuple) else self.element(_) for _ in values]

        return values

    def resolve(self, record, loader, raw):
        count = resolve_count(self.count, record, loader)
        values = loader.load_custom(lambda: self._read(loader, count), raw)

        return values if values is not None else self.value_from_default()

    def pack(self, record, saver, value):
        saver.save_custom(value, lambda: saver.write_array(self.format, value))


class StringsRef(ReferenceField):
    '''Offset to an array of offsets to strings.'''

    def __init__(self, count, encoding=None, **kw):
        self.count = count
        self.encoding = encoding
        kw.setdefault('default', [])
        super().__init__(**kw)

    def resolve(self, record, loader, raw):
        count = resolve_count(self.count, record, loader)
        values = loader.load_custom(lambda: loader.load_strings(count, encoding=self.encoding), raw)

        return values if values is not None else []

    def pack(self, record, saver, value):
        saver.save_custom(value, lambda: saver.save_strings(value, encoding=self.encoding))


class BytesRef(ReferenceField):
    '''Offset to size bytes stored together with the records.'''

    def __init__(self, size, **kw):
        self.size = size
        kw.setdefault('default', b'')
        super().__init__(**kw)

    def resolve(self, record, loader, raw):
        size = resolve_count(self.size, record, loader)
        value = loader.load_custom(lambda: loader.read(size), raw)

        return value if value is not None else b''

    def pack(self, record, saver, value):
        saver.save_custom(value, lambda: saver.write(bytes(value)))


class BlockRef(BytesRef):
    '''Offset to raw data stored in the block area at the end of the file,
    aligned to the given alignment or to the one of the file if bigger.'''

    def __init__(self, size, alignment=0, **kw):
        self.alignment = alignment
        super().__init__(size, **kw)

    def pack(self, record, saver, value):
        saver.save_block(value, self.alignment, lambda: saver.write(bytes(value)))


class CustomRef(ReferenceField):
    '''Offset to data read and written by methods of the record itself: the
    reader takes the loader and returns the value, the writer takes the saver
    and the value.

    With an alignment the data goes in the block area.'''

    def __init__(self, reader, writer, alignment=None, **kw):
        self.reader = reader
        self.writer = writer
        self.alignment = alignment
        super().__init__(**kw)

    def resolve(self, record, loader, raw):
        value = loader.load_custom(lambda: getattr(record, self.reader)(loader), raw)

        return value if value is not None else self.value_from_default()

    def pack(self, record, saver, value):
        def _write():
            getattr(record, self.writer)(saver, value)

        if self.alignment is None:
            saver.save_custom(value, _write)
        else:
            saver.save_block(value, self.alignment, _write)


class FileSizeField(Field):
    '''Size of the whole file, known only at the end of saving.'''
    store = False

    def unpack(self, record, loader):
        loader.read_uint32()

    def pack(self, record, saver, value):
        saver.save_field_file_size()


class StringPoolField(Field):
    '''Size of and offset to the string pool, known only at the end of saving.'''
    store = False

    def unpack(self, record, loader):
        loader.read_uint32()
        loader.read_offset()

    def pack(self, record, saver, value):
        saver.save_field_string_pool()
