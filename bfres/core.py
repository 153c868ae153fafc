"""
Core module for the abstraction of the records of a resource file

"""
from typing import Tuple, List

from .fields import Field
from .meta import MetaRecord
from .exceptions import ResException


# offsets count from the end of the 32 bits field that stores them
OFFSET_BIAS = 4


class ResData(metaclass=MetaRecord):
    """
    Base class of the records: the subclasses declare their fields in the
    same order they are laid out in the file and the unpack()/pack() here
    walk them using the primitives of the loader and of the saver.

        class SubMesh(ResData):
            offset = fields.StructField('I')
            count = fields.StructField('I')

    Every field is an attribute of the instance and can be passed as
    keyword argument to the constructor; the ones starting with an underscore
    are derived from the others when packing.
    """

    def __init__(self, **kwargs):
        for field_name, field in self.get_fields():
            if field.store:
                setattr(self, field_name, field.value_from_default())

        for name, value in kwargs.items():
            if name not in self._meta.field_map and not hasattr(self.__class__, name):
                raise AttributeError(f'{self.__class__.__name__} has no field named \'{name}\'')
            setattr(self, name, value)

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, field) for each field.'''
        return [(_, self._meta.field_map[_]) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            if field_name.startswith('_') or not field.store or field.deferred:
                continue
            msg.append('%s=%r' % (field_name, getattr(self, field_name)))

        if 'name' in self._meta.field_map:
            msg.insert(0, 'name=%r' % self.name)

        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def _add_context(self, e, field_name):
        e.chain.append('%s.%s' % (self.__class__.__name__, field_name))

    def unpack(self, loader):
        '''Populate the instance reading from the actual position of the loader.

        The inline fields are read first, in order; the fields referencing
        other data are resolved at the end with temporary seeks so that a
        count can follow the offset it belongs to.'''
        deferred = []
        for field_name, field in self.get_fields():
            if not field.is_present(self, loader):
                continue

            self.logger.debug('unpacking %s.%s at 0x%x', self.__class__.__name__, field_name, loader.tell())
            try:
                value = field.unpack(self, loader)
            except ResException as e:
                self._add_context(e, field_name)
                raise

            if field.deferred:
                deferred.append((field_name, field, value))
            elif field.store:
                setattr(self, field_name, value)

        for field_name, field, raw in deferred:
            try:
                value = field.resolve(self, loader, raw)
            except ResException as e:
                self._add_context(e, field_name)
                raise

            setattr(self, field_name, value)

        self.post_unpack(loader)

    def post_unpack(self, loader):
        pass

    def pack(self, saver):
        '''Write the instance at the actual position of the saver: the data
        referenced by offsets is queued and written later by the saver.'''
        for field_name, field in self.get_fields():
            if not field.is_present(self, saver):
                continue

            self.logger.debug('packing %s.%s at 0x%x', self.__class__.__name__, field_name, saver.tell())
            try:
                field.pack(self, saver, field.get_value(self, saver))
            except ResException as e:
                self._add_context(e, field_name)
                raise
