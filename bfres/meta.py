import copy
import logging
from enum import Enum, auto


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()


class FieldBase(object):

    def contribute_to_record(self, cls, name):
        if name in cls._meta.field_map:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')

        self.name = name
        cls._meta.add(name, self)

    def value_from_default(self):
        return copy.deepcopy(self.default)


class Meta(object):
    """Class containing metadata about the record"""

    def __init__(self):
        self.fields = []
        self.field_map = {}

    def add(self, name, field):
        self.fields.append(name)
        self.field_map[name] = field


class MetaRecord(type):

    def __new__(cls, names, bases, attrs):
        '''The fields are removed from the class attributes and stored in order
        into the _meta attribute, the instance will keep the plain values.'''
        fields = [(name, value) for name, value in attrs.items() if isinstance(value, FieldBase)]

        new_attrs = {name: value for name, value in attrs.items() if not isinstance(value, FieldBase)}
        new_cls = super(MetaRecord, cls).__new__(cls, names, bases, new_attrs)

        new_cls._meta = Meta()

        # handle inheritance
        parents = [_ for _ in bases if isinstance(_, MetaRecord)]
        for parent in parents:
            for field_name in parent._meta.fields:
                new_cls._meta.add(field_name, parent._meta.field_map[field_name])

        for field_name, field in fields:
            field.contribute_to_record(new_cls, field_name)

        new_cls.logger = logging.getLogger(new_cls.__module__)

        return new_cls
