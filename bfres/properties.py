import logging


class Dependency:
    '''This makes the relation between fields possible.

    The expression is a dotted path resolved starting from the record the
    field belongs to, so that

        class Simple(ResData):
            _count = fields.StructField('H', equals_to=Count('.values'))
            values = fields.ArrayField('I', n=Dependency('._count'))

    reads the number of elements from the record while unpacking and
    writes back the live length while packing.

    If the path ends on a method, it's called without arguments.
    '''
    def __init__(self, expression):
        self.expression = expression
        self.logger = logging.getLogger(__name__)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, record):
        value = record
        for component in self.expression.split('.'):
            if not component:
                continue
            value = getattr(value, component)

        if callable(value):
            value = value()

        return value

    def resolve(self, record, codec=None):
        self.logger.debug('trying to resolve \'%s\' using class \'%s\'' % (
            self.expression,
            self.__class__.__name__,
        ))
        return self.transform(self.resolve_field(record), codec)

    def transform(self, value, codec):
        return value


class Count(Dependency):
    '''Number of elements of a collection, absent collections count as empty.'''

    def transform(self, value, codec):
        return len(value) if value is not None else 0


class Sum(Dependency):
    '''Sum of the number of elements of the named attribute of each element
    of a collection, like the total number of curves of the bone animations.'''

    def __init__(self, expression, attribute):
        super().__init__(expression)
        self.attribute = attribute

    def transform(self, value, codec):
        if value is None:
            return 0

        return sum(len(getattr(_, self.attribute) or ()) for _ in value)


class Constant(Dependency):
    '''Always the same value, like the runtime pointers the files reserve.'''

    def __init__(self, value):
        super().__init__(None)
        self.value = value

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def resolve(self, record, codec=None):
        return self.value


class CurrentIndex(Dependency):
    '''Index of the record being saved inside its dictionary or list.'''

    def __init__(self):
        super().__init__(None)

    def resolve(self, record, codec=None):
        return max(codec.current_index, 0)


class Bits(object):
    '''Property exposing a masked part of an integer attribute, optionally
    converted to an enum.

        class Skeleton(ResData):
            flags = fields.StructField('I')
            scaling_mode = Bits('flags', 0x300, SkeletonScalingMode)
    '''

    def __init__(self, attribute, mask, enum=None):
        self.attribute = attribute
        self.mask = mask
        self.enum = enum

    def __get__(self, instance, owner=None):
        if instance is None:
            return self

        value = int(getattr(instance, self.attribute)) & self.mask

        if self.enum is None:
            return value

        try:
            return self.enum(value)
        except ValueError:
            return value

    def __set__(self, instance, value):
        raw = int(getattr(instance, self.attribute))
        setattr(instance, self.attribute, (raw & ~self.mask) | (int(value) & self.mask))


class Flag(Bits):
    '''Single bit as boolean.'''

    def __init__(self, attribute, mask):
        super().__init__(attribute, mask)

    def __get__(self, instance, owner=None):
        if instance is None:
            return self

        return bool(int(getattr(instance, self.attribute)) & self.mask)

    def __set__(self, instance, value):
        super().__set__(instance, self.mask if value else 0)
