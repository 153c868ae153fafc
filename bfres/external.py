from .core import ResData
from . import fields
from .properties import Dependency, Count


class ExternalFile(ResData):
    '''Arbitrary file embedded in the archive, like shader binaries.'''
    data  = fields.BlockRef(Dependency('._size'))
    _size = fields.StructField('I', equals_to=Count('.data'))
