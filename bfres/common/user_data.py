from enum import IntEnum

from ..core import ResData
from .. import fields
from ..properties import Dependency, Count


class UserDataType(IntEnum):
    INT32   = 0
    SINGLE  = 1
    STRING  = 2
    WSTRING = 3
    BYTE    = 4


class UserData(ResData):
    '''Named array of values attached by the tools to most of the records.'''
    name   = fields.StringRef()
    _count = fields.StructField('H', equals_to=Count('.value'))
    type   = fields.StructField('B', enum=UserDataType, default=UserDataType.INT32)
    _pad   = fields.Padding(1)
    value  = fields.SelectField('type', {
        UserDataType.INT32: fields.ArrayField('i', n=Dependency('._count')),
        UserDataType.SINGLE: fields.ArrayField('f', n=Dependency('._count')),
        UserDataType.STRING: fields.StringArrayField(n=Dependency('._count'), encoding='ascii'),
        UserDataType.WSTRING: fields.StringArrayField(n=Dependency('._count'), encoding='utf-16-le'),
        UserDataType.BYTE: fields.BytesField(n=Dependency('._count')),
    }, default=UserDataType.INT32)
