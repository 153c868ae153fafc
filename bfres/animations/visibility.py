'''
# Visibility animations

Turn on and off bones or materials: the base values are booleans packed
eight per byte, least significant bit first.
'''
import math
from enum import IntEnum

from bitstring import BitArray

from ..core import ResData
from .. import fields
from ..common import AnimCurve, UserData
from ..models import Model
from ..properties import Dependency, Count, Bits, Flag


class VisibilityAnimType(IntEnum):
    BONE     = 0 << 8
    MATERIAL = 1 << 8


def unpack_booleans(data, count):
    bits = BitArray()
    for byte in data:
        chunk = BitArray(uint=byte, length=8)
        chunk.reverse()
        bits.append(chunk)

    return [bool(_) for _ in bits[:count]]


def pack_booleans(values):
    bits = BitArray([bool(_) for _ in values])
    padding = -len(bits) % 8
    if padding:
        bits.append(BitArray([False] * padding))

    data = bytearray()
    for start in range(0, len(bits), 8):
        chunk = bits[start:start + 8]
        chunk.reverse()
        data.append(chunk.uint)

    return bytes(data)


class VisibilityAnim(ResData):
    magic          = fields.Magic(b'FVIS')
    name           = fields.StringRef()
    path           = fields.StringRef()
    flags          = fields.StructField('H')
    _num_user_data = fields.StructField('H', equals_to=Count('.user_data'))
    frame_count    = fields.StructField('i')
    _num_anim      = fields.StructField('H', equals_to=Count('.names'))
    _num_curve     = fields.StructField('H', equals_to=Count('.curves'))
    baked_size     = fields.StructField('I')
    bind_model     = fields.Ref(Model)
    bind_indices   = fields.ArrayRef('H', Dependency('._num_anim'))
    names          = fields.StringsRef(Dependency('._num_anim'))
    curves         = fields.ListRef(AnimCurve, Dependency('._num_curve'))
    base_data      = fields.CustomRef('read_base_data', 'write_base_data', default=[])
    user_data      = fields.DictRef(UserData)

    baked = Flag('flags', 1 << 0)
    looping = Flag('flags', 1 << 2)
    type = Bits('flags', 0x100, VisibilityAnimType)

    def read_base_data(self, loader):
        return unpack_booleans(loader.read(math.ceil(self._num_anim / 8)), self._num_anim)

    def write_base_data(self, saver, values):
        saver.write(pack_booleans(values))
