'''
# Animation curves

Every animation stores its tracks as curves: a list of frames and, for each
frame, the key describing the value. Both can be stored with a reduced
precision indicated by the flags of the curve

    bits    meaning
    0-1     type of the frames (single, 10.5 fixed point, byte)
    2-3     type of the keys (single, signed 16 bits, signed byte)
    4-6     interpolation, that decides how many elements make a key

The values are exposed always as floats.
'''
from collections import namedtuple
from enum import IntEnum

from ..core import ResData
from .. import fields
from ..properties import Count, Bits
from ..exceptions import FormatException


class AnimCurveFrameType(IntEnum):
    SINGLE       = 0
    DECIMAL10X5  = 1
    BYTE         = 2


class AnimCurveKeyType(IntEnum):
    SINGLE = 0 << 2
    INT16  = 1 << 2
    SBYTE  = 2 << 2


class AnimCurveType(IntEnum):
    CUBIC       = 0 << 4
    LINEAR      = 1 << 4
    BAKED_FLOAT = 2 << 4
    STEP_INT    = 4 << 4
    BAKED_INT   = 5 << 4
    STEP_BOOL   = 6 << 4
    BAKED_BOOL  = 7 << 4


# struct format of each frame type, with the conversion to and from float
FRAME_FORMATS = {
    AnimCurveFrameType.SINGLE: ('f', float, float),
    AnimCurveFrameType.DECIMAL10X5: ('H', lambda raw: raw / 32, lambda value: int(value * 32)),
    AnimCurveFrameType.BYTE: ('B', float, int),
}

KEY_FORMATS = {
    AnimCurveKeyType.SINGLE: ('f', float),
    AnimCurveKeyType.INT16: ('h', int),
    AnimCurveKeyType.SBYTE: ('b', int),
}


# a value not animated: the offset of the field in the animated record and its raw 32 bits
AnimConstant = namedtuple('AnimConstant', ['anim_data_offset', 'value'])


class AnimCurve(ResData):
    flags            = fields.StructField('H')
    _count           = fields.StructField('H', equals_to=Count('.frames'))
    anim_data_offset = fields.StructField('I')
    start_frame      = fields.StructField('f')
    end_frame        = fields.StructField('f')
    scale            = fields.StructField('f', default=1.0)
    offset           = fields.StructField('I')  # kept raw, it can be an integer or a float
    delta            = fields.StructField('f', since=0x03040000)
    frames           = fields.CustomRef('read_frames', 'write_frames', default=[])
    keys             = fields.CustomRef('read_keys', 'write_keys', default=[])

    frame_type = Bits('flags', 0x3, AnimCurveFrameType)
    key_type = Bits('flags', 0xc, AnimCurveKeyType)
    curve_type = Bits('flags', 0x70, AnimCurveType)

    @property
    def elements_per_key(self):
        if self.curve_type == AnimCurveType.CUBIC:
            return 4
        if self.curve_type == AnimCurveType.LINEAR:
            return 2
        return 1

    def _frame_format(self):
        try:
            return FRAME_FORMATS[self.frame_type]
        except KeyError:
            raise FormatException(f'invalid frame type {self.frame_type!r}') from None

    def _key_format(self):
        try:
            return KEY_FORMATS[self.key_type]
        except KeyError:
            raise FormatException(f'invalid key type {self.key_type!r}') from None

    def read_frames(self, loader):
        format, decode, _ = self._frame_format()
        return [decode(_) for _ in loader.read_array(format, self._count)]

    def write_frames(self, saver, frames):
        format, _, encode = self._frame_format()
        saver.write_array(format, [encode(_) for _ in frames])

    def read_keys(self, loader):
        format, convert = self._key_format()
        elements = self.elements_per_key

        return [
            [convert(_) for _ in loader.read_array(format, elements)] for index in range(self._count)
        ]

    def write_keys(self, saver, keys):
        format, convert = self._key_format()
        for key in keys:
            saver.write_array(format, [convert(_) for _ in key])
