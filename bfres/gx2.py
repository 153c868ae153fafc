"""
# GX2 enumerations

Values of the graphics library of the console stored verbatim in the
records; the values not listed here are kept as plain integers.
"""
from enum import IntEnum, IntFlag

from .meta import Endianess


class GX2PrimitiveType(IntEnum):
    POINTS                   = 0x01
    LINES                    = 0x02
    LINE_STRIP               = 0x03
    TRIANGLES                = 0x04
    TRIANGLE_FAN             = 0x05
    TRIANGLE_STRIP           = 0x06
    LINES_ADJACENCY          = 0x0a
    LINE_STRIP_ADJACENCY     = 0x0b
    TRIANGLES_ADJACENCY      = 0x0c
    TRIANGLE_STRIP_ADJACENCY = 0x0d
    RECTS                    = 0x11
    LINE_LOOP                = 0x12
    QUADS                    = 0x13
    QUAD_STRIP               = 0x14
    TESSELLATE_LINES         = 0x82
    TESSELLATE_LINE_STRIP    = 0x83
    TESSELLATE_TRIANGLES     = 0x84
    TESSELLATE_TRIANGLE_STRIP = 0x86
    TESSELLATE_QUADS         = 0x93
    TESSELLATE_QUAD_STRIP    = 0x94


class GX2IndexFormat(IntEnum):
    UINT16_LITTLE_ENDIAN = 0
    UINT32_LITTLE_ENDIAN = 1
    UINT16               = 4
    UINT32               = 9


# struct format and byte order of each index format
INDEX_FORMATS = {
    GX2IndexFormat.UINT16_LITTLE_ENDIAN: ('H', Endianess.LITTLE_ENDIAN),
    GX2IndexFormat.UINT32_LITTLE_ENDIAN: ('I', Endianess.LITTLE_ENDIAN),
    GX2IndexFormat.UINT16: ('H', Endianess.BIG_ENDIAN),
    GX2IndexFormat.UINT32: ('I', Endianess.BIG_ENDIAN),
}


class GX2AttribFormat(IntEnum):
    FORMAT_8_UNORM              = 0x000
    FORMAT_8_UINT               = 0x100
    FORMAT_8_SNORM              = 0x200
    FORMAT_8_SINT               = 0x300
    FORMAT_8_UINT_TO_SINGLE     = 0x800
    FORMAT_8_SINT_TO_SINGLE     = 0xa00
    FORMAT_4_4_UNORM            = 0x001
    FORMAT_16_UNORM             = 0x002
    FORMAT_16_UINT              = 0x102
    FORMAT_16_SNORM             = 0x202
    FORMAT_16_SINT              = 0x302
    FORMAT_16_SINGLE            = 0x803
    FORMAT_8_8_UNORM            = 0x004
    FORMAT_8_8_UINT             = 0x104
    FORMAT_8_8_SNORM            = 0x204
    FORMAT_8_8_SINT             = 0x304
    FORMAT_32_UINT              = 0x105
    FORMAT_32_SINT              = 0x305
    FORMAT_32_SINGLE            = 0x806
    FORMAT_16_16_UNORM          = 0x007
    FORMAT_16_16_UINT           = 0x107
    FORMAT_16_16_SNORM          = 0x207
    FORMAT_16_16_SINT           = 0x307
    FORMAT_16_16_SINGLE         = 0x808
    FORMAT_10_11_11_SINGLE      = 0x809
    FORMAT_8_8_8_8_UNORM        = 0x00a
    FORMAT_8_8_8_8_UINT         = 0x10a
    FORMAT_8_8_8_8_SNORM        = 0x20a
    FORMAT_8_8_8_8_SINT         = 0x30a
    FORMAT_10_10_10_2_UNORM     = 0x00b
    FORMAT_10_10_10_2_SNORM     = 0x20b
    FORMAT_32_32_UINT           = 0x10c
    FORMAT_32_32_SINT           = 0x30c
    FORMAT_32_32_SINGLE         = 0x80d
    FORMAT_16_16_16_16_UNORM    = 0x00e
    FORMAT_16_16_16_16_UINT     = 0x10e
    FORMAT_16_16_16_16_SNORM    = 0x20e
    FORMAT_16_16_16_16_SINT     = 0x30e
    FORMAT_16_16_16_16_SINGLE   = 0x80f
    FORMAT_32_32_32_UINT        = 0x110
    FORMAT_32_32_32_SINT        = 0x310
    FORMAT_32_32_32_SINGLE      = 0x811
    FORMAT_32_32_32_32_UINT     = 0x112
    FORMAT_32_32_32_32_SINT     = 0x312
    FORMAT_32_32_32_32_SINGLE   = 0x813


class GX2SurfaceDim(IntEnum):
    DIM_1D             = 0
    DIM_2D             = 1
    DIM_3D             = 2
    DIM_CUBE           = 3
    DIM_1D_ARRAY       = 4
    DIM_2D_ARRAY       = 5
    DIM_2D_MSAA        = 6
    DIM_2D_MSAA_ARRAY  = 7


class GX2SurfaceFormat(IntEnum):
    INVALID                   = 0x000
    TC_R8_UNORM               = 0x001
    TC_R8_UINT                = 0x101
    TC_R8_SNORM               = 0x201
    TC_R8_SINT                = 0x301
    T_R4_G4_UNORM             = 0x002
    TCD_R16_UNORM             = 0x005
    TC_R16_FLOAT              = 0x806
    TC_R8_G8_UNORM            = 0x007
    TC_R8_G8_SNORM            = 0x207
    TCS_R5_G6_B5_UNORM        = 0x008
    TC_R5_G5_B5_A1_UNORM      = 0x00a
    TC_R4_G4_B4_A4_UNORM      = 0x00b
    TC_A1_B5_G5_R5_UNORM      = 0x00c
    TC_R32_FLOAT              = 0x80e
    TC_R16_G16_FLOAT          = 0x810
    TC_R11_G11_B10_FLOAT      = 0x816
    TCS_R10_G10_B10_A2_UNORM  = 0x019
    TCS_R8_G8_B8_A8_UNORM     = 0x01a
    TCS_R8_G8_B8_A8_SRGB      = 0x41a
    TC_R16_G16_B16_A16_FLOAT  = 0x81f
    TC_R32_G32_B32_A32_FLOAT  = 0x823
    T_BC1_UNORM               = 0x031
    T_BC1_SRGB                = 0x431
    T_BC2_UNORM               = 0x032
    T_BC2_SRGB                = 0x432
    T_BC3_UNORM               = 0x033
    T_BC3_SRGB                = 0x433
    T_BC4_UNORM               = 0x034
    T_BC4_SNORM               = 0x234
    T_BC5_UNORM               = 0x035
    T_BC5_SNORM               = 0x235


class GX2AAMode(IntEnum):
    MODE_1X = 0
    MODE_2X = 1
    MODE_4X = 2
    MODE_8X = 3


class GX2SurfaceUse(IntFlag):
    TEXTURE      = 1 << 0
    COLOR_BUFFER = 1 << 1
    DEPTH_BUFFER = 1 << 2
    SCAN_BUFFER  = 1 << 3


class GX2TileMode(IntEnum):
    DEFAULT           = 0
    LINEAR_ALIGNED    = 1
    TILED_1D_THIN1    = 2
    TILED_1D_THICK    = 3
    TILED_2D_THIN1    = 4
    TILED_2D_THIN2    = 5
    TILED_2D_THIN4    = 6
    TILED_2D_THICK    = 7
    TILED_2B_THIN1    = 8
    TILED_2B_THIN2    = 9
    TILED_2B_THIN4    = 10
    TILED_2B_THICK    = 11
    TILED_3D_THIN1    = 12
    TILED_3D_THICK    = 13
    TILED_3B_THIN1    = 14
    TILED_3B_THICK    = 15
    LINEAR_SPECIAL    = 16


class GX2CompSel(IntEnum):
    R    = 0
    G    = 1
    B    = 2
    A    = 3
    ZERO = 4
    ONE  = 5


class GX2TexClamp(IntEnum):
    WRAP                    = 0
    MIRROR                  = 1
    CLAMP                   = 2
    MIRROR_ONCE             = 3
    CLAMP_HALF_BORDER       = 4
    MIRROR_ONCE_HALF_BORDER = 5
    CLAMP_BORDER            = 6
    MIRROR_ONCE_BORDER      = 7


class GX2TexXYFilterType(IntEnum):
    POINT    = 0
    BILINEAR = 1


class GX2TexZFilterType(IntEnum):
    USE_XY = 0
    POINT  = 1
    LINEAR = 2


class GX2TexMipFilterType(IntEnum):
    NO_MIP = 0
    POINT  = 1
    LINEAR = 2


class GX2TexAnisoRatio(IntEnum):
    RATIO_1_TO_1  = 0
    RATIO_2_TO_1  = 1
    RATIO_4_TO_1  = 2
    RATIO_8_TO_1  = 3
    RATIO_16_TO_1 = 4


class GX2TexBorderType(IntEnum):
    CLEAR_BLACK  = 0
    SOLID_BLACK  = 1
    SOLID_WHITE  = 2
    USE_REGISTER = 3


class GX2CompareFunction(IntEnum):
    NEVER            = 0
    LESS             = 1
    EQUAL            = 2
    LESS_OR_EQUAL    = 3
    GREATER          = 4
    NOT_EQUAL        = 5
    GREATER_OR_EQUAL = 6
    ALWAYS           = 7


def _decode(value, bit, count):
    return (value >> bit) & ((1 << count) - 1)


def _encode(value, field, bit, count):
    mask = ((1 << count) - 1) << bit
    return (value & ~mask & 0xffffffff) | ((int(field) << bit) & mask)


class _SamplerBits(object):
    '''Bits of one of the three words of the sampler register.'''

    def __init__(self, word, bit, count, enum=None):
        self.word = word
        self.bit = bit
        self.count = count
        self.enum = enum

    def __get__(self, instance, owner=None):
        if instance is None:
            return self

        value = _decode(instance.values[self.word], self.bit, self.count)
        return self.enum(value) if self.enum else value

    def __set__(self, instance, value):
        instance.values[self.word] = _encode(instance.values[self.word], value, self.bit, self.count)


class TexSampler(object):
    '''View over the three words of the GX2 sampler register.'''

    clamp_x = _SamplerBits(0, 0, 3, GX2TexClamp)
    clamp_y = _SamplerBits(0, 3, 3, GX2TexClamp)
    clamp_z = _SamplerBits(0, 6, 3, GX2TexClamp)
    mag_filter = _SamplerBits(0, 9, 2, GX2TexXYFilterType)
    min_filter = _SamplerBits(0, 12, 2, GX2TexXYFilterType)
    z_filter = _SamplerBits(0, 15, 2, GX2TexZFilterType)
    mip_filter = _SamplerBits(0, 17, 2, GX2TexMipFilterType)
    max_anisotropic_ratio = _SamplerBits(0, 19, 3, GX2TexAnisoRatio)
    border_type = _SamplerBits(0, 22, 2, GX2TexBorderType)
    depth_compare_func = _SamplerBits(0, 26, 3, GX2CompareFunction)

    def __init__(self, values=None):
        # the list is shared, not copied
        self.values = values if values is not None else [0, 0, 0]

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, ', '.join('0x%08x' % _ for _ in self.values))

    def __eq__(self, other):
        return isinstance(other, TexSampler) and self.values == other.values

    # the levels of detail are fixed point numbers with 6 fractional bits

    @property
    def min_lod(self):
        return _decode(self.values[1], 0, 10) / 64

    @min_lod.setter
    def min_lod(self, value):
        self.values[1] = _encode(self.values[1], int(min(max(value, 0), 13) * 64), 0, 10)

    @property
    def max_lod(self):
        return _decode(self.values[1], 10, 10) / 64

    @max_lod.setter
    def max_lod(self, value):
        self.values[1] = _encode(self.values[1], int(min(max(value, 0), 13) * 64), 10, 10)

    @property
    def lod_bias(self):
        raw = _decode(self.values[1], 20, 12)
        # sign extension of the 12 bits
        if raw & 0x800:
            raw -= 0x1000
        return raw / 64

    @lod_bias.setter
    def lod_bias(self, value):
        self.values[1] = _encode(self.values[1], int(min(max(value, -32), 31.984375) * 64) & 0xfff, 20, 12)

    @property
    def depth_compare_enabled(self):
        return bool(self.values[2] & (1 << 30))

    @depth_compare_enabled.setter
    def depth_compare_enabled(self, value):
        self.values[2] = (self.values[2] | (1 << 30)) if value else (self.values[2] & ~(1 << 30))
