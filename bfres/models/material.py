'''
# Materials

The material describes how a shape is rendered: the textures it samples
(referenced by name and possibly by the texture record itself), the values
of the parameters of the shader and the state of the pipeline.
'''
import math
from enum import IntEnum, IntFlag

from ..core import ResData
from .. import fields
from ..common import UserData
from ..gx2 import TexSampler
from ..textures import Texture
from ..properties import Dependency, Count, Constant, CurrentIndex


class MaterialFlags(IntFlag):
    NONE    = 0
    VISIBLE = 1 << 0


class RenderInfoType(IntEnum):
    INT32  = 0
    SINGLE = 1
    STRING = 2


class RenderInfo(ResData):
    _count = fields.StructField('H', equals_to=Count('.value'))
    type   = fields.StructField('B', enum=RenderInfoType, default=RenderInfoType.INT32)
    _pad   = fields.Padding(1)
    name   = fields.StringRef()
    value  = fields.SelectField('type', {
        RenderInfoType.INT32: fields.ArrayField('i', n=Dependency('._count')),
        RenderInfoType.SINGLE: fields.ArrayField('f', n=Dependency('._count')),
        RenderInfoType.STRING: fields.StringArrayField(n=Dependency('._count')),
    }, default=RenderInfoType.INT32)

    def pack(self, saver):
        super().pack(saver)
        # the numeric values are always followed by an empty word
        if self.type != RenderInfoType.STRING:
            saver.write_padding(4)


class RenderState(ResData):
    flags           = fields.StructField('I')
    polygon_control = fields.StructField('I')
    depth_control   = fields.StructField('I')
    alpha_control   = fields.StructField('I')
    alpha_ref_value = fields.StructField('f')
    color_control   = fields.StructField('I')
    blend_target    = fields.StructField('I')
    blend_control   = fields.StructField('I')
    blend_color     = fields.StructField('4f', default=(0.0, 0.0, 0.0, 0.0))


class Sampler(ResData):
    values  = fields.ArrayField('I', 3)
    _handle = fields.StructField('I', equals_to=Constant(0))
    name    = fields.StringRef()
    index   = fields.StructField('B', equals_to=CurrentIndex())
    _pad    = fields.Padding(3)

    @property
    def tex_sampler(self):
        '''Decoded view of the three words of the sampler.'''
        return TexSampler(self.values)

    @tex_sampler.setter
    def tex_sampler(self, value):
        self.values = list(value.values)


class ShaderAssign(ResData):
    shader_archive_name = fields.StringRef()
    shading_model_name  = fields.StringRef()
    revision            = fields.StructField('I')
    _num_attrib_assign  = fields.StructField('B', equals_to=Count('.attrib_assigns'))
    _num_sampler_assign = fields.StructField('B', equals_to=Count('.sampler_assigns'))
    _num_shader_option  = fields.StructField('H', equals_to=Count('.shader_options'))
    attrib_assigns      = fields.DictRef(str)
    sampler_assigns     = fields.DictRef(str)
    shader_options      = fields.DictRef(str)


class ShaderParamType(IntEnum):
    BOOL       = 0x00
    BOOL2      = 0x01
    BOOL3      = 0x02
    BOOL4      = 0x03
    INT        = 0x04
    INT2       = 0x05
    INT3       = 0x06
    INT4       = 0x07
    UINT       = 0x08
    UINT2      = 0x09
    UINT3      = 0x0a
    UINT4      = 0x0b
    FLOAT      = 0x0c
    FLOAT2     = 0x0d
    FLOAT3     = 0x0e
    FLOAT4     = 0x0f
    RESERVED2  = 0x10
    FLOAT2X2   = 0x11
    FLOAT2X3   = 0x12
    FLOAT2X4   = 0x13
    RESERVED3  = 0x14
    FLOAT3X2   = 0x15
    FLOAT3X3   = 0x16
    FLOAT3X4   = 0x17
    RESERVED4  = 0x18
    FLOAT4X2   = 0x19
    FLOAT4X3   = 0x1a
    FLOAT4X4   = 0x1b
    SRT2D      = 0x1c
    SRT3D      = 0x1d
    TEX_SRT    = 0x1e
    TEX_SRT_EX = 0x1f


SRT_SIZES = {
    ShaderParamType.SRT2D: 20,
    ShaderParamType.SRT3D: 36,
    ShaderParamType.TEX_SRT: 24,
    ShaderParamType.TEX_SRT_EX: 28,
}


def shader_param_size(type):
    '''Size in bytes of the value of a shader parameter of the given type.'''
    type = int(type)
    if type <= ShaderParamType.FLOAT4:
        return 4 * ((type & 0x3) + 1)
    if type <= ShaderParamType.FLOAT4X4:
        columns = (type & 0x3) + 1
        rows = ((type - ShaderParamType.RESERVED2) >> 2) + 2
        return 4 * columns * rows

    return SRT_SIZES[type]


class ShaderParam(ResData):
    type              = fields.StructField('B', enum=ShaderParamType, default=ShaderParamType.FLOAT)
    _data_size        = fields.StructField('B', equals_to=Dependency('.compute_data_size'), since=0x03030000)
    _pad              = fields.Padding(1, until=0x03030000)
    data_offset       = fields.StructField('H')
    _uniform_offset   = fields.StructField('i', equals_to=Constant(-1))
    _callback_pointer = fields.StructField('I', equals_to=Constant(0), since=0x03030000)
    depended_index    = fields.StructField('H', since=0x03030000)
    depend_index      = fields.StructField('H', since=0x03030000)
    name              = fields.StringRef()

    def compute_data_size(self):
        if not isinstance(self.type, ShaderParamType):
            return self._data_size

        return shader_param_size(self.type)


class TextureRef(ResData):
    name    = fields.StringRef()
    texture = fields.Ref(Texture)


class Material(ResData):
    magic                       = fields.Magic(b'FMAT')
    name                        = fields.StringRef()
    flags                       = fields.StructField('I', enum=MaterialFlags, default=MaterialFlags.VISIBLE)
    index                       = fields.StructField('H', equals_to=CurrentIndex())
    _num_render_info            = fields.StructField('H', equals_to=Count('.render_infos'))
    _num_sampler                = fields.StructField('B', equals_to=Count('.samplers'))
    _num_texture_ref            = fields.StructField('B', equals_to=Count('.texture_refs'))
    _num_shader_param           = fields.StructField('H', equals_to=Count('.shader_params'))
    _num_shader_param_volatile  = fields.StructField('H', equals_to=Count('.volatile_flags'))
    _size_param_source          = fields.StructField('H', equals_to=Count('.shader_param_data'))
    _size_param_raw             = fields.StructField('H', equals_to=Constant(0))
    _num_user_data              = fields.StructField('H', equals_to=Count('.user_data'))
    render_infos                = fields.DictRef(RenderInfo)
    render_state                = fields.Ref(RenderState)
    shader_assign               = fields.Ref(ShaderAssign)
    texture_refs                = fields.ListRef(TextureRef, Dependency('._num_texture_ref'))
    _sampler_list               = fields.MirrorListRef(Dependency('.samplers.values'))
    samplers                    = fields.DictRef(Sampler)
    _shader_param_list          = fields.MirrorListRef(Dependency('.shader_params.values'))
    shader_params               = fields.DictRef(ShaderParam)
    shader_param_data           = fields.BytesRef(Dependency('._size_param_source'))
    user_data                   = fields.DictRef(UserData)
    # a bit for each parameter
    volatile_flags              = fields.BytesRef(Dependency('._volatile_flags_size'))
    _user_pointer               = fields.StructField('I', equals_to=Constant(0))

    def _volatile_flags_size(self):
        return math.ceil(self._num_shader_param / 8)
