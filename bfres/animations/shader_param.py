from enum import IntFlag

from ..core import ResData
from .. import fields
from ..common import AnimCurve, AnimConstant, UserData
from ..models import Model
from ..properties import Dependency, Count, Sum, Flag


class ShaderParamAnimFlags(IntFlag):
    NONE        = 0
    BAKED_CURVE = 1 << 0
    LOOPING     = 1 << 2


class ParamAnimInfo(ResData):
    '''Where the curves and the constants of a parameter start.'''
    begin_curve       = fields.StructField('H')
    float_curve_count = fields.StructField('H')
    int_curve_count   = fields.StructField('H')
    begin_constant    = fields.StructField('H')
    constant_count    = fields.StructField('H')
    sub_bind_index    = fields.StructField('H')
    name              = fields.StringRef()


class ShaderParamMatAnim(ResData):
    _num_anim_param  = fields.StructField('H', equals_to=Count('.param_anim_infos'))
    _num_curve       = fields.StructField('H', equals_to=Count('.curves'))
    _num_constant    = fields.StructField('H', equals_to=Count('.constants'))
    _pad             = fields.Padding(2)
    begin_curve      = fields.StructField('i')
    begin_param_anim = fields.StructField('i')
    name             = fields.StringRef()
    param_anim_infos = fields.ListRef(ParamAnimInfo, Dependency('._num_anim_param'))
    curves           = fields.ListRef(AnimCurve, Dependency('._num_curve'))
    constants        = fields.ArrayRef('II', Dependency('._num_constant'), element=AnimConstant)


class ShaderParamAnim(ResData):
    '''Animation of the shader parameters of the materials of a model, the
    same layout is used for the color and the texture SRT animations.'''
    magic                  = fields.Magic(b'FSHU')
    name                   = fields.StringRef()
    path                   = fields.StringRef()
    flags                  = fields.StructField('I', enum=ShaderParamAnimFlags, default=ShaderParamAnimFlags.NONE)
    frame_count            = fields.StructField('i')
    _num_mat_anim          = fields.StructField('H', equals_to=Count('.shader_param_mat_anims'))
    _num_user_data         = fields.StructField('H', equals_to=Count('.user_data'))
    _num_param_anim        = fields.StructField('i', equals_to=Sum('.shader_param_mat_anims', 'param_anim_infos'))
    _num_curve             = fields.StructField('i', equals_to=Sum('.shader_param_mat_anims', 'curves'))
    baked_size             = fields.StructField('I')
    bind_model             = fields.Ref(Model)
    bind_indices           = fields.ArrayRef('H', Dependency('._num_mat_anim'))
    shader_param_mat_anims = fields.ListRef(ShaderParamMatAnim, Dependency('._num_mat_anim'))
    user_data              = fields.DictRef(UserData)

    baked = Flag('flags', ShaderParamAnimFlags.BAKED_CURVE)
    looping = Flag('flags', ShaderParamAnimFlags.LOOPING)
