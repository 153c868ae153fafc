from enum import IntFlag

from ..core import ResData
from .. import fields
from ..common import AnimCurve, UserData
from ..models import Model, TextureRef
from ..properties import Dependency, Count, Sum, Flag


class TexPatternAnimFlags(IntFlag):
    NONE        = 0
    BAKED_CURVE = 1 << 0
    LOOPING     = 1 << 2


class PatternAnimInfo(ResData):
    curve_index    = fields.StructField('b', default=-1)
    sub_bind_index = fields.StructField('b', default=-1)
    _pad           = fields.Padding(2)
    name           = fields.StringRef()


class TexPatternMatAnim(ResData):
    _num_pat_anim      = fields.StructField('H', equals_to=Count('.pattern_anim_infos'))
    _num_curve         = fields.StructField('H', equals_to=Count('.curves'))
    begin_curve        = fields.StructField('i')
    begin_pat_anim     = fields.StructField('i')
    name               = fields.StringRef()
    pattern_anim_infos = fields.ListRef(PatternAnimInfo, Dependency('._num_pat_anim'))
    curves             = fields.ListRef(AnimCurve, Dependency('._num_curve'))
    # index of the texture reference of each pattern when not animated
    base_data          = fields.ArrayRef('H', Dependency('._num_pat_anim'))


class TexPatternAnim(ResData):
    magic                = fields.Magic(b'FTXP')
    name                 = fields.StringRef()
    path                 = fields.StringRef()
    flags                = fields.StructField('H', enum=TexPatternAnimFlags, default=TexPatternAnimFlags.NONE)
    _num_user_data       = fields.StructField('H', equals_to=Count('.user_data'))
    frame_count          = fields.StructField('i')
    _num_texture_ref     = fields.StructField('H', equals_to=Count('.texture_refs'))
    _num_mat_anim        = fields.StructField('H', equals_to=Count('.tex_pattern_mat_anims'))
    _num_pat_anim        = fields.StructField('i', equals_to=Sum('.tex_pattern_mat_anims', 'pattern_anim_infos'))
    _num_curve           = fields.StructField('i', equals_to=Sum('.tex_pattern_mat_anims', 'curves'))
    baked_size           = fields.StructField('I')
    bind_model           = fields.Ref(Model)
    bind_indices         = fields.ArrayRef('H', Dependency('._num_mat_anim'))
    tex_pattern_mat_anims = fields.ListRef(TexPatternMatAnim, Dependency('._num_mat_anim'))
    texture_refs         = fields.DictRef(TextureRef)
    user_data            = fields.DictRef(UserData)

    baked = Flag('flags', TexPatternAnimFlags.BAKED_CURVE)
    looping = Flag('flags', TexPatternAnimFlags.LOOPING)
