from enum import IntFlag

from ..core import ResData
from .. import fields
from ..common import AnimCurve, UserData
from ..models import Model
from ..properties import Dependency, Count, Sum, Flag


class ShapeAnimFlags(IntFlag):
    NONE        = 0
    BAKED_CURVE = 1 << 0
    LOOPING     = 1 << 2


class KeyShapeAnimInfo(ResData):
    curve_index    = fields.StructField('b', default=-1)
    sub_bind_index = fields.StructField('b', default=-1)
    _pad           = fields.Padding(2)
    name           = fields.StringRef()


class VertexShapeAnim(ResData):
    _num_curve             = fields.StructField('H', equals_to=Count('.curves'))
    _num_key_shape_anim    = fields.StructField('H', equals_to=Count('.key_shape_anim_infos'))
    begin_curve            = fields.StructField('i')
    begin_key_shape_anim   = fields.StructField('i')
    name                   = fields.StringRef()
    key_shape_anim_infos   = fields.ListRef(KeyShapeAnimInfo, Dependency('._num_key_shape_anim'))
    curves                 = fields.ListRef(AnimCurve, Dependency('._num_curve'))
    # the first key shape is the base shape and has no weight
    base_data              = fields.ArrayRef('f', Dependency('._base_data_count'))

    def _base_data_count(self):
        return max(self._num_key_shape_anim - 1, 0)


class ShapeAnim(ResData):
    magic                 = fields.Magic(b'FSHA')
    name                  = fields.StringRef()
    path                  = fields.StringRef()
    flags                 = fields.StructField('H', enum=ShapeAnimFlags, default=ShapeAnimFlags.NONE)
    _num_user_data        = fields.StructField('H', equals_to=Count('.user_data'))
    frame_count           = fields.StructField('i')
    _num_vertex_shape_anim = fields.StructField('H', equals_to=Count('.vertex_shape_anims'))
    _num_key_shape_anim   = fields.StructField('H', equals_to=Sum('.vertex_shape_anims', 'key_shape_anim_infos'))
    _num_curve            = fields.StructField('H', equals_to=Sum('.vertex_shape_anims', 'curves'))
    _pad                  = fields.Padding(2)
    baked_size            = fields.StructField('I')
    bind_model            = fields.Ref(Model)
    bind_indices          = fields.ArrayRef('H', Dependency('._num_vertex_shape_anim'))
    vertex_shape_anims    = fields.ListRef(VertexShapeAnim, Dependency('._num_vertex_shape_anim'))
    user_data             = fields.DictRef(UserData)

    baked = Flag('flags', ShapeAnimFlags.BAKED_CURVE)
    looping = Flag('flags', ShapeAnimFlags.LOOPING)
