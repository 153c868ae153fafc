from enum import IntEnum

from ..core import ResData
from .. import fields
from ..common import UserData
from ..properties import Dependency, Count, Constant, Bits, Flag


class SkeletonScalingMode(IntEnum):
    NONE     = 0 << 8
    STANDARD = 1 << 8
    MAYA     = 2 << 8
    SOFTIMAGE = 3 << 8


class SkeletonRotationMode(IntEnum):
    QUATERNION = 0 << 12
    EULER_XYZ  = 1 << 12


class BoneRotationMode(IntEnum):
    QUATERNION = 0 << 12
    EULER_XYZ  = 1 << 12


class BoneBillboardMode(IntEnum):
    NONE                = 0 << 16
    CHILD               = 1 << 16
    WORLD_VIEW_VECTOR   = 2 << 16
    WORLD_VIEW_POINT    = 3 << 16
    SCREEN_VIEW_VECTOR  = 4 << 16
    SCREEN_VIEW_POINT   = 5 << 16
    Y_AXIS_VIEW_VECTOR  = 6 << 16
    Y_AXIS_VIEW_POINT   = 7 << 16


class Bone(ResData):
    name                = fields.StringRef()
    index               = fields.StructField('H')
    parent_index        = fields.StructField('h', default=-1)
    smooth_matrix_index = fields.StructField('h', default=-1)
    rigid_matrix_index  = fields.StructField('h', default=-1)
    billboard_index     = fields.StructField('H', default=0xffff)
    _num_user_data      = fields.StructField('H', equals_to=Count('.user_data'))
    flags               = fields.StructField('I', default=0x1)
    scale               = fields.StructField('3f', default=(1.0, 1.0, 1.0))
    rotation            = fields.StructField('4f', default=(0.0, 0.0, 0.0, 1.0))
    position            = fields.StructField('3f', default=(0.0, 0.0, 0.0))
    user_data           = fields.DictRef(UserData)
    inverse_matrix      = fields.StructField('12f', default=(0.0,) * 12, until=0x03040000)

    visible = Flag('flags', 0x1)
    rotation_mode = Bits('flags', 0x7000, BoneRotationMode)
    billboard_mode = Bits('flags', 0x70000, BoneBillboardMode)


class Skeleton(ResData):
    '''The bones are stored both as dictionary and as list; the matrices
    used to skin the vertices are the smooth ones (with an inverse model
    matrix) followed by the rigid ones.'''
    magic                   = fields.Magic(b'FSKL')
    flags                   = fields.StructField('I')
    _num_bone               = fields.StructField('H', equals_to=Count('.bones'))
    _num_smooth_matrix      = fields.StructField('H', equals_to=Count('.inverse_model_matrices'))
    _num_rigid_matrix       = fields.StructField('H', equals_to=Dependency('._rigid_matrix_count'))
    _pad                    = fields.Padding(2)
    bones                   = fields.DictRef(Bone)
    _bone_list              = fields.MirrorListRef(Dependency('.bones.values'))
    matrix_to_bone_list     = fields.ArrayRef('H', Dependency('._matrix_count'))
    inverse_model_matrices  = fields.ArrayRef('12f', Dependency('._num_smooth_matrix'))
    _user_pointer           = fields.StructField('I', equals_to=Constant(0))

    scaling_mode = Bits('flags', 0x300, SkeletonScalingMode)
    rotation_mode = Bits('flags', 0x7000, SkeletonRotationMode)

    def _matrix_count(self):
        return self._num_smooth_matrix + self._num_rigid_matrix

    def _rigid_matrix_count(self):
        return len(self.matrix_to_bone_list) - len(self.inverse_model_matrices)
