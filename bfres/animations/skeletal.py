'''
# Skeletal animations

Each bone animation has the curves of the animated components of the
transformation and the base values of the ones it declares in its flags.
'''
from enum import IntEnum, IntFlag

from ..core import ResData
from .. import fields
from ..common import AnimCurve, UserData
from ..models import Skeleton
from ..properties import Dependency, Count, Sum, Bits, Flag


class SkeletalAnimFlags(IntFlag):
    BAKED_CURVE = 1 << 0
    LOOPING     = 1 << 2


class SkeletalAnimScalingMode(IntEnum):
    NONE      = 0 << 8
    STANDARD  = 1 << 8
    MAYA      = 2 << 8
    SOFTIMAGE = 3 << 8


class SkeletalAnimRotationMode(IntEnum):
    QUATERNION = 0 << 12
    EULER_XYZ  = 1 << 12


class BoneAnimFlagsBase(IntFlag):
    NONE      = 0
    SCALE     = 1 << 3
    ROTATE    = 1 << 4
    TRANSLATE = 1 << 5


class BoneAnimData(object):
    '''Base values of the transformation, None for the components the
    bone animation doesn't declare.'''

    def __init__(self, scale=None, translate=None, rotate=None):
        self.scale = scale
        self.translate = translate
        self.rotate = rotate

    def __repr__(self):
        return '<%s(scale=%r, translate=%r, rotate=%r)>' % (
            self.__class__.__name__, self.scale, self.translate, self.rotate)

    def __eq__(self, other):
        return isinstance(other, BoneAnimData) and \
            (self.scale, self.translate, self.rotate) == (other.scale, other.translate, other.rotate)

    def flags(self):
        '''The flags declaring the components present.'''
        value = BoneAnimFlagsBase.NONE
        if self.scale is not None:
            value |= BoneAnimFlagsBase.SCALE
        if self.rotate is not None:
            value |= BoneAnimFlagsBase.ROTATE
        if self.translate is not None:
            value |= BoneAnimFlagsBase.TRANSLATE

        return value


class BoneAnim(ResData):
    flags                = fields.StructField('I')
    name                 = fields.StringRef()
    begin_rotate         = fields.StructField('B')
    begin_translate      = fields.StructField('B')
    _num_curve           = fields.StructField('B', equals_to=Count('.curves'))
    begin_base_translate = fields.StructField('B')
    begin_curve          = fields.StructField('i')
    curves               = fields.ListRef(AnimCurve, Dependency('._num_curve'))
    base_data            = fields.CustomRef('read_base_data', 'write_base_data')

    flags_base = Bits('flags', 0x38, BoneAnimFlagsBase)
    flags_curve = Bits('flags', 0x3ffc0)
    flags_transform = Bits('flags', 0xf800000)

    def read_base_data(self, loader):
        flags = BoneAnimFlagsBase(self.flags_base)
        data = BoneAnimData()

        # the order in the file is not the one of the flags
        if flags & BoneAnimFlagsBase.SCALE:
            data.scale = loader.read_struct('3f')
        if flags & BoneAnimFlagsBase.TRANSLATE:
            data.translate = loader.read_struct('3f')
        if flags & BoneAnimFlagsBase.ROTATE:
            data.rotate = loader.read_struct('4f')

        return data

    def write_base_data(self, saver, data):
        flags = BoneAnimFlagsBase(self.flags_base)

        if flags & BoneAnimFlagsBase.SCALE:
            saver.write_struct('3f', *data.scale)
        if flags & BoneAnimFlagsBase.TRANSLATE:
            saver.write_struct('3f', *data.translate)
        if flags & BoneAnimFlagsBase.ROTATE:
            saver.write_struct('4f', *data.rotate)


class SkeletalAnim(ResData):
    magic           = fields.Magic(b'FSKA')
    name            = fields.StringRef()
    path            = fields.StringRef()
    flags           = fields.StructField('I')
    frame_count     = fields.StructField('i')
    _num_bone_anim  = fields.StructField('H', equals_to=Count('.bone_anims'))
    _num_user_data  = fields.StructField('H', equals_to=Count('.user_data'))
    _num_curve      = fields.StructField('i', equals_to=Sum('.bone_anims', 'curves'))
    baked_size      = fields.StructField('I')
    bone_anims      = fields.ListRef(BoneAnim, Dependency('._num_bone_anim'))
    bind_skeleton   = fields.Ref(Skeleton)
    bind_indices    = fields.ArrayRef('H', Dependency('._num_bone_anim'))
    user_data       = fields.DictRef(UserData)

    baked = Flag('flags', SkeletalAnimFlags.BAKED_CURVE)
    looping = Flag('flags', SkeletalAnimFlags.LOOPING)
    scaling_mode = Bits('flags', 0x300, SkeletalAnimScalingMode)
    rotation_mode = Bits('flags', 0x7000, SkeletalAnimRotationMode)
