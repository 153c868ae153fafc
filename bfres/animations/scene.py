'''
# Scene animations

Cameras, lights and fogs animated independently from the models.
'''
from enum import IntFlag

from ..core import ResData
from .. import fields
from ..common import AnimCurve, UserData
from ..properties import Dependency, Count, Flag


class CameraAnimFlags(IntFlag):
    NONE            = 0
    BAKED_CURVE     = 1 << 0
    LOOPING         = 1 << 2
    EULER_ZXY       = 1 << 8
    PERSPECTIVE     = 1 << 10


class CameraAnimData(ResData):
    near           = fields.StructField('f')
    far            = fields.StructField('f')
    aspect         = fields.StructField('f')
    field_of_view  = fields.StructField('f')
    position       = fields.StructField('3f', default=(0.0, 0.0, 0.0))
    rotation       = fields.StructField('3f', default=(0.0, 0.0, 0.0))
    twist          = fields.StructField('f')


class CameraAnim(ResData):
    magic          = fields.Magic(b'FCAM')
    flags          = fields.StructField('H', enum=CameraAnimFlags, default=CameraAnimFlags.NONE)
    _pad0          = fields.Padding(2)
    frame_count    = fields.StructField('i')
    _num_curve     = fields.StructField('B', equals_to=Count('.curves'))
    _pad1          = fields.Padding(1)
    _num_user_data = fields.StructField('H', equals_to=Count('.user_data'))
    baked_size     = fields.StructField('I')
    name           = fields.StringRef()
    curves         = fields.ListRef(AnimCurve, Dependency('._num_curve'))
    base_data      = fields.Ref(CameraAnimData)
    user_data      = fields.DictRef(UserData)

    baked = Flag('flags', CameraAnimFlags.BAKED_CURVE)
    looping = Flag('flags', CameraAnimFlags.LOOPING)
    perspective = Flag('flags', CameraAnimFlags.PERSPECTIVE)


class LightAnimFlags(IntFlag):
    NONE             = 0
    BAKED_CURVE      = 1 << 0
    LOOPING          = 1 << 2
    ENABLE_CURVE     = 1 << 8
    BASE_ENABLE      = 1 << 9
    BASE_POSITION    = 1 << 10
    BASE_ROTATION    = 1 << 11
    BASE_DISTANCE_ATTN = 1 << 12
    BASE_ANGLE_ATTN  = 1 << 13
    BASE_COLOR0      = 1 << 14
    BASE_COLOR1      = 1 << 15


# flag, attribute and format of each base value, in file order
LIGHT_BASE_VALUES = (
    (LightAnimFlags.BASE_ENABLE, 'enable', 'i'),
    (LightAnimFlags.BASE_POSITION, 'position', '3f'),
    (LightAnimFlags.BASE_ROTATION, 'rotation', '3f'),
    (LightAnimFlags.BASE_DISTANCE_ATTN, 'distance_attn', '2f'),
    (LightAnimFlags.BASE_ANGLE_ATTN, 'angle_attn', '2f'),
    (LightAnimFlags.BASE_COLOR0, 'color0', '3f'),
    (LightAnimFlags.BASE_COLOR1, 'color1', '3f'),
)


class LightAnimData(object):
    '''Base values of the light, None for the ones not flagged.'''

    def __init__(self, **kwargs):
        for _, attribute, _format in LIGHT_BASE_VALUES:
            setattr(self, attribute, kwargs.pop(attribute, None))

        if kwargs:
            raise AttributeError(f'{self.__class__.__name__} has no values named {sorted(kwargs)}')

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, ', '.join(
            '%s=%r' % (attribute, getattr(self, attribute)) for _, attribute, _format in LIGHT_BASE_VALUES
            if getattr(self, attribute) is not None))

    def __eq__(self, other):
        return isinstance(other, LightAnimData) and all(
            getattr(self, attribute) == getattr(other, attribute) for _, attribute, _format in LIGHT_BASE_VALUES)


class LightAnim(ResData):
    magic                     = fields.Magic(b'FLIT')
    flags                     = fields.StructField('H', enum=LightAnimFlags, default=LightAnimFlags.NONE)
    _num_user_data            = fields.StructField('H', equals_to=Count('.user_data'))
    frame_count               = fields.StructField('i')
    _num_curve                = fields.StructField('B', equals_to=Count('.curves'))
    light_type_index          = fields.StructField('b', default=-1)
    distance_attn_func_index  = fields.StructField('b', default=-1)
    angle_attn_func_index     = fields.StructField('b', default=-1)
    baked_size                = fields.StructField('I')
    name                      = fields.StringRef()
    light_type_name           = fields.StringRef()
    distance_attn_func_name   = fields.StringRef()
    angle_attn_func_name      = fields.StringRef()
    curves                    = fields.ListRef(AnimCurve, Dependency('._num_curve'))
    base_data                 = fields.CustomRef('read_base_data', 'write_base_data')
    user_data                 = fields.DictRef(UserData)

    baked = Flag('flags', LightAnimFlags.BAKED_CURVE)
    looping = Flag('flags', LightAnimFlags.LOOPING)

    def read_base_data(self, loader):
        data = LightAnimData()
        for flag, attribute, format in LIGHT_BASE_VALUES:
            if int(self.flags) & flag:
                setattr(data, attribute, loader.read_struct(format))

        return data

    def write_base_data(self, saver, data):
        for flag, attribute, format in LIGHT_BASE_VALUES:
            if int(self.flags) & flag:
                saver.write_element(format, getattr(data, attribute))


class FogAnimFlags(IntFlag):
    NONE        = 0
    BAKED_CURVE = 1 << 0
    LOOPING     = 1 << 2


class FogAnimData(ResData):
    distance_attn = fields.StructField('2f', default=(0.0, 0.0))
    color         = fields.StructField('3f', default=(0.0, 0.0, 0.0))


class FogAnim(ResData):
    magic                    = fields.Magic(b'FFOG')
    flags                    = fields.StructField('H', enum=FogAnimFlags, default=FogAnimFlags.NONE)
    _pad                     = fields.Padding(2)
    frame_count              = fields.StructField('i')
    _num_curve               = fields.StructField('B', equals_to=Count('.curves'))
    distance_attn_func_index = fields.StructField('b', default=-1)
    _num_user_data           = fields.StructField('H', equals_to=Count('.user_data'))
    baked_size               = fields.StructField('I')
    name                     = fields.StringRef()
    distance_attn_func_name  = fields.StringRef()
    curves                   = fields.ListRef(AnimCurve, Dependency('._num_curve'))
    base_data                = fields.Ref(FogAnimData)
    user_data                = fields.DictRef(UserData)

    baked = Flag('flags', FogAnimFlags.BAKED_CURVE)
    looping = Flag('flags', FogAnimFlags.LOOPING)


class SceneAnim(ResData):
    magic           = fields.Magic(b'FSCN')
    name            = fields.StringRef()
    path            = fields.StringRef()
    _num_user_data  = fields.StructField('H', equals_to=Count('.user_data'))
    _num_camera_anim = fields.StructField('H', equals_to=Count('.camera_anims'))
    _num_light_anim = fields.StructField('H', equals_to=Count('.light_anims'))
    _num_fog_anim   = fields.StructField('H', equals_to=Count('.fog_anims'))
    camera_anims    = fields.DictRef(CameraAnim)
    light_anims     = fields.DictRef(LightAnim)
    fog_anims       = fields.DictRef(FogAnim)
    user_data       = fields.DictRef(UserData)
