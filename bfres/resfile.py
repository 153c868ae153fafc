'''
# Resource file

The root of the archive: a small header followed by a dictionary for each
kind of resource and the number of elements of each of them.

    offset  size
    0x00    4       "FRES"
    0x04    4       version
    0x08    2       byte order mark
    0x0a    2       size of the header (0x10)
    0x0c    4       size of the file
    0x10    4       alignment of the raw blocks
    0x14    4       offset to the name
    0x18    4       size of the string pool
    0x1c    4       offset to the string pool
    0x20    12 * 4  offsets to the dictionaries
    0x50    12 * 2  number of elements of the dictionaries
    0x68    4       user pointer
'''
import logging
from enum import IntEnum

from .core import ResData
from . import fields
from .enum import Compliant
from .loader import ResFileLoader
from .saver import ResFileSaver
from .models import Model
from .textures import Texture
from .animations import (
    SkeletalAnim, ShaderParamAnim, TexPatternAnim, VisibilityAnim, ShapeAnim, SceneAnim,
)
from .external import ExternalFile
from .properties import Count, Constant
from .exceptions import LogicException


logger = logging.getLogger(__name__)


class ByteOrder(IntEnum):
    BIG_ENDIAN    = 0xfeff
    LITTLE_ENDIAN = 0xfffe


class ResFile(ResData):
    magic                     = fields.Magic(b'FRES')
    version                   = fields.StructField('I', default=0x03040002)
    byte_order                = fields.StructField('H', enum=ByteOrder, default=ByteOrder.BIG_ENDIAN)
    _header_size              = fields.StructField('H', equals_to=Constant(0x0010))
    _file_size                = fields.FileSizeField()
    alignment                 = fields.StructField('I', default=0x2000)
    name                      = fields.StringRef()
    _string_pool              = fields.StringPoolField()
    models                    = fields.DictRef(Model)
    textures                  = fields.DictRef(Texture)
    skeletal_anims            = fields.DictRef(SkeletalAnim)
    shader_param_anims        = fields.DictRef(ShaderParamAnim)
    color_anims               = fields.DictRef(ShaderParamAnim)
    tex_srt_anims             = fields.DictRef(ShaderParamAnim)
    tex_pattern_anims         = fields.DictRef(TexPatternAnim)
    bone_visibility_anims     = fields.DictRef(VisibilityAnim)
    mat_visibility_anims      = fields.DictRef(VisibilityAnim)
    shape_anims               = fields.DictRef(ShapeAnim)
    scene_anims               = fields.DictRef(SceneAnim)
    external_files            = fields.DictRef(ExternalFile)
    _num_model                = fields.StructField('H', equals_to=Count('.models'))
    _num_texture              = fields.StructField('H', equals_to=Count('.textures'))
    _num_skeletal_anim        = fields.StructField('H', equals_to=Count('.skeletal_anims'))
    _num_shader_param_anim    = fields.StructField('H', equals_to=Count('.shader_param_anims'))
    _num_color_anim           = fields.StructField('H', equals_to=Count('.color_anims'))
    _num_tex_srt_anim         = fields.StructField('H', equals_to=Count('.tex_srt_anims'))
    _num_tex_pattern_anim     = fields.StructField('H', equals_to=Count('.tex_pattern_anims'))
    _num_bone_visibility_anim = fields.StructField('H', equals_to=Count('.bone_visibility_anims'))
    _num_mat_visibility_anim  = fields.StructField('H', equals_to=Count('.mat_visibility_anims'))
    _num_shape_anim           = fields.StructField('H', equals_to=Count('.shape_anims'))
    _num_scene_anim           = fields.StructField('H', equals_to=Count('.scene_anims'))
    _num_external_file        = fields.StructField('H', equals_to=Count('.external_files'))
    _user_pointer             = fields.StructField('I', equals_to=Constant(0))

    def __init__(self, source=None, encoding='ascii', compliant=Compliant.NONE, **kwargs):
        '''With a source (path, bytes or stream) the file is loaded from it.'''
        super().__init__(**kwargs)

        if source is not None:
            self.load(source, encoding=encoding, compliant=compliant)

    def load(self, source, encoding='ascii', compliant=Compliant.NONE):
        with ResFileLoader(self, source, encoding=encoding, leave_open=True, compliant=compliant) as loader:
            return loader.execute()

    def save(self, target=None, encoding='ascii'):
        '''Save into target (a path or a stream); without a target the bytes are returned.'''
        with ResFileSaver(self, target, encoding=encoding, leave_open=True) as saver:
            saver.execute()

            if target is None:
                return saver.getvalue()

    def pre_save(self):
        '''Bring the derived values up to date with the content.'''
        for model in self.models.values():
            for shape in model.shapes.values():
                if not 0 <= shape.vertex_buffer_index < len(model.vertex_buffers):
                    raise LogicException(
                        f'shape {shape.name!r} of model {model.name!r} refers to the vertex buffer '
                        f'{shape.vertex_buffer_index} but there are {len(model.vertex_buffers)}')
                shape.vertex_buffer = model.vertex_buffers[shape.vertex_buffer_index]

        for anim in self.skeletal_anims.values():
            begin_curve = 0
            for bone_anim in anim.bone_anims:
                if bone_anim.base_data is not None:
                    bone_anim.flags_base = bone_anim.base_data.flags()
                bone_anim.begin_curve = begin_curve
                begin_curve += len(bone_anim.curves)

        for anims in (self.shader_param_anims, self.color_anims, self.tex_srt_anims):
            for anim in anims.values():
                _number_sub_anims(anim.shader_param_mat_anims, 'begin_param_anim', 'param_anim_infos')

        for anim in self.tex_pattern_anims.values():
            _number_sub_anims(anim.tex_pattern_mat_anims, 'begin_pat_anim', 'pattern_anim_infos')

        for anim in self.shape_anims.values():
            _number_sub_anims(anim.vertex_shape_anims, 'begin_key_shape_anim', 'key_shape_anim_infos')


def _number_sub_anims(sub_anims, begin_info_attribute, infos_attribute):
    begin_curve = 0
    begin_info = 0
    for sub_anim in sub_anims:
        sub_anim.begin_curve = begin_curve
        setattr(sub_anim, begin_info_attribute, begin_info)
        begin_curve += len(sub_anim.curves)
        begin_info += len(getattr(sub_anim, infos_attribute))


def load_root(source, encoding='ascii', compliant=Compliant.NONE):
    '''Load the archive at source (path, bytes or stream).'''
    logger.debug('loading resource file from %r', source.__class__.__name__)
    return ResFile(source, encoding=encoding, compliant=compliant)


def save_root(res_file, target=None, encoding='ascii'):
    '''Save the archive into target, returning the bytes if target is None.'''
    return res_file.save(target, encoding=encoding)
