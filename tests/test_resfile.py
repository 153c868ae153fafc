import struct

import pytest

import bfres
from bfres import ResFile, ByteOrder, load_root, save_root, open_archive
from bfres.compression import yaz0
from bfres.exceptions import FormatException, MagicException, LogicException
from bfres.animations import BoneAnim, BoneAnimData, BoneAnimFlagsBase, LightAnimData
from bfres.common import AnimCurveFrameType, AnimCurveKeyType
from bfres.gx2 import GX2IndexFormat

from conftest import build_res_file


def read_offset(data, position):
    '''Absolute position the offset stored at position points to.'''
    value = struct.unpack_from('>i', data, position)[0]
    return position + 4 + value if value else 0


def test_empty_header():
    data = ResFile().save()

    assert data[:4] == b'FRES'
    assert data[4:8] == b'\x03\x04\x00\x02'
    assert data[8:10] == b'\xfe\xff'
    assert data[10:12] == b'\x00\x10'
    assert len(data) == 0x6c
    assert struct.unpack_from('>I', data, 0x0c)[0] == len(data)
    # no name, no strings, no dictionaries
    assert data[0x14:0x6c] == bytes(0x58)


def test_name_in_string_pool():
    data = ResFile(name='Test').save()

    position = read_offset(data, 0x14)
    assert data[position:position + 5] == b'Test\x00'
    # the length precedes the characters
    assert struct.unpack_from('>I', data, position - 4)[0] == 4

    pool_size = struct.unpack_from('>I', data, 0x18)[0]
    pool_start = read_offset(data, 0x1c)
    assert pool_start == position - 4
    assert pool_size == 12


def test_empty_collections_load_back_empty():
    res_file = ResFile(ResFile().save())

    assert res_file.name is None
    assert res_file.byte_order == ByteOrder.BIG_ENDIAN
    assert len(res_file.models) == 0
    assert len(res_file.external_files) == 0


def test_round_trip(res_file):
    data = res_file.save()
    loaded = ResFile(data)

    assert loaded.save() == data


def test_round_trip_is_stable():
    data = build_res_file().save()

    assert build_res_file().save() == data


def test_file_size(res_file):
    data = res_file.save()

    assert struct.unpack_from('>I', data, 0x0c)[0] == len(data)


def test_shared_records_are_the_same_instance(res_file):
    loaded = ResFile(res_file.save())

    model = loaded.models['Hero']
    texture = loaded.textures['Checker']

    assert model.shapes['Body'].vertex_buffer is model.vertex_buffers[0]
    assert model.materials['Skin'].texture_refs[0].texture is texture
    assert loaded.tex_pattern_anims['Blink'].texture_refs['Checker'].texture is texture
    assert loaded.skeletal_anims['Walk'].bind_skeleton is model.skeleton
    assert loaded.shader_param_anims['Glow'].bind_model is model
    assert loaded.shape_anims['Smile'].bind_model is model


def test_shared_records_are_written_once(res_file):
    data = res_file.save()

    assert data.count(b'FMDL') == 1
    assert data.count(b'FSKL') == 1
    assert data.count(b'FTEX') == 1
    assert data.count(b'FVTX') == 1


def test_block_alignment(res_file):
    data = res_file.save()

    position = data.index(bytes(range(256)))
    assert position % res_file.alignment == 0


def test_model_content(res_file):
    loaded = ResFile(res_file.save())
    model = loaded.models['Hero']

    assert model.name == 'Hero'
    assert model.path == 'models/Hero'
    assert model.total_vertex_count == 3

    assert list(model.skeleton.bones) == ['root', 'arm']
    assert model.skeleton.bones['arm'].parent_index == 0
    assert model.skeleton.bones['arm'].position == (0.0, 2.0, 0.0)
    assert model.skeleton.matrix_to_bone_list == [0, 1]
    assert model.skeleton.inverse_model_matrices == [tuple(float(_) for _ in range(12))]

    vertex_buffer = model.vertex_buffers[0]
    assert vertex_buffer.vertex_count == 3
    assert vertex_buffer.buffers[0].data == [bytes(range(36))]
    assert vertex_buffer.attributes['_p0'].name == '_p0'

    shape = model.shapes['Body']
    assert shape.radius == 1.5
    assert shape.skin_bone_indices == [0]
    assert shape.meshes[0].index_count == 3
    assert shape.meshes[0].get_indices() == [0, 1, 2]
    assert shape.meshes[0].sub_meshes[0].count == 3
    assert len(shape.sub_mesh_boundings) == 2


def test_material_content(res_file):
    loaded = ResFile(res_file.save())
    material = loaded.models['Hero'].materials['Skin']

    assert material.render_infos['gsys_pass'].value == [1, 2]
    assert material.render_infos['gsys_alpha'].value == [0.25]
    assert material.render_infos['gsys_mode'].value == ['opaque']
    assert material.render_state.blend_color == (1.0, 1.0, 1.0, 1.0)
    assert material.shader_assign.attrib_assigns['_p0'] == 'position'
    assert material.shader_assign.shader_options['enable_fog'] == '1'
    assert material.samplers['_a0'].values == [1, 2, 3]
    assert [_.index for _ in material.samplers.values()] == [0, 1]
    assert material.shader_params['tint'].compute_data_size() == 16
    assert material.shader_param_data == bytes(range(16))
    assert material.volatile_flags == b'\x01'


def test_user_data(res_file):
    loaded = ResFile(res_file.save())
    user_data = loaded.models['Hero'].user_data

    assert user_data['lod'].value == [1, -2]
    assert user_data['scale'].value == [0.5]
    assert user_data['tags'].value == ['hero', 'player']
    assert user_data['title'].value == ['Héros']
    assert user_data['raw'].value == b'\x0a\x0b\x0c'


def test_texture_content(res_file):
    loaded = ResFile(res_file.save())
    texture = loaded.textures['Checker']

    assert texture.width == 8
    assert texture.path == 'textures/Checker'
    assert texture.data == bytes(range(256))
    assert texture.mip_data == bytes(range(64, 0, -1))


def test_animations_content(res_file):
    loaded = ResFile(res_file.save())

    bone_anim = loaded.skeletal_anims['Walk'].bone_anims[0]
    assert bone_anim.base_data == BoneAnimData(scale=(1.0, 1.0, 1.0), translate=(0.0, 2.0, 0.0))
    curve = bone_anim.curves[0]
    assert curve.frame_type == AnimCurveFrameType.DECIMAL10X5
    assert curve.key_type == AnimCurveKeyType.INT16
    assert curve.frames == [0.0, 1.5]
    assert curve.keys == [[-3, 4], [5, -6]]

    mat_anim = loaded.shader_param_anims['Glow'].shader_param_mat_anims[0]
    assert mat_anim.constants[0].anim_data_offset == 4
    assert mat_anim.curves[0].keys[1] == [1.0, 1.25, 1.5, 1.75]

    pattern = loaded.tex_pattern_anims['Blink'].tex_pattern_mat_anims[0]
    assert pattern.curves[0].keys == [[0], [-1]]
    assert pattern.base_data == [0]

    visibility = loaded.bone_visibility_anims['Show']
    assert visibility.names == ['root', 'arm']
    assert visibility.base_data == [True, False]

    vertex_shape_anim = loaded.shape_anims['Smile'].vertex_shape_anims[0]
    assert vertex_shape_anim.base_data == [0.5]
    assert [_.name for _ in vertex_shape_anim.key_shape_anim_infos] == ['base', 'smile']

    scene = loaded.scene_anims['Intro']
    assert scene.camera_anims['Main'].base_data.far == 1000.0
    assert scene.camera_anims['Main'].perspective
    assert scene.light_anims['Sun'].base_data == LightAnimData(enable=1, color0=(1.0, 0.5, 0.25))
    assert scene.fog_anims['Mist'].base_data.distance_attn == (1.0, 10.0)

    assert loaded.external_files['notes.txt'].data == b'embedded notes'


def test_sub_animations_are_numbered(res_file):
    anim = res_file.skeletal_anims['Walk']
    anim.bone_anims.append(BoneAnim(name='arm', base_data=BoneAnimData()))
    anim.bind_indices.append(1)

    loaded = ResFile(res_file.save())

    assert [_.begin_curve for _ in loaded.skeletal_anims['Walk'].bone_anims] == [0, 1]
    assert loaded.skeletal_anims['Walk']._num_curve == 1


def test_vertex_buffer_index_out_of_range(res_file):
    res_file.models['Hero'].shapes['Body'].vertex_buffer_index = 1

    with pytest.raises(LogicException):
        res_file.save()


def test_index_format_little_endian(res_file):
    mesh = res_file.models['Hero'].shapes['Body'].meshes[0]
    mesh.set_indices([1, 2, 0x10000], format=GX2IndexFormat.UINT32_LITTLE_ENDIAN)

    assert mesh.index_buffer.data == [b'\x01\x00\x00\x00\x02\x00\x00\x00\x00\x00\x01\x00']

    loaded = ResFile(res_file.save())
    assert loaded.models['Hero'].shapes['Body'].meshes[0].get_indices() == [1, 2, 0x10000]


def test_bad_magic():
    data = bytearray(ResFile().save())
    data[:4] = b'FREZ'

    with pytest.raises(MagicException) as exc:
        ResFile(bytes(data))

    assert exc.value.expected == b'FRES'
    assert exc.value.actual == b'FREZ'
    assert exc.value.offset == 0
    assert exc.value.chain == ['ResFile.magic']


def test_bad_magic_nested(res_file):
    data = bytearray(res_file.save())
    position = data.index(b'FSKL')
    data[position:position + 4] = b'XXXX'

    with pytest.raises(MagicException) as exc:
        ResFile(bytes(data))

    assert exc.value.offset == position
    assert exc.value.chain[0] == 'Skeleton.magic'
    assert 'Model.skeleton' in exc.value.chain
    assert exc.value.chain[-1] == 'ResFile.models'


def test_save_to_path(tmp_path, res_file):
    path = tmp_path / 'hero.bfres'

    save_root(res_file, str(path))
    loaded = load_root(str(path))

    assert loaded.models['Hero'].name == 'Hero'
    assert path.read_bytes() == res_file.save()


def test_open_compressed_archive(res_file):
    data = res_file.save()

    loaded = open_archive(yaz0.compress(data))

    assert loaded.save() == data


def test_open_uncompressed_archive(res_file):
    loaded = open_archive(res_file.save())

    assert list(loaded.textures) == ['Checker']


def test_package_exports():
    assert bfres.ResFile is ResFile
    assert bfres.yaz0 is yaz0


def test_name_not_decodable(res_file):
    data = res_file.save()
    assert data.count(b'\x00\x00\x00\x04Hero\x00') == 1
    data = data.replace(b'\x00\x00\x00\x04Hero\x00', b'\x00\x00\x00\x04\xe9ero\x00')

    with pytest.raises(FormatException) as exc:
        ResFile(data)

    # the archive shares its name with the model
    assert exc.value.offset is not None
    assert exc.value.chain == ['ResFile.name']


def test_name_not_encodable():
    with pytest.raises(LogicException):
        ResFile(name='Héro').save()


def test_offset_before_start(res_file):
    data = bytearray(res_file.save())
    # the models dictionary offset follows the header and the string pool fields
    models = 0x20
    assert read_offset(data, models)
    data[models:models + 4] = struct.pack('>i', -0x100)

    with pytest.raises(FormatException) as exc:
        ResFile(bytes(data))

    assert exc.value.offset == models
    assert exc.value.chain == ['ResFile.models']


def test_bone_anim_base_flags_follow_data(res_file):
    bone_anim = res_file.skeletal_anims['Walk'].bone_anims[0]
    bone_anim.base_data.rotate = (0.0, 0.0, 0.0, 1.0)
    bone_anim.base_data.scale = None

    loaded = ResFile(res_file.save())
    bone_anim = loaded.skeletal_anims['Walk'].bone_anims[0]

    assert bone_anim.flags_base == BoneAnimFlagsBase.TRANSLATE | BoneAnimFlagsBase.ROTATE
    assert bone_anim.base_data == BoneAnimData(translate=(0.0, 2.0, 0.0), rotate=(0.0, 0.0, 0.0, 1.0))
