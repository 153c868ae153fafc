import pytest

from bfres import ResFile, ResDict
from bfres.common import (
    AnimCurve, AnimConstant, AnimCurveFrameType, AnimCurveKeyType, AnimCurveType, UserData, UserDataType,
)
from bfres.models import (
    Model, Skeleton, Bone, VertexBuffer, VertexAttrib, Buffer, Shape, Mesh, SubMesh, KeyShape,
    Material, RenderInfo, RenderInfoType, RenderState, ShaderAssign, Sampler, ShaderParam, ShaderParamType,
    TextureRef,
)
from bfres.textures import Texture
from bfres.external import ExternalFile
from bfres.gx2 import GX2AttribFormat
from bfres.animations import (
    SkeletalAnim, BoneAnim, BoneAnimData, BoneAnimFlagsBase,
    ShaderParamAnim, ShaderParamMatAnim, ParamAnimInfo,
    TexPatternAnim, TexPatternMatAnim, PatternAnimInfo,
    VisibilityAnim, VisibilityAnimType,
    ShapeAnim, VertexShapeAnim, KeyShapeAnimInfo,
    SceneAnim, CameraAnim, CameraAnimData, CameraAnimFlags, LightAnim, LightAnimData, LightAnimFlags,
    FogAnim, FogAnimData,
)


def build_model(texture):
    skeleton = Skeleton(
        flags=0x100,
        bones=ResDict(Bone, [
            ('root', Bone(name='root', index=0, smooth_matrix_index=0)),
            ('arm', Bone(name='arm', index=1, parent_index=0, rigid_matrix_index=1, position=(0.0, 2.0, 0.0))),
        ]),
        matrix_to_bone_list=[0, 1],
        inverse_model_matrices=[tuple(float(_) for _ in range(12))],
    )

    positions = Buffer(stride=12, data=[bytes(range(36))])
    vertex_buffer = VertexBuffer(
        vertex_skin_count=1,
        attributes=ResDict(VertexAttrib, [
            ('_p0', VertexAttrib(name='_p0', format=GX2AttribFormat.FORMAT_32_32_32_SINGLE)),
        ]),
        buffers=[positions],
    )

    mesh = Mesh(sub_meshes=[SubMesh(offset=0, count=3)])
    mesh.set_indices([0, 1, 2])

    shape = Shape(
        name='Body',
        vertex_buffer_index=0,
        vertex_skin_count=1,
        radius=1.5,
        meshes=[mesh],
        skin_bone_indices=[0],
        key_shapes=ResDict(KeyShape, [('base', KeyShape())]),
        sub_mesh_boundings=[(0.0, 0.0, 0.0, 1.0, 1.0, 1.0), (0.0, 0.5, 0.0, 1.0, 1.0, 1.0)],
    )

    material = Material(
        name='Skin',
        render_infos=ResDict(RenderInfo, [
            ('gsys_pass', RenderInfo(name='gsys_pass', type=RenderInfoType.INT32, value=[1, 2])),
            ('gsys_alpha', RenderInfo(name='gsys_alpha', type=RenderInfoType.SINGLE, value=[0.25])),
            ('gsys_mode', RenderInfo(name='gsys_mode', type=RenderInfoType.STRING, value=['opaque'])),
        ]),
        render_state=RenderState(flags=1, alpha_ref_value=0.5, blend_color=(1.0, 1.0, 1.0, 1.0)),
        shader_assign=ShaderAssign(
            shader_archive_name='Shaders',
            shading_model_name='skin',
            revision=1,
            attrib_assigns=ResDict(str, [('_p0', 'position')]),
            sampler_assigns=ResDict(str, [('_a0', 'albedo')]),
            shader_options=ResDict(str, [('enable_fog', '1')]),
        ),
        texture_refs=[TextureRef(name='Checker', texture=texture)],
        samplers=ResDict(Sampler, [
            ('_a0', Sampler(name='_a0', values=[1, 2, 3])),
            ('_n0', Sampler(name='_n0')),
        ]),
        shader_params=ResDict(ShaderParam, [
            ('tint', ShaderParam(name='tint', type=ShaderParamType.FLOAT4)),
        ]),
        shader_param_data=bytes(range(16)),
        volatile_flags=b'\x01',
    )

    return Model(
        name='Hero',
        path='models/Hero',
        skeleton=skeleton,
        vertex_buffers=[vertex_buffer],
        shapes=ResDict(Shape, [('Body', shape)]),
        materials=ResDict(Material, [('Skin', material)]),
        user_data=ResDict(UserData, [
            ('lod', UserData(name='lod', type=UserDataType.INT32, value=[1, -2])),
            ('scale', UserData(name='scale', type=UserDataType.SINGLE, value=[0.5])),
            ('tags', UserData(name='tags', type=UserDataType.STRING, value=['hero', 'player'])),
            ('title', UserData(name='title', type=UserDataType.WSTRING, value=['Héros'])),
            ('raw', UserData(name='raw', type=UserDataType.BYTE, value=b'\x0a\x0b\x0c')),
        ]),
    )


def build_skeletal_anim(skeleton):
    curve = AnimCurve(
        flags=AnimCurveFrameType.DECIMAL10X5 | AnimCurveKeyType.INT16 | AnimCurveType.LINEAR,
        end_frame=1.5,
        frames=[0.0, 1.5],
        keys=[[-3, 4], [5, -6]],
    )

    bone_anim = BoneAnim(
        flags=BoneAnimFlagsBase.SCALE | BoneAnimFlagsBase.TRANSLATE,
        name='root',
        curves=[curve],
        base_data=BoneAnimData(scale=(1.0, 1.0, 1.0), translate=(0.0, 2.0, 0.0)),
    )

    return SkeletalAnim(
        name='Walk',
        flags=0x100,
        frame_count=2,
        bone_anims=[bone_anim],
        bind_skeleton=skeleton,
        bind_indices=[0],
    )


def build_shader_param_anim(model):
    mat_anim = ShaderParamMatAnim(
        name='Skin',
        param_anim_infos=[ParamAnimInfo(name='tint', float_curve_count=1)],
        curves=[AnimCurve(
            flags=AnimCurveType.CUBIC,
            end_frame=1.0,
            frames=[0.0, 1.0],
            keys=[[0.0, 0.25, 0.5, 0.75], [1.0, 1.25, 1.5, 1.75]],
        )],
        constants=[AnimConstant(4, 0x3f800000)],
    )

    return ShaderParamAnim(
        name='Glow', frame_count=2, bind_model=model, bind_indices=[0], shader_param_mat_anims=[mat_anim])


def build_tex_pattern_anim(model, texture):
    mat_anim = TexPatternMatAnim(
        name='Skin',
        pattern_anim_infos=[PatternAnimInfo(name='_a0', curve_index=0)],
        curves=[AnimCurve(
            flags=AnimCurveFrameType.BYTE | AnimCurveKeyType.SBYTE | AnimCurveType.STEP_INT,
            end_frame=1.0,
            frames=[0.0, 1.0],
            keys=[[0], [-1]],
        )],
        base_data=[0],
    )

    return TexPatternAnim(
        name='Blink',
        frame_count=2,
        bind_model=model,
        bind_indices=[0],
        tex_pattern_mat_anims=[mat_anim],
        texture_refs=ResDict(TextureRef, [('Checker', TextureRef(name='Checker', texture=texture))]),
    )


def build_scene_anim():
    camera = CameraAnim(
        name='Main',
        flags=CameraAnimFlags.PERSPECTIVE,
        frame_count=1,
        base_data=CameraAnimData(near=0.5, far=1000.0, aspect=1.5, field_of_view=0.75, position=(0.0, 1.0, 2.0)),
    )
    light = LightAnim(
        name='Sun',
        flags=LightAnimFlags.BASE_ENABLE | LightAnimFlags.BASE_COLOR0,
        light_type_name='directional',
        base_data=LightAnimData(enable=1, color0=(1.0, 0.5, 0.25)),
    )
    fog = FogAnim(
        name='Mist',
        distance_attn_func_name='linear',
        base_data=FogAnimData(distance_attn=(1.0, 10.0), color=(0.5, 0.5, 0.5)),
    )

    return SceneAnim(
        name='Intro',
        camera_anims=ResDict(CameraAnim, [('Main', camera)]),
        light_anims=ResDict(LightAnim, [('Sun', light)]),
        fog_anims=ResDict(FogAnim, [('Mist', fog)]),
    )


def build_res_file():
    texture = Texture(
        name='Checker',
        path='textures/Checker',
        width=8,
        height=8,
        data=bytes(range(256)),
        mip_data=bytes(range(64, 0, -1)),
    )
    model = build_model(texture)

    visibility_anim = VisibilityAnim(
        name='Show',
        flags=VisibilityAnimType.BONE,
        frame_count=1,
        bind_model=model,
        bind_indices=[0, 1],
        names=['root', 'arm'],
        base_data=[True, False],
    )

    shape_anim = ShapeAnim(
        name='Smile',
        frame_count=1,
        bind_model=model,
        bind_indices=[0],
        vertex_shape_anims=[VertexShapeAnim(
            name='Body',
            key_shape_anim_infos=[KeyShapeAnimInfo(name='base'), KeyShapeAnimInfo(name='smile', curve_index=0)],
            curves=[AnimCurve(end_frame=1.0, frames=[0.0, 1.0], keys=[[0.0] * 4, [1.0] * 4])],
            base_data=[0.5],
        )],
    )

    return ResFile(
        name='Hero',
        models=ResDict(Model, [('Hero', model)]),
        textures=ResDict(Texture, [('Checker', texture)]),
        skeletal_anims=ResDict(SkeletalAnim, [('Walk', build_skeletal_anim(model.skeleton))]),
        shader_param_anims=ResDict(ShaderParamAnim, [('Glow', build_shader_param_anim(model))]),
        tex_pattern_anims=ResDict(TexPatternAnim, [('Blink', build_tex_pattern_anim(model, texture))]),
        bone_visibility_anims=ResDict(VisibilityAnim, [('Show', visibility_anim)]),
        shape_anims=ResDict(ShapeAnim, [('Smile', shape_anim)]),
        scene_anims=ResDict(SceneAnim, [('Intro', build_scene_anim())]),
        external_files=ResDict(ExternalFile, [('notes.txt', ExternalFile(data=b'embedded notes'))]),
    )


@pytest.fixture
def res_file():
    '''A resource file with at least one record of each kind.'''
    return build_res_file()
