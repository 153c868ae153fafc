from .skeletal import SkeletalAnim, BoneAnim, BoneAnimData, BoneAnimFlagsBase, SkeletalAnimFlags
from .shader_param import ShaderParamAnim, ShaderParamMatAnim, ParamAnimInfo, ShaderParamAnimFlags
from .tex_pattern import TexPatternAnim, TexPatternMatAnim, PatternAnimInfo, TexPatternAnimFlags
from .visibility import VisibilityAnim, VisibilityAnimType
from .shape_anim import ShapeAnim, VertexShapeAnim, KeyShapeAnimInfo, ShapeAnimFlags
from .scene import (
    SceneAnim, CameraAnim, CameraAnimData, CameraAnimFlags, LightAnim, LightAnimData, LightAnimFlags,
    FogAnim, FogAnimData, FogAnimFlags,
)
