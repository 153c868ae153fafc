from .model import Model
from .skeleton import Skeleton, Bone, SkeletonScalingMode, SkeletonRotationMode, BoneRotationMode, BoneBillboardMode
from .shape import Shape, ShapeFlags, Mesh, SubMesh, KeyShape, BoundingNode
from .vertex import VertexBuffer, VertexAttrib, Buffer
from .material import (
    Material, MaterialFlags, RenderInfo, RenderInfoType, RenderState, Sampler,
    ShaderAssign, ShaderParam, ShaderParamType, TextureRef,
)
