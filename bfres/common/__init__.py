from .anim_curve import (
    AnimCurve, AnimConstant, AnimCurveFrameType, AnimCurveKeyType, AnimCurveType,
)
from .user_data import UserData, UserDataType
