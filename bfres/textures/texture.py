'''
# Textures

The header is the GX2 surface structure as used by the console, followed
by the view of the texture; the pixels (and the mipmaps) are stored swizzled
in the block area at the end of the file, aligned like the file.
'''
from ..core import ResData
from .. import fields
from ..common import UserData
from ..gx2 import (
    GX2SurfaceDim, GX2SurfaceFormat, GX2AAMode, GX2SurfaceUse, GX2TileMode, GX2CompSel,
)
from ..properties import Dependency, Count, Constant


class Texture(ResData):
    magic            = fields.Magic(b'FTEX')
    dim              = fields.StructField('I', enum=GX2SurfaceDim, default=GX2SurfaceDim.DIM_2D)
    width            = fields.StructField('I')
    height           = fields.StructField('I')
    depth            = fields.StructField('I', default=1)
    mip_count        = fields.StructField('I', default=1)
    format           = fields.StructField('I', enum=GX2SurfaceFormat, default=GX2SurfaceFormat.TCS_R8_G8_B8_A8_UNORM)
    aa_mode          = fields.StructField('I', enum=GX2AAMode, default=GX2AAMode.MODE_1X)
    use              = fields.StructField('I', enum=GX2SurfaceUse, default=GX2SurfaceUse.TEXTURE)
    _data_size       = fields.StructField('I', equals_to=Count('.data'))
    _image_pointer   = fields.StructField('I', equals_to=Constant(0))
    _mip_size        = fields.StructField('I', equals_to=Count('.mip_data'))
    _mip_pointer     = fields.StructField('I', equals_to=Constant(0))
    tile_mode        = fields.StructField('I', enum=GX2TileMode, default=GX2TileMode.DEFAULT)
    swizzle          = fields.StructField('I')
    alignment        = fields.StructField('I')
    pitch            = fields.StructField('I')
    mip_offsets      = fields.ArrayField('I', 13)
    view_mip_first   = fields.StructField('I')
    view_mip_count   = fields.StructField('I', default=1)
    view_slice_first = fields.StructField('I')
    view_slice_count = fields.StructField('I', default=1)
    comp_sel_r       = fields.StructField('B', enum=GX2CompSel, default=GX2CompSel.R)
    comp_sel_g       = fields.StructField('B', enum=GX2CompSel, default=GX2CompSel.G)
    comp_sel_b       = fields.StructField('B', enum=GX2CompSel, default=GX2CompSel.B)
    comp_sel_a       = fields.StructField('B', enum=GX2CompSel, default=GX2CompSel.A)
    regs             = fields.ArrayField('I', 5)
    _handle          = fields.StructField('I', equals_to=Constant(0))
    array_length     = fields.StructField('I')
    name             = fields.StringRef()
    path             = fields.StringRef()
    data             = fields.BlockRef(Dependency('._data_size'))
    mip_data         = fields.BlockRef(Dependency('._mip_size'))
    user_data        = fields.DictRef(UserData)
    _num_user_data   = fields.StructField('H', equals_to=Count('.user_data'))
    _pad             = fields.Padding(2)
