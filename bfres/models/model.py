from ..core import ResData
from .. import fields
from ..common import UserData
from ..properties import Dependency, Count, Constant
from .skeleton import Skeleton
from .vertex import VertexBuffer
from .shape import Shape
from .material import Material


class Model(ResData):
    '''A model is made of shapes, each one drawn with one of the materials
    and deformed by the bones of the skeleton.'''
    magic               = fields.Magic(b'FMDL')
    name                = fields.StringRef()
    path                = fields.StringRef()
    skeleton            = fields.Ref(Skeleton)
    vertex_buffers      = fields.ListRef(VertexBuffer, Dependency('._num_vertex_buffer'))
    shapes              = fields.DictRef(Shape)
    materials           = fields.DictRef(Material)
    user_data           = fields.DictRef(UserData)
    _num_vertex_buffer  = fields.StructField('H', equals_to=Count('.vertex_buffers'))
    _num_shape          = fields.StructField('H', equals_to=Count('.shapes'))
    _num_material       = fields.StructField('H', equals_to=Count('.materials'))
    _num_user_data      = fields.StructField('H', equals_to=Count('.user_data'))
    total_vertex_count  = fields.StructField('I', equals_to=Dependency('.compute_total_vertex_count'))
    _user_pointer       = fields.StructField('I', equals_to=Constant(0))

    def compute_total_vertex_count(self):
        return sum(_.compute_vertex_count() for _ in self.vertex_buffers)
