'''
# Shapes

A shape is a piece of a model drawn with a single material: its meshes are
the levels of detail, each one indexing the vertices of the vertex buffer
of the shape (the one at vertex_buffer_index in the model).
'''
from enum import IntFlag

from ..core import ResData
from .. import fields
from ..gx2 import GX2PrimitiveType, GX2IndexFormat, INDEX_FORMATS
from ..streams import Stream
from ..properties import Dependency, Count, Constant, CurrentIndex
from ..exceptions import LogicException
from .vertex import Buffer, VertexBuffer


class ShapeFlags(IntFlag):
    NONE                   = 0
    HAS_VERTEX_BUFFER      = 1 << 1
    SUB_MESH_BOUNDARY_CONSISTENT = 1 << 2


class SubMesh(ResData):
    offset = fields.StructField('I')
    count  = fields.StructField('I')


class BoundingNode(ResData):
    left_child_index  = fields.StructField('H')
    right_child_index = fields.StructField('H')
    unknown           = fields.StructField('H')
    next_sibling      = fields.StructField('H')
    sub_mesh_index    = fields.StructField('H')
    sub_mesh_count    = fields.StructField('H')


class KeyShape(ResData):
    target_attrib_indices = fields.BytesField(20)
    target_attrib_index_offsets = fields.BytesField(4)


class Mesh(ResData):
    primitive_type = fields.StructField('I', enum=GX2PrimitiveType, default=GX2PrimitiveType.TRIANGLES)
    index_format   = fields.StructField('I', enum=GX2IndexFormat, default=GX2IndexFormat.UINT16)
    index_count    = fields.StructField('I', equals_to=Dependency('.compute_index_count'))
    _num_sub_mesh  = fields.StructField('H', equals_to=Count('.sub_meshes'))
    _pad           = fields.Padding(2)
    sub_meshes     = fields.ListRef(SubMesh, Dependency('._num_sub_mesh'))
    index_buffer   = fields.Ref(Buffer)
    first_vertex   = fields.StructField('I')

    def _index_format(self):
        try:
            return INDEX_FORMATS[self.index_format]
        except KeyError:
            raise LogicException(f'invalid index format {self.index_format!r}') from None

    def _index_size(self):
        format, _ = self._index_format()
        return 2 if format == 'H' else 4

    def compute_index_count(self):
        '''Number of indices in all the bufferings of the index buffer.'''
        if self.index_buffer is None:
            return 0

        size = self._index_size()
        count = 0
        for buffering in self.index_buffer.data:
            if len(buffering) % size:
                raise LogicException(f'cannot form complete indices from {len(buffering)} bytes')
            count += len(buffering) // size

        return count

    def get_indices(self):
        '''Indices of the first buffering as integers.'''
        if self.index_buffer is None or not self.index_buffer.data:
            return []

        format, endianess = self._index_format()
        data = self.index_buffer.data[0]

        with Stream(data, endianess=endianess) as stream:
            return stream.read_array(format, len(data) // self._index_size())

    def set_indices(self, indices, format=None):
        '''Replace the index buffer content, optionally changing the format.'''
        if format is not None:
            self.index_format = format

        format, endianess = self._index_format()

        with Stream(None, flags='w+b', endianess=endianess) as stream:
            stream.write_array(format, indices)
            data = stream.getvalue()

        if self.index_buffer is None:
            self.index_buffer = Buffer()
        self.index_buffer.data = [data]
        self.index_buffer.stride = self._index_size()


class Shape(ResData):
    magic                          = fields.Magic(b'FSHP')
    name                           = fields.StringRef()
    flags                          = fields.StructField('I', enum=ShapeFlags, default=ShapeFlags.HAS_VERTEX_BUFFER)
    index                          = fields.StructField('H', equals_to=CurrentIndex())
    material_index                 = fields.StructField('H')
    bone_index                     = fields.StructField('H')
    vertex_buffer_index            = fields.StructField('H')
    _num_skin_bone_index           = fields.StructField('H', equals_to=Count('.skin_bone_indices'))
    vertex_skin_count              = fields.StructField('B')
    _num_mesh                      = fields.StructField('B', equals_to=Count('.meshes'))
    _num_key_shape                 = fields.StructField('B', equals_to=Count('.key_shapes'))
    target_attrib_count            = fields.StructField('B')
    _num_sub_mesh_bounding_node    = fields.StructField('H', equals_to=Count('.sub_mesh_bounding_nodes'))
    radius                         = fields.StructField('f')
    vertex_buffer                  = fields.Ref(VertexBuffer)
    meshes                         = fields.ListRef(Mesh, Dependency('._num_mesh'))
    skin_bone_indices              = fields.ArrayRef('H', Dependency('._num_skin_bone_index'))
    key_shapes                     = fields.DictRef(KeyShape)
    sub_mesh_bounding_nodes        = fields.ListRef(
        BoundingNode, Dependency('._num_sub_mesh_bounding_node'),
        when=lambda shape: shape._num_sub_mesh_bounding_node)
    # center and extent of each bounding box
    sub_mesh_boundings             = fields.ArrayRef('6f', Dependency('._bounding_count'))
    sub_mesh_bounding_indices      = fields.ArrayRef(
        'H', Dependency('._num_sub_mesh_bounding_node'),
        when=lambda shape: shape._num_sub_mesh_bounding_node)
    _user_pointer                  = fields.StructField('I', equals_to=Constant(0))

    def _bounding_count(self):
        # without nodes there is a bounding for each sub mesh of the first mesh plus the whole
        if self._num_sub_mesh_bounding_node:
            return self._num_sub_mesh_bounding_node

        if not self.meshes:
            return 0

        return len(self.meshes[0].sub_meshes) + 1
