from ..core import ResData
from .. import fields
from ..gx2 import GX2AttribFormat
from ..saver import ALIGNMENT_SMALL
from ..properties import Dependency, Count, Constant, CurrentIndex
from ..exceptions import LogicException


class Buffer(ResData):
    '''Raw data for the GPU (vertices or indices), possibly with more than
    one copy (buffering) of the same size.'''
    _data_pointer    = fields.StructField('I', equals_to=Constant(0))
    _size            = fields.StructField('I', equals_to=Dependency('._buffering_size'))
    _handle          = fields.StructField('I', equals_to=Constant(0))
    stride           = fields.StructField('H')
    _buffering_count = fields.StructField('H', equals_to=Count('.data'))
    _context_pointer = fields.StructField('I', equals_to=Constant(0))
    data             = fields.CustomRef('read_data', 'write_data', alignment=ALIGNMENT_SMALL, default=[])

    def _buffering_size(self):
        sizes = set(len(_) for _ in self.data)
        if len(sizes) > 1:
            raise LogicException(f'the bufferings of {self!r} have different sizes: {sorted(sizes)}')

        return sizes.pop() if sizes else 0

    def read_data(self, loader):
        return [loader.read(self._size) for _ in range(self._buffering_count)]

    def write_data(self, saver, data):
        for buffering in data:
            saver.write(bytes(buffering))


class VertexAttrib(ResData):
    name         = fields.StringRef()
    buffer_index = fields.StructField('B')
    _pad         = fields.Padding(1)
    offset       = fields.StructField('H')
    format       = fields.StructField('I', enum=GX2AttribFormat, default=GX2AttribFormat.FORMAT_32_32_32_SINGLE)


class VertexBuffer(ResData):
    '''Attributes of the vertices of the shapes, the data lives in the buffers.'''
    magic              = fields.Magic(b'FVTX')
    _num_attrib        = fields.StructField('B', equals_to=Count('.attributes'))
    _num_buffer        = fields.StructField('B', equals_to=Count('.buffers'))
    index              = fields.StructField('H', equals_to=CurrentIndex())
    vertex_count       = fields.StructField('I', equals_to=Dependency('.compute_vertex_count'))
    vertex_skin_count  = fields.StructField('B')
    _pad               = fields.Padding(3)
    _attribute_list    = fields.MirrorListRef(Dependency('.attributes.values'))
    attributes         = fields.DictRef(VertexAttrib)
    buffers            = fields.ListRef(Buffer, Dependency('._num_buffer'))
    _user_pointer      = fields.StructField('I', equals_to=Constant(0))

    def compute_vertex_count(self):
        '''Number of elements of the first buffer.'''
        if not self.buffers or not self.buffers[0].data or not self.buffers[0].stride:
            return 0

        first = self.buffers[0]
        size = len(first.data[0])
        if size % first.stride:
            raise LogicException(f'the stride {first.stride} doesn\'t divide the {size} bytes of the buffer')

        return size // first.stride
