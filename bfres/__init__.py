"""
# bfres

Read and write the resource archives ("FRES") of the console graphics
library: models, textures, skeletons and animations stored as a graph of
records connected by offsets.

Loading builds the graph in memory

    res_file = bfres.load_root('Model.bfres')
    model = res_file.models['Body']

where the same record referenced from different places is the same
instance; saving lays out the records again and patches the offsets

    data = bfres.save_root(res_file)

The archives are usually compressed with Yaz0, open_archive() takes care
of that.
"""
import logging

from .compression import yaz0
from .dicts import ResDict
from .enum import Compliant
from .resfile import ResFile, ByteOrder, load_root, save_root
from .streams import Stream
from .exceptions import (
    ResException, FormatException, MagicException, EndOfStreamException, Yaz0Exception, LogicException,
)


logger = logging.getLogger(__name__)


def open_archive(source, encoding='ascii', compliant=Compliant.NONE):
    '''Load the archive at source (path, bytes or stream) decompressing it if needed.'''
    with Stream(source, leave_open=True) as stream:
        data = stream.read_all()

    if yaz0.is_compressed(data):
        logger.debug('archive is Yaz0 compressed')
        data = yaz0.decompress(data)

    return load_root(data, encoding=encoding, compliant=compliant)
