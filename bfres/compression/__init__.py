from .yaz0 import compress, compress_stream, decompress, decompress_stream, is_compressed
