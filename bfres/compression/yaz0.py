'''
# Yaz0

LZ77 variant used to compress the archives, big endian:

    offset  size
    0x00    4       "Yaz0"
    0x04    4       size of the decompressed data
    0x08    4       alignment (zero if not specified)
    0x0c    4       padding

what follows are groups made of a control byte and up to eight chunks, one
for each bit of the control byte starting from the most significant one:

 - a set bit means the chunk is a byte to copy as is
 - a clear bit means the chunk is a back reference of two bytes

        NR RR          copy N + 2 bytes from R + 1 bytes behind (N != 0)
        0R RR NN       copy N + 0x12 bytes from R + 1 bytes behind

The copy is done one byte at a time since the source can overlap the bytes
being produced. The decompression stops as soon as the output has the size
stated in the header.
'''
import logging

from bitstring import BitArray

from ..streams import Stream
from ..exceptions import EndOfStreamException, Yaz0Exception


logger = logging.getLogger(__name__)

MAGIC = b'Yaz0'
HEADER_SIZE = 0x10

WINDOW = 0x1000
MIN_MATCH = 3
MAX_MATCH = 0xff + 0x12
# the number of candidates examined for each position
MAX_CHAIN = 0x100

# for each control byte the flags of its chunks, most significant bit first
_GROUP_BITS = [tuple(BitArray(uint=_, length=8)) for _ in range(0x100)]


def is_compressed(data):
    '''Tell if data (bytes or a seekable stream) starts with the Yaz0 magic.'''
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data[:len(MAGIC)]) == MAGIC

    with Stream(data, leave_open=True) as stream:
        with stream.temporary_seek():
            return stream.obj.read(len(MAGIC)) == MAGIC


def _read_header(stream):
    offset = stream.tell()
    magic = stream.read(len(MAGIC))
    if magic != MAGIC:
        raise Yaz0Exception('no Yaz0 magic, found %r' % magic, offset=offset)

    size, alignment, _ = stream.read_struct('III')

    return size, alignment


def _expand(payload, size):
    output = bytearray()
    position = 0

    try:
        while len(output) < size:
            control = payload[position]
            position += 1

            for is_raw in _GROUP_BITS[control]:
                if len(output) >= size:
                    break

                if is_raw:
                    output.append(payload[position])
                    position += 1
                    continue

                code = (payload[position] << 8) | payload[position + 1]
                position += 2

                nibble = code >> 12
                if nibble:
                    length = nibble + 2
                else:
                    length = payload[position] + 0x12
                    position += 1

                start = len(output) - (code & 0xfff) - 1
                if start < 0:
                    raise Yaz0Exception(
                        'back reference before the start of the data',
                        offset=HEADER_SIZE + position)

                for index in range(min(length, size - len(output))):
                    output.append(output[start + index])
    except IndexError as e:
        raise EndOfStreamException(
            'Yaz0 data ends after %d of %d bytes' % (len(output), size),
            offset=HEADER_SIZE + position) from e

    return output


def decompress(data):
    '''Return the decompressed content of the given Yaz0 data (bytes,
    path or stream).'''
    with Stream(data, leave_open=True) as stream:
        size, _ = _read_header(stream)
        logger.debug('decompressing %d bytes', size)

        return bytes(_expand(stream.read_all(), size))


def decompress_stream(source, target):
    '''Decompress source into target returning the number of bytes written.'''
    data = decompress(source)

    with Stream(target, flags='wb', leave_open=True) as stream:
        stream.write(data)

    return len(data)


def _find_match(data, position, chains):
    '''Longest match for the bytes at position looking at the previous
    positions with the same three bytes: returns length and distance.'''
    limit = min(MAX_MATCH, len(data) - position)
    if limit < MIN_MATCH:
        return 0, 0

    best_length, best_distance = 0, 0
    candidates = chains.get(data[position:position + MIN_MATCH], ())

    for candidate in reversed(candidates[-MAX_CHAIN:]):
        distance = position - candidate
        if distance > WINDOW:
            break

        length = MIN_MATCH
        while length < limit and data[candidate + length] == data[position + length]:
            length += 1

        if length > best_length:
            best_length, best_distance = length, distance
            if length == limit:
                break

    return best_length, best_distance


def _encode_match(output, length, distance):
    distance -= 1
    if length < 0x12:
        output.append(((length - 2) << 4) | (distance >> 8))
        output.append(distance & 0xff)
    else:
        output.append(distance >> 8)
        output.append(distance & 0xff)
        output.append(length - 0x12)


def compress(data, alignment=0):
    '''Compress data with a greedy matcher; alignment is stored as is in
    the header.'''
    data = bytes(data)
    output = bytearray(MAGIC)
    output += len(data).to_bytes(4, 'big')
    output += alignment.to_bytes(4, 'big')
    output += bytes(4)

    chains = {}
    position = 0

    def _remember(start, end):
        for index in range(start, min(end, len(data) - MIN_MATCH + 1)):
            chains.setdefault(data[index:index + MIN_MATCH], []).append(index)

    while position < len(data):
        control_index = len(output)
        output.append(0)
        control = 0

        for bit in range(8):
            if position >= len(data):
                break

            length, distance = _find_match(data, position, chains)
            if length >= MIN_MATCH:
                _encode_match(output, length, distance)
            else:
                control |= 0x80 >> bit
                output.append(data[position])
                length = 1

            _remember(position, position + length)
            position += length

        output[control_index] = control

    logger.debug('compressed %d bytes into %d', len(data), len(output))

    return bytes(output)


def compress_stream(source, target, alignment=0):
    '''Compress source into target returning the number of bytes written.'''
    with Stream(source, leave_open=True) as stream:
        data = stream.read_all()

    compressed = compress(data, alignment=alignment)

    with Stream(target, flags='wb', leave_open=True) as stream:
        stream.write(compressed)

    return len(compressed)
