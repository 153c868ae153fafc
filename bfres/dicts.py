"""
# Resource dictionary

All the named collections of a resource file are stored as dictionaries:

    offset  size
    0x00    4       size in bytes of the dictionary
    0x04    4       number of entries (root node excluded)
    0x08    16      root node
    0x18    16 * n  entry nodes

where each node is

    0x00    4       reference: index of the bit tested by the node (root is -1)
    0x04    2       index of the left child
    0x06    2       index of the right child
    0x08    4       offset to the name
    0x0c    4       offset to the data

The nodes form a Patricia trie over the bits of the names; the bits are
counted starting from the last character, least significant bit first.
When unpacking the entries are simply read in order, the trie is rebuilt
from scratch when packing.
"""
import logging
from collections.abc import MutableMapping

from .exceptions import ResException, FormatException, LogicException


logger = logging.getLogger(__name__)

DICT_HEADER_SIZE = 8
NODE_SIZE = 16
ROOT_REFERENCE = -1


class Node(object):
    __slots__ = ('reference', 'left', 'right', 'key')

    def __init__(self, reference, left, right, key):
        self.reference = reference
        self.left = left
        self.right = right
        self.key = key

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.reference}, {self.left}, {self.right}, {self.key!r})>'


def get_bit(key: bytes, bit: int) -> int:
    index = bit >> 3
    if index >= len(key):
        return 0

    return (key[len(key) - 1 - index] >> (bit & 7)) & 1


def first_different_bit(a: bytes, b: bytes) -> int:
    for bit in range(max(len(a), len(b)) * 8):
        if get_bit(a, bit) != get_bit(b, bit):
            return bit

    raise LogicException(f'names {a!r} and {b!r} can\'t be distinguished in a dictionary')


def _walk(nodes, key, stop_bit=None):
    '''Go down the trie following the key until a back edge (or a node testing
    a bit not lower than stop_bit) is found: returns parent and child indexes.'''
    parent = 0
    child = nodes[0].left
    while nodes[child].reference > nodes[parent].reference:
        if stop_bit is not None and nodes[child].reference >= stop_bit:
            break
        parent = child
        node = nodes[child]
        child = node.right if get_bit(key, node.reference) else node.left

    return parent, child


def build_trie(keys):
    '''Return the list of nodes (root included) for the keys in the given order.'''
    nodes = [Node(ROOT_REFERENCE, 0, 0, b'')]

    for key in keys:
        _, closest = _walk(nodes, key)
        bit = first_different_bit(key, nodes[closest].key)
        parent, child = _walk(nodes, key, stop_bit=bit)

        index = len(nodes)
        if get_bit(key, bit):
            nodes.append(Node(bit, child, index, key))
        else:
            nodes.append(Node(bit, index, child, key))

        # the root has only the left branch
        if parent == 0 or not get_bit(key, nodes[parent].reference):
            nodes[parent].left = index
        else:
            nodes[parent].right = index

    return nodes


def search_trie(nodes, key):
    '''Index of the node with the key, -1 if missing.'''
    _, index = _walk(nodes, key)

    return index if index and nodes[index].key == key else -1


class ResDict(MutableMapping):
    '''Named values of a single type (a record class or str) with unique names:
    the enumeration follows the order of the file or of the insertion.

    Besides the mapping interface you can access the values by position with at().'''

    def __init__(self, item_type=None, items=None):
        self.item_type = item_type
        self._items = {}

        if items is not None:
            for name, value in (items.items() if hasattr(items, 'items') else items):
                self.add(name, value)

    def __getitem__(self, name):
        return self._items[name]

    def __setitem__(self, name, value):
        if not isinstance(name, str):
            raise TypeError(f'the names of a dictionary must be strings, not {name.__class__.__name__}')

        self._items[name] = value

    def __delitem__(self, name):
        del self._items[name]

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def __eq__(self, other):
        if isinstance(other, ResDict):
            return list(self._items.items()) == list(other._items.items())

        return super().__eq__(other)

    __hash__ = None

    def __repr__(self):
        type_name = self.item_type.__name__ if self.item_type is not None else None
        return '<%s[%s](%s)>' % (self.__class__.__name__, type_name, ', '.join(map(repr, self._items)))

    def add(self, name, value):
        if name in self._items:
            raise KeyError(f'name {name!r} is already present')

        self[name] = value

    def at(self, index):
        return list(self._items.values())[index]

    def index_of(self, name):
        for index, key in enumerate(self._items):
            if key == name:
                return index

        return -1

    def search(self, name, encoding='ascii'):
        '''Look for the name using the same trie written in the file: it returns
        the index of the entry, -1 if missing.'''
        if not name:
            return -1

        nodes = build_trie([_.encode(encoding) for _ in self._items])
        index = search_trie(nodes, name.encode(encoding))

        return index - 1 if index > 0 else -1

    def unpack(self, loader):
        offset = loader.tell()
        loader.read_uint32()  # size
        count = loader.read_int32()

        if count < 0:
            raise FormatException(f'dictionary with {count} entries', offset=offset)

        entries = []
        for index in range(count + 1):
            loader.read_struct('IHH')  # the trie is rebuilt when packing
            name_offset = loader.read_offset()
            data_offset = loader.read_offset()
            if index:
                entries.append((name_offset, data_offset))

        for name_offset, data_offset in entries:
            name = loader.load_string(name_offset)
            if name is None:
                raise FormatException('dictionary entry without a name', offset=offset)
            if name in self._items:
                raise FormatException(f'name {name!r} is duplicated in the dictionary', offset=offset)

            try:
                if self.item_type is str:
                    value = loader.load_string(data_offset)
                else:
                    value = loader.load(self.item_type, data_offset)
            except ResException as e:
                e.chain.append('ResDict[%r]' % name)
                raise

            self._items[name] = value

    def pack(self, saver):
        names = list(self._items)
        nodes = build_trie([_.encode(saver.encoding) for _ in names])

        saver.write_uint32(DICT_HEADER_SIZE + NODE_SIZE * len(nodes))
        saver.write_int32(len(names))

        for index, node in enumerate(nodes):
            saver.write_struct('IHH', node.reference & 0xffffffff, node.left, node.right)

            if not index:
                saver.save_string(None)
                saver.save(None)
                continue

            name = names[index - 1]
            value = self._items[name]

            saver.save_string(name)
            if self.item_type is str:
                saver.save_string(value)
            else:
                saver.save(value, index=index - 1)
