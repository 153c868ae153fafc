"""
# Saving of resource files

The offsets can't be known before the data they point to is written, so
saving happens in two phases: while packing a record every offset field is
written as a placeholder and the data it points to is queued; once every
queued item, string and block has its final position, the placeholders
are patched.

The file is laid out as

 1. the records, each aligned to 4 bytes, in the order they are queued
 2. the string pool, sorted
 3. the raw blocks, each with its own alignment
"""
import logging
from enum import Enum, auto

from .core import OFFSET_BIAS
from .meta import Endianess
from .streams import Stream
from .exceptions import LogicException


logger = logging.getLogger(__name__)

ALIGNMENT_SMALL = 0x40
PLACEHOLDER = -1


class EntryType(Enum):
    RES_DATA = auto()
    LIST     = auto()
    DICT     = auto()
    CUSTOM   = auto()
    STRING   = auto()
    BLOCK    = auto()


class Entry(object):
    '''Something to be written at a position not known yet, together with
    the positions of the placeholders referring to it.'''

    def __init__(self, data, type, index=-1, callback=None, alignment=0, encoding=None):
        self.data = data
        self.type = type
        self.index = index
        self.callback = callback
        self.alignment = alignment
        self.encoding = encoding
        self.references = []
        self.target = None
        self.end = None

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.type.name}, {self.data.__class__.__name__}, target={self.target})>'


class ResFileSaver(Stream):
    '''Save the given ResFile into target (a path, a file object or None for
    an in-memory buffer); the instance is good for a single call of execute().'''

    def __init__(self, res_file, target=None, encoding='ascii', leave_open=False):
        super().__init__(target, flags='w+b', endianess=Endianess.BIG_ENDIAN, encoding=encoding, leave_open=leave_open)
        self.res_file = res_file
        self.current_index = -1

        self._items = []
        self._item_map = {}
        self._strings = {}
        self._blocks = {}
        self._references = []

        self._ofs_file_size = None
        self._ofs_string_pool = None

    @property
    def version(self):
        return self.res_file.version

    def execute(self):
        logger.debug('saving %s' % self.res_file.__class__.__name__)
        self.res_file.pre_save()
        self.res_file.pack(self)

        self._write_items()
        self._write_strings()
        self._write_blocks()
        self._write_references()
        self._write_file_size()

        self.flush()

    # placeholders

    def _reference(self, entry):
        position = self.tell()
        entry.references.append(position)
        self._references.append((position, entry))
        self.write_int32(PLACEHOLDER)

    def _get_entry(self, data, type, **kwargs):
        key = (type, id(data))
        entry = self._item_map.get(key)
        if entry is None:
            entry = Entry(data, type, **kwargs)
            self._item_map[key] = entry
            self._items.append(entry)

        return entry

    def save(self, res_data, index=-1):
        '''Reference a record, written only once however many times it's referenced.'''
        if res_data is None:
            self.write_int32(0)
            return

        entry = self._get_entry(res_data, EntryType.RES_DATA)
        if index >= 0:
            entry.index = index

        self._reference(entry)

    def save_list(self, values):
        '''Reference records to be written one after the other.'''
        if not values:
            self.write_int32(0)
            return

        self._reference(self._get_entry(values, EntryType.LIST))

    def save_dict(self, values):
        if not values:
            self.write_int32(0)
            return

        self._reference(self._get_entry(values, EntryType.DICT))

    def save_custom(self, data, callback):
        '''Reference data written by callback together with the records.'''
        if data is None or (hasattr(data, '__len__') and not len(data)):
            self.write_int32(0)
            return

        self._reference(self._get_entry(data, EntryType.CUSTOM, callback=callback))

    def save_string(self, text, encoding=None):
        if text is None:
            self.write_int32(0)
            return

        encoding = encoding or self.encoding
        key = (text, encoding)
        entry = self._strings.get(key)
        if entry is None:
            entry = Entry(text, EntryType.STRING, encoding=encoding)
            self._strings[key] = entry

        self._reference(entry)

    def save_strings(self, texts, encoding=None):
        for text in texts:
            self.save_string(text, encoding=encoding)

    def save_block(self, data, alignment, callback):
        '''Reference data written by callback in the block area.'''
        if data is None or not len(data):
            self.write_int32(0)
            return

        entry = self._blocks.get(id(data))
        if entry is None:
            entry = Entry(data, EntryType.BLOCK, callback=callback, alignment=alignment)
            self._blocks[id(data)] = entry

        self._reference(entry)

    def save_field_file_size(self):
        self._ofs_file_size = self.tell()
        self.write_uint32(0)

    def save_field_string_pool(self):
        self._ofs_string_pool = self.tell()
        self.write_uint32(0)
        self.write_int32(0)

    # layout

    def _claim(self, entries, alignment=4):
        '''Fix the target of the entries at the next aligned position: a target right
        after one of its own placeholders would give a zero offset, i.e. nothing.'''
        while True:
            self.align(alignment)
            position = self.tell()
            if not any(position == _ + OFFSET_BIAS for entry in entries for _ in entry.references):
                break
            self.write_padding(4)

        for entry in entries:
            entry.target = position

        return position

    def _is_contiguous(self, entries):
        previous = None
        for entry in entries:
            if entry.target is None or entry.end is None:
                return False
            if previous is not None and previous.end != entry.target:
                return False
            previous = entry

        return True

    def _write_list(self, entry):
        elements = entry.data
        element_entries = [self._get_entry(_, EntryType.RES_DATA) for _ in elements]

        # the elements could already be there, written one by one
        if self._is_contiguous(element_entries):
            entry.target = element_entries[0].target
            return

        first = element_entries[0]
        self._claim([entry] if first.target is not None else [entry, first])

        for index, (element, element_entry) in enumerate(zip(elements, element_entries)):
            start = self.tell()
            if element_entry.target is None:
                element_entry.target = start
                element_entry.index = index

            self.current_index = index
            element.pack(self)

            if element_entry.target == start:
                element_entry.end = self.tell()

    def _write_items(self):
        # the list grows while packing
        index = 0
        while index < len(self._items):
            entry = self._items[index]
            index += 1

            if entry.target is not None:
                continue

            if entry.type == EntryType.LIST:
                self._write_list(entry)
            elif entry.type == EntryType.CUSTOM:
                self._claim([entry])
                entry.callback()
                entry.end = self.tell()
            else:
                self._claim([entry])
                self.current_index = entry.index
                entry.data.pack(self)
                entry.end = self.tell()

            logger.debug('written %r', entry)

    def _write_strings(self):
        self.align(4)
        pool_start = self.tell()

        for entry in sorted(self._strings.values(), key=lambda _: (_.data, _.encoding)):
            self.write_uint32(len(entry.data))
            entry.target = self.tell()
            self.write_string(entry.data, entry.encoding)
            self.align(4)

        pool_size = self.tell() - pool_start
        logger.debug('string pool with %d strings at 0x%x (%d bytes)', len(self._strings), pool_start, pool_size)

        if self._ofs_string_pool is None:
            return

        with self.temporary_seek(self._ofs_string_pool):
            self.write_uint32(pool_size)
            position = self.tell()
            self.write_int32(pool_start - (position + OFFSET_BIAS) if self._strings else 0)

    def _write_blocks(self):
        file_alignment = self.res_file.alignment or 0

        for entry in self._blocks.values():
            self._claim([entry], alignment=max(entry.alignment or 0, file_alignment))
            logger.debug('block of %d bytes at 0x%x', len(entry.data), entry.target)
            entry.callback()

    def _write_references(self):
        logger.debug('satisfying %d references', len(self._references))

        for position, entry in self._references:
            if entry.target is None:
                raise LogicException(f'{entry!r} has never been written', offset=position)

            with self.temporary_seek(position):
                self.write_int32(entry.target - (position + OFFSET_BIAS))

    def _write_file_size(self):
        if self._ofs_file_size is None:
            return

        with self.temporary_seek(self._ofs_file_size):
            self.write_uint32(self.length)
