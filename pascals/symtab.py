"""
block structured symbol table

three flat tables in the manner of the classical Pascal-S compiler:
  tab   identifiers, chained per block through `link`
  btab  blocks, `last` is the head of the block's chain
  atab  array descriptors

`display[level]` is the block active at each nesting level. row 0 of every table is a
sentinel, a `link` or `last` of 0 ends a chain.
"""

from enum import Enum

from tabulate import tabulate

from . import settings
from .errors import SymbolTableError


class ObjectKind(Enum):
    CONSTANT  = 'constant'
    VARIABLE  = 'variable'
    TYPE      = 'type'
    PROCEDURE = 'procedure'
    FUNCTION  = 'function'


class BaseType(Enum):
    NOTYPE = 0
    INTS   = 1
    REALS  = 2
    BOOLS  = 3
    CHARS  = 4
    ARRAYS = 5


STANDARD_PROCEDURES = ('write', 'writeln', 'read', 'readln')


class TabEntry:
    def __init__(self, name, link, kind, type, ref, normal, level, address):
        """TabEntry

        Args:
          link: index of the previous entry of the same block, 0 for none
          kind: ObjectKind
          type: BaseType
          ref: block index of a subprogram, atab index of an array
          normal: False for by-reference parameters
        """
        self.name = name
        self.link = link
        self.kind = kind
        self.type = type
        self.ref = ref
        self.normal = normal
        self.level = level
        self.address = address

    def __repr__(self):
        return (f'<TabEntry(name={self.name!r}, kind={self.kind.value}, type={self.type.name}, '
                f'ref={self.ref}, level={self.level}, address={self.address})>')


class BlockEntry:
    def __init__(self):
        self.last = 0
        self.lastpar = 0
        self.psize = 0
        self.vsize = 0

    def __repr__(self):
        return f'<BlockEntry(last={self.last}, lastpar={self.lastpar}, psize={self.psize}, vsize={self.vsize})>'


class ArrayEntry:
    def __init__(self, index_type, element_type, element_ref, low, high, element_size):
        self.index_type = index_type
        self.element_type = element_type
        self.element_ref = element_ref
        self.low = low
        self.high = high
        self.element_size = element_size
        self.size = (high - low + 1) * element_size

    def __repr__(self):
        return (f'<ArrayEntry({self.low}..{self.high} of {self.element_type.name}, '
                f'size={self.size})>')


class Table:
    """flat array of rows, row 0 is a sentinel and never handed out"""

    def __init__(self, name, sentinel):
        self.name = name
        self._rows = [sentinel]

    def append(self, row):
        self._rows.append(row)
        return len(self._rows) - 1

    def __getitem__(self, index):
        if not isinstance(index, int) or index <= 0 or index >= len(self._rows):
            raise SymbolTableError(f'invalid {self.name} index: {index}')
        return self._rows[index]

    def __len__(self):
        """number of live rows"""
        return len(self._rows) - 1

    def items(self):
        for index in range(1, len(self._rows)):
            yield index, self._rows[index]


class SymbolTable:
    def __init__(self):
        self.tab = Table('tab', TabEntry('', 0, ObjectKind.CONSTANT, BaseType.NOTYPE, 0, True, 0, 0))
        self.btab = Table('btab', BlockEntry())
        self.atab = Table('atab', ArrayEntry(BaseType.NOTYPE, BaseType.NOTYPE, 0, 0, 0, 0))
        self.level = 0
        # block of the main program
        self.display = [self.enter_block()]

    def log(self, msg):
        if settings.SHOULD_LOG_SCOPE:
            print(msg)

    @property
    def current_block(self):
        return self.display[self.level]

    def get_tab(self, index) -> TabEntry:
        return self.tab[index]

    def get_btab(self, index) -> BlockEntry:
        return self.btab[index]

    def get_atab(self, index) -> ArrayEntry:
        return self.atab[index]

    def _append(self, block_index, level, name, kind, type, ref, normal, address):
        block = self.btab[block_index]
        entry = TabEntry(name, block.last, kind, type, ref, normal, level, address)
        index = self.tab.append(entry)
        block.last = index
        self.log(f'insert: {name} -> tab[{index}] (block: {block_index}, level: {level})')
        return index

    def _search(self, block_index, name):
        key = name.lower()
        index = self.btab[block_index].last
        while index != 0:
            entry = self.tab[index]
            if entry.name.lower() == key:
                return index
            index = entry.link
        return 0

    def insert(self, name, kind, type, ref=0, normal=True, address=0):
        """append an entry to the current block

        raise SymbolTableError if the block already has `name`.
        """
        if self.lookup_current_scope(name) != 0:
            raise SymbolTableError(f"identifier '{name}' already declared in current scope")
        return self._append(self.current_block, self.level, name, kind, type, ref, normal, address)

    def lookup(self, name):
        """index of the innermost visible `name`, 0 if not found

        standard procedures are registered in the global block the first time they are missed.
        """
        self.log(f'lookup: {name}. (level: {self.level})')
        for level in range(self.level, -1, -1):
            index = self._search(self.display[level], name)
            if index != 0:
                return index

        if name.lower() in STANDARD_PROCEDURES:
            return self._append(self.display[0], 0, name.lower(), ObjectKind.PROCEDURE,
                                BaseType.NOTYPE, 0, True, 0)
        return 0

    def lookup_current_scope(self, name):
        return self._search(self.current_block, name)

    def enter_block(self):
        """allocate a block without changing the level"""
        return self.btab.append(BlockEntry())

    def push_scope(self, block=None):
        """enter a nesting level, on `block` or on a freshly allocated one

        return the block index.
        """
        self.level += 1
        if block is None:
            block = self.enter_block()
        if self.level == len(self.display):
            self.display.append(block)
        else:
            # slot of a finished sibling scope
            self.display[self.level] = block
        self.log(f'enter scope: level {self.level}, block {block}')
        return block

    def pop_scope(self):
        if self.level == 0:
            raise SymbolTableError('can not leave the global scope')
        self.log(f'leave scope: level {self.level}, block {self.display[self.level]}')
        self.level -= 1

    def set_block_params(self, block, lastpar, psize):
        entry = self.btab[block]
        entry.lastpar = lastpar
        entry.psize = psize

    def set_block_vars(self, block, vsize):
        self.btab[block].vsize = vsize

    def enter_array(self, index_type, element_type, element_ref, low, high, element_size):
        index = self.atab.append(ArrayEntry(index_type, element_type, element_ref, low, high, element_size))
        self.log(f'array: atab[{index}] = {low}..{high} of {element_type.name}')
        return index

    def parameters(self, block):
        """tab indices of the parameters of `block`, in declaration order"""
        result = []
        index = self.btab[block].lastpar
        while index != 0:
            result.append(index)
            index = self.tab[index].link
        result.reverse()
        return result

    def __str__(self):
        tab_rows = [
            (i, e.name, e.link, e.kind.value, e.type.value, e.ref, int(e.normal), e.level, e.address)
            for i, e in self.tab.items()
        ]
        btab_rows = [(i, e.last, e.lastpar, e.psize, e.vsize) for i, e in self.btab.items()]
        atab_rows = [
            (i, e.index_type.value, e.element_type.value, e.element_ref, e.low, e.high, e.element_size, e.size)
            for i, e in self.atab.items()
        ]

        lines = ['TAB (identifier table)']
        lines.append(tabulate(tab_rows or [['-'] * 9],
                              headers=['idx', 'name', 'link', 'obj', 'typ', 'ref', 'nrm', 'lev', 'adr'],
                              tablefmt='github'))
        lines.extend(['', 'BTAB (block table)'])
        lines.append(tabulate(btab_rows or [['-'] * 5],
                              headers=['idx', 'last', 'lpar', 'psize', 'vsize'], tablefmt='github'))
        lines.extend(['', 'ATAB (array table)'])
        lines.append(tabulate(atab_rows or [['-'] * 8],
                              headers=['idx', 'xtyp', 'etyp', 'eref', 'low', 'high', 'elsz', 'size'],
                              tablefmt='github'))
        return '\n'.join(lines)
