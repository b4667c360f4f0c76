import pytest

from pascals.errors import SymbolTableError
from pascals.symtab import BaseType, ObjectKind, SymbolTable

VAR = ObjectKind.VARIABLE
INTS = BaseType.INTS


@pytest.fixture
def table():
    return SymbolTable()


def test_fresh_table(table):
    assert table.level == 0
    assert table.display == [1]
    assert table.current_block == 1
    assert len(table.tab) == 0
    assert len(table.btab) == 1
    assert len(table.atab) == 0


def test_insert_chains_block_entries(table):
    first = table.insert('x', VAR, INTS)
    second = table.insert('y', VAR, INTS, address=1)

    assert (first, second) == (1, 2)
    assert table.get_tab(first).link == 0
    assert table.get_tab(second).link == first
    assert table.get_btab(1).last == second
    assert table.get_tab(second).level == 0


def test_duplicate_in_same_scope(table):
    table.insert('x', VAR, INTS)
    with pytest.raises(SymbolTableError):
        table.insert('x', VAR, INTS)
    with pytest.raises(SymbolTableError):
        table.insert('X', VAR, INTS)


def test_lookup_missing(table):
    assert table.lookup('nothing') == 0


def test_shadowing(table):
    outer = table.insert('x', VAR, INTS)
    table.push_scope()
    inner = table.insert('x', VAR, BaseType.REALS)

    assert inner != outer
    assert table.lookup('x') == inner
    assert table.lookup('X') == inner
    assert table.get_tab(inner).level == 1

    table.pop_scope()
    assert table.lookup('x') == outer


def test_names_leave_with_their_scope(table):
    table.push_scope()
    local = table.insert('tmp', VAR, INTS)
    assert table.lookup('tmp') == local
    table.pop_scope()
    assert table.lookup('tmp') == 0


def test_lookup_current_scope_ignores_outer(table):
    table.insert('x', VAR, INTS)
    table.push_scope()
    assert table.lookup_current_scope('x') == 0
    assert table.lookup('x') != 0


def test_standard_procedures_are_global(table):
    table.push_scope()
    index = table.lookup('writeln')
    entry = table.get_tab(index)

    assert entry.kind == ObjectKind.PROCEDURE
    assert entry.level == 0
    assert entry.ref == 0
    assert table.get_btab(1).last == index
    assert table.lookup('WriteLn') == index


def test_enter_block_keeps_level(table):
    block = table.enter_block()
    assert block == 2
    assert table.level == 0
    assert table.current_block == 1


def test_push_scope_on_given_block(table):
    block = table.enter_block()
    assert table.push_scope(block) == block
    assert table.current_block == block
    assert table.level == 1


def test_display_slot_is_reused(table):
    first = table.push_scope()
    table.pop_scope()
    second = table.push_scope()

    assert first != second
    assert table.display == [1, second]


def test_pop_global_scope(table):
    with pytest.raises(SymbolTableError):
        table.pop_scope()


@pytest.mark.parametrize('index', [0, -1, 99])
def test_invalid_tab_index(table, index):
    with pytest.raises(SymbolTableError):
        table.get_tab(index)


def test_invalid_block_and_array_index(table):
    with pytest.raises(SymbolTableError):
        table.get_btab(0)
    with pytest.raises(SymbolTableError):
        table.get_atab(1)


def test_enter_array(table):
    index = table.enter_array(INTS, BaseType.REALS, 0, 1, 10, 1)
    entry = table.get_atab(index)
    assert index == 1
    assert (entry.low, entry.high, entry.size) == (1, 10, 10)

    nested = table.enter_array(BaseType.CHARS, BaseType.ARRAYS, index, 0, 2, entry.size)
    assert table.get_atab(nested).size == 30


def test_block_bookkeeping(table):
    block = table.enter_block()
    table.push_scope(block)
    a = table.insert('a', VAR, INTS)
    b = table.insert('b', VAR, INTS, normal=False, address=1)
    table.set_block_params(block, b, 2)
    table.set_block_vars(block, 3)

    entry = table.get_btab(block)
    assert (entry.lastpar, entry.psize, entry.vsize) == (b, 2, 3)
    assert table.parameters(block) == [a, b]
    assert table.parameters(1) == []


def test_render(table):
    table.insert('x', VAR, INTS)
    text = str(table)
    assert 'TAB (identifier table)' in text
    assert 'BTAB (block table)' in text
    assert 'ATAB (array table)' in text
    assert 'x' in text
