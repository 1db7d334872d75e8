'''
Symbol table tests
'''

from rdpcalc.util import SymbolTableError
from rdpcalc.symtable import SymbolTable, Descriptor, Flags, djb2

from pytest import raises


def test_djb2():
    assert djb2('') == 5381
    assert djb2('a') == 5381 * 33 + ord('a')
    assert djb2('ab') == (5381 * 33 + ord('a')) * 33 + ord('b')


def test_djb2_wraps_around():
    assert djb2('x' * 100) < 1 << 64


def test_insert_find(symbols):
    x = Descriptor(4.0)
    symbols.insert('x', x)
    assert symbols.find('x') is x
    assert symbols.find('y') is None
    assert 'x' in symbols
    assert 'y' not in symbols
    assert len(symbols) == 1


def test_find_returns_mutable_descriptor(symbols):
    symbols.insert('x', Descriptor(1.0))
    symbols.find('x').value = 2.0
    assert symbols.find('x').value == 2.0


def test_newest_shadows(symbols):
    symbols.insert('x', Descriptor(1.0))
    symbols.insert('x', Descriptor(2.0))
    assert symbols.find('x').value == 2.0
    assert len(symbols) == 2
    assert symbols.remove('x').value == 2.0
    assert symbols.find('x').value == 1.0


def test_remove(symbols):
    symbols.insert('x', Descriptor(1.0, Flags.CONSTANT))
    removed = symbols.remove('x')
    assert removed == Descriptor(1.0, Flags.CONSTANT)
    assert removed.constant
    assert symbols.find('x') is None
    assert len(symbols) == 0
    assert symbols.load_factor == 0.0


def test_remove_absent_leaves_placeholder(symbols):
    placeholder = Descriptor(9.0)
    assert symbols.remove('nope', placeholder) is placeholder
    assert symbols.remove('nope') is None


def test_remove_from_middle_of_chain(monkeypatch):
    # Never resize. Letters with odd codes all hash to bucket 0.
    monkeypatch.setattr(SymbolTable, 'LOAD_FACTOR', float('inf'))
    table = SymbolTable(2)
    for name in 'ace':
        table.insert(name, Descriptor(float(ord(name))))
    assert table.remove('c').value == float(ord('c'))
    assert [key for key, _ in table] == ['e', 'a']


def test_load_factor(symbols):
    for i in range(10):
        symbols.insert('v{}'.format(i), Descriptor(float(i)))
        assert symbols.load_factor == symbols.size / symbols.capacity


def test_resize_before_insert():
    table = SymbolTable(4)
    for name in 'abc':
        table.insert(name, Descriptor(0.0))
    assert (table.capacity, table.load_factor) == (4, 0.75)
    table.insert('d', Descriptor(0.0))
    assert table.capacity == 8
    assert table.load_factor == 0.5
    assert table.load_factor < 1.0


def test_rehash_keeps_everything():
    table = SymbolTable(2)
    names = ['n{}'.format(i) for i in range(100)]
    for i, name in enumerate(names):
        table.insert(name, Descriptor(float(i)))
        assert table.find(name).value == float(i)
    assert table.capacity == 256
    for i, name in enumerate(names):
        assert table.find(name).value == float(i)
    assert sorted(key for key, _ in table) == sorted(names)


def test_rehash_keeps_shadowing():
    table = SymbolTable(2)
    table.insert('x', Descriptor(1.0))
    table.insert('x', Descriptor(2.0))
    for i in range(20):
        table.insert('y{}'.format(i), Descriptor(0.0))
    assert table.find('x').value == 2.0


def test_capacity_overflow(monkeypatch):
    monkeypatch.setattr(SymbolTable, 'MAX_CAPACITY', 4)
    table = SymbolTable(4)
    for name in 'abc':
        table.insert(name, Descriptor(0.0))
    with raises(SymbolTableError, match='maximum size exceeded'):
        table.insert('d', Descriptor(0.0))


def test_bad_initial_capacity():
    with raises(SymbolTableError):
        SymbolTable(0)
    with raises(SymbolTableError):
        SymbolTable(1)


def test_load_factor_below_one_after_resize():
    for capacity in range(2, 12):
        table = SymbolTable(capacity)
        for i in range(200):
            before = table.capacity
            table.insert('k{}'.format(i), Descriptor(0.0))
            if table.capacity != before:
                assert table.load_factor < 1.0
