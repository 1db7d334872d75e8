'''
Symbol table: identifier to value and flags.

Chained hash table, doubling its bucket array once it gets three quarters
full.
'''

from enum import IntFlag
import logging

from .util import SymbolTableError


logger = logging.getLogger(__name__)

# size_t arithmetic
_MASK = (1 << 64) - 1


class Flags(IntFlag):
    CONSTANT = 1


class Descriptor:
    '''
    A bound value, and whether it may be re-assigned.
    '''
    __slots__ = 'value', 'flags'

    def __init__(self, value, flags=Flags(0)):
        self.value = value
        self.flags = Flags(flags)

    @property
    def constant(self):
        return bool(self.flags & Flags.CONSTANT)

    def __eq__(self, other):
        if not isinstance(other, Descriptor):
            return NotImplemented
        return (self.value, self.flags) == (other.value, other.flags)

    def __repr__(self):
        return '{0}({1!r}, {2!s})'.format(type(self).__name__,
                                          self.value,
                                          self.flags)


def djb2(key):
    '''
    DJB2 hash of the UTF-8 encoding of key, wrapped to 64 bits.
    '''
    h = 5381
    for byte in key.encode('utf-8'):
        h = (h * 33 + byte) & _MASK
    return h


class _Node:
    __slots__ = 'key', 'descriptor', 'next'

    def __init__(self, key, descriptor, next=None):
        self.key = key
        self.descriptor = descriptor
        self.next = next


class SymbolTable:
    '''
    Hash table from identifiers to descriptors.

    insert() does not replace existing keys: an equal key inserted later
    shadows the older entry until it is removed.

    Starts with at least two buckets: a single bucket would double to two
    with both occupied, leaving the table full right after a resize.
    '''

    INITIAL_CAPACITY = 16
    LOAD_FACTOR = 0.75
    # Doubling past this wraps a size_t around.
    MAX_CAPACITY = 1 << 63

    def __init__(self, initial_capacity=None):
        if initial_capacity is None:
            initial_capacity = type(self).INITIAL_CAPACITY
        if initial_capacity < 2:
            raise SymbolTableError('A hash table with initial capacity {0} '
                                   'could not be allocated.'
                                   .format(initial_capacity))
        self.size = 0
        self.capacity = initial_capacity
        self.load_factor = 0.0
        self.table = self._allocate(initial_capacity)

    def _allocate(self, capacity):
        try:
            return [None] * capacity
        except (MemoryError, OverflowError) as e:
            raise SymbolTableError('Hash table could not allocate {0} '
                                   'buckets.'.format(capacity), e) from e

    def _bucket(self, key, capacity=None):
        return djb2(key) % (capacity or self.capacity)

    def _update_load_factor(self):
        self.load_factor = self.size / self.capacity

    def _resize(self):
        '''
        Double the bucket array, rehashing every entry.
        '''
        new_capacity = self.capacity << 1
        if new_capacity > type(self).MAX_CAPACITY:
            raise SymbolTableError('Hash table maximum size exceeded.')
        new_table = self._allocate(new_capacity)
        for head in self.table:
            chain = []
            while head is not None:
                chain.append(head)
                head = head.next
            # Back to front, so shadowing entries stay in front.
            for node in reversed(chain):
                h = self._bucket(node.key, new_capacity)
                node.next = new_table[h]
                new_table[h] = node
        logger.debug('resized symbol table from %d to %d buckets',
                     self.capacity, new_capacity)
        self.table = new_table
        self.capacity = new_capacity
        self._update_load_factor()

    def insert(self, key, descriptor):
        if self.load_factor >= type(self).LOAD_FACTOR:
            self._resize()
        h = self._bucket(key)
        self.table[h] = _Node(key, descriptor, self.table[h])
        self.size += 1
        self._update_load_factor()

    def find(self, key):
        '''
        Return the newest descriptor bound to key, None if unbound.
        '''
        node = self.table[self._bucket(key)]
        while node is not None:
            if node.key == key:
                return node.descriptor
            node = node.next
        return None

    def remove(self, key, default=None):
        '''
        Unlink the newest entry for key and return its descriptor.

        Returns default if key is unbound.
        '''
        h = self._bucket(key)
        prev, node = None, self.table[h]
        while node is not None:
            if node.key == key:
                break
            prev, node = node, node.next
        else:
            return default
        if prev is None:
            self.table[h] = node.next
        else:
            prev.next = node.next
        self.size -= 1
        self._update_load_factor()
        return node.descriptor

    def __len__(self):
        return self.size

    def __contains__(self, key):
        return self.find(key) is not None

    def __iter__(self):
        '''
        Yield (key, descriptor) pairs, shadowed entries included.
        '''
        for head in self.table:
            node = head
            while node is not None:
                yield node.key, node.descriptor
                node = node.next

    def __repr__(self):
        return '{0}(size={1}, capacity={2})'.format(type(self).__name__,
                                                    self.size,
                                                    self.capacity)
