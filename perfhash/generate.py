#!/usr/bin/env python
# vim:fileencoding=utf-8
# License: GPLv3 Copyright: 2019, Kovid Goyal <kovid at kovidgoyal.net>

'''
Generate a minimal perfect hash function for a list of keys.

The algorithm the program uses is described in the paper
'Optimal algorithms for minimal perfect hashing',
Z. J. Czech, G. Havas and B.S. Majewski.

The algorithm works like this:

1.  You have K keys, that you want to perfectly hash against some
    desired hash values.

2.  Choose a number N larger than K.  This is the number of
    vertices in a graph G, and also the size of the resulting table G.

3.  Pick two random hash functions f1, f2, that return values from 0..N-1.

4.  Now, for all keys, you draw an edge between vertices f1(key) and f2(key)
    of the graph G, and associate the desired hash value with that edge.

5.  If G is cyclic, go back to step 2.

6.  Assign values to each vertex such that, for each edge, you can add
    the values for the two vertices and get the desired (hash) value
    for that edge.  This task is easy, because the graph is acyclic.
    This is done by picking a vertex, and assigning it a value of 0.
    Then do a depth-first search, assigning values to new vertices so that
    they sum up properly.

7.  f1, f2, and vertex values of G now make up a perfect hash function.

Steps 5 and 6 are combined: the vertex values are assigned by a traversal
that stops as soon as it finds a cycle. When that happens the graph, the
hash functions and the partial vertex values are all discarded. A key that
both hash functions send to the same vertex is a self loop, it is kept when
twice the value of that vertex can equal the desired hash value.
'''

import math
import random
from collections import Counter

from .constants import DEFAULT_MAX_RATIO, DEFAULT_TRIALS, GROWTH_FACTOR, LARGE_KEY_COUNT
from .graph import Graph
from .hashes import StrSaltHash
from .utils import stderr_log


class DuplicateKeysError(ValueError):

    def __init__(self, duplicates):
        self.duplicates = duplicates
        shown = ', '.join(map(repr, duplicates[:5]))
        if len(duplicates) > 5:
            shown += ', ...'
        ValueError.__init__(self, f'duplicate keys: {shown}')


class TooManyIterationsError(Exception):
    pass


class InvariantError(AssertionError):
    pass


def check_keys(keys):
    if not isinstance(keys, (list, tuple)):
        raise TypeError('list or tuple expected')
    for key in keys:
        if not isinstance(key, str):
            raise TypeError('key is not a string: %r' % (key,))
    counts = Counter(keys)
    if len(counts) != len(keys):
        raise DuplicateKeysError([k for k, c in counts.items() if c > 1])


class SearchState:
    '''
    The trial and escalation loop of the random search. Every call to
    advance() starts a new trial and returns the number of vertices to use
    for it. After every 'trials' failures the graph is grown a little, and
    once it becomes larger than 'max_ratio' times the number of keys the
    search is abandoned.
    '''

    def __init__(self, NK, trials=DEFAULT_TRIALS, max_ratio=DEFAULT_MAX_RATIO):
        if trials < 1:
            raise ValueError('trials must be at least 1')
        self.NK = NK
        self.NG = NK + 1
        self.trials = trials
        self.max_ratio = max_ratio
        self.limit = max_ratio * (NK + 1)
        self.attempts = 0
        self.attempts_at_ng = 0
        self.history = []

    @property
    def grows_next(self):
        return self.attempts > 0 and self.attempts % self.trials == 0

    def advance(self):
        if self.grows_next:
            self.NG = max(self.NG + 1, math.ceil(GROWTH_FACTOR * self.NG))
            self.attempts_at_ng = 0
        if self.NG > self.limit:
            raise TooManyIterationsError(
                f'No acyclic graph found for {self.NK} keys after'
                f' {self.attempts} trials, NG would exceed {self.limit}')
        self.attempts += 1
        self.attempts_at_ng += 1
        self.history.append(self.NG)
        return self.NG


def build_graph(keys, NG, f1, f2):
    G = Graph(NG)
    # Connect vertices given by the values of the two hash functions
    # for each key.  Associate the desired hash value with each edge.
    for hashval, key in enumerate(keys):
        G.connect(f1(key), f2(key), hashval)
    return G


def verify(keys, f1, f2, vertex_values):
    NG = len(vertex_values)
    for hashval, key in enumerate(keys):
        got = (vertex_values[f1(key)] + vertex_values[f2(key)]) % NG
        if got != hashval:
            raise InvariantError(
                f'perfect hash failed for key: {key!r} got: {got} expected: {hashval}')


def generate_hash(
    keys, Hash=StrSaltHash, trials=DEFAULT_TRIALS, max_ratio=DEFAULT_MAX_RATIO,
    rng=None, log=None, warn=None
):
    '''
    Return hash functions f1 and f2, and G for a perfect minimal hash.
    Input is a list or tuple of 'keys', whose indices are the desired hash
    values. 'Hash' is a random hash function generator, that means
    Hash(N, rng) returns a random hash function which returns hash values
    from 0..N-1. Pass a seeded random.Random as 'rng' to make the search
    reproducible. 'log' is called like print() with progress information,
    'warn' with warnings, which go to stderr by default.
    '''
    check_keys(keys)
    NK = len(keys)
    log = log or (lambda *a, **kw: None)
    warn = warn or stderr_log()
    if NK > LARGE_KEY_COUNT and Hash is StrSaltHash:
        warn('WARNING: You have %d keys.' % NK)
        warn('         Using --hft=1 is likely to fail for so many keys.')
        warn('         Please use --hft=2 instead.')

    def new_rng():
        if rng is None:
            return random.Random()
        return random.Random(rng.getrandbits(64))

    state = SearchState(NK, trials, max_ratio)
    log('NG = %d' % state.NG)
    while True:
        announce = state.attempts == 0 or state.grows_next
        NG = state.advance()
        if announce:
            log('\nGenerating graphs NG = %d ' % NG, end='')
        log('.', end='')

        f1 = Hash(NG, new_rng())  # Create 2 random hash functions
        f2 = Hash(NG, new_rng())
        G = build_graph(keys, NG, f1, f2)

        # Try to assign the vertex values.  This will fail when the graph
        # is cyclic.  But when the graph is acyclic it will succeed and we
        # break out, because we're done.
        if G.assign_vertex_values():
            break

    log('\nAcyclic graph found after %d trials.' % state.attempts)
    log('NG = %d' % NG)

    # Sanity check the result by actually verifying that all the keys
    # hash to the right value.
    verify(keys, f1, f2, G.vertex_values)
    log('OK')
    return f1, f2, G.vertex_values


def replay_hash(keys, NG, f1, f2):
    '''
    Return G for the fixed hash functions f1 and f2 with NG vertices, without
    any random search. Used to reproduce a construction found earlier.
    '''
    check_keys(keys)
    if f1.N != NG or f2.N != NG:
        raise ValueError(f'The hash functions must have modulus {NG}')
    G = build_graph(keys, NG, f1, f2)
    if not G.assign_vertex_values():
        raise InvariantError(
            f'The parameters NG={NG} S1={f1.formatted_salt()!r}'
            f' S2={f2.formatted_salt()!r} cannot be assigned vertex values')
    verify(keys, f1, f2, G.vertex_values)
    return G.vertex_values


def parse_replay(text, Hash=StrSaltHash):
    ' Parse a replay token of the form: N;salt1;salt2 '
    parts = text.split(';')
    if len(parts) != 3:
        raise ValueError(f'Expected NG;salt1;salt2 not: {text!r}')
    try:
        NG = int(parts[0])
    except ValueError:
        raise ValueError(f'NG must be an integer not: {parts[0]!r}') from None
    if NG < 1:
        raise ValueError(f'NG must be positive not: {NG}')
    return NG, Hash.from_salt(NG, parts[1]), Hash.from_salt(NG, parts[2])


def format_replay(f1, f2):
    return f'{f1.N};{f1.formatted_salt()};{f2.formatted_salt()}'
