#!/usr/bin/env python
# vim:fileencoding=utf-8
# License: GPLv3 Copyright: 2019, Kovid Goyal <kovid at kovidgoyal.net>

import random

import pytest

from perfhash.generate import (
    DuplicateKeysError, InvariantError, SearchState, TooManyIterationsError,
    format_replay, generate_hash, parse_replay, replay_hash, verify
)
from perfhash.hashes import IntSaltHash, StrSaltHash

WORDS = [
    'and', 'as', 'assert', 'break', 'class', 'continue', 'def', 'del', 'elif',
    'else', 'except', 'finally', 'for', 'from', 'global', 'if', 'import', 'in',
    'is', 'lambda', 'nonlocal', 'not', 'or', 'pass', 'raise', 'return', 'try',
    'while', 'with', 'yield', 'False', 'None', 'True', 'async', 'await',
]


class UnusableRandom(random.Random):

    def getrandbits(self, k):
        raise AssertionError('randomness must not be used')

    def random(self):
        raise AssertionError('randomness must not be used')


class ConstantHash:
    ' Maps every key to vertex zero, so every edge is a self loop '

    def __init__(self, N, rng=None):
        self.N = N

    def __call__(self, key):
        return 0


def assert_perfect(keys, f1, f2, G):
    NG = len(G)
    assert f1.N == f2.N == NG
    assert NG > len(keys)
    for i, key in enumerate(keys):
        assert (G[f1(key)] + G[f2(key)]) % NG == i


def test_three_keys():
    keys = ['a', 'b', 'c']
    f1, f2, G = generate_hash(keys, rng=random.Random(0))
    assert len(G) >= 4
    assert_perfect(keys, f1, f2, G)


@pytest.mark.parametrize('Hash', (StrSaltHash, IntSaltHash))
def test_round_trip_for_every_key(Hash):
    keys = WORDS + [f'key{i}' for i in range(150)]
    f1, f2, G = generate_hash(keys, Hash, rng=random.Random(1))
    assert_perfect(keys, f1, f2, G)
    assert all(0 <= v < len(G) for v in G)


def test_tuple_of_keys_and_empty_input():
    f1, f2, G = generate_hash((), rng=random.Random(0))
    assert G == [0]
    keys = ('x1', 'x2')
    assert_perfect(keys, *generate_hash(keys, rng=random.Random(0)))


def test_duplicates_rejected_before_any_randomness():
    with pytest.raises(DuplicateKeysError) as e:
        generate_hash(['a', 'a'], rng=UnusableRandom())
    assert e.value.duplicates == ['a']
    assert isinstance(e.value, ValueError)
    assert 'duplicate keys' in str(e.value)


def test_bad_key_types():
    with pytest.raises(TypeError):
        generate_hash({'a', 'b'})
    with pytest.raises(TypeError):
        generate_hash(['a', 1])


def test_seeded_search_is_reproducible():
    a = generate_hash(WORDS, rng=random.Random(42))
    b = generate_hash(WORDS, rng=random.Random(42))
    assert a[2] == b[2]
    assert a[0].salt == b[0].salt
    assert a[1].salt == b[1].salt


def test_search_exhaustion():
    with pytest.raises(TooManyIterationsError):
        generate_hash(['a', 'b'], ConstantHash, trials=1, max_ratio=2)


def test_progress_is_logged():
    messages = []

    def log(*args, **kw):
        messages.append(' '.join(map(str, args)))

    generate_hash(WORDS, rng=random.Random(5), log=log)
    text = ''.join(messages)
    assert 'Generating graphs NG = 36' in text
    assert 'Acyclic graph found after' in text
    assert messages[-1] == 'OK'


def test_search_state_escalation():
    s = SearchState(10, trials=2)
    assert s.NG == 11
    history = [s.advance() for i in range(12)]
    assert history[:4] == [11, 11, 12, 12]
    assert history == sorted(history)
    assert s.history == history
    assert s.attempts == 12
    assert s.attempts_at_ng == 2


def test_search_state_growth_is_geometric():
    s = SearchState(100, trials=1)
    seen = [s.advance() for i in range(3)]
    assert seen == [101, 107, 113]


def test_search_state_cap():
    s = SearchState(1, trials=1, max_ratio=3)
    assert [s.advance() for i in range(5)] == [2, 3, 4, 5, 6]
    with pytest.raises(TooManyIterationsError):
        s.advance()
    assert s.attempts == 5
    with pytest.raises(ValueError):
        SearchState(1, trials=0)


def test_verify_detects_broken_table():
    f1, f2 = {'a': 0, 'b': 1}.get, {'a': 0, 'b': 2}.get
    verify(['a', 'b'], f1, f2, [0, 1, 0])
    with pytest.raises(InvariantError):
        verify(['a', 'b'], f1, f2, [0, 0, 0])
    assert issubclass(InvariantError, AssertionError)


@pytest.mark.parametrize('Hash', (StrSaltHash, IntSaltHash))
def test_replay_reproduces_table(Hash):
    f1, f2, G = generate_hash(WORDS, Hash, rng=random.Random(3))
    token = format_replay(f1, f2)
    assert token.startswith(f'{len(G)};')
    for i in range(2):
        NG, g1, g2 = parse_replay(token, Hash)
        assert NG == len(G)
        assert replay_hash(WORDS, NG, g1, g2) == G


def test_replay_with_equal_salts():
    NG, f1, f2 = parse_replay('7;a;a')
    # single character keys 'a' and 'h' collide, since ord('h') - ord('a') == 7
    assert f1('a') == f2('a') == f1('h') == 1
    G = replay_hash(['a'], NG, f1, f2)
    assert (2 * G[1]) % 7 == 0
    with pytest.raises(InvariantError):
        replay_hash(['a', 'h'], NG, f1, f2)


@pytest.mark.parametrize('Hash', (StrSaltHash, IntSaltHash))
def test_empty_key_is_a_self_loop(Hash):
    keys = WORDS + ['']
    f1, f2, G = generate_hash(keys, Hash, rng=random.Random(9))
    assert f1('') == f2('') == 0
    assert_perfect(keys, f1, f2, G)


def test_large_key_count_warning(capsys):
    keys = [f'k{i}' for i in range(10001)]
    with pytest.raises(TooManyIterationsError):
        generate_hash(keys, max_ratio=0)
    err = capsys.readouterr().err
    assert 'WARNING: You have 10001 keys.' in err
    assert '--hft=2' in err

    warnings = []
    with pytest.raises(TooManyIterationsError):
        generate_hash(keys, IntSaltHash, max_ratio=0, warn=warnings.append)
    assert warnings == []
    with pytest.raises(TooManyIterationsError):
        generate_hash(keys, max_ratio=0, warn=warnings.append)
    assert len(warnings) == 3
    assert capsys.readouterr().err == ''


def test_replay_consistency_checks():
    NG, f1, f2 = parse_replay('5;a;b')
    with pytest.raises(ValueError):
        replay_hash(['abc'], NG, f1, f2)
    with pytest.raises(ValueError):
        replay_hash(['a'], 6, f1, f2)
    with pytest.raises(DuplicateKeysError):
        replay_hash(['a', 'a'], NG, f1, f2)


@pytest.mark.parametrize('text', ('x;a;b', '5;a', '0;a;b', '5;a;b;c'))
def test_malformed_replay(text):
    with pytest.raises(ValueError):
        parse_replay(text)
