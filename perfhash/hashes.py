#!/usr/bin/env python
# vim:fileencoding=utf-8
# License: GPLv3 Copyright: 2019, Kovid Goyal <kovid at kovidgoyal.net>

'''
The two families of salted hash functions used to build the graph.

Both families share the same interface without sharing a base class:
initialize(N, rng), __call__(key), salt_length, formatted_salt(),
from_salt(N, text) and parse_salt(text). A hash function instance owns its
random source and grows its salt on demand, so the same instance always
returns the same value for the same key.
'''

import random
import re

from .constants import SALT_CHARS


def _salt_too_short(salt_length, key):
    return ValueError(
        f'The salt has only {salt_length} elements and cannot be grown'
        f' for the key: {key!r}')


class StrSaltHash:
    '''
    Random hash function generator.
    Simple byte level hashing: each byte is multiplied to another byte from
    a random string of characters, summed up, and finally modulo NG is
    taken.
    '''

    name = 'str'
    chars = SALT_CHARS

    def __init__(self, N, rng=None):
        self.initialize(N, rng)

    def initialize(self, N, rng=None):
        self.N = N
        self.salt = ''
        self.rng = random.Random() if rng is None else rng

    def __call__(self, key):
        missing = len(key) - len(self.salt)
        if missing > 0:  # add more salt as necessary
            if self.rng is None:
                raise _salt_too_short(len(self.salt), key)
            self.salt += ''.join(
                self.rng.choice(self.chars) for i in range(missing))

        return sum(ord(self.salt[i]) * ord(c)
                   for i, c in enumerate(key)) % self.N

    @property
    def salt_length(self):
        return len(self.salt)

    def formatted_salt(self, fmt=None):
        return self.salt

    @staticmethod
    def parse_salt(text):
        return text.strip()

    @classmethod
    def from_salt(cls, N, text):
        ' A hash function with a fixed salt, it never draws random values '
        ans = cls(N)
        ans.salt = cls.parse_salt(text)
        ans.rng = None
        return ans


class IntSaltHash:
    '''
    Random hash function generator.
    Simple byte level hashing, each byte is multiplied in sequence to a table
    containing random numbers, summed up, and finally modulo NG is taken.
    '''

    name = 'int'

    def __init__(self, N, rng=None):
        self.initialize(N, rng)

    def initialize(self, N, rng=None):
        self.N = N
        self.salt = []
        self.rng = random.Random() if rng is None else rng

    def __call__(self, key):
        if len(self.salt) < len(key):
            if self.rng is None:
                raise _salt_too_short(len(self.salt), key)
            while len(self.salt) < len(key):
                self.salt.append(self.rng.randint(1, self.N - 1))

        return sum(self.salt[i] * ord(c) for i, c in enumerate(key)) % self.N

    @property
    def salt_length(self):
        return len(self.salt)

    def formatted_salt(self, fmt=None):
        if fmt is None:
            return ', '.join(map(str, self.salt))
        return fmt(self.salt)

    @staticmethod
    def parse_salt(text):
        try:
            return [int(x) for x in re.split(r'[\s,]+', text.strip()) if x]
        except ValueError:
            raise ValueError(f'Not a list of integers: {text!r}') from None

    @classmethod
    def from_salt(cls, N, text):
        ans = cls(N)
        ans.salt = cls.parse_salt(text)
        ans.rng = None
        return ans


HASH_FUNCTIONS = {1: StrSaltHash, 2: IntSaltHash}


def hash_function_type(hft):
    try:
        return HASH_FUNCTIONS[int(hft)]
    except (KeyError, ValueError):
        raise ValueError(
            f'Unknown hash function type: {hft!r}, must be one of:'
            f' {", ".join(map(str, HASH_FUNCTIONS))}') from None
