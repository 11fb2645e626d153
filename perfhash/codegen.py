#!/usr/bin/env python
# vim:fileencoding=utf-8
# License: GPLv3 Copyright: 2019, Kovid Goyal <kovid at kovidgoyal.net>

'''
Fill code templates with the parameters of a perfect hash function. A
template is any text using the tokens below, substituted with
string.Template, so templates can easily be written for any language.

    $NS  length of the salts      $S1, $S2  the two salts
    $NG  length of the table G    $G        the table G
    $NK  number of keys           $K        the keys, quoted
'''

import json
import string
from io import StringIO

from .constants import DEFAULT_DELIMITER, DEFAULT_INDENT, DEFAULT_MAX_RATIO, DEFAULT_TRIALS, DEFAULT_WIDTH, LARGE_KEY_COUNT
from .generate import InvariantError, format_replay, generate_hash, parse_replay, replay_hash
from .hashes import IntSaltHash, StrSaltHash

PY_HASH = {
    'str': '''
def hash_f(key, T):
    return sum(ord(T[i % $NS]) * ord(c) for i, c in enumerate(key)) % $NG

def perfect_hash(key):
    return (G[hash_f(key, "$S1")] +
            G[hash_f(key, "$S2")]) % $NG
''',

    'int': '''
S1 = [$S1]
S2 = [$S2]
assert len(S1) == len(S2) == $NS

def hash_f(key, T):
    return sum(T[i % $NS] * ord(c) for i, c in enumerate(key)) % $NG

def perfect_hash(key):
    return (G[hash_f(key, S1)] + G[hash_f(key, S2)]) % $NG
''',
}

PY_TEMPLATE = '''\
# =======================================================================
# ================= Python code for perfect hash function ===============
# =======================================================================

G = [$G]
%s
# ============================ Sanity check =============================

K = [$K]
assert len(K) == $NK

for h, k in enumerate(K):
    if perfect_hash(k) != h:
        raise ValueError(
    f'perfect_hash failed for key: {k} got: {perfect_hash(k)} expected: {h}')
'''

C_SALT = {
    'str': '',
    'int': '''
    static const unsigned long ph_S1[] = {$S1};
    static const unsigned long ph_S2[] = {$S2};
''',
}

C_LOOP = {
    'str': '''
        f1 += (unsigned long)"$S1"[i] * (unsigned char)key[i];
        f2 += (unsigned long)"$S2"[i] * (unsigned char)key[i];
''',
    'int': '''
        f1 += ph_S1[i] * (unsigned char)key[i];
        f2 += ph_S2[i] * (unsigned char)key[i];
''',
}

C_TEMPLATE = '''
static int
get_perfect_hash_index_for_key(const char *key) {
    static const int ph_G[] = {$G};
    static const char *ph_K[$NK] = {$K};
%s
    unsigned long f1 = 0, f2 = 0;
    int i;
    for (i = 0; key[i] != 0 && i < $NS; i++) {%s    }
    i = (ph_G[f1 %% $NG] + ph_G[f2 %% $NG]) %% $NG;
    if (i < $NK && i >= 0 && strcmp(key, ph_K[i]) == 0) return i;
    return -1;
}
'''

CS_SALT = {
    'str': '''
    private const string salt1 = "$S1";
    private const string salt2 = "$S2";
''',
    'int': '''
    private static readonly int[] salt1 = { $S1 };
    private static readonly int[] salt2 = { $S2 };
''',
}

CS_HASH = {
    'str': '''
    private static int GetHash(string key, string salt)
    {
        long hash = 0;
        for (int i = 0; i < key.Length; i++)
            hash += salt[i % $NS] * key[i];
        return (int)(hash % $NG);
    }
''',
    'int': '''
    private static int GetHash(string key, int[] salt)
    {
        long hash = 0;
        for (int i = 0; i < key.Length; i++)
            hash += (long)salt[i % $NS] * key[i];
        return (int)(hash % $NG);
    }
''',
}

CS_TEMPLATE = '''
// =======================================================================
// =================  C# code for perfect hash function    ===============
// =======================================================================

using System.Diagnostics;

public class PerfectHash
{
    private static readonly int[] vertexValues =
    {
        $G
    };
%s%s
    public static int GetPerfectHash(string key)
    {
        int hash1 = GetHash(key, salt1);
        int hash2 = GetHash(key, salt2);
        return (vertexValues[hash1] + vertexValues[hash2]) %% $NG;
    }

// ============================ Sanity check =============================
    private static readonly string[] keys =
    {
        $K
    };

    public static void SanityCheck()
    {
        Debug.Assert(keys.Length == $NK);

        for (int h = 0; h < keys.Length; h++)
        {
            Debug.Assert(GetPerfectHash(keys[h]) == h);
        }
    }

    public static void Main()
    {
        SanityCheck();
    }
}
'''


def builtin_template(Hash, lang='py'):
    name = Hash.name
    if lang == 'py':
        return PY_TEMPLATE % PY_HASH[name]
    if lang == 'c':
        return C_TEMPLATE % (C_SALT[name], C_LOOP[name])
    if lang == 'cs':
        return CS_TEMPLATE % (CS_SALT[name], CS_HASH[name])
    raise ValueError(f'Unknown language: {lang}')


def quote_string(x):
    return json.dumps(x, ensure_ascii=False)


class Format:

    def __init__(self, width=DEFAULT_WIDTH, indent=DEFAULT_INDENT, delimiter=DEFAULT_DELIMITER):
        self.width = width
        self.indent = indent
        self.delimiter = delimiter

    def print_format(self, log=print):
        log("Format options:")
        for name in 'width', 'indent', 'delimiter':
            log('  %s: %r' % (name, getattr(self, name)))

    def __call__(self, data, quote=False):
        if not isinstance(data, (list, tuple)):
            return str(data)

        lendel = len(self.delimiter)
        aux = StringIO()
        pos = 20
        for i, elt in enumerate(data):
            last = bool(i == len(data) - 1)

            s = quote_string(elt) if quote else str(elt)

            if pos + len(s) + lendel > self.width:
                aux.write('\n' + (self.indent * ' '))
                pos = self.indent

            aux.write(s)
            pos += len(s)
            if not last:
                aux.write(self.delimiter)
                pos += lendel

        return aux.getvalue()


def generate_code(
    keys, Hash=None, trials=DEFAULT_TRIALS, max_ratio=DEFAULT_MAX_RATIO,
    fmt=None, replay=None, rng=None, log=None, warn=None
):
    '''
    Takes a list of keys and computes the parameters of a perfect hash
    function for them, either by a random search or, when 'replay' is a
    string of the form NG;salt1;salt2, from those fixed parameters.
    'Hash' is the random hash function generator.
    The return value is data for formatting templates
    '''
    keys = tuple(keys)
    if Hash is None:
        Hash = StrSaltHash if len(keys) < LARGE_KEY_COUNT else IntSaltHash
    fmt = fmt or Format()

    if replay:
        NG, f1, f2 = parse_replay(replay, Hash)
        G = replay_hash(keys, NG, f1, f2)
    else:
        f1, f2, G = generate_hash(keys, Hash, trials=trials, max_ratio=max_ratio, rng=rng, log=log, warn=warn)

    if not f1.N == f2.N == len(G):
        raise InvariantError(f'Mismatched sizes: {f1.N}, {f2.N} and {len(G)}')
    salt_len = f1.salt_length
    if salt_len != f2.salt_length:
        raise ValueError(
            f'The two salts must have the same length, not {salt_len} and {f2.salt_length}')

    fmt_info = dict(
        NS=salt_len,
        S1=f1.formatted_salt(fmt),
        S2=f2.formatted_salt(fmt),
        NG=len(G),
        G=fmt(G),
        NK=len(keys),
        K=fmt(list(keys), quote=True),
        Hash=Hash,
        replay=format_replay(f1, f2),
    )
    return fmt_info


def format_template(fmt_info, template=None, lang='py'):
    if template is None:
        template = builtin_template(fmt_info['Hash'], lang)
    return string.Template(template).substitute(**fmt_info)


def run_code(source):
    ' Execute generated Python code, which runs its own sanity check '
    m = {}
    exec(source, m, m)
    return m


def get_c_code(keys, **kw):
    '''
    Return a Python perfect_hash() function for keys and the C code of the
    same function.
    '''
    fmt_info = generate_code(keys, **kw)
    perfect_hash = run_code(format_template(fmt_info))['perfect_hash']
    return perfect_hash, format_template(fmt_info, lang='c')
