#!/usr/bin/env python
# vim:fileencoding=utf-8
# License: GPLv3 Copyright: 2019, Kovid Goyal <kovid at kovidgoyal.net>

from .constants import DEFAULT_COMMENT, DEFAULT_KEYCOL, DEFAULT_SPLITBY


class KeyFileError(ValueError):
    pass


def parse_keys(lines, comment=DEFAULT_COMMENT, splitby=DEFAULT_SPLITBY, keycol=DEFAULT_KEYCOL, name='<keys>'):
    if keycol < 1:
        raise ValueError('keycol must be at least 1')
    keys = []
    for lnum, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or (comment and line.startswith(comment)):
            continue
        if comment and comment in line:
            line = line.split(comment, 1)[0].strip()
        row = [col.strip() for col in line.split(splitby)] if splitby else [line]
        try:
            key = row[keycol - 1]
        except IndexError:
            raise KeyFileError(
                f'{name}:{lnum}: Cannot read key, not enough columns') from None
        keys.append(key)
    return keys


def read_keys(path, comment=DEFAULT_COMMENT, splitby=DEFAULT_SPLITBY, keycol=DEFAULT_KEYCOL):
    '''
    Read the keys from the text file at path. The position of a key in the
    file is its hash value. Blank lines and comments are ignored, each
    remaining line is split into columns by 'splitby' and column 'keycol'
    (counting from 1) is the key.
    '''
    with open(path, encoding='utf-8') as f:
        return parse_keys(f, comment, splitby, keycol, name=path)
