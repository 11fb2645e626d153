#!/usr/bin/env python
# vim:fileencoding=utf-8
# License: GPLv3 Copyright: 2019, Kovid Goyal <kovid at kovidgoyal.net>

import os
import sys
import tempfile
from functools import partial


def atomic_write(path, data):
    if isinstance(data, str):
        data = data.encode('utf-8')
    path = os.path.abspath(path)
    with tempfile.NamedTemporaryFile(dir=os.path.dirname(path), delete=False) as tf:
        tf.write(data)
    os.replace(tf.name, path)


def stderr_log():
    return partial(print, file=sys.stderr, flush=True)


def read_text(path):
    with open(path, encoding='utf-8') as f:
        return f.read()
