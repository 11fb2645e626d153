#!/usr/bin/env python
# vim:fileencoding=utf-8
# License: GPLv3 Copyright: 2019, Kovid Goyal <kovid at kovidgoyal.net>

import os
import string

# Number of failed trials at one graph size before the graph is grown
DEFAULT_TRIALS = 5
# The graph may not have more than this many vertices per key
DEFAULT_MAX_RATIO = 100
GROWTH_FACTOR = 1.05

# StrSaltHash is unlikely to find an acyclic graph for more keys than this
LARGE_KEY_COUNT = 10000

SALT_CHARS = string.ascii_letters + string.digits

DEFAULT_WIDTH = 76
DEFAULT_INDENT = 4
DEFAULT_DELIMITER = ', '

DEFAULT_COMMENT = '#'
DEFAULT_SPLITBY = ','
DEFAULT_KEYCOL = 1

LANGUAGES = ('py', 'c', 'cs')
CONFIG_ENV_VAR = 'PERFHASH_CONFIG'


def config_path_from_env():
    return os.environ.get(CONFIG_ENV_VAR) or None
