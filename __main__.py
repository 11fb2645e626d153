#!/usr/bin/env python
# vim:fileencoding=utf-8
# License: GPLv3 Copyright: 2019, Kovid Goyal <kovid at kovidgoyal.net>

'''
Run perfhash from a checkout: python . KEYS_FILE [options]

Arguments of the form NAME=value are put into the environment instead of
being passed on, so that PERFHASH_CONFIG=perfhash.conf selects a
configuration file for a single run.
'''

import os
import re
import sys

args = list(sys.argv)
remove = []
for i, arg in enumerate(tuple(args)):
    m = re.match('([A-Z_]+)=(.+)', arg)
    if m is not None:
        remove.append(i)
        os.environ[m.group(1)] = m.group(2)
for r in reversed(remove):
    del args[r]


from perfhash.main import global_main
global_main(args)
