#!/usr/bin/env python
# vim:fileencoding=utf-8
# License: GPLv3 Copyright: 2019, Kovid Goyal <kovid at kovidgoyal.net>

import argparse
import random
import sys

from . import __version__
from .codegen import Format, format_template, generate_code, run_code
from .conf import load_config
from .constants import (
    DEFAULT_COMMENT, DEFAULT_DELIMITER, DEFAULT_INDENT, DEFAULT_KEYCOL,
    DEFAULT_MAX_RATIO, DEFAULT_SPLITBY, DEFAULT_TRIALS, DEFAULT_WIDTH, LANGUAGES
)
from .generate import InvariantError, TooManyIterationsError
from .hashes import HASH_FUNCTIONS, hash_function_type
from .keys import read_keys
from .utils import atomic_write, read_text, stderr_log


def setup_parser(p):
    a = p.add_argument
    a('keys_file', help='The file containing the keys, one per line. The'
      ' position of a key in the file is its hash value')
    a('--delimiter', default=DEFAULT_DELIMITER,
      help='Delimiter for list items used in output, the default delimiter is %(default)r')
    a('--indent', default=DEFAULT_INDENT, type=int,
      help='Make INT spaces at the beginning of a new line when generated list is wrapped. Default is %(default)s')
    a('--width', default=DEFAULT_WIDTH, type=int,
      help='Maximal width of generated list when wrapped. Default width is %(default)s')
    a('--comment', default=DEFAULT_COMMENT,
      help='STR is the character, or sequence of characters, which marks the'
      ' beginning of a comment (which runs till the end of the line), in the'
      ' input KEYS_FILE. Default is %(default)r')
    a('--splitby', default=DEFAULT_SPLITBY,
      help='STR is the character by which the columns in the input KEYS_FILE are split. Default is %(default)r')
    a('--keycol', default=DEFAULT_KEYCOL, type=int,
      help='Specifies the column INT in the input KEYS_FILE which contains the'
      ' keys. Default is %(default)s, i.e. the first column')
    a('--trials', default=DEFAULT_TRIALS, type=int,
      help='Specifies the number of trials before NG is increased. A small INT'
      ' will compute faster, but the array G will be large. A large INT will'
      ' take longer to compute but G will be smaller. Default is %(default)s')
    a('--max-ratio', default=DEFAULT_MAX_RATIO, type=int,
      help='Give up once NG is larger than INT times the number of keys. Default is %(default)s')
    a('--hft', type=int, choices=sorted(HASH_FUNCTIONS),
      help='Hash function type INT. Possible values are 1 (StrSaltHash) and'
      ' 2 (IntSaltHash). The default is StrSaltHash for less than 10000 keys')
    a('--lang', default='py', choices=LANGUAGES,
      help='The language of the built-in template. Default is %(default)s')
    a('--template', help='Use the code template in FILE instead of the built-in one')
    a('-e', '--execute', default=False, action='store_true',
      help='Execute the generated code within the Python interpreter')
    a('-o', '--output',
      help='Specify output FILE explicitly. `-o std` means standard output.'
      ' `-o no` means no output. By default, the code is written to standard output')
    a('-v', '--verbose', default=False, action='store_true', help='Print progress information to stderr')
    a('-t', '--test', metavar='NG;S1;S2',
      help='Compute G for the given NG and salts, instead of searching for them')
    a('--seed', type=int, help='Seed the random search, to make it reproducible')
    a('--config', help='Read option defaults from FILE, lines of the form: name value')
    a('--version', action='version', version='%(prog)s ' + __version__)
    p.set_defaults(func=main)


def main(args):
    log = stderr_log() if args.verbose else None
    try:
        Hash = None if args.hft is None else hash_function_type(args.hft)
    except ValueError as err:
        raise SystemExit(str(err))
    fmt = Format(args.width, args.indent, args.delimiter)
    if log is not None:
        fmt.print_format(log)
    if args.execute and args.lang != 'py' and not args.template:
        raise SystemExit('Only generated Python code can be executed, not: ' + args.lang)
    rng = None if args.seed is None else random.Random(args.seed)

    try:
        if log is not None:
            log(f'Reading table from file {args.keys_file} to extract keys.')
        keys = read_keys(args.keys_file, args.comment, args.splitby, args.keycol)
        template = read_text(args.template) if args.template else None
        fmt_info = generate_code(
            keys, Hash, trials=args.trials, max_ratio=args.max_ratio,
            fmt=fmt, replay=args.test, rng=rng, log=log)
        code = format_template(fmt_info, template, args.lang)
    except TooManyIterationsError as err:
        raise SystemExit(f'No perfect hash found: {err}')
    except InvariantError as err:
        raise SystemExit(('Replay failed: ' if args.test else 'Invalid perfect hash: ') + str(err))
    except KeyError as err:
        raise SystemExit(f'Unknown token in template: ${err.args[0]}')
    except (OSError, TypeError, ValueError) as err:
        raise SystemExit(str(err))

    if log is not None:
        log(f'Parameters to reproduce this hash with --test: {fmt_info["replay"]}')
    if args.execute:
        if log is not None:
            log('Executing code...')
        run_code(code)

    if args.output in (None, 'std'):
        sys.stdout.write(code)
        sys.stdout.flush()
    elif args.output != 'no':
        if log is not None:
            log(f'Writing code to {args.output}')
        try:
            atomic_write(args.output, code)
        except OSError as err:
            raise SystemExit(f'Failed to write {args.output}: {err}')


def create_parser():
    p = argparse.ArgumentParser(
        prog='perfhash',
        description='Generate a minimal perfect hash function for the keys in a file')
    setup_parser(p)
    return p


def global_main(args):
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument('--config')
    known = pre.parse_known_args(args[1:])[0]
    p = create_parser()
    try:
        p.set_defaults(**load_config(known.config))
    except (OSError, SyntaxError, ValueError) as err:
        raise SystemExit(f'Failed to read configuration: {err}')
    parsed_args = p.parse_args(args[1:])
    parsed_args.func(parsed_args)


def cli():
    global_main(list(sys.argv))


if __name__ == '__main__':
    cli()
