#!/usr/bin/env python
"""The main calculator command-line interface"""

BANNER = """
                           _     A Postfix
                          /  _.| _   | _._|_ _ ._
                          \\_(_||(_|_||(_| |_(_)|

                               Version 1.0
"""

PROMPT = 'calc> '

import logging
import os
import sys

from functools import partial
stderr = partial(print, file=sys.stderr)

import pfcalclib


def read_line(source):
    """Read one line from `source`, without its line break.

    Raises EOFError when there is nothing left to read.
    """
    line = source.readline()
    if not line:
        raise EOFError
    return line.rstrip('\r\n')


def format_result(res):
    """Render a result with every digit it has, without a trailing '.0'."""
    text = repr(res)
    if text.endswith('.0'):
        text = text[:-2]
    return text


def main(source=None, out=None, err=None):
    source = source or sys.stdin
    out = out or sys.stdout
    err = partial(print, file=err) if err else stderr

    logging.basicConfig(
        level=logging.DEBUG if os.environ.get('PFCALC_DEBUG') else logging.WARNING)

    interactive = hasattr(source, 'isatty') and source.isatty()
    status = 0
    err(BANNER)
    try:
        while True:
            if interactive:
                print(PROMPT, end='', file=out, flush=True)
            expr = read_line(source)
            try:
                res = pfcalclib.calculate(expr)
            except ValueError as ex:
                err('error:', ex)
                status = 1
            else:
                print('= %s' % format_result(res), file=out)
    except EOFError:
        err('\ncaught EOF')
    except KeyboardInterrupt:
        err('\ninterrupted')
    return status

if __name__ == '__main__':
    sys.exit(main())
