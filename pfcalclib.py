#!/usr/bin/env python
"""pfcalclib - Stuff used by pfcalc"""

# ---------------------------
#  The Process in a Nutshell
# ---------------------------
#
#          +----------------+     +------------+     +--------------+     +----------------+
# [input]>>| index_tokens() |>>>>>| tokenize() |>>>>>| to_postfix() |>>>>>| eval_postfix() |>>[result]
#       |  +----------------+  |  +------------+  |  +--------------+  |  +----------------+  |
#       |                      |                  |                    |                      |
#     string          list of ranges     list of tokens    tokens, operator last            number

import collections
import logging
import operator
import re

log = logging.getLogger(__name__)

SUM, PRODUCT = 1, 2
NUMBER = 0

DIGITS = '0123456789.'
DELIMITERS = ",'"

number_re = re.compile(r"""
    \d+(?:\.\d*)?   # digits [ decimal-point more-digits ]
    |\.\d+          # or decimal-point digits
""", re.VERBOSE)

TokenRange = collections.namedtuple('TokenRange', 'kind start end')


class Number(float):
    def __new__(cls, value, pos=None):
        self = float.__new__(Number, value)
        self.pos = pos
        return self


class CalcError(ValueError):
    pass

class InvalidDelimiter(CalcError):
    pass

class InvalidCharacter(CalcError):
    pass

class MalformedNumber(CalcError):
    pass

class EmptyExpression(CalcError):
    pass

class DivisionByZero(CalcError):
    pass

class UnusedOperand(CalcError):
    pass

class ExpressionTooLong(CalcError):
    pass


class Operator(object):
    """The base class for operators.

    Do not instantiate this class directly; use one of the classes in
    `operators`, which create_operator_class() builds.
    """
    name = None
    tier = None
    func = None

    def __init__(self, pos=None):
        if self.__class__ is Operator:
            raise NotImplementedError("Operator class is abstract; it cannot be called directly")
        self.pos = pos

    def __call__(self, a, b):
        """Apply the operator to its left and right operands."""
        return self.__class__.func(a, b)

    def __repr__(self):
        return self.__class__.__name__

    def __str__(self):
        return self.__class__.name


def check_div_by_zero(func):
    """Raise DivisionByZero instead of dividing by exactly 0.0.

    Float division in Python would raise ZeroDivisionError anyway, but
    with a message ("float division by zero") and a type the calculator
    does not report.
    """
    def newfunc(a, b):
        if b == 0.0:
            raise DivisionByZero("division by zero")
        return func(a, b)
    return newfunc


def create_operator_class(clsname, name_, tier_, func_):
    """Factory function for creating a new operator class."""
    class newop(Operator):
        name = name_
        tier = tier_
        func = staticmethod(func_)
    newop.__name__ = clsname
    return newop


operators = {
    '+': create_operator_class('Addition',       '+', SUM,     operator.add),
    '-': create_operator_class('Subtraction',    '-', SUM,     operator.sub),
    '*': create_operator_class('Multiplication', '*', PRODUCT, operator.mul),
    '/': create_operator_class('Division',       '/', PRODUCT, check_div_by_zero(operator.truediv)),
}


def index_tokens(s):
    """Find where the tokens of a string start and end.

    Returns a list of TokenRange in source order. Raises InvalidDelimiter,
    InvalidCharacter or MalformedNumber on the first thing it can't use.
    """
    ranges = []
    in_number = False

    for i, c in enumerate(s):
        if c in DIGITS:
            if in_number:
                ranges[-1] = ranges[-1]._replace(end=i+1)
            else:
                ranges.append(TokenRange(NUMBER, i, i+1))
            in_number = True
        elif c in '*/':
            ranges.append(TokenRange(PRODUCT, i, i+1))
            in_number = False
        elif c in '+-':
            ranges.append(TokenRange(SUM, i, i+1))
            in_number = False
        elif c == ' ':
            in_number = False
        elif c in DELIMITERS:
            raise InvalidDelimiter("do not use delimiters such as , or ' (found %r at position %d)" % (c, i))
        else:
            raise InvalidCharacter("invalid character %r at position %d; only numbers, *, /, +, - and spaces are allowed" % (c, i))

    # A run of digits and dots is only a number if it has one dot at most
    # and at least one digit
    for kind, start, end in ranges:
        if kind == NUMBER and number_re.fullmatch(s, start, end) is None:
            raise MalformedNumber("malformed number '%s' at position %d" % (s[start:end], start))

    return ranges


def tokenize(s):
    """Convert a string into a list of tokens."""
    ranges = index_tokens(s)
    log.debug('token ranges for %r: %s', s, ranges)
    tokens = []

    for kind, start, end in ranges:
        text = s[start:end]
        if kind == NUMBER:
            # index_tokens() only lets well-formed decimals through
            try:
                tokens.append(Number(text, start))
            except ValueError:
                raise AssertionError("scanner produced an unparseable number: %r" % text)
        else:
            tokens.append(operators[text](start))

    return tokens


def to_postfix(tokens):
    """Rearrange a list of tokens so that every operator comes after its
    operands.

    The list is consumed from the end (the rightmost token first). With
    only two tiers of precedence there is no need for a rank comparison:
    a '*' or '/' waits on the operator stack until its group of
    multiplicative operands is complete, and a '+' or '-' waits until the
    whole line has been read. Popping the result from the end then gives
    each operator before its left operand and its right operand, which is
    the order eval_postfix() wants.

    This only works for exactly two tiers. Parentheses or '^' would need
    a real shunting yard.
    """
    # Finished groups, in the order eval_postfix() pops them
    main = []
    # Operands (and resolved operators) of the group being read
    aux = []
    # Additive operators at the bottom, pending multiplicative ones on top
    op = []

    while True:
        token = tokens.pop() if tokens else None

        # Number
        if isinstance(token, Number):
            aux.append(token)

        # '*' or '/'
        elif isinstance(token, Operator) and token.tier == PRODUCT:
            op.append(token)

        # '+', '-' or the end of the line: the group is done
        else:
            while op and op[-1].tier == PRODUCT:
                aux.append(op.pop())
            main.extend(aux)
            del aux[:]

            if token is None:
                break
            if not isinstance(token, Operator):
                raise ValueError("found foreign object: %s" % repr(token))
            op.append(token)

    while op:
        main.append(op.pop())

    return main


def eval_postfix(tokens):
    """Evaluate a list of tokens made by to_postfix().

    The list is popped from the end: an operator, then everything making
    up its left operand, then everything making up its right operand.
    """
    try:
        token = tokens.pop()
    except IndexError:
        raise EmptyExpression("expected a number but the expression ended") from None

    if isinstance(token, Number):
        return float(token)
    elif isinstance(token, Operator):
        a = eval_postfix(tokens)
        b = eval_postfix(tokens)
        return token(a, b)
    else:
        raise ValueError("found alien object: %s" % repr(token))


def calculate(s):
    """Evaluate a line of arithmetic."""
    tokens = to_postfix(tokenize(s))
    log.debug('operator-last order: %s', format_tokens(tokens))
    try:
        res = eval_postfix(tokens)
    except RecursionError:
        raise ExpressionTooLong("too many operators in one line to evaluate") from None
    if tokens:
        leftover = tokens[-1]
        raise UnusedOperand("missing operator before %s at position %s" % (leftover, leftover.pos))
    return res


def format_tokens(tokens):
    """Render a list of tokens as a space-separated string."""
    return ' '.join(str(t) for t in tokens)


def main():
    """Test a few things."""
    for s in ("123", "5.5", ".15", "26.",   # individual tokens
              "4 + 2 * 3",                  # precedence
              "8 / 2 / 2",                  # associativity
              "1 - 2 - 3 * 4 / 6 + 1",
              "2 / 0",                      # errors
              "1 *",
              "1.2.3",
              ):
        try:
            postfix = to_postfix(tokenize(s))
            print(s.ljust(22), "==>", format_tokens(postfix).ljust(28), "==>", calculate(s))
        except ValueError as ex:
            print(s.ljust(22), "==>", "error:", ex)

if __name__ == "__main__":
    main()
