'''
Recursive descent parser, evaluating as it goes.

Grammar::

    Program ::= { '$' Identifier [':'] '=' Expr ';' } Expr
    Expr    ::= Term { ('+' | '-') Term }
    Term    ::= Base { ('*' | '/') Base }
    Base    ::= Factor { '**' Factor }
    Factor  ::= Number | '+' Number | '-' Number
              | '(' Expr ')' | '[' Expr ']' | '|' Expr '|'
              | Identifier | Function '(' Expr ')'

LL(1): every choice is made on the kind of the single lookahead token.
'''

from functools import wraps
import logging
import math

import numpy

from .lexer import Lexer
from .symtable import SymbolTable, Descriptor, Flags
from .tokens import TokenKind, FUNCTIONS
from .util import ParseError, SemanticError


logger = logging.getLogger(__name__)


def _ieee(f):
    '''
    Run f on float64s with IEEE-754 results (inf, nan) instead of errors.
    '''
    @wraps(f)
    def wrapped(*args):
        with numpy.errstate(all='ignore'):
            return float(f(*map(numpy.float64, args)))
    return wrapped


def _reciprocal(f):
    def wrapped(x):
        return numpy.divide(1.0, f(x))
    wrapped.__name__ = 'reciprocal_' + f.__name__
    return wrapped


divide = _ieee(numpy.divide)
power = _ieee(numpy.power)


def factorial(x):
    '''
    1 * 1 * 2 * ... while the counter does not exceed x.

    Fractional x stops at the greatest integer reached: [2.5] is 2. Anything
    below one, and nan, gives 1.
    '''
    i = 1.0
    f = 1.0
    while i <= x:
        f *= i
        if math.isinf(f):
            break
        i += 1.0
    return f


class Parser:
    '''
    Parser and evaluator of a single program.

    Owns its lookahead token. The symbol table may be shared between
    parsers, e.g. by successive lines of an interactive session.
    '''

    BUILTINS = {
        TokenKind.SIN: _ieee(numpy.sin),
        TokenKind.COS: _ieee(numpy.cos),
        TokenKind.TAN: _ieee(numpy.tan),
        # No domain guard, 1/0 is inf.
        TokenKind.CSC: _ieee(_reciprocal(numpy.sin)),
        TokenKind.SEC: _ieee(_reciprocal(numpy.cos)),
        TokenKind.COT: _ieee(_reciprocal(numpy.tan)),
        TokenKind.FLOOR: _ieee(numpy.floor),
        TokenKind.CEIL: _ieee(numpy.ceil),
        TokenKind.SQRT: _ieee(numpy.sqrt),
        TokenKind.CBRT: _ieee(numpy.cbrt),
        TokenKind.LOG10: _ieee(numpy.log10),
        TokenKind.LOG2: _ieee(numpy.log2),
    }
    assert BUILTINS.keys() == FUNCTIONS

    def __init__(self, lexer, symbols=None):
        self.lexer = lexer
        self.symbols = SymbolTable() if symbols is None else symbols
        self.lookahead = None

    def _syntax_error(self, expected):
        return ParseError('A syntax error has been identified. '
                          'Token Caught: {0}, Expected: {1}.'
                          .format(self.lookahead, expected))

    def match(self, kind):
        '''
        Consume the lookahead, which must be of the given kind.

        Return the consumed token.
        '''
        token = self.lookahead
        if token.kind is not kind:
            raise self._syntax_error(kind)
        self.lookahead = self.lexer.next_token()
        return token

    def parse(self):
        '''
        Parse and evaluate the whole input, returning the program's value.
        '''
        self.lookahead = self.lexer.next_token()
        value = self.program()
        self.match(TokenKind.EOF)
        logger.debug('evaluated to %r', value)
        return value

    def program(self):
        while self.lookahead.kind is TokenKind.DOLLAR:
            self.assignment()
        return self.expr()

    def assignment(self):
        '''
        $ name = expr ;  binds a variable, $ name : = expr ;  a constant.
        '''
        self.match(TokenKind.DOLLAR)
        name = self.match(TokenKind.IDENTIFIER).value
        bound = self.symbols.find(name)
        if bound is not None and bound.constant:
            raise SemanticError('Cannot re-assign constant {0!r}.'
                                .format(name))
        flags = Flags(0)
        if self.lookahead.kind is TokenKind.COLON:
            self.match(TokenKind.COLON)
            flags |= Flags.CONSTANT
        self.match(TokenKind.EQUALS)
        value = self.expr()
        self.match(TokenKind.SEMICOLON)
        # Overwrite rather than shadow.
        self.symbols.remove(name)
        self.symbols.insert(name, Descriptor(value, flags))
        logger.debug('bound %s = %r (%s)', name, value, flags)

    def expr(self):
        value = self.term()
        while self.lookahead.kind in (TokenKind.PLUS, TokenKind.MINUS):
            if self.lookahead.kind is TokenKind.PLUS:
                self.match(TokenKind.PLUS)
                value += self.term()
            else:
                self.match(TokenKind.MINUS)
                value -= self.term()
        return value

    def term(self):
        value = self.base()
        while self.lookahead.kind in (TokenKind.MULTIPLY, TokenKind.DIVIDE):
            if self.lookahead.kind is TokenKind.MULTIPLY:
                self.match(TokenKind.MULTIPLY)
                value *= self.base()
            else:
                self.match(TokenKind.DIVIDE)
                value = divide(value, self.base())
        return value

    def base(self):
        # Left associative: 2 ** 3 ** 2 is 64.
        value = self.factor()
        while self.lookahead.kind is TokenKind.POWER:
            self.match(TokenKind.POWER)
            value = power(value, self.factor())
        return value

    def factor(self):
        kind = self.lookahead.kind
        if kind is TokenKind.NUMBER:
            return self.match(TokenKind.NUMBER).value
        elif kind is TokenKind.PLUS:
            self.match(TokenKind.PLUS)
            return self.match(TokenKind.NUMBER).value
        elif kind is TokenKind.MINUS:
            self.match(TokenKind.MINUS)
            return -self.match(TokenKind.NUMBER).value
        elif kind is TokenKind.LPAREN:
            self.match(TokenKind.LPAREN)
            value = self.expr()
            self.match(TokenKind.RPAREN)
            return value
        elif kind is TokenKind.LBRACKET:
            self.match(TokenKind.LBRACKET)
            value = factorial(self.expr())
            self.match(TokenKind.RBRACKET)
            return value
        elif kind is TokenKind.PIPE:
            self.match(TokenKind.PIPE)
            value = abs(self.expr())
            self.match(TokenKind.PIPE)
            return value
        elif kind is TokenKind.IDENTIFIER:
            return self.variable()
        elif kind in FUNCTIONS:
            return self.call()
        raise self._syntax_error('a number, identifier, function or '
                                 'opening bracket')

    def variable(self):
        name = self.match(TokenKind.IDENTIFIER).value
        bound = self.symbols.find(name)
        if bound is None:
            raise SemanticError('Use of undeclared variable {0!r}.'
                                .format(name))
        return bound.value

    def call(self):
        function = type(self).BUILTINS[self.match(self.lookahead.kind).kind]
        self.match(TokenKind.LPAREN)
        value = function(self.expr())
        self.match(TokenKind.RPAREN)
        return value


def evaluate(text, symbols=None, buflen=None):
    '''
    Evaluate program text, returning its value.

    Raises the first CalcError encountered.
    '''
    return Parser(Lexer.from_string(text, buflen=buflen), symbols).parse()
