'''
Token stream model.
'''

from collections import namedtuple
from enum import Enum, auto
import math


class TokenKind(Enum):
    EOF = auto()
    PLUS = auto()
    MINUS = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    POWER = auto()
    NUMBER = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    PIPE = auto()
    IDENTIFIER = auto()
    EQUALS = auto()
    DOLLAR = auto()
    SEMICOLON = auto()
    COLON = auto()

    # Builtin functions
    SIN = auto()
    COS = auto()
    TAN = auto()
    CSC = auto()
    SEC = auto()
    COT = auto()
    FLOOR = auto()
    CEIL = auto()
    SQRT = auto()
    CBRT = auto()
    LOG10 = auto()
    LOG2 = auto()

    def __str__(self):
        return self.name


# Reserved names, each lexed to its own function token.
KEYWORDS = {
    kind.name.lower(): kind
    for kind
    in (TokenKind.SIN, TokenKind.COS, TokenKind.TAN,
        TokenKind.CSC, TokenKind.SEC, TokenKind.COT,
        TokenKind.FLOOR, TokenKind.CEIL,
        TokenKind.SQRT, TokenKind.CBRT,
        TokenKind.LOG10, TokenKind.LOG2)
}

FUNCTIONS = frozenset(KEYWORDS.values())

# Names that lex straight to number tokens, only on an exact match.
CONSTANTS = {
    'e': math.e,
    'pi': math.pi,
}

PUNCTUATION = {
    '+': TokenKind.PLUS,
    '-': TokenKind.MINUS,
    '*': TokenKind.MULTIPLY,
    '**': TokenKind.POWER,
    '/': TokenKind.DIVIDE,
    '(': TokenKind.LPAREN,
    ')': TokenKind.RPAREN,
    '[': TokenKind.LBRACKET,
    ']': TokenKind.RBRACKET,
    '|': TokenKind.PIPE,
    '=': TokenKind.EQUALS,
    '$': TokenKind.DOLLAR,
    ';': TokenKind.SEMICOLON,
    ':': TokenKind.COLON,
}


class Token(namedtuple('Token', 'kind value pos')):
    '''
    Classified lexeme.

    value is the float of a NUMBER, the text of an IDENTIFIER, None
    otherwise. pos is the buffer offset the lexeme started at.
    '''
    __slots__ = ()

    def __new__(cls, kind, value=None, pos=None):
        return super().__new__(cls, kind, value, pos)

    def __str__(self):
        if self.value is None:
            return str(self.kind)
        return '{0}({1!r})'.format(self.kind, self.value)
