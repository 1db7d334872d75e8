'''
Recursive descent calculator.

Infix arithmetic with the usual precedence, ** (left associative), [x] for
factorial, |x| for absolute value, the constants e and pi, and a handful of
functions: sin, cos, tan, csc, sec, cot, floor, ceil, sqrt, cbrt, log10 and
log2. Values are evaluated while parsing; there is no syntax tree.

A program may start with bindings:

    $x = 4;
    $y: = 2;     # constant, cannot be re-assigned
    x + y

Not intended to be Turing-complete!
'''

from .cli import CLI
from .lexer import Lexer
from .parser import Parser, evaluate
from .symtable import SymbolTable, Descriptor, Flags
from .tokens import Token, TokenKind
from .util import (CalcError, LexicalError, ParseError, SemanticError,
                   SymbolTableError)


__all__ = ('CLI', 'Lexer', 'Parser', 'evaluate',
           'SymbolTable', 'Descriptor', 'Flags',
           'Token', 'TokenKind',
           'CalcError', 'LexicalError', 'ParseError', 'SemanticError',
           'SymbolTableError')
