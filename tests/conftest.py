from pytest import fixture

from rdpcalc.lexer import Lexer
from rdpcalc.symtable import SymbolTable


@fixture
def symbols() -> SymbolTable:
    '''
    Fresh symbol table, for sharing between several programs of a test.
    '''
    return SymbolTable()


@fixture
def kinds():
    '''
    Return a function listing the token kinds of some text, EOF excluded.
    '''
    def lex(text, buflen=None):
        return [token.kind
                for token
                in Lexer.from_string(text, buflen=buflen)][:-1]
    return lex
