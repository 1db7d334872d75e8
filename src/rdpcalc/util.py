from functools import wraps


class CalcError(Exception):
    '''
    Fatal error. Aborts the whole program being evaluated.

    phase names the stage that gave up, for diagnostics.
    '''
    phase = 'rdpcalc'

    def __str__(self):
        return str(self.args[0]) if self.args else ''


class LexicalError(CalcError):
    phase = 'lexer'


class ParseError(CalcError):
    phase = 'parser'


class SemanticError(CalcError):
    '''
    Undeclared identifier, or assignment to a constant.
    '''
    phase = 'parser'


class SymbolTableError(CalcError):
    phase = 'symtable'


def wrap_user_errors(fmt, error=CalcError):
    '''
    Decorator that converts foreign exceptions to our own error type.

    Passes through CalcErrors.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except CalcError:
                raise
            except Exception as e:
                raise error(fmt.format(*args, **kwargs), e) from e
        return wrapper
    return decorator
