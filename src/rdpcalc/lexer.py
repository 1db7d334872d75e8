from functools import reduce
import io
import logging
import operator

import regex

from .tokens import Token, TokenKind, KEYWORDS, CONSTANTS, PUNCTUATION
from .util import LexicalError, wrap_user_errors


logger = logging.getLogger(__name__)


class Lexer:
    '''
    Pull lexer for the calculator language.

    Holds the whole (bounded) input buffer, read once on construction, and
    hands out one token per next_token() call.
    '''
    # Maximum number of characters read from the input stream. The rest is
    # silently dropped.
    BUFLEN = 256
    # End of buffer. Also ends the buffer early if read from the input.
    TERMINATOR = '\0'

    # Blanks and comments, never reported as tokens.
    SKIP = r'''
            (?:
                # Spaces, and newlines; no indentation semantics
                [\x20\n]+
                |
                # Line comment, up to and including its newline
                \#
                [^\n\x00]*
                \n?
            )*
            '''
    # 1, 12, 1.5, 1. but not .5; the sign is the grammar's business.
    NUMBER = r'''
              [0-9]+
              (?:
                  \.
                  [0-9]*
              )?
              '''
    # Names: variables, constants, builtin functions. Maximal munch, so
    # exp is one identifier, not e followed by xp.
    IDENTIFIER = r'''
                  [A-Za-z]
                  [A-Za-z0-9]*
                  '''
    # Longest first, so that ** beats *.
    OPERATOR = r'(?:' + r'|'.join(map(regex.escape,
                                      sorted(PUNCTUATION,
                                             key=len,
                                             reverse=True))) + r')'

    # All possible lexemes.
    LEXEME = r'(?<number>' + NUMBER + r')|' \
             r'(?<identifier>' + IDENTIFIER + r')|' \
             r'(?<punctuation>' + OPERATOR + r')'
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.POSIX,
                    regex.VERSION1,
                    regex.VERBOSE},
                   0)

    _skip = regex.compile(SKIP, FLAGS)
    _lexeme = regex.compile(LEXEME, FLAGS)

    def __init__(self, stream, buflen=None):
        '''
        Read the input once, eagerly.

        :param stream: Text or binary file-like object.
        :param buflen: Maximum number of characters to read.
        '''
        self.buflen = type(self).BUFLEN if buflen is None else buflen
        if self.buflen < 0:
            raise LexicalError('Buffer length must not be negative, got {0}.'
                               .format(self.buflen))
        self.buf = self._fill(stream, self.buflen)
        self.pos = 0
        self.mark = 0
        logger.debug('read %d character(s) of input', len(self.buf))

    @classmethod
    def from_string(cls, text, buflen=None):
        return cls(io.StringIO(text), buflen=buflen)

    @wrap_user_errors('Cannot read from {1!r}.', LexicalError)
    def _fill(self, stream, buflen):
        if stream is None:
            raise LexicalError('A stream must be specified to initialize '
                               'the lexer.')
        data = stream.read(buflen)
        if isinstance(data, bytes):
            # One byte, one character.
            data = data.decode('latin-1')
        return data

    def _peek(self):
        if self.pos < len(self.buf):
            return self.buf[self.pos]
        return type(self).TERMINATOR

    def next_token(self):
        '''
        Scan and return the next token.

        Once at the end, keeps returning EOF without moving.
        '''
        self.pos = type(self)._skip.match(self.buf, self.pos).end()
        self.mark = self.pos

        if self._peek() == type(self).TERMINATOR:
            return Token(TokenKind.EOF, pos=self.pos)

        match = type(self)._lexeme.match(self.buf, self.pos)
        if match is None:
            raise LexicalError('Unexpected character ({0!r}) at offset {1}.'
                               .format(self._peek(), self.pos))
        self.pos = match.end()
        token = self._classify(match.lastgroup, match.group(0))
        logger.debug('token %s at %d', token, self.mark)
        return token

    def _classify(self, group, lexeme):
        '''
        Build the token for a lexeme matched by the named group.
        '''
        if group == 'number':
            return Token(TokenKind.NUMBER, float(lexeme), self.mark)
        elif group == 'identifier':
            if lexeme in KEYWORDS:
                return Token(KEYWORDS[lexeme], pos=self.mark)
            elif lexeme in CONSTANTS:
                return Token(TokenKind.NUMBER, CONSTANTS[lexeme], self.mark)
            return Token(TokenKind.IDENTIFIER, lexeme, self.mark)
        return Token(PUNCTUATION[lexeme], pos=self.mark)

    def __iter__(self):
        '''
        Yield all remaining tokens, the first EOF included.
        '''
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                return
