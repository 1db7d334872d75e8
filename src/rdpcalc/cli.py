from os.path import expanduser
from sys import exit
from argparse import ArgumentParser, ArgumentTypeError, REMAINDER, OPTIONAL
import logging
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from .util import CalcError, LexicalError, wrap_user_errors
from .lexer import Lexer
from .parser import Parser
from .symtable import SymbolTable


logger = logging.getLogger(__name__)


def natural(text):
    '''
    argparse type for counts that cannot be negative.
    '''
    value = int(text)
    if value < 0:
        raise ArgumentTypeError('{0} is negative'.format(value))
    return value


class InteractiveInput:
    def __init__(self, prompt, history=None):
        self.prompt = prompt
        self.history = history

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    history=self.history,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Debatable. Interferes with X11 selection.
                                    mouse_support=True,
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the calculator.
    '''

    DEFAULT_PROMPT = '> '
    DEFAULT_PRECISION = 6
    HISTORY_FILE = '~/.rdpcalc_history'
    EXIT_FAILURE = 1

    def dumper(self):
        '''
        Dump the token stream of every program instead of evaluating.
        '''
        print('<kind>\t<offset>\t<payload>')
        for lexer in self._lexers():
            for token in lexer:
                print(token.kind,
                      token.pos,
                      '' if token.value is None else repr(token.value),
                      sep='\t')

    def executor(self):
        '''
        Evaluate every program, printing its value.

        Programs of one invocation share their symbol table.
        '''
        symbols = SymbolTable()
        for lexer in self._lexers():
            try:
                value = Parser(lexer, symbols).parse()
            except CalcError as e:
                if not self._interactive():
                    raise
                # Abort the line, not the session
                self._report(e)
                continue
            print(self._format(value))

    def raw_grammar(self):
        '''
        Print current internally defined lexical grammar.
        '''
        print(Lexer.LEXEME)

    def _format(self, value):
        return 'Value: {0:.{1}f}.'.format(value, self.args.precision)

    def _report(self, error):
        print('{0}: {1}'.format(error.phase, error), file=sys.stderr)
        logger.debug('evaluation aborted', exc_info=error)

    @wrap_user_errors('Input stream {1} could not be opened.', LexicalError)
    def _open(self, name):
        return open(name, 'rb')

    def _lexers(self):
        '''
        Yield a lexer per program to run.

        A file or standard input is a single program; so is every
        expression argument, and every interactive line.
        '''
        buflen = self.args.buffer_size
        if self.args.expressions is not None:
            for expression in self.args.expressions:
                yield Lexer.from_string(expression, buflen=buflen)
        elif self.args.path is not None:
            with self._open(self.args.path) as stream:
                yield Lexer(stream, buflen=buflen)
        else:
            yield Lexer(getattr(sys.stdin, 'buffer', sys.stdin),
                        buflen=buflen)

    def _prompting_input(self):
        '''
        Return prompting input, or None to read standard input as a program.

        Prompts if either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           sys.stdin.isatty() and sys.stdout.isatty():
            history = FileHistory(expanduser(self.HISTORY_FILE))
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    history=history)
        return None

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(description='Recursive '
                                              'descent calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        self.argument_parser.add_argument('-b', '--buffer-size',
                                          type=natural,
                                          default=Lexer.BUFLEN,
                                          help='maximum program length')
        self.argument_parser.add_argument('-k', '--precision',
                                          type=natural,
                                          default=self.DEFAULT_PRECISION,
                                          help='digits after the point')
        input_groups = self.argument_parser.add_mutually_exclusive_group()
        input_groups.add_argument('path',
                                  nargs=OPTIONAL,
                                  help='program file, default stdin')
        input_groups.add_argument('-e', '--expression',
                                  nargs=REMAINDER,
                                  dest='expressions')
        input_groups.add_argument('-p', '--prompt',
                                  nargs=OPTIONAL,
                                  const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor)

    def _interactive(self):
        return isinstance(self.args.expressions, InteractiveInput)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(level=logging.DEBUG if self.args.verbose
                            else logging.WARNING,
                            format='%(name)s: %(levelname)s: %(message)s')
        if self.args.expressions is None and self.args.path is None:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except CalcError as e:
            self._report(e)
            exit(self.EXIT_FAILURE)
        except KeyboardInterrupt:
            exit(self.EXIT_FAILURE)
