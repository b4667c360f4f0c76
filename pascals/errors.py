"""
error types of the Pascal-S front end

one error kind per stage:
  LexerError     - aggregated, every diagnostic of a scan
  ParserError    - fail-fast, first grammar violation
  SemanticError  - fail-fast, first declaration/scope violation

SymbolTableError is raised by the tables themselves and never leaves the checker.
"""

from collections import namedtuple

Position = namedtuple('Position', ['line', 'col'])

Diagnostic = namedtuple('Diagnostic', ['position', 'message'])


class ErrorInfo:
    # lexer error

    @staticmethod
    def unrecognized_char(item):
        return f'unrecognized char `{item}`'

    @staticmethod
    def literal_string_not_end():
        return 'literal string is not end'

    @staticmethod
    def comment_not_end(opener):
        return f'comment started with `{opener}` is not end'

    @staticmethod
    def final_state_without_kind(state, item):
        return f'no token kind for final state `{state}` (lexeme `{item}`)'

    # parser error

    @staticmethod
    def unexpected_token(item, want):
        return f'token `{item}` is not expected, want `{want}`'

    @staticmethod
    def trailing_token(item):
        return f'token `{item}` after end of program'

    @staticmethod
    def nested_too_deep():
        return 'expression is nested too deeply'

    # semantic error

    @staticmethod
    def id_duplicate_defined(item):
        return f'identifier `{item}` duplicate defined'

    @staticmethod
    def id_not_defined(item):
        return f'identifier `{item}` not defined'

    @staticmethod
    def id_not_type(item):
        return f'identifier `{item}` is not a type'

    @staticmethod
    def id_not_callable(item):
        return f'identifier `{item}` not a procedure/function'

    @staticmethod
    def id_not_assignable(item):
        return f'identifier `{item}` can not be assigned'

    @staticmethod
    def id_not_variable(item):
        return f'identifier `{item}` is not a variable'

    @staticmethod
    def id_not_constant(item):
        return f'identifier `{item}` is not a constant'

    @staticmethod
    def id_not_value(item):
        return f'identifier `{item}` has no value'

    @staticmethod
    def id_not_function(item):
        return f'procedure `{item}` does not return a value'

    @staticmethod
    def id_not_array(item):
        return f'identifier `{item}` is not an array'

    @staticmethod
    def wrong_arguments_num(item, want, got):
        return f'wrong argument number in `{item}` call, want {want}, got {got}'

    @staticmethod
    def bound_not_constant(item):
        return f'array bound `{item}` is not a constant expression'

    @staticmethod
    def bound_not_ordinal(item):
        return f'array bound `{item}` is not an ordinal value'

    @staticmethod
    def division_by_zero():
        return 'division by zero in constant expression'

    @staticmethod
    def bound_type_mismatch():
        return 'array bounds are not of the same type'

    @staticmethod
    def bound_empty_range(low, high):
        return f'array range {low}..{high} is empty'

    @staticmethod
    def table_error(message):
        return f'symbol table: {message}'


class Error(Exception):
    def __init__(self, position, message):
        super().__init__(message)
        self.position = position
        self.message = message

    def __str__(self):
        return f'{self.__class__.__name__}: <{self.position.line}:{self.position.col}>: {self.message}'

    __repr__ = __str__


class LexerError(Error):
    """every lexical diagnostic found in one scan

    position/message describe the first diagnostic, `diagnostics` holds all of them.
    """

    def __init__(self, diagnostics):
        self.diagnostics = list(diagnostics)
        first = self.diagnostics[0]
        super().__init__(first.position, first.message)

    def __str__(self):
        lines = [f'{self.__class__.__name__}: {len(self.diagnostics)} error(s)']
        for diag in self.diagnostics:
            lines.append(f'  <{diag.position.line}:{diag.position.col}>: {diag.message}')
        return '\n'.join(lines)

    __repr__ = __str__


class ParserError(Error):
    def __init__(self, position, message, expected=None, token=None, context=()):
        super().__init__(position, message)
        self.expected = expected
        self.token = token
        self.context = tuple(context)

    def __str__(self):
        s = super().__str__()
        if self.context:
            s += '\n  near: ' + ' '.join(self.context)
        return s

    __repr__ = __str__


class SemanticError(Error):
    pass


class SymbolTableError(Exception):
    pass
