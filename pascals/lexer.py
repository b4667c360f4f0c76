"""
table-driven lexer of Pascal-S

every token is recognized by walking the DFA from its start state (maximal munch),
then identifiers are re-tagged by a reserved word lookup.
"""

from collections import namedtuple
from enum import Enum

from . import settings
from .charclass import (
    ANY, ANY_NON_QUOTE, ARITHMETIC_WORDS, COMPOUND_KEYWORDS, KEYWORDS,
    LETTER_OR_DIGIT_OR_UNDERSCORE, LOGICAL_WORDS, classify, is_identifier_char, is_space,
)
from .dfa import default_dfa
from .errors import Diagnostic, ErrorInfo, LexerError, Position


###############################################################################
#                                                                             #
#  TOKEN                                                                      #
#                                                                             #
###############################################################################

class TokenType(Enum):
    # words
    IDENTIFIER          = 'IDENTIFIER'
    KEYWORD             = 'KEYWORD'
    LOGICAL_OPERATOR    = 'LOGICAL_OPERATOR'
    # literals
    NUMBER              = 'NUMBER'
    STRING_LITERAL      = 'STRING_LITERAL'
    CHAR_LITERAL        = 'CHAR_LITERAL'
    # operators
    ARITHMETIC_OPERATOR = 'ARITHMETIC_OPERATOR'
    RELATIONAL_OPERATOR = 'RELATIONAL_OPERATOR'
    ASSIGN_OPERATOR     = 'ASSIGN_OPERATOR'
    RANGE_OPERATOR      = 'RANGE_OPERATOR'
    # punctuation
    SEMICOLON           = 'SEMICOLON'
    COMMA               = 'COMMA'
    COLON               = 'COLON'
    DOT                 = 'DOT'
    LPARENTHESIS        = 'LPARENTHESIS'
    RPARENTHESIS        = 'RPARENTHESIS'
    LBRACKET            = 'LBRACKET'
    RBRACKET            = 'RBRACKET'
    # misc
    COMMENT             = 'COMMENT'
    EOF                 = 'EOF'


PUNCTUATION = {
    ';': TokenType.SEMICOLON,
    ',': TokenType.COMMA,
    ':': TokenType.COLON,
    '.': TokenType.DOT,
    '(': TokenType.LPARENTHESIS,
    ')': TokenType.RPARENTHESIS,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
}

ARITHMETIC_SYMBOLS = frozenset({'+', '-', '*', '/'})

RELATIONAL_SYMBOLS = frozenset({'=', '<>', '<', '<=', '>', '>='})


class Token(namedtuple('Token', ['type', 'value', 'line', 'column'])):
    """one lexeme

    type: TokenType
    value: str, the exact source text
    """
    __slots__ = ()

    @property
    def kind(self):
        return self.type.value

    @property
    def position(self):
        return Position(self.line, self.column)

    def lower(self):
        return self.value.lower()

    def is_word(self, token_type, word):
        """`word` of the given kind, compared case-insensitively"""
        return self.type == token_type and self.value.lower() == word

    def is_keyword(self, word):
        return self.is_word(TokenType.KEYWORD, word)

    def __str__(self):
        return f'{self.type.value}({self.value})'

    def __repr__(self):
        return f'Token({self.type.value}, {self.value!r}, pos={self.line}:{self.column})'


ScanResult = namedtuple('ScanResult', ['tokens', 'diagnostics'])


def classify_word(lexeme):
    """token type of an identifier-shaped lexeme"""
    word = lexeme.lower()
    if word in KEYWORDS:
        return TokenType.KEYWORD
    if word in LOGICAL_WORDS:
        return TokenType.LOGICAL_OPERATOR
    if word in ARITHMETIC_WORDS:
        return TokenType.ARITHMETIC_OPERATOR
    return TokenType.IDENTIFIER


###############################################################################
#                                                                             #
#  LEXER                                                                      #
#                                                                             #
###############################################################################

class Lexer:
    def __init__(self, text: str, dfa=None):
        self.text = text
        self.dfa = dfa if dfa is not None else default_dfa()
        self.pos = 0
        # for error information
        self.line = 1
        self.col = 1
        self.diagnostics = []

    def position(self):
        return Position(self.line, self.col)

    def log(self, msg):
        if settings.SHOULD_LOG_TOKENS:
            print(msg)

    def error(self, position, message):
        """record a diagnostic, scanning goes on"""
        self.log(f'error: <{position.line}:{position.col}>: {message}')
        self.diagnostics.append(Diagnostic(position, message))

    @property
    def current_char(self):
        if self.pos < len(self.text):
            return self.text[self.pos]
        return None  # end of input

    def peek(self, k=1):
        """lookup a char ahead, but not increase the pos pointer
        """
        peek_pos = self.pos + k
        if peek_pos < len(self.text):
            return self.text[peek_pos]
        return None

    def advance(self):
        """consume the current char and keep line/col up to date
        """
        ch = self.text[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _save(self):
        return self.pos, self.line, self.col

    def _restore(self, saved):
        self.pos, self.line, self.col = saved

    def skip_whitespace_and_comments(self):
        while self.current_char is not None:
            if is_space(self.current_char):
                self.advance()
            elif self.current_char == '{':
                self.skip_comment('{', '}')
            elif self.current_char == '(' and self.peek() == '*':
                self.skip_comment('(*', '*)')
            else:
                break

    def skip_comment(self, opener, closer):
        """skip a comment

        an unterminated comment is reported and scanning resumes right after its opener.
        """
        start = self.position()
        saved = self._save()
        for _ in opener:
            self.advance()

        while self.current_char is not None:
            if self.text.startswith(closer, self.pos):
                for _ in closer:
                    self.advance()
                return
            self.advance()

        self.error(start, ErrorInfo.comment_not_end(opener))
        self._restore(saved)
        for _ in opener:
            self.advance()

    def next_state(self, state, ch, in_literal):
        """DFA step, first matching rule wins

        exact char, char classes, letter/digit/underscore, any, and
        inside quoted literals any non quote.
        """
        nxt = self.dfa.next_state(state, ch)
        if nxt is not None:
            return nxt

        for label in classify(ch):
            nxt = self.dfa.next_state(state, label)
            if nxt is not None:
                return nxt

        if is_identifier_char(ch):
            nxt = self.dfa.next_state(state, LETTER_OR_DIGIT_OR_UNDERSCORE)
            if nxt is not None:
                return nxt

        nxt = self.dfa.next_state(state, ANY)
        if nxt is not None:
            return nxt

        if in_literal and ch not in "'\n":
            return self.dfa.next_state(state, ANY_NON_QUOTE)

        return None

    def token_type(self, state, lexeme):
        if state in ('NUM_INT', 'NUM_REAL'):
            return TokenType.NUMBER
        if lexeme == ':=':
            return TokenType.ASSIGN_OPERATOR
        if lexeme == '..':
            return TokenType.RANGE_OPERATOR
        if state in ('STR', 'STR_EMPTY'):
            return TokenType.STRING_LITERAL
        if state == 'CHR':
            return TokenType.CHAR_LITERAL
        if lexeme in PUNCTUATION:
            return PUNCTUATION[lexeme]
        if lexeme in ARITHMETIC_SYMBOLS:
            return TokenType.ARITHMETIC_OPERATOR
        if lexeme in RELATIONAL_SYMBOLS:
            return TokenType.RELATIONAL_OPERATOR
        if state == 'ID':
            return TokenType.IDENTIFIER
        # final state named after a token type
        return TokenType.__members__.get(state)

    def join_compound_keyword(self, lexeme):
        """extend `selain` / `turun` by their `-itu` / `-ke` tail when it follows"""
        tail = COMPOUND_KEYWORDS.get(lexeme.lower())
        if tail is None:
            return lexeme

        end = self.pos + len(tail)
        if self.text[self.pos:end].lower() != tail:
            return lexeme
        if end < len(self.text) and is_identifier_char(self.text[end]):
            return lexeme

        for _ in tail:
            lexeme += self.advance()
        return lexeme

    def scan_token(self):
        """recognize one token at the cursor

        return None after a lexical error. the cursor then has skipped one char, or the
        whole lexeme when its final state names no token kind.
        """
        start = self.position()
        saved = self._save()
        in_literal = self.current_char == "'"

        state = self.dfa.start
        last_state = None
        last_length = 0
        length = 0

        # walk DFA, remember the last accepting state
        while self.current_char is not None:
            nxt = self.next_state(state, self.current_char, in_literal)
            if nxt is None:
                break
            self.advance()
            length += 1
            state = nxt
            if self.dfa.is_final(state):
                last_state = state
                last_length = length

        # rollback, then re-consume exactly the accepted lexeme
        self._restore(saved)

        if last_state is None:
            bad = self.advance()
            if in_literal:
                self.error(start, ErrorInfo.literal_string_not_end())
            else:
                self.error(start, ErrorInfo.unrecognized_char(bad))
            return None

        lexeme = ''.join(self.advance() for _ in range(last_length))

        token_type = self.token_type(last_state, lexeme)
        if token_type is None:
            self.error(start, ErrorInfo.final_state_without_kind(last_state, lexeme))
            return None

        if token_type == TokenType.IDENTIFIER:
            lexeme = self.join_compound_keyword(lexeme)
            token_type = classify_word(lexeme)

        return Token(token_type, lexeme, start.line, start.col)

    def scan(self):
        """lexical analyzer, lexer, scanner, tokenizer

        breaking the whole text apart into tokens, collecting every lexical error
        instead of stopping at the first one.
        """
        self.pos = 0
        self.line = 1
        self.col = 1
        self.diagnostics = []

        tokens = []
        while True:
            self.skip_whitespace_and_comments()
            if self.current_char is None:
                break
            token = self.scan_token()
            if token is not None:
                self.log(f'token: {token!r}')
                tokens.append(token)

        return ScanResult(tokens, list(self.diagnostics))

    def tokenize(self):
        """all tokens, or one LexerError listing every diagnostic"""
        tokens, diagnostics = self.scan()
        if diagnostics:
            raise LexerError(diagnostics)
        return tokens
