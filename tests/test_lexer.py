import pytest

from pascals.errors import ErrorInfo, LexerError, Position
from pascals.dfa import DFA
from pascals.lexer import Lexer, Token, TokenType, classify_word


def kinds(tokens):
    return [token.type for token in tokens]


def values(tokens):
    return [token.value for token in tokens]


def test_assign_is_one_token(lex):
    tokens = lex('x := 1')
    assert kinds(tokens) == [TokenType.IDENTIFIER, TokenType.ASSIGN_OPERATOR, TokenType.NUMBER]
    assert tokens[1].value == ':='


def test_colon_alone(lex):
    assert kinds(lex('a : b')) == [TokenType.IDENTIFIER, TokenType.COLON, TokenType.IDENTIFIER]


@pytest.mark.parametrize('text', ['<', '<=', '<>', '>', '>=', '='])
def test_relational_operators(lex, text):
    tokens = lex(text)
    assert len(tokens) == 1
    assert tokens[0].type == TokenType.RELATIONAL_OPERATOR
    assert tokens[0].value == text


def test_range_after_integer(lex):
    tokens = lex('1..10')
    assert kinds(tokens) == [TokenType.NUMBER, TokenType.RANGE_OPERATOR, TokenType.NUMBER]
    assert values(tokens) == ['1', '..', '10']


def test_real_number(lex):
    tokens = lex('3.14')
    assert kinds(tokens) == [TokenType.NUMBER]
    assert tokens[0].value == '3.14'


def test_longest_identifier(lex):
    tokens = lex('counter_1 selesaiKah')
    assert kinds(tokens) == [TokenType.IDENTIFIER, TokenType.IDENTIFIER]
    assert values(tokens) == ['counter_1', 'selesaiKah']


def test_keywords_case_insensitive(lex):
    tokens = lex('PROGRAM Mulai selesai')
    assert kinds(tokens) == [TokenType.KEYWORD] * 3
    assert values(tokens) == ['PROGRAM', 'Mulai', 'selesai']
    assert tokens[1].is_keyword('mulai')


def test_word_operators(lex):
    tokens = lex('dan atau tidak bagi mod')
    assert kinds(tokens) == [TokenType.LOGICAL_OPERATOR] * 3 + [TokenType.ARITHMETIC_OPERATOR] * 2


def test_boolean_words_are_identifiers(lex):
    assert kinds(lex('benar salah')) == [TokenType.IDENTIFIER, TokenType.IDENTIFIER]


@pytest.mark.parametrize('text', ['selain-itu', 'turun-ke', 'Selain-Itu'])
def test_compound_keywords(lex, text):
    tokens = lex(text)
    assert len(tokens) == 1
    assert tokens[0].type == TokenType.KEYWORD
    assert tokens[0].value == text


def test_compound_keyword_needs_exact_tail(lex):
    tokens = lex('selain - itu')
    assert values(tokens) == ['selain', '-', 'itu']
    assert tokens[0].type == TokenType.IDENTIFIER

    tokens = lex('selain-itux')
    assert values(tokens) == ['selain', '-', 'itux']


def test_char_and_string_literals(lex):
    tokens = lex("'a' 'abc' ''")
    assert kinds(tokens) == [TokenType.CHAR_LITERAL, TokenType.STRING_LITERAL, TokenType.STRING_LITERAL]
    assert values(tokens) == ["'a'", "'abc'", "''"]


def test_doubled_quote_inside_string(lex):
    tokens = lex("'it''s'")
    assert kinds(tokens) == [TokenType.STRING_LITERAL]
    assert tokens[0].value == "'it''s'"


def test_punctuation(lex):
    tokens = lex('; , . ( ) [ ]')
    assert kinds(tokens) == [
        TokenType.SEMICOLON, TokenType.COMMA, TokenType.DOT,
        TokenType.LPARENTHESIS, TokenType.RPARENTHESIS,
        TokenType.LBRACKET, TokenType.RBRACKET,
    ]


def test_comments_are_skipped(lex):
    tokens = lex('{ satu } x (* dua\ntiga *) y')
    assert values(tokens) == ['x', 'y']
    assert tokens[1].position == Position(2, 9)


def test_positions(lex):
    tokens = lex('program Hi;\nmulai')
    assert [t.position for t in tokens] == [
        Position(1, 1), Position(1, 9), Position(1, 11), Position(2, 1),
    ]


def test_positions_locate_lexemes(lex, sample_source):
    lines = sample_source.split('\n')
    for token in lex(sample_source):
        line = lines[token.line - 1]
        start = token.column - 1
        assert line[start:start + len(token.value)] == token.value


def test_lexemes_cover_source(lex, sample_source):
    tokens = lex(sample_source)
    assert ''.join(values(tokens)) == ''.join(sample_source.split())


def test_rescanning_printed_token(lex, sample_source):
    for token in lex(sample_source):
        printed = str(token)
        lexeme = printed[len(token.kind) + 1:-1]
        rescanned = lex(lexeme)
        assert len(rescanned) == 1
        assert rescanned[0].type == token.type
        assert rescanned[0].value == token.value


def test_token_text():
    token = Token(TokenType.KEYWORD, 'program', 1, 1)
    assert str(token) == 'KEYWORD(program)'
    assert repr(token) == "Token(KEYWORD, 'program', pos=1:1)"


def test_classify_word():
    assert classify_word('Jika') == TokenType.KEYWORD
    assert classify_word('ATAU') == TokenType.LOGICAL_OPERATOR
    assert classify_word('bagi') == TokenType.ARITHMETIC_OPERATOR
    assert classify_word('jikalau') == TokenType.IDENTIFIER


def test_unterminated_comment_resumes_after_opener():
    tokens, diagnostics = Lexer('{ comment\nx').scan()
    assert values(tokens) == ['comment', 'x']
    assert len(diagnostics) == 1
    assert diagnostics[0].position == Position(1, 1)
    assert diagnostics[0].message == ErrorInfo.comment_not_end('{')


def test_unterminated_paren_comment():
    tokens, diagnostics = Lexer('(* x').scan()
    assert values(tokens) == ['x']
    assert [d.message for d in diagnostics] == [ErrorInfo.comment_not_end('(*')]


def test_unterminated_comment_raises(lex):
    with pytest.raises(LexerError) as excinfo:
        lex('{ comment\nx')
    assert len(excinfo.value.diagnostics) == 1


def test_unrecognized_chars_are_aggregated():
    tokens, diagnostics = Lexer('a @ b # c').scan()
    assert values(tokens) == ['a', 'b', 'c']
    assert [d.position for d in diagnostics] == [Position(1, 3), Position(1, 7)]
    assert diagnostics[0].message == ErrorInfo.unrecognized_char('@')


def test_lexer_error_lists_every_diagnostic(lex):
    with pytest.raises(LexerError) as excinfo:
        lex('a @ b # c')
    err = excinfo.value
    assert err.position == Position(1, 3)
    text = str(err)
    assert '2 error(s)' in text
    assert '<1:3>' in text and '<1:7>' in text


def test_unterminated_string():
    tokens, diagnostics = Lexer("'abc\nx").scan()
    assert values(tokens) == ['abc', 'x']
    assert diagnostics[0].message == ErrorInfo.literal_string_not_end()
    assert diagnostics[0].position == Position(1, 1)


def test_scan_is_repeatable():
    lexer = Lexer('a @ b')
    first = lexer.scan()
    second = lexer.scan()
    assert first == second


def test_escaped_quote_char(lex):
    tokens = lex("'''' '''a'")
    assert kinds(tokens) == [TokenType.CHAR_LITERAL, TokenType.STRING_LITERAL]
    assert values(tokens) == ["''''", "'''a'"]


def test_non_ascii_digit_is_unrecognized():
    tokens, diagnostics = Lexer('x := ²').scan()
    assert values(tokens) == ['x', ':=']
    assert diagnostics == [(Position(1, 6), ErrorInfo.unrecognized_char('²'))]


def test_non_ascii_letter_splits_identifier():
    tokens, diagnostics = Lexer('caféx').scan()
    assert values(tokens) == ['caf', 'x']
    assert len(diagnostics) == 1


TRANSITION_ORDER_DFA = DFA('S', ['C', 'NUMBER', 'STRING_LITERAL', 'X'], {
    ('S', '#'): 'A',
    ('A', 'letter_or_digit_or_underscore'): 'NUMBER',
    ('A', 'any'): 'STRING_LITERAL',
    ('S', ':'): 'C',
    ('S', 'symbol'): 'Y',
    ('S', '%'): 'B',
    ('B', 'any'): 'X',
})


def test_transition_order():
    tokens, diagnostics = Lexer('#a #@ : ;', TRANSITION_ORDER_DFA).scan()

    # identifier chars before `any`, `any` for the rest
    assert [(t.type, t.value) for t in tokens] == [
        (TokenType.NUMBER, '#a'),
        (TokenType.STRING_LITERAL, '#@'),
        (TokenType.COLON, ':'),
    ]
    # `;` only has the class transition, into a non-final state
    assert diagnostics == [(Position(1, 9), ErrorInfo.unrecognized_char(';'))]


def test_final_state_without_token_kind():
    tokens, diagnostics = Lexer('%@ #a', TRANSITION_ORDER_DFA).scan()
    assert values(tokens) == ['#a']
    assert diagnostics == [(Position(1, 1), ErrorInfo.final_state_without_kind('X', '%@'))]
