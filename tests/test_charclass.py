import pytest

from pascals.charclass import (
    ARITHMETIC_WORDS, KEYWORDS, LOGICAL_WORDS, classify, is_identifier_char,
)


@pytest.mark.parametrize('ch, labels', [
    ('a', ('letter',)),
    ('Z', ('letter',)),
    ('7', ('digit',)),
    ('_', ('underscore',)),
    ('\n', ('newline',)),
    (' ', ('whitespace',)),
    ('\t', ('whitespace',)),
    (':', ('symbol',)),
    ("'", ('symbol',)),
    ('@', ()),
])
def test_classify(ch, labels):
    assert classify(ch) == labels


def test_letter_is_never_digit():
    for ch in 'abcXYZ':
        assert 'digit' not in classify(ch)
    for ch in '0123456789':
        assert 'letter' not in classify(ch)


def test_identifier_chars():
    assert is_identifier_char('_')
    assert is_identifier_char('a')
    assert is_identifier_char('9')
    assert not is_identifier_char('-')


def test_word_sets():
    assert {'program', 'mulai', 'selesai', 'selain-itu', 'turun-ke'} <= KEYWORDS
    assert LOGICAL_WORDS == {'dan', 'atau', 'tidak'}
    assert ARITHMETIC_WORDS == {'bagi', 'mod'}
    assert not KEYWORDS & LOGICAL_WORDS


@pytest.mark.parametrize('ch', ['²', '³', '٣', 'é', 'λ'])
def test_non_ascii_has_no_class(ch):
    assert classify(ch) == ()
    assert not is_identifier_char(ch)
