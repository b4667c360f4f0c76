"""
character classes and reserved words of Pascal-S

class labels are the alphabet of the lexer's DFA besides the characters themselves.
"""

KEYWORDS = frozenset({
    'program', 'variabel', 'konstanta', 'tipe', 'prosedur', 'fungsi',
    'mulai', 'selesai', 'jika', 'maka', 'selain-itu', 'selama', 'lakukan',
    'untuk', 'ke', 'turun-ke', 'larik', 'dari',
    'integer', 'real', 'boolean', 'char',
})

LOGICAL_WORDS = frozenset({'dan', 'atau', 'tidak'})

ARITHMETIC_WORDS = frozenset({'bagi', 'mod'})

BOOLEAN_WORDS = frozenset({'true', 'false', 'benar', 'salah'})

# identifier head -> tail that joins it into a hyphenated keyword
COMPOUND_KEYWORDS = {
    'selain': '-itu',
    'turun': '-ke',
}

SYMBOLS = "+-*/=<>()[];,:'."

LETTER_OR_DIGIT_OR_UNDERSCORE = 'letter_or_digit_or_underscore'
ANY = 'any'
ANY_NON_QUOTE = 'any_non_quote'


def classify(ch):
    """class labels of one character

    a tuple, most specific label first, so that the lexer tries them in a fixed order.
    """
    labels = []
    if ch == '\n':
        labels.append('newline')
    if ch in ' \t\r':
        labels.append('whitespace')
    if is_letter(ch):
        labels.append('letter')
    if is_digit(ch):
        labels.append('digit')
    if ch == '_':
        labels.append('underscore')
    if ch in SYMBOLS:
        labels.append('symbol')
    return tuple(labels)


def is_letter(ch):
    return ch.isascii() and ch.isalpha()


def is_digit(ch):
    return '0' <= ch <= '9'


def is_identifier_char(ch):
    return is_letter(ch) or is_digit(ch) or ch == '_'


def is_space(ch):
    return ch in ' \t\r\n'
