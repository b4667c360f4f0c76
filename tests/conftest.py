import pytest

from pascals import Lexer, Parser, ScopeTypeChecker, SymbolTable, default_dfa


SAMPLE_SOURCE = """\
program Contoh;
konstanta
    n = 10;
    huruf = 'a';
tipe
    vektor = larik[1..n] dari integer;
    indeks = 1..n;
variabel
    v: vektor;
    i, total: integer;
    rata: real;
    selesaiKah: boolean;

fungsi jumlah(a, b: integer): integer;
mulai
    jumlah := a + b
selesai;

prosedur cetak(variabel x: integer; pesan: char);
variabel
    tmp: integer;
mulai
    tmp := x * 2;
    writeln(pesan, tmp)
selesai;

mulai
    total := 0;
    untuk i := 1 ke n lakukan
        mulai
            v[i] := i bagi 2;
            total := jumlah(total, v[i])
        selesai;
    jika (total > 10) dan tidak selesaiKah maka
        cetak(total, huruf)
    selain-itu
        writeln('kecil');
    selama i > 0 lakukan
        i := i - 1;
    rata := total / n
selesai.
"""


def _lex(text):
    return Lexer(text).tokenize()


def _parse(text):
    return Parser(_lex(text)).parse()


def _check(text):
    tree = _parse(text)
    table = SymbolTable()
    ScopeTypeChecker(table).check(tree)
    return tree, table


@pytest.fixture
def sample_source():
    return SAMPLE_SOURCE


@pytest.fixture
def lex():
    return _lex


@pytest.fixture
def parse():
    return _parse


@pytest.fixture
def check():
    return _check


@pytest.fixture
def dfa():
    return default_dfa()
