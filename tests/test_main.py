import pytest

from pascals import settings
from pascals.__main__ import main


@pytest.fixture(autouse=True)
def restore_settings(monkeypatch):
    monkeypatch.setattr(settings, 'SHOULD_LOG_SCOPE', False)
    monkeypatch.setattr(settings, 'SHOULD_LOG_TOKENS', False)
    monkeypatch.setattr(settings, 'LOCAL_ECHARTS', False)


@pytest.fixture
def source_file(tmp_path, sample_source):
    path = tmp_path / 'contoh.pas'
    path.write_text(sample_source, encoding='utf-8')
    return str(path)


def write(tmp_path, text):
    path = tmp_path / 'src.pas'
    path.write_text(text, encoding='utf-8')
    return str(path)


def test_tokens_and_table(source_file, capsys):
    assert main([source_file, '--tokens', '--table']) == 0
    out = capsys.readouterr().out
    assert 'KEYWORD(program)' in out
    assert 'IDENTIFIER(Contoh)' in out
    assert 'TAB (identifier table)' in out


def test_tree(source_file, capsys):
    assert main([source_file, '--tree']) == 0
    assert capsys.readouterr().out.startswith('<program>')


def test_scope_log(source_file, capsys):
    assert main([source_file, '--scope']) == 0
    out = capsys.readouterr().out
    assert "[Semantic] Program 'Contoh' checked successfully" in out


def test_html(source_file, tmp_path, capsys):
    page = tmp_path / 'tree.html'
    assert main([source_file, '--html', str(page)]) == 0
    assert page.exists()
    assert str(page) in capsys.readouterr().out


@pytest.mark.parametrize('text, kind', [
    ('program T; mulai x := 1 @ selesai.', 'LexerError'),
    ('program T mulai selesai.', 'ParserError'),
    ('program T; variabel x: integer; x: real; mulai selesai.', 'SemanticError'),
])
def test_errors(tmp_path, capsys, text, kind):
    assert main([write(tmp_path, text)]) == 1
    assert kind in capsys.readouterr().err


def test_missing_source(tmp_path, capsys):
    assert main([str(tmp_path / 'nope.pas')]) == 1
    assert 'Cannot open source' in capsys.readouterr().err


def test_bad_dfa(source_file, tmp_path, capsys):
    assert main([source_file, '--dfa', str(tmp_path / 'dfa.yaml')]) == 1
    assert 'Failed to load DFA' in capsys.readouterr().err


def test_lexer_trace(tmp_path, capsys):
    assert main([write(tmp_path, 'program T; mulai selesai.'), '--scan']) == 0
    assert "token: Token(KEYWORD, 'program', pos=1:1)" in capsys.readouterr().out
