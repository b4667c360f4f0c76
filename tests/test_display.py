from pascals import settings
from pascals.display import Displayer, TreePrinter


def test_tree_printer(parse):
    program = parse('program Hi;\nmulai\nselesai.')
    lines = TreePrinter().render(program).split('\n')

    assert lines[0] == '<program>'
    assert lines[1] == '├── KEYWORD(program)'
    assert lines[2] == '├── IDENTIFIER(Hi)'
    assert lines[-1] == '└── DOT(.)'
    assert '│   ├── <declaration-part>' in lines
    assert any(line.endswith('KEYWORD(mulai)') for line in lines)


def test_tree_printer_shows_every_token(lex, parse, sample_source):
    text = TreePrinter().render(parse(sample_source))
    leaves = [line for line in text.split('\n') if line.endswith(')')]
    assert len(leaves) == len(lex(sample_source))


def test_tree_printer_hides_empty_statements(parse):
    program = parse('program Hi;\nmulai\n;\nselesai.')
    assert '<empty-statement>' in TreePrinter().render(program)
    assert '<empty-statement>' not in TreePrinter(show_empty=False).render(program)


def test_chart_data(parse):
    program = parse('program Hi;\nmulai\nselesai.')
    data = Displayer(program).data(program)
    assert data['name'] == '<program>'
    assert [child['name'] for child in data['children']][:3] == [
        'KEYWORD(program)', 'IDENTIFIER(Hi)', 'SEMICOLON(;)',
    ]
    assert 'children' not in data['children'][0]


def test_display_html(parse, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, 'LOCAL_ECHARTS', False)
    path = str(tmp_path / 'tree.html')
    program = parse('program Hi;\nmulai\nselesai.')

    assert Displayer(program, title='Hi').display(path) == path
    with open(path, encoding='utf-8') as fin:
        content = fin.read()
    assert 'echarts.min.js' in content
    assert 'IDENTIFIER(Hi)' in content


def test_display_local_echarts(parse, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, 'LOCAL_ECHARTS', True)
    path = str(tmp_path / 'tree.html')
    Displayer(parse('program Hi;\nmulai\nselesai.')).display(path)

    with open(path, encoding='utf-8') as fin:
        content = fin.read()
    assert 'src="echarts.min.js"' in content
