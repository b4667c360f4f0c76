import argparse
import sys

from . import settings
from .checker import ScopeTypeChecker
from .dfa import load_dfa
from .display import Displayer, TreePrinter
from .errors import LexerError, ParserError, SemanticError
from .lexer import Lexer
from .parser import Parser
from .symtab import SymbolTable


def main(argv=None):
    parser = argparse.ArgumentParser(prog='pascals', description='Pascal-S front end')
    parser.add_argument('inputfile', help='Pascal-S source file')
    parser.add_argument('--dfa', default=settings.DEFAULT_DFA, help='DFA file (.json or .txt)')
    parser.add_argument('--tokens', action='store_true', help='Print tokens')
    parser.add_argument('--tree', action='store_true', help='Print parse tree')
    parser.add_argument('--html', metavar='PATH', help='Render parse tree to an html page')
    parser.add_argument('--local-echarts', action='store_true', help='Use ./echarts.min.js in the html page')
    parser.add_argument('--table', action='store_true', help='Print symbol table')
    parser.add_argument('--scope', action='store_true', help='Print scope information')
    parser.add_argument('--scan', action='store_true', help='Print lexer trace')
    args = parser.parse_args(argv)

    settings.SHOULD_LOG_SCOPE = args.scope
    settings.SHOULD_LOG_TOKENS = args.scan
    settings.LOCAL_ECHARTS = args.local_echarts

    try:
        dfa = load_dfa(args.dfa)
    except (OSError, ValueError) as e:
        print(f'Failed to load DFA: {e}', file=sys.stderr)
        return 1

    try:
        with open(args.inputfile, encoding='utf-8') as fin:
            text = fin.read()
    except OSError as e:
        print(f'Cannot open source: {e}', file=sys.stderr)
        return 1

    try:
        tokens = Lexer(text, dfa).tokenize()
        if args.tokens:
            for token in tokens:
                print(token)

        tree = Parser(tokens).parse()
        if args.tree:
            print(TreePrinter().render(tree))
        if args.html:
            print(f'open "{Displayer(tree).display(args.html)}"')

        symbol_table = SymbolTable()
        ScopeTypeChecker(symbol_table).check(tree)
        if args.table:
            print(symbol_table)

    except (LexerError, ParserError, SemanticError) as e:
        print(e, file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
