"""
Pascal-S front end: lexer, parser and scope/type checker

    source -> Lexer (DFA) -> tokens -> Parser -> parse tree -> ScopeTypeChecker (SymbolTable)
"""

from .checker import ScopeTypeChecker
from .dfa import DFA, default_dfa, load_dfa
from .errors import LexerError, ParserError, SemanticError
from .lexer import Lexer, Token, TokenType
from .parser import Parser
from .symtab import SymbolTable

__version__ = '0.1.0'


def analyze(text, dfa=None):
    """run the whole front end, return (parse tree, populated symbol table)

    raise LexerError, ParserError or SemanticError.
    """
    tokens = Lexer(text, dfa).tokenize()
    tree = Parser(tokens).parse()
    symbol_table = SymbolTable()
    ScopeTypeChecker(symbol_table).check(tree)
    return tree, symbol_table
