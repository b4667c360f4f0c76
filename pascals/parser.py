"""
recursive descent parser of Pascal-S

grammar:
program             : PROGRAM ID SEMI block DOT
block               : declaration_part compound_statement
declaration_part    : const_section* type_section* var_section* subprogram*
const_section       : KONSTANTA (ID EQ constant SEMI)+
constant            : (PLUS | MINUS)? NUMBER | STRING_LITERAL | CHAR_LITERAL | ID
type_section        : TIPE (ID EQ type SEMI)+
var_section         : VARIABEL (identifier_list COLON type SEMI)+
identifier_list     : ID (COMMA ID)*
type                : INTEGER | REAL | BOOLEAN | CHAR
                    | ID
                    | LARIK LBRACKET range RBRACKET DARI type
                    | range
range               : simple_expression RANGE simple_expression
subprogram          : procedure_decl | function_decl
procedure_decl      : PROSEDUR ID formal_parameters? SEMI block SEMI
function_decl       : FUNGSI ID formal_parameters? COLON type SEMI block SEMI
formal_parameters   : LPAREN parameter_group (SEMI parameter_group)* RPAREN
parameter_group     : VARIABEL? identifier_list COLON type
compound_statement  : MULAI statement_list SELESAI
statement_list      : empty
                    | statement (SEMI statement)*
statement           : compound_statement
                    | assignment_statement
                    | procedure_call
                    | if_statement
                    | while_statement
                    | for_statement
                    | empty
assignment_statement: variable ASSIGN expression
procedure_call      : ID (LPAREN argument_list? RPAREN)?
if_statement        : JIKA expression MAKA statement (SELAIN-ITU statement)?
while_statement     : SELAMA expression LAKUKAN statement
for_statement       : UNTUK ID ASSIGN expression (KE | TURUN-KE) expression LAKUKAN statement
argument_list       : expression (COMMA expression)*
expression          : simple_expression (RELOP simple_expression)?
simple_expression   : (PLUS | MINUS)? term ((PLUS | MINUS | ATAU) term)*
term                : factor ((MUL | FLOAT_DIV | BAGI | MOD | DAN) factor)*
factor              : TIDAK factor
                    | LPAREN expression RPAREN
                    | NUMBER | STRING_LITERAL | CHAR_LITERAL
                    | ID LPAREN argument_list? RPAREN
                    | variable
variable            : ID (LBRACKET expression RBRACKET)?
"""

from .errors import ErrorInfo, ParserError
from .lexer import Token, TokenType
from .tree import (
    ArgumentList, ArrayType, Assignment, Block, CompoundStatement, ConstDeclaration, ConstSection,
    DeclarationPart, EmptyStatement, Expression, ForStatement, FormalParameterList, FunctionCall,
    FunctionDeclaration, IdentifierList, IfStatement, Literal, NamedType, NotFactor, ParameterGroup,
    ParenFactor, ProcedureCall, ProcedureDeclaration, Program, Range, SimpleExpression, SimpleType,
    StatementList, Term, TypeDeclaration, TypeSection, Variable, VarDeclaration, VarSection,
    WhileStatement,
)

BASE_TYPE_KEYWORDS = frozenset({'integer', 'real', 'boolean', 'char'})

ADDITIVE_SYMBOLS = frozenset({'+', '-'})
MULTIPLICATIVE_SYMBOLS = frozenset({'*', '/', 'bagi', 'mod'})

LITERAL_TYPES = (TokenType.NUMBER, TokenType.STRING_LITERAL, TokenType.CHAR_LITERAL)

CONTEXT_WIDTH = 2


class Parser:
    def __init__(self, tokens):
        """Parser

        Args:
          tokens: list[Token], as produced by Lexer.tokenize()
        """
        self.tokens = list(tokens)
        self.pos = 0
        self.eof = self._make_eof()
        self._skip_comments()

    def _make_eof(self):
        if not self.tokens:
            return Token(TokenType.EOF, '', 1, 1)
        last = self.tokens[-1]
        lines = last.value.split('\n')
        if len(lines) == 1:
            return Token(TokenType.EOF, '', last.line, last.column + len(last.value))
        return Token(TokenType.EOF, '', last.line + len(lines) - 1, len(lines[-1]) + 1)

    def _skip_comments(self):
        while self.pos < len(self.tokens) and self.tokens[self.pos].type == TokenType.COMMENT:
            self.pos += 1

    @property
    def current_token(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return self.eof

    def advance(self):
        self.pos += 1
        self._skip_comments()

    def peek(self, k=1):
        """the k-th significant token after the current one"""
        i = self.pos
        while k > 0:
            i += 1
            while i < len(self.tokens) and self.tokens[i].type == TokenType.COMMENT:
                i += 1
            k -= 1
        if i < len(self.tokens):
            return self.tokens[i]
        return self.eof

    def context(self):
        """up to two tokens on each side of the current one"""
        significant = [i for i, token in enumerate(self.tokens) if token.type != TokenType.COMMENT]
        before = [i for i in significant if i < self.pos][-CONTEXT_WIDTH:]
        after = [i for i in significant if i > self.pos][:CONTEXT_WIDTH]

        items = [str(self.tokens[i]) for i in before]
        items.append(f'>>{self.current_token}<<')
        items.extend(str(self.tokens[i]) for i in after)
        return items

    def error(self, want, message=None):
        token = self.current_token
        if message is None:
            message = ErrorInfo.unexpected_token(token, want)
        raise ParserError(token.position, message, expected=want, token=token, context=self.context())

    def check(self, token_type, word=None):
        token = self.current_token
        if token.type != token_type:
            return False
        return word is None or token.lower() == word

    def check_keyword(self, word):
        return self.check(TokenType.KEYWORD, word)

    def eat(self, token_type, word=None):
        """verify the token type (and word), return the consumed token
        """
        token = self.current_token
        if self.check(token_type, word):
            self.advance()
            return token
        self.error(word if word is not None else token_type.value)

    def eat_keyword(self, word):
        return self.eat(TokenType.KEYWORD, word)

    # program & declarations

    def program(self):
        """parse program

        program : PROGRAM ID SEMI block DOT
        """
        program_keyword = self.eat_keyword('program')
        identifier = self.eat(TokenType.IDENTIFIER)
        semicolon = self.eat(TokenType.SEMICOLON)
        block_node = self.block()
        dot = self.eat(TokenType.DOT)
        return Program(program_keyword, identifier, semicolon, block_node, dot)

    def block(self):
        """parse block

        block : declaration_part compound_statement
        """
        declaration_part = self.declaration_part()
        compound_statement = self.compound_statement()
        return Block(declaration_part, compound_statement)

    def declaration_part(self):
        """parse declaration_part, sections come in a fixed order

        declaration_part : const_section* type_section* var_section* subprogram*
        """
        const_sections = []
        while self.check_keyword('konstanta'):
            const_sections.append(self.const_section())

        type_sections = []
        while self.check_keyword('tipe'):
            type_sections.append(self.type_section())

        var_sections = []
        while self.check_keyword('variabel'):
            var_sections.append(self.var_section())

        subprograms = []
        while True:
            if self.check_keyword('prosedur'):
                subprograms.append(self.procedure_declaration())
            elif self.check_keyword('fungsi'):
                subprograms.append(self.function_declaration())
            else:
                break

        return DeclarationPart(const_sections, type_sections, var_sections, subprograms)

    def const_section(self):
        """const_section : KONSTANTA (ID EQ constant SEMI)+
        """
        keyword = self.eat_keyword('konstanta')
        declarations = [self.const_declaration()]
        while self.check(TokenType.IDENTIFIER):
            declarations.append(self.const_declaration())
        return ConstSection(keyword, declarations)

    def const_declaration(self):
        identifier = self.eat(TokenType.IDENTIFIER)
        equal = self.eat(TokenType.RELATIONAL_OPERATOR, '=')

        sign = None
        token = self.current_token
        if token.type == TokenType.ARITHMETIC_OPERATOR and token.value in ADDITIVE_SYMBOLS:
            sign = self.eat(TokenType.ARITHMETIC_OPERATOR)
            value = self.eat(TokenType.NUMBER)
        elif token.type in LITERAL_TYPES or token.type == TokenType.IDENTIFIER:
            value = self.eat(token.type)
        else:
            self.error('constant')

        semicolon = self.eat(TokenType.SEMICOLON)
        return ConstDeclaration(identifier, equal, sign, value, semicolon)

    def type_section(self):
        """type_section : TIPE (ID EQ type SEMI)+
        """
        keyword = self.eat_keyword('tipe')
        declarations = [self.type_declaration()]
        while self.check(TokenType.IDENTIFIER):
            declarations.append(self.type_declaration())
        return TypeSection(keyword, declarations)

    def type_declaration(self):
        identifier = self.eat(TokenType.IDENTIFIER)
        equal = self.eat(TokenType.RELATIONAL_OPERATOR, '=')
        type_node = self.type_spec()
        semicolon = self.eat(TokenType.SEMICOLON)
        return TypeDeclaration(identifier, equal, type_node, semicolon)

    def var_section(self):
        """var_section : VARIABEL (identifier_list COLON type SEMI)+
        """
        keyword = self.eat_keyword('variabel')
        declarations = [self.var_declaration()]
        while self.check(TokenType.IDENTIFIER):
            declarations.append(self.var_declaration())
        return VarSection(keyword, declarations)

    def var_declaration(self):
        identifier_list = self.identifier_list()
        colon = self.eat(TokenType.COLON)
        type_node = self.type_spec()
        semicolon = self.eat(TokenType.SEMICOLON)
        return VarDeclaration(identifier_list, colon, type_node, semicolon)

    def identifier_list(self):
        """identifier_list : ID (COMMA ID)*
        """
        identifiers = [self.eat(TokenType.IDENTIFIER)]
        commas = []
        while self.check(TokenType.COMMA):
            commas.append(self.eat(TokenType.COMMA))
            identifiers.append(self.eat(TokenType.IDENTIFIER))
        return IdentifierList(identifiers, commas)

    def _starts_range(self, token):
        if token.type in (TokenType.NUMBER, TokenType.CHAR_LITERAL,
                          TokenType.IDENTIFIER, TokenType.LPARENTHESIS):
            return True
        return token.type == TokenType.ARITHMETIC_OPERATOR and token.value in ADDITIVE_SYMBOLS

    def type_spec(self):
        """parse type

        array, base type keyword, declared type name, or subrange.
        a name directly followed by `..` starts a subrange.
        """
        token = self.current_token
        if token.is_keyword('larik'):
            return self.array_type()
        if token.type == TokenType.KEYWORD and token.lower() in BASE_TYPE_KEYWORDS:
            return SimpleType(self.eat(TokenType.KEYWORD))
        if token.type == TokenType.IDENTIFIER and self.peek().type != TokenType.RANGE_OPERATOR:
            return NamedType(self.eat(TokenType.IDENTIFIER))
        if self._starts_range(token):
            return self.range()
        self.error('type')

    def array_type(self):
        """array_type : LARIK LBRACKET range RBRACKET DARI type
        """
        array_keyword = self.eat_keyword('larik')
        lbracket = self.eat(TokenType.LBRACKET)
        range_node = self.range()
        rbracket = self.eat(TokenType.RBRACKET)
        of_keyword = self.eat_keyword('dari')
        element_type = self.type_spec()
        return ArrayType(array_keyword, lbracket, range_node, rbracket, of_keyword, element_type)

    def range(self):
        """range : simple_expression RANGE simple_expression
        """
        low = self.simple_expression()
        range_operator = self.eat(TokenType.RANGE_OPERATOR)
        high = self.simple_expression()
        return Range(low, range_operator, high)

    def procedure_declaration(self):
        """procedure_decl : PROSEDUR ID formal_parameters? SEMI block SEMI
        """
        keyword = self.eat_keyword('prosedur')
        identifier = self.eat(TokenType.IDENTIFIER)

        parameters = None
        if self.check(TokenType.LPARENTHESIS):
            parameters = self.formal_parameters()

        semicolon = self.eat(TokenType.SEMICOLON)
        block_node = self.block()
        end_semicolon = self.eat(TokenType.SEMICOLON)
        return ProcedureDeclaration(keyword, identifier, parameters, semicolon, block_node, end_semicolon)

    def function_declaration(self):
        """function_decl : FUNGSI ID formal_parameters? COLON type SEMI block SEMI
        """
        keyword = self.eat_keyword('fungsi')
        identifier = self.eat(TokenType.IDENTIFIER)

        parameters = None
        if self.check(TokenType.LPARENTHESIS):
            parameters = self.formal_parameters()

        colon = self.eat(TokenType.COLON)
        return_type = self.type_spec()
        semicolon = self.eat(TokenType.SEMICOLON)
        block_node = self.block()
        end_semicolon = self.eat(TokenType.SEMICOLON)
        return FunctionDeclaration(keyword, identifier, parameters, colon, return_type,
                                   semicolon, block_node, end_semicolon)

    def formal_parameters(self):
        """formal_parameters : LPAREN parameter_group (SEMI parameter_group)* RPAREN
        """
        lparen = self.eat(TokenType.LPARENTHESIS)
        groups = [self.parameter_group()]
        semicolons = []
        while self.check(TokenType.SEMICOLON):
            semicolons.append(self.eat(TokenType.SEMICOLON))
            groups.append(self.parameter_group())
        rparen = self.eat(TokenType.RPARENTHESIS)
        return FormalParameterList(lparen, groups, semicolons, rparen)

    def parameter_group(self):
        """parameter_group : VARIABEL? identifier_list COLON type
        """
        var_keyword = None
        if self.check_keyword('variabel'):
            var_keyword = self.eat_keyword('variabel')
        identifier_list = self.identifier_list()
        colon = self.eat(TokenType.COLON)
        type_node = self.type_spec()
        return ParameterGroup(var_keyword, identifier_list, colon, type_node)

    # statements

    def compound_statement(self):
        """compound_statement : MULAI statement_list SELESAI
        """
        begin_keyword = self.eat_keyword('mulai')
        statement_list = self.statement_list()
        end_keyword = self.eat_keyword('selesai')
        return CompoundStatement(begin_keyword, statement_list, end_keyword)

    def statement_list(self):
        """parse statement_list

        statement_list : empty
                       | statement (SEMI statement)*
        """
        if self.check_keyword('selesai'):
            return StatementList([], [])

        statements = [self.statement()]
        semicolons = []
        while self.check(TokenType.SEMICOLON):
            semicolons.append(self.eat(TokenType.SEMICOLON))
            statements.append(self.statement())

        return StatementList(statements, semicolons)

    def statement(self):
        """parse statement

        an identifier followed by `:=` or `[` starts an assignment, otherwise a call.
        """
        token = self.current_token
        if token.is_keyword('mulai'):
            return self.compound_statement()
        elif token.is_keyword('jika'):
            return self.if_statement()
        elif token.is_keyword('selama'):
            return self.while_statement()
        elif token.is_keyword('untuk'):
            return self.for_statement()
        elif token.type == TokenType.IDENTIFIER:
            if self.peek().type in (TokenType.ASSIGN_OPERATOR, TokenType.LBRACKET):
                return self.assignment_statement()
            return self.procedure_call()
        elif (token.type == TokenType.SEMICOLON
              or token.is_keyword('selesai')
              or token.is_keyword('selain-itu')):
            return self.empty()
        self.error('statement')

    def empty(self):
        return EmptyStatement()

    def assignment_statement(self):
        """assignment_statement : variable ASSIGN expression
        """
        target = self.variable()
        assign_operator = self.eat(TokenType.ASSIGN_OPERATOR)
        expression = self.expression()
        return Assignment(target, assign_operator, expression)

    def procedure_call(self):
        """procedure_call : ID (LPAREN argument_list? RPAREN)?
        """
        identifier = self.eat(TokenType.IDENTIFIER)
        if not self.check(TokenType.LPARENTHESIS):
            return ProcedureCall(identifier)

        lparen, arguments, rparen = self._call_arguments()
        return ProcedureCall(identifier, lparen, arguments, rparen)

    def _call_arguments(self):
        lparen = self.eat(TokenType.LPARENTHESIS)
        arguments = None
        if not self.check(TokenType.RPARENTHESIS):
            arguments = self.argument_list()
        rparen = self.eat(TokenType.RPARENTHESIS)
        return lparen, arguments, rparen

    def argument_list(self):
        """argument_list : expression (COMMA expression)*
        """
        expressions = [self.expression()]
        commas = []
        while self.check(TokenType.COMMA):
            commas.append(self.eat(TokenType.COMMA))
            expressions.append(self.expression())
        return ArgumentList(expressions, commas)

    def if_statement(self):
        """if_statement : JIKA expression MAKA statement (SELAIN-ITU statement)?
        """
        if_keyword = self.eat_keyword('jika')
        condition = self.expression()
        then_keyword = self.eat_keyword('maka')
        then_statement = self.statement()

        else_keyword = None
        else_statement = None
        if self.check_keyword('selain-itu'):
            else_keyword = self.eat_keyword('selain-itu')
            else_statement = self.statement()

        return IfStatement(if_keyword, condition, then_keyword, then_statement, else_keyword, else_statement)

    def while_statement(self):
        """while_statement : SELAMA expression LAKUKAN statement
        """
        while_keyword = self.eat_keyword('selama')
        condition = self.expression()
        do_keyword = self.eat_keyword('lakukan')
        body = self.statement()
        return WhileStatement(while_keyword, condition, do_keyword, body)

    def for_statement(self):
        """for_statement : UNTUK ID ASSIGN expression (KE | TURUN-KE) expression LAKUKAN statement
        """
        for_keyword = self.eat_keyword('untuk')
        control_variable = self.eat(TokenType.IDENTIFIER)
        assign_operator = self.eat(TokenType.ASSIGN_OPERATOR)
        initial_value = self.expression()

        if self.check_keyword('ke'):
            direction_keyword = self.eat_keyword('ke')
        elif self.check_keyword('turun-ke'):
            direction_keyword = self.eat_keyword('turun-ke')
        else:
            self.error('ke` or `turun-ke')

        final_value = self.expression()
        do_keyword = self.eat_keyword('lakukan')
        body = self.statement()
        return ForStatement(for_keyword, control_variable, assign_operator, initial_value,
                            direction_keyword, final_value, do_keyword, body)

    # expressions

    def expression(self):
        """parse expression

        expression : simple_expression (RELOP simple_expression)?
        """
        left = self.simple_expression()
        if self.check(TokenType.RELATIONAL_OPERATOR):
            op = self.eat(TokenType.RELATIONAL_OPERATOR)
            return Expression(left, op, self.simple_expression())
        return Expression(left)

    def _is_additive(self, token):
        if token.type == TokenType.ARITHMETIC_OPERATOR:
            return token.value in ADDITIVE_SYMBOLS
        return token.is_word(TokenType.LOGICAL_OPERATOR, 'atau')

    def _is_multiplicative(self, token):
        if token.type == TokenType.ARITHMETIC_OPERATOR:
            return token.lower() in MULTIPLICATIVE_SYMBOLS
        return token.is_word(TokenType.LOGICAL_OPERATOR, 'dan')

    def simple_expression(self):
        """parse simple_expression

        simple_expression : (PLUS | MINUS)? term ((PLUS | MINUS | ATAU) term)*
        """
        sign = None
        token = self.current_token
        if token.type == TokenType.ARITHMETIC_OPERATOR and token.value in ADDITIVE_SYMBOLS:
            sign = self.eat(TokenType.ARITHMETIC_OPERATOR)

        terms = [self.term()]
        operators = []
        while self._is_additive(self.current_token):
            operators.append(self.eat(self.current_token.type))
            terms.append(self.term())

        return SimpleExpression(sign, terms, operators)

    def term(self):
        """parse term

        term : factor ((MUL | FLOAT_DIV | BAGI | MOD | DAN) factor)*
        """
        factors = [self.factor()]
        operators = []
        while self._is_multiplicative(self.current_token):
            operators.append(self.eat(self.current_token.type))
            factors.append(self.factor())
        return Term(factors, operators)

    def factor(self):
        """parse factor

        factor : TIDAK factor
               | LPAREN expression RPAREN
               | NUMBER | STRING_LITERAL | CHAR_LITERAL
               | ID LPAREN argument_list? RPAREN
               | variable
        """
        token = self.current_token
        if token.is_word(TokenType.LOGICAL_OPERATOR, 'tidak'):
            not_operator = self.eat(TokenType.LOGICAL_OPERATOR)
            return NotFactor(not_operator, self.factor())
        elif token.type == TokenType.LPARENTHESIS:
            lparen = self.eat(TokenType.LPARENTHESIS)
            expression = self.expression()
            rparen = self.eat(TokenType.RPARENTHESIS)
            return ParenFactor(lparen, expression, rparen)
        elif token.type in LITERAL_TYPES:
            return Literal(self.eat(token.type))
        elif token.type == TokenType.IDENTIFIER:
            if self.peek().type == TokenType.LPARENTHESIS:
                return self.function_call()
            return self.variable()
        self.error('factor')

    def function_call(self):
        identifier = self.eat(TokenType.IDENTIFIER)
        lparen, arguments, rparen = self._call_arguments()
        return FunctionCall(identifier, lparen, arguments, rparen)

    def variable(self):
        """variable : ID (LBRACKET expression RBRACKET)?
        """
        identifier = self.eat(TokenType.IDENTIFIER)
        if not self.check(TokenType.LBRACKET):
            return Variable(identifier)
        lbracket = self.eat(TokenType.LBRACKET)
        index = self.expression()
        rbracket = self.eat(TokenType.RBRACKET)
        return Variable(identifier, lbracket, index, rbracket)

    def parse(self):
        try:
            result = self.program()
        except RecursionError:
            self.error('expression', ErrorInfo.nested_too_deep())
        if self.current_token.type != TokenType.EOF:
            self.error(TokenType.EOF.value, ErrorInfo.trailing_token(self.current_token))
        return result
