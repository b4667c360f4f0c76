"""
concrete parse tree of Pascal-S

one class per grammar variant. every node keeps the terminal tokens it consumed,
`children()` gives nodes and tokens in source order, so the tree can always be
printed back token by token.
"""

from .lexer import Token


def _interleave(items, separators):
    """a0 s0 a1 s1 a2 ..."""
    result = []
    for i, item in enumerate(items):
        result.append(item)
        if i < len(separators):
            result.append(separators[i])
    return result


class ParseTreeNode:
    rule = 'node'

    def children(self):
        return []

    def tokens(self):
        """terminal tokens of the subtree, in source order"""
        for child in self.children():
            if isinstance(child, Token):
                yield child
            else:
                yield from child.tokens()

    def __str__(self):
        return f'<{self.rule}>'

    def __repr__(self):
        return f'<{self.__class__.__name__}>'


def _present(*items):
    return [item for item in items if item is not None]


###############################################################################
#                                                                             #
#  PROGRAM & DECLARATIONS                                                     #
#                                                                             #
###############################################################################

class Program(ParseTreeNode):
    """program : PROGRAM ID SEMI block DOT
    """
    rule = 'program'

    def __init__(self, program_keyword, identifier, semicolon, block, dot):
        self.program_keyword = program_keyword
        self.identifier = identifier
        self.semicolon = semicolon
        self.block = block
        self.dot = dot

    @property
    def name(self):
        return self.identifier.value

    def children(self):
        return [self.program_keyword, self.identifier, self.semicolon, self.block, self.dot]


class Block(ParseTreeNode):
    """block : declaration_part compound_statement
    """
    rule = 'block'

    def __init__(self, declaration_part, compound_statement):
        self.declaration_part = declaration_part
        self.compound_statement = compound_statement

    def children(self):
        return [self.declaration_part, self.compound_statement]


class DeclarationPart(ParseTreeNode):
    """declaration_part : const_section* type_section* var_section* subprogram*
    """
    rule = 'declaration-part'

    def __init__(self, const_sections, type_sections, var_sections, subprograms):
        self.const_sections = const_sections
        self.type_sections = type_sections
        self.var_sections = var_sections
        self.subprograms = subprograms

    def children(self):
        return [*self.const_sections, *self.type_sections, *self.var_sections, *self.subprograms]


class ConstSection(ParseTreeNode):
    rule = 'const-section'

    def __init__(self, keyword, declarations):
        self.keyword = keyword
        self.declarations = declarations

    def children(self):
        return [self.keyword, *self.declarations]


class ConstDeclaration(ParseTreeNode):
    """ID EQ (PLUS|MINUS)? constant SEMI
    """
    rule = 'const-declaration'

    def __init__(self, identifier, equal, sign, value, semicolon):
        self.identifier = identifier
        self.equal = equal
        self.sign = sign
        self.value = value
        self.semicolon = semicolon

    @property
    def name(self):
        return self.identifier.value

    def children(self):
        return _present(self.identifier, self.equal, self.sign, self.value, self.semicolon)


class TypeSection(ParseTreeNode):
    rule = 'type-section'

    def __init__(self, keyword, declarations):
        self.keyword = keyword
        self.declarations = declarations

    def children(self):
        return [self.keyword, *self.declarations]


class TypeDeclaration(ParseTreeNode):
    """ID EQ type SEMI
    """
    rule = 'type-declaration'

    def __init__(self, identifier, equal, type_node, semicolon):
        self.identifier = identifier
        self.equal = equal
        self.type_node = type_node
        self.semicolon = semicolon

    @property
    def name(self):
        return self.identifier.value

    def children(self):
        return [self.identifier, self.equal, self.type_node, self.semicolon]


class VarSection(ParseTreeNode):
    rule = 'var-section'

    def __init__(self, keyword, declarations):
        self.keyword = keyword
        self.declarations = declarations

    def children(self):
        return [self.keyword, *self.declarations]


class VarDeclaration(ParseTreeNode):
    """identifier_list COLON type SEMI
    """
    rule = 'var-declaration'

    def __init__(self, identifier_list, colon, type_node, semicolon):
        self.identifier_list = identifier_list
        self.colon = colon
        self.type_node = type_node
        self.semicolon = semicolon

    def children(self):
        return [self.identifier_list, self.colon, self.type_node, self.semicolon]


class IdentifierList(ParseTreeNode):
    """identifier_list : ID (COMMA ID)*
    """
    rule = 'identifier-list'

    def __init__(self, identifiers, commas):
        self.identifiers = identifiers
        self.commas = commas

    @property
    def names(self):
        return [token.value for token in self.identifiers]

    def children(self):
        return _interleave(self.identifiers, self.commas)


# types

class SimpleType(ParseTreeNode):
    """INTEGER | REAL | BOOLEAN | CHAR
    """
    rule = 'type'

    def __init__(self, keyword):
        self.keyword = keyword

    @property
    def name(self):
        return self.keyword.value.lower()

    def children(self):
        return [self.keyword]


class NamedType(ParseTreeNode):
    """a previously declared type name
    """
    rule = 'named-type'

    def __init__(self, identifier):
        self.identifier = identifier

    @property
    def name(self):
        return self.identifier.value

    def children(self):
        return [self.identifier]


class ArrayType(ParseTreeNode):
    """array_type : LARIK LBRACKET range RBRACKET DARI type
    """
    rule = 'array-type'

    def __init__(self, array_keyword, lbracket, range_node, rbracket, of_keyword, element_type):
        self.array_keyword = array_keyword
        self.lbracket = lbracket
        self.range_node = range_node
        self.rbracket = rbracket
        self.of_keyword = of_keyword
        self.element_type = element_type

    def children(self):
        return [self.array_keyword, self.lbracket, self.range_node, self.rbracket,
                self.of_keyword, self.element_type]


class Range(ParseTreeNode):
    """range : simple_expression RANGE simple_expression
    """
    rule = 'range'

    def __init__(self, low, range_operator, high):
        self.low = low
        self.range_operator = range_operator
        self.high = high

    def children(self):
        return [self.low, self.range_operator, self.high]


# subprograms

class ProcedureDeclaration(ParseTreeNode):
    """procedure_decl : PROSEDUR ID formal_parameters? SEMI block SEMI
    """
    rule = 'procedure-declaration'

    def __init__(self, keyword, identifier, parameters, semicolon, block, end_semicolon):
        """ProcedureDeclaration

        Args:
          parameters: FormalParameterList or None
          block: Block
        """
        self.keyword = keyword
        self.identifier = identifier
        self.parameters = parameters
        self.semicolon = semicolon
        self.block = block
        self.end_semicolon = end_semicolon

    @property
    def name(self):
        return self.identifier.value

    @property
    def parameter_groups(self):
        return self.parameters.groups if self.parameters is not None else []

    def children(self):
        return _present(self.keyword, self.identifier, self.parameters, self.semicolon,
                        self.block, self.end_semicolon)


class FunctionDeclaration(ParseTreeNode):
    """function_decl : FUNGSI ID formal_parameters? COLON type SEMI block SEMI
    """
    rule = 'function-declaration'

    def __init__(self, keyword, identifier, parameters, colon, return_type, semicolon, block, end_semicolon):
        """FunctionDeclaration

        Args:
          parameters: FormalParameterList or None
          return_type: type node
          block: Block
        """
        self.keyword = keyword
        self.identifier = identifier
        self.parameters = parameters
        self.colon = colon
        self.return_type = return_type
        self.semicolon = semicolon
        self.block = block
        self.end_semicolon = end_semicolon

    @property
    def name(self):
        return self.identifier.value

    @property
    def parameter_groups(self):
        return self.parameters.groups if self.parameters is not None else []

    def children(self):
        return _present(self.keyword, self.identifier, self.parameters, self.colon, self.return_type,
                        self.semicolon, self.block, self.end_semicolon)


class FormalParameterList(ParseTreeNode):
    """formal_parameters : LPAREN parameter_group (SEMI parameter_group)* RPAREN
    """
    rule = 'formal-parameter-list'

    def __init__(self, lparen, groups, semicolons, rparen):
        self.lparen = lparen
        self.groups = groups
        self.semicolons = semicolons
        self.rparen = rparen

    def children(self):
        return [self.lparen, *_interleave(self.groups, self.semicolons), self.rparen]


class ParameterGroup(ParseTreeNode):
    """parameter_group : VARIABEL? identifier_list COLON type
    """
    rule = 'parameter-group'

    def __init__(self, var_keyword, identifier_list, colon, type_node):
        self.var_keyword = var_keyword
        self.identifier_list = identifier_list
        self.colon = colon
        self.type_node = type_node

    @property
    def by_reference(self):
        return self.var_keyword is not None

    def children(self):
        return _present(self.var_keyword, self.identifier_list, self.colon, self.type_node)


###############################################################################
#                                                                             #
#  STATEMENTS                                                                 #
#                                                                             #
###############################################################################

class CompoundStatement(ParseTreeNode):
    """compound_statement : MULAI statement_list SELESAI
    """
    rule = 'compound-statement'

    def __init__(self, begin_keyword, statement_list, end_keyword):
        self.begin_keyword = begin_keyword
        self.statement_list = statement_list
        self.end_keyword = end_keyword

    @property
    def statements(self):
        return self.statement_list.statements

    def children(self):
        return [self.begin_keyword, self.statement_list, self.end_keyword]


class StatementList(ParseTreeNode):
    """statement_list : statement (SEMI statement)*

    stray semicolons are kept as EmptyStatement nodes.
    """
    rule = 'statement-list'

    def __init__(self, statements, semicolons):
        self.statements = statements
        self.semicolons = semicolons

    def children(self):
        return _interleave(self.statements, self.semicolons)


class EmptyStatement(ParseTreeNode):
    rule = 'empty-statement'


class Assignment(ParseTreeNode):
    """assignment : variable ASSIGN expression
    """
    rule = 'assignment-statement'

    def __init__(self, target, assign_operator, expression):
        self.target = target
        self.assign_operator = assign_operator
        self.expression = expression

    def children(self):
        return [self.target, self.assign_operator, self.expression]


class _Call(ParseTreeNode):
    def __init__(self, identifier, lparen=None, arguments=None, rparen=None):
        """call

        Args:
          identifier: Token
          arguments: ArgumentList or None
        """
        self.identifier = identifier
        self.lparen = lparen
        self.arguments = arguments
        self.rparen = rparen

    @property
    def name(self):
        return self.identifier.value

    @property
    def argument_expressions(self):
        return self.arguments.expressions if self.arguments is not None else []

    def children(self):
        return _present(self.identifier, self.lparen, self.arguments, self.rparen)


class ProcedureCall(_Call):
    """procedure_call : ID (LPAREN argument_list? RPAREN)?
    """
    rule = 'procedure-call'


class IfStatement(ParseTreeNode):
    """if_statement : JIKA expression MAKA statement (SELAIN-ITU statement)?
    """
    rule = 'if-statement'

    def __init__(self, if_keyword, condition, then_keyword, then_statement,
                 else_keyword=None, else_statement=None):
        self.if_keyword = if_keyword
        self.condition = condition
        self.then_keyword = then_keyword
        self.then_statement = then_statement
        self.else_keyword = else_keyword
        self.else_statement = else_statement

    def children(self):
        return _present(self.if_keyword, self.condition, self.then_keyword, self.then_statement,
                        self.else_keyword, self.else_statement)


class WhileStatement(ParseTreeNode):
    """while_statement : SELAMA expression LAKUKAN statement
    """
    rule = 'while-statement'

    def __init__(self, while_keyword, condition, do_keyword, body):
        self.while_keyword = while_keyword
        self.condition = condition
        self.do_keyword = do_keyword
        self.body = body

    def children(self):
        return [self.while_keyword, self.condition, self.do_keyword, self.body]


class ForStatement(ParseTreeNode):
    """for_statement : UNTUK ID ASSIGN expression (KE | TURUN-KE) expression LAKUKAN statement
    """
    rule = 'for-statement'

    def __init__(self, for_keyword, control_variable, assign_operator, initial_value,
                 direction_keyword, final_value, do_keyword, body):
        self.for_keyword = for_keyword
        self.control_variable = control_variable
        self.assign_operator = assign_operator
        self.initial_value = initial_value
        self.direction_keyword = direction_keyword
        self.final_value = final_value
        self.do_keyword = do_keyword
        self.body = body

    @property
    def downto(self):
        return self.direction_keyword.lower() == 'turun-ke'

    def children(self):
        return [self.for_keyword, self.control_variable, self.assign_operator, self.initial_value,
                self.direction_keyword, self.final_value, self.do_keyword, self.body]


###############################################################################
#                                                                             #
#  EXPRESSIONS                                                                #
#                                                                             #
###############################################################################

class Expression(ParseTreeNode):
    """expression : simple_expression (RELOP simple_expression)?
    """
    rule = 'expression'

    def __init__(self, left, relational_operator=None, right=None):
        self.left = left
        self.relational_operator = relational_operator
        self.right = right

    @property
    def is_relational(self):
        return self.relational_operator is not None

    def children(self):
        return _present(self.left, self.relational_operator, self.right)


class SimpleExpression(ParseTreeNode):
    """simple_expression : (PLUS|MINUS)? term ((PLUS|MINUS|ATAU) term)*
    """
    rule = 'simple-expression'

    def __init__(self, sign, terms, operators):
        self.sign = sign
        self.terms = terms
        self.operators = operators

    def children(self):
        return _present(self.sign) + _interleave(self.terms, self.operators)


class Term(ParseTreeNode):
    """term : factor ((MUL|DIV|BAGI|MOD|DAN) factor)*
    """
    rule = 'term'

    def __init__(self, factors, operators):
        self.factors = factors
        self.operators = operators

    def children(self):
        return _interleave(self.factors, self.operators)


class NotFactor(ParseTreeNode):
    """TIDAK factor
    """
    rule = 'not-factor'

    def __init__(self, not_operator, factor):
        self.not_operator = not_operator
        self.factor = factor

    def children(self):
        return [self.not_operator, self.factor]


class ParenFactor(ParseTreeNode):
    """LPAREN expression RPAREN
    """
    rule = 'paren-factor'

    def __init__(self, lparen, expression, rparen):
        self.lparen = lparen
        self.expression = expression
        self.rparen = rparen

    def children(self):
        return [self.lparen, self.expression, self.rparen]


class Literal(ParseTreeNode):
    """NUMBER | STRING_LITERAL | CHAR_LITERAL
    """
    rule = 'literal'

    def __init__(self, token):
        self.token = token

    @property
    def value(self):
        return self.token.value

    def children(self):
        return [self.token]


class Variable(ParseTreeNode):
    """variable : ID (LBRACKET expression RBRACKET)?
    """
    rule = 'variable'

    def __init__(self, identifier, lbracket=None, index=None, rbracket=None):
        self.identifier = identifier
        self.lbracket = lbracket
        self.index = index
        self.rbracket = rbracket

    @property
    def name(self):
        return self.identifier.value

    def children(self):
        return _present(self.identifier, self.lbracket, self.index, self.rbracket)


class FunctionCall(_Call):
    """ID LPAREN argument_list? RPAREN
    """
    rule = 'function-call'


class ArgumentList(ParseTreeNode):
    """argument_list : expression (COMMA expression)*
    """
    rule = 'parameter-list'

    def __init__(self, expressions, commas):
        self.expressions = expressions
        self.commas = commas

    def children(self):
        return _interleave(self.expressions, self.commas)
