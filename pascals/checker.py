"""
scope & type checking of declarations

walks the parse tree top-down, declaration part before statement part, and fills the
symbol table. the first violation raises SemanticError, table errors are re-raised as
SemanticError as well.

expression typing is partial: only literals get a type (`literal_type`).
"""

from . import settings
from .charclass import BOOLEAN_WORDS
from .errors import ErrorInfo, Position, SemanticError, SymbolTableError
from .lexer import TokenType
from .symtab import BaseType, ObjectKind
from .visitor import NodeVisitor

BASE_TYPES = {
    'integer': BaseType.INTS,
    'real':    BaseType.REALS,
    'boolean': BaseType.BOOLS,
    'char':    BaseType.CHARS,
}

TRUE_WORDS = frozenset({'true', 'benar'})

ORDINAL_TYPES = (BaseType.INTS, BaseType.CHARS, BaseType.BOOLS)

VALUE_KINDS = (ObjectKind.CONSTANT, ObjectKind.VARIABLE, ObjectKind.FUNCTION)


def literal_type(token):
    """base type of a literal, from its lexical form"""
    if token.type == TokenType.NUMBER:
        return BaseType.REALS if '.' in token.value else BaseType.INTS
    if token.type == TokenType.CHAR_LITERAL:
        return BaseType.CHARS
    if token.type == TokenType.IDENTIFIER and token.lower() in BOOLEAN_WORDS:
        return BaseType.BOOLS
    return BaseType.NOTYPE


def char_value(token):
    """the character of a CHAR_LITERAL like 'a' or ''''"""
    return token.value[1:-1].replace("''", "'")


def _pascal_div(a, b):
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


class ConstantEvaluator(NodeVisitor):
    """value of a constant expression, as (BaseType, int)

    only integer arithmetic (+ - * bagi mod), char literals, booleans and
    names of ordinal constants are constant.
    """

    def __init__(self, symbol_table):
        self.symbol_table = symbol_table

    def error(self, node, message):
        token = next(node.tokens())
        raise SemanticError(token.position, message)

    def not_constant(self, node):
        text = ' '.join(token.value for token in node.tokens())
        self.error(node, ErrorInfo.bound_not_constant(text))

    def integer(self, node):
        base_type, value = self.visit(node)
        if base_type != BaseType.INTS:
            self.not_constant(node)
        return value

    def generic_visit(self, node):
        self.not_constant(node)

    def visit_Expression(self, node):
        if node.is_relational:
            self.not_constant(node)
        return self.visit(node.left)

    def visit_SimpleExpression(self, node):
        if node.sign is None and not node.operators:
            return self.visit(node.terms[0])

        value = self.integer(node.terms[0])
        if node.sign is not None and node.sign.value == '-':
            value = -value
        for op, term in zip(node.operators, node.terms[1:]):
            if op.value == '+':
                value += self.integer(term)
            elif op.value == '-':
                value -= self.integer(term)
            else:
                self.not_constant(node)
        return BaseType.INTS, value

    def visit_Term(self, node):
        if not node.operators:
            return self.visit(node.factors[0])

        value = self.integer(node.factors[0])
        for op, factor in zip(node.operators, node.factors[1:]):
            word = op.lower()
            if word == '*':
                value *= self.integer(factor)
                continue
            if word not in ('bagi', 'mod'):
                self.not_constant(node)
            divisor = self.integer(factor)
            if divisor == 0:
                self.error(factor, ErrorInfo.division_by_zero())
            quotient = _pascal_div(value, divisor)
            value = quotient if word == 'bagi' else value - divisor * quotient
        return BaseType.INTS, value

    def visit_ParenFactor(self, node):
        return self.visit(node.expression)

    def visit_Literal(self, node):
        token = node.token
        base_type = literal_type(token)
        if base_type == BaseType.INTS:
            return base_type, int(token.value)
        if base_type == BaseType.CHARS:
            return base_type, ord(char_value(token))
        if base_type == BaseType.REALS:
            self.error(node, ErrorInfo.bound_not_ordinal(token.value))
        self.not_constant(node)

    def visit_Variable(self, node):
        if node.index is not None:
            self.not_constant(node)

        index = self.symbol_table.lookup(node.name)
        if index == 0:
            if node.name.lower() in BOOLEAN_WORDS:
                return BaseType.BOOLS, int(node.name.lower() in TRUE_WORDS)
            self.error(node, ErrorInfo.id_not_defined(node.name))

        entry = self.symbol_table.get_tab(index)
        if entry.kind != ObjectKind.CONSTANT:
            self.error(node, ErrorInfo.bound_not_constant(node.name))
        if entry.type not in ORDINAL_TYPES:
            self.error(node, ErrorInfo.bound_not_ordinal(node.name))
        return entry.type, entry.address


class ScopeTypeChecker(NodeVisitor):
    def __init__(self, symbol_table):
        """ScopeTypeChecker

        Args:
          symbol_table: SymbolTable, freshly constructed
        """
        self.symbol_table = symbol_table
        self.evaluator = ConstantEvaluator(symbol_table)
        self.last_token = None

    def log(self, msg):
        if settings.SHOULD_LOG_SCOPE:
            print(msg)

    def error(self, token, message):
        raise SemanticError(token.position, message)

    def position(self):
        if self.last_token is None:
            return Position(1, 1)
        return self.last_token.position

    def check(self, tree):
        """check a Program, leaving the symbol table populated"""
        try:
            self.visit(tree)
        except SymbolTableError as e:
            raise SemanticError(self.position(), ErrorInfo.table_error(e)) from e
        except RecursionError:
            raise SemanticError(self.position(), ErrorInfo.nested_too_deep()) from None

    # symbol table helpers

    def check_unique(self, token):
        self.last_token = token
        if self.symbol_table.lookup_current_scope(token.value) != 0:
            self.error(token, ErrorInfo.id_duplicate_defined(token.value))

    def declare(self, token, kind, base_type, ref=0, normal=True, address=0):
        self.last_token = token
        try:
            return self.symbol_table.insert(token.value, kind, base_type, ref, normal, address)
        except SymbolTableError as e:
            raise SemanticError(token.position, ErrorInfo.table_error(e)) from e

    def declare_variable(self, token, base_type, ref, size, normal=True):
        """insert a variable at the end of the current block's storage"""
        table = self.symbol_table
        block = table.current_block
        address = table.get_btab(block).vsize
        index = self.declare(token, ObjectKind.VARIABLE, base_type, ref, normal, address)
        table.set_block_vars(block, address + size)
        return index

    def resolve(self, token):
        """(index, entry) of a visible identifier"""
        self.last_token = token
        index = self.symbol_table.lookup(token.value)
        if index == 0:
            self.error(token, ErrorInfo.id_not_defined(token.value))
        return index, self.symbol_table.get_tab(index)

    def type_size(self, base_type, ref):
        if base_type == BaseType.ARRAYS:
            return self.symbol_table.get_atab(ref).size
        return 1

    def resolve_type(self, node):
        """(BaseType, ref) of a type node"""
        return self.visit(node)

    def in_function(self, entry):
        """True inside the body of the function `entry`"""
        table = self.symbol_table
        return entry.kind == ObjectKind.FUNCTION and entry.ref in table.display[1:table.level + 1]

    # program & declarations

    def visit_Program(self, node):
        self.log(f'[Semantic] Visiting Program: {node.name}')
        self.declare(node.identifier, ObjectKind.PROCEDURE, BaseType.NOTYPE,
                     ref=self.symbol_table.current_block)
        self.visit(node.block)
        self.log(f"[Semantic] Program '{node.name}' checked successfully")

    def visit_Block(self, node):
        self.visit(node.declaration_part)
        self.visit(node.compound_statement)

    def visit_DeclarationPart(self, node):
        for section in node.const_sections:
            self.visit(section)
        for section in node.type_sections:
            self.visit(section)
        for section in node.var_sections:
            self.visit(section)
        for subprogram in node.subprograms:
            self.visit(subprogram)

    def visit_ConstSection(self, node):
        for declaration in node.declarations:
            self.visit(declaration)

    def visit_ConstDeclaration(self, node):
        self.check_unique(node.identifier)
        base_type, value = self.constant_value(node)
        self.log(f'[Semantic] Declaring constant {node.name} = {node.value.value}')
        self.declare(node.identifier, ObjectKind.CONSTANT, base_type, address=value)

    def constant_value(self, node):
        """(BaseType, stored value) of a constant declaration

        integer, char (ordinal) and boolean constants keep their value, others keep 0.
        """
        token = node.value
        if token.type == TokenType.IDENTIFIER:
            if token.lower() in BOOLEAN_WORDS:
                return BaseType.BOOLS, int(token.lower() in TRUE_WORDS)
            _, entry = self.resolve(token)
            if entry.kind != ObjectKind.CONSTANT:
                self.error(token, ErrorInfo.id_not_constant(token.value))
            return entry.type, entry.address

        base_type = literal_type(token)
        if base_type == BaseType.INTS:
            value = int(token.value)
            if node.sign is not None and node.sign.value == '-':
                value = -value
            return base_type, value
        if base_type == BaseType.CHARS:
            return base_type, ord(char_value(token))
        return base_type, 0

    def visit_TypeSection(self, node):
        for declaration in node.declarations:
            self.visit(declaration)

    def visit_TypeDeclaration(self, node):
        self.check_unique(node.identifier)
        base_type, ref = self.resolve_type(node.type_node)
        self.log(f'[Semantic] Declaring type {node.name}')
        self.declare(node.identifier, ObjectKind.TYPE, base_type, ref)

    def visit_VarSection(self, node):
        for declaration in node.declarations:
            self.visit(declaration)

    def visit_VarDeclaration(self, node):
        base_type, ref = self.resolve_type(node.type_node)
        size = self.type_size(base_type, ref)
        self.log(f'[Semantic] Declaring variables: {", ".join(node.identifier_list.names)}')
        for identifier in node.identifier_list.identifiers:
            self.check_unique(identifier)
            self.declare_variable(identifier, base_type, ref, size)

    # types

    def visit_SimpleType(self, node):
        return BASE_TYPES[node.name], 0

    def visit_NamedType(self, node):
        _, entry = self.resolve(node.identifier)
        if entry.kind != ObjectKind.TYPE:
            self.error(node.identifier, ErrorInfo.id_not_type(node.name))
        return entry.type, entry.ref

    def visit_ArrayType(self, node):
        index_type, low, high = self.evaluate_range(node.range_node)
        element_type, element_ref = self.resolve_type(node.element_type)
        element_size = self.type_size(element_type, element_ref)
        ref = self.symbol_table.enter_array(index_type, element_type, element_ref, low, high, element_size)
        return BaseType.ARRAYS, ref

    def visit_Range(self, node):
        base_type, _, _ = self.evaluate_range(node)
        return base_type, 0

    def evaluate_range(self, node):
        low_type, low = self.evaluator.visit(node.low)
        high_type, high = self.evaluator.visit(node.high)
        if low_type != high_type:
            self.error(node.range_operator, ErrorInfo.bound_type_mismatch())
        if low > high:
            self.error(node.range_operator, ErrorInfo.bound_empty_range(low, high))
        return low_type, low, high

    # subprograms

    def visit_ProcedureDeclaration(self, node):
        self.subprogram(node, ObjectKind.PROCEDURE, BaseType.NOTYPE)

    def visit_FunctionDeclaration(self, node):
        return_type, _ = self.resolve_type(node.return_type)
        self.subprogram(node, ObjectKind.FUNCTION, return_type)

    def subprogram(self, node, kind, base_type):
        """register a procedure/function, then check its block one level deeper
        """
        table = self.symbol_table
        self.check_unique(node.identifier)

        block = table.enter_block()
        index = self.declare(node.identifier, kind, base_type, ref=block)
        self.log(f"[Semantic] Declaring {kind.value} {node.name} (idx: {index}, block: {block})")

        self.log(f'enter scope: {node.name}')
        table.push_scope(block)

        lastpar = 0
        for group in node.parameter_groups:
            param_type, param_ref = self.resolve_type(group.type_node)
            size = 1 if group.by_reference else self.type_size(param_type, param_ref)
            for identifier in group.identifier_list.identifiers:
                self.check_unique(identifier)
                lastpar = self.declare_variable(identifier, param_type, param_ref, size,
                                                normal=not group.by_reference)
        table.set_block_params(block, lastpar, table.get_btab(block).vsize)

        self.visit(node.block)

        table.pop_scope()
        self.log(f'leave scope: {node.name}')

    # statements

    def visit_CompoundStatement(self, node):
        self.visit(node.statement_list)

    def visit_StatementList(self, node):
        for statement in node.statements:
            self.visit(statement)

    def visit_EmptyStatement(self, node):
        pass

    def visit_Assignment(self, node):
        """the target must be a variable, or the name of the function being defined
        """
        target = node.target
        _, entry = self.resolve(target.identifier)
        if entry.kind != ObjectKind.VARIABLE and not self.in_function(entry):
            self.error(target.identifier, ErrorInfo.id_not_assignable(target.name))
        self.check_index(target, entry)
        self.visit(node.expression)

    def call(self, node):
        _, entry = self.resolve(node.identifier)
        if entry.kind not in (ObjectKind.PROCEDURE, ObjectKind.FUNCTION):
            self.error(node.identifier, ErrorInfo.id_not_callable(node.name))

        arguments = node.argument_expressions
        # standard procedures own no block and take any number of arguments
        if entry.ref != 0:
            want = len(self.symbol_table.parameters(entry.ref))
            if want != len(arguments):
                self.error(node.identifier, ErrorInfo.wrong_arguments_num(node.name, want, len(arguments)))

        for argument in arguments:
            self.visit(argument)
        return entry

    def visit_ProcedureCall(self, node):
        self.call(node)

    def visit_IfStatement(self, node):
        self.visit(node.condition)
        self.visit(node.then_statement)
        if node.else_statement is not None:
            self.visit(node.else_statement)

    def visit_WhileStatement(self, node):
        self.visit(node.condition)
        self.visit(node.body)

    def visit_ForStatement(self, node):
        _, entry = self.resolve(node.control_variable)
        if entry.kind != ObjectKind.VARIABLE:
            self.error(node.control_variable, ErrorInfo.id_not_variable(node.control_variable.value))
        self.visit(node.initial_value)
        self.visit(node.final_value)
        self.visit(node.body)

    # expressions

    def visit_Expression(self, node):
        self.visit(node.left)
        if node.right is not None:
            self.visit(node.right)

    def visit_SimpleExpression(self, node):
        for term in node.terms:
            self.visit(term)

    def visit_Term(self, node):
        for factor in node.factors:
            self.visit(factor)

    def visit_NotFactor(self, node):
        self.visit(node.factor)

    def visit_ParenFactor(self, node):
        self.visit(node.expression)

    def visit_Literal(self, node):
        pass

    def visit_FunctionCall(self, node):
        entry = self.call(node)
        if entry.kind != ObjectKind.FUNCTION:
            self.error(node.identifier, ErrorInfo.id_not_function(node.name))

    def visit_Variable(self, node):
        """check var has defined, boolean words are literals
        """
        self.last_token = node.identifier
        index = self.symbol_table.lookup(node.name)
        if index == 0 and node.index is None and node.name.lower() in BOOLEAN_WORDS:
            return
        _, entry = self.resolve(node.identifier)
        if entry.kind not in VALUE_KINDS:
            self.error(node.identifier, ErrorInfo.id_not_value(node.name))
        self.check_index(node, entry)

    def check_index(self, variable, entry):
        if variable.index is None:
            return
        if entry.type != BaseType.ARRAYS:
            self.error(variable.identifier, ErrorInfo.id_not_array(variable.name))
        self.visit(variable.index)
