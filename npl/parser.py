"""Recursive-descent parser for the NPL language.

Statements are recognised by the text of their leading identifier, since
the lexer has no keyword tokens. Expressions are parsed with one method per
precedence level, from lowest to highest:

    assignment -> logical (&& ||) -> comparison (== != > >= < <=)
    -> additive (+ -) -> multiplicative (* / % **) -> unary (! - ++ --)
    -> primary

The `parse` function is the public entry point. It returns a `Program` node
or raises ParseError for the first token that does not fit the grammar.
"""

from __future__ import annotations

from typing import List, Optional, Union

from .ast import (
    Program, NumberLiteral, StringLiteral, BooleanLiteral, NullLiteral,
    Identifier, VarDecl, Assign, UnaryOp, BinaryOp, Block, IfStmt,
    WhileStmt, ForStmt, FuncDecl, Call, ReturnStmt, DeleteStmt,
    ArrayLiteral, Index, EmptyStmt, Node,
)
from .errors import ParseError
from .lexer import Token, tokenize


KEYWORDS = {
    'var', 'const', 'if', 'else', 'while', 'for', 'function', 'return',
    'delete', 'true', 'false', 'null',
}

COMPOUND_ASSIGN = ['+=', '-=', '*=', '/=', '%=']


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def at_end(self) -> bool:
        return self.peek().type == 'EOF'

    def consume(self, expected: Union[str, List[str]]) -> Token:
        token = self.peek()
        if not self.match(expected):
            raise ParseError(f"expected {expected}, got {token.type} {token.value!r}", token.line)
        if not self.at_end():
            self.pos += 1
        return token

    def match(self, expected: Union[str, List[str]]) -> bool:
        token = self.peek()
        if isinstance(expected, list):
            return token.type in expected
        return token.type == expected

    def match_keyword(self, word: str) -> bool:
        token = self.peek()
        return token.type == 'IDENT' and token.value == word

    def consume_keyword(self, word: str) -> Token:
        if not self.match_keyword(word):
            token = self.peek()
            raise ParseError(f"expected '{word}', got {token.type} {token.value!r}", token.line)
        return self.consume('IDENT')

    def consume_name(self) -> str:
        token = self.consume('IDENT')
        if token.value in KEYWORDS:
            raise ParseError(f"unexpected keyword '{token.value}'", token.line)
        return token.value

    def parse_program(self) -> Program:
        statements: List[Node] = []
        while not self.at_end():
            statements.append(self.parse_statement())
        return Program(statements)

    def parse_statement(self) -> Node:
        token = self.peek()
        if token.type == 'IDENT':
            if token.value in ('var', 'const'):
                return self.parse_var_decl()
            if token.value == 'function':
                return self.parse_func_decl()
            if token.value == 'if':
                return self.parse_if_stmt()
            if token.value == 'while':
                return self.parse_while_stmt()
            if token.value == 'for':
                return self.parse_for_stmt()
            if token.value == 'return':
                return self.parse_return_stmt()
            if token.value == 'delete':
                return self.parse_delete_stmt()
        if token.type == '{':
            return self.parse_block()
        if token.type == ';':
            self.consume(';')
            return EmptyStmt()
        expr = self.parse_expression()
        self.end_of_expression_statement()
        return expr

    def end_of_expression_statement(self):
        # ';' may be omitted right before '}' or the end of input
        if self.match(';'):
            self.consume(';')
        elif not self.match('}') and not self.at_end():
            self.consume(';')

    def parse_var_decl(self) -> VarDecl:
        keyword = self.consume('IDENT')
        is_const = keyword.value == 'const'
        name = self.consume_name()
        value: Optional[Node] = None
        if self.match('='):
            self.consume('=')
            value = self.parse_expression()
        elif is_const:
            raise ParseError(f"const variable {name} must be initialized", keyword.line)
        self.consume(';')
        return VarDecl(name, value, is_const)

    def parse_func_decl(self) -> FuncDecl:
        self.consume_keyword('function')
        name = self.consume_name()
        self.consume('(')
        params: List[str] = []
        if not self.match(')'):
            params.append(self.consume_name())
            while self.match(','):
                self.consume(',')
                params.append(self.consume_name())
        self.consume(')')
        body = self.parse_block()
        return FuncDecl(name, params, body)

    def parse_block(self) -> Block:
        self.consume('{')
        statements: List[Node] = []
        while not self.match('}'):
            if self.at_end():
                raise ParseError("unterminated block, expected }", self.peek().line)
            statements.append(self.parse_statement())
        self.consume('}')
        return Block(statements)

    def parse_if_stmt(self) -> IfStmt:
        self.consume_keyword('if')
        self.consume('(')
        condition = self.parse_expression()
        self.consume(')')
        then_block = self.parse_block()
        else_block = None
        if self.match_keyword('else'):
            self.consume_keyword('else')
            else_block = self.parse_block()
        return IfStmt(condition, then_block, else_block)

    def parse_while_stmt(self) -> WhileStmt:
        self.consume_keyword('while')
        self.consume('(')
        condition = self.parse_expression()
        self.consume(')')
        body = self.parse_block()
        return WhileStmt(condition, body)

    def parse_for_stmt(self) -> ForStmt:
        self.consume_keyword('for')
        self.consume('(')
        # all three clauses are required
        init: Node
        if self.match_keyword('var') or self.match_keyword('const'):
            init = self.parse_var_decl()
        else:
            init = self.parse_expression()
            self.consume(';')
        condition = self.parse_expression()
        self.consume(';')
        update = self.parse_expression()
        self.consume(')')
        body = self.parse_block()
        return ForStmt(init, condition, update, body)

    def parse_return_stmt(self) -> ReturnStmt:
        self.consume_keyword('return')
        if self.match(';'):
            self.consume(';')
            return ReturnStmt(None)
        value = self.parse_expression()
        self.consume(';')
        return ReturnStmt(value)

    def parse_delete_stmt(self) -> DeleteStmt:
        self.consume_keyword('delete')
        name = self.consume_name()
        self.consume(';')
        return DeleteStmt(name)

    # Expression parsing
    def parse_expression(self) -> Node:
        return self.parse_assign()

    def parse_assign(self) -> Node:
        target = self.parse_logical()
        if self.match('=') or self.match(COMPOUND_ASSIGN):
            op_token = self.peek()
            if not isinstance(target, Identifier):
                raise ParseError("invalid assignment target", op_token.line)
            self.consume(op_token.type)
            value = self.parse_assign()
            if op_token.type != '=':
                # a += b  ->  a = a + b
                value = BinaryOp(op_token.type[0], Identifier(target.name), value)
            return Assign(target.name, value)
        return target

    def parse_logical(self) -> Node:
        node = self.parse_comparison()
        while self.match(['&&', '||']):
            op_token = self.consume(['&&', '||'])
            right = self.parse_comparison()
            node = BinaryOp(op_token.value, node, right)
        return node

    def parse_comparison(self) -> Node:
        node = self.parse_term()
        while self.match(['==', '!=', '>', '>=', '<', '<=']):
            op_token = self.consume(['==', '!=', '>', '>=', '<', '<='])
            right = self.parse_term()
            node = BinaryOp(op_token.value, node, right)
        return node

    def parse_term(self) -> Node:
        node = self.parse_factor()
        while self.match(['+', '-']):
            op_token = self.consume(['+', '-'])
            right = self.parse_factor()
            node = BinaryOp(op_token.value, node, right)
        return node

    def parse_factor(self) -> Node:
        node = self.parse_unary()
        while self.match(['*', '/', '%', '**']):
            op_token = self.consume(['*', '/', '%', '**'])
            right = self.parse_unary()
            node = BinaryOp(op_token.value, node, right)
        return node

    def parse_unary(self) -> Node:
        if self.match(['!', '-']):
            op_token = self.consume(['!', '-'])
            operand = self.parse_unary()
            return UnaryOp(op_token.value, operand)
        if self.match(['++', '--']):
            op_token = self.consume(['++', '--'])
            operand = self.parse_unary()
            return self.make_update(op_token, operand)
        node = self.parse_postfix()
        if self.match(['++', '--']):
            op_token = self.consume(['++', '--'])
            return self.make_update(op_token, node)
        return node

    def make_update(self, op_token: Token, operand: Node) -> UnaryOp:
        if not isinstance(operand, Identifier):
            raise ParseError(f"operand of {op_token.value} must be a variable", op_token.line)
        return UnaryOp(op_token.value, operand)

    def parse_postfix(self) -> Node:
        node = self.parse_primary()
        while self.match('['):
            self.consume('[')
            index = self.parse_expression()
            self.consume(']')
            node = Index(node, index)
        return node

    def parse_primary(self) -> Node:
        token = self.peek()
        if token.type == 'NUMBER':
            self.consume('NUMBER')
            return NumberLiteral(token.value)
        if token.type == 'STRING':
            self.consume('STRING')
            return StringLiteral(token.value)
        if token.type == 'IDENT':
            if token.value in ('true', 'false'):
                self.consume('IDENT')
                return BooleanLiteral(token.value == 'true')
            if token.value == 'null':
                self.consume('IDENT')
                return NullLiteral()
            name = self.consume_name()
            if self.match('('):
                return Call(name, self.parse_arguments())
            return Identifier(name)
        if token.type == '(':
            self.consume('(')
            expr = self.parse_expression()
            self.consume(')')
            return expr
        if token.type == '[':
            self.consume('[')
            elements: List[Node] = []
            if not self.match(']'):
                elements.append(self.parse_expression())
                while self.match(','):
                    self.consume(',')
                    elements.append(self.parse_expression())
            self.consume(']')
            return ArrayLiteral(elements)
        if token.type == 'EOF':
            raise ParseError("unexpected end of input", token.line)
        raise ParseError(f"unexpected token {token.type} {token.value!r}", token.line)

    def parse_arguments(self) -> List[Node]:
        self.consume('(')
        args: List[Node] = []
        if not self.match(')'):
            args.append(self.parse_expression())
            while self.match(','):
                self.consume(',')
                args.append(self.parse_expression())
        self.consume(')')
        return args


def parse(tokens: List[Token]) -> Program:
    """Parse a token list (as produced by `tokenize`) into a Program."""
    return Parser(tokens).parse_program()


def parse_program(source: str) -> Program:
    """Tokenize and parse NPL source code into a Program AST."""
    return parse(tokenize(source))
