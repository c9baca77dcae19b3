import pytest

from npl.ast import (
    Assign, BinaryOp, Block, Call, DeleteStmt, EmptyStmt, ForStmt, FuncDecl,
    Identifier, IfStmt, Index, NullLiteral, NumberLiteral, ReturnStmt,
    StringLiteral, UnaryOp, VarDecl, WhileStmt, BooleanLiteral, ArrayLiteral,
)
from npl.errors import ParseError
from npl.parser import parse, parse_program
from npl.lexer import tokenize


def first(source):
    return parse_program(source).body[0]


def test_precedence_of_arithmetic():
    assert first('var x = 1 + 2 * 3;') == VarDecl(
        'x', BinaryOp('+', NumberLiteral('1'), BinaryOp('*', NumberLiteral('2'), NumberLiteral('3'))),
    )


def test_comparison_binds_looser_than_arithmetic_and_tighter_than_logic():
    node = first('a + 1 > 2 && b;')
    assert node == BinaryOp(
        '&&',
        BinaryOp('>', BinaryOp('+', Identifier('a'), NumberLiteral('1')), NumberLiteral('2')),
        Identifier('b'),
    )


def test_parentheses_override_precedence():
    assert first('(1 + 2) * 3;') == BinaryOp(
        '*', BinaryOp('+', NumberLiteral('1'), NumberLiteral('2')), NumberLiteral('3'),
    )


def test_declarations():
    program = parse_program('var a; const b = "x";')
    assert program.body == [VarDecl('a', None), VarDecl('b', StringLiteral('x'), True)]


def test_const_requires_initializer():
    with pytest.raises(ParseError, match='must be initialized'):
        parse_program('const x;')


def test_assignment_is_right_associative():
    assert first('a = b = 1;') == Assign('a', Assign('b', NumberLiteral('1')))


def test_compound_assignment_is_desugared():
    assert first('x -= 2;') == Assign('x', BinaryOp('-', Identifier('x'), NumberLiteral('2')))


def test_invalid_assignment_target():
    with pytest.raises(ParseError, match='invalid assignment target'):
        parse_program('1 = 2;')


def test_update_operators_need_a_variable():
    assert first('i++;') == UnaryOp('++', Identifier('i'))
    assert first('--i;') == UnaryOp('--', Identifier('i'))
    with pytest.raises(ParseError):
        parse_program('5++;')


def test_literals():
    program = parse_program('true; false; null; [1, "a"];')
    assert program.body == [
        BooleanLiteral(True), BooleanLiteral(False), NullLiteral(),
        ArrayLiteral([NumberLiteral('1'), StringLiteral('a')]),
    ]


def test_chained_index_and_call():
    assert first('a[0][1];') == Index(Index(Identifier('a'), NumberLiteral('0')), NumberLiteral('1'))
    assert first('f(1, x)[2];') == Index(Call('f', [NumberLiteral('1'), Identifier('x')]), NumberLiteral('2'))


def test_if_else():
    assert first('if (x) { 1; } else { 2; }') == IfStmt(
        Identifier('x'), Block([NumberLiteral('1')]), Block([NumberLiteral('2')]),
    )


def test_while_and_for():
    assert first('while (x) { }') == WhileStmt(Identifier('x'), Block([]))
    node = first('for (var i = 0; i < 3; i++) { print(i); }')
    assert isinstance(node, ForStmt)
    assert node.init == VarDecl('i', NumberLiteral('0'))
    assert node.update == UnaryOp('++', Identifier('i'))
    assert node.body == Block([Call('print', [Identifier('i')])])


def test_function_declaration_and_return():
    assert first('function add(a, b) { return a + b; }') == FuncDecl(
        'add', ['a', 'b'], Block([ReturnStmt(BinaryOp('+', Identifier('a'), Identifier('b')))]),
    )
    assert first('function f() { return; }').body == Block([ReturnStmt(None)])


def test_delete_and_empty_statement():
    assert parse_program('delete x;;').body == [DeleteStmt('x'), EmptyStmt()]


def test_semicolon_optional_before_brace_or_end():
    assert parse_program('1 + 2').body == [BinaryOp('+', NumberLiteral('1'), NumberLiteral('2'))]
    assert first('{ x = 1 }') == Block([Assign('x', NumberLiteral('1'))])


@pytest.mark.parametrize('source', [
    'print(1) print(2)',
    'var x = 1',
    '{ 1;',
    'var if = 1;',
    'if x { }',
    'for (var i = 0; i < 3) { }',
    '(1 + 2;',
])
def test_syntax_errors(source):
    with pytest.raises(ParseError):
        parse_program(source)


def test_error_reports_line():
    with pytest.raises(ParseError) as err:
        parse_program('var a = 1;\nvar b = ;')
    assert err.value.line == 2


def test_parse_accepts_token_list():
    assert parse(tokenize('x;')).body == [Identifier('x')]
