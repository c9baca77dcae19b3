"""Tree-walking interpreter for the NPL language.

`Interpreter.interpret` evaluates a list of top-level nodes against a root
environment and returns one runtime value per node. Blocks, branches, loop
iterations and function calls run in child environments; scopes that were
not captured by a function are destroyed when they are left.

Binary operators dispatch on the kinds of *both* operands. Combinations that
have no meaning evaluate to null rather than raising, so programs may rely
on that.
"""

from __future__ import annotations

import math
import sys
from typing import Any, List, Optional

from .ast import (
    Program, NumberLiteral, StringLiteral, BooleanLiteral, NullLiteral,
    Identifier, VarDecl, Assign, UnaryOp, BinaryOp, Block, IfStmt,
    WhileStmt, ForStmt, FuncDecl, Call, ReturnStmt, DeleteStmt,
    ArrayLiteral, Index, EmptyStmt, Node,
)
from .builtin_function import NativeFunction
from .environment import Environment
from .errors import EvaluationError
from .parser import parse_program
from .std import BasicIO, populate_root_environment
from .types import (
    NumberVal, StringVal, BooleanVal, NullVal, ArrayVal, FunctionVal,
    is_falsy, to_int, to_number, to_string, type_name,
)


# each NPL call takes several Python frames
RECURSION_LIMIT = 20000


def allow_deep_recursion():
    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)


class Interpreter:
    """Core interpreter that executes NPL ASTs."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', io: Optional[BasicIO] = None):
        self.io = io if io is not None else BasicIO()
        self.global_env = Environment()
        populate_root_environment(self.global_env, self.io)
        self.debug_level = debug_level
        self.debug_fp = None
        if debug_level > 0:
            try:
                self.debug_fp = open(debug_file, 'w', encoding='utf-8')
            except OSError:
                self.debug_fp = None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, body: List[Node], env: Optional[Environment] = None, show_output: bool = False) -> List[Any]:
        """Evaluate top-level nodes in order, returning one value per node.

        With show_output every non-null result is echoed through the console
        channel, as an interactive session does. The first error aborts the
        call; values computed before it are lost.
        """
        if env is None:
            env = self.global_env
        results: List[Any] = []
        for node in body:
            value = self.evaluate(node, env)
            results.append(value)
            if show_output and not isinstance(value, NullVal):
                self.io.write_line(to_string(value))
        return results

    def run(self, program: Program, env: Optional[Environment] = None) -> List[Any]:
        return self.interpret(program.body, env)

    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, NumberLiteral):
            return NumberVal.of(float(node.value))
        if isinstance(node, StringLiteral):
            return StringVal(node.value)
        if isinstance(node, BooleanLiteral):
            return BooleanVal.of(node.value)
        if isinstance(node, NullLiteral):
            return NullVal()
        if isinstance(node, Identifier):
            return env.get(node.name)
        if isinstance(node, VarDecl):
            value = self.evaluate(node.value, env) if node.value is not None else NullVal()
            env.define(node.name, value, is_constant=node.is_const)
            if self.debug_level >= 2:
                kind = 'const' if node.is_const else 'var'
                self.debug(f"declare {kind} {node.name}: {type_name(value)} = {to_string(value)}")
            return value
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            return env.set(node.name, value)
        if isinstance(node, UnaryOp):
            return self.evaluate_unary(node, env)
        if isinstance(node, BinaryOp):
            return self.evaluate_binary(node, env)
        if isinstance(node, Block):
            self.execute_scoped(node.statements, env)
            return NullVal()
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition, env)
            truthy = self.is_condition_true(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                self.execute_scoped(node.then_block.statements, env)
            elif node.else_block is not None:
                self.execute_scoped(node.else_block.statements, env)
            return NullVal()
        if isinstance(node, WhileStmt):
            iterations = 0
            while self.is_condition_true(self.evaluate(node.condition, env)):
                # a fresh scope per iteration
                self.execute_scoped(node.body.statements, env)
                iterations += 1
            if self.debug_level >= 3:
                self.debug(f"while loop finished after {iterations} iterations")
            return NullVal()
        if isinstance(node, ForStmt):
            for_env = Environment(parent=env)
            try:
                self.evaluate(node.init, for_env)
                iterations = 0
                while self.is_condition_true(self.evaluate(node.condition, for_env)):
                    self.execute_scoped(node.body.statements, for_env)
                    self.evaluate(node.update, for_env)
                    iterations += 1
                if self.debug_level >= 3:
                    self.debug(f"for loop finished after {iterations} iterations")
            finally:
                self.release(for_env)
            return NullVal()
        if isinstance(node, FuncDecl):
            func_value = FunctionVal(node.name, node.params, node.body, env)
            env.capture()
            env.define(node.name, func_value, is_function=True)
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}({', '.join(node.params)})")
            return func_value
        if isinstance(node, Call):
            func = env.get(node.name)
            args = [self.evaluate(arg, env) for arg in node.args]
            if self.debug_level >= 4:
                self.debug(f"call {node.name}({', '.join(to_string(a) for a in args)})")
            return self.call_function(node.name, func, args)
        if isinstance(node, ReturnStmt):
            # control transfer is handled by call_function
            return self.evaluate(node.value, env) if node.value is not None else NullVal()
        if isinstance(node, DeleteStmt):
            return env.delete(node.name)
        if isinstance(node, ArrayLiteral):
            return ArrayVal([self.evaluate(el, env) for el in node.elements])
        if isinstance(node, Index):
            target = self.evaluate(node.target, env)
            index = self.evaluate(node.index, env)
            return self.index_value(target, index)
        if isinstance(node, EmptyStmt):
            return NullVal()
        raise EvaluationError(f"cannot evaluate node {type(node).__name__}")

    def execute_scoped(self, statements: List[Node], env: Environment):
        """Run statements in a new child scope, destroying it on exit."""
        scope = Environment(parent=env)
        try:
            for stmt in statements:
                self.evaluate(stmt, scope)
        finally:
            self.release(scope)

    def release(self, env: Environment):
        if not env.captured:
            env.destroy()

    def is_condition_true(self, value: Any) -> bool:
        return to_string(value) == 'true'

    def call_function(self, name: str, func: Any, args: List[Any]) -> Any:
        if isinstance(func, NativeFunction):
            return func.call(args)
        if isinstance(func, FunctionVal):
            call_env = Environment(parent=func.closure)
            for i, param in enumerate(func.params):
                call_env.define(param, args[i] if i < len(args) else NullVal())
            # only a return at the top level of the body ends the call
            for stmt in func.body.statements:
                value = self.evaluate(stmt, call_env)
                if isinstance(stmt, ReturnStmt):
                    return value
            return NullVal()
        raise EvaluationError(f"{name} is not a function")

    def index_value(self, target: Any, index: Any) -> Any:
        position = to_number(index)
        if math.isnan(position) or math.isinf(position):
            return NullVal()
        i = int(position)
        if isinstance(target, ArrayVal):
            if 0 <= i < len(target.items):
                return target.items[i]
            return NullVal()
        if isinstance(target, StringVal):
            if 0 <= i < len(target.value):
                return StringVal(target.value[i])
            return NullVal()
        return NullVal()

    # Unary operators
    def evaluate_unary(self, node: UnaryOp, env: Environment) -> Any:
        operand = self.evaluate(node.operand, env)
        if node.op == '!':
            return BooleanVal.of(is_falsy(operand))
        if node.op == '-':
            if isinstance(operand, NumberVal):
                return NumberVal.of(-operand.to_float())
            return NullVal()
        if node.op in ('++', '--'):
            updated = self.step_value(node.op, operand)
            if updated is None:
                return NullVal()
            # the parser guarantees an identifier operand
            return env.set(node.operand.name, updated)
        raise EvaluationError(f"unsupported unary operator {node.op}")

    def step_value(self, op: str, value: Any) -> Optional[Any]:
        if isinstance(value, NumberVal):
            delta = 1 if op == '++' else -1
            return NumberVal.of(value.to_float() + delta)
        if op == '--':
            if isinstance(value, StringVal):
                return StringVal(value.value[:-1])
            if isinstance(value, BooleanVal):
                return BooleanVal.of(False)
        return None

    # Binary operators
    def evaluate_binary(self, node: BinaryOp, env: Environment) -> Any:
        left = self.evaluate(node.left, env)
        # Short-circuit for && and ||
        if node.op == '&&':
            if is_falsy(left):
                return BooleanVal.of(False)
            return BooleanVal.of(not is_falsy(self.evaluate(node.right, env)))
        if node.op == '||':
            if not is_falsy(left):
                return BooleanVal.of(True)
            return BooleanVal.of(not is_falsy(self.evaluate(node.right, env)))
        right = self.evaluate(node.right, env)
        return self.apply_binary_op(node.op, left, right)

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if op == '+':
            return self.add(a, b)
        if op == '-':
            return self.subtract(a, b)
        if op == '*':
            return self.multiply(a, b)
        if op == '/':
            return self.divide(a, b)
        if op == '%':
            if isinstance(a, NumberVal) and isinstance(b, NumberVal):
                if b.to_float() == 0:
                    return NumberVal.of(math.nan)
                return NumberVal.of(math.fmod(a.to_float(), b.to_float()))
            return NullVal()
        if op == '**':
            if isinstance(a, NumberVal) and isinstance(b, NumberVal):
                return NumberVal.of(self.power(a.to_float(), b.to_float()))
            return NullVal()
        if op == '==':
            return BooleanVal.of(self.equal_values(a, b))
        if op == '!=':
            return BooleanVal.of(not self.equal_values(a, b))
        if op in ('<', '>', '<=', '>='):
            x, y = to_number(a), to_number(b)
            if op == '<': return BooleanVal.of(x < y)
            if op == '>': return BooleanVal.of(x > y)
            if op == '<=': return BooleanVal.of(x <= y)
            return BooleanVal.of(x >= y)
        raise EvaluationError(f'unknown operator {op}')

    def add(self, a: Any, b: Any) -> Any:
        # If either operand is string, perform concatenation
        if isinstance(a, StringVal) or isinstance(b, StringVal):
            return StringVal(to_string(a) + to_string(b))
        if isinstance(a, NumberVal) and isinstance(b, NumberVal):
            return NumberVal.of(a.to_float() + b.to_float())
        if isinstance(a, BooleanVal) and isinstance(b, BooleanVal):
            return BooleanVal.of(a.is_true or b.is_true)
        return NullVal()

    def subtract(self, a: Any, b: Any) -> Any:
        if isinstance(a, NumberVal) and isinstance(b, NumberVal):
            return NumberVal.of(a.to_float() - b.to_float())
        if isinstance(a, StringVal) and isinstance(b, StringVal):
            # first occurrence only
            return StringVal(a.value.replace(b.value, '', 1))
        if isinstance(a, StringVal) and isinstance(b, NumberVal):
            # drop the last n characters; a negative n keeps the first -n
            n = to_int(b)
            return StringVal(a.value[:-n] if n != 0 else a.value)
        if isinstance(a, NumberVal) and isinstance(b, StringVal):
            # substring of the right operand from index a, negative counts from the end
            return StringVal(b.value[to_int(a):])
        if isinstance(a, BooleanVal) and isinstance(b, BooleanVal):
            return BooleanVal.of(a.is_true and not b.is_true)
        if isinstance(a, (BooleanVal, NumberVal)) and isinstance(b, (BooleanVal, NumberVal)):
            return NumberVal.of(to_number(a) - to_number(b))
        return NullVal()

    def multiply(self, a: Any, b: Any) -> Any:
        if isinstance(a, NumberVal) and isinstance(b, NumberVal):
            return NumberVal.of(a.to_float() * b.to_float())
        if isinstance(a, StringVal) and isinstance(b, NumberVal):
            return StringVal(a.value * max(to_int(b), 0))
        if isinstance(a, StringVal) and isinstance(b, BooleanVal):
            return StringVal(a.value if b.is_true else '')
        if isinstance(a, NumberVal) and isinstance(b, BooleanVal):
            return a if b.is_true else NumberVal.of(0.0)
        if isinstance(a, BooleanVal) and isinstance(b, BooleanVal):
            return BooleanVal.of(a.is_true and b.is_true)
        return NullVal()

    def divide(self, a: Any, b: Any) -> Any:
        if isinstance(a, NumberVal) and isinstance(b, NumberVal):
            if b.to_float() == 0:
                raise EvaluationError('Zero division is not allowed')
            return NumberVal.of(a.to_float() / b.to_float())
        if isinstance(a, StringVal) and isinstance(b, NumberVal):
            # two-character chunks of the string
            text = a.value
            return ArrayVal([StringVal(text[i:i + 2]) for i in range(0, len(text), 2)])
        if isinstance(a, StringVal) and isinstance(b, StringVal):
            parts = list(a.value) if b.value == '' else a.value.split(b.value)
            return ArrayVal([StringVal(p) for p in parts if p])
        return NullVal()

    def power(self, x: float, y: float) -> float:
        try:
            return math.pow(x, y)
        except OverflowError:
            if x < 0 and y.is_integer() and int(y) % 2 == 1:
                return -math.inf
            return math.inf
        except ValueError:
            # 0 ** negative, or a negative base with a fractional exponent
            return math.inf if x == 0 else math.nan

    def equal_values(self, a: Any, b: Any) -> bool:
        if type_name(a) != type_name(b):
            return False
        if isinstance(a, (NumberVal, StringVal, BooleanVal)):
            return a.value == b.value
        if isinstance(a, NullVal):
            return True
        # arrays and functions compare by identity
        return a is b


def run_program(source: str, debug_level: int = 0, show_output: bool = False) -> List[Any]:
    """Convenience function to parse and run an NPL program from source string."""
    ast_program = parse_program(source)
    allow_deep_recursion()
    interpreter = Interpreter(debug_level=debug_level)
    try:
        return interpreter.interpret(ast_program.body, show_output=show_output)
    finally:
        interpreter.close()


def run_file(file_path: str, debug_level: int = 0, show_output: bool = False) -> Interpreter:
    """Parse and execute an NPL file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    ast_program = parse_program(source)
    allow_deep_recursion()
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.interpret(ast_program.body, show_output=show_output)
    finally:
        interpreter.close()
    return interpreter
