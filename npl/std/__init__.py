from .basic_io import BasicIO
import math
import random
import time
from typing import List, Any

from npl.builtin_function import NativeFunction
from npl.environment import Environment
from npl.errors import EvaluationError
from npl.types import (
    NumberVal, StringVal, BooleanVal, NullVal, ArrayVal, FunctionVal,
    FLOAT_PREFIX, is_falsy, parse_float, to_string, type_name,
)

VERSION = '0.0.1'


def _one_argument(args: List[Any]) -> Any:
    if len(args) == 0:
        raise EvaluationError('Expected one argument')
    return args[0]


def define_constants(env: Environment):
    env.define('PI', NumberVal.of(math.pi), is_constant=True)
    env.define('E', NumberVal.of(math.e), is_constant=True)
    env.define('version', StringVal(VERSION), is_constant=True)


def define_functions(env: Environment, basic_io: BasicIO):

    def std_print(args: List[Any]) -> Any:
        basic_io.write_line(' '.join(to_string(a) for a in args))
        return NullVal()

    def std_clear(args: List[Any]) -> Any:
        basic_io.clear()
        return NullVal()

    def std_timestamp(args: List[Any]) -> Any:
        return NumberVal.of(float(time.time_ns() // 1_000_000))

    def std_rand(args: List[Any]) -> Any:
        hint = to_string(args[0]) if args else ''
        if hint == 'number':
            return NumberVal.of(float(round(random.random() * (time.time_ns() // 1_000_000))))
        if hint == 'boolean':
            return BooleanVal.of(random.random() - 0.5 > 0)
        return StringVal(f"{random.getrandbits(52):x}")

    def std_number(args: List[Any]) -> Any:
        value = _one_argument(args)
        if isinstance(value, NumberVal):
            return value
        if isinstance(value, BooleanVal):
            return NumberVal.of(1.0 if value.is_true else 0.0)
        if isinstance(value, NullVal):
            return NumberVal.of(0.0)
        if isinstance(value, StringVal):
            text = value.value.strip()
            if text == '':
                return NumberVal.of(0.0)
            # the whole text has to be numeric, not just a prefix
            match = FLOAT_PREFIX.match(text)
            if match is None or match.end() != len(text):
                return NumberVal.of(math.nan)
            return NumberVal.of(parse_float(text))
        return NumberVal.of(math.nan)

    def std_string(args: List[Any]) -> Any:
        return StringVal(to_string(_one_argument(args)))

    def std_boolean(args: List[Any]) -> Any:
        value = _one_argument(args)
        if isinstance(value, NumberVal) and math.isnan(value.to_float()):
            return BooleanVal.of(False)
        if isinstance(value, (ArrayVal, FunctionVal, NativeFunction)):
            return BooleanVal.of(False)
        return BooleanVal.of(not is_falsy(value))

    def std_length(args: List[Any]) -> Any:
        value = _one_argument(args)
        if isinstance(value, (StringVal, NumberVal)):
            return NumberVal.of(float(len(value.value)))
        if isinstance(value, BooleanVal):
            return NumberVal.of(1.0)
        if isinstance(value, FunctionVal):
            return NumberVal.of(float(len(value.params)))
        if isinstance(value, ArrayVal):
            return NumberVal.of(float(len(value.items)))
        return NumberVal.of(0.0)

    def std_type(args: List[Any]) -> Any:
        return StringVal(type_name(_one_argument(args)))

    def std_input(args: List[Any]) -> Any:
        prompt = to_string(args[0]) if args else ''
        return StringVal(basic_io.read_line(prompt))

    for fn in (std_print, std_clear, std_timestamp, std_rand, std_number,
               std_string, std_boolean, std_length, std_type, std_input):
        name = fn.__name__[len('std_'):]
        env.define(name, NativeFunction(name, fn), is_function=True)


def populate_root_environment(env: Environment, basic_io: BasicIO) -> Environment:
    """Install the built-in constants and native functions into a root scope."""
    define_constants(env)
    define_functions(env, basic_io)
    return env
