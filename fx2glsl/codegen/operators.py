"""
GLSL operator lowering.

Tokens coming from the IR producer are first mapped onto a closed set of
operators, then each operator picks either a native infix operator or a
built-in function based on the shape of its operand type.
"""

from enum import Enum, auto
from typing import NamedTuple

from fx2glsl.codegen.errors import fail
from fx2glsl.codegen.models import Type


class TokenId(Enum):
    """Operator tokens the IR producer passes to the emitter."""

    PLUS = auto()
    PLUS_PLUS = auto()
    PLUS_EQUAL = auto()
    MINUS = auto()
    MINUS_MINUS = auto()
    MINUS_EQUAL = auto()
    STAR = auto()
    STAR_EQUAL = auto()
    SLASH = auto()
    SLASH_EQUAL = auto()
    PERCENT = auto()
    PERCENT_EQUAL = auto()
    CARET = auto()
    CARET_EQUAL = auto()
    PIPE = auto()
    PIPE_EQUAL = auto()
    PIPE_PIPE = auto()
    AMPERSAND = auto()
    AMPERSAND_EQUAL = auto()
    AMPERSAND_AMPERSAND = auto()
    LESS_LESS = auto()
    LESS_LESS_EQUAL = auto()
    GREATER_GREATER = auto()
    GREATER_GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    EQUAL_EQUAL = auto()
    EXCLAIM_EQUAL = auto()
    EXCLAIM = auto()
    TILDE = auto()
    QUESTION = auto()


class BinaryOperator(Enum):
    ADD = auto()
    SUBTRACT = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    MODULO = auto()
    BITWISE_XOR = auto()
    BITWISE_OR = auto()
    BITWISE_AND = auto()
    SHIFT_LEFT = auto()
    SHIFT_RIGHT = auto()
    LOGICAL_OR = auto()
    LOGICAL_AND = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    EQUAL = auto()
    NOT_EQUAL = auto()


class UnaryOperator(Enum):
    NEGATE = auto()
    BITWISE_NOT = auto()
    LOGICAL_NOT = auto()


# Compound assignment and increment tokens lower to their plain operator
BINARY_TOKENS: dict[TokenId, BinaryOperator] = {
    TokenId.PLUS: BinaryOperator.ADD,
    TokenId.PLUS_PLUS: BinaryOperator.ADD,
    TokenId.PLUS_EQUAL: BinaryOperator.ADD,
    TokenId.MINUS: BinaryOperator.SUBTRACT,
    TokenId.MINUS_MINUS: BinaryOperator.SUBTRACT,
    TokenId.MINUS_EQUAL: BinaryOperator.SUBTRACT,
    TokenId.STAR: BinaryOperator.MULTIPLY,
    TokenId.STAR_EQUAL: BinaryOperator.MULTIPLY,
    TokenId.SLASH: BinaryOperator.DIVIDE,
    TokenId.SLASH_EQUAL: BinaryOperator.DIVIDE,
    TokenId.PERCENT: BinaryOperator.MODULO,
    TokenId.PERCENT_EQUAL: BinaryOperator.MODULO,
    TokenId.CARET: BinaryOperator.BITWISE_XOR,
    TokenId.CARET_EQUAL: BinaryOperator.BITWISE_XOR,
    TokenId.PIPE: BinaryOperator.BITWISE_OR,
    TokenId.PIPE_EQUAL: BinaryOperator.BITWISE_OR,
    TokenId.AMPERSAND: BinaryOperator.BITWISE_AND,
    TokenId.AMPERSAND_EQUAL: BinaryOperator.BITWISE_AND,
    TokenId.LESS_LESS: BinaryOperator.SHIFT_LEFT,
    TokenId.LESS_LESS_EQUAL: BinaryOperator.SHIFT_LEFT,
    TokenId.GREATER_GREATER: BinaryOperator.SHIFT_RIGHT,
    TokenId.GREATER_GREATER_EQUAL: BinaryOperator.SHIFT_RIGHT,
    TokenId.PIPE_PIPE: BinaryOperator.LOGICAL_OR,
    TokenId.AMPERSAND_AMPERSAND: BinaryOperator.LOGICAL_AND,
    TokenId.LESS: BinaryOperator.LESS,
    TokenId.LESS_EQUAL: BinaryOperator.LESS_EQUAL,
    TokenId.GREATER: BinaryOperator.GREATER,
    TokenId.GREATER_EQUAL: BinaryOperator.GREATER_EQUAL,
    TokenId.EQUAL_EQUAL: BinaryOperator.EQUAL,
    TokenId.EXCLAIM_EQUAL: BinaryOperator.NOT_EQUAL,
}

UNARY_TOKENS: dict[TokenId, UnaryOperator] = {
    TokenId.MINUS: UnaryOperator.NEGATE,
    TokenId.TILDE: UnaryOperator.BITWISE_NOT,
    TokenId.EXCLAIM: UnaryOperator.LOGICAL_NOT,
}

# Native GLSL spelling of every binary operator
INFIX_OPERATORS: dict[BinaryOperator, str] = {
    BinaryOperator.ADD: "+",
    BinaryOperator.SUBTRACT: "-",
    BinaryOperator.MULTIPLY: "*",
    BinaryOperator.DIVIDE: "/",
    BinaryOperator.MODULO: "%",
    BinaryOperator.BITWISE_XOR: "^",
    BinaryOperator.BITWISE_OR: "|",
    BinaryOperator.BITWISE_AND: "&",
    BinaryOperator.SHIFT_LEFT: "<<",
    BinaryOperator.SHIFT_RIGHT: ">>",
    BinaryOperator.LOGICAL_OR: "||",
    BinaryOperator.LOGICAL_AND: "&&",
    BinaryOperator.LESS: "<",
    BinaryOperator.LESS_EQUAL: "<=",
    BinaryOperator.GREATER: ">",
    BinaryOperator.GREATER_EQUAL: ">=",
    BinaryOperator.EQUAL: "==",
    BinaryOperator.NOT_EQUAL: "!=",
}

# GLSL forbids relational operators on vectors
VECTOR_COMPARISONS: dict[BinaryOperator, str] = {
    BinaryOperator.LESS: "lessThan",
    BinaryOperator.LESS_EQUAL: "lessThanEqual",
    BinaryOperator.GREATER: "greaterThan",
    BinaryOperator.GREATER_EQUAL: "greaterThanEqual",
    BinaryOperator.EQUAL: "equal",
    BinaryOperator.NOT_EQUAL: "notEqual",
}

# Native "*" on matrices is the linear algebra product
MATRIX_COMPONENT_MULTIPLY = "matrixCompMult"

# Native "%" is integer-only
FLOAT_MODULO = "_fmod"
FLOAT_MODULO_DEFINITION = "#define _fmod(x, y) ((x) - (y) * trunc((x) / (y)))"


class Lowering(NamedTuple):
    """How a binary operation is written.

    Attributes:
        symbol: Infix operator or function name
        is_function: Whether ``symbol`` is called as ``symbol(lhs, rhs)``
    """

    symbol: str
    is_function: bool


def lower_binary(op: BinaryOperator, operand_type: Type) -> Lowering:
    """Choose between a native operator and a built-in function.

    Args:
        op: Binary operator
        operand_type: Type of the operands

    Returns:
        Lowering rule for the operation
    """
    if op in VECTOR_COMPARISONS and operand_type.is_vector():
        return Lowering(VECTOR_COMPARISONS[op], True)
    if op == BinaryOperator.MULTIPLY and operand_type.is_matrix():
        return Lowering(MATRIX_COMPONENT_MULTIPLY, True)
    if op == BinaryOperator.MODULO and operand_type.is_floating_point():
        return Lowering(FLOAT_MODULO, True)
    return Lowering(INFIX_OPERATORS[op], False)


def binary_operator(token: TokenId) -> BinaryOperator:
    """Map a token onto a binary operator.

    Raises:
        CodegenError: If the token is not a binary operator
    """
    if token not in BINARY_TOKENS:
        fail(f"Unsupported binary operator: {token.name.lower()}")
    return BINARY_TOKENS[token]


def unary_operator(token: TokenId) -> UnaryOperator:
    """Map a token onto a unary operator.

    Raises:
        CodegenError: If the token is not a unary operator
    """
    if token not in UNARY_TOKENS:
        fail(f"Unsupported unary operator: {token.name.lower()}")
    return UNARY_TOKENS[token]


def render_unary(op: UnaryOperator, operand_type: Type, operand: str) -> str:
    """Generate GLSL code for a unary operation."""
    if op == UnaryOperator.NEGATE:
        return f"-({operand})"
    if op == UnaryOperator.BITWISE_NOT:
        return f"~({operand})"
    if operand_type.is_vector():
        return f"not({operand})"
    return f"!bool({operand})"
