"""
Lowering of IR types and constants to GLSL syntax.

Matrices are stored row-major in the IR while GLSL constructors fill them
column-major, so every matrix literal is wrapped in exactly one ``transpose``.
"""

import math
from typing import TYPE_CHECKING

import numpy as np

from fx2glsl.codegen.errors import fail, require
from fx2glsl.codegen.models import BaseType, Constant, Qualifier, Type

if TYPE_CHECKING:
    from fx2glsl.codegen.context import CompilationContext

# Vector type prefixes per base kind
VECTOR_PREFIXES: dict[BaseType, str] = {
    BaseType.BOOL: "bvec",
    BaseType.INT: "ivec",
    BaseType.UINT: "uvec",
    BaseType.FLOAT: "vec",
}

SCALAR_NAMES: dict[BaseType, str] = {
    BaseType.BOOL: "bool",
    BaseType.INT: "int",
    BaseType.UINT: "uint",
    BaseType.FLOAT: "float",
}

# Interpolation qualifiers in the order they are written
INTERPOLATION_QUALIFIERS: list[tuple[Qualifier, str]] = [
    (Qualifier.LINEAR, "smooth"),
    (Qualifier.NOPERSPECTIVE, "noperspective"),
    (Qualifier.CENTROID, "centroid"),
    (Qualifier.NOINTERPOLATION, "flat"),
]

# Bit patterns of the non-finite float values
_POSITIVE_INFINITY_BITS = "0x7F800000u"
_NEGATIVE_INFINITY_BITS = "0xFF800000u"
_NAN_BITS = "0x7FC00000u"


def render_type(ctx: "CompilationContext", type_: Type, is_param: bool = False) -> str:
    """Generate the GLSL spelling of a type.

    Args:
        ctx: Compilation context, used to resolve struct names
        type_: IR type
        is_param: Whether the type belongs to a parameter or struct member, in
            which case interpolation and direction qualifiers are written

    Returns:
        GLSL type spelling without array suffix

    Raises:
        CodegenError: If the base kind has no GLSL spelling
    """
    prefix = ""

    if type_.has(Qualifier.PRECISE):
        prefix += "precise "

    if is_param:
        for qualifier, keyword in INTERPOLATION_QUALIFIERS:
            if type_.has(qualifier):
                prefix += keyword + " "

        if type_.has(Qualifier.INOUT):
            prefix += "inout "
        elif type_.has(Qualifier.IN):
            prefix += "in "
        elif type_.has(Qualifier.OUT):
            prefix += "out "

    if type_.is_void():
        return prefix + "void"
    if type_.is_numeric():
        if type_.cols > 1:
            return prefix + f"mat{type_.rows}x{type_.cols}"
        if type_.rows > 1:
            return prefix + f"{VECTOR_PREFIXES[type_.base]}{type_.rows}"
        return prefix + SCALAR_NAMES[type_.base]
    if type_.is_struct():
        return prefix + ctx.names.resolve_name(type_.definition)
    if type_.is_sampler():
        return prefix + "sampler2D"

    fail(f"Unsupported type: {type_.base.name.lower()}")


def render_array_suffix(type_: Type) -> str:
    """Generate the ``[N]`` suffix for array declarations."""
    return f"[{type_.array_length}]" if type_.is_array() else ""


def format_float(value: float) -> str:
    """Format a 32-bit float as the shortest GLSL literal that reads back exactly."""
    value32 = np.float32(value)

    if math.isnan(value32):
        return f"uintBitsToFloat({_NAN_BITS})"
    if math.isinf(value32):
        bits = _POSITIVE_INFINITY_BITS if value32 > 0 else _NEGATIVE_INFINITY_BITS
        return f"uintBitsToFloat({bits})"

    magnitude = abs(float(value32))
    if magnitude != 0.0 and (magnitude >= 1e16 or magnitude < 1e-4):
        return np.format_float_scientific(value32, unique=True, trim="0", exp_digits=1)
    return np.format_float_positional(value32, unique=True, trim="0")


def render_scalar_literal(base: BaseType, value: bool | int | float) -> str:
    """Generate a literal for a single component."""
    if base == BaseType.BOOL:
        return "true" if value else "false"
    if base == BaseType.INT:
        return str(int(value))
    if base == BaseType.UINT:
        return f"{int(value)}u"
    return format_float(float(value))


def zero_constant(ctx: "CompilationContext", type_: Type) -> Constant:
    """Create a zero-initialized constant of a type."""
    if type_.is_array():
        element = zero_constant(ctx, type_.element_type())
        return Constant(array_data=[element] * type_.array_length)
    if type_.is_struct():
        return Constant()
    return Constant(values=[0] * type_.components())


def render_constant(ctx: "CompilationContext", type_: Type, data: Constant) -> str:
    """Generate GLSL code for a constant value.

    Args:
        ctx: Compilation context
        type_: Type of the constant
        data: Constant data

    Returns:
        Generated GLSL literal or constructor expression

    Raises:
        CodegenError: If the type is neither numeric nor a struct
    """
    require(
        type_.is_numeric() or type_.is_struct(),
        f"Constants of type {type_.base.name.lower()} are not supported",
    )

    if type_.is_array():
        element_type = type_.element_type()
        elements = ", ".join(
            render_constant(ctx, element_type, element) for element in data.array_data
        )
        return "{ " + elements + " }"

    if type_.is_struct():
        # Struct constants only ever zero-initialize
        info = ctx.find_struct(type_.definition)
        members = ", ".join(
            render_constant(ctx, member.type, zero_constant(ctx, member.type))
            for member in info.member_list
        )
        if not info.member_list:
            # Matches the placeholder member of empty structs
            members = "0.0"
        return f"{render_type(ctx, type_)}({members})"

    components = type_.components()
    require(
        len(data.values) >= components,
        f"Constant has {len(data.values)} components, type needs {components}",
    )
    literals = [render_scalar_literal(type_.base, v) for v in data.values[:components]]

    if type_.is_scalar():
        return literals[0]

    constructor = f"{render_type(ctx, type_)}({', '.join(literals)})"
    if type_.is_matrix():
        return f"transpose({constructor})"
    return constructor
