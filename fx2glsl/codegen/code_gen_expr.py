"""
GLSL code generation for expressions.

Every value-producing operation allocates a fresh id and appends one
``const`` declaration binding that id to the computed expression, so each
prior result is referenced by name and never re-derived.
"""

from fx2glsl.codegen.code_block import Assignment, Declaration, SimpleStatement
from fx2glsl.codegen.context import CompilationContext
from fx2glsl.codegen.errors import require
from fx2glsl.codegen.intrinsics import Intrinsic, expand_intrinsic
from fx2glsl.codegen.models import (
    Constant,
    Expression,
    Location,
    Operation,
    OperationKind,
    Type,
)
from fx2glsl.codegen.operators import (
    FLOAT_MODULO,
    TokenId,
    binary_operator,
    lower_binary,
    render_unary,
    unary_operator,
)
from fx2glsl.codegen.type_lowering import render_array_suffix, render_constant, render_type

SWIZZLE_LANES = "xyzw"


def generate_swizzle(swizzle: tuple[int, ...]) -> str:
    """Generate the lane letters of a swizzle, up to the first unused slot.

    Raises:
        CodegenError: If no lane is used or a lane index is out of range
    """
    lanes = ""
    for lane in swizzle[:4]:
        if lane < 0:
            break
        require(lane < 4, f"Swizzle lane index out of range: {lane}")
        lanes += SWIZZLE_LANES[lane]
    require(bool(lanes), "Swizzle selects no lanes")
    return lanes


def generate_access_path(
    ctx: CompilationContext, base: int, ops: list[Operation], is_store: bool = False
) -> str:
    """Generate the GLSL access path of an expression chain.

    Casts use constructor syntax since GLSL has no cast operator.

    Args:
        ctx: Compilation context
        base: Id of the base value
        ops: Operations applied left to right
        is_store: Whether the path is an assignment target, casts are skipped

    Returns:
        Generated GLSL code for the access path
    """
    path = ctx.name_of(base)

    for op in ops:
        if op.kind == OperationKind.CAST:
            if not is_store:
                require(op.to_type is not None, "Cast operation without target type")
                path = f"{render_type(ctx, op.to_type)}({path})"
        elif op.kind == OperationKind.INDEX:
            path += f"[{ctx.name_of(op.index)}]"
        elif op.kind == OperationKind.MEMBER:
            require(
                op.from_type is not None and op.from_type.is_struct(),
                "Member access on a non-struct type",
            )
            owner = ctx.find_struct(op.from_type.definition)
            require(
                0 <= op.index < len(owner.member_list),
                f"Struct '{owner.unique_name}' has no member {op.index}",
            )
            member_name = ctx.member_name(owner.definition, op.index)
            if owner.definition == ctx.cbuffer_type_id:
                # Uniform buffer members are flattened into prefixed top-level names
                path = member_name
            else:
                path += "." + member_name
        elif op.kind == OperationKind.SWIZZLE:
            path += "." + generate_swizzle(op.swizzle)

    return path


def _declare_result(
    ctx: CompilationContext, loc: Location | None, type_: Type, value: str
) -> int:
    res = ctx.make_id()
    ctx.emit_location(loc)
    ctx.code().append(
        Declaration(
            render_type(ctx, type_),
            ctx.name_of(res),
            render_array_suffix(type_),
            value,
            is_const=True,
        )
    )
    return res


def _argument_names(ctx: CompilationContext, args: list[Expression]) -> list[str]:
    for arg in args:
        require(not arg.ops and arg.base != 0, "Call arguments must be plain values")
    return [ctx.name_of(arg.base) for arg in args]


def emit_load(ctx: CompilationContext, chain: Expression) -> int:
    """Load the value of an expression chain into a new binding."""
    if chain.is_constant:
        require(chain.constant is not None, "Constant expression without data")
        value = render_constant(ctx, chain.type, chain.constant)
    else:
        value = generate_access_path(ctx, chain.base, chain.ops)

    return _declare_result(ctx, chain.location, chain.type, value)


def emit_store(ctx: CompilationContext, chain: Expression, value: int) -> None:
    """Assign a value to the lvalue path of an expression chain."""
    require(value != 0, "Store of an undefined value", chain.location)

    ctx.emit_location(chain.location)
    ctx.code().append(
        Assignment(
            generate_access_path(ctx, chain.base, chain.ops, is_store=True),
            ctx.name_of(value),
        )
    )


def emit_constant(ctx: CompilationContext, type_: Type, data: Constant) -> int:
    """Bind a constant to a new name."""
    require(type_.is_numeric(), "Constants must have a numeric type")
    return _declare_result(ctx, None, type_, render_constant(ctx, type_, data))


def emit_unary_op(
    ctx: CompilationContext, loc: Location | None, op: TokenId, res_type: Type, val: int
) -> int:
    """Generate a unary operation."""
    operator = unary_operator(op)
    return _declare_result(
        ctx, loc, res_type, render_unary(operator, res_type, ctx.name_of(val))
    )


def emit_binary_op(
    ctx: CompilationContext,
    loc: Location | None,
    op: TokenId,
    res_type: Type,
    type_: Type,
    lhs: int,
    rhs: int,
) -> int:
    """Generate a binary operation.

    Args:
        ctx: Compilation context
        loc: Source location
        op: Operator token
        res_type: Result type
        type_: Operand type, decides between operator and built-in function
        lhs: Id of the left operand
        rhs: Id of the right operand

    Returns:
        Id of the result
    """
    lowering = lower_binary(binary_operator(op), type_)
    lhs_name, rhs_name = ctx.name_of(lhs), ctx.name_of(rhs)

    if lowering.is_function:
        if lowering.symbol == FLOAT_MODULO:
            ctx.uses_fmod = True
        value = f"{lowering.symbol}({lhs_name}, {rhs_name})"
    else:
        value = f"{lhs_name} {lowering.symbol} {rhs_name}"

    return _declare_result(ctx, loc, res_type, value)


def emit_ternary_op(
    ctx: CompilationContext,
    loc: Location | None,
    op: TokenId,
    res_type: Type,
    condition: int,
    true_value: int,
    false_value: int,
) -> int:
    """Generate a conditional expression."""
    require(op == TokenId.QUESTION, f"Unsupported ternary operator: {op.name.lower()}", loc)
    value = (
        f"{ctx.name_of(condition)} ? {ctx.name_of(true_value)} : "
        f"{ctx.name_of(false_value)}"
    )
    return _declare_result(ctx, loc, res_type, value)


def emit_call(
    ctx: CompilationContext,
    loc: Location | None,
    function: int,
    res_type: Type,
    args: list[Expression],
) -> int:
    """Generate a call to a user function, void calls become bare statements."""
    call = f"{ctx.name_of(function)}({', '.join(_argument_names(ctx, args))})"

    if res_type.is_void():
        ctx.emit_location(loc)
        ctx.code().append(SimpleStatement(call))
        return ctx.make_id()

    return _declare_result(ctx, loc, res_type, call)


def emit_call_intrinsic(
    ctx: CompilationContext,
    loc: Location | None,
    intrinsic: Intrinsic,
    res_type: Type,
    args: list[Expression],
) -> int:
    """Generate an intrinsic call from its GLSL template."""
    result_type = render_type(ctx, res_type)
    value = expand_intrinsic(intrinsic, result_type, _argument_names(ctx, args))
    if intrinsic.uses_fmod:
        ctx.uses_fmod = True

    if res_type.is_void():
        ctx.emit_location(loc)
        ctx.code().append(SimpleStatement(value))
        return ctx.make_id()

    return _declare_result(ctx, loc, res_type, value)


def emit_construct(
    ctx: CompilationContext, loc: Location | None, type_: Type, args: list[Expression]
) -> int:
    """Generate a constructor call.

    Matrix constructors are transposed like matrix constants, array
    constructors use the ``T[N](...)`` form.

    Args:
        ctx: Compilation context
        loc: Source location
        type_: Constructed type
        args: Component values, scalars unless an array is constructed

    Returns:
        Id of the result
    """
    for arg in args:
        require(
            arg.type.is_scalar() or type_.is_array(),
            "Constructor arguments must be scalars",
            loc,
        )
    names = ", ".join(_argument_names(ctx, args))

    if type_.is_array():
        value = f"{render_type(ctx, type_)}{render_array_suffix(type_)}({names})"
    elif type_.is_matrix():
        value = f"transpose({render_type(ctx, type_)}({names}))"
    else:
        value = f"{render_type(ctx, type_)}({names})"

    return _declare_result(ctx, loc, type_, value)
