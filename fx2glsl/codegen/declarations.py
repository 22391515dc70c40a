"""
GLSL code generation for declarations.

This module handles struct, resource, variable and function declarations,
including the placement of uniforms in the ``_Globals`` buffer and the
assignment of sampler binding slots.
"""

from loguru import logger

from fx2glsl.codegen.code_block import (
    Declaration,
    Directive,
    FunctionDefinition,
    StructDefinition,
)
from fx2glsl.codegen.context import CompilationContext
from fx2glsl.codegen.errors import require
from fx2glsl.codegen.models import (
    FunctionInfo,
    Location,
    SamplerInfo,
    StructInfo,
    StructMember,
    TechniqueInfo,
    TextureInfo,
    Type,
    UniformInfo,
)
from fx2glsl.codegen.type_lowering import render_array_suffix, render_type

# GLSL has no empty structs
EMPTY_STRUCT_PLACEHOLDER = "float _dummy"


def define_struct(ctx: CompilationContext, loc: Location | None, info: StructInfo) -> int:
    """Declare a struct type.

    Args:
        ctx: Compilation context
        loc: Source location
        info: Struct definition, ``definition`` is filled in

    Returns:
        Id of the struct definition
    """
    info.definition = ctx.make_id()
    name = ctx.names.assign_name(info.definition, info.unique_name)
    ctx.structs.append(info)

    members = [
        f"{render_type(ctx, member.type, True)} "
        f"{ctx.declare_member(info.definition, index, member.name)}"
        f"{render_array_suffix(member.type)}"
        for index, member in enumerate(info.member_list)
    ]
    if not members:
        members = [EMPTY_STRUCT_PLACEHOLDER]

    ctx.emit_location(loc)
    ctx.code().append(StructDefinition(name, members))

    return info.definition


def define_texture(ctx: CompilationContext, loc: Location | None, info: TextureInfo) -> int:
    """Register a texture, textures need no declaration in GLSL."""
    info.id = ctx.make_id()
    ctx.textures.append(info)
    return info.id


def define_sampler(ctx: CompilationContext, loc: Location | None, info: SamplerInfo) -> int:
    """Declare a sampler at the next free binding slot.

    Args:
        ctx: Compilation context
        loc: Source location
        info: Sampler declaration, ``id`` and ``binding`` are filled in

    Returns:
        Id of the sampler
    """
    info.id = ctx.make_id()
    info.binding = ctx.layout.next_sampler_binding()
    ctx.samplers.append(info)

    name = ctx.names.assign_name(info.id, info.unique_name)
    logger.debug(f"Bound sampler '{name}' to slot {info.binding}")

    ctx.emit_location(loc)
    ctx.code().append(
        Declaration(f"layout(binding = {info.binding}) uniform sampler2D", name)
    )

    return info.id


def define_uniform(ctx: CompilationContext, loc: Location | None, info: UniformInfo) -> int:
    """Place a uniform in the ``_Globals`` buffer.

    The uniform becomes a member of the reserved ``$Globals`` struct and its
    declaration goes into that struct's block.

    Args:
        ctx: Compilation context
        loc: Source location
        info: Uniform declaration, ``offset``, ``size`` and ``member_index``
            are filled in

    Returns:
        Id of the ``$Globals`` struct shared by all uniforms
    """
    require(info.type.is_numeric(), f"Uniform '{info.name}' must have a numeric type", loc)

    info.offset, info.size = ctx.layout.place_uniform(info.type)
    logger.debug(f"Uniform '{info.name}': offset {info.offset}, size {info.size}")

    cbuffer = ctx.find_struct(ctx.cbuffer_type_id)
    declared_name = ctx.declare_member(
        ctx.cbuffer_type_id, len(cbuffer.member_list), info.name
    )
    cbuffer.member_list.append(StructMember(info.type, info.name, loc))

    block = ctx.blocks[ctx.cbuffer_type_id]
    ctx.emit_location(loc, block)
    block.append(
        Declaration(
            render_type(ctx, info.type), declared_name, render_array_suffix(info.type)
        )
    )

    info.member_index = len(ctx.uniforms)
    ctx.uniforms.append(info)

    return ctx.cbuffer_type_id


def define_variable(
    ctx: CompilationContext,
    loc: Location | None,
    type_: Type,
    name: str | None = None,
    is_global: bool = False,
    initializer_value: int = 0,
) -> int:
    """Declare a mutable variable.

    Args:
        ctx: Compilation context
        loc: Source location
        type_: Variable type
        name: Optional source name, unnamed variables use ``_<id>``
        is_global: Whether the variable lives at global scope
        initializer_value: Id of the initial value or 0 for none

    Returns:
        Id of the variable
    """
    res = ctx.make_id()

    if name:
        ctx.names.assign_name(res, name)

    ctx.emit_location(loc)
    ctx.code().append(
        Declaration(
            render_type(ctx, type_),
            ctx.name_of(res),
            render_array_suffix(type_),
            ctx.name_of(initializer_value) if initializer_value != 0 else None,
        )
    )

    return res


def define_function(ctx: CompilationContext, loc: Location | None, info: FunctionInfo) -> int:
    """Open a function definition.

    Every parameter gets its own id. The body is attached by ``leave_function``.

    Args:
        ctx: Compilation context
        loc: Source location
        info: Function definition, ``definition`` ids are filled in

    Returns:
        Id of the function
    """
    info.definition = ctx.make_id()
    name = ctx.names.assign_name(info.definition, info.unique_name)

    params = []
    for param in info.parameter_list:
        param.definition = ctx.make_id()
        param_name = ctx.names.assign_name(param.definition, param.name)
        params.append(
            f"{render_type(ctx, param.type, True)} {param_name}"
            f"{render_array_suffix(param.type)}"
        )

    signature = f"{render_type(ctx, info.return_type)} {name}({', '.join(params)})"
    function = FunctionDefinition(signature)

    ctx.emit_location(loc)
    ctx.code().append(function)
    ctx.open_functions.append(function)

    ctx.scope_level += 1
    ctx.functions.append(info)

    return info.definition


def create_entry_point(ctx: CompilationContext, func: FunctionInfo, is_ps: bool) -> None:
    """Create the guarded ``main`` stub of an entry point.

    Requests for an entry point that already exists are ignored.

    Args:
        ctx: Compilation context
        func: Function exposed as entry point
        is_ps: Whether the entry point is a pixel shader
    """
    if any(name == func.unique_name for name, _ in ctx.entry_points):
        logger.debug(f"Entry point '{func.unique_name}' already exists, skipping")
        return

    block = ctx.code()
    block.append(Directive(f"#ifdef {ctx.config.entry_point_prefix}{func.unique_name}"))
    block.append(FunctionDefinition("void main()", []))
    block.append(Directive("#endif"))

    ctx.entry_points.append((func.unique_name, is_ps))
    logger.debug(
        f"Created {'pixel' if is_ps else 'vertex'} shader entry point '{func.unique_name}'"
    )


def define_technique(ctx: CompilationContext, info: TechniqueInfo) -> None:
    """Record technique metadata, it is passed through unmodified."""
    ctx.techniques.append(info)
