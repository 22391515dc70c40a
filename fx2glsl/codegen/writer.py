"""Assembly of the final module from the accumulated blocks."""

from loguru import logger

from fx2glsl.codegen.code_block import CodeWriter
from fx2glsl.codegen.context import CompilationContext
from fx2glsl.codegen.models import Module
from fx2glsl.codegen.operators import FLOAT_MODULO_DEFINITION


def _generate_cbuffer(ctx: CompilationContext, out: CodeWriter) -> None:
    """Generate the ``_Globals`` uniform block if any uniform was declared."""
    if ctx.cbuffer_type_id not in ctx.blocks:
        return

    name = ctx.name_of(ctx.cbuffer_type_id)
    opening = f"layout(std140, binding = {ctx.config.cbuffer_binding}) uniform {name}"
    with out.block(opening, "};"):
        out.write_all(ctx.blocks[ctx.cbuffer_type_id].statements)


def write_result(ctx: CompilationContext) -> Module:
    """Assemble the module of a compilation unit.

    The source text is the optional version directive, the ``_fmod`` helper
    when it is used, the ``_Globals`` block and then the global block with
    every declaration in program order.

    Args:
        ctx: Compilation context

    Returns:
        Module with source text and resource descriptors
    """
    out = CodeWriter(indent_text=ctx.config.indent)

    if ctx.config.version_directive:
        out.add_line(ctx.config.version_directive)
    if ctx.uses_fmod:
        out.add_line(FLOAT_MODULO_DEFINITION)

    _generate_cbuffer(ctx, out)
    out.write_all(ctx.blocks[0].statements)

    module = Module(
        code=out.get_code(),
        samplers=list(ctx.samplers),
        textures=list(ctx.textures),
        uniforms=list(ctx.uniforms),
        techniques=list(ctx.techniques),
        entry_points=list(ctx.entry_points),
    )
    logger.debug(
        f"Assembled module: {len(module.uniforms)} uniforms, "
        f"{len(module.samplers)} samplers, {len(module.textures)} textures, "
        f"{len(module.entry_points)} entry points"
    )
    return module
