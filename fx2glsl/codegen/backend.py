"""GLSL code generator bound to one compilation context."""

from fx2glsl.codegen import code_gen_expr, code_gen_stmt, declarations, writer
from fx2glsl.codegen.context import CompilationContext
from fx2glsl.codegen.interfaces import Codegen
from fx2glsl.codegen.intrinsics import Intrinsic
from fx2glsl.codegen.models import (
    CodegenConfig,
    Constant,
    Expression,
    FunctionInfo,
    Location,
    Module,
    SamplerInfo,
    StructInfo,
    TechniqueInfo,
    TextureInfo,
    Type,
    UniformInfo,
)
from fx2glsl.codegen.operators import TokenId


class GLSLCodegen(Codegen):
    """Code generator emitting GLSL for one compilation unit."""

    def __init__(self, config: CodegenConfig | None = None):
        self.ctx = CompilationContext(config=config or CodegenConfig())

    def write_result(self) -> Module:
        return writer.write_result(self.ctx)

    def find_struct(self, id_: int) -> StructInfo:
        return self.ctx.find_struct(id_)

    def find_function(self, id_: int) -> FunctionInfo:
        return self.ctx.find_function(id_)

    def define_struct(self, loc: Location | None, info: StructInfo) -> int:
        return declarations.define_struct(self.ctx, loc, info)

    def define_texture(self, loc: Location | None, info: TextureInfo) -> int:
        return declarations.define_texture(self.ctx, loc, info)

    def define_sampler(self, loc: Location | None, info: SamplerInfo) -> int:
        return declarations.define_sampler(self.ctx, loc, info)

    def define_uniform(self, loc: Location | None, info: UniformInfo) -> int:
        return declarations.define_uniform(self.ctx, loc, info)

    def define_variable(
        self,
        loc: Location | None,
        type_: Type,
        name: str | None = None,
        is_global: bool = False,
        initializer_value: int = 0,
    ) -> int:
        return declarations.define_variable(
            self.ctx, loc, type_, name, is_global, initializer_value
        )

    def define_function(self, loc: Location | None, info: FunctionInfo) -> int:
        return declarations.define_function(self.ctx, loc, info)

    def define_technique(self, info: TechniqueInfo) -> None:
        declarations.define_technique(self.ctx, info)

    def create_entry_point(self, func: FunctionInfo, is_ps: bool) -> None:
        declarations.create_entry_point(self.ctx, func, is_ps)

    def emit_load(self, chain: Expression) -> int:
        return code_gen_expr.emit_load(self.ctx, chain)

    def emit_store(self, chain: Expression, value: int) -> None:
        code_gen_expr.emit_store(self.ctx, chain, value)

    def emit_constant(self, type_: Type, data: Constant) -> int:
        return code_gen_expr.emit_constant(self.ctx, type_, data)

    def emit_unary_op(
        self, loc: Location | None, op: TokenId, res_type: Type, val: int
    ) -> int:
        return code_gen_expr.emit_unary_op(self.ctx, loc, op, res_type, val)

    def emit_binary_op(
        self,
        loc: Location | None,
        op: TokenId,
        res_type: Type,
        type_: Type,
        lhs: int,
        rhs: int,
    ) -> int:
        return code_gen_expr.emit_binary_op(self.ctx, loc, op, res_type, type_, lhs, rhs)

    def emit_ternary_op(
        self,
        loc: Location | None,
        op: TokenId,
        res_type: Type,
        condition: int,
        true_value: int,
        false_value: int,
    ) -> int:
        return code_gen_expr.emit_ternary_op(
            self.ctx, loc, op, res_type, condition, true_value, false_value
        )

    def emit_call(
        self, loc: Location | None, function: int, res_type: Type, args: list[Expression]
    ) -> int:
        return code_gen_expr.emit_call(self.ctx, loc, function, res_type, args)

    def emit_call_intrinsic(
        self,
        loc: Location | None,
        intrinsic: Intrinsic,
        res_type: Type,
        args: list[Expression],
    ) -> int:
        return code_gen_expr.emit_call_intrinsic(self.ctx, loc, intrinsic, res_type, args)

    def emit_construct(
        self, loc: Location | None, type_: Type, args: list[Expression]
    ) -> int:
        return code_gen_expr.emit_construct(self.ctx, loc, type_, args)

    def emit_if(
        self,
        loc: Location | None,
        condition_value: int,
        condition_block: int,
        true_statement_block: int,
        false_statement_block: int,
        flags: int = 0,
    ) -> None:
        code_gen_stmt.emit_if(
            self.ctx,
            loc,
            condition_value,
            condition_block,
            true_statement_block,
            false_statement_block,
            flags,
        )

    def emit_phi(
        self,
        loc: Location | None,
        condition_value: int,
        condition_block: int,
        true_value: int,
        true_statement_block: int,
        false_value: int,
        false_statement_block: int,
        type_: Type,
    ) -> int:
        return code_gen_stmt.emit_phi(
            self.ctx,
            loc,
            condition_value,
            condition_block,
            true_value,
            true_statement_block,
            false_value,
            false_statement_block,
            type_,
        )

    def emit_loop(
        self,
        loc: Location | None,
        condition_value: int,
        prev_block: int,
        header_block: int,
        condition_block: int,
        loop_block: int,
        continue_block: int,
        flags: int = 0,
    ) -> None:
        code_gen_stmt.emit_loop(
            self.ctx,
            loc,
            condition_value,
            prev_block,
            header_block,
            condition_block,
            loop_block,
            continue_block,
            flags,
        )

    def emit_switch(
        self,
        loc: Location | None,
        selector_value: int,
        selector_block: int,
        default_label: int,
        cases: list[tuple[int, int]],
        flags: int = 0,
    ) -> None:
        code_gen_stmt.emit_switch(
            self.ctx, loc, selector_value, selector_block, default_label, cases, flags
        )

    def is_in_block(self) -> bool:
        return self.ctx.is_in_block()

    def is_in_function(self) -> bool:
        return self.ctx.is_in_function()

    def create_block(self) -> int:
        return code_gen_stmt.create_block(self.ctx)

    def set_block(self, block_id: int) -> int:
        return code_gen_stmt.set_block(self.ctx, block_id)

    def enter_block(self, block_id: int) -> None:
        code_gen_stmt.enter_block(self.ctx, block_id)

    def leave_block_and_kill(self) -> int:
        return code_gen_stmt.leave_block_and_kill(self.ctx)

    def leave_block_and_return(self, value: int = 0) -> int:
        return code_gen_stmt.leave_block_and_return(self.ctx, value)

    def leave_block_and_switch(self, value: int, default_target: int) -> int:
        return code_gen_stmt.leave_block_and_switch(self.ctx, value, default_target)

    def leave_block_and_branch(self, target: int, loop_flow: int = 0) -> int:
        return code_gen_stmt.leave_block_and_branch(self.ctx, target, loop_flow)

    def leave_block_and_branch_conditional(
        self, condition: int, true_target: int, false_target: int
    ) -> int:
        return code_gen_stmt.leave_block_and_branch_conditional(
            self.ctx, condition, true_target, false_target
        )

    def leave_function(self) -> None:
        code_gen_stmt.leave_function(self.ctx)


def create_codegen(config: CodegenConfig | None = None) -> Codegen:
    """Create a GLSL code generator for one compilation unit.

    Args:
        config: Optional configuration, defaults are used when omitted

    Returns:
        A fresh code generator
    """
    return GLSLCodegen(config)
