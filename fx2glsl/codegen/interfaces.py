"""Interface between the IR producer and a code generator.

The producer calls declaration and emission operations in program order and
threads the returned ids back in as operands of later calls. When the unit is
complete it asks for the assembled module.
"""

from abc import ABC, abstractmethod

from fx2glsl.codegen.intrinsics import Intrinsic
from fx2glsl.codegen.models import (
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


class Codegen(ABC):
    """Abstract code generator driven by the IR producer."""

    @abstractmethod
    def write_result(self) -> Module:
        """Assemble the module of the compilation unit.

        Returns:
            Module with source text and resource descriptors
        """
        pass

    @abstractmethod
    def find_struct(self, id_: int) -> StructInfo:
        pass

    @abstractmethod
    def find_function(self, id_: int) -> FunctionInfo:
        pass

    @abstractmethod
    def define_struct(self, loc: Location | None, info: StructInfo) -> int:
        pass

    @abstractmethod
    def define_texture(self, loc: Location | None, info: TextureInfo) -> int:
        pass

    @abstractmethod
    def define_sampler(self, loc: Location | None, info: SamplerInfo) -> int:
        pass

    @abstractmethod
    def define_uniform(self, loc: Location | None, info: UniformInfo) -> int:
        pass

    @abstractmethod
    def define_variable(
        self,
        loc: Location | None,
        type_: Type,
        name: str | None = None,
        is_global: bool = False,
        initializer_value: int = 0,
    ) -> int:
        pass

    @abstractmethod
    def define_function(self, loc: Location | None, info: FunctionInfo) -> int:
        pass

    @abstractmethod
    def define_technique(self, info: TechniqueInfo) -> None:
        pass

    @abstractmethod
    def create_entry_point(self, func: FunctionInfo, is_ps: bool) -> None:
        pass

    @abstractmethod
    def emit_load(self, chain: Expression) -> int:
        pass

    @abstractmethod
    def emit_store(self, chain: Expression, value: int) -> None:
        pass

    @abstractmethod
    def emit_constant(self, type_: Type, data: Constant) -> int:
        pass

    @abstractmethod
    def emit_unary_op(
        self, loc: Location | None, op: TokenId, res_type: Type, val: int
    ) -> int:
        pass

    @abstractmethod
    def emit_binary_op(
        self,
        loc: Location | None,
        op: TokenId,
        res_type: Type,
        type_: Type,
        lhs: int,
        rhs: int,
    ) -> int:
        pass

    @abstractmethod
    def emit_ternary_op(
        self,
        loc: Location | None,
        op: TokenId,
        res_type: Type,
        condition: int,
        true_value: int,
        false_value: int,
    ) -> int:
        pass

    @abstractmethod
    def emit_call(
        self, loc: Location | None, function: int, res_type: Type, args: list[Expression]
    ) -> int:
        pass

    @abstractmethod
    def emit_call_intrinsic(
        self,
        loc: Location | None,
        intrinsic: Intrinsic,
        res_type: Type,
        args: list[Expression],
    ) -> int:
        pass

    @abstractmethod
    def emit_construct(
        self, loc: Location | None, type_: Type, args: list[Expression]
    ) -> int:
        pass

    @abstractmethod
    def emit_if(
        self,
        loc: Location | None,
        condition_value: int,
        condition_block: int,
        true_statement_block: int,
        false_statement_block: int,
        flags: int = 0,
    ) -> None:
        pass

    @abstractmethod
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
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    def emit_switch(
        self,
        loc: Location | None,
        selector_value: int,
        selector_block: int,
        default_label: int,
        cases: list[tuple[int, int]],
        flags: int = 0,
    ) -> None:
        pass

    @abstractmethod
    def is_in_block(self) -> bool:
        pass

    @abstractmethod
    def is_in_function(self) -> bool:
        pass

    @abstractmethod
    def create_block(self) -> int:
        pass

    @abstractmethod
    def set_block(self, block_id: int) -> int:
        pass

    @abstractmethod
    def enter_block(self, block_id: int) -> None:
        pass

    @abstractmethod
    def leave_block_and_kill(self) -> int:
        pass

    @abstractmethod
    def leave_block_and_return(self, value: int = 0) -> int:
        pass

    @abstractmethod
    def leave_block_and_switch(self, value: int, default_target: int) -> int:
        pass

    @abstractmethod
    def leave_block_and_branch(self, target: int, loop_flow: int = 0) -> int:
        pass

    @abstractmethod
    def leave_block_and_branch_conditional(
        self, condition: int, true_target: int, false_target: int
    ) -> int:
        pass

    @abstractmethod
    def leave_function(self) -> None:
        pass
