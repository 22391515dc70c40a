"""
Pytest configuration and shared fixtures for code generator tests.

This module contains fixtures that are shared across multiple test modules.
"""

import pytest

from fx2glsl.codegen import (
    BaseType,
    CodegenConfig,
    Constant,
    Expression,
    GLSLCodegen,
    Operation,
    OperationKind,
    Type,
)
from fx2glsl.codegen.code_block import render_statements
from fx2glsl.codegen.context import CompilationContext


@pytest.fixture
def config():
    """Fixture providing a configuration without #line directives."""
    return CodegenConfig(line_directives=False)


@pytest.fixture
def ctx(config):
    """Fixture providing a fresh compilation context."""
    return CompilationContext(config=config)


@pytest.fixture
def codegen(config):
    """Fixture providing a fresh code generator."""
    return GLSLCodegen(config)


@pytest.fixture
def block(codegen):
    """Fixture providing the id of a new block the code generator is positioned in."""
    block_id = codegen.create_block()
    codegen.set_block(block_id)
    return block_id


@pytest.fixture
def lines_of(codegen):
    """Fixture providing a function that renders one block to lines."""

    def render(block_id: int) -> list[str]:
        return render_statements(codegen.ctx.blocks[block_id].statements).splitlines()

    return render


@pytest.fixture
def constant(codegen):
    """Fixture providing a function that binds a constant and returns its id."""

    def bind(type_: Type, *values) -> int:
        return codegen.emit_constant(type_, Constant(values=list(values)))

    return bind


@pytest.fixture
def member_of():
    """Fixture providing a function that builds a struct member access chain.

    The struct defaults to ``base`` itself, as for the ``_Globals`` buffer.
    """

    def build(
        base: int, index: int, type_: Type, struct_id: int | None = None
    ) -> Expression:
        return Expression(
            type=type_,
            base=base,
            ops=[
                Operation(
                    OperationKind.MEMBER,
                    from_type=Type(BaseType.STRUCT, definition=struct_id or base),
                    to_type=type_,
                    index=index,
                )
            ],
        )

    return build
