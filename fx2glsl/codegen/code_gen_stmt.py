"""
GLSL code generation for control flow.

The IR producer hands over basic blocks and asks for structured statements
once all blocks of a construct are complete. This module tracks the current
block cursor and folds the statements of child blocks into ``if``, loop and
``switch`` statements.
"""

from enum import IntEnum, IntFlag

from fx2glsl.codegen.code_block import (
    Assignment,
    Declaration,
    Directive,
    DoWhileLoop,
    IfStatement,
    SimpleStatement,
    Statement,
    SwitchCase,
    SwitchStatement,
    WhileLoop,
    make_mutable,
    to_assignment,
)
from fx2glsl.codegen.context import CompilationContext
from fx2glsl.codegen.errors import require
from fx2glsl.codegen.models import Location, Type
from fx2glsl.codegen.type_lowering import render_array_suffix, render_type


class ControlFlags(IntFlag):
    """Branch and loop hints attached to control flow statements."""

    NONE = 0
    FLATTEN = 1
    DONT_FLATTEN = 2
    UNROLL = 4
    DONT_UNROLL = 8


class LoopFlow(IntEnum):
    """How an unconditional branch leaves its block."""

    BRANCH = 0
    BREAK = 1
    CONTINUE = 2
    FALLTHROUGH = 3


HINT_PRAGMAS: list[tuple[ControlFlags, str]] = [
    (ControlFlags.FLATTEN, "#pragma flatten"),
    (ControlFlags.DONT_FLATTEN, "#pragma branch"),
    (ControlFlags.UNROLL, "#pragma unroll"),
    (ControlFlags.DONT_UNROLL, "#pragma loop"),
]


def _emit_hints(ctx: CompilationContext, flags: int) -> None:
    for flag, pragma in HINT_PRAGMAS:
        if flags & flag:
            ctx.code().append(Directive(pragma))


def create_block(ctx: CompilationContext) -> int:
    return ctx.make_id()


def set_block(ctx: CompilationContext, block_id: int) -> int:
    """Move the cursor to a block and return the previous one."""
    ctx.last_block = ctx.current_block
    ctx.current_block = block_id
    return ctx.last_block


def enter_block(ctx: CompilationContext, block_id: int) -> None:
    """Move the cursor to a block without remembering the previous one."""
    ctx.current_block = block_id


def leave_block_and_kill(ctx: CompilationContext) -> int:
    """Leave the current block with ``discard``.

    Outside a block nothing is written and 0 is returned, unlike the branch
    and switch exits which return the last block.
    """
    if not ctx.is_in_block():
        return 0

    ctx.code().append(SimpleStatement("discard"))
    return set_block(ctx, 0)


def leave_block_and_return(ctx: CompilationContext, value: int = 0) -> int:
    """Leave the current block with a ``return`` statement.

    Outside a block nothing is written and 0 is returned, as for
    ``leave_block_and_kill``.
    """
    if not ctx.is_in_block():
        return 0

    text = f"return {ctx.name_of(value)}" if value != 0 else "return"
    ctx.code().append(SimpleStatement(text))
    return set_block(ctx, 0)


def leave_block_and_switch(ctx: CompilationContext, value: int, default_target: int) -> int:
    """Leave the current block towards a ``switch``, emitted later by ``emit_switch``."""
    if not ctx.is_in_block():
        return ctx.last_block

    return set_block(ctx, 0)


def leave_block_and_branch(
    ctx: CompilationContext, target: int, loop_flow: int = LoopFlow.BRANCH
) -> int:
    """Leave the current block with an unconditional branch.

    Args:
        ctx: Compilation context
        target: Id of the target block
        loop_flow: Plain branch, ``break``, ``continue`` or switch fallthrough

    Returns:
        Id of the block that was left
    """
    if not ctx.is_in_block():
        return ctx.last_block

    if loop_flow == LoopFlow.BREAK:
        ctx.code().append(SimpleStatement("break"))
    elif loop_flow == LoopFlow.CONTINUE:
        ctx.code().append(SimpleStatement("continue"))
    elif loop_flow == LoopFlow.FALLTHROUGH:
        ctx.switch_fallthrough_blocks.setdefault(ctx.current_block, []).append(target)

    return set_block(ctx, 0)


def leave_block_and_branch_conditional(
    ctx: CompilationContext, condition: int, true_target: int, false_target: int
) -> int:
    """Leave the current block towards an ``if`` or loop emitted later."""
    if not ctx.is_in_block():
        return ctx.last_block

    return set_block(ctx, 0)


def leave_function(ctx: CompilationContext) -> None:
    """Close the innermost open function with the statements of its last block."""
    require(ctx.is_in_function() and bool(ctx.open_functions), "Not inside a function")

    function = ctx.open_functions.pop()
    function.body = ctx.blocks[ctx.last_block].copy_statements()
    ctx.scope_level -= 1


def emit_if(
    ctx: CompilationContext,
    loc: Location | None,
    condition_value: int,
    condition_block: int,
    true_statement_block: int,
    false_statement_block: int,
    flags: int = ControlFlags.NONE,
) -> None:
    """Generate an ``if``/``else`` statement from its blocks.

    Args:
        ctx: Compilation context
        loc: Source location
        condition_value: Id of the boolean condition
        condition_block: Block that evaluates the condition
        true_statement_block: Block executed when the condition holds
        false_statement_block: Block executed otherwise
        flags: Branch hints
    """
    require(
        0 not in (condition_value, condition_block, true_statement_block, false_statement_block),
        "if statement requires a condition and three blocks",
        loc,
    )

    ctx.code().extend(ctx.blocks[condition_block].copy_statements())
    ctx.emit_location(loc)
    _emit_hints(ctx, flags)
    ctx.code().append(
        IfStatement(
            ctx.name_of(condition_value),
            ctx.blocks[true_statement_block].copy_statements(),
            ctx.blocks[false_statement_block].copy_statements(),
        )
    )


def emit_phi(
    ctx: CompilationContext,
    loc: Location | None,
    condition_value: int,
    condition_block: int,
    true_value: int,
    true_statement_block: int,
    false_value: int,
    false_statement_block: int,
    type_: Type,
) -> int:
    """Merge two values from the arms of a condition into one mutable binding.

    An arm whose block is the condition block itself adds no statements of
    its own, so only the assignment is written there.

    Returns:
        Id of the merged value
    """
    require(
        0
        not in (
            condition_value,
            condition_block,
            true_value,
            true_statement_block,
            false_value,
            false_statement_block,
        ),
        "phi requires a condition, two values and their blocks",
        loc,
    )

    res = ctx.make_id()
    name = ctx.name_of(res)

    def arm(block_id: int, value: int) -> list[Statement]:
        statements: list[Statement] = []
        if block_id != condition_block:
            statements = ctx.blocks[block_id].copy_statements()
        statements.append(Assignment(name, ctx.name_of(value)))
        return statements

    ctx.code().extend(ctx.blocks[condition_block].copy_statements())
    ctx.code().append(Declaration(render_type(ctx, type_), name, render_array_suffix(type_)))
    ctx.emit_location(loc)
    ctx.code().append(
        IfStatement(
            ctx.name_of(condition_value),
            arm(true_statement_block, true_value),
            arm(false_statement_block, false_value),
        )
    )

    return res


def emit_loop(
    ctx: CompilationContext,
    loc: Location | None,
    condition_value: int,
    prev_block: int,
    header_block: int,
    condition_block: int,
    loop_block: int,
    continue_block: int,
    flags: int = ControlFlags.NONE,
) -> None:
    """Generate a loop from its blocks.

    Without a condition block the loop is post-test (``do``/``while``) and the
    continue block computes the condition. Otherwise it is pre-test and the
    condition block is evaluated once before the loop and again at the end of
    every iteration. In both cases the condition is a mutable ``bool``
    declared before the loop and reassigned inside it.

    Args:
        ctx: Compilation context
        loc: Source location
        condition_value: Id of the boolean loop condition
        prev_block: Block preceding the loop
        header_block: Loop header block, carries no statements in GLSL
        condition_block: Block evaluating the condition or 0 for post-test loops
        loop_block: Loop body
        continue_block: Block executed at the end of every iteration
        flags: Loop hints
    """
    require(
        0 not in (condition_value, prev_block, loop_block, continue_block),
        "loop requires a condition, a previous block, a body and a continue block",
        loc,
    )

    condition = ctx.name_of(condition_value)
    ctx.code().extend(ctx.blocks[prev_block].copy_statements())

    if condition_block == 0:
        ctx.code().append(Declaration("bool", condition))
    else:
        ctx.code().extend(
            make_mutable(ctx.blocks[condition_block].copy_statements(), condition)
        )

    ctx.emit_location(loc)
    _emit_hints(ctx, flags)

    body = ctx.blocks[loop_block].copy_statements()
    continue_statements = ctx.blocks[continue_block].copy_statements()

    if condition_block == 0:
        body += to_assignment(continue_statements, condition)
        ctx.code().append(DoWhileLoop(condition, body))
    else:
        body += continue_statements
        body += to_assignment(ctx.blocks[condition_block].copy_statements(), condition)
        ctx.code().append(WhileLoop(condition, body))


def _case_body(ctx: CompilationContext, label: int, seen: set[int]) -> list[Statement]:
    """Statements of a case followed by every block it falls into, in order."""
    seen.add(label)
    statements = ctx.blocks[label].copy_statements()
    for fallthrough in ctx.switch_fallthrough_blocks.get(label, []):
        if fallthrough not in seen:
            statements += _case_body(ctx, fallthrough, seen)
    return statements


def emit_switch(
    ctx: CompilationContext,
    loc: Location | None,
    selector_value: int,
    selector_block: int,
    default_label: int,
    cases: list[tuple[int, int]],
    flags: int = ControlFlags.NONE,
) -> None:
    """Generate a ``switch`` statement from its blocks.

    Args:
        ctx: Compilation context
        loc: Source location
        selector_value: Id of the selector value
        selector_block: Block that evaluates the selector
        default_label: Default block, the current block when there is none
        cases: (case literal, case block) pairs in source order
        flags: Branch hints
    """
    require(
        0 not in (selector_value, selector_block, default_label),
        "switch requires a selector, a selector block and a default block",
        loc,
    )

    ctx.code().extend(ctx.blocks[selector_block].copy_statements())
    ctx.emit_location(loc)
    _emit_hints(ctx, flags)

    switch = SwitchStatement(ctx.name_of(selector_value))
    for literal, label in cases:
        require(label != 0, f"case {literal} has no block", loc)
        switch.cases.append(SwitchCase(literal, _case_body(ctx, label, set())))

    if default_label != ctx.current_block:
        switch.default_body = _case_body(ctx, default_label, set())

    ctx.code().append(switch)
