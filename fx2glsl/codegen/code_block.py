"""
Per-block statement storage and rendering.

Every IR basic block accumulates a list of statement nodes. Structured control
flow is assembled by copying the statement lists of child blocks into control
nodes, so rewrites such as dropping ``const`` from a loop condition are done
on nodes instead of on rendered text.
"""

import dataclasses
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field


@dataclass
class CodeWriter:
    """Collects rendered lines with indentation."""

    indent_text: str = "    "
    indent_level: int = 0
    lines: list[str] = field(default_factory=list)

    @contextmanager
    def block(self, opening: str, closing: str = "}") -> Iterator[None]:
        """Context manager for a braced block."""
        self.add_line(f"{opening} {{")
        self.indent_level += 1
        try:
            yield
        finally:
            self.indent_level -= 1
            self.add_line(closing)

    def add_line(self, line: str) -> None:
        """Add line with proper indentation, preprocessor lines stay unindented."""
        if line.startswith("#"):
            self.lines.append(line)
            return

        self.lines.append(f"{self.indent_text * self.indent_level}{line}")

    def write_all(self, statements: list["Statement"]) -> None:
        for statement in statements:
            statement.write(self)

    def get_code(self) -> str:
        """Get generated code, terminated by a newline."""
        return "".join(f"{line}\n" for line in self.lines)


class Statement:
    """Base class of all statement nodes."""

    def write(self, out: CodeWriter) -> None:
        raise NotImplementedError


@dataclass
class Directive(Statement):
    """Preprocessor line such as ``#line 12`` or ``#pragma unroll``."""

    text: str

    def write(self, out: CodeWriter) -> None:
        out.add_line(self.text)


@dataclass
class Declaration(Statement):
    """Variable declaration with optional initializer.

    Attributes:
        type_name: GLSL type spelling
        name: Declared name
        array_suffix: ``[N]`` for arrays, empty otherwise
        value: Initializer expression, None for no initializer
        is_const: Whether the binding is immutable
    """

    type_name: str
    name: str
    array_suffix: str = ""
    value: str | None = None
    is_const: bool = False

    def write(self, out: CodeWriter) -> None:
        qualifier = "const " if self.is_const else ""
        initializer = f" = {self.value}" if self.value is not None else ""
        out.add_line(
            f"{qualifier}{self.type_name} {self.name}{self.array_suffix}{initializer};"
        )


@dataclass
class Assignment(Statement):
    """Assignment into an existing lvalue path."""

    target: str
    value: str

    def write(self, out: CodeWriter) -> None:
        out.add_line(f"{self.target} = {self.value};")


@dataclass
class SimpleStatement(Statement):
    """Bare expression or jump statement such as a void call or ``break``."""

    text: str

    def write(self, out: CodeWriter) -> None:
        out.add_line(f"{self.text};")


@dataclass
class IfStatement(Statement):
    """``if``/``else`` with inlined branch bodies, an empty else arm is omitted."""

    condition: str
    true_body: list[Statement] = field(default_factory=list)
    false_body: list[Statement] = field(default_factory=list)

    def write(self, out: CodeWriter) -> None:
        closing = "} else {" if self.false_body else "}"
        with out.block(f"if ({self.condition})", closing):
            out.write_all(self.true_body)
        if self.false_body:
            out.indent_level += 1
            out.write_all(self.false_body)
            out.indent_level -= 1
            out.add_line("}")


@dataclass
class WhileLoop(Statement):
    """Pre-test loop."""

    condition: str
    body: list[Statement] = field(default_factory=list)

    def write(self, out: CodeWriter) -> None:
        with out.block(f"while ({self.condition})"):
            out.write_all(self.body)


@dataclass
class DoWhileLoop(Statement):
    """Post-test loop."""

    condition: str
    body: list[Statement] = field(default_factory=list)

    def write(self, out: CodeWriter) -> None:
        with out.block("do", f"}} while ({self.condition});"):
            out.write_all(self.body)


@dataclass
class SwitchCase:
    """Single ``case`` arm, its body already includes fallthrough blocks."""

    literal: int
    body: list[Statement] = field(default_factory=list)


@dataclass
class SwitchStatement(Statement):
    """``switch`` with braced case arms and an optional ``default`` arm."""

    selector: str
    cases: list[SwitchCase] = field(default_factory=list)
    default_body: list[Statement] | None = None

    def write(self, out: CodeWriter) -> None:
        with out.block(f"switch ({self.selector})"):
            for case in self.cases:
                with out.block(f"case {case.literal}:"):
                    out.write_all(case.body)
            if self.default_body is not None:
                with out.block("default:"):
                    out.write_all(self.default_body)


@dataclass
class StructDefinition(Statement):
    """Struct type definition, members are rendered ``type name`` pairs."""

    name: str
    members: list[str] = field(default_factory=list)

    def write(self, out: CodeWriter) -> None:
        with out.block(f"struct {self.name}", "};"):
            for member in self.members:
                out.add_line(f"{member};")


@dataclass
class FunctionDefinition(Statement):
    """Function definition, the body is attached when the function is left."""

    signature: str
    body: list[Statement] | None = None

    def write(self, out: CodeWriter) -> None:
        with out.block(self.signature):
            out.write_all(self.body or [])


@dataclass
class Block:
    """Append-only statement list of one IR basic block."""

    statements: list[Statement] = field(default_factory=list)

    def append(self, statement: Statement) -> None:
        self.statements.append(statement)

    def extend(self, statements: list[Statement]) -> None:
        self.statements.extend(statements)

    def copy_statements(self) -> list[Statement]:
        """Get a copy of the statement list for folding into a parent construct."""
        return list(self.statements)

    def is_empty(self) -> bool:
        return not self.statements


@dataclass
class BlockStore:
    """Blocks keyed by id, created on first access."""

    blocks: dict[int, Block] = field(default_factory=dict)

    def __getitem__(self, block_id: int) -> Block:
        if block_id not in self.blocks:
            self.blocks[block_id] = Block()
        return self.blocks[block_id]

    def __contains__(self, block_id: int) -> bool:
        return block_id in self.blocks


def _find_last_declaration(statements: list[Statement], name: str) -> int:
    for index in range(len(statements) - 1, -1, -1):
        statement = statements[index]
        if isinstance(statement, Declaration) and statement.name == name:
            return index
    return -1


def make_mutable(statements: list[Statement], name: str) -> list[Statement]:
    """Drop the ``const`` qualifier from the last declaration of a name.

    Args:
        statements: Statement list, left unchanged
        name: Declared name

    Returns:
        New statement list
    """
    result = list(statements)
    index = _find_last_declaration(result, name)
    if index >= 0:
        result[index] = dataclasses.replace(result[index], is_const=False)
    return result


def to_assignment(statements: list[Statement], name: str) -> list[Statement]:
    """Turn the last declaration of a name into a plain assignment.

    A declaration without initializer is dropped, since re-declaring the name
    would shadow the binding that is being reassigned.

    Args:
        statements: Statement list, left unchanged
        name: Declared name

    Returns:
        New statement list
    """
    result = list(statements)
    index = _find_last_declaration(result, name)
    if index >= 0:
        declaration = result[index]
        assert isinstance(declaration, Declaration)
        if declaration.value is None:
            del result[index]
        else:
            result[index] = Assignment(declaration.name, declaration.value)
    return result


def render_statements(
    statements: list[Statement], indent_text: str = "    ", indent_level: int = 0
) -> str:
    """Render a statement list to GLSL text."""
    out = CodeWriter(indent_text=indent_text, indent_level=indent_level)
    out.write_all(statements)
    return out.get_code()
