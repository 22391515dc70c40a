"""Tests for statement nodes, block storage and structural rewrites."""

from fx2glsl.codegen.code_block import (
    Assignment,
    BlockStore,
    CodeWriter,
    Declaration,
    Directive,
    DoWhileLoop,
    FunctionDefinition,
    IfStatement,
    SimpleStatement,
    StructDefinition,
    SwitchCase,
    SwitchStatement,
    WhileLoop,
    make_mutable,
    render_statements,
    to_assignment,
)


class TestCodeWriter:
    """Test line collection and indentation."""

    def test_block_indents(self):
        # Arrange
        out = CodeWriter()

        # Act
        with out.block("void f()"):
            out.add_line("return;")

        # Assert
        assert out.get_code() == "void f() {\n    return;\n}\n"

    def test_directives_never_indented(self):
        out = CodeWriter()

        with out.block("void f()"):
            out.add_line("#line 3")

        assert out.lines[1] == "#line 3"

    def test_custom_indent(self):
        out = CodeWriter(indent_text="\t")

        with out.block("if (c)"):
            out.add_line("x = 1;")

        assert out.lines[1] == "\tx = 1;"


class TestStatements:
    """Test rendering of statement nodes."""

    def test_declaration(self):
        assert render_statements([Declaration("float", "x")]) == "float x;\n"
        assert (
            render_statements([Declaration("vec2", "_4", "", "vec2(0.0, 1.0)", is_const=True)])
            == "const vec2 _4 = vec2(0.0, 1.0);\n"
        )
        assert render_statements([Declaration("int", "a", "[3]")]) == "int a[3];\n"

    def test_if_without_else(self):
        # Arrange
        statement = IfStatement("_3", [Assignment("x", "_4")])

        # Act
        result = render_statements([statement])

        # Assert
        assert result == "if (_3) {\n    x = _4;\n}\n"

    def test_if_with_else(self):
        statement = IfStatement("_3", [SimpleStatement("discard")], [SimpleStatement("return")])

        result = render_statements([statement])

        assert result == "if (_3) {\n    discard;\n} else {\n    return;\n}\n"

    def test_loops(self):
        assert render_statements([WhileLoop("c", [SimpleStatement("break")])]) == (
            "while (c) {\n    break;\n}\n"
        )
        assert render_statements([DoWhileLoop("c", [])]) == "do {\n} while (c);\n"

    def test_switch(self):
        # Arrange
        statement = SwitchStatement(
            "_5",
            [SwitchCase(1, [SimpleStatement("break")])],
            [SimpleStatement("break")],
        )

        # Act
        lines = render_statements([statement]).splitlines()

        # Assert
        assert lines == [
            "switch (_5) {",
            "    case 1: {",
            "        break;",
            "    }",
            "    default: {",
            "        break;",
            "    }",
            "}",
        ]

    def test_switch_without_default(self):
        statement = SwitchStatement("s", [SwitchCase(0, [])])

        assert "default" not in render_statements([statement])

    def test_struct(self):
        result = render_statements([StructDefinition("Light", ["vec3 dir", "float power"])])

        assert result == "struct Light {\n    vec3 dir;\n    float power;\n};\n"

    def test_function_without_body(self):
        assert render_statements([FunctionDefinition("void main()")]) == "void main() {\n}\n"

    def test_nested_directive_stays_in_column_zero(self):
        statement = IfStatement("c", [Directive("#line 9"), SimpleStatement("discard")])

        lines = render_statements([statement]).splitlines()

        assert lines[1] == "#line 9"
        assert lines[2] == "    discard;"


class TestBlockStore:
    """Test block storage."""

    def test_blocks_created_on_access(self):
        store = BlockStore()

        assert 5 not in store
        assert store[5].is_empty()
        assert 5 in store

    def test_copy_is_independent(self):
        # Arrange
        store = BlockStore()
        store[1].append(SimpleStatement("discard"))

        # Act
        copied = store[1].copy_statements()
        copied.append(SimpleStatement("return"))

        # Assert
        assert len(store[1].statements) == 1


class TestRewrites:
    """Test rewrites used to turn loop conditions into mutable bindings."""

    def test_make_mutable_drops_const(self):
        # Arrange
        statements = [
            Declaration("float", "_3", value="1.0", is_const=True),
            Declaration("bool", "_4", value="_3 < 2.0", is_const=True),
        ]

        # Act
        result = make_mutable(statements, "_4")

        # Assert
        assert render_statements(result) == "const float _3 = 1.0;\nbool _4 = _3 < 2.0;\n"
        assert statements[1].is_const

    def test_make_mutable_targets_last_declaration(self):
        statements = [
            Declaration("bool", "_4", value="a", is_const=True),
            Declaration("bool", "_4", value="b", is_const=True),
        ]

        result = make_mutable(statements, "_4")

        assert result[0].is_const
        assert not result[1].is_const

    def test_to_assignment(self):
        statements = [Declaration("bool", "_4", value="_3 < 2.0", is_const=True)]

        result = to_assignment(statements, "_4")

        assert render_statements(result) == "_4 = _3 < 2.0;\n"

    def test_to_assignment_drops_uninitialized_declaration(self):
        statements = [Declaration("bool", "_4"), SimpleStatement("discard")]

        result = to_assignment(statements, "_4")

        assert render_statements(result) == "discard;\n"

    def test_missing_name_is_noop(self):
        statements = [Declaration("int", "_2", value="1", is_const=True)]

        assert make_mutable(statements, "_9") == statements
        assert to_assignment(statements, "_9") == statements
