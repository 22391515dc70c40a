"""Tests for expression code generation."""

import pytest

from fx2glsl.codegen import (
    BaseType,
    CodegenError,
    Constant,
    Expression,
    FunctionInfo,
    GLSLCodegen,
    Intrinsic,
    Location,
    Operation,
    OperationKind,
    StructInfo,
    StructMember,
    TokenId,
    Type,
    UniformInfo,
)
from fx2glsl.codegen.code_gen_expr import generate_swizzle
from fx2glsl.codegen.models import BOOL, FLOAT, FLOAT2, FLOAT3, FLOAT4, FLOAT4X4, INT, VOID

BOOL3 = Type(BaseType.BOOL, 3, 1)


class TestSwizzle:
    """Test swizzle lane letters."""

    def test_lanes(self):
        assert generate_swizzle((0, 1, -1, -1)) == "xy"
        assert generate_swizzle((3, 2, 1, 0)) == "wzyx"
        assert generate_swizzle((2, -1, 0, 0)) == "z"

    def test_lane_out_of_range(self):
        with pytest.raises(CodegenError, match="out of range"):
            generate_swizzle((0, 4, -1, -1))

    def test_empty_swizzle(self):
        with pytest.raises(CodegenError, match="no lanes"):
            generate_swizzle((-1, -1, -1, -1))


class TestLoadStore:
    """Test loads and stores through access chains."""

    def test_load_binds_const(self, codegen, block, lines_of):
        # Arrange
        var = codegen.define_variable(None, FLOAT4, "color")

        # Act
        res = codegen.emit_load(Expression(type=FLOAT4, base=var))

        # Assert
        assert lines_of(block)[-1] == f"const vec4 _{res} = color;"

    def test_uniform_member_is_prefixed(self, codegen, block, lines_of, member_of):
        # Arrange
        cbuffer = codegen.define_uniform(None, UniformInfo(name="tint", type=FLOAT4))

        # Act
        res = codegen.emit_load(member_of(cbuffer, 0, FLOAT4))

        # Assert
        assert lines_of(block) == [f"const vec4 _{res} = _Globals_tint;"]

    def test_struct_member_uses_dot(self, codegen, block, lines_of, member_of):
        # Arrange
        struct_id = codegen.define_struct(
            None,
            StructInfo(
                name="Light",
                unique_name="Light",
                member_list=[StructMember(FLOAT3, "dir"), StructMember(FLOAT, "power")],
            ),
        )
        light = codegen.define_variable(None, Type(BaseType.STRUCT, definition=struct_id), "light")

        # Act
        res = codegen.emit_load(member_of(light, 1, FLOAT, struct_id))

        # Assert
        assert lines_of(block)[-1] == f"const float _{res} = light.power;"

    def test_index_swizzle_and_cast(self, codegen, block, lines_of, constant):
        # Arrange
        array = codegen.define_variable(None, Type(BaseType.FLOAT, 4, 1, array_length=4), "points")
        index = constant(INT, 2)
        chain = Expression(
            type=Type(BaseType.INT, 2, 1),
            base=array,
            ops=[
                Operation(OperationKind.INDEX, index=index),
                Operation(OperationKind.SWIZZLE, swizzle=(0, 1, -1, -1)),
                Operation(OperationKind.CAST, from_type=FLOAT2, to_type=Type(BaseType.INT, 2, 1)),
            ],
        )

        # Act
        res = codegen.emit_load(chain)

        # Assert
        assert lines_of(block)[-1] == f"const ivec2 _{res} = ivec2(points[_{index}].xy);"

    def test_store_skips_casts(self, codegen, block, lines_of, constant):
        # Arrange
        var = codegen.define_variable(None, FLOAT4, "color")
        value = constant(FLOAT, 1.0)
        chain = Expression(
            type=FLOAT,
            base=var,
            ops=[
                Operation(OperationKind.SWIZZLE, swizzle=(3, -1, -1, -1)),
                Operation(OperationKind.CAST, from_type=FLOAT, to_type=INT),
            ],
        )

        # Act
        codegen.emit_store(chain, value)

        # Assert
        assert lines_of(block)[-1] == f"color.w = _{value};"

    def test_inline_constant_load(self, codegen, block, lines_of):
        chain = Expression(type=FLOAT2, is_constant=True, constant=Constant([0.5, 1.0]))

        res = codegen.emit_load(chain)

        assert lines_of(block) == [f"const vec2 _{res} = vec2(0.5, 1.0);"]

    def test_line_directive_before_located_load(self):
        # Arrange
        codegen = GLSLCodegen()
        block = codegen.create_block()
        codegen.set_block(block)
        var = codegen.define_variable(None, FLOAT, "x")

        # Act
        codegen.emit_load(Expression(type=FLOAT, base=var, location=Location("a.fx", 12)))

        # Assert
        statements = codegen.ctx.blocks[block].statements
        assert statements[-2].text == "#line 12"


class TestMemberNames:
    """Test that member declarations and member accesses agree on names."""

    @pytest.mark.parametrize(
        "member, declared",
        [
            ("sample", "_sample"),
            ("texture", "_texture"),
            ("gl_Normal", "_gl_Normal"),
            ("a__b", "a_USb"),
        ],
    )
    def test_struct_member_access_matches_declaration(
        self, codegen, block, lines_of, member_of, member, declared
    ):
        # Arrange
        struct_id = codegen.define_struct(
            None, StructInfo(name="S", unique_name="S", member_list=[StructMember(FLOAT, member)])
        )
        var = codegen.define_variable(None, Type(BaseType.STRUCT, definition=struct_id), "v")

        # Act
        res = codegen.emit_load(member_of(var, 0, FLOAT, struct_id))

        # Assert
        lines = lines_of(block)
        assert f"    float {declared};" in lines
        assert lines[-1] == f"const float _{res} = v.{declared};"

    def test_struct_members_escaping_alike_stay_distinct(
        self, codegen, block, lines_of, member_of
    ):
        # Arrange
        struct_id = codegen.define_struct(
            None,
            StructInfo(
                name="S",
                unique_name="S",
                member_list=[StructMember(FLOAT, "a__b"), StructMember(INT, "a_USb")],
            ),
        )
        var = codegen.define_variable(None, Type(BaseType.STRUCT, definition=struct_id), "v")

        # Act
        first = codegen.emit_load(member_of(var, 0, FLOAT, struct_id))
        second = codegen.emit_load(member_of(var, 1, INT, struct_id))

        # Assert
        lines = lines_of(block)
        assert "    float a_USb;" in lines
        assert "    int a_USb1;" in lines
        assert lines[-2:] == [
            f"const float _{first} = v.a_USb;",
            f"const int _{second} = v.a_USb1;",
        ]

    @pytest.mark.parametrize(
        "name, declared",
        [
            ("sample", "_Globals_USsample"),
            ("gl_Time", "_Globals_USgl_Time"),
            ("a__b", "_Globals_a_USb"),
        ],
    )
    def test_uniform_access_matches_declaration(
        self, codegen, block, lines_of, member_of, name, declared
    ):
        # Arrange
        cbuffer = codegen.define_uniform(None, UniformInfo(name=name, type=FLOAT))

        # Act
        res = codegen.emit_load(member_of(cbuffer, 0, FLOAT))

        # Assert
        assert lines_of(cbuffer) == [f"float {declared};"]
        assert lines_of(block) == [f"const float _{res} = {declared};"]


class TestConstants:
    """Test constant bindings."""

    def test_constant_is_const(self, codegen, block, lines_of, constant):
        res = constant(Type(BaseType.UINT, 1, 1), 3)

        assert lines_of(block) == [f"const uint _{res} = 3u;"]

    def test_matrix_constant_transposed(self, codegen, block, lines_of):
        res = codegen.emit_constant(FLOAT4X4, Constant([float(i) for i in range(16)]))

        assert lines_of(block)[0].startswith(f"const mat4x4 _{res} = transpose(mat4x4(0.0, 1.0")

    def test_non_numeric_constant_rejected(self, codegen, block):
        with pytest.raises(CodegenError, match="numeric"):
            codegen.emit_constant(Type(BaseType.SAMPLER), Constant())


class TestOperators:
    """Test unary, binary and ternary operators."""

    def test_scalar_binary(self, codegen, block, lines_of, constant):
        # Arrange
        a, b = constant(FLOAT, 1.0), constant(FLOAT, 2.0)

        # Act
        res = codegen.emit_binary_op(None, TokenId.STAR, FLOAT, FLOAT, a, b)

        # Assert
        assert lines_of(block)[-1] == f"const float _{res} = _{a} * _{b};"

    def test_compound_tokens_lower_to_plain_operator(self, codegen, block, lines_of, constant):
        a, b = constant(INT, 1), constant(INT, 2)

        res = codegen.emit_binary_op(None, TokenId.PLUS_EQUAL, INT, INT, a, b)

        assert lines_of(block)[-1] == f"const int _{res} = _{a} + _{b};"

    @pytest.mark.parametrize(
        "token,function",
        [
            (TokenId.LESS, "lessThan"),
            (TokenId.LESS_EQUAL, "lessThanEqual"),
            (TokenId.GREATER, "greaterThan"),
            (TokenId.GREATER_EQUAL, "greaterThanEqual"),
            (TokenId.EQUAL_EQUAL, "equal"),
            (TokenId.EXCLAIM_EQUAL, "notEqual"),
        ],
    )
    def test_vector_comparisons(self, codegen, block, lines_of, constant, token, function):
        # Arrange
        a, b = constant(FLOAT3, 1.0, 2.0, 3.0), constant(FLOAT3, 3.0, 2.0, 1.0)

        # Act
        res = codegen.emit_binary_op(None, token, BOOL3, FLOAT3, a, b)

        # Assert
        assert lines_of(block)[-1] == f"const bvec3 _{res} = {function}(_{a}, _{b});"

    def test_scalar_comparison_is_infix(self, codegen, block, lines_of, constant):
        a, b = constant(FLOAT, 1.0), constant(FLOAT, 2.0)

        res = codegen.emit_binary_op(None, TokenId.LESS, BOOL, FLOAT, a, b)

        assert lines_of(block)[-1] == f"const bool _{res} = _{a} < _{b};"

    def test_matrix_multiply_is_componentwise(self, codegen, block, lines_of):
        # Arrange
        a = codegen.define_variable(None, FLOAT4X4, "m")
        b = codegen.define_variable(None, FLOAT4X4, "n")

        # Act
        res = codegen.emit_binary_op(None, TokenId.STAR, FLOAT4X4, FLOAT4X4, a, b)

        # Assert
        assert lines_of(block)[-1] == f"const mat4x4 _{res} = matrixCompMult(m, n);"

    def test_float_modulo_uses_helper(self, codegen, block, lines_of, constant):
        # Arrange
        a, b = constant(FLOAT, 5.0), constant(FLOAT, 2.0)

        # Act
        res = codegen.emit_binary_op(None, TokenId.PERCENT, FLOAT, FLOAT, a, b)
        module = codegen.write_result()

        # Assert
        assert lines_of(block)[-1] == f"const float _{res} = _fmod(_{a}, _{b});"
        assert module.code.startswith("#define _fmod(x, y)")

    def test_integer_modulo_is_native(self, codegen, block, lines_of, constant):
        a, b = constant(INT, 5), constant(INT, 2)

        res = codegen.emit_binary_op(None, TokenId.PERCENT, INT, INT, a, b)

        assert lines_of(block)[-1] == f"const int _{res} = _{a} % _{b};"
        assert "#define _fmod" not in codegen.write_result().code

    def test_unsupported_binary_token(self, codegen, block, constant):
        a = constant(INT, 1)

        with pytest.raises(CodegenError, match="Unsupported binary operator: question"):
            codegen.emit_binary_op(None, TokenId.QUESTION, INT, INT, a, a)

    def test_logical_not(self, codegen, block, lines_of, constant):
        # Arrange
        scalar = constant(BOOL, True)
        vector = constant(BOOL3, True, False, True)

        # Act
        scalar_res = codegen.emit_unary_op(None, TokenId.EXCLAIM, BOOL, scalar)
        vector_res = codegen.emit_unary_op(None, TokenId.EXCLAIM, BOOL3, vector)

        # Assert
        lines = lines_of(block)
        assert f"const bool _{scalar_res} = !bool(_{scalar});" in lines
        assert f"const bvec3 _{vector_res} = not(_{vector});" in lines

    def test_negate_and_bitwise_not(self, codegen, block, lines_of, constant):
        value = constant(INT, 3)

        neg = codegen.emit_unary_op(None, TokenId.MINUS, INT, value)
        inv = codegen.emit_unary_op(None, TokenId.TILDE, INT, value)

        assert lines_of(block)[-2:] == [
            f"const int _{neg} = -(_{value});",
            f"const int _{inv} = ~(_{value});",
        ]

    def test_unsupported_unary_token(self, codegen, block, constant):
        value = constant(INT, 3)

        with pytest.raises(CodegenError, match="Unsupported unary operator"):
            codegen.emit_unary_op(None, TokenId.STAR, INT, value)

    def test_ternary(self, codegen, block, lines_of, constant):
        # Arrange
        cond = constant(BOOL, True)
        a, b = constant(FLOAT, 1.0), constant(FLOAT, 2.0)

        # Act
        res = codegen.emit_ternary_op(None, TokenId.QUESTION, FLOAT, cond, a, b)

        # Assert
        assert lines_of(block)[-1] == f"const float _{res} = _{cond} ? _{a} : _{b};"

    def test_ternary_requires_question(self, codegen, block, constant):
        cond = constant(BOOL, True)

        with pytest.raises(CodegenError, match="Unsupported ternary operator"):
            codegen.emit_ternary_op(None, TokenId.PLUS, FLOAT, cond, cond, cond)


class TestCalls:
    """Test user function and intrinsic calls."""

    def test_call(self, codegen, lines_of, constant):
        # Arrange
        function = codegen.define_function(
            None, FunctionInfo(name="shade", unique_name="shade", return_type=FLOAT4)
        )
        block = codegen.create_block()
        codegen.set_block(block)
        arg = constant(FLOAT, 0.5)

        # Act
        res = codegen.emit_call(None, function, FLOAT4, [Expression(type=FLOAT, base=arg)])

        # Assert
        assert lines_of(block)[-1] == f"const vec4 _{res} = shade(_{arg});"

    def test_void_call_is_statement(self, codegen, lines_of):
        function = codegen.define_function(
            None, FunctionInfo(name="touch", unique_name="touch", return_type=VOID)
        )
        block = codegen.create_block()
        codegen.set_block(block)

        res = codegen.emit_call(None, function, VOID, [])

        assert lines_of(block) == ["touch();"]
        assert res != 0

    def test_call_arguments_must_be_plain(self, codegen, block, constant):
        arg = constant(FLOAT2, 1.0, 2.0)
        chain = Expression(
            type=FLOAT, base=arg, ops=[Operation(OperationKind.SWIZZLE, swizzle=(0, -1, -1, -1))]
        )

        with pytest.raises(CodegenError, match="plain values"):
            codegen.emit_call(None, 99, FLOAT, [chain])

    def test_intrinsic(self, codegen, block, lines_of, constant):
        # Arrange
        a, b, t = constant(FLOAT3, 0.0, 0.0, 0.0), constant(FLOAT3, 1.0, 1.0, 1.0), constant(FLOAT, 0.5)
        args = [Expression(type=FLOAT3, base=a), Expression(type=FLOAT3, base=b), Expression(type=FLOAT, base=t)]

        # Act
        res = codegen.emit_call_intrinsic(None, Intrinsic.LERP0, FLOAT3, args)

        # Assert
        assert lines_of(block)[-1] == f"const vec3 _{res} = mix(_{a}, _{b}, _{t});"

    def test_intrinsic_with_result_type(self, codegen, block, lines_of, constant):
        value = constant(FLOAT, -2.0)

        res = codegen.emit_call_intrinsic(
            None, Intrinsic.SIGN0, INT, [Expression(type=FLOAT, base=value)]
        )

        assert lines_of(block)[-1] == f"const int _{res} = int(sign(_{value}));"

    def test_intrinsic_fmod_enables_helper(self, codegen, block, constant):
        a, b = constant(FLOAT, 5.0), constant(FLOAT, 2.0)

        codegen.emit_call_intrinsic(
            None, Intrinsic.FMOD0, FLOAT, [Expression(type=FLOAT, base=a), Expression(type=FLOAT, base=b)]
        )

        assert "#define _fmod" in codegen.write_result().code

    def test_intrinsic_arity_checked(self, codegen, block, constant):
        value = constant(FLOAT, 1.0)

        with pytest.raises(CodegenError, match="expects 3 arguments, got 1"):
            codegen.emit_call_intrinsic(
                None, Intrinsic.CLAMP0, FLOAT, [Expression(type=FLOAT, base=value)]
            )


class TestConstruct:
    """Test constructor calls."""

    def test_vector(self, codegen, block, lines_of, constant):
        # Arrange
        x, y = constant(FLOAT, 1.0), constant(FLOAT, 2.0)

        # Act
        res = codegen.emit_construct(
            None, FLOAT2, [Expression(type=FLOAT, base=x), Expression(type=FLOAT, base=y)]
        )

        # Assert
        assert lines_of(block)[-1] == f"const vec2 _{res} = vec2(_{x}, _{y});"

    def test_matrix_transposed(self, codegen, block, lines_of, constant):
        values = [constant(FLOAT, float(i)) for i in range(4)]
        type_ = Type(BaseType.FLOAT, 2, 2)

        res = codegen.emit_construct(None, type_, [Expression(type=FLOAT, base=v) for v in values])

        names = ", ".join(f"_{v}" for v in values)
        assert lines_of(block)[-1] == f"const mat2x2 _{res} = transpose(mat2x2({names}));"

    def test_array(self, codegen, block, lines_of, constant):
        # Arrange
        a, b = constant(FLOAT2, 0.0, 1.0), constant(FLOAT2, 1.0, 0.0)
        type_ = Type(BaseType.FLOAT, 2, 1, array_length=2)

        # Act
        res = codegen.emit_construct(
            None, type_, [Expression(type=FLOAT2, base=a), Expression(type=FLOAT2, base=b)]
        )

        # Assert
        assert lines_of(block)[-1] == f"const vec2 _{res}[2] = vec2[2](_{a}, _{b});"

    def test_vector_arguments_rejected(self, codegen, block, constant):
        value = constant(FLOAT2, 0.0, 1.0)

        with pytest.raises(CodegenError, match="must be scalars"):
            codegen.emit_construct(None, FLOAT4, [Expression(type=FLOAT2, base=value)])
