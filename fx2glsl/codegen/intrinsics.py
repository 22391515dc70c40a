"""
GLSL templates of the effect intrinsics.

Every intrinsic overload the IR producer can reference is a member of the
closed ``Intrinsic`` enumeration. Templates use ``{0}``, ``{1}``, ... for the
argument names and ``{type}`` for the result type.
"""

from enum import Enum
from string import Formatter

from fx2glsl.codegen.errors import fail, require


class Intrinsic(Enum):
    """Effect intrinsic overload: (name, overload index, GLSL template)."""

    ABS0 = ("abs", 0, "abs({0})")
    ABS1 = ("abs", 1, "abs({0})")
    ACOS0 = ("acos", 0, "acos({0})")
    ALL0 = ("all", 0, "bool({0})")
    ALL1 = ("all", 1, "all({0})")
    ANY0 = ("any", 0, "bool({0})")
    ANY1 = ("any", 1, "any({0})")
    ASFLOAT0 = ("asfloat", 0, "intBitsToFloat({0})")
    ASFLOAT1 = ("asfloat", 1, "uintBitsToFloat({0})")
    ASFLOAT2 = ("asfloat", 2, "{0}")
    ASIN0 = ("asin", 0, "asin({0})")
    ASINT0 = ("asint", 0, "floatBitsToInt({0})")
    ASINT1 = ("asint", 1, "{type}({0})")
    ASUINT0 = ("asuint", 0, "floatBitsToUint({0})")
    ASUINT1 = ("asuint", 1, "{type}({0})")
    ATAN0 = ("atan", 0, "atan({0})")
    ATAN2_0 = ("atan2", 0, "atan({0}, {1})")
    CEIL0 = ("ceil", 0, "ceil({0})")
    CLAMP0 = ("clamp", 0, "clamp({0}, {1}, {2})")
    CLAMP1 = ("clamp", 1, "clamp({0}, {1}, {2})")
    COS0 = ("cos", 0, "cos({0})")
    COSH0 = ("cosh", 0, "cosh({0})")
    COUNTBITS0 = ("countbits", 0, "{type}(bitCount({0}))")
    CROSS0 = ("cross", 0, "cross({0}, {1})")
    DDX0 = ("ddx", 0, "dFdx({0})")
    DDY0 = ("ddy", 0, "dFdy({0})")
    DEGREES0 = ("degrees", 0, "degrees({0})")
    DETERMINANT0 = ("determinant", 0, "determinant({0})")
    DISTANCE0 = ("distance", 0, "distance({0}, {1})")
    DOT0 = ("dot", 0, "dot({0}, {1})")
    EXP0 = ("exp", 0, "exp({0})")
    EXP2_0 = ("exp2", 0, "exp2({0})")
    FACEFORWARD0 = ("faceforward", 0, "faceforward({0}, {1}, {2})")
    FIRSTBITHIGH0 = ("firstbithigh", 0, "{type}(findMSB({0}))")
    FIRSTBITLOW0 = ("firstbitlow", 0, "{type}(findLSB({0}))")
    FLOOR0 = ("floor", 0, "floor({0})")
    FMOD0 = ("fmod", 0, "_fmod({0}, {1})")
    FRAC0 = ("frac", 0, "fract({0})")
    FWIDTH0 = ("fwidth", 0, "fwidth({0})")
    ISINF0 = ("isinf", 0, "isinf({0})")
    ISNAN0 = ("isnan", 0, "isnan({0})")
    LDEXP0 = ("ldexp", 0, "({0} * exp2({1}))")
    LENGTH0 = ("length", 0, "length({0})")
    LERP0 = ("lerp", 0, "mix({0}, {1}, {2})")
    LOG0 = ("log", 0, "log({0})")
    LOG10_0 = ("log10", 0, "(log2({0}) * 0.301029995663981)")
    LOG2_0 = ("log2", 0, "log2({0})")
    MAD0 = ("mad", 0, "({0} * {1} + {2})")
    MAX0 = ("max", 0, "max({0}, {1})")
    MAX1 = ("max", 1, "max({0}, {1})")
    MIN0 = ("min", 0, "min({0}, {1})")
    MIN1 = ("min", 1, "min({0}, {1})")
    MODF0 = ("modf", 0, "modf({0}, {1})")
    # Matrices are emitted transposed, so GLSL's "*" keeps the effect's row-vector semantics
    MUL0 = ("mul", 0, "({0} * {1})")
    MUL1 = ("mul", 1, "({0} * {1})")
    MUL2 = ("mul", 2, "({0} * {1})")
    MUL3 = ("mul", 3, "({0} * {1})")
    NORMALIZE0 = ("normalize", 0, "normalize({0})")
    POW0 = ("pow", 0, "pow({0}, {1})")
    RADIANS0 = ("radians", 0, "radians({0})")
    RCP0 = ("rcp", 0, "(1.0 / {0})")
    REFLECT0 = ("reflect", 0, "reflect({0}, {1})")
    REFRACT0 = ("refract", 0, "refract({0}, {1}, {2})")
    REVERSEBITS0 = ("reversebits", 0, "bitfieldReverse({0})")
    ROUND0 = ("round", 0, "round({0})")
    RSQRT0 = ("rsqrt", 0, "inversesqrt({0})")
    SATURATE0 = ("saturate", 0, "clamp({0}, 0.0, 1.0)")
    SIGN0 = ("sign", 0, "{type}(sign({0}))")
    SIGN1 = ("sign", 1, "sign({0})")
    SIN0 = ("sin", 0, "sin({0})")
    SINCOS0 = ("sincos", 0, "{1} = sin({0}), {2} = cos({0})")
    SINH0 = ("sinh", 0, "sinh({0})")
    SMOOTHSTEP0 = ("smoothstep", 0, "smoothstep({0}, {1}, {2})")
    SQRT0 = ("sqrt", 0, "sqrt({0})")
    STEP0 = ("step", 0, "step({0}, {1})")
    TAN0 = ("tan", 0, "tan({0})")
    TANH0 = ("tanh", 0, "tanh({0})")
    TEX2D0 = ("tex2D", 0, "texture({0}, {1})")
    TEX2DFETCH0 = ("tex2Dfetch", 0, "texelFetch({0}, {1}.xy, {1}.w)")
    TEX2DGATHER0 = ("tex2Dgather", 0, "textureGather({0}, {1}, 0)")
    TEX2DGATHER1 = ("tex2Dgather", 1, "textureGather({0}, {1}, 1)")
    TEX2DGATHER2 = ("tex2Dgather", 2, "textureGather({0}, {1}, 2)")
    TEX2DGATHER3 = ("tex2Dgather", 3, "textureGather({0}, {1}, 3)")
    TEX2DGRAD0 = ("tex2Dgrad", 0, "textureGrad({0}, {1}, {2}, {3})")
    TEX2DLOD0 = ("tex2Dlod", 0, "textureLod({0}, {1}.xy, {1}.w)")
    TEX2DLODOFFSET0 = ("tex2Dlodoffset", 0, "textureLodOffset({0}, {1}.xy, {1}.w, {2})")
    TEX2DOFFSET0 = ("tex2Doffset", 0, "textureOffset({0}, {1}, {2})")
    TEX2DSIZE0 = ("tex2Dsize", 0, "textureSize({0}, 0)")
    TEX2DSIZE1 = ("tex2Dsize", 1, "textureSize({0}, {1})")
    TRANSPOSE0 = ("transpose", 0, "transpose({0})")
    TRUNC0 = ("trunc", 0, "trunc({0})")

    def __init__(self, fx_name: str, overload: int, template: str):
        self.fx_name = fx_name
        self.overload = overload
        self.template = template

    @property
    def arity(self) -> int:
        """Number of arguments the template consumes."""
        positions = {
            field_name
            for _, field_name, _, _ in Formatter().parse(self.template)
            if field_name is not None and field_name.isdigit()
        }
        return len(positions)

    @property
    def uses_fmod(self) -> bool:
        return "_fmod(" in self.template

    @classmethod
    def lookup(cls, fx_name: str, overload: int = 0) -> "Intrinsic":
        """Find an intrinsic overload by name and overload index.

        Raises:
            CodegenError: If no such overload exists
        """
        for intrinsic in cls:
            if intrinsic.fx_name == fx_name and intrinsic.overload == overload:
                return intrinsic
        fail(f"Unknown intrinsic: {fx_name} (overload {overload})")


def expand_intrinsic(intrinsic: Intrinsic, result_type: str, args: list[str]) -> str:
    """Fill the template of an intrinsic with argument names.

    Args:
        intrinsic: Intrinsic overload
        result_type: GLSL spelling of the result type
        args: Names of the argument values

    Returns:
        GLSL expression

    Raises:
        CodegenError: If the argument count does not match the overload
    """
    require(
        len(args) == intrinsic.arity,
        f"Intrinsic {intrinsic.fx_name} expects {intrinsic.arity} arguments, "
        f"got {len(args)}",
    )
    return intrinsic.template.format(*args, type=result_type)
