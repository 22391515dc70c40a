"""Identifier allocation and output naming."""

import re
from dataclasses import dataclass, field

# GLSL keywords and built-in functions that are valid identifiers in effect code
RESERVED_NAMES: frozenset[str] = frozenset(
    {
        # Keywords and reserved words
        "active", "attribute", "buffer", "coherent", "common", "filter", "flat",
        "highp", "input", "invariant", "layout", "lowp", "mediump", "noperspective",
        "output", "partition", "patch", "precision", "readonly", "restrict",
        "sample", "shared", "smooth", "subroutine", "superp", "varying",
        "volatile", "writeonly",
        # Types that are not types in effect code
        "mat2", "mat3", "mat4", "dmat2", "dmat3", "dmat4", "vec2", "vec3", "vec4",
        "ivec2", "ivec3", "ivec4", "uvec2", "uvec3", "uvec4", "bvec2", "bvec3",
        "bvec4", "dvec2", "dvec3", "dvec4", "sampler1D", "sampler2D", "sampler3D",
        "samplerCube", "image2D",
        # Built-in functions
        "abs", "sign", "all", "any", "sin", "sinh", "cos", "cosh", "tan", "tanh",
        "asin", "acos", "atan", "exp", "exp2", "log", "log2", "sqrt", "inversesqrt",
        "ceil", "floor", "fract", "trunc", "round", "radians", "degrees", "length",
        "normalize", "transpose", "determinant", "intBitsToFloat",
        "uintBitsToFloat", "floatBitsToInt", "floatBitsToUint", "matrixCompMult",
        "not", "lessThan", "greaterThan", "lessThanEqual", "greaterThanEqual",
        "equal", "notEqual", "dot", "cross", "distance", "pow", "modf", "frexp",
        "ldexp", "min", "max", "mod", "step", "reflect", "texture", "textureOffset",
        "fma", "mix", "clamp", "smoothstep", "refract", "faceforward",
        "textureLod", "textureLodOffset", "textureGrad", "textureGather",
        "textureSize", "texelFetch", "dFdx", "dFdy", "fwidth", "isinf", "isnan",
        "bitCount", "bitfieldReverse", "findLSB", "findMSB", "inverse",
        # Entry point name reserved for the generated stub
        "main",
    }
)

RESERVED_PREFIX = "gl_"
DOUBLE_UNDERSCORE_SUBSTITUTE = "_US"

# Synthesized names for unnamed ids look like "_12"
_FALLBACK_NAME = re.compile(r"_\d+")


def escape_name(name: str) -> str:
    """Make a source identifier safe to use in GLSL.

    Names that collide with a reserved word or built-in function, begin with
    the reserved ``gl_`` prefix or look like a synthesized ``_<id>`` name are
    prefixed with an underscore. Every ``__`` sequence is then replaced,
    since GLSL reserves identifiers containing double underscores.

    Args:
        name: Source identifier

    Returns:
        Escaped identifier
    """
    result = name
    if (
        name in RESERVED_NAMES
        or name.startswith(RESERVED_PREFIX)
        or _FALLBACK_NAME.fullmatch(name)
    ):
        result = "_" + name

    while "__" in result:
        result = result.replace("__", DOUBLE_UNDERSCORE_SUBSTITUTE, 1)

    return result


def make_unique(base: str, taken: set[str]) -> str:
    """Append the smallest numeric suffix that makes a name unused."""
    candidate = base
    suffix = 1
    while candidate in taken:
        candidate = f"{base}{suffix}"
        suffix += 1
    return candidate


@dataclass
class NameTable:
    """Allocates ids and maps them to collision-free output names.

    Id 0 is never handed out: it stands for "no block".
    """

    next_id: int = 1
    names: dict[int, str] = field(default_factory=dict)
    escaped: dict[str, str] = field(default_factory=dict)
    taken: set[str] = field(default_factory=set)

    def make_id(self) -> int:
        """Allocate a fresh id."""
        result = self.next_id
        self.next_id += 1
        return result

    def escape(self, name: str) -> str:
        """Escape a name, keeping results unique within this table.

        The same input always yields the same output. Two distinct inputs
        whose escaped forms coincide are told apart with a numeric suffix.
        """
        if name in self.escaped:
            return self.escaped[name]

        candidate = make_unique(escape_name(name), self.taken)
        self.escaped[name] = candidate
        self.taken.add(candidate)
        return candidate

    def assign_name(self, id_: int, name: str) -> str:
        """Record the escaped human-readable name of an id and return it."""
        self.names[id_] = self.escape(name)
        return self.names[id_]

    def assign_raw_name(self, id_: int, name: str) -> None:
        """Record a name that is already valid GLSL and must stay untouched."""
        self.names[id_] = name
        self.taken.add(name)

    def resolve_name(self, id_: int) -> str:
        """Get the output name of an id, ``_<id>`` if none was recorded."""
        if id_ in self.names:
            return self.names[id_]
        return f"_{id_}"
