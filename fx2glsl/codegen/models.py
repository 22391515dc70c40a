"""
Data models for the GLSL code generator.

This module contains the dataclass definitions for the intermediate
representation consumed by the code generator (types, constants, expression
chains, declarations) and for the module it produces.
"""

from dataclasses import dataclass, field
from enum import Enum, IntFlag, auto
from typing import Any


@dataclass(frozen=True)
class Location:
    """Position in the effect source.

    Attributes:
        source: Source file name
        line: 1-based line number
        column: 1-based column number
    """

    source: str = ""
    line: int = 0
    column: int = 0


class BaseType(Enum):
    """Base kind of an IR type."""

    VOID = auto()
    BOOL = auto()
    INT = auto()
    UINT = auto()
    FLOAT = auto()
    STRUCT = auto()
    SAMPLER = auto()
    TEXTURE = auto()


class Qualifier(IntFlag):
    """Type qualifier bitset."""

    NONE = 0
    PRECISE = auto()
    LINEAR = auto()
    NOPERSPECTIVE = auto()
    CENTROID = auto()
    NOINTERPOLATION = auto()
    IN = auto()
    OUT = auto()
    INOUT = IN | OUT
    CONST = auto()
    UNIFORM = auto()


@dataclass(frozen=True)
class Type:
    """IR type: base kind x rows x columns x array length x qualifiers.

    A scalar has rows == cols == 1, a vector has cols == 1 and rows > 1 and a
    matrix has both rows and cols greater than one.

    Attributes:
        base: Base kind
        rows: Number of rows (vector size for vectors)
        cols: Number of columns
        qualifiers: Qualifier bitset
        array_length: Number of array elements or 0 if not an array
        definition: Id of the struct definition for struct types
    """

    base: BaseType
    rows: int = 0
    cols: int = 0
    qualifiers: Qualifier = Qualifier.NONE
    array_length: int = 0
    definition: int = 0

    def has(self, qualifier: Qualifier) -> bool:
        return (self.qualifiers & qualifier) == qualifier

    def is_numeric(self) -> bool:
        return self.base in (BaseType.BOOL, BaseType.INT, BaseType.UINT, BaseType.FLOAT)

    def is_void(self) -> bool:
        return self.base == BaseType.VOID

    def is_boolean(self) -> bool:
        return self.base == BaseType.BOOL

    def is_integral(self) -> bool:
        return self.base in (BaseType.INT, BaseType.UINT)

    def is_floating_point(self) -> bool:
        return self.base == BaseType.FLOAT

    def is_struct(self) -> bool:
        return self.base == BaseType.STRUCT

    def is_sampler(self) -> bool:
        return self.base == BaseType.SAMPLER

    def is_array(self) -> bool:
        return self.array_length != 0

    def is_scalar(self) -> bool:
        return self.is_numeric() and not self.is_vector() and not self.is_matrix()

    def is_vector(self) -> bool:
        return self.is_numeric() and self.rows > 1 and self.cols == 1

    def is_matrix(self) -> bool:
        return self.is_numeric() and self.rows >= 1 and self.cols > 1

    def components(self) -> int:
        return self.rows * self.cols

    def element_type(self) -> "Type":
        """Get the type of a single array element."""
        return Type(self.base, self.rows, self.cols, self.qualifiers, 0, self.definition)


# Frequently used types
VOID = Type(BaseType.VOID)
BOOL = Type(BaseType.BOOL, 1, 1)
INT = Type(BaseType.INT, 1, 1)
UINT = Type(BaseType.UINT, 1, 1)
FLOAT = Type(BaseType.FLOAT, 1, 1)
FLOAT2 = Type(BaseType.FLOAT, 2, 1)
FLOAT3 = Type(BaseType.FLOAT, 3, 1)
FLOAT4 = Type(BaseType.FLOAT, 4, 1)
FLOAT4X4 = Type(BaseType.FLOAT, 4, 4)
SAMPLER = Type(BaseType.SAMPLER)


@dataclass
class Constant:
    """Literal constant data.

    Component values are interpreted according to the base kind of the type
    the constant is rendered with. Array constants hold one nested constant
    per element in ``array_data``.
    """

    values: list[bool | int | float] = field(default_factory=list)
    array_data: list["Constant"] = field(default_factory=list)


class OperationKind(Enum):
    """Kind of a single step in an expression chain."""

    CAST = auto()
    INDEX = auto()
    MEMBER = auto()
    SWIZZLE = auto()


@dataclass
class Operation:
    """A single step applied to the base of an expression chain.

    Attributes:
        kind: Operation kind
        from_type: Type before the operation (owning struct for members)
        to_type: Type after the operation
        index: Index value id (INDEX) or member index (MEMBER)
        swizzle: Up to four lane indices, unused slots are -1
    """

    kind: OperationKind
    from_type: Type | None = None
    to_type: Type | None = None
    index: int = 0
    swizzle: tuple[int, int, int, int] = (-1, -1, -1, -1)


@dataclass
class Expression:
    """An lvalue/rvalue access path such as ``buffer[i].field.xyz``.

    Attributes:
        type: Type of the whole expression
        base: Id of the base value
        ops: Operations applied to the base, left to right
        location: Source location
        is_constant: Whether the expression is the inline ``constant``
        constant: Constant data used when ``is_constant`` is set
    """

    type: Type
    base: int = 0
    ops: list[Operation] = field(default_factory=list)
    location: Location | None = None
    is_constant: bool = False
    constant: Constant | None = None


@dataclass
class StructMember:
    """Member of a struct definition."""

    type: Type
    name: str
    location: Location | None = None


@dataclass
class StructInfo:
    """Struct definition.

    Attributes:
        name: Internal (source) name
        unique_name: Name used in the emitted code
        member_list: Ordered members
        definition: Id assigned by the code generator
    """

    name: str
    unique_name: str
    member_list: list[StructMember] = field(default_factory=list)
    definition: int = 0


@dataclass
class UniformInfo:
    """Free-standing uniform and its placement in the ``_Globals`` buffer."""

    name: str
    type: Type
    annotations: dict[str, Any] = field(default_factory=dict)
    initializer_value: Constant | None = None
    has_initializer_value: bool = False
    member_index: int = 0
    offset: int = 0
    size: int = 0


@dataclass
class TextureInfo:
    """Texture declaration."""

    unique_name: str
    semantic: str = ""
    width: int = 1
    height: int = 1
    levels: int = 1
    format: str = "rgba8"
    annotations: dict[str, Any] = field(default_factory=dict)
    id: int = 0


@dataclass
class SamplerInfo:
    """Sampler declaration and its assigned binding slot."""

    unique_name: str
    texture_name: str = ""
    filter: str = "min_mag_mip_linear"
    address_u: str = "clamp"
    address_v: str = "clamp"
    address_w: str = "clamp"
    srgb: bool = False
    annotations: dict[str, Any] = field(default_factory=dict)
    id: int = 0
    binding: int = 0


@dataclass
class FunctionParam:
    """Function parameter, ``definition`` is assigned when the function is defined."""

    type: Type
    name: str
    location: Location | None = None
    semantic: str = ""
    definition: int = 0


@dataclass
class FunctionInfo:
    """Function definition."""

    name: str
    unique_name: str
    return_type: Type
    parameter_list: list[FunctionParam] = field(default_factory=list)
    return_semantic: str = ""
    definition: int = 0


@dataclass
class PassInfo:
    """Render pass metadata, passed through unmodified."""

    name: str = ""
    vs_entry_point: str = ""
    ps_entry_point: str = ""
    render_targets: list[str] = field(default_factory=list)
    states: dict[str, Any] = field(default_factory=dict)


@dataclass
class TechniqueInfo:
    """Technique metadata, passed through unmodified."""

    name: str
    passes: list[PassInfo] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)


@dataclass
class Module:
    """Result of one compilation unit.

    Attributes:
        code: GLSL source text
        samplers: Samplers with assigned bindings, in declaration order
        textures: Textures in declaration order
        uniforms: Uniforms with assigned offsets and sizes
        techniques: Technique metadata
        entry_points: (function name, is pixel shader) pairs
    """

    code: str = ""
    samplers: list[SamplerInfo] = field(default_factory=list)
    textures: list[TextureInfo] = field(default_factory=list)
    uniforms: list[UniformInfo] = field(default_factory=list)
    techniques: list[TechniqueInfo] = field(default_factory=list)
    entry_points: list[tuple[str, bool]] = field(default_factory=list)


@dataclass
class CodegenConfig:
    """Configuration for the GLSL code generator.

    Attributes:
        line_directives: Emit ``#line`` directives for located statements
        indent: Text for one nesting level
        version_directive: Optional first line of the output, e.g. ``#version 450``
        cbuffer_binding: Binding slot of the ``_Globals`` uniform block
        entry_point_prefix: Prefix of the preprocessor guard around entry points
    """

    line_directives: bool = True
    indent: str = "    "
    version_directive: str | None = None
    cbuffer_binding: int = 0
    entry_point_prefix: str = "ENTRY_POINT_"
