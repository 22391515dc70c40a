"""Compilation state of one effect compilation unit."""

from dataclasses import dataclass, field

from fx2glsl.codegen.code_block import Block, BlockStore, Directive, FunctionDefinition
from fx2glsl.codegen.errors import fail
from fx2glsl.codegen.layout import ResourceLayout
from fx2glsl.codegen.models import (
    CodegenConfig,
    FunctionInfo,
    Location,
    SamplerInfo,
    StructInfo,
    TechniqueInfo,
    TextureInfo,
    UniformInfo,
)
from fx2glsl.codegen.naming import NameTable, escape_name, make_unique

# The reserved struct that collects every free-standing uniform
CBUFFER_STRUCT_NAME = "$Globals"
CBUFFER_UNIQUE_NAME = "_Globals"


@dataclass
class CompilationContext:
    """Everything the code generator mutates while compiling one unit.

    Attributes:
        config: Code generator configuration
        names: Id allocator and name table
        blocks: Statement lists keyed by block id, block 0 is the global scope
        layout: Uniform offset and sampler binding cursors
        current_block: Block that receives statements, 0 when not in a block
        last_block: Block that was current before the last cursor change
        scope_level: Function nesting depth, 0 outside functions
        cbuffer_type_id: Id of the reserved ``$Globals`` struct
        member_names: Declared name of every struct member, keyed by (struct id, index)
        switch_fallthrough_blocks: Blocks appended to a case after its own body
        uses_fmod: Whether the ``_fmod`` helper is referenced
    """

    config: CodegenConfig = field(default_factory=CodegenConfig)
    names: NameTable = field(default_factory=NameTable)
    blocks: BlockStore = field(default_factory=BlockStore)
    layout: ResourceLayout = field(default_factory=ResourceLayout)
    current_block: int = 0
    last_block: int = 0
    scope_level: int = 0
    cbuffer_type_id: int = 0
    member_names: dict[tuple[int, int], str] = field(default_factory=dict)
    switch_fallthrough_blocks: dict[int, list[int]] = field(default_factory=dict)
    uses_fmod: bool = False
    structs: list[StructInfo] = field(default_factory=list)
    uniforms: list[UniformInfo] = field(default_factory=list)
    textures: list[TextureInfo] = field(default_factory=list)
    samplers: list[SamplerInfo] = field(default_factory=list)
    functions: list[FunctionInfo] = field(default_factory=list)
    techniques: list[TechniqueInfo] = field(default_factory=list)
    entry_points: list[tuple[str, bool]] = field(default_factory=list)
    open_functions: list[FunctionDefinition] = field(default_factory=list)

    def __post_init__(self) -> None:
        cbuffer_type = StructInfo(
            name=CBUFFER_STRUCT_NAME, unique_name=CBUFFER_UNIQUE_NAME
        )
        cbuffer_type.definition = self.cbuffer_type_id = self.make_id()
        self.structs.append(cbuffer_type)
        self.names.assign_raw_name(self.cbuffer_type_id, CBUFFER_UNIQUE_NAME)

    def make_id(self) -> int:
        return self.names.make_id()

    def name_of(self, id_: int) -> str:
        return self.names.resolve_name(id_)

    def declare_member(self, struct_id: int, index: int, name: str) -> str:
        """Choose the name a struct member is declared and accessed under.

        Members of the ``_Globals`` struct are flattened into prefixed top-level
        names that must be unique in the whole unit, other members only within
        their struct.
        """
        if struct_id == self.cbuffer_type_id:
            base = escape_name(f"{self.name_of(struct_id)}_{escape_name(name)}")
            result = make_unique(base, self.names.taken)
            self.names.taken.add(result)
        else:
            siblings = {
                declared
                for (owner, _), declared in self.member_names.items()
                if owner == struct_id
            }
            result = make_unique(escape_name(name), siblings)

        self.member_names[(struct_id, index)] = result
        return result

    def member_name(self, struct_id: int, index: int) -> str:
        return self.member_names[(struct_id, index)]

    def code(self) -> Block:
        """Get the block that receives new statements."""
        return self.blocks[self.current_block]

    def emit_location(self, location: Location | None, block: Block | None = None) -> None:
        """Append a ``#line`` directive for a located statement if enabled."""
        if location is None or not self.config.line_directives or location.line <= 0:
            return
        (block or self.code()).append(Directive(f"#line {location.line}"))

    def find_struct(self, id_: int) -> StructInfo:
        for info in self.structs:
            if info.definition == id_:
                return info
        fail(f"Unknown struct id: {id_}")

    def find_function(self, id_: int) -> FunctionInfo:
        for info in self.functions:
            if info.definition == id_:
                return info
        fail(f"Unknown function id: {id_}")

    def is_in_block(self) -> bool:
        return self.current_block != 0

    def is_in_function(self) -> bool:
        return self.scope_level > 0
