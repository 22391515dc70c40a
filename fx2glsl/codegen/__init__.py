"""
GLSL code generation for compiled effects.

This package lowers the intermediate representation produced by the effect
front end to GLSL source text, allocating uniform buffer offsets and sampler
bindings and rebuilding structured control flow from basic blocks.
"""

from fx2glsl.codegen.backend import GLSLCodegen, create_codegen
from fx2glsl.codegen.code_gen_stmt import ControlFlags, LoopFlow
from fx2glsl.codegen.errors import CodegenError
from fx2glsl.codegen.interfaces import Codegen
from fx2glsl.codegen.intrinsics import Intrinsic
from fx2glsl.codegen.models import (
    BaseType,
    CodegenConfig,
    Constant,
    Expression,
    FunctionInfo,
    FunctionParam,
    Location,
    Module,
    Operation,
    OperationKind,
    PassInfo,
    Qualifier,
    SamplerInfo,
    StructInfo,
    StructMember,
    TechniqueInfo,
    TextureInfo,
    Type,
    UniformInfo,
)
from fx2glsl.codegen.operators import TokenId

__all__ = [
    "BaseType",
    "Codegen",
    "CodegenConfig",
    "CodegenError",
    "Constant",
    "ControlFlags",
    "Expression",
    "FunctionInfo",
    "FunctionParam",
    "GLSLCodegen",
    "Intrinsic",
    "Location",
    "LoopFlow",
    "Module",
    "Operation",
    "OperationKind",
    "PassInfo",
    "Qualifier",
    "SamplerInfo",
    "StructInfo",
    "StructMember",
    "TechniqueInfo",
    "TextureInfo",
    "TokenId",
    "Type",
    "UniformInfo",
    "create_codegen",
]
