from fx2glsl.codegen import CodegenConfig, CodegenError, Module, create_codegen
from fx2glsl.replay import TraceError, replay_trace

__version__ = "0.1.0"


__all__ = [
    "CodegenConfig",
    "CodegenError",
    "Module",
    "TraceError",
    "create_codegen",
    "replay_trace",
]
