"""
Replay of recorded IR traces.

A trace is a YAML document listing the calls an IR producer makes, in program
order. Results of earlier calls are bound to labels with ``as:`` and referenced
later as ``$label``:

    steps:
      - call: define_uniform
        args:
          info: {name: tint, type: float4}
        as: globals
      - call: create_block
        as: entry
      - call: set_block
        args: {block_id: $entry}

Types are written either as mappings (``{base: float, rows: 4, cols: 1}``) or
in shorthand (``float``, ``float4``, ``float2x3``, ``int[4]``, ``void``).
"""

import inspect
import re
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from fx2glsl.codegen import (
    BaseType,
    CodegenConfig,
    Constant,
    ControlFlags,
    Expression,
    FunctionInfo,
    FunctionParam,
    Intrinsic,
    Location,
    LoopFlow,
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
    TokenId,
    Type,
    UniformInfo,
    create_codegen,
)
from fx2glsl.codegen.interfaces import Codegen
from fx2glsl.codegen.models import SAMPLER, VOID

# Calls a trace may make, every producer operation except assembling the result
ALLOWED_CALLS: frozenset[str] = frozenset(Codegen.__abstractmethods__) - {"write_result"}

# Trace argument names that differ from the Python parameter names
ARGUMENT_ALIASES: dict[str, str] = {"type": "type_", "global": "is_global"}

_TYPE_SHORTHAND = re.compile(
    r"(?P<base>bool|int|uint|float)(?P<rows>[1-4])?(?:x(?P<cols>[1-4]))?"
    r"(?:\[(?P<array>\d+)\])?"
)


class TraceError(Exception):
    """Exception raised for malformed IR traces."""


def _decode_type(value: Any, labels: dict[str, Any]) -> Type:
    if isinstance(value, str):
        if value == "void":
            return VOID
        if value in ("sampler", "sampler2D"):
            return SAMPLER
        match = _TYPE_SHORTHAND.fullmatch(value)
        if not match:
            raise TraceError(f"Invalid type shorthand: {value}")
        return Type(
            BaseType[match["base"].upper()],
            int(match["rows"] or 1),
            int(match["cols"] or 1),
            array_length=int(match["array"] or 0),
        )

    if not isinstance(value, dict):
        raise TraceError(f"Invalid type: {value!r}")

    qualifiers = Qualifier.NONE
    for name in value.get("qualifiers", []):
        try:
            qualifiers |= Qualifier[name.upper()]
        except KeyError as e:
            raise TraceError(f"Unknown qualifier: {name}") from e

    try:
        base = BaseType[str(value["base"]).upper()]
    except KeyError as e:
        raise TraceError(f"Invalid type base in {value!r}") from e

    scalar_default = 0 if base in (BaseType.VOID, BaseType.STRUCT) else 1
    return Type(
        base,
        int(value.get("rows", scalar_default)),
        int(value.get("cols", scalar_default)),
        qualifiers,
        int(value.get("array_length", 0)),
        _resolve(value.get("definition", 0), labels),
    )


def _decode_constant(value: Any) -> Constant:
    if isinstance(value, list):
        return Constant(values=list(value))
    if isinstance(value, dict):
        return Constant(
            values=list(value.get("values", [])),
            array_data=[_decode_constant(item) for item in value.get("array_data", [])],
        )
    return Constant(values=[value])


def _decode_location(value: Any) -> Location | None:
    if value is None:
        return None
    if isinstance(value, int):
        return Location(line=value)
    return Location(**value)


def _decode_operation(value: dict[str, Any], labels: dict[str, Any]) -> Operation:
    try:
        kind = OperationKind[str(value["kind"]).upper()]
    except KeyError as e:
        raise TraceError(f"Invalid operation: {value!r}") from e

    swizzle = list(value.get("swizzle", []))
    swizzle += [-1] * (4 - len(swizzle))
    return Operation(
        kind,
        _decode_type(value["from_type"], labels) if "from_type" in value else None,
        _decode_type(value["to_type"], labels) if "to_type" in value else None,
        _resolve(value.get("index", 0), labels),
        tuple(swizzle[:4]),
    )


def _decode_expression(value: Any, labels: dict[str, Any]) -> Expression:
    if not isinstance(value, dict) or "type" not in value:
        raise TraceError(f"Expression needs a mapping with a type: {value!r}")

    expression = Expression(
        type=_decode_type(value["type"], labels),
        base=_resolve(value.get("base", 0), labels),
        ops=[_decode_operation(op, labels) for op in value.get("ops", [])],
        location=_decode_location(value.get("loc")),
    )
    if "constant" in value:
        expression.is_constant = True
        expression.constant = _decode_constant(value["constant"])
    return expression


def _decode_info(call: str, value: dict[str, Any], labels: dict[str, Any]) -> Any:
    """Build the declaration record a ``define_*`` call expects."""
    value = dict(value)
    if call == "define_struct":
        members = [
            StructMember(_decode_type(m["type"], labels), m["name"])
            for m in value.pop("member_list", [])
        ]
        value.setdefault("unique_name", value.get("name", ""))
        return StructInfo(member_list=members, **value)
    if call == "define_uniform":
        value["type"] = _decode_type(value["type"], labels)
        if "initializer_value" in value:
            value["initializer_value"] = _decode_constant(value["initializer_value"])
            value["has_initializer_value"] = True
        return UniformInfo(**value)
    if call == "define_texture":
        return TextureInfo(**value)
    if call == "define_sampler":
        return SamplerInfo(**value)
    if call == "define_function":
        params = [
            FunctionParam(
                _decode_type(p["type"], labels),
                p["name"],
                _decode_location(p.get("loc")),
                p.get("semantic", ""),
            )
            for p in value.pop("parameter_list", [])
        ]
        value["return_type"] = _decode_type(value["return_type"], labels)
        value.setdefault("unique_name", value.get("name", ""))
        return FunctionInfo(parameter_list=params, **value)
    if call == "define_technique":
        passes = [PassInfo(**p) for p in value.pop("passes", [])]
        return TechniqueInfo(passes=passes, **value)
    raise TraceError(f"Call '{call}' takes no info record")


def _decode_flags(value: Any) -> int:
    if isinstance(value, int):
        return value
    flags = ControlFlags.NONE
    for name in value:
        try:
            flags |= ControlFlags[name.upper()]
        except KeyError as e:
            raise TraceError(f"Unknown control flag: {name}") from e
    return flags


def _resolve(value: Any, labels: dict[str, Any]) -> Any:
    """Replace ``$label`` references with the result they name."""
    if isinstance(value, str) and value.startswith("$"):
        if value[1:] not in labels:
            raise TraceError(f"Unknown label: {value}")
        return labels[value[1:]]
    return value


def _decode_argument(
    codegen: Codegen, call: str, key: str, value: Any, labels: dict[str, Any]
) -> Any:
    try:
        if key == "loc":
            return _decode_location(value)
        if key in ("type", "res_type"):
            return _decode_type(value, labels)
        if key == "chain":
            return _decode_expression(value, labels)
        if key == "args":
            return [_decode_expression(arg, labels) for arg in value]
        if key == "data":
            return _decode_constant(value)
        if key == "info":
            return _decode_info(call, value, labels)
        if key == "func":
            return codegen.find_function(_resolve(value, labels))
        if key == "op":
            return TokenId[str(value).upper()]
        if key == "intrinsic":
            if isinstance(value, dict):
                return Intrinsic.lookup(value["name"], value.get("overload", 0))
            return Intrinsic.lookup(str(value))
        if key == "flags":
            return _decode_flags(value)
        if key == "loop_flow" and isinstance(value, str):
            return LoopFlow[value.upper()]
        if key == "cases":
            return [(int(literal), _resolve(label, labels)) for literal, label in value]
    except (KeyError, TypeError, ValueError) as e:
        raise TraceError(f"Invalid argument '{key}' of {call}: {e}") from e

    return _resolve(value, labels)


def replay_trace(trace: dict[str, Any], config: CodegenConfig | None = None) -> Module:
    """Drive a fresh code generator with the calls recorded in a trace.

    Args:
        trace: Parsed trace document
        config: Code generator configuration, overrides the trace's ``config``

    Returns:
        The assembled module

    Raises:
        TraceError: If the trace is malformed
        CodegenError: If a call violates a code generator contract
    """
    if not isinstance(trace, dict) or not isinstance(trace.get("steps"), list):
        raise TraceError("Trace must be a mapping with a 'steps' list")

    if config is None:
        config = CodegenConfig(**trace.get("config", {}))
    codegen = create_codegen(config)
    labels: dict[str, Any] = {}

    for index, step in enumerate(trace["steps"]):
        call = step.get("call") if isinstance(step, dict) else None
        if call not in ALLOWED_CALLS:
            raise TraceError(f"Step {index}: unknown call {call!r}")

        kwargs = {
            ARGUMENT_ALIASES.get(key, key): _decode_argument(codegen, call, key, value, labels)
            for key, value in (step.get("args") or {}).items()
        }
        method = getattr(codegen, call)
        if "loc" in inspect.signature(method).parameters:
            kwargs.setdefault("loc", None)

        try:
            result = method(**kwargs)
        except TypeError as e:
            raise TraceError(f"Step {index}: invalid arguments for {call}: {e}") from e

        if "as" in step:
            labels[step["as"]] = result

    logger.debug(f"Replayed {len(trace['steps'])} steps")
    return codegen.write_result()


def load_trace(path: str | Path) -> dict[str, Any]:
    """Load a YAML trace file.

    Raises:
        TraceError: If the file is not valid YAML
    """
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise TraceError(f"Invalid trace file {path}: {e}") from e
