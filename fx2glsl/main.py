"""Command line interface for fx2glsl.

This module provides a command-line interface for compiling recorded effect IR
traces to GLSL and for inspecting the resource layout of the result.
"""

import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, cast

import arrow
import typer
from loguru import logger

from fx2glsl import __version__
from fx2glsl.codegen import CodegenConfig, CodegenError, Module
from fx2glsl.replay import TraceError, load_trace, replay_trace

# Define type variables for TypedCallable
F = TypeVar("F", bound=Callable[..., Any])


# TypedCommand decorator helper
def typed_command(app_command: Any) -> Callable[[F], F]:
    """Wrap typer command with proper typing for mypy."""

    def decorator(func: F) -> F:
        return cast(F, app_command(func))

    return decorator


app = typer.Typer(
    name="fx2glsl",
    help="Compile effect IR traces into GLSL. Commands: compile, inspect.",
    add_completion=False,
)

FORMATS = ("plain", "commented")

# Reusable arguments and options
TRACE_ARG = typer.Argument(..., help="YAML trace of code generator calls")
OUTPUT_ARG = typer.Argument(None, help="Output GLSL file path (stdout if omitted)")
VERBOSE_OPT = typer.Option(False, "--verbose", "-v", help="Show debug logging")


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def _compile_trace(trace_file: Path, config: CodegenConfig | None = None) -> Module:
    """Replay a trace file, exiting with status 1 on any error."""
    try:
        return replay_trace(load_trace(trace_file), config)
    except OSError as e:
        logger.error(f"Failed to read trace: {e}")
        raise typer.Exit(1) from e
    except TraceError as e:
        logger.error(f"Invalid trace: {e}")
        raise typer.Exit(1) from e
    except CodegenError as e:
        logger.error(f"Code generation error: {e}")
        raise typer.Exit(1) from e


def _add_header_comments(code: str, module: Module, source_file: Path) -> str:
    """Prepend generator, timestamp and entry point comments to the code.

    A leading ``#version`` line stays first so the result still compiles.
    """
    timestamp = arrow.utcnow().format("YYYY-MM-DD HH:mm:ss UTC")
    header = f"// Generated by fx2glsl v{__version__}\n"
    header += f"// Generation time: {timestamp}\n"
    header += f"// Source trace: {os.path.basename(source_file)}\n"
    entry_points = ", ".join(
        f"{name} ({'pixel' if is_ps else 'vertex'})"
        for name, is_ps in module.entry_points
    )
    header += f"// Entry points: {entry_points or 'none'}\n"

    if code.startswith("#version"):
        version, _, rest = code.partition("\n")
        return f"{version}\n{header}{rest}"
    return header + code


@typed_command(app.command("compile"))
def compile_trace(
    trace_file: Path = TRACE_ARG,
    output: Path | None = OUTPUT_ARG,
    no_line_directives: bool = typer.Option(
        False, "--no-line-directives", help="Omit #line directives"
    ),
    version: str = typer.Option(
        "", "--version", help="GLSL version emitted as #version directive, e.g. 450"
    ),
    format: str = typer.Option(
        "plain", "--format", "-f", help="Code format (plain, commented)"
    ),
    verbose: bool = VERBOSE_OPT,
) -> None:
    """Compile a trace to GLSL.

    Example: fx2glsl compile effect.yaml effect.glsl --version 450
    """
    _configure_logging(verbose)

    if format not in FORMATS:
        logger.warning(f"Unknown format: {format}. Using plain.")
        format = "plain"

    config = CodegenConfig(
        line_directives=not no_line_directives,
        version_directive=f"#version {version}" if version else None,
    )
    module = _compile_trace(trace_file, config)

    code = module.code
    if format == "commented":
        code = _add_header_comments(code, module, trace_file)

    if output is None:
        typer.echo(code, nl=False)
        return

    with open(output, "w") as f:
        f.write(code)
    logger.info(f"GLSL code exported to {output}")


@typed_command(app.command("inspect"))
def inspect_trace(
    trace_file: Path = TRACE_ARG,
    verbose: bool = VERBOSE_OPT,
) -> None:
    """Print the resource layout of a compiled trace."""
    _configure_logging(verbose)
    module = _compile_trace(trace_file)

    typer.echo("Uniforms:")
    for uniform in module.uniforms:
        typer.echo(f"  {uniform.name}: offset {uniform.offset}, size {uniform.size}")

    typer.echo("Samplers:")
    for sampler in module.samplers:
        typer.echo(
            f"  {sampler.unique_name}: binding {sampler.binding}, "
            f"texture {sampler.texture_name}"
        )

    typer.echo("Textures:")
    for texture in module.textures:
        typer.echo(f"  {texture.unique_name}: {texture.width}x{texture.height}")

    typer.echo("Entry points:")
    for name, is_ps in module.entry_points:
        typer.echo(f"  {name} ({'pixel' if is_ps else 'vertex'})")


if __name__ == "__main__":
    app()
