"""Command line interface for glslcross.

This module provides a command-line interface for cross-compiling GLSL
shaders to HLSL, SPIR-V and Metal, inspecting their declarations and
re-transpiling them as they change on disk.
"""

import os
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, cast

import arrow
import numpy as np
import typer
import watchdog.events
import watchdog.observers
from loguru import logger
from watchdog.events import FileSystemEventHandler

from glslcross.transpiler import ShaderTranspiler
from glslcross.transpiler.collector import (
    extract_attributes,
    extract_uniforms,
    is_builtin_type,
)
from glslcross.transpiler.config import ToolchainConfig
from glslcross.transpiler.core.interfaces import ShaderStage, ShaderTarget
from glslcross.transpiler.models import TranspilationResult

# Define type variables for TypedCallable
F = TypeVar("F", bound=Callable[..., Any])


# TypedCommand decorator helper
def typed_command(app_command: Any) -> Callable[[F], F]:
    """Wrap typer command with proper typing for mypy."""

    def decorator(func: F) -> F:
        return cast(F, app_command(func))

    return decorator


app = typer.Typer(
    name="glslcross",
    help=(
        "Cross-compile GLSL shaders to HLSL, SPIR-V and Metal. "
        "Commands: transpile, program, inspect, watch."
    ),
    add_completion=False,
)

_TARGET_NAMES: dict[str, ShaderTarget] = {
    "glsl": ShaderTarget.GLSL,
    "hlsl": ShaderTarget.HLSL,
    "vulkan": ShaderTarget.VULKAN,
    "spirv": ShaderTarget.VULKAN,
    "metal": ShaderTarget.METAL,
}

_STAGE_NAMES: dict[str, ShaderStage] = {
    "vertex": ShaderStage.VERTEX,
    "vert": ShaderStage.VERTEX,
    "fragment": ShaderStage.FRAGMENT,
    "frag": ShaderStage.FRAGMENT,
}

_STAGE_SUFFIXES: dict[str, ShaderStage] = {
    ".vert": ShaderStage.VERTEX,
    ".vs": ShaderStage.VERTEX,
    ".frag": ShaderStage.FRAGMENT,
    ".fs": ShaderStage.FRAGMENT,
}


@app.callback()
def configure(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log commands and intermediate steps"
    ),
) -> None:
    """Cross-compile GLSL shaders to HLSL, SPIR-V and Metal."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def _create_transpiler() -> ShaderTranspiler:
    """Create a transpiler configured from the environment."""
    return ShaderTranspiler(ToolchainConfig.from_env())


def _map_target(target: str) -> ShaderTarget:
    """Map a target string to a shader target.

    Args:
        target: Target string ("glsl", "hlsl", "vulkan", "spirv", "metal")

    Returns:
        Shader target
    """
    try:
        return _TARGET_NAMES[target.lower()]
    except KeyError:
        names = ", ".join(_TARGET_NAMES)
        raise typer.BadParameter(
            f"Unknown target: {target}. Expected one of: {names}"
        ) from None


def _map_stage(stage: str, shader_file: Path) -> ShaderStage:
    """Determine the shader stage from an option or the file extension.

    Args:
        stage: Stage string, empty to infer it from the file extension
        shader_file: Path of the shader source

    Returns:
        Shader stage
    """
    if stage:
        try:
            return _STAGE_NAMES[stage.lower()]
        except KeyError:
            names = ", ".join(_STAGE_NAMES)
            raise typer.BadParameter(
                f"Unknown stage: {stage}. Expected one of: {names}"
            ) from None

    inferred = _STAGE_SUFFIXES.get(shader_file.suffix.lower())
    if inferred is None:
        logger.warning(
            f"Cannot infer the stage of {shader_file.name}, assuming VERTEX. "
            "Use --stage to set it."
        )
        return ShaderStage.VERTEX
    return inferred


def _read_source(shader_file: Path) -> str:
    try:
        return shader_file.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to read shader source: {e}")
        raise typer.Exit(1) from e


def _add_header_comments(
    code: str,
    source_files: list[Path],
    target: ShaderTarget,
    stage: ShaderStage | None,
) -> str:
    """Add header comments to the code.

    Args:
        code: Generated code
        source_files: GLSL files the code was generated from
        target: Shader target
        stage: Shader stage, None for combined programs

    Returns:
        Code with header comments
    """
    timestamp = arrow.utcnow().format("YYYY-MM-DD HH:mm:ss UTC")
    header = f"// Generated by glslcross v{__import__('glslcross').__version__}\n"
    header += f"// Generation time: {timestamp}\n"
    for source_file in source_files:
        header += f"// Source file: {source_file.name}\n"
    header += f"// Target: {target.name}\n"
    if stage is not None:
        header += f"// Stage: {stage.name}\n"

    header += "\n"
    return header + code


def _format_output(
    result: TranspilationResult,
    format_type: str,
    source_files: list[Path],
    target: ShaderTarget,
    stage: ShaderStage | None = None,
) -> str:
    if format_type == "commented":
        return _add_header_comments(result.output, source_files, target, stage)
    if format_type != "plain":
        logger.warning(f"Unknown format: {format_type}. Using plain.")
    return result.output


def _emit(code: str, output: Path | None) -> None:
    """Write code to a file, or to stdout when no file is given."""
    if output is None:
        typer.echo(code)
        return
    output.write_text(code, encoding="utf-8")
    logger.info(f"Shader code exported to {output}")


def _check(result: TranspilationResult) -> None:
    """Exit with an error when a result is not usable."""
    if not result.success:
        logger.error(result.message)
        if result.output:
            logger.debug(f"Output kept for diagnostics:\n{result.output}")
        raise typer.Exit(1)


OUTPUT_ARG = typer.Argument(None, help="Output file path (stdout if omitted)")


@typed_command(app.command("transpile"))
def transpile_shader(
    shader_file: Path = typer.Argument(..., help="GLSL shader source file"),
    output: Path | None = OUTPUT_ARG,
    target: str = typer.Option(
        "hlsl", "--target", "-t", help="Target (glsl, hlsl, vulkan, spirv, metal)"
    ),
    stage: str = typer.Option(
        "", "--stage", "-s", help="Shader stage (vertex, fragment)"
    ),
    format: str = typer.Option(
        "plain", "--format", "-f", help="Code format (plain, commented)"
    ),
    spirv: Path | None = typer.Option(
        None, "--spirv", help="Write the SPIR-V binary here (vulkan target)"
    ),
) -> None:
    """Transpile a single shader stage.

    Example: glslcross transpile shaders/basic.vert basic.hlsl --target hlsl
    """
    shader_target = _map_target(target)
    shader_stage = _map_stage(stage, shader_file)
    source = _read_source(shader_file)

    result = _create_transpiler().transpile(source, shader_target, shader_stage)
    _check(result)

    if result.message:
        logger.info(result.message)

    if spirv is not None:
        if not result.binary:
            logger.warning("--spirv only applies to the vulkan target. Ignoring.")
        else:
            np.asarray(result.binary, dtype="<u4").tofile(spirv)
            words = len(result.binary)
            logger.info(f"SPIR-V binary ({words} words) written to {spirv}")

    code = _format_output(result, format, [shader_file], shader_target, shader_stage)
    _emit(code, output)


@typed_command(app.command("program"))
def transpile_program(
    vertex_file: Path = typer.Argument(..., help="GLSL vertex shader file"),
    fragment_file: Path = typer.Argument(..., help="GLSL fragment shader file"),
    output: Path | None = OUTPUT_ARG,
    target: str = typer.Option(
        "hlsl", "--target", "-t", help="Target (glsl, hlsl, vulkan, spirv, metal)"
    ),
    format: str = typer.Option(
        "plain", "--format", "-f", help="Code format (plain, commented)"
    ),
) -> None:
    """Transpile a vertex and fragment shader pair into one listing.

    Example: glslcross program basic.vert basic.frag basic.hlsl -t hlsl
    """
    shader_target = _map_target(target)
    vertex_source = _read_source(vertex_file)
    fragment_source = _read_source(fragment_file)

    result = _create_transpiler().transpile_program(
        vertex_source, fragment_source, shader_target
    )
    _check(result)

    code = _format_output(
        result, format, [vertex_file, fragment_file], shader_target
    )
    _emit(code, output)



def _type_note(type_name: str) -> str:
    return "" if is_builtin_type(type_name) else " (custom type)"


@typed_command(app.command("inspect"))
def inspect_shader(
    shader_file: Path = typer.Argument(..., help="GLSL shader source file"),
) -> None:
    """List the uniforms and vertex attributes a shader declares.

    Declarations of user-defined types are marked, since the converters only
    map builtin vector and matrix types.
    """
    source = _read_source(shader_file)

    uniforms = extract_uniforms(source)
    attributes = extract_attributes(source)

    typer.echo(f"Uniforms ({len(uniforms)}):")
    for uniform in uniforms:
        typer.echo(
            f"  binding={uniform.binding} set={uniform.set} "
            f"{uniform.type_name} {uniform.name}{_type_note(uniform.type_name)}"
        )

    typer.echo(f"Attributes ({len(attributes)}):")
    for attribute in attributes:
        typer.echo(
            f"  location={attribute.location} "
            f"{attribute.type_name} {attribute.name}{_type_note(attribute.type_name)}"
        )


class ShaderChangeHandler(FileSystemEventHandler):  # type: ignore
    """Event handler that re-transpiles a shader when it changes."""

    def __init__(
        self,
        shader_file: Path,
        output: Path | None,
        target: ShaderTarget,
        stage: ShaderStage,
        transpiler: ShaderTranspiler,
    ):
        """Initialize shader change handler.

        Args:
            shader_file: Absolute path to the shader source
            output: Output file, stdout if None
            target: Shader target
            stage: Shader stage
            transpiler: Transpiler used for every rebuild
        """
        self.shader_file = shader_file
        self.output = output
        self.target = target
        self.stage = stage
        self.transpiler = transpiler

    def on_modified(self, event: watchdog.events.FileSystemEvent) -> None:
        """Handle file modified event.

        Args:
            event: File system event
        """
        if os.path.abspath(event.src_path) == str(self.shader_file):
            logger.info(f"Detected changes in {self.shader_file.name}")
            self.rebuild()

    def rebuild(self) -> TranspilationResult | None:
        """Transpile the shader and write the output if it succeeded.

        Returns None when the source cannot be read, e.g. while an editor is
        replacing the file.
        """
        try:
            source = self.shader_file.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to read shader source: {e}")
            return None
        result = self.transpiler.transpile(source, self.target, self.stage)
        if result.success:
            _emit(result.output, self.output)
        else:
            logger.error(result.message)
        return result


@typed_command(app.command("watch"))
def watch_shader(
    shader_file: Path = typer.Argument(..., help="GLSL shader source file"),
    output: Path | None = OUTPUT_ARG,
    target: str = typer.Option(
        "hlsl", "--target", "-t", help="Target (glsl, hlsl, vulkan, spirv, metal)"
    ),
    stage: str = typer.Option(
        "", "--stage", "-s", help="Shader stage (vertex, fragment)"
    ),
) -> None:
    """Watch a shader file and re-transpile it on changes.

    Example: glslcross watch shaders/basic.frag basic.hlsl
    """
    abs_shader_file = shader_file.resolve()
    handler = ShaderChangeHandler(
        abs_shader_file,
        output,
        _map_target(target),
        _map_stage(stage, shader_file),
        _create_transpiler(),
    )
    handler.rebuild()

    # Watch the file's directory, not the file itself
    observer = watchdog.observers.Observer()
    observer.schedule(handler, path=str(abs_shader_file.parent), recursive=False)
    observer.start()

    logger.info(f"Watching {shader_file} (press Ctrl+C to stop)...")
    try:
        while True:
            time.sleep(0.5)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received, stopping...")
    finally:
        observer.stop()
        observer.join()


if __name__ == "__main__":
    app()
