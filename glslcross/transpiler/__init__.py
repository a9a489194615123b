"""
Cross-compilation of GLSL shaders.

This module provides the top-level interface for transpiling GLSL source to
HLSL text, SPIR-V binaries and Metal source. Every failure, including
unexpected exceptions raised while converting, is reported as a failed
`TranspilationResult` rather than raised.
"""

from loguru import logger

from glslcross.transpiler.backends import create_converter
from glslcross.transpiler.collector import extract_attributes, extract_uniforms
from glslcross.transpiler.config import ToolchainConfig
from glslcross.transpiler.constants import (
    EMPTY_SOURCE_MESSAGE,
    FRAGMENT_BANNER,
    MISSING_BRACES_MESSAGE,
    UNKNOWN_STAGE_MESSAGE,
    UNKNOWN_TARGET_MESSAGE,
    VERTEX_BANNER,
    get_target_version_string,
)
from glslcross.transpiler.core.interfaces import ShaderStage, ShaderTarget, ToolRunner
from glslcross.transpiler.errors import InputError, TranspilerError
from glslcross.transpiler.models import (
    TranspilationResult,
    UniformBinding,
    VertexAttribute,
)
from glslcross.transpiler.toolchain import ScratchSpace, SubprocessRunner


def validate_source(source: str) -> None:
    """Run the coarse checks applied before any conversion.

    Only the presence of `{` and `}` anywhere in the text is checked, not
    their balance or nesting.

    Args:
        source: GLSL source code

    Raises:
        InputError: If the source is empty or lacks either brace
    """
    if not source:
        raise InputError(EMPTY_SOURCE_MESSAGE)
    if "{" not in source or "}" not in source:
        raise InputError(MISSING_BRACES_MESSAGE)


def _describe(target: object, stage: object) -> str:
    # Callers may pass values that are not enum members
    target_name = getattr(target, "name", repr(target))
    stage_name = getattr(stage, "name", repr(stage))
    return f"{target_name}, {stage_name}"


class ShaderTranspiler:
    """Transpiles GLSL shaders to the supported targets.

    Examples:
        >>> transpiler = ShaderTranspiler()
        >>> result = transpiler.transpile(source, ShaderTarget.HLSL, ShaderStage.VERTEX)
        >>> if result.success:
        ...     compile_program(result.output)
    """

    def __init__(
        self,
        config: ToolchainConfig | None = None,
        runner: ToolRunner | None = None,
    ):
        """Initialize the transpiler.

        Args:
            config: Toolchain configuration, read from the environment if omitted
            runner: Runner for external tools, spawns processes if omitted
        """
        self.config = config or ToolchainConfig.from_env()
        self.runner = runner or SubprocessRunner(self.config)

    def transpile(
        self, source: str, target: ShaderTarget, stage: ShaderStage
    ) -> TranspilationResult:
        """Transpile a single shader stage.

        Args:
            source: GLSL source code
            target: Shader target to produce
            stage: Pipeline stage of the shader

        Returns:
            Result of the transpilation; never raises
        """
        try:
            result = self._transpile(source, target, stage)
        except TranspilerError as e:
            result = TranspilationResult.failure(e.message)
        except Exception as e:
            result = TranspilationResult.failure(f"Transpilation exception: {e}")

        label = _describe(target, stage)
        if result.success:
            logger.info(f"Shader transpilation successful ({label})")
        else:
            logger.error(f"Shader transpilation failed ({label}): {result.message}")
        return result

    def _transpile(
        self, source: str, target: ShaderTarget, stage: ShaderStage
    ) -> TranspilationResult:
        validate_source(source)

        if not isinstance(target, ShaderTarget):
            raise TranspilerError(UNKNOWN_TARGET_MESSAGE)
        if not isinstance(stage, ShaderStage):
            raise TranspilerError(UNKNOWN_STAGE_MESSAGE)

        if target == ShaderTarget.GLSL:
            return TranspilationResult.ok(source)

        converter = create_converter(target, self.runner, self.config)
        with ScratchSpace(self.config) as scratch:
            logger.debug(
                f"Converting {stage.name} shader to {target.name} "
                f"in {scratch.directory}"
            )
            return converter.convert(source, stage, scratch)

    def transpile_program(
        self, vertex_source: str, fragment_source: str, target: ShaderTarget
    ) -> TranspilationResult:
        """Transpile a vertex and fragment shader pair.

        The vertex shader is transpiled first and the first failure is
        returned unchanged. On success both outputs are joined under labelled
        banners; the combined result never carries a binary.

        Args:
            vertex_source: GLSL vertex shader source
            fragment_source: GLSL fragment shader source
            target: Shader target to produce

        Returns:
            Combined result, or the failing stage's result
        """
        vertex = self.transpile(vertex_source, target, ShaderStage.VERTEX)
        if not vertex.success:
            return vertex

        fragment = self.transpile(fragment_source, target, ShaderStage.FRAGMENT)
        if not fragment.success:
            return fragment

        combined = (
            VERTEX_BANNER
            + vertex.output
            + "\n\n"
            + FRAGMENT_BANNER
            + fragment.output
        )
        return TranspilationResult.ok(combined)

    def extract_uniforms(self, source: str) -> list[UniformBinding]:
        return extract_uniforms(source)

    def extract_attributes(self, source: str) -> list[VertexAttribute]:
        return extract_attributes(source)

    @staticmethod
    def get_target_version_string(target: ShaderTarget) -> str:
        return get_target_version_string(target)


def transpile(
    source: str,
    target: ShaderTarget,
    stage: ShaderStage,
    config: ToolchainConfig | None = None,
) -> TranspilationResult:
    """Transpile a single shader stage with a default transpiler.

    See `ShaderTranspiler.transpile`.
    """
    return ShaderTranspiler(config).transpile(source, target, stage)


def transpile_program(
    vertex_source: str,
    fragment_source: str,
    target: ShaderTarget,
    config: ToolchainConfig | None = None,
) -> TranspilationResult:
    """Transpile a vertex and fragment shader pair with a default transpiler.

    See `ShaderTranspiler.transpile_program`.
    """
    return ShaderTranspiler(config).transpile_program(
        vertex_source, fragment_source, target
    )


__all__ = [
    "ShaderTranspiler",
    "extract_attributes",
    "extract_uniforms",
    "get_target_version_string",
    "transpile",
    "transpile_program",
    "validate_source",
]
