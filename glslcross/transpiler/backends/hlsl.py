"""HLSL converter.

GLSL is rewritten into HLSL with a fixed sequence of textual rewrites and
the result is validated with DXC.
"""

from loguru import logger

from glslcross.transpiler.config import ToolchainConfig
from glslcross.transpiler.constants import (
    DXC_TOOL,
    HLSL_ENTRY_POINT,
    HLSL_INVERSE_PLACEHOLDER,
    HLSL_PROFILES,
    HLSL_SCRATCH_FILE,
    HLSL_VALIDATION_FAILED_MESSAGE,
    INVERSE_CALL_PATTERN,
    get_target_version_string,
)
from glslcross.transpiler.core.interfaces import (
    Converter,
    ShaderStage,
    ShaderTarget,
    ToolRunner,
)
from glslcross.transpiler.models import TranspilationResult
from glslcross.transpiler.rewriter import (
    convert_attribute_declarations,
    convert_builtin_functions,
    convert_matrix_operations,
    convert_uniform_declarations,
    convert_varying_declarations,
    replace_builtin_variables,
    strip_version_directive,
)
from glslcross.transpiler.toolchain import ScratchSpace, ToolInvocation


class HLSLConverter(Converter):
    """Converts GLSL to HLSL and validates it with DXC."""

    target = ShaderTarget.HLSL

    def __init__(self, runner: ToolRunner, config: ToolchainConfig):
        self.runner = runner
        self.config = config

    def generate(self, source: str, stage: ShaderStage) -> str:
        """Rewrite GLSL source into HLSL text without validating it.

        Args:
            source: GLSL source code
            stage: Pipeline stage of the shader

        Returns:
            HLSL source code
        """
        converted = strip_version_directive(source)
        converted = convert_uniform_declarations(converted, self.target)
        converted = convert_attribute_declarations(converted, self.target, stage)
        converted = convert_varying_declarations(converted, self.target, stage)
        converted = convert_builtin_functions(converted, self.target)
        converted = convert_matrix_operations(
            converted, self.target, scoped=self.config.scoped_matrix_multiply
        )
        converted = replace_builtin_variables(converted, self.target, stage)

        hlsl = get_target_version_string(self.target) + "\n"
        if INVERSE_CALL_PATTERN.search(converted):
            logger.warning(
                "Injected placeholder inverse(): it returns its input unchanged, "
                "matrix math using it will be wrong"
            )
            hlsl = HLSL_INVERSE_PLACEHOLDER + "\n" + hlsl

        return hlsl + converted

    def convert(
        self, source: str, stage: ShaderStage, scratch: ScratchSpace
    ) -> TranspilationResult:
        hlsl = self.generate(source, stage)
        path = scratch.write_text(HLSL_SCRATCH_FILE, hlsl)

        invocation = ToolInvocation(
            DXC_TOOL,
            ("-T", HLSL_PROFILES[stage], "-E", HLSL_ENTRY_POINT, str(path)),
        )
        if not self.runner.run(invocation).succeeded:
            # Keep the generated text so the failure can be diagnosed
            return TranspilationResult.failure(
                HLSL_VALIDATION_FAILED_MESSAGE, output=hlsl
            )

        return TranspilationResult.ok(hlsl)
