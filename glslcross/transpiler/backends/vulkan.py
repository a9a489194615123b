"""Vulkan converter: assembles GLSL into SPIR-V with glslang."""

from glslcross.transpiler.config import ToolchainConfig
from glslcross.transpiler.constants import (
    GLSL_SCRATCH_FILE,
    GLSLANG_TOOL,
    SPIRV_FAILED_MESSAGE,
    SPIRV_SCRATCH_FILE,
    SPIRV_SUCCESS_MESSAGE,
    get_target_version_string,
)
from glslcross.transpiler.core.interfaces import (
    Converter,
    ShaderStage,
    ShaderTarget,
    ToolRunner,
)
from glslcross.transpiler.models import TranspilationResult
from glslcross.transpiler.rewriter import strip_version_directive
from glslcross.transpiler.toolchain import ScratchSpace, ToolInvocation


class VulkanConverter(Converter):
    """Converts GLSL to a SPIR-V binary.

    The assembled module is left in the scratch space as `SPIRV_SCRATCH_FILE`,
    where later steps of the same call can pick it up.
    """

    target = ShaderTarget.VULKAN

    def __init__(self, runner: ToolRunner, config: ToolchainConfig):
        self.runner = runner
        self.config = config

    def generate(self, source: str) -> str:
        """Put the Vulkan version directive in front of the source."""
        header = get_target_version_string(self.target)
        return f"{header}\n\n{strip_version_directive(source)}"

    def convert(
        self, source: str, stage: ShaderStage, scratch: ScratchSpace
    ) -> TranspilationResult:
        glsl = self.generate(source)
        input_path = scratch.write_text(GLSL_SCRATCH_FILE, glsl)
        output_path = scratch.path(SPIRV_SCRATCH_FILE)

        invocation = ToolInvocation(
            GLSLANG_TOOL, ("-V", str(input_path), "-o", str(output_path))
        )
        if not self.runner.run(invocation).succeeded:
            return TranspilationResult.failure(SPIRV_FAILED_MESSAGE)

        binary = scratch.read_words(SPIRV_SCRATCH_FILE)
        return TranspilationResult.ok(glsl, binary, SPIRV_SUCCESS_MESSAGE)
