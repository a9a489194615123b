"""Metal converter: SPIR-V from glslang, cross-compiled with SPIRV-Cross."""

from glslcross.transpiler.backends.vulkan import VulkanConverter
from glslcross.transpiler.config import ToolchainConfig
from glslcross.transpiler.constants import (
    METAL_FAILED_MESSAGE,
    METAL_SCRATCH_FILE,
    METAL_SUCCESS_MESSAGE,
    SPIRV_CROSS_TOOL,
    SPIRV_SCRATCH_FILE,
)
from glslcross.transpiler.core.interfaces import (
    Converter,
    ShaderStage,
    ShaderTarget,
    ToolRunner,
)
from glslcross.transpiler.models import TranspilationResult
from glslcross.transpiler.toolchain import ScratchSpace, ToolInvocation


class MetalConverter(Converter):
    """Converts GLSL to Metal Shading Language by way of SPIR-V."""

    target = ShaderTarget.METAL

    def __init__(self, runner: ToolRunner, config: ToolchainConfig):
        self.runner = runner
        self.config = config
        self.vulkan = VulkanConverter(runner, config)

    def convert(
        self, source: str, stage: ShaderStage, scratch: ScratchSpace
    ) -> TranspilationResult:
        spirv = self.vulkan.convert(source, stage, scratch)
        if not spirv.success:
            return spirv

        # Cross-compile the module the Vulkan step just wrote
        spirv_path = scratch.path(SPIRV_SCRATCH_FILE)
        metal_path = scratch.path(METAL_SCRATCH_FILE)
        invocation = ToolInvocation(
            SPIRV_CROSS_TOOL, ("-V", str(spirv_path), "-o", str(metal_path))
        )
        if not self.runner.run(invocation).succeeded:
            return TranspilationResult.failure(METAL_FAILED_MESSAGE)

        metal = scratch.read_text(METAL_SCRATCH_FILE)
        return TranspilationResult.ok(metal, message=METAL_SUCCESS_MESSAGE)
