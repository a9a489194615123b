"""Per-target converters and the factory that creates them."""

from glslcross.transpiler.backends.hlsl import HLSLConverter
from glslcross.transpiler.backends.metal import MetalConverter
from glslcross.transpiler.backends.vulkan import VulkanConverter
from glslcross.transpiler.config import ToolchainConfig
from glslcross.transpiler.core.interfaces import Converter, ShaderTarget, ToolRunner

# Registry of targets to their converter implementations
_CONVERTER_REGISTRY: dict[ShaderTarget, type[Converter]] = {
    ShaderTarget.HLSL: HLSLConverter,
    ShaderTarget.VULKAN: VulkanConverter,
    ShaderTarget.METAL: MetalConverter,
}


def create_converter(
    target: ShaderTarget, runner: ToolRunner, config: ToolchainConfig
) -> Converter:
    """Create a converter for the given target.

    Args:
        target: The shader target to convert to
        runner: Runner used for external tool invocations
        config: Toolchain configuration

    Returns:
        A converter instance

    Raises:
        ValueError: If the target has no converter
    """
    if target not in _CONVERTER_REGISTRY:
        raise ValueError(f"Unsupported shader target: {target}")

    converter_class = _CONVERTER_REGISTRY[target]
    return converter_class(runner, config)  # type: ignore[call-arg]


__all__ = [
    "HLSLConverter",
    "MetalConverter",
    "VulkanConverter",
    "create_converter",
]
