"""Core interfaces for the transpiler system.

This module defines the target and stage enumerations and the abstract
interfaces that per-target converters and toolchain runners implement.
"""

from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from glslcross.transpiler.models import TranspilationResult
    from glslcross.transpiler.toolchain import (
        ScratchSpace,
        ToolInvocation,
        ToolResult,
    )


class ShaderTarget(Enum):
    """Supported destination shading representations."""

    GLSL = auto()
    HLSL = auto()
    VULKAN = auto()
    METAL = auto()


class ShaderStage(Enum):
    """Pipeline stage a shader executes in."""

    VERTEX = auto()
    FRAGMENT = auto()


class ToolRunner(Protocol):
    """Interface for invoking an external shader tool."""

    def run(self, invocation: "ToolInvocation") -> "ToolResult":
        """Run a tool and wait for it to exit.

        Args:
            invocation: Tool name and arguments to run

        Returns:
            Exit status and captured output of the tool
        """
        ...


class Converter(ABC):
    """Abstract interface for per-target shader converters."""

    target: ShaderTarget

    @abstractmethod
    def convert(
        self, source: str, stage: ShaderStage, scratch: "ScratchSpace"
    ) -> "TranspilationResult":
        """Convert GLSL source to the converter's target.

        Args:
            source: Validated GLSL source
            stage: Pipeline stage of the shader
            scratch: Scratch directory owned by the current call

        Returns:
            Result of the conversion
        """
        pass
