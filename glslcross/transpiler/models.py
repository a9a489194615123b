"""
Data models for the shader transpiler.

This module contains the value objects produced by metadata extraction and
by every transpilation call. They are created per call and never mutated.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class UniformBinding:
    """A uniform declaration found in GLSL source.

    Attributes:
        name: Uniform identifier
        type_name: GLSL type of the uniform
        binding: Binding slot, assigned in discovery order starting at 0
        set: Descriptor set, always 0
    """

    name: str
    type_name: str
    binding: int
    set: int = 0


@dataclass(frozen=True)
class VertexAttribute:
    """A `layout(location = N) in` declaration found in GLSL source.

    Attributes:
        name: Attribute identifier
        type_name: GLSL type of the attribute
        location: Location index from the layout qualifier
    """

    name: str
    type_name: str
    location: int


@dataclass(frozen=True)
class TranspilationResult:
    """Outcome of a transpilation call.

    A failed result may still carry output for diagnostics, but callers must
    check `success` before using `output` or `binary`.

    Attributes:
        success: Whether the conversion and toolchain step succeeded
        output: Generated target source
        binary: SPIR-V words, only populated for successful Vulkan results
        message: Human-readable diagnostic or informational note
    """

    success: bool
    output: str = ""
    binary: tuple[int, ...] = ()
    message: str = ""

    @classmethod
    def ok(
        cls, output: str, binary: tuple[int, ...] = (), message: str = ""
    ) -> "TranspilationResult":
        return cls(True, output, binary, message)

    @classmethod
    def failure(cls, message: str, output: str = "") -> "TranspilationResult":
        return cls(False, output, (), message)

    @property
    def usable(self) -> bool:
        """Whether the result carries output a caller may consume."""
        return self.success and bool(self.output or self.binary)
