"""
Declaration collection for the shader transpiler.

This module scans GLSL source for uniform and vertex attribute declarations.
The scans are plain pattern matches over the text; nothing is parsed.
"""

from glslcross.transpiler.constants import (
    ATTRIBUTE_PATTERN,
    BUILTIN_TYPES,
    UNIFORM_PATTERN,
)
from glslcross.transpiler.models import UniformBinding, VertexAttribute


def extract_uniforms(source: str) -> list[UniformBinding]:
    """Extract `uniform <type> <name>;` declarations.

    Binding slots follow discovery order starting at 0 and the descriptor set
    is always 0.

    Args:
        source: GLSL source code

    Returns:
        Uniform bindings in order of first occurrence
    """
    return [
        UniformBinding(
            name=match.group(2),
            type_name=match.group(1),
            binding=index,
            set=0,
        )
        for index, match in enumerate(UNIFORM_PATTERN.finditer(source))
    ]


def extract_attributes(source: str) -> list[VertexAttribute]:
    """Extract `layout(location = N) in <type> <name>;` declarations.

    Args:
        source: GLSL source code

    Returns:
        Vertex attributes in order of first occurrence
    """
    return [
        VertexAttribute(
            name=match.group(3),
            type_name=match.group(2),
            location=int(match.group(1)),
        )
        for match in ATTRIBUTE_PATTERN.finditer(source)
    ]


def is_builtin_type(type_name: str) -> bool:
    """Check whether a name is one of the recognised builtin GLSL types."""
    return type_name in BUILTIN_TYPES
