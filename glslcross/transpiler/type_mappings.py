"""
Type and builtin name mappings between GLSL and the text targets.

HLSL and Metal share the same vector and matrix spellings, so both targets
use one table. The HLSL function table only lists names that HLSL spells the
same way; they are still rewritten on word boundaries so that a differing
spelling is a one-line change.
"""

from glslcross.transpiler.core.interfaces import ShaderTarget

VECTOR_MATRIX_TYPES: dict[str, str] = {
    "vec2": "float2",
    "vec3": "float3",
    "vec4": "float4",
    "mat3": "float3x3",
    "mat4": "float4x4",
}

TYPE_MAPPINGS: dict[ShaderTarget, dict[str, str]] = {
    ShaderTarget.HLSL: VECTOR_MATRIX_TYPES,
    ShaderTarget.METAL: VECTOR_MATRIX_TYPES,
}

FUNCTION_MAPPINGS: dict[ShaderTarget, dict[str, str]] = {
    ShaderTarget.HLSL: {
        "normalize": "normalize",
        "dot": "dot",
        "max": "max",
        "transpose": "transpose",
        "inverse": "inverse",
    },
}


def map_type(type_name: str, target: ShaderTarget) -> str:
    """Map a GLSL type name to the equivalent target type.

    Args:
        type_name: GLSL type name
        target: Shader target

    Returns:
        Target type name, or the input unchanged when no mapping exists
    """
    return TYPE_MAPPINGS.get(target, {}).get(type_name, type_name)


def map_function(function_name: str, target: ShaderTarget) -> str:
    """Map a GLSL builtin function name to the target's spelling."""
    return FUNCTION_MAPPINGS.get(target, {}).get(function_name, function_name)
