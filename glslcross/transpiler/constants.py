"""
Constants and predefined values for the shader transpiler.

This module contains the declaration patterns, builtin type tables, version
banners, tool names and scratch file names used throughout the transpiler.
"""

import re

from glslcross.transpiler.core.interfaces import ShaderStage, ShaderTarget

# Declaration patterns
UNIFORM_PATTERN = re.compile(r"uniform\s+(\w+)\s+(\w+);")
ATTRIBUTE_PATTERN = re.compile(
    r"layout\s*\(\s*location\s*=\s*(\d+)\s*\)\s*in\s+(\w+)\s+(\w+);"
)
VERTEX_VARYING_PATTERN = re.compile(r"\bout\s+(\w+)\s+(\w+);")
FRAGMENT_VARYING_PATTERN = re.compile(r"\bin\s+(\w+)\s+(\w+);")
VERSION_DIRECTIVE_PATTERN = re.compile(r"#version\s+\d+[^\n]*\n")

# A call to inverse(), not identifiers such as inverseView
INVERSE_CALL_PATTERN = re.compile(r"\binverse\s*\(")

# Any `A * B`; also matches scalar products
MULTIPLICATION_PATTERN = re.compile(r"(\w+)\s*\*\s*([\w\d\(\).]+)")

# Local or global declarations with a matrix type, e.g. `mat4 model`
MATRIX_DECLARATION_PATTERN = re.compile(
    r"\b(?:mat[234]|float[234]x[234])\s+(\w+)\b"
)

# Builtin GLSL types recognised by the declaration helpers
BUILTIN_TYPES: frozenset[str] = frozenset(
    {
        "float",
        "int",
        "uint",
        "vec2",
        "vec3",
        "vec4",
        "ivec2",
        "ivec3",
        "ivec4",
        "mat2",
        "mat3",
        "mat4",
        "sampler2D",
        "samplerCube",
    }
)

MATRIX_TYPES: frozenset[str] = frozenset({"mat2", "mat3", "mat4"})

# Target version strings
TARGET_VERSION_STRINGS: dict[ShaderTarget, str] = {
    ShaderTarget.GLSL: "#version 330 core",
    ShaderTarget.HLSL: "// HLSL Shader (Target: Direct3D 11)",
    ShaderTarget.VULKAN: "#version 450 core",
    ShaderTarget.METAL: "// Metal Shader Language",
}

# HLSL validation profiles
HLSL_PROFILES: dict[ShaderStage, str] = {
    ShaderStage.VERTEX: "vs_6_0",
    ShaderStage.FRAGMENT: "ps_6_0",
}

HLSL_ENTRY_POINT = "main"
HLSL_CBUFFER_HEADER = "cbuffer Uniforms : register(b0)\n{\n"

# Stand-in for GLSL's inverse(); returns its argument unchanged
HLSL_INVERSE_PLACEHOLDER = """\
float4x4 inverse(float4x4 m) {
    // Placeholder: not a matrix inversion, returns its input unchanged.
    // Supply the inverted matrix from the host for correct results.
    return m;
}
"""

# External tools, resolved under <sdk_root>/Bin
DXC_TOOL = "dxc"
GLSLANG_TOOL = "glslang"
SPIRV_CROSS_TOOL = "spirv-cross"

# Scratch file names, one per target/stage combination
HLSL_SCRATCH_FILE = "validate.hlsl"
GLSL_SCRATCH_FILE = "temp_input.glsl"
SPIRV_SCRATCH_FILE = "temp_input.spv"
METAL_SCRATCH_FILE = "temp_output.metal"

# Result messages
EMPTY_SOURCE_MESSAGE = "Input shader source is empty"
MISSING_BRACES_MESSAGE = (
    "ERROR: Missing curly braces in shader source. Please fix the problem."
)
HLSL_VALIDATION_FAILED_MESSAGE = "DXC Validation Failed! Check shader syntax."
SPIRV_SUCCESS_MESSAGE = "SPIR-V compilation success!"
SPIRV_FAILED_MESSAGE = "SPIR-V compilation failed!"
METAL_SUCCESS_MESSAGE = "Metal transpilation success!"
METAL_FAILED_MESSAGE = "Metal transpilation failed!"
UNKNOWN_TARGET_MESSAGE = "Unknown shader target"
UNKNOWN_STAGE_MESSAGE = "Unknown shader stage"

VERTEX_BANNER = "// === VERTEX SHADER ===\n"
FRAGMENT_BANNER = "// === FRAGMENT SHADER ===\n"


def get_target_version_string(target: ShaderTarget) -> str:
    """Get the version directive or banner comment for a target.

    Args:
        target: Shader target

    Returns:
        Version header string, or an empty string for unknown targets
    """
    return TARGET_VERSION_STRINGS.get(target, "")
