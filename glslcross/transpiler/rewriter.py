"""
Textual rewrites from GLSL to the text shader targets.

Every rewrite is a pure function over source text that recognises a narrow
set of token shapes: declarations, builtin type and function names, builtin
output variables and `A * B` products. Text that does not match a pattern is
left as it is.
"""

import re

from loguru import logger

from glslcross.transpiler.collector import extract_uniforms
from glslcross.transpiler.constants import (
    ATTRIBUTE_PATTERN,
    FRAGMENT_VARYING_PATTERN,
    HLSL_CBUFFER_HEADER,
    MATRIX_DECLARATION_PATTERN,
    MULTIPLICATION_PATTERN,
    VERSION_DIRECTIVE_PATTERN,
    VERTEX_VARYING_PATTERN,
)
from glslcross.transpiler.core.interfaces import ShaderStage, ShaderTarget
from glslcross.transpiler.type_mappings import (
    FUNCTION_MAPPINGS,
    TYPE_MAPPINGS,
    map_function,
    map_type,
)

# A whole uniform declaration, including its line when it stands alone
_UNIFORM_DECLARATION_LINE = re.compile(r"[ \t]*uniform\s+\w+\s+\w+;[ \t]*\n?")

_BUILTIN_VARIABLES: dict[tuple[ShaderTarget, ShaderStage], tuple[str, str]] = {
    (ShaderTarget.HLSL, ShaderStage.VERTEX): ("gl_Position", "position"),
    (ShaderTarget.HLSL, ShaderStage.FRAGMENT): ("gl_FragColor", "output"),
    (ShaderTarget.METAL, ShaderStage.VERTEX): ("gl_Position", "out.position"),
    (ShaderTarget.METAL, ShaderStage.FRAGMENT): ("gl_FragColor", "out.color"),
}

_ATTRIBUTE_REPLACEMENTS: dict[ShaderTarget, str] = {
    ShaderTarget.HLSL: r"\2 \3 : TEXCOORD\1;",
    ShaderTarget.METAL: r"\2 \3 [[attribute(\1)]];",
}

# Varyings always land in slot 0, however many there are
_VARYING_REWRITES: dict[
    tuple[ShaderTarget, ShaderStage], tuple[re.Pattern[str], str]
] = {
    (ShaderTarget.HLSL, ShaderStage.VERTEX): (
        VERTEX_VARYING_PATTERN,
        r"\1 \2 : TEXCOORD0;",
    ),
    (ShaderTarget.HLSL, ShaderStage.FRAGMENT): (
        FRAGMENT_VARYING_PATTERN,
        r"\1 \2 : TEXCOORD0;",
    ),
    (ShaderTarget.METAL, ShaderStage.VERTEX): (
        VERTEX_VARYING_PATTERN,
        r"\1 \2 [[user(locn0)]];",
    ),
}


def _replace_word(source: str, word: str, replacement: str) -> str:
    return re.sub(rf"\b{re.escape(word)}\b", replacement, source)


def strip_version_directive(source: str) -> str:
    """Remove `#version` directive lines."""
    return VERSION_DIRECTIVE_PATTERN.sub("", source)


def convert_uniform_declarations(source: str, target: ShaderTarget) -> str:
    """Gather uniforms into a constant buffer.

    Only HLSL is affected. All uniforms become members of a single
    `cbuffer Uniforms : register(b0)` block placed at the top of the source
    and the uniform declarations themselves are removed.

    Args:
        source: GLSL source code
        target: Shader target

    Returns:
        Source with uniform declarations converted
    """
    if target != ShaderTarget.HLSL:
        return source

    uniforms = extract_uniforms(source)
    if not uniforms:
        return source

    members = "".join(
        f"    {map_type(uniform.type_name, target)} {uniform.name};\n"
        for uniform in uniforms
    )
    cbuffer = f"{HLSL_CBUFFER_HEADER}{members}}};\n\n"
    logger.debug(f"Packed {len(uniforms)} uniform(s) into constant buffer b0")

    return cbuffer + _UNIFORM_DECLARATION_LINE.sub("", source)


def convert_attribute_declarations(
    source: str, target: ShaderTarget, stage: ShaderStage
) -> str:
    """Rewrite `layout(location = N) in T name;` for vertex shaders.

    HLSL gets `T name : TEXCOORDN;` and Metal gets
    `T name [[attribute(N)]];`. Fragment shaders are returned unchanged.
    """
    if stage != ShaderStage.VERTEX or target not in _ATTRIBUTE_REPLACEMENTS:
        return source
    return ATTRIBUTE_PATTERN.sub(_ATTRIBUTE_REPLACEMENTS[target], source)


def convert_varying_declarations(
    source: str, target: ShaderTarget, stage: ShaderStage
) -> str:
    """Rewrite stage-to-stage varyings.

    HLSL vertex shaders rewrite `out T name;` and HLSL fragment shaders
    rewrite `in T name;`, both to `T name : TEXCOORD0;`. Metal vertex
    shaders rewrite `out T name;` to `T name [[user(locn0)]];`.
    """
    rewrite = _VARYING_REWRITES.get((target, stage))
    if rewrite is None:
        return source
    pattern, replacement = rewrite
    return pattern.sub(replacement, source)


def convert_builtin_functions(source: str, target: ShaderTarget) -> str:
    """Rewrite builtin function and type names for the target.

    Args:
        source: GLSL source code
        target: Shader target

    Returns:
        Source with builtin names rewritten
    """
    output = source
    for glsl_name in FUNCTION_MAPPINGS.get(target, {}):
        output = _replace_word(output, glsl_name, map_function(glsl_name, target))
    for glsl_name in TYPE_MAPPINGS.get(target, {}):
        output = _replace_word(output, glsl_name, map_type(glsl_name, target))
    return output


def convert_matrix_operations(
    source: str, target: ShaderTarget, scoped: bool = False
) -> str:
    """Rewrite `A * B` products to `mul(A, B)` for HLSL.

    The default rewrite matches any product, so scalar multiplications are
    turned into `mul` calls as well. With `scoped` set, only products whose
    left operand was declared with a matrix type are rewritten.

    Args:
        source: Source code, usually after type names were converted
        target: Shader target
        scoped: Restrict the rewrite to declared matrix identifiers

    Returns:
        Source with products rewritten
    """
    if target != ShaderTarget.HLSL:
        return source

    if not scoped:
        output, count = MULTIPLICATION_PATTERN.subn(r"mul(\1, \2)", source)
        if count:
            logger.warning(
                f"Rewrote {count} product(s) to mul(); "
                "scalar multiplications are rewritten as well"
            )
        return output

    matrices = set(MATRIX_DECLARATION_PATTERN.findall(source))

    def _rewrite(match: re.Match[str]) -> str:
        if match.group(1) in matrices:
            return f"mul({match.group(1)}, {match.group(2)})"
        return match.group(0)

    return MULTIPLICATION_PATTERN.sub(_rewrite, source)


def replace_builtin_variables(
    source: str, target: ShaderTarget, stage: ShaderStage
) -> str:
    """Rename builtin output variables such as `gl_Position`."""
    builtin = _BUILTIN_VARIABLES.get((target, stage))
    if builtin is None:
        return source
    glsl_name, target_name = builtin
    return _replace_word(source, glsl_name, target_name)
