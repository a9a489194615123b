from glslcross.transpiler import (
    ShaderTranspiler,
    extract_attributes,
    extract_uniforms,
    transpile,
    transpile_program,
)
from glslcross.transpiler.config import ToolchainConfig
from glslcross.transpiler.core.interfaces import ShaderStage, ShaderTarget
from glslcross.transpiler.models import (
    TranspilationResult,
    UniformBinding,
    VertexAttribute,
)

__version__ = "0.1.0"


__all__ = [
    "ShaderStage",
    "ShaderTarget",
    "ShaderTranspiler",
    "ToolchainConfig",
    "TranspilationResult",
    "UniformBinding",
    "VertexAttribute",
    "extract_attributes",
    "extract_uniforms",
    "transpile",
    "transpile_program",
]
